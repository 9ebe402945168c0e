"""
Agents Package

Agents orchestrate service clients and algorithms for one use case.
Each agent inherits from BaseAgent and returns {message, data, proofs}.

Available Agents:
- SchedulingAgent: Contractor recommendations for a job
"""

from app.agents.base_agent import BaseAgent
from app.agents.scheduling_agent import SchedulingAgent

__all__ = [
    "BaseAgent",
    "SchedulingAgent",
]
