"""
Base Schemas

Core Pydantic models used across agent and API responses.
Matches BaseAgent.success_response() / error_response() / validation_error() structure.
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, ConfigDict


class Proofs(BaseModel):
    """
    Proof/tracing information included in all responses.

    Standard fields from BaseAgent:
    - trace_id: Request trace ID
    - sources: Data sources used (service clients)
    - status: Execution status (success/failed)
    - algorithm: Algorithm identifier (e.g., "weighted_contractor_ranking")
    - weights: Scoring weights applied
    - latency_ms: Optional response time
    """
    trace_id: Optional[str] = Field(None, description="Request trace ID")
    sources: Optional[List[Any]] = Field(None, description="Data sources (list of dicts or strings)")
    status: Optional[str] = Field(None, description="Execution status")
    algorithm: Optional[str] = Field(None, description="Algorithm identifier")
    weights: Optional[Dict[str, float]] = Field(None, description="Scoring weights applied")
    latency_ms: Optional[float] = Field(None, description="Response time in milliseconds")
    validation: Optional[str] = Field(None, description="Validation status (for validation errors)")
    reason: Optional[str] = Field(None, description="Reason for status (for errors)")

    model_config = ConfigDict(extra="allow")


class AgentResponse(BaseModel):
    """
    Standard agent response structure.

    All agents return:
    - message: User-facing message
    - data: Payload (varies by agent)
    - proofs: Tracing and source information
    """
    message: str = Field(..., description="User-facing response message")
    data: Optional[Dict[str, Any]] = Field(None, description="Response data payload")
    proofs: Optional[Proofs] = Field(None, description="Proof/tracing information")

    model_config = ConfigDict(extra="allow")


class ErrorResponse(BaseModel):
    """
    Standard error response structure.
    Matches BaseAgent.error_response() output.
    """
    message: str = Field(..., description="User-facing error message")
    data: Dict[str, Any] = Field(..., description="Error details")
    proofs: Optional[Proofs] = Field(None, description="Proof/tracing with status=failed")

    model_config = ConfigDict(extra="allow")


class ValidationErrorResponse(BaseModel):
    """Validation error response structure (BaseAgent.validation_error())."""
    message: str = Field(..., description="Validation error message with suggestion")
    data: Dict[str, Any] = Field(
        ...,
        description="Error details (error, suggestion, missing_field, example)"
    )
    proofs: Optional[Proofs] = Field(None, description="Proof with validation=failed")

    model_config = ConfigDict(extra="allow")
