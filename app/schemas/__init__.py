"""
Pydantic Schemas Package

Typed models for the scheduling recommendation service.

Schema Conventions:
- Agent/API responses: {message: str, data: dict, proofs: Proofs}
- Domain models: snake_case fields; service clients normalize camelCase input

Export Groups:
- Base: Proofs, AgentResponse, ErrorResponse, ValidationErrorResponse
- Scheduling: geography, contractors, availability, requests, recommendations
"""

# Base schemas
from app.schemas.base import (
    Proofs,
    AgentResponse,
    ErrorResponse,
    ValidationErrorResponse
)

# Scheduling schemas
from app.schemas.scheduling import (
    Coordinate,
    Unavailable,
    UNAVAILABLE,
    GeoPoint,
    Address,
    Rating,
    Contractor,
    BlockStatus,
    AvailabilityRecord,
    SchedulingRequest,
    RecommendationFilters,
    ScoreBreakdown,
    ContractorRecommendation,
    RecommendationRequest,
    RecommendationListResult,
    RecommendationResponse,
    ContractorStatusResponse
)

__all__ = [
    # Base
    "Proofs",
    "AgentResponse",
    "ErrorResponse",
    "ValidationErrorResponse",
    # Scheduling
    "Coordinate",
    "Unavailable",
    "UNAVAILABLE",
    "GeoPoint",
    "Address",
    "Rating",
    "Contractor",
    "BlockStatus",
    "AvailabilityRecord",
    "SchedulingRequest",
    "RecommendationFilters",
    "ScoreBreakdown",
    "ContractorRecommendation",
    "RecommendationRequest",
    "RecommendationListResult",
    "RecommendationResponse",
    "ContractorStatusResponse",
]
