"""
Scheduling Schemas

Pydantic models for contractors, availability records, scheduling requests and
contractor recommendations.

Contractor and availability payloads arrive from the persistence layer through
contractor_service_client / availability_service_client, which normalize
camelCase keys before building these models. Recommendations are produced by
app.algorithms.contractor_scoring and never mutated afterwards.
"""

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, ConfigDict

from app.constants.scheduling import (
    AvailabilityStatus,
    ContractorStatus,
    TimeBlock,
    Trade,
)
from app.schemas.base import Proofs


# ============================================================================
# Geography
# ============================================================================

@dataclass(frozen=True)
class Coordinate:
    """A WGS84 point in decimal degrees."""
    lat: float
    lng: float


class Unavailable:
    """Marker for a location that has not been geocoded."""

    _instance: Optional["Unavailable"] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNAVAILABLE"

    def __bool__(self) -> bool:
        return False


UNAVAILABLE = Unavailable()

GeoPoint = Union[Coordinate, Unavailable]


class Address(BaseModel):
    """Postal address with optional geocoded coordinates."""
    street: str = Field("", description="Street line")
    city: str = Field("", description="City")
    state: str = Field("", description="State code")
    zip: str = Field("", description="ZIP code")
    lat: Optional[float] = Field(None, description="Latitude (decimal degrees)")
    lng: Optional[float] = Field(None, description="Longitude (decimal degrees)")

    model_config = ConfigDict(extra="allow")

    def coordinate(self) -> GeoPoint:
        """Return the geocoded point, or UNAVAILABLE when lat or lng is missing."""
        if self.lat is None or self.lng is None:
            return UNAVAILABLE
        return Coordinate(lat=self.lat, lng=self.lng)


# ============================================================================
# Contractors
# ============================================================================

class Rating(BaseModel):
    """
    Contractor quality rating.

    Five sub-scores on a 0-5 scale. `overall` is the ranking input; the others
    feed app.algorithms.ratings.calculate_overall_rating().
    """
    overall: float = Field(3.0, description="Overall rating (0-5)", ge=0, le=5)
    customer: float = Field(3.0, description="Customer satisfaction (0-5)", ge=0, le=5)
    speed: float = Field(3.0, description="Speed and timeliness (0-5)", ge=0, le=5)
    warranty: float = Field(3.0, description="Warranty performance (0-5)", ge=0, le=5)
    internal: float = Field(3.0, description="Internal evaluation (0-5)", ge=0, le=5)


class Contractor(BaseModel):
    """Contractor profile as consumed (read-only) by the recommendation engine."""
    id: str = Field(..., description="Contractor identifier")
    user_id: Optional[str] = Field(None, description="Linked user account")
    business_name: Optional[str] = Field(None, description="Business name")
    address: Address = Field(default_factory=Address, description="Home base address")
    trades: List[Trade] = Field(default_factory=list, description="Trades performed")
    skills: List[str] = Field(default_factory=list, description="Free-form skills")
    service_radius: Optional[float] = Field(None, description="Max travel distance in miles")
    rating: Rating = Field(default_factory=Rating, description="Quality rating")
    status: ContractorStatus = Field(ContractorStatus.PENDING, description="Lifecycle status")

    model_config = ConfigDict(extra="allow")

    def effective_service_radius(self, default: float) -> float:
        """Service radius in miles, falling back to `default` when unset or non-positive."""
        if self.service_radius is None or self.service_radius <= 0:
            return default
        return self.service_radius


# ============================================================================
# Availability
# ============================================================================

class BlockStatus(BaseModel):
    """Per-time-block availability for one day."""
    am: AvailabilityStatus = AvailabilityStatus.AVAILABLE
    pm: AvailabilityStatus = AvailabilityStatus.AVAILABLE
    evening: AvailabilityStatus = AvailabilityStatus.AVAILABLE

    def get(self, block: TimeBlock) -> AvailabilityStatus:
        return getattr(self, TimeBlock(block).value)


class AvailabilityRecord(BaseModel):
    """
    Availability for one contractor on one calendar day.

    Either `blocks` (per-block model) or `status` (legacy whole-day model) may be
    set. `notes` is informational only.
    """
    contractor_id: Optional[str] = Field(None, description="Owning contractor")
    date: str = Field(..., description="Date key (YYYY-MM-DD)", pattern=r"^\d{4}-\d{2}-\d{2}$")
    status: Optional[AvailabilityStatus] = Field(None, description="Legacy whole-day status")
    blocks: Optional[BlockStatus] = Field(None, description="Per-block status")
    notes: Optional[str] = Field(None, description="Free-form note")

    model_config = ConfigDict(extra="allow")


# ============================================================================
# Requests and Filters
# ============================================================================

class SchedulingRequest(BaseModel):
    """Job needing labor at a location, date and time block."""
    job_date: date = Field(..., description="Calendar day of the job")
    time_block: TimeBlock = Field(..., description="Day-part of the job")
    job_location: Address = Field(..., description="Job site address with coordinates")
    required_trades: Optional[List[Trade]] = Field(None, description="Trades the job needs")

    model_config = ConfigDict(frozen=True)


class RecommendationFilters(BaseModel):
    """Optional constraints on a ranking call; None means no constraint."""
    min_rating: Optional[float] = Field(None, description="Minimum overall rating", ge=0, le=5)
    max_distance: Optional[float] = Field(None, description="Maximum distance in miles", ge=0)
    trade_filter: Optional[List[Trade]] = Field(None, description="Only contractors with these trades")
    only_available: bool = Field(False, description="Only fully available contractors")

    model_config = ConfigDict(frozen=True)


# ============================================================================
# Recommendations
# ============================================================================

class ScoreBreakdown(BaseModel):
    """Weighted sub-scores; they sum to the composite score within rounding."""
    availability_score: float = Field(..., description="Weighted availability sub-score")
    distance_score: float = Field(..., description="Weighted distance sub-score")
    rating_score: float = Field(..., description="Weighted rating sub-score")

    model_config = ConfigDict(frozen=True)

    def total(self) -> float:
        return self.availability_score + self.distance_score + self.rating_score


class ContractorRecommendation(BaseModel):
    """
    One ranked contractor.

    Built fresh on every ranking call. `distance` is None when either location
    lacks coordinates; `distance_unknown` and `availability_unknown` flag
    degraded inputs so the UI can mark them.
    """
    contractor_id: str = Field(..., description="Contractor identifier")
    contractor: Contractor = Field(..., description="Contractor snapshot")
    score: int = Field(..., description="Composite score (0-100)", ge=0, le=100)
    distance: Optional[float] = Field(None, description="Miles from the job site")
    rating: float = Field(..., description="Overall rating (0-5)")
    availability_status: AvailabilityStatus = Field(..., description="Status for the requested block")
    is_within_service_radius: bool = Field(..., description="Strictly inside the service radius")
    breakdown: ScoreBreakdown = Field(..., description="Weighted sub-scores")
    distance_unknown: bool = Field(False, description="Distance could not be computed")
    availability_unknown: bool = Field(False, description="Availability lookup failed")

    model_config = ConfigDict(frozen=True)


# ============================================================================
# API Payloads
# ============================================================================

class RecommendationRequest(BaseModel):
    """Request body for POST /scheduling/recommendations."""
    job_date: date = Field(..., description="Calendar day of the job (YYYY-MM-DD)")
    time_block: TimeBlock = Field(..., description="am, pm or evening")
    job_location: Address = Field(..., description="Job site address")
    required_trades: Optional[List[Trade]] = Field(None, description="Trades the job needs")
    filters: Optional[RecommendationFilters] = Field(None, description="Ranking filters")
    limit: Optional[int] = Field(None, description="Max recommendations to return", ge=1, le=100)


class RecommendationListResult(BaseModel):
    """Ranking result returned by SchedulingAgent."""
    job_date: str = Field(..., description="Date key of the job")
    time_block: TimeBlock = Field(..., description="Requested block")
    recommendations: List[ContractorRecommendation] = Field(..., description="Ranked, best first")
    total_candidates: int = Field(..., description="Contractors fetched before filtering", ge=0)
    total_ranked: int = Field(..., description="Contractors surviving filters", ge=0)
    degraded: List[str] = Field(default_factory=list, description="Contractor ids scored on degraded data")


class RecommendationResponse(BaseModel):
    """Standard envelope for a ranking result."""
    message: str = Field(..., description="Summary message")
    data: RecommendationListResult = Field(..., description="Ranking result")
    proofs: Proofs = Field(..., description="Tracing, sources, algorithm info")

    model_config = ConfigDict(extra="allow")


class ContractorStatusResponse(BaseModel):
    """Resolved availability for one contractor, date and block."""
    message: str = Field(..., description="Summary message")
    data: Dict[str, Any] = Field(..., description="contractor_id, date, time_block, status")
    proofs: Proofs = Field(..., description="Tracing information")

    model_config = ConfigDict(extra="allow")
