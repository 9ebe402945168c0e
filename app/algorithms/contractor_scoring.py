"""
Contractor Scoring Algorithm

Deterministic algorithm that scores one contractor for one scheduling request.
Produces a composite score (0-100) and the weighted breakdown behind it.

Components (default weights, see ScoringWeights):
1. Availability (40%): available 100, busy 40, unavailable/on_leave 0
2. Distance (35%): linear falloff from 100 at the job site to 0 at the
   contractor's service radius
3. Rating (25%): overall rating on 0-5 mapped to 0-100

Degradation, never failure, for a single contractor:
- no usable coordinates: distance sub-score 0, outside service radius
- availability lookup failed: treated as unavailable (sub-score 0)

Non-active contractors are filtered by the ranker and must not reach here.
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from app.algorithms.availability_resolver import AvailabilityResolver
from app.algorithms.geo_distance import distance_miles
from app.constants.scheduling import AvailabilityStatus
from app.constants.thresholds import (
    AVAILABILITY_STATUS_SCORES,
    DEFAULT_SERVICE_RADIUS_MILES,
    RATING_SCALE_MAX,
    WEIGHT_AVAILABILITY,
    WEIGHT_DISTANCE,
    WEIGHT_RATING,
    WEIGHT_SUM_TOLERANCE,
)
from app.core.errors import AvailabilityLookupError, GeoError, ValidationError
from app.schemas.scheduling import (
    Contractor,
    ContractorRecommendation,
    SchedulingRequest,
    ScoreBreakdown,
)

logger = logging.getLogger(__name__)

ALGORITHM_NAME = "weighted_contractor_ranking"


# ============================================================================
# Configuration
# ============================================================================


@dataclass(frozen=True)
class ScoringWeights:
    """Weights of the three sub-scores; must be non-negative and sum to 1.0."""
    availability: float = WEIGHT_AVAILABILITY
    distance: float = WEIGHT_DISTANCE
    rating: float = WEIGHT_RATING
    default_service_radius: float = DEFAULT_SERVICE_RADIUS_MILES

    def __post_init__(self):
        weights = (self.availability, self.distance, self.rating)
        if not all(math.isfinite(w) for w in weights):
            raise ValidationError(
                "Scoring weights must be finite numbers",
                details=self.as_dict()
            )
        if any(w < 0 for w in weights):
            raise ValidationError(
                "Scoring weights must be non-negative",
                details=self.as_dict()
            )
        if abs(sum(weights) - 1.0) > WEIGHT_SUM_TOLERANCE:
            raise ValidationError(
                f"Scoring weights must sum to 1.0 (got {sum(weights):.4f})",
                details=self.as_dict()
            )
        if not math.isfinite(self.default_service_radius) or self.default_service_radius <= 0:
            raise ValidationError(
                "Default service radius must be a positive finite number",
                details={"default_service_radius": self.default_service_radius}
            )

    @classmethod
    def from_settings(cls, settings=None) -> "ScoringWeights":
        """Build weights from environment-backed settings."""
        if settings is None:
            from app.core.config import get_settings
            settings = get_settings()
        return cls(
            availability=settings.RECOMMENDATION_WEIGHT_AVAILABILITY,
            distance=settings.RECOMMENDATION_WEIGHT_DISTANCE,
            rating=settings.RECOMMENDATION_WEIGHT_RATING,
            default_service_radius=settings.DEFAULT_SERVICE_RADIUS_MILES,
        )

    def as_dict(self) -> Dict[str, float]:
        return {
            "availability": self.availability,
            "distance": self.distance,
            "rating": self.rating,
        }


DEFAULT_WEIGHTS = ScoringWeights()


# ============================================================================
# Sub-Scores (0-100 each, unweighted)
# ============================================================================


def availability_score(status: AvailabilityStatus) -> float:
    """Map an availability status to 0-100."""
    try:
        return AVAILABILITY_STATUS_SCORES[AvailabilityStatus(status)]
    except (KeyError, ValueError) as e:
        raise ValidationError(
            f"Unknown availability status: {status!r}",
            details={"status": str(status)}
        ) from e


def is_within_service_radius(distance: float, service_radius: float) -> bool:
    """Strictly inside the radius; a contractor exactly on the boundary is out."""
    return distance < service_radius


def distance_score(distance: float, service_radius: float) -> float:
    """Linear falloff: 100 at 0 miles, 0 at or beyond the service radius."""
    if service_radius <= 0 or not is_within_service_radius(distance, service_radius):
        return 0.0
    return max(0.0, 100.0 * (1.0 - distance / service_radius))


def rating_score(overall: float) -> float:
    """Overall rating on 0-5 mapped to 0-100."""
    return max(0.0, min(100.0, overall / RATING_SCALE_MAX * 100.0))


# ============================================================================
# Composite
# ============================================================================


def _resolve_distance(
    contractor: Contractor,
    request: SchedulingRequest
) -> Tuple[Optional[float], bool]:
    """(distance, unknown) for the contractor's home base and the job site."""
    try:
        distance = distance_miles(
            contractor.address.coordinate(),
            request.job_location.coordinate()
        )
        return distance, False
    except GeoError as e:
        logger.warning(f"Contractor {contractor.id}: distance unknown ({e.code})")
        return None, True


def _resolve_availability(
    contractor: Contractor,
    request: SchedulingRequest,
    resolver: AvailabilityResolver
) -> Tuple[AvailabilityStatus, bool]:
    """(status, unknown) for the requested date and block."""
    try:
        status = resolver.resolve_status(contractor.id, request.job_date, request.time_block)
        return status, False
    except AvailabilityLookupError as e:
        logger.warning(f"Contractor {contractor.id}: {e.message}; scoring as unavailable")
        return AvailabilityStatus.UNAVAILABLE, True


def score_contractor(
    contractor: Contractor,
    request: SchedulingRequest,
    resolver: AvailabilityResolver,
    weights: Optional[ScoringWeights] = None
) -> ContractorRecommendation:
    """
    Score a contractor for a scheduling request.

    Args:
        contractor: Active contractor
        request: Job date, time block and location
        resolver: Availability lookup for the job date/block
        weights: Sub-score weights (defaults to 0.40/0.35/0.25)

    Returns:
        ContractorRecommendation with composite score and weighted breakdown
    """
    weights = weights or DEFAULT_WEIGHTS

    status, availability_unknown = _resolve_availability(contractor, request, resolver)
    distance, distance_unknown = _resolve_distance(contractor, request)
    service_radius = contractor.effective_service_radius(weights.default_service_radius)

    if distance is None:
        raw_distance_score = 0.0
        within_radius = False
    else:
        raw_distance_score = distance_score(distance, service_radius)
        within_radius = is_within_service_radius(distance, service_radius)

    overall = contractor.rating.overall

    weighted_availability = availability_score(status) * weights.availability
    weighted_distance = raw_distance_score * weights.distance
    weighted_rating = rating_score(overall) * weights.rating

    composite = weighted_availability + weighted_distance + weighted_rating
    # Half-up rounding, so 92.5 scores 93
    score = int(max(0, min(100, math.floor(composite + 0.5))))

    return ContractorRecommendation(
        contractor_id=contractor.id,
        contractor=contractor.model_copy(deep=True),
        score=score,
        distance=distance,
        rating=overall,
        availability_status=status,
        is_within_service_radius=within_radius,
        breakdown=ScoreBreakdown(
            availability_score=round(weighted_availability, 2),
            distance_score=round(weighted_distance, 2),
            rating_score=round(weighted_rating, 2),
        ),
        distance_unknown=distance_unknown,
        availability_unknown=availability_unknown,
    )
