"""
Contractor Recommendation Ranker

Ranks contractors for a scheduling request:

1. Eligibility: active only; trade match; minimum rating
2. Scoring: contractor_scoring.score_contractor() for each survivor
3. Post-score filters: maximum distance; only available
4. Sort: score desc, distance asc (unknown last), rating desc, contractor_id asc

Pure and deterministic given its inputs. Callers fetch contractors and an
availability snapshot first; nothing here performs I/O or caches.
"""

import logging
import math
from typing import List, Optional, Sequence, Set, Tuple

from app.algorithms.availability_resolver import AvailabilityResolver
from app.algorithms.contractor_scoring import ScoringWeights, score_contractor
from app.constants.scheduling import AvailabilityStatus, ContractorStatus, Trade
from app.constants.thresholds import DEFAULT_TOP_RECOMMENDATIONS
from app.core.errors import ValidationError
from app.schemas.scheduling import (
    Contractor,
    ContractorRecommendation,
    RecommendationFilters,
    SchedulingRequest,
)

logger = logging.getLogger(__name__)


# ============================================================================
# Eligibility
# ============================================================================


def effective_trades(
    request: SchedulingRequest,
    filters: Optional[RecommendationFilters]
) -> Optional[Set[Trade]]:
    """
    Trades a contractor must match at least one of, or None for no constraint.

    A non-empty filters.trade_filter wins over request.required_trades.
    """
    if filters is not None and filters.trade_filter:
        return set(filters.trade_filter)
    if request.required_trades:
        return set(request.required_trades)
    return None


def is_eligible(
    contractor: Contractor,
    trades: Optional[Set[Trade]],
    min_rating: Optional[float]
) -> bool:
    if contractor.status != ContractorStatus.ACTIVE:
        return False
    if trades is not None and not trades.intersection(contractor.trades):
        return False
    if min_rating is not None and contractor.rating.overall < min_rating:
        return False
    return True


def passes_post_filters(
    recommendation: ContractorRecommendation,
    filters: Optional[RecommendationFilters]
) -> bool:
    if filters is None:
        return True
    if filters.max_distance is not None:
        # Unknown distance cannot satisfy a distance cap
        if recommendation.distance is None or recommendation.distance > filters.max_distance:
            return False
    if filters.only_available and recommendation.availability_status != AvailabilityStatus.AVAILABLE:
        return False
    return True


def sort_key(recommendation: ContractorRecommendation) -> Tuple[int, float, float, str]:
    distance = recommendation.distance if recommendation.distance is not None else math.inf
    return (
        -recommendation.score,
        distance,
        -recommendation.rating,
        recommendation.contractor_id,
    )


def _validate_request(request: Optional[SchedulingRequest]) -> SchedulingRequest:
    if request is None:
        raise ValidationError("Scheduling request is required")
    if getattr(request, "job_location", None) is None:
        raise ValidationError(
            "Scheduling request has no job location",
            details={"missing_field": "job_location"}
        )
    return request


# ============================================================================
# Ranking
# ============================================================================


def rank_contractors(
    contractors: Sequence[Contractor],
    request: SchedulingRequest,
    resolver: AvailabilityResolver,
    filters: Optional[RecommendationFilters] = None,
    weights: Optional[ScoringWeights] = None
) -> List[ContractorRecommendation]:
    """
    Rank contractors for a scheduling request, best first.

    Args:
        contractors: Candidate contractors (any status)
        request: Job date, time block, location, required trades
        resolver: Availability lookup over the caller's snapshot
        filters: Optional eligibility and post-score filters
        weights: Optional sub-score weights

    Returns:
        Ordered recommendations; empty list when nothing survives

    Raises:
        ValidationError: request is missing or has no job location
    """
    request = _validate_request(request)

    trades = effective_trades(request, filters)
    min_rating = filters.min_rating if filters is not None else None

    eligible = [c for c in contractors if is_eligible(c, trades, min_rating)]
    if not eligible:
        logger.debug(f"No eligible contractors out of {len(contractors)}")
        return []

    recommendations = []
    for contractor in eligible:
        recommendation = score_contractor(contractor, request, resolver, weights)
        if passes_post_filters(recommendation, filters):
            recommendations.append(recommendation)

    recommendations.sort(key=sort_key)

    logger.debug(
        f"Ranked {len(recommendations)} of {len(contractors)} contractors "
        f"({len(eligible)} eligible) for {request.job_date} {request.time_block.value}"
    )
    return recommendations


def top_recommendations(
    contractors: Sequence[Contractor],
    request: SchedulingRequest,
    resolver: AvailabilityResolver,
    limit: int = DEFAULT_TOP_RECOMMENDATIONS,
    filters: Optional[RecommendationFilters] = None,
    weights: Optional[ScoringWeights] = None
) -> List[ContractorRecommendation]:
    """First `limit` entries of rank_contractors()."""
    if limit < 0:
        raise ValidationError("limit must be non-negative", details={"limit": limit})
    return rank_contractors(contractors, request, resolver, filters, weights)[:limit]


def available_contractors(
    contractors: Sequence[Contractor],
    request: SchedulingRequest,
    resolver: AvailabilityResolver,
    weights: Optional[ScoringWeights] = None
) -> List[Contractor]:
    """Contractors fully available for the request's block, in ranked order."""
    filters = RecommendationFilters(
        only_available=True,
        trade_filter=request.required_trades or None,
    )
    return [
        r.contractor
        for r in rank_contractors(contractors, request, resolver, filters, weights)
    ]
