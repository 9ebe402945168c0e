"""
Contractor Rating Helpers

Overall rating from weighted component ratings, plus display tiers.

Tiers are cosmetic: the recommendation ranker uses `Rating.overall` directly
and never looks at a tier.
"""

import math
from typing import Dict, Optional

from app.constants.thresholds import (
    DEFAULT_COMPONENT_RATING,
    ELITE_MIN_RATING,
    PRO_MIN_RATING,
    STANDARD_MIN_RATING,
    NEEDS_IMPROVEMENT_MIN_RATING,
    ELITE_COMMISSION_RATE,
    PRO_COMMISSION_RATE,
    DEFAULT_COMMISSION_RATE,
    RATING_SCALE_MAX,
    RATING_VALUE_MIN,
)
from app.schemas.scheduling import Rating

# Component weights for the overall rating (must sum to 1.0)
RATING_WEIGHTS: Dict[str, float] = {
    "customer": 0.4,
    "speed": 0.2,
    "warranty": 0.2,
    "internal": 0.2,
}

RATING_COMPONENTS = tuple(RATING_WEIGHTS)


def calculate_overall_rating(components: Dict[str, float]) -> float:
    """Weighted mean of the four components, rounded half-up to one decimal."""
    overall = sum(components[name] * weight for name, weight in RATING_WEIGHTS.items())
    return math.floor(overall * 10 + 0.5) / 10


def create_rating(
    customer: Optional[float] = None,
    speed: Optional[float] = None,
    warranty: Optional[float] = None,
    internal: Optional[float] = None
) -> Rating:
    """Build a Rating; missing components default to 3.0."""
    components = {
        "customer": DEFAULT_COMPONENT_RATING if customer is None else customer,
        "speed": DEFAULT_COMPONENT_RATING if speed is None else speed,
        "warranty": DEFAULT_COMPONENT_RATING if warranty is None else warranty,
        "internal": DEFAULT_COMPONENT_RATING if internal is None else internal,
    }
    return Rating(overall=calculate_overall_rating(components), **components)


def update_rating(current: Rating, **updates: Optional[float]) -> Rating:
    """Copy of `current` with the given components replaced and overall recalculated."""
    unknown = set(updates) - set(RATING_COMPONENTS)
    if unknown:
        raise ValueError(f"Unknown rating components: {sorted(unknown)}")

    components = {
        name: getattr(current, name) if updates.get(name) is None else updates[name]
        for name in RATING_COMPONENTS
    }
    return Rating(overall=calculate_overall_rating(components), **components)


def validate_rating_value(value: float) -> bool:
    """Editor-entered component ratings must be within 1-5."""
    return RATING_VALUE_MIN <= value <= RATING_SCALE_MAX


def rating_level(value: float) -> str:
    if value >= 4.5:
        return "Excellent"
    if value >= 3.5:
        return "Good"
    if value >= 2.5:
        return "Average"
    if value >= 1.5:
        return "Below Average"
    return "Poor"


# ============================================================================
# Tiers
# ============================================================================


def rating_tier(overall: float) -> str:
    """
    Badge tier shown next to a recommendation.

    Example:
        >>> rating_tier(4.8)
        'elite'
        >>> rating_tier(3.9)
        'pro'
        >>> rating_tier(2.0)
        'standard'
    """
    if overall >= ELITE_MIN_RATING:
        return "elite"
    if overall >= PRO_MIN_RATING:
        return "pro"
    return "standard"


def performance_tier(overall: float) -> str:
    """Finer tier used for commission and coaching decisions."""
    if overall >= ELITE_MIN_RATING:
        return "elite"
    if overall >= PRO_MIN_RATING:
        return "pro"
    if overall >= STANDARD_MIN_RATING:
        return "standard"
    if overall >= NEEDS_IMPROVEMENT_MIN_RATING:
        return "needs_improvement"
    return "probation"


def commission_rate(tier: str) -> float:
    if tier == "elite":
        return ELITE_COMMISSION_RATE
    if tier == "pro":
        return PRO_COMMISSION_RATE
    return DEFAULT_COMMISSION_RATE
