"""
Threshold Constants

Centralized threshold values used by the recommendation algorithms and
display helpers.

IMPORTANT: These values MUST stay in sync with algorithm implementations.
Values are documented with SYNC comments showing which algorithm uses them.
"""

from typing import Dict

from app.constants.scheduling import AvailabilityStatus


# ============================================================================
# Composite Score Weights (defaults; overridable through settings)
# SYNC WITH: app/algorithms/contractor_scoring.py ScoringWeights
# ============================================================================

WEIGHT_AVAILABILITY = 0.40  # Must be available
WEIGHT_DISTANCE = 0.35      # Closer is better
WEIGHT_RATING = 0.25        # Higher rated preferred

# Tolerance when checking that weights sum to 1.0
WEIGHT_SUM_TOLERANCE = 1e-6


# ============================================================================
# Availability Sub-Score (0-100 scale)
# SYNC WITH: app/algorithms/contractor_scoring.py availability_score()
# ============================================================================

AVAILABILITY_STATUS_SCORES: Dict[AvailabilityStatus, float] = {
    AvailabilityStatus.AVAILABLE: 100.0,
    AvailabilityStatus.BUSY: 40.0,
    AvailabilityStatus.UNAVAILABLE: 0.0,
    AvailabilityStatus.ON_LEAVE: 0.0,
}


# ============================================================================
# Geography
# SYNC WITH: app/algorithms/geo_distance.py
# ============================================================================

EARTH_RADIUS_MILES = 3958.8

DEFAULT_SERVICE_RADIUS_MILES = 30.0  # Used when a contractor hasn't set one

# Distance categories for display (upper bounds, inclusive, in miles)
DISTANCE_VERY_CLOSE_MAX = 5
DISTANCE_CLOSE_MAX = 15
DISTANCE_MODERATE_MAX = 30
# Beyond DISTANCE_MODERATE_MAX = Far


# ============================================================================
# Ratings (0-5 scale)
# SYNC WITH: app/algorithms/ratings.py
# ============================================================================

RATING_SCALE_MAX = 5.0
RATING_VALUE_MIN = 1.0  # Editor-entered component ratings
DEFAULT_COMPONENT_RATING = 3.0

# Display tiers (cosmetic, never part of the ranking math)
ELITE_MIN_RATING = 4.5
PRO_MIN_RATING = 3.5
STANDARD_MIN_RATING = 2.5
NEEDS_IMPROVEMENT_MIN_RATING = 1.5
# Below NEEDS_IMPROVEMENT_MIN_RATING = probation

# Commission rates by tier
ELITE_COMMISSION_RATE = 0.10
PRO_COMMISSION_RATE = 0.09
DEFAULT_COMMISSION_RATE = 0.08


# ============================================================================
# Ranking
# SYNC WITH: app/algorithms/recommendation_ranker.py
# ============================================================================

DEFAULT_TOP_RECOMMENDATIONS = 5
