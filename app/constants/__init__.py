"""
Constants Package

Centralized constants for the scheduling recommendation service.

Exports:
- Scheduling vocabularies (Trade, ContractorStatus, AvailabilityStatus, TimeBlock)
- Time block configuration
- Threshold values (weights, status scores, radius defaults, rating tiers)

Safe to import anywhere - no heavy dependencies or circular imports.
"""

from .scheduling import (
    Trade,
    ContractorStatus,
    AvailabilityStatus,
    TimeBlock,
    TIME_BLOCK_CONFIG,
    TIME_BLOCKS,
    DATE_KEY_FORMAT,
    AVAILABILITY_LABELS,
)

from .thresholds import (
    WEIGHT_AVAILABILITY,
    WEIGHT_DISTANCE,
    WEIGHT_RATING,
    AVAILABILITY_STATUS_SCORES,
    EARTH_RADIUS_MILES,
    DEFAULT_SERVICE_RADIUS_MILES,
    DEFAULT_TOP_RECOMMENDATIONS,
)

__all__ = [
    "Trade",
    "ContractorStatus",
    "AvailabilityStatus",
    "TimeBlock",
    "TIME_BLOCK_CONFIG",
    "TIME_BLOCKS",
    "DATE_KEY_FORMAT",
    "AVAILABILITY_LABELS",
    "WEIGHT_AVAILABILITY",
    "WEIGHT_DISTANCE",
    "WEIGHT_RATING",
    "AVAILABILITY_STATUS_SCORES",
    "EARTH_RADIUS_MILES",
    "DEFAULT_SERVICE_RADIUS_MILES",
    "DEFAULT_TOP_RECOMMENDATIONS",
]
