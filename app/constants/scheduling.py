"""
Scheduling Constants

Closed vocabularies used by the recommendation algorithms, schemas and
service clients.

Enums:
- Trade: contractor trades
- ContractorStatus: onboarding/lifecycle status (only ACTIVE is schedulable)
- AvailabilityStatus: per-day or per-block availability
- TimeBlock: fixed day-parts used as scheduling granularity

Members are str-valued so they serialize to the persistence layer's
lowercase strings unchanged.
"""

from enum import Enum
from typing import Dict, List


class Trade(str, Enum):
    INSTALLER = "installer"
    SALES_REP = "sales_rep"
    SERVICE_TECH = "service_tech"
    PM = "pm"


class ContractorStatus(str, Enum):
    PENDING = "pending"
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


class AvailabilityStatus(str, Enum):
    AVAILABLE = "available"
    BUSY = "busy"
    UNAVAILABLE = "unavailable"
    ON_LEAVE = "on_leave"


class TimeBlock(str, Enum):
    AM = "am"
    PM = "pm"
    EVENING = "evening"


# ============================================================================
# Time Block Configuration
# ============================================================================

# Hours are [start, end) on a 24h clock
TIME_BLOCK_CONFIG: Dict[TimeBlock, Dict[str, object]] = {
    TimeBlock.AM: {"start": 6, "end": 12, "label": "Morning", "short_label": "AM"},
    TimeBlock.PM: {"start": 12, "end": 18, "label": "Afternoon", "short_label": "PM"},
    TimeBlock.EVENING: {"start": 18, "end": 22, "label": "Evening", "short_label": "EVE"},
}

TIME_BLOCKS: List[TimeBlock] = [TimeBlock.AM, TimeBlock.PM, TimeBlock.EVENING]

# Canonical date key format for availability records
DATE_KEY_FORMAT = "%Y-%m-%d"


# ============================================================================
# Display Labels
# ============================================================================

AVAILABILITY_LABELS: Dict[AvailabilityStatus, str] = {
    AvailabilityStatus.AVAILABLE: "Available",
    AvailabilityStatus.BUSY: "Busy",
    AvailabilityStatus.UNAVAILABLE: "Unavailable",
    AvailabilityStatus.ON_LEAVE: "On Leave",
}
