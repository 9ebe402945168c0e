"""
Availability Resolver

Projects a contractor's availability record onto one date and time block.

Availability is stored per contractor per calendar day, keyed "YYYY-MM-DD".
A record holds either per-block statuses (am/pm/evening) or a legacy
whole-day status. No record for a day means the contractor is available for
every block of that day.

The resolver reads from an AvailabilityProvider. In the service, the provider
is an AvailabilitySnapshot filled by the caller before ranking, so resolution
itself performs no I/O.
"""

import logging
import re
from datetime import date, datetime, timezone
from typing import Dict, Iterable, List, Optional, Protocol, Set, Union

from app.constants.scheduling import (
    AvailabilityStatus,
    TimeBlock,
    TIME_BLOCK_CONFIG,
    TIME_BLOCKS,
    DATE_KEY_FORMAT,
)
from app.core.errors import AvailabilityLookupError, ValidationError
from app.schemas.scheduling import AvailabilityRecord, BlockStatus

logger = logging.getLogger(__name__)

_DATE_KEY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

DateLike = Union[date, datetime]


# ============================================================================
# Date Keys
# ============================================================================


def format_date_key(value: DateLike) -> str:
    """
    Format a calendar day as "YYYY-MM-DD".

    Aware datetimes are converted to UTC before taking the day. Naive datetimes
    and plain dates use their own calendar day.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        value = value.date()
    if not isinstance(value, date):
        raise ValidationError(
            f"Expected a date, got {type(value).__name__}",
            details={"value": repr(value)}
        )
    return value.strftime(DATE_KEY_FORMAT)


def parse_date_key(key: str) -> date:
    """
    Parse "YYYY-MM-DD" into a date.

    Raises:
        ValidationError: malformed key or impossible calendar day
    """
    if not isinstance(key, str) or not _DATE_KEY_RE.match(key):
        raise ValidationError(
            "Date key must be YYYY-MM-DD",
            details={"date_key": key}
        )
    try:
        return datetime.strptime(key, DATE_KEY_FORMAT).date()
    except ValueError as e:
        raise ValidationError(
            f"Invalid calendar date: {key}",
            details={"date_key": key}
        ) from e


# ============================================================================
# Block Helpers
# ============================================================================


def default_blocks() -> BlockStatus:
    """All blocks available."""
    return BlockStatus()


def legacy_status_to_blocks(status: AvailabilityStatus) -> BlockStatus:
    """Spread a whole-day status over every block."""
    status = AvailabilityStatus(status)
    return BlockStatus(am=status, pm=status, evening=status)


def normalize_availability(record: AvailabilityRecord) -> AvailabilityRecord:
    """
    Return a copy of `record` that always has `blocks`.

    Legacy records are migrated by spreading their whole-day status; records
    with neither field get default (all available) blocks.
    """
    if record.blocks is not None:
        return record
    blocks = legacy_status_to_blocks(record.status) if record.status else default_blocks()
    return record.model_copy(update={"blocks": blocks})


def day_status_from_blocks(blocks: BlockStatus) -> AvailabilityStatus:
    """
    Overall status of a day for display.

    Uniform blocks give that status; any mix counts as busy.
    """
    statuses = [blocks.get(block) for block in TIME_BLOCKS]
    if all(s == statuses[0] for s in statuses):
        return statuses[0]
    return AvailabilityStatus.BUSY


def time_block_for_hour(hour: int) -> Optional[TimeBlock]:
    """Block containing `hour` (0-23), or None outside working blocks."""
    for block in TIME_BLOCKS:
        config = TIME_BLOCK_CONFIG[block]
        if config["start"] <= hour < config["end"]:
            return block
    return None


def overlapping_blocks(start_hour: int, end_hour: int) -> List[TimeBlock]:
    """Blocks overlapping the half-open hour range [start_hour, end_hour)."""
    blocks = []
    for block in TIME_BLOCKS:
        config = TIME_BLOCK_CONFIG[block]
        if start_hour < config["end"] and end_hour > config["start"]:
            blocks.append(block)
    return blocks


# ============================================================================
# Providers
# ============================================================================


class AvailabilityProvider(Protocol):
    """Key-value lookup of availability records by contractor and date key."""

    def get_availability_for_date(
        self,
        contractor_id: str,
        date_key: str
    ) -> Optional[AvailabilityRecord]:
        ...


class AvailabilitySnapshot:
    """
    In-memory AvailabilityProvider over prefetched records.

    Callers fetch a consistent set of records (e.g. every candidate for the job
    date) and hand the snapshot to the ranker. Contractors whose fetch failed
    are marked so lookups for them raise instead of falling back to the
    available default.
    """

    def __init__(self, records: Optional[Iterable[AvailabilityRecord]] = None):
        self._records: Dict[str, Dict[str, AvailabilityRecord]] = {}
        self._failed: Set[str] = set()
        for record in records or []:
            self.add(record)

    def mark_failed(self, contractor_id: str) -> None:
        self._failed.add(contractor_id)

    @property
    def failed(self) -> Set[str]:
        return set(self._failed)

    def add(self, record: AvailabilityRecord, contractor_id: Optional[str] = None) -> None:
        owner = contractor_id or record.contractor_id
        if not owner:
            raise ValidationError(
                "Availability record has no contractor_id",
                details={"date": record.date}
            )
        self._records.setdefault(owner, {})[record.date] = record

    def get_availability_for_date(
        self,
        contractor_id: str,
        date_key: str
    ) -> Optional[AvailabilityRecord]:
        if contractor_id in self._failed:
            raise AvailabilityLookupError(
                f"Availability for {contractor_id} was not fetched",
                details={"contractor_id": contractor_id, "date": date_key}
            )
        return self._records.get(contractor_id, {}).get(date_key)

    def __len__(self) -> int:
        return sum(len(days) for days in self._records.values())


# ============================================================================
# Resolver
# ============================================================================


class AvailabilityResolver:
    """Resolves AvailabilityStatus for (contractor, date, block) with the optimistic default."""

    def __init__(self, provider: AvailabilityProvider):
        self.provider = provider

    def resolve_status(
        self,
        contractor_id: str,
        day: DateLike,
        time_block: TimeBlock
    ) -> AvailabilityStatus:
        """
        Status of `contractor_id` for `time_block` on `day`.

        - no record: available
        - record with blocks: that block's status
        - record with only a whole-day status: that status for any block
        - record with neither: available

        Raises:
            AvailabilityLookupError: the provider raised
        """
        time_block = TimeBlock(time_block)
        date_key = format_date_key(day)

        try:
            record = self.provider.get_availability_for_date(contractor_id, date_key)
        except AvailabilityLookupError:
            raise
        except Exception as e:
            raise AvailabilityLookupError(
                f"Availability lookup failed for {contractor_id} on {date_key}",
                details={"contractor_id": contractor_id, "date": date_key}
            ) from e

        if record is None:
            return AvailabilityStatus.AVAILABLE

        if record.blocks is not None:
            return record.blocks.get(time_block)

        if record.status is not None:
            return AvailabilityStatus(record.status)

        return AvailabilityStatus.AVAILABLE
