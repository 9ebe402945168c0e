"""
Availability Service HTTP Client

Provides async interface to the contractor availability calendar backend.
Uses a module-level singleton AsyncClient for efficient connection pooling.

Functions:
- get_availability_for_date: One contractor's record for one date key (None if absent)
- get_availability_range: One contractor's records between two dates
- fetch_availability_snapshot: Records for many contractors on one date, fetched
  concurrently into an AvailabilitySnapshot for the ranker
- aclose_client: Close the HTTP client (call during app shutdown)

Records are normalized into AvailabilityRecord models. A missing record is not
an error: the resolver treats it as available.
"""

import asyncio
import logging
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

import httpx
from fastapi import HTTPException, status

from app.algorithms.availability_resolver import AvailabilitySnapshot, format_date_key
from app.constants.scheduling import AvailabilityStatus
from app.core.config import settings
from app.schemas.scheduling import AvailabilityRecord, BlockStatus
from app.tools.service_http import (
    build_headers,
    handle_connection_error,
    handle_http_error,
    pick,
)

logger = logging.getLogger(__name__)

SERVICE_NAME = "Availability service"

# Endpoint paths
AVAILABILITY_DATE_PATH = "/contractors/{contractor_id}/availability/{date_key}"
AVAILABILITY_RANGE_PATH = "/contractors/{contractor_id}/availability"


# ============================================================================
# Module-level HTTP Client
# ============================================================================

_client: Optional[httpx.AsyncClient] = None


def get_client() -> httpx.AsyncClient:
    """Get or create module-level httpx.AsyncClient singleton."""
    global _client

    if _client is None or _client.is_closed:
        limits = httpx.Limits(
            max_connections=settings.DEFAULT_CLIENT_MAX_CONNECTIONS,
            max_keepalive_connections=settings.DEFAULT_CLIENT_MAX_KEEPALIVE
        )

        _client = httpx.AsyncClient(
            base_url=settings.AVAILABILITY_SERVICE_URL,
            timeout=settings.AVAILABILITY_CLIENT_TIMEOUT,
            limits=limits,
            follow_redirects=False
        )
        logger.info(f"Initialized Availability Service client for {settings.AVAILABILITY_SERVICE_URL}")

    return _client


async def aclose_client() -> None:
    """Close module-level httpx.AsyncClient gracefully."""
    global _client

    if _client is not None and not _client.is_closed:
        await _client.aclose()
        logger.info("Closed Availability Service httpx.AsyncClient")
    _client = None


# ============================================================================
# Normalization
# ============================================================================


def _parse_status(value: Any) -> Optional[AvailabilityStatus]:
    if value is None or value == "":
        return None
    try:
        return AvailabilityStatus(str(value).strip().lower())
    except ValueError:
        logger.warning(f"Unknown availability status {value!r}, treating as unavailable")
        return AvailabilityStatus.UNAVAILABLE


def normalize_availability_record(
    data: Dict[str, Any],
    contractor_id: str,
    date_key: Optional[str] = None
) -> AvailabilityRecord:
    """
    Build an AvailabilityRecord from a backend payload.

    Documents are keyed by date; the key may appear as `date` or `id`.
    Blocks missing from a per-block record default to available.
    """
    data = data.get("data", data) if isinstance(data, dict) else {}

    blocks = None
    raw_blocks = data.get("blocks")
    if isinstance(raw_blocks, dict):
        parsed = {}
        for block in ("am", "pm", "evening"):
            block_status = _parse_status(raw_blocks.get(block))
            if block_status is not None:
                parsed[block] = block_status
        blocks = BlockStatus(**parsed)

    return AvailabilityRecord(
        contractor_id=pick(data, "contractor_id", "contractorId", contractor_id),
        date=str(data.get("date") or data.get("id") or date_key),
        status=_parse_status(data.get("status")),
        blocks=blocks,
        notes=data.get("notes"),
    )


# ============================================================================
# Public API Functions
# ============================================================================


def _invalid_response(error: ValueError) -> HTTPException:
    logger.error(f"{SERVICE_NAME} returned an invalid response: {error}")
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=f"{SERVICE_NAME} returned an invalid response"
    )


async def get_availability_for_date(
    contractor_id: str,
    date_key: str,
    auth_header: Optional[str] = None,
    request_id: Optional[str] = None
) -> Optional[AvailabilityRecord]:
    """
    Get a contractor's availability record for one date key.

    Returns:
        AvailabilityRecord, or None when the backend has no record (404)

    Raises:
        HTTPException: On other backend errors
    """
    headers = build_headers(auth_header, request_id)
    path = AVAILABILITY_DATE_PATH.format(contractor_id=contractor_id, date_key=date_key)

    try:
        response = await get_client().get(path, headers=headers)
        if response.status_code == status.HTTP_404_NOT_FOUND:
            return None
        response.raise_for_status()
        payload = response.json()
    except httpx.HTTPStatusError as e:
        handle_http_error(e, SERVICE_NAME, not_found_detail="Availability not found")
    except (httpx.ConnectError, httpx.TimeoutException, httpx.NetworkError) as e:
        handle_connection_error(e, SERVICE_NAME)
    except ValueError as e:
        raise _invalid_response(e)

    if not payload:
        return None

    # Pydantic validation errors are ValueErrors
    try:
        return normalize_availability_record(payload, contractor_id, date_key)
    except ValueError as e:
        raise _invalid_response(e)


async def get_availability_range(
    contractor_id: str,
    start: date,
    end: date,
    auth_header: Optional[str] = None,
    request_id: Optional[str] = None
) -> List[AvailabilityRecord]:
    """Get a contractor's records with start <= date <= end."""
    headers = build_headers(auth_header, request_id)
    path = AVAILABILITY_RANGE_PATH.format(contractor_id=contractor_id)
    params = {"start": format_date_key(start), "end": format_date_key(end)}

    try:
        response = await get_client().get(path, params=params, headers=headers)
        response.raise_for_status()
        payload = response.json()
    except httpx.HTTPStatusError as e:
        handle_http_error(e, SERVICE_NAME, not_found_detail="Contractor not found")
    except (httpx.ConnectError, httpx.TimeoutException, httpx.NetworkError) as e:
        handle_connection_error(e, SERVICE_NAME)
    except ValueError as e:
        raise _invalid_response(e)

    items = payload.get("data", []) if isinstance(payload, dict) else payload
    try:
        return [normalize_availability_record(item, contractor_id) for item in items or []]
    except ValueError as e:
        raise _invalid_response(e)


async def fetch_availability_snapshot(
    contractor_ids: Iterable[str],
    day: date,
    auth_header: Optional[str] = None,
    request_id: Optional[str] = None
) -> AvailabilitySnapshot:
    """
    Fetch every contractor's record for `day` concurrently.

    Contractors whose fetch fails are marked failed in the snapshot, so the
    scoring engine degrades them instead of assuming they are available.
    """
    ids = list(dict.fromkeys(contractor_ids))
    date_key = format_date_key(day)

    results = await asyncio.gather(
        *(
            get_availability_for_date(cid, date_key, auth_header=auth_header, request_id=request_id)
            for cid in ids
        ),
        return_exceptions=True
    )

    snapshot = AvailabilitySnapshot()
    for contractor_id, result in zip(ids, results):
        if isinstance(result, (HTTPException, httpx.HTTPError, ValueError)):
            logger.warning(f"Availability fetch failed for {contractor_id} on {date_key}: {result}")
            snapshot.mark_failed(contractor_id)
        elif isinstance(result, BaseException):
            raise result
        elif result is not None:
            snapshot.add(result, contractor_id)

    logger.info(
        f"Availability snapshot for {date_key}: {len(snapshot)} records, "
        f"{len(snapshot.failed)} failed of {len(ids)} contractors"
    )
    return snapshot
