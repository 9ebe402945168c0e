"""
Contractor Service HTTP Client

Provides async interface to the contractor directory backend.
Uses a module-level singleton AsyncClient for efficient connection pooling.

Functions:
- get_contractors: List contractors, optionally filtered by status
- get_contractor: Get one contractor profile
- aclose_client: Close the HTTP client (call during app shutdown)

Payloads are normalized (camelCase or snake_case) into Contractor models.
All functions forward Authorization headers and handle common HTTP errors.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx
from fastapi import HTTPException, status
from pydantic import ValidationError as PydanticValidationError

from app.constants.scheduling import ContractorStatus, Trade
from app.core.config import settings
from app.schemas.scheduling import Address, Contractor, Rating
from app.tools.service_http import (
    build_headers,
    handle_connection_error,
    handle_http_error,
    pick,
    safe_float,
)

logger = logging.getLogger(__name__)

SERVICE_NAME = "Contractor service"

# Endpoint paths
CONTRACTORS_PATH = "/contractors"
CONTRACTOR_PATH = "/contractors/{contractor_id}"


# ============================================================================
# Module-level HTTP Client (Singleton with Connection Pooling)
# ============================================================================

_client: Optional[httpx.AsyncClient] = None


def get_client() -> httpx.AsyncClient:
    """Get or create the module-level httpx.AsyncClient singleton."""
    global _client

    if _client is None or _client.is_closed:
        limits = httpx.Limits(
            max_connections=settings.DEFAULT_CLIENT_MAX_CONNECTIONS,
            max_keepalive_connections=settings.DEFAULT_CLIENT_MAX_KEEPALIVE
        )

        _client = httpx.AsyncClient(
            base_url=settings.CONTRACTOR_SERVICE_URL,
            timeout=settings.CONTRACTOR_CLIENT_TIMEOUT,
            limits=limits,
            follow_redirects=False
        )
        logger.info(f"Initialized Contractor Service client for {settings.CONTRACTOR_SERVICE_URL}")

    return _client


async def aclose_client() -> None:
    """Close the module-level httpx.AsyncClient gracefully."""
    global _client

    if _client is not None and not _client.is_closed:
        await _client.aclose()
        logger.info("Closed Contractor Service httpx.AsyncClient")
    _client = None


# ============================================================================
# Normalization
# ============================================================================


def _normalize_trades(raw: Any, contractor_id: str) -> List[Trade]:
    trades = []
    for value in raw or []:
        try:
            trades.append(Trade(str(value).strip().lower()))
        except ValueError:
            logger.warning(f"Contractor {contractor_id}: ignoring unknown trade {value!r}")
    return trades


def _normalize_address(raw: Any) -> Address:
    if not isinstance(raw, dict):
        return Address()
    return Address(
        street=raw.get("street") or "",
        city=raw.get("city") or "",
        state=raw.get("state") or "",
        zip=str(raw.get("zip") or ""),
        lat=safe_float(raw.get("lat", raw.get("latitude"))),
        lng=safe_float(raw.get("lng", raw.get("longitude"))),
    )


def _normalize_rating(raw: Any) -> Rating:
    if not isinstance(raw, dict):
        return Rating()
    values = {
        name: safe_float(raw.get(name))
        for name in ("overall", "customer", "speed", "warranty", "internal")
    }
    return Rating(**{k: v for k, v in values.items() if v is not None})


def normalize_contractor(data: Dict[str, Any]) -> Contractor:
    """
    Build a Contractor from a backend payload.

    Accepts {"data": {...}} envelopes and camelCase keys.
    """
    data = data.get("data", data) if isinstance(data, dict) else {}
    contractor_id = str(data.get("id") or "")

    raw_status = str(data.get("status") or ContractorStatus.PENDING.value).lower()
    try:
        contractor_status = ContractorStatus(raw_status)
    except ValueError:
        logger.warning(f"Contractor {contractor_id}: unknown status {raw_status!r}, treating as inactive")
        contractor_status = ContractorStatus.INACTIVE

    return Contractor(
        id=contractor_id,
        user_id=pick(data, "user_id", "userId"),
        business_name=pick(data, "business_name", "businessName"),
        address=_normalize_address(data.get("address")),
        trades=_normalize_trades(data.get("trades"), contractor_id),
        skills=[str(s) for s in data.get("skills") or []],
        service_radius=safe_float(pick(data, "service_radius", "serviceRadius")),
        rating=_normalize_rating(data.get("rating")),
        status=contractor_status,
    )


def _extract_list(data: Any) -> List[Dict[str, Any]]:
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        for key in ("data", "items", "contractors"):
            if isinstance(data.get(key), list):
                return data[key]
    return []


# ============================================================================
# Public API Functions
# ============================================================================


async def get_contractors(
    contractor_status: Optional[ContractorStatus] = ContractorStatus.ACTIVE,
    auth_header: Optional[str] = None,
    request_id: Optional[str] = None
) -> List[Contractor]:
    """
    List contractors.

    Args:
        contractor_status: Status filter passed to the backend (None for all)
        auth_header: Optional Authorization header
        request_id: Optional request ID for tracing

    Returns:
        Contractor models; malformed entries are skipped with a warning

    Raises:
        HTTPException: On backend errors
    """
    headers = build_headers(auth_header, request_id)
    params = {"status": contractor_status.value} if contractor_status else None

    logger.debug(f"Fetching contractors (status={params and params['status']})")

    try:
        response = await get_client().get(CONTRACTORS_PATH, params=params, headers=headers)
        response.raise_for_status()
        payload = response.json()
    except httpx.HTTPStatusError as e:
        handle_http_error(e, SERVICE_NAME, not_found_detail="Contractors not found")
    except (httpx.ConnectError, httpx.TimeoutException, httpx.NetworkError) as e:
        handle_connection_error(e, SERVICE_NAME)
    except ValueError as e:
        logger.error(f"{SERVICE_NAME} returned invalid JSON: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"{SERVICE_NAME} returned an invalid response"
        )

    contractors = []
    for item in _extract_list(payload):
        try:
            contractors.append(normalize_contractor(item))
        except PydanticValidationError as e:
            logger.warning(f"Skipping malformed contractor {item.get('id')!r}: {e.error_count()} errors")

    logger.info(f"Retrieved {len(contractors)} contractors")
    return contractors


async def get_contractor(
    contractor_id: str,
    auth_header: Optional[str] = None,
    request_id: Optional[str] = None
) -> Contractor:
    """
    Get one contractor profile.

    Raises:
        HTTPException: 404 when the contractor does not exist, 503 on backend errors
    """
    headers = build_headers(auth_header, request_id)
    path = CONTRACTOR_PATH.format(contractor_id=contractor_id)

    try:
        response = await get_client().get(path, headers=headers)
        response.raise_for_status()
        return normalize_contractor(response.json())
    except httpx.HTTPStatusError as e:
        handle_http_error(e, SERVICE_NAME, not_found_detail="Contractor not found")
    except (httpx.ConnectError, httpx.TimeoutException, httpx.NetworkError) as e:
        handle_connection_error(e, SERVICE_NAME)
