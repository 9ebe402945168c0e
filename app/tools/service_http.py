"""
Shared HTTP helpers for backend service clients.

Header building, safe error mapping and lenient value parsing used by
contractor_service_client and availability_service_client.
"""

import logging
from typing import Any, Dict, NoReturn, Optional

import httpx
from fastapi import HTTPException, status

logger = logging.getLogger(__name__)


def build_headers(
    auth_header: Optional[str] = None,
    request_id: Optional[str] = None
) -> Dict[str, str]:
    """Build request headers, forwarding Authorization and x-request-id."""
    headers = {
        "Content-Type": "application/json",
        "Accept": "application/json",
    }

    if auth_header:
        headers["Authorization"] = auth_header

    if request_id:
        headers["x-request-id"] = request_id

    return headers


def handle_http_error(
    e: httpx.HTTPStatusError,
    service_name: str,
    not_found_detail: str = "Resource not found"
) -> NoReturn:
    """
    Map httpx HTTP errors to FastAPI HTTPException.
    Logs full error server-side, exposes only safe messages.
    """
    status_code = e.response.status_code

    try:
        error_data = e.response.json()
        if isinstance(error_data, dict):
            error_message = error_data.get("message") or error_data.get("detail") or str(error_data)
        else:
            error_message = str(error_data)
    except ValueError:
        error_message = e.response.text or f"Status {status_code}"

    logger.warning(f"{service_name} error {status_code}: {error_message}")

    if status_code == 401:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required"
        )
    elif status_code == 403:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access forbidden"
        )
    elif status_code == 404:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=not_found_detail
        )
    elif status_code == 422:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Invalid request"
        )
    else:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"{service_name} unavailable"
        )


def handle_connection_error(e: Exception, service_name: str) -> NoReturn:
    """Handle connection errors (timeout, network issues, etc.)."""
    logger.error(f"{service_name} connection error: {type(e).__name__}: {e}")
    raise HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=f"Cannot connect to {service_name}: {type(e).__name__}"
    )


def safe_float(value: Any, default: Optional[float] = None) -> Optional[float]:
    """
    Convert value to float, returning default on None, empty or non-numeric input.
    """
    if value is None or value == "":
        return default
    try:
        return float(value)
    except (ValueError, TypeError):
        return default


def pick(data: Dict[str, Any], snake: str, camel: str, default: Any = None) -> Any:
    """Read a field that the backend may send in snake_case or camelCase."""
    if data.get(snake) is not None:
        return data[snake]
    if data.get(camel) is not None:
        return data[camel]
    return default
