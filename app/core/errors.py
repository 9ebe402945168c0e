"""
Core Errors Module

Standardized error classes and helpers for consistent error handling across the service.
Provides conversion between internal errors and HTTP responses.

Geo and availability errors are raised by the recommendation algorithms at their
boundaries. The scoring engine catches them per contractor and degrades that
contractor's score instead of failing the whole ranking.

Usage:
    from app.core.errors import ValidationError, error_payload

    raise ValidationError("Invalid date key", details={"field": "job_date"})

    payload = error_payload("invalid_input", "Bad request", trace_id="abc123")
"""

import logging
from typing import Optional, Dict, Any

logger = logging.getLogger(__name__)


# ==================== Base Error Class ====================

class AppError(Exception):
    """
    Base application error class.

    All custom errors inherit from this class so they convert to HTTP
    responses the same way.

    Attributes:
        code: Error code (e.g., "validation_error", "not_found")
        message: Human-readable error message
        details: Optional additional error context
        status_code: HTTP status code for this error type
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self._default_code()
        self.details = details or {}
        self.status_code = status_code

    def _default_code(self) -> str:
        """
        Generate default error code from class name.

        Returns:
            snake_case version of class name without the "Error" suffix
        """
        name = self.__class__.__name__
        if name.endswith("Error"):
            name = name[:-5]

        result = []
        for i, char in enumerate(name):
            if char.isupper() and i > 0:
                result.append("_")
            result.append(char.lower())

        return "".join(result)

    def to_dict(self, trace_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Convert error to dictionary for JSON responses.

        Args:
            trace_id: Optional request trace ID

        Returns:
            Error dict with code, message, details, trace_id
        """
        result = {
            "code": self.code,
            "message": self.message,
        }

        if self.details:
            result["details"] = self.details

        if trace_id:
            result["trace_id"] = trace_id

        return result


# ==================== HTTP-Facing Error Classes ====================

class ValidationError(AppError):
    """
    Validation error (400 Bad Request).

    Raised when input validation fails: a structurally invalid scheduling
    request, a malformed date key, or scoring weights that do not sum to 1.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="validation_error",
            details=details,
            status_code=400
        )


class UnauthorizedError(AppError):
    """Unauthorized error (401). Surfaced when a backend rejects forwarded credentials."""

    def __init__(
        self,
        message: str = "Authentication required",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="unauthorized",
            details=details,
            status_code=401
        )


class ForbiddenError(AppError):
    """Forbidden error (403). Surfaced when a backend denies the forwarded caller."""

    def __init__(
        self,
        message: str = "Access forbidden",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="forbidden",
            details=details,
            status_code=403
        )


class NotFoundError(AppError):
    """
    Not found error (404 Not Found).

    Raised when a requested resource does not exist.
    """

    def __init__(
        self,
        message: str = "Resource not found",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="not_found",
            details=details,
            status_code=404
        )


class ServiceUnavailableError(AppError):
    """
    Service unavailable error (503 Service Unavailable).

    Raised when a backend service is unreachable or unresponsive.
    """

    def __init__(
        self,
        message: str = "Service temporarily unavailable",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="service_unavailable",
            details=details,
            status_code=503
        )


# ==================== Scheduling Error Classes ====================

class GeoError(AppError):
    """
    Base class for location problems (422 Unprocessable Entity).

    Callers that only care whether a distance could be computed catch this.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code=code,
            details=details,
            status_code=422
        )


class CoordinatesUnavailableError(GeoError):
    """
    A contractor address or job location has not been geocoded.

    Distance is unknown, not zero.
    """

    def __init__(
        self,
        message: str = "Coordinates unavailable",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="coordinates_unavailable",
            details=details
        )


class InvalidCoordinateError(GeoError):
    """A latitude or longitude lies outside the WGS84 decimal-degree ranges."""

    def __init__(
        self,
        message: str = "Invalid coordinate",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="invalid_coordinate",
            details=details
        )


class AvailabilityLookupError(AppError):
    """
    The availability provider failed for a single contractor/date (503).

    Wraps whatever the provider raised; the original exception is chained.
    """

    def __init__(
        self,
        message: str = "Availability lookup failed",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="availability_lookup_failed",
            details=details,
            status_code=503
        )


# ==================== Helper Functions ====================

def error_payload(
    code: str,
    message: str,
    details: Optional[Dict[str, Any]] = None,
    trace_id: Optional[str] = None
) -> Dict[str, Any]:
    """
    Create a standardized error payload dict.

    Example:
        >>> payload = error_payload("bad_request", "Invalid input", trace_id="abc123")
        >>> payload["code"]
        'bad_request'
    """
    result = {
        "code": code,
        "message": message,
    }

    if details:
        result["details"] = details

    if trace_id:
        result["trace_id"] = trace_id

    return result


def from_http_exception(
    e: Exception,
    default_code: str = "service_error",
    safe_message: bool = True
) -> AppError:
    """
    Convert HTTP exception to AppError.

    Maps httpx.HTTPStatusError and fastapi.HTTPException to the matching AppError
    subclass. With safe_message=True, backend error details are replaced by a
    generic message and only logged server-side.

    Example:
        >>> from fastapi import HTTPException
        >>> http_err = HTTPException(status_code=404, detail="Contractor not found")
        >>> from_http_exception(http_err).status_code
        404
    """
    status_code = getattr(e, "status_code", 500)
    detail = str(e)

    if hasattr(e, "detail"):
        detail = e.detail

    # httpx.HTTPStatusError carries the response
    if hasattr(e, "response"):
        try:
            response = e.response
            status_code = response.status_code

            try:
                error_data = response.json()
                if isinstance(error_data, dict):
                    detail = error_data.get("message") or error_data.get("detail") or str(error_data)
            except ValueError:
                detail = response.text or f"HTTP {status_code}"
        except AttributeError:
            pass

    if safe_message:
        if status_code == 401:
            detail = "Authentication required"
        elif status_code == 403:
            detail = "Access forbidden"
        elif status_code == 404:
            detail = "Resource not found"
        elif status_code >= 500:
            detail = "Service error"
            logger.error(f"Service error ({status_code}): {e}")

    if status_code == 400:
        return ValidationError(message=detail)
    elif status_code == 401:
        return UnauthorizedError(message=detail)
    elif status_code == 403:
        return ForbiddenError(message=detail)
    elif status_code == 404:
        return NotFoundError(message=detail)
    elif 500 <= status_code < 600:
        return ServiceUnavailableError(message=detail)
    else:
        return AppError(
            message=detail,
            code=default_code,
            status_code=status_code
        )


def to_http_exception(error: AppError):
    """
    Convert AppError to FastAPI HTTPException.

    The current trace_id (if any) is attached to the detail payload.

    Example:
        >>> from app.core.errors import ValidationError, to_http_exception
        >>> to_http_exception(ValidationError("Invalid input")).status_code
        400
    """
    from fastapi import HTTPException
    from app.core.logging import get_trace_id

    trace_id = get_trace_id()
    if trace_id == "-":
        trace_id = None

    return HTTPException(
        status_code=error.status_code,
        detail=error.to_dict(trace_id=trace_id)
    )
