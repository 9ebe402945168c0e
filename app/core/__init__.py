"""
Core Package

Centralized configuration, logging and error handling for the
scheduling recommendation service.

Modules:
- config: Environment configuration and settings
- logging: Structured logging with trace_id support
- errors: Standardized error classes and HTTP conversion

Usage:
    from app.core import settings, setup_logging, set_trace_id
    from app.core import ValidationError, CoordinatesUnavailableError
"""

# Configuration
from app.core.config import settings, get_settings

# Logging
from app.core.logging import (
    setup_logging,
    set_trace_id,
    get_trace_id,
    get_logger
)

# Errors
from app.core.errors import (
    AppError,
    ValidationError,
    UnauthorizedError,
    ForbiddenError,
    NotFoundError,
    ServiceUnavailableError,
    GeoError,
    CoordinatesUnavailableError,
    InvalidCoordinateError,
    AvailabilityLookupError,
    error_payload,
    from_http_exception,
    to_http_exception
)

__all__ = [
    # Config
    "settings",
    "get_settings",

    # Logging
    "setup_logging",
    "set_trace_id",
    "get_trace_id",
    "get_logger",

    # Errors
    "AppError",
    "ValidationError",
    "UnauthorizedError",
    "ForbiddenError",
    "NotFoundError",
    "ServiceUnavailableError",
    "GeoError",
    "CoordinatesUnavailableError",
    "InvalidCoordinateError",
    "AvailabilityLookupError",
    "error_payload",
    "from_http_exception",
    "to_http_exception",
]
