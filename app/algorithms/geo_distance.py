"""
Geo-Distance Calculator

Great-circle distance between two WGS84 points using the haversine formula
against Earth's mean radius in miles. No road routing: straight-line distance
stands in for driving distance.

Missing locations are an explicit variant (UNAVAILABLE), never a silent zero.
"""

import logging
import math
from typing import Dict, Optional

from app.constants.thresholds import (
    EARTH_RADIUS_MILES,
    DISTANCE_VERY_CLOSE_MAX,
    DISTANCE_CLOSE_MAX,
    DISTANCE_MODERATE_MAX,
)
from app.core.errors import CoordinatesUnavailableError, GeoError, InvalidCoordinateError
from app.schemas.scheduling import Address, Coordinate, GeoPoint

logger = logging.getLogger(__name__)


# ============================================================================
# Distance
# ============================================================================


def validate_coordinate(point: Optional[GeoPoint]) -> Coordinate:
    """
    Check that a point is geocoded and inside WGS84 ranges.

    Raises:
        CoordinatesUnavailableError: point is None or UNAVAILABLE
        InvalidCoordinateError: lat outside [-90, 90] or lng outside [-180, 180]
    """
    if not isinstance(point, Coordinate):
        raise CoordinatesUnavailableError()

    lat, lng = point.lat, point.lng
    if not (math.isfinite(lat) and -90.0 <= lat <= 90.0):
        raise InvalidCoordinateError(
            f"Latitude out of range: {lat}",
            details={"lat": lat, "lng": lng}
        )
    if not (math.isfinite(lng) and -180.0 <= lng <= 180.0):
        raise InvalidCoordinateError(
            f"Longitude out of range: {lng}",
            details={"lat": lat, "lng": lng}
        )
    return point


def distance_miles(a: Optional[GeoPoint], b: Optional[GeoPoint]) -> float:
    """
    Haversine distance in miles.

    Symmetric, non-negative, and exactly 0.0 when both points are equal.

    Raises:
        CoordinatesUnavailableError, InvalidCoordinateError
    """
    a = validate_coordinate(a)
    b = validate_coordinate(b)

    if a == b:
        return 0.0

    d_lat = math.radians(b.lat - a.lat)
    d_lng = math.radians(b.lng - a.lng)

    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(a.lat))
        * math.cos(math.radians(b.lat))
        * math.sin(d_lng / 2) ** 2
    )
    # Floating error can push h a hair above 1 for antipodal points
    h = min(1.0, max(0.0, h))

    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_MILES * c


def address_distance(a: Optional[Address], b: Optional[Address]) -> Optional[float]:
    """Distance between two addresses, or None if either cannot be located."""
    if a is None or b is None:
        return None
    try:
        return distance_miles(a.coordinate(), b.coordinate())
    except GeoError as e:
        logger.debug(f"Distance unavailable: {e.code}")
        return None


# ============================================================================
# Display Helpers
# ============================================================================


def format_distance(distance: float) -> str:
    """Format miles for display, e.g. '< 1 mi' or '12.3 mi'."""
    if distance < 1:
        return "< 1 mi"
    return f"{distance:.1f} mi"


def distance_category(distance: float) -> Dict[str, str]:
    """
    Bucket a distance for display.

    Returns:
        Dict with label and color keys
    """
    if distance <= DISTANCE_VERY_CLOSE_MAX:
        return {"label": "Very Close", "color": "green"}
    if distance <= DISTANCE_CLOSE_MAX:
        return {"label": "Close", "color": "blue"}
    if distance <= DISTANCE_MODERATE_MAX:
        return {"label": "Moderate", "color": "yellow"}
    return {"label": "Far", "color": "red"}
