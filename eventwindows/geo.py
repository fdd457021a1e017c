"""
Great-circle distance between venue and attendee coordinates.

Uses the haversine formula on a spherical Earth, which is accurate to well
under half a percent at venue-proximity ranges.
"""

import math

from eventwindows.config import GeoPoint

EARTH_RADIUS_M = 6371000


def as_point(point) -> GeoPoint:
    if isinstance(point, GeoPoint):
        return point
    return GeoPoint.model_validate(point)


def distance_meters(a, b) -> float:
    """
    Calculate the great-circle distance between two points.

    Args:
        a: First point as a GeoPoint or {'lat': ..., 'lng': ...}.
        b: Second point, same forms.

    Returns:
        float: Distance in meters. Identical points give exactly 0.0.
    """
    a, b = as_point(a), as_point(b)

    lat1 = math.radians(a.lat)
    lat2 = math.radians(b.lat)
    dlat = lat2 - lat1
    dlng = math.radians(b.lng - a.lng)

    h = (
        math.sin(dlat / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(dlng / 2) ** 2
    )
    # rounding can push h a hair outside [0, 1]
    h = min(max(h, 0.0), 1.0)

    return 2 * EARTH_RADIUS_M * math.asin(math.sqrt(h))


def is_within_radius(a, b, radius_meters: float) -> bool:
    """True when the two points are no more than `radius_meters` apart."""
    return distance_meters(a, b) <= radius_meters
