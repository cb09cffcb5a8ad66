"""Great-circle geometry helpers."""
from __future__ import annotations

from math import atan2, cos, radians, sin, sqrt

from weather_traveler.core.models import Coordinate

EARTH_RADIUS_KM = 6371.0
DEFAULT_AVERAGE_SPEED_KMH = 80.0  # highway average


def distance_km(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance in kilometres between two WGS-84 points."""
    lat1r, lon1r, lat2r, lon2r = map(radians, [a.latitude, a.longitude, b.latitude, b.longitude])
    dlat = lat2r - lat1r
    dlon = lon2r - lon1r
    h = sin(dlat / 2) ** 2 + cos(lat1r) * cos(lat2r) * sin(dlon / 2) ** 2
    # rounding can push h just outside [0, 1] for near-antipodal points
    h = min(1.0, max(0.0, h))
    return EARTH_RADIUS_KM * 2 * atan2(sqrt(h), sqrt(1 - h))


def driving_time_hours(distance: float, average_speed_kmh: float = DEFAULT_AVERAGE_SPEED_KMH) -> float:
    if average_speed_kmh <= 0:
        raise ValueError(f"average_speed_kmh must be positive, got {average_speed_kmh}")
    return distance / average_speed_kmh
