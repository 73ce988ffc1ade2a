"""Great-circle distance on a spherical Earth."""

from __future__ import annotations

import math

from floodrisk.core.types import LonLat

EARTH_RADIUS_KM = 6371.0
MILES_PER_KM = 0.621371


def haversine_km(a: LonLat, b: LonLat) -> float:
    """Distance in kilometres between two (lon, lat) points."""
    lon1, lat1 = a
    lon2, lat2 = b
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def km_to_miles(km: float) -> float:
    return km * MILES_PER_KM
