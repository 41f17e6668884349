"""
Great-circle distance using the Haversine formula.

Used by the service-area gate (radius exclusions) and by the offline
straight-line route provider.  Fares are never priced on this distance
when a real routing provider is configured.

Complexity: O(1) per call, O(n) for a path of n points.
"""

from __future__ import annotations

import math
from typing import Sequence

from .entities import Coordinate

EARTH_RADIUS_KM = 6_371.0
KM_PER_MILE = 1.609344


def haversine_km(
    lat1: float, lng1: float, lat2: float, lng2: float
) -> float:
    """Return the great-circle distance in **km** between two points."""
    lat1_r, lat2_r = math.radians(lat1), math.radians(lat2)
    dlat = math.radians(lat2 - lat1)
    dlng = math.radians(lng2 - lng1)

    a = (
        math.sin(dlat / 2) ** 2
        + math.cos(lat1_r) * math.cos(lat2_r) * math.sin(dlng / 2) ** 2
    )
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(a))


def haversine_miles(a: Coordinate, b: Coordinate) -> float:
    return haversine_km(a.lat, a.lng, b.lat, b.lng) / KM_PER_MILE


def path_miles(points: Sequence[Coordinate]) -> float:
    """Sum of great-circle hops along an ordered list of points."""
    return sum(haversine_miles(a, b) for a, b in zip(points, points[1:]))
