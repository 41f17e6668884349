"""
Service-area admission check, run before any route lookup.

A location is serviceable when it lies inside the UK bounding box and
outside every excluded area (polygon or radius).  Journey length is not
capped here: the rate catalog prices open-ended "300+" distances.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from shapely.geometry import Point, Polygon

from .distance import haversine_km
from .entities import Coordinate, ServiceCheck

UK_SOUTHWEST = Coordinate(49.9, -8.65)
UK_NORTHEAST = Coordinate(58.7, 1.76)


@dataclass(frozen=True)
class PolygonArea:
    name: str
    polygon: Polygon  # (lng, lat) vertex order
    message: str

    def contains(self, location: Coordinate) -> bool:
        return self.polygon.covers(Point(location.lng, location.lat))


@dataclass(frozen=True)
class RadiusArea:
    name: str
    center: Coordinate
    radius_km: float
    message: str

    def contains(self, location: Coordinate) -> bool:
        return (
            haversine_km(location.lat, location.lng, self.center.lat, self.center.lng)
            <= self.radius_km
        )


ExcludedArea = Union[PolygonArea, RadiusArea]


def _polygon(*points: tuple[float, float]) -> Polygon:
    return Polygon([(lng, lat) for lat, lng in points])


EXCLUDED_AREAS: tuple[ExcludedArea, ...] = (
    PolygonArea(
        "Northern Scotland Highlands",
        _polygon((57.5, -6.0), (58.7, -5.0), (58.7, -3.0), (57.5, -2.8), (57.2, -4.5)),
        "We don't currently service the remote Scottish Highlands. "
        "Please select a location further south.",
    ),
    RadiusArea(
        "Outer Hebrides",
        Coordinate(57.76, -7.01),
        60,
        "We don't currently service the Outer Hebrides islands.",
    ),
    RadiusArea(
        "Orkney Islands",
        Coordinate(59.0, -3.0),
        50,
        "We don't currently service the Orkney Islands.",
    ),
    RadiusArea(
        "Shetland Islands",
        Coordinate(60.5, -1.2),
        80,
        "We don't currently service the Shetland Islands.",
    ),
)


def is_location_in_uk(location: Coordinate) -> bool:
    return (
        UK_SOUTHWEST.lat <= location.lat <= UK_NORTHEAST.lat
        and UK_SOUTHWEST.lng <= location.lng <= UK_NORTHEAST.lng
    )


def is_location_serviceable(location: Coordinate) -> ServiceCheck:
    if not is_location_in_uk(location):
        return ServiceCheck(
            False, "We currently only service locations within the United Kingdom."
        )
    for area in EXCLUDED_AREAS:
        if area.contains(location):
            return ServiceCheck(False, area.message)
    return ServiceCheck(True)


def is_route_serviceable(pickup: Coordinate, dropoff: Coordinate) -> ServiceCheck:
    pickup_check = is_location_serviceable(pickup)
    if not pickup_check.serviceable:
        return ServiceCheck(False, f"Pickup location: {pickup_check.message}")

    dropoff_check = is_location_serviceable(dropoff)
    if not dropoff_check.serviceable:
        return ServiceCheck(False, f"Dropoff location: {dropoff_check.message}")

    return ServiceCheck(True)
