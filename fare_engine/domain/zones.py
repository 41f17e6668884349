"""
Zone Registry
=============

Static catalog of bounding-box zones: airports (separate pickup / dropoff
fees) and special zones (congestion charge, clean-air zones, toll crossings,
bridges) with optional time-windowed activation.

Containment
-----------
A point is inside a boundary iff ``south <= lat <= north`` and
``west <= lng <= east``.  Edges count as inside.

Route detection
---------------
A zone is on-route if **any** sampled coordinate of the route falls inside
its boundary.  This is point sampling, not segment / polygon intersection:
a route that clips a zone corner between two samples is not detected.

Complexity
----------
* ``find_airports_near``:   O(A_r)  -- A_r = airports in the region (or all)
* ``find_zones_for_route``: O(Z_r x S) -- S = route samples
"""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime, tzinfo
from typing import Iterable, Mapping, Optional, Sequence
from zoneinfo import ZoneInfo

from .entities import Airport, Boundary, Coordinate, OperatingHours, Zone
from .enums import Region


def contains_point(boundary: Boundary, lat: float, lng: float) -> bool:
    return (
        boundary.south <= lat <= boundary.north
        and boundary.west <= lng <= boundary.east
    )


class ZoneRegistry:
    """Read-only lookup over airports and special zones, indexed by region."""

    def __init__(
        self,
        airports: Iterable[Airport],
        zones: Iterable[Zone],
        timezone: tzinfo | str = "Europe/London",
    ):
        self._airports: dict[str, Airport] = {a.code: a for a in airports}
        self._zones: dict[str, Zone] = {z.key: z for z in zones}
        self.timezone = ZoneInfo(timezone) if isinstance(timezone, str) else timezone

        airports_by_region: dict[Region, list[str]] = defaultdict(list)
        for airport in self._airports.values():
            airports_by_region[airport.region].append(airport.code)
        zones_by_region: dict[Region, list[str]] = defaultdict(list)
        for zone in self._zones.values():
            zones_by_region[zone.region].append(zone.key)

        self._airports_by_region = {r: tuple(c) for r, c in airports_by_region.items()}
        self._zones_by_region = {r: tuple(k) for r, k in zones_by_region.items()}

    # ── Catalog access ────────────────────────────────────────────────

    @property
    def airports(self) -> Mapping[str, Airport]:
        return dict(self._airports)

    @property
    def zones(self) -> Mapping[str, Zone]:
        return dict(self._zones)

    def airport(self, code: str) -> Airport:
        return self._airports[code]

    def zone(self, key: str) -> Zone:
        return self._zones[key]

    # ── Predicates ────────────────────────────────────────────────────

    def is_zone_active(self, zone: Zone, when: datetime) -> bool:
        """
        Zones without operating hours are always active.

        Naive datetimes are taken to be operator-local civil time; aware
        datetimes are converted to it first.
        """
        hours: Optional[OperatingHours] = zone.operating_hours
        if hours is None:
            return True

        local = when if when.tzinfo is None else when.astimezone(self.timezone)
        return (
            local.weekday() in hours.days
            and hours.start_hour <= local.hour < hours.end_hour
        )

    def find_airports_near(
        self, point: Coordinate, region: Optional[Region] = None
    ) -> list[str]:
        codes = (
            self._airports_by_region.get(region, ())
            if region is not None
            else self._airports.keys()
        )
        return [
            code
            for code in codes
            if contains_point(self._airports[code].boundary, point.lat, point.lng)
        ]

    def find_zones_for_route(
        self, samples: Sequence[Coordinate], region: Optional[Region] = None
    ) -> list[str]:
        keys = (
            self._zones_by_region.get(region, ())
            if region is not None
            else self._zones.keys()
        )
        matching: list[str] = []
        for key in keys:
            boundary = self._zones[key].boundary
            if any(contains_point(boundary, p.lat, p.lng) for p in samples):
                matching.append(key)
        return matching


# ── Default UK catalog ────────────────────────────────────────────────

_WEEKDAYS = frozenset({0, 1, 2, 3, 4})

UK_AIRPORTS: tuple[Airport, ...] = (
    # London
    Airport("LHR", "Heathrow Airport", Boundary(51.490746, 51.453873, -0.414696, -0.461946), 7.5, 6.0, Region.LONDON),
    Airport("LGW", "Gatwick Airport", Boundary(51.167842, 51.141653, -0.156885, -0.190532), 8.0, 6.0, Region.LONDON),
    Airport("LTN", "Luton Airport", Boundary(51.886328, 51.868648, -0.360506, -0.389516), 6.0, 6.0, Region.LONDON),
    Airport("STN", "Stansted Airport", Boundary(51.895683, 51.875186, 0.251262, 0.225384), 10.0, 7.0, Region.LONDON),
    Airport("LCY", "London City Airport", Boundary(51.508354, 51.500822, 0.058022, 0.042487), 6.5, 6.5, Region.LONDON),
    # Manchester area
    Airport("MAN", "Manchester Airport", Boundary(53.372, 53.358, -2.265, -2.288), 5.0, 4.0, Region.MANCHESTER),
    Airport("LPL", "Liverpool John Lennon Airport", Boundary(53.341, 53.329, -2.839, -2.858), 4.0, 3.0, Region.MANCHESTER),
    # Birmingham
    Airport("BHX", "Birmingham Airport", Boundary(52.461, 52.445, -1.724, -1.749), 5.0, 4.0, Region.BIRMINGHAM),
    # Scotland
    Airport("EDI", "Edinburgh Airport", Boundary(55.957, 55.939, -3.351, -3.373), 5.0, 4.0, Region.SCOTLAND),
    Airport("GLA", "Glasgow Airport", Boundary(55.876, 55.858, -4.416, -4.44), 4.5, 3.5, Region.SCOTLAND),
    # Wales
    Airport("CWL", "Cardiff Airport", Boundary(51.405, 51.39, -3.333, -3.355), 4.0, 3.0, Region.WALES),
    # Northern Ireland
    Airport("BFS", "Belfast International Airport", Boundary(54.673, 54.645, -6.205, -6.235), 4.0, 3.0, Region.NORTHERN_IRELAND),
    Airport("BHD", "George Best Belfast City Airport", Boundary(54.623, 54.61, -5.865, -5.885), 4.0, 3.0, Region.NORTHERN_IRELAND),
    # Other
    Airport("BRS", "Bristol Airport", Boundary(51.391, 51.377, -2.71, -2.728), 4.5, 3.5, Region.OTHER),
    Airport("EMA", "East Midlands Airport", Boundary(52.84, 52.825, -1.318, -1.338), 4.0, 3.0, Region.OTHER),
    Airport("NCL", "Newcastle Airport", Boundary(55.045, 55.032, -1.685, -1.71), 4.0, 3.0, Region.OTHER),
)

_CLEAN_AIR_EXEMPT = frozenset({"electric", "euro6-diesel", "euro4-petrol"})

UK_SPECIAL_ZONES: tuple[Zone, ...] = (
    Zone(
        "CONGESTION_CHARGE",
        "London Congestion Charge Zone",
        Boundary(51.530918, 51.498929, -0.080392, -0.144839),
        fee=7.5,
        operating_hours=OperatingHours(_WEEKDAYS, 7, 18),
        exemptions=frozenset({"electric", "hybrid"}),
        region=Region.LONDON,
    ),
    Zone(
        "ULEZ",
        "London Ultra Low Emission Zone",
        Boundary(51.530918, 51.498929, -0.080392, -0.144839),
        fee=12.5,
        exemptions=_CLEAN_AIR_EXEMPT,
        region=Region.LONDON,
    ),
    Zone(
        "DARTFORD_CROSSING",
        "Dartford Crossing",
        Boundary(51.47544, 51.457114, 0.27271, 0.247647),
        fee=4.0,
        region=Region.LONDON,
    ),
    Zone(
        "MANCHESTER_CLEAN_AIR",
        "Manchester Clean Air Zone",
        Boundary(53.51, 53.39, -2.15, -2.32),
        fee=8.0,
        exemptions=_CLEAN_AIR_EXEMPT,
        region=Region.MANCHESTER,
    ),
    Zone(
        "BIRMINGHAM_CLEAN_AIR",
        "Birmingham Clean Air Zone",
        Boundary(52.49, 52.465, -1.875, -1.92),
        fee=8.0,
        exemptions=_CLEAN_AIR_EXEMPT,
        region=Region.BIRMINGHAM,
    ),
    Zone(
        "MERSEY_GATEWAY",
        "Mersey Gateway Bridge",
        Boundary(53.37, 53.35, -2.73, -2.76),
        fee=2.0,
        region=Region.MANCHESTER,
    ),
    Zone(
        "SEVERN_BRIDGE",
        "Severn Bridge",
        Boundary(51.625, 51.605, -2.635, -2.655),
        fee=5.5,
        region=Region.WALES,
    ),
    Zone(
        "M6_TOLL",
        "M6 Toll Road",
        Boundary(52.689, 52.556, -1.691, -2.004),
        fee=6.9,
        region=Region.BIRMINGHAM,
    ),
)


def default_zone_registry(timezone: tzinfo | str = "Europe/London") -> ZoneRegistry:
    return ZoneRegistry(UK_AIRPORTS, UK_SPECIAL_ZONES, timezone)
