"""
Shared test fixtures.

The route provider is replaced by ``FakeRouteProvider`` so no test touches
Mapbox or Redis.  Default catalogs are used unchanged.
"""

from __future__ import annotations

from datetime import datetime
from typing import AsyncGenerator, Optional, Sequence
from zoneinfo import ZoneInfo

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from fare_engine.api.app import create_app
from fare_engine.domain.entities import Coordinate, RouteDetails
from fare_engine.domain.pricing import FareCalculator
from fare_engine.domain.surcharges import default_surcharge_table
from fare_engine.domain.vehicles import default_vehicle_catalog
from fare_engine.domain.zones import default_zone_registry

LONDON_TZ = ZoneInfo("Europe/London")

# Locations clear of every airport and special zone unless named otherwise.
READING = Coordinate(51.4543, -0.9781)
WOKINGHAM = Coordinate(51.4112, -0.8339)
BRACKNELL = Coordinate(51.4160, -0.7490)
HEATHROW = Coordinate(51.4700, -0.4543)
CENTRAL_LONDON = Coordinate(51.5100, -0.1200)  # congestion charge / ULEZ box
PARIS = Coordinate(48.8566, 2.3522)


def at(year: int, month: int, day: int, hour: int, minute: int = 0) -> datetime:
    """Operator-local aware datetime."""
    return datetime(year, month, day, hour, minute, tzinfo=LONDON_TZ)


# 2024-01-15 is a Monday; 03:00 is non-peak, so every surcharge is 0.
QUIET_MONDAY = at(2024, 1, 15, 3)


class FakeRouteProvider:
    """Returns canned routes, keyed by origin, and records every call."""

    def __init__(self, distance_miles: float = 12.0, duration_minutes: float = 25.0):
        self.default: Optional[RouteDetails] = RouteDetails(distance_miles, duration_minutes)
        self.by_origin: dict[Coordinate, RouteDetails] = {}
        self.error: Optional[Exception] = None
        self.calls: list[tuple[Coordinate, Coordinate, tuple[Coordinate, ...]]] = []

    def route_from(self, origin: Coordinate, distance_miles: float, duration_minutes: float = 20.0):
        self.by_origin[origin] = RouteDetails(distance_miles, duration_minutes)

    async def get_distance(
        self,
        origin: Coordinate,
        destination: Coordinate,
        waypoints: Sequence[Coordinate] = (),
    ) -> Optional[RouteDetails]:
        self.calls.append((origin, destination, tuple(waypoints)))
        if self.error is not None:
            raise self.error
        return self.by_origin.get(origin, self.default)


# ── Fixtures ──────────────────────────────────────────────────────────


@pytest.fixture
def provider() -> FakeRouteProvider:
    return FakeRouteProvider()


@pytest.fixture
def calculator(provider: FakeRouteProvider) -> FareCalculator:
    return FareCalculator(
        vehicles=default_vehicle_catalog(),
        zones=default_zone_registry(LONDON_TZ),
        surcharges=default_surcharge_table(LONDON_TZ),
        provider=provider,
    )


@pytest_asyncio.fixture
async def client(calculator: FareCalculator) -> AsyncGenerator[AsyncClient, None]:
    app = create_app(calculator=calculator)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
