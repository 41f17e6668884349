"""Ports the pricing core depends on; adapters live in ``fare_engine.infrastructure``."""

from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable

from .entities import Coordinate, RouteDetails


@runtime_checkable
class RouteDistanceProvider(Protocol):
    """
    Responsibilities:
      • Return the road distance (miles) and duration (minutes) of the
        shortest drivable route through ``waypoints`` in order.
      • Return sampled route coordinates when the backend exposes geometry.
    Raises a ``ProviderError`` subclass on failure; never guesses a distance.
    """

    async def get_distance(
        self,
        origin: Coordinate,
        destination: Coordinate,
        waypoints: Sequence[Coordinate] = (),
    ) -> RouteDetails: ...
