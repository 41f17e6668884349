"""
Route distance providers.

* ``MapboxDistanceProvider`` -- Mapbox Directions API over httpx; the
  production provider.
* ``StraightLineDistanceProvider`` -- haversine path x road factor, for
  local development and tests.  Never used as a fallback for Mapbox.
"""

from __future__ import annotations

import logging
from typing import Sequence

import httpx

from fare_engine.domain.distance import path_miles
from fare_engine.domain.entities import Coordinate, RouteDetails
from fare_engine.domain.exceptions import (
    NoRouteFoundError,
    ProviderAuthError,
    ProviderError,
    ProviderRateLimitError,
    ProviderTimeoutError,
    ValidationError,
)

logger = logging.getLogger(__name__)

MILES_PER_METRE = 0.000621371


class MapboxDistanceProvider:
    def __init__(self, token: str, base_url: str, timeout: float = 10.0):
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    async def get_distance(
        self,
        origin: Coordinate,
        destination: Coordinate,
        waypoints: Sequence[Coordinate] = (),
    ) -> RouteDetails:
        """Shortest of the returned alternatives, in miles and minutes."""
        points = [origin, *waypoints, destination]
        coordinates = ";".join(f"{p.lng},{p.lat}" for p in points)
        url = f"{self.base_url}/{coordinates}"
        params = {
            "access_token": self.token,
            "alternatives": "true",
            "geometries": "geojson",
            "overview": "full",
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(url, params=params)
        except httpx.TimeoutException as e:
            logger.warning("Mapbox request timed out after %.1fs", self.timeout)
            raise ProviderTimeoutError(f"Request timed out after {self.timeout}s") from e
        except httpx.HTTPError as e:
            logger.error("Mapbox transport error: %s", e)
            raise ProviderError(f"Network error: {e}") from e

        self._raise_for_status(response)

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderError("Route provider returned an unreadable response") from e
        routes = data.get("routes") or []
        if data.get("code") != "Ok" or not routes:
            raise NoRouteFoundError(
                data.get("message") or "No route found between the requested locations"
            )

        best = min(routes, key=lambda r: r["distance"])
        samples = tuple(
            Coordinate(lat, lng)
            for lng, lat in (best.get("geometry") or {}).get("coordinates", [])
        )
        return RouteDetails(
            distance_miles=best["distance"] * MILES_PER_METRE,
            duration_minutes=best["duration"] / 60,
            samples=samples,
        )

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        status = response.status_code
        if status < 400:
            return
        logger.error("Mapbox returned HTTP %d", status)
        if status in (401, 403):
            raise ProviderAuthError("Route provider rejected the access token")
        if status == 429:
            raise ProviderRateLimitError("Route provider rate limit exceeded")
        if status == 422:
            raise ValidationError("Invalid coordinates for routing")
        raise ProviderError(f"Route provider error: HTTP {status}")


class StraightLineDistanceProvider:
    def __init__(self, road_factor: float = 1.3, speed_mph: float = 30.0):
        self.road_factor = road_factor
        self.speed_mph = speed_mph

    async def get_distance(
        self,
        origin: Coordinate,
        destination: Coordinate,
        waypoints: Sequence[Coordinate] = (),
    ) -> RouteDetails:
        points = (origin, *waypoints, destination)
        miles = path_miles(points) * self.road_factor
        return RouteDetails(
            distance_miles=miles,
            duration_minutes=miles / self.speed_mph * 60,
            samples=points,
        )
