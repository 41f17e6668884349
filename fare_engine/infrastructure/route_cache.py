"""
Redis-backed route cache.

Wraps any ``RouteDistanceProvider``.  Entries are keyed on the ordered
coordinate list (6 decimal places) and expire after ``ttl_seconds``.
Provider errors are never cached.  A Redis outage degrades to a direct
provider call: the cache is an optimisation only.
"""

from __future__ import annotations

import json
import logging
from typing import Optional, Sequence

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from fare_engine.domain.entities import Coordinate, RouteDetails
from fare_engine.domain.protocols import RouteDistanceProvider

logger = logging.getLogger(__name__)


def route_cache_key(points: Sequence[Coordinate]) -> str:
    return "route:" + ";".join(f"{p.lat:.6f},{p.lng:.6f}" for p in points)


def _dump(route: RouteDetails) -> str:
    return json.dumps(
        {
            "distance_miles": route.distance_miles,
            "duration_minutes": route.duration_minutes,
            "samples": [[p.lat, p.lng] for p in route.samples],
        }
    )


def _load(raw: str) -> RouteDetails:
    data = json.loads(raw)
    return RouteDetails(
        distance_miles=data["distance_miles"],
        duration_minutes=data["duration_minutes"],
        samples=tuple(Coordinate(lat, lng) for lat, lng in data["samples"]),
    )


class CachedRouteProvider:
    def __init__(
        self,
        inner: RouteDistanceProvider,
        client: aioredis.Redis,
        ttl_seconds: int = 86_400,
    ):
        self.inner = inner
        self.redis = client
        self.ttl = ttl_seconds

    async def get_distance(
        self,
        origin: Coordinate,
        destination: Coordinate,
        waypoints: Sequence[Coordinate] = (),
    ) -> RouteDetails:
        key = route_cache_key((origin, *waypoints, destination))

        cached = await self._read(key)
        if cached is not None:
            logger.debug("Route cache hit: %s", key)
            return cached

        route = await self.inner.get_distance(origin, destination, waypoints)
        await self._write(key, route)
        return route

    async def _read(self, key: str) -> Optional[RouteDetails]:
        try:
            raw = await self.redis.get(key)
        except RedisError as e:
            logger.warning("Route cache read failed, bypassing: %s", e)
            return None
        if not raw:
            return None
        try:
            return _load(raw)
        except (ValueError, KeyError, TypeError) as e:
            logger.warning("Unreadable route cache entry %s, bypassing: %s", key, e)
            return None

    async def _write(self, key: str, route: RouteDetails) -> None:
        try:
            await self.redis.set(key, _dump(route), ex=self.ttl)
        except RedisError as e:
            logger.warning("Route cache write failed: %s", e)
