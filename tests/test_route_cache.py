"""Tests for the Redis route cache (mocked Redis)."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from fare_engine.domain.entities import Coordinate, RouteDetails
from fare_engine.domain.exceptions import NoRouteFoundError
from fare_engine.infrastructure.route_cache import CachedRouteProvider, route_cache_key
from tests.conftest import READING, WOKINGHAM


def _inner(route=None, error=None):
    inner = AsyncMock()
    inner.get_distance = AsyncMock(return_value=route, side_effect=error)
    return inner


class TestRouteCache:
    def test_key_uses_six_decimals_in_order(self):
        key = route_cache_key([Coordinate(51.5, -0.1), Coordinate(51.6, -0.2)])
        assert key == "route:51.500000,-0.100000;51.600000,-0.200000"

    @pytest.mark.asyncio
    async def test_miss_calls_provider_and_stores(self):
        route = RouteDetails(12.0, 25.0, (READING, WOKINGHAM))
        inner = _inner(route)
        redis = AsyncMock()
        redis.get.return_value = None

        cache = CachedRouteProvider(inner, redis, ttl_seconds=60)
        assert await cache.get_distance(READING, WOKINGHAM) == route

        inner.get_distance.assert_awaited_once()
        redis.set.assert_awaited_once()
        assert redis.set.call_args.kwargs["ex"] == 60

    @pytest.mark.asyncio
    async def test_hit_skips_provider(self):
        route = RouteDetails(12.0, 25.0, (READING, WOKINGHAM))
        inner = _inner(route)
        redis = AsyncMock()
        redis.get.return_value = None
        cache = CachedRouteProvider(inner, redis)
        await cache.get_distance(READING, WOKINGHAM)
        stored = redis.set.call_args.args[1]

        redis.get.return_value = stored
        inner.get_distance.reset_mock()
        assert await cache.get_distance(READING, WOKINGHAM) == route
        inner.get_distance.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_errors_not_cached(self):
        inner = _inner(error=NoRouteFoundError("none"))
        redis = AsyncMock()
        redis.get.return_value = None

        cache = CachedRouteProvider(inner, redis)
        with pytest.raises(NoRouteFoundError):
            await cache.get_distance(READING, WOKINGHAM)
        redis.set.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_redis_outage_bypasses_cache(self):
        route = RouteDetails(12.0, 25.0)
        inner = _inner(route)
        redis = AsyncMock()
        redis.get.side_effect = RedisConnectionError("down")
        redis.set.side_effect = RedisConnectionError("down")

        cache = CachedRouteProvider(inner, redis)
        assert await cache.get_distance(READING, WOKINGHAM) == route
        inner.get_distance.assert_awaited_once()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "raw",
        [
            "{not json",
            '{"distance_miles": 12.0}',
            '{"distance_miles": 12.0, "duration_minutes": 25.0, "samples": null}',
        ],
    )
    async def test_unreadable_entry_falls_through_to_provider(self, raw):
        route = RouteDetails(12.0, 25.0)
        inner = _inner(route)
        redis = AsyncMock()
        redis.get.return_value = raw

        cache = CachedRouteProvider(inner, redis)
        assert await cache.get_distance(READING, WOKINGHAM) == route
        inner.get_distance.assert_awaited_once()
        redis.set.assert_awaited_once()
