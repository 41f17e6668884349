"""Tests for the Mapbox and straight-line route providers (HTTP mocked with respx)."""

from __future__ import annotations

import httpx
import pytest
import respx

from fare_engine.domain.distance import path_miles
from fare_engine.domain.entities import Coordinate
from fare_engine.domain.exceptions import (
    NoRouteFoundError,
    ProviderAuthError,
    ProviderError,
    ProviderRateLimitError,
    ProviderTimeoutError,
    ValidationError,
)
from fare_engine.infrastructure.routing import (
    MapboxDistanceProvider,
    StraightLineDistanceProvider,
)
from tests.conftest import BRACKNELL, READING, WOKINGHAM

BASE_URL = "https://mapbox.test/directions/v5/mapbox/driving"


def _route(distance_m: float, duration_s: float, coordinates=()):
    return {
        "distance": distance_m,
        "duration": duration_s,
        "geometry": {"type": "LineString", "coordinates": [list(c) for c in coordinates]},
    }


@pytest.fixture
def mapbox():
    return MapboxDistanceProvider("test-token", BASE_URL, timeout=2.0)


class TestMapboxProvider:
    @respx.mock
    @pytest.mark.asyncio
    async def test_shortest_alternative_in_miles_and_minutes(self, mapbox):
        respx.get(url__startswith=BASE_URL).mock(
            return_value=httpx.Response(
                200,
                json={
                    "code": "Ok",
                    "routes": [
                        _route(20_000, 1500),
                        _route(16_093.44, 1200, [(-0.9781, 51.4543), (-0.8339, 51.4112)]),
                    ],
                },
            )
        )
        route = await mapbox.get_distance(READING, WOKINGHAM)
        assert route.distance_miles == pytest.approx(10.0, abs=1e-3)
        assert route.duration_minutes == 20.0
        assert route.samples == (Coordinate(51.4543, -0.9781), Coordinate(51.4112, -0.8339))

    @respx.mock
    @pytest.mark.asyncio
    async def test_request_format(self, mapbox):
        endpoint = respx.get(url__startswith=BASE_URL).mock(
            return_value=httpx.Response(200, json={"code": "Ok", "routes": [_route(1000, 60)]})
        )
        await mapbox.get_distance(READING, WOKINGHAM, [BRACKNELL])

        request = endpoint.calls.last.request
        assert request.url.path.endswith(
            "/-0.9781,51.4543;-0.749,51.416;-0.8339,51.4112"
        )
        assert request.url.params["alternatives"] == "true"
        assert request.url.params["geometries"] == "geojson"
        assert request.url.params["access_token"] == "test-token"

    @respx.mock
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status, error",
        [
            (401, ProviderAuthError),
            (403, ProviderAuthError),
            (429, ProviderRateLimitError),
            (422, ValidationError),
        ],
    )
    async def test_status_mapping(self, mapbox, status, error):
        respx.get(url__startswith=BASE_URL).mock(return_value=httpx.Response(status))
        with pytest.raises(error):
            await mapbox.get_distance(READING, WOKINGHAM)

    @respx.mock
    @pytest.mark.asyncio
    async def test_server_error(self, mapbox):
        respx.get(url__startswith=BASE_URL).mock(return_value=httpx.Response(500))
        with pytest.raises(ProviderError) as exc_info:
            await mapbox.get_distance(READING, WOKINGHAM)
        assert exc_info.type is ProviderError

    @respx.mock
    @pytest.mark.asyncio
    async def test_no_route(self, mapbox):
        respx.get(url__startswith=BASE_URL).mock(
            return_value=httpx.Response(200, json={"code": "NoRoute", "routes": []})
        )
        with pytest.raises(NoRouteFoundError):
            await mapbox.get_distance(READING, WOKINGHAM)

    @respx.mock
    @pytest.mark.asyncio
    async def test_empty_routes(self, mapbox):
        respx.get(url__startswith=BASE_URL).mock(
            return_value=httpx.Response(200, json={"code": "Ok", "routes": []})
        )
        with pytest.raises(NoRouteFoundError):
            await mapbox.get_distance(READING, WOKINGHAM)

    @respx.mock
    @pytest.mark.asyncio
    async def test_timeout(self, mapbox):
        respx.get(url__startswith=BASE_URL).mock(side_effect=httpx.ReadTimeout("slow"))
        with pytest.raises(ProviderTimeoutError):
            await mapbox.get_distance(READING, WOKINGHAM)

    @respx.mock
    @pytest.mark.asyncio
    async def test_transport_failure(self, mapbox):
        respx.get(url__startswith=BASE_URL).mock(side_effect=httpx.ConnectError("down"))
        with pytest.raises(ProviderError):
            await mapbox.get_distance(READING, WOKINGHAM)


class TestStraightLineProvider:
    @pytest.mark.asyncio
    async def test_distance_and_duration(self):
        provider = StraightLineDistanceProvider(road_factor=1.5, speed_mph=30)
        route = await provider.get_distance(READING, WOKINGHAM, [BRACKNELL])
        expected = path_miles([READING, BRACKNELL, WOKINGHAM]) * 1.5
        assert route.distance_miles == pytest.approx(expected)
        assert route.duration_minutes == pytest.approx(expected * 2)
        assert route.samples == (READING, BRACKNELL, WOKINGHAM)
