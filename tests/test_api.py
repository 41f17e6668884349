"""
Integration tests for the REST API endpoints.

The app is built around a calculator whose route provider is the
``FakeRouteProvider`` from conftest, so no network or Redis is needed.
"""

from __future__ import annotations

import pytest
from httpx import AsyncClient

from fare_engine.domain.entities import RouteDetails
from fare_engine.domain.exceptions import ProviderError

READING = {"lat": 51.4543, "lng": -0.9781}
WOKINGHAM = {"lat": 51.4112, "lng": -0.8339}
PARIS = {"lat": 48.8566, "lng": 2.3522}
QUIET_MONDAY = {"date": "2024-01-15", "time": "03:00"}


def one_way_body(**overrides):
    body = {
        "bookingType": "one-way",
        "datetime": QUIET_MONDAY,
        "passengers": {"count": 2, "luggage": 1},
        "oneWayDetails": {"pickup": READING, "dropoff": WOKINGHAM},
    }
    body.update(overrides)
    return body


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    resp = await client.get("/api/v1/admin/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


@pytest.mark.asyncio
async def test_one_way_estimate(client: AsyncClient):
    resp = await client.post("/api/v1/fares/estimate", json=one_way_body())
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True

    data = body["data"]
    assert data["bookingType"] == "one-way"
    assert data["distanceMiles"] == 12.0
    options = data["vehicleOptions"]
    totals = [o["price"]["totalAmount"] for o in options]
    assert totals == sorted(totals)

    saloon = next(o for o in options if o["id"] == "saloon")
    assert saloon["price"]["totalAmount"] == 33.0
    assert saloon["price"]["currency"] == "GBP"
    assert saloon["price"]["breakdown"]["distanceCharge"] == pytest.approx(33.6)
    assert saloon["capacity"]["passengers"] == 4


@pytest.mark.asyncio
async def test_hourly_estimate(client: AsyncClient, provider):
    resp = await client.post(
        "/api/v1/fares/estimate",
        json={
            "bookingType": "hourly",
            "datetime": QUIET_MONDAY,
            "hourlyDetails": {"hours": 4, "pickup": READING},
        },
    )
    assert resp.status_code == 200
    saloon = next(o for o in resp.json()["data"]["vehicleOptions"] if o["id"] == "saloon")
    assert saloon["price"]["totalAmount"] == 120.0
    assert provider.calls == []


@pytest.mark.asyncio
async def test_wait_and_return_estimate(client: AsyncClient, provider):
    provider.default = RouteDetails(12.5, 25)
    resp = await client.post(
        "/api/v1/fares/estimate",
        json={
            "bookingType": "return",
            "datetime": QUIET_MONDAY,
            "returnDetails": {
                "outboundPickup": READING,
                "outboundDropoff": WOKINGHAM,
                "outboundDateTime": QUIET_MONDAY,
                "returnType": "wait-and-return",
                "waitDuration": 2,
            },
        },
    )
    assert resp.status_code == 200
    saloon = next(o for o in resp.json()["data"]["vehicleOptions"] if o["id"] == "saloon")
    # 2 x 35.00 + 25.00 wait = 95.00, less 10% = 85.50.
    assert saloon["price"]["breakdown"]["waitCharge"] == 25.0
    assert saloon["price"]["totalAmount"] == 85.0


@pytest.mark.asyncio
async def test_unknown_booking_type(client: AsyncClient):
    resp = await client.post(
        "/api/v1/fares/estimate", json=one_way_body(bookingType="helicopter")
    )
    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert body["error"]["code"] == "UNSUPPORTED_BOOKING_TYPE"


@pytest.mark.asyncio
async def test_missing_details(client: AsyncClient):
    body = one_way_body()
    del body["oneWayDetails"]
    resp = await client.post("/api/v1/fares/estimate", json=body)
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_invalid_date(client: AsyncClient):
    resp = await client.post(
        "/api/v1/fares/estimate",
        json=one_way_body(datetime={"date": "2024-13-45", "time": "03:00"}),
    )
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_hours_out_of_range(client: AsyncClient):
    resp = await client.post(
        "/api/v1/fares/estimate",
        json={
            "bookingType": "hourly",
            "datetime": QUIET_MONDAY,
            "hourlyDetails": {"hours": 30, "pickup": READING},
        },
    )
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "OUT_OF_RANGE"


@pytest.mark.asyncio
async def test_location_not_serviceable(client: AsyncClient, provider):
    resp = await client.post(
        "/api/v1/fares/estimate",
        json=one_way_body(oneWayDetails={"pickup": READING, "dropoff": PARIS}),
    )
    assert resp.status_code == 422
    error = resp.json()["error"]
    assert error["code"] == "LOCATION_NOT_SERVICEABLE"
    assert error["details"].startswith("Dropoff location:")
    assert provider.calls == []


@pytest.mark.asyncio
async def test_provider_failure_is_server_error(client: AsyncClient, provider):
    provider.error = ProviderError("Route provider error: HTTP 500")
    resp = await client.post("/api/v1/fares/estimate", json=one_way_body())
    assert resp.status_code == 502
    assert resp.json()["error"]["code"] == "ROUTE_PROVIDER_ERROR"


@pytest.mark.asyncio
async def test_reprice_single_vehicle(client: AsyncClient):
    resp = await client.post("/api/v1/fares/estimate/saloon", json=one_way_body())
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["id"] == "saloon"
    assert data["price"]["totalAmount"] == 33.0


@pytest.mark.asyncio
async def test_reprice_unknown_vehicle(client: AsyncClient):
    resp = await client.post("/api/v1/fares/estimate/hovercraft", json=one_way_body())
    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "VEHICLE_NOT_FOUND"


@pytest.mark.asyncio
async def test_vehicle_catalog(client: AsyncClient):
    resp = await client.get("/api/v1/catalog/vehicles")
    assert resp.status_code == 200
    vehicles = resp.json()["data"]
    saloon = next(v for v in vehicles if v["id"] == "saloon")
    assert saloon["minimumFare"] == 16.40
    assert saloon["slabs"][0] == {"upperMiles": 4.0, "ratePerMile": 3.95}
    assert saloon["slabs"][-1]["upperMiles"] is None


@pytest.mark.asyncio
async def test_zone_catalog_region_filter(client: AsyncClient):
    resp = await client.get("/api/v1/catalog/zones", params={"region": "London"})
    assert resp.status_code == 200
    data = resp.json()["data"]
    codes = {a["code"] for a in data["airports"]}
    assert "LHR" in codes
    assert "MAN" not in codes
    ccz = next(z for z in data["zones"] if z["key"] == "CONGESTION_CHARGE")
    assert ccz["operatingHours"]["startHour"] == 7
