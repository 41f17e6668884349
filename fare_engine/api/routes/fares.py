"""
Fare endpoints
==============

POST /api/v1/fares/estimate              -- price every vehicle class
POST /api/v1/fares/estimate/{vehicle_id} -- re-price one vehicle class
"""

from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, Request

from fare_engine.api.dependencies import get_calculator, get_timezone
from fare_engine.api.middleware import limiter
from fare_engine.api.schemas import (
    ErrorResponse,
    FareEstimateOut,
    FareEstimateResponse,
    TripRequestIn,
    VehicleOptionOut,
    VehicleOptionResponse,
)
from fare_engine.config import settings
from fare_engine.domain.pricing import FareCalculator

router = APIRouter(prefix="/fares", tags=["fares"])

_ERRORS = {
    400: {"model": ErrorResponse, "description": "Invalid or out-of-range request."},
    422: {"model": ErrorResponse, "description": "Location not serviceable."},
    502: {"model": ErrorResponse, "description": "Route provider failure."},
}


@router.post(
    "/estimate",
    response_model=FareEstimateResponse,
    summary="Quote a fare for every vehicle class",
    description="Vehicle options are sorted cheapest first.",
    responses=_ERRORS,
)
@limiter.limit(settings.rate_limit)
async def estimate_fare(
    request: Request,
    body: TripRequestIn,
    calculator: FareCalculator = Depends(get_calculator),
    tz: ZoneInfo = Depends(get_timezone),
):
    estimate = await calculator.estimate(body.to_trip(tz))
    return FareEstimateResponse(data=FareEstimateOut.model_validate(estimate))


@router.post(
    "/estimate/{vehicle_id}",
    response_model=VehicleOptionResponse,
    summary="Re-price a single vehicle class",
    description="Used when confirming a booking against a quoted price.",
    responses={404: {"model": ErrorResponse, "description": "Unknown vehicle."}, **_ERRORS},
)
@limiter.limit(settings.rate_limit)
async def price_vehicle(
    request: Request,
    vehicle_id: str,
    body: TripRequestIn,
    calculator: FareCalculator = Depends(get_calculator),
    tz: ZoneInfo = Depends(get_timezone),
):
    option = await calculator.price_vehicle(body.to_trip(tz), vehicle_id)
    return VehicleOptionResponse(data=VehicleOptionOut.model_validate(option))
