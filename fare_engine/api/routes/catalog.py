"""
Catalog endpoints
=================

GET /api/v1/catalog/vehicles        -- vehicle rate catalog
GET /api/v1/catalog/zones?region=   -- airports and special zones
"""

from typing import Optional

from fastapi import APIRouter, Depends

from fare_engine.api.dependencies import get_calculator
from fare_engine.api.schemas import (
    AirportOut,
    VehicleCatalogResponse,
    VehicleTypeOut,
    ZoneCatalogOut,
    ZoneCatalogResponse,
    ZoneOut,
)
from fare_engine.domain.enums import Region
from fare_engine.domain.pricing import FareCalculator

router = APIRouter(prefix="/catalog", tags=["catalog"])


@router.get(
    "/vehicles",
    response_model=VehicleCatalogResponse,
    summary="List vehicle classes and their rates",
)
async def list_vehicles(calculator: FareCalculator = Depends(get_calculator)):
    return VehicleCatalogResponse(
        data=[VehicleTypeOut.model_validate(v) for v in calculator.vehicles]
    )


@router.get(
    "/zones",
    response_model=ZoneCatalogResponse,
    summary="List airports and special zones",
)
async def list_zones(
    region: Optional[Region] = None,
    calculator: FareCalculator = Depends(get_calculator),
):
    registry = calculator.zones
    airports = [
        a for a in registry.airports.values() if region is None or a.region == region
    ]
    zones = [z for z in registry.zones.values() if region is None or z.region == region]
    return ZoneCatalogResponse(
        data=ZoneCatalogOut(
            airports=[AirportOut.model_validate(a) for a in airports],
            zones=[ZoneOut.model_validate(z) for z in zones],
        )
    )
