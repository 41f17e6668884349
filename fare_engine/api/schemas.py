"""
Pydantic request / response schemas for the REST API.

Wire format is camelCase.  Trip requests are a discriminated union on
``bookingType``; each variant converts itself into the domain
``TripRequest`` via ``to_trip``.
"""

from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from fare_engine.domain.entities import (
    Coordinate,
    HourlyTrip,
    OneWayTrip,
    Passengers,
    ReturnTrip,
    TripRequest,
)
from fare_engine.domain.enums import BookingType, Region, ReturnType
from fare_engine.domain.exceptions import ValidationError


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )


# ── Requests ──────────────────────────────────────────────────────────


class CoordinateIn(CamelModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)

    def to_domain(self) -> Coordinate:
        return Coordinate(self.lat, self.lng)


def _coords(points: list[CoordinateIn]) -> tuple[Coordinate, ...]:
    return tuple(p.to_domain() for p in points)


class DateTimeIn(CamelModel):
    date: str = Field(..., description="YYYY-MM-DD")
    time: str = Field(..., description="HH:MM, operator local time")

    def to_datetime(self, tz: tzinfo) -> datetime:
        try:
            naive = datetime.strptime(f"{self.date} {self.time}", "%Y-%m-%d %H:%M")
        except ValueError:
            raise ValidationError(
                f"Invalid date/time: {self.date} {self.time}"
            ) from None
        return naive.replace(tzinfo=tz)


class PassengersIn(CamelModel):
    count: int = Field(1, ge=1)
    luggage: int = Field(0, ge=0)
    baby_seat: int = Field(0, ge=0)
    child_seat: int = Field(0, ge=0)
    booster_seat: int = Field(0, ge=0)
    wheelchair: int = Field(0, ge=0)

    def to_domain(self) -> Passengers:
        return Passengers(**self.model_dump())


class OneWayDetailsIn(CamelModel):
    pickup: CoordinateIn
    dropoff: CoordinateIn
    stops: list[CoordinateIn] = []


class HourlyDetailsIn(CamelModel):
    hours: float
    pickup: CoordinateIn
    dropoff: Optional[CoordinateIn] = None
    stops: list[CoordinateIn] = []


class ReturnDetailsIn(CamelModel):
    outbound_pickup: CoordinateIn
    outbound_dropoff: CoordinateIn
    outbound_date_time: DateTimeIn
    outbound_stops: list[CoordinateIn] = []
    return_type: ReturnType
    wait_duration: Optional[float] = Field(None, description="Hours, wait-and-return only")
    return_pickup: Optional[CoordinateIn] = None
    return_dropoff: Optional[CoordinateIn] = None
    return_date_time: Optional[DateTimeIn] = None
    return_stops: list[CoordinateIn] = []


class _TripRequestBase(CamelModel):
    date_time: DateTimeIn = Field(..., alias="datetime")
    passengers: PassengersIn = PassengersIn()
    num_vehicles: int = 1

    def _wrap(self, details, pickup_at: datetime) -> TripRequest:
        return TripRequest(
            details=details,
            pickup_at=pickup_at,
            passengers=self.passengers.to_domain(),
            num_vehicles=self.num_vehicles,
        )


class OneWayRequest(_TripRequestBase):
    booking_type: Literal["one-way"]
    one_way_details: OneWayDetailsIn

    def to_trip(self, tz: tzinfo) -> TripRequest:
        d = self.one_way_details
        trip = OneWayTrip(d.pickup.to_domain(), d.dropoff.to_domain(), _coords(d.stops))
        return self._wrap(trip, self.date_time.to_datetime(tz))


class HourlyRequest(_TripRequestBase):
    booking_type: Literal["hourly"]
    hourly_details: HourlyDetailsIn

    def to_trip(self, tz: tzinfo) -> TripRequest:
        d = self.hourly_details
        trip = HourlyTrip(
            hours=d.hours,
            pickup=d.pickup.to_domain(),
            dropoff=d.dropoff.to_domain() if d.dropoff else None,
            stops=_coords(d.stops),
        )
        return self._wrap(trip, self.date_time.to_datetime(tz))


class ReturnRequest(_TripRequestBase):
    booking_type: Literal["return"]
    return_details: ReturnDetailsIn

    def to_trip(self, tz: tzinfo) -> TripRequest:
        d = self.return_details
        outbound_at = d.outbound_date_time.to_datetime(tz)
        trip = ReturnTrip(
            outbound_pickup=d.outbound_pickup.to_domain(),
            outbound_dropoff=d.outbound_dropoff.to_domain(),
            outbound_at=outbound_at,
            return_type=d.return_type,
            outbound_stops=_coords(d.outbound_stops),
            wait_hours=d.wait_duration,
            return_pickup=d.return_pickup.to_domain() if d.return_pickup else None,
            return_dropoff=d.return_dropoff.to_domain() if d.return_dropoff else None,
            return_at=d.return_date_time.to_datetime(tz) if d.return_date_time else None,
            return_stops=_coords(d.return_stops),
        )
        return self._wrap(trip, outbound_at)


TripRequestIn = Annotated[
    Union[OneWayRequest, HourlyRequest, ReturnRequest],
    Field(discriminator="booking_type"),
]


# ── Responses ─────────────────────────────────────────────────────────


class CapacityOut(CamelModel):
    passengers: int
    luggage: int
    wheelchair: bool = False


class FareBreakdownOut(CamelModel):
    distance_charge: float
    hourly_charge: float
    minimum_fare_floor: float
    stop_fee: float
    time_surcharge: float
    airport_fee: float
    special_zone_fee: float
    equipment_fee: float
    wait_charge: float
    return_discount: float


class FareResultOut(CamelModel):
    vehicle_id: str
    total_amount: float
    currency: str
    breakdown: FareBreakdownOut
    messages: list[str] = []


class VehicleOptionOut(CamelModel):
    id: str
    name: str
    capacity: CapacityOut
    price: FareResultOut


class FareEstimateOut(CamelModel):
    booking_type: BookingType
    vehicle_options: list[VehicleOptionOut]
    notifications: list[str] = []
    pricing_messages: list[str] = []
    distance_miles: Optional[float] = None
    duration_minutes: Optional[float] = None


class FareEstimateResponse(CamelModel):
    success: bool = True
    data: FareEstimateOut


class VehicleOptionResponse(CamelModel):
    success: bool = True
    data: VehicleOptionOut


# ── Catalog ───────────────────────────────────────────────────────────


class DistanceSlabOut(CamelModel):
    upper_miles: Optional[float]
    rate_per_mile: float


class HourlyTiersOut(CamelModel):
    short_rate: float
    long_rate: float
    short_max_hours: float
    tier_min_hours: float
    tier_max_hours: float


class VehicleTypeOut(CamelModel):
    id: str
    name: str
    description: str
    capacity: CapacityOut
    minimum_fare: float
    additional_stop_fee: float
    slabs: list[DistanceSlabOut]
    hourly: HourlyTiersOut
    waiting_rate_per_hour: float
    emission_class: str
    examples: list[str] = []
    features: list[str] = []


class BoundaryOut(CamelModel):
    north: float
    south: float
    east: float
    west: float


class OperatingHoursOut(CamelModel):
    days: list[int]
    start_hour: int
    end_hour: int


class AirportOut(CamelModel):
    code: str
    name: str
    boundary: BoundaryOut
    pickup_fee: float
    dropoff_fee: float
    region: Region


class ZoneOut(CamelModel):
    key: str
    name: str
    boundary: BoundaryOut
    fee: float
    operating_hours: Optional[OperatingHoursOut] = None
    exemptions: list[str] = []
    region: Region


class VehicleCatalogResponse(CamelModel):
    success: bool = True
    data: list[VehicleTypeOut]


class ZoneCatalogOut(CamelModel):
    airports: list[AirportOut]
    zones: list[ZoneOut]


class ZoneCatalogResponse(CamelModel):
    success: bool = True
    data: ZoneCatalogOut


# ── Misc ──────────────────────────────────────────────────────────────


class HealthResponse(BaseModel):
    status: str = "ok"


class ErrorBody(BaseModel):
    code: str
    message: str
    details: Optional[str] = None


class ErrorResponse(BaseModel):
    success: bool = False
    error: ErrorBody
