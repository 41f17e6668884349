"""
Domain entities and value objects.

Patterns used
-------------
- **Value Objects** (frozen dataclasses) for everything: catalogs are built
  once at startup and shared read-only between concurrent requests.
- **Tagged union** on ``TripRequest.details``: the booking type is derived
  from which variant is present, so a request can never carry details that
  disagree with its booking type.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import ClassVar, Optional, Union

from .enums import BookingType, Region, ReturnType


# ── Geometry ──────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Coordinate:
    lat: float
    lng: float


@dataclass(frozen=True)
class Boundary:
    north: float
    south: float
    east: float
    west: float


@dataclass(frozen=True)
class OperatingHours:
    """Active window; ``days`` uses ``datetime.weekday()`` numbering (Mon=0)."""

    days: frozenset[int]
    start_hour: int
    end_hour: int


# ── Zones ─────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Zone:
    key: str
    name: str
    boundary: Boundary
    fee: float
    operating_hours: Optional[OperatingHours] = None
    exemptions: frozenset[str] = frozenset()
    region: Region = Region.OTHER

    def is_exempt(self, vehicle: "VehicleType") -> bool:
        return vehicle.id in self.exemptions or vehicle.emission_class in self.exemptions


@dataclass(frozen=True)
class Airport:
    code: str
    name: str
    boundary: Boundary
    pickup_fee: float
    dropoff_fee: float
    region: Region = Region.OTHER


# ── Vehicles ──────────────────────────────────────────────────────────


@dataclass(frozen=True)
class VehicleCapacity:
    passengers: int
    luggage: int
    wheelchair: bool = False


@dataclass(frozen=True)
class DistanceSlab:
    """One rate band. ``upper_miles`` is inclusive; ``None`` is open-ended."""

    upper_miles: Optional[float]
    rate_per_mile: float

    def covers(self, distance_miles: float) -> bool:
        return self.upper_miles is None or distance_miles <= self.upper_miles


@dataclass(frozen=True)
class HourlyTiers:
    short_rate: float  # 3-6 hours
    long_rate: float  # 6-12 hours, also the fallback outside [3, 12]
    short_max_hours: float = 6
    tier_min_hours: float = 3
    tier_max_hours: float = 12


@dataclass(frozen=True)
class VehicleType:
    id: str
    name: str
    description: str
    capacity: VehicleCapacity
    minimum_fare: float
    additional_stop_fee: float
    slabs: tuple[DistanceSlab, ...]
    hourly: HourlyTiers
    waiting_rate_per_hour: float
    emission_class: str = "euro6-diesel"
    examples: tuple[str, ...] = ()
    features: tuple[str, ...] = ()


# ── Trip request (tagged union) ───────────────────────────────────────


@dataclass(frozen=True)
class Passengers:
    count: int = 1
    luggage: int = 0
    baby_seat: int = 0
    child_seat: int = 0
    booster_seat: int = 0
    wheelchair: int = 0


@dataclass(frozen=True)
class OneWayTrip:
    booking_type: ClassVar[BookingType] = BookingType.ONE_WAY

    pickup: Coordinate
    dropoff: Coordinate
    stops: tuple[Coordinate, ...] = ()


@dataclass(frozen=True)
class HourlyTrip:
    booking_type: ClassVar[BookingType] = BookingType.HOURLY

    hours: float
    pickup: Coordinate
    dropoff: Optional[Coordinate] = None
    stops: tuple[Coordinate, ...] = ()


@dataclass(frozen=True)
class ReturnTrip:
    booking_type: ClassVar[BookingType] = BookingType.RETURN

    outbound_pickup: Coordinate
    outbound_dropoff: Coordinate
    outbound_at: datetime
    return_type: ReturnType
    outbound_stops: tuple[Coordinate, ...] = ()
    wait_hours: Optional[float] = None
    return_pickup: Optional[Coordinate] = None
    return_dropoff: Optional[Coordinate] = None
    return_at: Optional[datetime] = None
    return_stops: tuple[Coordinate, ...] = ()


TripDetails = Union[OneWayTrip, HourlyTrip, ReturnTrip]


@dataclass(frozen=True)
class TripRequest:
    details: TripDetails
    pickup_at: datetime
    passengers: Passengers = field(default_factory=Passengers)
    num_vehicles: int = 1

    @property
    def booking_type(self) -> BookingType:
        return self.details.booking_type


# ── Routing ───────────────────────────────────────────────────────────


@dataclass(frozen=True)
class RouteDetails:
    distance_miles: float
    duration_minutes: float
    samples: tuple[Coordinate, ...] = ()


# ── Results ───────────────────────────────────────────────────────────


@dataclass
class FareBreakdown:
    distance_charge: float = 0.0
    hourly_charge: float = 0.0
    minimum_fare_floor: float = 0.0  # uplift added by the floor, not the floor itself
    stop_fee: float = 0.0
    time_surcharge: float = 0.0
    airport_fee: float = 0.0
    special_zone_fee: float = 0.0
    equipment_fee: float = 0.0
    wait_charge: float = 0.0
    return_discount: float = 0.0  # <= 0

    @property
    def subtotal(self) -> float:
        """Per-vehicle amount before the vehicle multiple and rounding."""
        return (
            self.distance_charge
            + self.hourly_charge
            + self.minimum_fare_floor
            + self.stop_fee
            + self.time_surcharge
            + self.airport_fee
            + self.special_zone_fee
            + self.equipment_fee
            + self.wait_charge
            + self.return_discount
        )


@dataclass
class FareResult:
    vehicle_id: str
    total_amount: float
    currency: str
    breakdown: FareBreakdown
    messages: list[str] = field(default_factory=list)


@dataclass
class VehicleOption:
    id: str
    name: str
    capacity: VehicleCapacity
    price: FareResult


@dataclass
class FareEstimate:
    booking_type: BookingType
    vehicle_options: list[VehicleOption]
    notifications: list[str] = field(default_factory=list)
    pricing_messages: list[str] = field(default_factory=list)
    distance_miles: Optional[float] = None
    duration_minutes: Optional[float] = None


@dataclass(frozen=True)
class ServiceCheck:
    serviceable: bool
    message: Optional[str] = None
