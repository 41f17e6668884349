"""
Fare Calculator  (Strategy Pattern)
===================================

One strategy per booking type, all implementing
``price(vehicle, ctx) -> FareResult``.

Formulas (per vehicle class)
----------------------------
* **One-way**
      fare  = max(distance x slab_rate + stops x stop_fee, minimum_fare)
      total = fare + surcharge + airport_fees + zone_fees + equipment
* **Hourly**
      fare  = max(hours x tier_rate, 2 x minimum_fare)
      total = fare + surcharge + equipment
* **Return**
      wait-and-return: 2 x leg_fare + wait_hours x tier_rate / 2 + surcharge + equipment
      later-date:      (leg_out + surcharge_out) + (leg_back + surcharge_back) + equipment
      total = combined x (1 - return_discount)

Every total is then multiplied by ``num_vehicles`` and rounded (down to a
whole currency unit by default).

``FareCalculator`` is the facade: validation, service-area gate, one route
lookup per leg shared by every vehicle class, then one strategy call per
class.

Complexity: O(V) per request once routes are known (V = vehicle classes).
"""

from __future__ import annotations

import asyncio
import logging
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Mapping, Optional, Sequence

from . import messages as text
from .entities import (
    Airport,
    Coordinate,
    FareBreakdown,
    FareEstimate,
    FareResult,
    HourlyTrip,
    OneWayTrip,
    Passengers,
    ReturnTrip,
    RouteDetails,
    TripRequest,
    VehicleOption,
    VehicleType,
    Zone,
)
from .enums import EquipmentKind, ReturnType, RoundingMode
from .exceptions import (
    NoRouteFoundError,
    OutOfRangeError,
    ProviderTimeoutError,
    ServiceAreaError,
    UnsupportedBookingTypeError,
    ValidationError,
)
from .protocols import RouteDistanceProvider
from .service_area import is_location_serviceable, is_route_serviceable
from .surcharges import SurchargeTable
from .vehicles import (
    VehicleCatalog,
    distance_charge,
    hourly_rate,
    hourly_tier_label,
    slab_label,
    slab_rate,
)
from .zones import ZoneRegistry

logger = logging.getLogger(__name__)

FLOAT_TOLERANCE = 1e-9

# Endpoints closer than this in both axes, with no stops, cannot be routed.
MIN_SEPARATION_DEG = 0.001

EQUIPMENT_FEES: Mapping[EquipmentKind, float] = {
    EquipmentKind.BABY_SEAT: 5.00,
    EquipmentKind.CHILD_SEAT: 7.50,
    EquipmentKind.BOOSTER_SEAT: 5.50,
    EquipmentKind.WHEELCHAIR: 10.00,
    EquipmentKind.EXTRA_PASSENGER: 5.00,
    EquipmentKind.EXTRA_LUGGAGE: 3.00,
}

_EQUIPMENT_LABELS = {
    EquipmentKind.BABY_SEAT: "baby seat",
    EquipmentKind.CHILD_SEAT: "child seat",
    EquipmentKind.BOOSTER_SEAT: "booster seat",
    EquipmentKind.WHEELCHAIR: "wheelchair",
    EquipmentKind.EXTRA_PASSENGER: "extra passenger",
    EquipmentKind.EXTRA_LUGGAGE: "extra luggage",
}


def round_fare(amount: float, mode: RoundingMode = RoundingMode.FLOOR) -> float:
    # Tolerance absorbs float error only; sub-penny amounts still round down.
    if mode == RoundingMode.CEIL_HALF:
        return math.ceil(amount * 2 - FLOAT_TOLERANCE) / 2
    return float(math.floor(amount + FLOAT_TOLERANCE))


def equipment_items(
    passengers: Passengers,
    vehicle: VehicleType,
    fees: Mapping[EquipmentKind, float] = EQUIPMENT_FEES,
) -> list[tuple[EquipmentKind, int, float]]:
    """``(kind, count, amount)`` for every chargeable equipment category."""
    counts = {
        EquipmentKind.BABY_SEAT: passengers.baby_seat,
        EquipmentKind.CHILD_SEAT: passengers.child_seat,
        EquipmentKind.BOOSTER_SEAT: passengers.booster_seat,
        EquipmentKind.WHEELCHAIR: passengers.wheelchair,
        EquipmentKind.EXTRA_PASSENGER: max(0, passengers.count - vehicle.capacity.passengers),
        EquipmentKind.EXTRA_LUGGAGE: max(0, passengers.luggage - vehicle.capacity.luggage),
    }
    return [
        (kind, count, count * fees.get(kind, 0.0))
        for kind, count in counts.items()
        if count > 0
    ]


# ── Pricing context ───────────────────────────────────────────────────


@dataclass(frozen=True)
class RouteLeg:
    """One routed leg plus the airports and zones detected along it."""

    route: RouteDetails
    stop_count: int = 0
    pickup_airports: tuple[Airport, ...] = ()
    dropoff_airports: tuple[Airport, ...] = ()
    active_zones: tuple[Zone, ...] = ()
    inactive_zones: tuple[Zone, ...] = ()


@dataclass(frozen=True)
class PricingContext:
    """Vehicle-independent inputs, resolved once per request."""

    request: TripRequest
    outbound: Optional[RouteLeg] = None
    inbound: Optional[RouteLeg] = None  # later-date return leg


@dataclass(frozen=True)
class LegFare:
    distance_charge: float
    stop_fee: float
    floor_uplift: float

    @property
    def fare(self) -> float:
        return self.distance_charge + self.stop_fee + self.floor_uplift


def leg_fare(vehicle: VehicleType, leg: RouteLeg) -> LegFare:
    """Slab distance charge plus stop fees, floored at the minimum fare."""
    charge = distance_charge(vehicle, leg.route.distance_miles)
    stops = leg.stop_count * vehicle.additional_stop_fee
    uplift = max(0.0, vehicle.minimum_fare - (charge + stops))
    return LegFare(charge, stops, uplift)


# ── Strategy hierarchy ────────────────────────────────────────────────


class PricingStrategy(ABC):
    def __init__(
        self,
        surcharges: SurchargeTable,
        *,
        currency: str = "GBP",
        rounding: RoundingMode = RoundingMode.FLOOR,
        equipment_fees: Mapping[EquipmentKind, float] = EQUIPMENT_FEES,
    ):
        self.surcharges = surcharges
        self.currency = currency
        self.rounding = rounding
        self.equipment_fees = equipment_fees

    @abstractmethod
    def price(self, vehicle: VehicleType, ctx: PricingContext) -> FareResult: ...

    def _money(self, amount: float) -> str:
        return text.money(amount, self.currency)

    def _equipment(
        self, vehicle: VehicleType, passengers: Passengers, messages: list[str]
    ) -> float:
        total = 0.0
        for kind, count, amount in equipment_items(passengers, vehicle, self.equipment_fees):
            messages.append(f"{count} x {_EQUIPMENT_LABELS[kind]}: {self._money(amount)}")
            total += amount
        return total

    def _leg_messages(
        self, vehicle: VehicleType, leg: RouteLeg, fare: LegFare, label: str = ""
    ) -> list[str]:
        miles = leg.route.distance_miles
        prefix = f"{label}: " if label else ""
        out = [
            f"{prefix}{miles:.1f} miles at {self._money(slab_rate(vehicle, miles))}/mile "
            f"({slab_label(vehicle, miles)} mile band)",
            f"{prefix}estimated journey time {leg.route.duration_minutes:.0f} minutes",
        ]
        if fare.stop_fee:
            out.append(f"{prefix}{leg.stop_count} additional stop(s): {self._money(fare.stop_fee)}")
        if fare.floor_uplift:
            out.append(f"{prefix}minimum fare of {self._money(vehicle.minimum_fare)} applied")
        return out

    def _finish(
        self,
        vehicle: VehicleType,
        breakdown: FareBreakdown,
        ctx: PricingContext,
        messages: list[str],
    ) -> FareResult:
        n = ctx.request.num_vehicles
        total = round_fare(breakdown.subtotal * n, self.rounding)
        if n > 1:
            messages.append(f"Price for {n} vehicles")
        logger.debug("Priced %s: subtotal=%.2f x%d -> %.2f", vehicle.id, breakdown.subtotal, n, total)
        return FareResult(vehicle.id, total, self.currency, breakdown, messages)


class OneWayPricing(PricingStrategy):
    def price(self, vehicle: VehicleType, ctx: PricingContext) -> FareResult:
        leg = ctx.outbound
        fare = leg_fare(vehicle, leg)
        messages = self._leg_messages(vehicle, leg, fare)

        surcharge = self.surcharges.surcharge_at(vehicle.id, ctx.request.pickup_at)
        if surcharge:
            messages.append(f"Time surcharge: {self._money(surcharge)}")

        airport = sum(a.pickup_fee for a in leg.pickup_airports) + sum(
            a.dropoff_fee for a in leg.dropoff_airports
        )
        if airport:
            messages.append(f"Airport fees: {self._money(airport)}")

        zone_fee = 0.0
        for zone in leg.active_zones:
            if zone.is_exempt(vehicle):
                messages.append(f"{zone.name}: exempt")
            else:
                messages.append(f"{zone.name}: {self._money(zone.fee)}")
                zone_fee += zone.fee

        breakdown = FareBreakdown(
            distance_charge=fare.distance_charge,
            minimum_fare_floor=fare.floor_uplift,
            stop_fee=fare.stop_fee,
            time_surcharge=surcharge,
            airport_fee=airport,
            special_zone_fee=zone_fee,
            equipment_fee=self._equipment(vehicle, ctx.request.passengers, messages),
        )
        return self._finish(vehicle, breakdown, ctx, messages)


class HourlyPricing(PricingStrategy):
    """Time-based hire: no routing, airport or zone fees."""

    def price(self, vehicle: VehicleType, ctx: PricingContext) -> FareResult:
        hours = ctx.request.details.hours
        rate = hourly_rate(vehicle, hours)
        charge = hours * rate
        floor = 2 * vehicle.minimum_fare
        uplift = max(0.0, floor - charge)

        messages = [f"{hours:g} hours at {self._money(rate)}/hour"]
        tier = hourly_tier_label(vehicle, hours)
        if tier:
            messages.append(tier)
        if uplift:
            messages.append(f"Minimum hourly fare of {self._money(floor)} applied")

        surcharge = self.surcharges.surcharge_at(vehicle.id, ctx.request.pickup_at)
        if surcharge:
            messages.append(f"Time surcharge: {self._money(surcharge)}")

        breakdown = FareBreakdown(
            hourly_charge=charge,
            minimum_fare_floor=uplift,
            time_surcharge=surcharge,
            equipment_fee=self._equipment(vehicle, ctx.request.passengers, messages),
        )
        return self._finish(vehicle, breakdown, ctx, messages)


class ReturnPricing(PricingStrategy):
    def __init__(self, surcharges: SurchargeTable, *, return_discount_rate: float = 0.10, **kwargs):
        super().__init__(surcharges, **kwargs)
        self.return_discount_rate = return_discount_rate

    def price(self, vehicle: VehicleType, ctx: PricingContext) -> FareResult:
        trip: ReturnTrip = ctx.request.details
        out = leg_fare(vehicle, ctx.outbound)
        out_surcharge = self.surcharges.surcharge_at(vehicle.id, trip.outbound_at)
        messages = self._leg_messages(vehicle, ctx.outbound, out, "Outbound")
        if out_surcharge:
            messages.append(f"Outbound time surcharge: {self._money(out_surcharge)}")

        breakdown = FareBreakdown(
            distance_charge=out.distance_charge,
            minimum_fare_floor=out.floor_uplift,
            stop_fee=out.stop_fee,
            time_surcharge=out_surcharge,
        )

        if trip.return_type == ReturnType.WAIT_AND_RETURN:
            # Same route driven back: the return leg mirrors the outbound fare.
            breakdown.distance_charge += out.distance_charge
            breakdown.minimum_fare_floor += out.floor_uplift
            breakdown.stop_fee += out.stop_fee
            wait_rate = hourly_rate(vehicle, trip.wait_hours) / 2
            breakdown.wait_charge = trip.wait_hours * wait_rate
            messages.append(f"Return: same route, {self._money(out.fare)}")
            messages.append(
                f"Waiting {trip.wait_hours:g} hours at {self._money(wait_rate)}/hour: "
                f"{self._money(breakdown.wait_charge)}"
            )
        else:
            back = leg_fare(vehicle, ctx.inbound)
            back_surcharge = self.surcharges.surcharge_at(vehicle.id, trip.return_at)
            messages.extend(self._leg_messages(vehicle, ctx.inbound, back, "Return"))
            if back_surcharge:
                messages.append(f"Return time surcharge: {self._money(back_surcharge)}")
            breakdown.distance_charge += back.distance_charge
            breakdown.minimum_fare_floor += back.floor_uplift
            breakdown.stop_fee += back.stop_fee
            breakdown.time_surcharge += back_surcharge

        breakdown.equipment_fee = self._equipment(vehicle, ctx.request.passengers, messages)
        breakdown.return_discount = -breakdown.subtotal * self.return_discount_rate
        messages.append(
            f"Return discount ({self.return_discount_rate * 100:g}%): "
            f"-{self._money(-breakdown.return_discount)}"
        )
        return self._finish(vehicle, breakdown, ctx, messages)


# ── Calculator facade ─────────────────────────────────────────────────


class FareCalculator:
    """High-level API used by the fare routes."""

    def __init__(
        self,
        vehicles: VehicleCatalog,
        zones: ZoneRegistry,
        surcharges: SurchargeTable,
        provider: RouteDistanceProvider,
        *,
        currency: str = "GBP",
        rounding: RoundingMode = RoundingMode.FLOOR,
        return_discount_rate: float = 0.10,
        hourly_min_hours: float = 3,
        hourly_max_hours: float = 24,
        route_timeout: Optional[float] = 10.0,
        equipment_fees: Mapping[EquipmentKind, float] = EQUIPMENT_FEES,
    ):
        self.vehicles = vehicles
        self.zones = zones
        self.surcharges = surcharges
        self.provider = provider
        self.currency = currency
        self.return_discount_rate = return_discount_rate
        self.hourly_min_hours = hourly_min_hours
        self.hourly_max_hours = hourly_max_hours
        self.route_timeout = route_timeout

        common = dict(currency=currency, rounding=rounding, equipment_fees=equipment_fees)
        self._strategies: dict[type, PricingStrategy] = {
            OneWayTrip: OneWayPricing(surcharges, **common),
            HourlyTrip: HourlyPricing(surcharges, **common),
            ReturnTrip: ReturnPricing(
                surcharges, return_discount_rate=return_discount_rate, **common
            ),
        }

    def strategy_for(self, request: TripRequest) -> PricingStrategy:
        try:
            return self._strategies[type(request.details)]
        except KeyError:
            raise UnsupportedBookingTypeError(
                f"Unsupported booking type: {type(request.details).__name__}"
            ) from None

    # ── Public API ────────────────────────────────────────────────────

    async def estimate(self, request: TripRequest) -> FareEstimate:
        """Price every vehicle class, cheapest first."""
        strategy = self._admit(request)
        ctx = await self._resolve(request)

        options = [self._option(v, strategy.price(v, ctx)) for v in self.vehicles]
        options.sort(key=lambda o: o.price.total_amount)
        logger.info(
            "Estimated %s fare for %d vehicle classes",
            request.booking_type.value,
            len(options),
        )

        route = ctx.outbound.route if ctx.outbound else None
        return FareEstimate(
            booking_type=request.booking_type,
            vehicle_options=options,
            notifications=self._notifications(request, ctx),
            pricing_messages=text.pricing_messages(
                request.booking_type,
                return_discount_rate=self.return_discount_rate,
                num_vehicles=request.num_vehicles,
            ),
            distance_miles=route.distance_miles if route else None,
            duration_minutes=route.duration_minutes if route else None,
        )

    async def price_vehicle(self, request: TripRequest, vehicle_id: str) -> VehicleOption:
        """Re-price one vehicle class, e.g. when confirming a quoted booking."""
        vehicle = self.vehicles.get(vehicle_id)
        strategy = self._admit(request)
        ctx = await self._resolve(request)
        return self._option(vehicle, strategy.price(vehicle, ctx))

    # ── Admission ─────────────────────────────────────────────────────

    def _admit(self, request: TripRequest) -> PricingStrategy:
        strategy = self.strategy_for(request)
        self.validate(request)
        self.check_service_area(request)
        return strategy

    def validate(self, request: TripRequest) -> None:
        if request.num_vehicles < 1:
            raise OutOfRangeError("numVehicles must be at least 1")

        p = request.passengers
        if p.count < 1:
            raise ValidationError("At least one passenger is required")
        for name in ("luggage", "baby_seat", "child_seat", "booster_seat", "wheelchair"):
            if getattr(p, name) < 0:
                raise ValidationError(f"passengers.{name} must not be negative")

        for point in _all_points(request.details):
            if not (-90 <= point.lat <= 90 and -180 <= point.lng <= 180):
                raise ValidationError(f"Invalid coordinates: {point.lat}, {point.lng}")

        details = request.details
        if isinstance(details, HourlyTrip):
            if not self.hourly_min_hours <= details.hours <= self.hourly_max_hours:
                raise OutOfRangeError(
                    f"Hourly bookings must be between {self.hourly_min_hours:g} "
                    f"and {self.hourly_max_hours:g} hours"
                )
        elif isinstance(details, ReturnTrip):
            if details.return_type == ReturnType.WAIT_AND_RETURN:
                if details.wait_hours is None:
                    raise ValidationError("waitDuration is required for wait-and-return")
                if details.wait_hours <= 0:
                    raise OutOfRangeError("waitDuration must be greater than zero")
            elif None in (details.return_pickup, details.return_dropoff, details.return_at):
                raise ValidationError(
                    "returnPickup, returnDropoff and returnDateTime are required "
                    "for later-date returns"
                )

        for origin, destination, stops in _routed_legs(details):
            if not stops and _too_close(origin, destination):
                raise ValidationError("Pickup and dropoff locations are too close together")

    def check_service_area(self, request: TripRequest) -> None:
        for pickup, dropoff in _endpoint_pairs(request.details):
            check = is_route_serviceable(pickup, dropoff)
            if not check.serviceable:
                raise ServiceAreaError(check.message)
        for stop in _stops(request.details):
            check = is_location_serviceable(stop)
            if not check.serviceable:
                raise ServiceAreaError(f"Stop location: {check.message}")

    # ── Route resolution ──────────────────────────────────────────────

    async def _resolve(self, request: TripRequest) -> PricingContext:
        details = request.details
        if isinstance(details, OneWayTrip):
            route = await self._route(details.pickup, details.dropoff, details.stops)
            leg = self._leg_with_fees(
                route, details.pickup, details.dropoff, details.stops, request.pickup_at
            )
            return PricingContext(request, outbound=leg)

        if isinstance(details, ReturnTrip):
            if details.return_type == ReturnType.LATER_DATE:
                out, back = await asyncio.gather(
                    self._route(
                        details.outbound_pickup, details.outbound_dropoff, details.outbound_stops
                    ),
                    self._route(
                        details.return_pickup, details.return_dropoff, details.return_stops
                    ),
                )
                return PricingContext(
                    request,
                    outbound=RouteLeg(out, len(details.outbound_stops)),
                    inbound=RouteLeg(back, len(details.return_stops)),
                )
            out = await self._route(
                details.outbound_pickup, details.outbound_dropoff, details.outbound_stops
            )
            return PricingContext(request, outbound=RouteLeg(out, len(details.outbound_stops)))

        return PricingContext(request)

    async def _route(
        self, origin: Coordinate, destination: Coordinate, waypoints: Sequence[Coordinate]
    ) -> RouteDetails:
        logger.info("Requesting route with %d waypoint(s)", len(waypoints))
        call = self.provider.get_distance(origin, destination, tuple(waypoints))
        try:
            if self.route_timeout:
                route = await asyncio.wait_for(call, self.route_timeout)
            else:
                route = await call
        except asyncio.TimeoutError:
            logger.warning("Route provider timed out after %.1fs", self.route_timeout)
            raise ProviderTimeoutError(
                f"Route provider did not respond within {self.route_timeout:g}s"
            ) from None

        if route is None:
            raise NoRouteFoundError("No drivable route between the requested locations")
        logger.info(
            "Route resolved: %.2f miles, %.1f minutes",
            route.distance_miles,
            route.duration_minutes,
        )
        return route

    def _leg_with_fees(
        self,
        route: RouteDetails,
        pickup: Coordinate,
        dropoff: Coordinate,
        stops: Sequence[Coordinate],
        when: datetime,
    ) -> RouteLeg:
        samples = route.samples or (pickup, *stops, dropoff)
        active: list[Zone] = []
        inactive: list[Zone] = []
        for key in self.zones.find_zones_for_route(samples):
            zone = self.zones.zone(key)
            (active if self.zones.is_zone_active(zone, when) else inactive).append(zone)

        return RouteLeg(
            route=route,
            stop_count=len(stops),
            pickup_airports=tuple(
                self.zones.airport(c) for c in self.zones.find_airports_near(pickup)
            ),
            dropoff_airports=tuple(
                self.zones.airport(c) for c in self.zones.find_airports_near(dropoff)
            ),
            active_zones=tuple(active),
            inactive_zones=tuple(inactive),
        )

    # ── Output ────────────────────────────────────────────────────────

    @staticmethod
    def _option(vehicle: VehicleType, price: FareResult) -> VehicleOption:
        return VehicleOption(vehicle.id, vehicle.name, vehicle.capacity, price)

    def _notifications(self, request: TripRequest, ctx: PricingContext) -> list[str]:
        details = request.details
        notes: list[str] = []
        if isinstance(details, OneWayTrip):
            leg = ctx.outbound
            notes += text.airport_notifications(
                leg.pickup_airports, leg.dropoff_airports, self.currency
            )
            notes += text.zone_notifications(leg.active_zones, leg.inactive_zones, self.currency)
            notes += text.stop_notification(len(details.stops))
        elif isinstance(details, HourlyTrip):
            notes += text.booking_notifications(request.booking_type, hours=details.hours)
            notes += text.stop_notification(len(details.stops))
        else:
            notes += text.booking_notifications(
                request.booking_type,
                return_type=details.return_type,
                wait_hours=details.wait_hours,
            )
            notes += text.stop_notification(
                len(details.outbound_stops) + len(details.return_stops)
            )
        if request.num_vehicles > 1:
            notes.append(
                f"{request.num_vehicles} vehicles requested. Prices cover all vehicles."
            )
        return notes


# ── Trip geometry helpers ─────────────────────────────────────────────


def _endpoint_pairs(details) -> list[tuple[Coordinate, Coordinate]]:
    if isinstance(details, OneWayTrip):
        return [(details.pickup, details.dropoff)]
    if isinstance(details, HourlyTrip):
        return [(details.pickup, details.dropoff or details.pickup)]
    pairs = [(details.outbound_pickup, details.outbound_dropoff)]
    if details.return_type == ReturnType.LATER_DATE:
        pairs.append((details.return_pickup, details.return_dropoff))
    return pairs


def _stops(details) -> tuple[Coordinate, ...]:
    if isinstance(details, ReturnTrip):
        return details.outbound_stops + details.return_stops
    return details.stops


def _routed_legs(details) -> list[tuple[Coordinate, Coordinate, tuple[Coordinate, ...]]]:
    if isinstance(details, OneWayTrip):
        return [(details.pickup, details.dropoff, details.stops)]
    if isinstance(details, ReturnTrip):
        legs = [(details.outbound_pickup, details.outbound_dropoff, details.outbound_stops)]
        if details.return_type == ReturnType.LATER_DATE:
            legs.append((details.return_pickup, details.return_dropoff, details.return_stops))
        return legs
    return []


def _too_close(origin: Coordinate, destination: Coordinate) -> bool:
    return (
        abs(origin.lat - destination.lat) < MIN_SEPARATION_DEG
        and abs(origin.lng - destination.lng) < MIN_SEPARATION_DEG
    )


def _all_points(details) -> list[Coordinate]:
    points = [p for pair in _endpoint_pairs(details) for p in pair if p is not None]
    return points + list(_stops(details))
