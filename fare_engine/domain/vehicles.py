"""
Vehicle Rate Catalog
====================

One ``VehicleType`` per class the operator offers: capacity, minimum fare,
additional-stop fee, distance-slab table and tiered hourly rates.

Slab pricing
------------
The **total** trip distance selects exactly one band and that band's rate
is applied to the whole distance::

    distance_charge = distance x rate(band(distance))

Charges are not integrated band by band.  The charge is monotonic within a
band and may jump (up or down) at a band boundary.

Hourly tiers
------------
3-6 hours use the short-hire rate; anything else (6-12 hours, and any
duration outside [3, 12]) uses the cheaper long-hire rate.  Range
validation happens before pricing, not here.
"""

from __future__ import annotations

from typing import Iterable, Iterator, Optional, Sequence

from .entities import DistanceSlab, HourlyTiers, VehicleCapacity, VehicleType
from .exceptions import VehicleNotFoundError


def slab_rate(vehicle: VehicleType, distance_miles: float) -> float:
    """Per-mile rate of the first band whose upper bound is >= distance."""
    for slab in vehicle.slabs:
        if slab.covers(distance_miles):
            return slab.rate_per_mile
    # Catalog tables always end with an open-ended band.
    return vehicle.slabs[-1].rate_per_mile


def distance_charge(vehicle: VehicleType, distance_miles: float) -> float:
    return distance_miles * slab_rate(vehicle, distance_miles)


def hourly_rate(vehicle: VehicleType, hours: float) -> float:
    tiers = vehicle.hourly
    if tiers.tier_min_hours <= hours <= tiers.short_max_hours:
        return tiers.short_rate
    return tiers.long_rate


def hourly_tier_label(vehicle: VehicleType, hours: float) -> Optional[str]:
    tiers = vehicle.hourly
    if tiers.tier_min_hours <= hours <= tiers.short_max_hours:
        return f"{tiers.tier_min_hours:g}-{tiers.short_max_hours:g} hour rate applied"
    if tiers.short_max_hours < hours <= tiers.tier_max_hours:
        return f"{tiers.short_max_hours:g}-{tiers.tier_max_hours:g} hour rate applied"
    return None


def slab_label(vehicle: VehicleType, distance_miles: float) -> str:
    lower = 0.0
    for slab in vehicle.slabs:
        if slab.covers(distance_miles):
            if slab.upper_miles is None:
                return f"{lower:g}+"
            return f"{lower:g}-{slab.upper_miles:g}"
        lower = slab.upper_miles or lower
    return f"{lower:g}+"


class VehicleCatalog:
    """Immutable, ordered collection of vehicle classes keyed by id."""

    def __init__(self, vehicles: Iterable[VehicleType]):
        self._vehicles: dict[str, VehicleType] = {}
        for vehicle in vehicles:
            _check_slabs(vehicle)
            self._vehicles[vehicle.id] = vehicle

    def __iter__(self) -> Iterator[VehicleType]:
        return iter(self._vehicles.values())

    def __len__(self) -> int:
        return len(self._vehicles)

    def __contains__(self, vehicle_id: object) -> bool:
        return vehicle_id in self._vehicles

    def get(self, vehicle_id: str) -> VehicleType:
        try:
            return self._vehicles[vehicle_id]
        except KeyError:
            raise VehicleNotFoundError(
                f"Vehicle type '{vehicle_id}' is not offered"
            ) from None


def _check_slabs(vehicle: VehicleType) -> None:
    if not vehicle.slabs or vehicle.slabs[-1].upper_miles is not None:
        raise ValueError(f"{vehicle.id}: slab table must end with an open-ended band")
    uppers = [s.upper_miles for s in vehicle.slabs[:-1]]
    if any(u is None for u in uppers) or uppers != sorted(uppers):
        raise ValueError(f"{vehicle.id}: slab bands must be ascending and non-overlapping")


# ── Default fleet ─────────────────────────────────────────────────────

# Upper bound (miles, inclusive) of each band; the last band is "300+".
SLAB_UPPER_BOUNDS: tuple[Optional[float], ...] = (
    4, 10, 15, 20, 30, 40, 50, 60, 80, 150, 300, None,
)


def _slabs(rates: Sequence[float]) -> tuple[DistanceSlab, ...]:
    if len(rates) != len(SLAB_UPPER_BOUNDS):
        raise ValueError("one rate per band expected")
    return tuple(DistanceSlab(upper, rate) for upper, rate in zip(SLAB_UPPER_BOUNDS, rates))


DEFAULT_VEHICLES: tuple[VehicleType, ...] = (
    VehicleType(
        id="saloon",
        name="Standard Saloon",
        description="Comfortable ride for up to 4 passengers",
        capacity=VehicleCapacity(passengers=4, luggage=2),
        minimum_fare=16.40,
        additional_stop_fee=2.50,
        slabs=_slabs((3.95, 3.20, 2.80, 2.80, 2.50, 2.20, 2.10, 1.85, 1.80, 1.75, 1.70, 1.60)),
        hourly=HourlyTiers(short_rate=30.00, long_rate=25.00),
        waiting_rate_per_hour=25.00,
        examples=("Toyota Prius", "Ford Mondeo"),
    ),
    VehicleType(
        id="estate",
        name="Estate",
        description="Spacious vehicle with extra luggage space",
        capacity=VehicleCapacity(passengers=4, luggage=4),
        minimum_fare=18.00,
        additional_stop_fee=2.50,
        slabs=_slabs((5.50, 5.40, 4.90, 3.80, 3.00, 2.70, 2.60, 2.35, 2.30, 2.25, 2.10, 1.80)),
        hourly=HourlyTiers(short_rate=35.00, long_rate=30.00),
        waiting_rate_per_hour=30.00,
        examples=("Volkswagen Passat Estate", "Skoda Octavia Estate"),
    ),
    VehicleType(
        id="mpv-6",
        name="MPV (6 seats)",
        description="Spacious vehicle for up to 6 passengers",
        capacity=VehicleCapacity(passengers=6, luggage=4),
        minimum_fare=35.00,
        additional_stop_fee=4.50,
        slabs=_slabs((7.00, 6.80, 5.40, 4.50, 3.40, 3.00, 2.90, 2.85, 2.80, 2.75, 2.60, 2.40)),
        hourly=HourlyTiers(short_rate=35.00, long_rate=35.00),
        waiting_rate_per_hour=35.00,
        examples=("Ford Galaxy", "Volkswagen Sharan"),
    ),
    VehicleType(
        id="mpv-8",
        name="MPV (8 seats)",
        description="Maximum capacity for passengers and luggage",
        capacity=VehicleCapacity(passengers=8, luggage=6),
        minimum_fare=45.00,
        additional_stop_fee=4.50,
        slabs=_slabs((8.00, 7.80, 7.20, 4.80, 4.20, 3.80, 3.40, 3.20, 3.00, 2.80, 2.75, 2.60)),
        hourly=HourlyTiers(short_rate=40.00, long_rate=35.00),
        waiting_rate_per_hour=40.00,
        examples=("Ford Tourneo", "Volkswagen Transporter"),
    ),
    VehicleType(
        id="executive",
        name="Executive",
        description="Premium ride in a Mercedes E-Class or equivalent",
        capacity=VehicleCapacity(passengers=3, luggage=2),
        minimum_fare=45.00,
        additional_stop_fee=5.50,
        slabs=_slabs((8.00, 7.80, 7.20, 4.80, 4.20, 3.80, 3.40, 3.20, 3.00, 2.80, 2.75, 2.60)),
        hourly=HourlyTiers(short_rate=45.00, long_rate=40.00),
        waiting_rate_per_hour=45.00,
        emission_class="hybrid",
        examples=("Mercedes E-Class", "BMW 5-Series"),
        features=("WiFi", "Bottled Water", "Flight Tracking"),
    ),
    VehicleType(
        id="executive-mpv",
        name="Executive MPV",
        description="Premium Mercedes V-Class or equivalent",
        capacity=VehicleCapacity(passengers=7, luggage=5),
        minimum_fare=65.00,
        additional_stop_fee=5.50,
        slabs=_slabs((9.00, 9.60, 9.20, 6.20, 5.00, 4.60, 4.20, 3.80, 3.70, 3.60, 3.40, 3.05)),
        hourly=HourlyTiers(short_rate=55.00, long_rate=50.00),
        waiting_rate_per_hour=55.00,
        examples=("Mercedes V-Class", "Volkswagen Caravelle"),
        features=("WiFi", "Bottled Water", "Extra Legroom"),
    ),
    VehicleType(
        id="vip-saloon",
        name="VIP Saloon",
        description="Luxury Mercedes S-Class or equivalent",
        capacity=VehicleCapacity(passengers=3, luggage=2),
        minimum_fare=85.00,
        additional_stop_fee=6.50,
        slabs=_slabs((11.00, 13.80, 11.20, 7.80, 6.40, 6.20, 5.60, 4.90, 4.60, 4.50, 4.40, 4.20)),
        hourly=HourlyTiers(short_rate=75.00, long_rate=70.00),
        waiting_rate_per_hour=65.00,
        emission_class="hybrid",
        examples=("Mercedes S-Class", "BMW 7-Series"),
        features=("WiFi", "Premium Drinks", "Professional Chauffeur"),
    ),
    VehicleType(
        id="vip-suv",
        name="VIP SUV",
        description="Luxury Range Rover or equivalent",
        capacity=VehicleCapacity(passengers=6, luggage=4),
        minimum_fare=95.00,
        additional_stop_fee=6.50,
        slabs=_slabs((12.00, 13.90, 12.40, 8.00, 7.20, 6.80, 5.70, 4.95, 4.75, 4.60, 4.50, 4.30)),
        hourly=HourlyTiers(short_rate=85.00, long_rate=80.00),
        waiting_rate_per_hour=55.00,
        examples=("Range Rover Vogue", "Mercedes GLS"),
        features=("WiFi", "Premium Drinks", "Professional Chauffeur"),
    ),
)


def default_vehicle_catalog() -> VehicleCatalog:
    return VehicleCatalog(DEFAULT_VEHICLES)
