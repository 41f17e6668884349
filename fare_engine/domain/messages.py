"""
Customer-facing text attached to an estimate.

* **Notifications** describe the journey (airports, zones, stops, waiting)
  and are shared by every vehicle option.
* **Pricing messages** explain the pricing rules that apply to the
  booking type.
* **Fare messages** are per vehicle and itemise what was added.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from .entities import Airport, Zone
from .enums import BookingType, ReturnType

CURRENCY_SYMBOLS = {"GBP": "£", "EUR": "€", "USD": "$"}


def money(amount: float, currency: str = "GBP") -> str:
    symbol = CURRENCY_SYMBOLS.get(currency)
    if symbol is None:
        return f"{amount:.2f} {currency}"
    return f"{symbol}{amount:.2f}"


# ── Journey notifications ─────────────────────────────────────────────


def airport_notifications(
    pickup_airports: Sequence[Airport],
    dropoff_airports: Sequence[Airport],
    currency: str = "GBP",
) -> list[str]:
    notes = [
        f"Airport pickup fee of {money(a.pickup_fee, currency)} applies at {a.name}."
        for a in pickup_airports
    ]
    notes.extend(
        f"Airport dropoff fee of {money(a.dropoff_fee, currency)} applies at {a.name}."
        for a in dropoff_airports
    )
    return notes


def zone_notifications(
    active: Iterable[Zone], inactive: Iterable[Zone], currency: str = "GBP"
) -> list[str]:
    notes = []
    for zone in active:
        if zone.exemptions:
            notes.append(
                f"Your route passes through the {zone.name}. A charge of "
                f"{money(zone.fee, currency)} applies to non-exempt vehicles."
            )
        else:
            notes.append(
                f"Your route passes through the {zone.name}. A charge of "
                f"{money(zone.fee, currency)} has been added."
            )
    for zone in inactive:
        notes.append(
            f"Your route passes through the {zone.name} outside its charging hours."
        )
    return notes


def stop_notification(stop_count: int) -> list[str]:
    if stop_count <= 0:
        return []
    plural = "s" if stop_count > 1 else ""
    return [f"Your journey includes {stop_count} additional stop{plural}."]


def booking_notifications(
    booking_type: BookingType,
    *,
    hours: float | None = None,
    return_type: ReturnType | None = None,
    wait_hours: float | None = None,
) -> list[str]:
    if booking_type is BookingType.HOURLY:
        return [
            f"Hourly booking for {hours:g} hours. The vehicle and driver "
            "remain at your disposal for the whole period."
        ]
    if booking_type is BookingType.RETURN:
        if return_type is ReturnType.WAIT_AND_RETURN:
            return [
                f"The driver will wait {wait_hours:g} hours before the return journey."
            ]
        return ["The return journey is priced at its own date and time."]
    return []


# ── Pricing rules ─────────────────────────────────────────────────────


def pricing_messages(
    booking_type: BookingType,
    *,
    return_discount_rate: float = 0.10,
    num_vehicles: int = 1,
) -> list[str]:
    messages: list[str] = []
    if booking_type is BookingType.ONE_WAY:
        messages.append(
            "Fares are based on the road distance, with a minimum fare per vehicle type."
        )
    elif booking_type is BookingType.HOURLY:
        messages.append(
            "Hourly fares use the 3-6 hour rate or the cheaper 6-12 hour rate "
            "depending on duration."
        )
        messages.append("Hourly bookings do not include airport or zone charges.")
    elif booking_type is BookingType.RETURN:
        messages.append(
            f"Return journeys include a {return_discount_rate * 100:g}% discount."
        )
    if num_vehicles > 1:
        messages.append(f"Prices shown are for {num_vehicles} vehicles.")
    return messages
