"""
Time Surcharge Table
====================

Flat per-vehicle surcharge keyed by ``weekday group x time period``.

* Weekday group: Friday, Saturday and Sunday are **weekends**; Monday to
  Thursday are weekdays.
* Period by local hour: [0, 6) non-peak, [6, 15) peak-medium,
  [15, 24) peak-high.
* A missing matrix entry resolves to 0.
"""

from __future__ import annotations

from datetime import date, datetime, tzinfo
from typing import Mapping
from zoneinfo import ZoneInfo

from .enums import PERIOD_BANDS, WEEKEND_DAYS, TimePeriod, WeekdayGroup

SurchargeMatrix = Mapping[tuple[WeekdayGroup, TimePeriod], Mapping[str, float]]


def weekday_group(day: date) -> WeekdayGroup:
    return WeekdayGroup.WEEKENDS if day.weekday() in WEEKEND_DAYS else WeekdayGroup.WEEKDAYS


def time_period(hour: int) -> TimePeriod:
    for start, end, period in PERIOD_BANDS:
        if start <= hour < end:
            return period
    raise ValueError(f"hour out of range: {hour}")


class SurchargeTable:
    def __init__(self, matrix: SurchargeMatrix, timezone: tzinfo | str = "Europe/London"):
        self._matrix = {key: dict(row) for key, row in matrix.items()}
        self.timezone = ZoneInfo(timezone) if isinstance(timezone, str) else timezone

    def surcharge(
        self, vehicle_id: str, group: WeekdayGroup, period: TimePeriod
    ) -> float:
        return self._matrix.get((group, period), {}).get(vehicle_id, 0.0)

    def surcharge_at(self, vehicle_id: str, when: datetime) -> float:
        """Surcharge for a pickup time; aware datetimes are read in local time."""
        local = when if when.tzinfo is None else when.astimezone(self.timezone)
        return self.surcharge(vehicle_id, weekday_group(local), time_period(local.hour))

    def as_dict(self) -> dict[str, dict[str, dict[str, float]]]:
        out: dict[str, dict[str, dict[str, float]]] = {}
        for (group, period), row in self._matrix.items():
            out.setdefault(group.value, {})[period.value] = dict(row)
        return out


def _row(saloon, estate, mpv6, mpv8, executive, executive_mpv, vip_saloon, vip_suv):
    return {
        "saloon": saloon,
        "estate": estate,
        "mpv-6": mpv6,
        "mpv-8": mpv8,
        "executive": executive,
        "executive-mpv": executive_mpv,
        "vip-saloon": vip_saloon,
        "vip-suv": vip_suv,
    }


DEFAULT_SURCHARGES: SurchargeMatrix = {
    (WeekdayGroup.WEEKDAYS, TimePeriod.NON_PEAK): _row(0, 0, 0, 0, 0, 0, 0, 0),
    (WeekdayGroup.WEEKDAYS, TimePeriod.PEAK_MEDIUM): _row(3.54, 4.00, 5.00, 6.00, 6.00, 8.00, 10.00, 12.00),
    (WeekdayGroup.WEEKDAYS, TimePeriod.PEAK_HIGH): _row(5.00, 5.50, 7.00, 8.00, 8.00, 10.00, 12.50, 15.00),
    (WeekdayGroup.WEEKENDS, TimePeriod.NON_PEAK): _row(3.00, 3.50, 4.00, 5.00, 5.00, 6.00, 8.00, 10.00),
    (WeekdayGroup.WEEKENDS, TimePeriod.PEAK_MEDIUM): _row(5.00, 5.50, 7.00, 8.00, 8.00, 10.00, 12.50, 15.00),
    (WeekdayGroup.WEEKENDS, TimePeriod.PEAK_HIGH): _row(6.00, 6.50, 8.00, 9.50, 9.50, 12.00, 15.00, 18.00),
}


def default_surcharge_table(timezone: tzinfo | str = "Europe/London") -> SurchargeTable:
    return SurchargeTable(DEFAULT_SURCHARGES, timezone)
