"""Domain enumerations and classification rules."""

import enum


class BookingType(str, enum.Enum):
    ONE_WAY = "one-way"
    HOURLY = "hourly"
    RETURN = "return"


class ReturnType(str, enum.Enum):
    WAIT_AND_RETURN = "wait-and-return"
    LATER_DATE = "later-date"


class WeekdayGroup(str, enum.Enum):
    WEEKDAYS = "weekdays"
    WEEKENDS = "weekends"


class TimePeriod(str, enum.Enum):
    NON_PEAK = "nonPeak"
    PEAK_MEDIUM = "peakMedium"
    PEAK_HIGH = "peakHigh"


class Region(str, enum.Enum):
    LONDON = "London"
    MANCHESTER = "Manchester"
    BIRMINGHAM = "Birmingham"
    SCOTLAND = "Scotland"
    WALES = "Wales"
    NORTHERN_IRELAND = "Northern Ireland"
    OTHER = "Other"


class RoundingMode(str, enum.Enum):
    FLOOR = "floor"  # whole currency unit, rounded down
    CEIL_HALF = "ceil-half"  # nearest 0.50, rounded up


class EquipmentKind(str, enum.Enum):
    BABY_SEAT = "babySeat"
    CHILD_SEAT = "childSeat"
    BOOSTER_SEAT = "boosterSeat"
    WHEELCHAIR = "wheelchair"
    EXTRA_PASSENGER = "extraPassenger"
    EXTRA_LUGGAGE = "extraLuggage"


# Python weekday() numbering: Monday == 0 ... Sunday == 6.
# Friday is treated as part of the weekend for surcharge purposes.
WEEKEND_DAYS: frozenset[int] = frozenset({4, 5, 6})

# (start_hour inclusive, end_hour exclusive) -> period
PERIOD_BANDS: tuple[tuple[int, int, TimePeriod], ...] = (
    (0, 6, TimePeriod.NON_PEAK),
    (6, 15, TimePeriod.PEAK_MEDIUM),
    (15, 24, TimePeriod.PEAK_HIGH),
)
