"""Unit tests for the weekday-group / time-period surcharge matrix."""

from datetime import date, datetime, timezone

import pytest

from fare_engine.domain.enums import TimePeriod, WeekdayGroup
from fare_engine.domain.surcharges import (
    SurchargeTable,
    default_surcharge_table,
    time_period,
    weekday_group,
)
from tests.conftest import at


class TestClassification:
    @pytest.mark.parametrize("day", [19, 20, 21])  # Fri, Sat, Sun
    def test_friday_to_sunday_is_weekend(self, day):
        assert weekday_group(date(2024, 1, day)) is WeekdayGroup.WEEKENDS

    @pytest.mark.parametrize("day", [15, 16, 17, 18])  # Mon-Thu
    def test_monday_to_thursday_is_weekday(self, day):
        assert weekday_group(date(2024, 1, day)) is WeekdayGroup.WEEKDAYS

    def test_period_bands(self):
        assert time_period(0) is TimePeriod.NON_PEAK
        assert time_period(5) is TimePeriod.NON_PEAK
        assert time_period(6) is TimePeriod.PEAK_MEDIUM
        assert time_period(14) is TimePeriod.PEAK_MEDIUM
        assert time_period(15) is TimePeriod.PEAK_HIGH
        assert time_period(23) is TimePeriod.PEAK_HIGH

    def test_invalid_hour(self):
        with pytest.raises(ValueError):
            time_period(24)


class TestSurchargeTable:
    def setup_method(self):
        self.table = default_surcharge_table()

    def test_weekday_non_peak_is_free(self):
        assert self.table.surcharge_at("saloon", at(2024, 1, 15, 3)) == 0

    def test_weekday_peak_medium(self):
        assert self.table.surcharge_at("saloon", at(2024, 1, 15, 10)) == 3.54

    def test_friday_evening_uses_weekend_row(self):
        assert self.table.surcharge_at("saloon", at(2024, 1, 19, 16)) == 6.00

    def test_missing_vehicle_resolves_to_zero(self):
        assert self.table.surcharge_at("hovercraft", at(2024, 1, 19, 16)) == 0.0

    def test_missing_row_resolves_to_zero(self):
        table = SurchargeTable({})
        assert table.surcharge("saloon", WeekdayGroup.WEEKDAYS, TimePeriod.PEAK_HIGH) == 0.0

    def test_aware_datetime_converted_to_local(self):
        # Thursday 23:30 UTC in July is Friday 00:30 BST: weekend, non-peak.
        when = datetime(2024, 7, 18, 23, 30, tzinfo=timezone.utc)
        assert self.table.surcharge_at("saloon", when) == 3.00

    def test_as_dict(self):
        data = self.table.as_dict()
        assert data["weekends"]["peakHigh"]["saloon"] == 6.00
