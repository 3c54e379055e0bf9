"""Tests for calendar arithmetic, Instant and Interval."""

from datetime import datetime

import pytest

from timephrase.models import CalendarSpan, Instant, InstantRangeError, Interval
from timephrase.models.calendar import (
    civil_from_days,
    days_from_civil,
    days_in_month,
    is_leap_year,
    max_days_in_month,
)


class TestCalendar:
    """Test proleptic Gregorian helpers."""

    @pytest.mark.parametrize(
        "year,leap",
        [(2000, True), (1900, False), (2024, True), (2023, False), (0, True), (-4, True), (-100, False)],
    )
    def test_leap_years(self, year: int, leap: bool) -> None:
        """Centuries are leap years only when divisible by 400."""
        assert is_leap_year(year) is leap

    def test_days_in_february(self) -> None:
        assert days_in_month(2024, 2) == 29
        assert days_in_month(1900, 2) == 28
        assert max_days_in_month(2) == 29
        assert max_days_in_month(6) == 30

    def test_epoch_is_day_zero(self) -> None:
        assert days_from_civil(1970, 1, 1) == 0
        assert days_from_civil(1969, 12, 31) == -1
        assert days_from_civil(2000, 3, 1) == 11017

    @pytest.mark.parametrize("days", [-3000000, -719468, -1, 0, 59, 11016, 2932896])
    def test_civil_from_days_inverts_days_from_civil(self, days: int) -> None:
        assert days_from_civil(*civil_from_days(days)) == days


class TestInstant:
    """Test Instant validation and arithmetic."""

    def test_rejects_impossible_dates(self) -> None:
        """February 29 only exists in leap years."""
        Instant(2000, 2, 29)
        Instant(2024, 2, 29)
        with pytest.raises(ValueError):
            Instant(1900, 2, 29)
        with pytest.raises(ValueError):
            Instant(2024, 6, 31)

    def test_rejects_out_of_range_fields(self) -> None:
        for fields in [(10000,), (-10000,), (2024, 13), (2024, 1, 1, 24), (2024, 1, 1, 0, 60)]:
            with pytest.raises(ValueError):
                Instant(*fields)

    def test_ordering_is_chronological(self) -> None:
        assert Instant(-1) < Instant(0) < Instant(1)
        assert Instant(2024, 6, 15, 10) < Instant(2024, 6, 15, 10, 0, 1)
        assert Instant.MIN < Instant(2024) < Instant.MAX

    def test_weekday(self) -> None:
        """Monday is 0."""
        assert Instant(2024, 6, 15).weekday == 5
        assert Instant(1969, 5, 6).weekday == 1
        assert Instant(1970, 1, 1).weekday == 3

    def test_isoformat_signs_extended_years(self) -> None:
        assert str(Instant(2024, 6, 15, 10, 5, 3)) == "2024-06-15T10:05:03"
        assert Instant(-43, 3, 15).isoformat() == "-0043-03-15T00:00:00"
        assert Instant(0).isoformat() == "0000-01-01T00:00:00"

    def test_plus_seconds_crosses_days(self) -> None:
        assert Instant(2023, 12, 31, 23, 59, 59).plus_seconds(1) == Instant(2024)
        assert Instant(2024).plus_seconds(-1) == Instant(2023, 12, 31, 23, 59, 59)

    def test_plus_months_clamps_day(self) -> None:
        assert Instant(2024, 1, 31).plus_months(1) == Instant(2024, 2, 29)
        assert Instant(2023, 1, 31).plus_months(1) == Instant(2023, 2, 28)
        assert Instant(2024, 3, 31).plus_months(-13) == Instant(2023, 2, 28)
        assert Instant(2024, 2, 29).plus_years(1) == Instant(2025, 2, 28)

    def test_arithmetic_past_the_range_raises(self) -> None:
        with pytest.raises(InstantRangeError):
            Instant.MAX.plus_seconds(1)
        with pytest.raises(InstantRangeError):
            Instant.MIN.plus_days(-1)

    def test_datetime_round_trip_drops_subseconds(self) -> None:
        value = datetime(2024, 6, 15, 10, 30, 5, 123456)
        instant = Instant.from_datetime(value)
        assert instant == Instant(2024, 6, 15, 10, 30, 5)
        assert instant.to_datetime() == value.replace(microsecond=0)

    def test_epoch_seconds(self) -> None:
        assert Instant(1970, 1, 2).epoch_seconds == 86400
        assert Instant.from_epoch_seconds(-1) == Instant(1969, 12, 31, 23, 59, 59)


class TestInterval:
    """Test half-open intervals."""

    def test_end_before_start_raises(self) -> None:
        with pytest.raises(ValueError):
            Interval(Instant(2024, 2), Instant(2024, 1))

    def test_point_is_one_second_wide(self) -> None:
        point = Interval.point(Instant(2024, 6, 15, 10))
        assert point.total_seconds() == 1
        assert point.end == Instant(2024, 6, 15, 10, 0, 1)

    def test_day(self) -> None:
        day = Interval.day(Instant(2024, 2, 28, 13, 5))
        assert day == Interval(Instant(2024, 2, 28), Instant(2024, 2, 29))

    def test_contains_is_half_open(self) -> None:
        interval = Interval(Instant(2024, 6, 10), Instant(2024, 6, 14))
        assert interval.contains(Instant(2024, 6, 10))
        assert interval.contains(Instant(2024, 6, 13, 23, 59, 59))
        assert not interval.contains(Instant(2024, 6, 14))

    def test_duration_is_calendar_aware(self) -> None:
        interval = Interval(Instant(2024, 1, 31), Instant(2024, 3, 1))
        assert interval.duration == CalendarSpan(months=1, days=1)
        assert Interval(Instant(2023), Instant(2024)).duration == CalendarSpan(years=1)

    def test_duration_str(self) -> None:
        span = Interval(Instant(2024, 6, 14), Instant(2024, 6, 15, 10)).duration
        assert str(span) == "1 day, 10 hours"
        assert str(CalendarSpan()) == "0 seconds"
