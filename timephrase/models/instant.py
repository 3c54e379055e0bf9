"""Zone-naive calendar instants and the half-open intervals between them."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from datetime import datetime
from typing import ClassVar

from timephrase.models.calendar import (
    SECONDS_PER_DAY,
    civil_from_days,
    days_from_civil,
    days_in_month,
    weekday_from_days,
)

MIN_YEAR = -9999
MAX_YEAR = 9999


class InstantRangeError(ValueError):
    """Instant fields, or an arithmetic result, outside the representable calendar."""


@dataclass(frozen=True, order=True)
class Instant:
    """
    A calendar timestamp with one-second precision and no time zone.

    Years are astronomical: 1 BCE is year 0 and 44 BCE is year -43. Field
    order makes the dataclass ordering chronological.
    """

    year: int
    month: int = 1
    day: int = 1
    hour: int = 0
    minute: int = 0
    second: int = 0

    MIN: ClassVar[Instant]
    MAX: ClassVar[Instant]

    def __post_init__(self) -> None:
        if not MIN_YEAR <= self.year <= MAX_YEAR:
            raise InstantRangeError(f"year {self.year} is out of range")
        if not 1 <= self.month <= 12:
            raise InstantRangeError(f"month {self.month} is out of range")
        if not 1 <= self.day <= days_in_month(self.year, self.month):
            raise InstantRangeError(
                f"day {self.day} is out of range for month {self.month} of year {self.year}"
            )
        if not (0 <= self.hour < 24 and 0 <= self.minute < 60 and 0 <= self.second < 60):
            raise InstantRangeError(
                f"time {self.hour}:{self.minute:02}:{self.second:02} is out of range"
            )

    @classmethod
    def from_datetime(cls, value: datetime) -> Instant:
        """Drop sub-second precision and any tzinfo."""
        return cls(
            value.year, value.month, value.day, value.hour, value.minute, value.second
        )

    @classmethod
    def from_epoch_seconds(cls, seconds: int) -> Instant:
        days, rest = divmod(seconds, SECONDS_PER_DAY)
        hour, rest = divmod(rest, 3600)
        minute, second = divmod(rest, 60)
        return cls(*civil_from_days(days), hour, minute, second)

    def to_datetime(self) -> datetime:
        """Only years 1 through 9999 fit in a datetime."""
        return datetime(self.year, self.month, self.day, self.hour, self.minute, self.second)

    @property
    def days(self) -> int:
        """Day number relative to 1970-01-01."""
        return days_from_civil(self.year, self.month, self.day)

    @property
    def epoch_seconds(self) -> int:
        return self.days * SECONDS_PER_DAY + self.hour * 3600 + self.minute * 60 + self.second

    @property
    def weekday(self) -> int:
        """Monday=0 through Sunday=6."""
        return weekday_from_days(self.days)

    def start_of_day(self) -> Instant:
        return Instant(self.year, self.month, self.day)

    def replace(self, **changes: int) -> Instant:
        return dataclasses.replace(self, **changes)

    def plus_seconds(self, seconds: int) -> Instant:
        return Instant.from_epoch_seconds(self.epoch_seconds + seconds)

    def plus_days(self, days: int) -> Instant:
        year, month, day = civil_from_days(self.days + days)
        return self.replace(year=year, month=month, day=day)

    def plus_months(self, months: int) -> Instant:
        """Shift by calendar months, clamping the day to the target month."""
        year, month_index = divmod(self.year * 12 + self.month - 1 + months, 12)
        month = month_index + 1
        day = min(self.day, days_in_month(year, month))
        return self.replace(year=year, month=month, day=day)

    def plus_years(self, years: int) -> Instant:
        return self.plus_months(years * 12)

    def isoformat(self) -> str:
        if 0 <= self.year <= 9999:
            year = f"{self.year:04d}"
        else:
            year = f"{self.year:+05d}"
        return (
            f"{year}-{self.month:02d}-{self.day:02d}"
            f"T{self.hour:02d}:{self.minute:02d}:{self.second:02d}"
        )

    def __str__(self) -> str:
        return self.isoformat()


Instant.MIN = Instant(MIN_YEAR, 1, 1)
Instant.MAX = Instant(MAX_YEAR, 12, 31, 23, 59, 59)


@dataclass(frozen=True)
class CalendarSpan:
    """Field-wise calendar difference between two instants."""

    years: int = 0
    months: int = 0
    days: int = 0
    hours: int = 0
    minutes: int = 0
    seconds: int = 0

    def __str__(self) -> str:
        parts = []
        for name in ("years", "months", "days", "hours", "minutes", "seconds"):
            value = getattr(self, name)
            if value:
                parts.append(f"{value} {name[:-1] if value == 1 else name}")
        return ", ".join(parts) or "0 seconds"


@dataclass(frozen=True)
class Interval:
    """Half-open interval [start, end)."""

    start: Instant
    end: Instant

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValueError(f"interval end {self.end} precedes its start {self.start}")

    @classmethod
    def point(cls, instant: Instant) -> Interval:
        """The one-second interval starting at instant."""
        return cls(instant, instant.plus_seconds(1))

    @classmethod
    def day(cls, instant: Instant) -> Interval:
        start = instant.start_of_day()
        return cls(start, start.plus_days(1))

    @property
    def duration(self) -> CalendarSpan:
        start, end = self.start, self.end
        months = (end.year - start.year) * 12 + end.month - start.month
        anchor = start.plus_months(months)
        while months > 0 and anchor > end:
            months -= 1
            anchor = start.plus_months(months)
        days, rest = divmod(end.epoch_seconds - anchor.epoch_seconds, SECONDS_PER_DAY)
        hours, rest = divmod(rest, 3600)
        minutes, seconds = divmod(rest, 60)
        years, months = divmod(months, 12)
        return CalendarSpan(years, months, days, hours, minutes, seconds)

    def total_seconds(self) -> int:
        return self.end.epoch_seconds - self.start.epoch_seconds

    def contains(self, instant: Instant) -> bool:
        return self.start <= instant < self.end

    def __str__(self) -> str:
        return f"[{self.start}, {self.end})"
