"""
Typed intermediate form of a parsed time expression.

Every node is a frozen dataclass and owns its children; ``Node`` is the closed
union the resolver dispatches on.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


class Direction(str, Enum):
    """Which way a relative expression points from its anchor."""

    BEFORE = "before"
    AFTER = "after"


class Unit(str, Enum):
    """Calendar units used by offsets and modifiable periods."""

    SECOND = "second"
    MINUTE = "minute"
    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    WEEKEND = "weekend"
    FORTNIGHT = "fortnight"
    MONTH = "month"
    YEAR = "year"
    PAY_PERIOD = "pay period"


class Modifier(str, Enum):
    THIS = "this"
    LAST = "last"
    NEXT = "next"


class Adverb(str, Enum):
    NOW = "now"
    TODAY = "today"
    TOMORROW = "tomorrow"
    YESTERDAY = "yesterday"


class RomanDay(str, Enum):
    KALENDS = "kalends"
    NONES = "nones"
    IDES = "ides"


class Terminus(str, Enum):
    """The first and last representable moments."""

    FIRST = "first"
    LAST = "last"


class Edge(str, Enum):
    START = "start"
    END = "end"


class PeriodKind(str, Enum):
    NAMED_MONTH = "named month"
    YEAR = "year"
    MONTH_OF_YEAR = "month of year"
    RELATIVE = "relative"
    MODIFIED = "modified"


@dataclass(frozen=True)
class YearRef:
    """A year as written; two-digit years are placed relative to now."""

    value: int
    short: bool = False


@dataclass(frozen=True)
class TimeOfDay:
    hour: int
    minute: int = 0
    second: int = 0


@dataclass(frozen=True)
class AdverbDay:
    adverb: Adverb


@dataclass(frozen=True)
class CalendarDate:
    """A fully specified date, optionally with the weekday it claims to be."""

    year: YearRef
    month: int
    day: int
    weekday: int | None = None


@dataclass(frozen=True)
class PartialDate:
    """
    A date missing some fields: "Friday", "the 31st", "Friday the 13th",
    "June 5", "the ides of March". Resolved by searching from an anchor
    unless ``year`` is present.
    """

    month: int | None = None
    day: int | None = None
    weekday: int | None = None
    roman: RomanDay | None = None
    year: YearRef | None = None


Day = Union[AdverbDay, CalendarDate, PartialDate]


@dataclass(frozen=True)
class Universal:
    pass


@dataclass(frozen=True)
class Moment:
    """A day and/or a time of day, or one of the termini of time."""

    day: Day | None = None
    time: TimeOfDay | None = None
    terminus: Terminus | None = None


@dataclass(frozen=True)
class Period:
    """
    A calendar period. Which optional fields are set depends on ``kind``:

    - NAMED_MONTH: month
    - YEAR: year
    - MONTH_OF_YEAR: month, year
    - RELATIVE: count, unit, direction
    - MODIFIED: modifier and exactly one of unit, month, weekday
    """

    kind: PeriodKind
    modifier: Modifier | None = None
    unit: Unit | None = None
    month: int | None = None
    weekday: int | None = None
    year: YearRef | None = None
    count: int | None = None
    direction: Direction | None = None


@dataclass(frozen=True)
class PeriodBoundary:
    """The first or last second of another expression's interval."""

    edge: Edge
    period: Node


@dataclass(frozen=True)
class RelativeOffset:
    """``count`` units before or after ``anchor``; no anchor means now."""

    count: int
    unit: Unit
    direction: Direction
    anchor: Node | None = None


@dataclass(frozen=True)
class TwoPointRange:
    left: Node
    right: Node
    inclusive_end: bool


@dataclass(frozen=True)
class Since:
    anchor: Node


Node = Union[
    Universal,
    Moment,
    Period,
    PeriodBoundary,
    RelativeOffset,
    TwoPointRange,
    Since,
]
