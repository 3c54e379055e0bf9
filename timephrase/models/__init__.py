"""Data models for timephrase."""

from .ast import (
    Adverb,
    AdverbDay,
    CalendarDate,
    Direction,
    Edge,
    Modifier,
    Moment,
    Node,
    PartialDate,
    Period,
    PeriodBoundary,
    PeriodKind,
    RelativeOffset,
    RomanDay,
    Since,
    Terminus,
    TimeOfDay,
    TwoPointRange,
    Unit,
    Universal,
    YearRef,
)
from .instant import CalendarSpan, Instant, InstantRangeError, Interval
from .resolution import ResolverConfig

__all__ = [
    "Adverb",
    "AdverbDay",
    "CalendarDate",
    "CalendarSpan",
    "Direction",
    "Edge",
    "Instant",
    "InstantRangeError",
    "Interval",
    "Modifier",
    "Moment",
    "Node",
    "PartialDate",
    "Period",
    "PeriodBoundary",
    "PeriodKind",
    "RelativeOffset",
    "ResolverConfig",
    "RomanDay",
    "Since",
    "Terminus",
    "TimeOfDay",
    "TwoPointRange",
    "Unit",
    "Universal",
    "YearRef",
]
