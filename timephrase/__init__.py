"""Parse English time expressions into calendar intervals."""

from timephrase.models import Instant, Interval, ResolverConfig
from timephrase.services import (
    ErrorKind,
    ParseError,
    ResolveError,
    TemporalParser,
    TemporalResult,
    TimeError,
    is_parsable,
    parse_time_range,
)

__version__ = "0.1.0"

__all__ = [
    "ErrorKind",
    "Instant",
    "Interval",
    "ParseError",
    "ResolveError",
    "ResolverConfig",
    "TemporalParser",
    "TemporalResult",
    "TimeError",
    "is_parsable",
    "parse_time_range",
]
