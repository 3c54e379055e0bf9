"""
Temporal Parser for natural language time expressions.

Parses expressions like 'last month', 'Friday the 13th', 'since yesterday'
or 'from Monday through Thursday' into half-open time ranges.
"""

from __future__ import annotations

import logging
from datetime import datetime

from pydantic import BaseModel, Field

from timephrase.models import CalendarSpan, Instant, Interval, ResolverConfig
from timephrase.models.calendar import MONTH_NAMES, WEEKDAY_NAMES
from timephrase.services import grammar
from timephrase.services.errors import ErrorKind, TimeError
from timephrase.services.extract import extract
from timephrase.services.resolver import resolve

logger = logging.getLogger(__name__)


class TemporalResult(BaseModel):
    """Result of parsing a temporal expression."""

    success: bool
    start: str | None = Field(default=None, description="Inclusive start, ISO 8601")
    end: str | None = Field(default=None, description="Exclusive end, ISO 8601")
    explanation: str
    original_phrase: str
    error_kind: ErrorKind | None = None


def parse_time_range(
    phrase: str, now: Instant | datetime, config: ResolverConfig | None = None
) -> Interval:
    """
    Parse a phrase and resolve it relative to now.

    Args:
        phrase: English time expression
        now: Reference instant; a datetime loses sub-second precision and tzinfo
        config: Disambiguation flags, defaults to ResolverConfig()

    Returns:
        Half-open interval the phrase denotes

    Raises:
        ParseError: If the phrase is not a recognized time expression
        ResolveError: If it names an impossible date or a backward range
    """
    if isinstance(now, datetime):
        now = Instant.from_datetime(now)
    node = extract(grammar.parse(phrase))
    return resolve(node, now, config)


def is_parsable(phrase: str) -> bool:
    """Whether the phrase matches the grammar; does not resolve it."""
    return grammar.get_matcher().matches(phrase)


def describe(interval: Interval) -> str:
    """Human-readable rendering of an interval."""
    if interval.start == interval.end:
        return f"the instant {interval.start}"
    if interval.total_seconds() == 1:
        return f"{_day_name(interval.start)} at {interval.start.isoformat()[-8:]}"
    span = interval.duration
    if span == CalendarSpan(days=1) and interval.start == interval.start.start_of_day():
        return _day_name(interval.start)
    return f"{interval.start} up to {interval.end} ({span})"


def _day_name(instant: Instant) -> str:
    weekday = WEEKDAY_NAMES[instant.weekday]
    month = MONTH_NAMES[instant.month - 1]
    return f"{weekday}, {month} {instant.day}, {instant.year}"


class TemporalParser:
    """
    Parse natural language time expressions into structured ranges.

    Unlike ``parse_time_range`` this never raises for bad input; failures
    come back as unsuccessful results carrying the error kind.
    """

    def __init__(self, config: ResolverConfig | None = None) -> None:
        self.config = config or ResolverConfig()

    def parse(self, user_input: str, now: Instant | datetime | None = None) -> TemporalResult:
        """
        Parse temporal expression, return structured result with explanation.

        Args:
            user_input: Natural language time expression
            now: Reference instant, defaults to the current local time

        Returns:
            TemporalResult with the resolved range and a human-readable explanation
        """
        if now is None:
            now = datetime.now()
        phrase = user_input.strip()
        try:
            interval = parse_time_range(phrase, now, self.config)
        except TimeError as e:
            logger.debug("Could not resolve %r: %s", phrase, e)
            return TemporalResult(
                success=False,
                explanation=e.message,
                original_phrase=user_input,
                error_kind=e.kind,
            )

        return TemporalResult(
            success=True,
            start=interval.start.isoformat(),
            end=interval.end.isoformat(),
            explanation=f"Interpreted as {describe(interval)}",
            original_phrase=user_input,
        )


temporal_parser = TemporalParser()
