"""
Resolve an AST against a reference instant.

Every expression becomes a half-open ``Interval``. Fully specified
expressions ("May 6, 1969", "last week") are computed directly from ``now``;
under-specified ones ("Friday the 13th", "March") are found by searching
month by month from an anchor, backward or forward per ``default_to_past``.
Inside a two-point range the anchor is the other endpoint rather than now.
"""

from __future__ import annotations

import logging

from timephrase.models import (
    Adverb,
    AdverbDay,
    CalendarDate,
    Direction,
    Edge,
    Instant,
    InstantRangeError,
    Interval,
    Modifier,
    Moment,
    Node,
    PartialDate,
    Period,
    PeriodBoundary,
    PeriodKind,
    RelativeOffset,
    ResolverConfig,
    RomanDay,
    Since,
    Terminus,
    TimeOfDay,
    TwoPointRange,
    Unit,
    Universal,
    YearRef,
)
from timephrase.models.ast import Day
from timephrase.models.calendar import (
    MONTH_NAMES,
    SECONDS_PER_DAY,
    days_in_month,
    max_days_in_month,
)
from timephrase.models.instant import MAX_YEAR
from timephrase.services.errors import InvariantError, ResolveError

logger = logging.getLogger(__name__)

# One full Gregorian cycle; every month/day/weekday pattern recurs within it
SEARCH_LIMIT_MONTHS = 4800

# Months whose nones and ides fall two days late
_LATE_MONTHS = frozenset({3, 5, 7, 10})

_MODIFIER_STEPS = {Modifier.THIS: 0, Modifier.LAST: -1, Modifier.NEXT: 1}

_SECONDS_PER_UNIT = {Unit.SECOND: 1, Unit.MINUTE: 60, Unit.HOUR: 3600}
_DAYS_PER_UNIT = {Unit.DAY: 1, Unit.WEEK: 7, Unit.FORTNIGHT: 14}


def roman_day(month: int, roman: RomanDay) -> int:
    """Day of the month named by the kalends, nones or ides."""
    if roman is RomanDay.KALENDS:
        return 1
    if roman is RomanDay.NONES:
        return 7 if month in _LATE_MONTHS else 5
    return 15 if month in _LATE_MONTHS else 13


def resolve(node: Node, now: Instant, config: ResolverConfig | None = None) -> Interval:
    """Resolve node relative to now."""
    return Resolver(now, config or ResolverConfig()).resolve(node)


class Resolver:
    """Resolves AST nodes for one reference instant and configuration."""

    def __init__(self, now: Instant, config: ResolverConfig) -> None:
        self.now = now
        self.config = config

    def resolve(self, node: Node) -> Interval:
        """
        Resolve a top-level expression.

        Raises:
            ResolveError: If the expression names an impossible date, a
                backward range, or lands outside the representable years
        """
        try:
            interval = self._interval(node)
        except InstantRangeError as e:
            raise ResolveError(f"date arithmetic out of range: {e}") from e
        logger.debug("Resolved %r at %s to %s", node, self.now, interval)
        return interval

    # dispatch

    def _interval(
        self, node: Node, anchor: Instant | None = None, backward: bool | None = None
    ) -> Interval:
        """
        Interval for node. ``anchor`` is set only inside ranges, where it
        replaces now as the search origin for under-specified expressions.
        """
        if backward is None:
            backward = self.config.default_to_past
        if isinstance(node, Universal):
            return Interval(Instant.MIN, Instant.MAX)
        if isinstance(node, Moment):
            return self._moment(node, anchor, backward)
        if isinstance(node, Period):
            return self._period(node, anchor, backward)
        if isinstance(node, PeriodBoundary):
            return self._boundary(node, anchor, backward)
        if isinstance(node, RelativeOffset):
            return self._offset(node, anchor, backward)
        if isinstance(node, TwoPointRange):
            return self._range(node)
        if isinstance(node, Since):
            return self._since(node)
        raise InvariantError(f"cannot resolve node of type {type(node).__name__}")

    # moments

    def _moment(self, node: Moment, anchor: Instant | None, backward: bool) -> Interval:
        if node.terminus is Terminus.FIRST:
            return Interval.point(Instant.MIN)
        if node.terminus is Terminus.LAST:
            return Interval(Instant.MAX, Instant.MAX)

        if node.day is None:
            if node.time is None:
                raise InvariantError("moment has neither a day nor a time")
            origin = anchor or self.now
            instant = _at(origin.start_of_day(), node.time)
            if anchor is not None:
                # inside a range the time lands on the other endpoint's day
                if backward and instant > anchor:
                    instant = instant.plus_days(-1)
                elif not backward and instant < anchor:
                    instant = instant.plus_days(1)
            return Interval.point(instant)

        if node.time is None and node.day == AdverbDay(Adverb.NOW):
            return Interval.point(self.now)
        day = self._day(node.day, anchor or self.now, backward)
        if node.time is None:
            return Interval.day(day)
        return Interval.point(_at(day, node.time))

    def _day(self, day: Day, anchor: Instant, backward: bool) -> Instant:
        """Midnight starting the day."""
        if isinstance(day, AdverbDay):
            today = self.now.start_of_day()
            if day.adverb is Adverb.TOMORROW:
                return today.plus_days(1)
            if day.adverb is Adverb.YESTERDAY:
                return today.plus_days(-1)
            return today
        if isinstance(day, CalendarDate):
            return self._calendar_date(
                self._year(day.year), day.month, day.day, day.weekday
            )
        if isinstance(day, PartialDate):
            if day.year is not None:
                if day.month is None:
                    raise InvariantError("dated partial day without a month")
                number = roman_day(day.month, day.roman) if day.roman else day.day
                if number is None:
                    raise InvariantError("dated partial day without a day")
                return self._calendar_date(
                    self._year(day.year), day.month, number, day.weekday
                )
            return self._search_day(day, anchor, backward)
        raise InvariantError(f"unknown day type {type(day).__name__}")

    def _calendar_date(
        self, year: int, month: int, day: int, weekday: int | None
    ) -> Instant:
        if day > days_in_month(year, month):
            raise ResolveError(
                f"{MONTH_NAMES[month - 1]} {year} does not have {day} days"
            )
        date = Instant(year, month, day)
        if weekday is not None and date.weekday != weekday:
            raise ResolveError(f"{date.isoformat()[:-9]} does not fall on that weekday")
        return date

    def _search_day(self, day: PartialDate, anchor: Instant, backward: bool) -> Instant:
        """
        Nearest day matching every given field. Backward candidates must
        start at or before the anchor, forward ones must end after it.
        """
        if day.month is not None and day.day is not None:
            if day.day > max_days_in_month(day.month):
                raise ResolveError(
                    f"{MONTH_NAMES[day.month - 1]} never has {day.day} days"
                )
        step = -1 if backward else 1
        for year, month in _months_from(anchor, step):
            if day.month is not None and month != day.month:
                continue
            length = days_in_month(year, month)
            if day.roman is not None:
                numbers = [roman_day(month, day.roman)]
            elif day.day is not None:
                numbers = [day.day] if day.day <= length else []
            else:
                numbers = list(range(1, length + 1))
            if backward:
                numbers.reverse()
            for number in numbers:
                candidate = Instant(year, month, number)
                if day.weekday is not None and candidate.weekday != day.weekday:
                    continue
                if backward and candidate <= anchor:
                    return candidate
                if not backward and candidate.plus_days(1) > anchor:
                    return candidate
        raise InvariantError(
            f"no day matching {day} within {SEARCH_LIMIT_MONTHS} months of {anchor}"
        )

    def _year(self, ref: YearRef) -> int:
        if not ref.short:
            return ref.value
        short_now = self.now.year % 100
        century = self.now.year - short_now
        if ref.value > short_now:
            century -= 100
        return century + ref.value

    # periods

    def _period(self, node: Period, anchor: Instant | None, backward: bool) -> Interval:
        if node.kind is PeriodKind.NAMED_MONTH:
            return self._search_month(node.month, anchor or self.now, backward)
        if node.kind is PeriodKind.YEAR:
            return _year_interval(self._year(node.year))
        if node.kind is PeriodKind.MONTH_OF_YEAR:
            return _month_interval(self._year(node.year), node.month)
        if node.kind is PeriodKind.RELATIVE:
            if node.direction is Direction.BEFORE:
                return Interval(self._shift(self.now, node.unit, -node.count), self.now)
            return Interval(self.now, self._shift(self.now, node.unit, node.count))
        if node.kind is PeriodKind.MODIFIED:
            return self._modified(node)
        raise InvariantError(f"unknown period kind {node.kind}")

    def _search_month(self, month: int, anchor: Instant, backward: bool) -> Interval:
        for year, candidate in _months_from(anchor, -1 if backward else 1):
            if candidate != month:
                continue
            interval = _month_interval(year, month)
            if backward and interval.start <= anchor:
                return interval
            if not backward and interval.end > anchor:
                return interval
        raise InvariantError(f"month {month} not found within {SEARCH_LIMIT_MONTHS} months")

    def _modified(self, node: Period) -> Interval:
        steps = _MODIFIER_STEPS[node.modifier]
        today = self.now.start_of_day()

        if node.month is not None:
            return _month_interval(self.now.year + steps, node.month)
        if node.weekday is not None:
            week = self._week_start(today).plus_days(7 * steps)
            offset = (node.weekday - week.weekday) % 7
            return Interval.day(week.plus_days(offset))

        unit = node.unit
        if unit is Unit.DAY:
            return Interval.day(today.plus_days(steps))
        if unit is Unit.WEEK:
            start = self._week_start(today).plus_days(7 * steps)
            return Interval(start, start.plus_days(7))
        if unit is Unit.WEEKEND:
            # Saturday and Sunday of the Monday-based week
            saturday = today.plus_days(5 - today.weekday + 7 * steps)
            return Interval(saturday, saturday.plus_days(2))
        if unit is Unit.MONTH:
            start = Instant(self.now.year, self.now.month).plus_months(steps)
            return _month_interval(start.year, start.month)
        if unit is Unit.YEAR:
            return _year_interval(self.now.year + steps)
        if unit is Unit.PAY_PERIOD:
            return self._pay_period(steps)
        raise InvariantError(f"unit {unit} cannot be modified")

    def _week_start(self, today: Instant) -> Instant:
        first = 0 if self.config.monday_starts_week else 6
        return today.plus_days(-((today.weekday - first) % 7))

    def _pay_period(self, steps: int) -> Interval:
        origin = self.config.pay_period_start
        if origin is None:
            raise ResolveError("pay periods require a configured pay period start")
        length = self.config.pay_period_length
        elapsed = self.now.epoch_seconds - origin.epoch_seconds
        index = elapsed // (length * SECONDS_PER_DAY) + steps
        start = origin.plus_days(index * length)
        return Interval(start, start.plus_days(length))

    def _boundary(
        self, node: PeriodBoundary, anchor: Instant | None, backward: bool
    ) -> Interval:
        inner = self._interval(node.period, anchor, backward)
        if inner.start == inner.end:
            return inner
        if node.edge is Edge.START:
            return Interval.point(inner.start)
        return Interval(inner.end.plus_seconds(-1), inner.end)

    # relative expressions

    def _offset(
        self, node: RelativeOffset, anchor: Instant | None, backward: bool
    ) -> Interval:
        if node.anchor is None:
            base = Interval.point(self.now)
        else:
            base = self._interval(node.anchor, anchor, backward)
        count = -node.count if node.direction is Direction.BEFORE else node.count
        start = self._shift(base.start, node.unit, count)
        end = self._shift(base.end, node.unit, count)
        if end <= start and base.end > base.start:
            # month clamping squeezed both ends onto the same day
            end = start.plus_seconds(base.total_seconds())
        return Interval(start, end)

    def _shift(self, instant: Instant, unit: Unit, count: int) -> Instant:
        if unit in _SECONDS_PER_UNIT:
            return instant.plus_seconds(count * _SECONDS_PER_UNIT[unit])
        if unit in _DAYS_PER_UNIT:
            return instant.plus_days(count * _DAYS_PER_UNIT[unit])
        if unit is Unit.PAY_PERIOD:
            return instant.plus_days(count * self.config.pay_period_length)
        if unit is Unit.MONTH:
            return instant.plus_months(count)
        if unit is Unit.YEAR:
            return instant.plus_years(count)
        raise InvariantError(f"cannot shift by {unit}")

    def _since(self, node: Since) -> Interval:
        # "since Tuesday" always means the Tuesday already past
        start = self._interval(node.anchor, self.now, backward=True).start
        if start > self.now:
            raise ResolveError(f"{start} is after now ({self.now})")
        return Interval(start, self.now)

    def _range(self, node: TwoPointRange) -> Interval:
        left_fixed = _is_specific(node.left, first=True)
        right_fixed = _is_specific(node.right, first=False)

        if left_fixed and right_fixed:
            left = self._interval(node.left)
            right = self._interval(node.right)
        elif left_fixed or _is_bare_time(node.right):
            left = self._interval(node.left)
            right = self._interval(node.right, left.start, backward=False)
        elif right_fixed:
            right = self._interval(node.right)
            left = self._interval(node.left, right.start, backward=True)
        elif self.config.default_to_past:
            right = self._interval(node.right, self.now, backward=True)
            left = self._interval(node.left, right.start, backward=True)
        else:
            left = self._interval(node.left, self.now, backward=False)
            right = self._interval(node.right, left.start, backward=False)

        end = right.end if node.inclusive_end else right.start
        if end < left.start:
            raise ResolveError(f"range ends ({end}) before it starts ({left.start})")
        return Interval(left.start, end)


def _is_specific(node: Node, first: bool) -> bool:
    """
    Whether node resolves without an anchor. A bare time counts as specific
    only as the first endpoint of a range.
    """
    if isinstance(node, Moment):
        if node.terminus is not None:
            return True
        if node.day is None:
            return first
        if isinstance(node.day, PartialDate):
            return node.day.year is not None
        return True
    if isinstance(node, Period):
        return node.kind is not PeriodKind.NAMED_MONTH
    if isinstance(node, RelativeOffset):
        return node.anchor is None or _is_specific(node.anchor, first)
    return True


def _is_bare_time(node: Node) -> bool:
    return isinstance(node, Moment) and node.day is None and node.time is not None


def _at(day: Instant, time: TimeOfDay) -> Instant:
    return day.replace(hour=time.hour, minute=time.minute, second=time.second)


def _months_from(anchor: Instant, step: int):
    """(year, month) pairs starting with the anchor's month."""
    index = anchor.year * 12 + anchor.month - 1
    for _ in range(SEARCH_LIMIT_MONTHS):
        year, month = divmod(index, 12)
        yield year, month + 1
        index += step


def _start_of_year(year: int) -> Instant:
    """January 1 of year, or the last representable instant past the range."""
    if year > MAX_YEAR:
        return Instant.MAX
    return Instant(year)


def _year_interval(year: int) -> Interval:
    return Interval(Instant(year), _start_of_year(year + 1))


def _month_interval(year: int, month: int) -> Interval:
    if month == 12:
        return Interval(Instant(year, 12), _start_of_year(year + 1))
    return Interval(Instant(year, month), Instant(year, month + 1))
