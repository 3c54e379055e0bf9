"""
Turn a parse tree into the typed AST.

The walk follows the rule names in ``grammar.py``. Every function here
expects the node shapes the grammar produces; anything else is a bug and is
reported as an InvariantError rather than blamed on the input.
"""

from __future__ import annotations

import logging
import re

from timephrase.models import (
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
from timephrase.models.ast import Day
from timephrase.services.atoms import (
    COUNT_WORDS,
    MONTHS,
    ORDINAL_WORDS,
    PERIOD_UNITS,
    UNITS,
    WEEKDAY_LETTERS,
    WEEKDAYS,
)
from timephrase.services.errors import InvariantError
from timephrase.services.matcher import ParseNode

logger = logging.getLogger(__name__)

_MODIFIERS = {
    "this": Modifier.THIS,
    "the": Modifier.THIS,
    "last": Modifier.LAST,
    "previous": Modifier.LAST,
    "next": Modifier.NEXT,
    "coming": Modifier.NEXT,
}

_RELATIVE_DIRECTIONS = {
    "last": Direction.BEFORE,
    "past": Direction.BEFORE,
    "previous": Direction.BEFORE,
    "next": Direction.AFTER,
    "coming": Direction.AFTER,
    "following": Direction.AFTER,
}

_ROMAN_DAYS = {
    "kalends": RomanDay.KALENDS,
    "calends": RomanDay.KALENDS,
    "nones": RomanDay.NONES,
    "ides": RomanDay.IDES,
}


def extract(tree: ParseNode) -> Node:
    """Build the AST for a tree returned by ``grammar.parse``."""
    expression = _require(tree, "time_expression")
    node = _only_child(expression)
    if node.name == "universal":
        result: Node = Universal()
    elif node.name == "since_expression":
        result = Since(_moment_or_period(_require(node, "moment_or_period")))
    elif node.name == "particular":
        result = _particular(node)
    else:
        raise _unexpected(node)
    logger.debug("Extracted %r from %r", result, tree.text)
    return result


def _particular(node: ParseNode) -> Node:
    inner = _only_child(node)
    if inner.name == "one_time":
        return _moment_or_period(_require(inner, "moment_or_period"))
    if inner.name != "two_times":
        raise _unexpected(inner)
    left, right = [child for child in inner.children if child.name == "moment_or_period"]
    if inner.child("between") is not None:
        inclusive = True
    else:
        connector = _only_child(_require(inner, "to"))
        inclusive = connector.name == "through"
    return TwoPointRange(_moment_or_period(left), _moment_or_period(right), inclusive)


def _moment_or_period(node: ParseNode) -> Node:
    inner = _only_child(node)
    if inner.name == "moment":
        return _moment(inner)
    if inner.name == "period":
        return _period(inner)
    raise _unexpected(inner)


# moments


def _moment(node: ParseNode) -> Node:
    offset = node.child("offset_from_now")
    if offset is not None:
        count, unit = _amount(_require(offset, "amount"))
        direction = Direction.BEFORE if offset.child("ago") else Direction.AFTER
        return RelativeOffset(count, unit, direction)

    point_in_time = node.child("point_in_time")
    if point_in_time is not None:
        point = _point_in_time(point_in_time)
    else:
        point = _period(_require(node, "period"))
    adjustment = node.child("adjustment")
    if adjustment is None:
        return point
    count, unit = _amount(_require(adjustment, "amount"))
    which = _only_child(_require(adjustment, "direction")).name
    direction = Direction.BEFORE if which == "before" else Direction.AFTER
    return RelativeOffset(count, unit, direction, anchor=point)


def _point_in_time(node: ParseNode) -> Node:
    some_day = node.child("some_day")
    if some_day is not None:
        time_node = node.find("time")
        return Moment(
            day=_some_day(some_day),
            time=_time(time_node) if time_node is not None else None,
        )

    precise = node.child("precise_time")
    if precise is not None:
        return Moment(
            day=_numeric_date(_require(precise, "n_date")),
            time=_clock(_require(precise, "hour_24")),
        )

    boundary = node.child("period_boundary")
    if boundary is not None:
        edge = _only_child(_require(boundary, "edge")).name
        return PeriodBoundary(
            Edge.START if edge == "beginning" else Edge.END,
            _moment_or_period(_require(boundary, "moment_or_period")),
        )

    terminus = node.child("terminus")
    if terminus is not None:
        first = _only_child(terminus).name == "first_time"
        return Moment(terminus=Terminus.FIRST if first else Terminus.LAST)

    return Moment(time=_time(_require(_require(node, "at_time"), "time")))


def _amount(node: ParseNode) -> tuple[int, Unit]:
    return _count(_require(node, "count")), _unit(_require(node, "unit"))


def _count(node: ParseNode) -> int:
    inner = _only_child(node)
    if inner.name == "n_count":
        return _int(inner)
    return _lookup(COUNT_WORDS, _normalize(inner.text), inner)


def _unit(node: ParseNode) -> Unit:
    key = _normalize(node.text)
    if key not in UNITS and key.endswith("s"):
        key = key[:-1]
    return Unit(_lookup(UNITS, key, node))


# days


def _some_day(node: ParseNode) -> Day:
    inner = _only_child(node)
    if inner.name == "specific_day":
        day = _only_child(inner)
        if day.name == "adverb":
            return AdverbDay(Adverb(_normalize(day.text)))
        return _date_with_year(day)
    if inner.name == "relative_day":
        return _relative_day(inner)
    raise _unexpected(inner)


def _date_with_year(node: ParseNode) -> Day:
    inner = _only_child(node)
    if inner.name == "n_date":
        return _numeric_date(inner)
    if inner.name == "a_date":
        return CalendarDate(
            year=_year(_require(inner, "year")),
            month=_month(_require(inner, "a_month")),
            day=_ordinal_or_number(_require(inner, "o_n_day", "o_day")),
            weekday=_prefix_weekday(inner),
        )
    if inner.name == "roman_date":
        return PartialDate(
            month=_month(_require(inner, "a_month")),
            roman=_roman(_require(inner, "roman")),
            year=_year(_require(inner, "year")),
        )
    raise _unexpected(inner)


def _numeric_date(node: ParseNode) -> CalendarDate:
    return CalendarDate(
        year=_year(_require(node, "numeric_year")),
        month=_int(_require(node, "n_month")),
        day=_int(_require(node, "n_day")),
    )


def _relative_day(node: ParseNode) -> PartialDate:
    inner = _only_child(node)
    if inner.name == "a_day":
        return PartialDate(weekday=_weekday(inner))
    if inner.name == "roman_day":
        month = inner.child("a_month")
        return PartialDate(
            month=_month(month) if month is not None else None,
            roman=_roman(_require(inner, "roman")),
        )
    if inner.name != "a_day_in_month":
        raise _unexpected(inner)

    day = _only_child(inner)
    weekday = _prefix_weekday(day)
    if day.name == "ordinal_day":
        ordinal = day.child("o_day") or _require(day, "n_ordinal")
        return PartialDate(day=_ordinal_or_number(ordinal), weekday=weekday)
    if day.name != "day_and_month":
        raise _unexpected(day)
    if day.child("n_month") is not None:
        return PartialDate(month=_int(day.child("n_month")), day=_int(_require(day, "n_day")))
    return PartialDate(
        month=_month(_require(day, "a_month")),
        day=_ordinal_or_number(_require(day, "o_n_day", "o_day")),
        weekday=weekday,
    )


def _prefix_weekday(node: ParseNode) -> int | None:
    prefix = node.child("day_prefix")
    if prefix is None:
        return None
    return _weekday(_require(prefix, "a_day"))


def _weekday(node: ParseNode) -> int:
    inner = _only_child(node)
    if inner.name == "weekday_letter":
        return _lookup(WEEKDAY_LETTERS, inner.text, inner)
    return _lookup(WEEKDAYS, _normalize(inner.text).rstrip("."), inner)


def _month(node: ParseNode) -> int:
    return _lookup(MONTHS, _normalize(node.text).rstrip("."), node)


def _roman(node: ParseNode) -> RomanDay:
    return _lookup(_ROMAN_DAYS, _normalize(node.text), node)


def _ordinal_or_number(node: ParseNode) -> int:
    """Day of month from an ``o_n_day``, ``o_day`` or ``n_ordinal`` node."""
    leaf = node
    while leaf.children:
        leaf = _only_child(leaf)
    if leaf.name == "n_day":
        return _int(leaf)
    if leaf.name == "n_ordinal":
        return _int(leaf, leaf.text[:-2])
    return _lookup(ORDINAL_WORDS, _normalize(leaf.text), leaf)


def _year(node: ParseNode) -> YearRef:
    """A ``year`` or ``numeric_year`` node."""
    era_year = node.child("era_year")
    if era_year is not None:
        value = _int(era_year)
        if _only_child(_require(node, "era")).name == "bce":
            # astronomical numbering: 1 BCE is year 0
            return YearRef(1 - value)
        return YearRef(value)
    inner = _only_child(node)
    if inner.name == "short_year":
        return YearRef(_int(inner, inner.text.lstrip("'")), short=True)
    return YearRef(_int(inner))


# times of day


def _time(node: ParseNode) -> TimeOfDay:
    inner = node.children[0]
    if inner.name == "named_time":
        named = _only_child(inner).name
        return TimeOfDay(12 if named == "noon" else 0)
    if inner.name == "hour_24":
        return _clock(inner)
    if inner.name != "hour_12":
        raise _unexpected(inner)
    clock = _clock(inner)
    # 12 AM is midnight, 12 PM is noon
    hour = clock.hour % 12
    if _only_child(_require(node, "am_pm")).name == "pm":
        hour += 12
    return TimeOfDay(hour, clock.minute, clock.second)


def _clock(node: ParseNode) -> TimeOfDay:
    hour = node.child("h12") or _require(node, "h24")
    minute = node.child("minute")
    second = node.child("second")
    return TimeOfDay(
        _int(hour),
        _int(minute) if minute is not None else 0,
        _int(second) if second is not None else 0,
    )


# periods


def _period(node: ParseNode) -> Period:
    inner = _only_child(node)
    if inner.name == "relative_period":
        which = _normalize(_require(inner, "relative_direction").text)
        count, unit = _amount(inner)
        return Period(
            PeriodKind.RELATIVE,
            unit=unit,
            count=count,
            direction=_lookup(_RELATIVE_DIRECTIONS, which, inner),
        )
    if inner.name == "modified_period":
        word = inner.child("modifier")
        if word is None:
            # a bare unit ("weekend") is the current one
            target = _require(inner, "period_unit")
            modifier = Modifier.THIS
        else:
            modifier = _lookup(_MODIFIERS, _normalize(word.text), inner)
            target = _only_child(_require(inner, "modifiable_period"))
        if target.name == "period_unit":
            unit = Unit(_lookup(PERIOD_UNITS, _normalize(target.text), target))
            return Period(PeriodKind.MODIFIED, modifier=modifier, unit=unit)
        if target.name == "a_month":
            return Period(PeriodKind.MODIFIED, modifier=modifier, month=_month(target))
        return Period(PeriodKind.MODIFIED, modifier=modifier, weekday=_weekday(target))
    if inner.name == "month_and_year":
        return Period(
            PeriodKind.MONTH_OF_YEAR,
            month=_month(_require(inner, "a_month")),
            year=_year(_require(inner, "year")),
        )
    if inner.name == "year_period":
        return Period(PeriodKind.YEAR, year=_year(_require(inner, "year")))
    if inner.name == "named_period":
        return Period(PeriodKind.NAMED_MONTH, month=_month(_require(inner, "a_month")))
    raise _unexpected(inner)


# helpers


def _normalize(text: str) -> str:
    return re.sub(r"\s+", " ", text.strip().lower())


def _int(node: ParseNode, text: str | None = None) -> int:
    try:
        return int(node.text if text is None else text)
    except ValueError as e:
        raise InvariantError(f"{node.name} matched non-numeric text {node.text!r}") from e


def _lookup(table: dict, key: str, node: ParseNode):
    try:
        return table[key]
    except KeyError as e:
        raise InvariantError(f"{node.name} matched unknown word {node.text!r}") from e


def _require(node: ParseNode, *names: str) -> ParseNode:
    """First direct child with any of the names."""
    for name in names:
        found = node.child(name)
        if found is not None:
            return found
    raise InvariantError(f"{node.name} node has no {' or '.join(names)} child")


def _only_child(node: ParseNode) -> ParseNode:
    named = [child for child in node.children if child.name is not None]
    if not named:
        raise InvariantError(f"{node.name} node has no children")
    return named[0]


def _unexpected(node: ParseNode) -> InvariantError:
    return InvariantError(f"unexpected {node.name} node for {node.text!r}")
