"""
The time-expression grammar.

Rules are listed roughly top-down. Alternative order is priority: when two
alternatives can both consume the whole input, the earlier one wins, so more
specific forms come first (a full date before a bare ordinal day, a moment
before a period).

The compiled grammar is built once per process, on first use, and shared
read-only afterwards.
"""

from __future__ import annotations

import logging
import threading
import time

from timephrase.services.atoms import ATOMS
from timephrase.services.errors import ParseError
from timephrase.services.matcher import Element, Matcher, ParseNode, literal, opt

logger = logging.getLogger(__name__)

_COMMA = literal(",")
_COLON = literal(":")

RULES: dict[str, list[list[Element]]] = {
    "TOP": [["time_expression"]],
    "time_expression": [["universal"], ["since_expression"], ["particular"]],
    "universal": [["universal_phrase"]],
    "since_expression": [["since", "moment_or_period"]],
    "particular": [["one_time"], ["two_times"]],
    "one_time": [["moment_or_period"]],
    "two_times": [
        [opt("from"), "moment_or_period", "to", "moment_or_period"],
        ["between", "moment_or_period", "and", "moment_or_period"],
    ],
    "to": [["up_to"], ["through"]],
    "moment_or_period": [["moment"], ["period"]],
    # periods
    "period": [
        ["relative_period"],
        ["modified_period"],
        ["month_and_year"],
        ["year_period"],
        ["named_period"],
    ],
    "relative_period": [[opt("the"), "relative_direction", "count", "unit"]],
    "modified_period": [
        [opt("the"), "modifier", "modifiable_period"],
        ["period_unit"],
    ],
    "modifiable_period": [["period_unit"], ["a_month"], ["a_day"]],
    "month_and_year": [["a_month", opt(_COMMA), opt("of"), "year"]],
    "year_period": [["year"]],
    "named_period": [["a_month"]],
    "year": [["era_year", "era"], ["n_year"], ["short_year"]],
    "era": [["bce"], ["ce"]],
    "numeric_year": [["n_year"], ["short_year"]],
    # moments
    "moment": [
        [opt("adjustment"), "point_in_time"],
        ["adjustment", "period"],
        ["offset_from_now"],
    ],
    "adjustment": [["amount", "direction"]],
    "offset_from_now": [["amount", "ago"], ["amount", "from_now"], ["in", "amount"]],
    "amount": [["count", "unit"]],
    "count": [["n_count"], ["a_count"]],
    "direction": [["before"], ["after"]],
    "point_in_time": [
        ["at_time_on", "some_day"],
        ["some_day", opt("at_time")],
        ["precise_time"],
        ["period_boundary"],
        ["terminus"],
        ["at_time"],
    ],
    "at_time_on": [[opt("at"), "time", opt("on")]],
    "at_time": [[opt("at"), "time"]],
    "precise_time": [["n_date", "iso_t", "hour_24"]],
    "period_boundary": [["edge", "of", "moment_or_period"]],
    "edge": [["beginning"], ["end"]],
    "terminus": [["first_time"], ["last_time"]],
    # days
    "some_day": [["specific_day"], ["relative_day"]],
    "specific_day": [["adverb"], ["date_with_year"]],
    "date_with_year": [["n_date"], ["a_date"], ["roman_date"]],
    "n_date": [
        ["numeric_year", "date_sep", "n_month", "date_sep", "n_day"],
        ["numeric_year", "date_sep", "n_day", "date_sep", "n_month"],
        ["n_month", "date_sep", "n_day", "date_sep", "numeric_year"],
        ["n_day", "date_sep", "n_month", "date_sep", "numeric_year"],
    ],
    "a_date": [
        [opt("day_prefix"), "a_month", opt("the"), "o_n_day", opt(_COMMA), "year"],
        [opt("day_prefix"), "o_n_day", "a_month", opt(_COMMA), "year"],
        [opt("day_prefix"), "the", "o_day", "of", "a_month", opt(_COMMA), "year"],
    ],
    "roman_date": [[opt("the"), "roman", "of", "a_month", opt(_COMMA), "year"]],
    "day_prefix": [["a_day", opt(_COMMA)]],
    "relative_day": [["a_day_in_month"], ["roman_day"], ["a_day"]],
    "a_day_in_month": [["ordinal_day"], ["day_and_month"]],
    "ordinal_day": [
        [opt("day_prefix"), "the", "o_day"],
        [opt("day_prefix"), "n_ordinal"],
    ],
    "day_and_month": [
        [opt("day_prefix"), "a_month", opt("the"), "o_n_day"],
        [opt("day_prefix"), "the", "o_day", "of", "a_month"],
        [opt("day_prefix"), "o_n_day", "a_month"],
        ["n_month", "date_sep", "n_day"],
    ],
    "roman_day": [[opt("the"), "roman", "of", "a_month"], [opt("the"), "roman"]],
    "o_n_day": [["o_day"], ["n_day"]],
    "o_day": [["n_ordinal"], ["a_ordinal"]],
    "a_day": [["weekday_name"], ["weekday_letter"]],
    "a_month": [["month_name"]],
    # times of day
    "time": [["hour_12", "am_pm"], ["hour_24"], ["named_time"]],
    "hour_12": [
        ["h12", _COLON, "minute", _COLON, "second"],
        ["h12", _COLON, "minute"],
        ["h12"],
    ],
    "hour_24": [
        ["h24", _COLON, "minute", _COLON, "second"],
        ["h24", _COLON, "minute"],
        ["h24"],
    ],
    "am_pm": [["am"], ["pm"]],
    "named_time": [["noon"], ["midnight"]],
}

_matcher: Matcher | None = None
_matcher_lock = threading.Lock()


def get_matcher() -> Matcher:
    """
    Get the process-wide compiled grammar.

    Compiled on first use under a lock, so concurrent first callers still
    build it only once.
    """
    global _matcher
    if _matcher is None:
        with _matcher_lock:
            if _matcher is None:
                started = time.perf_counter()
                _matcher = Matcher(RULES, ATOMS)
                logger.info(
                    "Compiled time grammar | rules=%d atoms=%d duration=%.2fms",
                    len(RULES),
                    len(ATOMS),
                    (time.perf_counter() - started) * 1000,
                )
    return _matcher


def parse(phrase: str) -> ParseNode:
    """
    Match the whole phrase against the grammar.

    Raises:
        ParseError: If no alternative of the top rule matches all of it
    """
    tree = get_matcher().parse(phrase)
    if tree is None:
        raise ParseError(phrase.strip())
    return tree
