"""Tests for the time-expression grammar."""

from concurrent.futures import ThreadPoolExecutor

import pytest

from timephrase.services import grammar
from timephrase.services.atoms import ATOMS
from timephrase.services.errors import ErrorKind, ParseError
from timephrase.services.temporal_parser import is_parsable

PARSABLE = [
    "always",
    "all time",
    "from beginning to end",
    "from now to eternity",
    "since yesterday",
    "since 2020",
    "last month",
    "this weekend",
    "next pay period",
    "weekend",
    "week",
    "month",
    "the next weekend",
    "the last week",
    "previous year",
    "the last 3 days",
    "the past two weeks",
    "next 5 hours",
    "Friday the 13th",
    "the 31st",
    "June 5",
    "June the fifth",
    "the 5th of June",
    "6/5",
    "the ides of March",
    "the nones",
    "the kalends of May 1969",
    "the ides of March 44 BC",
    "May 6, 1969",
    "6 May 1969",
    "Tuesday, May 6, 1969",
    "the 6th of May, 1969",
    "1969-05-06",
    "05/06/1969",
    "6.5.69",
    "May 1969",
    "May, 1969",
    "May of 1969",
    "1969",
    "'69",
    "100 AD",
    "100AD",
    "44BC",
    "44 B.C.E.",
    "March",
    "Sept.",
    "2 weeks ago",
    "3 days from now",
    "in 3 days",
    "a couple of hours ago",
    "two minutes before noon",
    "a week before last month",
    "a week after tomorrow",
    "at 3pm on Tuesday",
    "Tuesday at 3pm",
    "tues. at 15:00",
    "3:30 p.m.",
    "15:00:05",
    "midnight",
    "2024-06-15T10:30",
    "the beginning",
    "the beginning of the month",
    "the end of last year",
    "the end of time",
    "doomsday",
    "from mon at 15:00:05 to now",
    "Monday through Thursday",
    "Monday thru Thursday",
    "between Monday and Thursday",
    "Mon - Thu",
    "9am to 5pm",
    "from 2020 until 2022",
    "F",
]

UNPARSABLE = [
    "asdf",
    "2021-13-40",
    "the 32nd",
    "25:00",
    "next",
    "tomorrow tomorrow",
    "f",
    "2 weeks",
]


class TestGrammar:
    """Test the compiled grammar."""

    @pytest.mark.parametrize("phrase", PARSABLE)
    def test_recognizes(self, phrase: str) -> None:
        assert is_parsable(phrase)

    @pytest.mark.parametrize("phrase", UNPARSABLE)
    def test_rejects(self, phrase: str) -> None:
        assert not is_parsable(phrase)

    def test_every_atom_is_used(self) -> None:
        """Compilation would fail on an unreachable atom or rule."""
        matcher = grammar.get_matcher()

        assert matcher.atom_names == frozenset(ATOMS)
        assert matcher.rule_names == frozenset(grammar.RULES)

    def test_parse_error_names_the_phrase(self) -> None:
        with pytest.raises(ParseError) as excinfo:
            grammar.parse("  asdf ")

        assert excinfo.value.kind is ErrorKind.PARSE
        assert excinfo.value.phrase == "asdf"
        assert str(excinfo.value) == 'could not parse "asdf" as a time expression'

    def test_full_date_beats_range(self) -> None:
        """'2021-05-06' is one date, not '2021' through '05-06'."""
        tree = grammar.parse("2021-05-06")

        assert tree.has("one_time")
        assert not tree.has("two_times")

    def test_moment_beats_period(self) -> None:
        tree = grammar.parse("June 24")

        assert tree.has("day_and_month")
        assert not tree.has("month_and_year")


class TestGetMatcher:
    """Test lazy, shared compilation."""

    def test_returns_same_instance(self) -> None:
        assert grammar.get_matcher() is grammar.get_matcher()

    def test_concurrent_first_use_compiles_once(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(grammar, "_matcher", None)

        with ThreadPoolExecutor(max_workers=8) as pool:
            matchers = list(pool.map(lambda _: grammar.get_matcher(), range(16)))

        assert len({id(matcher) for matcher in matchers}) == 1
