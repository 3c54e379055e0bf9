"""Tests for parse tree to AST extraction."""

import pytest

from timephrase.models import (
    Adverb,
    AdverbDay,
    CalendarDate,
    Direction,
    Edge,
    Modifier,
    Moment,
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
from timephrase.services.errors import InvariantError
from timephrase.services.extract import extract
from timephrase.services.grammar import parse
from timephrase.services.matcher import ParseNode


def ast(phrase: str):
    return extract(parse(phrase))


class TestExtract:
    """Test AST shapes for representative phrases."""

    def test_universal(self) -> None:
        assert ast("forever") == Universal()

    def test_since(self) -> None:
        assert ast("since yesterday") == Since(Moment(day=AdverbDay(Adverb.YESTERDAY)))

    def test_weekday_with_ordinal(self) -> None:
        assert ast("Friday the 13th") == Moment(day=PartialDate(day=13, weekday=4))

    def test_ordinal_words(self) -> None:
        assert ast("June the twenty-first") == Moment(day=PartialDate(month=6, day=21))
        assert ast("the thirty first") == Moment(day=PartialDate(day=31))

    def test_numeric_month_and_day(self) -> None:
        assert ast("6/5") == Moment(day=PartialDate(month=6, day=5))

    def test_full_dates(self) -> None:
        expected = Moment(day=CalendarDate(YearRef(1969), 5, 6))

        assert ast("1969-05-06") == expected
        assert ast("May 6, 1969") == expected
        assert ast("6 May 1969") == expected
        assert ast("the 6th of May, 1969") == expected

    def test_full_date_with_weekday(self) -> None:
        assert ast("Tuesday, May 6, 1969") == Moment(
            day=CalendarDate(YearRef(1969), 5, 6, weekday=1)
        )

    def test_short_year_in_numeric_date(self) -> None:
        assert ast("6/15/24") == Moment(day=CalendarDate(YearRef(24, short=True), 6, 15))

    def test_roman_days(self) -> None:
        assert ast("the ides of March") == Moment(
            day=PartialDate(month=3, roman=RomanDay.IDES)
        )
        assert ast("the calends") == Moment(day=PartialDate(roman=RomanDay.KALENDS))
        assert ast("the ides of March 44 BC") == Moment(
            day=PartialDate(month=3, roman=RomanDay.IDES, year=YearRef(-43))
        )

    @pytest.mark.parametrize(
        "phrase,year",
        [("100AD", 100), ("100 A.D.", 100), ("1 BC", 0), ("44 BCE", -43), ("1969", 1969)],
    )
    def test_era_years(self, phrase: str, year: int) -> None:
        assert ast(phrase) == Period(PeriodKind.YEAR, year=YearRef(year))

    def test_short_year(self) -> None:
        assert ast("'69") == Period(PeriodKind.YEAR, year=YearRef(69, short=True))

    def test_month_and_year(self) -> None:
        expected = Period(PeriodKind.MONTH_OF_YEAR, month=5, year=YearRef(1969))

        assert ast("May 1969") == expected
        assert ast("may of 1969") == expected

    def test_named_month(self) -> None:
        assert ast("Sept.") == Period(PeriodKind.NAMED_MONTH, month=9)

    def test_modified_periods(self) -> None:
        assert ast("last week") == Period(
            PeriodKind.MODIFIED, modifier=Modifier.LAST, unit=Unit.WEEK
        )
        assert ast("the weekend") == Period(
            PeriodKind.MODIFIED, modifier=Modifier.THIS, unit=Unit.WEEKEND
        )
        assert ast("next pay period") == Period(
            PeriodKind.MODIFIED, modifier=Modifier.NEXT, unit=Unit.PAY_PERIOD
        )
        assert ast("previous March") == Period(
            PeriodKind.MODIFIED, modifier=Modifier.LAST, month=3
        )
        assert ast("this thurs") == Period(
            PeriodKind.MODIFIED, modifier=Modifier.THIS, weekday=3
        )

    def test_bare_unit_is_the_current_one(self) -> None:
        assert ast("weekend") == Period(
            PeriodKind.MODIFIED, modifier=Modifier.THIS, unit=Unit.WEEKEND
        )
        assert ast("month") == Period(
            PeriodKind.MODIFIED, modifier=Modifier.THIS, unit=Unit.MONTH
        )

    def test_article_before_modifier(self) -> None:
        assert ast("the next weekend") == Period(
            PeriodKind.MODIFIED, modifier=Modifier.NEXT, unit=Unit.WEEKEND
        )
        assert ast("the last week") == Period(
            PeriodKind.MODIFIED, modifier=Modifier.LAST, unit=Unit.WEEK
        )

    def test_relative_periods(self) -> None:
        assert ast("the last 3 days") == Period(
            PeriodKind.RELATIVE, unit=Unit.DAY, count=3, direction=Direction.BEFORE
        )
        assert ast("the next two weeks") == Period(
            PeriodKind.RELATIVE, unit=Unit.WEEK, count=2, direction=Direction.AFTER
        )

    def test_offsets_from_now(self) -> None:
        assert ast("2 weeks ago") == RelativeOffset(2, Unit.WEEK, Direction.BEFORE)
        assert ast("in a fortnight") == RelativeOffset(1, Unit.FORTNIGHT, Direction.AFTER)
        assert ast("a couple of hrs later") == RelativeOffset(2, Unit.HOUR, Direction.AFTER)

    def test_adjusted_moment(self) -> None:
        assert ast("two minutes before noon") == RelativeOffset(
            2, Unit.MINUTE, Direction.BEFORE, anchor=Moment(time=TimeOfDay(12))
        )

    def test_adjusted_period(self) -> None:
        assert ast("a week before last month") == RelativeOffset(
            1,
            Unit.WEEK,
            Direction.BEFORE,
            anchor=Period(PeriodKind.MODIFIED, modifier=Modifier.LAST, unit=Unit.MONTH),
        )

    @pytest.mark.parametrize(
        "phrase,time",
        [
            ("3pm", TimeOfDay(15)),
            ("3:30 a.m.", TimeOfDay(3, 30)),
            ("12am", TimeOfDay(0)),
            ("12 PM", TimeOfDay(12)),
            ("15:00:05", TimeOfDay(15, 0, 5)),
            ("at midnight", TimeOfDay(0)),
        ],
    )
    def test_times(self, phrase: str, time: TimeOfDay) -> None:
        assert ast(phrase) == Moment(time=time)

    def test_day_and_time(self) -> None:
        expected = Moment(day=PartialDate(weekday=1), time=TimeOfDay(15))

        assert ast("Tuesday at 3pm") == expected
        assert ast("at 3pm on Tuesday") == expected

    def test_precise_time(self) -> None:
        assert ast("2024-06-15T10:30") == Moment(
            day=CalendarDate(YearRef(2024), 6, 15), time=TimeOfDay(10, 30)
        )

    def test_termini(self) -> None:
        assert ast("the dawn of time") == Moment(terminus=Terminus.FIRST)
        assert ast("Ragnarok") == Moment(terminus=Terminus.LAST)

    def test_period_boundary(self) -> None:
        assert ast("the end of last year") == PeriodBoundary(
            Edge.END, Period(PeriodKind.MODIFIED, modifier=Modifier.LAST, unit=Unit.YEAR)
        )

    def test_ranges(self) -> None:
        monday = Moment(day=PartialDate(weekday=0))
        thursday = Moment(day=PartialDate(weekday=3))

        assert ast("Monday through Thursday") == TwoPointRange(monday, thursday, True)
        assert ast("Mon-Thu") == TwoPointRange(monday, thursday, True)
        assert ast("between Monday and Thursday") == TwoPointRange(monday, thursday, True)
        assert ast("from Monday to Thursday") == TwoPointRange(monday, thursday, False)
        assert ast("M until R") == TwoPointRange(monday, thursday, False)

    def test_now(self) -> None:
        assert ast("now") == Moment(day=AdverbDay(Adverb.NOW))


class TestExtractInvariants:
    """Trees the grammar cannot produce are programming errors."""

    def test_unknown_top_node(self) -> None:
        tree = ParseNode(
            "TOP", 0, 0, 3, "odd", (ParseNode("time_expression", 0, 0, 3, "odd"),)
        )

        with pytest.raises(InvariantError):
            extract(tree)

    def test_missing_expression(self) -> None:
        with pytest.raises(InvariantError):
            extract(ParseNode("TOP", 0, 0, 0, ""))
