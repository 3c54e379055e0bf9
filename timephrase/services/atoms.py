"""
Lexical atoms of the time-expression grammar.

Each atom is a terminal pattern the grammar refers to by name. The lookup
tables next to them turn matched text back into numbers for extraction.
"""

from timephrase.models.calendar import MONTH_NAMES, WEEKDAY_NAMES
from timephrase.services.matcher import Pattern, words

_UNITS = ("zero", "one", "two", "three", "four", "five", "six", "seven", "eight", "nine")
_TEENS = (
    "ten",
    "eleven",
    "twelve",
    "thirteen",
    "fourteen",
    "fifteen",
    "sixteen",
    "seventeen",
    "eighteen",
    "nineteen",
)
_ORDINAL_UNITS = (
    "",
    "first",
    "second",
    "third",
    "fourth",
    "fifth",
    "sixth",
    "seventh",
    "eighth",
    "ninth",
)
_ORDINAL_TEENS = (
    "tenth",
    "eleventh",
    "twelfth",
    "thirteenth",
    "fourteenth",
    "fifteenth",
    "sixteenth",
    "seventeenth",
    "eighteenth",
    "nineteenth",
)


def _ordinal_words() -> dict[str, int]:
    ordinals = {word: n for n, word in enumerate(_ORDINAL_UNITS) if word}
    ordinals.update({word: n + 10 for n, word in enumerate(_ORDINAL_TEENS)})
    ordinals["twentieth"] = 20
    ordinals["thirtieth"] = 30
    for n in range(1, 10):
        for separator in ("-", " "):
            ordinals[f"twenty{separator}{_ORDINAL_UNITS[n]}"] = 20 + n
    ordinals["thirty-first"] = ordinals["thirty first"] = 31
    return ordinals


ORDINAL_WORDS = _ordinal_words()

COUNT_WORDS = {word: n for n, word in enumerate(_UNITS) if n}
COUNT_WORDS.update({word: n + 10 for n, word in enumerate(_TEENS)})
COUNT_WORDS.update(
    {
        "twenty": 20,
        "a": 1,
        "an": 1,
        "a couple of": 2,
        "a couple": 2,
        "a few": 3,
        "a dozen": 12,
    }
)

# Month abbreviations are the first three letters, plus "Sept"
MONTHS = {name.lower(): n for n, name in enumerate(MONTH_NAMES, start=1)}
MONTHS.update({name[:3].lower(): n for n, name in enumerate(MONTH_NAMES, start=1)})
MONTHS["sept"] = 9

WEEKDAYS = {name.lower(): n for n, name in enumerate(WEEKDAY_NAMES)}
WEEKDAYS.update({name[:3].lower(): n for n, name in enumerate(WEEKDAY_NAMES)})
WEEKDAYS.update({name[:2].lower(): n for n, name in enumerate(WEEKDAY_NAMES)})
WEEKDAYS.update({"tues": 1, "weds": 2, "thur": 3, "thurs": 3})

# Single capital letters, as in class schedules ("MWF", "TR")
WEEKDAY_LETTERS = {"M": 0, "T": 1, "W": 2, "R": 3, "F": 4, "S": 5, "U": 6}

UNITS = {
    "second": "second",
    "sec": "second",
    "minute": "minute",
    "min": "minute",
    "hour": "hour",
    "hr": "hour",
    "day": "day",
    "week": "week",
    "fortnight": "fortnight",
    "month": "month",
    "year": "year",
    "pay period": "pay period",
    "payperiod": "pay period",
    "pp": "pay period",
}

PERIOD_UNITS = {
    "day": "day",
    "week": "week",
    "weekend": "weekend",
    "month": "month",
    "year": "year",
    "pay period": "pay period",
    "payperiod": "pay period",
    "pp": "pay period",
}


def _names(table: dict[str, int]) -> Pattern:
    """Any name or abbreviation in the table, with an optional trailing period."""
    return Pattern(rf"(?:{words(*table).regex})\.?")


def _plural(table: dict[str, str]) -> Pattern:
    phrases = sorted(table, key=len, reverse=True)
    return Pattern("|".join(rf"{words(phrase).regex}s?" for phrase in phrases))


ATOMS: dict[str, Pattern] = {
    # whole-phrase atoms
    "universal_phrase": words(
        "always",
        "ever",
        "all time",
        "forever",
        "from beginning to end",
        "from the beginning to the end",
        "from the beginning of time to the end of time",
        "from now to eternity",
    ),
    "first_time": words(
        "the beginning",
        "the beginning of time",
        "the first moment",
        "the start",
        "the very start",
        "the first instant",
        "the dawn of time",
        "the big bang",
        "the birth of the universe",
    ),
    "last_time": words(
        "the end",
        "the end of time",
        "the very end",
        "the last moment",
        "eternity",
        "infinity",
        "doomsday",
        "the crack of doom",
        "armageddon",
        "ragnarok",
        "the big crunch",
        "the heat death of the universe",
        "doom",
        "death",
        "perdition",
        "the last hurrah",
        "ever after",
        "the last syllable of recorded time",
    ),
    "beginning": words("the beginning", "the start", "beginning", "start"),
    "end": words("the end", "end"),
    # connectors and function words
    "since": words("since"),
    "from": words("from"),
    "between": words("between"),
    "and": words("and"),
    "through": Pattern(r"through|thru|[-–—]+"),
    "up_to": words("up to", "up until", "until", "till", "til", "to"),
    "at": words("at", "@"),
    "on": words("on"),
    "of": words("of"),
    "the": words("the"),
    "in": words("in"),
    "ago": words("ago", "before now", "earlier"),
    "from_now": words("from now", "hence", "later"),
    "before": words("before", "prior to", "earlier than"),
    "after": words("after", "from", "later than"),
    # modifiers
    "modifier": words("this", "last", "next", "previous", "the", "coming"),
    "relative_direction": words("last", "past", "previous", "next", "coming", "following"),
    # numerals
    "n_count": Pattern(r"[1-9]\d*"),
    "a_count": words(*COUNT_WORDS),
    "n_day": Pattern(r"0?[1-9]|[12]\d|3[01]"),
    "n_month": Pattern(r"0?[1-9]|1[0-2]"),
    "n_year": Pattern(r"[1-9]\d{2,3}"),
    "short_year": Pattern(r"'?\d{2}"),
    "era_year": Pattern(r"[1-9]\d{0,3}"),
    "n_ordinal": Pattern(r"(?:0?[1-9]|[12]\d|3[01])(?:st|nd|rd|th)"),
    "a_ordinal": words(*ORDINAL_WORDS),
    "h12": Pattern(r"0?[1-9]|1[0-2]"),
    "h24": Pattern(r"[01]?\d|2[0-3]"),
    "minute": Pattern(r"[0-5]\d"),
    "second": Pattern(r"[0-5]\d"),
    "date_sep": Pattern(r"[./-]"),
    "iso_t": Pattern("T", case_sensitive=True),
    # names
    "month_name": _names(MONTHS),
    "weekday_name": _names(WEEKDAYS),
    "weekday_letter": words(*WEEKDAY_LETTERS, case_sensitive=True),
    "roman": words("kalends", "calends", "nones", "ides"),
    "adverb": words("now", "today", "tomorrow", "yesterday"),
    "am": Pattern(r"a\.?m\.?"),
    "pm": Pattern(r"p\.?m\.?"),
    "noon": words("noon", "midday"),
    "midnight": words("midnight"),
    "ce": Pattern(r"c\.?e\.?|a\.?d\.?"),
    "bce": Pattern(r"b\.?c\.?e\.?|b\.?c\.?"),
    "unit": _plural(UNITS),
    "period_unit": words(*PERIOD_UNITS),
}
