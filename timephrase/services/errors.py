"""
Errors raised while turning a phrase into an interval.

``ParseError`` and ``ResolveError`` are the user-facing kinds; both derive from
``TimeError``. ``InvariantError`` and ``GrammarError`` signal bugs in the
grammar or the code that walks it and are never caused by user input.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Taxonomy tag carried by every TimeError."""

    PARSE = "parse"
    RESOLVE = "resolve"


class TimeError(Exception):
    """Base class for errors a caller can fix by changing the input."""

    kind: ErrorKind

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ParseError(TimeError):
    """The phrase does not match the grammar."""

    kind = ErrorKind.PARSE

    def __init__(self, phrase: str) -> None:
        super().__init__(f'could not parse "{phrase}" as a time expression')
        self.phrase = phrase


class ResolveError(TimeError):
    """The phrase parsed but describes an impossible or backward interval."""

    kind = ErrorKind.RESOLVE


class InvariantError(RuntimeError):
    """Grammar and extraction disagree, or a bounded search ran out."""


class GrammarError(ValueError):
    """The rule set is malformed: undefined, unreachable or left-recursive rules."""
