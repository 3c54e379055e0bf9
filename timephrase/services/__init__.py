"""
Services for timephrase.

The pipeline runs in three stages: ``grammar.parse`` matches the phrase and
returns a parse tree, ``extract`` turns the tree into the typed AST, and
``resolve`` maps the AST onto an interval for a given ``now``.

Available Services
------------------
- Matcher, ParseNode: Ordered-choice grammar matching
- parse, get_matcher: The compiled time-expression grammar
- extract: Parse tree to AST
- Resolver, resolve: AST to Interval
- TemporalParser: Non-raising facade returning TemporalResult
- TimeError, ParseError, ResolveError: User-facing errors
"""

from .errors import (
    ErrorKind,
    GrammarError,
    InvariantError,
    ParseError,
    ResolveError,
    TimeError,
)
from .extract import extract
from .grammar import get_matcher, parse
from .matcher import Matcher, ParseNode
from .resolver import Resolver, resolve
from .temporal_parser import (
    TemporalParser,
    TemporalResult,
    is_parsable,
    parse_time_range,
    temporal_parser,
)

__all__ = [
    # Errors
    "ErrorKind",
    "GrammarError",
    "InvariantError",
    "ParseError",
    "ResolveError",
    "TimeError",
    # Grammar
    "Matcher",
    "ParseNode",
    "get_matcher",
    "parse",
    # AST and resolution
    "extract",
    "Resolver",
    "resolve",
    # Facade
    "TemporalParser",
    "TemporalResult",
    "is_parsable",
    "parse_time_range",
    "temporal_parser",
]
