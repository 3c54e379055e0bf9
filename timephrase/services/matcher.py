"""
Ordered-choice grammar matcher.

A grammar is a mapping from rule names to ordered lists of alternatives, plus
a mapping from atom names to terminal patterns. Each alternative is a
sequence of elements:

- a rule or atom name (``"a_month"``),
- an inline ``Pattern`` (``literal(",")``), or
- either of those wrapped in ``opt(...)``.

Alternatives are tried in authored order and the first parse that consumes
the whole input wins, so alternative order is disambiguation priority.
Matching is memoized per call on ``(rule, position)``; for every end position
only the highest-priority parse is kept, which yields the same tree as
exhaustive priority-ordered backtracking without its exponential cost.

Terminals only match on token boundaries: a match may not start or end
inside a run of letters or a run of digits, but digits may abut letters
("100AD", "3pm"). Whitespace between elements is optional.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Union

from timephrase.services.errors import GrammarError

logger = logging.getLogger(__name__)

_LETTER = r"[^\W\d_]"
_TOKEN_START = rf"(?:(?<!{_LETTER})(?={_LETTER})|(?<!\d)(?=\d)|(?!{_LETTER}|\d))"
_TOKEN_END = rf"(?:(?<={_LETTER})(?!{_LETTER})|(?<=\d)(?!\d)|(?<!{_LETTER})(?<!\d))"
_WHITESPACE = re.compile(r"\s*")


@dataclass(frozen=True)
class Pattern:
    """A terminal: a regular expression matched on token boundaries."""

    regex: str
    case_sensitive: bool = False

    def compile(self) -> re.Pattern[str]:
        flags = 0 if self.case_sensitive else re.IGNORECASE
        return re.compile(f"{_TOKEN_START}(?:{self.regex}){_TOKEN_END}", flags)


@dataclass(frozen=True)
class Opt:
    """An element that is skipped when it does not match."""

    element: Union[str, Pattern]


Element = Union[str, Pattern, Opt]


def words(*phrases: str, case_sensitive: bool = False) -> Pattern:
    """Match any of the phrases; spaces inside a phrase match any whitespace."""
    alternatives = sorted(set(phrases), key=len, reverse=True)
    return Pattern(
        "|".join(r"\s+".join(re.escape(w) for w in p.split()) for p in alternatives),
        case_sensitive=case_sensitive,
    )


def literal(text: str) -> Pattern:
    return Pattern(re.escape(text))


def opt(element: Union[str, Pattern]) -> Opt:
    return Opt(element)


@dataclass(frozen=True)
class ParseNode:
    """
    One node of a parse tree.

    ``name`` is the rule or atom that matched (None for inline patterns) and
    ``alternative`` the index of the alternative a rule committed to.
    """

    name: str | None
    alternative: int
    start: int
    end: int
    text: str
    children: tuple[ParseNode, ...] = ()

    def child(self, name: str) -> ParseNode | None:
        """First direct child with the given name."""
        for node in self.children:
            if node.name == name:
                return node
        return None

    def find(self, name: str) -> ParseNode | None:
        """First node with the given name in this subtree, preorder."""
        if self.name == name:
            return self
        for node in self.children:
            found = node.find(name)
            if found is not None:
                return found
        return None

    def find_all(self, name: str) -> list[ParseNode]:
        found = [self] if self.name == name else []
        for node in self.children:
            found.extend(node.find_all(name))
        return found

    def has(self, name: str) -> bool:
        return self.find(name) is not None


_Match = tuple[int, tuple[ParseNode, ...]]


class Matcher:
    """A validated, compiled grammar. Immutable and safe to share between threads."""

    def __init__(
        self,
        rules: Mapping[str, Sequence[Sequence[Element]]],
        atoms: Mapping[str, Pattern],
        top: str = "TOP",
    ) -> None:
        self.top = top
        self._rules = {
            name: tuple(tuple(alternative) for alternative in alternatives)
            for name, alternatives in rules.items()
        }
        _validate(self._rules, atoms, top)
        self._atoms = {name: pattern.compile() for name, pattern in atoms.items()}
        self._inline = {
            pattern: pattern.compile() for pattern in _inline_patterns(self._rules)
        }
        logger.debug(
            "Compiled grammar: %d rules, %d atoms, %d inline patterns",
            len(self._rules),
            len(self._atoms),
            len(self._inline),
        )

    @property
    def rule_names(self) -> frozenset[str]:
        return frozenset(self._rules)

    @property
    def atom_names(self) -> frozenset[str]:
        return frozenset(self._atoms)

    def parse(self, text: str) -> ParseNode | None:
        """Parse the whole (stripped) text, or return None."""
        text = text.strip()
        if not text:
            return None
        memo: dict[tuple[str, int], list[tuple[int, ParseNode]]] = {}
        for end, node in self._match_rule(self.top, 0, text, memo):
            if end == len(text):
                return node
        return None

    def matches(self, text: str) -> bool:
        return self.parse(text) is not None

    def _match_rule(
        self,
        name: str,
        pos: int,
        text: str,
        memo: dict[tuple[str, int], list[tuple[int, ParseNode]]],
    ) -> list[tuple[int, ParseNode]]:
        key = (name, pos)
        cached = memo.get(key)
        if cached is not None:
            return cached
        memo[key] = []
        found: dict[int, ParseNode] = {}
        for index, alternative in enumerate(self._rules[name]):
            for end, children in self._match_sequence(alternative, pos, text, memo):
                if end not in found:
                    start = children[0].start if children else pos
                    found[end] = ParseNode(name, index, start, end, text[start:end], children)
        result = list(found.items())
        memo[key] = result
        return result

    def _match_sequence(
        self,
        elements: Sequence[Element],
        pos: int,
        text: str,
        memo: dict[tuple[str, int], list[tuple[int, ParseNode]]],
    ) -> list[_Match]:
        states: list[_Match] = [(pos, ())]
        for element in elements:
            advanced: dict[int, tuple[ParseNode, ...]] = {}
            for position, children in states:
                for end, nodes in self._match_element(element, position, text, memo):
                    if end not in advanced:
                        advanced[end] = children + nodes
            if not advanced:
                return []
            states = list(advanced.items())
        return states

    def _match_element(
        self,
        element: Element,
        pos: int,
        text: str,
        memo: dict[tuple[str, int], list[tuple[int, ParseNode]]],
    ) -> list[_Match]:
        if isinstance(element, Opt):
            matched = self._match_element(element.element, pos, text, memo)
            if any(end == pos for end, _ in matched):
                return matched
            return matched + [(pos, ())]
        start = _WHITESPACE.match(text, pos).end()
        if isinstance(element, Pattern):
            return _match_pattern(self._inline[element], None, start, text)
        if element in self._atoms:
            return _match_pattern(self._atoms[element], element, start, text)
        return [
            (end, (node,)) for end, node in self._match_rule(element, start, text, memo)
        ]


def _match_pattern(
    compiled: re.Pattern[str], name: str | None, pos: int, text: str
) -> list[_Match]:
    match = compiled.match(text, pos)
    if match is None or match.end() == pos:
        return []
    return [(match.end(), (ParseNode(name, 0, pos, match.end(), match.group()),))]


def _reference(element: Element) -> str | None:
    if isinstance(element, Opt):
        element = element.element
    return element if isinstance(element, str) else None


def _inline_patterns(rules: Mapping[str, Iterable[Iterable[Element]]]) -> set[Pattern]:
    patterns = set()
    for alternatives in rules.values():
        for alternative in alternatives:
            for element in alternative:
                inner = element.element if isinstance(element, Opt) else element
                if isinstance(inner, Pattern):
                    patterns.add(inner)
    return patterns


def _validate(
    rules: Mapping[str, Sequence[Sequence[Element]]],
    atoms: Mapping[str, Pattern],
    top: str,
) -> None:
    """Reject undefined references, unreachable definitions and left recursion."""
    if top not in rules:
        raise GrammarError(f"top rule {top!r} is not defined")
    clashes = set(rules) & set(atoms)
    if clashes:
        raise GrammarError(f"names defined as both rule and atom: {sorted(clashes)}")
    for name, alternatives in rules.items():
        if not alternatives:
            raise GrammarError(f"rule {name!r} has no alternatives")
        for alternative in alternatives:
            for element in alternative:
                ref = _reference(element)
                if ref is not None and ref not in rules and ref not in atoms:
                    raise GrammarError(f"rule {name!r} refers to undefined {ref!r}")

    reached = {top}
    pending = [top]
    while pending:
        name = pending.pop()
        for alternative in rules.get(name, ()):
            for element in alternative:
                ref = _reference(element)
                if ref is not None and ref not in reached:
                    reached.add(ref)
                    pending.append(ref)
    unreachable = (set(rules) | set(atoms)) - reached
    if unreachable:
        raise GrammarError(f"unreachable from {top!r}: {sorted(unreachable)}")

    nullable: set[str] = set()
    changed = True
    while changed:
        changed = False
        for name, alternatives in rules.items():
            if name in nullable:
                continue
            if any(
                all(_nullable(element, nullable) for element in alternative)
                for alternative in alternatives
            ):
                nullable.add(name)
                changed = True

    leading: dict[str, set[str]] = {}
    for name, alternatives in rules.items():
        refs = leading.setdefault(name, set())
        for alternative in alternatives:
            for element in alternative:
                ref = _reference(element)
                if ref in rules:
                    refs.add(ref)
                if not _nullable(element, nullable):
                    break

    # 1 = on the current path, 2 = finished
    state: dict[str, int] = {}

    def visit(name: str) -> None:
        state[name] = 1
        for ref in sorted(leading[name]):
            mark = state.get(ref)
            if mark == 1:
                raise GrammarError(f"rule {ref!r} is left-recursive")
            if mark is None:
                visit(ref)
        state[name] = 2

    for name in rules:
        if name not in state:
            visit(name)


def _nullable(element: Element, nullable: set[str]) -> bool:
    if isinstance(element, Opt):
        return True
    if isinstance(element, Pattern):
        return False
    return element in nullable
