"""Keyword search query parsing.

Turns the free-text ``keyword`` parameter into a small condition tree over
the post's interest text. Supported syntax (operators are case-insensitive
and must be surrounded by whitespace):

- ``"exact phrase"``: a substring matched verbatim
- ``a AND b``: both substrings required
- ``a OR b``: either substring suffices

Phrases are swapped for placeholders first, then the query is split into
OR-groups and each group into AND-terms. A phrase that is a whole OR-group
on its own (``"community garden" OR market``) is one of the alternatives;
a phrase sharing its group with bare terms (``"x" cat OR dog``) is required
alongside the alternatives. When the query really contains an ``OR`` the
result is ``(phrase AND ...) AND (group OR group ...)``; otherwise all
conditions are ANDed together. The tree is never deeper than that.

Parsing never fails: unbalanced quotes and stray operators simply end up
inside ordinary terms, and input without any usable term yields ``None``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, Union

_PHRASE_RE = re.compile(r'"([^"]+)"')
_OR_RE = re.compile(r"\s+OR\s+", re.IGNORECASE)
_AND_RE = re.compile(r"\s+AND\s+", re.IGNORECASE)
_PLACEHOLDER_RE = re.compile(r"\x00(\d+)\x00")


@dataclass(frozen=True)
class Contains:
    """Leaf: the field contains ``text`` (case-insensitive)."""

    text: str


@dataclass(frozen=True)
class AllOf:
    """Conjunction of child conditions."""

    items: tuple["Condition", ...]


@dataclass(frozen=True)
class AnyOf:
    """Disjunction of child conditions."""

    items: tuple["Condition", ...]


Condition = Union[Contains, AllOf, AnyOf]


@dataclass(frozen=True)
class KeywordFilter:
    """Parsed keyword query.

    Attributes:
        root: Condition tree to apply to the searched field.
        phrases: Quoted phrases, in input order.
        groups: OR-groups holding bare terms, each a tuple of AND-terms.
        disjunctive: True when the groups are ORed rather than ANDed.
    """

    root: Condition
    phrases: tuple[str, ...]
    groups: tuple[tuple[str, ...], ...]
    disjunctive: bool

    @property
    def patterns(self) -> tuple[str, ...]:
        """Substrings in the order a renderer binds them (depth-first)."""
        return tuple(leaf.text for leaf in iter_leaves(self.root))

    def describe(self) -> str:
        """Human-readable form, e.g. ``"x" AND ("cat" OR "dog")``."""
        return _describe(self.root, top_level=True)


def iter_leaves(condition: Condition) -> Iterator[Contains]:
    if isinstance(condition, Contains):
        yield condition
        return
    for item in condition.items:
        yield from iter_leaves(item)


def _describe(condition: Condition, *, top_level: bool = False) -> str:
    if isinstance(condition, Contains):
        return f'"{condition.text}"'
    joiner = " AND " if isinstance(condition, AllOf) else " OR "
    text = joiner.join(_describe(item) for item in condition.items)
    if top_level or len(condition.items) == 1:
        return text
    return f"({text})"


def _group_condition(terms: tuple[str, ...]) -> Condition:
    if len(terms) == 1:
        return Contains(terms[0])
    return AllOf(tuple(Contains(term) for term in terms))


def parse_keyword_query(query: str | None) -> KeywordFilter | None:
    """Parse a keyword query into a :class:`KeywordFilter`.

    Args:
        query: Raw user input; may be None or empty.

    Returns:
        The parsed filter, or None when the query has no usable terms and
        no keyword restriction should be applied.

    Examples:
        >>> parse_keyword_query('"x" cat OR dog').describe()
        '"x" AND ("cat" OR "dog")'
        >>> parse_keyword_query('"community garden" OR market').describe()
        '"community garden" OR "market"'
        >>> parse_keyword_query("   ") is None
        True
    """
    if not query or not query.strip():
        return None

    phrases: list[str] = []

    def stash(match: re.Match[str]) -> str:
        # Phrases are matched verbatim, surrounding spaces included
        phrase = match.group(1)
        if not phrase.strip():
            return ""
        phrases.append(phrase)
        return f"\x00{len(phrases) - 1}\x00"

    marked = _PHRASE_RE.sub(stash, query.replace("\x00", ""))

    raw_groups = _OR_RE.split(marked)
    groups: list[tuple[str, ...]] = []
    alternatives: list[Condition] = []
    required_phrases: list[str] = []
    for raw_group in raw_groups:
        group_phrases = tuple(phrases[int(index)] for index in _PLACEHOLDER_RE.findall(raw_group))
        bare = _PLACEHOLDER_RE.sub("", raw_group)
        terms = tuple(term.strip() for term in _AND_RE.split(bare) if term.strip())
        if terms:
            groups.append(terms)
            required_phrases.extend(group_phrases)
            alternatives.append(_group_condition(terms))
        elif group_phrases:
            alternatives.append(_group_condition(group_phrases))

    if not phrases and not groups:
        return None

    disjunctive = len(raw_groups) > 1

    if disjunctive:
        required = tuple(Contains(phrase) for phrase in required_phrases)
        choice = AnyOf(tuple(alternatives))
        root: Condition = AllOf(required + (choice,)) if required else choice
    else:
        terms = tuple(Contains(term) for group in groups for term in group)
        root = AllOf(tuple(Contains(phrase) for phrase in phrases) + terms)

    return KeywordFilter(
        root=root,
        phrases=tuple(phrases),
        groups=tuple(groups),
        disjunctive=disjunctive,
    )
