"""Fuzzy book-name matching with tiered scoring.

Scores every catalog book against a (possibly partial, possibly misspelled)
book token and returns ranked matches.

Score bands, highest first:
    Exact         1000        input equals the name or short name
    Abbreviation   900        input is a known abbreviation of the book
    Prefix        800..899    name or short name starts with the input
    Substring     600..649    name or short name contains the input
    Fuzzy           0..400    Levenshtein similarity of name vs input (> 0.3)

Bands are disjoint, so any match in a higher tier outranks every match in a
lower tier no matter how the within-tier formulas spread.

Matching is pure and uncached; it is cheap enough to run on every keystroke.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from smartref.catalog.abbreviations import (
    UNKNOWN_BOOK_ORDER,
    canonical_name_for,
    get_book_order,
    resolve_abbreviation,
)
from smartref.catalog.models import BookRecord

EXACT_SCORE = 1000.0
ABBREVIATION_SCORE = 900.0
PREFIX_BASE, PREFIX_SPAN = 800.0, 99.0
SUBSTRING_BASE, SUBSTRING_WEIGHT = 600.0, 25.0
SUBSTRING_CEILING = 649.99
FUZZY_WEIGHT = 400.0
DEFAULT_FUZZY_THRESHOLD = 0.3


class MatchType(Enum):
    """Tier a book match was found in."""

    EXACT = "exact"
    ABBREVIATION = "abbreviation"
    PREFIX = "prefix"
    SUBSTRING = "substring"
    FUZZY = "fuzzy"


@dataclass(frozen=True)
class BookMatch:
    """A scored candidate book for a query."""

    book: BookRecord
    score: float
    match_type: MatchType
    matched_text: str


def normalize(text: str) -> str:
    """Lower-case and trim. No other transformation is applied."""
    return text.strip().lower()


def levenshtein_distance(a: str, b: str) -> int:
    """Edit distance with unit-cost insertion, deletion and substitution.

    Case-insensitive; fills the full dynamic-programming matrix.
    """
    a = a.lower()
    b = b.lower()

    matrix = [[0] * (len(a) + 1) for _ in range(len(b) + 1)]
    for i in range(len(a) + 1):
        matrix[0][i] = i
    for j in range(len(b) + 1):
        matrix[j][0] = j

    for j in range(1, len(b) + 1):
        for i in range(1, len(a) + 1):
            cost = 0 if a[i - 1] == b[j - 1] else 1
            matrix[j][i] = min(
                matrix[j][i - 1] + 1,  # deletion
                matrix[j - 1][i] + 1,  # insertion
                matrix[j - 1][i - 1] + cost,  # substitution
            )

    return matrix[len(b)][len(a)]


def similarity(a: str, b: str) -> float:
    """Normalized similarity ``1 - distance / max(len)`` in [0, 1]."""
    max_length = max(len(a), len(b))
    if max_length == 0:
        return 1.0
    return max(0.0, 1.0 - levenshtein_distance(a, b) / max_length)


def book_sort_key(book: BookRecord) -> tuple[int, int]:
    """Canonical ordering: abbreviation table order, then catalog order, then id."""
    order = get_book_order(book.name)
    if order == UNKNOWN_BOOK_ORDER:
        order = get_book_order(book.short_name)
    if order == UNKNOWN_BOOK_ORDER and book.order is not None:
        order = book.order
    return (order, book.id)


def _prefix_score(query: str, name: str, short_name: str) -> float:
    # The reference length is the shorter of the two names, so a near-complete
    # prefix of a short code can exceed 1.0; clamp to stay inside the band.
    reference_length = min(len(name), len(short_name)) or 1
    fraction = min(1.0, len(query) / reference_length)
    return PREFIX_BASE + fraction * PREFIX_SPAN


def _substring_score(query: str, text: str) -> float:
    index = text.find(query)
    if index == -1:
        return 0.0
    position_score = (len(text) - index) / len(text)
    length_score = len(query) / len(text)
    raw = SUBSTRING_BASE + (position_score + length_score) * SUBSTRING_WEIGHT
    return min(raw, SUBSTRING_CEILING)


class FuzzyBookMatcher:
    """Scores a catalog of books against query text.

    Holds a borrowed view of the catalog; ``set_books`` swaps it wholesale
    when the catalog changes.
    """

    def __init__(
        self,
        books: Iterable[BookRecord] = (),
        fuzzy_threshold: float = DEFAULT_FUZZY_THRESHOLD,
    ):
        self.fuzzy_threshold = fuzzy_threshold
        self._books: tuple[BookRecord, ...] = tuple(books)

    def set_books(self, books: Iterable[BookRecord]) -> None:
        self._books = tuple(books)

    @property
    def books(self) -> tuple[BookRecord, ...]:
        return self._books

    def find_matches(self, text: str, limit: int = 5) -> list[BookMatch]:
        """Find the best matching books for the input, best first.

        Ties are broken by canonical book order (Genesis before Exodus).
        """
        query = normalize(text)
        if not query or limit <= 0:
            return []

        matches = []
        for book in self._books:
            match = self.score_book(book, query)
            if match is not None:
                matches.append(match)

        matches.sort(key=lambda m: (-m.score, book_sort_key(m.book)))
        return matches[:limit]

    def get_best_match(self, text: str) -> BookMatch | None:
        """Best single match, or None."""
        matches = self.find_matches(text, limit=1)
        return matches[0] if matches else None

    def score_book(self, book: BookRecord, query: str) -> BookMatch | None:
        """Score one book against an already-normalized query.

        Returns:
            BookMatch, or None when the book does not match at all
        """
        name = book.name.lower()
        short_name = book.short_name.lower()

        # 1. Exact
        if query == name or query == short_name:
            return BookMatch(book, EXACT_SCORE, MatchType.EXACT, book.name)

        # 2. Abbreviation
        targets = resolve_abbreviation(query)
        if targets:
            canonical = canonical_name_for(book.name) or canonical_name_for(
                book.short_name
            )
            if canonical in targets or book.name in targets:
                return BookMatch(
                    book, ABBREVIATION_SCORE, MatchType.ABBREVIATION, book.name
                )

        # 3. Prefix
        if name.startswith(query) or short_name.startswith(query):
            score = _prefix_score(query, name, short_name)
            return BookMatch(book, score, MatchType.PREFIX, book.name)

        # 4. Substring
        if query in name or query in short_name:
            score = max(_substring_score(query, name), _substring_score(query, short_name))
            return BookMatch(book, score, MatchType.SUBSTRING, book.name)

        # 5. Fuzzy
        fuzzy = similarity(name, query)
        if fuzzy > self.fuzzy_threshold:
            return BookMatch(book, fuzzy * FUZZY_WEIGHT, MatchType.FUZZY, book.name)

        return None


def find_book_matches(
    text: str, catalog: Iterable[BookRecord], limit: int = 5
) -> list[BookMatch]:
    """Rank catalog books against a book-name token."""
    return FuzzyBookMatcher(catalog).find_matches(text, limit)


def get_best_match(text: str, catalog: Iterable[BookRecord]) -> BookMatch | None:
    """Best matching book for a token, or None."""
    return FuzzyBookMatcher(catalog).get_best_match(text)
