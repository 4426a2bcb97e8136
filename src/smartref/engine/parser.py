"""Scripture reference parsing for free-form user input.

Turns text such as "jn 3:16-17", "1 John 2" or "Pslam" into a
``ParsedReference``. Parsing is purely syntactic plus book resolution;
chapter/verse bounds are checked later by the validator.

Grammar, tried in order (first match wins):
1. <book> <chapter>:<verse>[-<verse_end>]   "John 3:16", "jn 3:16-17"
2. <book> <chapter>                         "1 John 2", "Ps 23"
3. <book>                                   "Song of Solomon"

<book> is an optional leading 1, 2 or 3 followed by one or more
letter-only words. Input matching none of these is tried as a bare book
name before being rejected.

Problems are returned on the result (``error``/``error_kind``), never raised.
"""

from __future__ import annotations

import re
from typing import Iterable

from smartref.catalog.models import BookRecord
from smartref.config import Settings
from smartref.engine.matcher import BookMatch, FuzzyBookMatcher, MatchType
from smartref.engine.schemas import ParsedReference
from smartref.errors import ReferenceErrorKind

_BOOK = r"(?P<book>[1-3]?\s*[A-Za-z]+(?:\s+[A-Za-z]+)*)"
_RANGE_DASH = r"[-–—]"

FULL_REFERENCE = re.compile(
    rf"^{_BOOK}\s+(?P<chapter>\d+)\s*:\s*(?P<verse_start>\d+)"
    rf"(?:\s*{_RANGE_DASH}\s*(?P<verse_end>\d+))?$"
)
CHAPTER_REFERENCE = re.compile(rf"^{_BOOK}\s+(?P<chapter>\d+)$")
BOOK_REFERENCE = re.compile(rf"^{_BOOK}$")

GRAMMAR = (FULL_REFERENCE, CHAPTER_REFERENCE, BOOK_REFERENCE)

_WHITESPACE = re.compile(r"\s+")


def _collapse(text: str) -> str:
    return _WHITESPACE.sub(" ", text.strip())


def _to_int(text: str | None) -> int | None:
    return int(text, 10) if text else None


class ReferenceParser:
    """Parses reference text against a catalog of books.

    Deterministic: the same (text, catalog) always gives an equal result.
    """

    def __init__(
        self,
        books: Iterable[BookRecord] = (),
        settings: Settings | None = None,
        matcher: FuzzyBookMatcher | None = None,
    ):
        self.settings = settings or Settings()
        self.matcher = matcher or FuzzyBookMatcher(
            books, fuzzy_threshold=self.settings.fuzzy_threshold
        )

    def set_books(self, books: Iterable[BookRecord]) -> None:
        self.matcher.set_books(books)

    def parse(self, raw: str) -> ParsedReference:
        """Parse raw input into a ParsedReference.

        Args:
            raw: User text, e.g. "John 3:16", "1 cor 13", "Pslam 23"

        Returns:
            ParsedReference; check ``is_valid`` and ``error``
        """
        text = raw.strip()
        if not text:
            return ParsedReference(book_token="", raw_input="")

        for pattern in GRAMMAR:
            match = pattern.match(text)
            if match:
                return self._from_match(text, match)

        return self._from_bare_text(text)

    def _is_confident(self, match: BookMatch, token: str) -> bool:
        if match.score < self.settings.confident_match_score:
            return False
        # A one-letter prefix ("J") names several books equally well
        if match.match_type is MatchType.PREFIX:
            letters = sum(1 for ch in token if ch.isalpha())
            return letters >= self.settings.min_confident_prefix_letters
        return True

    def _from_match(self, text: str, match: re.Match) -> ParsedReference:
        groups = match.groupdict()
        token = _collapse(groups["book"])
        chapter = _to_int(groups.get("chapter"))
        verse_start = _to_int(groups.get("verse_start"))
        verse_end = _to_int(groups.get("verse_end"))

        best = self.matcher.get_best_match(token)
        if best is None:
            return ParsedReference(
                book_token=token,
                raw_input=text,
                error=f'Book "{token}" not found',
                error_kind=ReferenceErrorKind.UNKNOWN_BOOK,
            )

        reference = ParsedReference(
            book_token=token,
            book=best.book,
            chapter=chapter,
            verse_start=verse_start,
            verse_end=verse_end,
            raw_input=text,
        )

        if not self._is_confident(best, token):
            return _invalid(
                reference,
                f'Did you mean "{best.book.name}"?',
                ReferenceErrorKind.AMBIGUOUS_BOOK,
            )

        if chapter is not None and chapter < 1:
            return _invalid(
                reference, "Invalid chapter number", ReferenceErrorKind.SYNTAX
            )

        if (verse_start is not None and verse_start < 1) or (
            verse_end is not None and verse_end < 1
        ):
            return _invalid(reference, "Invalid verse number", ReferenceErrorKind.SYNTAX)

        if verse_end is not None and verse_end < verse_start:
            return _invalid(
                reference, "Invalid verse range", ReferenceErrorKind.INVALID_RANGE
            )

        if verse_end == verse_start:
            verse_end = None

        return reference.with_numbers(chapter, verse_start, verse_end)

    def _from_bare_text(self, text: str) -> ParsedReference:
        """Best-effort: treat the whole input as a book name."""
        best = self.matcher.get_best_match(text)
        if best is None:
            return ParsedReference(
                book_token=text,
                raw_input=text,
                error="Invalid reference format",
                error_kind=ReferenceErrorKind.SYNTAX,
            )

        reference = ParsedReference(book_token=text, book=best.book, raw_input=text)
        if not self._is_confident(best, text):
            return _invalid(
                reference,
                f'Did you mean "{best.book.name}"?',
                ReferenceErrorKind.AMBIGUOUS_BOOK,
            )
        return reference.with_numbers(None, None, None)


def _invalid(
    reference: ParsedReference, error: str, kind: ReferenceErrorKind
) -> ParsedReference:
    return ParsedReference(
        book_token=reference.book_token,
        book=reference.book,
        chapter=reference.chapter,
        verse_start=reference.verse_start,
        verse_end=reference.verse_end,
        is_valid=False,
        is_complete=False,
        error=error,
        error_kind=kind,
        raw_input=reference.raw_input,
    )


def parse_reference(
    raw: str, catalog: Iterable[BookRecord], settings: Settings | None = None
) -> ParsedReference:
    """Parse a reference against a catalog (convenience wrapper)."""
    return ReferenceParser(catalog, settings=settings).parse(raw)
