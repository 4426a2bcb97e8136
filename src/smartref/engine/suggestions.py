"""Autocomplete suggestions for partial reference input.

Suggestions are structurally plausible references built from in-memory data
only; they are not checked against chapter/verse bounds.
"""

from __future__ import annotations

import re
from typing import Iterable

from smartref.catalog.models import BookRecord
from smartref.config import Settings
from smartref.engine.formatter import format_suggestion_text
from smartref.engine.matcher import FuzzyBookMatcher
from smartref.engine.schemas import ParsedReference, Suggestion, SuggestionType

CHAPTER_DEDUCTION = 100.0
COMPLETE_DEDUCTION = 200.0

_TRAILING_VERSE = re.compile(r"(\d+):(\d+)$")
_TRAILING_COLON = re.compile(r"(\d+):$")
_TRAILING_CHAPTER = re.compile(r"(\d+)$")


def _reference(
    book: BookRecord,
    chapter: int | None = None,
    verse_start: int | None = None,
    verse_end: int | None = None,
) -> ParsedReference:
    text = format_suggestion_text(book, chapter, verse_start)
    if verse_end is not None:
        text += f"-{verse_end}"
    return ParsedReference(
        book_token=book.name,
        book=book,
        chapter=chapter,
        verse_start=verse_start,
        verse_end=verse_end,
        is_valid=True,
        is_complete=chapter is not None and verse_start is not None,
        raw_input=text,
    )


def _suggest(
    book: BookRecord,
    score: float,
    kind: SuggestionType,
    chapter: int | None = None,
    verse_start: int | None = None,
    verse_end: int | None = None,
) -> Suggestion:
    reference = _reference(book, chapter, verse_start, verse_end)
    return Suggestion(
        text=reference.raw_input, reference=reference, score=score, type=kind
    )


class SuggestionGenerator:
    """Builds ranked suggestions from book matches."""

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

    def generate(self, text: str, limit: int | None = None) -> list[Suggestion]:
        """Suggestions for partially typed input, best first.

        Each of the top book matches yields a book suggestion; confident
        matches also yield "<Book> 1" and "<Book> 1:1" at fixed deductions
        from the match score.
        """
        if limit is None:
            limit = self.settings.suggestion_limit
        if not text.strip():
            return []

        suggestions: list[Suggestion] = []
        for match in self.matcher.find_matches(
            text, self.settings.suggestion_match_count
        ):
            suggestions.append(_suggest(match.book, match.score, SuggestionType.BOOK))

            if match.score > self.settings.high_confidence_score:
                suggestions.append(
                    _suggest(
                        match.book,
                        match.score - CHAPTER_DEDUCTION,
                        SuggestionType.CHAPTER,
                        chapter=1,
                    )
                )
                suggestions.append(
                    _suggest(
                        match.book,
                        match.score - COMPLETE_DEDUCTION,
                        SuggestionType.COMPLETE,
                        chapter=1,
                        verse_start=1,
                    )
                )

        # sorted() is stable: equal scores keep insertion order
        suggestions = sorted(suggestions, key=lambda s: -s.score)
        return suggestions[:limit]


def completion_suggestions(book: BookRecord, partial_tail: str) -> list[Suggestion]:
    """Suggestions once the book is known and the user keeps typing numbers.

    Args:
        book: Resolved book
        partial_tail: Text typed so far (only its trailing numbers matter)
    """
    tail = partial_tail.strip()

    verse_match = _TRAILING_VERSE.search(tail)
    if verse_match:
        chapter, verse = int(verse_match.group(1)), int(verse_match.group(2))
        return [
            _suggest(
                book,
                800.0,
                SuggestionType.COMPLETE,
                chapter=chapter,
                verse_start=verse,
                verse_end=verse + 1,
            )
        ]

    colon_match = _TRAILING_COLON.search(tail)
    if colon_match:
        chapter = int(colon_match.group(1))
        return [
            _suggest(book, 900.0, SuggestionType.VERSE, chapter=chapter, verse_start=1)
        ]

    chapter_match = _TRAILING_CHAPTER.search(tail)
    if chapter_match:
        chapter = int(chapter_match.group(1))
        return [
            _suggest(book, 900.0, SuggestionType.COMPLETE, chapter=chapter, verse_start=1)
        ]

    return [
        _suggest(book, 900.0, SuggestionType.CHAPTER, chapter=1),
        _suggest(book, 850.0, SuggestionType.COMPLETE, chapter=1, verse_start=1),
    ]


def follow_on_suggestions(reference: ParsedReference, limit: int = 3) -> list[str]:
    """Next places to go from a reference: next verse, a range, next chapter."""
    book = reference.book
    if book is None:
        return []

    if reference.chapter is None:
        suggestions = [f"{book.name} 1", f"{book.name} 1:1"]
    elif reference.verse_start is None:
        suggestions = [f"{book.name} {reference.chapter}:1"]
    else:
        chapter, verse = reference.chapter, reference.verse_start
        suggestions = [f"{book.name} {chapter}:{verse + 1}"]
        if reference.verse_end is None:
            suggestions.append(f"{book.name} {chapter}:{verse}-{verse + 1}")
        suggestions.append(f"{book.name} {chapter + 1}:1")

    return suggestions[:limit]


def generate_suggestions(
    text: str,
    catalog: Iterable[BookRecord],
    limit: int = 5,
    settings: Settings | None = None,
) -> list[Suggestion]:
    """Ranked autocomplete suggestions for partial input."""
    return SuggestionGenerator(catalog, settings=settings).generate(text, limit)
