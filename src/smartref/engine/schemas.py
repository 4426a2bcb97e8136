"""Result types for reference resolution.

Stable shapes for host and CLI consumption. All results are created fresh
per call and never mutated after they are returned, except
``ChapterVerseInfo`` which the bounds cache fills in as chapters load.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum

from smartref.catalog.models import BookRecord
from smartref.errors import ReferenceErrorKind


@dataclass(frozen=True)
class ParsedReference:
    """A structured, possibly partial, scripture reference."""

    book_token: str
    """Book-name text as typed (whitespace collapsed)."""

    book: BookRecord | None = None
    """Resolved book, or the best candidate when the match is ambiguous."""

    chapter: int | None = None
    verse_start: int | None = None
    verse_end: int | None = None

    is_valid: bool = False
    """Syntactically valid with a confidently resolved book."""

    is_complete: bool = False
    """Valid and has book, chapter and starting verse."""

    error: str | None = None
    """Human-readable problem description, set whenever is_valid is False
    (except for empty input)."""

    error_kind: ReferenceErrorKind | None = None

    raw_input: str = ""
    """Trimmed input the reference was parsed from."""

    def with_numbers(
        self, chapter: int | None, verse_start: int | None, verse_end: int | None
    ) -> "ParsedReference":
        """Copy with new numeric fields, marked valid and recomputed completeness."""
        return replace(
            self,
            chapter=chapter,
            verse_start=verse_start,
            verse_end=verse_end,
            is_valid=True,
            is_complete=(
                self.book is not None
                and chapter is not None
                and verse_start is not None
            ),
            error=None,
            error_kind=None,
        )

    def to_dict(self) -> dict:
        return {
            "book_token": self.book_token,
            "book": self.book.name if self.book else None,
            "book_id": self.book.id if self.book else None,
            "chapter": self.chapter,
            "verse_start": self.verse_start,
            "verse_end": self.verse_end,
            "is_valid": self.is_valid,
            "is_complete": self.is_complete,
            "error": self.error,
            "error_kind": self.error_kind.value if self.error_kind else None,
            "raw_input": self.raw_input,
        }


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of checking a reference against chapter/verse bounds."""

    is_valid: bool
    error: str | None = None
    auto_correction: ParsedReference | None = None
    """Clamped, complete reference that validates cleanly."""

    error_kind: ReferenceErrorKind | None = None

    def to_dict(self) -> dict:
        return {
            "is_valid": self.is_valid,
            "error": self.error,
            "error_kind": self.error_kind.value if self.error_kind else None,
            "auto_correction": (
                self.auto_correction.to_dict() if self.auto_correction else None
            ),
        }


@dataclass
class ChapterVerseInfo:
    """Chapter and verse bounds for one book in one Bible version."""

    book_id: int
    version_id: str
    chapter_count: int
    per_chapter_verse_count: dict[int, int] = field(default_factory=dict)
    max_verse_seen: int = 0
    loaded_at: float = 0.0
    assumed_chapters: set[int] = field(default_factory=set)
    """Chapters whose verses could not be loaded and hold a default count."""

    def record_chapter(
        self, chapter: int, verse_count: int, assumed: bool = False
    ) -> None:
        self.per_chapter_verse_count[chapter] = verse_count
        if assumed:
            self.assumed_chapters.add(chapter)
        else:
            self.assumed_chapters.discard(chapter)
        self.max_verse_seen = max(self.max_verse_seen, verse_count)

    def max_verse_for(self, chapter: int, default: int) -> int:
        """Verse count for a chapter, falling back to the largest seen."""
        return (
            self.per_chapter_verse_count.get(chapter)
            or self.max_verse_seen
            or default
        )


class SuggestionType(Enum):
    """What a suggestion completes the input to."""

    BOOK = "book"
    CHAPTER = "chapter"
    VERSE = "verse"
    COMPLETE = "complete"


@dataclass(frozen=True)
class Suggestion:
    """An autocomplete entry."""

    text: str
    reference: ParsedReference
    score: float
    type: SuggestionType

    def to_dict(self) -> dict:
        return {
            "text": self.text,
            "score": round(self.score, 3),
            "type": self.type.value,
            "reference": self.reference.to_dict(),
        }
