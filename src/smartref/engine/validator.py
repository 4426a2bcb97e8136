"""Chapter/verse bounds validation with auto-correction.

Checks run in order and stop at the first violation:
    chapter in [1, chapter_count]
    verse_start in [1, verses in chapter]
    verse_end in [verse_start, verses in chapter]

Every failure carries an ``auto_correction``: the whole reference with all
numeric fields clamped into range, which validates cleanly when resubmitted.
Verse failures in a chapter whose verses could not be loaded are reported
as DATA_UNAVAILABLE, since its count is only a default.
"""

from __future__ import annotations

import logging

from smartref.catalog.models import BookRecord
from smartref.engine.bounds import BoundsCache
from smartref.engine.schemas import ChapterVerseInfo, ParsedReference, ValidationResult
from smartref.errors import ReferenceErrorKind

logger = logging.getLogger(__name__)


def _clamp(value: int, low: int, high: int) -> int:
    return min(max(low, value), high)


def _verse_error_kind(info: ChapterVerseInfo, chapter: int) -> ReferenceErrorKind:
    # The count for a chapter that failed to load is only a default
    if chapter in info.assumed_chapters:
        return ReferenceErrorKind.DATA_UNAVAILABLE
    return ReferenceErrorKind.VERSE_RANGE


class ReferenceValidator:
    """Validates parsed references against per-version bounds."""

    def __init__(self, bounds: BoundsCache):
        self.bounds = bounds

    @property
    def default_verse_count(self) -> int:
        return self.bounds.settings.default_verse_count

    async def validate(
        self, reference: ParsedReference, version_id: str
    ) -> ValidationResult:
        """Check a reference's chapter and verses against the version's bounds.

        Args:
            reference: Output of the parser
            version_id: Bible version to check against

        Returns:
            ValidationResult; invalid results carry an auto_correction
            unless the parse itself was invalid
        """
        if not reference.is_valid or reference.book is None:
            return ValidationResult(
                is_valid=False,
                error=reference.error or "Invalid reference",
                error_kind=reference.error_kind or ReferenceErrorKind.SYNTAX,
            )

        book = reference.book
        info = await self.bounds.get_bounds(book, version_id)

        if reference.chapter is None:
            return ValidationResult(is_valid=True)

        chapter = reference.chapter
        if chapter < 1 or chapter > info.chapter_count:
            return ValidationResult(
                is_valid=False,
                error=f"{book.name} has only {info.chapter_count} chapters",
                auto_correction=self.auto_correct(reference, info),
                error_kind=ReferenceErrorKind.CHAPTER_RANGE,
            )

        if reference.verse_start is None:
            return ValidationResult(is_valid=True)

        max_verse = info.max_verse_for(chapter, self.default_verse_count)
        verse_start = reference.verse_start
        if verse_start < 1 or verse_start > max_verse:
            return ValidationResult(
                is_valid=False,
                error=f"{book.name} {chapter} has only {max_verse} verses",
                auto_correction=self.auto_correct(reference, info),
                error_kind=_verse_error_kind(info, chapter),
            )

        verse_end = reference.verse_end
        if verse_end is not None and (verse_end < verse_start or verse_end > max_verse):
            return ValidationResult(
                is_valid=False,
                error=(
                    f"Invalid verse range. {book.name} {chapter} "
                    f"has {max_verse} verses"
                ),
                auto_correction=self.auto_correct(reference, info),
                error_kind=_verse_error_kind(info, chapter),
            )

        return ValidationResult(is_valid=True)

    def auto_correct(
        self, reference: ParsedReference, info: ChapterVerseInfo
    ) -> ParsedReference:
        """Clamp every numeric field into the bounds of the (clamped) chapter.

        A chapter-only reference gains verse 1 so the correction is always
        complete.
        """
        chapter = reference.chapter
        verse_start = reference.verse_start
        verse_end = reference.verse_end

        if chapter is not None:
            chapter = _clamp(chapter, 1, info.chapter_count)
            max_verse = info.max_verse_for(chapter, self.default_verse_count)
            if verse_start is None:
                verse_start = 1
            verse_start = _clamp(verse_start, 1, max_verse)
            if verse_end is not None:
                verse_end = _clamp(verse_end, verse_start, max_verse)

        return reference.with_numbers(chapter, verse_start, verse_end)

    def get_max_chapter(self, book: BookRecord, version_id: str | None = None) -> int:
        """Chapter count from cached bounds, else from the catalog."""
        if version_id is not None:
            info = self.bounds.peek(book.id, version_id)
            if info is not None:
                return info.chapter_count
        return book.chapter_count

    async def get_max_verse(
        self, book: BookRecord, chapter: int, version_id: str | None
    ) -> int:
        """Verse count for a chapter, loading bounds if needed."""
        if not version_id:
            return self.default_verse_count
        info = await self.bounds.get_bounds(book, version_id)
        return info.max_verse_for(chapter, self.default_verse_count)


async def validate_reference(
    reference: ParsedReference, version_id: str, bounds: BoundsCache
) -> ValidationResult:
    """Validate a reference using the given bounds cache."""
    return await ReferenceValidator(bounds).validate(reference, version_id)
