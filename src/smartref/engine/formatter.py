"""Reference formatting and comparison."""

from __future__ import annotations

from smartref.catalog.models import BookRecord
from smartref.engine.schemas import ParsedReference


def _format_numbers(label: str, reference: ParsedReference) -> str:
    formatted = label
    if reference.chapter is not None:
        formatted += f" {reference.chapter}"
        if reference.verse_start is not None:
            formatted += f":{reference.verse_start}"
            if (
                reference.verse_end is not None
                and reference.verse_end != reference.verse_start
            ):
                formatted += f"-{reference.verse_end}"
    return formatted


def format_reference(reference: ParsedReference) -> str:
    """Format as "<Book> <chapter>:<verse>[-<end>]" using the full book name.

    Falls back to the raw input when no book was resolved.
    """
    if reference.book is None:
        return reference.raw_input
    return _format_numbers(reference.book.name, reference)


def format_short_reference(reference: ParsedReference) -> str:
    """Like format_reference but with the book's short name."""
    if reference.book is None:
        return reference.raw_input
    return _format_numbers(reference.book.short_name or reference.book.name, reference)


def format_suggestion_text(
    book: BookRecord, chapter: int | None = None, verse: int | None = None
) -> str:
    text = book.name
    if chapter is not None:
        text += f" {chapter}"
        if verse is not None:
            text += f":{verse}"
    return text


def reference_key(reference: ParsedReference) -> str:
    """Stable key "<book_id>:<chapter>:<verse>[:<end>]" for comparisons."""
    if reference.book is None:
        return ""

    parts = [str(reference.book.id)]
    if reference.chapter is not None:
        parts.append(str(reference.chapter))
        if reference.verse_start is not None:
            parts.append(str(reference.verse_start))
            if (
                reference.verse_end is not None
                and reference.verse_end != reference.verse_start
            ):
                parts.append(str(reference.verse_end))

    return ":".join(parts)


def references_equal(first: ParsedReference, second: ParsedReference) -> bool:
    """True if both point at the same book/chapter/verse span."""
    return reference_key(first) == reference_key(second)
