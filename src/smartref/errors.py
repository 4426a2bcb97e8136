"""Error taxonomy for reference resolution.

Parse, match and range problems are reported as data on ``ParsedReference``
and ``ValidationResult`` (see ``ReferenceErrorKind``). Exceptions are reserved
for collaborator failures and broken configuration.
"""

from __future__ import annotations

from enum import Enum


class ReferenceErrorKind(Enum):
    """Why a reference was rejected."""

    SYNTAX = "syntax"
    UNKNOWN_BOOK = "unknown_book"
    AMBIGUOUS_BOOK = "ambiguous_book"
    CHAPTER_RANGE = "chapter_range"
    VERSE_RANGE = "verse_range"
    INVALID_RANGE = "invalid_range"
    DATA_UNAVAILABLE = "data_unavailable"


class SmartRefError(Exception):
    """Base class for SmartRef exceptions."""

    pass


class DataUnavailableError(SmartRefError):
    """Raised by a verse store when verses for a chapter cannot be read."""

    def __init__(
        self, message: str, book_id: int | None = None, chapter: int | None = None
    ):
        self.book_id = book_id
        self.chapter = chapter
        super().__init__(message)


class CatalogValidationError(SmartRefError):
    """Raised when a book catalog file is malformed."""

    def __init__(self, message: str, book_key: str | None = None):
        self.book_key = book_key
        full_message = f"[{book_key}] {message}" if book_key else message
        super().__init__(full_message)
