"""Collaborator data types: catalog books and stored verses."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Testament(Enum):
    """Old or New Testament classification."""

    OT = "OT"
    NT = "NT"


@dataclass(frozen=True)
class BookRecord:
    """A book as listed by the book catalog.

    The engine only borrows these; the catalog replaces the whole list when
    the translation changes.
    """

    id: int
    name: str
    short_name: str
    chapter_count: int
    testament: Testament | None = None
    category: str = ""
    order: int | None = None

    def __post_init__(self) -> None:
        if self.chapter_count < 1:
            raise ValueError(
                f"Book {self.name!r} must have at least one chapter, "
                f"got {self.chapter_count}"
            )


@dataclass(frozen=True)
class Verse:
    """A single verse row from a verse store."""

    book_id: int
    chapter: int
    verse: int
    text: str = ""
