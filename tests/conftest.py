"""Shared fixtures: the packaged catalog and fake verse stores."""

from __future__ import annotations

import asyncio

import pytest

from smartref.catalog.books import YamlBookCatalog
from smartref.catalog.models import BookRecord, Verse
from smartref.catalog.store import InMemoryVerseStore
from smartref.errors import DataUnavailableError


@pytest.fixture(scope="session")
def book_catalog() -> YamlBookCatalog:
    """The packaged 66-book catalog."""
    return YamlBookCatalog.load()


@pytest.fixture
def catalog(book_catalog) -> list[BookRecord]:
    return book_catalog.list_books()


@pytest.fixture
def books_by_name(catalog) -> dict[str, BookRecord]:
    return {book.name: book for book in catalog}


class CountingVerseStore(InMemoryVerseStore):
    """In-memory store that counts fetches and can fail or stall chapters."""

    def __init__(self, failing_chapters=(), delay: float = 0.0):
        super().__init__()
        self.calls: list[tuple[str, int, int]] = []
        self.failing_chapters = set(failing_chapters)
        self.delay = delay

    async def get_verses(
        self, version_id: str, book_id: int, chapter: int
    ) -> list[Verse]:
        self.calls.append((version_id, book_id, chapter))
        if self.delay:
            await asyncio.sleep(self.delay)
        if chapter in self.failing_chapters:
            raise DataUnavailableError(
                f"chapter {chapter} unavailable", book_id=book_id, chapter=chapter
            )
        return await super().get_verses(version_id, book_id, chapter)


@pytest.fixture
def verse_store() -> CountingVerseStore:
    """Genesis (KJV) and John (KJV) with a few real verse counts."""
    store = CountingVerseStore()
    for chapter in range(1, 51):
        store.add_chapter("KJV", 1, chapter, 31 if chapter == 1 else 25)
    store.add_chapter("KJV", 43, 3, 36)
    store.add_chapter("KJV", 43, 1, 51)
    return store


@pytest.fixture
def make_store():
    """Factory for CountingVerseStore instances."""
    return CountingVerseStore
