"""Per-book chapter/verse bounds cache.

Bounds are learned lazily from the verse store: the first request for a
(book, version) fetches every chapter of the book once and records the
highest verse number seen in each. Later requests are served from memory.

Concurrent requests for the same key share one population task; waiters
await that task instead of polling. A waiter that gets cancelled does not
cancel the population, so the fetched data still lands in the cache.

Switching Bible version clears the cache. A population that was started for
the previous version finishes for its own waiters but is not stored.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any

from smartref.catalog.models import BookRecord
from smartref.catalog.store import VerseStore
from smartref.config import Settings
from smartref.engine.schemas import ChapterVerseInfo

logger = logging.getLogger(__name__)

BoundsKey = tuple[int, str]


class BoundsCache:
    """Cache of ChapterVerseInfo keyed by (book_id, version_id)."""

    def __init__(self, verse_store: VerseStore, settings: Settings | None = None):
        self._store = verse_store
        self.settings = settings or Settings()
        self._entries: dict[BoundsKey, ChapterVerseInfo] = {}
        self._pending: dict[BoundsKey, asyncio.Task[ChapterVerseInfo]] = {}
        self._version_id: str | None = None
        self._epoch = 0
        self._populations = 0
        self._chapter_fetches = 0
        self._failed_fetches = 0

    @property
    def version_id(self) -> str | None:
        """Version the cached entries belong to."""
        return self._version_id

    def set_version(self, version_id: str) -> None:
        """Make version_id current, clearing bounds from any other version."""
        if version_id == self._version_id:
            return
        if self._version_id is not None:
            logger.info(
                f"Bible version changed {self._version_id} -> {version_id}, "
                "clearing bounds cache"
            )
        self.invalidate()
        self._version_id = version_id

    def invalidate(self) -> None:
        """Drop all cached bounds. In-flight populations will not be stored."""
        self._entries.clear()
        self._pending.clear()
        self._epoch += 1

    def peek(self, book_id: int, version_id: str) -> ChapterVerseInfo | None:
        """Cached bounds without triggering a fetch."""
        return self._fresh_entry((book_id, version_id))

    async def get_bounds(self, book: BookRecord, version_id: str) -> ChapterVerseInfo:
        """Return bounds for a book, fetching them on first use.

        Args:
            book: Catalog book (its chapter_count drives the fetch)
            version_id: Bible version

        Returns:
            ChapterVerseInfo for (book.id, version_id)
        """
        self.set_version(version_id)
        key = (book.id, version_id)

        cached = self._fresh_entry(key)
        if cached is not None:
            logger.debug(f"Bounds cache hit: {book.name} ({version_id})")
            return cached

        task = self._pending.get(key)
        if task is None:
            task = asyncio.ensure_future(self._populate(book, version_id, self._epoch))
            self._pending[key] = task
        else:
            logger.debug(f"Waiting on in-flight bounds load: {book.name} ({version_id})")

        return await asyncio.shield(task)

    def _fresh_entry(self, key: BoundsKey) -> ChapterVerseInfo | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        ttl = self.settings.bounds_ttl_seconds
        if ttl is not None and time.monotonic() - entry.loaded_at > ttl:
            del self._entries[key]
            return None
        return entry

    async def _populate(
        self, book: BookRecord, version_id: str, epoch: int
    ) -> ChapterVerseInfo:
        key = (book.id, version_id)
        info = ChapterVerseInfo(
            book_id=book.id,
            version_id=version_id,
            chapter_count=book.chapter_count,
        )
        self._populations += 1
        logger.debug(
            f"Loading bounds for {book.name} ({version_id}): "
            f"{book.chapter_count} chapters"
        )

        try:
            for chapter in range(1, book.chapter_count + 1):
                self._chapter_fetches += 1
                try:
                    verses = await self._store.get_verses(version_id, book.id, chapter)
                except Exception as e:
                    # Store failures degrade to a conservative default
                    self._failed_fetches += 1
                    logger.debug(
                        f"Failed to load verses for {book.name} {chapter}: {e}"
                    )
                    info.record_chapter(
                        chapter, self.settings.default_verse_count, assumed=True
                    )
                    continue

                info.record_chapter(chapter, max((v.verse for v in verses), default=0))

            if info.assumed_chapters:
                chapters = ", ".join(str(c) for c in sorted(info.assumed_chapters))
                logger.warning(
                    f"Failed to load verses for {book.name} ({version_id}) "
                    f"chapter(s) {chapters}; assuming "
                    f"{self.settings.default_verse_count} verses"
                )

            info.loaded_at = time.monotonic()
            if epoch == self._epoch:
                self._entries[key] = info
            else:
                logger.debug(f"Discarding bounds for {book.name} from stale version")
            return info
        finally:
            if epoch == self._epoch:
                self._pending.pop(key, None)

    def stats(self) -> dict[str, Any]:
        """Counters for diagnostics and tests."""
        return {
            "version_id": self._version_id,
            "entries": len(self._entries),
            "in_flight": len(self._pending),
            "populations": self._populations,
            "chapter_fetches": self._chapter_fetches,
            "failed_fetches": self._failed_fetches,
        }
