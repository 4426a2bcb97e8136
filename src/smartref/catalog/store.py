"""Collaborator interfaces and verse store implementations.

The engine consumes two collaborators:

- ``BookCatalog.list_books()``: synchronous list of ``BookRecord``
- ``VerseStore.get_verses(version_id, book_id, chapter)``: coroutine returning
  the verses of one chapter; only verse numbers are used

``SqliteVerseStore`` reads a ``verses`` table; ``InMemoryVerseStore`` serves
dict data for demos and tests.
"""

from __future__ import annotations

import asyncio
import json
import logging
import sqlite3
from pathlib import Path
from typing import Iterable, Protocol, runtime_checkable

from smartref.catalog.demo_data import DEMO_VERSE_COUNTS, DEMO_VERSES, DEMO_VERSION
from smartref.catalog.models import BookRecord, Verse
from smartref.errors import DataUnavailableError

logger = logging.getLogger(__name__)


@runtime_checkable
class BookCatalog(Protocol):
    """Source of canonical book records."""

    def list_books(self) -> list[BookRecord]:
        """Return all books with chapter counts."""
        ...


@runtime_checkable
class VerseStore(Protocol):
    """Source of verse rows, used to learn per-chapter verse counts."""

    async def get_verses(
        self, version_id: str, book_id: int, chapter: int
    ) -> list[Verse]:
        """Return the verses of one chapter, in verse order."""
        ...


class InMemoryVerseStore:
    """Verse store over a dict of (version_id, book_id, chapter) -> verses."""

    def __init__(self, verses: dict[tuple[str, int, int], list[Verse]] | None = None):
        self._verses: dict[tuple[str, int, int], list[Verse]] = dict(verses or {})

    def add_chapter(
        self, version_id: str, book_id: int, chapter: int, verse_count: int
    ) -> None:
        """Register a chapter with verses numbered 1..verse_count."""
        self._verses[(version_id, book_id, chapter)] = [
            Verse(book_id=book_id, chapter=chapter, verse=v)
            for v in range(1, verse_count + 1)
        ]

    async def get_verses(
        self, version_id: str, book_id: int, chapter: int
    ) -> list[Verse]:
        return list(self._verses.get((version_id, book_id, chapter), []))


# ============================================================================
# SQLite storage
# ============================================================================


def get_connection(db_path: Path | str) -> sqlite3.Connection:
    """Get a SQLite connection with row factory and WAL mode."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode = WAL")
    return conn


def init_db(conn: sqlite3.Connection) -> None:
    """Initialize database schema."""
    conn.executescript("""
        -- verses: one row per verse per Bible version
        CREATE TABLE IF NOT EXISTS verses (
            id INTEGER PRIMARY KEY,
            version_id TEXT NOT NULL,
            book_id INTEGER NOT NULL,
            chapter INTEGER NOT NULL,
            verse INTEGER NOT NULL,
            text TEXT NOT NULL DEFAULT '',
            UNIQUE(version_id, book_id, chapter, verse)
        );

        CREATE INDEX IF NOT EXISTS idx_verses_chapter
            ON verses(version_id, book_id, chapter);
    """)
    conn.commit()


def insert_verses(
    conn: sqlite3.Connection,
    version_id: str,
    rows: Iterable[tuple[int, int, int, str]],
) -> int:
    """Insert (book_id, chapter, verse, text) rows for a version.

    Returns:
        Number of rows written
    """
    cursor = conn.executemany(
        """
        INSERT OR REPLACE INTO verses (version_id, book_id, chapter, verse, text)
        VALUES (?, ?, ?, ?, ?)
        """,
        ((version_id, b, c, v, t) for b, c, v, t in rows),
    )
    conn.commit()
    return cursor.rowcount


def load_demo_data(conn: sqlite3.Connection) -> int:
    """Load the DEMO version verse rows (for offline testing)."""
    rows: list[tuple[int, int, int, str]] = []
    for book_id, counts in DEMO_VERSE_COUNTS.items():
        for chapter, count in enumerate(counts, start=1):
            rows.extend((book_id, chapter, v, "") for v in range(1, count + 1))
    rows.extend(DEMO_VERSES)
    return insert_verses(conn, DEMO_VERSION, rows)


def import_verses_jsonl(
    conn: sqlite3.Connection, path: Path, version_id: str
) -> int:
    """Import verses from a JSON Lines file.

    Each line: {"book_id": 43, "chapter": 3, "verse": 16, "text": "..."}

    Raises:
        ValueError: If a line is not valid JSON or lacks a required field
    """
    rows: list[tuple[int, int, int, str]] = []
    with open(path, "r", encoding="utf-8") as f:
        for line_no, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                record = json.loads(line)
                rows.append(
                    (
                        int(record["book_id"]),
                        int(record["chapter"]),
                        int(record["verse"]),
                        str(record.get("text", "")),
                    )
                )
            except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
                raise ValueError(f"{path}:{line_no}: invalid verse record ({e})")

    inserted = insert_verses(conn, version_id, rows)
    logger.info(f"Imported {len(rows)} verses into version {version_id} from {path}")
    return inserted


class SqliteVerseStore:
    """Verse store backed by the SQLite ``verses`` table.

    Queries run in the default executor so the event loop stays responsive.
    Each query opens its own connection; sqlite connections are not shared
    across threads.
    """

    def __init__(self, db_path: Path | str):
        self.db_path = Path(db_path)

    def _connect(self) -> sqlite3.Connection:
        # Read-only: a missing database is an error, never an empty new file
        uri = f"{self.db_path.resolve().as_uri()}?mode=ro"
        return sqlite3.connect(uri, uri=True)

    def _fetch(self, version_id: str, book_id: int, chapter: int) -> list[Verse]:
        try:
            conn = self._connect()
            try:
                cursor = conn.execute(
                    """
                    SELECT book_id, chapter, verse, text
                    FROM verses
                    WHERE version_id = ? AND book_id = ? AND chapter = ?
                    ORDER BY verse
                    """,
                    (version_id, book_id, chapter),
                )
                return [
                    Verse(book_id=row[0], chapter=row[1], verse=row[2], text=row[3])
                    for row in cursor
                ]
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise DataUnavailableError(
                f"Cannot read verses for book {book_id} chapter {chapter}: {e}",
                book_id=book_id,
                chapter=chapter,
            ) from e

    async def get_verses(
        self, version_id: str, book_id: int, chapter: int
    ) -> list[Verse]:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            None, self._fetch, version_id, book_id, chapter
        )

    def list_versions(self) -> list[str]:
        """Return the version ids present in the database."""
        conn = self._connect()
        try:
            cursor = conn.execute(
                "SELECT DISTINCT version_id FROM verses ORDER BY version_id"
            )
            return [row[0] for row in cursor]
        finally:
            conn.close()
