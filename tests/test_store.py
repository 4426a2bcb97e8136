"""Tests for SQLite verse storage and the in-memory store."""

from __future__ import annotations

import json

import pytest

from smartref.catalog.demo_data import DEMO_VERSION
from smartref.catalog.store import (
    BookCatalog,
    InMemoryVerseStore,
    SqliteVerseStore,
    VerseStore,
    get_connection,
    import_verses_jsonl,
    init_db,
    insert_verses,
    load_demo_data,
)
from smartref.errors import DataUnavailableError


@pytest.fixture
def db_path(tmp_path):
    path = tmp_path / "smartref.db"
    conn = get_connection(path)
    init_db(conn)
    load_demo_data(conn)
    conn.close()
    return path


class TestSchema:
    """Tests for connection setup and schema."""

    def test_wal_mode_enabled(self, tmp_path):
        conn = get_connection(tmp_path / "test.db")
        mode = conn.execute("PRAGMA journal_mode").fetchone()[0]
        conn.close()
        assert mode.lower() == "wal"

    def test_init_db_idempotent(self, tmp_path):
        conn = get_connection(tmp_path / "test.db")
        init_db(conn)
        init_db(conn)
        tables = [
            row["name"]
            for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
        ]
        conn.close()
        assert "verses" in tables

    def test_insert_replaces_duplicates(self, tmp_path):
        conn = get_connection(tmp_path / "test.db")
        init_db(conn)
        insert_verses(conn, "V1", [(43, 3, 16, "old")])
        insert_verses(conn, "V1", [(43, 3, 16, "new")])
        rows = conn.execute("SELECT text FROM verses").fetchall()
        conn.close()
        assert [r["text"] for r in rows] == ["new"]


class TestSqliteVerseStore:
    """Tests for SqliteVerseStore."""

    @pytest.mark.asyncio
    async def test_demo_genesis_chapter(self, db_path):
        store = SqliteVerseStore(db_path)
        verses = await store.get_verses(DEMO_VERSION, 1, 1)
        assert len(verses) == 31
        assert [v.verse for v in verses] == list(range(1, 32))

    @pytest.mark.asyncio
    async def test_demo_psalm_text(self, db_path):
        store = SqliteVerseStore(db_path)
        verses = await store.get_verses(DEMO_VERSION, 19, 23)
        assert len(verses) == 6
        assert verses[0].text.startswith("The LORD is my shepherd")

    @pytest.mark.asyncio
    async def test_missing_chapter_is_empty(self, db_path):
        store = SqliteVerseStore(db_path)
        assert await store.get_verses(DEMO_VERSION, 2, 1) == []
        assert await store.get_verses("KJV", 1, 1) == []

    @pytest.mark.asyncio
    async def test_missing_table_raises(self, tmp_path):
        """Database errors surface as DataUnavailableError."""
        path = tmp_path / "empty.db"
        get_connection(path).close()
        store = SqliteVerseStore(path)
        with pytest.raises(DataUnavailableError) as exc_info:
            await store.get_verses(DEMO_VERSION, 1, 1)
        assert exc_info.value.book_id == 1
        assert exc_info.value.chapter == 1

    @pytest.mark.asyncio
    async def test_missing_database_not_created(self, tmp_path):
        """Reading from a missing database fails without creating the file."""
        path = tmp_path / "missing.db"
        store = SqliteVerseStore(path)

        with pytest.raises(DataUnavailableError):
            await store.get_verses(DEMO_VERSION, 1, 1)

        assert not path.exists()

    def test_list_versions(self, db_path):
        assert SqliteVerseStore(db_path).list_versions() == [DEMO_VERSION]

    def test_satisfies_protocol(self, db_path):
        assert isinstance(SqliteVerseStore(db_path), VerseStore)
        assert isinstance(InMemoryVerseStore(), VerseStore)


class TestImport:
    """Tests for JSON Lines import."""

    @pytest.mark.asyncio
    async def test_import(self, db_path, tmp_path):
        source = tmp_path / "verses.jsonl"
        lines = [
            json.dumps({"book_id": 43, "chapter": 3, "verse": v, "text": f"v{v}"})
            for v in range(1, 37)
        ]
        source.write_text("\n".join(lines) + "\n\n", encoding="utf-8")

        conn = get_connection(db_path)
        count = import_verses_jsonl(conn, source, "KJV")
        conn.close()

        assert count == 36
        verses = await SqliteVerseStore(db_path).get_verses("KJV", 43, 3)
        assert verses[-1].verse == 36
        assert verses[-1].text == "v36"

    def test_import_bad_line(self, db_path, tmp_path):
        source = tmp_path / "bad.jsonl"
        source.write_text('{"book_id": 43, "chapter": 3}\n', encoding="utf-8")

        conn = get_connection(db_path)
        with pytest.raises(ValueError, match="bad.jsonl:1"):
            import_verses_jsonl(conn, source, "KJV")
        conn.close()


class TestCatalogProtocol:
    def test_yaml_catalog_satisfies_protocol(self, book_catalog):
        assert isinstance(book_catalog, BookCatalog)
