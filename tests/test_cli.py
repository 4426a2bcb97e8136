"""Tests for the smartref CLI."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from smartref.__main__ import cli


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def db_args(runner, tmp_path) -> list[str]:
    """--db option pointing at an initialized DEMO database."""
    args = ["--db", str(tmp_path / "smartref.db")]
    result = runner.invoke(cli, args + ["init", "--demo"])
    assert result.exit_code == 0, result.output
    return args


class TestInit:
    def test_init_demo(self, runner, tmp_path):
        db = tmp_path / "nested" / "smartref.db"
        result = runner.invoke(cli, ["--db", str(db), "init", "--demo"])

        assert result.exit_code == 0
        assert "Loaded" in result.output
        assert "Database initialized" in result.output
        assert db.exists()

    def test_import_verses(self, runner, db_args, tmp_path):
        source = tmp_path / "kjv.jsonl"
        source.write_text(
            "\n".join(
                json.dumps({"book_id": 43, "chapter": 3, "verse": v})
                for v in range(1, 37)
            ),
            encoding="utf-8",
        )

        result = runner.invoke(
            cli, db_args + ["import-verses", str(source), "--version", "KJV"]
        )

        assert result.exit_code == 0
        assert "Imported 36 verses into KJV" in result.output

    def test_import_bad_file(self, runner, db_args, tmp_path):
        source = tmp_path / "bad.jsonl"
        source.write_text("not json\n", encoding="utf-8")

        result = runner.invoke(
            cli, db_args + ["import-verses", str(source), "--version", "KJV"]
        )

        assert result.exit_code == 1
        assert "Error" in result.output


class TestLookupCommands:
    """Tests for parse, match, suggest, complete and books."""

    def test_parse(self, runner):
        result = runner.invoke(cli, ["parse", "jn 3:16-17"])
        assert result.exit_code == 0
        assert "John 3:16-17" in result.output

    def test_parse_json(self, runner):
        result = runner.invoke(cli, ["parse", "1 John 2", "--json"])
        data = json.loads(result.output)
        assert data["book"] == "1 John"
        assert data["chapter"] == 2
        assert data["is_valid"] is True
        assert data["is_complete"] is False

    def test_parse_typo(self, runner):
        result = runner.invoke(cli, ["parse", "Pslam 23"])
        assert result.exit_code == 1
        assert 'Did you mean "Psalms"?' in result.output

    def test_match_json(self, runner):
        result = runner.invoke(cli, ["match", "Pslam", "--json"])
        data = json.loads(result.output)
        assert data[0]["book"] == "Psalms"
        assert data[0]["match_type"] == "fuzzy"

    def test_match_table(self, runner):
        result = runner.invoke(cli, ["match", "ex"])
        assert result.exit_code == 0
        assert "Exodus" in result.output

    def test_suggest_json(self, runner):
        result = runner.invoke(cli, ["suggest", "ex", "--json"])
        data = json.loads(result.output)
        assert [s["text"] for s in data] == ["Exodus", "Exodus 1", "Exodus 1:1"]

    def test_complete(self, runner):
        result = runner.invoke(cli, ["complete", "jn", "3:16"])
        assert result.exit_code == 0
        assert "John 3:16-17" in result.output

    def test_complete_unknown_book(self, runner):
        result = runner.invoke(cli, ["complete", "qqqqqqqq"])
        assert result.exit_code == 1

    def test_books_filter(self, runner):
        result = runner.invoke(cli, ["books", "--testament", "NT"])
        assert result.exit_code == 0
        assert "Matthew" in result.output
        assert "Genesis" not in result.output

    def test_books_show_category(self, runner):
        result = runner.invoke(cli, ["books", "--testament", "NT"])
        assert "Category" in result.output
        assert "Gospel" in result.output
        assert "Law" not in result.output

    def test_bad_catalog(self, runner, tmp_path):
        catalog = tmp_path / "books.yaml"
        catalog.write_text("books: []\n", encoding="utf-8")

        result = runner.invoke(cli, ["--catalog", str(catalog), "parse", "John 3:16"])

        assert result.exit_code == 1
        assert "Error loading book catalog" in result.output


class TestValidate:
    """Tests for the validate command against the DEMO database."""

    def test_out_of_range(self, runner, db_args):
        result = runner.invoke(cli, db_args + ["validate", "Genesis 51:1"])

        assert result.exit_code == 1
        assert "Genesis has only 50 chapters" in result.output
        assert "Genesis 50:1" in result.output

    def test_valid(self, runner, db_args):
        result = runner.invoke(
            cli, db_args + ["validate", "jn 3:16", "--version", "DEMO"]
        )

        assert result.exit_code == 0
        assert "John 3:16" in result.output
        assert "John 3:17" in result.output

    def test_json_report(self, runner, db_args):
        result = runner.invoke(cli, db_args + ["validate", "Genesis 1:32", "--json"])

        data = json.loads(result.output)
        assert result.exit_code == 1
        assert data["version_id"] == "DEMO"
        assert data["error"] == "Genesis 1 has only 31 verses"
        assert data["error_kind"] == "verse_range"
        assert data["auto_correction"] == "Genesis 1:31"
        assert data["parsed"]["book"] == "Genesis"

    def test_missing_database(self, runner, tmp_path):
        db = tmp_path / "absent.db"
        result = runner.invoke(cli, ["--db", str(db), "validate", "Genesis 1:40"])

        assert result.exit_code == 1
        assert "No verse database" in result.output
        assert "Genesis 1 has only 31 verses" in result.output
        assert not db.exists()
