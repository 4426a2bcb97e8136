"""Tests for reference formatting and comparison."""

from __future__ import annotations

import pytest

from smartref.engine.formatter import (
    format_reference,
    format_short_reference,
    format_suggestion_text,
    reference_key,
    references_equal,
)
from smartref.engine.parser import ReferenceParser
from smartref.engine.schemas import ParsedReference


@pytest.fixture
def parse(catalog):
    return ReferenceParser(catalog).parse


class TestFormatReference:
    """Tests for format_reference() and format_short_reference()."""

    def test_full_reference(self, parse):
        assert format_reference(parse("jn 3:16")) == "John 3:16"

    def test_range(self, parse):
        assert format_reference(parse("jn 3:16-18")) == "John 3:16-18"

    def test_single_verse_range_collapses(self, parse):
        """A range that starts and ends on one verse prints as one verse."""
        assert format_reference(parse("John 3:16-16")) == "John 3:16"

    def test_chapter_only(self, parse):
        assert format_reference(parse("1jn 2")) == "1 John 2"

    def test_book_only(self, parse):
        assert format_reference(parse("Genesis")) == "Genesis"

    def test_unresolved_falls_back_to_raw(self):
        """Without a book the raw input is returned."""
        ref = ParsedReference(book_token="foo", raw_input="foo 1")
        assert format_reference(ref) == "foo 1"

    def test_short_name(self, parse):
        assert format_short_reference(parse("John 3:16-17")) == "Joh 3:16-17"

    def test_suggestion_text(self, books_by_name):
        john = books_by_name["John"]
        assert format_suggestion_text(john) == "John"
        assert format_suggestion_text(john, 3) == "John 3"
        assert format_suggestion_text(john, 3, 16) == "John 3:16"


class TestReferenceKey:
    """Tests for reference_key() and references_equal()."""

    def test_key(self, parse):
        assert reference_key(parse("John 3:16")) == "43:3:16"
        assert reference_key(parse("John 3:16-17")) == "43:3:16:17"
        assert reference_key(parse("John 3")) == "43:3"

    def test_key_without_book(self):
        assert reference_key(ParsedReference(book_token="")) == ""

    def test_equal_across_spellings(self, parse):
        """Different spellings of one passage compare equal."""
        assert references_equal(parse("jn 3:16"), parse("John 3:16"))
        assert references_equal(parse("John 3:16-16"), parse("John 3:16"))

    def test_not_equal(self, parse):
        assert not references_equal(parse("John 3:16"), parse("John 3:17"))
        assert not references_equal(parse("John 3:16"), parse("1 John 3:16"))
