"""Tests for fuzzy book matching.

Tests cover:
- Each scoring tier (exact, abbreviation, prefix, substring, fuzzy)
- Disjoint tier bands across many inputs
- Tie-breaking by canonical order
- Levenshtein distance properties
"""

from __future__ import annotations

import pytest

from smartref.catalog.models import BookRecord
from smartref.engine.matcher import (
    EXACT_SCORE,
    FuzzyBookMatcher,
    MatchType,
    book_sort_key,
    find_book_matches,
    get_best_match,
    levenshtein_distance,
    similarity,
)

TIER_RANK = {
    MatchType.EXACT: 0,
    MatchType.ABBREVIATION: 1,
    MatchType.PREFIX: 2,
    MatchType.SUBSTRING: 3,
    MatchType.FUZZY: 4,
}


class TestMatchTiers:
    """Tests for the individual scoring tiers."""

    def test_exact_full_name(self, catalog):
        """Full book name is an exact match."""
        best = get_best_match("genesis", catalog)
        assert best.book.name == "Genesis"
        assert best.match_type == MatchType.EXACT
        assert best.score == EXACT_SCORE

    def test_exact_short_name(self, catalog):
        """Catalog short name is an exact match."""
        best = get_best_match("Gen", catalog)
        assert best.book.name == "Genesis"
        assert best.match_type == MatchType.EXACT

    def test_abbreviation(self, catalog):
        """Known abbreviation scores 900."""
        best = get_best_match("gn", catalog)
        assert best.book.name == "Genesis"
        assert best.match_type == MatchType.ABBREVIATION
        assert best.score == 900.0

    def test_prefix(self, catalog):
        """Name prefix scores in the prefix band."""
        best = get_best_match("revel", catalog)
        assert best.book.name == "Revelation"
        assert best.match_type == MatchType.PREFIX
        assert 800.0 <= best.score <= 899.0

    def test_prefix_score_clamped(self, catalog):
        """A prefix longer than the short name stays below the abbreviation score."""
        best = get_best_match("genes", catalog)
        assert best.match_type == MatchType.PREFIX
        assert best.score <= 899.0

    def test_substring(self, catalog):
        """Text inside a name scores in the substring band."""
        best = get_best_match("velation", catalog)
        assert best.book.name == "Revelation"
        assert best.match_type == MatchType.SUBSTRING
        assert 600.0 <= best.score < 650.0

    def test_fuzzy_typo(self, catalog):
        """A transposition typo falls through to the fuzzy tier."""
        matches = find_book_matches("Pslam", catalog)
        top = matches[0]
        assert top.book.name == "Psalms"
        assert top.match_type == MatchType.FUZZY
        assert 0.0 < top.score <= 400.0

    def test_ex_prefers_exodus(self, catalog):
        """"ex" resolves to Exodus above any Ezra/Ezekiel candidate."""
        matches = find_book_matches("ex", catalog, limit=10)
        assert matches[0].book.name == "Exodus"
        assert matches[0].match_type in (MatchType.ABBREVIATION, MatchType.PREFIX)
        for m in matches[1:]:
            if m.book.name in ("Ezra", "Ezekiel"):
                assert m.score < matches[0].score

    def test_no_match(self, catalog):
        """Nonsense input matches nothing."""
        assert find_book_matches("qqqqqqqq", catalog) == []
        assert get_best_match("qqqqqqqq", catalog) is None

    def test_empty_input(self, catalog):
        """Empty or blank input returns no matches."""
        assert find_book_matches("", catalog) == []
        assert find_book_matches("   ", catalog) == []


class TestRanking:
    """Tests for ordering and limits."""

    @pytest.mark.parametrize(
        "query", ["jo", "john", "ez", "co", "1", "am", "ma", "sam", "the", "jn"]
    )
    def test_tiers_never_overlap(self, catalog, query):
        """Every match in a higher tier outscores every match in a lower one."""
        matches = find_book_matches(query, catalog, limit=len(catalog))
        for a in matches:
            for b in matches:
                if TIER_RANK[a.match_type] < TIER_RANK[b.match_type]:
                    assert a.score > b.score

    def test_sorted_descending(self, catalog):
        """Matches come back best first."""
        matches = find_book_matches("jo", catalog, limit=20)
        scores = [m.score for m in matches]
        assert scores == sorted(scores, reverse=True)

    def test_ties_broken_by_canonical_order(self, catalog):
        """Equal scores fall back to canonical book order."""
        matches = find_book_matches("ez", catalog)
        assert [m.book.name for m in matches[:2]] == ["Ezra", "Ezekiel"]
        assert matches[0].score == matches[1].score

    def test_limit(self, catalog):
        """The limit caps the number of matches."""
        assert len(find_book_matches("a", catalog, limit=3)) == 3
        assert find_book_matches("john", catalog, limit=0) == []

    def test_unknown_book_sorts_by_catalog_order(self):
        """Books outside the abbreviation table use their catalog order."""
        tobit = BookRecord(id=67, name="Tobit", short_name="Tob", chapter_count=14, order=67)
        genesis = BookRecord(id=1, name="Genesis", short_name="Gen", chapter_count=50)
        assert book_sort_key(genesis) < book_sort_key(tobit)
        assert book_sort_key(tobit) == (67, 67)

    def test_matcher_set_books(self, catalog):
        """set_books swaps the catalog wholesale."""
        matcher = FuzzyBookMatcher(catalog)
        assert matcher.get_best_match("john").book.name == "John"
        matcher.set_books([])
        assert matcher.books == ()
        assert matcher.get_best_match("john") is None


class TestLevenshtein:
    """Tests for levenshtein_distance() and similarity()."""

    @pytest.mark.parametrize(
        "a,b", [("kitten", "sitting"), ("psalms", "pslam"), ("", "abc"), ("ab", "ba")]
    )
    def test_symmetric(self, a, b):
        """distance(a, b) == distance(b, a)."""
        assert levenshtein_distance(a, b) == levenshtein_distance(b, a)

    def test_identity(self):
        """A string is at distance zero from itself."""
        assert levenshtein_distance("Genesis", "Genesis") == 0

    def test_empty(self):
        """Distance from the empty string is the other length."""
        assert levenshtein_distance("", "Psalms") == 6
        assert levenshtein_distance("", "") == 0

    def test_known_value(self):
        """Classic kitten/sitting distance."""
        assert levenshtein_distance("kitten", "sitting") == 3

    def test_case_insensitive(self):
        """Case differences cost nothing."""
        assert levenshtein_distance("JOHN", "john") == 0

    def test_similarity_range(self):
        """Similarity is normalized into [0, 1]."""
        assert similarity("", "") == 1.0
        assert similarity("john", "john") == 1.0
        assert similarity("abc", "xyz") == 0.0
        assert 0.0 < similarity("psalms", "pslam") < 1.0
