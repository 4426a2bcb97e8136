"""Book abbreviation table.

Canonical book names with their common abbreviations, canonical order and
testament. The table is static; lookups built from it are constructed once
on first use and never mutated.

Abbreviations may overlap between books ("ez" is listed for both Ezra and
Ezekiel, "jud" for Judges and Jude). The lookup keeps every target so that
callers can decide; the matcher treats each target as an abbreviation hit and
falls back to canonical order.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType
from typing import Mapping

from smartref.catalog.models import Testament

UNKNOWN_BOOK_ORDER = 999


@dataclass(frozen=True)
class BookAbbreviationEntry:
    """Canonical book name with its known short forms."""

    canonical_name: str
    abbreviations: frozenset[str]
    order: int
    testament: Testament


def _entry(
    name: str, abbreviations: list[str], order: int, testament: Testament
) -> BookAbbreviationEntry:
    return BookAbbreviationEntry(
        canonical_name=name,
        abbreviations=frozenset(a.lower() for a in abbreviations),
        order=order,
        testament=testament,
    )


OT = Testament.OT
NT = Testament.NT

BOOK_ABBREVIATIONS: tuple[BookAbbreviationEntry, ...] = (
    # Old Testament
    _entry("Genesis", ["gen", "ge", "gn"], 1, OT),
    _entry("Exodus", ["exo", "ex", "exod"], 2, OT),
    _entry("Leviticus", ["lev", "le", "lv"], 3, OT),
    _entry("Numbers", ["num", "nu", "nm", "nb"], 4, OT),
    _entry("Deuteronomy", ["deut", "de", "dt"], 5, OT),
    _entry("Joshua", ["josh", "jos", "jsh"], 6, OT),
    _entry("Judges", ["judg", "jdg", "jg", "jud"], 7, OT),
    _entry("Ruth", ["ruth", "rut", "ru"], 8, OT),
    _entry("1 Samuel", ["1sam", "1 sam", "1s", "1sa", "i sam"], 9, OT),
    _entry("2 Samuel", ["2sam", "2 sam", "2s", "2sa", "ii sam"], 10, OT),
    _entry("1 Kings", ["1kgs", "1 kgs", "1k", "1ki", "i kgs"], 11, OT),
    _entry("2 Kings", ["2kgs", "2 kgs", "2k", "2ki", "ii kgs"], 12, OT),
    _entry("1 Chronicles", ["1chr", "1 chr", "1ch", "1chron", "i chr"], 13, OT),
    _entry("2 Chronicles", ["2chr", "2 chr", "2ch", "2chron", "ii chr"], 14, OT),
    _entry("Ezra", ["ezra", "ezr", "ez"], 15, OT),
    _entry("Nehemiah", ["neh", "ne"], 16, OT),
    _entry("Esther", ["esth", "est", "es"], 17, OT),
    _entry("Job", ["job", "jb"], 18, OT),
    _entry("Psalms", ["ps", "psa", "psalm", "psalms"], 19, OT),
    _entry("Proverbs", ["prov", "pro", "prv", "pr"], 20, OT),
    _entry("Ecclesiastes", ["eccl", "ecc", "ec", "qoh"], 21, OT),
    _entry("Song of Songs", ["song", "sos", "so", "ss", "cant"], 22, OT),
    _entry("Isaiah", ["isa", "is"], 23, OT),
    _entry("Jeremiah", ["jer", "je", "jr"], 24, OT),
    _entry("Lamentations", ["lam", "la"], 25, OT),
    _entry("Ezekiel", ["ezek", "eze", "ez"], 26, OT),
    _entry("Daniel", ["dan", "da", "dn"], 27, OT),
    _entry("Hosea", ["hos", "ho"], 28, OT),
    _entry("Joel", ["joel", "joe", "jl"], 29, OT),
    _entry("Amos", ["amos", "amo", "am"], 30, OT),
    _entry("Obadiah", ["obad", "oba", "ob"], 31, OT),
    _entry("Jonah", ["jonah", "jon", "jnh"], 32, OT),
    _entry("Micah", ["mic", "mi"], 33, OT),
    _entry("Nahum", ["nah", "na"], 34, OT),
    _entry("Habakkuk", ["hab", "hb"], 35, OT),
    _entry("Zephaniah", ["zeph", "zep", "zp"], 36, OT),
    _entry("Haggai", ["hag", "hg"], 37, OT),
    _entry("Zechariah", ["zech", "zec", "zc"], 38, OT),
    _entry("Malachi", ["mal", "ml"], 39, OT),
    # New Testament
    _entry("Matthew", ["matt", "mat", "mt"], 40, NT),
    _entry("Mark", ["mark", "mar", "mk", "mr"], 41, NT),
    _entry("Luke", ["luke", "luk", "lk"], 42, NT),
    _entry("John", ["john", "joh", "jn"], 43, NT),
    _entry("Acts", ["acts", "act", "ac"], 44, NT),
    _entry("Romans", ["rom", "ro", "rm"], 45, NT),
    _entry("1 Corinthians", ["1cor", "1 cor", "1co", "1c", "i cor"], 46, NT),
    _entry("2 Corinthians", ["2cor", "2 cor", "2co", "2c", "ii cor"], 47, NT),
    _entry("Galatians", ["gal", "ga"], 48, NT),
    _entry("Ephesians", ["eph", "ep"], 49, NT),
    _entry("Philippians", ["phil", "php", "pp"], 50, NT),
    _entry("Colossians", ["col", "co"], 51, NT),
    _entry(
        "1 Thessalonians", ["1thess", "1 thess", "1th", "1 th", "i thess"], 52, NT
    ),
    _entry(
        "2 Thessalonians", ["2thess", "2 thess", "2th", "2 th", "ii thess"], 53, NT
    ),
    _entry("1 Timothy", ["1tim", "1 tim", "1ti", "1t", "i tim"], 54, NT),
    _entry("2 Timothy", ["2tim", "2 tim", "2ti", "2t", "ii tim"], 55, NT),
    _entry("Titus", ["titus", "tit", "ti"], 56, NT),
    _entry("Philemon", ["phlm", "phm", "pm"], 57, NT),
    _entry("Hebrews", ["heb", "he"], 58, NT),
    _entry("James", ["jas", "jam", "jm"], 59, NT),
    _entry("1 Peter", ["1pet", "1 pet", "1pe", "1p", "i pet"], 60, NT),
    _entry("2 Peter", ["2pet", "2 pet", "2pe", "2p", "ii pet"], 61, NT),
    _entry("1 John", ["1john", "1 john", "1jn", "1j", "i john"], 62, NT),
    _entry("2 John", ["2john", "2 john", "2jn", "2j", "ii john"], 63, NT),
    _entry("3 John", ["3john", "3 john", "3jn", "3j", "iii john"], 64, NT),
    _entry("Jude", ["jude", "jud", "jd"], 65, NT),
    _entry("Revelation", ["rev", "re", "rv"], 66, NT),
)

# Alternate canonical titles used by some translations
NAME_ALIASES: dict[str, str] = {
    "song of solomon": "Song of Songs",
    "canticles": "Song of Songs",
    "psalm": "Psalms",
    "revelations": "Revelation",
}


def get_abbreviation_entries() -> tuple[BookAbbreviationEntry, ...]:
    """Return the static abbreviation table in canonical order."""
    return BOOK_ABBREVIATIONS


@lru_cache(maxsize=1)
def get_abbreviation_map() -> Mapping[str, frozenset[str]]:
    """Build the lower-cased lookup: name or abbreviation -> canonical names.

    Built once; the returned mapping is read-only.
    """
    lookup: dict[str, set[str]] = {}

    for entry in BOOK_ABBREVIATIONS:
        lookup.setdefault(entry.canonical_name.lower(), set()).add(
            entry.canonical_name
        )
        for abbrev in entry.abbreviations:
            lookup.setdefault(abbrev, set()).add(entry.canonical_name)

    return MappingProxyType({key: frozenset(names) for key, names in lookup.items()})


@lru_cache(maxsize=1)
def _entries_by_name() -> Mapping[str, BookAbbreviationEntry]:
    by_name = {entry.canonical_name.lower(): entry for entry in BOOK_ABBREVIATIONS}
    for alias, canonical in NAME_ALIASES.items():
        by_name[alias] = by_name[canonical.lower()]
    return MappingProxyType(by_name)


def resolve_abbreviation(text: str) -> frozenset[str]:
    """Return the canonical names an abbreviation points to (may be empty)."""
    return get_abbreviation_map().get(text.strip().lower(), frozenset())


def get_entry(book_name: str) -> BookAbbreviationEntry | None:
    """Look up a table entry by canonical name (or known alternate title)."""
    return _entries_by_name().get(book_name.strip().lower())


def canonical_name_for(book_name: str) -> str | None:
    """Map a catalog book name to the table's canonical name, if known."""
    entry = get_entry(book_name)
    return entry.canonical_name if entry else None


def get_book_order(book_name: str) -> int:
    """Canonical order 1..66, or 999 for books the table does not know."""
    entry = get_entry(book_name)
    return entry.order if entry else UNKNOWN_BOOK_ORDER


def get_testament(book_name: str) -> Testament | None:
    """Testament of a book, or None when the table does not know it."""
    entry = get_entry(book_name)
    return entry.testament if entry else None
