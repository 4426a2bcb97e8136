"""Book catalog, abbreviation table and verse stores."""

from smartref.catalog.abbreviations import (
    BOOK_ABBREVIATIONS,
    BookAbbreviationEntry,
    get_abbreviation_entries,
    get_abbreviation_map,
    get_book_order,
    get_testament,
    resolve_abbreviation,
)
from smartref.catalog.books import YamlBookCatalog
from smartref.catalog.models import BookRecord, Testament, Verse
from smartref.catalog.store import (
    BookCatalog,
    InMemoryVerseStore,
    SqliteVerseStore,
    VerseStore,
)

__all__ = [
    "BOOK_ABBREVIATIONS",
    "BookAbbreviationEntry",
    "get_abbreviation_entries",
    "get_abbreviation_map",
    "get_book_order",
    "get_testament",
    "resolve_abbreviation",
    "YamlBookCatalog",
    "BookRecord",
    "Testament",
    "Verse",
    "BookCatalog",
    "InMemoryVerseStore",
    "SqliteVerseStore",
    "VerseStore",
]
