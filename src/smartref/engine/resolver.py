"""ReferenceEngine: the public entry points over one catalog and verse store.

    engine = ReferenceEngine(YamlBookCatalog.load(), SqliteVerseStore(db_path))
    ref = engine.parse_reference("jn 3:16-17")
    result = await engine.validate_reference(ref, "KJV")
    suggestions = engine.generate_suggestions("1 co")
"""

from __future__ import annotations

import logging

from smartref.catalog.models import BookRecord
from smartref.catalog.store import BookCatalog, VerseStore
from smartref.config import Settings
from smartref.engine.bounds import BoundsCache
from smartref.engine.coordinator import DEFAULT_FIELD, ValidationCoordinator
from smartref.engine.matcher import BookMatch, FuzzyBookMatcher
from smartref.engine.parser import ReferenceParser
from smartref.engine.schemas import ParsedReference, Suggestion, ValidationResult
from smartref.engine.suggestions import SuggestionGenerator, completion_suggestions
from smartref.engine.validator import ReferenceValidator

logger = logging.getLogger(__name__)


class ReferenceEngine:
    """Parses, matches, validates and suggests scripture references.

    The book list is read from the catalog once and replaced wholesale by
    ``reload_catalog`` (e.g. after a translation switch). Bounds are cached
    per (book, version) for the life of the engine.
    """

    def __init__(
        self,
        catalog: BookCatalog,
        verse_store: VerseStore,
        settings: Settings | None = None,
    ):
        self.settings = settings or Settings()
        self.catalog = catalog
        self.matcher = FuzzyBookMatcher(fuzzy_threshold=self.settings.fuzzy_threshold)
        self.parser = ReferenceParser(settings=self.settings, matcher=self.matcher)
        self.suggester = SuggestionGenerator(settings=self.settings, matcher=self.matcher)
        self.bounds = BoundsCache(verse_store, self.settings)
        self.validator = ReferenceValidator(self.bounds)
        self.coordinator = ValidationCoordinator(self.validator)
        self.reload_catalog()

    @property
    def books(self) -> tuple[BookRecord, ...]:
        return self.matcher.books

    def reload_catalog(self) -> None:
        """Re-read the book list from the catalog and drop cached bounds."""
        books = self.catalog.list_books()
        self.matcher.set_books(books)
        self.bounds.invalidate()
        logger.info(f"Reference engine loaded {len(books)} books")

    def set_version(self, version_id: str) -> None:
        """Switch Bible version; bounds from other versions are dropped."""
        self.bounds.set_version(version_id)

    def parse_reference(self, raw: str) -> ParsedReference:
        return self.parser.parse(raw)

    def find_book_matches(self, text: str, limit: int | None = None) -> list[BookMatch]:
        return self.matcher.find_matches(
            text, self.settings.match_limit if limit is None else limit
        )

    def get_best_match(self, text: str) -> BookMatch | None:
        return self.matcher.get_best_match(text)

    async def validate_reference(
        self, reference: ParsedReference, version_id: str | None = None
    ) -> ValidationResult:
        return await self.validator.validate(
            reference, version_id or self.settings.default_version
        )

    async def validate_for_field(
        self,
        reference: ParsedReference,
        version_id: str | None = None,
        field: str = DEFAULT_FIELD,
    ) -> ValidationResult | None:
        """Validate on behalf of an input field; None if superseded meanwhile."""
        return await self.coordinator.submit(
            reference, version_id or self.settings.default_version, field
        )

    def generate_suggestions(
        self, text: str, limit: int | None = None
    ) -> list[Suggestion]:
        return self.suggester.generate(text, limit)

    def completion_suggestions(
        self, book: BookRecord, partial_tail: str
    ) -> list[Suggestion]:
        return completion_suggestions(book, partial_tail)
