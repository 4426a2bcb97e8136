"""Reference resolution: parsing, book matching, validation and suggestions."""

from smartref.engine.bounds import BoundsCache
from smartref.engine.coordinator import ValidationCoordinator
from smartref.engine.formatter import (
    format_reference,
    format_short_reference,
    reference_key,
    references_equal,
)
from smartref.engine.matcher import (
    BookMatch,
    FuzzyBookMatcher,
    MatchType,
    find_book_matches,
    get_best_match,
    levenshtein_distance,
    similarity,
)
from smartref.engine.parser import ReferenceParser, parse_reference
from smartref.engine.resolver import ReferenceEngine
from smartref.engine.schemas import (
    ChapterVerseInfo,
    ParsedReference,
    Suggestion,
    SuggestionType,
    ValidationResult,
)
from smartref.engine.suggestions import (
    SuggestionGenerator,
    completion_suggestions,
    follow_on_suggestions,
    generate_suggestions,
)
from smartref.engine.validator import ReferenceValidator, validate_reference

__all__ = [
    "BoundsCache",
    "ValidationCoordinator",
    "format_reference",
    "format_short_reference",
    "reference_key",
    "references_equal",
    "BookMatch",
    "FuzzyBookMatcher",
    "MatchType",
    "find_book_matches",
    "get_best_match",
    "levenshtein_distance",
    "similarity",
    "ReferenceParser",
    "parse_reference",
    "ReferenceEngine",
    "ChapterVerseInfo",
    "ParsedReference",
    "Suggestion",
    "SuggestionType",
    "ValidationResult",
    "SuggestionGenerator",
    "completion_suggestions",
    "follow_on_suggestions",
    "generate_suggestions",
    "ReferenceValidator",
    "validate_reference",
]
