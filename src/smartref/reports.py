"""Pydantic models for JSON output of the CLI."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from smartref.engine.matcher import BookMatch
from smartref.engine.schemas import ParsedReference, Suggestion, ValidationResult


class ParsedReferenceModel(BaseModel):
    """Parsed scripture reference."""

    raw_input: str = Field(..., description="Trimmed input text")
    book_token: str = Field(..., description="Book-name text as typed")
    book: Optional[str] = Field(None, description="Resolved or suggested book name")
    book_id: Optional[int] = Field(None, description="Catalog id of the book")
    chapter: Optional[int] = None
    verse_start: Optional[int] = None
    verse_end: Optional[int] = None
    is_valid: bool
    is_complete: bool
    error: Optional[str] = Field(None, description="Human-readable problem")
    error_kind: Optional[str] = Field(None, description="Error taxonomy value")

    @classmethod
    def from_reference(cls, reference: ParsedReference) -> "ParsedReferenceModel":
        return cls(**reference.to_dict())


class BookMatchModel(BaseModel):
    """A ranked book candidate."""

    book: str
    book_id: int
    score: float = Field(..., description="Tiered match score (0, 1000]")
    match_type: str = Field(..., description="exact/abbreviation/prefix/substring/fuzzy")

    @classmethod
    def from_match(cls, match: BookMatch) -> "BookMatchModel":
        return cls(
            book=match.book.name,
            book_id=match.book.id,
            score=round(match.score, 3),
            match_type=match.match_type.value,
        )


class SuggestionModel(BaseModel):
    """An autocomplete suggestion."""

    text: str
    score: float
    type: str = Field(..., description="book/chapter/verse/complete")

    @classmethod
    def from_suggestion(cls, suggestion: Suggestion) -> "SuggestionModel":
        return cls(
            text=suggestion.text,
            score=round(suggestion.score, 3),
            type=suggestion.type.value,
        )


class ValidationReportModel(BaseModel):
    """Parse + validation outcome for one reference."""

    version_id: str
    parsed: ParsedReferenceModel
    is_valid: bool
    error: Optional[str] = None
    error_kind: Optional[str] = None
    auto_correction: Optional[str] = Field(
        None, description="Formatted clamped reference, if any"
    )
    follow_on: List[str] = Field(default_factory=list)

    @classmethod
    def build(
        cls,
        version_id: str,
        reference: ParsedReference,
        result: ValidationResult,
        auto_correction_text: str | None,
        follow_on: list[str],
    ) -> "ValidationReportModel":
        return cls(
            version_id=version_id,
            parsed=ParsedReferenceModel.from_reference(reference),
            is_valid=result.is_valid,
            error=result.error,
            error_kind=result.error_kind.value if result.error_kind else None,
            auto_correction=auto_correction_text,
            follow_on=follow_on,
        )
