"""Configuration settings for SmartRef."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path


def _default_db_path() -> Path:
    override = os.environ.get("SMARTREF_DB_PATH")
    if override:
        return Path(override)
    return Path.home() / ".smartref" / "smartref.db"


@dataclass
class Settings:
    """Application settings."""

    # Storage
    db_path: Path = field(default_factory=_default_db_path)
    catalog_path: Path | None = None
    default_version: str = "DEMO"

    # Book resolution
    confident_match_score: float = 800.0  # Prefix tier and above resolve outright
    min_confident_prefix_letters: int = 2
    fuzzy_threshold: float = 0.3
    match_limit: int = 5

    # Suggestions
    high_confidence_score: float = 800.0
    suggestion_limit: int = 5
    suggestion_match_count: int = 3

    # Bounds cache
    default_verse_count: int = 31  # Most chapters have fewer than 31 verses
    bounds_ttl_seconds: float | None = None
