"""Book catalog loading and validation.

Loads a YAML book catalog (the packaged ``books.yaml`` by default) into
``BookRecord`` objects. A catalog file belongs to one translation; switching
translations means loading another file and handing the new list to the
engine wholesale.

Lookup order for the catalog path:
1. Explicit path argument
2. SMARTREF_CATALOG_PATH env var
3. Packaged data/books.yaml
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml

from smartref.catalog.models import BookRecord, Testament
from smartref.errors import CatalogValidationError

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_PATH = Path(__file__).resolve().parent.parent / "data" / "books.yaml"

REQUIRED_FIELDS = ("id", "name", "chapters")


def book_from_dict(data: dict) -> BookRecord:
    """Create a BookRecord from a catalog entry dict.

    Raises:
        CatalogValidationError: If required fields are missing or invalid
    """
    key = str(data.get("name") or data.get("id") or "?")

    missing = [f for f in REQUIRED_FIELDS if f not in data]
    if missing:
        raise CatalogValidationError(
            f"Missing required field(s): {', '.join(missing)}", key
        )

    testament = None
    if data.get("testament"):
        try:
            testament = Testament(str(data["testament"]).upper())
        except ValueError:
            raise CatalogValidationError(
                f"Invalid testament '{data['testament']}'. Expected OT or NT.", key
            )

    try:
        book_id = int(data["id"])
        chapters = int(data["chapters"])
        order = int(data["order"]) if data.get("order") is not None else None
    except (TypeError, ValueError):
        raise CatalogValidationError("id, chapters and order must be integers", key)

    if chapters < 1:
        raise CatalogValidationError(f"chapters must be >= 1, got {chapters}", key)

    name = str(data["name"]).strip()
    return BookRecord(
        id=book_id,
        name=name,
        short_name=str(data.get("short_name") or name).strip(),
        chapter_count=chapters,
        testament=testament,
        category=str(data.get("category", "")),
        order=order,
    )


class YamlBookCatalog:
    """Book catalog backed by a YAML file."""

    def __init__(self, books: list[BookRecord], path: Path | None = None):
        self._books = tuple(books)
        self.path = path

    def list_books(self) -> list[BookRecord]:
        """Return the books in catalog order."""
        return list(self._books)

    def get_book(self, book_id: int) -> BookRecord | None:
        """Find a book by id."""
        for book in self._books:
            if book.id == book_id:
                return book
        return None

    def __len__(self) -> int:
        return len(self._books)

    @classmethod
    def load(cls, path: Path | str | None = None) -> "YamlBookCatalog":
        """Load a catalog from YAML.

        Args:
            path: Catalog file. If None, uses SMARTREF_CATALOG_PATH or the
                  packaged books.yaml.

        Returns:
            Loaded catalog

        Raises:
            CatalogValidationError: If the catalog is malformed
            FileNotFoundError: If the catalog file does not exist
        """
        if path is None:
            env_path = os.environ.get("SMARTREF_CATALOG_PATH")
            path = Path(env_path) if env_path else DEFAULT_CATALOG_PATH

        if isinstance(path, str):
            path = Path(path)

        if not path.exists():
            raise FileNotFoundError(f"Catalog not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            raw_data = yaml.safe_load(f)

        if not isinstance(raw_data, dict) or not isinstance(
            raw_data.get("books"), list
        ):
            raise CatalogValidationError("Catalog must be a mapping with a 'books' list")

        books = []
        seen_ids: set[int] = set()
        seen_names: set[str] = set()
        for entry in raw_data["books"]:
            if not isinstance(entry, dict):
                raise CatalogValidationError(f"Book entry must be a mapping: {entry!r}")
            book = book_from_dict(entry)
            if book.id in seen_ids:
                raise CatalogValidationError(f"Duplicate book id {book.id}", book.name)
            if book.name.lower() in seen_names:
                raise CatalogValidationError("Duplicate book name", book.name)
            seen_ids.add(book.id)
            seen_names.add(book.name.lower())
            books.append(book)

        if not books:
            raise CatalogValidationError("Catalog contains no books")

        logger.info(f"Loaded {len(books)} books from {path}")
        return cls(books, path=path)
