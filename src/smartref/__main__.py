"""CLI entry point for SmartRef."""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from smartref import __version__
from smartref.catalog.books import YamlBookCatalog
from smartref.catalog.demo_data import DEMO_VERSION
from smartref.catalog.store import (
    SqliteVerseStore,
    get_connection,
    import_verses_jsonl,
    init_db,
    load_demo_data,
)
from smartref.config import Settings
from smartref.engine.formatter import format_reference
from smartref.engine.resolver import ReferenceEngine
from smartref.engine.suggestions import follow_on_suggestions
from smartref.errors import CatalogValidationError
from smartref.reports import (
    BookMatchModel,
    ParsedReferenceModel,
    SuggestionModel,
    ValidationReportModel,
)

console = Console()

MATCH_TYPE_COLORS = {
    "exact": "green",
    "abbreviation": "cyan",
    "prefix": "blue",
    "substring": "yellow",
    "fuzzy": "magenta",
}


def _build_engine(settings: Settings) -> ReferenceEngine:
    try:
        catalog = YamlBookCatalog.load(settings.catalog_path)
    except (FileNotFoundError, CatalogValidationError) as e:
        console.print(f"[red]Error loading book catalog: {escape(str(e))}[/red]")
        sys.exit(1)
    return ReferenceEngine(catalog, SqliteVerseStore(settings.db_path), settings)


def _echo_json(data) -> None:
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--catalog",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Book catalog YAML (default: bundled 66-book catalog)",
)
@click.option(
    "--db",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Verse database (default: ~/.smartref/smartref.db)",
)
@click.option("--log-level", default="warning", help="Log level")
@click.pass_context
def cli(ctx: click.Context, catalog: Path | None, db: Path | None, log_level: str):
    """SmartRef - scripture reference resolution and autocomplete."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )
    settings = Settings()
    if catalog is not None:
        settings.catalog_path = catalog
    if db is not None:
        settings.db_path = db
    ctx.obj = settings


@cli.command()
@click.option("--demo", is_flag=True, help="Load DEMO version verse data")
@click.pass_obj
def init(settings: Settings, demo: bool):
    """Initialize the verse database."""
    db_path = settings.db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = get_connection(db_path)
    init_db(conn)
    if demo:
        rows = load_demo_data(conn)
        console.print(f"[green]✓ Loaded {rows} demo verses ({DEMO_VERSION})[/green]")
    conn.close()

    console.print(f"[green]✓ Database initialized at {db_path}[/green]")


@cli.command("import-verses")
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--version", "version_id", required=True, help="Bible version id")
@click.pass_obj
def import_verses(settings: Settings, source: Path, version_id: str):
    """Import verses from a JSON Lines file.

    Each line: {"book_id": 43, "chapter": 3, "verse": 16, "text": "..."}
    """
    conn = get_connection(settings.db_path)
    try:
        init_db(conn)
        count = import_verses_jsonl(conn, source, version_id)
    except ValueError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        sys.exit(1)
    finally:
        conn.close()

    console.print(f"[green]✓ Imported {count} verses into {version_id}[/green]")


@cli.command()
@click.option(
    "--testament", type=click.Choice(["OT", "NT"]), default=None, help="Filter"
)
@click.pass_obj
def books(settings: Settings, testament: str | None):
    """List books in the catalog."""
    engine = _build_engine(settings)

    table = Table(title="Books")
    table.add_column("Id", justify="right")
    table.add_column("Name")
    table.add_column("Short")
    table.add_column("Testament")
    table.add_column("Category")
    table.add_column("Chapters", justify="right")

    for book in engine.books:
        book_testament = book.testament.value if book.testament else ""
        if testament and book_testament != testament:
            continue
        table.add_row(
            str(book.id),
            book.name,
            book.short_name,
            book_testament,
            book.category,
            str(book.chapter_count),
        )

    console.print(table)


@cli.command()
@click.argument("reference")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def parse(settings: Settings, reference: str, output_json: bool):
    """Parse a reference without checking bounds.

    Example: smartref parse "jn 3:16-17"
    """
    engine = _build_engine(settings)
    parsed = engine.parse_reference(reference)

    if output_json:
        _echo_json(ParsedReferenceModel.from_reference(parsed).model_dump())
        return

    if parsed.is_valid:
        console.print(
            f"[green]✓ {format_reference(parsed)}[/green]"
            + ("" if parsed.is_complete else " [dim](partial)[/dim]")
        )
    else:
        console.print(f"[red]✗ {escape(parsed.error or 'Empty reference')}[/red]")
        sys.exit(1)


@cli.command()
@click.argument("text")
@click.option("--limit", "-n", default=5, help="Maximum matches")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def match(settings: Settings, text: str, limit: int, output_json: bool):
    """Rank books against a (partial or misspelled) book name."""
    engine = _build_engine(settings)
    matches = engine.find_book_matches(text, limit)

    if output_json:
        _echo_json([BookMatchModel.from_match(m).model_dump() for m in matches])
        return

    if not matches:
        console.print(f"[yellow]No books match '{escape(text)}'[/yellow]")
        return

    table = Table(title=f"Matches for '{escape(text)}'")
    table.add_column("Book")
    table.add_column("Score", justify="right")
    table.add_column("Tier")
    for m in matches:
        color = MATCH_TYPE_COLORS.get(m.match_type.value, "white")
        table.add_row(
            m.book.name,
            f"{m.score:.1f}",
            f"[{color}]{m.match_type.value}[/{color}]",
        )
    console.print(table)


@cli.command()
@click.argument("text")
@click.option("--limit", "-n", default=5, help="Maximum suggestions")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def suggest(settings: Settings, text: str, limit: int, output_json: bool):
    """Autocomplete suggestions for partial input."""
    engine = _build_engine(settings)
    suggestions = engine.generate_suggestions(text, limit)

    if output_json:
        _echo_json([SuggestionModel.from_suggestion(s).model_dump() for s in suggestions])
        return

    for s in suggestions:
        console.print(f"  {s.text} [dim]({s.type.value}, {s.score:.1f})[/dim]")


@cli.command()
@click.argument("book")
@click.argument("tail", default="")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def complete(settings: Settings, book: str, tail: str, output_json: bool):
    """Completion suggestions once the book is known.

    Example: smartref complete John "3:16"
    """
    engine = _build_engine(settings)
    best = engine.get_best_match(book)
    if best is None:
        console.print(f"[red]Error: Book \"{escape(book)}\" not found[/red]")
        sys.exit(1)

    suggestions = engine.completion_suggestions(best.book, tail)
    if output_json:
        _echo_json([SuggestionModel.from_suggestion(s).model_dump() for s in suggestions])
        return

    for s in suggestions:
        console.print(f"  {s.text} [dim]({s.type.value})[/dim]")


@cli.command()
@click.argument("reference")
@click.option("--version", "version_id", default=None, help="Bible version id")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def validate(
    settings: Settings, reference: str, version_id: str | None, output_json: bool
):
    """Parse a reference and check it against chapter/verse bounds.

    Example: smartref validate "Genesis 51:1" --version DEMO
    """
    version_id = version_id or settings.default_version
    if not settings.db_path.exists():
        console.print(
            f"[yellow]No verse database at {settings.db_path}; "
            "verse counts fall back to defaults.[/yellow]"
        )
        console.print("[dim]Have you run 'smartref init --demo'?[/dim]")

    engine = _build_engine(settings)
    parsed = engine.parse_reference(reference)
    result = asyncio.run(engine.validate_reference(parsed, version_id))

    correction = result.auto_correction
    report = ValidationReportModel.build(
        version_id,
        parsed,
        result,
        format_reference(correction) if correction else None,
        follow_on_suggestions(parsed) if result.is_valid else [],
    )

    if output_json:
        click.echo(report.model_dump_json(indent=2))
    elif report.is_valid:
        console.print(
            Panel(
                f"[bold green]{format_reference(parsed)}[/bold green]",
                title=f"Valid ({version_id})",
            )
        )
        if report.follow_on:
            console.print(f"[dim]Next: {', '.join(report.follow_on)}[/dim]")
    else:
        console.print(f"[red]✗ {escape(report.error or '')}[/red]")
        if report.auto_correction:
            console.print(f"  Did you mean [bold]{report.auto_correction}[/bold]?")

    if not report.is_valid:
        sys.exit(1)


if __name__ == "__main__":
    cli()
