"""
notion-batch CLI.

Commands:
- notion-batch read     : Print the entries of a Notion database
- notion-batch export   : Copy a Notion database into a SQL table
- notion-batch config   : Show effective settings

Examples:
    notion-batch read 0f3c... --sort "Due:desc" --limit 5
    notion-batch export 0f3c... -t tasks -c Name -c Status --database-url sqlite:///tasks.db
"""
from __future__ import annotations

from typing import Any, List, NoReturn, Optional

import typer
from loguru import logger
from notion_client.errors import HTTPResponseError, RequestTimeoutError
from rich.console import Console
from rich.table import Table
from sqlalchemy import MetaData
from sqlalchemy.exc import SQLAlchemyError

from notion_batch.batch.step import BatchStatus, ChunkOrientedStep, StepExecution
from notion_batch.config import get_settings
from notion_batch.db.database import build_table, create_db_engine
from notion_batch.db.writer import SqlAlchemyItemWriter
from notion_batch.errors import NotionBatchError
from notion_batch.logging_config import configure_logging
from notion_batch.mapping.base import DictPropertyMapper
from notion_batch.notion.reader import NotionDatabaseItemReader
from notion_batch.notion.sort import Sort

console = Console()

app = typer.Typer(
    name="notion-batch",
    help="Chunk-oriented batch reading and writing of Notion databases",
    no_args_is_help=True,
)

_HANDLED_ERRORS = (NotionBatchError, ValueError, HTTPResponseError, RequestTimeoutError, SQLAlchemyError)


# ============================================================================
# HELPERS
# ============================================================================


def _resolve_database_id(database_id: str | None) -> str:
    database_id = database_id or get_settings().notion_database_id
    if not database_id:
        raise ValueError("No database ID given and NOTION_DATABASE_ID is not set")
    return database_id


def _build_reader(
    database_id: str,
    sorts: list[Sort],
    page_size: int | None = None,
    max_item_count: int | None = None,
) -> NotionDatabaseItemReader[dict[str, Any]]:
    """Create the reader used by CLI commands; items are plain property dicts."""
    settings = get_settings()
    return NotionDatabaseItemReader(
        database_id,
        DictPropertyMapper(),
        sorts=sorts,
        page_size=page_size or settings.page_size,
        max_item_count=max_item_count,
        settings=settings,
    )


def _format_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value)
    return str(value)


def _fail(error: Exception) -> NoReturn:
    console.print(f"[red]Error:[/red] {error}")
    logger.debug(f"Command failed: {error!r}")
    raise typer.Exit(code=1)


def _print_execution(execution: StepExecution) -> None:
    table = Table(title=f"Step '{execution.step_name}'")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    status_style = "green" if execution.status is BatchStatus.COMPLETED else "red"
    table.add_row("Status", f"[{status_style}]{execution.status.value}[/{status_style}]")
    table.add_row("Read", str(execution.read_count))
    table.add_row("Filtered", str(execution.filter_count))
    table.add_row("Written", str(execution.write_count))
    table.add_row("Chunks", str(execution.commit_count))
    table.add_row("Duration", f"{execution.duration_seconds():.2f}s")
    console.print(table)


# ============================================================================
# COMMANDS
# ============================================================================


@app.callback()
def main_callback(
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Log level (DEBUG, INFO, WARNING, ERROR); defaults to LOG_LEVEL",
    ),
):
    """Chunk-oriented batch reading and writing of Notion databases."""
    configure_logging(log_level)


@app.command("read")
def read_command(
    database_id: Optional[str] = typer.Argument(None, help="Notion database ID (defaults to NOTION_DATABASE_ID)"),
    sort: Optional[List[str]] = typer.Option(
        None,
        "--sort",
        "-s",
        help="Sort as PROPERTY[:asc|desc]; created_time / last_edited_time sort by timestamp",
    ),
    limit: int = typer.Option(20, "--limit", "-n", min=1, help="Maximum entries to print"),
    page_size: Optional[int] = typer.Option(None, "--page-size", min=1, max=100, help="Entries per query page"),
):
    """
    Print the entries of a Notion database.

    Examples:
        notion-batch read                         # NOTION_DATABASE_ID
        notion-batch read 0f3c... -s Name -n 50
    """
    try:
        reader = _build_reader(
            _resolve_database_id(database_id),
            [Sort.parse(s) for s in sort or []],
            page_size=page_size,
            max_item_count=limit,
        )
        with reader:
            items = list(reader)
    except _HANDLED_ERRORS as e:
        _fail(e)

    if not items:
        console.print("[yellow]No entries found.[/yellow]")
        return

    columns: list[str] = []
    for item in items:
        columns.extend(k for k in item if k not in columns)

    table = Table(title=f"{len(items)} entries")
    for column in columns:
        table.add_column(column, overflow="fold")
    for item in items:
        table.add_row(*(_format_value(item.get(c)) for c in columns))
    console.print(table)


@app.command("export")
def export_command(
    database_id: Optional[str] = typer.Argument(None, help="Notion database ID (defaults to NOTION_DATABASE_ID)"),
    table: str = typer.Option(..., "--table", "-t", help="Target table name"),
    column: List[str] = typer.Option(..., "--column", "-c", help="Notion property to export (repeatable)"),
    database_url: Optional[str] = typer.Option(None, "--database-url", help="SQLAlchemy URL (defaults to DATABASE_URL)"),
    chunk_size: Optional[int] = typer.Option(None, "--chunk-size", min=1, help="Rows per transaction"),
    sort: Optional[List[str]] = typer.Option(None, "--sort", "-s", help="Sort as PROPERTY[:asc|desc]"),
    limit: Optional[int] = typer.Option(None, "--limit", "-n", min=1, help="Maximum entries to export"),
):
    """
    Copy the entries of a Notion database into a SQL table.

    The table gets an autoincrement id plus one text column per --column.

    Examples:
        notion-batch export 0f3c... -t tasks -c Name -c Status
    """
    step: ChunkOrientedStep | None = None
    try:
        reader = _build_reader(
            _resolve_database_id(database_id),
            [Sort.parse(s) for s in sort or []],
            max_item_count=limit,
        )
        target = build_table(MetaData(), table, column)
        writer = SqlAlchemyItemWriter(create_db_engine(database_url), target)
        step = ChunkOrientedStep(f"export-{table}", reader, writer, chunk_size=chunk_size)

        with console.status(f"Exporting to '{table}'..."):
            execution = step.execute()
    except _HANDLED_ERRORS as e:
        if step is not None and step.last_execution is not None:
            _print_execution(step.last_execution)
        _fail(e)

    _print_execution(execution)


@app.command("config")
def config_command():
    """Show effective settings (API key masked)."""
    settings = get_settings()

    table = Table(title="notion-batch settings")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    for name, value in settings.model_dump().items():
        if name == "notion_api_key":
            value = settings.masked_api_key() or "[red]not set[/red]"
        table.add_row(name.upper(), str(value))
    console.print(table)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
