"""Inspect commands: list tables, describe columns and preview a flat file."""

from __future__ import annotations

import json
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from flatbridge.config import resolve_delimiter
from flatbridge.errors import IngestionError
from flatbridge.flatfile import FlatFileEngine, load_transfer_config
from flatbridge.models import Row, TransferConfig

console = Console()


def delimiter_callback(_ctx: click.Context, _param: click.Parameter, value: str) -> str:
    """Resolve a --delimiter value, reporting bad values as usage errors."""
    try:
        return resolve_delimiter(value)
    except ValueError as e:
        raise click.BadParameter(str(e)) from e


def parse_column_list(value: str | None) -> list[str] | None:
    """Split a comma-separated --columns value.

    Examples:
        >>> parse_column_list("id, name")
        ['id', 'name']
        >>> parse_column_list(None) is None
        True
    """
    if value is None:
        return None
    return [name.strip() for name in value.split(",") if name.strip()]


def delimiter_option(func):
    return click.option(
        "--delimiter",
        "-d",
        default="comma",
        show_default=True,
        callback=delimiter_callback,
        help="Field delimiter: comma, tab, semicolon, pipe or any single character",
    )(func)


def file_argument(func):
    return click.argument(
        "file_path", type=click.Path(exists=True, dir_okay=False, path_type=Path), required=True
    )(func)


def print_rows(rows: list[Row], title: str) -> None:
    """Display rows as a rich table."""
    table = Table(title=title)
    names = list(dict.fromkeys(name for row in rows for name in row))
    for name in names:
        table.add_column(name, style="cyan", overflow="fold")
    for row in rows:
        table.add_row(*[row.get(name, "") for name in names])
    console.print(table)


@click.command()
@file_argument
def tables(file_path: Path) -> None:
    """List the tables of a flat file.

    A flat file has exactly one table: the file itself.

    Arguments:
        FILE_PATH: Path to the delimited file (required)
    """
    engine = FlatFileEngine()
    for name in engine.list_tables(TransferConfig(filename=file_path.name)):
        console.print(name)


@click.command()
@file_argument
@delimiter_option
@click.option("--json", "as_json", is_flag=True, help="Print columns as JSON")
def columns(file_path: Path, delimiter: str, as_json: bool) -> None:
    """Describe the columns of a delimited file.

    Column types are inferred from the first data row only.

    Arguments:
        FILE_PATH: Path to the delimited file (required)

    Examples:
        # Describe a CSV file
        flatbridge columns data.csv

        # Describe a tab separated file as JSON
        flatbridge columns data.tsv --delimiter tab --json
    """
    try:
        config = load_transfer_config(file_path, delimiter)
        descriptors = FlatFileEngine().describe_columns(config)
    except IngestionError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise click.Abort() from e

    if as_json:
        click.echo(json.dumps([d.to_dict() for d in descriptors], indent=2))
        return

    table = Table(title=f"Columns of {file_path.name}")
    table.add_column("Column", style="cyan")
    table.add_column("Type", style="yellow")
    for descriptor in descriptors:
        table.add_row(descriptor.name, descriptor.type.value)
    console.print(table)


@click.command()
@file_argument
@delimiter_option
@click.option(
    "--columns",
    "-c",
    "column_list",
    default=None,
    help="Comma-separated columns to show (default: all columns)",
)
@click.option("--json", "as_json", is_flag=True, help="Print rows as JSON")
def preview(file_path: Path, delimiter: str, column_list: str | None, as_json: bool) -> None:
    """Preview up to 100 rows of a delimited file.

    Arguments:
        FILE_PATH: Path to the delimited file (required)

    Examples:
        flatbridge preview data.csv --columns id,name
    """
    engine = FlatFileEngine()
    try:
        config = load_transfer_config(file_path, delimiter)
        selected = parse_column_list(column_list)
        if selected is None:
            selected = [d.name for d in engine.describe_columns(config)]
        rows = engine.preview_data(config, selected)
    except IngestionError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise click.Abort() from e

    if as_json:
        click.echo(json.dumps(rows, indent=2))
        return

    print_rows(rows, f"Preview of {file_path.name} ({len(rows)} rows)")
