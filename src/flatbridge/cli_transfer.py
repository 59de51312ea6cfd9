"""Transfer commands: run imports/exports and show job history."""

from __future__ import annotations

import json
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from flatbridge.cli_inspect import delimiter_option, parse_column_list
from flatbridge.config import BridgeConfig
from flatbridge.connectors import DatabaseConnector, SqlDatabaseConnector
from flatbridge.errors import IngestionError
from flatbridge.flatfile import DEFAULT_OUTPUT_DIR, FlatFileEngine, load_transfer_config
from flatbridge.history import JobHistory, JobStatus
from flatbridge.models import IngestionResult, TransferConfig
from flatbridge.orchestrator import TransferDirection, TransferRequest, run_transfer

console = Console()

output_dir_option = click.option(
    "--output-dir",
    envvar="FLATBRIDGE_OUTPUT_DIR",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help=f"Directory for output files (default: {DEFAULT_OUTPUT_DIR}, or set FLATBRIDGE_OUTPUT_DIR)",
)
history_url_option = click.option(
    "--history-url",
    envvar="FLATBRIDGE_HISTORY_URL",
    default=None,
    help="Job history database URL (or set FLATBRIDGE_HISTORY_URL env var)",
)
json_option = click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")


def _all_file_columns(engine: FlatFileEngine, config: TransferConfig) -> list[str]:
    # Unreadable content is reported by import_export itself
    try:
        return [d.name for d in engine.describe_columns(config)]
    except IngestionError:
        return []


def execute_transfer(
    request: TransferRequest,
    engine: FlatFileEngine,
    connector: DatabaseConnector | None = None,
    history_url: str | None = None,
    profile: str | None = None,
) -> IngestionResult:
    """Run a transfer, recording it in the job history when a URL is given.

    Args:
        request: The transfer to run
        engine: Flat-file engine
        connector: Database connector for SOURCE_TO_FILE transfers
        history_url: Optional job-history database URL
        profile: Name of the saved profile being run, if any

    Returns:
        The transfer result

    Raises:
        click.Abort: If the job history cannot be written
    """
    if not history_url:
        return run_transfer(request, engine, connector)

    if request.direction is TransferDirection.FILE_TO_SOURCE:
        source = request.file_config.filename
    else:
        source = request.table or ""
    target = str(engine.output_path_for(request.file_config))

    job_history = JobHistory(history_url)
    try:
        job_id = job_history.start_job(
            direction=request.direction.value,
            source=source,
            target=target,
            selected_columns=request.selected_columns,
            profile=profile,
        )
    except Exception as e:
        console.print(f"[red]Error:[/red] Could not record job in history: {e}")
        raise click.Abort() from e

    result = run_transfer(request, engine, connector)
    try:
        job_history.finish_job(job_id, result)
    except Exception as e:
        console.print(f"[red]Error:[/red] Could not record job {job_id} result in history: {e}")
        raise click.Abort() from e
    return result


def report_result(result: IngestionResult, as_json: bool) -> None:
    """Print a transfer result and exit non-zero if it failed."""
    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    elif result.success:
        console.print(f"[green]✓ {result.message}[/green]")
        console.print(f"[dim]  Records processed: {result.records_processed:,}[/dim]")
    else:
        console.print(f"[red]Error:[/red] {result.error}")

    if not result.success:
        raise SystemExit(1)


@click.command()
@click.argument("file_path", type=click.Path(exists=True, dir_okay=False, path_type=Path), required=True)
@delimiter_option
@click.option("--columns", "-c", "column_list", default=None, help="Comma-separated columns (default: all)")
@output_dir_option
@history_url_option
@json_option
def transfer(
    file_path: Path,
    delimiter: str,
    column_list: str | None,
    output_dir: Path | None,
    history_url: str | None,
    as_json: bool,
) -> None:
    """Transfer selected columns of a delimited file to the output directory.

    The output file keeps the source file name and delimiter and holds only
    the selected columns.

    Arguments:
        FILE_PATH: Path to the delimited file (required)

    Examples:
        # Keep two columns of a CSV file
        flatbridge transfer orders.csv --columns order_id,total

        # Record the job in a history database
        flatbridge transfer orders.csv --history-url sqlite:///flatbridge.db
    """
    engine = FlatFileEngine(output_dir or DEFAULT_OUTPUT_DIR)
    try:
        config = load_transfer_config(file_path, delimiter)
    except IngestionError as e:
        report_result(IngestionResult.failure(f"Failed to import data: {e}"), as_json)
        return

    selected = parse_column_list(column_list)
    if selected is None:
        selected = _all_file_columns(engine, config)

    request = TransferRequest(
        direction=TransferDirection.FILE_TO_SOURCE, file_config=config, selected_columns=selected
    )
    report_result(execute_transfer(request, engine, history_url=history_url), as_json)


@click.command()
@click.argument("table", type=str, required=True)
@click.option(
    "--db-url",
    envvar="DATABASE_URL",
    required=True,
    help="SQLite or PostgreSQL connection string (or set DATABASE_URL env var)",
)
@click.option("--output", "-o", "output_name", required=True, help="Output file name")
@delimiter_option
@click.option("--columns", "-c", "column_list", default=None, help="Comma-separated columns (default: all)")
@output_dir_option
@history_url_option
@json_option
def export(
    table: str,
    db_url: str,
    output_name: str,
    delimiter: str,
    column_list: str | None,
    output_dir: Path | None,
    history_url: str | None,
    as_json: bool,
) -> None:
    """Export selected columns of a database table to a delimited file.

    Arguments:
        TABLE: Name of the table to export (required)

    Examples:
        flatbridge export orders --db-url sqlite:///shop.db --output orders.csv
    """
    engine = FlatFileEngine(output_dir or DEFAULT_OUTPUT_DIR)
    connector = SqlDatabaseConnector(db_url)

    try:
        selected = parse_column_list(column_list)
        if selected is None:
            selected = [d.name for d in connector.describe_columns(table)]
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        raise click.Abort() from e

    request = TransferRequest(
        direction=TransferDirection.SOURCE_TO_FILE,
        file_config=TransferConfig(filename=output_name, delimiter=delimiter),
        selected_columns=selected,
        table=table,
    )
    report_result(execute_transfer(request, engine, connector, history_url), as_json)


@click.command()
@click.argument("config", type=click.Path(exists=True, dir_okay=False, path_type=Path), required=True)
@click.argument("profile_name", type=str, required=True)
@output_dir_option
@history_url_option
@json_option
def run(
    config: Path,
    profile_name: str,
    output_dir: Path | None,
    history_url: str | None,
    as_json: bool,
) -> None:
    """Run a saved transfer profile.

    Relative file names in a file_to_source profile are resolved against the
    directory of the config file.

    Arguments:
        CONFIG: Path to the YAML configuration file (required)
        PROFILE_NAME: Name of the profile to run (required)

    Examples:
        flatbridge run flatbridge.yaml orders_import
    """
    try:
        bridge_config = BridgeConfig.from_yaml(config)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise click.Abort() from e

    saved = bridge_config.get_profile(profile_name)
    if not saved:
        available = ", ".join(bridge_config.profiles.keys())
        console.print(f"[red]Error:[/red] Profile '{profile_name}' not found in config")
        console.print(f"[dim]Available profiles: {available}[/dim]")
        raise click.Abort()

    engine = FlatFileEngine(output_dir or bridge_config.output_dir or DEFAULT_OUTPUT_DIR)
    history_url = history_url or bridge_config.history_url
    delimiter = saved.flat_file.delimiter

    if saved.direction is TransferDirection.FILE_TO_SOURCE:
        file_path = Path(saved.flat_file.filename)
        if not file_path.is_absolute():
            file_path = config.parent / file_path
        try:
            file_config = load_transfer_config(file_path, delimiter)
        except IngestionError as e:
            report_result(IngestionResult.failure(f"Failed to import data: {e}"), as_json)
            return
        selected = saved.selected_columns or _all_file_columns(engine, file_config)
        request = TransferRequest(
            direction=saved.direction, file_config=file_config, selected_columns=selected
        )
        result = execute_transfer(request, engine, history_url=history_url, profile=saved.name)
    else:
        connector = SqlDatabaseConnector(saved.database.url)
        try:
            selected = saved.selected_columns or [
                d.name for d in connector.describe_columns(saved.table)
            ]
        except Exception as e:
            console.print(f"[red]Error:[/red] {e}")
            raise click.Abort() from e
        request = TransferRequest(
            direction=saved.direction,
            file_config=TransferConfig(filename=saved.flat_file.filename, delimiter=delimiter),
            selected_columns=selected,
            table=saved.table,
        )
        result = execute_transfer(request, engine, connector, history_url, profile=saved.name)

    report_result(result, as_json)


@click.command()
@click.option(
    "--history-url",
    envvar="FLATBRIDGE_HISTORY_URL",
    required=True,
    help="Job history database URL (or set FLATBRIDGE_HISTORY_URL env var)",
)
@click.option("--limit", "-n", type=int, default=20, show_default=True, help="Number of jobs to show")
def history(history_url: str, limit: int) -> None:
    """Show recent transfer jobs, most recent first.

    Examples:
        flatbridge history --history-url sqlite:///flatbridge.db --limit 5
    """
    try:
        jobs = JobHistory(history_url).list_jobs(limit=limit)
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        raise click.Abort() from e

    if not jobs:
        console.print("[dim]No jobs recorded yet[/dim]")
        return

    table = Table(title="Transfer Jobs")
    table.add_column("ID", justify="right")
    table.add_column("Direction", style="cyan")
    table.add_column("Source", overflow="fold")
    table.add_column("Status")
    table.add_column("Records", justify="right")
    table.add_column("Started", style="dim")

    status_styles = {
        JobStatus.COMPLETED: "green",
        JobStatus.FAILED: "red",
        JobStatus.RUNNING: "yellow",
    }
    for job in jobs:
        style = status_styles[job.status]
        records = "" if job.records_processed is None else f"{job.records_processed:,}"
        table.add_row(
            str(job.id),
            job.direction,
            job.source,
            f"[{style}]{job.status.value}[/{style}]",
            records,
            job.started_at or "",
        )
    console.print(table)
