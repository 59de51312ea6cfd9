"""Profile commands for saving, listing and removing transfer configurations."""

from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from flatbridge.cli_inspect import delimiter_option, parse_column_list
from flatbridge.config import (
    BridgeConfig,
    DatabaseSettings,
    FlatFileSettings,
    TransferProfile,
    delimiter_name,
)
from flatbridge.orchestrator import TransferDirection

console = Console()


@click.group()
def profile() -> None:
    """Manage saved transfer profiles in a YAML config file."""


@profile.command("save")
@click.argument("config", type=click.Path(dir_okay=False, path_type=Path), required=True)
@click.argument("name", type=str, required=True)
@click.option(
    "--direction",
    type=click.Choice([d.value for d in TransferDirection]),
    required=True,
    help="file_to_source reads a flat file, source_to_file exports a table",
)
@click.option("--file", "filename", required=True, help="Flat file name (input or output)")
@delimiter_option
@click.option("--columns", "-c", "column_list", default=None, help="Comma-separated columns")
@click.option("--db-url", default=None, help="Database URL (source_to_file only)")
@click.option("--table", default=None, help="Source table (source_to_file only)")
@click.option("--force", "-f", is_flag=True, help="Overwrite profile if it already exists")
def save_profile(
    config: Path,
    name: str,
    direction: str,
    filename: str,
    delimiter: str,
    column_list: str | None,
    db_url: str | None,
    table: str | None,
    force: bool,
) -> None:
    """Save a transfer profile to CONFIG, creating the file if needed.

    Arguments:
        CONFIG: Path to the YAML configuration file (required)
        NAME: Name of the profile (required)

    Examples:
        flatbridge profile save flatbridge.yaml orders_import \\
            --direction file_to_source --file orders.csv --columns order_id,total
    """
    try:
        bridge_config = BridgeConfig.from_yaml(config) if config.exists() else BridgeConfig(profiles={})

        new_profile = TransferProfile(
            name=name,
            direction=TransferDirection(direction),
            flat_file=FlatFileSettings(filename=filename, delimiter=delimiter),
            database=DatabaseSettings(url=db_url) if db_url else None,
            table=table,
            selected_columns=parse_column_list(column_list),
        )

        try:
            bridge_config.add_or_update_profile(new_profile, force=force)
        except ValueError as e:
            console.print(f"[red]Error:[/red] {e}")
            console.print("[dim]Use --force to overwrite the existing profile[/dim]")
            raise click.Abort() from e

        bridge_config.save_to_yaml(config)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise click.Abort() from e

    console.print(f"[green]✓ Profile '{name}' saved[/green]")
    console.print(f"[dim]  Config file: {config}[/dim]")


@profile.command("list")
@click.argument("config", type=click.Path(exists=True, dir_okay=False, path_type=Path), required=True)
def list_profiles(config: Path) -> None:
    """List the profiles saved in CONFIG.

    Arguments:
        CONFIG: Path to the YAML configuration file (required)
    """
    try:
        bridge_config = BridgeConfig.from_yaml(config)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise click.Abort() from e

    if not bridge_config.profiles:
        console.print("[dim]No profiles saved[/dim]")
        return

    table = Table(title="Transfer Profiles")
    table.add_column("Name", style="cyan")
    table.add_column("Direction", style="yellow")
    table.add_column("File", overflow="fold")
    table.add_column("Delimiter")
    table.add_column("Table")
    table.add_column("Columns", overflow="fold")

    for saved in bridge_config.profiles.values():
        table.add_row(
            saved.name,
            saved.direction.value,
            saved.flat_file.filename,
            delimiter_name(saved.flat_file.delimiter),
            saved.table or "",
            ", ".join(saved.selected_columns) or "(all)",
        )
    console.print(table)


@profile.command("remove")
@click.argument("config", type=click.Path(exists=True, dir_okay=False, path_type=Path), required=True)
@click.argument("name", type=str, required=True)
def remove_profile(config: Path, name: str) -> None:
    """Remove a profile from CONFIG.

    Arguments:
        CONFIG: Path to the YAML configuration file (required)
        NAME: Name of the profile to remove (required)
    """
    try:
        bridge_config = BridgeConfig.from_yaml(config)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise click.Abort() from e

    if not bridge_config.remove_profile(name):
        console.print(f"[red]Error:[/red] Profile '{name}' not found in config")
        raise click.Abort()

    bridge_config.save_to_yaml(config)
    console.print(f"[green]✓ Profile '{name}' removed[/green]")
