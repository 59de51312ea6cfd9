"""Command-line interface for flatbridge."""

import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from flatbridge import __version__
from flatbridge.cli_inspect import columns, preview, tables
from flatbridge.cli_profile import profile
from flatbridge.cli_transfer import export, history, run, transfer


def configure_logging(verbose: bool) -> None:
    """Route log records through rich on stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """Move data between databases and delimited flat files.

    Inspect a CSV/TSV file, pick columns, preview them, and transfer them to
    an output file or out of a SQLite/PostgreSQL table.
    """
    ctx.ensure_object(dict)
    configure_logging(verbose)


# Register commands
main.add_command(tables)
main.add_command(columns)
main.add_command(preview)
main.add_command(transfer)
main.add_command(export)
main.add_command(run)
main.add_command(history)
main.add_command(profile)


if __name__ == "__main__":
    main()
