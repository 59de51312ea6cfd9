"""Flat-file ingestion engine.

A flat file is treated as a source with exactly one implicit table, itself.
Each call re-parses the content it is given; nothing is cached between calls.
"""

from __future__ import annotations

import csv
import logging
from pathlib import Path

from flatbridge.errors import EmptyInputError, IOFailureError, MissingInputError
from flatbridge.models import ColumnDescriptor, IngestionResult, Row, TransferConfig
from flatbridge.parser import ParsedFile, parse_delimited
from flatbridge.projection import project_rows, projected_header
from flatbridge.type_detection import infer_column_types

logger = logging.getLogger(__name__)

PREVIEW_ROW_LIMIT = 100
DEFAULT_OUTPUT_DIR = Path("data/exports")
DEFAULT_OUTPUT_NAME = "export.csv"


def resolve_output_path(output_dir: Path, filename: str) -> Path:
    """Resolve the output file path for a filename.

    Only the final path component of the filename is used, so a filename can
    never point outside the output directory.

    Examples:
        >>> resolve_output_path(Path("out"), "../../etc/data.csv")
        PosixPath('out/data.csv')
    """
    name = Path(filename).name if filename else ""
    return output_dir / (name or DEFAULT_OUTPUT_NAME)


def write_delimited_file(
    output_path: Path, header: list[str], rows: list[Row], delimiter: str
) -> None:
    """Write rows to a delimited file, replacing any existing file.

    Args:
        output_path: Destination file path
        header: Column names, written as the first line
        rows: Rows to write, missing keys written as empty fields
        delimiter: Field delimiter character

    Raises:
        IOFailureError: If the directory or file cannot be written
    """
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(
                f, fieldnames=header, delimiter=delimiter, restval="", lineterminator="\n"
            )
            writer.writeheader()
            writer.writerows(rows)
    except OSError as e:
        raise IOFailureError(f"Could not write {output_path}: {e}") from e


def load_transfer_config(file_path: Path, delimiter: str = ",") -> TransferConfig:
    """Read a file from disk into a TransferConfig.

    Args:
        file_path: Path to the delimited file
        delimiter: Field delimiter character

    Returns:
        TransferConfig named after the file, holding its bytes

    Raises:
        IOFailureError: If the file cannot be read
    """
    try:
        data = file_path.read_bytes()
    except OSError as e:
        raise IOFailureError(f"Could not read {file_path}: {e}") from e
    return TransferConfig(filename=file_path.name, delimiter=delimiter, file_content=data)


class FlatFileEngine:
    """Enumerate, describe, preview and export delimited flat files."""

    def __init__(self, output_dir: Path | str = DEFAULT_OUTPUT_DIR) -> None:
        """Initialize the engine.

        Args:
            output_dir: Directory that import/export writes its output file to
        """
        self.output_dir = Path(output_dir)

    def list_tables(self, config: TransferConfig) -> list[str]:
        """Return the file's single implicit table, or nothing if unnamed."""
        return [config.filename] if config.filename else []

    def describe_columns(self, config: TransferConfig) -> list[ColumnDescriptor]:
        """Describe each header column with a type inferred from the first row.

        Args:
            config: File-side configuration with content

        Returns:
            One ColumnDescriptor per header field, in header order

        Raises:
            MissingInputError: If no content was supplied
            EmptyInputError: If the content has no non-blank lines
            NoColumnsError: If the header has no usable names
        """
        parsed = self._parse(config)
        types = infer_column_types(parsed.header, parsed.first_values)

        logger.debug("Described %d columns of %s", len(parsed.header), config.filename)
        return [ColumnDescriptor(name=name, type=t) for name, t in zip(parsed.header, types)]

    def preview_data(self, config: TransferConfig, selected_columns: list[str]) -> list[Row]:
        """Return up to PREVIEW_ROW_LIMIT rows reduced to the selected columns.

        Raises:
            MissingInputError: If no content was supplied
            EmptyInputError: If the content has no non-blank lines
            NoColumnsError: If the header has no usable names
        """
        parsed = self._parse(config)
        return project_rows(parsed.rows, parsed.header, selected_columns, limit=PREVIEW_ROW_LIMIT)

    def import_export(self, config: TransferConfig, selected_columns: list[str]) -> IngestionResult:
        """Write the selected columns of every row to the output directory.

        The output reuses the source delimiter and holds only the selected
        columns, as header and body, in header order. This operation never
        raises; any failure is reported in the returned result, with an error
        of the form "Failed to import data: <typed message>".

        Args:
            config: File-side configuration with content
            selected_columns: Column names to keep

        Returns:
            IngestionResult with the number of data rows parsed, or the error
        """
        try:
            parsed = self._parse(config)
            if not parsed.rows:
                raise EmptyInputError("File is empty or has no data rows")

            header = projected_header(parsed.header, selected_columns)
            rows = project_rows(parsed.rows, parsed.header, selected_columns)
            output_path = self.output_path_for(config)
            write_delimited_file(output_path, header, rows, config.delimiter)

            count = len(parsed.rows)
            logger.info("Wrote %d records from %s to %s", count, config.filename, output_path)
            return IngestionResult.ok(
                records_processed=count,
                message=f"Successfully imported {count} records from {config.filename} to {output_path}",
            )
        except Exception as e:
            logger.warning("Import of %s failed: %s", config.filename, e)
            return IngestionResult.failure(f"Failed to import data: {e}")

    def output_path_for(self, config: TransferConfig) -> Path:
        """Resolve where import/export writes the output for a config."""
        return resolve_output_path(self.output_dir, config.filename)

    def _parse(self, config: TransferConfig) -> ParsedFile:
        text = config.file_content.as_text()
        if text is None:
            raise MissingInputError()
        return parse_delimited(text, config.delimiter)
