"""Delimited-text parsing for uploaded flat files."""

from __future__ import annotations

import csv
import io
from collections.abc import Iterator
from typing import NamedTuple

from flatbridge.errors import EmptyInputError, MalformedInputError, NoColumnsError
from flatbridge.models import Row

BOM = "\ufeff"
QUOTE_CHAR = '"'


class ParsedFile(NamedTuple):
    """Header names and data rows of a parsed file."""

    header: list[str]
    rows: list[Row]
    # Trimmed values of the first data row, by header position
    first_values: list[str] | None = None


def _is_blank(record: list[str], delimiter: str) -> bool:
    """Check if a record came from a line that is empty after trimming.

    Rejoining the fields gives back the line without quotes, so a line of
    whitespace delimiters (tabs) is blank while a line of commas is not.
    """
    return not delimiter.join(record).strip()


def _read_records(content: str, delimiter: str) -> Iterator[list[str]]:
    """Yield non-blank records, honoring quoted fields.

    Args:
        content: Text content with any BOM already removed
        delimiter: Single field delimiter character

    Raises:
        MalformedInputError: If the csv reader rejects the content
    """
    reader = csv.reader(
        io.StringIO(content, newline=""),
        delimiter=delimiter,
        quotechar=QUOTE_CHAR,
        doublequote=True,
        skipinitialspace=True,
    )
    try:
        for record in reader:
            if not _is_blank(record, delimiter):
                yield record
    except csv.Error as e:
        raise MalformedInputError(f"Malformed delimited content near line {reader.line_num}: {e}") from e


def _fit_to_header(values: list[str], width: int) -> list[str]:
    """Pad a short record with empty strings or drop excess trailing fields."""
    if len(values) < width:
        return values + [""] * (width - len(values))
    return values[:width]


def parse_delimited(content: str, delimiter: str) -> ParsedFile:
    """Parse delimited text into a header and an ordered list of rows.

    The first non-blank line is the header. Every later non-blank line becomes
    a row keyed by header name. Rows shorter than the header are padded with
    empty strings and longer rows have their extra fields ignored, so one
    ragged line never fails a whole file. Values stay as trimmed strings.

    Args:
        content: Decoded file content
        delimiter: Single field delimiter character

    Returns:
        ParsedFile with the header and rows in file order

    Raises:
        EmptyInputError: If no non-blank line exists
        NoColumnsError: If the header has no non-empty field names
        MalformedInputError: If the content cannot be tokenized

    Examples:
        >>> parse_delimited("a,b\\n1,2,3\\n", ",").rows
        [{'a': '1', 'b': '2'}]
    """
    if content.startswith(BOM):
        content = content[len(BOM):]

    records = _read_records(content, delimiter)

    first = next(records, None)
    if first is None:
        raise EmptyInputError()

    header = [name.strip() for name in first]
    if not any(header):
        raise NoColumnsError()

    width = len(header)
    rows: list[Row] = []
    first_values: list[str] | None = None
    for record in records:
        values = _fit_to_header([value.strip() for value in record], width)
        if first_values is None:
            first_values = values
        rows.append(dict(zip(header, values)))

    return ParsedFile(header=header, rows=rows, first_values=first_values)
