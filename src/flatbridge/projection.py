"""Column projection over parsed rows."""

from __future__ import annotations

from collections.abc import Iterable

from flatbridge.models import Row


def _unique(names: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(names))


def projected_header(header: list[str], selected: list[str]) -> list[str]:
    """Return the header names that were selected, in header order.

    Args:
        header: Column names of the source
        selected: Caller-selected column names

    Returns:
        Header for projected output

    Examples:
        >>> projected_header(["id", "name", "city"], ["city", "id", "zip"])
        ['id', 'city']
    """
    wanted = set(selected)
    return [name for name in _unique(header) if name in wanted]


def project_rows(
    rows: list[Row], header: list[str], selected: list[str], limit: int | None = None
) -> list[Row]:
    """Reduce each row to the selected columns.

    Row order is preserved and keys keep the header's order. Selected names
    that a row does not contain are left out of that row rather than raising,
    so callers must not assume every requested name appears in the output.

    Args:
        rows: Parsed rows in file order
        header: Column names of the source, in order
        selected: Column names to keep
        limit: Optional cap on the number of rows returned

    Returns:
        New list of projected rows
    """
    names = projected_header(header, selected)
    source = rows if limit is None else rows[:limit]
    return [{name: row[name] for name in names if name in row} for row in source]
