"""Helpers for building test input files."""

from pathlib import Path


def create_delimited_file(
    file_path: Path, header: list[str], rows: list[list[str]], delimiter: str = ","
) -> Path:
    """Create a simple delimited file without quoting.

    Args:
        file_path: Path where the file should be created
        header: Column names
        rows: Row values in header order
        delimiter: Field delimiter

    Returns:
        Path to the created file
    """
    lines = [delimiter.join(header)] + [delimiter.join(row) for row in rows]
    file_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return file_path
