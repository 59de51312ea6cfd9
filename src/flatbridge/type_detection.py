"""Type detection for flat-file columns."""

import re
from datetime import datetime

from flatbridge.models import ScalarType

# Optional sign, digits with optional fraction (or a bare fraction), optional exponent
_NUMBER_PATTERN = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")

# Date layouts accepted once a value is known to contain a '-' separator
_DATE_FORMATS = [
    "%Y-%m-%d",  # YYYY-MM-DD
    "%d-%m-%Y",  # DD-MM-YYYY
    "%m-%d-%Y",  # MM-DD-YYYY
    "%d-%b-%Y",  # DD-Mon-YYYY
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
]

DATE_SEPARATOR = "-"
DECIMAL_POINT = "."


def _is_number(value: str) -> bool:
    """Check if a string is fully numeric."""
    return _NUMBER_PATTERN.match(value) is not None


def _is_date(value: str) -> bool:
    """Check if a string is a valid calendar date or datetime."""
    if DATE_SEPARATOR not in value:
        return False

    for fmt in _DATE_FORMATS:
        try:
            datetime.strptime(value, fmt)
            return True
        except ValueError:
            continue

    # ISO 8601 with a 'T' separator, fractional seconds or an offset
    try:
        datetime.fromisoformat(value)
        return True
    except ValueError:
        return False


def infer_scalar_type(value: str) -> ScalarType:
    """Classify a single textual value.

    Rules are tried in order and the first match wins:
    numeric with a decimal point is Float, numeric without one is Integer,
    a valid date containing '-' is Date, anything else is String.

    Args:
        value: Raw value from a parsed row

    Returns:
        The inferred ScalarType

    Examples:
        >>> infer_scalar_type("12.50")
        <ScalarType.FLOAT: 'Float'>
        >>> infer_scalar_type("2022-01-03")
        <ScalarType.DATE: 'Date'>
    """
    text = value.strip()

    if _is_number(text):
        return ScalarType.FLOAT if DECIMAL_POINT in text else ScalarType.INTEGER

    if _is_date(text):
        return ScalarType.DATE

    return ScalarType.STRING


def infer_column_types(header: list[str], sample_values: list[str] | None) -> list[ScalarType]:
    """Infer one type per header column from a single sample row.

    Only the first data row is inspected. A column whose first value is
    atypical (blank, a placeholder) is classified from that value alone,
    e.g. a numeric column with a blank first value comes out as String.

    Args:
        header: Column names in header order
        sample_values: Values of the first data row by header position,
            or None for a header-only file

    Returns:
        List of types aligned positionally with the header
    """
    if sample_values is None:
        return [ScalarType.STRING for _ in header]

    # Pair by position so repeated header names keep their own values
    padded = list(sample_values) + [""] * (len(header) - len(sample_values))
    return [infer_scalar_type(value) for value in padded[: len(header)]]
