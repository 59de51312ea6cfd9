"""Value types shared by the flat-file engine and its callers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

Row = dict[str, str]


class ScalarType(str, Enum):
    """Scalar type tag assigned to a column."""

    INTEGER = "Integer"
    FLOAT = "Float"
    DATE = "Date"
    STRING = "String"


@dataclass(frozen=True)
class ColumnDescriptor:
    """Name and inferred type of a single column."""

    name: str
    type: ScalarType

    def to_dict(self) -> dict[str, str]:
        """Convert to the ``{name, type}`` wire shape."""
        return {"name": self.name, "type": self.type.value}


@dataclass(frozen=True)
class BytesContent:
    """Uploaded file content as raw bytes."""

    data: bytes

    def as_text(self) -> str:
        return self.data.decode("utf-8", errors="replace")


@dataclass(frozen=True)
class TextContent:
    """Uploaded file content that is already text."""

    text: str

    def as_text(self) -> str:
        return self.text


class AbsentContent:
    """Marker for a config that carries no file content."""

    _instance: AbsentContent | None = None

    def __new__(cls) -> AbsentContent:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def as_text(self) -> None:
        return None

    def __repr__(self) -> str:
        return "ABSENT"


ABSENT = AbsentContent()

FileContent = Union[BytesContent, TextContent, AbsentContent]


def file_content_from(value: bytes | bytearray | str | FileContent | None) -> FileContent:
    """Resolve a loosely typed upload value into a FileContent variant.

    Args:
        value: Raw bytes, text, an existing FileContent, or None

    Returns:
        The matching FileContent variant

    Raises:
        TypeError: If the value is of any other type
    """
    if value is None:
        return ABSENT
    if isinstance(value, (BytesContent, TextContent, AbsentContent)):
        return value
    if isinstance(value, (bytes, bytearray)):
        return BytesContent(bytes(value))
    if isinstance(value, str):
        return TextContent(value)
    raise TypeError(f"Unsupported file content type: {type(value).__name__}")


@dataclass(frozen=True)
class TransferConfig:
    """File-side configuration for a single call.

    Attributes:
        filename: Name of the uploaded file, also used as its table name
        delimiter: Single field delimiter character
        file_content: Uploaded content, ABSENT when none was supplied
    """

    filename: str
    delimiter: str = ","
    file_content: FileContent = field(default=ABSENT)

    def __post_init__(self) -> None:
        if not self.delimiter:
            raise ValueError("Delimiter is required")
        if len(self.delimiter) != 1:
            raise ValueError(f"Delimiter must be a single character, got {self.delimiter!r}")
        # Accept bytes/str/None at construction, store the resolved variant
        object.__setattr__(self, "file_content", file_content_from(self.file_content))

    @property
    def has_content(self) -> bool:
        return not isinstance(self.file_content, AbsentContent)


@dataclass(frozen=True)
class IngestionResult:
    """Outcome of a terminal import/export operation.

    A successful result never carries an error, and a failed result never
    carries a record count or message. Use ``ok()`` and ``failure()`` to build
    one.
    """

    success: bool
    records_processed: int | None = None
    message: str | None = None
    error: str | None = None

    def __post_init__(self) -> None:
        if self.success and self.error is not None:
            raise ValueError("A successful result cannot carry an error")
        if not self.success and (self.records_processed is not None or self.message is not None):
            raise ValueError("A failed result cannot carry records_processed or message")

    @classmethod
    def ok(cls, records_processed: int, message: str) -> IngestionResult:
        return cls(success=True, records_processed=records_processed, message=message)

    @classmethod
    def failure(cls, error: str) -> IngestionResult:
        return cls(success=False, error=error)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the ``{success, recordsProcessed?, message?, error?}`` shape.

        Returns:
            Dictionary with absent fields omitted
        """
        result: dict[str, Any] = {"success": self.success}
        if self.records_processed is not None:
            result["recordsProcessed"] = self.records_processed
        if self.message is not None:
            result["message"] = self.message
        if self.error is not None:
            result["error"] = self.error
        return result
