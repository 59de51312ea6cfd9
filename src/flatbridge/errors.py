"""Exceptions raised by the flat-file ingestion engine."""


class IngestionError(ValueError):
    """Base exception for flat-file ingestion failures."""


class MissingInputError(IngestionError):
    """Raised when no file content was supplied."""

    def __init__(self, message: str = "Missing Input: no file content was supplied") -> None:
        super().__init__(message)


class EmptyInputError(IngestionError):
    """Raised when the file has no non-empty lines."""

    def __init__(self, message: str = "File is empty") -> None:
        super().__init__(message)


class NoColumnsError(IngestionError):
    """Raised when the header line has no usable column names."""

    def __init__(self, message: str = "No columns found in header line") -> None:
        super().__init__(message)


class MalformedInputError(IngestionError):
    """Raised when the delimited content cannot be tokenized."""


class IOFailureError(IngestionError):
    """Raised when reading or writing file content fails."""
