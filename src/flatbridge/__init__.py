"""Move data between databases and delimited flat files.

This package provides both a CLI tool and a programmatic API for parsing
CSV/TSV uploads, inferring column types, previewing selected columns and
transferring them to an output file or out of a SQLite/PostgreSQL table.

CLI Usage:
    flatbridge columns <file>
    flatbridge preview <file> --columns a,b
    flatbridge transfer <file> --columns a,b
    flatbridge export <table> --db-url <url> --output <file>
    flatbridge run <config> <profile>

Programmatic Usage:
    from flatbridge import FlatFileEngine, TransferConfig

    engine = FlatFileEngine(output_dir="data/exports")
    config = TransferConfig(filename="orders.csv", delimiter=",", file_content=b"...")

    engine.describe_columns(config)
    engine.preview_data(config, ["order_id", "total"])
    result = engine.import_export(config, ["order_id", "total"])
"""

__version__ = "0.1.0"

# Export main API functions
from flatbridge.config import BridgeConfig, TransferProfile, resolve_delimiter
from flatbridge.connectors import DatabaseConnector, SqlDatabaseConnector
from flatbridge.errors import (
    EmptyInputError,
    IngestionError,
    IOFailureError,
    MalformedInputError,
    MissingInputError,
    NoColumnsError,
)
from flatbridge.flatfile import PREVIEW_ROW_LIMIT, FlatFileEngine
from flatbridge.history import JobHistory, JobRecord, JobStatus
from flatbridge.models import (
    ABSENT,
    BytesContent,
    ColumnDescriptor,
    IngestionResult,
    ScalarType,
    TextContent,
    TransferConfig,
)
from flatbridge.orchestrator import TransferDirection, TransferRequest, run_transfer
from flatbridge.parser import ParsedFile, parse_delimited
from flatbridge.projection import project_rows
from flatbridge.type_detection import infer_column_types, infer_scalar_type

__all__ = [
    "__version__",
    # Contract
    "ScalarType",
    "ColumnDescriptor",
    "TransferConfig",
    "IngestionResult",
    "BytesContent",
    "TextContent",
    "ABSENT",
    # Errors
    "IngestionError",
    "MissingInputError",
    "EmptyInputError",
    "NoColumnsError",
    "MalformedInputError",
    "IOFailureError",
    # Flat-file engine
    "FlatFileEngine",
    "PREVIEW_ROW_LIMIT",
    "ParsedFile",
    "parse_delimited",
    "infer_scalar_type",
    "infer_column_types",
    "project_rows",
    # Transfers
    "TransferDirection",
    "TransferRequest",
    "run_transfer",
    "DatabaseConnector",
    "SqlDatabaseConnector",
    # Configuration and history
    "BridgeConfig",
    "TransferProfile",
    "resolve_delimiter",
    "JobHistory",
    "JobRecord",
    "JobStatus",
]
