"""Route a transfer to the flat-file engine or the database connector."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

from flatbridge.connectors import DatabaseConnector
from flatbridge.flatfile import FlatFileEngine
from flatbridge.models import IngestionResult, TransferConfig

logger = logging.getLogger(__name__)


class TransferDirection(str, Enum):
    """Direction of a transfer between the database and a flat file."""

    SOURCE_TO_FILE = "source_to_file"
    FILE_TO_SOURCE = "file_to_source"


@dataclass(frozen=True)
class TransferRequest:
    """Everything needed to run one transfer."""

    direction: TransferDirection
    file_config: TransferConfig
    selected_columns: list[str] = field(default_factory=list)
    table: str | None = None


def run_transfer(
    request: TransferRequest,
    engine: FlatFileEngine,
    connector: DatabaseConnector | None = None,
) -> IngestionResult:
    """Dispatch a transfer and return the result its path produced.

    The orchestrator does not transform data. A connector that raises instead
    of returning a result is reported as a failure, so this never raises.

    Args:
        request: The transfer to run
        engine: Flat-file engine, also supplies the output directory
        connector: Database connector, required for SOURCE_TO_FILE

    Returns:
        IngestionResult from the engine or the connector
    """
    logger.debug("Running %s transfer for %s", request.direction.value, request.file_config.filename)

    if request.direction is TransferDirection.FILE_TO_SOURCE:
        return engine.import_export(request.file_config, request.selected_columns)

    if connector is None:
        return IngestionResult.failure("Failed to export data: no database connector configured")
    if not request.table:
        return IngestionResult.failure("Failed to export data: no source table given")

    try:
        return connector.export_to_flat_file(
            request.table, request.file_config, request.selected_columns, engine.output_dir
        )
    except Exception as e:
        logger.warning("Connector raised during export of %s: %s", request.table, e)
        return IngestionResult.failure(f"Failed to export data: {e}")
