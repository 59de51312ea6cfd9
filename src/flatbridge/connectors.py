"""Database-side connectors used by the transfer orchestrator."""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from pathlib import Path

from flatbridge.database import DatabaseConnection
from flatbridge.flatfile import PREVIEW_ROW_LIMIT, resolve_output_path, write_delimited_file
from flatbridge.models import ColumnDescriptor, IngestionResult, Row, ScalarType, TransferConfig

logger = logging.getLogger(__name__)

_INTEGER_TYPES = {
    "INT", "INTEGER", "SMALLINT", "BIGINT", "TINYINT", "MEDIUMINT",
    "INT2", "INT4", "INT8", "SERIAL", "BIGSERIAL", "SMALLSERIAL",
}
_FLOAT_TYPES = {"REAL", "FLOAT", "FLOAT4", "FLOAT8", "DOUBLE", "NUMERIC", "DECIMAL"}


def scalar_type_for_sql(declared_type: str) -> ScalarType:
    """Map a declared SQL column type to a ScalarType.

    Examples:
        >>> scalar_type_for_sql("bigint")
        <ScalarType.INTEGER: 'Integer'>
        >>> scalar_type_for_sql("timestamp without time zone")
        <ScalarType.DATE: 'Date'>
    """
    match = re.match(r"[A-Za-z0-9]+", declared_type.strip())
    if not match:
        return ScalarType.STRING

    base = match.group(0).upper()
    if base in _INTEGER_TYPES:
        return ScalarType.INTEGER
    if base in _FLOAT_TYPES:
        return ScalarType.FLOAT
    if base.startswith("DATE") or base.startswith("TIMESTAMP"):
        return ScalarType.DATE
    return ScalarType.STRING


def _to_text(value: object) -> str:
    return "" if value is None else str(value)


class DatabaseConnector(ABC):
    """Capability interface for the database side of a transfer."""

    @abstractmethod
    def list_tables(self) -> list[str]:
        """Return the available table names."""

    @abstractmethod
    def describe_columns(self, table: str) -> list[ColumnDescriptor]:
        """Return the columns of a table in column order."""

    @abstractmethod
    def preview_data(
        self, table: str, selected_columns: list[str], limit: int = PREVIEW_ROW_LIMIT
    ) -> list[Row]:
        """Return up to ``limit`` rows restricted to the selected columns."""

    @abstractmethod
    def export_to_flat_file(
        self,
        table: str,
        file_config: TransferConfig,
        selected_columns: list[str],
        output_dir: Path,
    ) -> IngestionResult:
        """Write the selected columns of a table to a delimited file.

        Implementations must not raise; failures are reported in the result.
        """


class SqlDatabaseConnector(DatabaseConnector):
    """Connector for SQLite and PostgreSQL databases.

    A connection is opened per call and closed before returning.
    """

    def __init__(self, connection_string: str) -> None:
        """Initialize the connector.

        Args:
            connection_string: ``sqlite:///path`` or a PostgreSQL connection string
        """
        self.connection_string = connection_string

    def list_tables(self) -> list[str]:
        with DatabaseConnection(self.connection_string) as db:
            return db.list_tables()

    def describe_columns(self, table: str) -> list[ColumnDescriptor]:
        """Return the columns of a table in column order.

        Raises:
            ValueError: If the table does not exist
        """
        with DatabaseConnection(self.connection_string) as db:
            columns = self._table_columns(db, table)
        return [ColumnDescriptor(name=name, type=scalar_type_for_sql(t)) for name, t in columns]

    def preview_data(
        self, table: str, selected_columns: list[str], limit: int = PREVIEW_ROW_LIMIT
    ) -> list[Row]:
        """Return up to ``limit`` rows restricted to the selected columns.

        Selected names the table does not have are ignored. If none remain,
        no rows are returned.

        Raises:
            ValueError: If the table does not exist
        """
        with DatabaseConnection(self.connection_string) as db:
            columns = self._select_columns(db, table, selected_columns)
            if not columns:
                return []
            return self._fetch_rows(db, table, columns, limit)

    def export_to_flat_file(
        self,
        table: str,
        file_config: TransferConfig,
        selected_columns: list[str],
        output_dir: Path,
    ) -> IngestionResult:
        try:
            with DatabaseConnection(self.connection_string) as db:
                columns = self._select_columns(db, table, selected_columns)
                if not columns:
                    raise ValueError(f"None of the selected columns exist in table '{table}'")
                rows = self._fetch_rows(db, table, columns)

            output_path = resolve_output_path(Path(output_dir), file_config.filename)
            write_delimited_file(output_path, columns, rows, file_config.delimiter)

            logger.info("Exported %d records from %s to %s", len(rows), table, output_path)
            return IngestionResult.ok(
                records_processed=len(rows),
                message=f"Successfully exported {len(rows)} records from table {table} to {output_path}",
            )
        except Exception as e:
            logger.warning("Export of table %s failed: %s", table, e)
            return IngestionResult.failure(f"Failed to export data: {e}")

    @staticmethod
    def _table_columns(db: DatabaseConnection, table: str) -> list[tuple[str, str]]:
        columns = db.get_table_columns(table)
        if not columns:
            raise ValueError(f"Table '{table}' not found")
        return columns

    def _select_columns(
        self, db: DatabaseConnection, table: str, selected_columns: list[str]
    ) -> list[str]:
        # Only names that really exist reach the query text, in table order
        wanted = set(selected_columns)
        return [name for name, _ in self._table_columns(db, table) if name in wanted]

    @staticmethod
    def _fetch_rows(
        db: DatabaseConnection, table: str, columns: list[str], limit: int | None = None
    ) -> list[Row]:
        query = "SELECT {} FROM {}".format(
            ", ".join(db.quote_identifier(col) for col in columns),
            db.quote_identifier(table),
        )
        params: tuple = ()
        if limit is not None:
            query += " LIMIT %s"
            params = (limit,)

        return [
            {col: _to_text(value) for col, value in zip(columns, record)}
            for record in db.fetchall(query, params)
        ]
