"""Database connection handling for SQLite and PostgreSQL."""

from __future__ import annotations

import sqlite3
from contextlib import closing
from typing import Any

import psycopg
from psycopg import sql

SQLITE_PREFIX = "sqlite:///"


def is_sqlite_url(connection_string: str) -> bool:
    """Check if a connection string points at a SQLite database."""
    return connection_string.startswith("sqlite")


def sqlite_path(connection_string: str) -> str:
    """Extract the file path from a ``sqlite:///path`` URL.

    Examples:
        >>> sqlite_path("sqlite:///jobs.db")
        'jobs.db'
        >>> sqlite_path("sqlite:////var/lib/jobs.db")
        '/var/lib/jobs.db'
    """
    if not connection_string.startswith(SQLITE_PREFIX):
        raise ValueError(f"SQLite URL must start with '{SQLITE_PREFIX}': {connection_string}")
    return connection_string[len(SQLITE_PREFIX):]


class DatabaseConnection:
    """SQLite or PostgreSQL connection handler.

    Queries are written with ``%s`` placeholders and translated to ``?`` when
    the target is SQLite.
    """

    def __init__(self, connection_string: str) -> None:
        """Initialize database connection.

        Args:
            connection_string: ``sqlite:///path`` or a PostgreSQL connection string
        """
        self.connection_string = connection_string
        self.is_sqlite = is_sqlite_url(connection_string)
        self.conn: Any = None

    def __enter__(self) -> DatabaseConnection:
        """Enter context manager."""
        if self.is_sqlite:
            self.conn = sqlite3.connect(sqlite_path(self.connection_string))
        else:
            self.conn = psycopg.connect(self.connection_string)
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Exit context manager."""
        if self.conn:
            self.conn.close()
            self.conn = None

    def _require_connection(self) -> Any:
        if not self.conn:
            raise RuntimeError("Database connection not established")
        return self.conn

    def _adapt(self, query: str) -> str:
        return query.replace("%s", "?") if self.is_sqlite else query

    def quote_identifier(self, name: str) -> str:
        """Quote a table or column name for use in a query."""
        if self.is_sqlite:
            return '"' + name.replace('"', '""') + '"'
        return sql.Identifier(name).as_string(self._require_connection())

    def execute(self, query: str, params: tuple | list = ()) -> int:
        """Execute a statement and commit.

        Returns:
            Number of rows affected
        """
        conn = self._require_connection()
        with closing(conn.cursor()) as cur:
            cur.execute(self._adapt(query), params)
            rowcount = cur.rowcount
        conn.commit()
        return rowcount

    def fetchall(self, query: str, params: tuple | list = ()) -> list[tuple]:
        """Execute a query and return all result rows."""
        conn = self._require_connection()
        with closing(conn.cursor()) as cur:
            cur.execute(self._adapt(query), params)
            return list(cur.fetchall())

    def fetchone(self, query: str, params: tuple | list = ()) -> tuple | None:
        """Execute a query and return the first result row, if any."""
        conn = self._require_connection()
        with closing(conn.cursor()) as cur:
            cur.execute(self._adapt(query), params)
            return cur.fetchone()

    def insert_returning_id(self, query: str, params: tuple | list = ()) -> int:
        """Execute an INSERT and return the generated ``id`` of the new row.

        Args:
            query: INSERT statement without a RETURNING clause
            params: Statement parameters

        Returns:
            Primary key of the inserted row
        """
        conn = self._require_connection()
        with closing(conn.cursor()) as cur:
            if self.is_sqlite:
                cur.execute(self._adapt(query), params)
                new_id = cur.lastrowid
            else:
                cur.execute(query + " RETURNING id", params)
                new_id = cur.fetchone()[0]
        conn.commit()
        return int(new_id)

    def list_tables(self) -> list[str]:
        """Return the names of user tables, sorted."""
        if self.is_sqlite:
            rows = self.fetchall(
                "SELECT name FROM sqlite_master "
                "WHERE type = 'table' AND name NOT LIKE 'sqlite_%' ORDER BY name"
            )
        else:
            rows = self.fetchall(
                "SELECT table_name FROM information_schema.tables "
                "WHERE table_schema = current_schema() ORDER BY table_name"
            )
        return [row[0] for row in rows]

    def get_table_columns(self, table_name: str) -> list[tuple[str, str]]:
        """Return ``(column_name, declared_type)`` pairs in column order.

        An unknown table yields an empty list.
        """
        if self.is_sqlite:
            rows = self.fetchall(f"PRAGMA table_info({self.quote_identifier(table_name)})")
            # PRAGMA table_info rows: (cid, name, type, notnull, dflt_value, pk)
            return [(row[1], row[2] or "") for row in rows]

        rows = self.fetchall(
            """
            SELECT column_name, data_type
            FROM information_schema.columns
            WHERE table_schema = current_schema() AND table_name = %s
            ORDER BY ordinal_position
            """,
            (table_name,),
        )
        return [(row[0], row[1]) for row in rows]
