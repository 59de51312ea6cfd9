"""Job history for transfers, stored in SQLite or PostgreSQL."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from flatbridge.database import DatabaseConnection
from flatbridge.models import IngestionResult

logger = logging.getLogger(__name__)

JOBS_TABLE = "ingest_jobs"

_JOB_COLUMNS = (
    "id, profile, direction, source, target, selected_columns, status, "
    "records_processed, message, error, started_at, completed_at"
)


class JobStatus(str, Enum):
    """Lifecycle state of a recorded transfer."""

    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class JobRecord:
    """A single recorded transfer."""

    id: int
    direction: str
    source: str
    target: str
    status: JobStatus
    selected_columns: list[str] = field(default_factory=list)
    records_processed: int | None = None
    message: str | None = None
    error: str | None = None
    started_at: str | None = None
    completed_at: str | None = None
    profile: str | None = None


def _now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def _row_to_record(row: tuple) -> JobRecord:
    (job_id, profile, direction, source, target, columns, status,
     records, message, error, started_at, completed_at) = row
    return JobRecord(
        id=int(job_id),
        profile=profile,
        direction=direction,
        source=source,
        target=target,
        selected_columns=json.loads(columns) if columns else [],
        status=JobStatus(status),
        records_processed=records,
        message=message,
        error=error,
        started_at=started_at,
        completed_at=completed_at,
    )


class JobHistory:
    """Record and query transfer jobs.

    Each method opens its own connection, so one instance can be shared freely.
    """

    def __init__(self, connection_string: str) -> None:
        """Initialize the history store.

        Args:
            connection_string: ``sqlite:///path`` or a PostgreSQL connection string
        """
        self.connection_string = connection_string

    def ensure_schema(self) -> None:
        """Create the jobs table if it does not exist."""
        with DatabaseConnection(self.connection_string) as db:
            id_column = (
                "INTEGER PRIMARY KEY AUTOINCREMENT" if db.is_sqlite else "SERIAL PRIMARY KEY"
            )
            db.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {JOBS_TABLE} (
                    id {id_column},
                    profile TEXT,
                    direction TEXT NOT NULL,
                    source TEXT NOT NULL,
                    target TEXT NOT NULL,
                    selected_columns TEXT,
                    status TEXT NOT NULL,
                    records_processed INTEGER,
                    message TEXT,
                    error TEXT,
                    started_at TEXT NOT NULL,
                    completed_at TEXT
                )
                """
            )

    def start_job(
        self,
        direction: str,
        source: str,
        target: str,
        selected_columns: list[str] | None = None,
        profile: str | None = None,
    ) -> int:
        """Record a job as running.

        Args:
            direction: Transfer direction value
            source: Source file name or table
            target: Target path or table
            selected_columns: Columns being transferred
            profile: Name of the saved profile, if any

        Returns:
            The new job id
        """
        self.ensure_schema()
        with DatabaseConnection(self.connection_string) as db:
            job_id = db.insert_returning_id(
                f"INSERT INTO {JOBS_TABLE} "
                "(profile, direction, source, target, selected_columns, status, started_at) "
                "VALUES (%s, %s, %s, %s, %s, %s, %s)",
                (
                    profile,
                    direction,
                    source,
                    target,
                    json.dumps(selected_columns or []),
                    JobStatus.RUNNING.value,
                    _now(),
                ),
            )
        logger.debug("Started job %d (%s %s -> %s)", job_id, direction, source, target)
        return job_id

    def finish_job(self, job_id: int, result: IngestionResult) -> None:
        """Record the outcome of a job.

        Raises:
            KeyError: If no job with this id exists
        """
        status = JobStatus.COMPLETED if result.success else JobStatus.FAILED
        with DatabaseConnection(self.connection_string) as db:
            updated = db.execute(
                f"UPDATE {JOBS_TABLE} SET status = %s, records_processed = %s, "
                "message = %s, error = %s, completed_at = %s WHERE id = %s",
                (
                    status.value,
                    result.records_processed,
                    result.message,
                    result.error,
                    _now(),
                    job_id,
                ),
            )
        if updated == 0:
            raise KeyError(f"Job {job_id} not found")
        logger.debug("Finished job %d with status %s", job_id, status.value)

    def get_job(self, job_id: int) -> JobRecord | None:
        """Get a job by id, or None if it does not exist."""
        self.ensure_schema()
        with DatabaseConnection(self.connection_string) as db:
            row = db.fetchone(f"SELECT {_JOB_COLUMNS} FROM {JOBS_TABLE} WHERE id = %s", (job_id,))
        return _row_to_record(row) if row else None

    def list_jobs(self, limit: int | None = None) -> list[JobRecord]:
        """List jobs, most recent first.

        Args:
            limit: Maximum number of jobs to return (all if None)
        """
        self.ensure_schema()
        query = f"SELECT {_JOB_COLUMNS} FROM {JOBS_TABLE} ORDER BY id DESC"
        params: tuple = ()
        if limit is not None:
            query += " LIMIT %s"
            params = (limit,)

        with DatabaseConnection(self.connection_string) as db:
            rows = db.fetchall(query, params)
        return [_row_to_record(row) for row in rows]
