"""Pytest configuration and shared fixtures."""

import platform
from collections.abc import Callable
from pathlib import Path

import pytest
from click.testing import CliRunner

from flatbridge.flatfile import FlatFileEngine
from flatbridge.models import TransferConfig


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner.

    Returns:
        CliRunner instance for testing CLI commands
    """
    return CliRunner()


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    """Directory that transfers write their output to."""
    return tmp_path / "exports"


@pytest.fixture
def engine(output_dir: Path) -> FlatFileEngine:
    """Provide a flat-file engine writing into a temporary directory."""
    return FlatFileEngine(output_dir)


@pytest.fixture
def make_config() -> Callable[..., TransferConfig]:
    """Build a TransferConfig from text or bytes content."""

    def _make(content, filename: str = "data.csv", delimiter: str = ",") -> TransferConfig:
        return TransferConfig(filename=filename, delimiter=delimiter, file_content=content)

    return _make


def should_skip_postgres_tests():
    """Check if PostgreSQL tests should be skipped.

    Testcontainers has issues on Windows/macOS with Docker socket mounting.
    Only run PostgreSQL tests on Linux (locally or in CI).
    """
    system = platform.system()

    # Skip on Windows and macOS - testcontainers doesn't work reliably
    if system in ("Windows", "Darwin"):
        return True, f"PostgreSQL tests not supported on {system} (testcontainers limitation)"

    # On Linux, check if Docker is available
    try:
        import docker

        client = docker.from_env()
        client.ping()
        return False, None
    except Exception as e:
        return True, f"Docker is not available: {e}"


@pytest.fixture(params=["sqlite", "postgres"])
def db_url(request, tmp_path):
    """Provide database connection URL for both SQLite and PostgreSQL."""
    if request.param == "sqlite":
        db_file = tmp_path / "test.db"
        return f"sqlite:///{db_file}"

    skip, reason = should_skip_postgres_tests()
    if skip:
        pytest.skip(reason)

    from testcontainers.postgres import PostgresContainer

    container = PostgresContainer("postgres:16-alpine")
    container.start()
    request.addfinalizer(container.stop)

    return container.get_connection_url(driver=None)
