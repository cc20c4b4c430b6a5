"""Shared pytest fixtures for all tests."""

import itertools
import sqlite3
import pytest
from datetime import date
from pathlib import Path

from config import Config, get_migrations_dir
from db.manager import apply_pending_migrations
from services.base import Services


@pytest.fixture
def test_db():
    """Create an in-memory SQLite database for testing.

    Yields:
        sqlite3.Connection: Connection to in-memory database.
    """
    conn = sqlite3.connect(":memory:")
    yield conn
    conn.close()


@pytest.fixture
def test_config(tmp_path):
    """Create a test configuration pointing to a temporary database.

    Args:
        tmp_path: pytest tmp_path fixture for temporary directory.

    Returns:
        Config: Test configuration object.
    """
    return Config(
        base_dir=tmp_path / "hasaba",
        db_data_dir=tmp_path / "hasaba" / "db",
        db_filename="test.db",
        log_level="DEBUG",
        log_dir=tmp_path / "hasaba" / "logs",
        archive_enabled=False,
        archive_dir=tmp_path / "hasaba" / "archives",
    )


class TestDatabaseManager:
    """Test database manager that uses a shared connection."""

    __test__ = False

    def __init__(self, conn):
        self.conn = conn

    def connect(self):
        """Return a context manager for the test connection."""
        return _TestConnectionContext(self.conn)

    def get_db_path(self):
        """Return a fake path for the test database."""
        return Path(":memory:")

    def get_migrations_dir(self):
        """Get the migrations directory path."""
        return get_migrations_dir()


class _TestConnectionContext:
    """Context manager for test database connections."""

    def __init__(self, conn):
        self.conn = conn

    def __enter__(self):
        return self.conn

    def __exit__(self, exc_type, exc_val, exc_tb):
        # Don't close the connection - let the fixture handle it
        pass


@pytest.fixture
def bare_db_manager(test_db):
    """DatabaseManager over an in-memory database with no migrations applied."""
    return TestDatabaseManager(test_db)


@pytest.fixture
def db_manager_with_schema(test_db):
    """Create a DatabaseManager with schema already set up.

    This fixture provides a DatabaseManager that uses an in-memory database
    with all migrations already applied.

    Args:
        test_db: In-memory database connection fixture.

    Returns:
        TestDatabaseManager: Database manager with schema ready.
    """
    manager = TestDatabaseManager(test_db)
    apply_pending_migrations(manager)
    return manager


@pytest.fixture
def today():
    """Fixed current date for services under test."""
    return date(2025, 3, 15)


@pytest.fixture
def id_sequence():
    """Deterministic transaction id generator: tx-1, tx-2, ..."""
    counter = itertools.count(1)
    return lambda: f"tx-{next(counter)}"


@pytest.fixture
def services(test_config, db_manager_with_schema, today, id_sequence):
    """Create a Services container with test database and the bundled seeds.

    Args:
        test_config: Test configuration fixture.
        db_manager_with_schema: Database manager with schema set up.

    Returns:
        Services: Services container for testing.
    """
    return Services(
        test_config,
        db_manager=db_manager_with_schema,
        new_id=id_sequence,
        today=lambda: today,
    )


class _UnavailableDatabaseManager:
    """Database manager whose connections always fail."""

    def connect(self):
        raise sqlite3.OperationalError("unable to open database file")

    def get_db_path(self):
        return Path("/nonexistent/hasaba.db")

    def get_migrations_dir(self):
        return get_migrations_dir()


@pytest.fixture
def broken_db_manager():
    """DatabaseManager simulating unavailable storage."""
    return _UnavailableDatabaseManager()


@pytest.fixture
def unreachable_config(test_config, tmp_path):
    """Test configuration whose database directory sits under a regular file."""
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    test_config.db_data_dir = blocker / "db"
    return test_config
