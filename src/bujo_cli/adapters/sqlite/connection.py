"""Database connection management for the local SQLite journal.

This module provides a singleton connection manager, ensuring proper
connection lifecycle, WAL mode, foreign key enforcement and an up to date
schema.
"""

from __future__ import annotations

import atexit
import os
import sqlite3
from pathlib import Path

from platformdirs import user_data_dir

from bujo_cli.adapters.sqlite.migrations.m001_initial_schema import ALL_MIGRATIONS
from bujo_cli.adapters.sqlite.migrations.runner import MigrationRunner
from bujo_cli.utils.logger import get_logger

MEMORY_DB = ":memory:"


def default_db_path() -> Path:
    """Default journal location inside the platform data directory."""
    return Path(user_data_dir("bujo_cli")) / "bujo.db"


def open_connection(db_path: str | Path) -> sqlite3.Connection:
    """Open and configure a new connection, applying pending migrations.

    Args:
        db_path: Database file path, or ":memory:"

    Returns:
        sqlite3.Connection configured for bujo usage
    """
    is_memory = str(db_path) == MEMORY_DB
    is_new_database = False
    if not is_memory:
        db_path = Path(db_path)
        db_path.parent.mkdir(parents=True, exist_ok=True)
        is_new_database = not db_path.exists()

    connection = sqlite3.connect(
        str(db_path),
        check_same_thread=False,
        timeout=30.0,  # Wait up to 30s for locks
    )
    connection.row_factory = sqlite3.Row
    connection.execute("PRAGMA foreign_keys = ON")
    if not is_memory:
        connection.execute("PRAGMA journal_mode = WAL")

    # Owner read/write only
    if is_new_database:
        os.chmod(db_path, 0o600)

    MigrationRunner(connection).run_migrations(ALL_MIGRATIONS)
    return connection


class DatabaseConnection:
    """Singleton connection manager for the local SQLite journal.

    Provides:
    - Single connection per process (connection reuse)
    - Automatic directory creation and schema migration
    - Graceful cleanup on exit
    """

    _instance: DatabaseConnection | None = None
    _connection: sqlite3.Connection | None = None
    _db_path: Path | None = None

    def __new__(cls) -> DatabaseConnection:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @classmethod
    def get_connection(cls, db_path: str | Path | None = None) -> sqlite3.Connection:
        """Get or create the shared database connection.

        Args:
            db_path: Path to database file. If None, uses default location.

        Returns:
            sqlite3.Connection object
        """
        instance = cls()
        db_path = Path(db_path) if db_path is not None else default_db_path()

        if instance._connection is not None and instance._db_path == db_path:
            return instance._connection

        # Path changed
        if instance._connection is not None:
            instance._connection.close()

        instance._connection = open_connection(db_path)
        instance._db_path = db_path
        atexit.register(cls.close_connection)
        return instance._connection

    @classmethod
    def close_connection(cls) -> None:
        """Close database connection gracefully."""
        instance = cls()
        if instance._connection is not None:
            try:
                instance._connection.commit()
                instance._connection.close()
            except sqlite3.Error as e:
                get_logger("store").warning("failed to close database: %s", e)
            finally:
                instance._connection = None
                instance._db_path = None

    @classmethod
    def get_db_path(cls) -> Path | None:
        """Get current database path."""
        return cls()._db_path


def get_connection(db_path: str | Path | None = None) -> sqlite3.Connection:
    """Helper function to get the shared database connection."""
    return DatabaseConnection.get_connection(db_path)
