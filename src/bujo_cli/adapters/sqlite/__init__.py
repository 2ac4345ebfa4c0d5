"""SQLite adapter module - Local database storage implementation."""

from bujo_cli.adapters.sqlite.connection import (
    DatabaseConnection,
    get_connection,
    open_connection,
)
from bujo_cli.adapters.sqlite.task_repository import SqliteTaskRepository

__all__ = [
    "SqliteTaskRepository",
    "DatabaseConnection",
    "get_connection",
    "open_connection",
]
