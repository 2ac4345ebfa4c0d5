"""Adapters module - Repository implementations for different storage backends.

This package contains concrete implementations (adapters) of TaskRepository:
- sqlite: Local SQLite database storage
- memory: In-process storage
"""

from .memory import InMemoryTaskRepository
from .sqlite import SqliteTaskRepository

__all__ = ["SqliteTaskRepository", "InMemoryTaskRepository"]
