"""Database migration system for the SQLite journal."""

from .runner import Migration, MigrationRunner

__all__ = ["Migration", "MigrationRunner"]
