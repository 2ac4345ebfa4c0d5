"""Initial database schema migration: tasks and task_tags."""

import sqlite3

from bujo_cli.adapters.sqlite import schema

from .runner import Migration


class InitialSchemaMigration(Migration):
    """Migration 001: Create the journal tables."""

    @property
    def version(self) -> int:
        return 1

    @property
    def description(self) -> str:
        return "Initial journal schema"

    def up(self, connection: sqlite3.Connection) -> None:
        for table_sql in schema.ALL_TABLES:
            connection.execute(table_sql)
        for index_sql in schema.ALL_INDEXES:
            connection.execute(index_sql)


initial_migration = InitialSchemaMigration()

ALL_MIGRATIONS = [initial_migration]
