"""SQLite implementation of TaskRepository."""

from __future__ import annotations

import sqlite3
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from bujo_cli.adapters.sqlite.connection import get_connection
from bujo_cli.adapters.sqlite.schema import DATETIME_COLUMNS, TASK_COLUMNS
from bujo_cli.adapters.sqlite.utils import (
    generate_uuid,
    parse_datetime,
    row_to_dict,
    to_db_datetime,
)
from bujo_cli.exceptions import NotFoundError, StoreFailure, ValidationError
from bujo_cli.models import Predicate, Task, TaskCreate
from bujo_cli.models.query import (
    AllOf,
    AnyOf,
    AtMost,
    Equals,
    HasTag,
    InRange,
    IsNull,
    NotEquals,
    NotNull,
)
from bujo_cli.repositories import TaskRepository
from bujo_cli.repositories.repository import UPDATABLE_FIELDS
from bujo_cli.utils.dates import utc_now
from bujo_cli.utils.logger import get_logger

# SQLite's default limit on bound variables is generous, but stay well below it
_IN_CHUNK = 500


def _db_value(field: str, value: Any) -> Any:
    if field in DATETIME_COLUMNS and isinstance(value, datetime):
        return to_db_datetime(value)
    return value


def compile_predicate(predicate: Predicate) -> tuple[str, list[Any]]:
    """Compile a predicate tree into a SQL condition over alias ``t``.

    Field names are checked against a whitelist when predicates are built,
    so they are safe to interpolate.

    Returns:
        Tuple of (condition string, parameters list)
    """
    if isinstance(predicate, Equals):
        return f"t.{predicate.field} = ?", [_db_value(predicate.field, predicate.value)]
    if isinstance(predicate, NotEquals):
        return (
            f"(t.{predicate.field} IS NULL OR t.{predicate.field} != ?)",
            [_db_value(predicate.field, predicate.value)],
        )
    if isinstance(predicate, IsNull):
        return f"t.{predicate.field} IS NULL", []
    if isinstance(predicate, NotNull):
        return f"t.{predicate.field} IS NOT NULL", []
    if isinstance(predicate, InRange):
        return (
            f"t.{predicate.field} BETWEEN ? AND ?",
            [
                _db_value(predicate.field, predicate.start),
                _db_value(predicate.field, predicate.end),
            ],
        )
    if isinstance(predicate, AtMost):
        return f"t.{predicate.field} <= ?", [_db_value(predicate.field, predicate.bound)]
    if isinstance(predicate, HasTag):
        return (
            "EXISTS (SELECT 1 FROM task_tags tt WHERE tt.task_id = t.id AND tt.tag = ?)",
            [predicate.tag],
        )
    if isinstance(predicate, AllOf | AnyOf):
        if not predicate.clauses:
            return ("1 = 1" if isinstance(predicate, AllOf) else "1 = 0"), []
        joiner = " AND " if isinstance(predicate, AllOf) else " OR "
        parts = []
        params: list[Any] = []
        for clause in predicate.clauses:
            clause_sql, clause_params = compile_predicate(clause)
            parts.append(f"({clause_sql})")
            params.extend(clause_params)
        return joiner.join(parts), params
    raise TypeError(f"Unsupported predicate: {type(predicate).__name__}")


class SqliteTaskRepository(TaskRepository):
    """SQLite implementation of the task store."""

    def __init__(
        self,
        db_path: str | None = None,
        *,
        connection: sqlite3.Connection | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        """Initialize SQLite task repository.

        Args:
            db_path: Optional database file path. If None, uses default location.
            connection: Optional pre-opened connection (tests, embedding)
            clock: Source of "now" for timestamps the store assigns
        """
        self.db_path = db_path
        self.clock = clock
        self._connection = connection
        self.logger = get_logger("store")

    @property
    def connection(self) -> sqlite3.Connection:
        """Get or create database connection."""
        if self._connection is None:
            self._connection = get_connection(self.db_path)
        return self._connection

    @contextmanager
    def _reading(self, action: str) -> Iterator[sqlite3.Connection]:
        try:
            yield self.connection
        except sqlite3.Error as e:
            self.logger.error("store read failed: %s - %s", action, e)
            raise StoreFailure(f"Failed to {action}: {e}") from e

    @contextmanager
    def _writing(self, action: str) -> Iterator[sqlite3.Connection]:
        """Run a write in one transaction; roll back and raise StoreFailure on error."""
        try:
            with self.connection as conn:
                yield conn
        except sqlite3.Error as e:
            self.logger.error("store write failed: %s - %s", action, e)
            raise StoreFailure(f"Failed to {action}: {e}") from e

    async def find(self, predicate: Predicate) -> list[Task]:
        """Execute a predicate against the tasks table."""
        condition, params = compile_predicate(predicate)
        query = f"SELECT t.* FROM tasks t WHERE {condition}"
        with self._reading("find tasks") as conn:
            rows = conn.execute(query, params).fetchall()
            return self._load_tasks(conn, rows)

    async def get(self, owner_id: str, task_id: str) -> Task:
        """Get a specific task by ID."""
        with self._reading("get task") as conn:
            row = conn.execute(
                "SELECT * FROM tasks WHERE id = ? AND owner_id = ?",
                (task_id, owner_id),
            ).fetchone()
            if not row:
                raise NotFoundError(task_id)
            return self._load_tasks(conn, [row])[0]

    async def insert(self, task_data: TaskCreate) -> Task:
        """Create a new task."""
        task_id = generate_uuid()
        created_at = task_data.created_at or self.clock()

        if task_data.parent_id is not None:
            await self.get(task_data.owner_id, task_data.parent_id)

        # Validate the complete record before touching the database
        try:
            task = Task(
                id=task_id,
                **task_data.model_dump(exclude={"created_at"}),
                created_at=created_at,
                updated_at=created_at,
            )
        except PydanticValidationError as e:
            raise ValidationError(str(e)) from e

        values = {column: getattr(task, column) for column in TASK_COLUMNS}
        with self._writing("insert task") as conn:
            conn.execute(
                f"INSERT INTO tasks ({', '.join(TASK_COLUMNS)}) "
                f"VALUES ({', '.join('?' for _ in TASK_COLUMNS)})",
                [_db_value(column, value) for column, value in values.items()],
            )
            self._write_tags(conn, task_id, task.tags)

        return await self.get(task.owner_id, task_id)

    async def update_fields(
        self, owner_id: str, task_id: str, fields: dict[str, Any]
    ) -> Task:
        """Write a precomputed field set in one transaction."""
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")

        current = await self.get(owner_id, task_id)
        fields = dict(fields)
        if "updated_at" not in fields:
            fields["updated_at"] = max(self.clock(), current.created_at)

        # The merged record must satisfy every model invariant
        try:
            merged = Task.model_validate(
                {**current.model_dump(exclude={"is_backlog"}), **fields}
            )
        except PydanticValidationError as e:
            raise ValidationError(str(e)) from e

        columns = [name for name in fields if name != "tags"]
        # completed_at is derived by the model from status
        if "status" in fields and "completed_at" not in columns:
            columns.append("completed_at")

        with self._writing("update task") as conn:
            if columns:
                set_clause = ", ".join(f"{name} = ?" for name in columns)
                conn.execute(
                    f"UPDATE tasks SET {set_clause} WHERE id = ? AND owner_id = ?",
                    [_db_value(name, getattr(merged, name)) for name in columns]
                    + [task_id, owner_id],
                )
            if "tags" in fields:
                conn.execute("DELETE FROM task_tags WHERE task_id = ?", (task_id,))
                self._write_tags(conn, task_id, merged.tags)

        return await self.get(owner_id, task_id)

    async def delete_cascade(self, owner_id: str, task_id: str) -> None:
        """Delete a task, its subtasks and their tags."""
        with self._writing("delete task") as conn:
            row = conn.execute(
                "SELECT id FROM tasks WHERE id = ? AND owner_id = ?",
                (task_id, owner_id),
            ).fetchone()
            if not row:
                return
            conn.execute(
                """DELETE FROM task_tags WHERE task_id = ?
                   OR task_id IN (SELECT id FROM tasks WHERE parent_id = ?)""",
                (task_id, task_id),
            )
            conn.execute(
                "DELETE FROM tasks WHERE parent_id = ? AND owner_id = ?",
                (task_id, owner_id),
            )
            conn.execute(
                "DELETE FROM tasks WHERE id = ? AND owner_id = ?", (task_id, owner_id)
            )

    def _write_tags(self, conn: sqlite3.Connection, task_id: str, tags: list[str]) -> None:
        conn.executemany(
            "INSERT INTO task_tags (task_id, tag, position) VALUES (?, ?, ?)",
            [(task_id, tag, position) for position, tag in enumerate(tags)],
        )

    def _load_tasks(self, conn: sqlite3.Connection, rows: list[sqlite3.Row]) -> list[Task]:
        """Build Task models, attaching tags and subtask ids in batched queries."""
        records = [row_to_dict(row) for row in rows]
        ids = [record["id"] for record in records]
        tags: dict[str, list[str]] = {task_id: [] for task_id in ids}
        subtasks: dict[str, list[str]] = {task_id: [] for task_id in ids}

        for start in range(0, len(ids), _IN_CHUNK):
            chunk = ids[start : start + _IN_CHUNK]
            placeholders = ", ".join("?" for _ in chunk)
            for tag_row in conn.execute(
                f"SELECT task_id, tag FROM task_tags WHERE task_id IN ({placeholders}) "
                "ORDER BY task_id, position",
                chunk,
            ):
                tags[tag_row["task_id"]].append(tag_row["tag"])
            for child_row in conn.execute(
                f"SELECT id, parent_id FROM tasks WHERE parent_id IN ({placeholders}) "
                "ORDER BY created_at, id",
                chunk,
            ):
                subtasks[child_row["parent_id"]].append(child_row["id"])

        tasks = []
        for record in records:
            for column in DATETIME_COLUMNS:
                record[column] = parse_datetime(record.get(column))
            record["tags"] = tags[record["id"]]
            record["subtasks"] = subtasks[record["id"]]
            tasks.append(Task(**record))
        return tasks
