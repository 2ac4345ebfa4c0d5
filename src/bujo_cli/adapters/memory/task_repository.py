"""In-process implementation of TaskRepository.

Tasks live in an arena keyed by id. Parent links are id references and
each parent owns the ordered list of its subtask ids, so no live object
cycles exist. Every read returns copies; callers never share mutable state
with the store.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable
from datetime import datetime
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from bujo_cli.exceptions import NotFoundError, ValidationError
from bujo_cli.models import Predicate, Task, TaskCreate
from bujo_cli.repositories import TaskRepository
from bujo_cli.repositories.repository import UPDATABLE_FIELDS
from bujo_cli.utils.dates import utc_now


class InMemoryTaskRepository(TaskRepository):
    """Dictionary-backed task store."""

    def __init__(self, clock: Callable[[], datetime] = utc_now):
        self.clock = clock
        self._tasks: dict[str, Task] = {}

    def _lookup(self, owner_id: str, task_id: str) -> Task:
        task = self._tasks.get(task_id)
        if task is None or task.owner_id != owner_id:
            raise NotFoundError(task_id)
        return task

    async def find(self, predicate: Predicate) -> list[Task]:
        return [
            task.model_copy(deep=True)
            for task in self._tasks.values()
            if predicate.matches(task)
        ]

    async def get(self, owner_id: str, task_id: str) -> Task:
        return self._lookup(owner_id, task_id).model_copy(deep=True)

    async def insert(self, task_data: TaskCreate) -> Task:
        parent = None
        if task_data.parent_id is not None:
            parent = self._lookup(task_data.owner_id, task_data.parent_id)

        created_at = task_data.created_at or self.clock()
        try:
            task = Task(
                id=str(uuid.uuid4()),
                **task_data.model_dump(exclude={"created_at"}),
                created_at=created_at,
                updated_at=created_at,
            )
        except PydanticValidationError as e:
            raise ValidationError(str(e)) from e

        self._tasks[task.id] = task
        if parent is not None:
            parent.subtasks.append(task.id)
        return task.model_copy(deep=True)

    async def update_fields(
        self, owner_id: str, task_id: str, fields: dict[str, Any]
    ) -> Task:
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")

        current = self._lookup(owner_id, task_id)
        fields = dict(fields)
        if "updated_at" not in fields:
            fields["updated_at"] = max(self.clock(), current.created_at)

        # Build the replacement first; the arena is only touched once it is valid
        try:
            updated = Task.model_validate(
                {**current.model_dump(exclude={"is_backlog"}), **fields}
            )
        except PydanticValidationError as e:
            raise ValidationError(str(e)) from e

        self._tasks[task_id] = updated
        return updated.model_copy(deep=True)

    async def delete_cascade(self, owner_id: str, task_id: str) -> None:
        task = self._tasks.get(task_id)
        if task is None or task.owner_id != owner_id:
            return
        for subtask_id in task.subtasks:
            self._tasks.pop(subtask_id, None)
        if task.parent_id is not None and task.parent_id in self._tasks:
            parent = self._tasks[task.parent_id]
            parent.subtasks = [sid for sid in parent.subtasks if sid != task_id]
        del self._tasks[task_id]
