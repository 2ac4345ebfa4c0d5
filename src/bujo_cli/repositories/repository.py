"""Repository abstraction layer for bujo.

This module defines the abstract Task Store contract, following the
hexagonal architecture (Ports & Adapters) pattern. The view resolver and the
migration state machine depend only on this narrow interface, never on a
storage technology.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from bujo_cli.models import Predicate, Task, TaskCreate

# Fields update_fields() may write; id, owner, creation and parent links are immutable
UPDATABLE_FIELDS = frozenset(
    {
        "content",
        "note",
        "signifier",
        "status",
        "due_date",
        "priority",
        "tags",
        "updated_at",
        "completed_at",
        "migrated_from",
        "migrated_to",
    }
)


class TaskRepository(ABC):
    """Abstract base class for task persistence operations.

    Every method is scoped to one owner. Implementations own their
    concurrency discipline; callers perform one read-compute-write unit per
    operation and never hold state between calls.
    """

    @abstractmethod
    async def find(self, predicate: Predicate) -> list[Task]:
        """Execute a declarative predicate.

        Args:
            predicate: Predicate tree, normally built by the view resolver

        Returns:
            Matching tasks in unspecified order

        Raises:
            StoreFailure: If the underlying storage fails
        """
        raise NotImplementedError("TaskRepository.find() must be implemented by adapter")

    @abstractmethod
    async def get(self, owner_id: str, task_id: str) -> Task:
        """Get a specific task by ID.

        Args:
            owner_id: Owner scope
            task_id: Unique identifier for the task

        Returns:
            Task object

        Raises:
            NotFoundError: If the task does not exist in the owner's scope
        """
        raise NotImplementedError("TaskRepository.get() must be implemented by adapter")

    @abstractmethod
    async def insert(self, task_data: TaskCreate) -> Task:
        """Create a new task.

        The store assigns the id and sets created_at/updated_at to "now"
        unless task_data.created_at is given. A parent_id links the new task
        into the parent's subtask list.

        Args:
            task_data: TaskCreate object with task details

        Returns:
            Created Task object
        """
        raise NotImplementedError("TaskRepository.insert() must be implemented by adapter")

    @abstractmethod
    async def update_fields(
        self, owner_id: str, task_id: str, fields: dict[str, Any]
    ) -> Task:
        """Write a precomputed field set in a single atomic operation.

        Either every field is written or none is.

        Args:
            owner_id: Owner scope
            task_id: Unique identifier for the task
            fields: Task attribute names mapped to their new values

        Returns:
            Updated Task object

        Raises:
            NotFoundError: If the task does not exist in the owner's scope
            StoreFailure: If the write fails; the task is left unchanged
        """
        raise NotImplementedError(
            "TaskRepository.update_fields() must be implemented by adapter"
        )

    @abstractmethod
    async def delete_cascade(self, owner_id: str, task_id: str) -> None:
        """Delete a task together with its subtasks.

        The task is also removed from its parent's subtask list. Deleting an
        id that does not exist is a no-op.

        Args:
            owner_id: Owner scope
            task_id: Unique identifier for the task
        """
        raise NotImplementedError(
            "TaskRepository.delete_cascade() must be implemented by adapter"
        )
