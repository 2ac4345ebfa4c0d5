"""Task service - Business logic for journal operations.

This service layer sits between commands and repositories. Views are
resolved into declarative queries, migrations are computed as complete
field sets, and every mutation reaches the store as a single write.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import date, datetime
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from bujo_cli.exceptions import ValidationError
from bujo_cli.models import Task, TaskCreate, TaskFilters, TaskUpdate
from bujo_cli.models.query import Equals, HasTag, NotEquals, Predicate, all_of
from bujo_cli.repositories import TaskRepository
from bujo_cli.services import migration
from bujo_cli.services.bucketing import bucket_tasks_by_date
from bujo_cli.services.view_resolver import resolve_view, sort_tasks
from bujo_cli.utils.dates import ensure_utc, local_today, start_of_day, utc_now
from bujo_cli.utils.logger import get_logger

# Most recently migrated first
BACKLOG_SORT: tuple[str, ...] = ("-migrated_from", "-created_at", "id")


def as_due_date(value: date | datetime | None) -> datetime | None:
    """Dates become UTC midnight of that day; datetimes are normalized."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return ensure_utc(value)
    return start_of_day(value)


class TaskService:
    """Service for journal business logic.

    Every operation is scoped to one owner. The store is only reached
    through the TaskRepository port, so any adapter works.
    """

    def __init__(
        self,
        task_repository: TaskRepository,
        owner_id: str = "local",
        clock: Callable[[], datetime] = utc_now,
    ):
        """Initialize the task service.

        Args:
            task_repository: TaskRepository implementation for data access
            owner_id: Owner scope applied to every query and write
            clock: Source of "now" for transitions
        """
        self.repository = task_repository
        self.owner_id = owner_id
        self.clock = clock
        self.logger = get_logger("service")

    # Views

    async def get_view(
        self, view_type: str, anchor: date | datetime | None = None
    ) -> list[Task]:
        """Resolve a journal view and return its tasks in display order.

        Args:
            view_type: daily, weekly, monthly, yearly or all
            anchor: Any day inside the wanted period; defaults to the local today

        Returns:
            Tasks in canonical order
        """
        if anchor is None:
            anchor = local_today(self.clock())
        query = resolve_view(view_type, anchor, self.owner_id)
        tasks = await self.repository.find(query.predicate)
        return query.apply_sort(tasks)

    async def get_grid(
        self,
        start: date | datetime,
        end: date | datetime,
        today: date | datetime | None = None,
    ) -> dict[date, list[Task]]:
        """Tasks bucketed by day for every day from start to end."""
        if today is None:
            today = local_today(self.clock())
        query = resolve_view("all", None, self.owner_id)
        tasks = await self.repository.find(query.predicate)
        return bucket_tasks_by_date(tasks, start, end, today)

    async def list_tasks(self, filters: TaskFilters | None = None) -> list[Task]:
        """List tasks with simple field filters."""
        filters = filters or TaskFilters()
        clauses: list[Predicate] = [Equals("owner_id", self.owner_id)]
        if filters.status is not None:
            clauses.append(Equals("status", filters.status))
        if not filters.include_backlog:
            clauses.append(NotEquals("status", "migrated_back"))
        if filters.signifier is not None:
            clauses.append(Equals("signifier", filters.signifier))
        if filters.priority is not None:
            clauses.append(Equals("priority", filters.priority))
        if filters.tag is not None:
            clauses.append(HasTag(filters.tag))
        return sort_tasks(await self.repository.find(all_of(*clauses)))

    async def list_backlog(self) -> list[Task]:
        """Backlog tasks, most recently migrated first."""
        tasks = await self.repository.find(
            all_of(Equals("owner_id", self.owner_id), Equals("status", "migrated_back"))
        )
        return sort_tasks(tasks, BACKLOG_SORT)

    # CRUD

    async def get_task(self, task_id: str) -> Task:
        """Get a specific task by ID.

        Raises:
            NotFoundError: If the task does not exist for this owner
        """
        return await self.repository.get(self.owner_id, task_id)

    async def add_task(
        self,
        content: str,
        *,
        note: str | None = None,
        signifier: str = "task",
        due_date: date | datetime | None = None,
        priority: int | None = None,
        tags: list[str] | None = None,
        parent_id: str | None = None,
    ) -> Task:
        """Create a new task.

        Args:
            content: Entry text (required)
            note: Optional longer note
            signifier: Notation category
            due_date: Scheduled day; None leaves the task unscheduled
            priority: 1 (high) to 3 (low)
            tags: Tags in display order
            parent_id: Parent task for subtasks

        Returns:
            Created Task object

        Raises:
            ValidationError: If the input is not a valid task
        """
        try:
            task_data = TaskCreate(
                content=content,
                owner_id=self.owner_id,
                note=note,
                signifier=signifier,
                due_date=as_due_date(due_date),
                priority=priority,
                tags=tags or [],
                parent_id=parent_id,
                created_at=self.clock(),
            )
        except PydanticValidationError as e:
            raise ValidationError(_describe(e)) from e

        task = await self.repository.insert(task_data)
        self.logger.info("task added: %s", task.id)
        return task

    async def add_subtask(self, parent_id: str, content: str, **kwargs: Any) -> Task:
        """Create a subtask under ``parent_id``.

        Raises:
            NotFoundError: If the parent does not exist
            ValidationError: If the parent is itself a subtask
        """
        parent = await self.get_task(parent_id)
        if parent.parent_id is not None:
            raise ValidationError("Subtasks cannot have subtasks of their own")
        return await self.add_task(content, parent_id=parent.id, **kwargs)

    async def update_task(self, task_id: str, updates: TaskUpdate) -> Task:
        """Apply a direct edit.

        Scheduling a backlog task or unscheduling a future-migrated task
        returns it to pending.
        """
        fields = updates.to_fields()
        if not fields:
            raise ValidationError("Nothing to update")
        task = await self.get_task(task_id)
        fields = migration.reconcile_edit(task, fields, self.clock())
        updated = await self.repository.update_fields(self.owner_id, task.id, fields)
        self.logger.info("task updated: %s (%s)", task.id, ", ".join(sorted(fields)))
        return updated

    async def delete_task(self, task_id: str) -> None:
        """Delete a task together with its subtasks.

        Raises:
            NotFoundError: If the task does not exist
        """
        task = await self.get_task(task_id)
        await self.repository.delete_cascade(self.owner_id, task.id)
        self.logger.info("task deleted: %s (%d subtasks)", task.id, len(task.subtasks))

    # Transitions

    async def _transition(
        self, task_id: str, name: str, compute: Callable[[Task], dict[str, Any]]
    ) -> Task:
        task = await self.get_task(task_id)
        fields = compute(task)
        updated = await self.repository.update_fields(self.owner_id, task.id, fields)
        self.logger.info(
            "task %s: %s (%s -> %s)", name, task.id, task.status, updated.status
        )
        return updated

    async def toggle_complete(self, task_id: str) -> Task:
        """Complete a task, or reopen it if it is already completed."""
        now = self.clock()
        return await self._transition(
            task_id, "toggled", lambda task: migration.toggle_complete(task, now)
        )

    async def migrate_to_backlog(self, task_id: str) -> Task:
        """Move a task to the backlog."""
        now = self.clock()
        return await self._transition(
            task_id, "migrated back", lambda task: migration.migrate_to_backlog(task, now)
        )

    async def migrate_to_future(
        self, task_id: str, target: date | datetime | None
    ) -> Task:
        """Reschedule a task to ``target``.

        Raises:
            ValidationError: If target is missing
        """
        if target is None:
            raise ValidationError("A target date is required to migrate to the future")
        now = self.clock()
        target_date = as_due_date(target)
        return await self._transition(
            task_id,
            "migrated future",
            lambda task: migration.migrate_to_future(task, target_date, now),
        )

    async def carry_forward(self, task_id: str) -> Task:
        """Create a pending copy of a task; the source is left unchanged."""
        source = await self.get_task(task_id)
        copy = await self.repository.insert(migration.carry_forward(source, self.clock()))
        self.logger.info("task carried forward: %s -> %s", source.id, copy.id)
        return copy


def _describe(error: PydanticValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in item['loc']) or 'task'}: {item['msg']}"
        for item in error.errors()
    )


def get_task_service() -> TaskService:
    """Build a TaskService over the configured SQLite journal."""
    from bujo_cli.adapters.sqlite import SqliteTaskRepository
    from bujo_cli.services.config_service import get_config_service

    config_service = get_config_service()
    return TaskService(
        SqliteTaskRepository(config_service.db_path),
        owner_id=config_service.owner_id,
    )
