"""Migration state machine.

Each transition is a pure function of the current task and "now" that
returns the complete field set to write. Nothing is persisted here, so a
caller can apply the result in a single store write and never leave a task
half-migrated.

    pending / migrated_* --toggle--> completed --toggle--> pending
    any --migrate_to_backlog--> migrated_back (unscheduled)
    any --migrate_to_future(target)--> migrated_future (due on target)
    any --carry_forward--> (source unchanged) + new pending copy
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from bujo_cli.exceptions import ValidationError
from bujo_cli.models import Task, TaskCreate
from bujo_cli.utils.dates import ensure_utc


def _touch(task: Task, now: datetime) -> datetime:
    # updated_at never moves before created_at, even with a skewed clock
    return max(ensure_utc(now), task.created_at)


def toggle_complete(task: Task, now: datetime) -> dict[str, Any]:
    """Flip completion. Completed goes back to pending; anything else completes.

    The due date is left alone either way.
    """
    updated_at = _touch(task, now)
    if task.status == "completed":
        return {"status": "pending", "completed_at": None, "updated_at": updated_at}
    return {"status": "completed", "completed_at": updated_at, "updated_at": updated_at}


def migrate_to_backlog(task: Task, now: datetime) -> dict[str, Any]:
    """Move a task to the backlog: unscheduled and hidden from dated views."""
    updated_at = _touch(task, now)
    return {
        "status": "migrated_back",
        "due_date": None,
        "migrated_from": updated_at,
        "migrated_to": None,
        "completed_at": None,
        "updated_at": updated_at,
    }


def migrate_to_future(
    task: Task, target: datetime | None, now: datetime
) -> dict[str, Any]:
    """Reschedule a task to a future date.

    Raises:
        ValidationError: If no target date is given
    """
    if target is None:
        raise ValidationError("A target date is required to migrate to the future")
    target = ensure_utc(target)
    updated_at = _touch(task, now)
    return {
        "status": "migrated_future",
        "due_date": target,
        "migrated_from": updated_at,
        "migrated_to": target,
        "completed_at": None,
        "updated_at": updated_at,
    }


def carry_forward(task: Task, now: datetime) -> TaskCreate:
    """Build a fresh pending copy of ``task``; the source is not modified.

    The copy keeps the original journaling day so its history survives.
    """
    now = ensure_utc(now)
    return TaskCreate(
        content=task.content,
        owner_id=task.owner_id,
        note=task.note,
        signifier=task.signifier,
        priority=task.priority,
        tags=list(task.tags),
        created_at=now,
        original_date=task.original_date or task.created_at,
        migrated_from=now,
    )


def reconcile_edit(task: Task, fields: dict[str, Any], now: datetime) -> dict[str, Any]:
    """Complete a direct-edit field set so the result is a valid state.

    Scheduling a backlog task brings it back as pending; unscheduling a
    future-migrated task does the same. Rescheduling a future-migrated task
    moves its migration target along with the due date.
    """
    fields = dict(fields)
    fields["updated_at"] = _touch(task, now)
    if "due_date" not in fields:
        return fields
    if task.status == "migrated_back" and fields["due_date"] is not None:
        fields["status"] = "pending"
    elif task.status == "migrated_future" and fields["due_date"] is None:
        fields["status"] = "pending"
        fields["migrated_to"] = None
    elif task.status == "migrated_future":
        fields["migrated_to"] = fields["due_date"]
    return fields
