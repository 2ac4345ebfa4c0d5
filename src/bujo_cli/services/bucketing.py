"""Group tasks into one list per calendar day for grid displays."""

from __future__ import annotations

from datetime import date, datetime

from bujo_cli.models import Task
from bujo_cli.models.query import CANONICAL_SORT, apply_sort
from bujo_cli.utils.dates import as_calendar_date, calendar_day, iter_days


def bucket_date(task: Task, today: date) -> date | None:
    """Return the single day a task is shown on, or None if it has no day.

    Precedence: completion day, future due day, today for overdue or due
    today, today for unscheduled pending tasks.
    """
    if task.status == "migrated_back":
        return None
    if task.status == "completed":
        return calendar_day(task.completed_at or task.updated_at)
    if task.due_date is not None:
        due = calendar_day(task.due_date)
        return due if due > today else today
    if task.status == "pending":
        return today
    return None


def bucket_tasks_by_date(
    tasks: list[Task],
    start: date | datetime,
    end: date | datetime,
    reference_today: date | datetime,
) -> dict[date, list[Task]]:
    """Bucket tasks by representative day over ``[start, end]``.

    Args:
        tasks: Tasks to distribute
        start: First day of the range
        end: Last day of the range
        reference_today: Day treated as "today"

    Returns:
        Dict with every day of the range as a key (empty days included), in
        date order; each bucket is in canonical display order
    """
    today = as_calendar_date(reference_today)
    buckets: dict[date, list[Task]] = {day: [] for day in iter_days(start, end)}

    for task in tasks:
        day = bucket_date(task, today)
        # Days outside the range are dropped
        if day in buckets:
            buckets[day].append(task)

    return {day: apply_sort(items, CANONICAL_SORT) for day, items in buckets.items()}
