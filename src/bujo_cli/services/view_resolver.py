"""View resolver - turns (view type, anchor date, owner) into a TaskQuery.

Resolution is pure: nothing here touches a store. The same anchor and owner
always produce the same query.
"""

from __future__ import annotations

from datetime import date, datetime

from bujo_cli.exceptions import InvalidViewTypeError, ValidationError
from bujo_cli.models import Task
from bujo_cli.models.query import (
    CANONICAL_SORT,
    AtMost,
    DateRange,
    Equals,
    InRange,
    IsNull,
    NotEquals,
    NotNull,
    Predicate,
    TaskQuery,
    all_of,
    any_of,
    apply_sort,
)
from bujo_cli.utils.dates import (
    month_bounds,
    to_utc_day_bounds,
    week_bounds,
    year_bounds,
)

RANGE_VIEWS = {
    "daily": to_utc_day_bounds,
    "weekly": week_bounds,
    "monthly": month_bounds,
    "yearly": year_bounds,
}

VIEW_TYPES: tuple[str, ...] = (*RANGE_VIEWS, "all")


def _base_scope(owner_id: str) -> list[Predicate]:
    # Backlog entries only show up in the backlog listing
    return [Equals("owner_id", owner_id), NotEquals("status", "migrated_back")]


def _range_predicate(view_type: str, start: datetime, end: datetime) -> Predicate:
    due_in_range = InRange("due_date", start, end)
    completed_in_range = all_of(
        Equals("status", "completed"), InRange("completed_at", start, end)
    )
    if view_type == "daily":
        # A task completed today but scheduled for another day belongs to that day
        completed_in_range = all_of(
            *completed_in_range.clauses,
            any_of(due_in_range, IsNull("due_date")),
        )
    open_unscheduled = all_of(
        IsNull("due_date"),
        Equals("status", "pending"),
        AtMost("created_at", end),
    )
    return any_of(due_in_range, completed_in_range, open_unscheduled)


def _all_predicate() -> Predicate:
    return any_of(
        NotNull("due_date"),
        Equals("status", "completed"),
        all_of(IsNull("due_date"), Equals("status", "pending")),
    )


def resolve_view(
    view_type: str, anchor: date | datetime | None, owner_id: str
) -> TaskQuery:
    """Build the query for a journal view.

    Args:
        view_type: One of ``daily``, ``weekly``, ``monthly``, ``yearly``, ``all``
        anchor: Any instant inside the wanted period (ignored for ``all``)
        owner_id: Owner scope

    Returns:
        Declarative TaskQuery with the canonical sort

    Raises:
        InvalidViewTypeError: If view_type is not a known view
        ValidationError: If a ranged view is given no anchor
    """
    if view_type == "all":
        return TaskQuery(
            view_type=view_type,
            owner_id=owner_id,
            predicate=all_of(*_base_scope(owner_id), _all_predicate()),
        )

    bounds = RANGE_VIEWS.get(view_type)
    if bounds is None:
        raise InvalidViewTypeError(view_type)
    if anchor is None:
        raise ValidationError(f"The {view_type} view needs an anchor date")

    start, end = bounds(anchor)
    return TaskQuery(
        view_type=view_type,
        owner_id=owner_id,
        predicate=all_of(
            *_base_scope(owner_id), _range_predicate(view_type, start, end)
        ),
        date_range=DateRange(start, end),
    )


def sort_tasks(
    tasks: list[Task], sort: tuple[str, ...] = CANONICAL_SORT
) -> list[Task]:
    """Order tasks for display: pending, scheduled, priority, newest, id."""
    return apply_sort(tasks, sort)
