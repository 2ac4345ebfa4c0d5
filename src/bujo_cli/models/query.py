"""Declarative task queries.

A ``TaskQuery`` describes which tasks belong in a view without running
anything. Stores execute the predicate tree (the SQLite adapter compiles it
to SQL, the in-memory adapter calls ``matches``) and the caller applies the
sort specification afterwards.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from bujo_cli.models.core import Task

# Task attributes a predicate may reference
QUERYABLE_FIELDS = frozenset(
    {
        "id",
        "owner_id",
        "status",
        "signifier",
        "priority",
        "due_date",
        "created_at",
        "updated_at",
        "completed_at",
        "parent_id",
    }
)


def _check_field(name: str) -> str:
    if name not in QUERYABLE_FIELDS:
        raise ValueError(f"Field {name!r} cannot be queried")
    return name


class Predicate:
    """Base class for query predicates."""

    def matches(self, task: Task) -> bool:
        raise NotImplementedError


@dataclass(frozen=True)
class Equals(Predicate):
    field: str
    value: Any

    def __post_init__(self):
        _check_field(self.field)

    def matches(self, task: Task) -> bool:
        return getattr(task, self.field) == self.value


@dataclass(frozen=True)
class NotEquals(Predicate):
    field: str
    value: Any

    def __post_init__(self):
        _check_field(self.field)

    def matches(self, task: Task) -> bool:
        return getattr(task, self.field) != self.value


@dataclass(frozen=True)
class IsNull(Predicate):
    field: str

    def __post_init__(self):
        _check_field(self.field)

    def matches(self, task: Task) -> bool:
        return getattr(task, self.field) is None


@dataclass(frozen=True)
class NotNull(Predicate):
    field: str

    def __post_init__(self):
        _check_field(self.field)

    def matches(self, task: Task) -> bool:
        return getattr(task, self.field) is not None


@dataclass(frozen=True)
class InRange(Predicate):
    """Inclusive range on a datetime field. Null never matches."""

    field: str
    start: datetime
    end: datetime

    def __post_init__(self):
        _check_field(self.field)

    def matches(self, task: Task) -> bool:
        value = getattr(task, self.field)
        return value is not None and self.start <= value <= self.end


@dataclass(frozen=True)
class AtMost(Predicate):
    """``field <= bound``. Null never matches."""

    field: str
    bound: datetime

    def __post_init__(self):
        _check_field(self.field)

    def matches(self, task: Task) -> bool:
        value = getattr(task, self.field)
        return value is not None and value <= self.bound


@dataclass(frozen=True)
class HasTag(Predicate):
    tag: str

    def matches(self, task: Task) -> bool:
        return self.tag in task.tags


@dataclass(frozen=True)
class AllOf(Predicate):
    clauses: tuple[Predicate, ...]

    def matches(self, task: Task) -> bool:
        return all(clause.matches(task) for clause in self.clauses)


@dataclass(frozen=True)
class AnyOf(Predicate):
    clauses: tuple[Predicate, ...]

    def matches(self, task: Task) -> bool:
        return any(clause.matches(task) for clause in self.clauses)


def all_of(*clauses: Predicate) -> AllOf:
    return AllOf(tuple(clauses))


def any_of(*clauses: Predicate) -> AnyOf:
    return AnyOf(tuple(clauses))


@dataclass(frozen=True)
class DateRange:
    """Inclusive UTC range computed by the view resolver."""

    start: datetime
    end: datetime

    def __contains__(self, value: datetime) -> bool:
        return self.start <= value <= self.end


# Sort keys, applied in order. A leading "-" reverses a key.
SORT_KEYS: dict[str, Callable[[Task], Any]] = {
    # pending before every other status
    "pending_first": lambda task: task.status != "pending",
    # scheduled tasks before unscheduled ones
    "scheduled_first": lambda task: task.due_date is None,
    # 1, 2, 3, then no priority
    "priority": lambda task: task.priority if task.priority is not None else 4,
    "created_at": lambda task: task.created_at.timestamp(),
    "migrated_from": lambda task: (
        task.migrated_from.timestamp() if task.migrated_from else 0.0
    ),
    "id": lambda task: task.id,
}

CANONICAL_SORT: tuple[str, ...] = (
    "pending_first",
    "scheduled_first",
    "priority",
    "-created_at",
    "id",
)


def apply_sort(tasks: list[Task], sort: tuple[str, ...] = CANONICAL_SORT) -> list[Task]:
    """Return a new list ordered by ``sort``.

    Python's sort is stable, so sorting by each key from last to first yields
    the lexicographic order of the whole key tuple.
    """
    ordered = list(tasks)
    for sort_key in reversed(sort):
        reverse = sort_key.startswith("-")
        key = SORT_KEYS[sort_key.lstrip("-")]
        ordered.sort(key=key, reverse=reverse)
    return ordered


@dataclass(frozen=True)
class TaskQuery:
    """A resolved, not yet executed, view query.

    Attributes:
        view_type: View that produced the query
        owner_id: Owner scope
        predicate: Predicate tree selecting the tasks
        date_range: Range boundaries (None for the "all" view)
        sort: Sort specification applied after the store read
    """

    view_type: str
    owner_id: str
    predicate: Predicate
    date_range: DateRange | None = None
    sort: tuple[str, ...] = CANONICAL_SORT

    def matches(self, task: Task) -> bool:
        return self.predicate.matches(task)

    def apply_sort(self, tasks: list[Task]) -> list[Task]:
        return apply_sort(tasks, self.sort)
