"""bujo domain models.

This package contains the Pydantic models that represent journal tasks and
the declarative query objects that select them.
"""

from .core import (
    SIGNIFIER_SYMBOLS,
    SIGNIFIERS,
    TASK_STATUSES,
    Signifier,
    Task,
    TaskCreate,
    TaskFilters,
    TaskStatus,
    TaskUpdate,
)
from .query import CANONICAL_SORT, DateRange, Predicate, TaskQuery, apply_sort

__all__ = [
    # Task models
    "Task",
    "TaskCreate",
    "TaskUpdate",
    "TaskFilters",
    "TaskStatus",
    "Signifier",
    "TASK_STATUSES",
    "SIGNIFIERS",
    "SIGNIFIER_SYMBOLS",
    # Query models
    "TaskQuery",
    "Predicate",
    "DateRange",
    "CANONICAL_SORT",
    "apply_sort",
]
