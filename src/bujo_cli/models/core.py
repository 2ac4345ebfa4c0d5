"""Task data models."""

from __future__ import annotations

from datetime import datetime
from typing import Literal, get_args

from pydantic import BaseModel, Field, computed_field, field_validator, model_validator

from bujo_cli.utils.dates import ensure_utc

TaskStatus = Literal["pending", "completed", "migrated_back", "migrated_future"]

Signifier = Literal[
    "task",
    "event",
    "completed",
    "migrated_backlog",
    "migrated_future",
    "note",
    "priority_marker",
    "question",
    "tag_marker",
]

TASK_STATUSES: tuple[str, ...] = get_args(TaskStatus)
SIGNIFIERS: tuple[str, ...] = get_args(Signifier)

# Bullet journal notation for each signifier
SIGNIFIER_SYMBOLS = {
    "task": "*",
    "event": "@",
    "completed": "x",
    "migrated_backlog": "<",
    "migrated_future": ">",
    "note": "-",
    "priority_marker": "!",
    "question": "?",
    "tag_marker": "#",
}


def _clean_content(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("content must not be empty")
    return value


def _clean_tags(value: list[str]) -> list[str]:
    tags: list[str] = []
    for tag in value:
        tag = tag.strip()
        if tag and tag not in tags:
            tags.append(tag)
    return tags


class Task(BaseModel):
    """Task model representing a journal entry.

    Attributes:
        id: Unique identifier, assigned by the store
        owner_id: Scoping key; every query is filtered to one owner
        content: Entry text
        note: Optional longer note
        signifier: Bullet journal notation category
        status: Lifecycle state
        due_date: Scheduled day (UTC); None means unscheduled
        priority: 1 (high) to 3 (low); None means no priority
        tags: Tags in display order
        created_at: Creation timestamp
        updated_at: Last mutation timestamp
        completed_at: Completion timestamp, set only while completed
        original_date: First day the entry was journaled
        migrated_from: When the entry was last migrated
        migrated_to: Target date of the last future migration
        parent_id: Parent task id (subtasks only)
        subtasks: Ids of child tasks, oldest first
    """

    id: str
    owner_id: str
    content: str
    note: str | None = None
    signifier: Signifier = "task"
    status: TaskStatus = "pending"
    due_date: datetime | None = None
    priority: int | None = Field(default=None, ge=1, le=3)
    tags: list[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime
    completed_at: datetime | None = None
    original_date: datetime | None = None
    migrated_from: datetime | None = None
    migrated_to: datetime | None = None
    parent_id: str | None = None
    subtasks: list[str] = Field(default_factory=list)

    @field_validator("content")
    @classmethod
    def _check_content(cls, value: str) -> str:
        return _clean_content(value)

    @field_validator("tags")
    @classmethod
    def _check_tags(cls, value: list[str]) -> list[str]:
        return _clean_tags(value)

    @field_validator(
        "due_date",
        "created_at",
        "updated_at",
        "completed_at",
        "original_date",
        "migrated_from",
        "migrated_to",
    )
    @classmethod
    def _to_utc(cls, value: datetime | None) -> datetime | None:
        return ensure_utc(value) if value is not None else None

    @model_validator(mode="after")
    def _check_lifecycle(self) -> Task:
        if self.updated_at < self.created_at:
            raise ValueError("updated_at must not be earlier than created_at")
        if self.original_date is None:
            self.original_date = self.created_at
        if self.status == "completed":
            # Records written before completed_at existed used updated_at
            if self.completed_at is None:
                self.completed_at = self.updated_at
        else:
            self.completed_at = None
        if self.status == "migrated_future" and self.due_date is None:
            raise ValueError("migrated_future tasks must have a due_date")
        if self.status == "migrated_back" and self.due_date is not None:
            raise ValueError("migrated_back tasks must not have a due_date")
        return self

    @computed_field
    @property
    def is_backlog(self) -> bool:
        """Derived backlog flag; ``status == "migrated_back"`` is the stored signal."""
        return self.status == "migrated_back"

    @property
    def symbol(self) -> str:
        return SIGNIFIER_SYMBOLS[self.signifier]


class TaskCreate(BaseModel):
    """Model for creating a new task.

    Attributes:
        content: Entry text (required)
        owner_id: Owner scope (required)
        note: Optional longer note
        signifier: Bullet journal notation category
        due_date: Optional scheduled day
        priority: Optional priority, 1 (high) to 3 (low)
        tags: Tags in display order
        parent_id: Optional parent task id for subtasks
        created_at: Creation timestamp; the store uses "now" when omitted
        original_date: First journaled day; defaults to created_at
        migrated_from: Migration timestamp for carried-forward copies
    """

    content: str
    owner_id: str
    note: str | None = None
    signifier: Signifier = "task"
    due_date: datetime | None = None
    priority: int | None = Field(default=None, ge=1, le=3)
    tags: list[str] = Field(default_factory=list)
    parent_id: str | None = None
    created_at: datetime | None = None
    original_date: datetime | None = None
    migrated_from: datetime | None = None

    @field_validator("content")
    @classmethod
    def _check_content(cls, value: str) -> str:
        return _clean_content(value)

    @field_validator("tags")
    @classmethod
    def _check_tags(cls, value: list[str]) -> list[str]:
        return _clean_tags(value)

    @field_validator("due_date", "created_at", "original_date", "migrated_from")
    @classmethod
    def _to_utc(cls, value: datetime | None) -> datetime | None:
        return ensure_utc(value) if value is not None else None


class TaskUpdate(BaseModel):
    """Model for a direct edit of an existing task.

    Only provided fields are changed. Status is not editable here; it only
    changes through the migration transitions.

    Attributes:
        content: Entry text
        note: Longer note
        signifier: Notation category
        due_date: New scheduled day
        priority: New priority
        tags: Replacement tag list
        clear_due_date: Remove the due date (unschedule)
        clear_priority: Remove the priority
    """

    content: str | None = None
    note: str | None = None
    signifier: Signifier | None = None
    due_date: datetime | None = None
    priority: int | None = Field(default=None, ge=1, le=3)
    tags: list[str] | None = None
    clear_due_date: bool = False
    clear_priority: bool = False

    @field_validator("content")
    @classmethod
    def _check_content(cls, value: str | None) -> str | None:
        return _clean_content(value) if value is not None else None

    @field_validator("tags")
    @classmethod
    def _check_tags(cls, value: list[str] | None) -> list[str] | None:
        return _clean_tags(value) if value is not None else None

    @field_validator("due_date")
    @classmethod
    def _to_utc(cls, value: datetime | None) -> datetime | None:
        return ensure_utc(value) if value is not None else None

    def to_fields(self) -> dict:
        """Field set to write, excluding unset values and clear flags."""
        fields = self.model_dump(
            exclude_none=True, exclude={"clear_due_date", "clear_priority"}
        )
        if self.clear_due_date:
            fields["due_date"] = None
        if self.clear_priority:
            fields["priority"] = None
        return fields


class TaskFilters(BaseModel):
    """Filters for the plain task listing.

    Attributes:
        status: Filter by lifecycle status
        signifier: Filter by notation category
        priority: Filter by priority level
        tag: Tasks carrying this tag
        include_backlog: Include migrated_back tasks
    """

    status: TaskStatus | None = None
    signifier: Signifier | None = None
    priority: int | None = Field(default=None, ge=1, le=3)
    tag: str | None = None
    include_backlog: bool = True
