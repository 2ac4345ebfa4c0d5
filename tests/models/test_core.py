"""Tests for the task models and their invariants."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from bujo_cli.models import Task, TaskCreate, TaskUpdate

_NOW = datetime(2024, 4, 20, 9, 0, tzinfo=UTC)


def _task(**overrides) -> Task:
    data = {
        "id": "task-1",
        "owner_id": "owner-1",
        "content": "Write release notes",
        "created_at": _NOW,
        "updated_at": _NOW,
    }
    data.update(overrides)
    return Task(**data)


class TestTask:
    def test_defaults(self):
        task = _task()
        assert task.status == "pending"
        assert task.signifier == "task"
        assert task.tags == []
        assert task.subtasks == []
        assert task.completed_at is None
        assert task.original_date == _NOW
        assert task.is_backlog is False
        assert task.symbol == "*"

    def test_content_is_stripped(self):
        assert _task(content="  call mom  ").content == "call mom"

    @pytest.mark.parametrize("content", ["", "   "])
    def test_empty_content_rejected(self, content):
        with pytest.raises(ValidationError):
            _task(content=content)

    @pytest.mark.parametrize("priority", [0, 4])
    def test_priority_out_of_range(self, priority):
        with pytest.raises(ValidationError):
            _task(priority=priority)

    def test_tags_deduplicated_in_order(self):
        assert _task(tags=["work", " home", "work", ""]).tags == ["work", "home"]

    def test_naive_datetimes_become_utc(self):
        task = _task(due_date=datetime(2024, 4, 21, 0, 0))
        assert task.due_date == datetime(2024, 4, 21, tzinfo=UTC)

    def test_aware_datetimes_converted(self):
        plus_two = timezone(timedelta(hours=2))
        task = _task(due_date=datetime(2024, 4, 21, 2, 0, tzinfo=plus_two))
        assert task.due_date == datetime(2024, 4, 21, 0, 0, tzinfo=UTC)

    def test_updated_before_created_rejected(self):
        with pytest.raises(ValidationError):
            _task(updated_at=_NOW - timedelta(seconds=1))

    def test_completed_without_timestamp_uses_updated_at(self):
        later = _NOW + timedelta(hours=2)
        task = _task(status="completed", updated_at=later)
        assert task.completed_at == later

    def test_completed_at_cleared_when_not_completed(self):
        task = _task(status="pending", completed_at=_NOW)
        assert task.completed_at is None

    def test_future_migration_needs_due_date(self):
        with pytest.raises(ValidationError):
            _task(status="migrated_future")

    def test_backlog_forbids_due_date(self):
        with pytest.raises(ValidationError):
            _task(status="migrated_back", due_date=_NOW)

    def test_backlog_flag_is_derived(self):
        task = _task(status="migrated_back")
        assert task.is_backlog is True
        assert task.model_dump()["is_backlog"] is True

    def test_unknown_signifier_rejected(self):
        with pytest.raises(ValidationError):
            _task(signifier="bullet")


class TestTaskCreate:
    def test_minimal(self):
        data = TaskCreate(content="Plan trip", owner_id="owner-1")
        assert data.due_date is None
        assert data.created_at is None

    def test_empty_content_rejected(self):
        with pytest.raises(ValidationError):
            TaskCreate(content=" ", owner_id="owner-1")


class TestTaskUpdate:
    def test_to_fields_skips_unset(self):
        assert TaskUpdate(content="New").to_fields() == {"content": "New"}

    def test_clear_flags_null_fields(self):
        fields = TaskUpdate(clear_due_date=True, clear_priority=True).to_fields()
        assert fields == {"due_date": None, "priority": None}

    def test_empty_update(self):
        assert TaskUpdate().to_fields() == {}

    def test_due_date_normalized(self):
        fields = TaskUpdate(due_date=datetime(2024, 5, 1)).to_fields()
        assert fields["due_date"] == datetime(2024, 5, 1, tzinfo=UTC)
