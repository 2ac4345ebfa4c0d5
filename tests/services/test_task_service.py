"""Tests for TaskService operations.

Most tests run against both store adapters through the ``service``
fixture; the mock-based tests check how transitions reach the store.
"""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from bujo_cli.exceptions import NotFoundError, StoreFailure, ValidationError
from bujo_cli.models import Task, TaskFilters, TaskUpdate
from bujo_cli.services.task_service import TaskService, as_due_date

_NOW = datetime(2024, 4, 20, 9, 0, tzinfo=UTC)


class TestAddTask:
    @pytest.mark.asyncio
    async def test_add_with_date(self, service):
        task = await service.add_task(
            "Dentist", due_date=date(2024, 4, 22), priority=1, tags=["health"]
        )
        assert task.owner_id == "owner-1"
        assert task.due_date == datetime(2024, 4, 22, tzinfo=UTC)
        assert task.priority == 1
        assert task.tags == ["health"]
        assert task.created_at == _NOW

    @pytest.mark.asyncio
    async def test_empty_content(self, service):
        with pytest.raises(ValidationError, match="content"):
            await service.add_task("   ")

    @pytest.mark.asyncio
    async def test_bad_priority(self, service):
        with pytest.raises(ValidationError):
            await service.add_task("x", priority=7)

    @pytest.mark.asyncio
    async def test_bad_signifier(self, service):
        with pytest.raises(ValidationError):
            await service.add_task("x", signifier="bullet")


class TestSubtasks:
    @pytest.mark.asyncio
    async def test_add_subtask(self, service):
        parent = await service.add_task("Plan trip")
        child = await service.add_subtask(parent.id, "Book flights", priority=2)
        assert child.parent_id == parent.id
        assert (await service.get_task(parent.id)).subtasks == [child.id]

    @pytest.mark.asyncio
    async def test_one_level_only(self, service):
        parent = await service.add_task("Plan trip")
        child = await service.add_subtask(parent.id, "Book flights")
        with pytest.raises(ValidationError):
            await service.add_subtask(child.id, "Compare prices")

    @pytest.mark.asyncio
    async def test_missing_parent(self, service):
        with pytest.raises(NotFoundError):
            await service.add_subtask("missing", "orphan")


class TestUpdateTask:
    @pytest.mark.asyncio
    async def test_edit_fields(self, service, clock):
        task = await service.add_task("Draft", priority=3)
        clock.advance(hours=1)
        updated = await service.update_task(
            task.id, TaskUpdate(content="Final", priority=1, tags=["w"])
        )
        assert updated.content == "Final"
        assert updated.priority == 1
        assert updated.tags == ["w"]
        assert updated.updated_at == _NOW + timedelta(hours=1)

    @pytest.mark.asyncio
    async def test_clear_priority_and_due(self, service):
        task = await service.add_task("x", priority=1, due_date=date(2024, 4, 21))
        updated = await service.update_task(
            task.id, TaskUpdate(clear_priority=True, clear_due_date=True)
        )
        assert updated.priority is None
        assert updated.due_date is None

    @pytest.mark.asyncio
    async def test_scheduling_backlog_task_returns_it(self, service):
        task = await service.add_task("someday")
        await service.migrate_to_backlog(task.id)
        updated = await service.update_task(
            task.id, TaskUpdate(due_date=datetime(2024, 4, 25))
        )
        assert updated.status == "pending"
        assert updated.id in {t.id for t in await service.get_view("daily", date(2024, 4, 25))}

    @pytest.mark.asyncio
    async def test_nothing_to_update(self, service):
        task = await service.add_task("x")
        with pytest.raises(ValidationError):
            await service.update_task(task.id, TaskUpdate())

    @pytest.mark.asyncio
    async def test_missing(self, service):
        with pytest.raises(NotFoundError):
            await service.update_task("missing", TaskUpdate(content="y"))


class TestDeleteTask:
    @pytest.mark.asyncio
    async def test_cascades(self, service):
        parent = await service.add_task("parent")
        child = await service.add_subtask(parent.id, "child")
        await service.delete_task(parent.id)
        with pytest.raises(NotFoundError):
            await service.get_task(child.id)

    @pytest.mark.asyncio
    async def test_missing_is_an_error(self, service):
        with pytest.raises(NotFoundError):
            await service.delete_task("missing")


class TestTransitions:
    @pytest.mark.asyncio
    async def test_toggle_round_trip(self, service, clock):
        task = await service.add_task("x", due_date=date(2024, 4, 22))
        clock.advance(minutes=30)
        done = await service.toggle_complete(task.id)
        assert done.status == "completed"
        assert done.completed_at == _NOW + timedelta(minutes=30)
        assert done.due_date == task.due_date

        reopened = await service.toggle_complete(task.id)
        assert reopened.status == "pending"
        assert reopened.completed_at is None

    @pytest.mark.asyncio
    async def test_migrate_to_future(self, service):
        task = await service.add_task("x")
        moved = await service.migrate_to_future(task.id, date(2024, 5, 1))
        assert moved.status == "migrated_future"
        assert moved.due_date == datetime(2024, 5, 1, tzinfo=UTC)
        assert moved.migrated_from == _NOW

    @pytest.mark.asyncio
    async def test_migrate_to_future_needs_target(self, service):
        task = await service.add_task("x")
        with pytest.raises(ValidationError):
            await service.migrate_to_future(task.id, None)
        assert (await service.get_task(task.id)).status == "pending"

    @pytest.mark.asyncio
    async def test_migrate_to_backlog(self, service):
        task = await service.add_task("x", due_date=date(2024, 4, 22))
        moved = await service.migrate_to_backlog(task.id)
        assert moved.status == "migrated_back"
        assert moved.due_date is None
        assert moved.is_backlog is True

    @pytest.mark.asyncio
    async def test_carry_forward_is_non_destructive(self, service, clock):
        source = await service.add_task(
            "Read book", due_date=date(2024, 4, 18), priority=2, tags=["home"]
        )
        clock.advance(days=2)
        copy = await service.carry_forward(source.id)

        original = await service.get_task(source.id)
        assert original.status == source.status
        assert original.due_date == source.due_date
        assert original.created_at == source.created_at

        assert copy.id != source.id
        assert copy.status == "pending"
        assert copy.due_date is None
        assert copy.created_at == _NOW + timedelta(days=2)
        assert copy.content == "Read book"
        assert copy.tags == ["home"]
        assert copy.priority == 2
        assert copy.original_date == source.created_at

    @pytest.mark.asyncio
    async def test_transition_on_missing_task(self, service):
        with pytest.raises(NotFoundError):
            await service.toggle_complete("missing")


class TestListing:
    @pytest.mark.asyncio
    async def test_filters(self, service):
        work = await service.add_task("work", tags=["work"], priority=1)
        await service.add_task("home", tags=["home"])
        event = await service.add_task("party", signifier="event")
        backlog = await service.add_task("later")
        await service.migrate_to_backlog(backlog.id)

        assert [t.id for t in await service.list_tasks(TaskFilters(tag="work"))] == [work.id]
        assert [t.id for t in await service.list_tasks(TaskFilters(priority=1))] == [work.id]
        assert [
            t.id for t in await service.list_tasks(TaskFilters(signifier="event"))
        ] == [event.id]
        assert backlog.id in {t.id for t in await service.list_tasks()}
        assert backlog.id not in {
            t.id for t in await service.list_tasks(TaskFilters(include_backlog=False))
        }
        assert [
            t.id for t in await service.list_tasks(TaskFilters(status="migrated_back"))
        ] == [backlog.id]


class TestStoreInteraction:
    @pytest.fixture()
    def stored(self):
        return Task(
            id="task-1",
            owner_id="owner-1",
            content="x",
            created_at=_NOW,
            updated_at=_NOW,
        )

    @pytest.fixture()
    def mock_repo(self, stored):
        repo = MagicMock()
        repo.get = AsyncMock(return_value=stored)
        repo.update_fields = AsyncMock(return_value=stored.model_copy(update={"status": "completed"}))
        return repo

    @pytest.mark.asyncio
    async def test_transition_is_one_write(self, mock_repo, clock):
        service = TaskService(mock_repo, owner_id="owner-1", clock=clock)
        await service.migrate_to_future("task-1", date(2024, 5, 1))
        mock_repo.update_fields.assert_awaited_once()
        owner_id, task_id, fields = mock_repo.update_fields.await_args.args
        assert (owner_id, task_id) == ("owner-1", "task-1")
        assert fields["status"] == "migrated_future"
        assert fields["due_date"] == datetime(2024, 5, 1, tzinfo=UTC)

    @pytest.mark.asyncio
    async def test_store_failure_propagates(self, mock_repo, clock):
        mock_repo.update_fields.side_effect = StoreFailure("disk I/O error")
        service = TaskService(mock_repo, owner_id="owner-1", clock=clock)
        with pytest.raises(StoreFailure, match="disk"):
            await service.toggle_complete("task-1")
        mock_repo.update_fields.assert_awaited_once()


def test_as_due_date():
    assert as_due_date(None) is None
    assert as_due_date(date(2024, 4, 1)) == datetime(2024, 4, 1, tzinfo=UTC)
    assert as_due_date(datetime(2024, 4, 1, 15, 0)) == datetime(2024, 4, 1, 15, 0, tzinfo=UTC)
