"""Shared test fixtures and configuration.

Provides infrastructure to isolate tests from real filesystem state and a
controllable clock for the journal services.
"""

from __future__ import annotations

import logging
import time
from datetime import UTC, datetime, timedelta
from unittest.mock import patch

import pytest

from bujo_cli.adapters.memory import InMemoryTaskRepository
from bujo_cli.adapters.sqlite import SqliteTaskRepository, open_connection
from bujo_cli.services.task_service import TaskService

OWNER = "owner-1"


class FixedClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


# ---------------------------------------------------------------------------
# Filesystem isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def isolate_logger(tmp_path):
    """Send log output to a temporary directory for every test."""
    import bujo_cli.utils.logger as logger_mod

    logger_mod._logger = None
    logging.getLogger("bujo_cli").handlers.clear()
    with patch("bujo_cli.utils.logger.user_log_dir", return_value=str(tmp_path / "logs")):
        yield
    for handler in logging.getLogger("bujo_cli").handlers:
        handler.close()
    logging.getLogger("bujo_cli").handlers.clear()
    logger_mod._logger = None


@pytest.fixture(autouse=True)
def utc_local_time(monkeypatch):
    """Pin the local timezone to UTC so "today" does not depend on the host."""
    if not hasattr(time, "tzset"):
        yield
        return
    monkeypatch.setenv("TZ", "UTC")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


@pytest.fixture()
def los_angeles_tz(monkeypatch):
    """Run a test with the local timezone set to America/Los_Angeles."""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available on this platform")
    monkeypatch.setenv("TZ", "America/Los_Angeles")
    time.tzset()


@pytest.fixture()
def tmp_config(tmp_path):
    """Provide a real ConfigService backed by a temporary directory.

    Also clears the lru_cache so each test gets a fresh service instance.
    """
    from bujo_cli.services.config_service import ConfigService, get_config_service

    get_config_service.cache_clear()
    svc = ConfigService(config_dir=tmp_path / "config", data_dir=tmp_path / "data")
    yield svc
    get_config_service.cache_clear()


# ---------------------------------------------------------------------------
# Clock, stores and service
# ---------------------------------------------------------------------------


@pytest.fixture()
def clock():
    return FixedClock(datetime(2024, 4, 20, 9, 0, tzinfo=UTC))


@pytest.fixture()
def memory_repo(clock):
    return InMemoryTaskRepository(clock=clock)


@pytest.fixture()
def sqlite_connection():
    conn = open_connection(":memory:")
    yield conn
    conn.close()


@pytest.fixture()
def sqlite_repo(sqlite_connection, clock):
    return SqliteTaskRepository(connection=sqlite_connection, clock=clock)


@pytest.fixture(params=["memory", "sqlite"])
def repo(request, clock):
    """Each store adapter in turn, so both honour the same contract."""
    if request.param == "memory":
        yield InMemoryTaskRepository(clock=clock)
        return
    conn = open_connection(":memory:")
    yield SqliteTaskRepository(connection=conn, clock=clock)
    conn.close()


@pytest.fixture()
def service(repo, clock):
    return TaskService(repo, owner_id=OWNER, clock=clock)
