"""Fixtures for CLI command tests."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from bujo_cli.adapters.memory import InMemoryTaskRepository
from bujo_cli.services.task_service import TaskService

COMMAND_MODULES = (
    "bujo_cli.commands.view_command",
    "bujo_cli.commands.task_command",
    "bujo_cli.commands.migrate_command",
)


@pytest.fixture()
def cli_service(clock):
    return TaskService(InMemoryTaskRepository(clock=clock), owner_id="local", clock=clock)


@pytest.fixture()
def cli_env(cli_service, tmp_config):
    """Patch every command module onto an in-memory journal and temp config."""
    patches = [
        patch(f"{module}.get_task_service", return_value=cli_service)
        for module in COMMAND_MODULES
    ]
    patches.append(patch("bujo_cli.commands.utils.get_config_service", return_value=tmp_config))
    patches.append(
        patch("bujo_cli.commands.config_command.get_config_service", return_value=tmp_config)
    )
    for p in patches:
        p.start()
    yield cli_service
    for p in reversed(patches):
        p.stop()
