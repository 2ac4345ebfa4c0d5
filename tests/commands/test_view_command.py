"""Tests for the journal view commands."""

from __future__ import annotations

import asyncio
import json
from datetime import date

import pytest
from typer.testing import CliRunner

from bujo_cli.main import app
from bujo_cli.utils.exit_codes import ERROR_INVALID_ARGS

runner = CliRunner()


@pytest.mark.usefixtures("cli_env")
class TestViews:
    def test_daily_pretty(self, cli_env):
        asyncio.run(cli_env.add_task("Call plumber", due_date=date(2024, 4, 20), priority=1))
        result = runner.invoke(app, ["daily", "2024-04-20"])
        assert result.exit_code == 0, result.output
        assert "Call plumber" in result.output
        assert "!!!" in result.output

    def test_daily_json_order(self, cli_env):
        async def seed():
            await cli_env.add_task("low", due_date=date(2024, 4, 20), priority=3)
            await cli_env.add_task("high", due_date=date(2024, 4, 20), priority=1)

        asyncio.run(seed())
        result = runner.invoke(app, ["daily", "2024-04-20", "--json"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert [task["content"] for task in data] == ["high", "low"]

    def test_empty_view(self):
        result = runner.invoke(app, ["weekly", "2024-04-20"])
        assert result.exit_code == 0
        assert "Nothing in the weekly log" in result.output

    def test_bad_date(self):
        result = runner.invoke(app, ["monthly", "blorp"])
        assert result.exit_code == ERROR_INVALID_ARGS
        assert "Invalid date" in result.output

    def test_bad_output_format(self):
        result = runner.invoke(app, ["all", "-o", "xml"])
        assert result.exit_code == ERROR_INVALID_ARGS

    def test_yaml_output(self, cli_env):
        asyncio.run(cli_env.add_task("Read", due_date=date(2024, 4, 20)))
        result = runner.invoke(app, ["yearly", "2024-01-01", "-o", "yaml"])
        assert result.exit_code == 0, result.output
        assert "content: Read" in result.output


@pytest.mark.usefixtures("cli_env")
class TestGridAndBacklog:
    def test_grid_json_has_every_day(self, cli_env):
        asyncio.run(cli_env.add_task("unscheduled"))
        result = runner.invoke(app, ["grid", "--start", "2024-04-18", "--days", "5", "--json"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert list(data) == [
            "2024-04-18",
            "2024-04-19",
            "2024-04-20",
            "2024-04-21",
            "2024-04-22",
        ]
        assert [t["content"] for t in data["2024-04-20"]] == ["unscheduled"]
        assert data["2024-04-18"] == []

    def test_grid_rejects_zero_days(self):
        result = runner.invoke(app, ["grid", "--days", "0"])
        assert result.exit_code == ERROR_INVALID_ARGS

    def test_backlog(self, cli_env):
        async def seed():
            task = await cli_env.add_task("Learn piano")
            await cli_env.migrate_to_backlog(task.id)

        asyncio.run(seed())
        result = runner.invoke(app, ["backlog"])
        assert result.exit_code == 0, result.output
        assert "Learn piano" in result.output

    def test_empty_backlog(self):
        result = runner.invoke(app, ["backlog"])
        assert result.exit_code == 0
        assert "Backlog is empty" in result.output
