"""Journal view commands: daily, weekly, monthly, yearly, all, grid, backlog."""

from datetime import timedelta
from typing import Annotated

import typer

from bujo_cli.exceptions import ValidationError
from bujo_cli.services.task_service import get_task_service
from bujo_cli.utils.ui.console import get_console
from bujo_cli.utils.ui.formatters import format_grid, format_output

from .decorators import command_wrapper
from .utils import parse_optional_date, resolve_output, service_today

app = typer.Typer()
console = get_console()

DateArg = Annotated[
    str | None,
    typer.Argument(help="Any day in the period: today, tomorrow, monday, 2024-04-20"),
]
OutputOpt = Annotated[
    str | None, typer.Option("--output", "-o", help="Output format")
]
JsonOpt = Annotated[
    bool, typer.Option("--json", help="Output as JSON (alias for --output json)")
]
CompactOpt = Annotated[bool, typer.Option("--compact", help="Compact output")]


async def _show_view(
    view_type: str, when: str | None, output: str | None, json_opt: bool, compact: bool
) -> None:
    output, compact = resolve_output(output, json_opt, compact)
    task_service = get_task_service()
    tasks = await task_service.get_view(
        view_type, parse_optional_date(when, service_today(task_service))
    )

    data = [task.model_dump(mode="json") for task in tasks]
    if output in ("json", "yaml"):
        format_output(data, output)
        return
    if not tasks:
        console.print(f"[green]Nothing in the {view_type} log[/green]")
        return
    format_output(data, output, compact=compact)


@app.command("daily")
@command_wrapper
async def daily_command(
    when: DateArg = None,
    output: OutputOpt = None,
    json_opt: JsonOpt = False,
    compact: CompactOpt = False,
) -> None:
    """Show the daily log."""
    await _show_view("daily", when, output, json_opt, compact)


@app.command("weekly")
@command_wrapper
async def weekly_command(
    when: DateArg = None,
    output: OutputOpt = None,
    json_opt: JsonOpt = False,
    compact: CompactOpt = False,
) -> None:
    """Show the weekly log (Sunday to Saturday)."""
    await _show_view("weekly", when, output, json_opt, compact)


@app.command("monthly")
@command_wrapper
async def monthly_command(
    when: DateArg = None,
    output: OutputOpt = None,
    json_opt: JsonOpt = False,
    compact: CompactOpt = False,
) -> None:
    """Show the monthly log."""
    await _show_view("monthly", when, output, json_opt, compact)


@app.command("yearly")
@command_wrapper
async def yearly_command(
    when: DateArg = None,
    output: OutputOpt = None,
    json_opt: JsonOpt = False,
    compact: CompactOpt = False,
) -> None:
    """Show the yearly log."""
    await _show_view("yearly", when, output, json_opt, compact)


@app.command("all")
@command_wrapper
async def all_command(
    output: OutputOpt = None,
    json_opt: JsonOpt = False,
    compact: CompactOpt = False,
) -> None:
    """Show every task outside the backlog."""
    await _show_view("all", None, output, json_opt, compact)


@app.command("grid")
@command_wrapper
async def grid_command(
    start: Annotated[
        str | None, typer.Option("--start", "-s", help="First day (default: today)")
    ] = None,
    days: Annotated[int, typer.Option("--days", "-d", help="Number of days")] = 7,
    output: OutputOpt = None,
    json_opt: JsonOpt = False,
    compact: CompactOpt = False,
) -> None:
    """Show tasks grouped by day, overdue work rolled onto today."""
    if days < 1:
        raise ValidationError("--days must be at least 1")
    output, compact = resolve_output(output, json_opt, compact)

    task_service = get_task_service()
    today = service_today(task_service)
    first = parse_optional_date(start, today) or today
    last = first + timedelta(days=days - 1)

    buckets = await task_service.get_grid(first, last, today)

    if output in ("json", "yaml"):
        format_output(
            {
                day.isoformat(): [task.model_dump(mode="json") for task in tasks]
                for day, tasks in buckets.items()
            },
            output,
        )
        return
    format_grid(
        {day: [task.model_dump(mode="json") for task in tasks] for day, tasks in buckets.items()},
        compact=compact,
        today=today,
    )


@app.command("backlog")
@command_wrapper
async def backlog_command(
    output: OutputOpt = None,
    json_opt: JsonOpt = False,
    compact: CompactOpt = False,
) -> None:
    """Show the backlog, most recently migrated first."""
    output, compact = resolve_output(output, json_opt, compact)
    task_service = get_task_service()
    tasks = await task_service.list_backlog()

    data = [task.model_dump(mode="json") for task in tasks]
    if output in ("json", "yaml"):
        format_output(data, output)
    elif not tasks:
        console.print("[green]Backlog is empty[/green]")
    else:
        format_output(data, output, compact=compact)
