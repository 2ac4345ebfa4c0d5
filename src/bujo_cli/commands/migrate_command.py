"""Lifecycle commands: done, migrate back, migrate future, carry."""

from typing import Annotated

import typer

from bujo_cli.services.task_service import get_task_service
from bujo_cli.utils.task_helpers import resolve_task_id
from bujo_cli.utils.ui.console import get_console
from bujo_cli.utils.ui.formatters import format_output, format_success

from .decorators import command_wrapper
from .utils import parse_optional_date, resolve_output, service_today

app = typer.Typer()
migrate_app = typer.Typer(help="Migrate tasks to the backlog or a future date")
console = get_console()

TaskIdArg = Annotated[str, typer.Argument(help="Task ID or unique suffix")]
OutputOpt = Annotated[
    str | None, typer.Option("--output", "-o", help="Output format")
]
JsonOpt = Annotated[
    bool, typer.Option("--json", help="Output as JSON (alias for --output json)")
]


def _report(task, message: str, output: str) -> None:
    if output in ("json", "yaml"):
        format_output(task.model_dump(mode="json"), output)
    else:
        format_success(message)


@app.command("done")
@command_wrapper
async def done_command(
    task_id: TaskIdArg,
    output: OutputOpt = None,
    json_opt: JsonOpt = False,
) -> None:
    """Complete a task, or reopen it if it is already completed."""
    output, _ = resolve_output(output, json_opt)
    task_service = get_task_service()
    resolved_id = await resolve_task_id(task_service, task_id)
    task = await task_service.toggle_complete(resolved_id)

    if task.status == "completed":
        _report(task, f"Completed: {task.content}", output)
    else:
        _report(task, f"Reopened: {task.content}", output)


@app.command("carry")
@command_wrapper
async def carry_command(
    task_id: TaskIdArg,
    output: OutputOpt = None,
    json_opt: JsonOpt = False,
) -> None:
    """Carry a task forward as a new pending entry."""
    output, _ = resolve_output(output, json_opt)
    task_service = get_task_service()
    resolved_id = await resolve_task_id(task_service, task_id)
    task = await task_service.carry_forward(resolved_id)
    _report(task, f"Carried forward: {task.content} [{task.id[-8:]}]", output)


@migrate_app.command("back")
@command_wrapper
async def migrate_back_command(
    task_id: TaskIdArg,
    output: OutputOpt = None,
    json_opt: JsonOpt = False,
) -> None:
    """Move a task to the backlog."""
    output, _ = resolve_output(output, json_opt)
    task_service = get_task_service()
    resolved_id = await resolve_task_id(task_service, task_id)
    task = await task_service.migrate_to_backlog(resolved_id)
    _report(task, f"Moved to backlog: {task.content}", output)


@migrate_app.command("future")
@command_wrapper
async def migrate_future_command(
    task_id: TaskIdArg,
    target: Annotated[
        str, typer.Argument(help="Target date: tomorrow, monday, 2024-05-01")
    ],
    output: OutputOpt = None,
    json_opt: JsonOpt = False,
) -> None:
    """Reschedule a task to a future date."""
    output, _ = resolve_output(output, json_opt)
    task_service = get_task_service()
    resolved_id = await resolve_task_id(task_service, task_id)
    target_date = parse_optional_date(target, service_today(task_service))
    task = await task_service.migrate_to_future(resolved_id, target_date)
    _report(
        task,
        f"Migrated to {task.due_date.date().isoformat()}: {task.content}",
        output,
    )
