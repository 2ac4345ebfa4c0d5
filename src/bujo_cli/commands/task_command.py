"""Task commands: list, add, subtask, show, edit, delete."""

from typing import Annotated

import typer

from bujo_cli.models import TaskFilters, TaskUpdate
from bujo_cli.services.task_service import get_task_service
from bujo_cli.utils.task_helpers import resolve_task_id
from bujo_cli.utils.ui.console import get_console
from bujo_cli.utils.ui.formatters import format_output, format_success

from .decorators import command_wrapper
from .utils import parse_optional_date, resolve_output, service_today

app = typer.Typer()
console = get_console()

TaskIdArg = Annotated[str, typer.Argument(help="Task ID or unique suffix")]
OutputOpt = Annotated[
    str | None, typer.Option("--output", "-o", help="Output format")
]
JsonOpt = Annotated[
    bool, typer.Option("--json", help="Output as JSON (alias for --output json)")
]
SignifierOpt = Annotated[
    str | None,
    typer.Option("--type", "-t", help="Signifier: task, event, note, question, ..."),
]
DueOpt = Annotated[
    str | None, typer.Option("--due", help="Due date: today, friday, 2024-04-20")
]
PriorityOpt = Annotated[
    int | None, typer.Option("--priority", "-p", help="Priority 1 (high) to 3 (low)")
]
TagOpt = Annotated[
    list[str] | None, typer.Option("--tag", help="Tag (repeatable)")
]
NoteOpt = Annotated[str | None, typer.Option("--note", "-n", help="Longer note")]


def _show_created(task, output: str) -> None:
    if output in ("json", "yaml"):
        format_output(task.model_dump(mode="json"), output)
    else:
        format_success(f"Added: {task.content} [{task.id[-8:]}]")


@app.command("list")
@command_wrapper
async def list_command(
    status: Annotated[
        str | None, typer.Option("--status", help="Filter by status")
    ] = None,
    signifier: SignifierOpt = None,
    priority: PriorityOpt = None,
    tag: Annotated[str | None, typer.Option("--tag", help="Filter by tag")] = None,
    no_backlog: Annotated[
        bool, typer.Option("--no-backlog", help="Hide backlog tasks")
    ] = False,
    output: OutputOpt = None,
    json_opt: JsonOpt = False,
    compact: Annotated[bool, typer.Option("--compact", help="Compact output")] = False,
) -> None:
    """List tasks with filters."""
    output, compact = resolve_output(output, json_opt, compact)
    filters = TaskFilters(
        status=status,
        signifier=signifier,
        priority=priority,
        tag=tag,
        include_backlog=not no_backlog,
    )
    task_service = get_task_service()
    tasks = await task_service.list_tasks(filters)

    data = [task.model_dump(mode="json") for task in tasks]
    if output in ("json", "yaml"):
        format_output(data, output)
    elif not tasks:
        console.print("[yellow]No tasks found[/yellow]")
    else:
        format_output(data, output, compact=compact)


@app.command("add")
@command_wrapper
async def add_command(
    content: Annotated[str, typer.Argument(help="Entry text")],
    signifier: SignifierOpt = None,
    due: DueOpt = None,
    priority: PriorityOpt = None,
    tags: TagOpt = None,
    note: NoteOpt = None,
    output: OutputOpt = None,
    json_opt: JsonOpt = False,
) -> None:
    """Add a journal entry."""
    output, _ = resolve_output(output, json_opt)
    task_service = get_task_service()
    task = await task_service.add_task(
        content,
        note=note,
        signifier=signifier or "task",
        due_date=parse_optional_date(due, service_today(task_service)),
        priority=priority,
        tags=tags,
    )
    _show_created(task, output)


@app.command("subtask")
@command_wrapper
async def subtask_command(
    parent_id: Annotated[str, typer.Argument(help="Parent task ID or suffix")],
    content: Annotated[str, typer.Argument(help="Entry text")],
    signifier: SignifierOpt = None,
    due: DueOpt = None,
    priority: PriorityOpt = None,
    tags: TagOpt = None,
    output: OutputOpt = None,
    json_opt: JsonOpt = False,
) -> None:
    """Add a subtask under an existing task."""
    output, _ = resolve_output(output, json_opt)
    task_service = get_task_service()
    resolved_id = await resolve_task_id(task_service, parent_id)
    task = await task_service.add_subtask(
        resolved_id,
        content,
        signifier=signifier or "task",
        due_date=parse_optional_date(due, service_today(task_service)),
        priority=priority,
        tags=tags,
    )
    _show_created(task, output)


@app.command("show")
@command_wrapper
async def show_command(
    task_id: TaskIdArg,
    output: OutputOpt = None,
    json_opt: JsonOpt = False,
) -> None:
    """Show one task with all its fields."""
    output, _ = resolve_output(output, json_opt)
    task_service = get_task_service()
    resolved_id = await resolve_task_id(task_service, task_id)
    task = await task_service.get_task(resolved_id)
    format_output(task.model_dump(mode="json"), output)


@app.command("edit")
@command_wrapper
async def edit_command(
    task_id: TaskIdArg,
    content: Annotated[
        str | None, typer.Option("--content", "-c", help="New entry text")
    ] = None,
    signifier: SignifierOpt = None,
    due: DueOpt = None,
    no_due: Annotated[
        bool, typer.Option("--no-due", help="Remove the due date")
    ] = False,
    priority: PriorityOpt = None,
    no_priority: Annotated[
        bool, typer.Option("--no-priority", help="Remove the priority")
    ] = False,
    tags: TagOpt = None,
    note: NoteOpt = None,
    output: OutputOpt = None,
    json_opt: JsonOpt = False,
) -> None:
    """Edit a task's content, notation, schedule, priority or tags."""
    output, _ = resolve_output(output, json_opt)
    task_service = get_task_service()
    updates = TaskUpdate(
        content=content,
        note=note,
        signifier=signifier,
        due_date=parse_optional_date(due, service_today(task_service)),
        priority=priority,
        tags=tags,
        clear_due_date=no_due,
        clear_priority=no_priority,
    )
    resolved_id = await resolve_task_id(task_service, task_id)
    task = await task_service.update_task(resolved_id, updates)

    if output in ("json", "yaml"):
        format_output(task.model_dump(mode="json"), output)
    else:
        format_success(f"Updated: {task.content}")


@app.command("delete")
@command_wrapper
async def delete_command(
    task_id: TaskIdArg,
    yes: Annotated[
        bool, typer.Option("--yes", "-y", help="Skip confirmation")
    ] = False,
) -> None:
    """Delete a task and its subtasks."""
    task_service = get_task_service()
    resolved_id = await resolve_task_id(task_service, task_id)
    task = await task_service.get_task(resolved_id)

    if not yes:
        extra = f" and {len(task.subtasks)} subtask(s)" if task.subtasks else ""
        typer.confirm(f"Delete '{task.content}'{extra}?", abort=True)

    await task_service.delete_task(resolved_id)
    format_success(f"Deleted: {task.content}")
