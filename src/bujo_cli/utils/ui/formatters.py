"""Output formatters for different formats."""

import json
from datetime import date, datetime
from typing import Any

import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from bujo_cli.models import SIGNIFIER_SYMBOLS

console = Console()

OUTPUT_FORMATS = ("pretty", "table", "json", "yaml")

PRIORITY_COLORS = {
    1: "bold red",
    2: "bold yellow",
    3: "green",
}

STATUS_STYLES = {
    "pending": "",
    "completed": "dim",
    "migrated_back": "magenta",
    "migrated_future": "cyan",
}

# Columns shown by the table format, in order
TASK_TABLE_COLUMNS = ("id", "signifier", "status", "content", "due_date", "priority", "tags")


def calculate_unique_suffixes(task_ids: list[str]) -> dict[str, int]:
    """
    Calculate minimum unique suffix length for each task ID.

    Args:
        task_ids: List of full task IDs

    Returns:
        Dict mapping task_id -> required suffix length
    """
    result = {}
    for task_id in task_ids:
        for length in range(1, len(task_id) + 1):
            suffix = task_id[-length:]
            conflicts = [
                tid for tid in task_ids if tid != task_id and tid.endswith(suffix)
            ]
            if not conflicts:
                result[task_id] = length
                break
        else:
            result[task_id] = len(task_id)
    return result


def format_output(
    data: Any,
    output_format: str = "pretty",
    compact: bool = False,
    all_task_ids: list[str] | None = None,
) -> None:
    """Format and display output based on format."""
    if output_format == "json":
        print(json.dumps(data, indent=2, default=str))
    elif output_format == "yaml":
        print(yaml.safe_dump(data, default_flow_style=False, sort_keys=False))
    elif output_format == "table":
        format_table(data)
    else:
        format_pretty(data, compact=compact, all_task_ids=all_task_ids)


def format_table(data: Any) -> None:
    """Format data as a table."""
    if not data:
        console.print("[yellow]No items found[/yellow]")
        return

    if isinstance(data, list):
        format_dict_table(data)
    elif isinstance(data, dict):
        format_single_item(data)
    else:
        console.print(data)


def _cell(value: Any) -> str:
    if isinstance(value, bool):
        return "✓" if value else "✗"
    if isinstance(value, list):
        return ", ".join(str(v) for v in value)
    if value is None:
        return "-"
    return str(value)


def format_dict_table(items: list[dict]) -> None:
    """Format a list of task dictionaries as a table."""
    columns = [col for col in TASK_TABLE_COLUMNS if col in items[0]] or list(items[0])

    table = Table(show_header=True, header_style="bold magenta")
    for col in columns:
        table.add_column(col.replace("_", " ").title())
    for item in items:
        table.add_row(*(escape(_cell(item.get(col))) for col in columns))

    console.print(table)


def format_single_item(item: dict) -> None:
    """Format a single item as key-value pairs."""
    table = Table(show_header=False, box=None)
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="white")

    for key, value in item.items():
        table.add_row(key.replace("_", " ").title(), escape(_cell(value)))

    console.print(table)


def format_error(message: str) -> None:
    """Format and display an error message."""
    console.print(f"[bold red]Error:[/bold red] {escape(message)}")


def format_success(message: str) -> None:
    """Format and display a success message."""
    console.print(f"[bold green]Success:[/bold green] {escape(message)}")


# ============================================================================
# Pretty Format Implementation
# ============================================================================


def format_due_date(value: str | datetime | None) -> str:
    """Render a stored due date as its calendar day."""
    if value is None:
        return ""
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    return value.date().isoformat()


def format_pretty(
    data: Any, compact: bool = False, all_task_ids: list[str] | None = None
) -> None:
    """Format tasks in bullet journal notation."""
    if not data:
        console.print("[yellow]No tasks[/yellow]")
        return

    if isinstance(data, list):
        format_tasks_pretty(data, compact, all_task_ids=all_task_ids)
    elif isinstance(data, dict) and "content" in data:
        format_task_detail(data)
    elif isinstance(data, dict):
        format_single_item(data)
    else:
        console.print(data)


def format_tasks_pretty(
    tasks: list[dict], compact: bool = False, all_task_ids: list[str] | None = None
) -> None:
    """Format a list of tasks, one bullet per line, in the given order."""
    suffix_ids = all_task_ids if all_task_ids is not None else [t["id"] for t in tasks]
    suffix_map = calculate_unique_suffixes(suffix_ids)
    for task in tasks:
        format_task_item(task, compact, suffix_map=suffix_map)


def format_task_item(
    task: dict,
    compact: bool = False,
    indent: str = "",
    suffix_map: dict[str, int] | None = None,
) -> None:
    """Format a single task line: symbol, content, then metadata."""
    symbol = SIGNIFIER_SYMBOLS.get(task.get("signifier", "task"), "*")
    if task.get("status") == "completed":
        symbol = SIGNIFIER_SYMBOLS["completed"]
    elif task.get("status") == "migrated_back":
        symbol = SIGNIFIER_SYMBOLS["migrated_backlog"]
    elif task.get("status") == "migrated_future":
        symbol = SIGNIFIER_SYMBOLS["migrated_future"]

    style = STATUS_STYLES.get(task.get("status", "pending"), "")
    line = Text(indent)
    line.append(f"{symbol} ", style="bold")
    line.append(task.get("content", ""), style=style)

    priority = task.get("priority")
    if priority:
        line.append(" " + "!" * (4 - priority), style=PRIORITY_COLORS[priority])

    if task.get("due_date"):
        line.append(f" • {format_due_date(task['due_date'])}", style="cyan")

    if not compact:
        for tag in task.get("tags", []):
            line.append(f" #{tag}", style="blue")
        if task.get("subtasks"):
            line.append(f" ({len(task['subtasks'])} subtasks)", style="dim")

    task_id = task.get("id", "")
    length = (suffix_map or {}).get(task_id, len(task_id))
    line.append(f"  [{task_id[-length:]}]", style="dim")
    console.print(line)


def format_task_detail(task: dict) -> None:
    """Format a single task with all its fields."""
    format_task_item(task)
    if task.get("note"):
        console.print(Text(f"  {task['note']}", style="italic"))
    console.print()
    format_single_item(
        {
            key: value
            for key, value in task.items()
            if key not in ("content", "note", "is_backlog")
        }
    )


def format_grid(
    buckets: dict[date, list[dict]],
    compact: bool = False,
    today: date | None = None,
) -> None:
    """Format day buckets as headed sections, empty days included."""
    all_task_ids = [task["id"] for tasks in buckets.values() for task in tasks]
    suffix_map = calculate_unique_suffixes(all_task_ids)
    for day, tasks in buckets.items():
        header = Text(day.strftime("%a %Y-%m-%d"), style="bold cyan")
        if day == today:
            header.append("  today", style="bold green")
        console.print(header)
        if not tasks:
            if not compact:
                console.print("  [dim]-[/dim]")
            continue
        for task in tasks:
            format_task_item(task, compact, indent="  ", suffix_map=suffix_map)
