"""Task helper utilities."""

from bujo_cli.exceptions import NotFoundError, ValidationError
from bujo_cli.services.task_service import TaskService


def find_shortest_unique_suffix(task_ids: list[str], target_id: str) -> str:
    """
    Find the shortest suffix of target_id that uniquely identifies it.

    Args:
        task_ids: List of all task IDs
        target_id: The task ID to find a unique suffix for

    Returns:
        The shortest unique suffix
    """
    for length in range(1, len(target_id) + 1):
        suffix = target_id[-length:]
        matches = [tid for tid in task_ids if tid.endswith(suffix)]
        if len(matches) == 1:
            return suffix
    return target_id


async def resolve_task_id(task_service: TaskService, task_id_or_suffix: str) -> str:
    """
    Resolve a task ID or suffix to a full task ID.

    Args:
        task_service: The task service instance
        task_id_or_suffix: Full task ID or suffix to resolve

    Returns:
        The full task ID

    Raises:
        NotFoundError: If no task matches
        ValidationError: If the suffix matches more than one task
    """
    task_id_or_suffix = task_id_or_suffix.strip()
    if not task_id_or_suffix:
        raise ValidationError("Task ID must not be empty")

    tasks = await task_service.list_tasks()
    task_ids = [task.id for task in tasks]
    if task_id_or_suffix in task_ids:
        return task_id_or_suffix

    matching_tasks = [task for task in tasks if task.id.endswith(task_id_or_suffix)]
    if not matching_tasks:
        raise NotFoundError(
            task_id_or_suffix, f"No task found with ID or suffix '{task_id_or_suffix}'"
        )

    if len(matching_tasks) > 1:
        suggestions = [
            f"{find_shortest_unique_suffix(task_ids, task.id)} ({task.content[:40]})"
            for task in matching_tasks[:5]
        ]
        raise ValidationError(
            f"Multiple tasks match suffix '{task_id_or_suffix}': "
            + ", ".join(suggestions)
        )

    return matching_tasks[0].id
