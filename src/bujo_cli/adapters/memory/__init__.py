"""In-process adapter - Task Store kept in memory."""

from bujo_cli.adapters.memory.task_repository import InMemoryTaskRepository

__all__ = ["InMemoryTaskRepository"]
