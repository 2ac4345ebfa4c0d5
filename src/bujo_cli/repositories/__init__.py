"""Repository interfaces for bujo.

This package contains the abstract Task Store contract. This is the "Port"
in the Hexagonal Architecture.

Implementations (Adapters) are in:
- bujo_cli.adapters.sqlite (local storage)
- bujo_cli.adapters.memory (in-process storage)
"""

from .repository import TaskRepository

__all__ = ["TaskRepository"]
