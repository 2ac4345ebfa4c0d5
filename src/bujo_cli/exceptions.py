"""Exceptions raised by the bullet journal core."""


class JournalError(Exception):
    """Base exception for all bujo errors."""


class ValidationError(JournalError):
    """Raised when input to an operation is malformed (empty content, missing date)."""


class NotFoundError(JournalError):
    """Raised when a task id does not exist in the owner's scope."""

    def __init__(self, task_id: str, message: str | None = None):
        super().__init__(message or f"Task not found: {task_id}")
        self.task_id = task_id


class StoreFailure(JournalError):
    """Raised when the persistence layer fails (I/O, lock timeout, conflict)."""


class InvalidViewTypeError(JournalError):
    """Raised when an unknown view type reaches the view resolver."""

    def __init__(self, view_type: str):
        super().__init__(f"Invalid view type: {view_type!r}")
        self.view_type = view_type
