"""
Exit codes for bujo.

Semantic exit codes so scripts can tell what went wrong without parsing
output.
"""

from bujo_cli.exceptions import (
    InvalidViewTypeError,
    JournalError,
    NotFoundError,
    StoreFailure,
    ValidationError,
)

# Success
SUCCESS = 0

# General error (unspecified)
ERROR_GENERAL = 1

# Invalid arguments or validation error
ERROR_INVALID_ARGS = 2

# Task not found
ERROR_NOT_FOUND = 5

# Journal database could not be read or written
ERROR_STORE = 7


def get_exit_code_name(code: int) -> str:
    """Get the name of an exit code for display purposes."""
    code_names = {
        SUCCESS: "SUCCESS",
        ERROR_GENERAL: "ERROR_GENERAL",
        ERROR_INVALID_ARGS: "ERROR_INVALID_ARGS",
        ERROR_NOT_FOUND: "ERROR_NOT_FOUND",
        ERROR_STORE: "ERROR_STORE",
    }
    return code_names.get(code, f"UNKNOWN({code})")


def exit_code_for(error: JournalError) -> int:
    """Map a journal error to its exit code."""
    if isinstance(error, ValidationError | InvalidViewTypeError):
        return ERROR_INVALID_ARGS
    if isinstance(error, NotFoundError):
        return ERROR_NOT_FOUND
    if isinstance(error, StoreFailure):
        return ERROR_STORE
    return ERROR_GENERAL
