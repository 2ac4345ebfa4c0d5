"""Utility functions for the SQLite adapter."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from bujo_cli.utils.dates import ensure_utc


def generate_uuid() -> str:
    """Generate a new UUID as string.

    Returns:
        UUID string (e.g., "123e4567-e89b-12d3-a456-426614174000")
    """
    return str(uuid.uuid4())


def to_db_datetime(value: datetime | None) -> str | None:
    """Serialize a datetime to the fixed-width UTC form used in the database."""
    if value is None:
        return None
    return ensure_utc(value).isoformat(timespec="microseconds")


def parse_datetime(value: str | datetime | None) -> datetime | None:
    """Parse datetime from various formats.

    Args:
        value: String, datetime object, or None

    Returns:
        UTC-aware datetime or None
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return ensure_utc(value)
    return ensure_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))


def row_to_dict(row: Any) -> dict[str, Any]:
    """Convert sqlite3.Row to dictionary.

    Args:
        row: sqlite3.Row object

    Returns:
        Dictionary with column names as keys
    """
    if row is None:
        return {}
    return dict(row)
