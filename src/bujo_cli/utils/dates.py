"""Calendar helpers shared by the view resolver, bucketing and the CLI.

Every range boundary in bujo is computed here. The journal works on
calendar days: the year/month/day a caller sees on their wall clock is
reinterpreted as the same calendar day in UTC. This is not a timezone
conversion. Two values that share a local calendar day always produce the
same UTC bounds, so view queries are stable within one deployment.
"""

from __future__ import annotations

import calendar
import re
from datetime import UTC, date, datetime, time, timedelta

import dateparser

from bujo_cli.exceptions import ValidationError

END_OF_DAY = time(23, 59, 59, 999999)
ISO_DATE = re.compile(r"\d{4}-\d{2}-\d{2}")

WEEKDAYS = {
    "monday": 0,
    "tuesday": 1,
    "wednesday": 2,
    "thursday": 3,
    "friday": 4,
    "saturday": 5,
    "sunday": 6,
}


def utc_now() -> datetime:
    """Current instant, UTC-aware. Default clock for the services."""
    return datetime.now(UTC)


def local_today(now: datetime | None = None) -> date:
    """Calendar day of ``now`` on the local wall clock.

    Used wherever "today" is meant: default view anchors, the grid and
    relative CLI dates. Naive values are taken as local already.
    """
    if now is None:
        now = utc_now()
    return now.astimezone().date()


def ensure_utc(value: datetime) -> datetime:
    """Normalize a datetime for storage.

    Naive values keep their wall-clock components and are tagged UTC;
    aware values are converted to UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def start_of_day(value: date) -> datetime:
    """UTC midnight of the calendar day of ``value``."""
    return datetime(value.year, value.month, value.day, tzinfo=UTC)


def end_of_day(value: date) -> datetime:
    """Last representable UTC instant of the calendar day of ``value``."""
    return datetime.combine(
        date(value.year, value.month, value.day), END_OF_DAY, tzinfo=UTC
    )


def to_utc_day_bounds(value: date | datetime) -> tuple[datetime, datetime]:
    """Return (00:00:00.000000, 23:59:59.999999) UTC of the value's calendar day.

    The year/month/day components are read as given, whether the value is a
    date, a naive datetime or an aware datetime, so local midnight stays on
    its own day.

    Args:
        value: Any date or datetime

    Returns:
        Tuple of UTC-aware (start, end) datetimes
    """
    return start_of_day(value), end_of_day(value)


def week_bounds(value: date | datetime) -> tuple[datetime, datetime]:
    """Sunday 00:00 to Saturday 23:59:59.999999 of the week containing ``value``."""
    day = date(value.year, value.month, value.day)
    # date.weekday(): Monday=0 ... Sunday=6
    sunday = day - timedelta(days=(day.weekday() + 1) % 7)
    return start_of_day(sunday), end_of_day(sunday + timedelta(days=6))


def month_bounds(value: date | datetime) -> tuple[datetime, datetime]:
    """First to last day of the month containing ``value``."""
    last_day = calendar.monthrange(value.year, value.month)[1]
    return (
        start_of_day(date(value.year, value.month, 1)),
        end_of_day(date(value.year, value.month, last_day)),
    )


def year_bounds(value: date | datetime) -> tuple[datetime, datetime]:
    """January 1st to December 31st of the year containing ``value``."""
    return (
        start_of_day(date(value.year, 1, 1)),
        end_of_day(date(value.year, 12, 31)),
    )


def calendar_day(value: datetime) -> date:
    """Calendar day of a stored (UTC) instant."""
    return ensure_utc(value).date()


def as_calendar_date(value: date | datetime) -> date:
    """Drop the time part of a date or datetime."""
    return date(value.year, value.month, value.day)


def iter_days(start: date, end: date):
    """Yield every calendar day from ``start`` to ``end`` inclusive."""
    current = as_calendar_date(start)
    last = as_calendar_date(end)
    while current <= last:
        yield current
        current += timedelta(days=1)


def parse_date(text: str, today: date | None = None) -> date:
    """Parse a CLI date expression.

    ``today``, ``tomorrow``, ``yesterday``, ``in N days``, weekday names with
    an optional ``next`` (next occurrence, never today) and ISO ``YYYY-MM-DD``
    are handled directly.
    Anything else goes to dateparser, preferring future dates.

    Raises:
        ValidationError: If the expression is not understood
    """
    if today is None:
        today = local_today()
    text_lower = text.strip().lower()

    if text_lower == "today":
        return today
    if text_lower == "tomorrow":
        return today + timedelta(days=1)
    if text_lower == "yesterday":
        return today - timedelta(days=1)

    match = re.fullmatch(r"in (\d+) days?", text_lower)
    if match:
        return today + timedelta(days=int(match.group(1)))

    weekday = text_lower.removeprefix("next ")
    if weekday in WEEKDAYS:
        days_ahead = (WEEKDAYS[weekday] - today.weekday()) % 7
        if days_ahead == 0:
            days_ahead = 7
        return today + timedelta(days=days_ahead)

    invalid = ValidationError(
        f"Invalid date '{text}'. Use today, tomorrow, a weekday, YYYY-MM-DD "
        "or a phrase like 'may 3'"
    )
    if ISO_DATE.fullmatch(text_lower):
        try:
            return date.fromisoformat(text_lower)
        except ValueError:
            raise invalid from None

    if not text_lower:
        raise invalid
    parsed = dateparser.parse(
        text_lower,
        languages=["en"],
        settings={
            "PREFER_DATES_FROM": "future",
            "RELATIVE_BASE": datetime(today.year, today.month, today.day),
        },
    )
    if parsed is None:
        raise invalid
    return parsed.date()
