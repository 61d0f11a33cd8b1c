"""Timestamp parsing, due-date normalisation and overdue checks."""

from datetime import datetime, timedelta, timezone

import dateparser

from taskman_mcp.exceptions import InvalidDateError
from taskman_mcp.models.task import Task


def utcnow() -> datetime:
    """Current time as an aware UTC datetime. Default clock for formatters."""
    return datetime.now(timezone.utc)


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO-8601 / RFC 3339 timestamp from the API.

    Values without a timezone are read as UTC.

    Args:
        value: The timestamp string, or None.

    Returns:
        An aware datetime, or None if the value is missing or malformed.
    """
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_timestamp(dt: datetime) -> str:
    """Format a datetime as RFC 3339 in UTC (``2024-01-15T12:00:00Z``)."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def parse_due_date(date_str: str) -> str:
    """Normalise a user-supplied due date to RFC 3339.

    Supports formats like:
    - ISO date: "2024-01-15"
    - RFC 3339: "2024-01-15T17:00:00Z"
    - natural language: "tomorrow", "next friday", "in 3 days"

    Args:
        date_str: The date string.

    Returns:
        The due date as an RFC 3339 UTC string.

    Raises:
        InvalidDateError: If the date string cannot be parsed.
    """
    if not date_str or not date_str.strip():
        raise InvalidDateError("Date string cannot be empty")

    exact = parse_timestamp(date_str)
    if exact is not None:
        return format_timestamp(exact)

    result = dateparser.parse(
        date_str,
        settings={
            "PREFER_DATES_FROM": "future",
            "TIMEZONE": "UTC",
            "TO_TIMEZONE": "UTC",
            "RETURN_AS_TIMEZONE_AWARE": True,
        },
    )
    if result is None:
        raise InvalidDateError(f"Could not parse date: {date_str}")
    return format_timestamp(result)


def is_overdue(task: Task, now: datetime) -> bool:
    """Check whether a task is past its due date and not complete.

    Unparseable due dates are treated as not overdue.
    """
    if task.is_complete:
        return False
    due = parse_timestamp(task.due_date)
    return due is not None and due < now


def is_due_within(task: Task, now: datetime, days: int) -> bool:
    """Check whether a task falls due after now and before ``days`` from now."""
    due = parse_timestamp(task.due_date)
    return due is not None and now < due < now + timedelta(days=days)


def hours_since(value: str | None, now: datetime) -> float | None:
    """Hours elapsed since a timestamp, or None if it cannot be parsed."""
    parsed = parse_timestamp(value)
    if parsed is None:
        return None
    return (now - parsed).total_seconds() / 3600
