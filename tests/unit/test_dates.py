"""Unit tests for timestamp parsing and due-date handling."""

from datetime import datetime, timedelta, timezone

import pytest

from taskman_mcp.exceptions import InvalidDateError
from taskman_mcp.models import Task
from taskman_mcp.utils.dates import (
    format_timestamp,
    hours_since,
    is_due_within,
    is_overdue,
    parse_due_date,
    parse_timestamp,
)


def _task(**fields: str) -> Task:
    data = {
        "task_id": "t",
        "task_name": "t",
        "status": "Not Started",
        "created_by": "alice",
        "creation_date": "2024-01-15T10:00:00Z",
    }
    data.update(fields)
    return Task(**data)


class TestParseTimestamp:
    """Tests for parse_timestamp."""

    def test_rfc3339(self) -> None:
        """RFC 3339 timestamps with Z should parse as UTC."""
        assert parse_timestamp("2024-01-15T12:00:00Z") == datetime(
            2024, 1, 15, 12, tzinfo=timezone.utc
        )

    def test_naive_is_utc(self) -> None:
        """Timestamps without a zone should be read as UTC."""
        parsed = parse_timestamp("2024-01-15T12:00:00")
        assert parsed is not None
        assert parsed.tzinfo == timezone.utc

    def test_missing_and_malformed(self) -> None:
        """None, empty and garbage values should give None."""
        assert parse_timestamp(None) is None
        assert parse_timestamp("") is None
        assert parse_timestamp("next tuesday-ish") is None


class TestParseDueDate:
    """Tests for parse_due_date."""

    def test_iso_date(self) -> None:
        """A bare date should become midnight UTC."""
        assert parse_due_date("2024-01-20") == "2024-01-20T00:00:00Z"

    def test_rfc3339_with_offset(self) -> None:
        """Offsets should be normalised to UTC."""
        assert parse_due_date("2024-01-20T17:00:00+02:00") == "2024-01-20T15:00:00Z"

    def test_natural_language(self) -> None:
        """Natural language dates should resolve to a future instant."""
        result = parse_timestamp(parse_due_date("in 3 days"))
        assert result is not None
        assert result > datetime.now(timezone.utc) + timedelta(days=2)

    def test_empty_raises(self) -> None:
        """Empty strings should raise InvalidDateError."""
        with pytest.raises(InvalidDateError):
            parse_due_date("")
        with pytest.raises(InvalidDateError):
            parse_due_date("   ")

    def test_garbage_raises(self) -> None:
        """Unparseable strings should raise InvalidDateError."""
        with pytest.raises(InvalidDateError):
            parse_due_date("not a date at all")


class TestOverdue:
    """Tests for is_overdue and is_due_within."""

    def test_past_due_is_overdue(self, now: datetime) -> None:
        """An open task due before now should be overdue."""
        assert is_overdue(_task(status="In Progress", due_date="2024-01-15T12:00:00Z"), now)

    def test_complete_never_overdue(self, now: datetime) -> None:
        """A complete task should never be overdue."""
        assert not is_overdue(_task(status="Complete", due_date="2024-01-15T12:00:00Z"), now)

    def test_due_exactly_now_not_overdue(self, now: datetime) -> None:
        """The comparison should be strict."""
        assert not is_overdue(_task(status="Blocked", due_date=format_timestamp(now)), now)

    def test_unparseable_not_overdue(self, now: datetime) -> None:
        """Malformed or missing due dates should be treated as not overdue."""
        assert not is_overdue(_task(status="Blocked", due_date="soon"), now)
        assert not is_overdue(_task(status="Blocked"), now)

    def test_due_within(self, now: datetime) -> None:
        """is_due_within should only accept future dates inside the window."""
        assert is_due_within(_task(due_date="2024-01-22T12:00:00Z"), now, 3)
        assert not is_due_within(_task(due_date="2024-01-25T12:00:00Z"), now, 3)
        assert not is_due_within(_task(due_date="2024-01-19T12:00:00Z"), now, 3)

    def test_hours_since(self, now: datetime) -> None:
        """hours_since should measure elapsed hours and tolerate garbage."""
        assert hours_since("2024-01-20T00:00:00Z", now) == 12.0
        assert hours_since("garbage", now) is None
