"""Text helpers shared by the formatters."""

from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")

# Placeholders for absent optional fields
UNASSIGNED = "Unassigned"
NO_PRIORITY = "None"
NO_DUE_DATE = "No due date"
NO_PROJECT = "No Project"

ELLIPSIS = "..."


def or_placeholder(value: str | None, placeholder: str) -> str:
    """Return the value, or the placeholder when it is None or empty."""
    return value if value else placeholder


def truncate(text: str, limit: int) -> str:
    """Hard-cut text longer than ``limit`` characters and append an ellipsis."""
    if len(text) <= limit:
        return text
    return text[:limit] + ELLIPSIS


def cap(items: Sequence[T], limit: int) -> tuple[Sequence[T], int]:
    """Split a sequence into the first ``limit`` items and the hidden count."""
    return items[:limit], max(len(items) - limit, 0)


def more_line(remaining: int, noun: str) -> str | None:
    """The "... and K more" line, or None when nothing is hidden."""
    if remaining <= 0:
        return None
    return f"... and {remaining} more {noun}"


def bullet(lines: list[str], items: Sequence[str]) -> None:
    """Append each item to ``lines`` as a markdown bullet."""
    lines.extend(f"- {item}" for item in items)
