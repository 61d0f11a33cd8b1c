"""Shared context and argument helpers for tool handlers."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from pydantic import BaseModel

from taskman_mcp.client.api import TaskmanAPI
from taskman_mcp.exceptions import InvalidDateError, MissingArgumentError, ValidationError
from taskman_mcp.formatters.common import Report
from taskman_mcp.metrics import MetricsSink, NullMetrics
from taskman_mcp.models import VALID_PRIORITIES, VALID_STATUSES
from taskman_mcp.resources.base import Clock
from taskman_mcp.utils.dates import parse_due_date, utcnow
from taskman_mcp.utils.text import bullet

logger = logging.getLogger(__name__)

# Tools return the same text-plus-metadata pair as resources
ToolResult = Report


@dataclass
class ToolContext:
    """Dependencies handed to every tool handler."""

    client: TaskmanAPI
    metrics: MetricsSink = field(default_factory=NullMetrics)
    clock: Clock = utcnow

    def now(self) -> datetime:
        return self.clock()


def require(args: dict[str, Any], *fields: str) -> None:
    """Check that each field is present and non-empty.

    Raises:
        MissingArgumentError: For the first missing field, in argument order.
    """
    for name in fields:
        if not args.get(name):
            raise MissingArgumentError(name)


def get_str(args: dict[str, Any], key: str) -> str:
    """String argument, or "" when absent."""
    value = args.get(key)
    return "" if value is None else str(value)


def get_int(args: dict[str, Any], key: str, default: int = 0) -> int:
    value = args.get(key)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{key} must be an integer, got {value!r}") from e


def get_bool(args: dict[str, Any], key: str, default: bool) -> bool:
    value = args.get(key)
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    return bool(value)


def validate_status(status: str) -> None:
    """Reject a non-empty status outside the known vocabulary."""
    if status and status not in VALID_STATUSES:
        raise ValidationError(
            f"invalid status '{status}'. Valid statuses are: {', '.join(VALID_STATUSES)}"
        )


def validate_priority(priority: str) -> None:
    """Reject a non-empty priority outside the known vocabulary."""
    if priority and priority not in VALID_PRIORITIES:
        raise ValidationError(
            f"invalid priority '{priority}'. Valid priorities are: {', '.join(VALID_PRIORITIES)}"
        )


def optional_due_date(value: str, **context: Any) -> str | None:
    """Normalise a due date, logging and dropping it when unparseable."""
    if not value:
        return None
    try:
        return parse_due_date(value)
    except InvalidDateError as e:
        logger.warning("Failed to parse due date %r, omitting it: %s (%s)", value, e, context)
        return None


def heading(title: str) -> list[str]:
    """Underlined plain-text title followed by a blank line."""
    return [title, "=" * len(title), ""]


def list_section(lines: list[str], title: str, items: Sequence[str]) -> None:
    """Append a blank line, a title and bullets, when there are items."""
    if items:
        lines.extend(["", title])
        bullet(lines, items)


def dump(model: BaseModel | None) -> dict[str, Any] | None:
    return None if model is None else model.model_dump()


def dump_all(models: Sequence[BaseModel]) -> list[dict[str, Any]]:
    return [m.model_dump() for m in models]
