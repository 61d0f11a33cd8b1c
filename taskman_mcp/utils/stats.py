"""Task statistics shared by every overview and dashboard report."""

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import TypeVar

from taskman_mcp.models.task import STATUS_ORDER, Task, TaskStatus
from taskman_mcp.utils.dates import is_overdue
from taskman_mcp.utils.text import NO_PRIORITY, UNASSIGNED, or_placeholder

T = TypeVar("T")


def count_by(items: Iterable[T], key: Callable[[T], str]) -> dict[str, int]:
    """Count items per key, keeping keys in first-seen order."""
    counts: dict[str, int] = {}
    for item in items:
        k = key(item)
        counts[k] = counts.get(k, 0) + 1
    return counts


def group_by(items: Iterable[T], key: Callable[[T], str]) -> dict[str, list[T]]:
    """Bucket items per key, keeping keys in first-seen order."""
    groups: dict[str, list[T]] = {}
    for item in items:
        groups.setdefault(key(item), []).append(item)
    return groups


def group_by_status(tasks: Iterable[Task]) -> list[tuple[str, list[Task]]]:
    """Group tasks by status for display.

    Known statuses come first in STATUS_ORDER. Any other status follows in
    the order it was first seen, so no task is dropped from the report.
    """
    groups = group_by(tasks, lambda t: t.status)
    ordered = [(s, groups[s]) for s in STATUS_ORDER if s in groups]
    ordered.extend((s, ts) for s, ts in groups.items() if s not in STATUS_ORDER)
    return ordered


def percentage(part: int, total: int) -> float:
    """``part`` as a percentage of ``total``; 0.0 when total is zero."""
    if total <= 0:
        return 0.0
    return part / total * 100


def completion_rate(tasks: Sequence[Task]) -> float:
    """Share of tasks with status Complete, rounded to one decimal place."""
    completed = sum(1 for t in tasks if t.is_complete)
    return round(percentage(completed, len(tasks)), 1)


def top_n(counts: dict[str, int], n: int) -> list[tuple[str, int]]:
    """Highest counts first; ties keep first-seen order."""
    return sorted(counts.items(), key=lambda kv: kv[1], reverse=True)[:n]


def priority_of(task: Task, placeholder: str = NO_PRIORITY) -> str:
    return or_placeholder(task.priority, placeholder)


def assignee_of(task: Task) -> str:
    return or_placeholder(task.assigned_to, UNASSIGNED)


@dataclass
class TaskStats:
    """Derived numbers for a collection of tasks."""

    total: int
    completed: int
    completion_rate: float
    by_status: dict[str, int] = field(default_factory=dict)
    by_priority: dict[str, int] = field(default_factory=dict)
    by_assignee: dict[str, int] = field(default_factory=dict)
    overdue: list[Task] = field(default_factory=list)

    @property
    def overdue_count(self) -> int:
        return len(self.overdue)

    def status_count(self, status: str) -> int:
        return self.by_status.get(status, 0)

    def status_percentage(self, status: str) -> float:
        return percentage(self.status_count(status), self.total)

    def to_dict(self) -> dict[str, object]:
        """Machine-readable summary for tool metadata."""
        return {
            "total_tasks": self.total,
            "completed_tasks": self.completed,
            "completion_rate": self.completion_rate,
            "status_breakdown": dict(self.by_status),
            "priority_breakdown": dict(self.by_priority),
            "assignee_breakdown": dict(self.by_assignee),
            "overdue_count": self.overdue_count,
        }


def compute_task_stats(
    tasks: Sequence[Task],
    now: datetime,
    priority_placeholder: str = NO_PRIORITY,
) -> TaskStats:
    """Compute counts, breakdowns, completion rate and overdue tasks.

    Args:
        tasks: The tasks to summarise.
        now: The instant overdue status is evaluated against.
        priority_placeholder: Label used for tasks without a priority.

    Returns:
        The computed statistics.
    """
    by_status = count_by(tasks, lambda t: t.status)
    completed = by_status.get(TaskStatus.COMPLETE.value, 0)
    return TaskStats(
        total=len(tasks),
        completed=completed,
        completion_rate=round(percentage(completed, len(tasks)), 1),
        by_status=by_status,
        by_priority=count_by(tasks, lambda t: priority_of(t, priority_placeholder)),
        by_assignee=count_by(tasks, assignee_of),
        overdue=[t for t in tasks if is_overdue(t, now)],
    )
