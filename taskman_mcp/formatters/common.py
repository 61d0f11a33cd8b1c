"""Line builders shared by the report formatters."""

from dataclasses import dataclass, field
from typing import Any

from taskman_mcp.models import Project, Task
from taskman_mcp.utils.stats import assignee_of, priority_of
from taskman_mcp.utils.text import NO_DUE_DATE, cap, more_line, or_placeholder, truncate

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

# Display caps
RECENT_TASKS_LIMIT = 10
PROJECT_TASKS_LIMIT = 15
DASHBOARD_RECENT_LIMIT = 5
PROJECT_ACTIVITY_LIMIT = 8
TOP_ASSIGNEES_LIMIT = 5

# Free-text caps
PROJECT_DESCRIPTION_LIMIT = 100
TASK_DESCRIPTION_LIMIT = 150


@dataclass
class Report:
    """Rendered text plus machine-readable fields derived alongside it."""

    text: str
    metadata: dict[str, Any] = field(default_factory=dict)


def due_of(task: Task) -> str:
    return or_placeholder(task.due_date, NO_DUE_DATE)


def counts_section(
    lines: list[str],
    title: str,
    counts: dict[str, int],
    total: int | None = None,
    suffix: str = "",
) -> None:
    """Append a heading and one ``- key: count`` line per bucket.

    With ``total`` each line also carries its share, e.g. ``- High: 2 (40.0%)``.
    """
    lines.append(title)
    for key, count in counts.items():
        line = f"- {key}: {count}{suffix}"
        if total:
            line += f" ({count / total * 100:.1f}%)"
        lines.append(line)
    lines.append("")


def capped(lines: list[str], rendered: list[str], limit: int, noun: str) -> None:
    """Append up to ``limit`` pre-rendered lines and the "... and K more" line."""
    shown, remaining = cap(rendered, limit)
    lines.extend(shown)
    more = more_line(remaining, noun)
    if more:
        lines.append(more)


def task_activity_line(task: Task) -> str:
    """``- name (status) - assignee - created``"""
    return f"- {task.task_name} ({task.status}) - {assignee_of(task)} - {task.creation_date}"


def description_line(text: str | None, limit: int | None = None) -> str | None:
    """Indented italic description, cut to ``limit`` characters if given."""
    if not text:
        return None
    if limit is not None:
        text = truncate(text, limit)
    return f"  *{text}*"


def project_line(project: Project) -> str:
    return (
        f"- {project.project_name} ({project.project_id}) - "
        f"Created by {project.created_by} on {project.creation_date}"
    )


def task_summary_line(task: Task) -> str:
    """``- name (status, priority) - assignee``"""
    return f"- {task.task_name} ({task.status}, {priority_of(task)}) - {assignee_of(task)}"


def render(lines: list[str]) -> str:
    """Join lines, dropping trailing blank lines."""
    while lines and lines[-1] == "":
        lines.pop()
    return "\n".join(lines) + "\n"
