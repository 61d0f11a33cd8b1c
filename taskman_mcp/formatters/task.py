"""Report formatters for task resources."""

from collections.abc import Sequence
from datetime import datetime

from taskman_mcp.formatters.common import (
    RECENT_TASKS_LIMIT,
    capped,
    counts_section,
    description_line,
    due_of,
    render,
    task_activity_line,
)
from taskman_mcp.models import Project, Task, TaskNote
from taskman_mcp.utils.stats import assignee_of, compute_task_stats, group_by_status, priority_of


def format_task_detail(task: Task, notes: Sequence[TaskNote], project: Project | None) -> str:
    """Render one task with its notes and owning project.

    The Project line and Notes section only appear when that data exists.
    """
    lines = [
        f"# Task: {task.task_name}",
        "",
        f"ID: {task.task_id}",
        f"Status: {task.status}",
        f"Priority: {priority_of(task)}",
        f"Assigned To: {assignee_of(task)}",
        f"Due Date: {due_of(task)}",
        f"Created By: {task.created_by}",
        f"Created: {task.creation_date}",
    ]
    if task.task_description:
        lines.extend(["", "Description:", task.task_description])
    if project is not None:
        lines.extend(["", f"Project: {project.project_name} ({project.project_id})"])
    if task.tags:
        lines.extend(["", f"Tags: {', '.join(task.tags)}"])
    if notes:
        lines.extend(["", "## Notes", ""])
        for note in notes:
            lines.append(f"- {note.created_by} ({note.creation_date}): {note.note}")
    return render(lines)


def format_tasks_overview(tasks: Sequence[Task], now: datetime) -> str:
    """Render counts and breakdowns across all tasks plus the first few."""
    stats = compute_task_stats(tasks, now)
    lines = ["# Tasks Overview", "", f"Total Tasks: {stats.total}", ""]
    counts_section(lines, "## Status Breakdown", stats.by_status)
    counts_section(lines, "## Priority Breakdown", stats.by_priority)
    counts_section(lines, "## Assignment Breakdown", stats.by_assignee)

    if tasks:
        lines.append("## Recent Tasks")
        capped(
            lines,
            [task_activity_line(t) for t in tasks],
            RECENT_TASKS_LIMIT,
            "tasks",
        )
    return render(lines)


def format_user_tasks(user_id: str, tasks: Sequence[Task]) -> str:
    """Render a user's assigned tasks grouped by status."""
    lines = [f"# Tasks for {user_id}", "", f"Total Tasks: {len(tasks)}", ""]
    if not tasks:
        lines.append("No tasks assigned to this user.")
        return render(lines)

    for status, group in group_by_status(tasks):
        lines.extend([f"## {status} ({len(group)})", ""])
        for task in group:
            lines.append(f"- {task.task_name} ({priority_of(task)}) - Due: {due_of(task)}")
            desc = description_line(task.task_description)
            if desc:
                lines.append(desc)
        lines.append("")
    return render(lines)
