"""Dashboard report formatters.

Each dashboard takes the evaluation instant explicitly so overdue and
deadline sections are reproducible.
"""

from collections.abc import Sequence
from datetime import datetime

from taskman_mcp.formatters.common import (
    DASHBOARD_RECENT_LIMIT,
    PROJECT_ACTIVITY_LIMIT,
    TIMESTAMP_FORMAT,
    TOP_ASSIGNEES_LIMIT,
    capped,
    counts_section,
    due_of,
    render,
    task_activity_line,
)
from taskman_mcp.models import ACTIVE_STATUSES, Project, Task, TaskPriority
from taskman_mcp.utils.dates import is_due_within, is_overdue
from taskman_mcp.utils.stats import assignee_of, compute_task_stats, priority_of, top_n

UPCOMING_DAYS = 7


def _status_line(task: Task) -> str:
    return f"- {task.task_name} ({task.status}, {priority_of(task)}) - Due: {due_of(task)}"


def format_system_dashboard(
    tasks: Sequence[Task], projects: Sequence[Project], now: datetime
) -> str:
    """Render the system-wide dashboard across all tasks and projects."""
    lines = [
        "# System Dashboard",
        "",
        f"Generated: {now.strftime(TIMESTAMP_FORMAT)}",
        "",
        "## Overview",
        f"- Total Projects: {len(projects)}",
        f"- Total Tasks: {len(tasks)}",
    ]

    if tasks:
        stats = compute_task_stats(tasks, now)
        lines.extend([
            f"- Completion Rate: {stats.completion_rate:.1f}%",
            f"- Overdue Tasks: {stats.overdue_count}",
            "",
        ])
        counts_section(lines, "## Task Status Distribution", stats.by_status, total=stats.total)
        counts_section(lines, "## Priority Distribution", stats.by_priority, total=stats.total)
        lines.append("## Top Assignees")
        for name, count in top_n(stats.by_assignee, TOP_ASSIGNEES_LIMIT):
            lines.append(f"- {name}: {count} tasks")
        lines.extend(["", "## Recent Tasks"])
        capped(lines, [task_activity_line(t) for t in tasks], DASHBOARD_RECENT_LIMIT, "tasks")
    lines.append("")

    if projects:
        lines.append("## Recent Projects")
        capped(
            lines,
            [
                f"- {p.project_name} - Created by {p.created_by} on {p.creation_date}"
                for p in projects
            ],
            DASHBOARD_RECENT_LIMIT,
            "projects",
        )
    return render(lines)


def format_user_dashboard(
    user_id: str,
    assigned: Sequence[Task],
    created: Sequence[Task],
    now: datetime,
) -> str:
    """Render one user's dashboard from their assigned and created tasks."""
    lines = [
        f"# Dashboard for {user_id}",
        "",
        f"Generated: {now.strftime(TIMESTAMP_FORMAT)}",
        "",
        "## My Statistics",
        f"- Assigned Tasks: {len(assigned)}",
        f"- Created Tasks: {len(created)}",
    ]
    if not assigned:
        lines.extend(["", "No tasks currently assigned."])
        return render(lines)

    stats = compute_task_stats(assigned, now)
    lines.extend([
        f"- My Completion Rate: {stats.completion_rate:.1f}%",
        f"- My Overdue Tasks: {stats.overdue_count}",
        "",
    ])
    counts_section(lines, "## My Task Status", stats.by_status)
    counts_section(lines, "## My Task Priorities", stats.by_priority)

    lines.append("## Current Workload")
    active = [t for t in assigned if t.status in ACTIVE_STATUSES]
    if active:
        lines.extend([f"Active Tasks: {len(active)}", ""])
        lines.extend(_status_line(t) for t in active)
    else:
        lines.append("No active tasks assigned.")

    upcoming = [
        t for t in assigned
        if not t.is_complete and is_due_within(t, now, UPCOMING_DAYS)
    ]
    if upcoming:
        lines.extend(["", f"## Upcoming Deadlines (Next {UPCOMING_DAYS} Days)"])
        lines.extend(_status_line(t) for t in upcoming)
    return render(lines)


def format_project_dashboard(project: Project, tasks: Sequence[Task], now: datetime) -> str:
    """Render a project's dashboard: statistics, workload and critical tasks."""
    lines = [
        f"# Project Dashboard: {project.project_name}",
        "",
        f"Project ID: {project.project_id}",
        f"Created by: {project.created_by} on {project.creation_date}",
        f"Generated: {now.strftime(TIMESTAMP_FORMAT)}",
        "",
    ]
    if project.project_description:
        lines.extend([f"Description: {project.project_description}", ""])

    lines.extend(["## Project Statistics", f"- Total Tasks: {len(tasks)}"])
    if not tasks:
        lines.extend(["", "No tasks in this project yet."])
        return render(lines)

    stats = compute_task_stats(tasks, now)
    lines.extend([
        f"- Completion Rate: {stats.completion_rate:.1f}%",
        f"- Overdue Tasks: {stats.overdue_count}",
        "",
    ])
    counts_section(lines, "## Task Status Distribution", stats.by_status, total=stats.total)
    counts_section(lines, "## Team Workload", stats.by_assignee, suffix=" tasks")
    counts_section(lines, "## Priority Distribution", stats.by_priority, suffix=" tasks")

    critical = [
        t for t in tasks
        if not t.is_complete
        and (t.priority == TaskPriority.HIGH.value or is_overdue(t, now))
    ]
    if critical:
        lines.append("## Critical Tasks (High Priority or Overdue)")
        for task in critical:
            lines.append(
                f"- {task.task_name} ({task.status}, {priority_of(task)}) - "
                f"{assignee_of(task)} - Due: {due_of(task)}"
            )
        lines.append("")

    lines.append("## Recent Activity")
    capped(lines, [task_activity_line(t) for t in tasks], PROJECT_ACTIVITY_LIMIT, "tasks")
    return render(lines)
