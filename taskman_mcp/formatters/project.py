"""Report formatters for project resources."""

from collections.abc import Sequence
from datetime import datetime

from taskman_mcp.formatters.common import (
    PROJECT_DESCRIPTION_LIMIT,
    PROJECT_TASKS_LIMIT,
    TASK_DESCRIPTION_LIMIT,
    capped,
    counts_section,
    description_line,
    due_of,
    project_line,
    render,
    task_summary_line,
)
from taskman_mcp.models import Project, Task
from taskman_mcp.utils.stats import (
    assignee_of,
    compute_task_stats,
    count_by,
    group_by_status,
    priority_of,
)


def format_project_detail(project: Project, tasks: Sequence[Task], now: datetime) -> str:
    """Render a project header with a summary of its tasks."""
    lines = [
        f"# Project: {project.project_name}",
        "",
        f"ID: {project.project_id}",
        f"Created By: {project.created_by}",
        f"Created: {project.creation_date}",
    ]
    if project.project_description:
        lines.extend(["", "Description:", project.project_description])

    lines.extend(["", "## Tasks Summary", f"Total Tasks: {len(tasks)}", ""])
    if not tasks:
        lines.append("No tasks in this project yet.")
        return render(lines)

    stats = compute_task_stats(tasks, now)
    lines.extend([f"Completion: {stats.completion_rate:.1f}%", ""])
    counts_section(lines, "### Status Breakdown", stats.by_status)
    counts_section(lines, "### Priority Breakdown", stats.by_priority)
    lines.append("### Tasks")
    capped(lines, [task_summary_line(t) for t in tasks], PROJECT_TASKS_LIMIT, "tasks")
    return render(lines)


def format_projects_overview(projects: Sequence[Project]) -> str:
    """Render every project with creator counts and short descriptions."""
    lines = ["# Projects Overview", "", f"Total Projects: {len(projects)}", ""]
    if not projects:
        lines.append("No projects found.")
        return render(lines)

    counts_section(lines, "## Projects by Creator", count_by(projects, lambda p: p.created_by))
    lines.append("## All Projects")
    for project in projects:
        lines.append(project_line(project))
        desc = description_line(project.project_description, PROJECT_DESCRIPTION_LIMIT)
        if desc:
            lines.append(desc)
    return render(lines)


def format_project_tasks(project: Project, tasks: Sequence[Task]) -> str:
    """Render a project's tasks grouped by status."""
    lines = [
        f"# Tasks in Project: {project.project_name}",
        "",
        f"Project ID: {project.project_id}",
        f"Total Tasks: {len(tasks)}",
        "",
    ]
    if not tasks:
        lines.append("No tasks in this project.")
        return render(lines)

    for status, group in group_by_status(tasks):
        lines.extend([f"## {status} ({len(group)})", ""])
        for task in group:
            lines.append(
                f"- {task.task_name} ({priority_of(task)}) - {assignee_of(task)} - Due: {due_of(task)}"
            )
            desc = description_line(task.task_description, TASK_DESCRIPTION_LIMIT)
            if desc:
                lines.append(desc)
        lines.append("")
    return render(lines)
