"""Project tools: status report, creation with initial tasks and listing."""

import logging
from typing import Any

from taskman_mcp.client import fetch
from taskman_mcp.exceptions import MissingArgumentError, TaskmanError, ValidationError
from taskman_mcp.formatters.common import description_line, due_of, project_line, render
from taskman_mcp.models import ProjectCreate, Task, TaskCreate, TaskPriority, TaskStatus
from taskman_mcp.resources.base import fetch_primary
from taskman_mcp.tools.base import (
    ToolContext,
    ToolResult,
    dump,
    dump_all,
    get_str,
    heading,
    list_section,
    optional_due_date,
    require,
)
from taskman_mcp.utils.dates import is_overdue
from taskman_mcp.utils.stats import assignee_of, count_by, percentage, priority_of
from taskman_mcp.utils.text import cap, more_line

logger = logging.getLogger(__name__)

ACTIVE_SHOWN = 5
LARGE_PROJECT = 5


def _status_insights(completion: float, total: int, active: int, not_started: int) -> list[str]:
    insights: list[str] = []
    if completion >= 90:
        insights.append("Project is nearly complete!")
    elif completion >= 75:
        insights.append("Project is in final stretch")
    elif completion >= 50:
        insights.append("Project is halfway complete")
    elif completion < 25 and total > 0:
        insights.append("Project is in early stages")
    if total > 0 and active > total // 2:
        insights.append("High activity - many tasks in progress")
    if not_started > active and total > 3:
        insights.append("Consider starting more tasks to increase momentum")
    return insights


async def handle_get_project_status(ctx: ToolContext, args: dict[str, Any]) -> ToolResult:
    """Progress report for one project with insights and recommended actions.

    Both the project and its task list must load.
    """
    logger.info("Executing get_project_status tool: %s", args)
    require(args, "project_id")
    project_id = get_str(args, "project_id")

    project = await fetch_primary("get project", fetch.get_project(ctx.client, project_id))
    tasks = await fetch_primary(
        "get project tasks", fetch.list_project_tasks(ctx.client, project_id)
    )

    now = ctx.now()
    total = len(tasks)
    status_counts = count_by(tasks, lambda t: t.status)
    priority_counts = count_by(tasks, priority_of)
    overdue = [t for t in tasks if is_overdue(t, now)]
    completed = [t for t in tasks if t.is_complete]
    active = [
        t for t in tasks
        if t.status in (TaskStatus.IN_PROGRESS.value, TaskStatus.REVIEW.value)
    ]
    completion = percentage(len(completed), total)
    not_started = status_counts.get(TaskStatus.NOT_STARTED.value, 0)

    insights: list[str] = []
    if overdue:
        insights.append(f"{len(overdue)} tasks are overdue and need attention")
    insights.extend(_status_insights(completion, total, len(active), not_started))

    next_actions: list[str] = []
    if overdue:
        next_actions.append("Address overdue tasks immediately")
    if not_started:
        next_actions.append(f"Start work on {not_started} pending tasks")
    if review := status_counts.get(TaskStatus.REVIEW.value, 0):
        next_actions.append(f"Review {review} tasks waiting for approval")
    if blocked := status_counts.get(TaskStatus.BLOCKED.value, 0):
        next_actions.append(f"Resolve {blocked} blocked tasks")
    if completion >= 90:
        next_actions.append("Plan project closure activities")

    lines = heading("Project Status Report")
    lines.extend([f"Project: {project.project_name}", f"ID: {project.project_id}"])
    if project.project_description:
        lines.append(f"Description: {project.project_description}")
    lines.extend([
        "",
        f"Created by: {project.created_by}",
        f"Created: {project.creation_date}",
        "",
        "Project Metrics:",
        f"Total Tasks: {total}",
        f"Completion: {completion:.1f}%",
    ])
    list_section(lines, "Status Breakdown:", [f"{k}: {v}" for k, v in status_counts.items()])
    list_section(lines, "Priority Breakdown:", [f"{k}: {v}" for k, v in priority_counts.items()])
    list_section(
        lines,
        f"Overdue Tasks ({len(overdue)}):",
        [f"{t.task_name} (Due: {due_of(t)})" for t in overdue],
    )
    if active:
        shown, remaining = cap(active, ACTIVE_SHOWN)
        list_section(
            lines,
            f"Active Tasks ({len(active)}):",
            [f"{t.task_name} ({t.status}) - {assignee_of(t)}" for t in shown],
        )
        more = more_line(remaining, "active tasks")
        if more:
            lines.append(more)
    list_section(lines, "Insights:", insights)
    list_section(lines, "Recommended Actions:", next_actions)

    logger.info(
        "Project status generated: project_id=%s total_tasks=%d completion=%.1f",
        project.project_id, total, completion,
    )
    return ToolResult(
        text=render(lines),
        metadata={
            "project": dump(project),
            "tasks": dump_all(tasks),
            "total_tasks": total,
            "completion_percentage": completion,
            "status_breakdown": status_counts,
            "priority_breakdown": priority_counts,
            "overdue_count": len(overdue),
            "overdue_tasks": dump_all(overdue),
            "active_tasks": dump_all(active),
            "completed_tasks": dump_all(completed),
            "insights": insights,
            "next_actions": next_actions,
        },
    )


def _initial_task_entries(args: dict[str, Any]) -> list[dict[str, Any]]:
    entries = args.get("initial_tasks")
    if not entries:
        raise ValidationError("initial_tasks are required (at least one task)")
    if not isinstance(entries, list):
        raise ValidationError("initial_tasks must be a list of task objects")
    for entry in entries:
        if not isinstance(entry, dict) or not entry.get("task_name"):
            raise MissingArgumentError("task_name")
    return entries


async def handle_create_project_with_initial_tasks(
    ctx: ToolContext, args: dict[str, Any]
) -> ToolResult:
    """Create a project and populate it with tasks in one call.

    Project creation must succeed. Each task is created independently and
    failures are collected instead of aborting the remaining tasks.

    Args:
        ctx: Tool context.
        args: ``project_name``, ``created_by`` and a non-empty
            ``initial_tasks`` list are required. Each task entry needs a
            ``task_name`` and may carry ``task_description``, ``status``,
            ``priority``, ``assigned_to`` and ``due_date``.
    """
    logger.info("Executing create_project_with_initial_tasks tool: %s", args)
    require(args, "project_name", "created_by")
    entries = _initial_task_entries(args)
    created_by = get_str(args, "created_by")

    project = await fetch_primary(
        "create project",
        fetch.create_project(
            ctx.client,
            ProjectCreate(
                project_name=get_str(args, "project_name"),
                project_description=get_str(args, "project_description") or None,
                created_by=created_by,
            ),
        ),
    )

    created: list[Task] = []
    failed: list[dict[str, Any]] = []
    for entry in entries:
        task_name = get_str(entry, "task_name")
        request = TaskCreate(
            task_name=task_name,
            task_description=get_str(entry, "task_description") or None,
            status=get_str(entry, "status") or TaskStatus.NOT_STARTED.value,
            priority=get_str(entry, "priority") or None,
            assigned_to=get_str(entry, "assigned_to") or None,
            project_id=project.project_id,
            due_date=optional_due_date(get_str(entry, "due_date"), task_name=task_name),
            created_by=created_by,
        )
        try:
            created.append(await fetch.create_task(ctx.client, request))
        except TaskmanError as e:
            logger.error("Failed to create task %r: %s", task_name, e)
            failed.append(entry)

    assigned = sum(1 for t in created if t.assigned_to)
    high = sum(1 for t in created if t.priority == TaskPriority.HIGH.value)
    success_rate = percentage(len(created), len(entries))

    insights: list[str] = []
    if failed:
        insights.append(f"{len(failed)} tasks failed to create")
    else:
        insights.append("All initial tasks created successfully")
    if len(created) > LARGE_PROJECT:
        insights.append("Large project with many initial tasks")
    if assigned == 0:
        insights.append("No tasks assigned yet - consider assigning team members")
    elif assigned == len(created):
        insights.append("All tasks have been assigned")
    if high > len(created) // 2:
        insights.append("Many high-priority tasks - ensure adequate resources")

    next_steps = ["Project created successfully"]
    if assigned < len(created):
        next_steps.append(f"Assign {len(created) - assigned} remaining tasks to team members")
    if failed:
        next_steps.append("Retry creating failed tasks manually")
    next_steps.extend([
        "Review and adjust task due dates as needed",
        "Begin work on the first tasks",
        "Set up regular project status reviews",
    ])

    lines = heading("Project Created with Initial Tasks")
    lines.extend([f"Project: {project.project_name}", f"ID: {project.project_id}"])
    if project.project_description:
        lines.append(f"Description: {project.project_description}")
    lines.extend([
        f"Created by: {project.created_by}",
        "",
        "Task Creation Summary:",
        f"Planned: {len(entries)} tasks",
        f"Created: {len(created)} tasks",
    ])
    if failed:
        lines.extend([f"Failed: {len(failed)} tasks", f"Success Rate: {success_rate:.1f}%"])
    list_section(
        lines,
        "Created Tasks:",
        [f"{t.task_name} ({t.status}, {priority_of(t)}) - {assignee_of(t)}" for t in created],
    )
    list_section(lines, "Failed Tasks:", [get_str(s, "task_name") for s in failed])
    list_section(lines, "Insights:", insights)
    list_section(lines, "Next Steps:", next_steps)

    logger.info(
        "Project created with initial tasks: project_id=%s tasks_created=%d tasks_failed=%d",
        project.project_id, len(created), len(failed),
    )
    return ToolResult(
        text=render(lines),
        metadata={
            "project": dump(project),
            "created_tasks": dump_all(created),
            "failed_tasks": failed,
            "total_planned": len(entries),
            "total_created": len(created),
            "total_failed": len(failed),
            "success_rate": success_rate,
            "insights": insights,
            "next_steps": next_steps,
        },
    )


async def handle_get_all_projects(ctx: ToolContext, args: dict[str, Any]) -> ToolResult:
    """List every project with its creator and description."""
    logger.info("Executing get_all_projects tool")
    projects = await fetch_primary("get projects", fetch.list_projects(ctx.client))

    if not projects:
        lines = ["No projects found.", "", "Create your first project to get started!"]
    else:
        lines = heading(f"All Projects ({len(projects)})")
        for project in projects:
            lines.append(project_line(project))
            desc = description_line(project.project_description)
            if desc:
                lines.append(desc)

    logger.info("Projects list retrieved: total_projects=%d", len(projects))
    return ToolResult(
        text=render(lines),
        metadata={"projects": dump_all(projects), "total_count": len(projects)},
    )
