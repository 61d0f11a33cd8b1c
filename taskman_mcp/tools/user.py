"""The get_my_work tool: a user's prioritized work queue."""

import logging
from collections.abc import Awaitable, Sequence
from typing import Any

from taskman_mcp.client import fetch
from taskman_mcp.formatters.common import due_of, render
from taskman_mcp.models import Task, TaskPriority, TaskStatus
from taskman_mcp.resources.base import fetch_primary, fetch_secondary
from taskman_mcp.tools.base import (
    ToolContext,
    ToolResult,
    dump_all,
    get_bool,
    get_int,
    get_str,
    heading,
    list_section,
    require,
)
from taskman_mcp.utils.dates import is_due_within, is_overdue
from taskman_mcp.utils.stats import count_by, priority_of
from taskman_mcp.utils.text import NO_PROJECT, cap, more_line, or_placeholder

logger = logging.getLogger(__name__)

DUE_SOON_DAYS = 3
DEFAULT_LIMIT = 20
QUEUE_SHOWN = 8
ALERT_SHOWN = 5

_PRIORITY_RANK = {
    TaskPriority.HIGH.value: 0,
    TaskPriority.MEDIUM.value: 1,
    TaskPriority.LOW.value: 2,
}


def prioritize(tasks: Sequence[Task]) -> list[Task]:
    """Order High, Medium, Low, then anything else. Stable within a rank."""
    return sorted(tasks, key=lambda t: _PRIORITY_RANK.get(t.priority or "", len(_PRIORITY_RANK)))


def _alert_section(lines: list[str], title: str, tasks: list[Task], noun: str) -> None:
    if not tasks:
        return
    shown, remaining = cap(tasks, ALERT_SHOWN)
    lines.extend(["", f"{title} ({len(tasks)}):"])
    lines.extend(f"- {t.task_name} ({priority_of(t)}) - Due: {due_of(t)}" for t in shown)
    more = more_line(remaining, noun)
    if more:
        lines.append(more)


async def handle_get_my_work(ctx: ToolContext, args: dict[str, Any]) -> ToolResult:
    """Build a user's work queue from their active tasks.

    In Progress tasks must load. Review and Blocked tasks are optional
    extras, each skipped with a warning if its fetch fails.

    Args:
        ctx: Tool context.
        args: ``user_id`` is required. ``project_id``, ``include_review``
            (default true), ``include_blocked`` (default true), ``sort_by``
            (``priority`` or empty sorts by priority) and ``limit``
            (default 20) are optional.
    """
    logger.info("Executing get_my_work tool: %s", args)
    require(args, "user_id")
    user_id = get_str(args, "user_id")
    project_id = get_str(args, "project_id")
    include_review = get_bool(args, "include_review", True)
    include_blocked = get_bool(args, "include_blocked", True)
    sort_by = get_str(args, "sort_by")
    limit = get_int(args, "limit", DEFAULT_LIMIT)

    def by_status(status: TaskStatus) -> Awaitable[list[Task]]:
        return fetch.list_tasks(
            ctx.client, assigned_to=user_id, status=status.value, project_id=project_id
        )

    in_progress = await fetch_primary("get in-progress tasks", by_status(TaskStatus.IN_PROGRESS))
    review: list[Task] = []
    if include_review:
        review = await fetch_secondary("get review tasks", by_status(TaskStatus.REVIEW), [])
    blocked: list[Task] = []
    if include_blocked:
        blocked = await fetch_secondary("get blocked tasks", by_status(TaskStatus.BLOCKED), [])
    all_tasks = in_progress + review + blocked

    now = ctx.now()
    total = len(all_tasks)
    priority_counts = count_by(all_tasks, priority_of)
    project_counts = count_by(all_tasks, lambda t: or_placeholder(t.project_id, NO_PROJECT))
    overdue = [t for t in all_tasks if is_overdue(t, now)]
    due_soon = [
        t for t in all_tasks
        if not is_overdue(t, now) and is_due_within(t, now, DUE_SOON_DAYS)
    ]

    queue = prioritize(all_tasks) if sort_by in ("", "priority") else list(all_tasks)
    if limit > 0:
        queue = queue[:limit]

    high = priority_counts.get(TaskPriority.HIGH.value, 0)

    insights: list[str] = []
    if total == 0:
        insights.append("No active tasks assigned - you're all caught up!")
    elif total == 1:
        insights.append("Light workload with one active task")
    elif total > 10:
        insights.append("Heavy workload - consider prioritizing or delegating")
    elif total > 5:
        insights.append("Moderate workload - good task balance")
    if overdue:
        insights.append(f"{len(overdue)} tasks are overdue and need immediate attention")
    if due_soon:
        insights.append(f"{len(due_soon)} tasks due in the next 3 days")
    if total > 2 and high > total // 2:
        insights.append("Most tasks are high priority - focus on completion")
    if blocked:
        insights.append(f"{len(blocked)} tasks are blocked - work on unblocking")
    if len(project_counts) > 5:
        insights.append("Working across many projects - consider context switching overhead")

    recommendations: list[str] = []
    if overdue:
        recommendations.append("Address overdue tasks first to get back on track")
    elif high > 0:
        recommendations.append(f"Focus on {high} high-priority tasks")
    if due_soon:
        recommendations.append("Plan work for upcoming due dates")
    if blocked:
        recommendations.append("Follow up on blocked tasks and work to resolve blockers")
    if total > 8:
        recommendations.append("Consider breaking down large tasks or delegating")
    if len(in_progress) > 3:
        recommendations.append(
            "Too many concurrent tasks - consider completing some before starting new ones"
        )
    if total > 0 and not due_soon and not overdue:
        recommendations.append("Good task timing - maintain current pace")

    lines = heading("My Work Queue")
    lines.extend([f"User: {user_id}", f"Active Tasks: {total}"])
    if project_id:
        lines.append(f"Project Filter: {project_id}")
    lines.extend(["", "Task Breakdown:", f"- In Progress: {len(in_progress)}"])
    if include_review:
        lines.append(f"- Review: {len(review)}")
    if include_blocked:
        lines.append(f"- Blocked: {len(blocked)}")
    list_section(lines, "Priority Breakdown:", [f"{k}: {v}" for k, v in priority_counts.items()])
    _alert_section(lines, "Overdue Tasks", overdue, "overdue tasks")
    _alert_section(lines, "Due Soon", due_soon, "tasks due soon")

    if queue:
        shown, remaining = cap(queue, QUEUE_SHOWN)
        lines.extend(["", f"Prioritized Task List (showing {len(queue)}):"])
        for i, task in enumerate(shown, start=1):
            due_info = ""
            if task.due_date:
                due_info = " - OVERDUE" if is_overdue(task, now) else f" - Due: {task.due_date}"
            lines.append(f"{i}. {task.task_name} ({task.status}, {priority_of(task)}){due_info}")
        more = more_line(remaining, "tasks")
        if more:
            lines.append(more)

    list_section(lines, f"Blocked Tasks ({len(blocked)}):", [t.task_name for t in blocked])
    list_section(lines, "Workload Insights:", insights)
    list_section(lines, "Recommendations:", recommendations)

    logger.info(
        "User work queue generated: user_id=%s total_tasks=%d overdue_count=%d",
        user_id, total, len(overdue),
    )
    return ToolResult(
        text=render(lines),
        metadata={
            "user_id": user_id,
            "all_tasks": dump_all(all_tasks),
            "prioritized_tasks": dump_all(queue),
            "in_progress_tasks": dump_all(in_progress),
            "review_tasks": dump_all(review),
            "blocked_tasks": dump_all(blocked),
            "overdue_tasks": dump_all(overdue),
            "due_soon_tasks": dump_all(due_soon),
            "total_tasks": total,
            "priority_breakdown": priority_counts,
            "project_breakdown": project_counts,
            "overdue_count": len(overdue),
            "due_soon_count": len(due_soon),
            "insights": insights,
            "recommendations": recommendations,
        },
    )
