"""Task tools: overview, creation, details, progress updates, search and notes."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

from taskman_mcp.client import fetch
from taskman_mcp.formatters.common import due_of, render, task_summary_line
from taskman_mcp.models import NoteCreate, Task, TaskCreate, TaskPriority, TaskStatus, TaskUpdate
from taskman_mcp.resources.base import fetch_primary, fetch_secondary
from taskman_mcp.tools.base import (
    ToolContext,
    ToolResult,
    dump,
    dump_all,
    get_int,
    get_str,
    heading,
    list_section,
    optional_due_date,
    require,
    validate_priority,
    validate_status,
)
from taskman_mcp.utils.dates import format_timestamp, hours_since, is_overdue, parse_timestamp
from taskman_mcp.utils.stats import count_by, priority_of
from taskman_mcp.utils.text import NO_PROJECT, cap, more_line, or_placeholder

logger = logging.getLogger(__name__)

NOTES_SHOWN = 5
SEARCH_OVERDUE_SHOWN = 5
SEARCH_RESULTS_SHOWN = 10
ALL_TASKS_SHOWN = 10
STALE_AFTER_HOURS = 7 * 24
RECENT_HOURS = 24
BUSY_IN_PROGRESS = 5
BUSY_CREATED = 10
LARGE_RESULT_SET = 100

NOT_STARTED = TaskStatus.NOT_STARTED.value
IN_PROGRESS = TaskStatus.IN_PROGRESS.value
BLOCKED = TaskStatus.BLOCKED.value
REVIEW = TaskStatus.REVIEW.value
COMPLETE = TaskStatus.COMPLETE.value
HIGH = TaskPriority.HIGH.value


def _project_of(task: Task) -> str:
    return or_placeholder(task.project_id, NO_PROJECT)


def _counts_lines(lines: list[str], counts: dict[str, int]) -> None:
    lines.extend(f"- {key}: {count}" for key, count in counts.items())


# get_task_overview


async def handle_get_task_overview(ctx: ToolContext, args: dict[str, Any]) -> ToolResult:
    """Dashboard of tasks matching optional filters.

    Args:
        ctx: Tool context.
        args: Optional ``status``, ``assigned_to`` and ``project_id`` filters.
    """
    logger.info("Executing get_task_overview tool: %s", args)
    tasks = await fetch_primary(
        "get tasks",
        fetch.list_tasks(
            ctx.client,
            status=get_str(args, "status"),
            assigned_to=get_str(args, "assigned_to"),
            project_id=get_str(args, "project_id"),
        ),
    )
    projects = await fetch_secondary("get projects", fetch.list_projects(ctx.client), [])

    now = ctx.now()
    status_counts = count_by(tasks, lambda t: t.status)
    overdue = [t for t in tasks if is_overdue(t, now)]
    recent = [
        t for t in tasks
        if (age := hours_since(t.creation_date, now)) is not None and age < RECENT_HOURS
    ]
    project_counts = count_by((t for t in tasks if t.project_id), _project_of)

    insights: list[str] = []
    if overdue:
        insights.append(f"{len(overdue)} tasks are overdue and need immediate attention")
    if status_counts.get(NOT_STARTED, 0) > len(tasks) // 2:
        insights.append("More than half of tasks haven't been started yet")
    in_progress = status_counts.get(IN_PROGRESS, 0)
    if in_progress > BUSY_IN_PROGRESS:
        insights.append(
            f"{in_progress} tasks are currently in progress - consider if any are blocked"
        )
    if len(recent) > BUSY_CREATED:
        insights.append("High activity: many new tasks created in the last 24 hours")

    lines = heading("Task Overview Dashboard")
    lines.extend([f"Total Tasks: {len(tasks)}", "", "Status Breakdown:"])
    _counts_lines(lines, status_counts)
    list_section(
        lines,
        f"Overdue Tasks ({len(overdue)}):",
        [f"{t.task_name} (Due: {due_of(t)})" for t in overdue],
    )
    lines.extend(["", "Recent Activity:", f"- Tasks created in last 24h: {len(recent)}"])
    list_section(lines, "Insights:", insights)

    logger.info("Task overview generated: total_tasks=%d overdue=%d", len(tasks), len(overdue))
    return ToolResult(
        text=render(lines),
        metadata={
            "total_tasks": len(tasks),
            "status_breakdown": status_counts,
            "overdue_count": len(overdue),
            "overdue_tasks": dump_all(overdue),
            "recent_activity": {
                "tasks_created_24h": len(recent),
                "recent_tasks": dump_all(recent),
            },
            "project_summary": project_counts,
            "projects": dump_all(projects),
            "insights": insights,
        },
    )


# create_task_with_context


async def handle_create_task_with_context(
    ctx: ToolContext, args: dict[str, Any]
) -> ToolResult:
    """Create a task and attach an initial planning note.

    The task must be created; a failed note is logged and reported in the
    metadata as ``note_added: False``.

    Args:
        ctx: Tool context.
        args: ``task_name``, ``initial_note`` and ``created_by`` are required.
            ``task_description``, ``status``, ``priority``, ``assigned_to``,
            ``project_id`` and ``due_date`` are optional.

    Raises:
        ValidationError: If a required argument is missing or a status or
            priority is not in the known vocabulary.
        OperationError: If the task could not be created.
    """
    logger.info("Executing create_task_with_context tool: %s", args)
    require(args, "task_name", "initial_note", "created_by")
    status = get_str(args, "status")
    priority = get_str(args, "priority")
    validate_status(status)
    validate_priority(priority)

    request = TaskCreate(
        task_name=get_str(args, "task_name"),
        task_description=get_str(args, "task_description") or None,
        status=status or NOT_STARTED,
        priority=priority or None,
        assigned_to=get_str(args, "assigned_to") or None,
        project_id=get_str(args, "project_id") or None,
        due_date=optional_due_date(get_str(args, "due_date")),
        created_by=get_str(args, "created_by"),
    )
    task = await fetch_primary("create task", fetch.create_task(ctx.client, request))

    initial_note = get_str(args, "initial_note")
    note = await fetch_secondary(
        "create initial note",
        fetch.add_note(
            ctx.client, task.task_id, NoteCreate(note=initial_note, created_by=request.created_by)
        ),
        None,
    )

    next_steps = ["Task created successfully"]
    if not task.assigned_to:
        next_steps.append("Assign the task to a team member")
    if not task.priority:
        next_steps.append("Set task priority (Low/Medium/High)")
    if task.due_date is None:
        next_steps.append("Set a due date for the task")
    if task.project_id is None:
        next_steps.append("Consider associating with a project")
    if not task.tags:
        next_steps.append("Add relevant tags for better organization")

    lines = heading("Task Created Successfully")
    lines.extend([f"Task: {task.task_name}", f"ID: {task.task_id}", f"Status: {task.status}"])
    if task.priority is not None:
        lines.append(f"Priority: {task.priority}")
    if task.assigned_to is not None:
        lines.append(f"Assigned to: {task.assigned_to}")
    if task.due_date is not None:
        lines.append(f"Due Date: {task.due_date}")
    if task.project_id is not None:
        lines.append(f"Project ID: {task.project_id}")
    lines.extend(["", "Initial Note Added:", initial_note])
    list_section(lines, "Suggested Next Steps:", next_steps)

    logger.info("Task created with context: task_id=%s has_note=%s", task.task_id, note is not None)
    return ToolResult(
        text=render(lines),
        metadata={
            "task": dump(task),
            "initial_note": dump(note),
            "note_added": note is not None,
            "next_steps": next_steps,
            "success": True,
        },
    )


# get_task_details


def _detail_insights(task: Task, note_count: int, now: datetime) -> list[str]:
    insights: list[str] = []
    if is_overdue(task, now):
        insights.append("This task is overdue and needs immediate attention")
    idle = hours_since(task.last_update_date, now)
    if idle is not None and idle > STALE_AFTER_HOURS:
        insights.append("Task hasn't been updated in over a week")
    if task.status == IN_PROGRESS and note_count == 0:
        insights.append("Consider adding progress notes to track work")
    if not task.priority:
        insights.append("Task priority is not set")
    if not task.assigned_to:
        insights.append("Task is not assigned to anyone")
    if task.due_date is None:
        insights.append("No due date set for this task")
    if task.status == BLOCKED and note_count > 0:
        insights.append("Task is blocked - check latest notes for blocker details")
    return insights


def _detail_next_actions(task: Task) -> list[str]:
    if task.status == NOT_STARTED:
        actions = ["Move task to 'In Progress' when work begins"]
        if task.assigned_to is None:
            actions.append("Assign task to team member")
        return actions
    if task.status == IN_PROGRESS:
        return [
            "Add progress notes to document current work",
            "Update status if task is complete or blocked",
        ]
    if task.status == BLOCKED:
        return ["Resolve blocker and update status", "Document blocker resolution in notes"]
    if task.status == REVIEW:
        return ["Complete review and mark as complete or provide feedback"]
    if task.status == COMPLETE:
        return ["Task is complete - consider archiving if no longer needed"]
    return []


async def handle_get_task_details(ctx: ToolContext, args: dict[str, Any]) -> ToolResult:
    """Everything known about one task, with insights and suggested actions."""
    logger.info("Executing get_task_details tool: %s", args)
    require(args, "task_id")
    task_id = get_str(args, "task_id")

    task = await fetch_primary("get task", fetch.get_task(ctx.client, task_id))
    notes = await fetch_secondary("get task notes", fetch.list_notes(ctx.client, task_id), [])
    project = None
    if task.project_id:
        project = await fetch_secondary(
            "get project", fetch.get_project(ctx.client, task.project_id), None
        )

    insights = _detail_insights(task, len(notes), ctx.now())
    next_actions = _detail_next_actions(task)

    lines = heading("Task Details")
    lines.extend([f"Task: {task.task_name}", f"ID: {task.task_id}", f"Status: {task.status}"])
    if task.task_description:
        lines.append(f"Description: {task.task_description}")
    for label, value in (
        ("Priority", task.priority),
        ("Assigned to", task.assigned_to),
        ("Due Date", task.due_date),
        ("Start Date", task.start_date),
        ("Completion Date", task.completion_date),
    ):
        if value is not None:
            lines.append(f"{label}: {value}")
    if task.tags:
        lines.append(f"Tags: {', '.join(task.tags)}")

    if project is not None:
        lines.extend(["", f"Project: {project.project_name}", f"Project ID: {project.project_id}"])
        if project.project_description:
            lines.append(f"Project Description: {project.project_description}")

    lines.extend(["", f"Created by: {task.created_by}", f"Created: {task.creation_date}"])
    if task.last_updated_by is not None:
        lines.extend([
            f"Last updated by: {task.last_updated_by}",
            f"Last updated: {or_placeholder(task.last_update_date, 'unknown')}",
        ])

    if notes:
        shown, remaining = cap(notes, NOTES_SHOWN)
        lines.extend(["", f"Notes ({len(notes)}):"])
        lines.extend(f"- [{n.creation_date}] {n.note} (by {n.created_by})" for n in shown)
        more = more_line(remaining, "notes")
        if more:
            lines.append(more)
    else:
        lines.extend(["", "No notes available"])

    list_section(lines, "Insights:", insights)
    list_section(lines, "Suggested Next Actions:", next_actions)

    logger.info(
        "Task details retrieved: task_id=%s note_count=%d has_project=%s",
        task.task_id, len(notes), project is not None,
    )
    return ToolResult(
        text=render(lines),
        metadata={
            "task": dump(task),
            "notes": dump_all(notes),
            "project": dump(project),
            "insights": insights,
            "next_actions": next_actions,
            "note_count": len(notes),
            "has_project": project is not None,
        },
    )


# update_task_progress


def _progress_insights(current: Task, status: str, priority: str, now: datetime) -> list[str]:
    insights: list[str] = []
    if status == COMPLETE:
        insights.append("Task marked as complete!")
        due = parse_timestamp(current.due_date)
        if due is not None:
            if now < due:
                insights.append("Task completed before due date")
            else:
                insights.append("Task completed after due date")
    if status == BLOCKED:
        insights.append("Task is now blocked - ensure blocker is documented in the note")
    if status == IN_PROGRESS and current.status == NOT_STARTED:
        insights.append("Work has begun on this task")
    if priority == HIGH and current.priority != HIGH:
        insights.append("Task priority elevated to High")
    return insights


_PROGRESS_NEXT_STEPS = {
    IN_PROGRESS: [
        "Continue adding progress notes as work proceeds",
        "Update status to 'Review' or 'Complete' when ready",
    ],
    BLOCKED: ["Work on resolving the blocker", "Consider escalating if blocker persists"],
    REVIEW: ["Assign reviewer or notify stakeholders", "Prepare review criteria/checklist"],
    COMPLETE: ["Consider archiving if no longer needed", "Update project metrics if applicable"],
}


async def handle_update_task_progress(ctx: ToolContext, args: dict[str, Any]) -> ToolResult:
    """Apply status, priority or assignee changes and log a progress note.

    The task is only written when at least one field actually changes.
    Moving to Complete stamps ``completion_date``; moving to In Progress
    stamps ``start_date`` if the task has none yet.

    Raises:
        ValidationError: If a required argument is missing or a status or
            priority is not in the known vocabulary.
        OperationError: If the current task cannot be read or the update
            is rejected.
    """
    logger.info("Executing update_task_progress tool: %s", args)
    require(args, "task_id", "progress_note", "updated_by")
    task_id = get_str(args, "task_id")
    progress_note = get_str(args, "progress_note")
    updated_by = get_str(args, "updated_by")
    status = get_str(args, "status")
    priority = get_str(args, "priority")
    assigned_to = get_str(args, "assigned_to")
    validate_status(status)
    validate_priority(priority)

    current = await fetch_primary("get current task", fetch.get_task(ctx.client, task_id))
    now = ctx.now()

    update = TaskUpdate(last_updated_by=updated_by)
    changes: list[str] = []
    if status and status != current.status:
        update.status = status
        changes.append(f"Status: {current.status} → {status}")
        if status == COMPLETE:
            update.completion_date = format_timestamp(now)
            changes.append("Completion date set")
    if priority and priority != (current.priority or ""):
        update.priority = priority
        changes.append(f"Priority: {current.priority or ''} → {priority}")
    if assigned_to and assigned_to != (current.assigned_to or ""):
        update.assigned_to = assigned_to
        changes.append(f"Assigned to: {current.assigned_to or ''} → {assigned_to}")
    if status == IN_PROGRESS and current.start_date is None:
        update.start_date = format_timestamp(now)
        changes.append("Start date set")

    task = current
    if changes:
        task = await fetch_primary("update task", fetch.update_task(ctx.client, task_id, update))

    note = await fetch_secondary(
        "create progress note",
        fetch.add_note(ctx.client, task_id, NoteCreate(note=progress_note, created_by=updated_by)),
        None,
    )

    insights = _progress_insights(current, status, priority, now)
    next_steps = _PROGRESS_NEXT_STEPS.get(status, [])

    lines = heading("Task Progress Updated")
    lines.extend([f"Task: {task.task_name}", f"ID: {task.task_id}"])
    if changes:
        list_section(lines, "Changes Made:", changes)
    else:
        lines.extend(["", "No field changes made (progress note added)"])
    lines.extend(["", "Progress Note Added:", progress_note, f"Added by: {updated_by}"])
    list_section(lines, "Insights:", insights)
    list_section(lines, "Suggested Next Steps:", next_steps)
    lines.extend(["", f"Current Status: {task.status}"])
    if task.priority is not None:
        lines.append(f"Priority: {task.priority}")
    if task.assigned_to is not None:
        lines.append(f"Assigned to: {task.assigned_to}")

    logger.info(
        "Task progress updated: task_id=%s changes=%d note_added=%s",
        task.task_id, len(changes), note is not None,
    )
    return ToolResult(
        text=render(lines),
        metadata={
            "task": dump(task),
            "progress_note": dump(note),
            "changes_made": changes,
            "insights": insights,
            "next_steps": list(next_steps),
            "update_success": True,
            "note_added": note is not None,
        },
    )


# search_tasks


def _day_start(value: str) -> datetime | None:
    try:
        return datetime.strptime(value, "%Y-%m-%d").replace(tzinfo=timezone.utc)
    except ValueError:
        return None


def _matches_text(task: Task, text: str) -> bool:
    return text in task.task_name or text in (task.task_description or "")


def _within_due_range(task: Task, start: datetime | None, end: datetime | None) -> bool:
    """Tasks without a parseable due date always pass the range check."""
    due = parse_timestamp(task.due_date)
    if due is None:
        return True
    if start is not None and due < start:
        return False
    if end is not None and due > end + timedelta(days=1):
        return False
    return True


def filter_search_results(
    tasks: list[Task],
    search_text: str = "",
    due_date_from: str = "",
    due_date_to: str = "",
    limit: int = 0,
) -> list[Task]:
    """Apply the filters the API may not support.

    Text matching is a case-sensitive substring test on name and
    description. Date bounds are ``YYYY-MM-DD`` days; the upper bound
    includes the whole day. Unparseable bounds are ignored.
    """
    start = _day_start(due_date_from) if due_date_from else None
    end = _day_start(due_date_to) if due_date_to else None
    results = [
        t for t in tasks
        if (not search_text or _matches_text(t, search_text))
        and _within_due_range(t, start, end)
    ]
    if limit > 0:
        results = results[:limit]
    return results


_SEARCH_QUERY_KEYS = (
    "status",
    "priority",
    "assigned_to",
    "project_id",
    "created_by",
    "archived",
    "due_date_from",
    "due_date_to",
)

_SEARCH_CRITERIA_LABELS = (
    ("status", "Status"),
    ("priority", "Priority"),
    ("assigned_to", "Assigned to"),
    ("project_id", "Project ID"),
    ("search_text", "Search text"),
    ("due_date_from", "Due date from"),
    ("due_date_to", "Due date to"),
)


async def handle_search_tasks(ctx: ToolContext, args: dict[str, Any]) -> ToolResult:
    """Search tasks with server-side filters plus client-side text and date filtering."""
    logger.info("Executing search_tasks tool: %s", args)
    search_text = get_str(args, "search_text")
    sort_by = get_str(args, "sort_by")
    limit = get_int(args, "limit")

    query: dict[str, Any] = {key: get_str(args, key) for key in _SEARCH_QUERY_KEYS}
    query["search"] = search_text
    if sort_by:
        query["sort_by"] = sort_by
        query["sort_order"] = get_str(args, "sort_order")
    query["limit"] = limit if limit > 0 else None

    tasks = await fetch_primary("search tasks", fetch.list_tasks(ctx.client, **query))
    results = filter_search_results(
        tasks,
        search_text=search_text,
        due_date_from=get_str(args, "due_date_from"),
        due_date_to=get_str(args, "due_date_to"),
        limit=limit,
    )

    now = ctx.now()
    total = len(results)
    status_counts = count_by(results, lambda t: t.status)
    priority_counts = count_by(results, priority_of)
    project_counts = count_by(results, _project_of)
    overdue = [t for t in results if is_overdue(t, now)]

    insights: list[str] = []
    if total == 0:
        insights.append("No tasks match your search criteria")
    elif total == 1:
        insights.append("Found exactly one matching task")
    elif total > LARGE_RESULT_SET:
        insights.append("Large result set - consider narrowing your search")
    if overdue:
        insights.append(f"{len(overdue)} of the results are overdue")
    if len(status_counts) == 1:
        insights.append(f"All results have status: {next(iter(status_counts))}")
    if priority_counts.get(HIGH, 0) > total // 2:
        insights.append("Most results are high priority")

    suggestions: list[str] = []
    if total == 0:
        suggestions.extend([
            "Try broadening your search criteria",
            "Check if tasks exist with different statuses",
        ])
    else:
        if overdue:
            suggestions.append("Address overdue tasks first")
        if status_counts.get(NOT_STARTED):
            suggestions.append(f"Consider starting {status_counts[NOT_STARTED]} pending tasks")
        if status_counts.get(REVIEW):
            suggestions.append(f"Review {status_counts[REVIEW]} tasks waiting for approval")

    lines = heading("Task Search Results")
    lines.append(f"Found: {total} tasks")
    criteria = [
        f"{label}: {get_str(args, key)}"
        for key, label in _SEARCH_CRITERIA_LABELS
        if get_str(args, key)
    ]
    list_section(lines, "Search Criteria:", criteria)

    if results:
        lines.extend(["", "Results Breakdown:"])
        _counts_lines(lines, status_counts)
        if overdue:
            shown, remaining = cap(overdue, SEARCH_OVERDUE_SHOWN)
            lines.extend(["", f"Overdue Tasks ({len(overdue)}):"])
            lines.extend(f"- {t.task_name} (Due: {due_of(t)})" for t in shown)
            more = more_line(remaining, "overdue tasks")
            if more:
                lines.append(more)
        shown, remaining = cap(results, SEARCH_RESULTS_SHOWN)
        lines.extend(["", f"Tasks (showing {total}):"])
        lines.extend(task_summary_line(t) for t in shown)
        more = more_line(remaining, "tasks")
        if more:
            lines.append(more)

    list_section(lines, "Insights:", insights)
    list_section(lines, "Suggestions:", suggestions)

    logger.info("Task search completed: total_results=%d overdue_count=%d", total, len(overdue))
    return ToolResult(
        text=render(lines),
        metadata={
            "tasks": dump_all(results),
            "total_results": total,
            "search_criteria": dict(args),
            "status_breakdown": status_counts,
            "priority_breakdown": priority_counts,
            "project_breakdown": project_counts,
            "overdue_count": len(overdue),
            "overdue_tasks": dump_all(overdue),
            "insights": insights,
            "suggestions": suggestions,
        },
    )


# get_all_tasks


def _all_tasks_line(task: Task) -> str:
    line = f"- {task.task_name} ({task.status}"
    if task.priority:
        line += f", {task.priority}"
    if task.assigned_to:
        line += f" - {task.assigned_to}"
    return line + ")"


async def handle_get_all_tasks(ctx: ToolContext, args: dict[str, Any]) -> ToolResult:
    """List tasks with breakdowns and the overdue subset."""
    logger.info("Executing get_all_tasks tool")
    tasks = await fetch_primary(
        "get tasks",
        fetch.list_tasks(
            ctx.client,
            status=get_str(args, "status"),
            assigned_to=get_str(args, "assigned_to"),
            project_id=get_str(args, "project_id"),
        ),
    )

    now = ctx.now()
    status_counts = count_by(tasks, lambda t: t.status)
    priority_counts = count_by(tasks, lambda t: priority_of(t, "Unset"))
    project_counts = count_by(tasks, _project_of)
    overdue = [t for t in tasks if is_overdue(t, now)]

    if not tasks:
        lines = ["No tasks found.", "", "Create your first task to get started!"]
    else:
        lines = heading(f"All Tasks ({len(tasks)})")
        lines.append("Status Breakdown:")
        _counts_lines(lines, status_counts)
        lines.extend(["", "Priority Breakdown:"])
        _counts_lines(lines, priority_counts)
        if overdue:
            lines.extend(["", f"Overdue Tasks ({len(overdue)}):"])
            for task in overdue:
                suffix = f" (due: {task.due_date})" if task.due_date else ""
                lines.append(f"- {task.task_name}{suffix}")
        lines.extend(["", "Recent Tasks:"])
        shown, remaining = cap(tasks, ALL_TASKS_SHOWN)
        lines.extend(_all_tasks_line(t) for t in shown)
        more = more_line(remaining, "tasks")
        if more:
            lines.extend(["", more])

    logger.info("Tasks list retrieved: total_tasks=%d overdue_count=%d", len(tasks), len(overdue))
    return ToolResult(
        text=render(lines),
        metadata={
            "tasks": dump_all(tasks),
            "total_count": len(tasks),
            "status_breakdown": status_counts,
            "priority_breakdown": priority_counts,
            "project_breakdown": project_counts,
            "overdue_count": len(overdue),
            "overdue_tasks": dump_all(overdue),
        },
    )


# add_task_note


async def handle_add_task_note(ctx: ToolContext, args: dict[str, Any]) -> ToolResult:
    """Attach a note to an existing task without touching its fields."""
    logger.info("Executing add_task_note tool: %s", args)
    require(args, "task_id", "note", "created_by")
    task_id = get_str(args, "task_id")

    task = await fetch_primary("verify task exists", fetch.get_task(ctx.client, task_id))
    note = await fetch_primary(
        "add note",
        fetch.add_note(
            ctx.client,
            task_id,
            NoteCreate(note=get_str(args, "note"), created_by=get_str(args, "created_by")),
        ),
    )

    next_steps = [
        "Note has been successfully added to the task",
        "Check task details to see all notes",
        "Consider updating task status if progress was made",
        "Add more notes as work progresses",
    ]
    lines = heading("Note Added Successfully")
    lines.extend([
        f"Task: {task.task_name}",
        f"Task ID: {task.task_id}",
        f"Note ID: {note.note_id}",
        f"Note: {note.note}",
        f"Created by: {note.created_by}",
        f"Created: {note.creation_date}",
    ])
    list_section(lines, "Next Steps:", next_steps)

    logger.info("Note added successfully: task_id=%s note_id=%s", task_id, note.note_id)
    return ToolResult(
        text=render(lines),
        metadata={
            "success": True,
            "task": dump(task),
            "note": dump(note),
            "note_id": note.note_id,
            "task_id": task_id,
        },
    )
