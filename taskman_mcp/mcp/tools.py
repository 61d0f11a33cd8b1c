"""MCP tool catalogue: schemas and the handler behind each tool name."""

from collections.abc import Awaitable, Callable
from typing import Any

from taskman_mcp.models import VALID_PRIORITIES, VALID_STATUSES
from taskman_mcp.tools import ToolContext, ToolResult
from taskman_mcp.tools.health import handle_health_check
from taskman_mcp.tools.projects import (
    handle_create_project_with_initial_tasks,
    handle_get_all_projects,
    handle_get_project_status,
)
from taskman_mcp.tools.tasks import (
    handle_add_task_note,
    handle_create_task_with_context,
    handle_get_all_tasks,
    handle_get_task_details,
    handle_get_task_overview,
    handle_search_tasks,
    handle_update_task_progress,
)
from taskman_mcp.tools.user import handle_get_my_work

ToolHandler = Callable[[ToolContext, dict[str, Any]], Awaitable[ToolResult]]

_STATUS_HELP = "Valid statuses: " + ", ".join(f"'{s}'" for s in VALID_STATUSES)
_PRIORITY_HELP = "Valid priorities: " + ", ".join(f"'{p}'" for p in VALID_PRIORITIES)


def _string(description: str) -> dict[str, Any]:
    return {"type": "string", "description": description}


def _status(description: str) -> dict[str, Any]:
    return {"type": "string", "enum": VALID_STATUSES, "description": description}


def _priority(description: str) -> dict[str, Any]:
    return {"type": "string", "enum": VALID_PRIORITIES, "description": description}


_TASK_FILTERS = {
    "status": _status("Filter by task status"),
    "assigned_to": _string("Filter by assignee"),
    "project_id": _string("Filter by project ID"),
}

TOOL_SCHEMAS: dict[str, dict[str, Any]] = {
    "health_check": {
        "description": "Check the health of the taskman API server",
        "inputSchema": {"type": "object", "properties": {}},
    },
    "get_task_overview": {
        "description": (
            "Get a dashboard overview of tasks with status breakdown, overdue tasks, "
            "and recent activity"
        ),
        "inputSchema": {"type": "object", "properties": dict(_TASK_FILTERS)},
    },
    "create_task_with_context": {
        "description": (
            "Create a new task with context and add an initial planning note. "
            f"{_STATUS_HELP}. {_PRIORITY_HELP}"
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "task_name": _string("Name of the task"),
                "task_description": _string("Detailed description of the task"),
                "initial_note": _string("Initial planning note added to the task"),
                "created_by": _string("User creating the task"),
                "status": _status("Initial status (default: Not Started)"),
                "priority": _priority("Task priority"),
                "assigned_to": _string("User the task is assigned to"),
                "project_id": _string("Project to associate the task with"),
                "due_date": _string(
                    "Due date (e.g., '2024-01-20', '2024-01-20T17:00:00Z', 'next friday')"
                ),
            },
            "required": ["task_name", "initial_note", "created_by"],
        },
    },
    "get_task_details": {
        "description": (
            "Get complete task details including notes and project information "
            "for decision-making"
        ),
        "inputSchema": {
            "type": "object",
            "properties": {"task_id": _string("ID of the task")},
            "required": ["task_id"],
        },
    },
    "update_task_progress": {
        "description": (
            "Update task status/progress and add a progress note. "
            f"{_STATUS_HELP}. {_PRIORITY_HELP}"
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "task_id": _string("ID of the task"),
                "progress_note": _string("Note describing the progress made"),
                "updated_by": _string("User making the update"),
                "status": _status("New status"),
                "priority": _priority("New priority"),
                "assigned_to": _string("New assignee"),
            },
            "required": ["task_id", "progress_note", "updated_by"],
        },
    },
    "search_tasks": {
        "description": (
            "Search tasks with advanced filtering. Filter by status, priority, assignee, "
            "project, creator, dates, and text"
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                **_TASK_FILTERS,
                "priority": _priority("Filter by priority"),
                "created_by": _string("Filter by creator"),
                "archived": _string("Filter by archived flag ('true' or 'false')"),
                "due_date_from": _string("Earliest due date (YYYY-MM-DD)"),
                "due_date_to": _string("Latest due date, inclusive (YYYY-MM-DD)"),
                "search_text": _string("Text to find in task names and descriptions"),
                "sort_by": _string("Field to sort by"),
                "sort_order": {"type": "string", "enum": ["asc", "desc"]},
                "limit": {"type": "integer", "description": "Maximum number of results"},
            },
        },
    },
    "get_project_status": {
        "description": "Get project overview with task breakdown, progress metrics, and insights",
        "inputSchema": {
            "type": "object",
            "properties": {"project_id": _string("ID of the project")},
            "required": ["project_id"],
        },
    },
    "create_project_with_initial_tasks": {
        "description": (
            "Create a new project and populate it with initial tasks in one operation"
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "project_name": _string("Name of the project"),
                "project_description": _string("Description of the project"),
                "created_by": _string("User creating the project"),
                "initial_tasks": {
                    "type": "array",
                    "description": "Tasks to create in the project (at least one)",
                    "items": {
                        "type": "object",
                        "properties": {
                            "task_name": _string("Name of the task"),
                            "task_description": _string("Description of the task"),
                            "status": _status("Initial status"),
                            "priority": _priority("Task priority"),
                            "assigned_to": _string("Assignee"),
                            "due_date": _string("Due date"),
                        },
                        "required": ["task_name"],
                    },
                },
            },
            "required": ["project_name", "created_by", "initial_tasks"],
        },
    },
    "get_all_projects": {
        "description": "Get a list of all projects in the system",
        "inputSchema": {"type": "object", "properties": {}},
    },
    "get_all_tasks": {
        "description": "Get a list of all tasks in the system with status breakdown and insights",
        "inputSchema": {"type": "object", "properties": dict(_TASK_FILTERS)},
    },
    "add_task_note": {
        "description": "Add a note to an existing task without requiring status or other changes",
        "inputSchema": {
            "type": "object",
            "properties": {
                "task_id": _string("ID of the task"),
                "note": _string("Note text"),
                "created_by": _string("User adding the note"),
            },
            "required": ["task_id", "note", "created_by"],
        },
    },
    "get_my_work": {
        "description": "Get personalized work queue with prioritized tasks and workload insights",
        "inputSchema": {
            "type": "object",
            "properties": {
                "user_id": _string("User whose work queue to build"),
                "project_id": _string("Only include tasks from this project"),
                "include_review": {
                    "type": "boolean",
                    "description": "Include tasks in Review (default: true)",
                },
                "include_blocked": {
                    "type": "boolean",
                    "description": "Include Blocked tasks (default: true)",
                },
                "sort_by": _string("Sort order ('priority' by default)"),
                "limit": {
                    "type": "integer",
                    "description": "Maximum tasks in the queue (default: 20)",
                },
            },
            "required": ["user_id"],
        },
    },
}

HANDLERS: dict[str, ToolHandler] = {
    "health_check": handle_health_check,
    # Tasks
    "get_task_overview": handle_get_task_overview,
    "create_task_with_context": handle_create_task_with_context,
    "get_task_details": handle_get_task_details,
    "update_task_progress": handle_update_task_progress,
    "search_tasks": handle_search_tasks,
    "get_all_tasks": handle_get_all_tasks,
    "add_task_note": handle_add_task_note,
    # Projects
    "get_project_status": handle_get_project_status,
    "create_project_with_initial_tasks": handle_create_project_with_initial_tasks,
    "get_all_projects": handle_get_all_projects,
    # User
    "get_my_work": handle_get_my_work,
}
