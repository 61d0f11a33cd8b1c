"""Pydantic data models."""

from taskman_mcp.models.project import Project, ProjectCreate
from taskman_mcp.models.task import (
    ACTIVE_STATUSES,
    STATUS_ORDER,
    VALID_PRIORITIES,
    VALID_STATUSES,
    NoteCreate,
    Task,
    TaskCreate,
    TaskNote,
    TaskPriority,
    TaskStatus,
    TaskUpdate,
)

__all__ = [
    "ACTIVE_STATUSES",
    "STATUS_ORDER",
    "VALID_PRIORITIES",
    "VALID_STATUSES",
    "NoteCreate",
    "Project",
    "ProjectCreate",
    "Task",
    "TaskCreate",
    "TaskNote",
    "TaskPriority",
    "TaskStatus",
    "TaskUpdate",
]
