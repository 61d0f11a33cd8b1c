"""Task resources: a single task, the tasks overview and a user's tasks."""

import logging

from taskman_mcp.client import fetch
from taskman_mcp.formatters.common import Report
from taskman_mcp.formatters.task import (
    format_task_detail,
    format_tasks_overview,
    format_user_tasks,
)
from taskman_mcp.models import Project
from taskman_mcp.resources.base import ResourceHandler, fetch_primary, fetch_secondary
from taskman_mcp.utils import uri as patterns

logger = logging.getLogger(__name__)


class TaskResources(ResourceHandler):
    """Aggregators for ``taskman://task/...`` and ``taskman://tasks/...``."""

    async def read_task(self, uri: str) -> Report:
        """Read ``taskman://task/{task_id}``.

        The task itself must load. Its notes and project are optional.
        """
        task_id = patterns.TASK.parse(uri)["task_id"]
        logger.info("Reading task resource %s", uri)
        self._accessed("task")

        task = await fetch_primary("get task", fetch.get_task(self.client, task_id))
        notes = await fetch_secondary(
            "get task notes", fetch.list_notes(self.client, task_id), []
        )
        project: Project | None = None
        if task.project_id:
            project = await fetch_secondary(
                "get project", fetch.get_project(self.client, task.project_id), None
            )

        logger.info(
            "Task resource retrieved: task_id=%s note_count=%d has_project=%s",
            task_id, len(notes), project is not None,
        )
        return Report(
            text=format_task_detail(task, notes, project),
            metadata={
                "task_id": task.task_id,
                "note_count": len(notes),
                "has_project": project is not None,
            },
        )

    async def read_tasks_overview(self, uri: str) -> Report:
        """Read ``taskman://tasks/overview``."""
        patterns.TASKS_OVERVIEW.parse(uri)
        logger.info("Reading tasks overview resource")
        self._accessed("tasks_overview")

        tasks = await fetch_primary("get tasks", fetch.list_tasks(self.client))

        logger.info("Tasks overview resource retrieved: task_count=%d", len(tasks))
        return Report(
            text=format_tasks_overview(tasks, self.clock()),
            metadata={"task_count": len(tasks)},
        )

    async def read_user_tasks(self, uri: str) -> Report:
        """Read ``taskman://tasks/user/{user_id}``."""
        user_id = patterns.USER_TASKS.parse(uri)["user_id"]
        logger.info("Reading user tasks resource %s", uri)
        self._accessed("user_tasks")

        tasks = await fetch_primary(
            "get user tasks", fetch.list_tasks(self.client, assigned_to=user_id)
        )

        logger.info(
            "User tasks resource retrieved: user_id=%s task_count=%d", user_id, len(tasks)
        )
        return Report(
            text=format_user_tasks(user_id, tasks),
            metadata={"user_id": user_id, "task_count": len(tasks)},
        )
