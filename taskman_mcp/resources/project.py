"""Project resources: a single project, the overview and a project's tasks."""

import logging

from taskman_mcp.client import fetch
from taskman_mcp.formatters.common import Report
from taskman_mcp.formatters.project import (
    format_project_detail,
    format_project_tasks,
    format_projects_overview,
)
from taskman_mcp.resources.base import ResourceHandler, fetch_primary, fetch_secondary
from taskman_mcp.utils import uri as patterns
from taskman_mcp.utils.stats import completion_rate

logger = logging.getLogger(__name__)


class ProjectResources(ResourceHandler):
    """Aggregators for ``taskman://project/...`` and ``taskman://projects/...``."""

    async def read_project(self, uri: str) -> Report:
        """Read ``taskman://project/{project_id}``.

        The project must load. Its tasks are optional.
        """
        project_id = patterns.PROJECT.parse(uri)["project_id"]
        logger.info("Reading project resource %s", uri)
        self._accessed("project")

        project = await fetch_primary("get project", fetch.get_project(self.client, project_id))
        tasks = await fetch_secondary(
            "get project tasks", fetch.list_project_tasks(self.client, project_id), []
        )

        logger.info(
            "Project resource retrieved: project_id=%s task_count=%d", project_id, len(tasks)
        )
        return Report(
            text=format_project_detail(project, tasks, self.clock()),
            metadata={
                "project_id": project.project_id,
                "task_count": len(tasks),
                "completion_rate": completion_rate(tasks),
            },
        )

    async def read_projects_overview(self, uri: str) -> Report:
        """Read ``taskman://projects/overview``."""
        patterns.PROJECTS_OVERVIEW.parse(uri)
        logger.info("Reading projects overview resource")
        self._accessed("projects_overview")

        projects = await fetch_primary("get projects", fetch.list_projects(self.client))

        logger.info("Projects overview resource retrieved: project_count=%d", len(projects))
        return Report(
            text=format_projects_overview(projects),
            metadata={"project_count": len(projects)},
        )

    async def read_project_tasks(self, uri: str) -> Report:
        """Read ``taskman://project/{project_id}/tasks``. Both fetches are required."""
        project_id = patterns.PROJECT_TASKS.parse(uri)["project_id"]
        logger.info("Reading project tasks resource %s", uri)
        self._accessed("project_tasks")

        project = await fetch_primary("get project", fetch.get_project(self.client, project_id))
        tasks = await fetch_primary(
            "get project tasks", fetch.list_project_tasks(self.client, project_id)
        )

        logger.info(
            "Project tasks resource retrieved: project_id=%s task_count=%d",
            project_id, len(tasks),
        )
        return Report(
            text=format_project_tasks(project, tasks),
            metadata={"project_id": project.project_id, "task_count": len(tasks)},
        )
