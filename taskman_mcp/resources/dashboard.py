"""Dashboard resources: system-wide, per user and per project."""

import logging

from taskman_mcp.client import fetch
from taskman_mcp.formatters.common import Report
from taskman_mcp.formatters.dashboard import (
    format_project_dashboard,
    format_system_dashboard,
    format_user_dashboard,
)
from taskman_mcp.resources.base import ResourceHandler, fetch_primary, fetch_secondary
from taskman_mcp.utils import uri as patterns
from taskman_mcp.utils.stats import compute_task_stats

logger = logging.getLogger(__name__)


class DashboardResources(ResourceHandler):
    """Aggregators for ``taskman://dashboard/...``."""

    async def read_system_dashboard(self, uri: str) -> Report:
        """Read ``taskman://dashboard/system``. Tasks and projects are both required."""
        patterns.SYSTEM_DASHBOARD.parse(uri)
        logger.info("Reading system dashboard resource")
        self._accessed("system_dashboard")

        tasks = await fetch_primary("get tasks", fetch.list_tasks(self.client))
        projects = await fetch_primary("get projects", fetch.list_projects(self.client))

        now = self.clock()
        stats = compute_task_stats(tasks, now)
        logger.info(
            "System dashboard generated: task_count=%d project_count=%d",
            len(tasks), len(projects),
        )
        return Report(
            text=format_system_dashboard(tasks, projects, now),
            metadata={"project_count": len(projects), **stats.to_dict()},
        )

    async def read_user_dashboard(self, uri: str) -> Report:
        """Read ``taskman://dashboard/user/{user_id}``.

        Assigned tasks are required; tasks the user created are optional.
        """
        user_id = patterns.USER_DASHBOARD.parse(uri)["user_id"]
        logger.info("Reading user dashboard resource %s", uri)
        self._accessed("user_dashboard")

        assigned = await fetch_primary(
            "get user tasks", fetch.list_tasks(self.client, assigned_to=user_id)
        )
        created = await fetch_secondary(
            "get user created tasks", fetch.list_tasks(self.client, created_by=user_id), []
        )

        now = self.clock()
        stats = compute_task_stats(assigned, now)
        logger.info(
            "User dashboard generated: user_id=%s assigned=%d created=%d",
            user_id, len(assigned), len(created),
        )
        return Report(
            text=format_user_dashboard(user_id, assigned, created, now),
            metadata={
                "user_id": user_id,
                "assigned_count": len(assigned),
                "created_count": len(created),
                **stats.to_dict(),
            },
        )

    async def read_project_dashboard(self, uri: str) -> Report:
        """Read ``taskman://dashboard/project/{project_id}``. Both fetches are required."""
        project_id = patterns.PROJECT_DASHBOARD.parse(uri)["project_id"]
        logger.info("Reading project dashboard resource %s", uri)
        self._accessed("project_dashboard")

        project = await fetch_primary("get project", fetch.get_project(self.client, project_id))
        tasks = await fetch_primary(
            "get project tasks", fetch.list_project_tasks(self.client, project_id)
        )

        now = self.clock()
        stats = compute_task_stats(tasks, now)
        logger.info(
            "Project dashboard generated: project_id=%s task_count=%d", project_id, len(tasks)
        )
        return Report(
            text=format_project_dashboard(project, tasks, now),
            metadata={"project_id": project.project_id, **stats.to_dict()},
        )
