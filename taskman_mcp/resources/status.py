"""The API status resource, a pass-through of the upstream health endpoint."""

import logging

from taskman_mcp.client import fetch
from taskman_mcp.formatters.common import Report
from taskman_mcp.resources.base import ResourceHandler, fetch_primary
from taskman_mcp.utils import uri as patterns

logger = logging.getLogger(__name__)


class StatusResources(ResourceHandler):
    """Aggregator for ``taskman://api/status``."""

    async def read_api_status(self, uri: str) -> Report:
        """Return the raw ``/health`` body. Served as application/json."""
        patterns.API_STATUS.parse(uri)
        logger.info("Reading API status resource")
        self._accessed("api_status")

        payload = await fetch_primary("read API status", fetch.health(self.client))
        return Report(text=payload.decode("utf-8", errors="replace"))
