"""The health_check tool."""

import logging
from typing import Any

from taskman_mcp.client import fetch
from taskman_mcp.exceptions import TaskmanError
from taskman_mcp.tools.base import ToolContext, ToolResult
from taskman_mcp.utils.dates import format_timestamp

logger = logging.getLogger(__name__)


async def handle_health_check(ctx: ToolContext, args: dict[str, Any]) -> ToolResult:
    """Probe the API's /health endpoint.

    An unreachable API is reported in the result text rather than raised,
    so the caller always gets an answer.
    """
    logger.info("Executing health_check tool")
    timestamp = format_timestamp(ctx.now())
    try:
        body = await fetch.health(ctx.client)
    except TaskmanError as e:
        logger.error("Health check failed: %s", e)
        return ToolResult(
            text=f"Health check failed: {e}",
            metadata={"status": "unhealthy", "error": str(e), "timestamp": timestamp},
        )

    logger.info("Health check completed successfully")
    return ToolResult(
        text="API Health Check: healthy",
        metadata={
            "status": "healthy",
            "api_response": body.decode("utf-8", errors="replace"),
            "timestamp": timestamp,
        },
    )
