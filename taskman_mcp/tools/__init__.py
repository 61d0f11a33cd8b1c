"""MCP tool handlers.

Each handler is ``async def handle_x(ctx, args) -> ToolResult`` and raises a
TaskmanError subclass on failure. The MCP layer turns those into error
results.
"""

from taskman_mcp.tools.base import ToolContext, ToolResult

__all__ = ["ToolContext", "ToolResult"]
