"""MCP server for taskman.

Exposes the taskman REST API to AI assistants via the Model Context Protocol.
Tools, resources and prompts are thin wrappers around the handler packages;
this module wires them to the SDK and runs the stdio and HTTP transports.
"""

import asyncio
import contextlib
import logging
import signal
import sys
import time
from collections.abc import AsyncIterator
from typing import Any

import uvicorn
from mcp import types
from mcp.server import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.server.sse import SseServerTransport
from mcp.server.stdio import stdio_server
from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Mount, Route
from starlette.types import Receive, Scope, Send

from taskman_mcp.client.api import APIClient, TaskmanAPI
from taskman_mcp.config import DEFAULT_SERVER_NAME, DEFAULT_SERVER_VERSION, Settings
from taskman_mcp.exceptions import TaskmanError
from taskman_mcp.mcp.resources import (
    ResourceRouter,
    mime_type_for,
    resource_templates,
    static_resources,
)
from taskman_mcp.mcp.tools import HANDLERS, TOOL_SCHEMAS
from taskman_mcp.metrics import MetricsSink, NullMetrics
from taskman_mcp.prompts import PROMPTS, generate_prompt
from taskman_mcp.resources.base import Clock
from taskman_mcp.tools import ToolContext
from taskman_mcp.utils.dates import format_timestamp, utcnow

logger = logging.getLogger(__name__)


class ServiceRegistry:
    """Registry for shared dependencies with override support.

    Provides lazy initialization of the settings, API client, metrics sink
    and clock, and allows overriding each of them for testing purposes.
    """

    def __init__(self) -> None:
        self._settings: Settings | None = None
        self._client: TaskmanAPI | None = None
        self._metrics: MetricsSink | None = None
        self._clock: Clock | None = None
        self._router: ResourceRouter | None = None

    def reset(self) -> None:
        """Drop all instances. Useful for testing."""
        self._settings = None
        self._client = None
        self._metrics = None
        self._clock = None
        self._router = None

    def set_settings(self, settings: Settings) -> None:
        """Override the settings. Clears the client built from the old ones."""
        self._settings = settings
        self._client = None
        self._router = None

    def set_client(self, client: TaskmanAPI) -> None:
        """Override the API client. Useful for testing."""
        self._client = client
        self._router = None

    def set_metrics(self, metrics: MetricsSink) -> None:
        """Override the metrics sink. Useful for testing."""
        self._metrics = metrics
        self._router = None

    def set_clock(self, clock: Clock) -> None:
        """Override the clock. Useful for testing."""
        self._clock = clock
        self._router = None

    @property
    def settings(self) -> Settings:
        """Get the settings, loading them from the environment if needed."""
        if self._settings is None:
            self._settings = Settings.from_env()
        return self._settings

    @property
    def metrics(self) -> MetricsSink:
        """Get the metrics sink, creating it lazily if needed."""
        if self._metrics is None:
            self._metrics = NullMetrics()
        return self._metrics

    @property
    def client(self) -> TaskmanAPI:
        """Get the API client, creating it lazily if needed."""
        if self._client is None:
            self._client = APIClient(
                self.settings.api_base_url,
                timeout=self.settings.api_timeout,
                metrics=self.metrics,
            )
        return self._client

    @property
    def clock(self) -> Clock:
        return self._clock or utcnow

    @property
    def router(self) -> ResourceRouter:
        """Get the resource router, creating it lazily if needed."""
        if self._router is None:
            self._router = ResourceRouter(self.client, self.metrics, self.clock)
        return self._router

    def tool_context(self) -> ToolContext:
        return ToolContext(client=self.client, metrics=self.metrics, clock=self.clock)

    async def aclose(self) -> None:
        """Close the API client if this registry created it."""
        if isinstance(self._client, APIClient):
            await self._client.close()


# Global registry instance
_registry = ServiceRegistry()


def get_registry() -> ServiceRegistry:
    """Get the global service registry."""
    return _registry


# Create MCP server
server: Server = Server(DEFAULT_SERVER_NAME, version=DEFAULT_SERVER_VERSION)


@server.list_tools()
async def list_tools() -> list[types.Tool]:
    """List available MCP tools."""
    return [
        types.Tool(name=name, description=schema["description"], inputSchema=schema["inputSchema"])
        for name, schema in TOOL_SCHEMAS.items()
    ]


def _text_result(
    text: str, metadata: dict[str, Any] | None = None, is_error: bool = False
) -> types.CallToolResult:
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=text)],
        structuredContent=metadata,
        isError=is_error,
    )


# Arguments are validated by the handlers so that a missing field produces
# "<field> is required" before any API call.
@server.call_tool(validate_input=False)
async def call_tool(name: str, arguments: dict[str, Any] | None) -> types.CallToolResult:
    """Handle tool invocations."""
    handler = HANDLERS.get(name)
    if handler is None:
        logger.warning("Unknown tool requested: %s", name)
        return _text_result(f"Unknown tool: {name}", is_error=True)

    metrics = _registry.metrics
    metrics.increment("tool_calls", tool=name)
    start = time.monotonic()
    try:
        result = await handler(_registry.tool_context(), arguments or {})
    except TaskmanError as e:
        metrics.increment("tool_errors", tool=name)
        logger.error("Tool %s failed: %s", name, e)
        return _text_result(f"Error: {e}", is_error=True)
    except Exception as e:
        metrics.increment("tool_errors", tool=name)
        logger.exception("Tool %s failed unexpectedly", name)
        return _text_result(f"Error: {e}", is_error=True)
    finally:
        metrics.observe_latency("tool_latency", time.monotonic() - start, tool=name)

    return _text_result(result.text, result.metadata or None)


@server.list_resources()
async def list_resources() -> list[types.Resource]:
    """List available MCP resources."""
    return static_resources()


@server.list_resource_templates()
async def list_resource_templates() -> list[types.ResourceTemplate]:
    return resource_templates()


@server.read_resource()
async def read_resource(uri: Any) -> list[ReadResourceContents]:
    """Read a resource.

    Errors propagate so the SDK answers with a JSON-RPC error.
    """
    uri_text = str(uri)
    report = await _registry.router.read(uri_text)
    return [ReadResourceContents(content=report.text, mime_type=mime_type_for(uri_text))]


@server.list_prompts()
async def list_prompts() -> list[types.Prompt]:
    """List available MCP prompts."""
    return [
        types.Prompt(
            name=prompt.name,
            description=prompt.description,
            arguments=[
                types.PromptArgument(name=a.name, description=a.description, required=a.required)
                for a in prompt.arguments
            ],
        )
        for prompt in PROMPTS.values()
    ]


@server.get_prompt()
async def get_prompt(name: str, arguments: dict[str, str] | None) -> types.GetPromptResult:
    result = generate_prompt(name, arguments, metrics=_registry.metrics)
    return types.GetPromptResult(
        description=result.description,
        messages=[
            types.PromptMessage(
                role="user",
                content=types.TextContent(type="text", text=result.text),
            )
        ],
    )


# ============================================================================
# Transports
# ============================================================================


def _apply_identity(settings: Settings) -> None:
    server.name = settings.server_name
    server.version = settings.server_version


class StreamableHTTPEndpoint:
    """ASGI endpoint forwarding /mcp requests to the session manager."""

    def __init__(self, manager: StreamableHTTPSessionManager) -> None:
        self.manager = manager

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        await self.manager.handle_request(scope, receive, send)


def build_http_app(settings: Settings) -> Starlette:
    """Build the Starlette app serving streamable HTTP, SSE and /health.

    Args:
        settings: Used for the server identity reported by /health.

    Returns:
        An ASGI application. Its lifespan runs the session manager.
    """
    session_manager = StreamableHTTPSessionManager(app=server, json_response=False, stateless=True)
    sse = SseServerTransport("/messages/")

    async def handle_sse(request: Request) -> Response:
        async with sse.connect_sse(request.scope, request.receive, request._send) as streams:
            await server.run(streams[0], streams[1], server.create_initialization_options())
        return Response()

    async def health(request: Request) -> JSONResponse:
        return JSONResponse(
            {
                "status": "healthy",
                "server": settings.server_name,
                "version": settings.server_version,
                "timestamp": format_timestamp(_registry.clock()),
            }
        )

    @contextlib.asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncIterator[None]:
        async with session_manager.run():
            logger.info("Streamable HTTP session manager started")
            yield

    return Starlette(
        routes=[
            Route("/health", health, methods=["GET"]),
            Route("/mcp", StreamableHTTPEndpoint(session_manager)),
            Route("/sse", handle_sse, methods=["GET"]),
            Mount("/messages/", app=sse.handle_post_message),
        ],
        lifespan=lifespan,
    )


async def run_stdio() -> None:
    """Serve MCP over stdin/stdout."""
    async with stdio_server() as (read_stream, write_stream):
        logger.info("MCP stdio transport ready")
        await server.run(read_stream, write_stream, server.create_initialization_options())


async def run_http(settings: Settings) -> None:
    """Serve MCP over HTTP until uvicorn stops."""
    config = uvicorn.Config(
        build_http_app(settings),
        host=settings.http_host,
        port=settings.http_port,
        log_level=logging.getLevelName(settings.log_level_value).lower(),
    )
    logger.info("MCP HTTP transport listening on %s:%s", settings.http_host, settings.http_port)
    await uvicorn.Server(config).serve()


async def run_server(settings: Settings | None = None) -> None:
    """Run the MCP server on the configured transport(s)."""
    if settings is not None:
        _registry.set_settings(settings)
    settings = _registry.settings
    _apply_identity(settings)

    # stdout is reserved for MCP protocol
    logger.info(
        "%s %s starting (transport=%s, api=%s)",
        settings.server_name, settings.server_version, settings.transport, settings.api_base_url,
    )
    try:
        if settings.transport == "both":
            await asyncio.gather(run_stdio(), run_http(settings))
        elif settings.serves_http:
            await run_http(settings)
        else:
            await run_stdio()
    finally:
        await _registry.aclose()
        logger.info("%s stopped", settings.server_name)


def _handle_shutdown(signum: int, frame: Any) -> None:
    """Handle shutdown signals gracefully."""
    print("\ntaskman MCP server shutting down...", file=sys.stderr)
    sys.exit(0)


def main(settings: Settings | None = None) -> None:
    """Run the server until interrupted."""
    signal.signal(signal.SIGINT, _handle_shutdown)
    signal.signal(signal.SIGTERM, _handle_shutdown)

    try:
        asyncio.run(run_server(settings))
    except KeyboardInterrupt:
        print("\ntaskman MCP server shutting down...", file=sys.stderr)
        sys.exit(0)


if __name__ == "__main__":
    main()
