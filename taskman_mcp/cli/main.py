"""Main CLI entry point for taskman-mcp."""

import asyncio
import logging
import sys
from typing import Any

import click
from rich.console import Console

from taskman_mcp.client import fetch
from taskman_mcp.client.api import APIClient
from taskman_mcp.config import TRANSPORTS, Settings, parse_duration, setup_logging
from taskman_mcp.exceptions import TaskmanError

console = Console()
# stdout carries the MCP stdio protocol while serving
err_console = Console(stderr=True)

logger = logging.getLogger(__name__)


def error(msg: str) -> None:
    """Print an error message."""
    err_console.print(f"[red]Error:[/red] {msg}")


def build_settings(
    transport: str | None = None,
    host: str | None = None,
    port: int | None = None,
    api_url: str | None = None,
    api_timeout: str | None = None,
    log_level: str | None = None,
    debug: bool = False,
) -> Settings:
    """Load settings from the environment and apply command-line overrides.

    Raises:
        ConfigError: If the environment or an override is invalid.
    """
    base = Settings.from_env()
    overrides: dict[str, Any] = {}
    if transport:
        overrides["transport"] = transport
    if host:
        overrides["http_host"] = host
    if port is not None:
        overrides["http_port"] = port
    if api_url:
        overrides["api_base_url"] = api_url.rstrip("/")
    if api_timeout:
        overrides["api_timeout"] = parse_duration(api_timeout)
    if log_level:
        overrides["log_level"] = log_level.upper()
    if debug:
        overrides["log_level"] = "DEBUG"
    if not overrides:
        return base
    return Settings(**{**base.model_dump(), **overrides})


@click.group(invoke_without_command=True)
@click.option(
    "--transport",
    type=click.Choice(TRANSPORTS, case_sensitive=False),
    help="MCP transport (default: $TASKMAN_MCP_TRANSPORT or stdio)",
)
@click.option("--host", help="HTTP bind host (default: $TASKMAN_MCP_HTTP_HOST or localhost)")
@click.option("--port", type=int, help="HTTP port (default: $TASKMAN_MCP_HTTP_PORT or 8081)")
@click.option("--api-url", help="taskman API base URL (default: $TASKMAN_API_BASE_URL)")
@click.option("--api-timeout", help="API request timeout, e.g. 30s or 1m (default: 30s)")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARN", "WARNING", "ERROR"], case_sensitive=False),
    help="Log level (default: $TASKMAN_LOG_LEVEL or INFO)",
)
@click.option("--debug/--no-debug", default=False, help="Show debug information")
@click.pass_context
def cli(
    ctx: click.Context,
    transport: str | None,
    host: str | None,
    port: int | None,
    api_url: str | None,
    api_timeout: str | None,
    log_level: str | None,
    debug: bool,
) -> None:
    """taskman-mcp - MCP server for the taskman task API.

    Without a subcommand, serves MCP on the configured transport.
    """
    settings = build_settings(transport, host, port, api_url, api_timeout, log_level, debug)
    setup_logging(settings.log_level_value)
    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings
    ctx.obj["debug"] = debug

    if ctx.invoked_subcommand is None:
        ctx.invoke(serve)


@cli.command()
@click.pass_context
def serve(ctx: click.Context) -> None:
    """Run the MCP server."""
    from taskman_mcp.mcp.server import main as run_server

    run_server(ctx.obj["settings"])


async def _check_health(settings: Settings) -> str:
    async with APIClient(settings.api_base_url, timeout=settings.api_timeout) as client:
        body = await fetch.health(client)
    return body.decode("utf-8", errors="replace")


@cli.command()
@click.pass_context
def check(ctx: click.Context) -> None:
    """Check that the taskman API is reachable."""
    settings: Settings = ctx.obj["settings"]
    body = asyncio.run(_check_health(settings))
    console.print(f"[green]✓[/green] API at {settings.api_base_url} is healthy")
    if body.strip():
        console.print(body.strip(), markup=False)


def main() -> None:
    """Main entry point with error handling."""
    try:
        cli()
    except TaskmanError as e:
        error(str(e))
        sys.exit(1)
    except Exception as e:
        if "--debug" in sys.argv:
            raise
        error(str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
