"""Environment-driven configuration for taskman-mcp."""

import logging
import os
import re
from collections.abc import Mapping
from typing import Literal

from pydantic import BaseModel, Field

from taskman_mcp.exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_API_BASE_URL = "http://localhost:8080"
DEFAULT_API_TIMEOUT = 30.0
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_SERVER_NAME = "taskman-mcp"
DEFAULT_SERVER_VERSION = "1.0.0"
DEFAULT_TRANSPORT = "stdio"
DEFAULT_HTTP_HOST = "localhost"
DEFAULT_HTTP_PORT = 8081

TRANSPORTS = ("stdio", "http", "both")

_LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}

_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(ms|h|m|s)")
_DURATION_UNITS = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0}

TransportMode = Literal["stdio", "http", "both"]


def parse_duration(value: str) -> float:
    """Parse a duration string into seconds.

    Accepts Go-style durations ("500ms", "30s", "2m", "1h30m") as well as a
    bare number of seconds ("45", "2.5").

    Args:
        value: The duration string.

    Returns:
        The duration in seconds.

    Raises:
        ConfigError: If the string is not a positive duration.
    """
    text = value.strip()
    if not text:
        raise ConfigError("duration cannot be empty")

    try:
        seconds = float(text)
    except ValueError:
        pos = 0
        seconds = 0.0
        for match in _DURATION_PART.finditer(text):
            if match.start() != pos:
                break
            seconds += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
            pos = match.end()
        if pos != len(text):
            raise ConfigError(f"invalid duration: {value}") from None

    if seconds <= 0:
        raise ConfigError(f"duration must be positive: {value}")
    return seconds


def parse_log_level(value: str) -> int:
    """Map a level name to a logging level, defaulting to INFO."""
    return _LOG_LEVELS.get(value.strip().upper(), logging.INFO)


class Settings(BaseModel):
    """Runtime settings for the MCP server and its API client."""

    api_base_url: str = Field(default=DEFAULT_API_BASE_URL)
    api_timeout: float = Field(default=DEFAULT_API_TIMEOUT, gt=0, description="Seconds")
    log_level: str = Field(default=DEFAULT_LOG_LEVEL)
    server_name: str = Field(default=DEFAULT_SERVER_NAME)
    server_version: str = Field(default=DEFAULT_SERVER_VERSION)
    transport: TransportMode = Field(default=DEFAULT_TRANSPORT)
    http_host: str = Field(default=DEFAULT_HTTP_HOST)
    http_port: int = Field(default=DEFAULT_HTTP_PORT, ge=1, le=65535)

    @property
    def log_level_value(self) -> int:
        """The numeric logging level."""
        return parse_log_level(self.log_level)

    @property
    def serves_stdio(self) -> bool:
        return self.transport in ("stdio", "both")

    @property
    def serves_http(self) -> bool:
        return self.transport in ("http", "both")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """Load settings from TASKMAN_* environment variables.

        Args:
            environ: Mapping to read from. Defaults to ``os.environ``.

        Returns:
            The loaded settings.

        Raises:
            ConfigError: If the transport mode or HTTP port is invalid.
        """
        env = os.environ if environ is None else environ

        timeout = DEFAULT_API_TIMEOUT
        raw_timeout = env.get("TASKMAN_API_TIMEOUT", "")
        if raw_timeout:
            try:
                timeout = parse_duration(raw_timeout)
            except ConfigError as e:
                logger.warning(
                    "Invalid TASKMAN_API_TIMEOUT %r (%s), using default %ss",
                    raw_timeout, e, DEFAULT_API_TIMEOUT,
                )

        transport = env.get("TASKMAN_MCP_TRANSPORT", DEFAULT_TRANSPORT).strip().lower()
        if transport not in TRANSPORTS:
            raise ConfigError(
                f"invalid transport mode: {transport} (expected one of {', '.join(TRANSPORTS)})"
            )

        raw_port = env.get("TASKMAN_MCP_HTTP_PORT", str(DEFAULT_HTTP_PORT))
        try:
            port = int(raw_port)
        except ValueError:
            raise ConfigError(f"invalid HTTP port: {raw_port}") from None
        if not 1 <= port <= 65535:
            raise ConfigError(f"invalid HTTP port: {raw_port}")

        return cls(
            api_base_url=env.get("TASKMAN_API_BASE_URL", DEFAULT_API_BASE_URL).rstrip("/"),
            api_timeout=timeout,
            log_level=env.get("TASKMAN_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
            server_name=env.get("TASKMAN_MCP_SERVER_NAME", DEFAULT_SERVER_NAME),
            server_version=env.get("TASKMAN_MCP_SERVER_VERSION", DEFAULT_SERVER_VERSION),
            transport=transport,
            http_host=env.get("TASKMAN_MCP_HTTP_HOST", DEFAULT_HTTP_HOST),
            http_port=port,
        )


def setup_logging(level: int | str = logging.INFO) -> None:
    """Configure root logging to stderr.

    stdout is reserved for the MCP stdio protocol, so nothing may log there.
    """
    if isinstance(level, str):
        level = parse_log_level(level)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )
