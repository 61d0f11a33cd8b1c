"""Fetch policies shared by resource aggregators and tools.

A primary fetch is the record an operation is about; its failure aborts the
operation. A secondary fetch only enriches the output; its failure is logged
and replaced by a default value.
"""

import logging
from collections.abc import Awaitable, Callable
from datetime import datetime
from typing import TypeVar

from taskman_mcp.client.api import TaskmanAPI
from taskman_mcp.exceptions import DecodeError, OperationError, TaskmanError
from taskman_mcp.metrics import MetricsSink, NullMetrics
from taskman_mcp.utils.dates import utcnow

logger = logging.getLogger(__name__)

T = TypeVar("T")

Clock = Callable[[], datetime]


async def fetch_primary(operation: str, fetch: Awaitable[T]) -> T:
    """Await a required fetch.

    Args:
        operation: What is being fetched, e.g. "get task". Used as the
            error prefix.
        fetch: The awaitable performing the request.

    Returns:
        The fetched value.

    Raises:
        DecodeError: If the payload could not be parsed.
        OperationError: If the request failed.
    """
    try:
        return await fetch
    except DecodeError as e:
        logger.error("Failed to %s: %s", operation, e)
        raise
    except TaskmanError as e:
        logger.error("Failed to %s: %s", operation, e)
        raise OperationError(operation, e) from e


async def fetch_secondary(operation: str, fetch: Awaitable[T], default: T) -> T:
    """Await an optional fetch, degrading to ``default`` on failure."""
    try:
        return await fetch
    except TaskmanError as e:
        logger.warning("Failed to %s, continuing without it: %s", operation, e)
        return default


class ResourceHandler:
    """Base for aggregators holding the API client, metrics sink and clock."""

    def __init__(
        self,
        client: TaskmanAPI,
        metrics: MetricsSink | None = None,
        clock: Clock = utcnow,
    ) -> None:
        """Initialize the handler.

        Args:
            client: API client used for all fetches.
            metrics: Sink receiving one ``resource_access`` count per read.
            clock: Returns the instant reports are evaluated against.
        """
        self.client = client
        self.metrics = metrics or NullMetrics()
        self.clock = clock

    def _accessed(self, resource: str) -> None:
        self.metrics.increment("resource_access", resource=resource)
