"""Client for the taskman REST API."""

from taskman_mcp.client.api import API_PREFIX, HEALTH_PATH, APIClient, TaskmanAPI

__all__ = ["API_PREFIX", "HEALTH_PATH", "APIClient", "TaskmanAPI"]
