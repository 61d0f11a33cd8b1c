"""taskman-mcp - Model Context Protocol adapter for the taskman REST API."""

__version__ = "1.0.0"
