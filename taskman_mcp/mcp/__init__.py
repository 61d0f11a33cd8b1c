"""MCP server wiring for taskman."""
