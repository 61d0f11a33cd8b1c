"""Command-line interface for taskman-mcp."""
