"""Pure functions rendering API records as markdown reports."""
