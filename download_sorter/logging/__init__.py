"""Logging setup and the JSON Lines failure log."""
