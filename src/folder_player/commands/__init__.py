"""Command handlers for the interactive prompt."""
