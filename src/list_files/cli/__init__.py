"""Command-line interface for list-files."""
