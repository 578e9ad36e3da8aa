"""Command-line interface for freight."""
