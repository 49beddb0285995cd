"""Command-line interface for dedupe assistant."""
