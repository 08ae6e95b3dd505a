"""Command-line presentation."""
