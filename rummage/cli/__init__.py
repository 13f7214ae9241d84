"""Command-line interface for rummage."""
