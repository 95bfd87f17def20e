"""Command-line interface for skunk."""
