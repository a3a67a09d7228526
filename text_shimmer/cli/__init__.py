"""Command-line interface for text-shimmer."""

from text_shimmer.cli.main import cli, main

__all__ = ["cli", "main"]
