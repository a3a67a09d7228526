"""CLI commands for text-shimmer."""

from text_shimmer.cli.commands.create import create
from text_shimmer.cli.commands.fonts import fonts
from text_shimmer.cli.commands.inspect import inspect_document

__all__ = ["create", "fonts", "inspect_document"]
