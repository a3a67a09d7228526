"""Exception hierarchy for text-shimmer.

All errors raised by the library derive from :class:`ShimmerError` so that
callers can catch a single type at the plugin boundary.
"""

from __future__ import annotations

from typing import Any


class ShimmerError(Exception):
    """Base class for all text-shimmer errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if not self.details:
            return self.message
        extra = ", ".join(f"{k}={v}" for k, v in self.details.items())
        return f"{self.message} ({extra})"


class SelectionError(ShimmerError):
    """The current selection cannot be turned into a shimmer."""


class EmptySelectionError(SelectionError):
    def __init__(self) -> None:
        super().__init__("Please select some text first")


class NonTextSelectionError(SelectionError):
    def __init__(self, node_types: list[str] | None = None) -> None:
        super().__init__(
            "Please select text nodes only",
            details={"types": node_types} if node_types else None,
        )


class MultipleSelectionError(SelectionError):
    def __init__(self, count: int) -> None:
        super().__init__("Please select a single text layer", details={"count": count})


class FontLoadError(ShimmerError):
    """A font face could not be loaded by the host."""

    def __init__(self, family: str, style: str) -> None:
        super().__init__(
            f"Font not available: {family} {style}",
            details={"family": family, "style": style},
        )
        self.family = family
        self.style = style


class FontNotLoadedError(ShimmerError):
    """Text geometry was read or restyled before its font was loaded."""

    def __init__(self, family: str, style: str) -> None:
        super().__init__(
            f"Font must be loaded before use: {family} {style}",
            details={"family": family, "style": style},
        )


class NodeRemovedError(ShimmerError):
    """The node has already been removed from the document."""

    def __init__(self, node_id: str, name: str = "") -> None:
        super().__init__(
            f"Node {node_id} has been removed", details={"name": name} if name else None
        )
        self.node_id = node_id


class HostError(ShimmerError):
    """The host rejected a call."""


class CompositionError(ShimmerError):
    """The shimmer scene could not be assembled."""


class ConfigError(ShimmerError):
    """Invalid configuration file or value."""

    def __init__(self, message: str, key: str | None = None) -> None:
        super().__init__(message, details={"key": key} if key else None)
        self.key = key


class DocumentFormatError(ShimmerError):
    """A document file could not be parsed."""
