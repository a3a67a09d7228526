"""Plugin boundary: UI events in, selection status out.

The UI panel sends one ``CREATE_SHIMMER`` message carrying the user's two
options, and listens for ``SELECTION_CHANGE`` messages to enable its
trigger button. Selection problems are reported before any document work
starts; any other failure ends the session with a single generic notice.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from text_shimmer.config import Config, PlacementMode
from text_shimmer.exceptions import (
    EmptySelectionError,
    MultipleSelectionError,
    NonTextSelectionError,
    SelectionError,
)
from text_shimmer.scene.host import CURRENT_PAGE_CHANGE, SELECTION_CHANGE, SceneHost
from text_shimmer.scene.nodes import TextNode
from text_shimmer.shimmer.pipeline import ShimmerBuilder, ShimmerOptions, ShimmerResult

logger = logging.getLogger(__name__)

CREATE_SHIMMER = "CREATE_SHIMMER"
SELECTION_CHANGE_EVENT = "SELECTION_CHANGE"
GENERIC_FAILURE = "Error creating shimmer effect"

Emitter = Callable[[str, dict[str, Any]], None]


@dataclass(frozen=True)
class CreateShimmerRequest:
    auto_font_weight: bool = True
    replace_text: bool = False

    @classmethod
    def from_payload(cls, payload: Any) -> CreateShimmerRequest:
        """Accept the object payload or the older bare ``autoFontWeight`` flag."""
        if isinstance(payload, bool):
            return cls(auto_font_weight=payload)
        if not isinstance(payload, dict):
            raise TypeError(f"Unsupported {CREATE_SHIMMER} payload: {payload!r}")
        return cls(
            auto_font_weight=bool(payload.get("autoFontWeight", True)),
            replace_text=bool(payload.get("replaceText", False)),
        )

    def to_dict(self) -> dict[str, bool]:
        return {"autoFontWeight": self.auto_font_weight, "replaceText": self.replace_text}


@dataclass(frozen=True)
class SelectionStatus:
    has_valid_selection: bool
    selection_count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "hasValidSelection": self.has_valid_selection,
            "selectionCount": self.selection_count,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SelectionStatus:
        return cls(bool(data["hasValidSelection"]), int(data["selectionCount"]))


class ShimmerPlugin:
    """One plugin session against a host.

    Args:
        host: Document host.
        config: Placement and font settings; defaults when omitted.
        emit: Receives ``(event_name, payload)`` for messages to the UI.
            Messages are collected in :attr:`outbox` when omitted.
    """

    def __init__(
        self,
        host: SceneHost,
        config: Config | None = None,
        emit: Emitter | None = None,
    ) -> None:
        self.host = host
        self.config = config or Config()
        self.outbox: list[tuple[str, dict[str, Any]]] = []
        self._emit = emit or (lambda name, payload: self.outbox.append((name, payload)))
        self.builder = ShimmerBuilder(host, self.config)
        self.results: list[ShimmerResult] = []

    @property
    def single_selection(self) -> bool:
        return self.config.placement.mode is PlacementMode.PAGE

    def start(self) -> None:
        self.host.on(SELECTION_CHANGE, self.publish_selection)
        self.host.on(CURRENT_PAGE_CHANGE, self.publish_selection)
        self.publish_selection()

    def selection_status(self) -> SelectionStatus:
        selection = self.host.selection
        texts = [n for n in selection if isinstance(n, TextNode)]
        valid = bool(selection) and len(texts) == len(selection)
        if self.single_selection:
            valid = valid and len(selection) == 1
        return SelectionStatus(valid, len(texts))

    def publish_selection(self) -> None:
        self._emit(SELECTION_CHANGE_EVENT, self.selection_status().to_dict())

    def validate_selection(self) -> list[TextNode]:
        selection = self.host.selection
        if not selection:
            raise EmptySelectionError()
        others = [n for n in selection if not isinstance(n, TextNode)]
        if others:
            raise NonTextSelectionError(sorted({n.type.value for n in others}))
        if self.single_selection and len(selection) > 1:
            raise MultipleSelectionError(len(selection))
        return list(selection)  # type: ignore[arg-type]

    async def handle_message(self, name: str, payload: Any) -> None:
        if name != CREATE_SHIMMER:
            logger.warning("Ignoring unknown message %r", name)
            return
        await self.handle_create(CreateShimmerRequest.from_payload(payload))

    async def handle_create(self, request: CreateShimmerRequest) -> list[ShimmerResult]:
        """Run the shimmer pipeline over the selection and end the session."""
        try:
            texts = self.validate_selection()
        except SelectionError as e:
            self.host.notify(e.message, error=True)
            return []

        options = ShimmerOptions(
            auto_font_weight=request.auto_font_weight,
            replace_text=request.replace_text,
        )
        results = []
        try:
            for text in texts:
                results.append(await self.builder.build(text, options))
        except Exception:
            logger.exception("Shimmer generation failed")
            self.host.notify(GENERIC_FAILURE, error=True)
            self.host.close()
            return results

        self.results.extend(results)
        self.host.notify(f"Created shimmer effect for {len(results)} text node(s)")
        self.host.close()
        return results
