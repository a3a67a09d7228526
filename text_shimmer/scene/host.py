"""The host calls the shimmer pipeline depends on.

Every document mutation the pipeline performs goes through an object
satisfying :class:`SceneHost`, which keeps the composition logic independent
of any concrete design tool binding. :class:`~text_shimmer.scene.memory.MemoryHost`
is the in-memory implementation.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Protocol

from text_shimmer.scene.nodes import (
    BaseNode,
    ComponentNode,
    ComponentSetNode,
    DocumentNode,
    FontName,
    FrameNode,
    PageNode,
    Reaction,
    RectangleNode,
    SceneNode,
    TextNode,
    VectorNode,
)

SELECTION_CHANGE = "selectionchange"
CURRENT_PAGE_CHANGE = "currentpagechange"


class SceneHost(Protocol):
    @property
    def document(self) -> DocumentNode: ...

    @property
    def current_page(self) -> PageNode: ...

    def set_current_page(self, page: PageNode) -> None: ...

    @property
    def selection(self) -> list[BaseNode]: ...

    def set_selection(self, nodes: Sequence[BaseNode]) -> None: ...

    async def load_font(self, font: FontName) -> None:
        """Make *font* usable; raises FontLoadError when unavailable."""
        ...

    def set_font(self, text: TextNode, font: FontName, weight: int) -> None:
        """Restyle *text*; the font must have been loaded first."""
        ...

    def create_page(self) -> PageNode: ...

    def create_rectangle(self) -> RectangleNode: ...

    def create_frame(self) -> FrameNode: ...

    def create_component(self) -> ComponentNode: ...

    def flatten(self, nodes: Sequence[SceneNode]) -> VectorNode:
        """Replace *nodes* with a single vector node; the inputs are consumed."""
        ...

    def combine_as_variants(
        self, components: Sequence[ComponentNode], parent: PageNode | FrameNode
    ) -> ComponentSetNode: ...

    async def set_reactions(self, node: ComponentNode, reactions: Sequence[Reaction]) -> None:
        """Replace the prototype reactions of *node*."""
        ...

    def notify(self, message: str, *, error: bool = False) -> None: ...

    def scroll_into_view(self, nodes: Sequence[SceneNode]) -> None: ...

    def on(self, event: str, handler: Callable[[], None]) -> None: ...

    def close(self) -> None: ...
