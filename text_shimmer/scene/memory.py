"""In-memory implementation of the scene host."""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from text_shimmer.exceptions import FontLoadError, FontNotLoadedError, HostError
from text_shimmer.fonts.catalog import FontCatalog
from text_shimmer.fonts.outlines import GlyphOutliner
from text_shimmer.scene.host import CURRENT_PAGE_CHANGE, SELECTION_CHANGE
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

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notification:
    message: str
    error: bool = False


def _rect_path(width: float, height: float) -> str:
    return f"M 0 0 L {width:g} 0 L {width:g} {height:g} L 0 {height:g} Z"


class MemoryHost:
    """A complete host backed by a :class:`DocumentNode` held in memory.

    Args:
        document: Document to operate on; a one-page document by default.
        fonts: Faces that :meth:`load_font` accepts.
        outliner: Produces real glyph outlines in :meth:`flatten`; without
            one, text flattens to its bounding rectangle.
        font_load_delay: Seconds each font load waits, to exercise
            suspension points.
    """

    def __init__(
        self,
        document: DocumentNode | None = None,
        fonts: FontCatalog | None = None,
        outliner: GlyphOutliner | None = None,
        font_load_delay: float = 0.0,
    ) -> None:
        self._document = document or DocumentNode.with_page()
        if not self._document.pages:
            raise HostError("Document has no pages")
        self._current_page = self._document.pages[0]
        self.fonts = fonts if fonts is not None else FontCatalog()
        self.outliner = outliner
        self.font_load_delay = font_load_delay
        self.loaded_fonts: set[FontName] = set()
        self.notifications: list[Notification] = []
        self.viewport: list[SceneNode] = []
        self.closed = False
        self._listeners: dict[str, list[Callable[[], None]]] = defaultdict(list)
        self._reaction_write_pending = False

    @property
    def document(self) -> DocumentNode:
        return self._document

    @property
    def current_page(self) -> PageNode:
        return self._current_page

    def set_current_page(self, page: PageNode) -> None:
        page.ensure_alive()
        if page.parent is not self._document:
            raise HostError(f"{page!r} does not belong to this document")
        if page is not self._current_page:
            self._current_page = page
            self._fire(CURRENT_PAGE_CHANGE)

    @property
    def selection(self) -> list[BaseNode]:
        return [n for n in self._current_page.selection if not n.removed]

    def set_selection(self, nodes: Sequence[BaseNode]) -> None:
        for node in nodes:
            node.ensure_alive()
            if node.page is not self._current_page:
                raise HostError(f"{node!r} is not on the current page")
        self._current_page.selection = list(nodes)
        self._fire(SELECTION_CHANGE)

    async def load_font(self, font: FontName) -> None:
        await asyncio.sleep(self.font_load_delay)
        if font not in self.fonts:
            raise FontLoadError(font.family, font.style)
        self.loaded_fonts.add(font)

    def _require_fonts(self, text: TextNode) -> None:
        for font in text.all_font_names():
            if font not in self.loaded_fonts:
                raise FontNotLoadedError(font.family, font.style)

    def set_font(self, text: TextNode, font: FontName, weight: int) -> None:
        text.ensure_alive()
        if font not in self.loaded_fonts:
            raise FontNotLoadedError(font.family, font.style)
        text.font_name = font
        text.font_weight = weight
        text.segment_fonts = []
        if self.outliner is not None:
            # heavier faces are wider; text boxes auto-size horizontally
            width = self.outliner.measure(text.characters, font, text.font_size)
            if width:
                text.width = width

    def create_page(self) -> PageNode:
        page = PageNode()
        self._document.append_child(page)
        return page

    def _create(self, node: SceneNode) -> SceneNode:
        self._current_page.append_child(node)
        return node

    def create_rectangle(self) -> RectangleNode:
        node = RectangleNode()
        self._create(node)
        return node

    def create_frame(self) -> FrameNode:
        node = FrameNode()
        self._create(node)
        return node

    def create_component(self) -> ComponentNode:
        node = ComponentNode()
        self._create(node)
        return node

    def flatten(self, nodes: Sequence[SceneNode]) -> VectorNode:
        if not nodes:
            raise HostError("flatten() needs at least one node")
        parent = nodes[0].parent
        for node in nodes:
            node.ensure_alive()
            if node.parent is not parent:
                raise HostError("flatten() nodes must share a parent")
            if isinstance(node, TextNode):
                self._require_fonts(node)
        if parent is None:
            raise HostError("flatten() nodes must be attached to the document")

        left = min(n.x for n in nodes)
        top = min(n.y for n in nodes)
        right = max(n.x + n.width for n in nodes)
        bottom = max(n.y + n.height for n in nodes)

        paths = []
        for node in nodes:
            path = None
            if isinstance(node, TextNode) and self.outliner is not None:
                path = self.outliner.outline(node)
            elif isinstance(node, VectorNode):
                path = node.path_data
            paths.append(path or _rect_path(node.width, node.height))

        vector = VectorNode(path_data=" ".join(paths))
        vector.x, vector.y = left, top
        vector.resize(right - left, bottom - top)
        vector.fills = list(nodes[0].fills)

        index = parent.children.index(nodes[0])  # type: ignore[attr-defined]
        for node in nodes:
            node.remove()
        parent.insert_child(index, vector)  # type: ignore[attr-defined]
        return vector

    def combine_as_variants(
        self, components: Sequence[ComponentNode], parent: PageNode | FrameNode
    ) -> ComponentSetNode:
        if not components:
            raise HostError("combine_as_variants() needs at least one component")
        for component in components:
            component.ensure_alive()
            if not isinstance(component, ComponentNode):
                raise HostError(f"{component!r} is not a component")

        left = min(c.x for c in components)
        top = min(c.y for c in components)
        right = max(c.x + c.width for c in components)
        bottom = max(c.y + c.height for c in components)

        component_set = ComponentSetNode()
        component_set.fills = []
        component_set.x, component_set.y = left, top
        component_set.resize(right - left, bottom - top)
        parent.append_child(component_set)
        for component in components:
            component_set.append_child(component)
            component.x -= left
            component.y -= top
        return component_set

    async def set_reactions(self, node: ComponentNode, reactions: Sequence[Reaction]) -> None:
        node.ensure_alive()
        if self._reaction_write_pending:
            raise HostError("Another reaction write is still in progress")
        for reaction in reactions:
            for action in reaction.actions:
                if self._document.find_by_id(action.destination_id) is None:
                    raise HostError(f"Unknown reaction destination {action.destination_id}")
        self._reaction_write_pending = True
        try:
            await asyncio.sleep(0)
            node.reactions = list(reactions)
        finally:
            self._reaction_write_pending = False

    def notify(self, message: str, *, error: bool = False) -> None:
        log = logger.error if error else logger.info
        log("notify: %s", message)
        self.notifications.append(Notification(message, error))

    def scroll_into_view(self, nodes: Sequence[SceneNode]) -> None:
        self.viewport = list(nodes)

    def on(self, event: str, handler: Callable[[], None]) -> None:
        self._listeners[event].append(handler)

    def _fire(self, event: str) -> None:
        for handler in list(self._listeners[event]):
            handler()

    def close(self) -> None:
        self.closed = True
