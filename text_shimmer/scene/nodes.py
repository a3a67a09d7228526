"""In-memory scene graph used by the shimmer pipeline.

The node classes mirror the subset of a design document the pipeline
touches: pages, text, vectors, rectangles, frames and components. Node
coordinates are always local to the parent node; pages and the document
root carry no geometry.

Paints, fonts and prototype reactions are immutable value objects so they
can be shared between a node and its clones.
"""

from __future__ import annotations

import copy
import itertools
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Union

from text_shimmer.exceptions import HostError, NodeRemovedError

_id_counter = itertools.count(1)


def next_node_id() -> str:
    return f"{next(_id_counter)}:1"


def reserve_node_ids(node_ids: list[str]) -> None:
    """Advance the id counter past every numeric id in *node_ids*."""
    global _id_counter
    highest = 0
    for node_id in node_ids:
        head = node_id.split(":", 1)[0]
        if head.isdigit():
            highest = max(highest, int(head))
    current = next(_id_counter)
    _id_counter = itertools.count(max(current, highest + 1))


class NodeType(str, Enum):
    DOCUMENT = "DOCUMENT"
    PAGE = "PAGE"
    TEXT = "TEXT"
    VECTOR = "VECTOR"
    RECTANGLE = "RECTANGLE"
    FRAME = "FRAME"
    COMPONENT = "COMPONENT"
    COMPONENT_SET = "COMPONENT_SET"
    INSTANCE = "INSTANCE"


class _Mixed:
    """Marker for a property that differs across a text run."""

    _instance: ClassVar[_Mixed | None] = None

    def __new__(cls) -> _Mixed:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MIXED"

    def __copy__(self) -> _Mixed:
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> _Mixed:
        return self


MIXED = _Mixed()


@dataclass(frozen=True)
class FontName:
    family: str
    style: str

    def __str__(self) -> str:
        return f"{self.family} {self.style}"

    @classmethod
    def parse(cls, spec: str) -> FontName:
        """Parse ``"Family:Style"``; a missing style means ``Regular``."""
        family, _, style = spec.partition(":")
        return cls(family.strip(), style.strip() or "Regular")


@dataclass(frozen=True)
class Color:
    r: float
    g: float
    b: float
    a: float = 1.0

    @classmethod
    def from_hex(cls, value: str) -> Color:
        value = value.lstrip("#")
        if len(value) not in (6, 8):
            raise ValueError(f"Invalid hex color: #{value}")
        channels = [int(value[i : i + 2], 16) / 255 for i in range(0, len(value), 2)]
        return cls(*channels)

    def to_hex(self) -> str:
        return "#" + "".join(f"{round(c * 255):02X}" for c in (self.r, self.g, self.b))


@dataclass(frozen=True)
class SolidPaint:
    color: Color
    opacity: float = 1.0
    type: ClassVar[str] = "SOLID"


@dataclass(frozen=True)
class GradientStop:
    position: float
    color: Color


IDENTITY_TRANSFORM = ((1.0, 0.0, 0.0), (0.0, 1.0, 0.0))


@dataclass(frozen=True)
class LinearGradientPaint:
    stops: tuple[GradientStop, ...]
    transform: tuple[tuple[float, float, float], tuple[float, float, float]] = (
        IDENTITY_TRANSFORM
    )
    type: ClassVar[str] = "GRADIENT_LINEAR"


Paint = Union[SolidPaint, LinearGradientPaint]


@dataclass(frozen=True)
class Trigger:
    type: str
    timeout: float | None = None


@dataclass(frozen=True)
class Transition:
    type: str
    duration: float
    easing: str


@dataclass(frozen=True)
class Action:
    destination_id: str
    navigation: str = "CHANGE_TO"
    transition: Transition | None = None
    type: ClassVar[str] = "NODE"


@dataclass(frozen=True)
class Reaction:
    trigger: Trigger
    actions: tuple[Action, ...]


class BaseNode:
    """Identity, naming and tree membership shared by every node."""

    type: ClassVar[NodeType]
    _list_attrs: ClassVar[tuple[str, ...]] = ()

    def __init__(self, name: str = "") -> None:
        self.id = next_node_id()
        self.name = name or self.type.value.replace("_", " ").title()
        self.parent: BaseNode | None = None
        self._removed = False

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.id} {self.name!r}>"

    @property
    def removed(self) -> bool:
        return self._removed

    def ensure_alive(self) -> None:
        if self._removed:
            raise NodeRemovedError(self.id, self.name)

    def remove(self) -> None:
        """Detach the node and everything beneath it from the document."""
        self.ensure_alive()
        if self.parent is not None:
            self.parent.children.remove(self)  # type: ignore[attr-defined]
            self.parent = None
        self._mark_removed()

    def _mark_removed(self) -> None:
        self._removed = True

    def clone(self) -> BaseNode:
        """Duplicate the subtree and insert the copy right after the original."""
        self.ensure_alive()
        dup = self._duplicate()
        if self.parent is not None:
            index = self.parent.children.index(self)  # type: ignore[attr-defined]
            self.parent.insert_child(index + 1, dup)  # type: ignore[attr-defined]
        return dup

    def _duplicate(self) -> BaseNode:
        dup = copy.copy(self)
        dup.id = next_node_id()
        dup.parent = None
        dup._removed = False
        for attr in self._list_attrs:
            setattr(dup, attr, list(getattr(self, attr)))
        return dup

    @property
    def page(self) -> PageNode | None:
        node: BaseNode | None = self
        while node is not None and not isinstance(node, PageNode):
            node = node.parent
        return node

    def ancestors(self) -> Iterator[BaseNode]:
        node = self.parent
        while node is not None:
            yield node
            node = node.parent


class ChildrenMixin:
    """Ordered children; list order is rendering order, first at the back."""

    children: list[BaseNode]

    def _init_children(self) -> None:
        self.children = []

    def append_child(self, child: BaseNode) -> None:
        self.insert_child(len(self.children), child)

    def insert_child(self, index: int, child: BaseNode) -> None:
        self.ensure_alive()  # type: ignore[attr-defined]
        child.ensure_alive()
        if child is self or child in list(self.ancestors()):  # type: ignore[attr-defined]
            raise HostError(f"Cannot insert {child!r} into its own subtree")
        if child.parent is not None:
            old_parent = child.parent
            old_index = old_parent.children.index(child)  # type: ignore[attr-defined]
            old_parent.children.remove(child)  # type: ignore[attr-defined]
            if old_parent is self and old_index < index:
                index -= 1
        child.parent = self  # type: ignore[assignment]
        self.children.insert(index, child)

    def find_child(self, name: str) -> BaseNode | None:
        return next((c for c in self.children if c.name == name), None)

    def find_all(self, predicate: Any = None) -> list[BaseNode]:
        """Depth-first list of descendants matching *predicate*."""
        found = []
        for child in self.children:
            if predicate is None or predicate(child):
                found.append(child)
            if isinstance(child, ChildrenMixin):
                found.extend(child.find_all(predicate))
        return found

    def descendant_path(self, node: BaseNode) -> tuple[int, ...]:
        """Child indices leading from this node down to *node*."""
        path: list[int] = []
        current = node
        while current is not self:
            parent = current.parent
            if parent is None:
                raise HostError(f"{node!r} is not a descendant of {self!r}")
            path.append(parent.children.index(current))  # type: ignore[attr-defined]
            current = parent
        return tuple(reversed(path))

    def at_path(self, path: tuple[int, ...]) -> BaseNode:
        node: Any = self
        for index in path:
            node = node.children[index]
        return node

    def _mark_removed(self) -> None:
        super()._mark_removed()  # type: ignore[misc]
        for child in self.children:
            child._mark_removed()

    def _duplicate(self) -> BaseNode:
        dup = super()._duplicate()  # type: ignore[misc]
        dup.children = []
        for child in self.children:
            copied = child._duplicate()
            copied.parent = dup
            dup.children.append(copied)
        return dup


class SceneNode(BaseNode):
    """A node with geometry and paints."""

    _list_attrs = ("fills", "strokes", "dash_pattern")

    def __init__(self, name: str = "") -> None:
        super().__init__(name)
        self.x = 0.0
        self.y = 0.0
        self.width = 100.0
        self.height = 100.0
        self.visible = True
        self.opacity = 1.0
        self.is_mask = False
        self.fills: list[Paint] = []
        self.strokes: list[Paint] = []
        self.stroke_weight = 1.0
        self.dash_pattern: list[float] = []

    def resize(self, width: float, height: float) -> None:
        self.ensure_alive()
        if width < 0.01 or height < 0.01:
            raise HostError(f"Size must be at least 0.01, got {width}x{height}")
        self.width = float(width)
        self.height = float(height)

    def absolute_position(self) -> tuple[float, float]:
        x, y = self.x, self.y
        for ancestor in self.ancestors():
            if isinstance(ancestor, SceneNode):
                x += ancestor.x
                y += ancestor.y
        return x, y

    @property
    def bounds(self) -> tuple[float, float, float, float]:
        """(left, top, right, bottom) in parent coordinates."""
        return self.x, self.y, self.x + self.width, self.y + self.height


class DocumentNode(ChildrenMixin, BaseNode):
    type = NodeType.DOCUMENT

    def __init__(self, name: str = "Document") -> None:
        super().__init__(name)
        self._init_children()

    @classmethod
    def with_page(cls, page_name: str = "Page 1") -> DocumentNode:
        document = cls()
        document.append_child(PageNode(page_name))
        return document

    @property
    def pages(self) -> list[PageNode]:
        return [c for c in self.children if isinstance(c, PageNode)]

    def find_by_id(self, node_id: str) -> BaseNode | None:
        return next((n for n in self.find_all() if n.id == node_id), None)


class PageNode(ChildrenMixin, BaseNode):
    type = NodeType.PAGE

    def __init__(self, name: str = "") -> None:
        super().__init__(name)
        self._init_children()
        self.selection: list[BaseNode] = []

    def _duplicate(self) -> BaseNode:
        dup = super()._duplicate()
        dup.selection = []  # type: ignore[attr-defined]
        return dup


class TextNode(SceneNode):
    type = NodeType.TEXT
    _list_attrs = SceneNode._list_attrs + ("segment_fonts",)

    def __init__(
        self,
        characters: str = "",
        font_name: FontName | _Mixed = FontName("Inter", "Regular"),
        font_size: float = 16.0,
        font_weight: int | _Mixed = 400,
        name: str = "",
    ) -> None:
        super().__init__(name or characters[:40] or "Text")
        self.characters = characters
        self.font_name = font_name
        self.font_size = font_size
        self.font_weight = font_weight
        # Faces used by each styled run when font_name is MIXED.
        self.segment_fonts: list[FontName] = []
        self.fills = [SolidPaint(Color(0, 0, 0))]

    def all_font_names(self) -> list[FontName]:
        if isinstance(self.font_name, FontName):
            return [self.font_name]
        seen: list[FontName] = []
        for font in self.segment_fonts:
            if font not in seen:
                seen.append(font)
        return seen


class VectorNode(SceneNode):
    type = NodeType.VECTOR

    def __init__(self, name: str = "", path_data: str = "") -> None:
        super().__init__(name)
        self.path_data = path_data


class RectangleNode(SceneNode):
    type = NodeType.RECTANGLE


class FrameNode(ChildrenMixin, SceneNode):
    type = NodeType.FRAME

    def __init__(self, name: str = "") -> None:
        super().__init__(name)
        self._init_children()
        self.clips_content = True
        self.fills = [SolidPaint(Color(1, 1, 1))]


class ComponentNode(FrameNode):
    type = NodeType.COMPONENT
    _list_attrs = FrameNode._list_attrs + ("reactions",)

    def __init__(self, name: str = "") -> None:
        super().__init__(name)
        self.fills = []
        self.reactions: list[Reaction] = []

    def create_instance(self) -> InstanceNode:
        """Build an instance mirroring this component's subtree."""
        self.ensure_alive()
        instance = InstanceNode(self)
        instance.name = self.name
        instance.resize(self.width, self.height)
        instance.fills = list(self.fills)
        instance.clips_content = self.clips_content
        for child in self.children:
            copied = child._duplicate()
            copied.parent = instance
            instance.children.append(copied)
        return instance


class ComponentSetNode(FrameNode):
    type = NodeType.COMPONENT_SET

    @property
    def variants(self) -> list[ComponentNode]:
        return [c for c in self.children if isinstance(c, ComponentNode)]


class InstanceNode(FrameNode):
    type = NodeType.INSTANCE

    def __init__(self, main_component: ComponentNode | None = None) -> None:
        super().__init__("Instance")
        self.fills = []
        self.main_component = main_component
