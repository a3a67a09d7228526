"""JSON persistence for documents.

Documents are stored as a versioned JSON object holding the node tree and
the list of font faces the document's host can load::

    {
      "version": 1,
      "fonts": ["Inter:Regular", "Inter:Bold"],
      "document": {"id": "0:1", "type": "DOCUMENT", "children": [...]}
    }

Keys use the camelCase names of the host API so files can be exchanged with
plugin tooling.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from text_shimmer.exceptions import DocumentFormatError
from text_shimmer.scene.nodes import (
    MIXED,
    Action,
    BaseNode,
    ChildrenMixin,
    Color,
    ComponentNode,
    ComponentSetNode,
    DocumentNode,
    FontName,
    FrameNode,
    GradientStop,
    InstanceNode,
    LinearGradientPaint,
    NodeType,
    PageNode,
    Paint,
    Reaction,
    RectangleNode,
    SceneNode,
    SolidPaint,
    TextNode,
    Transition,
    Trigger,
    VectorNode,
    reserve_node_ids,
)

if TYPE_CHECKING:
    from text_shimmer.fonts.outlines import GlyphOutliner

FORMAT_VERSION = 1

_NODE_CLASSES: dict[str, type[BaseNode]] = {
    NodeType.DOCUMENT.value: DocumentNode,
    NodeType.PAGE.value: PageNode,
    NodeType.TEXT.value: TextNode,
    NodeType.VECTOR.value: VectorNode,
    NodeType.RECTANGLE.value: RectangleNode,
    NodeType.FRAME.value: FrameNode,
    NodeType.COMPONENT.value: ComponentNode,
    NodeType.COMPONENT_SET.value: ComponentSetNode,
    NodeType.INSTANCE.value: InstanceNode,
}


@dataclass
class LoadedDocument:
    document: DocumentNode
    fonts: list[FontName] = field(default_factory=list)


def _color_to_dict(color: Color) -> dict[str, float]:
    return {"r": color.r, "g": color.g, "b": color.b, "a": color.a}


def _color_from_dict(data: dict[str, Any]) -> Color:
    return Color(data["r"], data["g"], data["b"], data.get("a", 1.0))


def paint_to_dict(paint: Paint) -> dict[str, Any]:
    if isinstance(paint, SolidPaint):
        return {
            "type": paint.type,
            "color": _color_to_dict(paint.color),
            "opacity": paint.opacity,
        }
    return {
        "type": paint.type,
        "gradientStops": [
            {"position": s.position, "color": _color_to_dict(s.color)} for s in paint.stops
        ],
        "gradientTransform": [list(row) for row in paint.transform],
    }


def paint_from_dict(data: dict[str, Any]) -> Paint:
    kind = data.get("type")
    if kind == SolidPaint.type:
        return SolidPaint(_color_from_dict(data["color"]), data.get("opacity", 1.0))
    if kind == LinearGradientPaint.type:
        stops = tuple(
            GradientStop(s["position"], _color_from_dict(s["color"]))
            for s in data["gradientStops"]
        )
        transform = data.get("gradientTransform")
        if transform is None:
            return LinearGradientPaint(stops)
        return LinearGradientPaint(stops, tuple(tuple(row) for row in transform))  # type: ignore[arg-type]
    raise DocumentFormatError(f"Unsupported paint type: {kind}")


def reaction_to_dict(reaction: Reaction) -> dict[str, Any]:
    return {
        "trigger": {"type": reaction.trigger.type, "timeout": reaction.trigger.timeout},
        "actions": [
            {
                "type": action.type,
                "destinationId": action.destination_id,
                "navigation": action.navigation,
                "transition": None
                if action.transition is None
                else {
                    "type": action.transition.type,
                    "duration": action.transition.duration,
                    "easing": {"type": action.transition.easing},
                },
            }
            for action in reaction.actions
        ],
    }


def reaction_from_dict(data: dict[str, Any]) -> Reaction:
    actions = []
    for item in data.get("actions", []):
        transition = item.get("transition")
        actions.append(
            Action(
                destination_id=item["destinationId"],
                navigation=item.get("navigation", "CHANGE_TO"),
                transition=None
                if transition is None
                else Transition(
                    transition["type"],
                    transition["duration"],
                    transition.get("easing", {}).get("type", "LINEAR"),
                ),
            )
        )
    trigger = data["trigger"]
    return Reaction(Trigger(trigger["type"], trigger.get("timeout")), tuple(actions))


def _font_to_json(font: FontName | object) -> Any:
    if isinstance(font, FontName):
        return {"family": font.family, "style": font.style}
    return "MIXED"


def node_to_dict(node: BaseNode) -> dict[str, Any]:
    data: dict[str, Any] = {"id": node.id, "type": node.type.value, "name": node.name}

    if isinstance(node, SceneNode):
        data.update(
            x=node.x,
            y=node.y,
            width=node.width,
            height=node.height,
            visible=node.visible,
            opacity=node.opacity,
            isMask=node.is_mask,
            fills=[paint_to_dict(p) for p in node.fills],
            strokes=[paint_to_dict(p) for p in node.strokes],
            strokeWeight=node.stroke_weight,
            dashPattern=list(node.dash_pattern),
        )
    if isinstance(node, TextNode):
        data.update(
            characters=node.characters,
            fontName=_font_to_json(node.font_name),
            fontSize=node.font_size,
            fontWeight="MIXED" if node.font_weight is MIXED else node.font_weight,
            segmentFonts=[_font_to_json(f) for f in node.segment_fonts],
        )
    elif isinstance(node, VectorNode):
        data["pathData"] = node.path_data
    if isinstance(node, FrameNode):
        data["clipsContent"] = node.clips_content
    if isinstance(node, ComponentNode):
        data["reactions"] = [reaction_to_dict(r) for r in node.reactions]
    if isinstance(node, InstanceNode):
        data["mainComponent"] = node.main_component.id if node.main_component else None
    if isinstance(node, PageNode):
        data["selection"] = [n.id for n in node.selection if not n.removed]
    if isinstance(node, ChildrenMixin):
        data["children"] = [node_to_dict(child) for child in node.children]
    return data


def _font_from_json(value: Any) -> Any:
    if value == "MIXED":
        return MIXED
    return FontName(value["family"], value["style"])


def _node_from_dict(data: dict[str, Any], pending: list[tuple[InstanceNode, str]]) -> BaseNode:
    try:
        cls = _NODE_CLASSES[data["type"]]
    except KeyError:
        raise DocumentFormatError(f"Unknown node type: {data.get('type')}") from None

    node = cls()
    node.id = data["id"]
    node.name = data.get("name", node.name)

    if isinstance(node, SceneNode):
        node.x = data.get("x", 0.0)
        node.y = data.get("y", 0.0)
        node.width = data.get("width", node.width)
        node.height = data.get("height", node.height)
        node.visible = data.get("visible", True)
        node.opacity = data.get("opacity", 1.0)
        node.is_mask = data.get("isMask", False)
        node.fills = [paint_from_dict(p) for p in data.get("fills", [])]
        node.strokes = [paint_from_dict(p) for p in data.get("strokes", [])]
        node.stroke_weight = data.get("strokeWeight", 1.0)
        node.dash_pattern = list(data.get("dashPattern", []))
    if isinstance(node, TextNode):
        node.characters = data.get("characters", "")
        node.font_name = _font_from_json(data.get("fontName", {"family": "Inter", "style": "Regular"}))
        node.font_size = data.get("fontSize", 16.0)
        weight = data.get("fontWeight", 400)
        node.font_weight = MIXED if weight == "MIXED" else int(weight)
        node.segment_fonts = [_font_from_json(f) for f in data.get("segmentFonts", [])]
    elif isinstance(node, VectorNode):
        node.path_data = data.get("pathData", "")
    if isinstance(node, FrameNode):
        node.clips_content = data.get("clipsContent", True)
    if isinstance(node, ComponentNode):
        node.reactions = [reaction_from_dict(r) for r in data.get("reactions", [])]
    if isinstance(node, InstanceNode) and data.get("mainComponent"):
        pending.append((node, data["mainComponent"]))
    if isinstance(node, ChildrenMixin):
        for child_data in data.get("children", []):
            node.append_child(_node_from_dict(child_data, pending))
    return node


def document_to_dict(document: DocumentNode, fonts: Iterable[FontName] = ()) -> dict[str, Any]:
    return {
        "version": FORMAT_VERSION,
        "fonts": [f"{f.family}:{f.style}" for f in fonts],
        "document": node_to_dict(document),
    }


def document_from_dict(data: dict[str, Any]) -> LoadedDocument:
    if data.get("version") != FORMAT_VERSION:
        raise DocumentFormatError(
            f"Unsupported document version: {data.get('version')}",
            details={"expected": FORMAT_VERSION},
        )
    pending: list[tuple[InstanceNode, str]] = []
    document = _node_from_dict(data["document"], pending)
    if not isinstance(document, DocumentNode):
        raise DocumentFormatError("Top-level node must be a DOCUMENT")

    by_id = {n.id: n for n in document.find_all()}
    reserve_node_ids([document.id, *by_id])
    for instance, main_id in pending:
        main = by_id.get(main_id)
        if not isinstance(main, ComponentNode):
            raise DocumentFormatError(f"Instance {instance.id} points at missing component {main_id}")
        instance.main_component = main

    for page_data, page in zip(data["document"].get("children", []), document.children):
        if isinstance(page, PageNode):
            page.selection = [by_id[i] for i in page_data.get("selection", []) if i in by_id]

    fonts = [FontName.parse(spec) for spec in data.get("fonts", [])]
    return LoadedDocument(document, fonts)


def load_document(path: Path, outliner: GlyphOutliner | None = None) -> LoadedDocument:
    """Load a ``.json`` document, or import the text of an ``.svg`` file."""
    if path.suffix.lower() == ".svg":
        from text_shimmer.svg.importer import import_svg

        return import_svg(path, outliner=outliner)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise DocumentFormatError(f"Invalid JSON in {path}: {e}") from e
    return document_from_dict(data)


def save_document(path: Path, document: DocumentNode, fonts: Iterable[FontName] = ()) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(document_to_dict(document, fonts), indent=2), encoding="utf-8")
