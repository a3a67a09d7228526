"""Import ``<text>`` elements from an SVG file as text nodes.

Parsing goes through defusedxml so untrusted files cannot trigger entity
expansion or external fetches.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from xml.etree.ElementTree import Element

import defusedxml.ElementTree as ET
from defusedxml import DefusedXmlException

from text_shimmer.exceptions import DocumentFormatError
from text_shimmer.fonts.outlines import GlyphOutliner
from text_shimmer.fonts.resolver import weight_to_style
from text_shimmer.scene.nodes import DocumentNode, FontName, TextNode
from text_shimmer.scene.serialize import LoadedDocument

logger = logging.getLogger(__name__)

SVG_NS = "{http://www.w3.org/2000/svg}"
DEFAULT_FAMILY = "Inter"
DEFAULT_FONT_SIZE = 16.0
LINE_HEIGHT = 1.2
ASCENT = 0.8
# average advance of a Latin glyph, in ems
AVERAGE_ADVANCE = 0.55

_NAMED_WEIGHTS = {"normal": 400, "bold": 700, "lighter": 300, "bolder": 700}


def parse_style(style: str | None) -> dict[str, str]:
    """Parse an inline CSS ``style`` attribute into a property dict."""
    if not style:
        return {}
    props = {}
    for item in style.split(";"):
        if ":" not in item:
            continue
        key, value = item.split(":", 1)
        props[key.strip()] = value.strip()
    return props


def _number(value: str | None, default: float) -> float:
    if not value:
        return default
    match = re.match(r"\s*(-?[\d.]+)", value)
    return float(match.group(1)) if match else default


def _font_weight(value: str | None) -> int:
    if not value:
        return 400
    value = value.strip().lower()
    if value in _NAMED_WEIGHTS:
        return _NAMED_WEIGHTS[value]
    return int(_number(value, 400))


def _font_family(value: str | None) -> str:
    if not value:
        return DEFAULT_FAMILY
    first = value.split(",")[0].strip().strip("'\"")
    return first or DEFAULT_FAMILY


def _attr(elem: Element, style: dict[str, str], name: str) -> str | None:
    return style.get(name) or elem.get(name)


def text_node_from_element(
    elem: Element, index: int, outliner: GlyphOutliner | None = None
) -> TextNode | None:
    characters = " ".join("".join(elem.itertext()).split())
    if not characters:
        return None
    style = parse_style(elem.get("style"))

    size = _number(_attr(elem, style, "font-size"), DEFAULT_FONT_SIZE)
    weight = _font_weight(_attr(elem, style, "font-weight"))
    font_style = weight_to_style(weight)
    if (_attr(elem, style, "font-style") or "").lower() in ("italic", "oblique"):
        font_style = "Italic" if font_style == "Regular" else f"{font_style} Italic"
    font = FontName(_font_family(_attr(elem, style, "font-family")), font_style)

    node = TextNode(characters, font, size, weight, name=elem.get("id") or characters[:40])
    width = outliner.measure(characters, font, size) if outliner else None
    if width is None:
        width = len(characters) * size * AVERAGE_ADVANCE
    node.resize(max(width, 1.0), size * LINE_HEIGHT)
    node.x = _number(elem.get("x"), 0.0)
    # SVG y is the baseline; scene y is the top of the box
    node.y = _number(elem.get("y"), 0.0) - size * ASCENT
    logger.debug("Imported text #%d %r as %s", index, characters, font)
    return node


def import_svg(path: Path, outliner: GlyphOutliner | None = None) -> LoadedDocument:
    """Build a one-page document with a text node per ``<text>`` element."""
    try:
        tree = ET.parse(str(path))
    except (ET.ParseError, DefusedXmlException) as e:
        raise DocumentFormatError(f"Failed to parse SVG {path}: {e}") from e

    document = DocumentNode.with_page("Page 1")
    page = document.pages[0]
    fonts: list[FontName] = []
    root = tree.getroot()
    elements = [e for e in root.iter() if e.tag in (f"{SVG_NS}text", "text")]
    for index, elem in enumerate(elements):
        node = text_node_from_element(elem, index, outliner)
        if node is None:
            continue
        page.append_child(node)
        if node.font_name not in fonts:
            fonts.append(node.font_name)  # type: ignore[arg-type]

    if not page.children:
        logger.warning("No text elements found in %s", path)
    return LoadedDocument(document, fonts)
