"""Scene graph and host interface for text-shimmer.

This subpackage provides:
- Node, paint and reaction types (``nodes``)
- The ``SceneHost`` protocol every document mutation goes through (``host``)
- ``MemoryHost``, an in-memory host (``memory``)
- JSON document persistence (``serialize``)
"""

from text_shimmer.scene.host import SceneHost
from text_shimmer.scene.nodes import (
    MIXED,
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
    Reaction,
    RectangleNode,
    SceneNode,
    SolidPaint,
    TextNode,
    VectorNode,
)

__all__ = [
    "SceneHost",
    "MIXED",
    "Color",
    "ComponentNode",
    "ComponentSetNode",
    "DocumentNode",
    "FontName",
    "FrameNode",
    "GradientStop",
    "InstanceNode",
    "LinearGradientPaint",
    "NodeType",
    "PageNode",
    "Reaction",
    "RectangleNode",
    "SceneNode",
    "SolidPaint",
    "TextNode",
    "VectorNode",
]
