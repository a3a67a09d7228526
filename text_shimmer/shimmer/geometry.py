"""Vector snapshot of the source text and the three shimmer layers."""

from __future__ import annotations

from dataclasses import dataclass

from text_shimmer.scene.host import SceneHost
from text_shimmer.scene.nodes import RectangleNode, SceneNode, TextNode, VectorNode
from text_shimmer.shimmer.plan import SNAPSHOT_NAME, TEXT_COPY_NAME, LayerSpec, ShimmerPlan


@dataclass
class TextSnapshot:
    """Transient nodes made while turning text into paths.

    ``text_copy`` is consumed by flattening; ``vector`` survives until cleanup.
    """

    text_copy: TextNode
    vector: VectorNode

    @property
    def transients(self) -> list[SceneNode]:
        return [self.text_copy, self.vector]


@dataclass
class ShimmerLayers:
    mask: VectorNode
    backdrop: RectangleNode
    gradient: RectangleNode


def snapshot_text(host: SceneHost, text: TextNode) -> TextSnapshot:
    """Clone the text and flatten the clone into path geometry."""
    text_copy = text.clone()
    text_copy.name = TEXT_COPY_NAME
    vector = host.flatten([text_copy])
    vector.name = SNAPSHOT_NAME
    return TextSnapshot(text_copy, vector)


def _apply_layer(node: SceneNode, spec: LayerSpec) -> None:
    node.name = spec.name
    node.fills = list(spec.fills)
    node.is_mask = spec.is_mask


def build_layers(host: SceneHost, snapshot: VectorNode, plan: ShimmerPlan) -> ShimmerLayers:
    """Derive the hollow mask and create backdrop and gradient at the mask's size."""
    mask = snapshot.clone()
    _apply_layer(mask, plan.mask)

    rectangles = []
    for spec in (plan.backdrop, plan.gradient):
        rect = host.create_rectangle()
        _apply_layer(rect, spec)
        rect.resize(spec.width, spec.height)
        rect.x, rect.y = mask.x, mask.y
        rectangles.append(rect)

    backdrop, gradient = rectangles
    return ShimmerLayers(mask, backdrop, gradient)  # type: ignore[arg-type]
