"""Clipping containers holding one shimmer state each."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from text_shimmer.scene.host import SceneHost
from text_shimmer.scene.nodes import (
    ChildrenMixin,
    FrameNode,
    RectangleNode,
    SceneNode,
    VectorNode,
)
from text_shimmer.shimmer.geometry import ShimmerLayers
from text_shimmer.shimmer.plan import ShimmerPlan
from text_shimmer.shimmer.transitions import ShimmerState


@dataclass
class ShimmerContainer:
    frame: FrameNode
    mask: VectorNode
    backdrop: RectangleNode
    gradient: RectangleNode

    @property
    def layers(self) -> list[SceneNode]:
        return [self.mask, self.backdrop, self.gradient]


def assemble_start(
    host: SceneHost,
    layers: ShimmerLayers,
    plan: ShimmerPlan,
    origin: tuple[float, float] = (0.0, 0.0),
) -> ShimmerContainer:
    """Stack mask, backdrop and gradient in a clipping frame at *origin*."""
    frame = host.create_frame()
    frame.name = plan.container_name
    frame.resize(plan.width, plan.height)
    frame.x, frame.y = origin
    frame.clips_content = True
    frame.fills = []

    container = ShimmerContainer(frame, layers.mask, layers.backdrop, layers.gradient)
    for node in container.layers:
        frame.append_child(node)
    for node in container.layers:
        node.x = 0.0
        node.y = 0.0
    container.gradient.x = plan.state(ShimmerState.START).gradient_x
    return container


def clone_end(start: ShimmerContainer, plan: ShimmerPlan) -> ShimmerContainer:
    """Duplicate the start container and move only its gradient."""
    frame = start.frame.clone()
    frame.name = plan.container_name

    def counterpart(node: SceneNode) -> Any:
        return frame.at_path(start.frame.descendant_path(node))

    end = ShimmerContainer(
        frame,
        counterpart(start.mask),
        counterpart(start.backdrop),
        counterpart(start.gradient),
    )
    end.gradient.x = plan.state(ShimmerState.END).gradient_x
    return end


def geometry_signature(node: SceneNode) -> tuple:
    """Local geometry of a subtree, for comparing states."""
    children: tuple = ()
    if isinstance(node, ChildrenMixin):
        children = tuple(geometry_signature(c) for c in node.children)  # type: ignore[arg-type]
    return (
        node.type.value,
        node.name,
        node.x,
        node.y,
        node.width,
        node.height,
        node.is_mask,
        tuple(node.fills),
        children,
    )


def state_difference(a: SceneNode, b: SceneNode, path: str = "") -> list[tuple[str, str, Any, Any]]:
    """(node path, attribute, a value, b value) for every differing property."""
    where = f"{path}/{a.name}"
    diffs = []
    for attr in ("type", "name", "x", "y", "width", "height", "is_mask", "fills"):
        va, vb = getattr(a, attr), getattr(b, attr)
        if va != vb:
            diffs.append((where, attr, va, vb))
    if isinstance(a, ChildrenMixin) and isinstance(b, ChildrenMixin):
        if len(a.children) != len(b.children):
            diffs.append((where, "children", len(a.children), len(b.children)))
        for ca, cb in zip(a.children, b.children):
            diffs.extend(state_difference(ca, cb, where))  # type: ignore[arg-type]
    return diffs
