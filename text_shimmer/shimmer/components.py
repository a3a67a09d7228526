"""Wrap shimmer containers as variants of one component set."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from text_shimmer.scene.host import SceneHost
from text_shimmer.scene.nodes import (
    ComponentNode,
    ComponentSetNode,
    FrameNode,
    PageNode,
    SceneNode,
)
from text_shimmer.shimmer.assembly import ShimmerContainer
from text_shimmer.shimmer.plan import MarkerStyle, ShimmerPlan, StateSpec
from text_shimmer.shimmer.transitions import ShimmerState


@dataclass
class VariantGroup:
    component_set: ComponentSetNode
    variants: dict[ShimmerState, ComponentNode]
    containers: dict[ShimmerState, ShimmerContainer]

    @property
    def start(self) -> ComponentNode:
        return self.variants[ShimmerState.START]

    @property
    def end(self) -> ComponentNode:
        return self.variants[ShimmerState.END]


def wrap_variant(host: SceneHost, container: ShimmerContainer, spec: StateSpec) -> ComponentNode:
    component = host.create_component()
    component.name = spec.component_name
    component.resize(container.frame.width, container.frame.height)
    component.x, component.y = spec.component_x, spec.component_y
    component.append_child(container.frame)
    container.frame.x = 0.0
    container.frame.y = 0.0
    return component


def apply_marker(node: SceneNode, marker: MarkerStyle) -> None:
    node.fills = list(marker.fills)
    node.strokes = list(marker.strokes)
    node.stroke_weight = marker.stroke_weight
    node.dash_pattern = list(marker.dash_pattern)


def package_variants(
    host: SceneHost,
    containers: Mapping[ShimmerState, ShimmerContainer],
    plan: ShimmerPlan,
    parent: PageNode | FrameNode,
) -> VariantGroup:
    """Create one component per state and merge them into a styled set."""
    variants = {
        spec.state: wrap_variant(host, containers[spec.state], spec) for spec in plan.states
    }
    component_set = host.combine_as_variants(
        [variants[spec.state] for spec in plan.states], parent
    )
    component_set.name = plan.group_name
    apply_marker(component_set, plan.marker)
    return VariantGroup(component_set, variants, dict(containers))
