"""End-to-end shimmer composition for one text node.

Steps run strictly in order, each awaiting the host before the next reads
the geometry it produced:

1. load fonts and optionally escalate the weight
2. flatten a copy of the text and derive mask, backdrop and gradient
3. stack them into a clipping container, clone it for the end state
4. wrap both containers as variants of one component set
5. attach the looping transition rules
6. place the set and clean up the transient nodes

A failure aborts the remaining steps. Nodes created before the failure stay
in the document; only the transient snapshot nodes are always removed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from text_shimmer.config import Config, PlacementMode
from text_shimmer.fonts.resolver import FontResolution, FontResolver
from text_shimmer.scene.host import SceneHost
from text_shimmer.scene.nodes import TextNode
from text_shimmer.shimmer.assembly import assemble_start, clone_end
from text_shimmer.shimmer.components import VariantGroup, package_variants
from text_shimmer.shimmer.geometry import build_layers, snapshot_text
from text_shimmer.shimmer.placement import (
    PlacementResult,
    RemovalOutcome,
    cleanup_transients,
    place_below_text,
    place_on_page,
)
from text_shimmer.shimmer.plan import ShimmerPlan, plan_shimmer
from text_shimmer.shimmer.transitions import ShimmerState, TransitionRule, wire_transitions

logger = logging.getLogger(__name__)


@dataclass
class ShimmerOptions:
    auto_font_weight: bool = True
    replace_text: bool = False


@dataclass
class ShimmerResult:
    source_id: str
    plan: ShimmerPlan
    fonts: FontResolution
    group: VariantGroup
    transitions: list[TransitionRule]
    placement: PlacementResult
    cleanup: dict[str, RemovalOutcome] = field(default_factory=dict)


class ShimmerBuilder:
    def __init__(self, host: SceneHost, config: Config | None = None) -> None:
        self.host = host
        self.config = config or Config()
        self.resolver = FontResolver(host, threshold=self.config.fonts.semibold_threshold)

    async def build(self, text: TextNode, options: ShimmerOptions | None = None) -> ShimmerResult:
        options = options or ShimmerOptions(auto_font_weight=self.config.fonts.auto_bold)
        text.ensure_alive()
        host = self.host
        source_id = text.id

        fonts = await self.resolver.prepare(text, options.auto_font_weight)

        snapshot = snapshot_text(host, text)
        try:
            plan = plan_shimmer(
                snapshot.vector.width,
                snapshot.vector.height,
                self.config.placement.variant_spacing,
            )
            layers = build_layers(host, snapshot.vector, plan)
            start = assemble_start(host, layers, plan, origin=snapshot.vector.absolute_position())
            end = clone_end(start, plan)
            group = package_variants(
                host,
                {ShimmerState.START: start, ShimmerState.END: end},
                plan,
                parent=host.current_page,
            )
            transitions = await wire_transitions(host, group.variants, plan.rules)
        finally:
            cleanup = cleanup_transients(snapshot.transients)

        placement = self._place(group, text, options)
        logger.info(
            "Built %r for %r (%gx%g) on page %r",
            group.component_set.name,
            text.name,
            plan.width,
            plan.height,
            placement.target_page.name,
        )
        return ShimmerResult(
            source_id=source_id,
            plan=plan,
            fonts=fonts,
            group=group,
            transitions=transitions,
            placement=placement,
            cleanup=cleanup,
        )

    def _place(
        self, group: VariantGroup, text: TextNode, options: ShimmerOptions
    ) -> PlacementResult:
        settings = self.config.placement
        if settings.mode is PlacementMode.LEGACY:
            return place_below_text(self.host, group.component_set, text, settings.below_gap)
        return place_on_page(
            self.host,
            group.component_set,
            group.start,
            text,
            settings,
            options.replace_text,
        )
