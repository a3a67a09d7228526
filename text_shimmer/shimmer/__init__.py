"""Shimmer composition: plan, geometry, containers, variants, transitions, placement."""

from text_shimmer.shimmer.assembly import ShimmerContainer, geometry_signature, state_difference
from text_shimmer.shimmer.components import VariantGroup
from text_shimmer.shimmer.pipeline import ShimmerBuilder, ShimmerOptions, ShimmerResult
from text_shimmer.shimmer.placement import RemovalOutcome, remove_transient, resolve_target_page
from text_shimmer.shimmer.plan import ShimmerPlan, plan_shimmer
from text_shimmer.shimmer.transitions import (
    Animation,
    Easing,
    ShimmerState,
    TransitionRule,
    read_transitions,
    shimmer_rules,
)

__all__ = [
    "ShimmerContainer",
    "geometry_signature",
    "state_difference",
    "VariantGroup",
    "ShimmerBuilder",
    "ShimmerOptions",
    "ShimmerResult",
    "RemovalOutcome",
    "remove_transient",
    "resolve_target_page",
    "ShimmerPlan",
    "plan_shimmer",
    "Animation",
    "Easing",
    "ShimmerState",
    "TransitionRule",
    "read_transitions",
    "shimmer_rules",
]
