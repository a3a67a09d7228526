"""Timed transition rules that loop the two shimmer states.

The loop is asymmetric: the start state waits 600 ms and then smart-animates
to the end state over 1200 ms with ease-out; the end state snaps back to the
start after 1 ms without animation. Hosts reject a literal zero timeout,
hence the 1 ms reset delay.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum

from text_shimmer.exceptions import CompositionError
from text_shimmer.scene.host import SceneHost
from text_shimmer.scene.nodes import Action, ComponentNode, Reaction, Transition, Trigger

logger = logging.getLogger(__name__)

SWEEP_DELAY_MS = 600
SWEEP_DURATION_MS = 1200
RESET_DELAY_MS = 1

AFTER_TIMEOUT = "AFTER_TIMEOUT"
CHANGE_TO = "CHANGE_TO"


class ShimmerState(str, Enum):
    START = "start"
    END = "end"


class Animation(str, Enum):
    SMART_ANIMATE = "SMART_ANIMATE"
    INSTANT = "INSTANT"


class Easing(str, Enum):
    LINEAR = "LINEAR"
    EASE_IN = "EASE_IN"
    EASE_OUT = "EASE_OUT"
    EASE_IN_AND_OUT = "EASE_IN_AND_OUT"


@dataclass(frozen=True)
class TransitionRule:
    """Directed edge of the shimmer state machine."""

    source: ShimmerState
    destination: ShimmerState
    delay_ms: int
    animation: Animation
    duration_ms: int = 0
    easing: Easing | None = None

    @property
    def animated(self) -> bool:
        return self.animation is not Animation.INSTANT

    def to_reaction(self, destination_id: str) -> Reaction:
        """Express the rule as a host reaction; host timings are in seconds."""
        transition = None
        if self.animated:
            transition = Transition(
                self.animation.value,
                self.duration_ms / 1000,
                (self.easing or Easing.LINEAR).value,
            )
        return Reaction(
            trigger=Trigger(AFTER_TIMEOUT, self.delay_ms / 1000),
            actions=(Action(destination_id, CHANGE_TO, transition),),
        )

    @classmethod
    def from_reaction(
        cls, source: ShimmerState, reaction: Reaction, states_by_id: Mapping[str, ShimmerState]
    ) -> TransitionRule:
        if reaction.trigger.type != AFTER_TIMEOUT or len(reaction.actions) != 1:
            raise CompositionError("Not a shimmer transition reaction")
        action = reaction.actions[0]
        try:
            destination = states_by_id[action.destination_id]
        except KeyError:
            raise CompositionError(
                "Reaction points outside the variant group",
                details={"destination": action.destination_id},
            ) from None
        delay_ms = round((reaction.trigger.timeout or 0) * 1000)
        if action.transition is None:
            return cls(source, destination, delay_ms, Animation.INSTANT)
        return cls(
            source,
            destination,
            delay_ms,
            Animation(action.transition.type),
            round(action.transition.duration * 1000),
            Easing(action.transition.easing),
        )


def shimmer_rules() -> tuple[TransitionRule, TransitionRule]:
    sweep = TransitionRule(
        ShimmerState.START,
        ShimmerState.END,
        delay_ms=SWEEP_DELAY_MS,
        animation=Animation.SMART_ANIMATE,
        duration_ms=SWEEP_DURATION_MS,
        easing=Easing.EASE_OUT,
    )
    reset = TransitionRule(
        ShimmerState.END,
        ShimmerState.START,
        delay_ms=RESET_DELAY_MS,
        animation=Animation.INSTANT,
    )
    return sweep, reset


def validate_cycle(rules: Sequence[TransitionRule]) -> None:
    """Require exactly two rules forming a START <-> END cycle."""
    if len(rules) != 2:
        raise CompositionError(f"Expected 2 transition rules, got {len(rules)}")
    edges = {(r.source, r.destination) for r in rules}
    if edges != {
        (ShimmerState.START, ShimmerState.END),
        (ShimmerState.END, ShimmerState.START),
    }:
        raise CompositionError("Transition rules must form a start/end cycle")
    for rule in rules:
        if rule.delay_ms <= 0:
            raise CompositionError("Transition delays must be positive", details={"rule": rule})


async def wire_transitions(
    host: SceneHost,
    variants: Mapping[ShimmerState, ComponentNode],
    rules: Sequence[TransitionRule],
) -> list[TransitionRule]:
    """Attach each rule to its source variant, one host write at a time."""
    validate_cycle(rules)
    for rule in rules:
        source = variants[rule.source]
        destination = variants[rule.destination]
        # awaited one by one: hosts reject overlapping reaction writes
        await host.set_reactions(source, [rule.to_reaction(destination.id)])
        logger.debug(
            "Wired %s -> %s after %dms (%s)",
            source.name,
            destination.name,
            rule.delay_ms,
            rule.animation.value,
        )
    return list(rules)


def read_transitions(variants: Mapping[ShimmerState, ComponentNode]) -> list[TransitionRule]:
    """Recover the rules currently attached to the variants."""
    states_by_id = {node.id: state for state, node in variants.items()}
    return [
        TransitionRule.from_reaction(state, reaction, states_by_id)
        for state, node in variants.items()
        for reaction in node.reactions
    ]
