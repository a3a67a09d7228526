"""Pure description of a shimmer scene for a given text size.

``plan_shimmer`` does no document work: it computes names, sizes, paints,
offsets and transition rules from the measured text box. The builders in
this package apply the plan through a :class:`~text_shimmer.scene.host.SceneHost`.
"""

from __future__ import annotations

from dataclasses import dataclass

from text_shimmer.exceptions import CompositionError
from text_shimmer.scene.nodes import (
    Color,
    GradientStop,
    LinearGradientPaint,
    Paint,
    SolidPaint,
)
from text_shimmer.shimmer.transitions import ShimmerState, TransitionRule, shimmer_rules

# Node names are a document-level convention other tooling relies on.
TEXT_COPY_NAME = "Text Copy"
SNAPSHOT_NAME = "Text Vector"
CONTAINER_NAME = "Container"
MASK_NAME = "Hollow Text"
BACKDROP_NAME = "Background"
GRADIENT_NAME = "Shimmer Gradient"
START_NAME = "Shimmer Start"
END_NAME = "Shimmer End"
GROUP_NAME = "Shimmer Effect"

WHITE = Color(1, 1, 1)
MARKER_COLOR = Color.from_hex("#9747FF")
MARKER_DASH_PATTERN = (8.0, 4.0)
MARKER_STROKE_WEIGHT = 2.0

MASK_FILL = SolidPaint(WHITE, 1.0)
BACKDROP_FILL = SolidPaint(Color(0.9, 0.9, 0.9), 0.5)
GRADIENT_FILL = LinearGradientPaint(
    stops=(
        GradientStop(0.0, Color(1, 1, 1, 0)),
        GradientStop(0.5, Color(1, 1, 1, 1)),
        GradientStop(1.0, Color(1, 1, 1, 0)),
    )
)

VARIANT_SPACING = 200.0


@dataclass(frozen=True)
class LayerSpec:
    name: str
    width: float
    height: float
    fills: tuple[Paint, ...]
    is_mask: bool = False


@dataclass(frozen=True)
class StateSpec:
    state: ShimmerState
    component_name: str
    gradient_x: float
    component_x: float
    component_y: float = 0.0


@dataclass(frozen=True)
class MarkerStyle:
    """Cosmetic outline that identifies generated variant groups."""

    fills: tuple[Paint, ...]
    strokes: tuple[Paint, ...]
    stroke_weight: float
    dash_pattern: tuple[float, ...]


DEFAULT_MARKER = MarkerStyle(
    fills=(SolidPaint(WHITE, 1.0), SolidPaint(MARKER_COLOR, 0.3)),
    strokes=(SolidPaint(MARKER_COLOR, 1.0),),
    stroke_weight=MARKER_STROKE_WEIGHT,
    dash_pattern=MARKER_DASH_PATTERN,
)


@dataclass(frozen=True)
class ShimmerPlan:
    width: float
    height: float
    container_name: str
    mask: LayerSpec
    backdrop: LayerSpec
    gradient: LayerSpec
    states: tuple[StateSpec, StateSpec]
    group_name: str
    marker: MarkerStyle
    rules: tuple[TransitionRule, TransitionRule]

    def state(self, state: ShimmerState) -> StateSpec:
        return next(s for s in self.states if s.state is state)

    @property
    def layers(self) -> tuple[LayerSpec, LayerSpec, LayerSpec]:
        """Container children in z-order, back to front."""
        return self.mask, self.backdrop, self.gradient


def plan_shimmer(
    width: float, height: float, variant_spacing: float = VARIANT_SPACING
) -> ShimmerPlan:
    """Lay out the shimmer scene for a text box of *width* x *height*."""
    if width <= 0 or height <= 0:
        raise CompositionError(
            "Text has no visible area", details={"width": width, "height": height}
        )

    return ShimmerPlan(
        width=width,
        height=height,
        container_name=CONTAINER_NAME,
        mask=LayerSpec(MASK_NAME, width, height, (MASK_FILL,), is_mask=True),
        backdrop=LayerSpec(BACKDROP_NAME, width, height, (BACKDROP_FILL,)),
        gradient=LayerSpec(GRADIENT_NAME, width, height, (GRADIENT_FILL,)),
        states=(
            StateSpec(ShimmerState.START, START_NAME, gradient_x=-width, component_x=0.0),
            StateSpec(
                ShimmerState.END, END_NAME, gradient_x=width, component_x=variant_spacing
            ),
        ),
        group_name=GROUP_NAME,
        marker=DEFAULT_MARKER,
        rules=shimmer_rules(),
    )
