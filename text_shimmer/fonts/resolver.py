"""Font loading and weight escalation for source text.

A text node's fonts must be loaded before its geometry is read or mutated.
When auto-bold is requested and the node uses a single weight under the
semibold threshold, a heavier style of the same family is probed for in a
fixed order and the first one the host can load is applied.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from text_shimmer.exceptions import CompositionError, FontLoadError
from text_shimmer.scene.host import SceneHost
from text_shimmer.scene.nodes import MIXED, FontName, TextNode

logger = logging.getLogger(__name__)

SEMIBOLD_THRESHOLD = 500


@dataclass(frozen=True)
class BoldCandidate:
    weight: int
    style: str


# Heaviest first, then back down to the mid weights.
BOLD_CANDIDATES: tuple[BoldCandidate, ...] = (
    BoldCandidate(700, "Bold"),
    BoldCandidate(800, "ExtraBold"),
    BoldCandidate(800, "Extra Bold"),
    BoldCandidate(800, "Extrabold"),
    BoldCandidate(800, "UltraBold"),
    BoldCandidate(900, "Black"),
    BoldCandidate(900, "Heavy"),
    BoldCandidate(600, "SemiBold"),
    BoldCandidate(600, "Semi Bold"),
    BoldCandidate(600, "Semibold"),
    BoldCandidate(600, "DemiBold"),
    BoldCandidate(500, "Medium"),
)

_WEIGHT_STYLES = {
    100: "Thin",
    200: "ExtraLight",
    300: "Light",
    400: "Regular",
    500: "Medium",
    600: "SemiBold",
    700: "Bold",
    800: "ExtraBold",
    900: "Black",
}


def weight_to_style(weight: int) -> str:
    """Nearest conventional style name for a CSS weight."""
    nearest = min(_WEIGHT_STYLES, key=lambda w: abs(w - weight))
    return _WEIGHT_STYLES[nearest]


def style_to_weight(style: str) -> int:
    """Rough numeric weight from style tokens such as ``"Semi Bold Italic"``."""
    s = style.lower().replace("-", "").replace(" ", "")
    if "black" in s or "heavy" in s:
        return 900
    if "extrabold" in s or "ultrabold" in s:
        return 800
    if any(tok in s for tok in ("semibold", "demibold")):
        return 600
    if "bold" in s:
        return 700
    if "medium" in s:
        return 500
    if "extralight" in s or "ultralight" in s:
        return 200
    if "thin" in s or "hairline" in s:
        return 100
    if "light" in s:
        return 300
    return 400


@dataclass
class FontResolution:
    """What the resolver did to one text node."""

    loaded: list[FontName] = field(default_factory=list)
    attempted: list[FontName] = field(default_factory=list)
    applied: BoldCandidate | None = None
    skipped: str | None = None

    @property
    def escalated(self) -> bool:
        return self.applied is not None


class FontResolver:
    def __init__(
        self,
        host: SceneHost,
        threshold: int = SEMIBOLD_THRESHOLD,
        candidates: tuple[BoldCandidate, ...] = BOLD_CANDIDATES,
    ) -> None:
        self.host = host
        self.threshold = threshold
        self.candidates = candidates

    async def load_current(self, text: TextNode) -> list[FontName]:
        """Load every face the text uses; failures propagate."""
        fonts = text.all_font_names()
        for font in fonts:
            await self.host.load_font(font)
        return fonts

    async def prepare(self, text: TextNode, auto_bold: bool) -> FontResolution:
        resolution = FontResolution(loaded=await self.load_current(text))

        if not auto_bold:
            resolution.skipped = "disabled"
        elif text.font_weight is MIXED or text.font_name is MIXED:
            resolution.skipped = "mixed"
        elif text.font_weight >= self.threshold:
            resolution.skipped = "already-bold"
        else:
            resolution.applied = await self.escalate(text, resolution)
            if resolution.applied is None:
                resolution.skipped = "no-bold-style"
        return resolution

    async def escalate(
        self, text: TextNode, resolution: FontResolution | None = None
    ) -> BoldCandidate | None:
        """Apply the first loadable candidate style; None leaves the text as is."""
        if not isinstance(text.font_name, FontName):
            raise CompositionError(f"Cannot escalate mixed fonts of {text.name!r}")
        family = text.font_name.family
        for candidate in self.candidates:
            font = FontName(family, candidate.style)
            if resolution is not None:
                resolution.attempted.append(font)
            try:
                await self.host.load_font(font)
            except FontLoadError:
                logger.debug("No %s style for %s", candidate.style, family)
                continue
            self.host.set_font(text, font, candidate.weight)
            logger.info("Escalated %r to %s (%d)", text.name, font, candidate.weight)
            return candidate

        logger.info("No bolder style of %s available, keeping weight", family)
        return None
