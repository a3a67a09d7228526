"""Font handling for text-shimmer.

This subpackage provides:
- Font loading and auto-bold weight escalation
- Fontconfig face index with a persistent JSON cache
- Glyph outlining and advance measurement via fontTools
"""

from text_shimmer.fonts.cache import FaceEntry, FontCache
from text_shimmer.fonts.catalog import FontCatalog
from text_shimmer.fonts.outlines import GlyphOutliner, recording_pen_to_svg_path
from text_shimmer.fonts.resolver import (
    BOLD_CANDIDATES,
    SEMIBOLD_THRESHOLD,
    BoldCandidate,
    FontResolution,
    FontResolver,
    style_to_weight,
    weight_to_style,
)

__all__ = [
    "FaceEntry",
    "FontCache",
    "FontCatalog",
    "GlyphOutliner",
    "recording_pen_to_svg_path",
    "BOLD_CANDIDATES",
    "SEMIBOLD_THRESHOLD",
    "BoldCandidate",
    "FontResolution",
    "FontResolver",
    "style_to_weight",
    "weight_to_style",
]
