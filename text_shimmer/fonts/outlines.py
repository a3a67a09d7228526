"""Glyph outlines and advance widths for a single line of text."""

from __future__ import annotations

import logging

from fontTools.pens.recordingPen import RecordingPen
from fontTools.pens.transformPen import TransformPen

from text_shimmer.fonts.cache import FontCache
from text_shimmer.scene.nodes import FontName, TextNode

logger = logging.getLogger(__name__)


def recording_pen_to_svg_path(recording, precision: int = 3) -> str:
    """Convert RecordingPen operations to SVG path commands."""
    fmt = f"{{:.{precision}f}}"
    commands = []

    for op, args in recording:
        if op == "moveTo":
            x, y = args[0]
            commands.append(f"M {fmt.format(x)} {fmt.format(y)}")
        elif op == "lineTo":
            x, y = args[0]
            commands.append(f"L {fmt.format(x)} {fmt.format(y)}")
        elif op == "qCurveTo":
            # TrueType runs of off-curve points imply on-curve midpoints
            for i in range(len(args) - 1):
                x1, y1 = args[i]
                if i == len(args) - 2:
                    x, y = args[i + 1]
                else:
                    x2, y2 = args[i + 1]
                    x, y = (x1 + x2) / 2, (y1 + y2) / 2
                commands.append(
                    f"Q {fmt.format(x1)} {fmt.format(y1)} {fmt.format(x)} {fmt.format(y)}"
                )
        elif op == "curveTo" and len(args) >= 3:
            (x1, y1), (x2, y2), (x, y) = args[:3]
            commands.append(
                f"C {fmt.format(x1)} {fmt.format(y1)} {fmt.format(x2)} "
                f"{fmt.format(y2)} {fmt.format(x)} {fmt.format(y)}"
            )
        elif op == "closePath":
            commands.append("Z")

    return " ".join(commands)


class GlyphOutliner:
    """Lays glyphs out left to right using advance widths, no shaping."""

    def __init__(self, cache: FontCache | None = None, precision: int = 3) -> None:
        self.cache = cache or FontCache()
        self.precision = precision

    def measure(self, characters: str, font: FontName, font_size: float) -> float | None:
        """Advance width of the text in pixels, or None when the face is missing."""
        ttfont = self.cache.get_font(font.family, font.style)
        if ttfont is None:
            return None
        cmap = ttfont.getBestCmap() or {}
        hmtx = ttfont["hmtx"]
        scale = font_size / ttfont["head"].unitsPerEm
        total = 0.0
        for ch in characters.replace("\n", " "):
            glyph_name = cmap.get(ord(ch), ".notdef")
            if glyph_name in hmtx.metrics:
                total += hmtx[glyph_name][0] * scale
        return total

    def outline(self, text: TextNode) -> str | None:
        """SVG path data for the text in node-local coordinates."""
        if not isinstance(text.font_name, FontName):
            return None
        ttfont = self.cache.get_font(text.font_name.family, text.font_name.style)
        if ttfont is None:
            return None

        glyph_set = ttfont.getGlyphSet()
        cmap = ttfont.getBestCmap() or {}
        scale = text.font_size / ttfont["head"].unitsPerEm
        baseline = ttfont["hhea"].ascent * scale

        pen_x = 0.0
        parts = []
        for ch in text.characters.replace("\n", " "):
            glyph_name = cmap.get(ord(ch), ".notdef")
            if glyph_name not in glyph_set:
                continue
            glyph = glyph_set[glyph_name]
            recording = RecordingPen()
            # font units are y-up; the scene is y-down with the origin at the top
            glyph.draw(TransformPen(recording, (scale, 0, 0, -scale, pen_x, baseline)))
            path = recording_pen_to_svg_path(recording.value, self.precision)
            if path:
                parts.append(path)
            pen_x += glyph.width * scale

        logger.debug("Outlined %d glyph runs for %r", len(parts), text.name)
        return " ".join(parts)
