"""Pytest configuration and shared fixtures for text-shimmer tests."""

import io
import json
from pathlib import Path

import pytest
from click.testing import CliRunner
from fontTools.fontBuilder import FontBuilder
from fontTools.pens.ttGlyphPen import TTGlyphPen
from fontTools.ttLib import TTFont

from text_shimmer.fonts.catalog import FontCatalog
from text_shimmer.scene.memory import MemoryHost
from text_shimmer.scene.nodes import FontName, TextNode

INTER_REGULAR = FontName("Inter", "Regular")


def make_text(
    characters: str = "Loading",
    x: float = 10,
    y: float = 10,
    width: float = 200,
    height: float = 40,
    font: FontName = INTER_REGULAR,
    weight: int = 400,
) -> TextNode:
    """Build a detached text node with an explicit bounding box."""
    text = TextNode(characters, font, font_size=32, font_weight=weight)
    text.resize(width, height)
    text.x, text.y = x, y
    return text


@pytest.fixture
def catalog() -> FontCatalog:
    """Fonts the default host can load: Inter Regular and Bold."""
    return FontCatalog([INTER_REGULAR, FontName("Inter", "Bold")])


@pytest.fixture
def host(catalog: FontCatalog) -> MemoryHost:
    """An in-memory host with a single empty page."""
    return MemoryHost(fonts=catalog)


@pytest.fixture
def text_node(host: MemoryHost) -> TextNode:
    """A 200x40 text node at (10, 10) on the current page, selected."""
    text = make_text()
    host.current_page.append_child(text)
    host.set_selection([text])
    return text


@pytest.fixture
def add_text(host: MemoryHost):
    """Factory adding a text node to the current page; takes make_text() arguments."""
    def _add(**kwargs) -> TextNode:
        text = make_text(**kwargs)
        host.current_page.append_child(text)
        return text

    return _add


@pytest.fixture
def runner() -> CliRunner:
    """Create a CliRunner instance for testing CLI commands."""
    return CliRunner()


@pytest.fixture
def document_file(tmp_path: Path) -> Path:
    """A JSON document with one text node on one page."""
    data = {
        "version": 1,
        "fonts": ["Inter:Regular"],
        "document": {
            "id": "0:1",
            "type": "DOCUMENT",
            "name": "Document",
            "children": [
                {
                    "id": "1:1",
                    "type": "PAGE",
                    "name": "Page 1",
                    "selection": [],
                    "children": [
                        {
                            "id": "1:2",
                            "type": "TEXT",
                            "name": "Title",
                            "x": 10,
                            "y": 10,
                            "width": 200,
                            "height": 40,
                            "characters": "Loading",
                            "fontName": {"family": "Inter", "style": "Regular"},
                            "fontSize": 32,
                            "fontWeight": 400,
                        },
                        {
                            "id": "1:3",
                            "type": "TEXT",
                            "name": "Subtitle",
                            "x": 10,
                            "y": 80,
                            "width": 120,
                            "height": 20,
                            "characters": "Please wait",
                            "fontName": {"family": "Inter", "style": "Regular"},
                            "fontSize": 16,
                            "fontWeight": 400,
                        },
                    ],
                }
            ],
        },
    }
    path = tmp_path / "design.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


@pytest.fixture
def svg_file(tmp_path: Path) -> Path:
    """An SVG file with two text elements."""
    svg_content = """<?xml version="1.0" encoding="UTF-8"?>
<svg xmlns="http://www.w3.org/2000/svg" width="400" height="200" viewBox="0 0 400 200">
  <text id="headline" x="10" y="50" font-family="'Inter', sans-serif" font-size="20" font-weight="bold">Hello</text>
  <text x="10" y="100" style="font-family: Roboto; font-size: 10px">World wide</text>
  <rect x="0" y="0" width="10" height="10"/>
</svg>"""
    path = tmp_path / "input.svg"
    path.write_text(svg_content, encoding="utf-8")
    return path


def build_test_font() -> TTFont:
    """A two-glyph TrueType font ("Test Regular") where 'A' is a 500x700 box."""
    def box(width: int, height: int):
        pen = TTGlyphPen(None)
        pen.moveTo((0, 0))
        pen.lineTo((0, height))
        pen.lineTo((width, height))
        pen.lineTo((width, 0))
        pen.closePath()
        return pen.glyph()

    fb = FontBuilder(1000, isTTF=True)
    fb.setupGlyphOrder([".notdef", "A"])
    fb.setupCharacterMap({ord("A"): "A"})
    fb.setupGlyf({".notdef": box(400, 600), "A": box(500, 700)})
    fb.setupHorizontalMetrics({".notdef": (500, 0), "A": (600, 0)})
    fb.setupHorizontalHeader(ascent=800, descent=-200)
    fb.setupNameTable(
        {
            "familyName": "Test",
            "styleName": "Regular",
            "uniqueFontIdentifier": "Test-Regular",
            "fullName": "Test Regular",
            "psName": "Test-Regular",
            "version": "Version 1.0",
        }
    )
    fb.setupOS2(sTypoAscender=800, usWinAscent=800, usWinDescent=200)
    fb.setupPost()
    buffer = io.BytesIO()
    fb.save(buffer)
    buffer.seek(0)
    return TTFont(buffer)


class StubFontCache:
    """FontCache stand-in serving in-memory fonts by (family, style)."""

    def __init__(self, fonts: dict[tuple[str, str], TTFont]) -> None:
        self.fonts = fonts

    def get_font(self, family: str, style: str) -> TTFont | None:
        return self.fonts.get((family, style))


@pytest.fixture
def test_font_cache() -> StubFontCache:
    return StubFontCache({("Test", "Regular"): build_test_font()})


def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
