"""Tests for document persistence and SVG import.

Covers saving and reloading built shimmer groups as JSON, format errors,
and turning SVG ``<text>`` elements into text nodes.
"""

import json
from pathlib import Path

import pytest

from text_shimmer.exceptions import DocumentFormatError
from text_shimmer.scene.nodes import (
    MIXED,
    ComponentNode,
    ComponentSetNode,
    FontName,
    InstanceNode,
    TextNode,
    VectorNode,
)
from text_shimmer.scene.serialize import (
    document_from_dict,
    document_to_dict,
    load_document,
    save_document,
)
from text_shimmer.shimmer.pipeline import ShimmerBuilder, ShimmerOptions
from text_shimmer.shimmer.transitions import ShimmerState, read_transitions, shimmer_rules
from text_shimmer.svg.importer import import_svg, parse_style


class TestLoadDocument:
    """Tests for reading JSON documents."""

    def test_load_pages_and_text(self, document_file: Path):
        """Verify pages, text attributes and fonts are read."""
        loaded = load_document(document_file)
        page = loaded.document.pages[0]
        title = page.children[0]
        assert page.name == "Page 1"
        assert isinstance(title, TextNode)
        assert title.id == "1:2"
        assert title.font_name == FontName("Inter", "Regular")
        assert (title.x, title.y, title.width, title.height) == (10, 10, 200, 40)
        assert loaded.fonts == [FontName("Inter", "Regular")]

    def test_new_ids_do_not_collide(self, document_file: Path):
        """Verify nodes created after loading get ids past the loaded ones."""
        loaded = load_document(document_file)
        fresh = TextNode("new")
        assert loaded.document.find_by_id(fresh.id) is None

    def test_wrong_version(self):
        """Verify unknown format versions are rejected."""
        with pytest.raises(DocumentFormatError):
            document_from_dict({"version": 99, "document": {}})

    def test_unknown_node_type(self):
        """Verify unknown node types are rejected."""
        data = {"version": 1, "document": {"id": "0:1", "type": "STAR"}}
        with pytest.raises(DocumentFormatError):
            document_from_dict(data)

    def test_top_level_must_be_document(self):
        """Verify a page at the top level is rejected."""
        data = {"version": 1, "document": {"id": "0:1", "type": "PAGE", "name": "P"}}
        with pytest.raises(DocumentFormatError):
            document_from_dict(data)

    def test_invalid_json(self, tmp_path: Path):
        """Verify broken JSON raises DocumentFormatError."""
        path = tmp_path / "broken.json"
        path.write_text("{", encoding="utf-8")
        with pytest.raises(DocumentFormatError):
            load_document(path)

    def test_mixed_text_round_trip(self, host):
        """Verify MIXED font fields and segment fonts persist."""
        text = TextNode("Hi", MIXED, font_weight=MIXED)
        text.segment_fonts = [FontName("Inter", "Regular"), FontName("Inter", "Bold")]
        host.current_page.append_child(text)
        loaded = document_from_dict(json.loads(json.dumps(document_to_dict(host.document))))
        restored = loaded.document.pages[0].children[0]
        assert restored.font_name is MIXED
        assert restored.font_weight is MIXED
        assert restored.all_font_names() == text.segment_fonts


class TestSaveBuiltDocument:
    """Tests for persisting generated shimmer groups."""

    @pytest.mark.asyncio
    async def test_reactions_and_instances_survive(self, host, text_node, tmp_path: Path):
        """Verify transitions and instance links are intact after a reload."""
        await ShimmerBuilder(host).build(
            text_node, ShimmerOptions(auto_font_weight=False, replace_text=True)
        )
        path = tmp_path / "out.json"
        save_document(path, host.document, host.fonts)

        loaded = load_document(path)
        component_set = loaded.document.find_all(lambda n: isinstance(n, ComponentSetNode))[0]
        start, end = component_set.variants
        assert isinstance(start, ComponentNode)
        variants = {ShimmerState.START: start, ShimmerState.END: end}
        assert read_transitions(variants) == list(shimmer_rules())

        instance = loaded.document.find_all(lambda n: isinstance(n, InstanceNode))[0]
        assert instance.main_component is start
        assert loaded.fonts == [FontName("Inter", "Bold"), FontName("Inter", "Regular")]

    @pytest.mark.asyncio
    async def test_paints_and_mask_survive(self, host, text_node, tmp_path: Path):
        """Verify gradient stops, mask flags and dash patterns persist."""
        result = await ShimmerBuilder(host).build(text_node, ShimmerOptions(auto_font_weight=False))
        path = tmp_path / "out.json"
        save_document(path, host.document)

        loaded = load_document(path)
        original = result.group.component_set
        restored = loaded.document.find_by_id(original.id)
        assert restored.dash_pattern == original.dash_pattern
        assert restored.strokes == original.strokes
        mask = loaded.document.find_by_id(result.group.containers[ShimmerState.START].mask.id)
        assert isinstance(mask, VectorNode)
        assert mask.is_mask
        gradient_id = result.group.containers[ShimmerState.END].gradient.id
        gradient = loaded.document.find_by_id(gradient_id)
        assert gradient.fills == result.group.containers[ShimmerState.END].gradient.fills
        assert gradient.x == 200

    def test_saved_selection_restored(self, host, text_node, tmp_path: Path):
        """Verify the page selection is persisted by id."""
        path = tmp_path / "sel.json"
        save_document(path, host.document)
        loaded = load_document(path)
        assert [n.id for n in loaded.document.pages[0].selection] == [text_node.id]


class TestSvgImport:
    """Tests for import_svg()."""

    def test_parse_style(self):
        """Verify inline CSS declarations are split into a dict."""
        assert parse_style("font-size: 10px; fill:red;;") == {"font-size": "10px", "fill": "red"}
        assert parse_style(None) == {}

    def test_text_elements_become_nodes(self, svg_file: Path):
        """Verify each non-empty text element becomes a text node."""
        loaded = import_svg(svg_file)
        texts = loaded.document.pages[0].children
        assert [t.characters for t in texts] == ["Hello", "World wide"]
        assert texts[0].name == "headline"

    def test_attributes_and_style(self, svg_file: Path):
        """Verify fonts come from attributes and inline style alike."""
        loaded = import_svg(svg_file)
        hello, world = loaded.document.pages[0].children
        assert hello.font_name == FontName("Inter", "Bold")
        assert hello.font_weight == 700
        assert hello.font_size == 20
        assert world.font_name == FontName("Roboto", "Regular")
        assert world.font_size == 10
        assert loaded.fonts == [FontName("Inter", "Bold"), FontName("Roboto", "Regular")]

    def test_box_from_baseline(self, svg_file: Path):
        """Verify the box top sits one ascent above the baseline."""
        loaded = import_svg(svg_file)
        hello = loaded.document.pages[0].children[0]
        assert hello.x == 10
        assert hello.y == pytest.approx(50 - 20 * 0.8)
        assert hello.height == pytest.approx(24)
        assert hello.width == pytest.approx(5 * 20 * 0.55)

    def test_italic_style(self, tmp_path: Path):
        """Verify italic text maps to an Italic style name."""
        path = tmp_path / "italic.svg"
        path.write_text(
            '<svg xmlns="http://www.w3.org/2000/svg">'
            '<text font-style="italic" font-weight="600">Slanted</text></svg>',
            encoding="utf-8",
        )
        text = import_svg(path).document.pages[0].children[0]
        assert text.font_name == FontName("Inter", "SemiBold Italic")

    def test_load_document_dispatches_svg(self, svg_file: Path):
        """Verify load_document() reads .svg files through the importer."""
        assert len(load_document(svg_file).document.pages[0].children) == 2

    def test_malformed_svg(self, tmp_path: Path):
        """Verify broken markup raises DocumentFormatError."""
        path = tmp_path / "broken.svg"
        path.write_text("<svg><text>", encoding="utf-8")
        with pytest.raises(DocumentFormatError):
            import_svg(path)

    def test_entity_expansion_blocked(self, tmp_path: Path):
        """Verify DTD entity declarations are refused by the parser."""
        path = tmp_path / "evil.svg"
        path.write_text(
            '<?xml version="1.0"?><!DOCTYPE svg [<!ENTITY a "aaaa">]>'
            '<svg xmlns="http://www.w3.org/2000/svg"><text>&a;</text></svg>',
            encoding="utf-8",
        )
        with pytest.raises(DocumentFormatError):
            import_svg(path)
