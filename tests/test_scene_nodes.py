"""Unit tests for text_shimmer.scene.nodes and the in-memory host.

Tests cover tree membership (append, insert, clone, remove), geometry
helpers, handle paths between cloned subtrees, and the MemoryHost calls the
pipeline relies on: flatten, combine_as_variants and reaction writes.
"""

import asyncio

import pytest

from text_shimmer.exceptions import (
    FontLoadError,
    FontNotLoadedError,
    HostError,
    NodeRemovedError,
)
from text_shimmer.scene.host import CURRENT_PAGE_CHANGE, SELECTION_CHANGE
from text_shimmer.scene.memory import MemoryHost
from text_shimmer.scene.nodes import (
    MIXED,
    Action,
    Color,
    ComponentNode,
    DocumentNode,
    FontName,
    FrameNode,
    PageNode,
    Reaction,
    RectangleNode,
    TextNode,
    Trigger,
    VectorNode,
)


class TestValueTypes:
    """Tests for fonts and colors."""

    def test_font_name_parse_with_style(self):
        """Verify 'Family:Style' splits into both parts."""
        assert FontName.parse("Inter:Semi Bold") == FontName("Inter", "Semi Bold")

    def test_font_name_parse_defaults_to_regular(self):
        """Verify a bare family name parses with the Regular style."""
        assert FontName.parse("Roboto") == FontName("Roboto", "Regular")

    def test_color_hex_round_trip(self):
        """Verify a hex color survives conversion to channels and back."""
        assert Color.from_hex("#9747FF").to_hex() == "#9747FF"

    def test_color_rejects_short_hex(self):
        """Verify malformed hex strings raise ValueError."""
        with pytest.raises(ValueError):
            Color.from_hex("#fff")

    def test_mixed_is_singleton(self):
        """Verify MIXED survives copying as the same object."""
        import copy

        assert copy.deepcopy(MIXED) is MIXED


class TestTreeMembership:
    """Tests for child insertion, re-parenting and removal."""

    def test_append_child_sets_parent(self):
        """Verify append_child attaches the node and records the parent."""
        page = PageNode("Page")
        rect = RectangleNode()
        page.append_child(rect)
        assert rect.parent is page
        assert page.children == [rect]

    def test_append_child_moves_between_parents(self):
        """Verify a node appended elsewhere leaves its old parent."""
        first, second = FrameNode(), FrameNode()
        rect = RectangleNode()
        first.append_child(rect)
        second.append_child(rect)
        assert first.children == []
        assert second.children == [rect]

    def test_insert_into_own_subtree_rejected(self):
        """Verify a node cannot become a child of its own descendant."""
        outer, inner = FrameNode(), FrameNode()
        outer.append_child(inner)
        with pytest.raises(HostError):
            inner.append_child(outer)

    def test_moving_descendant_up_is_allowed(self):
        """Verify a grandchild can be re-parented to its grandparent."""
        outer, inner = FrameNode(), FrameNode()
        rect = RectangleNode()
        outer.append_child(inner)
        inner.append_child(rect)
        outer.append_child(rect)
        assert outer.children == [inner, rect]
        assert inner.children == []

    def test_remove_marks_subtree_removed(self):
        """Verify removing a frame removes its descendants too."""
        page = PageNode()
        frame = FrameNode()
        rect = RectangleNode()
        page.append_child(frame)
        frame.append_child(rect)
        frame.remove()
        assert frame.removed
        assert rect.removed
        assert page.children == []

    def test_remove_twice_raises(self):
        """Verify removing an already removed node raises NodeRemovedError."""
        rect = RectangleNode()
        rect.remove()
        with pytest.raises(NodeRemovedError):
            rect.remove()

    def test_page_property_walks_ancestors(self):
        """Verify nested nodes report their page."""
        document = DocumentNode.with_page("Main")
        frame = FrameNode()
        rect = RectangleNode()
        document.pages[0].append_child(frame)
        frame.append_child(rect)
        assert rect.page is document.pages[0]


class TestClone:
    """Tests for clone() placement and independence."""

    def test_clone_inserted_after_original(self):
        """Verify the copy lands right after the original in its parent."""
        page = PageNode()
        a, b = RectangleNode("a"), RectangleNode("b")
        page.append_child(a)
        page.append_child(b)
        copy = a.clone()
        assert page.children == [a, copy, b]
        assert copy.id != a.id

    def test_clone_copies_lists_independently(self):
        """Verify fills of a clone can change without touching the original."""
        text = TextNode("Loading")
        copy = text.clone()
        copy.fills.append(copy.fills[0])
        assert len(text.fills) == 1

    def test_clone_deep_copies_children(self):
        """Verify a cloned frame owns fresh copies of its children."""
        page = PageNode()
        frame = FrameNode()
        rect = RectangleNode()
        page.append_child(frame)
        frame.append_child(rect)
        copy = frame.clone()
        assert len(copy.children) == 1
        assert copy.children[0] is not rect
        assert copy.children[0].parent is copy

    def test_descendant_path_finds_counterpart(self):
        """Verify a path taken in one subtree resolves to the twin in its clone."""
        page = PageNode()
        frame = FrameNode()
        page.append_child(frame)
        frame.append_child(VectorNode("v"))
        target = RectangleNode("same-name")
        frame.append_child(RectangleNode("same-name"))
        frame.append_child(target)
        copy = frame.clone()
        twin = copy.at_path(frame.descendant_path(target))
        assert twin is copy.children[2]
        assert twin is not target

    def test_descendant_path_rejects_unrelated_node(self):
        """Verify asking for a path to a foreign node raises HostError."""
        with pytest.raises(HostError):
            FrameNode().descendant_path(RectangleNode())


class TestGeometry:
    """Tests for resize and positions."""

    def test_resize_rejects_tiny_sizes(self):
        """Verify sizes under 0.01 are refused."""
        with pytest.raises(HostError):
            RectangleNode().resize(0, 10)

    def test_absolute_position_sums_frames(self):
        """Verify absolute_position adds up ancestor offsets."""
        outer, inner = FrameNode(), FrameNode()
        rect = RectangleNode()
        outer.x, outer.y = 100, 50
        inner.x, inner.y = 10, 5
        rect.x, rect.y = 1, 2
        outer.append_child(inner)
        inner.append_child(rect)
        assert rect.absolute_position() == (111, 57)

    def test_component_instance_mirrors_children(self):
        """Verify create_instance copies size and children of the component."""
        component = ComponentNode("Card")
        component.resize(40, 20)
        component.append_child(RectangleNode())
        instance = component.create_instance()
        assert instance.main_component is component
        assert (instance.width, instance.height) == (40, 20)
        assert len(instance.children) == 1


class TestMemoryHostFonts:
    """Tests for font loading on the in-memory host."""

    @pytest.mark.asyncio
    async def test_load_font_from_catalog(self, host):
        """Verify a catalogued face loads."""
        await host.load_font(FontName("Inter", "Bold"))
        assert FontName("Inter", "Bold") in host.loaded_fonts

    @pytest.mark.asyncio
    async def test_load_missing_font_raises(self, host):
        """Verify an unknown face raises FontLoadError."""
        with pytest.raises(FontLoadError) as exc_info:
            await host.load_font(FontName("Inter", "Black"))
        assert exc_info.value.style == "Black"

    def test_set_font_requires_loaded_font(self, host, text_node):
        """Verify restyling with an unloaded face raises."""
        with pytest.raises(FontNotLoadedError):
            host.set_font(text_node, FontName("Inter", "Bold"), 700)


class TestMemoryHostFlatten:
    """Tests for MemoryHost.flatten()."""

    @pytest.mark.asyncio
    async def test_flatten_consumes_input(self, host, text_node):
        """Verify the text is replaced in place by a vector of the same box."""
        await host.load_font(text_node.font_name)
        page = host.current_page
        vector = host.flatten([text_node])
        assert text_node.removed
        assert page.children == [vector]
        assert (vector.x, vector.y, vector.width, vector.height) == (10, 10, 200, 40)

    def test_flatten_requires_loaded_font(self, host, text_node):
        """Verify flattening text with an unloaded face raises."""
        with pytest.raises(FontNotLoadedError):
            host.flatten([text_node])

    def test_flatten_detached_node_rejected(self, host):
        """Verify nodes outside the document cannot be flattened."""
        with pytest.raises(HostError):
            host.flatten([RectangleNode()])

    @pytest.mark.asyncio
    async def test_flatten_mixed_text_needs_every_segment_font(self, host):
        """Verify mixed-font text needs all of its faces loaded."""
        text = TextNode("Hi", MIXED, font_weight=MIXED)
        text.segment_fonts = [FontName("Inter", "Regular"), FontName("Inter", "Bold")]
        host.current_page.append_child(text)
        await host.load_font(FontName("Inter", "Regular"))
        with pytest.raises(FontNotLoadedError):
            host.flatten([text])


class TestMemoryHostVariants:
    """Tests for combine_as_variants() and set_reactions()."""

    def _components(self, host):
        first = host.create_component()
        first.resize(50, 20)
        second = host.create_component()
        second.resize(50, 20)
        second.x = 200
        return first, second

    def test_combine_as_variants_bounds(self, host):
        """Verify the set spans its components and re-roots them."""
        first, second = self._components(host)
        component_set = host.combine_as_variants([first, second], host.current_page)
        assert (component_set.width, component_set.height) == (250, 20)
        assert component_set.variants == [first, second]
        assert second.x == 200
        assert host.current_page.children == [component_set]

    @pytest.mark.asyncio
    async def test_set_reactions_rejects_unknown_destination(self, host):
        """Verify a reaction pointing outside the document is refused."""
        first, _ = self._components(host)
        reaction = Reaction(Trigger("AFTER_TIMEOUT", 0.1), (Action("999:999"),))
        with pytest.raises(HostError):
            await host.set_reactions(first, [reaction])

    @pytest.mark.asyncio
    async def test_overlapping_reaction_writes_rejected(self, host):
        """Verify concurrent reaction writes fail while sequential ones succeed."""
        first, second = self._components(host)
        to_second = [Reaction(Trigger("AFTER_TIMEOUT", 0.1), (Action(second.id),))]
        to_first = [Reaction(Trigger("AFTER_TIMEOUT", 0.1), (Action(first.id),))]

        with pytest.raises(HostError):
            await asyncio.gather(
                host.set_reactions(first, to_second),
                host.set_reactions(second, to_first),
            )

        await host.set_reactions(first, to_second)
        await host.set_reactions(second, to_first)
        assert first.reactions == to_second
        assert second.reactions == to_first


class TestMemoryHostEvents:
    """Tests for selection, page switching and listeners."""

    def test_selection_change_fires_listener(self, host, text_node):
        """Verify set_selection notifies selectionchange listeners."""
        calls = []
        host.on(SELECTION_CHANGE, lambda: calls.append("sel"))
        host.set_selection([])
        assert calls == ["sel"]

    def test_selection_must_be_on_current_page(self, host):
        """Verify nodes from another page cannot be selected."""
        other = host.create_page()
        rect = RectangleNode()
        other.append_child(rect)
        with pytest.raises(HostError):
            host.set_selection([rect])

    def test_page_change_fires_once(self, host):
        """Verify switching pages fires, staying on the same page does not."""
        calls = []
        host.on(CURRENT_PAGE_CHANGE, lambda: calls.append("page"))
        other = host.create_page()
        host.set_current_page(other)
        host.set_current_page(other)
        assert calls == ["page"]

    def test_removed_nodes_drop_out_of_selection(self, host, text_node):
        """Verify a removed node no longer appears in the selection."""
        text_node.remove()
        assert host.selection == []

    def test_document_without_pages_rejected(self):
        """Verify a host cannot be built over a page-less document."""
        with pytest.raises(HostError):
            MemoryHost(DocumentNode())
