"""SVG input for text-shimmer.

This subpackage provides:
- Safe SVG parsing with XXE protection (defusedxml)
- Conversion of ``<text>`` elements into text nodes
"""

from text_shimmer.svg.importer import import_svg, parse_style, text_node_from_element

__all__ = ["import_svg", "parse_style", "text_node_from_element"]
