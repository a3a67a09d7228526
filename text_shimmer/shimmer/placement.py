"""Placement of the finished variant group and cleanup of transient nodes."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum

from text_shimmer.config import PlacementMode, PlacementSettings
from text_shimmer.exceptions import NodeRemovedError
from text_shimmer.scene.host import SceneHost
from text_shimmer.scene.nodes import (
    BaseNode,
    ComponentNode,
    ComponentSetNode,
    InstanceNode,
    PageNode,
    SceneNode,
    TextNode,
)

logger = logging.getLogger(__name__)


class RemovalOutcome(str, Enum):
    REMOVED = "removed"
    ALREADY_ABSENT = "already-absent"


def remove_transient(node: BaseNode) -> RemovalOutcome:
    """Remove *node*; a node that is already gone counts as success."""
    try:
        node.remove()
    except NodeRemovedError:
        logger.debug("%s already removed", node.name)
        return RemovalOutcome.ALREADY_ABSENT
    return RemovalOutcome.REMOVED


def cleanup_transients(nodes: Iterable[BaseNode]) -> dict[str, RemovalOutcome]:
    return {node.id: remove_transient(node) for node in nodes}


def resolve_target_page(host: SceneHost, name: str) -> tuple[PageNode, bool]:
    """First page named exactly *name*, created if missing; returns (page, created)."""
    for page in host.document.pages:
        if page.name == name:
            return page, False
    page = host.create_page()
    page.name = name
    logger.info("Created page %r", name)
    return page, True


def rightmost_node(page: PageNode, exclude: Iterable[BaseNode] = ()) -> SceneNode | None:
    skip = {id(n) for n in exclude}
    candidates = [
        c for c in page.children if isinstance(c, SceneNode) and id(c) not in skip
    ]
    if not candidates:
        return None
    return max(candidates, key=lambda n: n.x + n.width)


def substitute_instance(text: TextNode, component: ComponentNode) -> InstanceNode:
    """Put an instance of *component* where *text* was, then delete the text."""
    parent = text.parent
    if parent is None:
        raise NodeRemovedError(text.id, text.name)
    index = parent.children.index(text)  # type: ignore[attr-defined]
    instance = component.create_instance()
    instance.x, instance.y = text.x, text.y
    parent.insert_child(index, instance)  # type: ignore[attr-defined]
    text.remove()
    return instance


@dataclass
class PlacementResult:
    mode: PlacementMode
    target_page: PageNode
    page_created: bool = False
    instance: InstanceNode | None = None
    source_removed: bool = False
    selection: list[BaseNode] = field(default_factory=list)


def place_below_text(
    host: SceneHost, group: ComponentSetNode, text: TextNode, gap: float
) -> PlacementResult:
    """Legacy placement: under the text on the current page, text removed."""
    x, y = text.absolute_position()
    group.x = x
    group.y = y + text.height + gap
    removed = remove_transient(text) is RemovalOutcome.REMOVED

    host.set_selection([group])
    host.scroll_into_view([group])
    return PlacementResult(
        mode=PlacementMode.LEGACY,
        target_page=host.current_page,
        source_removed=removed,
        selection=[group],
    )


def place_on_page(
    host: SceneHost,
    group: ComponentSetNode,
    start: ComponentNode,
    text: TextNode,
    settings: PlacementSettings,
    replace_text: bool,
) -> PlacementResult:
    """Move the group to the shimmer page, right of whatever is already there."""
    original_page = host.current_page
    page, created = resolve_target_page(host, settings.page_name)

    anchor = rightmost_node(page, exclude=[group])
    page.append_child(group)
    if anchor is None:
        group.x, group.y = 0.0, 0.0
    else:
        group.x = anchor.x + anchor.width + settings.page_gap
        group.y = anchor.y

    result = PlacementResult(mode=PlacementMode.PAGE, target_page=page, page_created=created)
    if replace_text:
        instance = substitute_instance(text, start)
        result.instance = instance
        result.source_removed = True
        result.selection = [instance]
        host.set_selection([instance])
        host.scroll_into_view([instance])
    else:
        # show the group on its page, then hand the original page back
        host.set_current_page(page)
        host.set_selection([group])
        host.scroll_into_view([group])
        host.set_current_page(original_page)
        result.selection = [group]
    return result
