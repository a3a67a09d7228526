"""Inspect command - print the node tree of a document."""

from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console
from rich.tree import Tree

from text_shimmer.exceptions import ShimmerError
from text_shimmer.scene.nodes import BaseNode, ChildrenMixin, ComponentNode, SceneNode, TextNode
from text_shimmer.scene.serialize import load_document

console = Console()


def describe(node: BaseNode) -> str:
    label = f"[bold]{node.name}[/bold] [dim]{node.type.value} {node.id}[/dim]"
    if isinstance(node, SceneNode):
        label += f" ({node.x:g}, {node.y:g}) {node.width:g}x{node.height:g}"
        if node.is_mask:
            label += " [yellow]mask[/yellow]"
    if isinstance(node, TextNode):
        label += f" [green]{node.font_name}[/green] {node.characters!r}"
    if isinstance(node, ComponentNode):
        for reaction in node.reactions:
            for action in reaction.actions:
                kind = action.transition.type if action.transition else "INSTANT"
                label += (
                    f" [magenta]-> {action.destination_id} after "
                    f"{(reaction.trigger.timeout or 0) * 1000:g}ms {kind}[/magenta]"
                )
    return label


def build_tree(node: BaseNode, tree: Tree) -> Tree:
    if isinstance(node, ChildrenMixin):
        for child in node.children:
            build_tree(child, tree.add(describe(child)))
    return tree


@click.command("inspect")
@click.argument("document", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def inspect_document(document: Path) -> None:
    """Show pages and nodes of DOCUMENT (JSON or SVG)."""
    try:
        loaded = load_document(document)
    except ShimmerError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1) from e

    console.print(build_tree(loaded.document, Tree(f"[bold]{document.name}[/bold]")))
    if loaded.fonts:
        console.print(f"[bold]Fonts:[/bold] {', '.join(str(f) for f in loaded.fonts)}")
