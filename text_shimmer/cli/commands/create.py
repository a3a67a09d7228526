"""Create command - build shimmer variants for text layers in a document."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from text_shimmer.api import ShimmerGenerator
from text_shimmer.config import Config, PlacementMode
from text_shimmer.exceptions import ShimmerError
from text_shimmer.fonts import FontCache, FontCatalog, GlyphOutliner
from text_shimmer.plugin import CreateShimmerRequest

console = Console()


@click.command()
@click.argument("document", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-o", "--output", type=click.Path(dir_okay=False, path_type=Path), help="Output document (JSON)")
@click.option("-n", "--node", "nodes", multiple=True, help="Node id or name to select (repeatable)")
@click.option("--auto-bold/--no-auto-bold", default=None, help="Escalate light text to a bold style")
@click.option("--replace", "replace_text", is_flag=True, help="Swap the text for a start-variant instance")
@click.option("--mode", type=click.Choice([m.value for m in PlacementMode]), help="Placement mode")
@click.option("--page-name", help="Target page for generated components")
@click.option("--font", "fonts", multiple=True, help="Loadable face as 'Family:Style' (repeatable)")
@click.option("--system-fonts", is_flag=True, help="Allow every installed face and outline real glyphs")
@click.pass_context
def create(
    ctx: click.Context,
    document: Path,
    output: Path | None,
    nodes: tuple[str, ...],
    auto_bold: bool | None,
    replace_text: bool,
    mode: str | None,
    page_name: str | None,
    fonts: tuple[str, ...],
    system_fonts: bool,
) -> None:
    """Create a shimmer effect for text layers in DOCUMENT (JSON or SVG).

    Without --node, every text layer on the first page is selected.
    """
    config: Config = ctx.obj.get("config") or Config.load()
    placement = config.placement
    if mode:
        placement = replace(placement, mode=PlacementMode(mode))
    if page_name:
        placement = replace(placement, page_name=page_name)
    config = replace(config, placement=placement)

    catalog = FontCatalog.from_specs(fonts)
    outliner = None
    if system_fonts:
        cache = FontCache()
        with console.status("[bold green]Indexing installed fonts..."):
            cache.prewarm()
        catalog.update(FontCatalog.from_font_cache(cache))
        outliner = GlyphOutliner(cache)

    request = CreateShimmerRequest(
        auto_font_weight=config.fonts.auto_bold if auto_bold is None else auto_bold,
        replace_text=replace_text,
    )
    output = output or document.with_name(f"{document.stem}.shimmer.json")

    generator = ShimmerGenerator(config, fonts=catalog, outliner=outliner)
    try:
        result = generator.generate_file(document, output, nodes, request)
    except ShimmerError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1) from e

    for note in result.notifications:
        style = "red" if note.error else "green"
        console.print(f"[{style}]{note.message}[/{style}]")

    if result.results:
        table = Table(title="Shimmer components")
        table.add_column("Source", style="cyan")
        table.add_column("Size", style="yellow")
        table.add_column("Font", style="green")
        table.add_column("Page", style="magenta")
        table.add_column("Group", style="dim")
        for item in result.results:
            fonts_used = ", ".join(str(f) for f in item.fonts.loaded)
            if item.fonts.applied:
                fonts_used += f" -> {item.fonts.applied.style}"
            table.add_row(
                item.source_id,
                f"{item.plan.width:g}x{item.plan.height:g}",
                fonts_used,
                item.placement.target_page.name,
                item.group.component_set.id,
            )
        console.print(table)

    console.print(f"[bold]Output:[/bold] {output}")
    if not result.success:
        raise SystemExit(1)
