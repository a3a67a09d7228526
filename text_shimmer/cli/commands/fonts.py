"""Fonts command - installed faces and auto-bold probing."""

from __future__ import annotations

import asyncio

import click
from rich.console import Console
from rich.table import Table

from text_shimmer.fonts import FontCache, FontCatalog, FontResolver, style_to_weight
from text_shimmer.scene.memory import MemoryHost
from text_shimmer.scene.nodes import FontName, TextNode

console = Console()


@click.group()
def fonts() -> None:
    """Font management commands."""
    pass


@fonts.command("list")
@click.option("--family", help="Filter by font family name")
def list_fonts(family: str | None) -> None:
    """List installed font faces."""
    cache = FontCache()

    with console.status("[bold green]Loading fonts..."):
        cache.prewarm()

    table = Table(title="Available Fonts")
    table.add_column("Family", style="cyan")
    table.add_column("Style", style="green")
    table.add_column("Weight", style="yellow")
    table.add_column("Path", style="dim")

    count = 0
    for entry in cache.entries:
        font_family = entry.families[0]
        font_style = entry.styles[0]
        if family and family.lower() not in font_family.lower():
            continue
        font_path = str(entry.path)
        table.add_row(
            font_family,
            font_style,
            str(style_to_weight(font_style)),
            font_path[:50] + "..." if len(font_path) > 50 else font_path,
        )
        count += 1

    console.print(table)
    console.print(f"\n[bold]Total:[/bold] {count} fonts")


@fonts.command("cache")
@click.option("--refresh", is_flag=True, help="Force cache refresh")
@click.option("--clear", is_flag=True, help="Clear the cache")
def manage_cache(refresh: bool, clear: bool) -> None:
    """Manage the font index cache."""
    cache = FontCache()
    cache_path = cache._cache_path()

    if clear:
        if cache_path.exists():
            cache_path.unlink()
            console.print("[green]Cache cleared[/green]")
        else:
            console.print("[yellow]No cache to clear[/yellow]")
        return

    if refresh:
        if cache_path.exists():
            cache_path.unlink()
        with console.status("[bold green]Refreshing cache..."):
            count = cache.prewarm()
        console.print(f"[green]Cache refreshed:[/green] {count} fonts indexed")
        return

    if cache_path.exists():
        size = cache_path.stat().st_size
        console.print(f"[bold]Cache location:[/bold] {cache_path}")
        console.print(f"[bold]Cache size:[/bold] {size / 1024:.1f} KB")
    else:
        console.print("[yellow]No cache file exists[/yellow]")


@fonts.command("probe")
@click.argument("family")
@click.option("--style", default="Regular", show_default=True, help="Current style of the text")
@click.option("--weight", type=int, help="Current weight (derived from --style if omitted)")
@click.option(
    "--available",
    multiple=True,
    help="Loadable style of FAMILY (repeatable); defaults to installed faces",
)
def probe(family: str, style: str, weight: int | None, available: tuple[str, ...]) -> None:
    """Show which style auto-bold would pick for FAMILY."""
    if available:
        catalog = FontCatalog(FontName(family, s) for s in available)
    else:
        cache = FontCache()
        with console.status("[bold green]Loading fonts..."):
            cache.prewarm()
        catalog = FontCatalog.from_font_cache(cache)
    catalog.add(FontName(family, style))

    host = MemoryHost(fonts=catalog)
    text = TextNode("Sample", FontName(family, style), font_weight=weight or style_to_weight(style))
    host.current_page.append_child(text)
    resolution = asyncio.run(FontResolver(host).prepare(text, auto_bold=True))

    console.print(f"[bold]Styles of {family}:[/bold] {', '.join(catalog.styles_for(family))}")
    if resolution.applied is not None:
        console.print(
            f"[green]Auto-bold picks:[/green] {resolution.applied.style} "
            f"({resolution.applied.weight})"
        )
    else:
        console.print(f"[yellow]No change:[/yellow] {resolution.skipped}")
