"""High-level API: run the shimmer plugin over document files."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from text_shimmer.config import Config
from text_shimmer.exceptions import DocumentFormatError
from text_shimmer.fonts.catalog import FontCatalog
from text_shimmer.fonts.outlines import GlyphOutliner
from text_shimmer.plugin import CreateShimmerRequest, ShimmerPlugin
from text_shimmer.scene.memory import MemoryHost, Notification
from text_shimmer.scene.nodes import BaseNode, DocumentNode, TextNode
from text_shimmer.scene.serialize import LoadedDocument, load_document, save_document
from text_shimmer.shimmer.pipeline import ShimmerResult

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    """Outcome of one plugin run over a document."""

    document: DocumentNode
    host: MemoryHost
    results: list[ShimmerResult] = field(default_factory=list)
    output_path: Path | None = None

    @property
    def notifications(self) -> list[Notification]:
        return self.host.notifications

    @property
    def success(self) -> bool:
        return bool(self.results) and not any(n.error for n in self.notifications)

    @property
    def errors(self) -> list[str]:
        return [n.message for n in self.notifications if n.error]


def select_nodes(document: DocumentNode, refs: Sequence[str]) -> list[BaseNode]:
    """Resolve node ids or names on the first page; no refs means every text node."""
    page = document.pages[0]
    if not refs:
        return page.find_all(lambda n: isinstance(n, TextNode))
    nodes = []
    for ref in refs:
        match = next((n for n in page.find_all() if n.id == ref), None)
        if match is None:
            match = next((n for n in page.find_all() if n.name == ref), None)
        if match is None:
            raise DocumentFormatError(f"No node with id or name {ref!r} on {page.name!r}")
        nodes.append(match)
    return nodes


class ShimmerGenerator:
    """Run shimmer generation against in-memory documents.

    Example:
        >>> from text_shimmer import ShimmerGenerator
        >>> generator = ShimmerGenerator()
        >>> generator.generate_file(Path("doc.json"), Path("out.json"))
    """

    def __init__(
        self,
        config: Config | None = None,
        fonts: FontCatalog | None = None,
        outliner: GlyphOutliner | None = None,
    ) -> None:
        self.config = config or Config()
        self.fonts = fonts
        self.outliner = outliner

    def _catalog(self, loaded: LoadedDocument) -> FontCatalog:
        catalog = FontCatalog(loaded.fonts)
        if self.fonts is not None:
            catalog.update(self.fonts)
        return catalog

    def generate(
        self,
        loaded: LoadedDocument,
        node_refs: Sequence[str] = (),
        request: CreateShimmerRequest | None = None,
    ) -> GenerationResult:
        request = request or CreateShimmerRequest(auto_font_weight=self.config.fonts.auto_bold)
        host = MemoryHost(loaded.document, fonts=self._catalog(loaded), outliner=self.outliner)
        host.set_selection(select_nodes(loaded.document, node_refs))

        plugin = ShimmerPlugin(host, self.config)
        plugin.start()
        results = asyncio.run(plugin.handle_create(request))
        return GenerationResult(loaded.document, host, results)

    def generate_file(
        self,
        input_path: Path,
        output_path: Path,
        node_refs: Sequence[str] = (),
        request: CreateShimmerRequest | None = None,
    ) -> GenerationResult:
        loaded = load_document(input_path, outliner=self.outliner)
        result = self.generate(loaded, node_refs, request)
        save_document(output_path, result.document, result.host.fonts)
        result.output_path = output_path
        logger.info("Wrote %s", output_path)
        return result
