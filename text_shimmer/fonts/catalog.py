"""Set of font faces a host is able to load."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from text_shimmer.fonts.cache import FontCache
from text_shimmer.scene.nodes import FontName


class FontCatalog:
    def __init__(self, fonts: Iterable[FontName] = ()) -> None:
        self._fonts: set[FontName] = set(fonts)

    def __contains__(self, font: object) -> bool:
        return font in self._fonts

    def __iter__(self) -> Iterator[FontName]:
        return iter(sorted(self._fonts, key=lambda f: (f.family, f.style)))

    def __len__(self) -> int:
        return len(self._fonts)

    def add(self, font: FontName) -> None:
        self._fonts.add(font)

    def update(self, fonts: Iterable[FontName]) -> None:
        self._fonts.update(fonts)

    def styles_for(self, family: str) -> list[str]:
        return sorted(f.style for f in self._fonts if f.family == family)

    @classmethod
    def from_specs(cls, specs: Iterable[str]) -> FontCatalog:
        """Build from ``"Family:Style"`` strings."""
        return cls(FontName.parse(spec) for spec in specs)

    @classmethod
    def from_font_cache(cls, cache: FontCache) -> FontCatalog:
        """Every installed family/style pair known to fontconfig."""
        catalog = cls()
        for entry in cache.entries:
            for style in entry.styles[:1]:
                catalog.add(FontName(entry.families[0], style))
        return catalog
