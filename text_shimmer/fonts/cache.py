"""Fontconfig-backed index of installed font faces.

The index is built from ``fc-list`` once and persisted as JSON so later runs
skip the subprocess. Faces are loaded lazily with fontTools.
"""

from __future__ import annotations

import json
import logging
import os
import subprocess
from dataclasses import dataclass
from pathlib import Path

from fontTools.ttLib import TTFont

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FaceEntry:
    """One installed face as reported by fontconfig."""

    path: Path
    index: int
    families: tuple[str, ...]
    styles: tuple[str, ...]
    postscript: str

    def to_dict(self) -> dict:
        return {
            "path": str(self.path),
            "index": self.index,
            "families": list(self.families),
            "styles": list(self.styles),
            "postscript": self.postscript,
        }

    @classmethod
    def from_dict(cls, data: dict) -> FaceEntry:
        return cls(
            path=Path(data["path"]),
            index=int(data.get("index", 0)),
            families=tuple(data.get("families", [])),
            styles=tuple(data.get("styles", [])),
            postscript=data.get("postscript", ""),
        )


def _split_names(value: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in value.split(",") if part.strip())


class FontCache:
    """Cache of installed faces, keyed by family and style name."""

    _cache_version = 1
    FC_FORMAT = "%{file}|%{index}|%{family}|%{style}|%{postscriptname}\\n"

    def __init__(self, cache_file: Path | None = None) -> None:
        self._cache_file = cache_file
        self._fc_cache: list[FaceEntry] | None = None
        self._fonts: dict[tuple[Path, int], TTFont] = {}

    def _cache_path(self) -> Path:
        if self._cache_file is not None:
            return self._cache_file
        env_path = os.environ.get("TEXT_SHIMMER_FONT_CACHE")
        if env_path:
            return Path(env_path)
        return Path.home() / ".cache" / "text-shimmer" / "fonts.json"

    def _read_cache(self) -> list[FaceEntry] | None:
        path = self._cache_path()
        if not path.exists():
            return None
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable font cache %s: %s", path, e)
            return None
        if data.get("version") != self._cache_version:
            logger.debug("Font cache version mismatch, rebuilding")
            return None
        return [FaceEntry.from_dict(item) for item in data.get("fonts", [])]

    def _save_cache(self, entries: list[FaceEntry]) -> None:
        path = self._cache_path()
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            payload = {
                "version": self._cache_version,
                "fonts": [entry.to_dict() for entry in entries],
            }
            path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        except OSError as e:
            logger.warning("Could not write font cache %s: %s", path, e)

    def _scan_fontconfig(self) -> list[FaceEntry]:
        """Run fc-list and parse one face per output line."""
        try:
            result = subprocess.run(
                ["fc-list", f"--format={self.FC_FORMAT}"],
                capture_output=True,
                text=True,
                timeout=8,
            )
        except (FileNotFoundError, subprocess.TimeoutExpired) as e:
            logger.warning("fontconfig unavailable: %s", e)
            return []
        if result.returncode != 0:
            logger.warning("fc-list failed: %s", result.stderr.strip())
            return []

        entries = []
        for line in result.stdout.splitlines():
            parts = line.split("|")
            if len(parts) < 4:
                continue
            path_str, index_str, family_str, style_str = parts[:4]
            postscript = parts[4].strip() if len(parts) > 4 else ""
            families = _split_names(family_str)
            if not path_str.strip() or not families:
                continue
            entries.append(
                FaceEntry(
                    path=Path(path_str.strip()),
                    index=int(index_str) if index_str.strip().isdigit() else 0,
                    families=families,
                    styles=_split_names(style_str) or ("Regular",),
                    postscript=postscript,
                )
            )
        return entries

    def _load_fc_cache(self) -> list[FaceEntry]:
        if self._fc_cache is None:
            entries = self._read_cache()
            if entries is None:
                entries = self._scan_fontconfig()
                if entries:
                    self._save_cache(entries)
            self._fc_cache = entries
        return self._fc_cache

    def prewarm(self) -> int:
        """Build (or load) the face index and return the number of faces."""
        return len(self._load_fc_cache())

    @property
    def entries(self) -> list[FaceEntry]:
        return list(self._load_fc_cache())

    def families(self) -> list[str]:
        names = {entry.families[0] for entry in self._load_fc_cache()}
        return sorted(names, key=str.lower)

    def styles_for(self, family: str) -> list[str]:
        wanted = family.strip().lower()
        styles: list[str] = []
        for entry in self._load_fc_cache():
            if any(f.lower() == wanted for f in entry.families):
                for style in entry.styles[:1]:
                    if style not in styles:
                        styles.append(style)
        return styles

    def find_face(self, family: str, style: str) -> tuple[Path, int] | None:
        """Exact family/style lookup, ignoring case and separators in the style."""
        wanted_family = family.strip().lower()
        wanted_style = _normalize_style(style)
        for entry in self._load_fc_cache():
            if not any(f.lower() == wanted_family for f in entry.families):
                continue
            if any(_normalize_style(s) == wanted_style for s in entry.styles):
                return entry.path, entry.index
        return None

    def get_font(self, family: str, style: str) -> TTFont | None:
        """Load the face for family/style, or None if it is not installed."""
        match = self.find_face(family, style)
        if match is None:
            return None
        if match not in self._fonts:
            path, index = match
            try:
                self._fonts[match] = TTFont(path, fontNumber=index, lazy=True)
            except Exception as e:
                logger.warning("Failed to load %s:%d: %s", path, index, e)
                return None
            logger.debug("Loaded %s %s from %s", family, style, path.name)
        return self._fonts[match]


def _normalize_style(style: str) -> str:
    return "".join(ch for ch in style.lower() if ch.isalnum())
