"""YAML configuration for text-shimmer.

Example ``text-shimmer.yaml``::

    log_level: INFO

    placement:
      mode: page            # or "legacy"
      page_name: Shimmer Components
      page_gap: 100
      below_gap: 20
      variant_spacing: 200

    fonts:
      auto_bold: true
      semibold_threshold: 500
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

from text_shimmer.exceptions import ConfigError

CONFIG_FILENAME = "text-shimmer.yaml"
USER_CONFIG_PATH = Path.home() / ".config" / "text-shimmer" / "config.yaml"
DEFAULT_PAGE_NAME = "Shimmer Components"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class PlacementMode(str, Enum):
    """Where a generated variant group ends up.

    ``PAGE`` moves it to a dedicated page and expects a single text layer;
    ``LEGACY`` drops it right under the source text, which it replaces.
    """

    PAGE = "page"
    LEGACY = "legacy"


@dataclass
class PlacementSettings:
    mode: PlacementMode = PlacementMode.PAGE
    page_name: str = DEFAULT_PAGE_NAME
    page_gap: float = 100.0
    below_gap: float = 20.0
    variant_spacing: float = 200.0


@dataclass
class FontSettings:
    auto_bold: bool = True
    semibold_threshold: int = 500


@dataclass
class Config:
    placement: PlacementSettings = field(default_factory=PlacementSettings)
    fonts: FontSettings = field(default_factory=FontSettings)
    log_level: str = "WARNING"

    @classmethod
    def load(cls, path: Path | None = None) -> Config:
        """Load from *path*, else the first config file found, else defaults."""
        if path is not None:
            if not path.exists():
                raise FileNotFoundError(f"Config file not found: {path}")
            return cls.from_file(path)
        for candidate in (Path.cwd() / CONFIG_FILENAME, USER_CONFIG_PATH):
            if candidate.exists():
                return cls.from_file(candidate)
        return cls()

    @classmethod
    def from_file(cls, path: Path) -> Config:
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e
        logging.getLogger(__name__).debug("Loaded config from %s", path)
        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Config:
        if not isinstance(data, dict):
            raise ConfigError("Config root must be a mapping")
        unknown = set(data) - {"placement", "fonts", "log_level"}
        if unknown:
            raise ConfigError(f"Unknown config section: {sorted(unknown)[0]}", key=sorted(unknown)[0])

        config = cls()
        config.placement = _parse_placement(data.get("placement") or {})
        config.fonts = _parse_fonts(data.get("fonts") or {})

        level = str(data.get("log_level", config.log_level)).upper()
        if level not in _LOG_LEVELS:
            raise ConfigError(f"Invalid log level: {level}", key="log_level")
        config.log_level = level
        return config

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["placement"]["mode"] = self.placement.mode.value
        return data


def _require_mapping(value: Any, key: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ConfigError(f"'{key}' must be a mapping", key=key)
    return value


def _number(section: dict[str, Any], name: str, default: float, key: str) -> float:
    value = section.get(name, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"'{key}' must be a number", key=key)
    if value < 0:
        raise ConfigError(f"'{key}' must not be negative", key=key)
    return float(value)


def _parse_placement(raw: Any) -> PlacementSettings:
    section = _require_mapping(raw, "placement")
    settings = PlacementSettings()

    mode = section.get("mode", settings.mode.value)
    try:
        settings.mode = PlacementMode(mode)
    except ValueError:
        raise ConfigError(
            f"placement.mode must be one of {[m.value for m in PlacementMode]}",
            key="placement.mode",
        ) from None

    page_name = section.get("page_name", settings.page_name)
    if not isinstance(page_name, str) or not page_name.strip():
        raise ConfigError("placement.page_name must be a non-empty string", key="placement.page_name")
    settings.page_name = page_name

    settings.page_gap = _number(section, "page_gap", settings.page_gap, "placement.page_gap")
    settings.below_gap = _number(section, "below_gap", settings.below_gap, "placement.below_gap")
    settings.variant_spacing = _number(
        section, "variant_spacing", settings.variant_spacing, "placement.variant_spacing"
    )
    return settings


def _parse_fonts(raw: Any) -> FontSettings:
    section = _require_mapping(raw, "fonts")
    settings = FontSettings()

    auto_bold = section.get("auto_bold", settings.auto_bold)
    if not isinstance(auto_bold, bool):
        raise ConfigError("fonts.auto_bold must be true or false", key="fonts.auto_bold")
    settings.auto_bold = auto_bold

    threshold = section.get("semibold_threshold", settings.semibold_threshold)
    if isinstance(threshold, bool) or not isinstance(threshold, int) or not 1 <= threshold <= 1000:
        raise ConfigError(
            "fonts.semibold_threshold must be an integer between 1 and 1000",
            key="fonts.semibold_threshold",
        )
    settings.semibold_threshold = threshold
    return settings
