"""Unit tests for text_shimmer.config.

Tests cover defaults, YAML loading, validation errors with their keys, and
config file discovery.
"""

from pathlib import Path

import pytest
import yaml

from text_shimmer.config import Config, PlacementMode
from text_shimmer.exceptions import ConfigError


class TestDefaults:
    """Tests for default settings."""

    def test_default_values(self):
        """Verify the defaults match the documented placement and font settings."""
        config = Config()
        assert config.placement.mode is PlacementMode.PAGE
        assert config.placement.page_name == "Shimmer Components"
        assert config.placement.page_gap == 100
        assert config.placement.below_gap == 20
        assert config.placement.variant_spacing == 200
        assert config.fonts.auto_bold is True
        assert config.fonts.semibold_threshold == 500
        assert config.log_level == "WARNING"

    def test_to_dict_is_yaml_friendly(self):
        """Verify to_dict() emits plain values that survive a YAML dump."""
        data = Config().to_dict()
        assert data["placement"]["mode"] == "page"
        assert yaml.safe_load(yaml.safe_dump(data)) == data


class TestFromFile:
    """Tests for loading YAML files."""

    def test_partial_file_keeps_defaults(self, tmp_path: Path):
        """Verify unspecified keys keep their defaults."""
        path = tmp_path / "text-shimmer.yaml"
        path.write_text(
            "log_level: debug\nplacement:\n  mode: legacy\n  below_gap: 8\n",
            encoding="utf-8",
        )
        config = Config.load(path)
        assert config.placement.mode is PlacementMode.LEGACY
        assert config.placement.below_gap == 8
        assert config.placement.page_gap == 100
        assert config.log_level == "DEBUG"

    def test_empty_file_is_default(self, tmp_path: Path):
        """Verify an empty YAML file yields the defaults."""
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert Config.load(path) == Config()

    def test_missing_file(self, tmp_path: Path):
        """Verify an explicit missing path raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError, match="Config file not found"):
            Config.load(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path: Path):
        """Verify malformed YAML raises ConfigError."""
        path = tmp_path / "bad.yaml"
        path.write_text("placement: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            Config.load(path)

    def test_discovers_file_in_cwd(self, tmp_path: Path, monkeypatch):
        """Verify text-shimmer.yaml in the working directory is picked up."""
        (tmp_path / "text-shimmer.yaml").write_text(
            "fonts:\n  auto_bold: false\n", encoding="utf-8"
        )
        monkeypatch.chdir(tmp_path)
        assert Config.load().fonts.auto_bold is False


class TestValidation:
    """Tests for Config.from_dict() validation."""

    @pytest.mark.parametrize(
        "data,key",
        [
            ({"placement": {"mode": "sideways"}}, "placement.mode"),
            ({"placement": {"page_name": "  "}}, "placement.page_name"),
            ({"placement": {"page_gap": -1}}, "placement.page_gap"),
            ({"placement": {"variant_spacing": "wide"}}, "placement.variant_spacing"),
            ({"placement": {"below_gap": True}}, "placement.below_gap"),
            ({"fonts": {"auto_bold": "yes"}}, "fonts.auto_bold"),
            ({"fonts": {"semibold_threshold": 0}}, "fonts.semibold_threshold"),
            ({"fonts": {"semibold_threshold": 550.5}}, "fonts.semibold_threshold"),
            ({"log_level": "LOUD"}, "log_level"),
            ({"placement": ["page"]}, "placement"),
            ({"extras": {}}, "extras"),
        ],
    )
    def test_invalid_values_name_their_key(self, data, key):
        """Verify each invalid value raises ConfigError carrying its key."""
        with pytest.raises(ConfigError) as exc_info:
            Config.from_dict(data)
        assert exc_info.value.key == key

    def test_root_must_be_mapping(self):
        """Verify a non-mapping root is rejected."""
        with pytest.raises(ConfigError):
            Config.from_dict(["placement"])
