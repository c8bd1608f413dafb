"""Tests for ImporterConfig, AssetTargetLocation and the ConfigManager."""

from __future__ import annotations

from pathlib import Path

import pytest

from sprite_importer.core.config import AssetTargetLocation, ConfigManager, ImporterConfig, TargetLocationType
from sprite_importer.core.datatypes import AnimationTargetObjectType, SpriteAlignment, SpriteNamingScheme
from sprite_importer.core.exceptions import ValidationError


class TestImporterConfigDefaults:
    """Tests for the default configuration values."""

    def test_defaults(self) -> None:
        """A fresh config carries the documented defaults."""
        config = ImporterConfig()

        assert config.naming_scheme is SpriteNamingScheme.CLASSIC
        assert config.non_looping_names == ["death"]
        assert config.target_object_type is AnimationTargetObjectType.SPRITE_RENDERER
        assert config.sprite_alignment is SpriteAlignment.BOTTOM_CENTER
        assert config.sprite_pixels_per_unit == 100.0
        assert config.frame_rate == 60.0
        assert config.aseprite_path is None

    def test_default_lists_are_not_shared(self) -> None:
        """Each config owns its non-looping list."""
        first = ImporterConfig()
        second = ImporterConfig()
        first.add_non_looping_name("hit")

        assert second.non_looping_names == ["death"]

    def test_custom_pivot(self) -> None:
        """``custom_pivot`` pairs the custom alignment coordinates."""
        config = ImporterConfig(sprite_alignment_custom_x=0.25, sprite_alignment_custom_y=0.75)
        assert config.custom_pivot == (0.25, 0.75)


class TestNonLoopingNames:
    """Tests for editing the non-looping name list."""

    def test_add_new_name(self) -> None:
        """A new name is appended."""
        config = ImporterConfig()
        assert config.add_non_looping_name("attack")
        assert config.non_looping_names == ["death", "attack"]

    @pytest.mark.parametrize("name", ["", "death"])
    def test_add_rejects_empty_and_duplicate(self, name: str) -> None:
        """Empty and already listed names are rejected."""
        config = ImporterConfig()
        assert not config.add_non_looping_name(name)
        assert config.non_looping_names == ["death"]

    def test_remove_by_index(self) -> None:
        """Names are removed by position."""
        config = ImporterConfig(non_looping_names=["death", "hit"])
        config.remove_non_looping_name(0)
        assert config.non_looping_names == ["hit"]


class TestAssetTargetLocation:
    """Tests for output directory resolution."""

    def test_same_directory(self) -> None:
        """Same-directory targets resolve to the asset directory."""
        location = AssetTargetLocation(TargetLocationType.SAME_DIRECTORY)
        assert location.target_directory("art/hero") == "art/hero"

    def test_sub_directory(self) -> None:
        """Sub-directory targets are nested in the asset directory."""
        location = AssetTargetLocation(TargetLocationType.SUB_DIRECTORY, sub_directory="Sprites")
        assert Path(location.target_directory("art/hero")) == Path("art/hero/Sprites")

    def test_global_directory(self) -> None:
        """Global targets ignore the asset directory."""
        location = AssetTargetLocation(TargetLocationType.GLOBAL_DIRECTORY, global_directory="Assets/Clips")
        assert location.target_directory("art/hero") == "Assets/Clips"

    def test_from_string_value(self) -> None:
        """A bare string selects the location type."""
        location = AssetTargetLocation.from_value("same_directory", "Sprites")
        assert location.location_type is TargetLocationType.SAME_DIRECTORY
        assert location.sub_directory == "Sprites"

    def test_from_table_value(self) -> None:
        """A table may set every field."""
        location = AssetTargetLocation.from_value({"type": "global_directory", "global_directory": "Out"}, "Sprites")
        assert location.location_type is TargetLocationType.GLOBAL_DIRECTORY
        assert location.global_directory == "Out"


class TestImporterConfigFromMapping:
    """Tests for building a config from TOML values."""

    def test_values_are_converted(self) -> None:
        """Enumerated and numeric values are parsed."""
        config = ImporterConfig.from_mapping(
            {
                "naming_scheme": "file_at_anim_one",
                "non_looping_names": ["death", "hit"],
                "target_object_type": "image",
                "sprite_alignment": "custom",
                "sprite_alignment_custom_x": 0.1,
                "sprite_alignment_custom_y": 0.2,
                "frame_rate": 30,
                "aseprite_path": "/opt/aseprite",
                "sprites_target": "same_directory",
            }
        )

        assert config.naming_scheme is SpriteNamingScheme.FILE_AT_ANIM_ONE
        assert config.non_looping_names == ["death", "hit"]
        assert config.target_object_type is AnimationTargetObjectType.IMAGE
        assert config.sprite_alignment is SpriteAlignment.CUSTOM
        assert config.custom_pivot == (0.1, 0.2)
        assert config.frame_rate == 30.0
        assert config.aseprite_path == Path("/opt/aseprite")
        assert config.sprites_target.location_type is TargetLocationType.SAME_DIRECTORY

    def test_unknown_keys_are_ignored(self) -> None:
        """Keys the config does not know keep the defaults untouched."""
        config = ImporterConfig.from_mapping({"theme": "dark"})
        assert config.naming_scheme is SpriteNamingScheme.CLASSIC

    def test_invalid_enum_raises(self) -> None:
        """An unknown naming scheme is a validation error."""
        with pytest.raises(ValidationError, match="Invalid configuration value"):
            ImporterConfig.from_mapping({"naming_scheme": "bogus"})

    def test_non_positive_frame_rate_raises(self) -> None:
        """The frame rate must be positive."""
        with pytest.raises(ValidationError, match="Frame rate"):
            ImporterConfig.from_mapping({"frame_rate": 0})


class TestConfigManagerDefaults:
    """Tests for configuration without any files."""

    def test_defaults_when_nothing_loaded(self) -> None:
        """An unloaded manager yields the built-in defaults."""
        cfg = ConfigManager(config_dir=Path("/nonexistent"))

        config = cfg.importer_config()

        assert config.naming_scheme is SpriteNamingScheme.CLASSIC
        assert config.non_looping_names == ["death"]

    def test_unknown_importer_uses_global(self) -> None:
        """An importer without its own file sees the global values."""
        cfg = ConfigManager(config_dir=Path("/nonexistent"))

        assert cfg.importer_config("aseprite") == cfg.importer_config()


class TestConfigManagerToml:
    """Tests for TOML-based configuration loading."""

    def test_load_global_config(self, tmp_path: Path) -> None:
        """Global config.toml values are loaded correctly."""
        config_dir = tmp_path / "cfg"
        config_dir.mkdir()
        (config_dir / "config.toml").write_text('naming_scheme = "anim_zero"\n')

        cfg = ConfigManager(config_dir=config_dir)
        cfg.load()

        assert cfg.importer_config().naming_scheme is SpriteNamingScheme.ANIM_ZERO

    def test_load_per_importer_config(self, tmp_path: Path) -> None:
        """Per-importer TOML files override global values."""
        config_dir = tmp_path / "cfg"
        importers_dir = config_dir / "importers"
        importers_dir.mkdir(parents=True)
        (config_dir / "config.toml").write_text("frame_rate = 60\n")
        (importers_dir / "pyxel_edit.toml").write_text("frame_rate = 12\n")

        cfg = ConfigManager(config_dir=config_dir)
        cfg.load()

        assert cfg.importer_config("pyxel_edit").frame_rate == 12.0
        assert cfg.importer_config("aseprite").frame_rate == 60.0

    def test_load_missing_dir_is_silent(self, tmp_path: Path) -> None:
        """Loading from a non-existent directory does not raise."""
        cfg = ConfigManager(config_dir=tmp_path / "does_not_exist")
        cfg.load()

        assert cfg.importer_config().naming_scheme is SpriteNamingScheme.CLASSIC

    def test_invalid_toml_raises(self, tmp_path: Path) -> None:
        """A malformed TOML file is reported as a validation error."""
        (tmp_path / "config.toml").write_text("naming_scheme = \n")

        cfg = ConfigManager(config_dir=tmp_path)
        with pytest.raises(ValidationError, match="Invalid TOML"):
            cfg.load()

    def test_config_dir_property(self, tmp_path: Path) -> None:
        """``config_dir`` returns the configured path."""
        assert ConfigManager(config_dir=tmp_path).config_dir == tmp_path
