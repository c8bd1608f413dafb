"""ImporterConfig and ConfigManager — import settings backed by TOML files."""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from sprite_importer.core.datatypes import AnimationTargetObjectType, SpriteAlignment, SpriteNamingScheme
from sprite_importer.core.exceptions import ValidationError

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG_DIR = Path.home() / ".config" / "sprite-importer"


class TargetLocationType(str, Enum):
    """Where generated assets are placed relative to the imported file."""

    SAME_DIRECTORY = "same_directory"
    SUB_DIRECTORY = "sub_directory"
    GLOBAL_DIRECTORY = "global_directory"


@dataclass
class AssetTargetLocation:
    """Resolves the output directory for one kind of generated asset."""

    location_type: TargetLocationType
    sub_directory: str = ""
    global_directory: str = "Assets"

    def target_directory(self, asset_directory: str) -> str:
        """Return the target directory for files imported from *asset_directory*."""
        if self.location_type is TargetLocationType.GLOBAL_DIRECTORY:
            return self.global_directory
        if self.location_type is TargetLocationType.SUB_DIRECTORY:
            return str(Path(asset_directory) / self.sub_directory)
        return asset_directory

    @classmethod
    def from_value(cls, value: Any, default_sub_directory: str) -> AssetTargetLocation:
        """Build a location from a TOML value.

        Accepts a bare type string (``"same_directory"``) or a table with
        ``type``, ``sub_directory`` and ``global_directory`` keys.
        """
        if isinstance(value, str):
            return cls(TargetLocationType(value), sub_directory=default_sub_directory)
        return cls(
            TargetLocationType(value.get("type", TargetLocationType.SUB_DIRECTORY.value)),
            sub_directory=value.get("sub_directory", default_sub_directory),
            global_directory=value.get("global_directory", "Assets"),
        )


@dataclass
class ImporterConfig:
    """Per-job configuration read by the import pipeline.

    Attributes:
        naming_scheme: Convention used to name sliced sprites.
        non_looping_names: Name fragments of animations that must not loop.
        target_object_type: Default component animated by generated clips.
        sprite_alignment: Pivot alignment of sprites without a slice pivot.
        sprite_alignment_custom_x: Custom pivot X for ``custom`` alignment.
        sprite_alignment_custom_y: Custom pivot Y for ``custom`` alignment.
        sprite_pixels_per_unit: Forwarded to the host's texture importer.
        sprites_target: Where the sheet image and sprites are written.
        animations_target: Where clip assets are written.
        aseprite_path: Location of the Aseprite executable.
        frame_rate: Clip sample rate in frames per second.
    """

    naming_scheme: SpriteNamingScheme = SpriteNamingScheme.CLASSIC
    non_looping_names: list[str] = field(default_factory=lambda: ["death"])
    target_object_type: AnimationTargetObjectType = AnimationTargetObjectType.SPRITE_RENDERER
    sprite_alignment: SpriteAlignment = SpriteAlignment.BOTTOM_CENTER
    sprite_alignment_custom_x: float = 0.0
    sprite_alignment_custom_y: float = 0.0
    sprite_pixels_per_unit: float = 100.0
    sprites_target: AssetTargetLocation = field(
        default_factory=lambda: AssetTargetLocation(TargetLocationType.SUB_DIRECTORY, "Sprites")
    )
    animations_target: AssetTargetLocation = field(
        default_factory=lambda: AssetTargetLocation(TargetLocationType.SUB_DIRECTORY, "Animations")
    )
    aseprite_path: Path | None = None
    frame_rate: float = 60.0

    @property
    def custom_pivot(self) -> tuple[float, float]:
        """Return the custom alignment pivot as a pair."""
        return (self.sprite_alignment_custom_x, self.sprite_alignment_custom_y)

    def add_non_looping_name(self, name: str) -> bool:
        """Add a non-looping name fragment.

        Returns:
            ``False`` if *name* is empty or already listed.
        """
        if not name or name in self.non_looping_names:
            return False
        self.non_looping_names.append(name)
        return True

    def remove_non_looping_name(self, index: int) -> None:
        """Remove the non-looping name at *index*."""
        del self.non_looping_names[index]

    @classmethod
    def from_mapping(cls, values: dict[str, Any]) -> ImporterConfig:
        """Build a config from a flat mapping of TOML values.

        Unknown keys are ignored; missing keys keep their defaults.

        Raises:
            ValidationError: If an enumerated value is not recognised.
        """
        config = cls()
        try:
            if "naming_scheme" in values:
                config.naming_scheme = SpriteNamingScheme(values["naming_scheme"])
            if "non_looping_names" in values:
                config.non_looping_names = [str(name) for name in values["non_looping_names"]]
            if "target_object_type" in values:
                config.target_object_type = AnimationTargetObjectType(values["target_object_type"])
            if "sprite_alignment" in values:
                config.sprite_alignment = SpriteAlignment(values["sprite_alignment"])
            if "sprites_target" in values:
                config.sprites_target = AssetTargetLocation.from_value(values["sprites_target"], "Sprites")
            if "animations_target" in values:
                config.animations_target = AssetTargetLocation.from_value(values["animations_target"], "Animations")
        except ValueError as exc:
            msg = f"Invalid configuration value: {exc}"
            raise ValidationError(msg) from exc

        config.sprite_alignment_custom_x = float(values.get("sprite_alignment_custom_x", 0.0))
        config.sprite_alignment_custom_y = float(values.get("sprite_alignment_custom_y", 0.0))
        config.sprite_pixels_per_unit = float(values.get("sprite_pixels_per_unit", 100.0))
        config.frame_rate = float(values.get("frame_rate", 60.0))
        if values.get("aseprite_path"):
            config.aseprite_path = Path(values["aseprite_path"])

        if config.frame_rate <= 0:
            msg = f"Frame rate must be > 0, got {config.frame_rate}"
            raise ValidationError(msg)
        return config


class ConfigManager:
    """Hierarchical configuration: global values overridden per importer.

    Settings are loaded from ``config.toml`` and ``importers/<name>.toml``
    inside *config_dir*.

    Args:
        config_dir: Root directory for configuration files.
                    Defaults to ``~/.config/sprite-importer/``.
    """

    def __init__(self, config_dir: Path | None = None) -> None:
        """Initialise the config manager.

        Args:
            config_dir: Custom configuration directory.  Uses the
                        platform default if ``None``.
        """
        self._config_dir = config_dir or _DEFAULT_CONFIG_DIR
        self._global: dict[str, Any] = {}
        self._per_importer: dict[str, dict[str, Any]] = {}

    @property
    def config_dir(self) -> Path:
        """Return the configuration directory path."""
        return self._config_dir

    def load(self) -> None:
        """Load global and per-importer config from ``config_dir``.

        Missing files are silently skipped.
        """
        global_file = self._config_dir / "config.toml"
        if global_file.is_file():
            self._global = self._read_toml(global_file)
            logger.info("Loaded global config from %s", global_file)

        importers_dir = self._config_dir / "importers"
        if importers_dir.is_dir():
            for toml_file in importers_dir.glob("*.toml"):
                importer_name = toml_file.stem
                self._per_importer[importer_name] = self._read_toml(toml_file)
                logger.info("Loaded config for importer '%s'", importer_name)

    def importer_config(self, importer: str | None = None) -> ImporterConfig:
        """Build the effective ``ImporterConfig`` for *importer*.

        Args:
            importer: Importer name whose overrides apply, or ``None``.

        Returns:
            Global values merged with the importer's overrides.
        """
        merged = dict(self._global)
        if importer and importer in self._per_importer:
            merged.update(self._per_importer[importer])
        return ImporterConfig.from_mapping(merged)

    @staticmethod
    def _read_toml(path: Path) -> dict[str, Any]:
        """Read and parse a TOML file.

        Args:
            path: Path to the TOML file.

        Returns:
            Parsed dictionary.

        Raises:
            ValidationError: If the file is not valid TOML.
        """
        try:
            with path.open("rb") as fh:
                return tomllib.load(fh)
        except tomllib.TOMLDecodeError as exc:
            msg = f"Invalid TOML in '{path}'"
            raise ValidationError(msg) from exc
