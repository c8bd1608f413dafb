"""ImportJob — one file travelling through the import pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from sprite_importer.core.events import EventBus
from sprite_importer.core.settings import PreviousImportSettings


@dataclass
class ImportJob:
    """A single import request.

    Attributes:
        asset_path: Path of the exported source file (``.ase``, ``.pyxel``, ...).
        sprites_directory: Where the sheet image is written; defaults to the
            asset directory.
        animations_directory: Where clips are written; defaults to the asset
            directory.
        previous_import_settings: State recorded by an earlier import.
        additional_arguments: Extra arguments for the external exporter.
        create_animations: Whether clip definitions should be produced.
        event_bus: Receives ``progress`` events for this job.
    """

    asset_path: Path
    sprites_directory: Path | None = None
    animations_directory: Path | None = None
    previous_import_settings: PreviousImportSettings | None = None
    additional_arguments: list[str] = field(default_factory=list)
    create_animations: bool = True
    event_bus: EventBus = field(default_factory=EventBus)
    progress: float = 0.0

    def __post_init__(self) -> None:
        self.asset_path = Path(self.asset_path)

    @property
    def name(self) -> str:
        """File name without extension; becomes the sheet name."""
        return self.asset_path.stem

    @property
    def file_name(self) -> str:
        """File name including extension."""
        return self.asset_path.name

    @property
    def extension(self) -> str:
        """Lower-case extension without the leading dot."""
        return self.asset_path.suffix.lstrip(".").lower()

    @property
    def asset_directory(self) -> Path:
        """Directory containing the source file."""
        return self.asset_path.parent

    @property
    def directory_for_sprites(self) -> Path:
        """Resolved sprites directory."""
        return self.sprites_directory or self.asset_directory

    @property
    def directory_for_animations(self) -> Path:
        """Resolved animations directory."""
        return self.animations_directory or self.asset_directory

    @property
    def image_asset_filename(self) -> Path:
        """Path of the sheet image produced for this job."""
        return self.directory_for_sprites / f"{self.name}.png"

    def set_progress(self, progress: float, stage: str = "") -> None:
        """Record *progress* (0..1) and emit a ``progress`` event."""
        self.progress = progress
        self.event_bus.emit("progress", job=self.name, stage=stage, fraction=progress)
