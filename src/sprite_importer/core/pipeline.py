"""ImportPipeline — runs one job through parse, reconstruct, time, name and merge."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from sprite_importer.core.clips import ClipDefinition, create_clip_definitions
from sprite_importer.core.config import ImporterConfig
from sprite_importer.core.datatypes import AnimationSheet, FinalSheet, ParsedSheet, SpriteMetaData
from sprite_importer.core.events import EventBus
from sprite_importer.core.exceptions import ImporterError, PipelineError
from sprite_importer.core.job import ImportJob
from sprite_importer.core.naming import apply_naming_scheme, sprite_metadata
from sprite_importer.core.reconstruct import reconstruct
from sprite_importer.core.registry import ImporterRegistry
from sprite_importer.core.settings import PreviousImportSettings, set_non_looping_animations
from sprite_importer.core.timing import bind_frames

logger = logging.getLogger(__name__)


class ImportStatus(str, Enum):
    """Classified outcome of an import job."""

    SUCCESS = "success"
    EMPTY = "empty"
    FAILED = "failed"


@dataclass(frozen=True)
class ImportResult:
    """Outcome of ``ImportPipeline.run``.

    Attributes:
        status: ``success`` with animations, ``empty`` when the sheet has
            frames but no animations, ``failed`` when nothing was imported.
        sheet: The final sheet, ``None`` on failure.
        sprites: Slicing instructions for the sheet image.
        clips: Clip definitions for every leaf animation.
        reason: Human-readable failure reason.
    """

    status: ImportStatus
    sheet: AnimationSheet | None = None
    sprites: tuple[SpriteMetaData, ...] = ()
    clips: tuple[ClipDefinition, ...] = field(default_factory=tuple)
    reason: str = ""

    @property
    def ok(self) -> bool:
        """Return ``True`` unless the job failed."""
        return self.status is not ImportStatus.FAILED


def finalize(parsed: ParsedSheet, config: ImporterConfig) -> FinalSheet:
    """Run every stage after parsing: reconstruct, bind, name, loop flags.

    Args:
        parsed: Parser output.
        config: Job configuration.

    Returns:
        The named, pruned sheet.

    Raises:
        PipelineError: If *parsed* is not parser output.
    """
    if not isinstance(parsed, ParsedSheet):
        msg = f"Expected a ParsedSheet, got {type(parsed).__name__}"
        raise PipelineError(msg)

    timed = bind_frames(reconstruct(parsed))
    final = apply_naming_scheme(timed, config.naming_scheme)
    set_non_looping_animations(final, config.non_looping_names)
    return final


class ImportPipeline:
    """Imports files with the importers of an explicit registry.

    Args:
        registry: Extension → importer mapping built by the host.
        config: Configuration shared by the jobs of this pipeline.
        event_bus: Receives ``log``, ``completed`` and ``failed`` events.
    """

    def __init__(
        self,
        registry: ImporterRegistry,
        config: ImporterConfig | None = None,
        event_bus: EventBus | None = None,
    ) -> None:
        """Initialise the pipeline.

        Args:
            registry: Registry used to find the importer for each job.
            config: Job configuration; defaults to ``ImporterConfig()``.
            event_bus: Event bus for status events.
        """
        self.registry = registry
        self.config = config or ImporterConfig()
        self.event_bus = event_bus or EventBus()

    def create_job(
        self,
        asset_path: Path,
        previous_import_settings: PreviousImportSettings | None = None,
        additional_arguments: list[str] | None = None,
    ) -> ImportJob:
        """Create a job whose output directories follow the configuration.

        Args:
            asset_path: Source file to import.
            previous_import_settings: State from an earlier import, if any.
            additional_arguments: Extra exporter arguments.

        Returns:
            The configured job, sharing this pipeline's event bus.
        """
        asset_directory = str(Path(asset_path).parent)
        return ImportJob(
            asset_path=Path(asset_path),
            sprites_directory=Path(self.config.sprites_target.target_directory(asset_directory)),
            animations_directory=Path(self.config.animations_target.target_directory(asset_directory)),
            previous_import_settings=previous_import_settings,
            additional_arguments=list(additional_arguments or []),
            event_bus=self.event_bus,
        )

    def run(self, job: ImportJob) -> ImportResult:
        """Import one job start to finish.

        Parser and validation errors are logged and returned as a ``failed``
        result; they are never raised to the caller.

        Args:
            job: The job to import.

        Returns:
            The classified import result.
        """
        job.set_progress(0.0, "start")

        importer = self.registry.get(job.extension)
        if importer is None:
            return self._fail(job, f"No importer registered for '.{job.extension}'")

        try:
            parsed = importer.run(job, self.config)
            job.set_progress(0.3, "parsed")
            final = finalize(parsed, self.config)
        except ImporterError as exc:
            return self._fail(job, str(exc))

        sheet = final.sheet
        sprites = tuple(sprite_metadata(final, self.config.sprite_alignment, self.config.custom_pivot))
        job.set_progress(0.6, "named")

        clips: tuple[ClipDefinition, ...] = ()
        if job.create_animations and sheet.has_animations:
            clips = tuple(
                create_clip_definitions(
                    final,
                    target_dir=job.directory_for_animations.as_posix(),
                    master_name=job.image_asset_filename.stem,
                    target=self.config.target_object_type,
                    frame_rate=self.config.frame_rate,
                )
            )
            job.set_progress(0.8, "clips")

        status = ImportStatus.SUCCESS if sheet.has_animations else ImportStatus.EMPTY
        if status is ImportStatus.EMPTY:
            logger.warning("No animations found in '%s'; only plain sprites are produced", job.file_name)

        job.set_progress(1.0, "done")
        self.event_bus.emit(
            "completed",
            job=job.name,
            message=f"Imported '{job.file_name}': {len(sheet.frames)} sprites, {len(clips)} clips",
        )
        return ImportResult(status=status, sheet=sheet, sprites=sprites, clips=clips)

    def _fail(self, job: ImportJob, reason: str) -> ImportResult:
        logger.warning("Import of '%s' failed: %s", job.file_name, reason)
        self.event_bus.emit("failed", job=job.name, message=reason)
        return ImportResult(status=ImportStatus.FAILED, reason=reason)
