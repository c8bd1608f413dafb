"""Aseprite importers — BaseImporter wrappers around the JSON parser."""

from __future__ import annotations

import logging
from pathlib import Path

from sprite_importer.core.base_importer import BaseImporter
from sprite_importer.core.config import ImporterConfig
from sprite_importer.core.datatypes import ParsedSheet
from sprite_importer.core.events import EventBus
from sprite_importer.core.exceptions import ExternalToolError
from sprite_importer.core.job import ImportJob
from sprite_importer.core.process import ProcessRunner, SubprocessRunner
from sprite_importer.importers.aseprite._cli import build_arguments, standard_application_path
from sprite_importer.importers.aseprite.logic import VERSION_HINT, load_aseprite_json, parse_aseprite_json

logger = logging.getLogger(__name__)


class AsepriteImporter(BaseImporter):
    """Import ``.ase``/``.aseprite`` files by running Aseprite in batch mode.

    Aseprite writes ``NAME.png`` and ``NAME.json`` next to the source file;
    both are moved into the job's sprites directory, the JSON is parsed and
    then deleted.
    """

    name = "aseprite"
    display_name = "Aseprite"
    description = "Import tagged animations from Aseprite files"
    extensions = ("ase", "aseprite")

    def __init__(self, event_bus: EventBus | None = None, runner: ProcessRunner | None = None) -> None:
        """Initialise the importer.

        Args:
            event_bus: Shared event bus.
            runner: Process collaborator; runs the real executable by default.
        """
        super().__init__(event_bus=event_bus)
        self.runner = runner or SubprocessRunner()

    @staticmethod
    def executable(config: ImporterConfig) -> Path:
        """Return the configured Aseprite path or the platform default."""
        return config.aseprite_path or standard_application_path()

    def is_valid(self, config: ImporterConfig) -> bool:
        """Aseprite imports need the executable to exist."""
        return self.available and self.executable(config).is_file()

    def _do_import(self, job: ImportJob, config: ImporterConfig) -> ParsedSheet:
        """Export the sheet with Aseprite and parse the resulting JSON.

        Raises:
            ExternalToolError: If Aseprite fails or writes no output.
        """
        args = build_arguments(job.name, job.file_name, job.additional_arguments)
        exit_code = self.runner.run(self.executable(config), job.asset_directory, args)
        if exit_code != 0:
            msg = f"Aseprite exited with code {exit_code} for '{job.file_name}'"
            raise ExternalToolError(msg)

        json_path = self._move_output(job, f"{job.name}.json", "json data file")
        self._move_output(job, f"{job.name}.png", "png image file")
        self.event_bus.emit("log", importer=self.name, message=f"Aseprite exported {job.name}.png and {job.name}.json")

        try:
            return parse_aseprite_json(load_aseprite_json(json_path))
        finally:
            json_path.unlink(missing_ok=True)

    @staticmethod
    def _move_output(job: ImportJob, file_name: str, label: str) -> Path:
        """Move an exported file into the sprites directory.

        Returns:
            The file's final location.

        Raises:
            ExternalToolError: If Aseprite did not produce the file.
        """
        source = job.asset_directory / file_name
        target = job.directory_for_sprites / file_name
        if not source.is_file():
            msg = f"Calling Aseprite resulted in no {label}. Wrong Aseprite version? {VERSION_HINT}"
            raise ExternalToolError(msg)
        if source != target:
            target.parent.mkdir(parents=True, exist_ok=True)
            source.replace(target)
        return target


class AsepriteJsonImporter(BaseImporter):
    """Import a ``.json`` file already exported from Aseprite.

    Useful when Aseprite is not installed on the importing machine.  The
    JSON file is left untouched.
    """

    name = "aseprite_json"
    display_name = "Aseprite JSON"
    description = "Import an existing Aseprite json-array export"
    extensions = ("json",)

    def _do_import(self, job: ImportJob, config: ImporterConfig) -> ParsedSheet:
        """Parse the JSON file named by the job."""
        logger.info("Reading Aseprite export '%s'", job.asset_path)
        return parse_aseprite_json(load_aseprite_json(job.asset_path))
