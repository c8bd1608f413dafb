"""BaseImporter ABC — the contract every source-format importer implements."""

from __future__ import annotations

from abc import ABC, abstractmethod

from sprite_importer.core.config import ImporterConfig
from sprite_importer.core.datatypes import ParsedSheet
from sprite_importer.core.events import EventBus
from sprite_importer.core.exceptions import ValidationError
from sprite_importer.core.job import ImportJob


class BaseImporter(ABC):
    """Template Method base for every source-format importer.

    Subclasses declare the file extensions they handle and implement
    ``_do_import``, which turns an ``ImportJob`` into a ``ParsedSheet``.
    """

    # ── metadata (override in subclass) ────────────────────────
    name: str
    display_name: str
    description: str
    extensions: tuple[str, ...] = ()
    # False when a format's optional support is left out of this build.
    available: bool = True

    def __init__(self, event_bus: EventBus | None = None) -> None:
        """Initialise the importer with an optional event bus.

        Args:
            event_bus: Event bus for emitting log events.
                       A default bus is created if none is provided.
        """
        self.event_bus = event_bus or EventBus()

    def is_valid(self, config: ImporterConfig) -> bool:
        """Return ``True`` if this importer can run with *config*."""
        return self.available

    # ── lifecycle (Template Method skeleton) ───────────────────
    def run(self, job: ImportJob, config: ImporterConfig) -> ParsedSheet:
        """Import *job* — public entry point, do NOT override.

        Args:
            job: The file to import.
            config: Configuration for this job.

        Returns:
            The parsed sheet and its raw tag records.
        """
        self.validate(job, config)
        parsed = self._do_import(job, config)
        parsed.sheet.name = job.name
        parsed.sheet.asset_directory = str(job.asset_directory)
        parsed.sheet.previous_import_settings = job.previous_import_settings
        return parsed

    def validate(self, job: ImportJob, config: ImporterConfig) -> None:
        """Check that *job* can be handled by this importer.

        Raises:
            ValidationError: If the extension is not handled or the importer
                is unavailable.
        """
        if job.extension not in self.extensions:
            msg = f"{self.display_name} cannot import '{job.file_name}'"
            raise ValidationError(msg)
        if not self.is_valid(config):
            msg = f"{self.display_name} is not available with the current configuration"
            raise ValidationError(msg)

    @abstractmethod
    def _do_import(self, job: ImportJob, config: ImporterConfig) -> ParsedSheet:
        """Core logic — MUST override.

        Args:
            job: The validated job.
            config: Configuration for this job.

        Returns:
            The parsed sheet.
        """
        ...
