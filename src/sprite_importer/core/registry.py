"""ImporterRegistry — maps file extensions to importer instances."""

from __future__ import annotations

import importlib
import logging
import pkgutil
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sprite_importer.core.base_importer import BaseImporter
    from sprite_importer.core.config import ImporterConfig
    from sprite_importer.core.events import EventBus

logger = logging.getLogger(__name__)


class ImporterRegistry:
    """Registry of importers keyed by file extension.

    The host application builds one registry and passes it to every
    ``ImportPipeline``; nothing is stored globally.
    """

    def __init__(self) -> None:
        """Initialise an empty registry."""
        self._importers: dict[str, BaseImporter] = {}

    def register(self, importer: BaseImporter) -> None:
        """Register *importer* for each of its extensions.

        A later registration for the same extension replaces the earlier one.
        """
        for extension in importer.extensions:
            self._importers[extension.lower()] = importer
            logger.info("Registered importer '%s' for .%s", importer.name, extension)

    def discover(self, event_bus: EventBus | None = None) -> None:
        """Scan ``sprite_importer.importers`` and register every ``BaseImporter``.

        Args:
            event_bus: Shared event bus injected into each importer.
        """
        from sprite_importer.core.base_importer import BaseImporter

        importers_package = importlib.import_module("sprite_importer.importers")

        for _finder, module_name, is_pkg in pkgutil.iter_modules(importers_package.__path__):
            if not is_pkg:
                continue
            try:
                module = importlib.import_module(f"sprite_importer.importers.{module_name}.importer")
            except ImportError:
                logger.debug("Skipping %s, no importer.py found", module_name)
                continue

            for attr_name in dir(module):
                attr = getattr(module, attr_name)
                if isinstance(attr, type) and issubclass(attr, BaseImporter) and attr is not BaseImporter:
                    self.register(attr(event_bus=event_bus))

    def get(self, extension: str) -> BaseImporter | None:
        """Look up the importer for *extension* (with or without the dot)."""
        return self._importers.get(extension.lstrip(".").lower())

    def for_path(self, path: Path) -> BaseImporter | None:
        """Look up the importer for the extension of *path*."""
        return self.get(Path(path).suffix)

    def is_valid_asset(self, path: Path, config: ImporterConfig) -> bool:
        """Return ``True`` if *path* has a registered, usable importer."""
        importer = self.for_path(path)
        return importer is not None and importer.is_valid(config)

    def extensions(self) -> list[str]:
        """Return all registered extensions, sorted."""
        return sorted(self._importers)

    def all_importers(self) -> dict[str, BaseImporter]:
        """Return all registered importers as an extension → instance mapping."""
        return dict(self._importers)
