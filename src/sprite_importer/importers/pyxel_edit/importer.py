"""PyxelEditImporter — BaseImporter wrapper for ``.pyxel`` archives."""

from __future__ import annotations

import logging

from sprite_importer.core.base_importer import BaseImporter
from sprite_importer.core.config import ImporterConfig
from sprite_importer.core.datatypes import ParsedSheet
from sprite_importer.core.exceptions import ExternalToolError
from sprite_importer.core.job import ImportJob
from sprite_importer.importers.pyxel_edit.logic import import_pyxel, read_pyxel_archive

logger = logging.getLogger(__name__)


class PyxelEditImporter(BaseImporter):
    """Import animations from PyxelEdit documents.

    The visible layers are flattened into ``NAME.png`` inside the job's
    sprites directory.
    """

    name = "pyxel_edit"
    display_name = "PyxelEdit"
    description = "Import animations from PyxelEdit .pyxel documents"
    extensions = ("pyxel",)

    def _do_import(self, job: ImportJob, config: ImporterConfig) -> ParsedSheet:
        """Read the archive, write the composed sheet image and return the parsed sheet.

        Raises:
            ExternalToolError: If the composed image cannot be written.
        """
        doc, layer_images = read_pyxel_archive(job.asset_path)
        parsed, image = import_pyxel(doc, layer_images)

        target = job.image_asset_filename
        target.parent.mkdir(parents=True, exist_ok=True)
        try:
            image.save(str(target), "PNG")
        except OSError as exc:
            msg = f"Failed to save sheet image to '{target}'"
            raise ExternalToolError(msg) from exc

        logger.info("Wrote composed sheet %s (%dx%d)", target, image.width, image.height)
        self.event_bus.emit(
            "log",
            importer=self.name,
            message=f"Composed {len(layer_images)} layers into {target.name}",
        )
        return parsed
