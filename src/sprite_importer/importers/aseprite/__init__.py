"""Aseprite importer — tagged animations and slices from Aseprite exports."""

from sprite_importer.importers.aseprite.importer import AsepriteImporter, AsepriteJsonImporter

__all__ = ["AsepriteImporter", "AsepriteJsonImporter"]
