"""PyxelEdit importer — tile animations from zipped ``.pyxel`` documents."""

from sprite_importer.importers.pyxel_edit.importer import PyxelEditImporter

__all__ = ["PyxelEditImporter"]
