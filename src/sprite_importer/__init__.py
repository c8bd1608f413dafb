"""sprite-importer — normalize Aseprite and PyxelEdit exports into an animation model."""

__version__ = "0.1.0"
