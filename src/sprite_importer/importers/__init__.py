"""Source-format importers; each sub-package exposes a ``BaseImporter`` in ``importer.py``."""
