"""Integration tests for the ImporterRegistry."""

from __future__ import annotations

from pathlib import Path

from sprite_importer.core.base_importer import BaseImporter
from sprite_importer.core.config import ImporterConfig
from sprite_importer.core.datatypes import AnimationSheet, ParsedSheet
from sprite_importer.core.events import EventBus
from sprite_importer.core.job import ImportJob
from sprite_importer.core.registry import ImporterRegistry


class _FakeImporter(BaseImporter):
    name = "fake"
    display_name = "Fake"
    description = "Test importer"
    extensions = ("fake", "FK")

    def _do_import(self, job: ImportJob, config: ImporterConfig) -> ParsedSheet:
        return ParsedSheet(sheet=AnimationSheet(), tags=())


class _UnavailableImporter(_FakeImporter):
    name = "unavailable"
    extensions = ("off",)
    available = False


class TestImporterRegistryDiscovery:
    """Tests for auto-discovery of importers."""

    def test_discovers_builtin_formats(self) -> None:
        """Discovery registers Aseprite, Aseprite JSON and PyxelEdit."""
        registry = ImporterRegistry()
        registry.discover()

        assert registry.extensions() == ["ase", "aseprite", "json", "pyxel"]
        assert registry.get("ase").name == "aseprite"  # type: ignore[union-attr]
        assert registry.get("json").name == "aseprite_json"  # type: ignore[union-attr]
        assert registry.get("pyxel").name == "pyxel_edit"  # type: ignore[union-attr]

    def test_discover_injects_event_bus(self) -> None:
        """Importers receive the injected event bus."""
        bus = EventBus()
        registry = ImporterRegistry()
        registry.discover(event_bus=bus)

        assert all(importer.event_bus is bus for importer in registry.all_importers().values())

    def test_registries_are_independent(self) -> None:
        """Each registry is its own value; nothing is shared globally."""
        a = ImporterRegistry()
        b = ImporterRegistry()
        a.register(_FakeImporter())

        assert a is not b
        assert a.get("fake") is not None
        assert b.get("fake") is None


class TestImporterRegistryLookup:
    """Tests for extension lookup."""

    def test_lookup_is_case_insensitive_and_dot_tolerant(self) -> None:
        """Extensions match with or without a dot, in any case."""
        registry = ImporterRegistry()
        importer = _FakeImporter()
        registry.register(importer)

        assert registry.get("fake") is importer
        assert registry.get(".FAKE") is importer
        assert registry.get("fk") is importer
        assert registry.for_path(Path("art/hero.Fake")) is importer

    def test_unknown_extension_returns_none(self) -> None:
        """Looking up an unregistered extension returns ``None``."""
        registry = ImporterRegistry()
        assert registry.get("psd") is None
        assert registry.for_path(Path("hero.psd")) is None

    def test_is_valid_asset(self) -> None:
        """Assets are valid only with a registered, available importer."""
        registry = ImporterRegistry()
        registry.register(_FakeImporter())
        registry.register(_UnavailableImporter())
        config = ImporterConfig()

        assert registry.is_valid_asset(Path("hero.fake"), config)
        assert not registry.is_valid_asset(Path("hero.off"), config)
        assert not registry.is_valid_asset(Path("hero.psd"), config)

    def test_later_registration_replaces(self) -> None:
        """Registering a second importer for an extension replaces the first."""
        registry = ImporterRegistry()
        first, second = _FakeImporter(), _FakeImporter()
        registry.register(first)
        registry.register(second)

        assert registry.get("fake") is second
