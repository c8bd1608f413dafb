"""Tests for the Aseprite importers (BaseImporter integration)."""

from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest
from PIL import Image

from sprite_importer.core.config import ImporterConfig
from sprite_importer.core.events import EventBus
from sprite_importer.core.exceptions import ExternalToolError, ValidationError
from sprite_importer.core.job import ImportJob
from sprite_importer.core.pipeline import ImportPipeline, ImportStatus
from sprite_importer.core.registry import ImporterRegistry
from sprite_importer.importers.aseprite import AsepriteImporter, AsepriteJsonImporter

# ── Helpers ───────────────────────────────────────────────────────────────

_EXPORT: dict[str, Any] = {
    "frames": [
        {"frame": {"x": i * 8, "y": 0, "w": 8, "h": 8}, "sourceSize": {"w": 8, "h": 8}, "duration": 100}
        for i in range(3)
    ],
    "meta": {
        "size": {"w": 24, "h": 8},
        "frameTags": [{"name": "idle", "from": 0, "to": 2}],
    },
}


def _fake_aseprite(*, write_json: bool = True, write_png: bool = True, exit_code: int = 0) -> MagicMock:
    """A ``ProcessRunner`` double that writes what Aseprite would export."""

    def run(executable: Path, working_dir: Path, args: Sequence[str]) -> int:
        data_name = args[args.index("--data") + 1]
        sheet_name = args[args.index("--sheet") + 1]
        if write_json:
            (working_dir / data_name).write_text(json.dumps(_EXPORT))
        if write_png:
            Image.new("RGBA", (24, 8)).save(str(working_dir / sheet_name))
        return exit_code

    runner = MagicMock()
    runner.run.side_effect = run
    return runner


@pytest.fixture()
def config(tmp_path: Path) -> ImporterConfig:
    """Config pointing at a stand-in Aseprite executable."""
    executable = tmp_path / "bin" / "aseprite"
    executable.parent.mkdir()
    executable.write_bytes(b"")
    return ImporterConfig(aseprite_path=executable)


@pytest.fixture()
def asset(tmp_path: Path) -> Path:
    """An (empty) Aseprite source file."""
    path = tmp_path / "art" / "hero.ase"
    path.parent.mkdir()
    path.write_bytes(b"")
    return path


class TestAsepriteImporterMetadata:
    """Tests for importer metadata."""

    def test_extensions(self) -> None:
        """Both Aseprite extensions are handled."""
        assert AsepriteImporter.extensions == ("ase", "aseprite")
        assert AsepriteImporter.name == "aseprite"

    def test_is_valid_requires_executable(self, tmp_path: Path, config: ImporterConfig) -> None:
        """The importer is only valid when the executable exists."""
        importer = AsepriteImporter(runner=_fake_aseprite())

        assert importer.is_valid(config)
        assert not importer.is_valid(ImporterConfig(aseprite_path=tmp_path / "missing"))


class TestAsepriteImporterRun:
    """Tests for the export-and-parse flow."""

    def test_runs_aseprite_in_asset_directory(self, asset: Path, config: ImporterConfig) -> None:
        """Aseprite is started in the asset directory with the export arguments."""
        runner = _fake_aseprite()
        job = ImportJob(asset_path=asset, additional_arguments=["--trim"])

        AsepriteImporter(runner=runner).run(job, config)

        executable, working_dir, args = runner.run.call_args.args
        assert executable == config.aseprite_path
        assert working_dir == asset.parent
        assert args[:2] == ["-b", "--trim"]
        assert args[-1] == "hero.ase"

    def test_parses_and_moves_output(self, tmp_path: Path, asset: Path, config: ImporterConfig) -> None:
        """The sheet image lands in the sprites directory; the JSON is removed."""
        sprites = tmp_path / "out"
        job = ImportJob(asset_path=asset, sprites_directory=sprites)

        parsed = AsepriteImporter(runner=_fake_aseprite()).run(job, config)

        assert parsed.sheet.name == "hero"
        assert len(parsed.sheet.frames) == 3
        assert [t.name for t in parsed.tags] == ["idle"]
        assert (sprites / "hero.png").is_file()
        assert not (sprites / "hero.json").exists()
        assert not (asset.parent / "hero.png").exists()

    def test_emits_log_event(self, asset: Path, config: ImporterConfig) -> None:
        """A ``log`` event reports the exported files."""
        bus = EventBus()
        messages: list[str] = []
        bus.subscribe("log", lambda **kw: messages.append(kw["message"]))

        AsepriteImporter(event_bus=bus, runner=_fake_aseprite()).run(ImportJob(asset_path=asset), config)

        assert messages == ["Aseprite exported hero.png and hero.json"]

    def test_non_zero_exit_raises(self, asset: Path, config: ImporterConfig) -> None:
        """A failing Aseprite run is an external tool error."""
        importer = AsepriteImporter(runner=_fake_aseprite(exit_code=1))

        with pytest.raises(ExternalToolError, match="exited with code 1"):
            importer.run(ImportJob(asset_path=asset), config)

    @pytest.mark.parametrize(
        ("runner_kwargs", "label"),
        [({"write_json": False}, "json data file"), ({"write_png": False}, "png image file")],
    )
    def test_missing_output_raises(
        self, asset: Path, config: ImporterConfig, runner_kwargs: dict[str, bool], label: str
    ) -> None:
        """No exported file means Aseprite is too old or failed silently."""
        importer = AsepriteImporter(runner=_fake_aseprite(**runner_kwargs))

        with pytest.raises(ExternalToolError, match=label):
            importer.run(ImportJob(asset_path=asset), config)

    def test_missing_executable_fails_validation(self, tmp_path: Path, asset: Path) -> None:
        """Without an executable the job is rejected before running."""
        runner = _fake_aseprite()
        importer = AsepriteImporter(runner=runner)

        with pytest.raises(ValidationError, match="not available"):
            importer.run(ImportJob(asset_path=asset), ImporterConfig(aseprite_path=tmp_path / "none"))
        runner.run.assert_not_called()

    def test_wrong_extension_fails_validation(self, tmp_path: Path, config: ImporterConfig) -> None:
        """Only Aseprite files are accepted."""
        with pytest.raises(ValidationError, match="cannot import"):
            AsepriteImporter(runner=_fake_aseprite()).run(ImportJob(asset_path=tmp_path / "hero.png"), config)

    def test_full_pipeline(self, asset: Path, config: ImporterConfig) -> None:
        """The importer plugs into the pipeline through a registry."""
        registry = ImporterRegistry()
        registry.register(AsepriteImporter(runner=_fake_aseprite()))
        pipeline = ImportPipeline(registry, config=config)

        result = pipeline.run(pipeline.create_job(asset))

        assert result.status is ImportStatus.SUCCESS
        assert [clip.name for clip in result.clips] == ["hero@idle"]
        assert (asset.parent / "Sprites" / "hero.png").is_file()


class TestAsepriteJsonImporter:
    """Tests for importing an existing JSON export."""

    def test_parses_file_in_place(self, tmp_path: Path) -> None:
        """The JSON file is parsed and left untouched."""
        path = tmp_path / "hero.json"
        path.write_text(json.dumps(_EXPORT))

        parsed = AsepriteJsonImporter().run(ImportJob(asset_path=path), ImporterConfig())

        assert parsed.sheet.name == "hero"
        assert len(parsed.sheet.frames) == 3
        assert path.is_file()
