"""Integration tests for the CLI layer."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from sprite_importer.cli.main import cli


def _write_export(tmp_path: Path, tags: list[dict[str, Any]] | None = None) -> Path:
    """Write a two-frame Aseprite ``json-array`` export named ``hero.json``."""
    data = {
        "frames": [
            {"frame": {"x": i * 8, "y": 0, "w": 8, "h": 8}, "sourceSize": {"w": 8, "h": 8}, "duration": 100}
            for i in range(2)
        ],
        "meta": {
            "size": {"w": 16, "h": 16},
            "frameTags": tags if tags is not None else [{"name": "death", "from": 0, "to": 1}],
            "slices": [],
        },
    }
    path = tmp_path / "hero.json"
    path.write_text(json.dumps(data))
    return path


def _invoke(*args: str) -> Any:
    return CliRunner().invoke(cli, list(args))


class TestSchemesCommand:
    """Tests for the ``schemes`` sub-command."""

    def test_lists_every_scheme(self) -> None:
        """All naming schemes are printed with their labels."""
        result = _invoke("schemes")

        assert result.exit_code == 0
        assert "classic" in result.output
        assert "file@anim_01, file@anim_02, ..." in result.output
        assert len(result.output.strip().splitlines()) == 7


class TestImportCommand:
    """Tests for the ``import`` sub-command."""

    def test_help_shows_options(self) -> None:
        """``--help`` displays usage information without errors."""
        result = _invoke("import", "--help")

        assert result.exit_code == 0
        assert "--naming" in result.output
        assert "--non-looping" in result.output
        assert "--frame-rate" in result.output

    def test_prints_model_as_json(self, tmp_path: Path) -> None:
        """The normalized model is printed to stdout."""
        asset = _write_export(tmp_path)

        result = _invoke("import", str(asset), "--naming", "anim_one", "--config", str(tmp_path / "cfg"))

        assert result.exit_code == 0, result.stderr
        model = json.loads(result.stdout)
        assert model["status"] == "success"
        assert [frame["name"] for frame in model["frames"]] == ["death_01", "death_02"]
        assert model["animations"][0]["frames"] == ["death_01", "death_02"]
        assert model["clips"][0]["name"] == "hero@death"
        assert model["clips"][0]["is_looping"] is False
        assert len(model["clips"][0]["keyframes"]) == 3

    def test_frame_y_is_flipped(self, tmp_path: Path) -> None:
        """Frame rectangles use a bottom-left origin."""
        asset = _write_export(tmp_path)

        result = _invoke("import", str(asset), "--config", str(tmp_path / "cfg"))

        model = json.loads(result.stdout)
        assert model["sprites"][1]["rect"] == [8, 8, 8, 8]

    def test_options_override_config(self, tmp_path: Path) -> None:
        """Command-line options win over the configuration files."""
        config_dir = tmp_path / "cfg"
        config_dir.mkdir()
        (config_dir / "config.toml").write_text('target_object_type = "image"\nframe_rate = 30\n')
        asset = _write_export(tmp_path, [{"name": "walk", "from": 0, "to": 1}])

        result = _invoke(
            "import",
            str(asset),
            "--config",
            str(config_dir),
            "--non-looping",
            "walk",
            "--frame-rate",
            "10",
        )

        assert result.exit_code == 0, result.stderr
        clip = json.loads(result.stdout)["clips"][0]
        assert clip["target"] == "image"
        assert clip["is_looping"] is False
        assert clip["keyframes"][-1]["time"] == pytest.approx(0.1)

    def test_previous_settings_keep_clip_target(self, tmp_path: Path) -> None:
        """``--previous`` restores the target of existing clips."""
        asset = _write_export(tmp_path)
        previous = tmp_path / "previous.json"
        previous.write_text(json.dumps({"clips": {"hero@death": "sprite_renderer_and_image"}}))

        result = _invoke("import", str(asset), "--previous", str(previous), "--config", str(tmp_path / "cfg"))

        assert result.exit_code == 0, result.stderr
        assert json.loads(result.stdout)["clips"][0]["target"] == "sprite_renderer_and_image"

    def test_writes_output_file(self, tmp_path: Path) -> None:
        """``-o`` writes the model to a file and prints a summary."""
        asset = _write_export(tmp_path)
        output = tmp_path / "model.json"

        result = _invoke("import", str(asset), "-o", str(output), "--config", str(tmp_path / "cfg"))

        assert result.exit_code == 0, result.stderr
        assert "Imported 2 sprites and 1 clips" in result.stdout
        assert json.loads(output.read_text())["status"] == "success"

    def test_malformed_file_fails(self, tmp_path: Path) -> None:
        """A broken export exits with an error message."""
        asset = tmp_path / "hero.json"
        asset.write_text(json.dumps({"meta": {}}))

        result = _invoke("import", str(asset), "--config", str(tmp_path / "cfg"))

        assert result.exit_code != 0
        assert "frames" in result.stderr

    def test_unsupported_extension(self, tmp_path: Path) -> None:
        """Files without an importer are rejected."""
        asset = tmp_path / "hero.psd"
        asset.write_bytes(b"")

        result = _invoke("import", str(asset))

        assert result.exit_code != 0
        assert "No importer" in result.stderr


class TestInspectCommand:
    """Tests for the ``inspect`` sub-command."""

    def test_summarises_export(self, tmp_path: Path) -> None:
        """Frames and tags of the file are listed."""
        asset = _write_export(tmp_path)

        result = _invoke("inspect", str(asset), "--config", str(tmp_path / "cfg"))

        assert result.exit_code == 0, result.stderr
        assert "Aseprite JSON" in result.stdout
        assert "frames: 2" in result.stdout
        assert "death [0..1]" in result.stdout
