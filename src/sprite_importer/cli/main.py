"""CLI entry point — click group exposing the import pipeline."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

import click

from sprite_importer.core.datatypes import AnimationTargetObjectType, SpriteNamingScheme

if TYPE_CHECKING:
    from sprite_importer.core.base_importer import BaseImporter
    from sprite_importer.core.config import ImporterConfig
    from sprite_importer.core.pipeline import ImportResult
    from sprite_importer.core.registry import ImporterRegistry
    from sprite_importer.core.settings import PreviousImportSettings

_LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


# ── Helpers ───────────────────────────────────────────────────────────────


def _build_config(
    importer_name: str,
    config_dir: str | None,
    naming: str | None,
    non_looping: tuple[str, ...],
    target: str | None,
    frame_rate: float | None,
    aseprite: str | None,
) -> ImporterConfig:
    """Load the importer's configuration and apply command-line overrides.

    Raises:
        click.ClickException: If the configuration files are invalid.
    """
    from sprite_importer.core.config import ConfigManager
    from sprite_importer.core.exceptions import ValidationError

    manager = ConfigManager(Path(config_dir) if config_dir else None)
    try:
        manager.load()
        config = manager.importer_config(importer_name)
    except ValidationError as exc:
        raise click.ClickException(str(exc)) from exc

    if naming:
        config.naming_scheme = SpriteNamingScheme(naming)
    for name in non_looping:
        config.add_non_looping_name(name)
    if target:
        config.target_object_type = AnimationTargetObjectType(target)
    if frame_rate is not None:
        if frame_rate <= 0:
            msg = f"Frame rate must be > 0, got {frame_rate}"
            raise click.BadParameter(msg, param_hint="--frame-rate")
        config.frame_rate = frame_rate
    if aseprite:
        config.aseprite_path = Path(aseprite)
    return config


def _load_previous(path: str | None) -> PreviousImportSettings | None:
    """Read previous import settings from a JSON file, if one was given."""
    if path is None:
        return None

    from sprite_importer.core.settings import PreviousImportSettings

    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        return PreviousImportSettings.from_dict(data)
    except (OSError, ValueError, AttributeError) as exc:
        msg = f"Could not read previous import settings from '{path}': {exc}"
        raise click.ClickException(msg) from exc


def _result_payload(result: ImportResult) -> dict[str, Any]:
    """Convert an ``ImportResult`` into a JSON-serialisable mapping."""
    from sprite_importer.core.naming import animation_frame_names

    sheet = result.sheet
    return {
        "status": result.status.value,
        "sheet": {
            "name": sheet.name,
            "width": sheet.width,
            "height": sheet.height,
            "source_size": [sheet.source_size.width, sheet.source_size.height],
            "use_pivot": sheet.use_pivot,
            "pivot": list(sheet.pivot),
        },
        "frames": [
            {
                "name": frame.name,
                "x": frame.x,
                "y": frame.y,
                "width": frame.width,
                "height": frame.height,
                "duration": frame.duration,
            }
            for frame in sheet.frames
        ],
        "animations": [
            {
                "name": anim.name,
                "first_index": anim.first_index,
                "last_index": anim.last_index,
                "is_category": anim.is_category,
                "is_looping": anim.is_looping,
                "key_frame_times": anim.key_frame_times,
                "frames": animation_frame_names(anim),
            }
            for anim in sheet.animations
        ],
        "sprites": [
            {
                "name": sprite.name,
                "rect": [sprite.rect.x, sprite.rect.y, sprite.rect.width, sprite.rect.height],
                "alignment": sprite.alignment.value,
                "pivot": list(sprite.pivot),
            }
            for sprite in result.sprites
        ],
        "clips": [
            {
                "name": clip.name,
                "path": clip.path,
                "target": clip.target.value,
                "is_looping": clip.is_looping,
                "length": clip.length,
                "keyframes": [{"time": key.time, "sprite": key.frame.name} for key in clip.keyframes],
            }
            for clip in result.clips
        ],
    }


def _find_importer(registry: ImporterRegistry, file_path: Path) -> BaseImporter:
    importer = registry.for_path(file_path)
    if importer is None:
        supported = ", ".join(f".{ext}" for ext in registry.extensions())
        msg = f"No importer for '{file_path.name}' (supported: {supported})"
        raise click.ClickException(msg)
    return importer


# ── Commands ──────────────────────────────────────────────────────────────


@click.group()
@click.version_option(package_name="sprite-importer")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log pipeline details to stderr.")
def cli(verbose: bool) -> None:
    """Sprite Importer — normalize Aseprite and PyxelEdit exports."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format=_LOG_FORMAT)


@cli.command(name="import")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, resolve_path=True))
@click.option(
    "-n",
    "--naming",
    default=None,
    type=click.Choice([scheme.value for scheme in SpriteNamingScheme]),
    help="Sprite naming scheme (default: from config, else 'classic').",
)
@click.option("--non-looping", multiple=True, help="Extra name fragment of animations that must not loop.")
@click.option(
    "-t",
    "--target",
    default=None,
    type=click.Choice([target.value for target in AnimationTargetObjectType]),
    help="Component animated by new clips.",
)
@click.option("-r", "--frame-rate", type=float, default=None, help="Clip sample rate in frames per second.")
@click.option(
    "-c",
    "--config",
    "config_dir",
    type=click.Path(file_okay=False, resolve_path=True),
    default=None,
    help="Configuration directory (default: ~/.config/sprite-importer).",
)
@click.option("--aseprite", type=click.Path(dir_okay=False), default=None, help="Path to the Aseprite executable.")
@click.option(
    "--previous",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="JSON file with settings recorded by an earlier import.",
)
@click.option("--no-clips", is_flag=True, default=False, help="Only produce sprites, no clip definitions.")
@click.option("-o", "--output", type=click.Path(dir_okay=False), default=None, help="Write the model to this file.")
def import_cmd(
    file: str,
    naming: str | None,
    non_looping: tuple[str, ...],
    target: str | None,
    frame_rate: float | None,
    config_dir: str | None,
    aseprite: str | None,
    previous: str | None,
    no_clips: bool,
    output: str | None,
) -> None:
    """Import FILE and print the normalized animation model as JSON.

    FILE can be an Aseprite file, an Aseprite json-array export or a
    PyxelEdit document.
    """
    from sprite_importer.core.events import EventBus
    from sprite_importer.core.pipeline import ImportPipeline, ImportStatus
    from sprite_importer.core.registry import ImporterRegistry

    file_path = Path(file)

    bus = EventBus()
    bus.subscribe("progress", lambda **kw: click.echo(f"  [{kw['fraction']:4.0%}] {kw['stage']}", err=True))

    registry = ImporterRegistry()
    registry.discover(event_bus=bus)
    importer = _find_importer(registry, file_path)

    config = _build_config(importer.name, config_dir, naming, non_looping, target, frame_rate, aseprite)
    pipeline = ImportPipeline(registry, config=config, event_bus=bus)

    job = pipeline.create_job(file_path, previous_import_settings=_load_previous(previous))
    job.create_animations = not no_clips
    result = pipeline.run(job)

    if result.status is ImportStatus.FAILED:
        raise click.ClickException(result.reason)

    text = json.dumps(_result_payload(result), indent=2)
    if output:
        Path(output).write_text(text + "\n", encoding="utf-8")
        click.echo(f"Imported {len(result.sprites)} sprites and {len(result.clips)} clips to {output}")
    else:
        click.echo(text)


@cli.command(name="inspect")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, resolve_path=True))
@click.option(
    "-c",
    "--config",
    "config_dir",
    type=click.Path(file_okay=False, resolve_path=True),
    default=None,
    help="Configuration directory (default: ~/.config/sprite-importer).",
)
@click.option("--aseprite", type=click.Path(dir_okay=False), default=None, help="Path to the Aseprite executable.")
def inspect_cmd(file: str, config_dir: str | None, aseprite: str | None) -> None:
    """Summarise the frames, tags and slices found in FILE.

    The importer runs as it would for ``import``, so Aseprite and PyxelEdit
    files still write their sheet image to the sprites directory.
    """
    from sprite_importer.core.exceptions import ImporterError
    from sprite_importer.core.job import ImportJob
    from sprite_importer.core.registry import ImporterRegistry

    file_path = Path(file)
    registry = ImporterRegistry()
    registry.discover()
    importer = _find_importer(registry, file_path)
    config = _build_config(importer.name, config_dir, None, (), None, None, aseprite)

    job = ImportJob(
        asset_path=file_path,
        sprites_directory=Path(config.sprites_target.target_directory(str(file_path.parent))),
    )
    try:
        parsed = importer.run(job, config)
    except ImporterError as exc:
        raise click.ClickException(str(exc)) from exc

    sheet = parsed.sheet
    click.echo(f"{job.file_name} ({importer.display_name})")
    click.echo(f"  sheet:  {sheet.width}x{sheet.height}, source {sheet.source_size.width}x{sheet.source_size.height}")
    click.echo(f"  frames: {len(sheet.frames)}")
    click.echo(f"  tags:   {len(parsed.tags)}")
    for tag in parsed.tags:
        click.echo(f"    {tag.name} [{tag.first_index}..{tag.last_index}]")
    click.echo(f"  slices: {len(sheet.slices)}")
    if sheet.use_pivot:
        click.echo(f"  pivot:  ({sheet.pivot[0]:.3f}, {sheet.pivot[1]:.3f})")


@cli.command(name="schemes")
def schemes_cmd() -> None:
    """List the available sprite naming schemes."""
    for scheme in SpriteNamingScheme:
        click.echo(f"{scheme.value:<18} {scheme.label}")
