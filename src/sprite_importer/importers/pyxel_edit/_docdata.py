"""Parse the ``docData.json`` descriptor stored inside ``.pyxel`` archives.

Keys used::

    tileset     — tileWidth, tileHeight
    canvas      — width, height, layers{idx: {name, alpha, hidden, blendMode}}
    animations  — {idx: {name, baseTile, length,
                         frameDurationMultipliers[], frameDuration}}
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from sprite_importer.core.exceptions import MalformedMetadataError


@dataclass
class Tileset:
    """Tile grid geometry."""

    tile_width: int
    tile_height: int


@dataclass
class Layer:
    """One canvas layer; the pixels live in ``layer{index}.png``."""

    name: str
    alpha: int = 255
    hidden: bool = False
    blend_mode: str = "normal"


@dataclass
class Canvas:
    """Canvas size and its layers keyed by layer index (0 is the top layer)."""

    width: int
    height: int
    layers: dict[int, Layer] = field(default_factory=dict)


@dataclass
class PyxelAnimation:
    """A run of ``length`` tiles starting at ``base_tile``.

    ``frame_duration`` is in milliseconds; each multiplier is a percentage
    applied to the frame at the same position.
    """

    name: str
    base_tile: int = 0
    length: int = 7
    frame_duration_multipliers: list[int] = field(default_factory=list)
    frame_duration: int = 200

    def duration_of(self, frame_index: int) -> int:
        """Return the duration in ms of frame *frame_index*."""
        multipliers = self.frame_duration_multipliers
        multiplier = multipliers[frame_index] if frame_index < len(multipliers) else 100
        if multiplier != 100:
            return int(self.frame_duration * multiplier / 100)
        return self.frame_duration


@dataclass
class PyxelDocument:
    """Decoded ``docData.json``."""

    name: str
    tileset: Tileset
    canvas: Canvas
    animations: dict[int, PyxelAnimation] = field(default_factory=dict)


def read_doc_data(data: dict[str, Any]) -> PyxelDocument:
    """Decode a ``docData.json`` object.

    Args:
        data: The decoded JSON object.

    Returns:
        The typed document.

    Raises:
        MalformedMetadataError: If ``tileset`` or ``canvas`` is missing or a
            record lacks a required field.
    """
    if not isinstance(data.get("tileset"), dict):
        raise MalformedMetadataError("tileset")
    if not isinstance(data.get("canvas"), dict):
        raise MalformedMetadataError("canvas")

    try:
        tileset = _read_tileset(data["tileset"])
    except (KeyError, TypeError, ValueError) as exc:
        raise MalformedMetadataError("tileset", f"incomplete record ({exc!r})") from exc

    try:
        canvas = _read_canvas(data["canvas"])
    except (KeyError, TypeError, ValueError) as exc:
        raise MalformedMetadataError("canvas", f"incomplete record ({exc!r})") from exc

    try:
        animations = {
            int(key): _read_animation(value) for key, value in data.get("animations", {}).items()
        }
    except (KeyError, TypeError, ValueError) as exc:
        raise MalformedMetadataError("animations", f"incomplete record ({exc!r})") from exc

    return PyxelDocument(
        name=str(data.get("name", "")),
        tileset=tileset,
        canvas=canvas,
        animations=animations,
    )


def _read_tileset(raw: dict[str, Any]) -> Tileset:
    return Tileset(
        tile_width=int(raw["tileWidth"]),
        tile_height=int(raw["tileHeight"]),
    )


def _read_canvas(raw: dict[str, Any]) -> Canvas:
    layers = {int(key): _read_layer(value) for key, value in raw.get("layers", {}).items()}
    return Canvas(
        width=int(raw["width"]),
        height=int(raw["height"]),
        layers=layers,
    )


def _read_layer(raw: dict[str, Any]) -> Layer:
    return Layer(
        name=str(raw.get("name", "")),
        alpha=int(raw.get("alpha", 255)),
        hidden=bool(raw.get("hidden", False)),
        blend_mode=str(raw.get("blendMode", "normal")),
    )


def _read_animation(raw: dict[str, Any]) -> PyxelAnimation:
    return PyxelAnimation(
        name=str(raw["name"]),
        base_tile=int(raw["baseTile"]),
        length=int(raw["length"]),
        frame_duration_multipliers=[int(m) for m in raw.get("frameDurationMultipliers", [])],
        frame_duration=int(raw.get("frameDuration", 200)),
    )
