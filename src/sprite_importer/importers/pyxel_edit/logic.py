"""Pure PyxelEdit import logic — archive reading, frame layout, compositing.

A ``.pyxel`` file is a zip archive holding ``docData.json`` and one
``layer{index}.png`` per canvas layer.
"""

from __future__ import annotations

import json
import logging
import re
import zipfile
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from PIL import Image

from sprite_importer.core.datatypes import AnimationSheet, Frame, ParsedSheet, Size, TagRecord
from sprite_importer.core.exceptions import MalformedMetadataError
from sprite_importer.importers.pyxel_edit._compose import compose_layers
from sprite_importer.importers.pyxel_edit._docdata import PyxelDocument, read_doc_data

logger = logging.getLogger(__name__)

DOC_DATA_ENTRY = "docData.json"

_LAYER_ENTRY = re.compile(r"^layer(\d+)\.png$")


def read_pyxel_archive(path: Path) -> tuple[dict[str, Any], dict[int, bytes]]:
    """Read the descriptor and layer images from a ``.pyxel`` archive.

    Args:
        path: Path to the archive.

    Returns:
        The decoded ``docData.json`` object and the raw PNG bytes of every
        layer, keyed by layer index.

    Raises:
        MalformedMetadataError: If the file is not a zip archive or has no
            ``docData.json`` entry, or the entry is not UTF-8 JSON.
    """
    try:
        with zipfile.ZipFile(path) as archive:
            names = set(archive.namelist())
            if DOC_DATA_ENTRY not in names:
                raise MalformedMetadataError(DOC_DATA_ENTRY, f"not found in '{path.name}'")
            doc = json.loads(archive.read(DOC_DATA_ENTRY).decode("utf-8"))
            layers: dict[int, bytes] = {}
            for name in names:
                match = _LAYER_ENTRY.match(name)
                if match:
                    layers[int(match.group(1))] = archive.read(name)
    except zipfile.BadZipFile as exc:
        raise MalformedMetadataError(DOC_DATA_ENTRY, f"'{path.name}' is not a PyxelEdit archive") from exc
    except ValueError as exc:
        raise MalformedMetadataError(DOC_DATA_ENTRY, "entry is not valid UTF-8 JSON") from exc

    if not isinstance(doc, dict):
        raise MalformedMetadataError(DOC_DATA_ENTRY, "top level is not a JSON object")
    return doc, layers


def frame_rect(document: PyxelDocument, tile_index: int) -> tuple[int, int, int, int]:
    """Return ``(x, y, width, height)`` of tile *tile_index* on the canvas.

    Tiles are numbered row by row; the canvas is ``width // tile_width``
    tiles wide.
    """
    tile_width = document.tileset.tile_width
    tile_height = document.tileset.tile_height
    column_count = document.canvas.width // tile_width

    column = tile_index % column_count
    row = tile_index // column_count
    return column * tile_width, row * tile_height, tile_width, tile_height


def parse_pyxel_document(document: PyxelDocument) -> ParsedSheet:
    """Lay out the frames of every animation and emit one tag per animation.

    The sheet's frame list is the concatenation of all animations' frames in
    animation index order; each tag covers its animation's run in that list.

    Args:
        document: The decoded descriptor.

    Returns:
        The parsed sheet.

    Raises:
        MalformedMetadataError: If the tile size does not fit the canvas.
    """
    if document.tileset.tile_width <= 0 or document.tileset.tile_height <= 0:
        raise MalformedMetadataError("tileset", "tile size must be positive")
    if document.canvas.width < document.tileset.tile_width or document.canvas.height < document.tileset.tile_height:
        raise MalformedMetadataError("canvas", "canvas is smaller than one tile")

    sheet = AnimationSheet(width=document.canvas.width, height=document.canvas.height)
    sheet.source_size = Size(document.canvas.width, document.canvas.height)
    tags: list[TagRecord] = []

    for index in sorted(document.animations):
        animation = document.animations[index]
        first = len(sheet.frames)

        for frame_index in range(animation.length):
            x, y, width, height = frame_rect(document, animation.base_tile + frame_index)
            sheet.frames.append(
                Frame(x=x, y=y, width=width, height=height, duration=animation.duration_of(frame_index))
            )

        tags.append(TagRecord(name=animation.name, first_index=first, last_index=first + animation.length - 1))

    logger.info("Laid out %d frames for %d animations", len(sheet.frames), len(tags))
    return ParsedSheet(sheet=sheet, tags=tuple(tags))


def import_pyxel(doc: dict[str, Any], layer_images: Mapping[int, bytes]) -> tuple[ParsedSheet, Image.Image]:
    """Parse a decoded descriptor and flatten its layers.

    Args:
        doc: Decoded ``docData.json``.
        layer_images: Raw PNG bytes per layer index.

    Returns:
        The parsed sheet and the composed sheet image.
    """
    document = read_doc_data(doc)
    parsed = parse_pyxel_document(document)
    image = compose_layers(document.canvas, layer_images)
    return parsed, image
