"""Pure Aseprite metadata parsing — no file or process I/O.

Reads the ``json-array`` export written by ``aseprite -b --list-tags
--list-slices --format json-array``::

    frames[]            — {frame: {x,y,w,h}, sourceSize: {w,h}, duration}
    meta.size           — {w,h} of the packed sheet
    meta.slices[]       — {name, keys: [{bounds: {x,y,w,h}, pivot: {x,y}}]}
    meta.frameTags[]    — {name, from, to}
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from sprite_importer.core.datatypes import AnimationSheet, Bounds, Frame, ParsedSheet, Point, Size, Slice, TagRecord
from sprite_importer.core.exceptions import MalformedMetadataError
from sprite_importer.core.settings import apply_slice_pivot

logger = logging.getLogger(__name__)

VERSION_HINT = "Please use official Aseprite 1.1.1 or newer."


def load_aseprite_json(path: Path) -> dict[str, Any]:
    """Read and decode an exported Aseprite JSON file.

    Args:
        path: Path to the ``.json`` data file.

    Returns:
        The decoded JSON object.

    Raises:
        MalformedMetadataError: If the file is missing, not UTF-8 text or not
            a JSON object.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8-sig"))
    except (OSError, ValueError) as exc:
        raise MalformedMetadataError(path.name, "file could not be read as JSON") from exc
    if not isinstance(data, dict):
        raise MalformedMetadataError(path.name, "top level is not a JSON object")
    return data


def parse_aseprite_json(data: dict[str, Any]) -> ParsedSheet:
    """Convert decoded Aseprite metadata into a ``ParsedSheet``.

    Frame rectangles are converted to a bottom-left origin.  The first slice
    carrying a pivot sets the sheet pivot.

    Args:
        data: Decoded JSON of a ``json-array`` export.

    Returns:
        The sheet with frames and slices, plus one tag record per frame tag.

    Raises:
        MalformedMetadataError: If ``frames``, ``meta`` or ``meta.frameTags``
            is missing, or a required field of a record is absent.
    """
    frames_raw = data.get("frames")
    if not isinstance(frames_raw, list) or not frames_raw:
        logger.warning("No 'frames' array found in JSON created by Aseprite. %s", VERSION_HINT)
        raise MalformedMetadataError("frames", "expected a non-empty array (export with --format json-array)")

    meta = data.get("meta")
    if not isinstance(meta, dict):
        raise MalformedMetadataError("meta")

    if "frameTags" not in meta:
        logger.warning("No 'frameTags' found in JSON created by Aseprite. %s", VERSION_HINT)
        raise MalformedMetadataError("frameTags")

    sheet = AnimationSheet()
    try:
        sheet.source_size = _size(frames_raw[0]["sourceSize"])
    except (KeyError, TypeError, ValueError) as exc:
        raise MalformedMetadataError("frames", f"incomplete sourceSize ({exc!r})") from exc

    try:
        canvas = _size(meta["size"])
    except (KeyError, TypeError, ValueError) as exc:
        raise MalformedMetadataError("meta.size") from exc
    sheet.width, sheet.height = canvas.width, canvas.height

    slices = meta.get("slices", [])
    if slices and (sheet.source_size.width <= 0 or sheet.source_size.height <= 0):
        raise MalformedMetadataError("frames", "sourceSize must be positive to place slice pivots")

    try:
        for slice_raw in slices:
            apply_slice_pivot(sheet, _parse_slice(slice_raw, sheet.source_size))
    except (KeyError, TypeError, ValueError) as exc:
        raise MalformedMetadataError("meta.slices", f"incomplete slice ({exc!r})") from exc

    try:
        tags = tuple(
            TagRecord(name=str(tag["name"]), first_index=int(tag["from"]), last_index=int(tag["to"]))
            for tag in meta["frameTags"]
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise MalformedMetadataError("frameTags", f"incomplete tag ({exc!r})") from exc

    try:
        for item in frames_raw:
            sheet.frames.append(_parse_frame(item, sheet.height))
            sheet.source_size = _size(item["sourceSize"])
    except (KeyError, TypeError, ValueError) as exc:
        raise MalformedMetadataError("frames", f"incomplete frame ({exc!r})") from exc

    if not tags:
        logger.warning("No animations found in Aseprite file. Use Aseprite tags to assign names to animations.")

    logger.info("Parsed %d frames, %d tags, %d slices", len(sheet.frames), len(tags), len(sheet.slices))
    return ParsedSheet(sheet=sheet, tags=tags)


# ── Record helpers ────────────────────────────────────────────────────────


def _size(raw: dict[str, Any]) -> Size:
    return Size(int(raw["w"]), int(raw["h"]))


def _parse_frame(item: dict[str, Any], canvas_height: int) -> Frame:
    """Build a frame, flipping Y so the origin is the sheet's bottom-left."""
    rect = item["frame"]
    width, height = int(rect["w"]), int(rect["h"])
    return Frame(
        x=int(rect["x"]),
        y=canvas_height - int(rect["y"]) - height,
        width=width,
        height=height,
        duration=int(item["duration"]),
    )


def _parse_slice(raw: dict[str, Any], source_size: Size) -> Slice:
    """Build a slice from its first key; later keys are ignored."""
    slice_ = Slice(name=str(raw["name"]), source_size=source_size)
    for key in raw.get("keys", []):
        bounds = key["bounds"]
        slice_.bounds = Bounds(int(bounds["x"]), int(bounds["y"]), int(bounds["w"]), int(bounds["h"]))
        pivot = key.get("pivot")
        if pivot is not None:
            slice_.pivot = Point(int(pivot["x"]), int(pivot["y"]))
        break
    return slice_
