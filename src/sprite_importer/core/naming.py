"""Sprite naming and sheet layout.

Frames receive their final sprite names here.  Under every scheme except
``classic`` only frames that belong to a leaf animation are named; the
remaining frames are dropped so no sprite is sliced for them.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from sprite_importer.core.datatypes import (
    Animation,
    FinalSheet,
    Frame,
    SpriteAlignment,
    SpriteMetaData,
    SpriteNamingScheme,
    TimedSheet,
)

logger = logging.getLogger(__name__)

_NAME_DELIMITER = "_"
_FILE_NAME_DELIMITER = "@"

_ONE_BASED: frozenset[SpriteNamingScheme] = frozenset(
    {
        SpriteNamingScheme.FILE_ANIM_ONE,
        SpriteNamingScheme.ANIM_ONE,
        SpriteNamingScheme.FILE_AT_ANIM_ONE,
    }
)


def frame_name(scheme: SpriteNamingScheme, sheet_name: str, animation_name: str, index: int) -> str:
    """Build the sprite name for the *index*-th frame of an animation.

    Args:
        scheme: Any scheme other than ``classic``.
        sheet_name: Name of the imported file without extension.
        animation_name: Name of the owning animation.
        index: Zero-based position of the frame inside the animation.

    Returns:
        The sprite name, e.g. ``"hero_walk_01"``.

    Raises:
        ValueError: If *scheme* is ``classic``, which numbers frames globally.
    """
    number = f"{index + 1 if scheme in _ONE_BASED else index:02d}"

    if scheme in (SpriteNamingScheme.FILE_ANIM_ZERO, SpriteNamingScheme.FILE_ANIM_ONE):
        return f"{sheet_name}{_NAME_DELIMITER}{animation_name}{_NAME_DELIMITER}{number}"
    if scheme in (SpriteNamingScheme.ANIM_ZERO, SpriteNamingScheme.ANIM_ONE):
        return f"{animation_name}{_NAME_DELIMITER}{number}"
    if scheme in (SpriteNamingScheme.FILE_AT_ANIM_ZERO, SpriteNamingScheme.FILE_AT_ANIM_ONE):
        return f"{sheet_name}{_FILE_NAME_DELIMITER}{animation_name}{_NAME_DELIMITER}{number}"

    msg = f"Scheme '{scheme.value}' does not name frames per animation"
    raise ValueError(msg)


class _NameTable:
    """Tracks which frame owns which name so every name stays unique."""

    def __init__(self) -> None:
        self._owners: dict[str, Frame] = {}

    def assign(self, frame: Frame, name: str) -> None:
        if frame.name and self._owners.get(frame.name) is frame:
            del self._owners[frame.name]

        candidate = name
        suffix = 1
        while candidate in self._owners and self._owners[candidate] is not frame:
            candidate = f"{name}{_NAME_DELIMITER}{suffix}"
            suffix += 1
        if candidate != name:
            logger.warning("Sprite name '%s' is already taken, using '%s'", name, candidate)

        frame.name = candidate
        self._owners[candidate] = frame


def apply_naming_scheme(timed: TimedSheet, scheme: SpriteNamingScheme) -> FinalSheet:
    """Name every surviving frame and prune the unnamed ones.

    Args:
        timed: Sheet with bound animations.
        scheme: Naming convention to apply.

    Returns:
        The sheet wrapped as a ``FinalSheet``.
    """
    sheet = timed.sheet
    names = _NameTable()

    if scheme is SpriteNamingScheme.CLASSIC:
        for i, frame in enumerate(sheet.frames):
            names.assign(frame, f"{sheet.name} {i:02d}")
    else:
        for anim in sheet.clip_animations():
            for i, frame in enumerate(anim.frames):
                names.assign(frame, frame_name(scheme, sheet.name, anim.name, i))

    removed = 0
    for i in range(len(sheet.frames) - 1, -1, -1):
        if not sheet.frames[i].name:
            del sheet.frames[i]
            removed += 1

    logger.info(
        "Named %d frames of '%s' using '%s' (%d unused removed)",
        len(sheet.frames),
        sheet.name,
        scheme.value,
        removed,
    )
    return FinalSheet(sheet=sheet)


def sprite_metadata(
    final: FinalSheet,
    alignment: SpriteAlignment,
    custom_pivot: tuple[float, float] = (0.5, 0.5),
) -> list[SpriteMetaData]:
    """Return one slicing record per frame, in frame order.

    A pivot imported from the sheet's slices takes precedence over the
    configured alignment.  Settings recorded by a previous import are then
    reapplied to sprites with matching names.

    Args:
        final: The named sheet.
        alignment: Configured sprite alignment.
        custom_pivot: Pivot used when *alignment* is ``custom``.

    Returns:
        The sprite metadata list.
    """
    sheet = final.sheet
    if sheet.use_pivot:
        alignment = SpriteAlignment.CUSTOM
        custom_pivot = sheet.pivot

    records = [
        SpriteMetaData(
            name=frame.name,
            rect=frame.rect,
            alignment=alignment,
            pivot=custom_pivot if alignment is SpriteAlignment.CUSTOM else (0.5, 0.5),
        )
        for frame in sheet.frames
    ]

    previous = sheet.previous_import_settings
    if previous is not None and previous.has_previous_texture_import_settings:
        records = previous.apply_texture_import_settings(records)

    return records


def apply_created_sprites(final: FinalSheet, sprites: Mapping[str, Any]) -> int:
    """Attach produced sprite handles to frames by name.

    Args:
        final: The named sheet.
        sprites: Mapping from sprite name to the handle created by the host.

    Returns:
        The number of frames that received a sprite.
    """
    assigned = 0
    for frame in final.sheet.frames:
        sprite = sprites.get(frame.name)
        if sprite is not None:
            frame.sprite = sprite
            assigned += 1
    return assigned


def animation_frame_names(animation: Animation) -> list[str]:
    """Return the sprite names of an animation's frames, in order."""
    return [frame.name for frame in animation.frames]
