"""Settings merge — keep hand-tuned state alive across re-imports.

Three merge points exist: the sheet pivot taken from the first slice (parse
time), loop flags derived from configured name patterns (after naming), and
the target-object type of clips that already exist (clip creation).
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field, replace
from typing import Any

from sprite_importer.core.datatypes import (
    AnimationSheet,
    AnimationTargetObjectType,
    FinalSheet,
    Slice,
    SpriteAlignment,
    SpriteMetaData,
)

logger = logging.getLogger(__name__)

_CLIP_NAME_DELIMITER = "@"
_CLIP_EXTENSION = ".anim"


@dataclass(frozen=True)
class SpriteImportSettings:
    """Alignment and pivot a user gave one sprite in an earlier import."""

    alignment: SpriteAlignment
    pivot: tuple[float, float] = (0.5, 0.5)


@dataclass
class PreviousImportSettings:
    """Snapshot of what an earlier import left behind.

    Attributes:
        sprites: Per-sprite alignment and pivot, keyed by sprite name.
        clip_targets: Target-object type of existing clips, keyed by clip
            name (``"{master}@{animation}"``).
    """

    sprites: dict[str, SpriteImportSettings] = field(default_factory=dict)
    clip_targets: dict[str, AnimationTargetObjectType] = field(default_factory=dict)

    @property
    def has_previous_texture_import_settings(self) -> bool:
        """Return ``True`` if any sprite settings were recorded."""
        return bool(self.sprites)

    def apply_texture_import_settings(self, records: Sequence[SpriteMetaData]) -> list[SpriteMetaData]:
        """Return *records* with recorded alignment/pivot restored by name."""
        restored: list[SpriteMetaData] = []
        for record in records:
            previous = self.sprites.get(record.name)
            if previous is None:
                restored.append(record)
            else:
                restored.append(replace(record, alignment=previous.alignment, pivot=previous.pivot))
        return restored

    def target_for_clip(self, clip_name: str) -> AnimationTargetObjectType | None:
        """Return the recorded target type of *clip_name*, if the clip exists."""
        return self.clip_targets.get(clip_name)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PreviousImportSettings:
        """Build settings from their JSON representation.

        Args:
            data: Mapping with optional ``sprites`` and ``clips`` sections.

        Returns:
            The parsed settings.
        """
        sprites = {
            name: SpriteImportSettings(
                alignment=SpriteAlignment(entry.get("alignment", SpriteAlignment.CENTER.value)),
                pivot=tuple(entry.get("pivot", (0.5, 0.5))),  # type: ignore[arg-type]
            )
            for name, entry in data.get("sprites", {}).items()
        }
        clips = {name: AnimationTargetObjectType(target) for name, target in data.get("clips", {}).items()}
        return cls(sprites=sprites, clip_targets=clips)


# ── Pivot ─────────────────────────────────────────────────────────────────


def apply_slice_pivot(sheet: AnimationSheet, slice_: Slice) -> None:
    """Record *slice_* on the sheet; the first slice with a pivot sets the sheet pivot."""
    if slice_.bounds is not None and slice_.pivot is not None and not sheet.use_pivot:
        sheet.use_pivot = True
        sheet.pivot = slice_.normalized_pivot
        logger.info("Using pivot %s from slice '%s'", sheet.pivot, slice_.name)
    sheet.slices.append(slice_)


# ── Loop flags ────────────────────────────────────────────────────────────


def non_looping_regex(patterns: Iterable[str]) -> re.Pattern[str] | None:
    """Combine name fragments into one word-bounded alternation.

    Args:
        patterns: Regular-expression fragments; each is matched as a whole word.

    Returns:
        The compiled pattern, or ``None`` when *patterns* is empty.
    """
    parts = [rf"\b{pattern}\b" for pattern in patterns]
    if not parts:
        return None
    return re.compile("|".join(parts))


def should_loop(regex: re.Pattern[str] | None, name: str) -> bool:
    """Return ``False`` if *name* matches the non-looping expression."""
    return regex is None or regex.search(name) is None


def set_non_looping_animations(final: FinalSheet, patterns: Iterable[str]) -> None:
    """Derive ``is_looping`` for every leaf animation of the sheet."""
    regex = non_looping_regex(patterns)
    for anim in final.sheet.clip_animations():
        anim.is_looping = should_loop(regex, anim.name)
        if not anim.is_looping:
            logger.debug("Animation '%s' will not loop", anim.name)


# ── Clip identity ─────────────────────────────────────────────────────────


def clip_name(master_name: str, animation_name: str) -> str:
    """Return the clip asset name, e.g. ``"hero@walk"``."""
    return f"{master_name}{_CLIP_NAME_DELIMITER}{animation_name}"


def clip_path(target_dir: str, master_name: str, animation_name: str) -> str:
    """Return the deterministic clip asset path ``{dir}/{master}@{anim}.anim``."""
    return f"{target_dir}/{clip_name(master_name, animation_name)}{_CLIP_EXTENSION}"


def resolve_target_type(
    master_name: str,
    animation_name: str,
    configured: AnimationTargetObjectType,
    previous: PreviousImportSettings | None,
) -> AnimationTargetObjectType:
    """Pick the target type of a clip, preferring the one it already has.

    Args:
        master_name: Name of the sheet image without extension.
        animation_name: Name of the animation.
        configured: Target type from the current configuration.
        previous: Settings of an earlier import, if any.

    Returns:
        The recorded target type of an existing clip, else *configured*.
    """
    if previous is not None:
        existing = previous.target_for_clip(clip_name(master_name, animation_name))
        if existing is not None:
            return existing
    return configured
