"""Engine-agnostic clip descriptions built from the final sheet."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sprite_importer.core.datatypes import Animation, AnimationTargetObjectType, FinalSheet, Keyframe
from sprite_importer.core.settings import clip_name, clip_path, resolve_target_type
from sprite_importer.core.timing import build_keyframes

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClipDefinition:
    """Everything a host needs to author one animation clip.

    Attributes:
        name: Clip name, ``"{master}@{animation}"``.
        path: Deterministic asset path of the clip.
        animation: The leaf animation the clip plays.
        target: Renderer component the clip animates.
        is_looping: Whether the clip wraps around.
        frame_rate: Sample rate used for the final keyframe.
        keyframes: Sprite swaps, one per frame plus the repeated last frame.
    """

    name: str
    path: str
    animation: Animation
    target: AnimationTargetObjectType
    is_looping: bool
    frame_rate: float
    keyframes: tuple[Keyframe, ...]

    @property
    def length(self) -> float:
        """Total clip length in seconds."""
        return self.animation.key_frame_times[-1] if self.animation.key_frame_times else 0.0


def create_clip_definitions(
    final: FinalSheet,
    target_dir: str,
    master_name: str,
    target: AnimationTargetObjectType,
    frame_rate: float,
) -> list[ClipDefinition]:
    """Describe one clip per leaf animation and remember it on the animation.

    Args:
        final: The named sheet.
        target_dir: Directory the host writes clips to.
        master_name: Sheet image name without extension.
        target: Configured target-object type.
        frame_rate: Clip sample rate in frames per second.

    Returns:
        Clip definitions in animation order; categories produce none.
    """
    sheet = final.sheet
    clips: list[ClipDefinition] = []

    for anim in sheet.clip_animations():
        clip = ClipDefinition(
            name=clip_name(master_name, anim.name),
            path=clip_path(target_dir, master_name, anim.name),
            animation=anim,
            target=resolve_target_type(master_name, anim.name, target, sheet.previous_import_settings),
            is_looping=anim.is_looping,
            frame_rate=frame_rate,
            keyframes=tuple(build_keyframes(anim, frame_rate)),
        )
        anim.clip = clip
        clips.append(clip)

    logger.info("Prepared %d clips for '%s'", len(clips), master_name)
    return clips


def get_clip(final: FinalSheet, name: str) -> ClipDefinition | None:
    """Return the clip of the leaf animation called *name*, if any.

    When several leaves share the name the last one in sheet order wins.
    """
    for anim in reversed(final.sheet.clip_animations()):
        if anim.name == name:
            clip: ClipDefinition | None = anim.clip
            return clip
    return None


def get_clip_or_similar(final: FinalSheet, name: str) -> ClipDefinition | None:
    """Return the clip for *name*, falling back to the closest shorter name.

    Used when re-binding an override controller: a state called ``idleAlt``
    still gets the ``idle`` clip when no ``idleAlt`` animation exists.  The
    longest animation name contained in *name* wins, and among names of
    equal length the last one in sheet order.
    """
    clip = get_clip(final, name)
    if clip is not None:
        return clip

    best: Animation | None = None
    for anim in final.sheet.clip_animations():
        if anim.name in name and (best is None or len(anim.name) >= len(best.name)):
            best = anim
    if best is None:
        return None
    result: ClipDefinition | None = best.clip
    return result
