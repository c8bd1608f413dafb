"""Frame binding and keyframe timing."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from sprite_importer.core.datatypes import Animation, Frame, Keyframe, ReconstructedSheet, TimedSheet

logger = logging.getLogger(__name__)


def key_frame_times(frames: Sequence[Frame]) -> list[float]:
    """Return cumulative start times in seconds, with the total length appended.

    Args:
        frames: Frames in playback order; durations are milliseconds.

    Returns:
        A list of ``len(frames) + 1`` times starting at ``0.0``.
    """
    times = [0.0]
    elapsed = 0.0
    for frame in frames:
        elapsed += frame.duration / 1000
        times.append(elapsed)
    return times


def set_frames(animation: Animation, frames: Sequence[Frame]) -> None:
    """Bind *frames* to *animation* and recompute its keyframe table."""
    animation.frames = list(frames)
    animation.key_frame_times = key_frame_times(animation.frames)


def bind_frames(reconstructed: ReconstructedSheet) -> TimedSheet:
    """Give every animation its slice of the sheet's frames.

    Args:
        reconstructed: Sheet whose animations still only carry index ranges.

    Returns:
        The sheet wrapped as a ``TimedSheet``.
    """
    sheet = reconstructed.sheet
    for anim in sheet.animations:
        set_frames(anim, sheet.frames[anim.first_index : anim.last_index + 1])
        if len(anim.frames) != anim.count:
            logger.warning(
                "Animation '%s' spans frames %d-%d but only %d exist",
                anim.name,
                anim.first_index,
                anim.last_index,
                len(anim.frames),
            )
    return TimedSheet(sheet=sheet)


def build_keyframes(animation: Animation, frame_rate: float) -> list[Keyframe]:
    """Return the sprite-swap keyframes for one clip.

    One keyframe per frame is placed at its start time.  The last frame is
    keyed once more one tick before the end so the clip has its full length.

    Args:
        animation: A bound animation.
        frame_rate: Clip sample rate in frames per second.

    Returns:
        ``len(animation.frames) + 1`` keyframes, or an empty list when the
        animation has no frames.
    """
    if not animation.frames:
        return []

    keyframes = [
        Keyframe(time=animation.key_frame_time(i), frame=frame) for i, frame in enumerate(animation.frames)
    ]
    keyframes.append(Keyframe(time=animation.last_key_frame_time(frame_rate), frame=animation.frames[-1]))
    return keyframes
