"""Shared value objects and the normalized animation model.

The model is produced in stages: a parser emits a ``ParsedSheet``, the
reconstructor turns it into a ``ReconstructedSheet``, frame binding produces a
``TimedSheet`` and the naming engine a ``FinalSheet``.  Every stage wraps the
same ``AnimationSheet`` aggregate; the wrapper types only exist so a stage
function cannot be handed the output of the wrong stage.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from sprite_importer.core.settings import PreviousImportSettings


# ── Enumerations ──────────────────────────────────────────────────────────


class SpriteNamingScheme(str, Enum):
    """Convention used to derive each sprite's name."""

    CLASSIC = "classic"
    FILE_ANIM_ZERO = "file_anim_zero"
    FILE_ANIM_ONE = "file_anim_one"
    ANIM_ZERO = "anim_zero"
    ANIM_ONE = "anim_one"
    FILE_AT_ANIM_ZERO = "file_at_anim_zero"
    FILE_AT_ANIM_ONE = "file_at_anim_one"

    @property
    def label(self) -> str:
        """Return a human-readable example of the produced names."""
        return _SCHEME_LABELS[self]


_SCHEME_LABELS: dict[SpriteNamingScheme, str] = {
    SpriteNamingScheme.CLASSIC: "file 00, file 01, ...",
    SpriteNamingScheme.FILE_ANIM_ZERO: "file_anim_00, file_anim_01, ...",
    SpriteNamingScheme.FILE_ANIM_ONE: "file_anim_01, file_anim_02, ...",
    SpriteNamingScheme.ANIM_ZERO: "anim_00, anim_01, ...",
    SpriteNamingScheme.ANIM_ONE: "anim_01, anim_02, ...",
    SpriteNamingScheme.FILE_AT_ANIM_ZERO: "file@anim_00, file@anim_01, ...",
    SpriteNamingScheme.FILE_AT_ANIM_ONE: "file@anim_01, file@anim_02, ...",
}


class AnimationTargetObjectType(str, Enum):
    """Which renderer component an authored clip animates."""

    SPRITE_RENDERER = "sprite_renderer"
    IMAGE = "image"
    SPRITE_RENDERER_AND_IMAGE = "sprite_renderer_and_image"


class SpriteAlignment(str, Enum):
    """Pivot alignment applied to every sliced sprite."""

    CENTER = "center"
    TOP_LEFT = "top_left"
    TOP_CENTER = "top_center"
    TOP_RIGHT = "top_right"
    LEFT_CENTER = "left_center"
    RIGHT_CENTER = "right_center"
    BOTTOM_LEFT = "bottom_left"
    BOTTOM_CENTER = "bottom_center"
    BOTTOM_RIGHT = "bottom_right"
    CUSTOM = "custom"


# ── Geometry ──────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Bounds:
    """Integer rectangle in source pixel space."""

    x: int
    y: int
    width: int
    height: int


@dataclass(frozen=True)
class Point:
    """Integer pixel offset."""

    x: int
    y: int


@dataclass(frozen=True)
class Size:
    """Integer width/height pair."""

    width: int
    height: int


# ── Model ─────────────────────────────────────────────────────────────────


@dataclass(eq=False)
class Frame:
    """One rectangular region of the sheet image shown for ``duration`` ms.

    Frames compare by identity: two frames with equal geometry are still
    distinct sprites.

    Attributes:
        x: Left edge in the sheet (bottom-left origin once parsed).
        y: Bottom edge in the sheet.
        width: Region width in pixels.
        height: Region height in pixels.
        duration: Display duration in milliseconds.
        name: Sprite name, assigned by the naming engine.
        sprite: Opaque handle of the produced sprite, set after slicing.
    """

    x: int
    y: int
    width: int
    height: int
    duration: int
    name: str = ""
    sprite: Any = None

    @property
    def rect(self) -> Bounds:
        """Return the frame rectangle."""
        return Bounds(self.x, self.y, self.width, self.height)


@dataclass(eq=False)
class Animation:
    """A named, contiguous run of frames.

    Attributes:
        name: Animation name, possibly prefixed by its category.
        first_index: First frame index into the sheet's flat frame list.
        last_index: Last frame index (inclusive).
        frames: Frames bound by the timing engine.
        is_category: ``True`` when another animation lies inside this one.
        is_looping: ``False`` when the name matches a non-looping pattern.
        key_frame_times: Cumulative start time of each frame in seconds,
            plus the total length as the final entry.
        clip: Opaque handle of the authored clip; never set on categories.
    """

    name: str
    first_index: int
    last_index: int
    frames: list[Frame] = field(default_factory=list)
    is_category: bool = False
    is_looping: bool = True
    key_frame_times: list[float] = field(default_factory=list)
    clip: Any = None

    @property
    def count(self) -> int:
        """Number of frames described by the index range."""
        return self.last_index - self.first_index + 1

    def is_in_animation(self, other: Animation) -> bool:
        """Return ``True`` if this animation's range lies within *other*'s."""
        return self.first_index >= other.first_index and self.last_index <= other.last_index

    def key_frame_time(self, index: int) -> float:
        """Return the start time in seconds of frame *index*."""
        return self.key_frame_times[index]

    def last_key_frame_time(self, frame_rate: float) -> float:
        """Return the time for the repeated last keyframe.

        The final sprite is keyed again one tick before the clip ends, so it
        stays visible for its full duration instead of wrapping to frame 0.

        Args:
            frame_rate: Sample rate of the target clip in frames per second.
        """
        return self.key_frame_times[-1] - 1.0 / frame_rate


@dataclass
class Slice:
    """A named rectangle with a pivot anchor, defined once per sheet.

    ``normalized_pivot`` is derived from the current ``bounds`` and ``pivot``
    and is expressed with a bottom-left origin.
    """

    name: str
    source_size: Size
    bounds: Bounds | None = None
    pivot: Point | None = None

    @property
    def normalized_pivot(self) -> tuple[float, float]:
        """Return the pivot in 0..1 sheet-relative coordinates."""
        if self.bounds is None or self.pivot is None:
            return (0.0, 0.0)
        pivot_x = self.bounds.x + (self.bounds.width - self.pivot.x)
        pivot_y = self.bounds.y + (self.bounds.height - self.pivot.y)
        return (
            pivot_x / self.source_size.width,
            1 - pivot_y / self.source_size.height,
        )


@dataclass
class AnimationSheet:
    """Aggregate root of one import: frames, animations, slices and pivot."""

    name: str = ""
    asset_directory: str = ""
    width: int = 0
    height: int = 0
    source_size: Size = field(default_factory=lambda: Size(0, 0))
    frames: list[Frame] = field(default_factory=list)
    animations: list[Animation] = field(default_factory=list)
    slices: list[Slice] = field(default_factory=list)
    use_pivot: bool = False
    pivot: tuple[float, float] = (0.0, 0.0)
    previous_import_settings: PreviousImportSettings | None = None

    @property
    def max_texture_size(self) -> int:
        """Largest canvas dimension."""
        return max(self.width, self.height)

    @property
    def has_animations(self) -> bool:
        """Return ``True`` if at least one animation was imported."""
        return len(self.animations) > 0

    @property
    def has_previous_texture_import_settings(self) -> bool:
        """Return ``True`` if texture settings from an earlier import exist."""
        settings = self.previous_import_settings
        return settings is not None and settings.has_previous_texture_import_settings

    def clip_animations(self) -> list[Animation]:
        """Return the animations that receive a clip (categories excluded)."""
        return [anim for anim in self.animations if not anim.is_category]


@dataclass(frozen=True)
class TagRecord:
    """Raw animation boundary as emitted by a parser."""

    name: str
    first_index: int
    last_index: int


# ── Stage wrappers ────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ParsedSheet:
    """Parser output: frames, slices and pivot, plus raw tag records."""

    sheet: AnimationSheet
    tags: tuple[TagRecord, ...]


@dataclass(frozen=True)
class ReconstructedSheet:
    """Animations created, categories detected, names disambiguated."""

    sheet: AnimationSheet


@dataclass(frozen=True)
class TimedSheet:
    """Frames bound to animations and keyframe tables computed."""

    sheet: AnimationSheet


@dataclass(frozen=True)
class FinalSheet:
    """Frames named and pruned; ready for slicing and clip authoring."""

    sheet: AnimationSheet


# ── Collaborator-facing records ───────────────────────────────────────────


@dataclass(frozen=True)
class SpriteMetaData:
    """Slicing instruction for one sprite of the sheet image."""

    name: str
    rect: Bounds
    alignment: SpriteAlignment
    pivot: tuple[float, float] = (0.5, 0.5)


@dataclass(frozen=True)
class Keyframe:
    """A sprite swap at ``time`` seconds on a clip timeline."""

    time: float
    frame: Frame
