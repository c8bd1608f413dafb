"""Animation reconstruction — rebuild the animation hierarchy from flat tags."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from sprite_importer.core.datatypes import Animation, ParsedSheet, ReconstructedSheet, TagRecord

logger = logging.getLogger(__name__)


def build_animations(tags: Iterable[TagRecord]) -> list[Animation]:
    """Create animations from raw tags, detecting categories and renaming leaves.

    An animation becomes a category as soon as a later tag's range lies
    inside its own.  Leaf animations nested in another animation with a
    different name are then prefixed with that animation's name, so two
    ``idle`` leaves under ``walk`` and ``run`` become ``walk_idle`` and
    ``run_idle``.

    Args:
        tags: Tag records in source order.

    Returns:
        The animations in source order.
    """
    animations: list[Animation] = []

    for tag in tags:
        anim = Animation(name=tag.name, first_index=tag.first_index, last_index=tag.last_index)

        for existing in reversed(animations):
            if anim.is_in_animation(existing):
                existing.is_category = True

        animations.append(anim)

    for anim in animations:
        for other in reversed(animations):
            if anim.is_category or anim.name.lower() == other.name.lower():
                continue
            if anim.is_in_animation(other):
                logger.debug("Renaming '%s' to '%s_%s'", anim.name, other.name, anim.name)
                anim.name = f"{other.name}_{anim.name}"

    return animations


def reconstruct(parsed: ParsedSheet) -> ReconstructedSheet:
    """Attach reconstructed animations to the parsed sheet.

    Args:
        parsed: Parser output carrying the sheet and its raw tags.

    Returns:
        The sheet wrapped as a ``ReconstructedSheet``.
    """
    sheet = parsed.sheet
    sheet.animations = build_animations(parsed.tags)

    categories = sum(1 for anim in sheet.animations if anim.is_category)
    logger.info(
        "Reconstructed %d animations (%d categories) for '%s'",
        len(sheet.animations),
        categories,
        sheet.name,
    )
    return ReconstructedSheet(sheet=sheet)
