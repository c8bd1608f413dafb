"""Flatten PyxelEdit layers into a single RGBA image.

Layers are drawn back to front (highest index first).  For every pixel the
source coverage is ``src.a * layer.alpha / 255``; colour is interpolated
linearly towards the source by that amount and the destination alpha moves
towards 1 by the same amount::

    rgb   = lerp(dst.rgb, src.rgb, a)
    alpha = lerp(dst.a,   1.0,     a)
"""

from __future__ import annotations

import io
import logging
from collections.abc import Mapping

import numpy as np
from PIL import Image

from sprite_importer.core.exceptions import MalformedMetadataError
from sprite_importer.importers.pyxel_edit._docdata import Canvas, Layer

logger = logging.getLogger(__name__)


def layer_file_name(index: int) -> str:
    """Return the archive entry holding the pixels of layer *index*."""
    return f"layer{index}.png"


def decode_layer(data: bytes, width: int, height: int) -> np.ndarray:
    """Decode a layer PNG into a ``(height, width, 4)`` float array in 0..1.

    Layers smaller or larger than the canvas are anchored at the top-left
    corner and cropped or padded with transparency.
    """
    with Image.open(io.BytesIO(data)) as img:
        rgba = img.convert("RGBA")
    if rgba.size != (width, height):
        logger.debug("Layer is %dx%d, canvas is %dx%d", rgba.width, rgba.height, width, height)
        canvas = Image.new("RGBA", (width, height), (0, 0, 0, 0))
        canvas.paste(rgba, (0, 0))
        rgba = canvas
    return np.asarray(rgba, dtype=np.float64) / 255.0


def blend_layer(base: np.ndarray, source: np.ndarray, layer_alpha: float) -> np.ndarray:
    """Blend *source* over *base* with an additional layer opacity.

    Args:
        base: Destination pixels, ``(h, w, 4)`` floats in 0..1.
        source: Layer pixels, same shape.
        layer_alpha: Layer opacity in 0..1.

    Returns:
        The blended pixels as a new array.
    """
    coverage = np.clip(source[..., 3] * layer_alpha, 0.0, 1.0)
    result = np.empty_like(base)
    result[..., :3] = base[..., :3] + (source[..., :3] - base[..., :3]) * coverage[..., None]
    result[..., 3] = base[..., 3] + (1.0 - base[..., 3]) * coverage
    return result


def compose_layers(canvas: Canvas, layer_images: Mapping[int, bytes]) -> Image.Image:
    """Flatten the visible layers of *canvas* into one RGBA image.

    Args:
        canvas: Canvas description with layers keyed by index.
        layer_images: Raw PNG bytes per layer index.

    Returns:
        The composed image, ``canvas.width`` x ``canvas.height``.

    Raises:
        MalformedMetadataError: If a visible layer has no image or its PNG
            cannot be decoded.
    """
    pixels = np.zeros((canvas.height, canvas.width, 4), dtype=np.float64)

    for index in sorted(canvas.layers, reverse=True):
        layer: Layer = canvas.layers[index]
        if layer.hidden:
            continue
        if index not in layer_images:
            raise MalformedMetadataError(layer_file_name(index))
        if layer.blend_mode != "normal":
            logger.debug("Layer '%s' uses blend mode '%s'; drawn as normal", layer.name, layer.blend_mode)

        try:
            source = decode_layer(layer_images[index], canvas.width, canvas.height)
        except (OSError, Image.DecompressionBombError) as exc:
            raise MalformedMetadataError(layer_file_name(index), f"not a readable PNG ({exc})") from exc
        pixels = blend_layer(pixels, source, layer.alpha / 255.0)

    return Image.fromarray(np.rint(pixels * 255.0).astype(np.uint8))
