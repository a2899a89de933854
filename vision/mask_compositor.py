"""Cut the focus region out of a screenshot.

The polygon is rasterized with OpenCV into a single-channel clip mask; pixels
on the polygon boundary count as inside so the marker stroke itself survives.
Everything outside the clip is zeroed, which leaves it fully transparent.
"""

from __future__ import annotations

from typing import Sequence, Tuple

import cv2
import numpy as np

from .errors import CompositingFailure
from .raster import RasterImage


def _clip_mask(width: int, height: int, polygon: Sequence[Tuple[float, float]]) -> np.ndarray:
    clip = np.zeros((height, width), dtype=np.uint8)
    vertices = np.round(np.asarray(polygon, dtype=np.float64)).astype(np.int32).reshape(-1, 1, 2)
    cv2.fillPoly(clip, [vertices], 255)
    return clip.astype(bool)


def mask(source: RasterImage, polygon: Sequence[Tuple[float, float]]) -> RasterImage:
    """Return a copy of ``source`` keeping only pixels inside ``polygon``."""
    if source.width == 0 or source.height == 0:
        raise CompositingFailure(f"Cannot composite a {source.width}x{source.height} image")
    if len(polygon) < 3:
        raise CompositingFailure(f"Mask needs at least 3 vertices, got {len(polygon)}")

    try:
        inside = _clip_mask(source.width, source.height, polygon)
    except cv2.error as exc:
        raise CompositingFailure(f"Polygon rasterization failed: {exc}") from exc

    pixels = source.as_array()
    destination = np.zeros_like(pixels)
    destination[inside] = pixels[inside]
    return RasterImage.from_array(destination)
