"""Find the pixels of a solid marker border drawn into a screenshot.

Assumptions:
    - Input is a ``RasterImage`` with RGBA as its first four channels.
    - Marker strokes are painted with a single flat color; only a fixed numeric
      tolerance absorbs compression noise.

The scan is a single vectorized pass over the buffer and returns coordinates
as an ``(N, 2)`` integer array so the hull step can consume them directly.
"""

from __future__ import annotations

import numpy as np

from .color import RGB
from .errors import UnsupportedPixelFormat
from .raster import RasterImage

MIN_ALPHA = 0.05


def classify(image: RasterImage, target_color: RGB, tolerance: float) -> np.ndarray:
    """Return ``(x, y)`` pixel coordinates matching ``target_color`` in row-major order."""
    if image.bytes_per_pixel < 4:
        raise UnsupportedPixelFormat(
            f"Expected at least 4 bytes per pixel, got {image.bytes_per_pixel}"
        )
    if image.width == 0 or image.height == 0:
        return np.empty((0, 2), dtype=np.int64)

    arr = image.as_array()
    alpha = arr[..., 3] / 255.0
    rgb = arr[..., :3] / 255.0
    target = np.asarray(target_color.as_tuple(), dtype=np.float64)

    distance = np.sqrt(((rgb - target) ** 2).sum(axis=-1))
    mask = (alpha > MIN_ALPHA) & (distance <= tolerance)

    ys, xs = np.nonzero(mask)
    return np.column_stack((xs, ys)).astype(np.int64, copy=False)
