"""Decoded pixel buffers shared by the vision helpers.

Assumptions:
    - Buffers are tightly packed rows, top-left origin, channels in RGBA order.
    - Anything with fewer than four bytes per pixel is rejected later by the
      classifier rather than guessed at here.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import numpy as np
from PIL import Image


@dataclass(frozen=True)
class RasterImage:
    width: int
    height: int
    bytes_per_pixel: int
    data: bytes

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError(f"Image dimensions must be non-negative: {self.width}x{self.height}")
        if self.bytes_per_pixel <= 0:
            raise ValueError(f"bytes_per_pixel must be positive, got {self.bytes_per_pixel}")
        expected = self.width * self.height * self.bytes_per_pixel
        if len(self.data) != expected:
            raise ValueError(f"Buffer holds {len(self.data)} bytes, expected {expected}")

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    def as_array(self) -> np.ndarray:
        """Read-only ``(height, width, bytes_per_pixel)`` view over the buffer."""
        arr = np.frombuffer(self.data, dtype=np.uint8)
        return arr.reshape(self.height, self.width, self.bytes_per_pixel)

    @classmethod
    def from_array(cls, arr: np.ndarray) -> "RasterImage":
        if arr.ndim != 3:
            raise ValueError(f"Expected a (height, width, channels) array, got shape {arr.shape}")
        height, width, channels = arr.shape
        return cls(width, height, channels, np.ascontiguousarray(arr, dtype=np.uint8).tobytes())

    @classmethod
    def from_pil(cls, image: Image.Image) -> "RasterImage":
        rgba = image if image.mode == "RGBA" else image.convert("RGBA")
        return cls(rgba.width, rgba.height, 4, rgba.tobytes())

    def to_pil(self) -> Image.Image:
        if self.bytes_per_pixel != 4:
            raise ValueError("Only 4-byte RGBA buffers convert to PIL images")
        return Image.frombytes("RGBA", (self.width, self.height), self.data)
