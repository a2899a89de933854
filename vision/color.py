"""Marker color handling.

Colors arrive in whatever form the caller has at hand (hex strings, Pillow color
names, 8-bit tuples) and are normalized to ``RGB`` with components in 0..1.
"""

from __future__ import annotations

import numbers
from dataclasses import dataclass
from typing import Sequence, Tuple, Union

from PIL import ImageColor

ColorLike = Union["RGB", str, Sequence[float], Sequence[int]]


@dataclass(frozen=True)
class RGB:
    red: float
    green: float
    blue: float

    def __post_init__(self) -> None:
        for name in ("red", "green", "blue"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} component must be within 0..1, got {value!r}")

    @classmethod
    def from_bytes(cls, red: int, green: int, blue: int) -> "RGB":
        return cls(red / 255.0, green / 255.0, blue / 255.0)

    @classmethod
    def from_hex(cls, text: str) -> "RGB":
        return cls.from_bytes(*ImageColor.getrgb(text)[:3])

    @classmethod
    def from_value(cls, value: ColorLike) -> "RGB":
        """Convert a host color representation into normalized RGB.

        Integer triples are read as 8-bit channels, float triples as normalized
        channels. Strings go through ``PIL.ImageColor`` so ``"#f0f"``,
        ``"magenta"`` and ``"rgb(255,0,255)"`` all work.
        """
        if isinstance(value, RGB):
            return value
        if isinstance(value, str):
            return cls.from_hex(value)
        components = tuple(value)
        if len(components) < 3:
            raise ValueError(f"Expected at least three color components, got {components!r}")
        red, green, blue = components[:3]
        if all(isinstance(c, numbers.Integral) for c in (red, green, blue)):
            return cls.from_bytes(int(red), int(green), int(blue))
        return cls(float(red), float(green), float(blue))

    def as_tuple(self) -> Tuple[float, float, float]:
        return self.red, self.green, self.blue

    def describe(self) -> str:
        return f"rgb({self.red:.6g},{self.green:.6g},{self.blue:.6g})"
