"""Polygon measurements for closed vertex loops (last vertex joins the first)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple

Point = Tuple[float, float]


@dataclass(frozen=True)
class BoundingBox:
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center(self) -> Point:
        return (self.min_x + self.max_x) / 2.0, (self.min_y + self.max_y) / 2.0

    def contains(self, point: Point) -> bool:
        x, y = point
        return self.min_x <= x <= self.max_x and self.min_y <= y <= self.max_y

    def scaled(self, sx: float, sy: float) -> "BoundingBox":
        return BoundingBox(self.min_x * sx, self.min_y * sy, self.max_x * sx, self.max_y * sy)


def signed_area(polygon: Sequence[Point]) -> float:
    """Shoelace area; positive for counter-clockwise loops in y-up coordinates."""
    count = len(polygon)
    if count < 3:
        return 0.0
    total = 0.0
    for i in range(count):
        x0, y0 = polygon[i]
        x1, y1 = polygon[(i + 1) % count]
        total += x0 * y1 - x1 * y0
    return total / 2.0


def centroid(polygon: Sequence[Point]) -> Point:
    """Area-weighted centroid.

    Winding order does not matter: numerator and denominator flip sign together.
    Degenerate input (fewer than three vertices or zero area) falls back to the
    first vertex, and an empty polygon to the origin.
    """
    count = len(polygon)
    if count == 0:
        return 0.0, 0.0
    first = (float(polygon[0][0]), float(polygon[0][1]))
    if count < 3:
        return first

    area = 0.0
    cx = 0.0
    cy = 0.0
    for i in range(count):
        x0, y0 = polygon[i]
        x1, y1 = polygon[(i + 1) % count]
        cross = x0 * y1 - x1 * y0
        area += cross
        cx += (x0 + x1) * cross
        cy += (y0 + y1) * cross
    area *= 0.5
    if area == 0:
        return first
    return cx / (6.0 * area), cy / (6.0 * area)


def bounding_box(polygon: Sequence[Point]) -> BoundingBox:
    if not polygon:
        raise ValueError("Cannot bound an empty polygon")
    xs = [p[0] for p in polygon]
    ys = [p[1] for p in polygon]
    return BoundingBox(float(min(xs)), float(min(ys)), float(max(xs)), float(max(ys)))
