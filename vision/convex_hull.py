"""Convex hull of marker pixels (Andrew's monotone chain)."""

from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple, Union

import numpy as np

Point = Tuple[float, float]
PointsLike = Union[np.ndarray, Iterable[Sequence[float]]]


def _cross(o: Point, a: Point, b: Point) -> float:
    return (a[0] - o[0]) * (b[1] - o[1]) - (a[1] - o[1]) * (b[0] - o[0])


def _sorted_distinct(points: PointsLike) -> np.ndarray:
    arr = np.asarray(points if isinstance(points, np.ndarray) else list(points))
    if arr.size == 0:
        return arr.reshape(0, 2)
    # np.unique on rows sorts lexicographically: by x, then y.
    return np.unique(arr.reshape(-1, 2), axis=0)


def _column_extremes(points: np.ndarray) -> np.ndarray:
    """Keep only the lowest and highest y of each x; the hull is unchanged."""
    xs = points[:, 0]
    starts = np.flatnonzero(np.r_[True, xs[1:] != xs[:-1]])
    ends = np.r_[starts[1:] - 1, len(xs) - 1]
    return points[np.unique(np.r_[starts, ends])]


def _chain(points: Iterable[Point]) -> List[Point]:
    chain: List[Point] = []
    for point in points:
        while len(chain) >= 2 and _cross(chain[-2], chain[-1], point) <= 0:
            chain.pop()
        chain.append(point)
    return chain


def hull(points: PointsLike) -> List[Point]:
    """Return hull vertices counter-clockwise (in y-up terms), without repeating the first.

    Collinear boundary points are dropped. Fewer than three distinct points are
    returned sorted and as-is; callers decide whether that is usable.
    """
    ordered = _sorted_distinct(points)
    if len(ordered) < 3:
        return [tuple(p) for p in ordered.tolist()]

    candidates = [tuple(p) for p in _column_extremes(ordered).tolist()]
    lower = _chain(candidates)
    upper = _chain(reversed(candidates))
    return lower[:-1] + upper[:-1]
