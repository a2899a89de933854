"""Focus-region extraction for marketing screenshots.

This module glues the vision helpers together: it finds the marker border in a
decoded screenshot, wraps it in a convex hull, cuts the region out and reports
where its centroid sits. Results are memoized per configuration so repeated
renders of the same screenshot are free.

A failed extraction is never fatal: callers get ``None`` and fall back to the
raw screenshot without a focus overlay.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Tuple

from core.extraction_cache import ExtractionCache
from vision import convex_hull, mask_compositor, pixel_classifier, polygon
from vision.color import RGB
from vision.errors import DegenerateHull, FocusExtractionError, NoMarkerDetected, UnsupportedPixelFormat
from vision.raster import RasterImage

logger = logging.getLogger(__name__)

DEFAULT_TOLERANCE = 0.08
DEFAULT_ZOOM_SCALE = 1.18
MIN_MARKER_PIXELS = 12
BASELINE_LOCALE = "baseline"

Point = Tuple[float, float]


@dataclass(frozen=True)
class ExtractionConfiguration:
    subject_identifier: str
    target_color: RGB
    localization_identifier: Optional[str] = None
    tolerance: float = DEFAULT_TOLERANCE
    zoom_scale: float = DEFAULT_ZOOM_SCALE

    def __post_init__(self) -> None:
        if not isinstance(self.target_color, RGB):
            object.__setattr__(self, "target_color", RGB.from_value(self.target_color))
        object.__setattr__(self, "tolerance", float(self.tolerance))
        if not 0.0 <= self.tolerance <= 1.0:
            raise ValueError(f"tolerance must be within 0..1, got {self.tolerance!r}")
        if self.zoom_scale <= 0:
            raise ValueError(f"zoom_scale must be positive, got {self.zoom_scale!r}")

    @property
    def cache_key(self) -> str:
        # zoom_scale is a display-time hint and deliberately not part of the key.
        locale = self.localization_identifier or BASELINE_LOCALE
        return f"{self.subject_identifier}-{locale}-{self.target_color.describe()}-{self.tolerance!r}"


@dataclass(frozen=True)
class ExtractionResult:
    overlay_image: RasterImage
    mask_polygon: Tuple[Point, ...]
    normalized_centroid: Point
    bounding_box: polygon.BoundingBox = field(init=False, compare=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "bounding_box", polygon.bounding_box(self.mask_polygon))


class FocusExtractor:
    """Turn marker-annotated screenshots into focus overlays."""

    def __init__(self, cache: Optional[ExtractionCache[ExtractionResult]] = None) -> None:
        self.cache: ExtractionCache[ExtractionResult] = cache if cache is not None else ExtractionCache()

    def extract(
        self,
        configuration: ExtractionConfiguration,
        image: RasterImage,
    ) -> Optional[ExtractionResult]:
        key = configuration.cache_key
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("Focus cache hit for %s", key)
            return cached

        try:
            result = self._compute(configuration, image)
        except FocusExtractionError as exc:
            logger.info(
                "No focus overlay for %s (%s): %s",
                configuration.subject_identifier,
                type(exc).__name__,
                exc,
            )
            return None

        self.cache.put(key, result)
        return result

    def _compute(self, configuration: ExtractionConfiguration, image: RasterImage) -> ExtractionResult:
        if image.bytes_per_pixel < 4:
            raise UnsupportedPixelFormat(
                f"Expected at least 4 bytes per pixel, got {image.bytes_per_pixel}"
            )

        points = pixel_classifier.classify(image, configuration.target_color, configuration.tolerance)
        if len(points) <= MIN_MARKER_PIXELS:
            raise NoMarkerDetected(f"Only {len(points)} pixels matched the marker color")

        vertices = convex_hull.hull(points)
        if len(vertices) < 3:
            raise DegenerateHull(f"Hull collapsed to {len(vertices)} vertices")

        overlay = mask_compositor.mask(image, vertices)

        cx, cy = polygon.centroid(vertices)
        normalized = (cx / image.width, cy / image.height)
        return ExtractionResult(
            overlay_image=overlay,
            mask_polygon=tuple((float(x), float(y)) for x, y in vertices),
            normalized_centroid=normalized,
        )
