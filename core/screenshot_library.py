"""Locate and decode captured screenshots for focus extraction.

Assumptions:
    - Screenshots are PNG or JPEG files named after the screen they show, with
      an optional locale suffix (``Home-de.png`` or ``Home_de.png``).
    - Extra search directories may be listed in ``FRAMED_SCREENSHOTS_ASSET_PATHS``
      separated by ``:``.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Mapping, Optional, Sequence

from PIL import Image

from vision.raster import RasterImage

logger = logging.getLogger(__name__)

SEARCH_PATHS_ENV = "FRAMED_SCREENSHOTS_ASSET_PATHS"
IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg")


@dataclass(frozen=True)
class ScreenshotAsset:
    name: str
    path: Optional[Path]
    image: Optional[RasterImage]

    @property
    def is_placeholder(self) -> bool:
        return self.image is None


def resolve_search_paths(
    additional: Iterable[Path] = (),
    *,
    environ: Optional[Mapping[str, str]] = None,
    cwd: Optional[Path] = None,
) -> List[Path]:
    env = os.environ if environ is None else environ
    root = Path.cwd() if cwd is None else cwd

    candidates: List[Path] = []
    raw = env.get(SEARCH_PATHS_ENV, "")
    candidates.extend(Path(part).expanduser() for part in raw.split(":") if part)
    candidates.append(root / "Screenshots")
    candidates.append(root / "UITestScreenshots")
    candidates.append(root)
    candidates.extend(Path(p).expanduser() for p in additional)

    seen = set()
    paths: List[Path] = []
    for candidate in candidates:
        if candidate in seen:
            continue
        seen.add(candidate)
        if candidate.is_dir():
            paths.append(candidate)
    return paths


def filename_candidates(name: str, localization_identifier: Optional[str] = None) -> List[str]:
    candidates: List[str] = []
    if localization_identifier:
        candidates.append(f"{name}-{localization_identifier}.png")
        candidates.append(f"{name}_{localization_identifier}.png")
    candidates.extend(f"{name}{ext}" for ext in IMAGE_EXTENSIONS)
    return candidates


def load_raster(path: Path) -> RasterImage:
    with Image.open(path) as image:
        return RasterImage.from_pil(image)


def find_screenshot(
    name: str,
    localization_identifier: Optional[str],
    search_paths: Sequence[Path],
) -> ScreenshotAsset:
    """Return the first readable screenshot or a placeholder asset."""
    for directory in search_paths:
        for candidate in filename_candidates(name, localization_identifier):
            path = directory / candidate
            if not path.is_file():
                continue
            try:
                return ScreenshotAsset(name=name, path=path, image=load_raster(path))
            except OSError as exc:
                logger.warning("Skipping unreadable screenshot %s: %s", path, exc)

    logger.info("Screenshot %s (%s) not found in %d paths", name, localization_identifier, len(search_paths))
    return ScreenshotAsset(name=name, path=None, image=None)
