"""Batch focus extraction over a list of screenshots."""

from __future__ import annotations

import csv
import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from core import config_loader, screenshot_library
from core.focus_extractor import FocusExtractor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FocusRecord:
    screenshot: str
    locale: Optional[str]
    status: str
    timestamp: str
    details: Dict[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "screenshot": self.screenshot,
            "locale": self.locale,
            "status": self.status,
            "timestamp": self.timestamp,
            "details": self.details,
        }


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _read_csv(path: Path) -> List[Tuple[str, Optional[str]]]:
    if not path.exists():
        raise FileNotFoundError(f"Input CSV not found: {path}")
    rows: List[Tuple[str, Optional[str]]] = []
    with path.open("r", encoding="utf-8", newline="") as fh:
        reader = csv.DictReader(fh)
        if not reader.fieldnames or "screenshot" not in reader.fieldnames:
            raise ValueError("CSV must contain a 'screenshot' column")
        for row in reader:
            name = (row.get("screenshot") or "").strip()
            locale = (row.get("locale") or "").strip() or None
            if name:
                rows.append((name, locale))
    return rows


def _session_log_path(config: Mapping[str, Any]) -> Path:
    logs_dir = Path(config.get("paths", {}).get("logs_dir", "logs"))
    date_str = datetime.now().strftime("%Y-%m-%d")
    return logs_dir / f"focus-{date_str}.json"


def _load_existing_log(path: Path) -> List[Mapping[str, Any]]:
    if not path.exists():
        return []
    with path.open("r", encoding="utf-8") as fh:
        try:
            data = json.load(fh)
        except json.JSONDecodeError:
            return []
    if isinstance(data, list):
        return data
    return []


def _append_log(path: Path, record: FocusRecord) -> None:
    history = _load_existing_log(path)
    history.append(record.to_dict())
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as fh:
        json.dump(history, fh, indent=2)


def _search_paths(config: Mapping[str, Any]) -> List[Path]:
    extra = [Path(p) for p in config.get("paths", {}).get("screenshot_dirs", [])]
    return screenshot_library.resolve_search_paths(extra)


def process_screenshot(
    name: str,
    locale: Optional[str],
    config: Mapping[str, Any],
    extractor: FocusExtractor,
    search_paths: List[Path],
) -> FocusRecord:
    """Extract the focus region of one screenshot; failures become records, not errors."""
    asset = screenshot_library.find_screenshot(name, locale, search_paths)
    if asset.is_placeholder:
        return FocusRecord(
            screenshot=name,
            locale=locale,
            status="missing",
            timestamp=_now_iso(),
            details={"message": "Screenshot not found in search paths"},
        )

    configuration = config_loader.build_configuration(config, name, locale)
    result = extractor.extract(configuration, asset.image)
    if result is None:
        return FocusRecord(
            screenshot=name,
            locale=locale,
            status="no_overlay",
            timestamp=_now_iso(),
            details={"path": str(asset.path)},
        )

    box = result.bounding_box
    return FocusRecord(
        screenshot=name,
        locale=locale,
        status="focused",
        timestamp=_now_iso(),
        details={
            "path": str(asset.path),
            "centroid": list(result.normalized_centroid),
            "bounding_box": [box.min_x, box.min_y, box.max_x, box.max_y],
            "vertices": len(result.mask_polygon),
            "zoom_scale": configuration.zoom_scale,
        },
    )


def run_batch(
    csv_path: Path,
    config: Mapping[str, Any],
    *,
    extractor: Optional[FocusExtractor] = None,
) -> Iterable[FocusRecord]:
    rows = _read_csv(csv_path)
    extractor = extractor or FocusExtractor()
    search_paths = _search_paths(config)
    log_path = _session_log_path(config)

    for name, locale in rows:
        record = process_screenshot(name, locale, config, extractor, search_paths)
        logger.info("%s [%s]: %s", name, locale or "baseline", record.status)
        yield record
        _append_log(log_path, record)
