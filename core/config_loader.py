"""Utilities for loading focus extraction runtime configuration.

The default configuration file lives in ``config/config.yaml`` relative to the
working directory. Callers can pass an alternate path when they want to
override the defaults (e.g., for testing or per-project marker colors).
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, List, Mapping, MutableMapping, Optional

import yaml

from core.focus_extractor import DEFAULT_TOLERANCE, DEFAULT_ZOOM_SCALE, ExtractionConfiguration
from vision.color import RGB

DEFAULT_MARKER_COLOR = "#ff00ff"


def _resolve_paths(config_file: Path, raw_config: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
    root = Path.cwd()
    logging_cfg = raw_config.get("logging", {})
    screenshot_dirs = raw_config.get("paths", {}).get("screenshots", []) or []

    logs_dir = (root / logging_cfg.get("directory", "logs")).resolve()
    screenshots: List[Path] = [(root / Path(entry).expanduser()).resolve() for entry in screenshot_dirs]

    return {
        "root": root,
        "config_file": config_file,
        "logs_dir": logs_dir,
        "screenshot_dirs": screenshots,
    }


def _ensure_directories(paths: Mapping[str, Any], raw_config: MutableMapping[str, Any]) -> None:
    logging_cfg = raw_config.setdefault("logging", {})
    if logging_cfg.get("ensure_exists", True):
        paths["logs_dir"].mkdir(parents=True, exist_ok=True)


def load_config(path: Optional[str] = None) -> MutableMapping[str, Any]:
    """Load configuration data from disk.

    Parameters
    ----------
    path:
        Optional override relative or absolute path to a YAML config file.

    Returns
    -------
    MutableMapping[str, Any]
        Dict-like object with configuration values.
    """

    config_file = (Path(path).expanduser() if path else Path.cwd() / "config" / "config.yaml").resolve()
    if not config_file.exists():
        raise FileNotFoundError(f"Config file not found: {config_file}")

    with config_file.open("r", encoding="utf-8") as fh:
        raw_config: MutableMapping[str, Any] = yaml.safe_load(fh) or {}

    paths = _resolve_paths(config_file, raw_config)
    _ensure_directories(paths, raw_config)
    raw_config.setdefault("paths", {})
    raw_config["paths"].update(
        {
            "root": str(paths["root"]),
            "config_file": str(paths["config_file"]),
            "logs_dir": str(paths["logs_dir"]),
            "screenshot_dirs": [str(p) for p in paths["screenshot_dirs"]],
        }
    )

    return raw_config


def configure_logging(config: Mapping[str, Any]) -> None:
    level_name = str(config.get("logging", {}).get("level", "INFO")).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        raise ValueError(f"Unknown logging level: {level_name}")
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_configuration(
    config: Mapping[str, Any],
    subject: str,
    locale: Optional[str] = None,
) -> ExtractionConfiguration:
    extraction_cfg = config.get("extraction", {})
    return ExtractionConfiguration(
        subject_identifier=subject,
        localization_identifier=locale or None,
        target_color=RGB.from_value(extraction_cfg.get("marker_color", DEFAULT_MARKER_COLOR)),
        tolerance=float(extraction_cfg.get("tolerance", DEFAULT_TOLERANCE)),
        zoom_scale=float(extraction_cfg.get("zoom_scale", DEFAULT_ZOOM_SCALE)),
    )
