"""Configuration helpers for zoom settings persistence."""
from __future__ import annotations

from configparser import ConfigParser, Error
from dataclasses import dataclass, field
import logging
from pathlib import Path
import sys
from typing import Optional

from pinch_zoom.tap_tracker import MAX_DOUBLE_TAP_DURATION_MS
from pinch_zoom.view_state import ScaleBounds

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "pinch_zoom.ini"
LOG_FILENAME = "pinch_zoom.log"
_SECTION = "zoom"
_MIN_KEY = "min_scale"
_MAX_KEY = "max_scale"
_DOUBLE_TAP_KEY = "double_tap_ms"


@dataclass(frozen=True)
class ZoomSettings:
    bounds: ScaleBounds = field(default_factory=ScaleBounds)
    double_tap_ms: float = MAX_DOUBLE_TAP_DURATION_MS


def _config_dir(main_script_path: Optional[Path]) -> Path:
    if getattr(sys, "frozen", False):
        return Path(sys.executable).parent
    if main_script_path is not None:
        return main_script_path.resolve().parent
    main_module = sys.modules.get("__main__")
    if main_module and getattr(main_module, "__file__", None):
        return Path(main_module.__file__).resolve().parent
    return Path.cwd()


def config_path(main_script_path: Optional[Path]) -> Path:
    return _config_dir(main_script_path) / CONFIG_FILENAME


def log_path_for(main_script_path: Optional[Path]) -> Path:
    return _config_dir(main_script_path) / LOG_FILENAME


def load_zoom_settings(main_script_path: Optional[Path]) -> ZoomSettings:
    ini_path = config_path(main_script_path)
    defaults = ZoomSettings()
    if not ini_path.exists():
        return defaults
    parser = ConfigParser()
    try:
        with ini_path.open("r", encoding="utf-8") as handle:
            parser.read_file(handle)
        min_scale = parser.getfloat(
            _SECTION, _MIN_KEY, fallback=defaults.bounds.min_scale
        )
        max_scale = parser.getfloat(
            _SECTION, _MAX_KEY, fallback=defaults.bounds.max_scale
        )
        double_tap_ms = parser.getfloat(
            _SECTION, _DOUBLE_TAP_KEY, fallback=defaults.double_tap_ms
        )
    except (OSError, Error, ValueError):
        logger.warning("Could not read zoom settings from %s", ini_path, exc_info=True)
        return defaults

    bounds = ScaleBounds(min_scale, max_scale)
    if not bounds.is_valid():
        logger.warning(
            "Ignoring invalid scale bounds in %s: min=%s max=%s",
            ini_path,
            min_scale,
            max_scale,
        )
        bounds = defaults.bounds
    if double_tap_ms < 0:
        logger.warning("Ignoring negative double tap window %s", double_tap_ms)
        double_tap_ms = defaults.double_tap_ms
    return ZoomSettings(bounds=bounds, double_tap_ms=double_tap_ms)


def save_zoom_settings(
    settings: ZoomSettings, main_script_path: Optional[Path]
) -> None:
    ini_path = config_path(main_script_path)
    parser = ConfigParser()
    if ini_path.exists():
        try:
            with ini_path.open("r", encoding="utf-8") as handle:
                parser.read_file(handle)
        except (OSError, Error):
            logger.warning("Not overwriting unreadable settings file %s", ini_path)
            return
    parser[_SECTION] = {
        _MIN_KEY: str(settings.bounds.min_scale),
        _MAX_KEY: str(settings.bounds.max_scale),
        _DOUBLE_TAP_KEY: str(settings.double_tap_ms),
    }
    try:
        with ini_path.open("w", encoding="utf-8") as handle:
            parser.write(handle)
    except OSError:
        logger.warning("Could not write zoom settings to %s", ini_path, exc_info=True)
