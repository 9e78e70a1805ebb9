"""Entry point for the pinch-zoom image viewer."""

import argparse
import logging
import os
from pathlib import Path
import sys

from PyQt5 import QtWidgets

from pinch_zoom.config import ZoomSettings, load_zoom_settings, log_path_for
from pinch_zoom.ui.zoom_image_widget import ZoomImageWidget
from pinch_zoom.view_state import ScaleBounds

logger = logging.getLogger(__name__)

_LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Pinch-zoom image viewer")
    parser.add_argument("image", type=Path, help="Image file to display")

    zoom = parser.add_argument_group("zoom")
    zoom.add_argument(
        "--min-scale", type=float, help="Smallest zoom multiplier (overrides the ini)"
    )
    zoom.add_argument(
        "--max-scale", type=float, help="Largest zoom multiplier (overrides the ini)"
    )

    logs = parser.add_argument_group("logging")
    level = logs.add_mutually_exclusive_group()
    level.add_argument(
        "--log-level",
        default=os.getenv("PINCH_ZOOM_LOG_LEVEL", "INFO"),
        help="Level name, default from PINCH_ZOOM_LOG_LEVEL or INFO",
    )
    level.add_argument(
        "--debug",
        dest="log_level",
        action="store_const",
        const="DEBUG",
        help="Log gesture transitions and content location",
    )
    logs.add_argument(
        "--log-file",
        type=Path,
        default=os.getenv("PINCH_ZOOM_LOG_PATH"),
        help="Log file, default pinch_zoom.log beside pinch_zoom.ini",
    )
    return parser.parse_args(argv)


def resolve_scale_bounds(
    settings: ZoomSettings, min_scale: float | None, max_scale: float | None
) -> ScaleBounds:
    """Merge command line overrides into the stored bounds."""
    return ScaleBounds(
        settings.bounds.min_scale if min_scale is None else min_scale,
        settings.bounds.max_scale if max_scale is None else max_scale,
    )


def configure_logging(
    level_name: str, log_path: Path | None, main_script_path: Path | None
) -> Path:
    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        level = logging.INFO
    path = Path(log_path) if log_path else log_path_for(main_script_path)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(max(level, logging.INFO))
    logging.basicConfig(
        level=level,
        format=_LOG_FORMAT,
        handlers=[logging.FileHandler(path, mode="a", encoding="utf-8"), console],
    )
    return path


def main() -> None:
    args = parse_args()
    script_path = Path(sys.argv[0])
    log_path = configure_logging(args.log_level, args.log_file, script_path)
    logger.info("Viewer starting at %s, logging to %s", args.log_level.upper(), log_path)

    settings = load_zoom_settings(script_path)
    app = QtWidgets.QApplication(sys.argv)
    widget = ZoomImageWidget(
        bounds=settings.bounds, double_tap_ms=settings.double_tap_ms
    )
    if args.min_scale is not None or args.max_scale is not None:
        bounds = resolve_scale_bounds(settings, args.min_scale, args.max_scale)
        widget.set_zoom_scale(bounds.min_scale, bounds.max_scale)
    if not widget.set_image_path(args.image):
        logger.error("Cannot display %s", args.image)
        sys.exit(1)

    widget.setWindowTitle(f"{args.image.name} - Pinch Zoom")
    widget.resize(960, 720)
    widget.show()

    def cleanup() -> None:
        try:
            widget.close()
        except Exception:  # pragma: no cover - best effort
            logger.exception("Unexpected error while closing window")

    app.aboutToQuit.connect(cleanup)
    sys.exit(app.exec_())


if __name__ == "__main__":
    main()
