"""ScreenPlace — editor coordination layer for a click-zoom screen recorder.

Command line::

    python main.py render project.json [--events events.json] [--time MS]
                          [--width PX] [--background NAME] [--no-zoom]
                          -o preview.png
    python main.py backgrounds
    python main.py version

``--width`` defaults to the ``previewWidth`` setting.
"""

import argparse
import json
import logging
import os
import sys
from dataclasses import replace
from typing import Optional

from studio.backgrounds import CATEGORIES, CATEGORY_LABELS, PRESETS, find_preset, preset_for
from studio.compositor import render_image
from studio.models import Project, RecordedEvents
from studio.settings import StudioSettings, load_settings
from studio.version import __version__

logging.basicConfig(
    level=logging.INFO,
    format="%(name)s | %(levelname)s | %(message)s",
)

_logger = logging.getLogger(__name__)


def _global_exception_handler(exc_type, exc_value, exc_tb):
    """Log unhandled exceptions instead of crashing silently."""
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc_value, exc_tb)
        return
    _logger.critical("Unhandled exception", exc_info=(exc_type, exc_value, exc_tb))


def _read_json(path: str) -> dict:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def _cmd_render(args: argparse.Namespace) -> int:
    # Headless by default; a real display is not needed to paint a QImage.
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    from PySide6.QtGui import QGuiApplication

    app = QGuiApplication.instance() or QGuiApplication(sys.argv[:1])
    app.setApplicationName("ScreenPlace")
    app.setApplicationVersion(__version__)

    project = Project.from_dict(_read_json(args.project))
    events = RecordedEvents.from_dict(_read_json(args.events)) if args.events else None
    zoom = None if args.no_zoom else project.zoom_config

    frame_style = project.frame_style
    if args.background:
        preset = find_preset(args.background)
        if preset is None:
            _logger.error("Unknown background preset %r (see 'backgrounds')", args.background)
            return 2
        frame_style = replace(frame_style, background=preset.background)
    preset = preset_for(frame_style.background)
    _logger.info("Background: %s", preset.name if preset else "custom")

    image = render_image(frame_style, events, args.time, args.width, zoom_config=zoom)
    if not image.save(args.output):
        _logger.error("Could not write %s", args.output)
        return 1
    _logger.info("Preview %dx%d written to %s", image.width(), image.height(), args.output)
    return 0


def _cmd_backgrounds(_args: argparse.Namespace) -> int:
    for category in CATEGORIES:
        print(f"{CATEGORY_LABELS[category]}:")
        for preset in PRESETS:
            if preset.category == category:
                print(f"  {preset.name}")
    return 0


def build_parser(settings: Optional[StudioSettings] = None) -> argparse.ArgumentParser:
    settings = settings or StudioSettings()
    parser = argparse.ArgumentParser(prog="screenplace", description=__doc__.splitlines()[0])
    sub = parser.add_subparsers(dest="command")

    p_render = sub.add_parser("render", help="paint a preview frame to an image file")
    p_render.add_argument("project", help="project JSON file")
    p_render.add_argument("--events", help="recorded events JSON file")
    p_render.add_argument("--time", type=int, default=0, help="playhead position (ms)")
    p_render.add_argument("--width", type=int, default=settings.preview_width,
                          help="canvas width (px)")
    p_render.add_argument("--background", help="background preset name, replaces the project's")
    p_render.add_argument("--no-zoom", action="store_true", help="ignore the zoom config")
    p_render.add_argument("-o", "--output", required=True, help="output image (.png)")
    p_render.set_defaults(func=_cmd_render)

    p_bg = sub.add_parser("backgrounds", help="list the background presets")
    p_bg.set_defaults(func=_cmd_backgrounds)

    p_version = sub.add_parser("version", help="print the version")
    p_version.set_defaults(func=lambda _args: print(__version__) or 0)
    return parser


def main(argv=None, settings: Optional[StudioSettings] = None) -> int:
    """Entry point — parses the command line and dispatches."""
    sys.excepthook = _global_exception_handler
    parser = build_parser(settings if settings is not None else load_settings())
    args = parser.parse_args(argv)
    if not getattr(args, "func", None):
        parser.print_help()
        return 2
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
