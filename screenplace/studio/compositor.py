"""Preview compositor — styled frame preview as a list of draw commands.

:func:`render` is pure: the same frame style, events and time always give
the same :class:`PreviewFrame`.  :func:`paint` replays those commands onto
a ``QPainter`` (preview widget, or a ``QImage`` via :func:`render_image`).

Layers, back to front::

    background  →  drop shadow  →  frame (rounded)  →  clip to frame
    →  placeholder desktop  →  click markers
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from PySide6.QtCore import QPointF, QRectF, Qt
from PySide6.QtGui import QBrush, QColor, QImage, QLinearGradient, QPainter, QPainterPath

from .models import (
    FrameStyle,
    GradientBackground,
    ImageBackground,
    RecordedEvents,
    SolidBackground,
    ZoomConfig,
)
from .utils import hex_to_rgb
from .zoom import Viewport, full_viewport, generate_segments, viewport_at

logger = logging.getLogger(__name__)

# ── Visual constants ────────────────────────────────────────────────

REFERENCE_WIDTH = 1920.0     # padding / radius / shadow are in these px

IMAGE_FALLBACK_COLOR = "#1a1a2e"   # image backgrounds preview as flat
FRAME_COLOR = "#1e1e2e"
DESKTOP_COLOR = "#2d2d44"
MENU_BAR_COLOR = "#1a1a2e"
WINDOW_COLOR = "#363650"

MENU_BAR_HEIGHT = 24.0
WINDOW_INSET_X = 40.0
WINDOW_INSET_Y = 50.0
WINDOW_WIDTH_FRAC = 0.6
WINDOW_HEIGHT_FRAC = 0.7
WINDOW_RADIUS = 8.0

MARKER_RADIUS = 4.0
MARKER_RGBA = (102, 126, 234, 0.6)

SHADOW_LAYERS = 8            # blur approximated by stacked rounded rects


# ── Draw commands ───────────────────────────────────────────────────


@dataclass(frozen=True)
class Rgba:
    r: int
    g: int
    b: int
    a: float = 1.0  # 0..1

    @staticmethod
    def from_hex(color: str, alpha: float = 1.0) -> "Rgba":
        r, g, b = hex_to_rgb(color)
        return Rgba(r, g, b, alpha)

    def to_qcolor(self) -> QColor:
        c = QColor(self.r, self.g, self.b)
        c.setAlphaF(self.a)
        return c


@dataclass(frozen=True)
class LinearGradientPaint:
    x1: float
    y1: float
    x2: float
    y2: float
    stops: Tuple[Tuple[float, Rgba], ...]


Paint = Union[Rgba, LinearGradientPaint]


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    def to_qrectf(self) -> QRectF:
        return QRectF(self.x, self.y, self.width, self.height)


@dataclass(frozen=True)
class FillRect:
    rect: Rect
    paint: Paint


@dataclass(frozen=True)
class FillRoundedRect:
    rect: Rect
    radius: float
    paint: Paint


@dataclass(frozen=True)
class PushClip:
    """Clip subsequent commands to a rounded rect until :class:`PopClip`."""
    rect: Rect
    radius: float


@dataclass(frozen=True)
class PopClip:
    pass


@dataclass(frozen=True)
class FillCircle:
    cx: float
    cy: float
    radius: float
    paint: Rgba


DrawCommand = Union[FillRect, FillRoundedRect, PushClip, PopClip, FillCircle]


@dataclass(frozen=True)
class PreviewFrame:
    width: int
    height: int
    frame_rect: Rect
    viewport: Optional[Viewport]
    markers: Tuple[Tuple[float, float], ...]
    commands: Tuple[DrawCommand, ...]


# ── Render (pure) ───────────────────────────────────────────────────


def canvas_size(frame_style: FrameStyle, canvas_width: int,
                canvas_height: Optional[int] = None) -> Tuple[int, int]:
    """Canvas size; the height follows the aspect ratio unless given."""
    if canvas_height is None:
        canvas_height = int(round(canvas_width / frame_style.aspect_ratio.ratio))
    return int(canvas_width), int(canvas_height)


def background_paint(background, w: float, h: float) -> Paint:
    """Fill for the whole canvas.

    Gradients run along *angle* (degrees) through the canvas centre, the
    endpoints at ``centre ∓ (cos·w/2, sin·h/2)``.
    """
    if isinstance(background, GradientBackground):
        rad = math.radians(background.angle)
        dx = math.cos(rad) * w / 2
        dy = math.sin(rad) * h / 2
        n = len(background.colors)
        stops = tuple(
            (i / max(1, n - 1), Rgba.from_hex(c)) for i, c in enumerate(background.colors)
        )
        return LinearGradientPaint(w / 2 - dx, h / 2 - dy, w / 2 + dx, h / 2 + dy, stops)
    if isinstance(background, SolidBackground):
        return Rgba.from_hex(background.color)
    if isinstance(background, ImageBackground):
        return Rgba.from_hex(IMAGE_FALLBACK_COLOR)
    raise TypeError(f"unknown background variant: {background!r}")


def _shadow_commands(frame: Rect, radius: float, frame_style: FrameStyle,
                     scale: float) -> List[DrawCommand]:
    shadow = frame_style.shadow
    if shadow.opacity <= 0:
        return []
    ox = shadow.offset_x * scale
    oy = shadow.offset_y * scale
    blur = shadow.blur * scale
    if blur <= 0:
        rect = Rect(frame.x + ox, frame.y + oy, frame.width, frame.height)
        return [FillRoundedRect(rect, radius, Rgba.from_hex(shadow.color, shadow.opacity))]

    # Widest and faintest first; the layers add up to ~opacity at the core.
    alpha = shadow.opacity / SHADOW_LAYERS
    cmds: List[DrawCommand] = []
    for i in range(SHADOW_LAYERS):
        spread = blur / 2 * (SHADOW_LAYERS - i) / SHADOW_LAYERS
        rect = Rect(
            frame.x + ox - spread,
            frame.y + oy - spread,
            frame.width + 2 * spread,
            frame.height + 2 * spread,
        )
        cmds.append(FillRoundedRect(rect, radius + spread, Rgba.from_hex(shadow.color, alpha)))
    return cmds


def _desktop_commands(frame: Rect, scale: float) -> List[DrawCommand]:
    menu = Rect(frame.x, frame.y, frame.width, MENU_BAR_HEIGHT * scale)
    window = Rect(
        frame.x + WINDOW_INSET_X * scale,
        frame.y + WINDOW_INSET_Y * scale,
        frame.width * WINDOW_WIDTH_FRAC,
        frame.height * WINDOW_HEIGHT_FRAC,
    )
    return [
        FillRect(frame, Rgba.from_hex(DESKTOP_COLOR)),
        FillRect(menu, Rgba.from_hex(MENU_BAR_COLOR)),
        FillRoundedRect(window, WINDOW_RADIUS * scale, Rgba.from_hex(WINDOW_COLOR)),
    ]


def click_marker_positions(
    events: Optional[RecordedEvents],
    frame: Rect,
    viewport: Optional[Viewport],
) -> Tuple[Tuple[float, float], ...]:
    """Frame-space centre of every click, in timestamp order."""
    if events is None or viewport is None:
        return ()
    out = []
    for click in events.click_events():
        mx, my = viewport.map_point(click.x, click.y, frame.width, frame.height)
        out.append((frame.x + mx, frame.y + my))
    return tuple(out)


def render(
    frame_style: FrameStyle,
    events: Optional[RecordedEvents],
    current_time_ms: int,
    canvas_width: int = 1920,
    canvas_height: Optional[int] = None,
    zoom_config: Optional[ZoomConfig] = None,
) -> PreviewFrame:
    """Describe the preview at *current_time_ms* as draw commands."""
    w, h = canvas_size(frame_style, canvas_width, canvas_height)
    scale = w / REFERENCE_WIDTH

    pad = frame_style.padding * scale
    frame = Rect(pad, pad, max(w - 2 * pad, 0.0), max(h - 2 * pad, 0.0))
    radius = frame_style.corner_radius * scale

    cmds: List[DrawCommand] = [FillRect(Rect(0, 0, w, h), background_paint(frame_style.background, w, h))]
    cmds += _shadow_commands(frame, radius, frame_style, scale)
    cmds.append(FillRoundedRect(frame, radius, Rgba.from_hex(FRAME_COLOR)))
    cmds.append(PushClip(frame, radius))
    cmds += _desktop_commands(frame, scale)

    viewport = None
    if events is not None and events.display_width > 0 and events.display_height > 0:
        if zoom_config is not None and zoom_config.enabled:
            segments = generate_segments(events.click_events(), zoom_config)
            viewport = viewport_at(
                current_time_ms, segments, events.display_width, events.display_height
            )
        else:
            viewport = full_viewport(events.display_width, events.display_height)
    elif events is not None:
        logger.debug("Events carry no display size; click markers skipped")

    markers = click_marker_positions(events, frame, viewport)
    marker_color = Rgba(*MARKER_RGBA)
    for mx, my in markers:
        cmds.append(FillCircle(mx, my, MARKER_RADIUS * scale, marker_color))
    cmds.append(PopClip())

    return PreviewFrame(w, h, frame, viewport, markers, tuple(cmds))


# ── Paint (QPainter replay) ─────────────────────────────────────────


def _qbrush(paint: Paint) -> QBrush:
    if isinstance(paint, Rgba):
        return QBrush(paint.to_qcolor())
    if isinstance(paint, LinearGradientPaint):
        grad = QLinearGradient(paint.x1, paint.y1, paint.x2, paint.y2)
        for pos, color in paint.stops:
            grad.setColorAt(pos, color.to_qcolor())
        return QBrush(grad)
    raise TypeError(f"unknown paint: {paint!r}")


def _rounded_path(rect: Rect, radius: float) -> QPainterPath:
    path = QPainterPath()
    path.addRoundedRect(rect.to_qrectf(), radius, radius)
    return path


def paint(painter: QPainter, frame: PreviewFrame) -> None:
    """Replay *frame* onto *painter*.  Leaves the painter state as found."""
    painter.save()
    painter.setPen(Qt.PenStyle.NoPen)
    clips = 0
    for cmd in frame.commands:
        if isinstance(cmd, FillRect):
            painter.fillRect(cmd.rect.to_qrectf(), _qbrush(cmd.paint))
        elif isinstance(cmd, FillRoundedRect):
            painter.fillPath(_rounded_path(cmd.rect, cmd.radius), _qbrush(cmd.paint))
        elif isinstance(cmd, PushClip):
            painter.save()
            painter.setClipPath(_rounded_path(cmd.rect, cmd.radius))
            clips += 1
        elif isinstance(cmd, PopClip):
            if clips:
                painter.restore()
                clips -= 1
        elif isinstance(cmd, FillCircle):
            painter.setBrush(cmd.paint.to_qcolor())
            painter.drawEllipse(QPointF(cmd.cx, cmd.cy), cmd.radius, cmd.radius)
        else:
            raise TypeError(f"unknown draw command: {cmd!r}")
    for _ in range(clips):
        painter.restore()
    painter.restore()


def render_image(
    frame_style: FrameStyle,
    events: Optional[RecordedEvents],
    current_time_ms: int,
    canvas_width: int = 1920,
    canvas_height: Optional[int] = None,
    zoom_config: Optional[ZoomConfig] = None,
) -> QImage:
    """Render and paint into a new ARGB image."""
    frame = render(frame_style, events, current_time_ms, canvas_width, canvas_height, zoom_config)
    image = QImage(frame.width, frame.height, QImage.Format.Format_ARGB32_Premultiplied)
    image.fill(Qt.GlobalColor.transparent)
    painter = QPainter(image)
    try:
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        paint(painter, frame)
    finally:
        painter.end()
    return image
