"""Core data models for Screen Place.

Defines the value types exchanged with the recording engine: projects and
their editing configuration (zoom, cursor, frame style, export), recorded
input events and display descriptions.  All models are frozen dataclasses;
editing produces new values via :func:`dataclasses.replace`.

Every model supports JSON-compatible serialization via ``to_dict()`` /
``from_dict()`` using the engine's wire format: snake_case keys, variants
tagged by an outer key (``{"Solid": {"color": "#fff"}}``).
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple, Union


# ── Ranges & defaults ───────────────────────────────────────────────

MIN_ZOOM_LEVEL = 1.5
MAX_ZOOM_LEVEL = 3.0
DEFAULT_ZOOM_LEVEL = 2.0

DEFAULT_ZOOM_IN_MS = 300
DEFAULT_HOLD_MS = 500
DEFAULT_ZOOM_OUT_MS = 300

DEFAULT_PADDING = 64
MAX_PADDING = 200
DEFAULT_CORNER_RADIUS = 12
MAX_CORNER_RADIUS = 40

MIN_QUALITY = 0.3
MAX_QUALITY = 1.0

_HEX_RE = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


def is_hex_color(value: str) -> bool:
    """True for ``#rgb`` or ``#rrggbb`` strings."""
    return isinstance(value, str) and bool(_HEX_RE.match(value))


def _require_hex(name: str, value: str) -> None:
    if not is_hex_color(value):
        raise ValueError(f"{name} must be a hex colour like '#1a2b3c', got {value!r}")


# ── Enumerations ────────────────────────────────────────────────────


class Easing(str, Enum):
    LINEAR = "Linear"
    EASE_IN = "EaseIn"
    EASE_OUT = "EaseOut"
    EASE_IN_OUT = "EaseInOut"


class AspectRatio(str, Enum):
    AUTO = "Auto"
    RATIO_16X9 = "Ratio16x9"
    RATIO_9X16 = "Ratio9x16"
    RATIO_1X1 = "Ratio1x1"

    @property
    def ratio(self) -> float:
        """Width / height.  ``Auto`` previews as 16:9."""
        if self is AspectRatio.RATIO_9X16:
            return 9.0 / 16.0
        if self is AspectRatio.RATIO_1X1:
            return 1.0
        return 16.0 / 9.0


class ExportFormat(str, Enum):
    MP4 = "Mp4"
    GIF = "Gif"

    @property
    def extension(self) -> str:
        return "gif" if self is ExportFormat.GIF else "mp4"


class EventType(str, Enum):
    CLICK = "Click"
    MOVE = "Move"
    SCROLL = "Scroll"


class MouseButton(str, Enum):
    LEFT = "Left"
    RIGHT = "Right"
    MIDDLE = "Middle"
    OTHER = "Other"


# ── Displays ────────────────────────────────────────────────────────


@dataclass(frozen=True)
class DisplayInfo:
    """A capturable display.  Identity is ``id``."""
    id: int
    name: str
    width: int
    height: int
    is_primary: bool = False

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "width": self.width,
            "height": self.height,
            "is_primary": self.is_primary,
        }

    @staticmethod
    def from_dict(d: dict) -> "DisplayInfo":
        return DisplayInfo(
            id=int(d["id"]),
            name=d.get("name", ""),
            width=int(d["width"]),
            height=int(d["height"]),
            is_primary=bool(d.get("is_primary", False)),
        )


@dataclass(frozen=True)
class RecordingStatus:
    """Engine-side snapshot of the capture session."""
    is_recording: bool = False
    is_paused: bool = False
    duration_ms: int = 0
    project_id: str | None = None

    def to_dict(self) -> dict:
        return {
            "is_recording": self.is_recording,
            "is_paused": self.is_paused,
            "duration_ms": self.duration_ms,
            "project_id": self.project_id,
        }

    @staticmethod
    def from_dict(d: dict) -> "RecordingStatus":
        return RecordingStatus(
            is_recording=bool(d.get("is_recording", False)),
            is_paused=bool(d.get("is_paused", False)),
            duration_ms=int(d.get("duration_ms", 0)),
            project_id=d.get("project_id"),
        )


# ── Zoom & cursor ───────────────────────────────────────────────────


@dataclass(frozen=True)
class ZoomConfig:
    """Click-triggered zoom behaviour: zoom in, hold, zoom out."""
    enabled: bool = True
    zoom_level: float = DEFAULT_ZOOM_LEVEL
    zoom_in_duration_ms: int = DEFAULT_ZOOM_IN_MS
    hold_duration_ms: int = DEFAULT_HOLD_MS
    zoom_out_duration_ms: int = DEFAULT_ZOOM_OUT_MS
    easing: Easing = Easing.EASE_IN_OUT

    def __post_init__(self) -> None:
        if not MIN_ZOOM_LEVEL <= self.zoom_level <= MAX_ZOOM_LEVEL:
            raise ValueError(
                f"zoom_level must be within [{MIN_ZOOM_LEVEL}, {MAX_ZOOM_LEVEL}], "
                f"got {self.zoom_level}"
            )
        for name in ("zoom_in_duration_ms", "hold_duration_ms", "zoom_out_duration_ms"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be > 0")
        object.__setattr__(self, "easing", Easing(self.easing))

    @property
    def total_duration_ms(self) -> int:
        return self.zoom_in_duration_ms + self.hold_duration_ms + self.zoom_out_duration_ms

    def to_dict(self) -> dict:
        return {
            "enabled": self.enabled,
            "zoom_level": self.zoom_level,
            "zoom_in_duration_ms": self.zoom_in_duration_ms,
            "hold_duration_ms": self.hold_duration_ms,
            "zoom_out_duration_ms": self.zoom_out_duration_ms,
            "easing": self.easing.value,
        }

    @staticmethod
    def from_dict(d: dict) -> "ZoomConfig":
        return ZoomConfig(
            enabled=bool(d["enabled"]),
            zoom_level=float(d["zoom_level"]),
            zoom_in_duration_ms=int(d["zoom_in_duration_ms"]),
            hold_duration_ms=int(d["hold_duration_ms"]),
            zoom_out_duration_ms=int(d["zoom_out_duration_ms"]),
            easing=Easing(d["easing"]),
        )


@dataclass(frozen=True)
class CursorConfig:
    """Cursor rendering options applied by the engine at export time."""
    smoothing: float = 0.5
    auto_hide_after_ms: int = 3000
    highlight_clicks: bool = True
    highlight_color: str = "#FFD700"
    highlight_radius: int = 30

    def to_dict(self) -> dict:
        return {
            "smoothing": self.smoothing,
            "auto_hide_after_ms": self.auto_hide_after_ms,
            "highlight_clicks": self.highlight_clicks,
            "highlight_color": self.highlight_color,
            "highlight_radius": self.highlight_radius,
        }

    @staticmethod
    def from_dict(d: dict) -> "CursorConfig":
        return CursorConfig(
            smoothing=float(d["smoothing"]),
            auto_hide_after_ms=int(d["auto_hide_after_ms"]),
            highlight_clicks=bool(d["highlight_clicks"]),
            highlight_color=d["highlight_color"],
            highlight_radius=int(d["highlight_radius"]),
        )


# ── Frame style ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class SolidBackground:
    color: str

    def __post_init__(self) -> None:
        _require_hex("color", self.color)


@dataclass(frozen=True)
class GradientBackground:
    """Linear gradient; ``angle`` in degrees, colours evenly spaced."""
    colors: Tuple[str, ...]
    angle: float = 135.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "colors", tuple(self.colors))
        if len(self.colors) < 2:
            raise ValueError("a gradient needs at least two colours")
        for c in self.colors:
            _require_hex("gradient colour", c)


@dataclass(frozen=True)
class ImageBackground:
    path: str


Background = Union[SolidBackground, GradientBackground, ImageBackground]


def background_to_dict(bg: Background) -> dict:
    """Serialize a background variant to its tagged wire form."""
    if isinstance(bg, SolidBackground):
        return {"Solid": {"color": bg.color}}
    if isinstance(bg, GradientBackground):
        return {"Gradient": {"colors": list(bg.colors), "angle": bg.angle}}
    if isinstance(bg, ImageBackground):
        return {"Image": {"path": bg.path}}
    raise TypeError(f"unknown background variant: {bg!r}")


def background_from_dict(d: dict) -> Background:
    if "Solid" in d:
        return SolidBackground(color=d["Solid"]["color"])
    if "Gradient" in d:
        g = d["Gradient"]
        return GradientBackground(colors=tuple(g["colors"]), angle=float(g["angle"]))
    if "Image" in d:
        return ImageBackground(path=d["Image"]["path"])
    raise ValueError(f"unknown background variant: {sorted(d)}")


@dataclass(frozen=True)
class Shadow:
    offset_x: float = 0.0
    offset_y: float = 8.0
    blur: float = 32.0
    color: str = "#000000"
    opacity: float = 0.3

    def __post_init__(self) -> None:
        for name in ("offset_x", "offset_y", "blur"):
            value = getattr(self, name)
            if value < 0:
                raise ValueError(f"shadow {name} must be >= 0, got {value}")
        if not 0.0 <= self.opacity <= 1.0:
            raise ValueError(f"shadow opacity must be within [0, 1], got {self.opacity}")
        _require_hex("shadow color", self.color)

    def to_dict(self) -> dict:
        return {
            "offset_x": self.offset_x,
            "offset_y": self.offset_y,
            "blur": self.blur,
            "color": self.color,
            "opacity": self.opacity,
        }

    @staticmethod
    def from_dict(d: dict) -> "Shadow":
        return Shadow(
            offset_x=float(d["offset_x"]),
            offset_y=float(d["offset_y"]),
            blur=float(d["blur"]),
            color=d["color"],
            opacity=float(d["opacity"]),
        )


def _default_background() -> Background:
    return GradientBackground(colors=("#667eea", "#764ba2"), angle=135.0)


@dataclass(frozen=True)
class FrameStyle:
    """How the recording is framed: background, padding, corners, shadow."""
    background: Background = field(default_factory=_default_background)
    padding: int = DEFAULT_PADDING
    corner_radius: int = DEFAULT_CORNER_RADIUS
    shadow: Shadow = field(default_factory=Shadow)
    aspect_ratio: AspectRatio = AspectRatio.AUTO

    def __post_init__(self) -> None:
        if self.padding < 0:
            raise ValueError("padding must be >= 0")
        if self.corner_radius < 0:
            raise ValueError("corner_radius must be >= 0")
        if not isinstance(self.background, (SolidBackground, GradientBackground, ImageBackground)):
            raise TypeError(f"unknown background variant: {self.background!r}")
        object.__setattr__(self, "aspect_ratio", AspectRatio(self.aspect_ratio))

    def to_dict(self) -> dict:
        return {
            "background": background_to_dict(self.background),
            "padding": self.padding,
            "corner_radius": self.corner_radius,
            "shadow": self.shadow.to_dict(),
            "aspect_ratio": self.aspect_ratio.value,
        }

    @staticmethod
    def from_dict(d: dict) -> "FrameStyle":
        return FrameStyle(
            background=background_from_dict(d["background"]),
            padding=int(d["padding"]),
            corner_radius=int(d["corner_radius"]),
            shadow=Shadow.from_dict(d["shadow"]),
            aspect_ratio=AspectRatio(d["aspect_ratio"]),
        )


# ── Export ──────────────────────────────────────────────────────────


@dataclass(frozen=True)
class PresetResolution:
    """One of the named output sizes: ``720p``, ``1080p`` or ``4k``."""
    name: str

    _SIZES = {"720p": (1280, 720), "1080p": (1920, 1080), "4k": (3840, 2160)}

    def __post_init__(self) -> None:
        if self.name not in self._SIZES:
            raise ValueError(f"unknown resolution preset {self.name!r}")

    @property
    def size(self) -> Tuple[int, int]:
        return self._SIZES[self.name]


@dataclass(frozen=True)
class CustomResolution:
    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("custom resolution must be positive")

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height


ExportResolution = Union[PresetResolution, CustomResolution]

R720P = PresetResolution("720p")
R1080P = PresetResolution("1080p")
R4K = PresetResolution("4k")


def resolution_to_wire(res: ExportResolution):
    """``"R1080p"`` for presets, ``{"Custom": {...}}`` for explicit sizes."""
    if isinstance(res, PresetResolution):
        return f"R{res.name}"
    if isinstance(res, CustomResolution):
        return {"Custom": {"width": res.width, "height": res.height}}
    raise TypeError(f"unknown resolution variant: {res!r}")


def resolution_from_wire(value) -> ExportResolution:
    if isinstance(value, str):
        if not value.startswith("R"):
            raise ValueError(f"unknown resolution {value!r}")
        return PresetResolution(value[1:])
    if isinstance(value, dict) and "Custom" in value:
        c = value["Custom"]
        return CustomResolution(width=int(c["width"]), height=int(c["height"]))
    raise ValueError(f"unknown resolution {value!r}")


@dataclass(frozen=True)
class ExportConfig:
    format: ExportFormat = ExportFormat.MP4
    resolution: ExportResolution = R1080P
    quality: float = 0.8
    output_path: str = ""  # "" until resolved at export time

    def __post_init__(self) -> None:
        if not MIN_QUALITY <= self.quality <= MAX_QUALITY:
            raise ValueError(
                f"quality must be within [{MIN_QUALITY}, {MAX_QUALITY}], got {self.quality}"
            )
        if not isinstance(self.resolution, (PresetResolution, CustomResolution)):
            raise TypeError(f"unknown resolution variant: {self.resolution!r}")
        object.__setattr__(self, "format", ExportFormat(self.format))

    def to_dict(self) -> dict:
        return {
            "format": self.format.value,
            "resolution": resolution_to_wire(self.resolution),
            "quality": self.quality,
            "output_path": self.output_path,
        }

    @staticmethod
    def from_dict(d: dict) -> "ExportConfig":
        return ExportConfig(
            format=ExportFormat(d["format"]),
            resolution=resolution_from_wire(d["resolution"]),
            quality=float(d["quality"]),
            output_path=d.get("output_path", ""),
        )


# ── Project ─────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Project:
    """A finished recording plus its editing configuration.

    Created by the engine when a recording stops.  The editor works on a
    copy of the configs and merges them back in before saving.
    """

    id: str
    name: str
    created_at: int  # ms since epoch
    video_path: str
    events_path: str
    duration_ms: int
    width: int
    height: int
    fps: float
    zoom_config: ZoomConfig = field(default_factory=ZoomConfig)
    cursor_config: CursorConfig = field(default_factory=CursorConfig)
    frame_style: FrameStyle = field(default_factory=FrameStyle)
    export_config: ExportConfig = field(default_factory=ExportConfig)

    def __post_init__(self) -> None:
        if self.duration_ms < 0:
            raise ValueError("duration_ms must be >= 0")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "created_at": self.created_at,
            "video_path": self.video_path,
            "events_path": self.events_path,
            "duration_ms": self.duration_ms,
            "width": self.width,
            "height": self.height,
            "fps": self.fps,
            "zoom_config": self.zoom_config.to_dict(),
            "cursor_config": self.cursor_config.to_dict(),
            "frame_style": self.frame_style.to_dict(),
            "export_config": self.export_config.to_dict(),
        }

    @staticmethod
    def from_dict(d: dict) -> "Project":
        """Reconstruct from the engine's JSON; missing configs fall back to defaults."""
        return Project(
            id=d["id"],
            name=d["name"],
            created_at=int(d["created_at"]),
            video_path=d["video_path"],
            events_path=d["events_path"],
            duration_ms=int(d["duration_ms"]),
            width=int(d["width"]),
            height=int(d["height"]),
            fps=float(d["fps"]),
            zoom_config=ZoomConfig.from_dict(d["zoom_config"]) if "zoom_config" in d else ZoomConfig(),
            cursor_config=CursorConfig.from_dict(d["cursor_config"]) if "cursor_config" in d else CursorConfig(),
            frame_style=FrameStyle.from_dict(d["frame_style"]) if "frame_style" in d else FrameStyle(),
            export_config=ExportConfig.from_dict(d["export_config"]) if "export_config" in d else ExportConfig(),
        )


# ── Recorded input events ───────────────────────────────────────────


@dataclass(frozen=True)
class MouseEvent:
    """A mouse event in recording-resolution pixels."""
    timestamp_ms: int  # ms since recording start
    x: float
    y: float
    event_type: EventType = EventType.MOVE
    button: MouseButton = MouseButton.LEFT

    def __post_init__(self) -> None:
        if self.timestamp_ms < 0:
            raise ValueError("timestamp_ms must be >= 0")
        object.__setattr__(self, "event_type", EventType(self.event_type))
        object.__setattr__(self, "button", MouseButton(self.button))

    @property
    def is_click(self) -> bool:
        return self.event_type is EventType.CLICK

    def to_dict(self) -> dict:
        return {
            "timestamp_ms": self.timestamp_ms,
            "x": self.x,
            "y": self.y,
            "event_type": self.event_type.value,
            "button": self.button.value,
        }

    @staticmethod
    def from_dict(d: dict) -> "MouseEvent":
        return MouseEvent(
            timestamp_ms=int(d["timestamp_ms"]),
            x=float(d["x"]),
            y=float(d["y"]),
            event_type=EventType(d["event_type"]),
            button=MouseButton(d["button"]),
        )


@dataclass(frozen=True)
class RecordedEvents:
    """The input-event log of one recording.

    ``mouse_events`` is usually in timestamp order but that is not
    guaranteed; use :meth:`click_events` or sort before relying on order.
    """

    mouse_events: Tuple[MouseEvent, ...] = ()
    recording_start_ms: int = 0
    display_width: float = 0.0
    display_height: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "mouse_events", tuple(self.mouse_events))

    def click_events(self) -> Tuple[MouseEvent, ...]:
        """Click events sorted by timestamp (stable for equal timestamps)."""
        clicks = [e for e in self.mouse_events if e.is_click]
        return tuple(sorted(clicks, key=lambda e: e.timestamp_ms))

    def to_dict(self) -> dict:
        return {
            "mouse_events": [e.to_dict() for e in self.mouse_events],
            "recording_start_ms": self.recording_start_ms,
            "display_width": self.display_width,
            "display_height": self.display_height,
        }

    @staticmethod
    def from_dict(d: dict) -> "RecordedEvents":
        return RecordedEvents(
            mouse_events=tuple(MouseEvent.from_dict(e) for e in d.get("mouse_events", [])),
            recording_start_ms=int(d.get("recording_start_ms", 0)),
            display_width=float(d.get("display_width", 0.0)),
            display_height=float(d.get("display_height", 0.0)),
        )
