"""Click-driven zoom — easing curves, zoom segments and the viewport at a time.

Every click in a recording produces one :class:`ZoomSegment`: the view
eases in to ``zoom_level`` centred on the click, holds, then eases back
out.  Segments may overlap; at any instant the one with the highest
current zoom wins.  The resulting :class:`Viewport` is the crop rectangle
in recording coordinates, kept fully inside the source.
"""

from dataclasses import dataclass
from typing import Iterable, List, Sequence

from .models import Easing, MouseEvent, ZoomConfig


def linear(t: float) -> float:
    return t


def ease_in(t: float) -> float:
    """Cubic ease-in — f(t) = t³, slow start."""
    return t * t * t


def ease_out(t: float) -> float:
    """Cubic ease-out — f(t) = 1 - (1-t)³, decelerates into the target."""
    inv = 1.0 - t
    return 1.0 - inv * inv * inv


def ease_in_out(t: float) -> float:
    """Cubic ease-in-out — accelerate for the first half, decelerate after.

    f(t) = 4t³ for t < 0.5, else 1 - (-2t + 2)³ / 2
    """
    if t < 0.5:
        return 4.0 * t * t * t
    k = -2.0 * t + 2.0
    return 1.0 - k * k * k / 2.0


_EASINGS = {
    Easing.LINEAR: linear,
    Easing.EASE_IN: ease_in,
    Easing.EASE_OUT: ease_out,
    Easing.EASE_IN_OUT: ease_in_out,
}


def apply_easing(t: float, easing: Easing) -> float:
    """Evaluate *easing* at *t*, clamped to [0, 1] first."""
    t = min(max(t, 0.0), 1.0)
    return _EASINGS[Easing(easing)](t)


@dataclass(frozen=True)
class ZoomSegment:
    """One zoom-in / hold / zoom-out animation triggered by a click."""
    start_ms: int
    center_x: float
    center_y: float
    peak_zoom: float
    zoom_in_ms: int
    hold_ms: int
    zoom_out_ms: int
    easing: Easing

    @property
    def end_ms(self) -> int:
        return self.start_ms + self.zoom_in_ms + self.hold_ms + self.zoom_out_ms

    def zoom_at(self, time_ms: float) -> float:
        """Zoom factor at *time_ms*; 1.0 outside the segment."""
        if time_ms < self.start_ms or time_ms > self.end_ms:
            return 1.0
        elapsed = time_ms - self.start_ms
        if elapsed < self.zoom_in_ms:
            eased = apply_easing(elapsed / self.zoom_in_ms, self.easing)
            return 1.0 + (self.peak_zoom - 1.0) * eased
        if elapsed < self.zoom_in_ms + self.hold_ms:
            return self.peak_zoom
        out = elapsed - self.zoom_in_ms - self.hold_ms
        eased = apply_easing(out / self.zoom_out_ms, self.easing)
        return self.peak_zoom - (self.peak_zoom - 1.0) * eased


@dataclass(frozen=True)
class Viewport:
    """Visible crop rectangle in source coordinates."""
    x: float
    y: float
    width: float
    height: float
    zoom: float
    center_x: float
    center_y: float

    def map_point(self, px: float, py: float, target_w: float, target_h: float):
        """Map a source point into a ``target_w`` × ``target_h`` area
        showing this viewport."""
        return (
            (px - self.x) / self.width * target_w,
            (py - self.y) / self.height * target_h,
        )


def generate_segments(clicks: Iterable[MouseEvent], config: ZoomConfig) -> List[ZoomSegment]:
    """One segment per click, or none when zoom is disabled."""
    if not config.enabled:
        return []
    return [
        ZoomSegment(
            start_ms=c.timestamp_ms,
            center_x=c.x,
            center_y=c.y,
            peak_zoom=config.zoom_level,
            zoom_in_ms=config.zoom_in_duration_ms,
            hold_ms=config.hold_duration_ms,
            zoom_out_ms=config.zoom_out_duration_ms,
            easing=config.easing,
        )
        for c in clicks
        if c.is_click
    ]


def full_viewport(source_width: float, source_height: float) -> Viewport:
    return Viewport(
        0.0, 0.0, source_width, source_height, 1.0, source_width / 2.0, source_height / 2.0
    )


def viewport_at(
    time_ms: float,
    segments: Sequence[ZoomSegment],
    source_width: float,
    source_height: float,
) -> Viewport:
    """Crop rectangle at *time_ms*.

    The segment with the highest zoom decides the centre.  The centre is
    then clamped so the crop never leaves the source.
    """
    zoom = 1.0
    cx, cy = source_width / 2.0, source_height / 2.0
    for seg in segments:
        z = seg.zoom_at(time_ms)
        if z > zoom:
            zoom, cx, cy = z, seg.center_x, seg.center_y

    crop_w = source_width / zoom
    crop_h = source_height / zoom
    half_w, half_h = crop_w / 2.0, crop_h / 2.0
    cx = min(max(cx, half_w), source_width - half_w)
    cy = min(max(cy, half_h), source_height - half_h)
    return Viewport(cx - half_w, cy - half_h, crop_w, crop_h, zoom, cx, cy)
