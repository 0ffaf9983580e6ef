"""Timeline geometry — pixel ↔ time mapping for the editor's track."""

import math
from dataclasses import dataclass
from typing import List, Optional

from .models import RecordedEvents
from .utils import clamp, fmt_duration, fmt_time


@dataclass(frozen=True)
class TimelineSummary:
    click_count: int
    event_count: int
    duration_label: str


class TimelineMapper:
    """Maps between a track of ``track_width`` px and ``duration_ms``.

    A zero duration collapses everything to the origin.
    """

    def __init__(self, track_width: float, duration_ms: int) -> None:
        self.track_width = float(track_width)
        self.duration_ms = max(int(duration_ms), 0)

    def time_at(self, x: float) -> int:
        """Time under pixel *x*, clamped to the track."""
        return time_at(x, self.track_width, self.duration_ms)

    def position_of(self, time_ms: float) -> float:
        if self.duration_ms == 0 or self.track_width <= 0:
            return 0.0
        return clamp(time_ms / self.duration_ms, 0.0, 1.0) * self.track_width

    def playhead_position(self, current_time_ms: float) -> float:
        return self.position_of(current_time_ms)

    def marker_positions(self, events: Optional[RecordedEvents]) -> List[float]:
        """x of every click, in time order.  Empty for a zero duration."""
        if events is None or self.duration_ms == 0:
            return []
        return [self.position_of(e.timestamp_ms) for e in events.click_events()]

    def labels(self, current_time_ms: float) -> tuple:
        """(current, total) labels shown beside the track."""
        return fmt_time(current_time_ms), fmt_time(self.duration_ms)

    def summary(self, events: Optional[RecordedEvents]) -> TimelineSummary:
        if events is None:
            return TimelineSummary(0, 0, fmt_duration(self.duration_ms))
        return TimelineSummary(
            click_count=len(events.click_events()),
            event_count=len(events.mouse_events),
            duration_label=fmt_duration(self.duration_ms),
        )


def time_at(x: float, track_width: float, duration_ms: int) -> int:
    """``round(clamp(x / track_width, 0, 1) * duration_ms)``; 0 for an
    empty track or zero duration."""
    if track_width <= 0 or duration_ms <= 0:
        return 0
    # half-up, not banker's rounding
    return int(math.floor(clamp(x / track_width, 0.0, 1.0) * duration_ms + 0.5))
