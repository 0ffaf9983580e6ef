"""Working copy of the project being edited.

Holds the zoom / frame / export configs, the recorded events, the playback
cursor and the export status for one editor session.  Configs are immutable
values: every mutator builds a new object and emits it, so a reader holding
the previous snapshot never sees a half-applied change.

Two mutation shapes exist for each config:

* ``set_*`` replaces the whole value (used when a project loads);
* ``update_*`` merges keyword arguments into the current value, keeping
  every field that is not named.
"""

import logging
from dataclasses import replace
from typing import Optional

from PySide6.QtCore import QObject, Signal

from .models import (
    Background,
    ExportConfig,
    FrameStyle,
    Project,
    RecordedEvents,
    ZoomConfig,
)

logger = logging.getLogger(__name__)


class EditorState(QObject):
    """Per-session editing state.  Reset to defaults when the editor closes."""

    events_changed = Signal(object)  # RecordedEvents | None
    zoom_config_changed = Signal(object)
    frame_style_changed = Signal(object)
    export_config_changed = Signal(object)
    current_time_changed = Signal(int)
    playing_changed = Signal(bool)
    exporting_changed = Signal(bool)
    export_progress_changed = Signal(float)

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._events: Optional[RecordedEvents] = None
        self._zoom_config = ZoomConfig()
        self._frame_style = FrameStyle()
        self._export_config = ExportConfig()
        self._current_time_ms = 0
        self._is_playing = False
        self._is_exporting = False
        self._export_progress = 0.0

    # ── read access ─────────────────────────────────────────────────

    @property
    def events(self) -> Optional[RecordedEvents]:
        return self._events

    @property
    def zoom_config(self) -> ZoomConfig:
        return self._zoom_config

    @property
    def frame_style(self) -> FrameStyle:
        return self._frame_style

    @property
    def export_config(self) -> ExportConfig:
        return self._export_config

    @property
    def current_time_ms(self) -> int:
        return self._current_time_ms

    @property
    def is_playing(self) -> bool:
        return self._is_playing

    @property
    def is_exporting(self) -> bool:
        return self._is_exporting

    @property
    def export_progress(self) -> float:
        return self._export_progress

    # ── events ──────────────────────────────────────────────────────

    def set_events(self, events: Optional[RecordedEvents]) -> None:
        self._events = events
        self.events_changed.emit(events)

    # ── zoom ────────────────────────────────────────────────────────

    def set_zoom_config(self, config: ZoomConfig) -> None:
        self._zoom_config = config
        self.zoom_config_changed.emit(config)

    def update_zoom_config(self, **changes) -> ZoomConfig:
        """Merge *changes* into the zoom config; returns the new value."""
        self.set_zoom_config(replace(self._zoom_config, **changes))
        return self._zoom_config

    # ── frame style ─────────────────────────────────────────────────

    def set_frame_style(self, style: FrameStyle) -> None:
        self._frame_style = style
        self.frame_style_changed.emit(style)

    def update_frame_style(self, **changes) -> FrameStyle:
        self.set_frame_style(replace(self._frame_style, **changes))
        return self._frame_style

    def set_background(self, background: Background) -> FrameStyle:
        """Swap only ``frame_style.background``."""
        return self.update_frame_style(background=background)

    # ── export config ───────────────────────────────────────────────

    def set_export_config(self, config: ExportConfig) -> None:
        self._export_config = config
        self.export_config_changed.emit(config)

    def update_export_config(self, **changes) -> ExportConfig:
        self.set_export_config(replace(self._export_config, **changes))
        return self._export_config

    # ── playback ────────────────────────────────────────────────────

    def set_current_time_ms(self, ms: int) -> None:
        ms = max(int(ms), 0)
        if ms == self._current_time_ms:
            return
        self._current_time_ms = ms
        self.current_time_changed.emit(ms)

    def set_playing(self, playing: bool) -> None:
        if playing == self._is_playing:
            return
        self._is_playing = playing
        self.playing_changed.emit(playing)

    # ── export status ───────────────────────────────────────────────

    def set_exporting(self, exporting: bool) -> None:
        if exporting == self._is_exporting:
            return
        self._is_exporting = exporting
        self.exporting_changed.emit(exporting)

    def set_export_progress(self, progress: float) -> None:
        """Store export progress, clamped into [0, 1]."""
        progress = min(max(float(progress), 0.0), 1.0)
        if progress == self._export_progress:
            return
        self._export_progress = progress
        self.export_progress_changed.emit(progress)

    # ── whole-session operations ────────────────────────────────────

    def load_project(self, project: Project, events: Optional[RecordedEvents]) -> None:
        """Replace configs and events from a freshly loaded project.

        All fields are assigned before any signal fires, so listeners see
        the new project in full.
        """
        self._events = events
        self._zoom_config = project.zoom_config
        self._frame_style = project.frame_style
        self._export_config = project.export_config
        self._current_time_ms = 0
        self._is_playing = False
        self._is_exporting = False
        self._export_progress = 0.0
        logger.info("Editor loaded project %s", project.id)
        self._emit_all()

    def reset(self) -> None:
        """Back to defaults; used when leaving the editor."""
        self._events = None
        self._zoom_config = ZoomConfig()
        self._frame_style = FrameStyle()
        self._export_config = ExportConfig()
        self._current_time_ms = 0
        self._is_playing = False
        self._is_exporting = False
        self._export_progress = 0.0
        self._emit_all()

    def _emit_all(self) -> None:
        self.events_changed.emit(self._events)
        self.zoom_config_changed.emit(self._zoom_config)
        self.frame_style_changed.emit(self._frame_style)
        self.export_config_changed.emit(self._export_config)
        self.current_time_changed.emit(self._current_time_ms)
        self.playing_changed.emit(self._is_playing)
        self.exporting_changed.emit(self._is_exporting)
        self.export_progress_changed.emit(self._export_progress)
