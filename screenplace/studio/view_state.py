"""Top-level navigation state: which view is active, which display is
selected, and the status of the current capture session.

The store is a ``QObject`` so widgets can follow it through signals; state
can only be changed through the ``set_*`` methods.
"""

import logging
from enum import Enum
from typing import Iterable, Optional, Sequence, Tuple

from PySide6.QtCore import QObject, Signal

from .models import DisplayInfo, Project

logger = logging.getLogger(__name__)


class View(str, Enum):
    HOME = "home"
    RECORDING = "recording"
    EDITOR = "editor"


_TRANSITIONS = {
    (View.HOME, View.RECORDING),
    (View.RECORDING, View.EDITOR),
    (View.RECORDING, View.HOME),  # recording abandoned before a project existed
    (View.EDITOR, View.HOME),
    (View.HOME, View.EDITOR),
}


def can_transition(current: View, target: View) -> bool:
    """True if navigating from *current* to *target* is allowed."""
    return current == target or (View(current), View(target)) in _TRANSITIONS


def select_display(displays: Sequence[DisplayInfo]) -> Optional[DisplayInfo]:
    """Default selection: the primary display, else the first, else None."""
    for d in displays:
        if d.is_primary:
            return d
    return displays[0] if displays else None


class ViewState(QObject):
    """Navigation + display selection + recording status."""

    view_changed = Signal(str)
    displays_changed = Signal(object)  # list of DisplayInfo
    selected_display_changed = Signal(object)  # DisplayInfo | None
    recording_changed = Signal(bool)
    paused_changed = Signal(bool)
    duration_changed = Signal(int)
    project_id_changed = Signal(object)  # str | None
    current_project_changed = Signal(object)  # Project | None

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._view = View.HOME
        self._displays: Tuple[DisplayInfo, ...] = ()
        self._selected: Optional[DisplayInfo] = None
        self._is_recording = False
        self._is_paused = False
        self._duration_ms = 0
        self._project_id: Optional[str] = None
        self._current_project: Optional[Project] = None

    # ── read access ─────────────────────────────────────────────────

    @property
    def view(self) -> View:
        return self._view

    @property
    def displays(self) -> Tuple[DisplayInfo, ...]:
        return self._displays

    @property
    def selected_display(self) -> Optional[DisplayInfo]:
        return self._selected

    @property
    def is_recording(self) -> bool:
        return self._is_recording

    @property
    def is_paused(self) -> bool:
        return self._is_paused

    @property
    def duration_ms(self) -> int:
        return self._duration_ms

    @property
    def project_id(self) -> Optional[str]:
        return self._project_id

    @property
    def current_project(self) -> Optional[Project]:
        return self._current_project

    # ── navigation ──────────────────────────────────────────────────

    def set_view(self, view: View) -> None:
        """Switch views.  No side effects beyond the flag itself."""
        view = View(view)
        if view == self._view:
            return
        logger.info("View %s -> %s", self._view.value, view.value)
        self._view = view
        self.view_changed.emit(view.value)

    # ── displays ────────────────────────────────────────────────────

    def set_displays(self, displays: Iterable[DisplayInfo]) -> None:
        """Replace the display list and recompute the selection."""
        self._displays = tuple(displays)
        self.displays_changed.emit(list(self._displays))
        self._set_selected(select_display(self._displays))

    def set_selected_display(self, display: Optional[DisplayInfo]) -> None:
        """Manually pick a display; holds until the next :meth:`set_displays`.

        The display is matched by ``id`` against the current list.
        """
        if display is None:
            self._set_selected(None)
            return
        match = next((d for d in self._displays if d.id == display.id), None)
        if match is None:
            raise ValueError(f"display {display.id} is not in the current display list")
        self._set_selected(match)

    def _set_selected(self, display: Optional[DisplayInfo]) -> None:
        if display == self._selected:
            return
        self._selected = display
        self.selected_display_changed.emit(display)

    # ── recording status ────────────────────────────────────────────

    def set_recording_active(self, active: bool) -> None:
        if active == self._is_recording:
            return
        self._is_recording = active
        if not active:
            self._is_paused = False
        self.recording_changed.emit(active)

    def set_paused(self, paused: bool) -> None:
        if paused == self._is_paused:
            return
        self._is_paused = paused
        self.paused_changed.emit(paused)

    def set_duration_ms(self, ms: int) -> None:
        ms = max(int(ms), 0)
        if ms == self._duration_ms:
            return
        self._duration_ms = ms
        self.duration_changed.emit(ms)

    def set_project_id(self, project_id: Optional[str]) -> None:
        if project_id == self._project_id:
            return
        self._project_id = project_id
        self.project_id_changed.emit(project_id)

    def set_current_project(self, project: Optional[Project]) -> None:
        if project is self._current_project:
            return
        self._current_project = project
        self.current_project_changed.emit(project)
