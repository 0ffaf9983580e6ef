"""Application context — owns the stores and coordinators of one app instance.

All application state hangs off an :class:`AppContext`; tests build as
many as they like, each with its own engine.

Session hooks follow the active view: entering the editor attaches the
export listeners, leaving it releases them, resets the working copy and
drops the current project.  Leaving the recording view stops the duration
poll.
"""

import logging
from typing import Optional

from .editor_state import EditorState
from .engine import Engine
from .exporter import ExportCoordinator
from .library import ProjectLibrary
from .models import Project
from .project_sync import ProjectSync
from .recording import RecordingCoordinator
from .settings import StudioSettings
from .view_state import View, ViewState, can_transition

logger = logging.getLogger(__name__)


class AppContext:
    def __init__(self, engine: Engine, settings: Optional[StudioSettings] = None) -> None:
        self.engine = engine
        self.settings = settings or StudioSettings()

        self.view_state = ViewState()
        self.editor_state = EditorState()
        self.recording = RecordingCoordinator(engine, self.view_state, self.settings)
        self.project_sync = ProjectSync(engine, self.view_state, self.editor_state)
        self.exporter = ExportCoordinator(engine, self.view_state, self.editor_state)
        self.library = ProjectLibrary(engine, self.settings.recent_projects_limit)

        self._active_view = self.view_state.view
        self.view_state.view_changed.connect(self._on_view_changed)

    # ── lifecycle ───────────────────────────────────────────────────

    async def startup(self) -> None:
        """Initial home-view data: displays, projects, capability check."""
        await self.recording.refresh_displays()
        await self.recording.sync_with_engine()
        await self.library.refresh()
        await self.library.check_ffmpeg()

    def shutdown(self) -> None:
        self.recording.teardown()
        self.exporter.teardown()
        logger.info("Context shut down")

    # ── navigation ──────────────────────────────────────────────────

    def navigate(self, target: View) -> None:
        """Switch views, refusing transitions the state machine forbids."""
        target = View(target)
        current = self.view_state.view
        if not can_transition(current, target):
            raise ValueError(f"cannot navigate from {current.value} to {target.value}")
        if current == View.RECORDING and self.view_state.is_recording:
            raise ValueError("stop the recording before leaving the recording view")
        self.view_state.set_view(target)

    def _on_view_changed(self, value: str) -> None:
        previous, current = self._active_view, View(value)
        self._active_view = current

        if previous == View.EDITOR:
            self.exporter.teardown()
            self.editor_state.reset()
            self.view_state.set_current_project(None)
        if previous == View.RECORDING:
            self.recording.stop_poll()
        if current == View.EDITOR:
            self.exporter.mount()

    # ── recording ───────────────────────────────────────────────────

    async def start_recording(self) -> str:
        return await self.recording.start_recording()

    async def stop_recording(self) -> Project:
        """Stop capturing and open the new project in the editor."""
        project = await self.recording.stop_recording()
        await self.project_sync.open_project(project)
        return self.view_state.current_project

    # ── projects ────────────────────────────────────────────────────

    async def load_project(self, project_id: str) -> Project:
        """Open a saved project in the editor.

        Refused (``ValueError``) while a recording is running or when the
        current view may not move to the editor.
        """
        current = self.view_state.view
        if self.view_state.is_recording:
            raise ValueError("stop the recording before opening a project")
        if not can_transition(current, View.EDITOR):
            raise ValueError(f"cannot open a project from {current.value}")
        return await self.project_sync.load_project(project_id)

    async def save_project(self) -> Optional[Project]:
        return await self.project_sync.save_current_project()

    async def delete_project(self, project_id: str) -> None:
        await self.library.delete(project_id)

    # ── editor ──────────────────────────────────────────────────────

    def seek(self, time_ms: int) -> bool:
        """Move the playhead; ignored outside the editor."""
        if self.view_state.view != View.EDITOR:
            logger.warning("Seek ignored outside the editor")
            return False
        project = self.view_state.current_project
        if project is not None:
            time_ms = min(time_ms, project.duration_ms)
        self.editor_state.set_current_time_ms(time_ms)
        return True

    def set_playing(self, playing: bool) -> bool:
        """Start or pause playback; ignored outside the editor."""
        if self.view_state.view != View.EDITOR:
            logger.warning("Playback control ignored outside the editor")
            return False
        self.editor_state.set_playing(playing)
        return True

    async def export(self) -> str:
        return await self.exporter.start_export()
