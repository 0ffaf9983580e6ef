"""Recording coordinator — start / stop a capture session on the engine.

While a recording is active a single asyncio task polls the engine for the
elapsed duration every ``poll_interval_ms`` and writes it into
:class:`~studio.view_state.ViewState`.  The poll is best-effort feedback:
failures are logged and the timer keeps going.  It is cancelled as soon as
``is_recording`` turns false or the coordinator is torn down.
"""

import asyncio
import logging
from typing import List, Optional

from .engine import Engine, run_command
from .errors import EngineCommandError, NoDisplaySelectedError, RecordingInProgressError
from .models import DisplayInfo, Project, RecordingStatus
from .settings import StudioSettings
from .view_state import View, ViewState

logger = logging.getLogger(__name__)


class RecordingCoordinator:
    def __init__(
        self,
        engine: Engine,
        view_state: ViewState,
        settings: Optional[StudioSettings] = None,
    ) -> None:
        self._engine = engine
        self._view = view_state
        self._settings = settings or StudioSettings()
        self._poll_task: Optional[asyncio.Task] = None
        self._starting = False
        self._torn_down = False
        self._view.recording_changed.connect(self._on_recording_changed)

    @property
    def is_polling(self) -> bool:
        return self._poll_task is not None

    # ── displays ────────────────────────────────────────────────────

    async def refresh_displays(self) -> List[DisplayInfo]:
        """Enumerate displays and re-apply the default selection policy."""
        displays = await run_command("get_displays", self._engine.get_displays())
        self._view.set_displays(displays)
        logger.info("Found %d display(s)", len(displays))
        return list(self._view.displays)

    # ── start / stop ────────────────────────────────────────────────

    async def start_recording(self) -> str:
        """Start capturing the selected display.  Returns the project id."""
        display = self._view.selected_display
        if display is None:
            raise NoDisplaySelectedError()
        if self._view.is_recording or self._starting:
            raise RecordingInProgressError()

        self._starting = True
        try:
            project_id = await run_command(
                "start_recording", self._engine.start_recording(display)
            )
        finally:
            self._starting = False

        self._view.set_project_id(project_id)
        self._view.set_duration_ms(0)
        self._view.set_recording_active(True)
        self._view.set_view(View.RECORDING)
        self._start_poll()
        logger.info(
            "Recording started | display=%s (id=%d) | project=%s",
            display.name, display.id, project_id,
        )
        return project_id

    async def stop_recording(self) -> Project:
        """Stop capturing and return the finalized project.

        The recording counts as ended even when finalization fails: the
        flag is cleared before the error is re-raised.
        """
        try:
            project = await run_command("stop_recording", self._engine.stop_recording())
        except EngineCommandError:
            logger.error("Failed to finalize recording")
            self._view.set_recording_active(False)
            if self._view.view == View.RECORDING:
                self._view.set_view(View.HOME)
            raise

        self._view.set_recording_active(False)
        self._view.set_current_project(project)
        self._view.set_view(View.EDITOR)
        logger.info(
            "Recording stopped | project=%s | duration=%dms", project.id, project.duration_ms
        )
        return project

    async def sync_with_engine(self) -> RecordingStatus:
        """Adopt a capture session that is already running on the engine.

        Used when the UI (re)starts while the engine keeps recording.
        """
        status = await run_command("get_recording_state", self._engine.get_recording_state())
        if status.is_recording and not self._view.is_recording:
            self._view.set_project_id(status.project_id)
            self._view.set_duration_ms(status.duration_ms)
            self._view.set_recording_active(True)
            self._view.set_paused(status.is_paused)
            self._view.set_view(View.RECORDING)
            self._start_poll()
            logger.info("Resumed tracking of running recording %s", status.project_id)
        return status

    # ── duration poll ───────────────────────────────────────────────

    def _start_poll(self) -> None:
        if self._torn_down:
            return
        self.stop_poll()
        self._poll_task = asyncio.get_running_loop().create_task(self._poll_loop())

    def stop_poll(self) -> None:
        task, self._poll_task = self._poll_task, None
        if task is not None:
            task.cancel()
            logger.debug("Duration poll stopped")

    async def _poll_loop(self) -> None:
        interval = self._settings.poll_interval_s
        while True:
            await asyncio.sleep(interval)
            try:
                ms = await self._engine.get_recording_duration()
            except Exception as exc:
                # Soft-fail: the displayed duration freezes, recording goes on.
                logger.debug("Duration poll failed: %s", exc)
                continue
            self._view.set_duration_ms(ms)

    def _on_recording_changed(self, active: bool) -> None:
        if not active:
            self.stop_poll()

    def teardown(self) -> None:
        """Cancel the poll and detach from the view state.  Safe to repeat."""
        if self._torn_down:
            return
        self._torn_down = True
        self.stop_poll()
        self._view.recording_changed.disconnect(self._on_recording_changed)
