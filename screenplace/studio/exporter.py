"""Export coordination — one export at a time, progress pushed by the engine.

The engine reports progress on ``export-progress`` and the final path on
``export-complete``.  :meth:`ExportCoordinator.mount` subscribes to both
for the lifetime of an editor session; :meth:`teardown` releases them.

State machine::

    Idle --start_export--> Exporting --success / failure / complete--> Idle

The displayed status (``EditorState.is_exporting``) may return to idle on
``export-complete`` before the command itself returns.  A new export is
refused until the command has returned.  A command that returns after
the editor session ended leaves the next session's state alone.
"""

import logging
import os
from dataclasses import replace
from typing import Any, Optional

from .editor_state import EditorState
from .engine import EXPORT_COMPLETE, EXPORT_PROGRESS, Engine, Subscription, run_command
from .errors import EngineCommandError, ExportInProgressError, NoProjectLoadedError
from .models import ExportConfig, Project
from .view_state import ViewState

logger = logging.getLogger(__name__)


def default_export_path(video_path: str, config: ExportConfig) -> str:
    """``export.<ext>`` next to the project's recording."""
    return os.path.join(os.path.dirname(video_path), f"export.{config.format.extension}")


class ExportCoordinator:
    def __init__(self, engine: Engine, view_state: ViewState, editor_state: EditorState) -> None:
        self._engine = engine
        self._view = view_state
        self._editor = editor_state
        self._progress_sub: Optional[Subscription] = None
        self._complete_sub: Optional[Subscription] = None
        self._last_error: Optional[EngineCommandError] = None
        self._last_output_path: Optional[str] = None
        self._in_flight = False
        self._session = 0  # bumped whenever the listeners are released

    @property
    def is_mounted(self) -> bool:
        return self._progress_sub is not None

    @property
    def in_flight(self) -> bool:
        """True while an ``export_project`` command has not returned."""
        return self._in_flight

    @property
    def last_error(self) -> Optional[EngineCommandError]:
        return self._last_error

    @property
    def last_output_path(self) -> Optional[str]:
        return self._last_output_path

    # ── subscriptions ───────────────────────────────────────────────

    def mount(self) -> None:
        """Subscribe to the engine's export channels.

        Mounting again replaces the previous handles.
        """
        self.teardown()
        self._progress_sub = self._engine.subscribe(EXPORT_PROGRESS, self._on_progress)
        self._complete_sub = self._engine.subscribe(EXPORT_COMPLETE, self._on_complete)
        logger.debug("Export listeners attached")

    def teardown(self) -> None:
        """Release both subscriptions.  Safe to call repeatedly."""
        for sub in (self._progress_sub, self._complete_sub):
            if sub is not None:
                sub.dispose()
        if self._progress_sub is not None:
            logger.debug("Export listeners released")
            self._session += 1
        self._progress_sub = None
        self._complete_sub = None

    def _on_progress(self, payload: Any) -> None:
        if not self._editor.is_exporting:
            logger.debug("Ignoring export progress %r while idle", payload)
            return
        try:
            progress = float(payload)
        except (TypeError, ValueError):
            logger.warning("Malformed export progress payload: %r", payload)
            return
        self._editor.set_export_progress(progress)

    def _on_complete(self, payload: Any) -> None:
        # Completion wins over any progress value seen before or after it.
        self._editor.set_exporting(False)
        self._editor.set_export_progress(1.0)
        self._last_output_path = str(payload)
        logger.info("Export complete: %s", payload)

    # ── export ──────────────────────────────────────────────────────

    def effective_config(self, project: Project) -> ExportConfig:
        """The editor's export config with an empty output path filled in."""
        config = self._editor.export_config
        if not config.output_path:
            config = replace(config, output_path=default_export_path(project.video_path, config))
        return config

    async def start_export(self) -> str:
        """Export the current project; returns the output path."""
        project = self._view.current_project
        if project is None:
            raise NoProjectLoadedError()
        if self._in_flight or self._editor.is_exporting:
            raise ExportInProgressError()

        config = self.effective_config(project)
        session = self._session
        self._last_error = None
        self._editor.set_export_progress(0.0)
        self._editor.set_exporting(True)
        logger.info(
            "Export started | project=%s | format=%s | output=%s",
            project.id, config.format.value, config.output_path,
        )
        self._in_flight = True
        try:
            path = await run_command(
                "export_project", self._engine.export_project(project.id, config)
            )
        except EngineCommandError as exc:
            logger.error("Export of %s failed: %s", project.id, exc.message)
            if session == self._session:
                self._last_error = exc
                self._editor.set_exporting(False)
            raise
        finally:
            self._in_flight = False

        if session != self._session:
            logger.info("Export of %s finished after its session ended: %s", project.id, path)
            return path
        self._editor.set_exporting(False)
        self._editor.set_export_progress(1.0)
        self._last_output_path = path
        return path
