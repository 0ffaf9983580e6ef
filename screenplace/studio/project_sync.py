"""Load, open and save projects between the engine and the editor session."""

import asyncio
import logging
from dataclasses import replace
from typing import Optional

from .editor_state import EditorState
from .engine import Engine, run_command
from .errors import NotFoundError
from .models import Project, RecordedEvents
from .view_state import View, ViewState

logger = logging.getLogger(__name__)


class ProjectSync:
    def __init__(self, engine: Engine, view_state: ViewState, editor_state: EditorState) -> None:
        self._engine = engine
        self._view = view_state
        self._editor = editor_state

    async def load_project(self, project_id: str) -> Project:
        """Fetch a project with its events and open it in the editor.

        Both are requested concurrently.  If either fails, nothing is
        changed and :class:`NotFoundError` is raised.
        """
        try:
            project, events = await asyncio.gather(
                self._engine.load_project(project_id),
                self._engine.load_events(project_id),
            )
        except NotFoundError:
            raise
        except Exception as exc:
            logger.warning("Failed to load project %s: %s", project_id, exc)
            raise NotFoundError("load_project", f"project {project_id}: {exc}") from exc

        self._view.set_current_project(project)
        self._editor.load_project(project, events)
        self._view.set_view(View.EDITOR)
        return project

    async def open_project(self, project: Project) -> Optional[RecordedEvents]:
        """Populate the editor from a project already in hand.

        Used after a recording stops.  The events file may not be flushed
        yet, so a failed events load is logged and the editor opens without
        click markers.  A project that arrives without a duration gets one
        probed from its video file when the engine can.
        """
        if project.duration_ms == 0:
            try:
                duration = await run_command(
                    "get_video_duration", self._engine.get_video_duration(project.video_path)
                )
            except Exception as exc:
                logger.warning("No duration for %s: %s", project.video_path, exc)
            else:
                project = replace(project, duration_ms=max(int(duration), 0))

        events: Optional[RecordedEvents] = None
        try:
            events = await run_command("load_events", self._engine.load_events(project.id))
        except Exception as exc:
            logger.error("Failed to load events for %s: %s", project.id, exc)

        self._view.set_current_project(project)
        self._editor.load_project(project, events)
        self._view.set_view(View.EDITOR)
        return events

    def merged_project(self) -> Optional[Project]:
        """The current project with the editor's working configs applied."""
        project = self._view.current_project
        if project is None:
            return None
        return replace(
            project,
            zoom_config=self._editor.zoom_config,
            frame_style=self._editor.frame_style,
            export_config=self._editor.export_config,
        )

    async def save_current_project(self) -> Optional[Project]:
        """Persist the working configs.  Returns the saved project, or None
        when no project is open."""
        project = self.merged_project()
        if project is None:
            logger.debug("Save requested with no project open")
            return None
        await run_command("save_project", self._engine.save_project(project))
        self._view.set_current_project(project)
        logger.info("Saved project %s", project.id)
        return project
