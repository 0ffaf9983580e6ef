"""Project library for the home view — recent projects and capability checks."""

import logging
from typing import Optional, Tuple

from PySide6.QtCore import QObject, Signal

from .engine import Engine, run_command
from .models import Project
from .settings import RECENT_PROJECTS_LIMIT

logger = logging.getLogger(__name__)


class ProjectLibrary(QObject):
    """Projects known to the engine, newest first."""

    projects_changed = Signal(object)  # tuple of Project
    ffmpeg_checked = Signal(bool)

    def __init__(
        self,
        engine: Engine,
        recent_limit: int = RECENT_PROJECTS_LIMIT,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._engine = engine
        self._recent_limit = recent_limit
        self._projects: Tuple[Project, ...] = ()
        self._has_ffmpeg: Optional[bool] = None  # None until checked

    @property
    def projects(self) -> Tuple[Project, ...]:
        return self._projects

    @property
    def recent(self) -> Tuple[Project, ...]:
        return self._projects[: self._recent_limit]

    @property
    def has_ffmpeg(self) -> Optional[bool]:
        return self._has_ffmpeg

    async def refresh(self) -> Tuple[Project, ...]:
        projects = await run_command("list_projects", self._engine.list_projects())
        self._projects = tuple(sorted(projects, key=lambda p: p.created_at, reverse=True))
        self.projects_changed.emit(self._projects)
        logger.debug("Library holds %d project(s)", len(self._projects))
        return self._projects

    async def delete(self, project_id: str) -> None:
        """Delete on the engine, then drop it from the local list."""
        await run_command("delete_project", self._engine.delete_project(project_id))
        self._projects = tuple(p for p in self._projects if p.id != project_id)
        self.projects_changed.emit(self._projects)
        logger.info("Deleted project %s", project_id)

    async def check_ffmpeg(self) -> bool:
        """Whether the engine can encode.  A failed check counts as ``False``."""
        try:
            available = bool(await self._engine.check_ffmpeg())
        except Exception as exc:
            logger.warning("FFmpeg check failed: %s", exc)
            available = False
        if not available:
            logger.warning("FFmpeg not found — export will be unavailable")
        self._has_ffmpeg = available
        self.ffmpeg_checked.emit(available)
        return available

    async def check_permissions(self) -> bool:
        """Forward the engine's screen-capture permission query."""
        try:
            return bool(await self._engine.check_permissions())
        except Exception as exc:
            logger.warning("Permission check failed: %s", exc)
            return False

    async def app_version(self) -> str:
        return await run_command("get_app_version", self._engine.get_app_version())

