"""Boundary to the external recording / encoding engine.

The engine captures, encodes and persists; this package only talks to it
through the asynchronous commands of :class:`Engine` and two push channels
(export progress and export completion).  Subscriptions are returned as
:class:`Subscription` handles that must be disposed when the owning session
ends.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, List, Protocol, TypeVar

from .errors import EngineCommandError, StudioError
from .models import DisplayInfo, ExportConfig, Project, RecordedEvents, RecordingStatus

logger = logging.getLogger(__name__)

T = TypeVar("T")

EXPORT_PROGRESS = "export-progress"  # payload: float 0..1
EXPORT_COMPLETE = "export-complete"  # payload: output path (str)


class Subscription:
    """Handle for one push-channel listener.

    ``dispose()`` releases the listener; calling it again does nothing.
    """

    def __init__(self, release: Callable[[], None]) -> None:
        self._release: Callable[[], None] | None = release

    @property
    def disposed(self) -> bool:
        return self._release is None

    def dispose(self) -> None:
        release, self._release = self._release, None
        if release is not None:
            release()


class PushChannel:
    """Listener registry for a single engine push event.

    Engine adapters keep one per channel and call :meth:`emit` when the
    engine pushes a payload.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._listeners: Dict[object, Callable[[Any], None]] = {}

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def subscribe(self, callback: Callable[[Any], None]) -> Subscription:
        token = object()
        self._listeners[token] = callback
        return Subscription(lambda: self._listeners.pop(token, None))

    def emit(self, payload: Any) -> None:
        for callback in list(self._listeners.values()):
            try:
                callback(payload)
            except Exception:
                logger.exception("Listener on %s failed", self.name)


class Engine(Protocol):
    """Commands accepted by the recording / encoding engine.

    Every command may raise; callers wrap them with :func:`run_command`.
    """

    # system
    async def get_displays(self) -> List[DisplayInfo]: ...
    async def check_ffmpeg(self) -> bool: ...
    async def check_permissions(self) -> bool: ...
    async def get_app_version(self) -> str: ...

    # recording
    async def start_recording(self, display: DisplayInfo) -> str: ...
    async def stop_recording(self) -> Project: ...
    async def get_recording_duration(self) -> int: ...
    async def get_recording_state(self) -> RecordingStatus: ...

    # projects
    async def load_project(self, project_id: str) -> Project: ...
    async def load_events(self, project_id: str) -> RecordedEvents: ...
    async def save_project(self, project: Project) -> None: ...
    async def list_projects(self) -> List[Project]: ...
    async def delete_project(self, project_id: str) -> None: ...

    # export
    async def export_project(self, project_id: str, config: ExportConfig) -> str: ...
    async def get_video_duration(self, video_path: str) -> int: ...

    # push events
    def subscribe(self, channel: str, callback: Callable[[Any], None]) -> Subscription: ...


async def run_command(command: str, awaitable: Awaitable[T]) -> T:
    """Await an engine command, converting failures to :class:`EngineCommandError`.

    Errors that already belong to the studio taxonomy (e.g.
    :class:`~studio.errors.NotFoundError` raised by an adapter) pass
    through unchanged.
    """
    try:
        return await awaitable
    except StudioError:
        raise
    except Exception as exc:
        logger.warning("Engine command %s failed: %s", command, exc)
        raise EngineCommandError(command, str(exc) or type(exc).__name__) from exc
