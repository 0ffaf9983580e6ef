"""Shared pytest fixtures for ScreenPlace tests."""

import asyncio
import os
from dataclasses import replace
from typing import Any, Callable, Dict, List, Optional

import pytest

from studio.engine import EXPORT_COMPLETE, EXPORT_PROGRESS, PushChannel, Subscription
from studio.models import (
    DisplayInfo,
    EventType,
    ExportConfig,
    MouseEvent,
    Project,
    RecordedEvents,
    RecordingStatus,
)
from studio.settings import StudioSettings


# ── Fake engine ─────────────────────────────────────────────────────


class FakeEngine:
    """In-memory engine that records every command.

    Put a command name in ``fail`` to make it raise ``RuntimeError``.
    Set ``export_gate`` to an ``asyncio.Event`` to hold ``export_project``
    open until the test releases it.
    """

    def __init__(self) -> None:
        self.calls: List[tuple] = []
        self.fail: set = set()
        self.displays: List[DisplayInfo] = []
        self.projects: Dict[str, Project] = {}
        self.events: Dict[str, RecordedEvents] = {}
        self.saved: List[Project] = []
        self.deleted: List[str] = []
        self.duration_ms = 0
        self.status = RecordingStatus()
        self.next_project: Optional[Project] = None
        self.has_ffmpeg = True
        self.export_gate: Optional[asyncio.Event] = None
        self.channels = {
            EXPORT_PROGRESS: PushChannel(EXPORT_PROGRESS),
            EXPORT_COMPLETE: PushChannel(EXPORT_COMPLETE),
        }

    def _call(self, name: str, *args: Any) -> None:
        self.calls.append((name,) + args)
        if name in self.fail:
            raise RuntimeError(f"{name} failed")

    def called(self, name: str) -> int:
        return sum(1 for c in self.calls if c[0] == name)

    # system
    async def get_displays(self) -> List[DisplayInfo]:
        self._call("get_displays")
        return list(self.displays)

    async def check_ffmpeg(self) -> bool:
        self._call("check_ffmpeg")
        return self.has_ffmpeg

    async def check_permissions(self) -> bool:
        self._call("check_permissions")
        return True

    async def get_app_version(self) -> str:
        self._call("get_app_version")
        return "0.1.0"

    # recording
    async def start_recording(self, display: DisplayInfo) -> str:
        self._call("start_recording", display)
        return "proj-new"

    async def stop_recording(self) -> Project:
        self._call("stop_recording")
        return self.next_project

    async def get_recording_duration(self) -> int:
        self._call("get_recording_duration")
        return self.duration_ms

    async def get_recording_state(self) -> RecordingStatus:
        self._call("get_recording_state")
        return self.status

    # projects
    async def load_project(self, project_id: str) -> Project:
        self._call("load_project", project_id)
        return self.projects[project_id]

    async def load_events(self, project_id: str) -> RecordedEvents:
        self._call("load_events", project_id)
        return self.events[project_id]

    async def save_project(self, project: Project) -> None:
        self._call("save_project", project)
        self.saved.append(project)

    async def list_projects(self) -> List[Project]:
        self._call("list_projects")
        return list(self.projects.values())

    async def delete_project(self, project_id: str) -> None:
        self._call("delete_project", project_id)
        self.projects.pop(project_id, None)
        self.deleted.append(project_id)

    # export
    async def export_project(self, project_id: str, config: ExportConfig) -> str:
        self._call("export_project", project_id, config)
        if self.export_gate is not None:
            await self.export_gate.wait()
        return config.output_path

    async def get_video_duration(self, video_path: str) -> int:
        self._call("get_video_duration", video_path)
        return self.duration_ms

    # push events
    def subscribe(self, channel: str, callback: Callable[[Any], None]) -> Subscription:
        return self.channels[channel].subscribe(callback)

    def push(self, channel: str, payload: Any) -> None:
        self.channels[channel].emit(payload)


@pytest.fixture
def engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def fast_settings() -> StudioSettings:
    """Settings with a 5 ms duration poll."""
    return StudioSettings(poll_interval_ms=5)


# ── Displays ────────────────────────────────────────────────────────


@pytest.fixture
def displays() -> List[DisplayInfo]:
    """A secondary display listed before the primary one."""
    return [
        DisplayInfo(id=2, name="Side", width=1280, height=1024),
        DisplayInfo(id=1, name="Main", width=1920, height=1080, is_primary=True),
    ]


# ── Projects / events ───────────────────────────────────────────────


@pytest.fixture
def sample_project() -> Project:
    return Project(
        id="proj-1",
        name="Demo",
        created_at=1_700_000_000_000,
        video_path="/data/projects/proj-1/recording.mp4",
        events_path="/data/projects/proj-1/events.json",
        duration_ms=61_000,
        width=1920,
        height=1080,
        fps=30.0,
    )


@pytest.fixture
def sample_events() -> RecordedEvents:
    """Two clicks (out of order) between moves on a 1920×1080 display."""
    return RecordedEvents(
        mouse_events=(
            MouseEvent(timestamp_ms=0, x=100, y=100),
            MouseEvent(timestamp_ms=30_500, x=1440, y=810, event_type=EventType.CLICK),
            MouseEvent(timestamp_ms=1_000, x=960, y=540, event_type=EventType.CLICK),
            MouseEvent(timestamp_ms=2_000, x=200, y=300, event_type=EventType.SCROLL),
        ),
        recording_start_ms=1_700_000_000_000,
        display_width=1920,
        display_height=1080,
    )


@pytest.fixture
def loaded_engine(engine: FakeEngine, sample_project: Project,
                  sample_events: RecordedEvents, displays) -> FakeEngine:
    """Engine that knows ``sample_project`` and a newer second project."""
    engine.displays = displays
    engine.projects[sample_project.id] = sample_project
    engine.events[sample_project.id] = sample_events
    newer = replace(sample_project, id="proj-2", name="Newer", created_at=1_800_000_000_000)
    engine.projects[newer.id] = newer
    engine.events[newer.id] = RecordedEvents()
    return engine


# ── Qt ──────────────────────────────────────────────────────────────


@pytest.fixture(scope="session")
def qt_app():
    """Headless ``QGuiApplication`` for painting tests."""
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    from PySide6.QtGui import QGuiApplication

    app = QGuiApplication.instance() or QGuiApplication([])
    yield app
