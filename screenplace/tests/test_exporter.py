"""Tests for studio.exporter — the export state machine and push listeners."""

import asyncio
from dataclasses import replace

import pytest

from studio.editor_state import EditorState
from studio.engine import EXPORT_COMPLETE, EXPORT_PROGRESS
from studio.errors import EngineCommandError, ExportInProgressError, NoProjectLoadedError
from studio.exporter import ExportCoordinator, default_export_path
from studio.models import ExportConfig, ExportFormat
from studio.view_state import ViewState


def _exporter(engine, project=None) -> tuple:
    vs, es = ViewState(), EditorState()
    if project is not None:
        vs.set_current_project(project)
        es.load_project(project, None)
    ex = ExportCoordinator(engine, vs, es)
    ex.mount()
    return vs, es, ex


class TestDefaultPath:
    def test_next_to_recording(self) -> None:
        cfg = ExportConfig(format=ExportFormat.GIF)
        path = default_export_path("/data/projects/p1/recording.mp4", cfg)
        assert path.replace("\\", "/") == "/data/projects/p1/export.gif"


class TestStartExport:
    @pytest.mark.asyncio
    async def test_no_project_never_calls_engine(self, engine) -> None:
        _, es, ex = _exporter(engine)
        with pytest.raises(NoProjectLoadedError):
            await ex.start_export()
        assert engine.called("export_project") == 0
        assert es.is_exporting is False

    @pytest.mark.asyncio
    async def test_gif_path_derived(self, engine, sample_project) -> None:
        _, es, ex = _exporter(engine, sample_project)
        es.update_export_config(format=ExportFormat.GIF)

        path = await ex.start_export()

        _, project_id, config = engine.calls[-1]
        assert project_id == "proj-1"
        assert config.output_path.replace("\\", "/") == "/data/projects/proj-1/export.gif"
        assert path == config.output_path
        # The derived path is not written back into the editor.
        assert es.export_config.output_path == ""
        assert es.is_exporting is False
        assert ex.last_output_path == path

    @pytest.mark.asyncio
    async def test_explicit_path_kept(self, engine, sample_project) -> None:
        _, es, ex = _exporter(engine, sample_project)
        es.update_export_config(output_path="/tmp/out.mp4")
        assert await ex.start_export() == "/tmp/out.mp4"

    @pytest.mark.asyncio
    async def test_failure_resets_and_records(self, engine, sample_project) -> None:
        engine.fail.add("export_project")
        _, es, ex = _exporter(engine, sample_project)
        with pytest.raises(EngineCommandError):
            await ex.start_export()
        assert es.is_exporting is False
        assert ex.last_error is not None
        assert ex.last_error.command == "export_project"

    @pytest.mark.asyncio
    async def test_one_export_at_a_time(self, engine, sample_project) -> None:
        engine.export_gate = asyncio.Event()
        _, es, ex = _exporter(engine, sample_project)
        first = asyncio.ensure_future(ex.start_export())
        await asyncio.sleep(0)
        assert es.is_exporting is True

        with pytest.raises(ExportInProgressError):
            await ex.start_export()

        engine.export_gate.set()
        await first
        assert engine.called("export_project") == 1

    @pytest.mark.asyncio
    async def test_complete_push_does_not_admit_second_export(self, engine, sample_project) -> None:
        engine.export_gate = asyncio.Event()
        _, es, ex = _exporter(engine, sample_project)
        first = asyncio.ensure_future(ex.start_export())
        await asyncio.sleep(0)

        engine.push(EXPORT_COMPLETE, "/out/export.mp4")
        assert es.is_exporting is False
        assert ex.in_flight is True
        with pytest.raises(ExportInProgressError):
            await ex.start_export()

        engine.export_gate.set()
        await first
        assert ex.in_flight is False
        assert engine.called("export_project") == 1

    @pytest.mark.asyncio
    async def test_result_after_session_end_is_dropped(self, engine, sample_project) -> None:
        engine.export_gate = asyncio.Event()
        _, es, ex = _exporter(engine, sample_project)
        first = asyncio.ensure_future(ex.start_export())
        await asyncio.sleep(0)

        ex.teardown()
        es.reset()
        engine.export_gate.set()
        path = await first

        assert path.replace("\\", "/").endswith("proj-1/export.mp4")
        assert es.is_exporting is False
        assert es.export_progress == 0.0
        assert ex.last_output_path is None
        assert ex.in_flight is False


class TestProgress:
    @pytest.mark.asyncio
    async def test_progress_bounds_and_completion(self, engine, sample_project) -> None:
        engine.export_gate = asyncio.Event()
        _, es, ex = _exporter(engine, sample_project)
        task = asyncio.ensure_future(ex.start_export())
        await asyncio.sleep(0)

        engine.push(EXPORT_PROGRESS, 0.4)
        assert es.export_progress == pytest.approx(0.4)
        engine.push(EXPORT_PROGRESS, 1.7)
        assert es.export_progress == 1.0
        engine.push(EXPORT_PROGRESS, -3)
        assert es.export_progress == 0.0

        engine.push(EXPORT_COMPLETE, "/out/export.mp4")
        assert es.is_exporting is False
        assert es.export_progress == 1.0

        # Late progress cannot undo completion.
        engine.push(EXPORT_PROGRESS, 0.2)
        assert es.export_progress == 1.0
        assert es.is_exporting is False

        engine.export_gate.set()
        await task

    def test_progress_ignored_when_idle(self, engine, sample_project) -> None:
        _, es, _ = _exporter(engine, sample_project)
        engine.push(EXPORT_PROGRESS, 0.5)
        assert es.export_progress == 0.0

    def test_malformed_progress(self, engine, sample_project) -> None:
        _, es, _ = _exporter(engine, sample_project)
        es.set_exporting(True)
        engine.push(EXPORT_PROGRESS, "half")
        assert es.export_progress == 0.0


class TestSubscriptions:
    def test_mount_twice_keeps_one_handle_per_channel(self, engine) -> None:
        _, _, ex = _exporter(engine)
        ex.mount()
        assert engine.channels[EXPORT_PROGRESS].listener_count == 1
        assert engine.channels[EXPORT_COMPLETE].listener_count == 1

    def test_teardown_idempotent(self, engine) -> None:
        _, _, ex = _exporter(engine)
        ex.teardown()
        ex.teardown()
        assert not ex.is_mounted
        assert engine.channels[EXPORT_PROGRESS].listener_count == 0
        assert engine.channels[EXPORT_COMPLETE].listener_count == 0

    def test_events_after_teardown_ignored(self, engine, sample_project) -> None:
        _, es, ex = _exporter(engine, sample_project)
        es.set_exporting(True)
        ex.teardown()
        engine.push(EXPORT_COMPLETE, "/x.mp4")
        assert es.is_exporting is True


class TestEffectiveConfig:
    def test_mp4_default(self, engine, sample_project) -> None:
        _, es, ex = _exporter(engine, sample_project)
        cfg = ex.effective_config(replace(sample_project, video_path="/v/recording.mp4"))
        assert cfg.output_path.replace("\\", "/") == "/v/export.mp4"
        assert cfg.format is es.export_config.format
