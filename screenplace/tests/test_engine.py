"""Tests for studio.engine — subscriptions, push channels, command wrapper."""

import pytest

from studio.engine import PushChannel, Subscription, run_command
from studio.errors import EngineCommandError, NoDisplaySelectedError, NotFoundError


class TestSubscription:
    def test_dispose_once(self) -> None:
        released = []
        sub = Subscription(lambda: released.append(1))
        sub.dispose()
        sub.dispose()
        assert released == [1]
        assert sub.disposed


class TestPushChannel:
    def test_emit_reaches_listeners(self) -> None:
        ch = PushChannel("export-progress")
        seen = []
        ch.subscribe(seen.append)
        ch.emit(0.25)
        assert seen == [0.25]

    def test_disposed_listener_not_called(self) -> None:
        ch = PushChannel("export-progress")
        seen = []
        sub = ch.subscribe(seen.append)
        sub.dispose()
        ch.emit(0.25)
        assert seen == []
        assert ch.listener_count == 0

    def test_same_callback_twice(self) -> None:
        ch = PushChannel("export-complete")
        seen = []
        a = ch.subscribe(seen.append)
        ch.subscribe(seen.append)
        a.dispose()
        ch.emit("x")
        assert seen == ["x"]

    def test_failing_listener_does_not_block_others(self) -> None:
        ch = PushChannel("export-complete")
        seen = []

        def boom(_payload) -> None:
            raise RuntimeError("listener bug")

        ch.subscribe(boom)
        ch.subscribe(seen.append)
        ch.emit("done")
        assert seen == ["done"]


class TestRunCommand:
    @pytest.mark.asyncio
    async def test_passes_result(self) -> None:
        async def ok() -> int:
            return 7

        assert await run_command("ok", ok()) == 7

    @pytest.mark.asyncio
    async def test_wraps_failures(self) -> None:
        async def bad() -> None:
            raise OSError("disk full")

        with pytest.raises(EngineCommandError) as info:
            await run_command("save_project", bad())
        assert info.value.command == "save_project"
        assert info.value.message == "disk full"
        assert isinstance(info.value.__cause__, OSError)
        assert str(info.value) == "save_project: disk full"

    @pytest.mark.asyncio
    async def test_empty_message_uses_type(self) -> None:
        async def bad() -> None:
            raise KeyError()

        with pytest.raises(EngineCommandError) as info:
            await run_command("load_project", bad())
        assert info.value.message == "KeyError"

    @pytest.mark.asyncio
    async def test_studio_errors_pass_through(self) -> None:
        async def missing() -> None:
            raise NotFoundError("load_project", "gone")

        with pytest.raises(NotFoundError):
            await run_command("load_project", missing())

        async def no_display() -> None:
            raise NoDisplaySelectedError()

        with pytest.raises(NoDisplaySelectedError):
            await run_command("start_recording", no_display())
