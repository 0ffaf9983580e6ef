"""Exceptions raised by the editor coordination layer.

All of them are recoverable at the session level; none should take the
process down.
"""


class StudioError(Exception):
    """Base class for every error raised by :mod:`studio`."""


class NoDisplaySelectedError(StudioError):
    def __init__(self, message: str = "No display selected") -> None:
        super().__init__(message)


class NoProjectLoadedError(StudioError):
    def __init__(self, message: str = "No project loaded") -> None:
        super().__init__(message)


class RecordingInProgressError(StudioError):
    def __init__(self, message: str = "A recording is already in progress") -> None:
        super().__init__(message)


class ExportInProgressError(StudioError):
    def __init__(self, message: str = "An export is already in progress") -> None:
        super().__init__(message)


class EngineCommandError(StudioError):
    """A command sent to the recording engine failed.

    ``message`` is human-readable and safe to show in the UI.
    """

    def __init__(self, command: str, message: str) -> None:
        super().__init__(f"{command}: {message}")
        self.command = command
        self.message = message


class NotFoundError(EngineCommandError):
    """The engine has no project (or event log) with the requested id."""
