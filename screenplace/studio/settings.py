"""User-tunable settings, persisted with ``QSettings``.

Defaults live in module constants; :func:`load_settings` overlays whatever
was stored under the ``ScreenPlace`` organisation.  Invalid stored values
are logged and replaced by the default rather than failing start-up.
"""

import logging
from dataclasses import dataclass, fields

from PySide6.QtCore import QSettings

logger = logging.getLogger(__name__)

ORGANIZATION = "ScreenPlace"
APPLICATION = "ScreenPlace"

DEFAULT_POLL_INTERVAL_MS = 100   # recording duration poll
DEFAULT_PREVIEW_WIDTH = 1920     # preview canvas width (px)
RECENT_PROJECTS_LIMIT = 5        # projects shown on the home view

# dataclass field -> QSettings key
_KEYS = {
    "poll_interval_ms": "pollIntervalMs",
    "preview_width": "previewWidth",
    "recent_projects_limit": "recentProjectsLimit",
}


@dataclass
class StudioSettings:
    poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS
    preview_width: int = DEFAULT_PREVIEW_WIDTH
    recent_projects_limit: int = RECENT_PROJECTS_LIMIT

    @property
    def poll_interval_s(self) -> float:
        return self.poll_interval_ms / 1000.0


def open_qsettings() -> QSettings:
    return QSettings(ORGANIZATION, APPLICATION)


def load_settings(qsettings: QSettings | None = None) -> StudioSettings:
    """Read settings, falling back to defaults for missing or bad values."""
    qs = qsettings if qsettings is not None else open_qsettings()
    defaults = StudioSettings()
    values = {}
    for f in fields(StudioSettings):
        default = getattr(defaults, f.name)
        raw = qs.value(_KEYS[f.name], default)
        try:
            value = type(default)(raw)
        except (TypeError, ValueError):
            logger.warning("Ignoring invalid setting %s=%r", _KEYS[f.name], raw)
            value = default
        if isinstance(value, int) and value <= 0:
            logger.warning("Ignoring non-positive setting %s=%r", _KEYS[f.name], raw)
            value = default
        values[f.name] = value
    return StudioSettings(**values)


def save_settings(settings: StudioSettings, qsettings: QSettings | None = None) -> None:
    qs = qsettings if qsettings is not None else open_qsettings()
    for f in fields(StudioSettings):
        qs.setValue(_KEYS[f.name], getattr(settings, f.name))
    qs.sync()
