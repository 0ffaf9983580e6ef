"""Background presets offered by the effects panel.

Each preset wraps a ready-made :data:`~studio.models.Background` value; picking
one replaces ``frame_style.background`` and nothing else.
"""

from dataclasses import dataclass
from typing import List, Optional

from .models import Background, GradientBackground, SolidBackground, background_to_dict


CAT_SOLID = "solid"
CAT_GRADIENT = "gradient"
CATEGORIES = [CAT_SOLID, CAT_GRADIENT]
CATEGORY_LABELS = {CAT_SOLID: "Solid", CAT_GRADIENT: "Gradient"}


@dataclass(frozen=True)
class BackgroundPreset:
    """A named background preset."""
    name: str
    background: Background

    @property
    def category(self) -> str:
        return CAT_GRADIENT if isinstance(self.background, GradientBackground) else CAT_SOLID

    def to_dict(self) -> dict:
        return {"name": self.name, "background": background_to_dict(self.background)}


def _gradient(name: str, colors, angle: float = 135.0) -> BackgroundPreset:
    return BackgroundPreset(name, GradientBackground(tuple(colors), angle))


def _solid(name: str, color: str) -> BackgroundPreset:
    return BackgroundPreset(name, SolidBackground(color))


# ── Built-in presets ────────────────────────────────────────────────

GRADIENT_PRESETS: List[BackgroundPreset] = [
    _gradient("Purple Haze", ["#667eea", "#764ba2"]),
    _gradient("Ocean",       ["#2193b0", "#6dd5ed"]),
    _gradient("Sunset",      ["#f12711", "#f5af19"]),
    _gradient("Forest",      ["#134e5e", "#71b280"]),
    _gradient("Midnight",    ["#0f0c29", "#302b63", "#24243e"]),
    _gradient("Rose",        ["#ff9a9e", "#fecfef"]),
    _gradient("Carbon",      ["#1a1a2e", "#16213e", "#0f3460"], angle=180.0),
    _gradient("Slate",       ["#334155", "#475569"]),
]

SOLID_PRESETS: List[BackgroundPreset] = [
    _solid("Pure White", "#ffffff"),
    _solid("Light Gray", "#d9d9d6"),
    _solid("Blue",       "#0078d4"),
    _solid("Purple",     "#8661c5"),
    _solid("Teal",       "#49c5b1"),
    _solid("Dark Gray",  "#454142"),
    _solid("Blue Black", "#091f2c"),
    _solid("Pure Black", "#000000"),
]

PRESETS: List[BackgroundPreset] = GRADIENT_PRESETS + SOLID_PRESETS

DEFAULT_PRESET = GRADIENT_PRESETS[0]  # "Purple Haze", the FrameStyle default


def find_preset(name: str) -> Optional[BackgroundPreset]:
    """Case-insensitive lookup by preset name."""
    key = name.strip().lower()
    return next((p for p in PRESETS if p.name.lower() == key), None)


def preset_for(background: Background) -> Optional[BackgroundPreset]:
    """The preset whose background equals *background*, if any."""
    return next((p for p in PRESETS if p.background == background), None)
