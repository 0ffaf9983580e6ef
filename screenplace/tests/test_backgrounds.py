"""Tests for studio.backgrounds — preset definitions."""

from studio.backgrounds import (
    CAT_GRADIENT,
    CAT_SOLID,
    DEFAULT_PRESET,
    GRADIENT_PRESETS,
    PRESETS,
    SOLID_PRESETS,
    find_preset,
    preset_for,
)
from studio.models import FrameStyle, GradientBackground


class TestPresets:
    def test_unique_names(self) -> None:
        names = [p.name for p in PRESETS]
        assert len(names) == len(set(names))

    def test_categories(self) -> None:
        assert all(p.category == CAT_GRADIENT for p in GRADIENT_PRESETS)
        assert all(p.category == CAT_SOLID for p in SOLID_PRESETS)

    def test_default_matches_frame_style(self) -> None:
        assert DEFAULT_PRESET.background == FrameStyle().background
        assert preset_for(FrameStyle().background) is DEFAULT_PRESET

    def test_carbon_is_vertical(self) -> None:
        carbon = find_preset("carbon")
        assert carbon.background == GradientBackground(("#1a1a2e", "#16213e", "#0f3460"), 180.0)

    def test_unknown(self) -> None:
        assert find_preset("Nope") is None

    def test_to_dict(self) -> None:
        d = find_preset("Ocean").to_dict()
        assert d == {
            "name": "Ocean",
            "background": {"Gradient": {"colors": ["#2193b0", "#6dd5ed"], "angle": 135.0}},
        }
