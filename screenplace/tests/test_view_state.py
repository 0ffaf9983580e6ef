"""Tests for studio.view_state — navigation and display selection."""

import pytest

from studio.models import DisplayInfo
from studio.view_state import View, ViewState, can_transition, select_display


# ── select_display ──────────────────────────────────────────────────


class TestSelectDisplay:
    def test_primary_wins(self, displays) -> None:
        assert select_display(displays).id == 1

    def test_first_without_primary(self) -> None:
        ds = [DisplayInfo(5, "A", 800, 600), DisplayInfo(6, "B", 800, 600)]
        assert select_display(ds).id == 5

    def test_empty(self) -> None:
        assert select_display([]) is None


# ── Transitions ─────────────────────────────────────────────────────


class TestTransitions:
    @pytest.mark.parametrize("a, b", [
        (View.HOME, View.RECORDING),
        (View.RECORDING, View.EDITOR),
        (View.EDITOR, View.HOME),
        (View.HOME, View.EDITOR),
        (View.RECORDING, View.HOME),
    ])
    def test_allowed(self, a: View, b: View) -> None:
        assert can_transition(a, b)

    @pytest.mark.parametrize("a, b", [
        (View.EDITOR, View.RECORDING),
    ])
    def test_forbidden(self, a: View, b: View) -> None:
        assert not can_transition(a, b)

    def test_set_view_emits_once(self) -> None:
        vs = ViewState()
        seen = []
        vs.view_changed.connect(seen.append)
        vs.set_view(View.EDITOR)
        vs.set_view(View.EDITOR)
        assert seen == ["editor"]
        assert vs.view is View.EDITOR


# ── Displays ────────────────────────────────────────────────────────


class TestDisplays:
    def test_set_displays_selects_primary(self, displays) -> None:
        vs = ViewState()
        vs.set_displays(displays)
        assert vs.selected_display.id == 1
        assert vs.displays == tuple(displays)

    def test_stored_list_is_a_copy(self, displays) -> None:
        vs = ViewState()
        vs.set_displays(displays)
        displays.clear()
        assert len(vs.displays) == 2

    def test_manual_override_until_reenumeration(self, displays) -> None:
        vs = ViewState()
        vs.set_displays(displays)
        vs.set_selected_display(displays[0])
        assert vs.selected_display.id == 2
        vs.set_displays(displays)
        assert vs.selected_display.id == 1

    def test_override_must_be_listed(self, displays) -> None:
        vs = ViewState()
        vs.set_displays(displays)
        with pytest.raises(ValueError):
            vs.set_selected_display(DisplayInfo(99, "Ghost", 1, 1))
        assert vs.selected_display.id == 1

    def test_clear_selection(self, displays) -> None:
        vs = ViewState()
        vs.set_displays(displays)
        vs.set_selected_display(None)
        assert vs.selected_display is None

    def test_end_to_end_scenario(self) -> None:
        vs = ViewState()
        changes = []
        vs.selected_display_changed.connect(changes.append)

        vs.set_displays([
            DisplayInfo(1, "A", 1920, 1080, False),
            DisplayInfo(2, "B", 2560, 1440, True),
        ])
        assert vs.selected_display.id == 2

        vs.set_selected_display(vs.displays[0])
        assert vs.selected_display.id == 1

        vs.set_displays([])
        assert vs.selected_display is None
        assert [c.id if c else None for c in changes] == [2, 1, None]


# ── Recording status ────────────────────────────────────────────────


class TestRecordingStatus:
    def test_stop_clears_pause(self) -> None:
        vs = ViewState()
        vs.set_recording_active(True)
        vs.set_paused(True)
        vs.set_recording_active(False)
        assert vs.is_paused is False

    def test_duration_clamped(self) -> None:
        vs = ViewState()
        vs.set_duration_ms(-10)
        assert vs.duration_ms == 0

    def test_properties_are_read_only(self) -> None:
        vs = ViewState()
        with pytest.raises(AttributeError):
            vs.is_recording = True  # type: ignore[misc]
