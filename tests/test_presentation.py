"""Tests for the status line and the presentation hints."""

from dataclasses import replace

import pytest

from pomodoro.presentation import TimerStatus, format_time, presentation_hints
from pomodoro.settings import Settings
from pomodoro.timer.state import TimerMode, initial_state


@pytest.mark.parametrize("seconds, text", [
    (0, "00:00"),
    (59, "00:59"),
    (60, "01:00"),
    (25 * 60, "25:00"),
    (90 * 60, "90:00"),
    (-5, "00:00"),
])
def test_format_time(seconds, text):
    assert format_time(seconds) == text


class TestSummary:

    def test_running(self):
        status = TimerStatus(TimerMode.WORK, 24 * 60 + 13, True, 3)
        assert status.summary == "Focus | Running | 24:13 | Sessions: 3"

    def test_paused_break(self):
        status = TimerStatus(TimerMode.LONG_BREAK, 900, False, 4)
        assert status.summary == "Long Break | Paused | 15:00 | Sessions: 4"


class TestHints:

    def strict(self, **changes):
        state = initial_state(Settings(enable_strict_break=True))
        return replace(state, **changes)

    def test_fullscreen_on_active_break(self):
        hints = presentation_hints(self.strict(mode=TimerMode.SHORT_BREAK, is_active=True))
        assert hints.fullscreen is True

    def test_no_fullscreen_when_paused(self):
        hints = presentation_hints(self.strict(mode=TimerMode.SHORT_BREAK))
        assert hints.fullscreen is False

    def test_no_fullscreen_during_work(self):
        hints = presentation_hints(self.strict(is_active=True))
        assert hints.fullscreen is False

    def test_no_fullscreen_without_setting(self):
        state = replace(initial_state(), mode=TimerMode.LONG_BREAK, is_active=True)
        assert presentation_hints(state).fullscreen is False

    def test_status_mirrors_state(self):
        state = replace(initial_state(), time_left=42, sessions_completed=2)
        hints = presentation_hints(state)
        assert hints.tray_mode is TimerMode.WORK
        assert hints.status == TimerStatus(TimerMode.WORK, 42, False, 2)

    @pytest.mark.parametrize("enabled", [True, False])
    def test_idle_detection_follows_setting(self, enabled):
        state = initial_state(Settings(pause_when_idle=enabled))
        assert presentation_hints(state).idle_detection is enabled
