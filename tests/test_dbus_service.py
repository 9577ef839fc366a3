"""Tests for the D-Bus adaptor, exercised without a session bus."""

from __future__ import annotations

import pytest

from pomodoro.dbus_service import TimerAdaptor, _unwrap
from pomodoro.timer.state import TimerMode


@pytest.fixture
def adaptor(engine):
    return TimerAdaptor(engine)


class TestMethods:

    def test_toggle(self, adaptor, engine):
        adaptor.Toggle()
        assert engine.is_active
        adaptor.Toggle()
        assert not engine.is_active

    def test_start_and_stop(self, adaptor, engine):
        adaptor.Start()
        adaptor.Start()
        assert engine.is_active
        adaptor.Stop()
        assert not engine.is_active

    def test_skip(self, adaptor, engine):
        adaptor.Skip()
        assert engine.mode is TimerMode.SHORT_BREAK

    def test_reset(self, adaptor, engine):
        adaptor.Extend(120)
        adaptor.Reset()
        assert engine.time_left == 25 * 60

    def test_extend(self, adaptor, engine):
        adaptor.Extend(60)
        assert engine.time_left == 26 * 60

    def test_logged(self, adaptor, caplog):
        caplog.set_level("INFO", logger="pomodoro.dbus")
        adaptor.Skip()
        assert "Remote command: skip" in caplog.text


class TestProperties:

    def test_initial(self, adaptor):
        assert adaptor.State == "work"
        assert adaptor.TimeLeft == 25 * 60
        assert adaptor.IsActive is False
        assert adaptor.SessionsCompleted == 0

    def test_follow_engine(self, adaptor, engine):
        engine.skip()
        engine.toggle()
        assert adaptor.State == "shortBreak"
        assert adaptor.TimeLeft == 5 * 60
        assert adaptor.IsActive is True
        assert adaptor.SessionsCompleted == 1


class TestUnwrap:

    def test_plain_value(self):
        assert _unwrap(42) == 42

    def test_variant_wrapper(self):
        class Wrapped:
            def variant(self):
                return "longBreak"

        assert _unwrap(Wrapped()) == "longBreak"
