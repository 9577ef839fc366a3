"""Tests for the Qt timer engine.

Covers: write-through snapshots, effect dispatch to collaborators,
swallowed collaborator failures, the ambient loop sound, the 1 s
driver, startup restore/rehydration, and idle pause/resume.
"""

from dataclasses import replace

import pytest

from pomodoro.settings import Settings
from pomodoro.timer.engine import TimerEngine
from pomodoro.timer.state import TimerMode, TimerState, initial_state

from helpers import (
    BrokenNotifier,
    BrokenSound,
    BrokenStore,
    FakeSnapshotStore,
    SignalCollector,
    expire,
)


# ═══════════════════════════════════════════════════════════════════════════
#  BASICS
# ═══════════════════════════════════════════════════════════════════════════


class TestBasics:

    def test_initial_state(self, engine):
        assert engine.mode is TimerMode.WORK
        assert engine.time_left == 1500
        assert engine.is_active is False
        assert engine.sessions_completed == 0
        assert engine.driver_running is False

    def test_toggle_starts_driver(self, engine):
        engine.toggle()
        assert engine.is_active is True
        assert engine.driver_running is True

    def test_pause_stops_driver(self, engine):
        engine.toggle()
        engine.toggle()
        assert engine.driver_running is False

    def test_tick_decrements(self, engine, clock):
        engine.start()
        clock.advance(1)
        engine.tick()
        assert engine.time_left == 1499
        assert engine.state.last_tick_timestamp == clock()

    def test_tick_while_paused_is_noop(self, engine, snapshot_store):
        before = engine.state
        engine.tick()
        assert engine.state == before
        assert snapshot_store.saved == []

    def test_extend_default(self, engine):
        engine.extend()
        assert engine.time_left == 1560

    def test_set_custom_time(self, engine):
        engine.set_custom_time(TimerMode.WORK, 45)
        assert engine.time_left == 2700
        assert engine.settings.work == 45

    def test_update_settings_pauses(self, engine):
        engine.start()
        engine.update_settings(Settings(work=50))
        assert engine.time_left == 3000
        assert engine.is_active is False
        assert engine.driver_running is False


# ═══════════════════════════════════════════════════════════════════════════
#  SIGNALS & PERSISTENCE
# ═══════════════════════════════════════════════════════════════════════════


class TestSignalsAndPersistence:

    def test_state_changed_emitted(self, engine):
        states = SignalCollector()
        engine.state_changed.connect(states)
        engine.toggle()
        assert len(states) == 1
        assert states.last == engine.state

    def test_noop_emits_nothing(self, engine):
        states = SignalCollector()
        engine.state_changed.connect(states)
        engine.stop()
        assert len(states) == 0

    def test_remaining_changed_on_tick(self, engine):
        remaining = SignalCollector()
        engine.remaining_changed.connect(remaining)
        engine.start()
        engine.tick()
        assert remaining.last == 1499

    def test_every_change_is_persisted(self, engine, snapshot_store):
        engine.toggle()
        engine.tick()
        engine.extend(30)
        assert len(snapshot_store.saved) == 3
        assert snapshot_store.last == engine.state

    def test_noop_is_not_persisted(self, engine, snapshot_store):
        engine.stop()
        assert snapshot_store.saved == []


# ═══════════════════════════════════════════════════════════════════════════
#  SESSION COMPLETION
# ═══════════════════════════════════════════════════════════════════════════


class TestCompletion:

    def test_natural_expiry_dispatches_effects(self, engine, sound, notifier, session_store):
        expire(engine)
        assert engine.mode is TimerMode.SHORT_BREAK
        assert engine.sessions_completed == 1
        assert session_store.saved == [(TimerMode.WORK, 1500)]
        assert sound.one_shots == ["bell"]
        assert len(notifier.sent) == 1
        assert notifier.sent[0].title == "Pomodoro"

    def test_session_completed_signal(self, engine):
        completed = SignalCollector()
        engine.session_completed.connect(completed)
        expire(engine)
        assert completed.items == [TimerMode.WORK]

    def test_skip_records_nothing(self, engine, session_store, notifier):
        completed = SignalCollector()
        engine.session_completed.connect(completed)
        engine.skip()
        assert engine.mode is TimerMode.SHORT_BREAK
        assert session_store.saved == []
        assert notifier.sent == []
        assert len(completed) == 0

    def test_driver_stops_when_next_mode_not_auto_started(self, engine):
        expire(engine)
        assert engine.is_active is False
        assert engine.driver_running is False

    def test_driver_keeps_running_with_auto_start(self, engine):
        engine.update_settings(Settings(auto_start_breaks=True))
        expire(engine)
        assert engine.is_active is True
        assert engine.driver_running is True


# ═══════════════════════════════════════════════════════════════════════════
#  COLLABORATOR FAILURES
# ═══════════════════════════════════════════════════════════════════════════


class TestFailuresAreSwallowed:

    @pytest.fixture
    def fragile(self, qapp, clock):
        return TimerEngine(
            sound=BrokenSound(),
            notifier=BrokenNotifier(),
            session_store=BrokenStore(),
            snapshot_store=BrokenStore(),
            clock=clock,
        )

    def test_transition_survives(self, fragile):
        expire(fragile)
        assert fragile.mode is TimerMode.SHORT_BREAK
        assert fragile.sessions_completed == 1

    def test_toggle_survives(self, fragile):
        fragile.toggle()
        assert fragile.is_active is True

    def test_failures_are_logged(self, fragile, caplog):
        with caplog.at_level("WARNING", logger="pomodoro.engine"):
            expire(fragile)
        assert "failed" in caplog.text or "Could not" in caplog.text

    def test_restore_with_unreadable_store_uses_defaults(self, fragile):
        state = fragile.restore()
        assert state == initial_state()


# ═══════════════════════════════════════════════════════════════════════════
#  AMBIENT SOUND
# ═══════════════════════════════════════════════════════════════════════════


class TestAmbientSound:

    def test_ticking_loop_while_working(self, engine, sound):
        engine.update_settings(Settings(enable_ticking=True, ticking_sound="timer"))
        engine.toggle()
        assert sound.loops == ["timer"]

    def test_ticks_do_not_restart_loop(self, engine, sound):
        engine.update_settings(Settings(enable_ticking=True))
        engine.toggle()
        for _ in range(5):
            engine.tick()
        assert sound.loops == ["clock"]

    def test_ticking_sound_none_is_silent(self, engine, sound):
        engine.update_settings(Settings(enable_ticking=True, ticking_sound="none"))
        engine.toggle()
        assert sound.loops == []

    def test_pause_stops_loop(self, engine, sound):
        engine.update_settings(Settings(enable_ticking=True))
        engine.toggle()
        sound.calls.clear()
        engine.toggle()
        assert ("stop",) in sound.calls

    def test_birds_during_active_break(self, engine, sound):
        engine.set_mode(TimerMode.SHORT_BREAK)
        engine.toggle()
        assert sound.loops == ["birds"]

    def test_no_birds_when_disabled(self, engine, sound):
        engine.update_settings(Settings(enable_break_sound=False))
        engine.set_mode(TimerMode.LONG_BREAK)
        engine.toggle()
        assert sound.loops == []

    def test_bell_then_birds_on_auto_started_break(self, engine, sound):
        engine.update_settings(Settings(auto_start_breaks=True))
        sound.calls.clear()
        expire(engine)
        assert sound.one_shots == ["bell"]
        assert sound.loops == ["birds"]

    @pytest.mark.parametrize("settings", [
        Settings(),
        Settings(enable_ticking=True),
        Settings(auto_start_breaks=True, enable_break_sound=False),
    ])
    def test_completion_bell_is_not_cut_off(self, engine, sound, settings):
        engine.update_settings(settings)
        engine.toggle()
        sound.calls.clear()
        expire(engine)
        after_bell = sound.calls[sound.calls.index(("play", "bell")) + 1:]
        assert ("stop",) not in after_bell

    def test_loop_silenced_after_unattended_completion(self, engine, sound):
        engine.update_settings(Settings(enable_ticking=True))
        engine.toggle()
        sound.calls.clear()
        expire(engine)
        assert sound.calls[-1] == ("stop_loop",)


# ═══════════════════════════════════════════════════════════════════════════
#  RESTORE
# ═══════════════════════════════════════════════════════════════════════════


class TestRestore:

    def _engine(self, clock, snapshot, **kw):
        return TimerEngine(snapshot_store=FakeSnapshotStore(snapshot), clock=clock, **kw)

    def test_missing_snapshot_uses_defaults(self, qapp, clock):
        engine = self._engine(clock, None)
        assert engine.restore() == initial_state()

    def test_paused_snapshot_restored_verbatim(self, qapp, clock):
        snap = replace(initial_state(), time_left=99, sessions_completed=3)
        engine = self._engine(clock, snap)
        assert engine.restore() == snap

    def test_running_snapshot_catches_up(self, qapp, clock):
        snap = replace(
            initial_state(), is_active=True, time_left=600,
            last_tick_timestamp=clock() - 60_000,
        )
        engine = self._engine(clock, snap)
        state = engine.restore()
        assert state.time_left == 540
        assert state.is_active is True
        assert engine.driver_running is True

    def test_expired_snapshot_records_session(self, qapp, clock, session_store):
        snap = replace(
            initial_state(), is_active=True, time_left=10,
            last_tick_timestamp=clock() - 20_000,
        )
        engine = self._engine(clock, snap, session_store=session_store)
        completed = SignalCollector()
        engine.session_completed.connect(completed)
        state = engine.restore()
        assert state.mode is TimerMode.SHORT_BREAK
        assert state.is_active is False
        assert session_store.saved == [(TimerMode.WORK, 1500)]
        assert completed.items == [TimerMode.WORK]

    def test_restore_persists_result(self, qapp, clock):
        store = FakeSnapshotStore(replace(initial_state(), time_left=5))
        engine = TimerEngine(snapshot_store=store, clock=clock)
        engine.restore()
        assert store.last == engine.state

    def test_restore_resumes_ambient_loop(self, qapp, clock, sound):
        snap = replace(
            initial_state(Settings(enable_ticking=True)),
            is_active=True, time_left=600, last_tick_timestamp=clock(),
        )
        engine = self._engine(clock, snap, sound=sound)
        engine.restore()
        assert sound.loops == ["clock"]

    def test_shutdown_stops_everything(self, engine, sound):
        engine.toggle()
        engine.shutdown()
        assert engine.driver_running is False
        assert sound.calls[-1] == ("stop",)


# ═══════════════════════════════════════════════════════════════════════════
#  IDLE
# ═══════════════════════════════════════════════════════════════════════════


class TestIdle:

    def test_idle_pauses_running_timer(self, engine):
        engine.start()
        engine.idle_detected()
        assert engine.is_active is False
        assert engine.paused_by_idle is True

    def test_return_resumes_idle_pause(self, engine):
        engine.start()
        engine.idle_detected()
        engine.idle_cleared()
        assert engine.is_active is True
        assert engine.paused_by_idle is False

    def test_idle_while_paused_does_nothing(self, engine):
        engine.idle_detected()
        assert engine.paused_by_idle is False
        engine.idle_cleared()
        assert engine.is_active is False

    def test_manual_pause_is_not_overridden(self, engine):
        engine.start()
        engine.idle_detected()
        engine.start()
        engine.stop()  # user paused by hand while away
        engine.idle_cleared()
        assert engine.is_active is False

    def test_reset_forgets_idle_pause(self, engine):
        engine.start()
        engine.idle_detected()
        engine.reset()
        engine.idle_cleared()
        assert engine.is_active is False

    def test_extend_keeps_idle_marker(self, engine):
        engine.start()
        engine.idle_detected()
        engine.extend(30)
        assert engine.paused_by_idle is True
