"""Qt timer engine: owns the one live :class:`TimerState`.

The engine is the only thing allowed to replace the state.  Each public
method runs the matching pure function from :mod:`.machine` under one
lock, then:

1. stores the new state and writes the snapshot through,
2. executes the requested effects (sound, session record,
   notification) fire-and-forget, logging any failure,
3. re-syncs the ambient loop sound when ``(is_active, mode, settings)``
   changed,
4. starts or stops the 1 s ``QTimer`` that drives :meth:`tick`,
5. emits Qt signals so the UI, tray and D-Bus status can follow.

Collaborators are duck-typed and optional::

    sound           .play(name) .play_loop(name) .stop_loop() .stop()
    notifier        .notify(SendNotification)
    session_store   .save(mode, elapsed_seconds)
    snapshot_store  .save(state) .load() -> TimerState | None

Without them the engine is an in-memory state machine, which is what
most tests use.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable, Optional

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from ..settings import Settings
from . import machine
from .effects import (
    Effect,
    PlaySound,
    PlaySoundLoop,
    SaveSession,
    SendNotification,
    StopSound,
    ambient_key,
    ambient_sound,
)
from .machine import DEFAULT_EXTEND_SECONDS, TimerUpdate
from .state import TimerMode, TimerState, initial_state


def _wall_clock_ms() -> int:
    return int(time.time() * 1000)


class TimerEngine(QObject):
    """Single owner of the timer state, driven by a 1 s ``QTimer``.

    Signals
    -------
    state_changed(state: TimerState)
        Emitted after every operation that changed the state.
    remaining_changed(seconds: int)
        Emitted whenever ``time_left`` changed.
    session_completed(mode: TimerMode)
        Emitted when a countdown expired naturally (live or discovered
        on restore); carries the mode that ended.
    """

    state_changed = pyqtSignal(object)
    remaining_changed = pyqtSignal(int)
    session_completed = pyqtSignal(object)

    TICK_INTERVAL_MS = 1000

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        state: TimerState | None = None,
        sound: Any = None,
        notifier: Any = None,
        session_store: Any = None,
        snapshot_store: Any = None,
        clock: Callable[[], int] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        super().__init__(parent)

        self._state: TimerState = state or initial_state()
        self._lock = threading.RLock()
        self._logger = logger or logging.getLogger("pomodoro.engine")
        self._clock = clock or _wall_clock_ms

        # ── collaborators ─────────────────────────────────────────────
        self._sound = sound
        self._notifier = notifier
        self._session_store = session_store
        self._snapshot_store = snapshot_store

        # ── bookkeeping outside the persisted state ───────────────────
        self._paused_by_idle: bool = False
        self._ambient: Optional[tuple] = ambient_key(self._state)

        # ── 1 s driver ────────────────────────────────────────────────
        self._qt_timer = QTimer(self)
        self._qt_timer.setInterval(self.TICK_INTERVAL_MS)
        self._qt_timer.timeout.connect(self.tick)
        self._sync_driver()

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def state(self) -> TimerState:
        with self._lock:
            return self._state

    @property
    def mode(self) -> TimerMode:
        return self.state.mode

    @property
    def time_left(self) -> int:
        return self.state.time_left

    @property
    def is_active(self) -> bool:
        return self.state.is_active

    @property
    def sessions_completed(self) -> int:
        return self.state.sessions_completed

    @property
    def settings(self) -> Settings:
        return self.state.settings

    @property
    def paused_by_idle(self) -> bool:
        return self._paused_by_idle

    @property
    def driver_running(self) -> bool:
        """Whether the 1 s ``QTimer`` is currently firing."""
        return self._qt_timer.isActive()

    # ══════════════════════════════════════════════════════════════════
    #  OPERATIONS
    # ══════════════════════════════════════════════════════════════════

    def tick(self) -> TimerState:
        """Advance one second.  Called by the driver, nothing else."""
        return self._run("tick", lambda s: machine.tick(s, self._clock()))

    def toggle(self) -> TimerState:
        self._paused_by_idle = False
        return self._run("toggle", lambda s: machine.toggle(s, self._clock()))

    def start(self) -> TimerState:
        self._paused_by_idle = False
        return self._run("start", lambda s: machine.start(s, self._clock()))

    def stop(self) -> TimerState:
        self._paused_by_idle = False
        return self._run("stop", machine.stop)

    def reset(self) -> TimerState:
        self._paused_by_idle = False
        return self._run("reset", machine.reset)

    def skip(self) -> TimerState:
        self._paused_by_idle = False
        return self._run("skip", lambda s: machine.skip(s, self._clock()))

    def extend(self, seconds: int = DEFAULT_EXTEND_SECONDS) -> TimerState:
        return self._run("extend", lambda s: machine.extend(s, seconds))

    def set_mode(self, mode: TimerMode) -> TimerState:
        self._paused_by_idle = False
        return self._run("set_mode", lambda s: machine.set_mode(s, mode, self._clock()))

    def set_custom_time(self, mode: TimerMode, minutes: Any) -> TimerState:
        return self._run(
            "set_custom_time",
            lambda s: machine.set_custom_time(s, mode, minutes),
        )

    def update_settings(self, settings: Settings) -> TimerState:
        self._paused_by_idle = False
        return self._run(
            "update_settings", lambda s: machine.update_settings(s, settings),
        )

    # ── idle detection ────────────────────────────────────────────────

    def idle_detected(self) -> TimerState:
        """Pause for inactivity, remembering that idle caused it."""
        with self._lock:
            if not self._state.is_active:
                return self._state
            state = self._run("idle_detected", machine.stop)
            self._paused_by_idle = True
            return state

    def idle_cleared(self) -> TimerState:
        """Resume, but only if the last pause came from idle detection."""
        with self._lock:
            if not self._paused_by_idle or self._state.is_active:
                self._paused_by_idle = False
                return self._state
            self._paused_by_idle = False
            return self._run(
                "idle_cleared", lambda s: machine.start(s, self._clock()),
            )

    # ── startup ───────────────────────────────────────────────────────

    def restore(self) -> TimerState:
        """Load the persisted snapshot and reconcile it with the clock.

        A missing or unreadable snapshot falls back to defaults.
        """
        snapshot: Optional[TimerState] = None
        if self._snapshot_store is not None:
            try:
                snapshot = self._snapshot_store.load()
            except Exception:
                self._logger.warning(
                    "Could not load timer snapshot; using defaults",
                    exc_info=True,
                )
        base = snapshot or initial_state()
        self._ambient = None  # force the loop sound to re-sync
        state = self._run(
            "restore",
            lambda _s: machine.rehydrate(base, self._clock()),
            force=True,
        )
        self._logger.info(
            "Timer restored: mode=%s time_left=%ss active=%s sessions=%d",
            state.mode.value,
            state.time_left,
            state.is_active,
            state.sessions_completed,
        )
        return state

    def shutdown(self) -> None:
        """Stop the driver and any sound; the snapshot is already on disk."""
        self._qt_timer.stop()
        self._execute(StopSound())

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL
    # ══════════════════════════════════════════════════════════════════

    def _run(
        self,
        action: str,
        operation: Callable[[TimerState], TimerUpdate],
        *,
        force: bool = False,
    ) -> TimerState:
        with self._lock:
            previous = self._state
            update = operation(previous)
            new_state = update.state
            self._state = new_state
            changed = force or new_state != previous

            if changed:
                self._persist(new_state)
            for effect in update.effects:
                self._execute(effect)
            self._sync_ambient(new_state)
            self._sync_driver()

        if changed and action != "tick":
            self._logger.debug(
                "%s: mode=%s time_left=%ss active=%s sessions=%d",
                action,
                new_state.mode.value,
                new_state.time_left,
                new_state.is_active,
                new_state.sessions_completed,
            )
        if new_state.mode is not previous.mode and not force:
            self._logger.info(
                "Mode %s -> %s (%s)",
                previous.mode.value, new_state.mode.value, action,
            )

        if changed:
            self.state_changed.emit(new_state)
            if force or new_state.time_left != previous.time_left:
                self.remaining_changed.emit(new_state.time_left)
        for effect in update.effects:
            if isinstance(effect, SaveSession):
                self.session_completed.emit(effect.mode)
        return new_state

    def _persist(self, state: TimerState) -> None:
        if self._snapshot_store is None:
            return
        try:
            self._snapshot_store.save(state)
        except Exception:
            self._logger.warning("Could not persist timer snapshot", exc_info=True)

    def _execute(self, effect: Effect) -> None:
        """Hand one effect to its collaborator; never raises."""
        try:
            if isinstance(effect, StopSound):
                if self._sound is not None:
                    self._sound.stop()
            elif isinstance(effect, PlaySound):
                if self._sound is not None:
                    self._sound.play(effect.name)
            elif isinstance(effect, PlaySoundLoop):
                if self._sound is not None:
                    self._sound.play_loop(effect.name)
            elif isinstance(effect, SaveSession):
                if self._session_store is not None:
                    self._session_store.save(effect.mode, effect.elapsed_seconds)
            elif isinstance(effect, SendNotification):
                if self._notifier is not None:
                    self._notifier.notify(effect)
        except Exception:
            self._logger.warning("Side effect %r failed", effect, exc_info=True)

    def _sync_ambient(self, state: TimerState) -> None:
        key = ambient_key(state)
        if key == self._ambient:
            return
        self._ambient = key
        name = ambient_sound(state)
        if name:
            self._execute(PlaySoundLoop(name))
        else:
            self._stop_loop()

    def _stop_loop(self) -> None:
        """Silence the loop voice only; a completion bell keeps ringing."""
        if self._sound is None:
            return
        try:
            self._sound.stop_loop()
        except Exception:
            self._logger.warning("Stopping the loop sound failed", exc_info=True)

    def _sync_driver(self) -> None:
        if self._state.is_active:
            if not self._qt_timer.isActive():
                self._qt_timer.start()
        elif self._qt_timer.isActive():
            self._qt_timer.stop()
