"""Pure timer state machine.

Every function here takes the current :class:`TimerState` (plus any
arguments and the wall-clock time in epoch milliseconds) and returns a
:class:`TimerUpdate`: the replacement state and the side effects it
requests.  No I/O, no clock reads, no Qt, so every rule can be tested
by calling a function.

Modes
-----
WORK          Focus countdown.
SHORT_BREAK   Break after most work sessions.
LONG_BREAK    Break after every ``long_break_interval``-th work session.

Transitions
-----------
WORK → SHORT_BREAK | LONG_BREAK     (countdown expires, skip, rehydrate)
SHORT_BREAK | LONG_BREAK → WORK     (countdown expires, skip, rehydrate)
any → any                           (set_mode, never counts a session)

Only natural expiry records a session and notifies; skip counts a work
session toward the long-break interval but records nothing.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from ..settings import Settings, clamp_minutes
from .effects import Effect, SaveSession, StopSound, completion_effects
from .state import TimerMode, TimerState, next_break_mode


DEFAULT_EXTEND_SECONDS = 60


@dataclass(frozen=True)
class TimerUpdate:
    """Result of one operation: the new state and requested effects."""
    state: TimerState
    effects: tuple[Effect, ...] = ()


# ══════════════════════════════════════════════════════════════════════════
#  SHARED TRANSITION
# ══════════════════════════════════════════════════════════════════════════


def complete_session(state: TimerState, now_ms: int) -> TimerState:
    """Advance past the current mode as if its countdown reached zero.

    Work increments the tally and routes to the next break; a break
    returns to work.  ``is_active`` follows the matching auto-start
    flag; callers that must not self-start override it.
    """
    settings = state.settings
    if state.mode is TimerMode.WORK:
        sessions = state.sessions_completed + 1
        next_mode = next_break_mode(sessions, settings.long_break_interval)
        auto_start = settings.auto_start_breaks
    else:
        sessions = state.sessions_completed
        next_mode = TimerMode.WORK
        auto_start = settings.auto_start_work

    return replace(
        state,
        mode=next_mode,
        time_left=settings.seconds_for(next_mode),
        is_active=auto_start,
        sessions_completed=sessions,
        last_tick_timestamp=now_ms,
    )


# ══════════════════════════════════════════════════════════════════════════
#  OPERATIONS
# ══════════════════════════════════════════════════════════════════════════


def tick(state: TimerState, now_ms: int) -> TimerUpdate:
    """One second of countdown.  Expires the session at the last second."""
    if not state.is_active or state.time_left <= 0:
        return TimerUpdate(state)

    if state.time_left > 1:
        return TimerUpdate(replace(
            state,
            time_left=state.time_left - 1,
            last_tick_timestamp=now_ms,
        ))

    new_state = complete_session(state, now_ms)
    return TimerUpdate(
        new_state,
        completion_effects(state.mode, new_state.mode, state.settings),
    )


def toggle(state: TimerState, now_ms: int) -> TimerUpdate:
    """Flip running/paused.

    Activating stamps the clock so a crash before the first tick is not
    mistaken for a countdown that ran the whole time it was paused.
    Pausing asks for the loop sound to stop.
    """
    if not state.is_active:
        return TimerUpdate(replace(state, is_active=True, last_tick_timestamp=now_ms))
    return TimerUpdate(replace(state, is_active=False), (StopSound(),))


def start(state: TimerState, now_ms: int) -> TimerUpdate:
    """Activate if paused; a no-op when already running."""
    return TimerUpdate(state) if state.is_active else toggle(state, now_ms)


def stop(state: TimerState) -> TimerUpdate:
    """Pause if running; a no-op when already paused."""
    if not state.is_active:
        return TimerUpdate(state)
    return TimerUpdate(replace(state, is_active=False), (StopSound(),))


def reset(state: TimerState) -> TimerUpdate:
    """Refill the current mode and pause.  Tally and last tick untouched."""
    return TimerUpdate(
        replace(state, time_left=state.nominal_seconds, is_active=False),
        (StopSound(),),
    )


def skip(state: TimerState, now_ms: int) -> TimerUpdate:
    """Jump to the next mode without recording or notifying.

    A skipped work session still counts toward the long-break interval;
    a skipped break does not touch the tally.  Never auto-starts.
    """
    settings = state.settings
    if state.mode is TimerMode.WORK:
        sessions = state.sessions_completed + 1
        next_mode = next_break_mode(sessions, settings.long_break_interval)
    else:
        sessions = state.sessions_completed
        next_mode = TimerMode.WORK

    return TimerUpdate(
        replace(
            state,
            mode=next_mode,
            time_left=settings.seconds_for(next_mode),
            is_active=False,
            sessions_completed=sessions,
            last_tick_timestamp=now_ms,
        ),
        (StopSound(),),
    )


def extend(state: TimerState, seconds: int = DEFAULT_EXTEND_SECONDS) -> TimerUpdate:
    """Add *seconds* to the countdown in any mode, running or not.

    There is no upper bound; the result is floored at zero so a negative
    argument cannot push the countdown below empty.
    """
    return TimerUpdate(
        replace(state, time_left=max(0, state.time_left + int(seconds))),
    )


def set_mode(state: TimerState, mode: TimerMode, now_ms: int) -> TimerUpdate:
    """Switch to *mode* outside the natural cycle, paused and full."""
    mode = TimerMode(mode)
    return TimerUpdate(
        replace(
            state,
            mode=mode,
            time_left=state.settings.seconds_for(mode),
            is_active=False,
            last_tick_timestamp=now_ms,
        ),
        (StopSound(),),
    )


def set_custom_time(state: TimerState, mode: TimerMode, minutes) -> TimerUpdate:
    """Change one mode's duration.

    If *mode* is the current one the countdown is refilled with the new
    duration, even while running.
    """
    mode = TimerMode(mode)
    minutes = clamp_minutes(minutes)
    settings = state.settings.with_duration(mode, minutes)
    time_left = minutes * 60 if state.mode is mode else state.time_left
    return TimerUpdate(replace(state, settings=settings, time_left=time_left))


def update_settings(state: TimerState, settings: Settings) -> TimerUpdate:
    """Replace settings wholesale; refill the current mode and pause."""
    settings = settings.sanitized()
    return TimerUpdate(replace(
        state,
        settings=settings,
        time_left=settings.seconds_for(state.mode),
        is_active=False,
    ))


# ══════════════════════════════════════════════════════════════════════════
#  REHYDRATION
# ══════════════════════════════════════════════════════════════════════════


def rehydrate(state: TimerState, now_ms: int) -> TimerUpdate:
    """Reconcile a persisted snapshot with the time that passed since.

    - Paused, or never ticked: restored as-is.
    - Still time left after subtracting the gap: keep running from there.
    - Expired while the process was down: exactly one transition, paused
      regardless of auto-start flags, and the expired session recorded.
      Time beyond that first expiry is discarded, not cascaded through
      further cycles.
    """
    if not state.is_active or state.last_tick_timestamp == 0:
        return TimerUpdate(state)

    elapsed_seconds = max(0, now_ms - state.last_tick_timestamp) // 1000
    projected = state.time_left - elapsed_seconds

    if projected > 0:
        return TimerUpdate(replace(
            state, time_left=projected, last_tick_timestamp=now_ms,
        ))

    new_state = replace(complete_session(state, now_ms), is_active=False)
    return TimerUpdate(
        new_state,
        (SaveSession(
            mode=state.mode,
            elapsed_seconds=state.settings.seconds_for(state.mode),
        ),),
    )
