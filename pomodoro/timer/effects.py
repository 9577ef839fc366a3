"""Side-effect requests produced by the timer state machine.

The state machine never plays a sound or writes a row itself.  It
returns a tuple of these small records alongside the new state and the
engine hands them to whichever collaborator handles them.  All of them
are fire-and-forget: a failed request never rolls back a transition.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from ..settings import Settings
from .state import TimerMode, TimerState


NOTIFICATION_TITLE = "Pomodoro"

BELL = "bell"
LOUD_BELL = "loud-bell"
BIRDS = "birds"

ACTION_WORK_DONE = "work-done"
ACTION_BREAK_DONE = "break-done"


@dataclass(frozen=True)
class StopSound:
    """Halt whatever loop or one-shot is playing."""


@dataclass(frozen=True)
class PlaySound:
    name: str


@dataclass(frozen=True)
class PlaySoundLoop:
    name: str


@dataclass(frozen=True)
class SaveSession:
    """Append a completed-session record."""
    mode: TimerMode
    elapsed_seconds: int


@dataclass(frozen=True)
class SendNotification:
    title: str
    body: str
    action_type_id: str


Effect = Union[StopSound, PlaySound, PlaySoundLoop, SaveSession, SendNotification]


def notification_body(ended: TimerMode, now: TimerMode) -> str:
    """Message for the session that just *ended*, given the mode *now* active."""
    if ended.is_break:
        return "Break is over, back to work!"
    if now is TimerMode.LONG_BREAK:
        return "Great work! Time for a long break."
    return "Nice work! Time for a short break."


def completion_effects(
    ended: TimerMode, now: TimerMode, settings: Settings,
) -> tuple[Effect, ...]:
    """Effects of a countdown reaching zero naturally."""
    return (
        StopSound(),
        SaveSession(mode=ended, elapsed_seconds=settings.seconds_for(ended)),
        PlaySound(BELL if ended is TimerMode.WORK else LOUD_BELL),
        SendNotification(
            title=NOTIFICATION_TITLE,
            body=notification_body(ended, now),
            action_type_id=(
                ACTION_WORK_DONE if ended is TimerMode.WORK else ACTION_BREAK_DONE
            ),
        ),
    )


def ambient_sound(state: TimerState) -> Optional[str]:
    """Loop sound implied by ``(is_active, mode, settings)``, or ``None``."""
    if not state.is_active:
        return None
    settings = state.settings
    if state.mode is TimerMode.WORK:
        return settings.ticking_sound if settings.ticking_enabled else None
    return BIRDS if settings.enable_break_sound else None


def ambient_key(state: TimerState) -> tuple:
    """The inputs :func:`ambient_sound` depends on.

    The engine re-syncs the loop only when this changes, so a once-per-
    second tick does not restart the sound.
    """
    s = state.settings
    return (
        state.is_active,
        state.mode,
        s.enable_ticking,
        s.ticking_sound,
        s.enable_break_sound,
    )
