"""Presentation hints derived from the timer state.

The window, tray icon, D-Bus status and idle monitor all react to the
same ``(mode, is_active, settings)`` inputs.  Deriving them in one pure
function keeps every surface in agreement.
"""

from __future__ import annotations

from dataclasses import dataclass

from .timer.state import MODE_LABELS, TimerMode, TimerState


@dataclass(frozen=True)
class TimerStatus:
    mode: TimerMode
    time_left: int
    is_active: bool
    sessions_completed: int

    @property
    def summary(self) -> str:
        """One-line status, e.g. ``Focus | Running | 24:13 | Sessions: 3``."""
        running = "Running" if self.is_active else "Paused"
        return (
            f"{MODE_LABELS[self.mode]} | {running} | "
            f"{format_time(self.time_left)} | Sessions: {self.sessions_completed}"
        )


@dataclass(frozen=True)
class PresentationHints:
    fullscreen: bool          # strict break overlay
    tray_mode: TimerMode      # which tray icon to show
    status: TimerStatus
    idle_detection: bool      # whether the idle monitor should poll


def format_time(seconds: int) -> str:
    """``MM:SS``; minutes keep counting past 59 (e.g. ``90:00``)."""
    m, s = divmod(max(0, int(seconds)), 60)
    return f"{m:02d}:{s:02d}"


def presentation_hints(state: TimerState) -> PresentationHints:
    settings = state.settings
    return PresentationHints(
        fullscreen=(
            settings.enable_strict_break
            and state.mode.is_break
            and state.is_active
        ),
        tray_mode=state.mode,
        status=TimerStatus(
            mode=state.mode,
            time_left=state.time_left,
            is_active=state.is_active,
            sessions_completed=state.sessions_completed,
        ),
        idle_detection=settings.pause_when_idle,
    )
