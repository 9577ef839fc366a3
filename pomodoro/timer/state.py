"""Timer data model: modes and the immutable state snapshot.

``TimerState`` is the unit of persistence.  Every operation in
:mod:`pomodoro.timer.machine` takes one and returns a new one; nothing
mutates it in place.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

from ..settings import Settings, clamp_minutes


class TimerMode(Enum):
    WORK = "work"
    SHORT_BREAK = "shortBreak"
    LONG_BREAK = "longBreak"

    @property
    def is_break(self) -> bool:
        return self is not TimerMode.WORK


MODE_LABELS: dict[TimerMode, str] = {
    TimerMode.WORK: "Focus",
    TimerMode.SHORT_BREAK: "Short Break",
    TimerMode.LONG_BREAK: "Long Break",
}


def next_break_mode(sessions_completed: int, long_break_interval: int) -> TimerMode:
    """Which break follows the work session that brought the tally to
    *sessions_completed*.

    This is the only place the long-break rule lives; tick, skip and
    rehydration all route through it.
    """
    interval = clamp_minutes(long_break_interval)
    if sessions_completed > 0 and sessions_completed % interval == 0:
        return TimerMode.LONG_BREAK
    return TimerMode.SHORT_BREAK


@dataclass(frozen=True)
class TimerState:
    """Everything the timer knows; persisted whole after every change."""

    mode: TimerMode = TimerMode.WORK
    time_left: int = 25 * 60           # seconds
    is_active: bool = False
    sessions_completed: int = 0
    last_tick_timestamp: int = 0       # epoch ms, 0 = never ticked
    settings: Settings = field(default_factory=Settings)

    @property
    def nominal_seconds(self) -> int:
        """Full duration of the current mode, ignoring extensions."""
        return self.settings.seconds_for(self.mode)

    # ── serialisation ─────────────────────────────────────────────────

    def to_dict(self) -> dict[str, Any]:
        return {
            "mode": self.mode.value,
            "time_left": self.time_left,
            "is_active": self.is_active,
            "sessions_completed": self.sessions_completed,
            "last_tick_timestamp": self.last_tick_timestamp,
            "settings": self.settings.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TimerState:
        """Rebuild a state from a persisted snapshot.

        Raises ``ValueError`` when the snapshot is structurally broken
        (unknown mode, missing or negative counters).  Settings are run
        through the usual boundary clamping instead.
        """
        if not isinstance(data, Mapping):
            raise ValueError("snapshot is not an object")
        try:
            mode = TimerMode(data["mode"])
            time_left = _non_negative_int(data["time_left"], "time_left")
            sessions = _non_negative_int(
                data["sessions_completed"], "sessions_completed",
            )
            last_tick = _non_negative_int(
                data.get("last_tick_timestamp", 0), "last_tick_timestamp",
            )
            is_active = data["is_active"]
        except KeyError as exc:
            raise ValueError(f"snapshot is missing {exc.args[0]!r}") from exc

        if not isinstance(is_active, bool):
            raise ValueError("is_active must be a boolean")

        raw_settings = data.get("settings") or {}
        if not isinstance(raw_settings, Mapping):
            raise ValueError("settings must be an object")

        return cls(
            mode=mode,
            time_left=time_left,
            is_active=is_active,
            sessions_completed=sessions,
            last_tick_timestamp=last_tick,
            settings=Settings.from_dict(raw_settings),
        )


def initial_state(settings: Settings | None = None) -> TimerState:
    """Fresh state: work mode, full duration, inactive, no sessions."""
    settings = settings or Settings()
    return TimerState(
        mode=TimerMode.WORK,
        time_left=settings.seconds_for(TimerMode.WORK),
        settings=settings,
    )


def _non_negative_int(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{name} must be a number")
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError(f"{name} must be finite")
    if value < 0:
        raise ValueError(f"{name} must not be negative")
    return int(value)
