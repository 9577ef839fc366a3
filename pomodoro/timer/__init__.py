"""Timer package."""

from .state import (
    TimerMode,
    TimerState,
    MODE_LABELS,
    initial_state,
    next_break_mode,
)
from .machine import TimerUpdate, DEFAULT_EXTEND_SECONDS
from .effects import (
    Effect,
    PlaySound,
    PlaySoundLoop,
    SaveSession,
    SendNotification,
    StopSound,
)
from .engine import TimerEngine

__all__ = [
    "TimerEngine",
    "TimerMode",
    "TimerState",
    "TimerUpdate",
    "MODE_LABELS",
    "DEFAULT_EXTEND_SECONDS",
    "initial_state",
    "next_break_mode",
    "Effect",
    "PlaySound",
    "PlaySoundLoop",
    "SaveSession",
    "SendNotification",
    "StopSound",
]
