"""User settings and process-level paths for Pomodoro.

Settings are not stored in a file of their own: they travel inside the
persisted timer snapshot (see :mod:`pomodoro.database.snapshot`) and are
always replaced wholesale.

Data lives in::

    $POMODORO_DATA_DIR                       (if set)
    ~/Library/Application Support/Pomodoro   (macOS)
    $XDG_DATA_HOME/pomodoro                  (elsewhere, default
                                              ~/.local/share/pomodoro)

Usage::

    settings = Settings.from_dict(raw)
    settings = settings.with_duration(TimerMode.WORK, 50)
"""

from __future__ import annotations

import logging
import math
import os
import sys
from dataclasses import dataclass, asdict, fields, replace
from pathlib import Path
from typing import Any, Mapping, TYPE_CHECKING

if TYPE_CHECKING:
    from .timer.state import TimerMode


# ── paths & process config ────────────────────────────────────────────────


def _default_data_dir() -> Path:
    override = os.environ.get("POMODORO_DATA_DIR")
    if override:
        return Path(override).expanduser()
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "Pomodoro"
    base = os.environ.get("XDG_DATA_HOME") or str(Path.home() / ".local" / "share")
    return Path(base) / "pomodoro"


APP_DATA_DIR = _default_data_dir()


def log_level_from_env(default: int = logging.INFO) -> int:
    """Return the level named by ``POMODORO_LOG_LEVEL`` (e.g. ``DEBUG``)."""
    name = os.environ.get("POMODORO_LOG_LEVEL", "").strip().upper()
    if not name:
        return default
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else default


# ── settings ─────────────────────────────────────────────────────────────

TICKING_SOUNDS = ("clock", "timer", "none")
MIN_MINUTES = 1

_MINUTE_FIELDS = ("work", "short_break", "long_break", "long_break_interval")
_BOOL_FIELDS = (
    "enable_ticking",
    "enable_break_sound",
    "enable_strict_break",
    "auto_start_breaks",
    "auto_start_work",
    "pause_when_idle",
)


def clamp_minutes(value: Any) -> int:
    """Coerce external input to a whole number >= 1.

    Anything that is not a finite number (strings, ``None``, ``NaN``,
    booleans) falls back to the minimum instead of raising.
    """
    if isinstance(value, bool):
        return MIN_MINUTES
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return MIN_MINUTES
    if not isinstance(value, (int, float)) or not math.isfinite(value):
        return MIN_MINUTES
    return max(MIN_MINUTES, int(value))


@dataclass(frozen=True)
class Settings:
    """All user-configurable preferences."""

    # ── durations (minutes) ───────────────────────────────────────────
    work: int = 25
    short_break: int = 5
    long_break: int = 15
    long_break_interval: int = 4       # work sessions per long break

    # ── audio ─────────────────────────────────────────────────────────
    enable_ticking: bool = False
    ticking_sound: str = "clock"       # clock | timer | none
    enable_break_sound: bool = True

    # ── automation ────────────────────────────────────────────────────
    enable_strict_break: bool = False
    auto_start_breaks: bool = False
    auto_start_work: bool = False
    pause_when_idle: bool = False

    @property
    def ticking_enabled(self) -> bool:
        """``ticking_sound == "none"`` silences ticking even if enabled."""
        return self.enable_ticking and self.ticking_sound != "none"

    def duration_for(self, mode: TimerMode) -> int:
        """Nominal duration of *mode* in minutes."""
        return getattr(self, _mode_field(mode))

    def seconds_for(self, mode: TimerMode) -> int:
        return self.duration_for(mode) * 60

    def with_duration(self, mode: TimerMode | str, minutes: Any) -> Settings:
        """Copy with only *mode*'s duration replaced (clamped)."""
        return replace(self, **{_mode_field(mode): clamp_minutes(minutes)})

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Settings:
        """Build settings from untrusted data.

        Unknown keys are dropped and minute fields clamped.  Flags that are
        not real booleans, and an unknown ticking sound, fall back to the
        defaults.
        """
        valid_keys = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            if key not in valid_keys:
                continue
            if key in _MINUTE_FIELDS:
                kwargs[key] = clamp_minutes(value)
            elif key in _BOOL_FIELDS:
                if isinstance(value, bool):
                    kwargs[key] = value
            elif key == "ticking_sound":
                kwargs[key] = value if value in TICKING_SOUNDS else cls.ticking_sound
        return cls(**kwargs)

    def sanitized(self) -> Settings:
        """Re-run boundary clamping over an already-built instance."""
        return Settings.from_dict(self.to_dict())


# Keyed by ``TimerMode.value`` so this module never imports the timer.
_MODE_FIELDS: dict[str, str] = {
    "work": "work",
    "shortBreak": "short_break",
    "longBreak": "long_break",
}


def _mode_field(mode: TimerMode | str) -> str:
    return _MODE_FIELDS[getattr(mode, "value", mode)]
