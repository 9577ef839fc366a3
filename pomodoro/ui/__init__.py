"""UI package."""

from .timer_widget import TimerWidget
from .stats_widget import StatsWidget
from .progress_ring import ProgressRing
from .settings_dialog import SettingsDialog
from .strict_break import StrictBreakOverlay

__all__ = [
    "TimerWidget",
    "StatsWidget",
    "ProgressRing",
    "SettingsDialog",
    "StrictBreakOverlay",
]
