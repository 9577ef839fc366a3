"""Fullscreen overlay shown while a strict break is running.

The overlay has no close button and swallows Escape; it disappears when
the break ends or the timer is paused from the tray or the CLI.
"""

from __future__ import annotations

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import QWidget, QVBoxLayout, QLabel

from ..presentation import format_time
from ..timer.state import MODE_LABELS, TimerState
from .styles import MODE_COLORS, PALETTE


class StrictBreakOverlay(QWidget):
    """Frameless, always-on-top break screen."""

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent, Qt.WindowType.Window)
        self.setWindowFlags(
            Qt.WindowType.Window
            | Qt.WindowType.FramelessWindowHint
            | Qt.WindowType.WindowStaysOnTopHint
        )
        self.setStyleSheet(f"background-color: {PALETTE['bg']};")

        layout = QVBoxLayout(self)
        layout.setAlignment(Qt.AlignmentFlag.AlignCenter)

        self._title = QLabel("", self)
        self._title.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._time = QLabel("", self)
        self._time.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._time.setStyleSheet(
            f"font-size: 120px; font-weight: 700; color: {PALETTE['text']};"
        )
        hint = QLabel("Step away from the screen.", self)
        hint.setObjectName("mutedLabel")
        hint.setAlignment(Qt.AlignmentFlag.AlignCenter)

        layout.addWidget(self._title)
        layout.addWidget(self._time)
        layout.addWidget(hint)

    def update_state(self, state: TimerState) -> None:
        color = MODE_COLORS[state.mode][0]
        self._title.setText(MODE_LABELS[state.mode].upper())
        self._title.setStyleSheet(
            f"font-size: 22px; letter-spacing: 4px; color: {color};"
        )
        self._time.setText(format_time(state.time_left))

    @property
    def time_text(self) -> str:
        return self._time.text()

    def keyPressEvent(self, event) -> None:  # type: ignore[override]
        event.accept()
