"""Main timer display widget.

Layout (top → bottom):
    - Mode selector (Focus / Short Break / Long Break)
    - ProgressRing (large, centred)
    - Action row: Reset, Start/Pause, Skip
    - "+1 min" extend button
    - Round dots and the completed-sessions counter
"""

from __future__ import annotations

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPushButton, QFrame,
    QButtonGroup, QSizePolicy,
)

from ..presentation import format_time
from ..timer.engine import TimerEngine
from ..timer.state import MODE_LABELS, TimerMode, TimerState
from .progress_ring import ProgressRing
from .styles import PALETTE


class TimerWidget(QWidget):
    """The timer card.  Reads everything from the engine's signals."""

    def __init__(self, engine: TimerEngine, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._engine = engine
        self._build_ui()
        self._connect_signals()
        self._on_state_changed(engine.state)

    # ── build ─────────────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)

        card = QFrame(self)
        card.setObjectName("card")
        root.addWidget(card)

        layout = QVBoxLayout(card)
        layout.setContentsMargins(28, 20, 28, 24)
        layout.setSpacing(12)
        layout.setAlignment(Qt.AlignmentFlag.AlignCenter)

        # ── mode selector ────────────────────────────────────────────
        mode_row = QHBoxLayout()
        mode_row.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._mode_group = QButtonGroup(self)
        self._mode_group.setExclusive(True)
        self._mode_buttons: dict[TimerMode, QPushButton] = {}
        for mode in TimerMode:
            btn = QPushButton(MODE_LABELS[mode], card)
            btn.setCheckable(True)
            self._mode_group.addButton(btn)
            self._mode_buttons[mode] = btn
            mode_row.addWidget(btn)
        layout.addLayout(mode_row)

        # ── ring ─────────────────────────────────────────────────────
        ring_row = QHBoxLayout()
        ring_row.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._ring = ProgressRing(card)
        self._ring.setSizePolicy(QSizePolicy.Policy.Fixed, QSizePolicy.Policy.Fixed)
        self._ring.setFixedSize(300, 300)
        ring_row.addWidget(self._ring)
        layout.addLayout(ring_row)

        # ── controls ─────────────────────────────────────────────────
        btn_row = QHBoxLayout()
        btn_row.setSpacing(12)
        btn_row.setAlignment(Qt.AlignmentFlag.AlignCenter)

        self._reset_btn = QPushButton("Reset", card)
        self._reset_btn.setObjectName("secondaryButton")
        self._start_pause_btn = QPushButton("Start", card)
        self._start_pause_btn.setObjectName("primaryButton")
        self._skip_btn = QPushButton("Skip", card)
        self._skip_btn.setObjectName("secondaryButton")

        btn_row.addWidget(self._reset_btn)
        btn_row.addWidget(self._start_pause_btn)
        btn_row.addWidget(self._skip_btn)
        layout.addLayout(btn_row)

        self._extend_btn = QPushButton("+1 min", card)
        self._extend_btn.setObjectName("extendButton")
        self._extend_btn.setToolTip("Add a minute to the countdown")
        layout.addWidget(self._extend_btn, alignment=Qt.AlignmentFlag.AlignCenter)

        # ── round dots + counter ─────────────────────────────────────
        self._dot_row = QHBoxLayout()
        self._dot_row.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._dot_row.setSpacing(10)
        self._dots: list[QLabel] = []
        layout.addLayout(self._dot_row)

        self._sessions_label = QLabel("", card)
        self._sessions_label.setObjectName("mutedLabel")
        self._sessions_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._sessions_label)

    # ── signals ───────────────────────────────────────────────────────────

    def _connect_signals(self) -> None:
        self._start_pause_btn.clicked.connect(self._engine.toggle)
        self._reset_btn.clicked.connect(self._engine.reset)
        self._skip_btn.clicked.connect(self._engine.skip)
        self._extend_btn.clicked.connect(lambda: self._engine.extend())
        for mode, btn in self._mode_buttons.items():
            btn.clicked.connect(lambda _checked=False, m=mode: self._on_mode_clicked(m))

        self._engine.state_changed.connect(self._on_state_changed)

    # ── slots ─────────────────────────────────────────────────────────────

    def _on_mode_clicked(self, mode: TimerMode) -> None:
        if mode is not self._engine.mode:
            self._engine.set_mode(mode)

    def _on_state_changed(self, state: TimerState) -> None:
        self._start_pause_btn.setText("Pause" if state.is_active else "Start")
        self._mode_buttons[state.mode].setChecked(True)

        self._ring.apply_mode(state.mode, state.is_active)
        self._ring.set_label(MODE_LABELS[state.mode])
        self._ring.set_time_text(format_time(state.time_left))
        nominal = state.nominal_seconds
        self._ring.set_fraction(state.time_left / nominal if nominal else 0.0)

        self._refresh_dots(state)
        self._sessions_label.setText(f"Sessions: {state.sessions_completed}")

    def _refresh_dots(self, state: TimerState) -> None:
        interval = max(1, state.settings.long_break_interval)
        while len(self._dots) < interval:
            dot = QLabel("○", self)
            dot.setAlignment(Qt.AlignmentFlag.AlignCenter)
            self._dots.append(dot)
            self._dot_row.addWidget(dot)
        while len(self._dots) > interval:
            dot = self._dots.pop()
            self._dot_row.removeWidget(dot)
            dot.deleteLater()

        done = state.sessions_completed % interval
        if done == 0 and state.sessions_completed and state.mode is TimerMode.LONG_BREAK:
            done = interval  # the cycle that earned this long break
        for i, dot in enumerate(self._dots):
            filled = i < done
            dot.setText("●" if filled else "○")
            color = PALETTE["accent"] if filled else PALETTE["text_muted"]
            dot.setStyleSheet(f"font-size: 18px; color: {color};")

    # ── test hooks ────────────────────────────────────────────────────────

    @property
    def ring(self) -> ProgressRing:
        return self._ring

    @property
    def start_pause_button(self) -> QPushButton:
        return self._start_pause_btn

    def mode_button(self, mode: TimerMode) -> QPushButton:
        return self._mode_buttons[mode]
