"""Settings dialog.

A modal dialog over a copy of the current :class:`Settings`.  Nothing
is applied until the user presses Save; the caller then hands
:attr:`SettingsDialog.settings` to ``TimerEngine.update_settings``, which
also resets the running countdown.
"""

from __future__ import annotations

from typing import Callable

from PyQt6.QtWidgets import (
    QDialog, QVBoxLayout, QHBoxLayout, QFormLayout,
    QLabel, QSpinBox, QCheckBox, QComboBox, QPushButton, QFrame, QWidget,
)

from ..settings import Settings, TICKING_SOUNDS


class SettingsDialog(QDialog):
    """Modal dialog for all user preferences."""

    def __init__(
        self,
        settings: Settings,
        parent: QWidget | None = None,
        *,
        sound_preview_callback: Callable[[str], None] | None = None,
    ) -> None:
        super().__init__(parent)
        self.setWindowTitle("Settings")
        self.setMinimumWidth(400)
        self.setModal(True)

        self._original = settings
        self._sound_preview = sound_preview_callback

        self._build_ui()
        self._populate(settings)

    # ══════════════════════════════════════════════════════════════════
    #  BUILD UI
    # ══════════════════════════════════════════════════════════════════

    def _build_ui(self) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(24, 20, 24, 20)
        root.setSpacing(14)

        # ── Timer ────────────────────────────────────────────────────
        root.addWidget(self._section_label("Timer"))
        timer_form = self._form()
        self._work_spin = self._minutes_spin(1, 120)
        timer_form.addRow("Focus:", self._work_spin)
        self._short_spin = self._minutes_spin(1, 60)
        timer_form.addRow("Short break:", self._short_spin)
        self._long_spin = self._minutes_spin(1, 60)
        timer_form.addRow("Long break:", self._long_spin)
        self._interval_spin = QSpinBox()
        self._interval_spin.setRange(1, 12)
        timer_form.addRow("Long break every:", self._interval_spin)

        self._auto_breaks_cb = QCheckBox("Auto-start breaks")
        timer_form.addRow("", self._auto_breaks_cb)
        self._auto_work_cb = QCheckBox("Auto-start focus sessions")
        timer_form.addRow("", self._auto_work_cb)
        root.addLayout(timer_form)

        root.addWidget(self._separator())

        # ── Sound ────────────────────────────────────────────────────
        root.addWidget(self._section_label("Sound"))
        sound_form = self._form()
        self._ticking_cb = QCheckBox("Ticking while focusing")
        sound_form.addRow("", self._ticking_cb)

        tick_row = QHBoxLayout()
        self._ticking_combo = QComboBox()
        for name in TICKING_SOUNDS:
            self._ticking_combo.addItem(name.capitalize(), name)
        tick_row.addWidget(self._ticking_combo)
        self._preview_btn = QPushButton("Preview")
        self._preview_btn.setObjectName("secondaryButton")
        self._preview_btn.clicked.connect(self._on_preview)
        tick_row.addWidget(self._preview_btn)
        tick_wrapper = QWidget()
        tick_wrapper.setLayout(tick_row)
        sound_form.addRow("Ticking sound:", tick_wrapper)

        self._break_sound_cb = QCheckBox("Birdsong during breaks")
        sound_form.addRow("", self._break_sound_cb)
        root.addLayout(sound_form)

        root.addWidget(self._separator())

        # ── Behaviour ────────────────────────────────────────────────
        root.addWidget(self._section_label("Behaviour"))
        behaviour_form = self._form()
        self._strict_cb = QCheckBox("Strict breaks (fullscreen, no way out)")
        behaviour_form.addRow("", self._strict_cb)
        self._idle_cb = QCheckBox("Pause when idle for 5 minutes")
        behaviour_form.addRow("", self._idle_cb)
        root.addLayout(behaviour_form)

        # ── buttons ──────────────────────────────────────────────────
        root.addStretch()
        btn_row = QHBoxLayout()
        btn_row.addStretch()
        cancel_btn = QPushButton("Cancel")
        cancel_btn.setObjectName("secondaryButton")
        cancel_btn.clicked.connect(self.reject)
        save_btn = QPushButton("Save")
        save_btn.setObjectName("primaryButton")
        save_btn.setDefault(True)
        save_btn.clicked.connect(self.accept)
        btn_row.addWidget(cancel_btn)
        btn_row.addWidget(save_btn)
        root.addLayout(btn_row)

    # ── helpers ──────────────────────────────────────────────────────

    @staticmethod
    def _form() -> QFormLayout:
        form = QFormLayout()
        form.setContentsMargins(0, 0, 0, 0)
        form.setHorizontalSpacing(20)
        form.setVerticalSpacing(8)
        return form

    @staticmethod
    def _minutes_spin(low: int, high: int) -> QSpinBox:
        spin = QSpinBox()
        spin.setRange(low, high)
        spin.setSuffix(" min")
        return spin

    @staticmethod
    def _section_label(text: str) -> QLabel:
        lbl = QLabel(text)
        lbl.setStyleSheet("font-size: 15px; font-weight: 700; margin-top: 4px;")
        return lbl

    @staticmethod
    def _separator() -> QFrame:
        line = QFrame()
        line.setFrameShape(QFrame.Shape.HLine)
        line.setFixedHeight(1)
        line.setStyleSheet("background-color: rgba(255,255,255,0.08);")
        return line

    def _populate(self, s: Settings) -> None:
        self._work_spin.setValue(s.work)
        self._short_spin.setValue(s.short_break)
        self._long_spin.setValue(s.long_break)
        self._interval_spin.setValue(s.long_break_interval)
        self._auto_breaks_cb.setChecked(s.auto_start_breaks)
        self._auto_work_cb.setChecked(s.auto_start_work)
        self._ticking_cb.setChecked(s.enable_ticking)
        self._ticking_combo.setCurrentIndex(
            max(0, self._ticking_combo.findData(s.ticking_sound))
        )
        self._break_sound_cb.setChecked(s.enable_break_sound)
        self._strict_cb.setChecked(s.enable_strict_break)
        self._idle_cb.setChecked(s.pause_when_idle)

    def _on_preview(self) -> None:
        name = self._ticking_combo.currentData()
        if self._sound_preview and name != "none":
            self._sound_preview(name)

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC
    # ══════════════════════════════════════════════════════════════════

    @property
    def settings(self) -> Settings:
        """Settings as currently shown in the form."""
        return Settings.from_dict({
            **self._original.to_dict(),
            "work": self._work_spin.value(),
            "short_break": self._short_spin.value(),
            "long_break": self._long_spin.value(),
            "long_break_interval": self._interval_spin.value(),
            "auto_start_breaks": self._auto_breaks_cb.isChecked(),
            "auto_start_work": self._auto_work_cb.isChecked(),
            "enable_ticking": self._ticking_cb.isChecked(),
            "ticking_sound": self._ticking_combo.currentData(),
            "enable_break_sound": self._break_sound_cb.isChecked(),
            "enable_strict_break": self._strict_cb.isChecked(),
            "pause_when_idle": self._idle_cb.isChecked(),
        })
