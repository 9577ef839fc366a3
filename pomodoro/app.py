"""Main application window for Pomodoro."""

from __future__ import annotations

import logging
from typing import Any

from PyQt6.QtCore import Qt
from PyQt6.QtGui import (
    QAction, QColor, QIcon, QImage, QKeySequence, QPainter, QPen, QPixmap, QShortcut,
)
from PyQt6.QtWidgets import (
    QApplication, QMainWindow, QMenu, QMessageBox, QSystemTrayIcon,
    QTabWidget, QVBoxLayout, QWidget,
)

from .audio.sounds import SoundManager
from .idle import IdleMonitor
from .notifications import Notifier
from .presentation import PresentationHints, presentation_hints
from .timer.engine import TimerEngine
from .timer.state import TimerMode, TimerState
from .ui.stats_widget import StatsWidget
from .ui.strict_break import StrictBreakOverlay
from .ui.styles import MODE_COLORS, build_stylesheet
from .ui.timer_widget import TimerWidget


logger = logging.getLogger("pomodoro.app")

TOGGLE_SHORTCUT = "Ctrl+Alt+P"


# ── tray‑icon image generation ────────────────────────────────────────────


def make_tray_icon(mode: TimerMode, is_active: bool) -> QIcon:
    """32×32 icon (drawn at 2×) that follows the mode.

    - WORK:         filled circle
    - SHORT_BREAK:  ring with a centre dot
    - LONG_BREAK:   ring with a larger centre dot
    - paused:       the same shape with two pause bars cut out
    """
    size = 64
    img = QImage(size, size, QImage.Format.Format_ARGB32_Premultiplied)
    img.fill(Qt.GlobalColor.transparent)
    p = QPainter(img)
    p.setRenderHint(QPainter.RenderHint.Antialiasing)
    colour = QColor(MODE_COLORS[mode][0])
    cx, cy, r = size // 2, size // 2, size // 2 - 4

    if mode is TimerMode.WORK:
        p.setPen(Qt.PenStyle.NoPen)
        p.setBrush(colour)
        p.drawEllipse(cx - r, cy - r, r * 2, r * 2)
    else:
        p.setPen(QPen(colour, 5))
        p.setBrush(Qt.BrushStyle.NoBrush)
        p.drawEllipse(cx - r, cy - r, r * 2, r * 2)
        dot_r = 8 if mode is TimerMode.SHORT_BREAK else 14
        p.setPen(Qt.PenStyle.NoPen)
        p.setBrush(colour)
        p.drawEllipse(cx - dot_r, cy - dot_r, dot_r * 2, dot_r * 2)

    if not is_active:
        p.setCompositionMode(QPainter.CompositionMode.CompositionMode_Clear)
        bar_w, bar_h, gap = 7, 26, 5
        y = cy - bar_h // 2
        p.drawRect(cx - gap - bar_w, y, bar_w, bar_h)
        p.drawRect(cx + gap, y, bar_w, bar_h)

    p.end()
    img.setDevicePixelRatio(2.0)
    return QIcon(QPixmap.fromImage(img))


class PomodoroApp(QMainWindow):
    """Main window, tray icon and the wiring between engine and desktop.

    Collaborators can be injected; anything left out is built here the
    way the desktop app needs it.
    """

    def __init__(
        self,
        *,
        sound: Any = None,
        session_store: Any = None,
        snapshot_store: Any = None,
        idle_monitor: IdleMonitor | None = None,
        enable_dbus: bool = True,
        restore: bool = True,
    ) -> None:
        super().__init__()
        self.setWindowTitle("Pomodoro")
        self.setMinimumSize(420, 620)
        self.setStyleSheet(build_stylesheet())

        # ── tray + notifier come first: the engine notifies through them
        self._tray_icon = QSystemTrayIcon(self)
        self._tray_icon.setIcon(make_tray_icon(TimerMode.WORK, False))
        self._tray_icon.activated.connect(self._on_tray_activated)
        self._notifier = Notifier(self._tray_icon)

        # ── engine ────────────────────────────────────────────────────
        self._sound = sound if sound is not None else SoundManager(parent=self)
        self._engine = TimerEngine(
            self,
            sound=self._sound,
            notifier=self._notifier,
            session_store=session_store,
            snapshot_store=snapshot_store,
        )

        # ── central widget ────────────────────────────────────────────
        central = QWidget()
        self.setCentralWidget(central)
        root_layout = QVBoxLayout(central)
        root_layout.setContentsMargins(16, 12, 16, 12)

        self._tabs = QTabWidget(central)
        root_layout.addWidget(self._tabs)
        self._timer_widget = TimerWidget(self._engine, self._tabs)
        self._tabs.addTab(self._timer_widget, "Timer")
        self._stats_widget = StatsWidget(self._tabs)
        self._tabs.addTab(self._stats_widget, "Stats")

        self._strict_overlay = StrictBreakOverlay()

        # ── tray menu + menu bar ──────────────────────────────────────
        self._build_tray_menu()
        self._build_menu_bar()
        self._tray_icon.show()

        # ── idle detection ────────────────────────────────────────────
        self._idle_monitor = idle_monitor or IdleMonitor(self)
        self._idle_monitor.idle_detected.connect(self._engine.idle_detected)
        self._idle_monitor.idle_cleared.connect(self._engine.idle_cleared)

        # ── wire signals ──────────────────────────────────────────────
        self._engine.state_changed.connect(self._on_state_changed)
        self._engine.session_completed.connect(self._on_session_completed)
        self._tabs.currentChanged.connect(self._on_tab_changed)

        # ── keyboard shortcuts ────────────────────────────────────────
        toggle_shortcut = QShortcut(QKeySequence(TOGGLE_SHORTCUT), self)
        toggle_shortcut.setContext(Qt.ShortcutContext.ApplicationShortcut)
        toggle_shortcut.activated.connect(self._engine.toggle)

        # ── remote control ────────────────────────────────────────────
        self._dbus_adaptor = None
        if enable_dbus:
            from .dbus_service import register_service

            self._dbus_adaptor = register_service(self._engine)

        if restore:
            self._engine.restore()
        else:
            self._apply_hints(presentation_hints(self._engine.state))

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC
    # ══════════════════════════════════════════════════════════════════

    @property
    def engine(self) -> TimerEngine:
        return self._engine

    @property
    def tray_icon(self) -> QSystemTrayIcon:
        return self._tray_icon

    @property
    def strict_overlay(self) -> StrictBreakOverlay:
        return self._strict_overlay

    @property
    def idle_monitor(self) -> IdleMonitor:
        return self._idle_monitor

    # ══════════════════════════════════════════════════════════════════
    #  SYSTEM TRAY
    # ══════════════════════════════════════════════════════════════════

    def _build_tray_menu(self) -> None:
        menu = QMenu(self)

        self._tray_show_action = menu.addAction("Show")
        self._tray_show_action.triggered.connect(self._toggle_window)

        menu.addSeparator()

        self._tray_start_action = menu.addAction("Start")
        self._tray_start_action.triggered.connect(self._engine.toggle)

        skip_action = menu.addAction("Skip")
        skip_action.triggered.connect(self._engine.skip)

        reset_action = menu.addAction("Reset")
        reset_action.triggered.connect(self._engine.reset)

        menu.addSeparator()

        quit_action = menu.addAction("Quit")
        quit_action.triggered.connect(self._quit_app)

        self._tray_icon.setContextMenu(menu)

    def _on_tray_activated(self, reason: QSystemTrayIcon.ActivationReason) -> None:
        """Left-click on tray icon → toggle window visibility."""
        if reason == QSystemTrayIcon.ActivationReason.Trigger:
            self._toggle_window()

    def _toggle_window(self) -> None:
        if self.isVisible():
            self.hide()
        else:
            self._show_window()

    def _show_window(self) -> None:
        self.show()
        self.raise_()
        self.activateWindow()

    def _quit_app(self) -> None:
        """Actually quit (don't just hide to the tray)."""
        logger.info("Quit requested")
        self._engine.shutdown()
        self._strict_overlay.hide()
        self._tray_icon.hide()
        QApplication.instance().quit()

    # ══════════════════════════════════════════════════════════════════
    #  MENU BAR
    # ══════════════════════════════════════════════════════════════════

    def _build_menu_bar(self) -> None:
        menu_bar = self.menuBar()

        prefs_action = QAction("Preferences…", self)
        prefs_action.setMenuRole(QAction.MenuRole.PreferencesRole)
        prefs_action.setShortcut(QKeySequence("Ctrl+,"))
        prefs_action.triggered.connect(self._open_settings)

        about_action = QAction("About Pomodoro", self)
        about_action.setMenuRole(QAction.MenuRole.AboutRole)
        about_action.triggered.connect(self._show_about)

        quit_action = QAction("Quit Pomodoro", self)
        quit_action.setMenuRole(QAction.MenuRole.QuitRole)
        quit_action.setShortcut(QKeySequence("Ctrl+Q"))
        quit_action.triggered.connect(self._quit_app)

        app_menu = menu_bar.addMenu("Pomodoro")
        app_menu.addAction(about_action)
        app_menu.addAction(prefs_action)
        app_menu.addAction(quit_action)

        view_menu = menu_bar.addMenu("View")
        stats_action = QAction("Stats", self)
        stats_action.setShortcut(QKeySequence("Ctrl+S"))
        stats_action.triggered.connect(
            lambda: self._tabs.setCurrentWidget(self._stats_widget)
        )
        view_menu.addAction(stats_action)

    def _show_about(self) -> None:
        QMessageBox.about(
            self,
            "About Pomodoro",
            "<h3>Pomodoro</h3>"
            "<p>A focus timer with crash-safe state, session stats and "
            "D-Bus remote control.</p>",
        )

    # ══════════════════════════════════════════════════════════════════
    #  TIMER SIGNALS
    # ══════════════════════════════════════════════════════════════════

    def _on_state_changed(self, state: TimerState) -> None:
        self._apply_hints(presentation_hints(state))
        if self._strict_overlay.isVisible():
            self._strict_overlay.update_state(state)

    def _apply_hints(self, hints: PresentationHints) -> None:
        status = hints.status
        self._tray_icon.setIcon(make_tray_icon(hints.tray_mode, status.is_active))
        self._tray_icon.setToolTip(f"Pomodoro — {status.summary}")
        self._tray_start_action.setText("Pause" if status.is_active else "Start")

        if hints.fullscreen and not self._strict_overlay.isVisible():
            self._strict_overlay.update_state(self._engine.state)
            self._strict_overlay.showFullScreen()
        elif not hints.fullscreen and self._strict_overlay.isVisible():
            self._strict_overlay.hide()

        self._idle_monitor.set_enabled(hints.idle_detection)

    def _on_session_completed(self, mode: TimerMode) -> None:
        if self._tabs.currentWidget() is self._stats_widget:
            self._stats_widget.refresh()

    def _on_tab_changed(self, index: int) -> None:
        if self._tabs.widget(index) is self._stats_widget:
            self._stats_widget.refresh()

    # ══════════════════════════════════════════════════════════════════
    #  SETTINGS
    # ══════════════════════════════════════════════════════════════════

    def _open_settings(self) -> None:
        """Open the settings dialog and apply the result on Save."""
        from .ui.settings_dialog import SettingsDialog

        dlg = SettingsDialog(
            self._engine.settings,
            parent=self,
            sound_preview_callback=self._preview_sound,
        )
        if dlg.exec() == SettingsDialog.DialogCode.Accepted:
            self._engine.update_settings(dlg.settings)

    def _preview_sound(self, name: str) -> None:
        self._sound.play(name)

    # ══════════════════════════════════════════════════════════════════
    #  WINDOW EVENTS
    # ══════════════════════════════════════════════════════════════════

    def closeEvent(self, event) -> None:  # type: ignore[override]
        """Hide to the tray; quitting is explicit."""
        if self._tray_icon.isVisible():
            event.ignore()
            self.hide()
        else:
            self._engine.shutdown()
            event.accept()

    def keyPressEvent(self, event) -> None:  # type: ignore[override]
        """Space toggles, Escape resets."""
        key = event.key()
        if key == Qt.Key.Key_Space and not event.modifiers():
            self._engine.toggle()
            event.accept()
            return
        if key == Qt.Key.Key_Escape:
            self._engine.reset()
            event.accept()
            return
        super().keyPressEvent(event)
