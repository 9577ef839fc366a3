"""Idle detection via the freedesktop ScreenSaver D-Bus interface.

The monitor polls ``GetSessionIdleTime`` every 10 s while enabled and
emits one signal per edge: ``idle_detected`` when the session crosses
the 5 min threshold, ``idle_cleared`` when the user is back.  It never
touches the timer itself; the app connects the signals to
:meth:`TimerEngine.idle_detected` / :meth:`TimerEngine.idle_cleared`.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from PyQt6.QtCore import QObject, QTimer, pyqtSignal
from PyQt6.QtDBus import QDBusConnection, QDBusInterface, QDBusMessage


IDLE_THRESHOLD_SECS = 300
POLL_INTERVAL_SECS = 10

SCREENSAVER_SERVICE = "org.freedesktop.ScreenSaver"
SCREENSAVER_PATH = "/ScreenSaver"
SCREENSAVER_INTERFACE = "org.freedesktop.ScreenSaver"


def screensaver_idle_ms() -> Optional[int]:
    """Milliseconds since last input, or ``None`` when unavailable."""
    bus = QDBusConnection.sessionBus()
    if not bus.isConnected():
        return None
    iface = QDBusInterface(
        SCREENSAVER_SERVICE, SCREENSAVER_PATH, SCREENSAVER_INTERFACE, bus,
    )
    if not iface.isValid():
        return None
    reply = iface.call("GetSessionIdleTime")
    if reply.type() != QDBusMessage.MessageType.ReplyMessage or not reply.arguments():
        return None
    return int(reply.arguments()[0])


class IdleMonitor(QObject):
    """Edge-triggered idle detector.

    Signals
    -------
    idle_detected()
        The session just became idle.
    idle_cleared()
        The session was idle and now has input again.
    """

    idle_detected = pyqtSignal()
    idle_cleared = pyqtSignal()

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        query: Callable[[], Optional[int]] = screensaver_idle_ms,
        threshold_secs: int = IDLE_THRESHOLD_SECS,
        poll_interval_secs: int = POLL_INTERVAL_SECS,
        logger: logging.Logger | None = None,
    ) -> None:
        super().__init__(parent)
        self._query = query
        self._threshold_secs = threshold_secs
        self._logger = logger or logging.getLogger("pomodoro.idle")
        self._enabled = False
        self._was_idle = False

        self._poll_timer = QTimer(self)
        self._poll_timer.setInterval(poll_interval_secs * 1000)
        self._poll_timer.timeout.connect(self.poll)

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def is_idle(self) -> bool:
        return self._was_idle

    def set_enabled(self, enabled: bool) -> None:
        """Start or stop polling.  Disabling forgets any pending idle edge."""
        if enabled == self._enabled:
            return
        self._enabled = enabled
        if enabled:
            self._poll_timer.start()
        else:
            self._poll_timer.stop()
            self._was_idle = False
        self._logger.info("Idle detection %s", "enabled" if enabled else "disabled")

    def poll(self) -> None:
        """Query idle time once and emit on an edge."""
        if not self._enabled:
            return
        try:
            idle_ms = self._query()
        except Exception:
            self._logger.warning("Idle time query failed", exc_info=True)
            return
        if idle_ms is None:
            return

        is_idle = idle_ms // 1000 >= self._threshold_secs
        if is_idle and not self._was_idle:
            self._logger.info("User idle for %ss", idle_ms // 1000)
            self._was_idle = True
            self.idle_detected.emit()
        elif not is_idle and self._was_idle:
            self._logger.info("User is back")
            self._was_idle = False
            self.idle_cleared.emit()
