"""Desktop notifications delivered through the system tray icon."""

from __future__ import annotations

import logging

from PyQt6.QtWidgets import QSystemTrayIcon

from .timer.effects import SendNotification


class Notifier:
    """Shows :class:`SendNotification` requests as tray balloons.

    Usage::

        notifier = Notifier(tray_icon)
        engine = TimerEngine(notifier=notifier, ...)
    """

    TIMEOUT_MS = 8000

    def __init__(
        self,
        tray_icon: QSystemTrayIcon | None = None,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self._tray = tray_icon
        self._logger = logger or logging.getLogger("pomodoro.notifications")

    def notify(self, request: SendNotification) -> None:
        if self._tray is None or not QSystemTrayIcon.supportsMessages():
            self._logger.info(
                "Notification (no tray): %s - %s", request.title, request.body,
            )
            return
        self._tray.showMessage(
            request.title,
            request.body,
            QSystemTrayIcon.MessageIcon.Information,
            self.TIMEOUT_MS,
        )
        self._logger.debug("Notification sent [%s]", request.action_type_id)
