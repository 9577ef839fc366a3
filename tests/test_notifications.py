"""Tests for the tray notifier."""

from pomodoro.notifications import Notifier
from pomodoro.timer.effects import ACTION_WORK_DONE, NOTIFICATION_TITLE, SendNotification


REQUEST = SendNotification(NOTIFICATION_TITLE, "Nice work! Time for a short break.", ACTION_WORK_DONE)


class RecordingTray:
    def __init__(self):
        self.messages: list[tuple] = []

    def showMessage(self, title, body, icon, timeout):
        self.messages.append((title, body, timeout))


def test_without_tray_logs(caplog):
    caplog.set_level("INFO", logger="pomodoro.notifications")
    Notifier().notify(REQUEST)
    assert "Nice work! Time for a short break." in caplog.text


def test_tray_message(qapp, monkeypatch):
    monkeypatch.setattr(
        "pomodoro.notifications.QSystemTrayIcon.supportsMessages",
        staticmethod(lambda: True),
    )
    tray = RecordingTray()
    Notifier(tray).notify(REQUEST)
    assert tray.messages == [("Pomodoro", "Nice work! Time for a short break.", Notifier.TIMEOUT_MS)]
