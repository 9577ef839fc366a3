"""Session-bus remote control for a running Pomodoro instance.

Service ``com.pomodoro.Timer`` at ``/com/pomodoro/Timer`` exposes::

    Toggle() Start() Stop() Skip() Reset() Extend(int seconds)
    State (str)  TimeLeft (int)  IsActive (bool)  SessionsCompleted (int)

Status bars and scripts can drive the timer through it; the ``pomodoro``
CLI subcommands are thin clients of the same interface.  Every method
maps onto the engine call of the same name, so a remote command has
exactly the effect of pressing the button.
"""

from __future__ import annotations

import logging
from typing import Any

from PyQt6.QtCore import QObject, pyqtClassInfo, pyqtProperty, pyqtSlot
from PyQt6.QtDBus import (
    QDBusAbstractAdaptor,
    QDBusConnection,
    QDBusInterface,
    QDBusMessage,
)

from .presentation import TimerStatus
from .timer.engine import TimerEngine
from .timer.state import TimerMode


DBUS_SERVICE = "com.pomodoro.Timer"
DBUS_PATH = "/com/pomodoro/Timer"
DBUS_INTERFACE = "com.pomodoro.Timer"
PROPERTIES_INTERFACE = "org.freedesktop.DBus.Properties"

logger = logging.getLogger("pomodoro.dbus")


class TimerBusError(Exception):
    """Raised by the client when the app is unreachable or a call fails."""


# ══════════════════════════════════════════════════════════════════════════
#  SERVER SIDE
# ══════════════════════════════════════════════════════════════════════════


@pyqtClassInfo("D-Bus Interface", DBUS_INTERFACE)
class TimerAdaptor(QDBusAbstractAdaptor):
    """Exports a :class:`TimerEngine` on the bus.  Parented to the engine."""

    def __init__(self, engine: TimerEngine) -> None:
        super().__init__(engine)
        self._engine = engine

    # ── methods ───────────────────────────────────────────────────────

    @pyqtSlot()
    def Toggle(self) -> None:
        logger.info("Remote command: toggle")
        self._engine.toggle()

    @pyqtSlot()
    def Start(self) -> None:
        logger.info("Remote command: start")
        self._engine.start()

    @pyqtSlot()
    def Stop(self) -> None:
        logger.info("Remote command: stop")
        self._engine.stop()

    @pyqtSlot()
    def Skip(self) -> None:
        logger.info("Remote command: skip")
        self._engine.skip()

    @pyqtSlot()
    def Reset(self) -> None:
        logger.info("Remote command: reset")
        self._engine.reset()

    @pyqtSlot(int)
    def Extend(self, seconds: int) -> None:
        logger.info("Remote command: extend %ss", seconds)
        self._engine.extend(seconds)

    # ── properties ────────────────────────────────────────────────────

    @pyqtProperty(str)
    def State(self) -> str:
        return self._engine.mode.value

    @pyqtProperty(int)
    def TimeLeft(self) -> int:
        return self._engine.time_left

    @pyqtProperty(bool)
    def IsActive(self) -> bool:
        return self._engine.is_active

    @pyqtProperty(int)
    def SessionsCompleted(self) -> int:
        return self._engine.sessions_completed


def register_service(
    engine: TimerEngine, bus: QDBusConnection | None = None,
) -> TimerAdaptor | None:
    """Export *engine* on the session bus.

    Returns the adaptor, or ``None`` when the bus is unavailable or the
    name is taken.  The app keeps running either way.
    """
    bus = bus or QDBusConnection.sessionBus()
    if not bus.isConnected():
        logger.warning("D-Bus session bus unavailable; remote control disabled")
        return None

    adaptor = TimerAdaptor(engine)
    if not bus.registerObject(DBUS_PATH, engine):
        logger.warning("Could not register %s on D-Bus", DBUS_PATH)
        return None
    if not bus.registerService(DBUS_SERVICE):
        logger.warning(
            "Could not claim D-Bus name %s: %s",
            DBUS_SERVICE, bus.lastError().message(),
        )
        bus.unregisterObject(DBUS_PATH)
        return None

    logger.info("D-Bus service %s registered", DBUS_SERVICE)
    return adaptor


# ══════════════════════════════════════════════════════════════════════════
#  CLIENT SIDE
# ══════════════════════════════════════════════════════════════════════════


def _unwrap(value: Any) -> Any:
    variant = getattr(value, "variant", None)
    return variant() if callable(variant) else value


class TimerBusClient:
    """Talks to a running instance over the session bus."""

    def __init__(self, bus: QDBusConnection | None = None) -> None:
        self._bus = bus or QDBusConnection.sessionBus()

    def _interface(self, name: str = DBUS_INTERFACE) -> QDBusInterface:
        if not self._bus.isConnected():
            raise TimerBusError("D-Bus session bus is not available")
        iface = QDBusInterface(DBUS_SERVICE, DBUS_PATH, name, self._bus)
        if not iface.isValid():
            raise TimerBusError("Pomodoro is not running")
        return iface

    @staticmethod
    def _check(reply: QDBusMessage) -> QDBusMessage:
        if reply.type() == QDBusMessage.MessageType.ErrorMessage:
            raise TimerBusError(reply.errorMessage() or reply.errorName())
        return reply

    def call(self, method: str, *args: Any) -> None:
        self._check(self._interface().call(method, *args))

    def status(self) -> TimerStatus:
        reply = self._check(
            self._interface(PROPERTIES_INTERFACE).call("GetAll", DBUS_INTERFACE)
        )
        if not reply.arguments():
            raise TimerBusError("Empty status reply")
        props = {k: _unwrap(v) for k, v in dict(reply.arguments()[0]).items()}
        try:
            return TimerStatus(
                mode=TimerMode(props["State"]),
                time_left=int(props["TimeLeft"]),
                is_active=bool(props["IsActive"]),
                sessions_completed=int(props["SessionsCompleted"]),
            )
        except (KeyError, ValueError) as exc:
            raise TimerBusError(f"Malformed status reply: {exc}") from exc
