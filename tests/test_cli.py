"""Tests for the ``pomodoro`` command-line client.

The bus client is replaced with a recording fake through
:class:`ClientContext`, so no D-Bus session is needed.
"""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from pomodoro.cli import ClientContext, main
from pomodoro.dbus_service import TimerBusError
from pomodoro.presentation import TimerStatus
from pomodoro.timer.state import TimerMode


class FakeBusClient:
    def __init__(self, status=None, error=None):
        self.calls: list[tuple] = []
        self._status = status or TimerStatus(TimerMode.WORK, 24 * 60 + 13, True, 3)
        self._error = error

    def call(self, method, *args):
        if self._error:
            raise self._error
        self.calls.append((method, *args))

    def status(self):
        if self._error:
            raise self._error
        return self._status


@pytest.fixture
def client():
    return FakeBusClient()


@pytest.fixture
def invoke(client):
    runner = CliRunner()

    def _invoke(*args, bus=None):
        target = bus or client
        return runner.invoke(main, list(args), obj=ClientContext(lambda: target))

    return _invoke


class TestCommands:

    @pytest.mark.parametrize("command, method", [
        ("toggle", "Toggle"),
        ("start", "Start"),
        ("stop", "Stop"),
        ("skip", "Skip"),
        ("reset", "Reset"),
    ])
    def test_simple_commands(self, invoke, client, command, method):
        result = invoke(command)
        assert result.exit_code == 0, result.output
        assert client.calls == [(method,)]

    def test_extend_default(self, invoke, client):
        result = invoke("extend")
        assert result.exit_code == 0
        assert client.calls == [("Extend", 60)]

    def test_extend_seconds(self, invoke, client):
        invoke("extend", "300")
        assert client.calls == [("Extend", 300)]

    def test_extend_rejects_text(self, invoke, client):
        result = invoke("extend", "soon")
        assert result.exit_code == 2
        assert client.calls == []


class TestStatus:

    def test_running(self, invoke):
        result = invoke("status")
        assert result.exit_code == 0
        assert result.output == "Mode: Focus | Running | 24:13 | Sessions: 3\n"

    def test_paused_break(self, invoke):
        bus = FakeBusClient(status=TimerStatus(TimerMode.SHORT_BREAK, 300, False, 1))
        result = invoke("status", bus=bus)
        assert "Short Break | Paused | 05:00 | Sessions: 1" in result.output


class TestNotRunning:

    @pytest.mark.parametrize("command", ["toggle", "extend", "status"])
    def test_error_reported(self, invoke, command):
        bus = FakeBusClient(error=TimerBusError("Pomodoro is not running"))
        result = invoke(command, bus=bus)
        assert result.exit_code == 1
        assert "Error: Pomodoro is not running" in result.output


class TestClientContext:

    def test_client_built_lazily_once(self):
        built = []

        def factory():
            built.append(True)
            return FakeBusClient()

        ctx = ClientContext(factory)
        assert built == []
        assert ctx.client is ctx.client
        assert built == [True]
