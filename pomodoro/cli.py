"""Command-line entry point.

``pomodoro`` with no arguments launches the desktop app.  The
subcommands remote-control an already running instance over D-Bus::

    pomodoro toggle | start | stop | skip | reset
    pomodoro extend [SECONDS]
    pomodoro status
"""

from __future__ import annotations

from typing import Callable

import click
from PyQt6.QtCore import QCoreApplication

from .dbus_service import TimerBusClient, TimerBusError
from .presentation import TimerStatus
from .timer.machine import DEFAULT_EXTEND_SECONDS


_qt_app: QCoreApplication | None = None


def _default_client() -> TimerBusClient:
    global _qt_app
    # QtDBus wants an application object even for blocking calls
    if QCoreApplication.instance() is None:
        _qt_app = QCoreApplication([])
    return TimerBusClient()


class ClientContext:
    """Lazily builds the bus client so ``pomodoro`` alone never touches D-Bus."""

    def __init__(self, client_factory: Callable[[], TimerBusClient]) -> None:
        self._factory = client_factory
        self._client: TimerBusClient | None = None

    @property
    def client(self) -> TimerBusClient:
        if self._client is None:
            self._client = self._factory()
        return self._client


def _remote(ctx: click.Context, method: str, *args) -> None:
    obj: ClientContext = ctx.obj
    try:
        obj.client.call(method, *args)
    except TimerBusError as exc:
        raise click.ClickException(str(exc)) from exc


@click.group(invoke_without_command=True)
@click.pass_context
def main(ctx: click.Context) -> None:
    """Pomodoro timer. Run without a command to open the app."""
    if ctx.obj is None:
        ctx.obj = ClientContext(_default_client)
    if ctx.invoked_subcommand is None:
        from .__main__ import run_app

        ctx.exit(run_app())


@main.command()
@click.pass_context
def toggle(ctx: click.Context) -> None:
    """Start or pause the timer."""
    _remote(ctx, "Toggle")


@main.command()
@click.pass_context
def start(ctx: click.Context) -> None:
    """Start the timer if it is paused."""
    _remote(ctx, "Start")


@main.command()
@click.pass_context
def stop(ctx: click.Context) -> None:
    """Pause the timer if it is running."""
    _remote(ctx, "Stop")


@main.command()
@click.pass_context
def skip(ctx: click.Context) -> None:
    """Skip to the next mode."""
    _remote(ctx, "Skip")


@main.command()
@click.pass_context
def reset(ctx: click.Context) -> None:
    """Reset the current mode to its full duration."""
    _remote(ctx, "Reset")


@main.command()
@click.argument("seconds", type=int, default=DEFAULT_EXTEND_SECONDS)
@click.pass_context
def extend(ctx: click.Context, seconds: int) -> None:
    """Add SECONDS to the countdown (default 60)."""
    _remote(ctx, "Extend", seconds)


@main.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Print the current timer status."""
    obj: ClientContext = ctx.obj
    try:
        current: TimerStatus = obj.client.status()
    except TimerBusError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"Mode: {current.summary}")


if __name__ == "__main__":
    main()
