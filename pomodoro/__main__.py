"""Allow running Pomodoro as a module: python -m pomodoro."""

from __future__ import annotations

import logging
import sys

from PyQt6.QtGui import QColor, QIcon, QPainter, QPixmap
from PyQt6.QtWidgets import QApplication

from .settings import APP_DATA_DIR, log_level_from_env


def setup_logging(level: int | None = None) -> None:
    logging.basicConfig(
        level=log_level_from_env() if level is None else level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _app_icon() -> QIcon:
    icon = QPixmap(256, 256)
    icon.fill(QColor(0, 0, 0, 0))
    p = QPainter(icon)
    p.setRenderHint(QPainter.RenderHint.Antialiasing)
    p.setBrush(QColor("#E85D5D"))
    p.setPen(QColor("#E85D5D").darker(120))
    p.drawEllipse(16, 16, 224, 224)
    p.end()
    return QIcon(icon)


def run_app() -> int:
    """Start the desktop app and block until it quits."""
    from .app import PomodoroApp
    from .database import SessionStore, SnapshotStore, init_db

    setup_logging()
    logger = logging.getLogger("pomodoro")

    init_db()
    logger.info("Pomodoro starting (data dir: %s)", APP_DATA_DIR)

    app = QApplication(sys.argv)
    app.setApplicationName("Pomodoro")
    app.setOrganizationName("Pomodoro")
    app.setQuitOnLastWindowClosed(False)
    app.setWindowIcon(_app_icon())

    window = PomodoroApp(
        session_store=SessionStore(),
        snapshot_store=SnapshotStore(),
    )
    window.show()
    return app.exec()


def main() -> None:
    """Command-line entry: no arguments opens the app."""
    from .cli import main as cli_main

    cli_main()


if __name__ == "__main__":
    main()
