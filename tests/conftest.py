"""Shared pytest fixtures for Pomodoro tests."""

import os
import sys
import pytest

# headless runs (CI) have no display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtWidgets import QApplication

from pomodoro.database.db import configure_engine, init_db
from pomodoro.timer.engine import TimerEngine

from helpers import FakeClock, FakeNotifier, FakeSessionStore, FakeSnapshotStore, FakeSound


@pytest.fixture(scope="session")
def qapp():
    """A single QApplication instance shared across the entire test run."""
    app = QApplication.instance() or QApplication(sys.argv)
    yield app


@pytest.fixture(autouse=True)
def test_db():
    """Point every test at a fresh in-memory SQLite database."""
    configure_engine("sqlite:///:memory:")
    init_db()
    yield


@pytest.fixture
def clock():
    """Controllable wall clock, starting at a fixed epoch-ms instant."""
    return FakeClock(1_700_000_000_000)


@pytest.fixture
def sound():
    return FakeSound()


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def session_store():
    return FakeSessionStore()


@pytest.fixture
def snapshot_store():
    return FakeSnapshotStore()


@pytest.fixture
def engine(qapp, clock, sound, notifier, session_store, snapshot_store):
    """Engine wired to recording fakes and a fixed clock."""
    return TimerEngine(
        parent=None,
        sound=sound,
        notifier=notifier,
        session_store=session_store,
        snapshot_store=snapshot_store,
        clock=clock,
    )


@pytest.fixture
def bare_engine(qapp, clock):
    """Engine without collaborators (pure state-machine behaviour)."""
    return TimerEngine(parent=None, clock=clock)
