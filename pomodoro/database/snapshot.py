"""Persisted timer snapshot: one JSON row, overwritten in place."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Optional

from ..timer.state import TimerState
from .db import get_session
from .models import Snapshot

logger = logging.getLogger("pomodoro.database")

STORAGE_KEY = "pomodoro-storage"


def save_snapshot(state: TimerState, *, key: str = STORAGE_KEY) -> None:
    """Write *state* under *key*, replacing whatever was there."""
    payload = json.dumps(state.to_dict(), separators=(",", ":"))
    with get_session() as db:
        row = db.get(Snapshot, key)
        if row is None:
            db.add(Snapshot(key=key, payload=payload))
        else:
            row.payload = payload
            row.updated_at = datetime.now(timezone.utc)


def load_snapshot(*, key: str = STORAGE_KEY) -> Optional[TimerState]:
    """Return the stored state, or ``None`` if there is none.

    A snapshot that cannot be decoded is deleted so the next start does
    not trip over it again; the caller falls back to defaults.
    """
    with get_session() as db:
        row = db.get(Snapshot, key)
        if row is None:
            return None
        try:
            return TimerState.from_dict(json.loads(row.payload))
        except (TypeError, ValueError) as exc:  # JSONDecodeError is a ValueError
            logger.warning("Discarding corrupt timer snapshot: %s", exc)
            db.delete(row)
            return None


def clear_snapshot(*, key: str = STORAGE_KEY) -> None:
    with get_session() as db:
        row = db.get(Snapshot, key)
        if row is not None:
            db.delete(row)


class SnapshotStore:
    """Engine-facing adapter around :func:`save_snapshot` / :func:`load_snapshot`."""

    def __init__(self, key: str = STORAGE_KEY) -> None:
        self.key = key

    def save(self, state: TimerState) -> None:
        save_snapshot(state, key=self.key)

    def load(self) -> Optional[TimerState]:
        return load_snapshot(key=self.key)
