"""Database package."""

from .db import get_session, init_db, configure_engine, prune_sessions
from .models import SessionRecord, Snapshot
from .snapshot import SnapshotStore, load_snapshot, save_snapshot, STORAGE_KEY
from .stats import (
    DayStat,
    SessionStore,
    daily_stats,
    monthly_stats,
    range_stats,
    save_session,
    week_start_for,
    weekly_stats,
)

__all__ = [
    "get_session",
    "init_db",
    "configure_engine",
    "prune_sessions",
    "SessionRecord",
    "Snapshot",
    "SnapshotStore",
    "load_snapshot",
    "save_snapshot",
    "STORAGE_KEY",
    "DayStat",
    "SessionStore",
    "daily_stats",
    "monthly_stats",
    "range_stats",
    "save_session",
    "week_start_for",
    "weekly_stats",
]
