"""Database connection and session management."""

import logging
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone

from sqlalchemy import create_engine, delete
from sqlalchemy.orm import sessionmaker, Session as OrmSession
from sqlalchemy.pool import StaticPool

from ..settings import APP_DATA_DIR
from .models import Base, SessionRecord

logger = logging.getLogger("pomodoro.database")

# ── paths ────────────────────────────────────────────────────────────────────

DB_PATH = APP_DATA_DIR / "pomodoro.db"

# Session records older than this are dropped on startup.
RETENTION_DAYS = 365

# ── engine & session factory (created lazily) ─────────────────────────────

_engine = None
_SessionFactory = None


def _get_engine():
    global _engine
    if _engine is None:
        APP_DATA_DIR.mkdir(parents=True, exist_ok=True)
        _engine = create_engine(
            f"sqlite:///{DB_PATH}",
            connect_args={"check_same_thread": False},
            echo=False,
        )
    return _engine


def _get_session_factory():
    global _SessionFactory
    if _SessionFactory is None:
        _SessionFactory = sessionmaker(bind=_get_engine(), expire_on_commit=False)
    return _SessionFactory


# ── public API ────────────────────────────────────────────────────────────


def configure_engine(url: str) -> None:
    """Override the database connection URL.  Used by tests to point at
    an in-memory SQLite database instead of the real one on disk."""
    global _engine, _SessionFactory
    _SessionFactory = None
    kwargs = {}
    if url.endswith(":memory:"):
        # one shared connection, otherwise every session sees an empty db
        kwargs["poolclass"] = StaticPool
    _engine = create_engine(
        url,
        connect_args={"check_same_thread": False},
        echo=False,
        **kwargs,
    )


def prune_sessions(days: int = RETENTION_DAYS, *, now: datetime | None = None) -> int:
    """Delete session records dated more than *days* ago.  Returns the count."""
    now = now or datetime.now(timezone.utc)
    cutoff = (now - timedelta(days=days)).strftime("%Y-%m-%d")
    with get_session() as db:
        result = db.execute(
            delete(SessionRecord).where(SessionRecord.date < cutoff)
        )
        removed = result.rowcount or 0
    if removed:
        logger.info("Pruned %d session records older than %s", removed, cutoff)
    return removed


def init_db() -> None:
    """Create all tables and drop expired session history."""
    engine = _get_engine()
    Base.metadata.create_all(engine)
    prune_sessions()


@contextmanager
def get_session():
    """Yield a SQLAlchemy session; commit on success, rollback on error."""
    factory = _get_session_factory()
    session: OrmSession = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
