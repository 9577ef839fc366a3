"""SQLAlchemy ORM models for Pomodoro."""

from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, Float, DateTime, Text, Index
from sqlalchemy.orm import DeclarativeBase


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class SessionRecord(Base):
    """One naturally completed session (work or break)."""

    __tablename__ = "sessions"
    __table_args__ = (Index("idx_sessions_date", "date"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    state = Column(String(20), nullable=False)          # work | shortBreak | longBreak
    elapsed = Column(Float, nullable=False)             # seconds
    timestamp = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    date = Column(String(10), nullable=False)           # YYYY-MM-DD (UTC)

    def __repr__(self) -> str:
        return (
            f"<SessionRecord id={self.id} state={self.state} "
            f"elapsed={self.elapsed} date={self.date}>"
        )


class Snapshot(Base):
    """Key/value row holding the serialised timer state.

    There is one live row (key ``pomodoro-storage``), overwritten in
    place on every change.
    """

    __tablename__ = "snapshots"

    key = Column(String(64), primary_key=True)
    payload = Column(Text, nullable=False)              # JSON
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    def __repr__(self) -> str:
        return f"<Snapshot key={self.key} updated_at={self.updated_at}>"
