"""Completed-session history and the daily / weekly / monthly aggregates.

Only work sessions count toward stats; breaks are recorded but not
summed.  Dates are UTC calendar days (``YYYY-MM-DD``).
"""

from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone

from sqlalchemy import func, select

from ..timer.state import TimerMode
from .db import get_session
from .models import SessionRecord

logger = logging.getLogger("pomodoro.database")


@dataclass(frozen=True)
class DayStat:
    date: str
    count: int
    total_minutes: float


def _iso(day: date | str) -> str:
    return day if isinstance(day, str) else day.isoformat()


def save_session(
    mode: TimerMode, elapsed_seconds: float, *, now: datetime | None = None,
) -> None:
    """Append a completed-session record keyed by today's UTC date."""
    now = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    with get_session() as db:
        db.add(SessionRecord(
            state=TimerMode(mode).value,
            elapsed=float(elapsed_seconds),
            timestamp=now,
            date=now.strftime("%Y-%m-%d"),
        ))
    logger.debug("Saved %s session (%ss)", TimerMode(mode).value, elapsed_seconds)


def daily_stats(day: date | str) -> DayStat:
    """Work-session count and minutes for one day (zeros when empty)."""
    day = _iso(day)
    with get_session() as db:
        count, total_seconds = db.execute(
            select(
                func.count(SessionRecord.id),
                func.coalesce(func.sum(SessionRecord.elapsed), 0),
            ).where(
                SessionRecord.date == day,
                SessionRecord.state == TimerMode.WORK.value,
            )
        ).one()
    return DayStat(date=day, count=count, total_minutes=total_seconds / 60.0)


def range_stats(start: date | str, end: date | str) -> list[DayStat]:
    """Per-day stats for days in ``[start, end]`` that have work sessions."""
    with get_session() as db:
        rows = db.execute(
            select(
                SessionRecord.date,
                func.count(SessionRecord.id),
                func.coalesce(func.sum(SessionRecord.elapsed), 0),
            )
            .where(
                SessionRecord.date >= _iso(start),
                SessionRecord.date <= _iso(end),
                SessionRecord.state == TimerMode.WORK.value,
            )
            .group_by(SessionRecord.date)
            .order_by(SessionRecord.date)
        ).all()
    return [
        DayStat(date=d, count=count, total_minutes=seconds / 60.0)
        for d, count, seconds in rows
    ]


def weekly_stats(week_start: date | str) -> list[DayStat]:
    """Stats for the seven days beginning at *week_start*."""
    start = date.fromisoformat(_iso(week_start))
    return range_stats(start, start + timedelta(days=6))


def monthly_stats(year: int, month: int) -> list[DayStat]:
    """Stats for every day of the given month.

    Raises ``ValueError`` for an impossible month.
    """
    if not 1 <= month <= 12:
        raise ValueError(f"invalid month: {month}")
    last_day = calendar.monthrange(year, month)[1]
    return range_stats(date(year, month, 1), date(year, month, last_day))


def week_start_for(day: date) -> date:
    """The Monday of *day*'s week."""
    return day - timedelta(days=day.weekday())


class SessionStore:
    """Engine-facing adapter for :func:`save_session`."""

    def save(self, mode: TimerMode, elapsed_seconds: float) -> None:
        save_session(mode, elapsed_seconds)
