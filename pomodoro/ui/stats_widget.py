"""Stats dashboard.

Sections
--------
1. **Today**: focus sessions and minutes
2. **This week**: bar chart of focus minutes, Monday to Sunday
3. **This month**: totals plus a bar per day

All figures come from :mod:`pomodoro.database.stats` and count work
sessions only.  Charts are plain QPainter widgets.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone

from PyQt6.QtCore import Qt, QRect
from PyQt6.QtGui import QPainter, QColor, QPen, QFont
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QFrame, QPushButton,
)

from ..database.stats import daily_stats, monthly_stats, week_start_for, weekly_stats
from .styles import PALETTE


# ═══════════════════════════════════════════════════════════════════════════
#  FORMAT HELPERS
# ═══════════════════════════════════════════════════════════════════════════


def format_focus_minutes(total_minutes: float) -> str:
    """125 → '2h 5m', 0 → '0m', 60 → '1h 0m'."""
    total = int(round(total_minutes))
    if total <= 0:
        return "0m"
    hours, mins = divmod(total, 60)
    return f"{hours}h {mins}m" if hours else f"{mins}m"


# ═══════════════════════════════════════════════════════════════════════════
#  DATA
# ═══════════════════════════════════════════════════════════════════════════


@dataclass
class StatsSnapshot:
    """Everything the dashboard shows, loaded in one go."""

    today_sessions: int = 0
    today_minutes: float = 0.0
    # (label, minutes, is_today)
    weekly: list[tuple[str, float, bool]] = field(default_factory=list)
    month_label: str = ""
    month_sessions: int = 0
    month_minutes: float = 0.0
    monthly: list[tuple[str, float, bool]] = field(default_factory=list)


def load_stats(today: date | None = None) -> StatsSnapshot:
    """Query today's, this week's and this month's aggregates (UTC days)."""
    today = today or datetime.now(timezone.utc).date()
    snap = StatsSnapshot()

    day = daily_stats(today)
    snap.today_sessions = day.count
    snap.today_minutes = day.total_minutes

    monday = week_start_for(today)
    by_day = {s.date: s.total_minutes for s in weekly_stats(monday)}
    for offset in range(7):
        d = monday + timedelta(days=offset)
        snap.weekly.append((d.strftime("%a"), by_day.get(d.isoformat(), 0.0), d == today))

    month = monthly_stats(today.year, today.month)
    snap.month_label = today.strftime("%B %Y")
    snap.month_sessions = sum(s.count for s in month)
    snap.month_minutes = sum(s.total_minutes for s in month)
    by_day = {s.date: s.total_minutes for s in month}
    d = today.replace(day=1)
    while d.month == today.month:
        snap.monthly.append((str(d.day), by_day.get(d.isoformat(), 0.0), d == today))
        d += timedelta(days=1)
    return snap


# ═══════════════════════════════════════════════════════════════════════════
#  BAR CHART
# ═══════════════════════════════════════════════════════════════════════════


class BarChart(QWidget):
    """Focus minutes per day; today's bar is highlighted."""

    def __init__(self, parent: QWidget | None = None, *, show_values: bool = True) -> None:
        super().__init__(parent)
        self._data: list[tuple[str, float, bool]] = []
        self._show_values = show_values
        self.setMinimumHeight(160)

    def set_data(self, data: list[tuple[str, float, bool]]) -> None:
        """data: list of (label, minutes, is_today) tuples."""
        self._data = data
        self.update()

    @property
    def data(self) -> list[tuple[str, float, bool]]:
        return list(self._data)

    def paintEvent(self, event) -> None:  # type: ignore[override]
        if not self._data:
            return

        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)

        w, h = self.width(), self.height()
        top, bottom, side = 18, 24, 6
        chart_w = w - side * 2
        chart_h = h - top - bottom
        max_val = max((v for _, v, _ in self._data), default=0) or 1

        grid_pen = QPen(QColor(PALETTE["border"]))
        grid_pen.setStyle(Qt.PenStyle.DotLine)
        painter.setPen(grid_pen)
        for frac in (0.25, 0.5, 0.75):
            y = int(top + chart_h * (1.0 - frac))
            painter.drawLine(side, y, w - side, y)

        spacing = chart_w / len(self._data)
        bar_width = max(2, int(spacing * 0.6))
        label_font = QFont()
        label_font.setPixelSize(10)
        painter.setFont(label_font)

        for i, (label, value, is_today) in enumerate(self._data):
            cx = int(side + spacing * (i + 0.5))
            bar_h = int(value / max_val * chart_h) if value > 0 else 0
            bar_y = top + chart_h - bar_h

            if bar_h:
                painter.setPen(Qt.PenStyle.NoPen)
                painter.setBrush(QColor(PALETTE["accent2" if is_today else "accent"]))
                painter.drawRoundedRect(cx - bar_width // 2, bar_y, bar_width, bar_h, 3, 3)
                if self._show_values:
                    painter.setPen(QColor(PALETTE["text_muted"]))
                    painter.drawText(
                        QRect(cx - 20, bar_y - 16, 40, 14),
                        Qt.AlignmentFlag.AlignCenter,
                        str(int(round(value))),
                    )

            painter.setPen(QColor(PALETTE["text" if is_today else "text_muted"]))
            painter.drawText(
                QRect(cx - 20, top + chart_h + 4, 40, 18),
                Qt.AlignmentFlag.AlignCenter,
                label,
            )

        painter.end()


# ═══════════════════════════════════════════════════════════════════════════
#  DASHBOARD
# ═══════════════════════════════════════════════════════════════════════════


class StatsWidget(QWidget):
    """Today / week / month view over the session history."""

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._snapshot = StatsSnapshot()
        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(16, 16, 16, 16)
        layout.setSpacing(12)

        # ── today ────────────────────────────────────────────────────
        today_card = self._card()
        row = QHBoxLayout(today_card)
        self._today_sessions = QLabel("0")
        self._today_sessions.setStyleSheet("font-size: 28px; font-weight: 700;")
        self._today_minutes = QLabel("0m")
        self._today_minutes.setObjectName("mutedLabel")
        row.addWidget(QLabel("Today"))
        row.addStretch()
        row.addWidget(self._today_sessions)
        row.addWidget(self._today_minutes)
        layout.addWidget(today_card)

        # ── week ─────────────────────────────────────────────────────
        week_card = self._card()
        week_layout = QVBoxLayout(week_card)
        week_layout.addWidget(QLabel("This week (minutes)"))
        self._weekly_chart = BarChart(week_card)
        week_layout.addWidget(self._weekly_chart)
        layout.addWidget(week_card)

        # ── month ────────────────────────────────────────────────────
        month_card = self._card()
        month_layout = QVBoxLayout(month_card)
        self._month_title = QLabel("")
        self._month_summary = QLabel("")
        self._month_summary.setObjectName("mutedLabel")
        month_layout.addWidget(self._month_title)
        month_layout.addWidget(self._month_summary)
        self._monthly_chart = BarChart(month_card, show_values=False)
        month_layout.addWidget(self._monthly_chart)
        layout.addWidget(month_card)

        refresh_btn = QPushButton("Refresh")
        refresh_btn.setObjectName("secondaryButton")
        refresh_btn.clicked.connect(lambda: self.refresh())
        layout.addWidget(refresh_btn, alignment=Qt.AlignmentFlag.AlignRight)
        layout.addStretch()

    @staticmethod
    def _card() -> QFrame:
        card = QFrame()
        card.setObjectName("card")
        return card

    def refresh(self, today: date | None = None) -> None:
        """Reload from the database and repaint."""
        snap = load_stats(today)
        self._snapshot = snap
        self._today_sessions.setText(str(snap.today_sessions))
        self._today_minutes.setText(format_focus_minutes(snap.today_minutes))
        self._weekly_chart.set_data(snap.weekly)
        self._month_title.setText(snap.month_label)
        self._month_summary.setText(
            f"{snap.month_sessions} sessions · "
            f"{format_focus_minutes(snap.month_minutes)} focused"
        )
        self._monthly_chart.set_data(snap.monthly)

    @property
    def snapshot(self) -> StatsSnapshot:
        return self._snapshot
