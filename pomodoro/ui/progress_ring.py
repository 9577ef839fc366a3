"""Circular countdown ring rendered with QPainter.

- Depletes clockwise as the session runs.
- Colour follows the mode; a paused timer is drawn desaturated.
- Shows MM:SS at the centre with the mode label underneath.
"""

from __future__ import annotations

from PyQt6.QtCore import Qt, QRectF, QVariantAnimation, QEasingCurve
from PyQt6.QtGui import QPainter, QPen, QColor, QConicalGradient, QFont
from PyQt6.QtWidgets import QWidget

from ..timer.state import TimerMode
from .styles import PALETTE, ring_colors


def _lerp_color(c1: QColor, c2: QColor, t: float) -> QColor:
    t = max(0.0, min(1.0, t))
    return QColor(
        int(c1.red()   + (c2.red()   - c1.red())   * t),
        int(c1.green() + (c2.green() - c1.green()) * t),
        int(c1.blue()  + (c2.blue()  - c1.blue())  * t),
    )


class ProgressRing(QWidget):
    """Custom-painted circular timer ring."""

    RING_DIAMETER = 260
    RING_THICKNESS = 12

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setMinimumSize(self.RING_DIAMETER + 40, self.RING_DIAMETER + 40)

        self._fraction: float = 1.0
        self._time_text: str = "25:00"
        self._label: str = ""
        self._mode = TimerMode.WORK
        self._is_active = False

        primary, secondary = ring_colors(self._mode, self._is_active)
        self._primary = QColor(primary)
        self._secondary = QColor(secondary)
        self._from = (QColor(self._primary), QColor(self._secondary))
        self._to = (QColor(self._primary), QColor(self._secondary))

        self._color_anim = QVariantAnimation(self)
        self._color_anim.setDuration(400)
        self._color_anim.setStartValue(0.0)
        self._color_anim.setEndValue(1.0)
        self._color_anim.setEasingCurve(QEasingCurve.Type.InOutQuad)
        self._color_anim.valueChanged.connect(self._on_color_anim)

    # ── public API ────────────────────────────────────────────────────

    @property
    def fraction(self) -> float:
        return self._fraction

    @property
    def time_text(self) -> str:
        return self._time_text

    def set_fraction(self, fraction: float) -> None:
        """Remaining share of the session, 0..1 (clamped)."""
        self._fraction = max(0.0, min(1.0, fraction))
        self.update()

    def set_time_text(self, text: str) -> None:
        self._time_text = text
        self.update()

    def set_label(self, text: str) -> None:
        self._label = text
        self.update()

    def apply_mode(self, mode: TimerMode, is_active: bool) -> None:
        """Animate to the colours for *mode* / running state."""
        if (mode, is_active) == (self._mode, self._is_active):
            return
        self._mode, self._is_active = mode, is_active
        primary, secondary = ring_colors(mode, is_active)
        self._from = (QColor(self._primary), QColor(self._secondary))
        self._to = (QColor(primary), QColor(secondary))
        self._color_anim.stop()
        self._color_anim.start()

    # ── painting ──────────────────────────────────────────────────────

    def _on_color_anim(self, value: object) -> None:
        t = float(value)  # type: ignore[arg-type]
        self._primary = _lerp_color(self._from[0], self._to[0], t)
        self._secondary = _lerp_color(self._from[1], self._to[1], t)
        self.update()

    def paintEvent(self, event) -> None:  # type: ignore[override]
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)

        cx, cy = self.width() / 2, self.height() / 2
        diameter = max(100, min(self.width(), self.height()) - 40)
        radius = diameter / 2
        ring_rect = QRectF(cx - radius, cy - radius, diameter, diameter)

        # track
        track = QColor(self._primary)
        track.setAlpha(35)
        pen = QPen(track, self.RING_THICKNESS)
        pen.setCapStyle(Qt.PenCapStyle.RoundCap)
        painter.setPen(pen)
        painter.drawEllipse(ring_rect)

        # arc, starting at 12 o'clock and running clockwise
        if self._fraction > 0.001:
            gradient = QConicalGradient(cx, cy, 90)
            gradient.setColorAt(0.0, self._primary)
            gradient.setColorAt(0.5, self._secondary)
            gradient.setColorAt(1.0, self._primary)
            arc_pen = QPen(gradient, self.RING_THICKNESS)
            arc_pen.setCapStyle(Qt.PenCapStyle.RoundCap)
            painter.setPen(arc_pen)
            painter.drawArc(ring_rect, 90 * 16, -int(self._fraction * 360 * 16))

        time_font = QFont()
        time_font.setPixelSize(52)
        time_font.setWeight(QFont.Weight.Bold)
        painter.setFont(time_font)
        painter.setPen(QColor(PALETTE["text"]))
        time_rect = QRectF(ring_rect)
        time_rect.moveTop(time_rect.top() - 12)
        painter.drawText(time_rect, Qt.AlignmentFlag.AlignCenter, self._time_text)

        label_font = QFont()
        label_font.setPixelSize(13)
        label_font.setWeight(QFont.Weight.DemiBold)
        label_font.setLetterSpacing(QFont.SpacingType.AbsoluteSpacing, 3)
        painter.setFont(label_font)
        painter.setPen(self._primary)
        label_rect = QRectF(ring_rect)
        label_rect.moveTop(label_rect.top() + 34)
        painter.drawText(label_rect, Qt.AlignmentFlag.AlignCenter, self._label.upper())

        painter.end()
