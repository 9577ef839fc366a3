"""Palette, mode colours and the application stylesheet."""

from __future__ import annotations

from ..timer.state import TimerMode

# ── ring colours per mode: (primary, secondary) for the conical gradient ──

MODE_COLORS: dict[TimerMode, tuple[str, str]] = {
    TimerMode.WORK:        ("#E85D5D", "#F29A76"),   # tomato
    TimerMode.SHORT_BREAK: ("#4ECDC4", "#44B09E"),   # teal
    TimerMode.LONG_BREAK:  ("#7D8CE0", "#5A6FD1"),   # blue
}
PAUSED_COLORS: tuple[str, str] = ("#6C7086", "#585B70")

PALETTE: dict[str, str] = {
    "bg":           "#1C1C24",
    "bg_secondary": "#26262F",
    "accent":       "#E85D5D",
    "accent2":      "#F29A76",
    "text":         "#ECECF1",
    "text_muted":   "#8A8A99",
    "warning":      "#F9E2AF",
    "border":       "#34343F",
}


def ring_colors(mode: TimerMode, is_active: bool) -> tuple[str, str]:
    """Gradient pair for the ring; paused timers are desaturated."""
    return MODE_COLORS[mode] if is_active else PAUSED_COLORS


# ── font resolution ───────────────────────────────────────────────────

_resolved_font: str | None = None


def resolve_font_family() -> str:
    """Best available UI font.  Call after the QApplication exists."""
    global _resolved_font
    if _resolved_font is None:
        from PyQt6.QtGui import QFontDatabase

        families = set(QFontDatabase.families())
        for candidate in ("SF Pro", "Inter", "Cantarell", "Noto Sans"):
            if candidate in families:
                _resolved_font = candidate
                break
        else:
            _resolved_font = "Helvetica Neue"
    return _resolved_font


# ── QSS builder ───────────────────────────────────────────────────────


def build_stylesheet(palette: dict[str, str] | None = None) -> str:
    p = palette or PALETTE
    font = resolve_font_family()
    return f"""
    QWidget {{
        background-color: {p['bg']};
        color: {p['text']};
        font-family: "{font}", Arial;
        font-size: 14px;
    }}

    QPushButton {{
        background-color: {p['bg_secondary']};
        border: 1px solid {p['border']};
        border-radius: 10px;
        padding: 8px 20px;
        font-weight: 600;
    }}
    QPushButton:hover {{ border-color: {p['accent']}; }}
    QPushButton:checked {{
        background-color: {p['accent']};
        color: {p['bg']};
        border: none;
    }}

    QPushButton#primaryButton {{
        background-color: {p['accent']};
        color: {p['bg']};
        border: none;
        font-size: 17px;
        padding: 12px 40px;
        border-radius: 12px;
    }}
    QPushButton#primaryButton:hover {{ background-color: {p['accent2']}; }}

    QPushButton#secondaryButton {{
        background-color: transparent;
        color: {p['text_muted']};
        font-size: 13px;
    }}
    QPushButton#secondaryButton:hover {{ color: {p['text']}; }}

    QPushButton#extendButton {{
        background-color: transparent;
        color: {p['warning']};
        border: 1px solid {p['warning']};
        font-size: 13px;
    }}

    QTabBar::tab {{
        background-color: transparent;
        color: {p['text_muted']};
        padding: 8px 20px;
        border-bottom: 2px solid transparent;
        font-weight: 600;
    }}
    QTabBar::tab:selected {{
        color: {p['accent']};
        border-bottom: 2px solid {p['accent']};
    }}

    QLabel#mutedLabel {{
        color: {p['text_muted']};
        font-size: 12px;
    }}

    QFrame#card {{
        background-color: {p['bg_secondary']};
        border: 1px solid {p['border']};
        border-radius: 12px;
    }}
    """
