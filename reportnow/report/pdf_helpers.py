"""PDF report helper functions – text formatters and color utilities."""

from __future__ import annotations

from datetime import datetime


def safe_text(value: object, fallback: str = "—") -> str:
    return str(value).strip() if value is not None and str(value).strip() else fallback


def format_duration(seconds: float) -> str:
    """Compact duration: ``1h 5m``, ``4m 10s`` or ``12s``."""
    total = max(0, int(seconds))
    hours, rem = divmod(total, 3600)
    minutes, secs = divmod(rem, 60)
    if hours > 0:
        return f"{hours}h {minutes}m"
    if minutes > 0:
        return f"{minutes}m {secs}s"
    return f"{secs}s"


def format_clock(value: datetime | None) -> str:
    return value.strftime("%H:%M:%S") if value is not None else "—"


def format_number(value: float, decimals: int = 0) -> str:
    return f"{value:,.{decimals}f}"


def _hex_to_rgb(value: str) -> tuple[int, int, int]:
    txt = value.strip().lstrip("#")
    return (int(txt[0:2], 16), int(txt[2:4], 16), int(txt[4:6], 16))


def _rgb_to_hex(rgb: tuple[int, int, int]) -> str:
    return f"#{rgb[0]:02x}{rgb[1]:02x}{rgb[2]:02x}"


def color_blend(a: str, b: str, t: float) -> str:
    t_clamped = max(0.0, min(1.0, t))
    ar, ag, ab = _hex_to_rgb(a)
    br, bg, bb = _hex_to_rgb(b)
    return _rgb_to_hex(
        (
            int(round(ar + ((br - ar) * t_clamped))),
            int(round(ag + ((bg - ag) * t_clamped))),
            int(round(ab + ((bb - ab) * t_clamped))),
        )
    )
