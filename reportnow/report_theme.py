"""Report color palettes.

Each :class:`Theme` maps semantic roles to concrete colors.  A theme is
chosen once per render and threaded through every drawing call; nothing
here is mutated at runtime.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

# Aligned with the console's Tailwind design tokens (blue accent, print-friendly light).
LIGHT_COLORS: dict[str, str] = {
    "primary": "#2563eb",
    "primary_soft": "#e0edff",
    "on_primary": "#ffffff",
    "header_subtitle": "#e2e8f0",
    "background": "#ffffff",
    "surface": "#f9fafb",
    "surface_alt": "#f3f4f6",
    "card": "#ffffff",
    "border": "#e5e7eb",
    "grid": "#e5e7eb",
    "axis": "#9ca3af",
    "text": "#0f172a",
    "text_secondary": "#334155",
    "muted": "#6b7280",
    "ok": "#16a34a",
    "warn": "#f59e0b",
    "critical": "#ef4444",
    # Status timeline
    "status_engine_on": "#16a34a",
    "status_moving": "#2563eb",
    "status_stopped": "#f59e0b",
    "status_engine_off": "#6b7280",
    # Categorical chart series
    "series_1": "#2563eb",
    "series_2": "#16a34a",
    "series_3": "#f59e0b",
    "series_4": "#ef4444",
    "series_5": "#7c3aed",
    "series_6": "#0ea5e9",
}

DARK_COLORS: dict[str, str] = {
    "primary": "#3b82f6",
    "primary_soft": "#1e3a8a",
    "on_primary": "#ffffff",
    "header_subtitle": "#cbd5e1",
    "background": "#0f172a",
    "surface": "#1e293b",
    "surface_alt": "#162032",
    "card": "#1e293b",
    "border": "#334155",
    "grid": "#334155",
    "axis": "#64748b",
    "text": "#f1f5f9",
    "text_secondary": "#cbd5e1",
    "muted": "#94a3b8",
    "ok": "#22c55e",
    "warn": "#fbbf24",
    "critical": "#f87171",
    "status_engine_on": "#22c55e",
    "status_moving": "#60a5fa",
    "status_stopped": "#fbbf24",
    "status_engine_off": "#94a3b8",
    "series_1": "#60a5fa",
    "series_2": "#22c55e",
    "series_3": "#fbbf24",
    "series_4": "#f87171",
    "series_5": "#a78bfa",
    "series_6": "#38bdf8",
}

SERIES_ROLES: tuple[str, ...] = tuple(f"series_{idx}" for idx in range(1, 7))


@dataclass(frozen=True, slots=True)
class Theme:
    name: str
    colors: Mapping[str, str]

    def color(self, role: str) -> str:
        """Return the hex color for *role*; unknown roles raise ``KeyError``."""
        try:
            return self.colors[role]
        except KeyError:
            raise KeyError(f"Theme {self.name!r} has no color role {role!r}") from None

    def series(self, index: int) -> str:
        return self.colors[SERIES_ROLES[index % len(SERIES_ROLES)]]

    def status(self, status: object) -> str:
        return self.colors.get(f"status_{status}", self.colors["muted"])


THEMES: dict[str, Theme] = {
    "light": Theme("light", MappingProxyType(LIGHT_COLORS)),
    "dark": Theme("dark", MappingProxyType(DARK_COLORS)),
}


def get_theme(name: object) -> Theme:
    """Resolve a theme by name (``light``/``dark``); anything else is an error."""
    if isinstance(name, Theme):
        return name
    key = str(name or "").strip().lower()
    theme = THEMES.get(key)
    if theme is None:
        raise ValueError(f"Unknown report theme {name!r}; expected one of {sorted(THEMES)}")
    return theme
