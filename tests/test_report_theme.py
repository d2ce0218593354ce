from __future__ import annotations

import re

import pytest

from reportnow.domain_models import PingStatus
from reportnow.report_theme import DARK_COLORS, LIGHT_COLORS, THEMES, get_theme

_HEX = re.compile(r"^#[0-9a-fA-F]{6}$")


def test_palettes_share_roles() -> None:
    assert set(LIGHT_COLORS) == set(DARK_COLORS)


@pytest.mark.parametrize("name", sorted(THEMES))
def test_palette_values_are_hex(name: str) -> None:
    for role, value in THEMES[name].colors.items():
        assert _HEX.match(value), f"{name}.{role}={value!r}"


def test_get_theme_normalizes_name() -> None:
    assert get_theme(" Dark ").name == "dark"
    theme = get_theme("light")
    assert get_theme(theme) is theme


@pytest.mark.parametrize("bad", ["sepia", "", None])
def test_get_theme_rejects_unknown(bad: object) -> None:
    with pytest.raises(ValueError):
        get_theme(bad)


def test_theme_is_read_only() -> None:
    theme = get_theme("light")
    with pytest.raises(TypeError):
        theme.colors["primary"] = "#000000"  # type: ignore[index]


def test_series_wraps() -> None:
    theme = get_theme("light")
    assert theme.series(0) == theme.series(6)


def test_status_colors() -> None:
    theme = get_theme("dark")
    for status in PingStatus:
        assert theme.status(status) == theme.color(f"status_{status}")
    assert theme.status("unknown") == theme.color("muted")


def test_unknown_role_raises_key_error() -> None:
    with pytest.raises(KeyError):
        get_theme("light").color("nope")
