"""PDF report chart functions – bar, line and pie charts.

Charts are drawn with DocumentCanvas primitives only (rectangles, lines,
filled triangles and text).  Each routine reserves its block with
``ensure_space``, draws at the current cursor, advances the cursor and
returns how many data marks it drew.  Empty input is a no-op.
"""

from __future__ import annotations

from collections.abc import Sequence

from .pdf_canvas import DocumentCanvas
from .pdf_layout import evenly_spaced_indices, fan_angles, polar_point

BAR_GAP = 14.0
BAR_MAX_WIDTH = 72.0
LINE_GRID_DIVISIONS = 4
LINE_MAX_X_LABELS = 6
PIE_ANGLE_STEP_DEG = 5.0
PIE_START_DEG = -90.0
BLOCK_GAP = 16.0
TITLE_H = 16.0


def _draw_title(doc: DocumentCanvas, title: str | None) -> float:
    if not title:
        return 0.0
    doc.text(doc.margin_x, doc.y + 10, title, size=9, bold=True, color="text_secondary")
    return TITLE_H


def _fmt_value(value: float) -> str:
    return f"{value:.0f}" if float(value).is_integer() else f"{value:.1f}"


def bar_chart(
    doc: DocumentCanvas,
    categories: Sequence[tuple[str, float]],
    *,
    title: str | None = None,
    height: float = 170.0,
) -> int:
    """Vertical bars normalized to the largest value."""
    if not categories:
        return 0
    doc.ensure_space(height)
    top = doc.y
    title_h = _draw_title(doc, title)

    n = len(categories)
    plot_x0 = doc.margin_x + 10
    plot_w = doc.content_width - 20
    plot_top = top + title_h + 14
    plot_bottom = top + height - 18
    plot_h = max(1.0, plot_bottom - plot_top)
    bar_w = max(4.0, min(BAR_MAX_WIDTH, (plot_w - BAR_GAP * (n + 1)) / n))
    used_w = n * bar_w + (n - 1) * BAR_GAP
    x = plot_x0 + (plot_w - used_w) / 2
    peak = max(value for _label, value in categories)
    if peak <= 0:
        peak = 1.0

    doc.line(plot_x0, plot_bottom, plot_x0 + plot_w, plot_bottom, "axis", width=0.8)
    for idx, (label, value) in enumerate(categories):
        bar_h = max(0.0, value) / peak * plot_h
        doc.fill_rect(x, plot_bottom - bar_h, bar_w, bar_h, doc.theme.series(idx))
        center = x + bar_w / 2
        doc.text(center, plot_bottom - bar_h - 4, _fmt_value(value), size=7.5, align="center")
        doc.text(center, plot_bottom + 11, label, size=7, color="muted", align="center")
        x += bar_w + BAR_GAP

    doc.y = top + height + BLOCK_GAP
    return n


def line_chart(
    doc: DocumentCanvas,
    samples: Sequence[tuple[str, float]],
    *,
    title: str | None = None,
    y_label: str = "",
    height: float = 190.0,
) -> int:
    """Straight-segment line over a 4-division grid; returns segments drawn."""
    if not samples:
        return 0
    doc.ensure_space(height)
    top = doc.y
    title_h = _draw_title(doc, title)

    n = len(samples)
    plot_x0 = doc.margin_x + 36
    plot_w = doc.content_width - 46
    plot_top = top + title_h + 10
    plot_bottom = top + height - 20
    plot_h = max(1.0, plot_bottom - plot_top)
    y_max = max(value for _label, value in samples)
    if y_max <= 0:
        y_max = 1.0

    for idx in range(LINE_GRID_DIVISIONS + 1):
        frac = idx / LINE_GRID_DIVISIONS
        gy = plot_bottom - frac * plot_h
        doc.line(plot_x0, gy, plot_x0 + plot_w, gy, "grid", width=0.4)
        doc.text(
            plot_x0 - 4, gy + 2.5, f"{y_max * frac:.0f}", size=6.5, color="muted", align="right"
        )
    doc.line(plot_x0, plot_top, plot_x0, plot_bottom, "axis", width=0.8)
    if y_label:
        doc.text(doc.margin_x, plot_top - 3, y_label, size=6.5, color="muted")

    def map_x(idx: int) -> float:
        if n == 1:
            return plot_x0 + plot_w / 2
        return plot_x0 + idx / (n - 1) * plot_w

    def map_y(value: float) -> float:
        return plot_bottom - max(0.0, value) / y_max * plot_h

    color = doc.theme.series(0)
    segments = 0
    for idx in range(1, n):
        doc.line(
            map_x(idx - 1),
            map_y(samples[idx - 1][1]),
            map_x(idx),
            map_y(samples[idx][1]),
            color,
            width=1.3,
        )
        segments += 1
    if n == 1:
        doc.fill_rect(map_x(0) - 2, map_y(samples[0][1]) - 2, 4, 4, color)

    for idx in evenly_spaced_indices(n, LINE_MAX_X_LABELS):
        doc.text(
            map_x(idx), plot_bottom + 11, samples[idx][0], size=6.5, color="muted", align="center"
        )

    doc.y = top + height + BLOCK_GAP
    return segments


def pie_chart(
    doc: DocumentCanvas,
    categories: Sequence[tuple[str, float]],
    *,
    title: str | None = None,
    height: float = 170.0,
    step_deg: float = PIE_ANGLE_STEP_DEG,
) -> int:
    """Pie made of triangle fans, clockwise from the top; returns sectors drawn."""
    total = sum(max(0.0, value) for _label, value in categories)
    if total <= 0:
        return 0
    doc.ensure_space(height)
    top = doc.y
    title_h = _draw_title(doc, title)

    radius = (height - title_h - 12) / 2
    cx = doc.margin_x + 20 + radius
    cy = top + title_h + 6 + radius

    sectors = 0
    angle = PIE_START_DEG
    for idx, (_label, value) in enumerate(categories):
        if value <= 0:
            continue
        sweep = value / total * 360.0
        color = doc.theme.series(idx)
        angles = fan_angles(angle, sweep, step_deg)
        for a0, a1 in zip(angles, angles[1:]):
            doc.triangle(
                (cx, cy), polar_point(cx, cy, radius, a0), polar_point(cx, cy, radius, a1), color
            )
        angle += sweep
        sectors += 1

    legend_x = cx + radius + 30
    legend_y = top + title_h + 14
    for idx, (label, value) in enumerate(categories):
        pct = max(0.0, value) / total * 100.0
        doc.fill_rect(legend_x, legend_y - 8, 9, 9, doc.theme.series(idx))
        doc.text(legend_x + 14, legend_y, label, size=8)
        doc.text(
            legend_x + 150,
            legend_y,
            f"{_fmt_value(value)}  ({pct:.1f}%)",
            size=8,
            color="text_secondary",
        )
        legend_y += 16

    doc.y = top + height + BLOCK_GAP
    return sectors
