"""Geometry helpers for PDF report layout.

Pure-maths utilities that keep the drawing code in ``pdf_charts.py`` and
``pdf_sections.py`` focused on content rather than layout arithmetic.
All coordinates are top-down (y grows towards the bottom of the page).
"""

from __future__ import annotations

import math


def fit_rect_preserve_aspect(
    src_w: float,
    src_h: float,
    box_x: float,
    box_y: float,
    box_w: float,
    box_h: float,
) -> tuple[float, float, float, float]:
    """Return (x, y, w, h) fitted inside box while preserving src aspect."""
    if src_w <= 0 or src_h <= 0:
        return box_x, box_y, box_w, box_h
    src_ratio = src_w / src_h
    box_ratio = box_w / box_h if box_h else src_ratio
    if box_ratio > src_ratio:
        h = box_h
        w = h * src_ratio
        x = box_x + (box_w - w) / 2
        y = box_y
    else:
        w = box_w
        h = w / src_ratio
        x = box_x
        y = box_y + (box_h - h) / 2
    return x, y, w, h


def evenly_spaced_indices(count: int, max_labels: int) -> list[int]:
    """Pick at most *max_labels* indices spread evenly over ``range(count)``.

    The first and last index are always included when ``max_labels >= 2``.
    """
    if count <= 0 or max_labels <= 0:
        return []
    if count <= max_labels:
        return list(range(count))
    if max_labels == 1:
        return [0]
    step = (count - 1) / (max_labels - 1)
    return sorted({int(round(i * step)) for i in range(max_labels)})


def polar_point(cx: float, cy: float, radius: float, angle_deg: float) -> tuple[float, float]:
    """Point on a circle in top-down coordinates.

    Increasing angles move clockwise on the page; -90 degrees is the top.
    """
    rad = math.radians(angle_deg)
    return cx + radius * math.cos(rad), cy + radius * math.sin(rad)


def fan_angles(start_deg: float, sweep_deg: float, step_deg: float) -> list[float]:
    """Angles bounding a triangle fan that approximates an arc."""
    if sweep_deg <= 0:
        return []
    steps = max(1, math.ceil(sweep_deg / max(step_deg, 1e-6)))
    return [start_deg + sweep_deg * idx / steps for idx in range(steps + 1)]
