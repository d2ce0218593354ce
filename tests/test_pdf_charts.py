from __future__ import annotations

import math

import pytest

from reportnow.report.pdf_canvas import DocumentCanvas
from reportnow.report.pdf_charts import (
    BLOCK_GAP,
    LINE_MAX_X_LABELS,
    PIE_ANGLE_STEP_DEG,
    bar_chart,
    line_chart,
    pie_chart,
)
from reportnow.report.pdf_layout import evenly_spaced_indices, fan_angles, polar_point
from reportnow.report_theme import get_theme


class _Recorder:
    """Counts primitive calls on a DocumentCanvas."""

    def __init__(self, doc: DocumentCanvas, monkeypatch: pytest.MonkeyPatch) -> None:
        self.triangles = 0
        self.texts: list[str] = []
        self.rects: list[tuple[float, float, float, float]] = []
        orig_triangle, orig_text, orig_rect = doc.triangle, doc.text, doc.fill_rect

        def triangle(*args, **kwargs):
            self.triangles += 1
            return orig_triangle(*args, **kwargs)

        def text(x, y, value, **kwargs):
            self.texts.append(value)
            return orig_text(x, y, value, **kwargs)

        def fill_rect(x, y, w, h, fill, **kwargs):
            self.rects.append((x, y, w, h))
            return orig_rect(x, y, w, h, fill, **kwargs)

        monkeypatch.setattr(doc, "triangle", triangle)
        monkeypatch.setattr(doc, "text", text)
        monkeypatch.setattr(doc, "fill_rect", fill_rect)


@pytest.fixture
def doc() -> DocumentCanvas:
    return DocumentCanvas(get_theme("light"))


class TestPieChart:
    def test_zero_total_draws_nothing(self, doc, monkeypatch) -> None:
        rec = _Recorder(doc, monkeypatch)
        y_before = doc.y
        assert pie_chart(doc, [("Moving", 0.0), ("Stopped", 0.0)]) == 0
        assert rec.triangles == 0
        assert rec.texts == []
        assert doc.y == y_before

    def test_empty_categories(self, doc) -> None:
        assert pie_chart(doc, []) == 0

    def test_full_circle_fan_count(self, doc, monkeypatch) -> None:
        rec = _Recorder(doc, monkeypatch)
        assert pie_chart(doc, [("Moving", 3.0), ("Stopped", 1.0)]) == 2
        expected = math.ceil(270 / PIE_ANGLE_STEP_DEG) + math.ceil(90 / PIE_ANGLE_STEP_DEG)
        assert rec.triangles == expected

    def test_zero_category_skipped_but_listed(self, doc, monkeypatch) -> None:
        rec = _Recorder(doc, monkeypatch)
        assert pie_chart(doc, [("Moving", 5.0), ("Stopped", 0.0)]) == 1
        assert "Stopped" in rec.texts
        assert "5  (100.0%)" in rec.texts

    def test_custom_step(self, doc, monkeypatch) -> None:
        rec = _Recorder(doc, monkeypatch)
        pie_chart(doc, [("Only", 1.0)], step_deg=45.0)
        assert rec.triangles == 8

    def test_sectors_start_at_top_and_sweep_clockwise(self, doc, monkeypatch) -> None:
        fans: list[tuple[tuple[float, float], ...]] = []
        draw_triangle = doc.triangle

        def triangle(p1, p2, p3, fill):
            fans.append((p1, p2, p3))
            return draw_triangle(p1, p2, p3, fill)

        monkeypatch.setattr(doc, "triangle", triangle)
        pie_chart(doc, [("Moving", 1.0), ("Stopped", 1.0)])

        (cx, cy), top, next_vertex = fans[0]
        assert top[0] == pytest.approx(cx)
        assert top[1] < cy
        assert next_vertex[0] > cx
        assert next_vertex[1] < cy
        # Second half-circle sector begins at the bottom of the pie
        _, bottom, _ = fans[math.ceil(180 / PIE_ANGLE_STEP_DEG)]
        assert bottom[0] == pytest.approx(cx)
        assert bottom[1] > cy

    def test_cursor_advances_by_block(self, doc) -> None:
        y_before = doc.y
        pie_chart(doc, [("A", 1.0)], height=150)
        assert doc.y == y_before + 150 + BLOCK_GAP


class TestBarChart:
    def test_empty_is_noop(self, doc) -> None:
        y_before = doc.y
        assert bar_chart(doc, []) == 0
        assert doc.y == y_before

    def test_single_category_full_height(self, doc, monkeypatch) -> None:
        rec = _Recorder(doc, monkeypatch)
        assert bar_chart(doc, [("1-30", 7.0)], height=170) == 1
        (bar,) = rec.rects
        assert bar[3] == pytest.approx(170 - 18 - 14)
        assert "7" in rec.texts
        assert "1-30" in rec.texts

    def test_heights_normalized_to_max(self, doc, monkeypatch) -> None:
        rec = _Recorder(doc, monkeypatch)
        bar_chart(doc, [("a", 10.0), ("b", 5.0), ("c", 0.0)])
        heights = [r[3] for r in rec.rects]
        assert heights[1] == pytest.approx(heights[0] / 2)
        assert len(rec.rects) == 3

    def test_all_zero_values(self, doc) -> None:
        assert bar_chart(doc, [("a", 0.0), ("b", 0.0)]) == 2


class TestLineChart:
    def test_empty_is_noop(self, doc) -> None:
        y_before = doc.y
        assert line_chart(doc, []) == 0
        assert doc.y == y_before

    def test_segments_between_consecutive_samples(self, doc) -> None:
        samples = [(f"08:{i:02d}", float(i * 3)) for i in range(10)]
        assert line_chart(doc, samples) == 9

    def test_single_sample_draws_dot(self, doc, monkeypatch) -> None:
        rec = _Recorder(doc, monkeypatch)
        assert line_chart(doc, [("08:00", 40.0)]) == 0
        assert len(rec.rects) == 1

    def test_at_most_six_x_labels(self, doc, monkeypatch) -> None:
        rec = _Recorder(doc, monkeypatch)
        samples = [(f"L{i}", float(i)) for i in range(50)]
        line_chart(doc, samples)
        x_labels = [t for t in rec.texts if t.startswith("L")]
        assert len(x_labels) == LINE_MAX_X_LABELS
        assert x_labels[0] == "L0"
        assert x_labels[-1] == "L49"

    def test_grid_labels_from_series_max(self, doc, monkeypatch) -> None:
        rec = _Recorder(doc, monkeypatch)
        line_chart(doc, [("a", 0.0), ("b", 80.0)])
        for label in ("0", "20", "40", "60", "80"):
            assert label in rec.texts


def test_chart_moves_to_new_page_when_short(doc) -> None:
    doc.y = doc.bottom_limit - 50
    bar_chart(doc, [("a", 1.0)], height=170)
    assert doc.page_count == 2
    assert doc.y == doc.margin_top + 170 + BLOCK_GAP


class TestLayoutHelpers:
    def test_fan_angles_cover_sweep(self) -> None:
        angles = fan_angles(-90.0, 100.0, 5.0)
        assert angles[0] == -90.0
        assert angles[-1] == pytest.approx(10.0)
        assert len(angles) == 21

    def test_polar_point_minus_ninety_is_straight_up(self) -> None:
        x, y = polar_point(100.0, 200.0, 50.0, -90.0)
        assert x == pytest.approx(100.0)
        assert y == pytest.approx(150.0)

    def test_polar_point_increasing_angle_turns_clockwise(self) -> None:
        x, y = polar_point(0.0, 0.0, 10.0, 0.0)
        assert (x, y) == pytest.approx((10.0, 0.0))
        x, y = polar_point(0.0, 0.0, 10.0, 90.0)
        assert (x, y) == pytest.approx((0.0, 10.0))

    def test_fan_angles_zero_sweep(self) -> None:
        assert fan_angles(0.0, 0.0, 5.0) == []

    def test_evenly_spaced_indices(self) -> None:
        assert evenly_spaced_indices(4, 6) == [0, 1, 2, 3]
        picked = evenly_spaced_indices(100, 6)
        assert len(picked) == 6
        assert picked[0] == 0 and picked[-1] == 99
        assert evenly_spaced_indices(0, 6) == []
