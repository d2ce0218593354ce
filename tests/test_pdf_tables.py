from __future__ import annotations

import pytest
from reportlab.lib import colors

from reportnow.report.pdf_canvas import DocumentCanvas
from reportnow.report.pdf_tables import HEADER_H, ROW_H, TABLE_GAP, Column, draw_table
from reportnow.report_theme import get_theme

from conftest import extract_pdf_text


@pytest.fixture
def doc() -> DocumentCanvas:
    return DocumentCanvas(get_theme("light"))


def _capture_texts(doc: DocumentCanvas, monkeypatch: pytest.MonkeyPatch) -> list[str]:
    texts: list[str] = []
    draw_text = doc.text

    def text(x, y, value, **kwargs):
        texts.append(value)
        return draw_text(x, y, value, **kwargs)

    monkeypatch.setattr(doc, "text", text)
    return texts


def test_short_table_stays_on_page(doc) -> None:
    y_before = doc.y
    columns = [Column("Status"), Column("Points", numeric=True)]
    assert draw_table(doc, columns, [["Moving", "12"], ["Stopped", "3"]]) == 0
    assert doc.page_count == 1
    assert doc.y == pytest.approx(y_before + HEADER_H + 2 * ROW_H + TABLE_GAP)


def test_long_table_repeats_header_on_continuation(doc, monkeypatch) -> None:
    texts = _capture_texts(doc, monkeypatch)
    columns = [Column("Status", 2.0), Column("Points", 1.0, numeric=True)]
    rows = [[f"row {i}", str(i)] for i in range(100)]
    continuations = draw_table(doc, columns, rows)
    assert continuations >= 2
    assert doc.page_count == continuations + 1
    assert texts.count("Status") == continuations + 1
    assert "row 99" in texts


def test_empty_rows_draw_header_only(doc, monkeypatch) -> None:
    texts = _capture_texts(doc, monkeypatch)
    assert draw_table(doc, [Column("Driver")], []) == 0
    assert texts == ["Driver"]


def test_no_columns_is_noop(doc) -> None:
    y_before = doc.y
    assert draw_table(doc, [], [["x"]]) == 0
    assert doc.y == y_before


def test_long_cells_are_clipped(doc, monkeypatch) -> None:
    texts = _capture_texts(doc, monkeypatch)
    columns = [Column("Name"), Column("A"), Column("B"), Column("C")]
    draw_table(doc, columns, [["x" * 300, "", "", ""]])
    clipped = texts[-4]
    assert clipped.endswith("…")
    assert doc.text_width(clipped, 8.5) <= doc.content_width / 4


def test_rendered_text_is_extractable(doc) -> None:
    draw_table(doc, [Column("Driver"), Column("License")], [["Ana López", "LIC-1"]])
    pdf = doc.finish(lambda d, page, total: None)
    text = extract_pdf_text(pdf)
    assert "Ana López" in text
    assert "LIC-1" in text


def test_continuation_pages_repaint_themed_background(monkeypatch) -> None:
    theme = get_theme("dark")
    doc = DocumentCanvas(theme)
    c = doc._c
    painted: list[tuple[int, str]] = []
    last_fill: list[object] = [None]
    set_fill_color, draw_rect = c.setFillColor, c.rect

    def spy_fill(color, *args, **kwargs):
        last_fill[0] = color
        return set_fill_color(color, *args, **kwargs)

    def spy_rect(x, y, w, h, *args, **kwargs):
        if (x, y, w, h) == (0, 0, doc.page_w, doc.page_h):
            painted.append((doc.page_count, last_fill[0].hexval()))
        return draw_rect(x, y, w, h, *args, **kwargs)

    monkeypatch.setattr(c, "setFillColor", spy_fill)
    monkeypatch.setattr(c, "rect", spy_rect)

    rows = [[f"row {i}", str(i)] for i in range(100)]
    continuations = draw_table(doc, [Column("Status"), Column("Points", numeric=True)], rows)

    assert continuations >= 2
    background = doc.color("background").hexval()
    assert background == colors.HexColor(theme.color("background")).hexval()
    assert background != colors.white.hexval()
    assert painted == [(page, background) for page in range(2, doc.page_count + 1)]
