"""Primitive table renderer with automatic page continuation."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .pdf_canvas import DocumentCanvas

ROW_H = 20.0
HEADER_H = 22.0
CELL_PAD = 8.0
TABLE_GAP = 18.0


@dataclass(frozen=True, slots=True)
class Column:
    title: str
    weight: float = 1.0
    numeric: bool = False


def _clip(doc: DocumentCanvas, text: str, width: float, size: float, *, bold: bool) -> str:
    if doc.text_width(text, size, bold=bold) <= width:
        return text
    while text and doc.text_width(text + "…", size, bold=bold) > width:
        text = text[:-1]
    return text + "…"


def draw_table(
    doc: DocumentCanvas,
    columns: Sequence[Column],
    rows: Sequence[Sequence[str]],
    *,
    font_size: float = 8.5,
    zebra: bool = True,
    row_accents: Sequence[str] | None = None,
) -> int:
    """Draw a table at the cursor; returns the number of continuation pages.

    The header row repeats on every continuation page.  Numeric columns are
    right-aligned.  *row_accents* (one color per row) paints a thin marker
    at the left edge of each row.
    """
    if not columns:
        return 0
    total_weight = sum(col.weight for col in columns) or 1.0
    widths = [doc.content_width * col.weight / total_weight for col in columns]
    x0 = doc.margin_x

    def draw_header() -> None:
        doc.fill_rect(x0, doc.y, doc.content_width, HEADER_H, "primary")
        cx = x0
        for col, width in zip(columns, widths, strict=True):
            label = _clip(doc, col.title, width - 2 * CELL_PAD, font_size, bold=True)
            if col.numeric:
                doc.text(
                    cx + width - CELL_PAD,
                    doc.y + 14.5,
                    label,
                    color="on_primary",
                    size=font_size,
                    bold=True,
                    align="right",
                )
            else:
                doc.text(
                    cx + CELL_PAD, doc.y + 14.5, label, color="on_primary", size=font_size, bold=True
                )
            cx += width
        doc.y += HEADER_H

    continuations = 0
    doc.ensure_space(HEADER_H + ROW_H)
    draw_header()
    for idx, row in enumerate(rows):
        if doc.remaining < ROW_H:
            doc.advance_page()
            continuations += 1
            draw_header()
        bg = "surface" if zebra and idx % 2 == 1 else "card"
        doc.fill_rect(x0, doc.y, doc.content_width, ROW_H, bg)
        doc.line(x0, doc.y + ROW_H, x0 + doc.content_width, doc.y + ROW_H, "border", width=0.4)
        if row_accents is not None and idx < len(row_accents):
            doc.fill_rect(x0, doc.y, 3, ROW_H, row_accents[idx])
        cx = x0
        for col, width, value in zip(columns, widths, row, strict=False):
            cell = _clip(doc, str(value), width - 2 * CELL_PAD, font_size, bold=False)
            if col.numeric:
                doc.text(
                    cx + width - CELL_PAD,
                    doc.y + 13.5,
                    cell,
                    color="text_secondary",
                    size=font_size,
                    align="right",
                )
            else:
                doc.text(cx + CELL_PAD, doc.y + 13.5, cell, color="text_secondary", size=font_size)
            cx += width
        doc.y += ROW_H
    doc.y += TABLE_GAP
    return continuations
