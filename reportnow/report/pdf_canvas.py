"""Paginated, themed write surface for PDF reports.

:class:`DocumentCanvas` wraps a ReportLab ``Canvas`` and exposes a narrow
top-down drawing interface: a vertical cursor (``y``), ``ensure_space`` /
``advance_page`` for pagination, and a handful of primitives (rectangles,
lines, filled triangles, text, images).  Primitives never move the cursor;
block-level routines call ``ensure_space`` first and advance ``y``
themselves once they are done drawing.

Footers need the final page count, so pages are buffered and stamped in
:meth:`DocumentCanvas.finish`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from io import BytesIO
from typing import Any

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import ImageReader
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen.canvas import Canvas

from ..report_theme import Theme
from .pdf_layout import fit_rect_preserve_aspect

LOGGER = logging.getLogger(__name__)

FONT = "Helvetica"
FONT_B = "Helvetica-Bold"
DEFAULT_MARGIN = 40.0
DEFAULT_FOOTER_RESERVE = 50.0


class _DeferredPageCanvas(Canvas):
    """Canvas that keeps page states until :meth:`save_with_footer`."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._saved_page_states: list[dict[str, Any]] = []

    def showPage(self) -> None:  # noqa: N802 - ReportLab API name
        self._saved_page_states.append(dict(self.__dict__))
        self._startPage()

    def save_with_footer(self, footer: Callable[[int, int], None]) -> None:
        self._saved_page_states.append(dict(self.__dict__))
        total = len(self._saved_page_states)
        for page_num, state in enumerate(self._saved_page_states, start=1):
            self.__dict__.update(state)
            footer(page_num, total)
            Canvas.showPage(self)
        Canvas.save(self)


class DocumentCanvas:
    """Mutable write cursor over fixed-size pages with one theme."""

    def __init__(
        self,
        theme: Theme,
        *,
        page_size: tuple[float, float] = A4,
        margin: float = DEFAULT_MARGIN,
        footer_reserve: float = DEFAULT_FOOTER_RESERVE,
        title: str = "",
        author: str = "",
    ) -> None:
        self.theme = theme
        self.page_w, self.page_h = page_size
        self.margin_x = margin
        self.margin_top = margin
        self.margin_bottom = footer_reserve
        self.y = margin
        self.page_count = 1
        self._buffer = BytesIO()
        self._c = _DeferredPageCanvas(self._buffer, pagesize=page_size, pageCompression=0)
        if title:
            self._c.setTitle(title)
        if author:
            self._c.setAuthor(author)
        self._finished = False
        self._paint_background()

    # -- geometry ------------------------------------------------------------

    @property
    def content_width(self) -> float:
        return self.page_w - 2 * self.margin_x

    @property
    def bottom_limit(self) -> float:
        return self.page_h - self.margin_bottom

    @property
    def remaining(self) -> float:
        return self.bottom_limit - self.y

    # -- pagination ----------------------------------------------------------

    def advance_page(self) -> None:
        """Start a new page, repaint the themed background and reset the cursor."""
        self._check_open()
        self._c.showPage()
        self.page_count += 1
        self._paint_background()
        self.y = self.margin_top

    def ensure_space(self, height: float) -> bool:
        """Advance to a new page when fewer than *height* points remain."""
        if self.remaining < height:
            self.advance_page()
            return True
        return False

    def _paint_background(self) -> None:
        self._c.setFillColor(self.color("background"))
        self._c.rect(0, 0, self.page_w, self.page_h, stroke=0, fill=1)

    # -- colors & text metrics -----------------------------------------------

    def color(self, role_or_hex: str) -> colors.Color:
        if role_or_hex.startswith("#"):
            return colors.HexColor(role_or_hex)
        return colors.HexColor(self.theme.color(role_or_hex))

    @staticmethod
    def text_width(text: str, size: float, *, bold: bool = False) -> float:
        return stringWidth(text, FONT_B if bold else FONT, size)

    def wrap_text(self, text: str, width: float, size: float, *, bold: bool = False) -> list[str]:
        """Greedy word wrap using real font metrics."""
        lines: list[str] = []
        for paragraph in str(text).split("\n"):
            current = ""
            for word in paragraph.split():
                candidate = f"{current} {word}".strip()
                if current and self.text_width(candidate, size, bold=bold) > width:
                    lines.append(current)
                    current = word
                else:
                    current = candidate
            lines.append(current)
        return lines or [""]

    # -- primitives (top-down coordinates) -----------------------------------

    def fill_rect(
        self,
        x: float,
        y: float,
        w: float,
        h: float,
        fill: str,
        *,
        stroke: str | None = None,
        radius: float = 0.0,
        line_width: float = 0.6,
    ) -> None:
        c = self._c
        c.setFillColor(self.color(fill))
        if stroke is not None:
            c.setStrokeColor(self.color(stroke))
            c.setLineWidth(line_width)
        bottom = self.page_h - y - h
        if radius > 0:
            c.roundRect(x, bottom, w, h, radius, stroke=int(stroke is not None), fill=1)
        else:
            c.rect(x, bottom, w, h, stroke=int(stroke is not None), fill=1)

    def line(
        self, x1: float, y1: float, x2: float, y2: float, stroke: str, *, width: float = 0.6
    ) -> None:
        c = self._c
        c.setStrokeColor(self.color(stroke))
        c.setLineWidth(width)
        c.line(x1, self.page_h - y1, x2, self.page_h - y2)

    def triangle(
        self,
        p1: tuple[float, float],
        p2: tuple[float, float],
        p3: tuple[float, float],
        fill: str,
    ) -> None:
        c = self._c
        color = self.color(fill)
        c.setFillColor(color)
        # Hairline stroke in the fill color hides seams between fan triangles
        c.setStrokeColor(color)
        c.setLineWidth(0.3)
        path = c.beginPath()
        path.moveTo(p1[0], self.page_h - p1[1])
        path.lineTo(p2[0], self.page_h - p2[1])
        path.lineTo(p3[0], self.page_h - p3[1])
        path.close()
        c.drawPath(path, stroke=1, fill=1)

    def text(
        self,
        x: float,
        y: float,
        text: str,
        *,
        color: str = "text",
        size: float = 9,
        bold: bool = False,
        align: str = "left",
    ) -> None:
        """Draw one line of text with its baseline at *y*."""
        c = self._c
        c.setFillColor(self.color(color))
        c.setFont(FONT_B if bold else FONT, size)
        baseline = self.page_h - y
        if align == "right":
            c.drawRightString(x, baseline, text)
        elif align == "center":
            c.drawCentredString(x, baseline, text)
        else:
            c.drawString(x, baseline, text)

    def image(self, data: bytes, x: float, y: float, w: float, h: float) -> tuple[float, float]:
        """Draw a raster image fitted into the box; returns the drawn (w, h).

        Undecodable data raises from ``ImageReader``.
        """
        reader = ImageReader(BytesIO(data))
        src_w, src_h = reader.getSize()
        ix, iy, iw, ih = fit_rect_preserve_aspect(src_w, src_h, x, y, w, h)
        self._c.drawImage(reader, ix, self.page_h - iy - ih, iw, ih, mask="auto")
        return iw, ih

    # -- output --------------------------------------------------------------

    def finish(self, footer: Callable[[DocumentCanvas, int, int], None]) -> bytes:
        """Stamp *footer* on every page and return the document bytes."""
        self._check_open()
        self._finished = True
        self._c.save_with_footer(lambda page_num, total: footer(self, page_num, total))
        LOGGER.debug("Rendered %d page(s)", self.page_count)
        return self._buffer.getvalue()

    def _check_open(self) -> None:
        if self._finished:
            raise RuntimeError("DocumentCanvas already finished")
