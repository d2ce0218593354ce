"""PDF report section builders.

Every block-level routine here reserves its height with ``ensure_space``
before drawing and leaves ``doc.y`` just below the block it drew.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime

from ..analysis.segments import StatusTotals
from ..analysis.statistics import DriverRankingEntry
from ..domain_models import RouteSummary, StatusSegment
from .pdf_canvas import DocumentCanvas
from .pdf_helpers import color_blend, format_clock, format_duration, safe_text
from .pdf_tables import Column, draw_table
from .report_data import DeviceInfo

HEADER_H = 90.0
DEVICE_CARD_H = 90.0
PARAMS_H = 50.0
STAT_CARD_H = 60.0
STAT_CARD_GAP = 12.0
SECTION_TITLE_H = 20.0


@dataclass(frozen=True, slots=True)
class StatCard:
    label: str
    value: str
    color: str = "primary"


def status_label(status: object, tr: Callable[..., str]) -> str:
    return tr(f"STATUS_{str(status).upper()}")


# ---------------------------------------------------------------------------
# Page furniture
# ---------------------------------------------------------------------------


def draw_header(
    doc: DocumentCanvas,
    *,
    brand: str,
    title: str,
    subtitle: str,
    status: str,
) -> None:
    """Full-bleed title band at the top of the first page."""
    doc.fill_rect(0, 0, doc.page_w, HEADER_H, "primary")
    doc.text(doc.margin_x, 40, brand, color="on_primary", size=16, bold=True)

    chip_text = safe_text(status, "").upper()
    if chip_text:
        chip_w = doc.text_width(chip_text, 10) + 20
        chip_x = doc.page_w - doc.margin_x - chip_w
        chip_color = "ok" if status.strip().lower() == "active" else "muted"
        doc.fill_rect(chip_x, 25, chip_w, 18, chip_color, radius=9)
        doc.text(chip_x + 10, 37, chip_text, color="on_primary", size=10)

    doc.text(doc.margin_x, 70, title, color="on_primary", size=18, bold=True)
    doc.text(doc.margin_x, 86, subtitle, color="header_subtitle", size=11)
    doc.y = HEADER_H + 20


def draw_footer(
    doc: DocumentCanvas,
    page_num: int,
    total: int,
    *,
    attribution: str,
    page_label: str,
) -> None:
    y = doc.page_h - 30
    doc.text(doc.margin_x, y, attribution, color="muted", size=8)
    doc.text(doc.page_w - doc.margin_x, y, page_label, color="muted", size=8, align="right")


def draw_section_title(doc: DocumentCanvas, text: str, *, keep_with: float = 40.0) -> None:
    """Section heading with a short accent rule; kept together with *keep_with* points."""
    doc.ensure_space(SECTION_TITLE_H + keep_with)
    doc.text(doc.margin_x, doc.y, text, size=11, bold=True)
    doc.line(doc.margin_x, doc.y + 4, doc.margin_x + 40, doc.y + 4, "primary", width=0.8)
    doc.y += SECTION_TITLE_H


# ---------------------------------------------------------------------------
# Cards
# ---------------------------------------------------------------------------


def draw_device_card(doc: DocumentCanvas, device: DeviceInfo, *, tr: Callable[..., str]) -> None:
    doc.ensure_space(DEVICE_CARD_H)
    x = doc.margin_x
    y = doc.y
    w = doc.content_width
    doc.fill_rect(x, y, w, DEVICE_CARD_H, "surface", radius=12)
    doc.text(x + 16, y + 26, safe_text(device.display_name), size=14, bold=True)
    doc.text(
        x + 16,
        y + 44,
        tr("IMEI_SERIAL", imei=safe_text(device.imei), serial=safe_text(device.serial)),
        color="muted",
        size=10,
    )

    col_w = w / 4 - 6
    inner_top = y + 57
    mini_cards = [
        (tr("CARD_CLIENT"), device.client_name),
        (tr("CARD_ASSET"), device.asset_name),
        (tr("CARD_SIM"), device.sim_info),
        (tr("CARD_LAST_SIGNAL"), device.last_signal),
    ]
    for idx, (label, value) in enumerate(mini_cards):
        cx = x + 12 + idx * (col_w + 6)
        doc.text(cx, inner_top, label, color="muted", size=8)
        lines = doc.wrap_text(safe_text(value), col_w - 10, 9, bold=True)[:2]
        for line_idx, line in enumerate(lines):
            doc.text(cx, inner_top + 12 + line_idx * 11, line, size=9, bold=True)
    doc.y = y + DEVICE_CARD_H + 24


def draw_parameters(
    doc: DocumentCanvas,
    *,
    date_range: str,
    generated_at: datetime,
    tr: Callable[..., str],
) -> None:
    doc.ensure_space(PARAMS_H)
    y = doc.y
    doc.fill_rect(doc.margin_x, y, doc.content_width, PARAMS_H, "surface_alt", radius=10)
    col_w = (doc.content_width - 40) / 2
    params = [
        (tr("PARAM_DATE_RANGE"), safe_text(date_range)),
        (tr("PARAM_GENERATED"), generated_at.strftime("%d/%m/%Y %H:%M")),
    ]
    for idx, (label, value) in enumerate(params):
        px = doc.margin_x + 20 + idx * col_w
        doc.text(px, y + 18, label, color="muted", size=9)
        doc.text(px, y + 34, value, size=10)
    doc.y = y + PARAMS_H + 20


def draw_stat_cards(doc: DocumentCanvas, cards: Sequence[StatCard], *, per_row: int = 4) -> None:
    """Rows of small metric cards; each row is kept on one page."""
    if not cards:
        return
    card_w = (doc.content_width - STAT_CARD_GAP * (per_row - 1)) / per_row
    for row_start in range(0, len(cards), per_row):
        doc.ensure_space(STAT_CARD_H)
        y = doc.y
        for idx, card in enumerate(cards[row_start : row_start + per_row]):
            x = doc.margin_x + idx * (card_w + STAT_CARD_GAP)
            accent = doc.theme.color(card.color)
            tint = color_blend(doc.theme.color("card"), accent, 0.06)
            doc.fill_rect(x, y, card_w, STAT_CARD_H, tint, stroke="border", radius=8)
            doc.text(x + 10, y + 16, card.label, color="muted", size=8)
            doc.text(x + 10, y + 40, card.value, color=card.color, size=16, bold=True)
        doc.y = y + STAT_CARD_H + STAT_CARD_GAP
    doc.y += 8


def draw_snapshot(doc: DocumentCanvas, image: bytes, *, height: float) -> None:
    doc.ensure_space(height)
    doc.image(image, doc.margin_x, doc.y, doc.content_width, height)
    doc.y += height + 20


# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------


def draw_status_timeline(
    doc: DocumentCanvas, segments: Sequence[StatusSegment], *, tr: Callable[..., str]
) -> int:
    columns = [
        Column(tr("COL_STATUS"), 1.6),
        Column(tr("COL_START"), 1.0),
        Column(tr("COL_END"), 1.0),
        Column(tr("COL_DURATION"), 1.0, numeric=True),
        Column(tr("COL_POINTS"), 0.8, numeric=True),
    ]
    rows = [
        [
            status_label(seg.status, tr),
            format_clock(seg.start_time),
            format_clock(seg.end_time),
            format_duration(seg.duration_s),
            str(seg.point_count),
        ]
        for seg in segments
    ]
    accents = [doc.theme.status(seg.status) for seg in segments]
    return draw_table(doc, columns, rows, row_accents=accents)


def draw_status_summary(
    doc: DocumentCanvas, totals: Sequence[StatusTotals], *, tr: Callable[..., str]
) -> int:
    columns = [
        Column(tr("COL_STATUS"), 1.6),
        Column(tr("COL_TOTAL_TIME"), 1.0, numeric=True),
        Column(tr("COL_SEGMENTS"), 0.8, numeric=True),
        Column(tr("COL_POINTS"), 0.8, numeric=True),
    ]
    rows = [
        [
            status_label(entry.status, tr),
            format_duration(entry.duration_s),
            str(entry.segment_count),
            str(entry.point_count),
        ]
        for entry in totals
    ]
    accents = [doc.theme.status(entry.status) for entry in totals]
    return draw_table(doc, columns, rows, zebra=False, row_accents=accents)


def draw_route_table(
    doc: DocumentCanvas, routes: Sequence[RouteSummary], *, tr: Callable[..., str]
) -> int:
    columns = [
        Column(tr("COL_ROUTE"), 0.6, numeric=True),
        Column(tr("COL_START"), 1.4),
        Column(tr("COL_END"), 1.4),
        Column(tr("COL_DISTANCE_KM"), 0.8, numeric=True),
        Column(tr("COL_AVG_SPEED"), 0.9, numeric=True),
        Column(tr("COL_MAX_SPEED"), 0.9, numeric=True),
        Column(tr("COL_HOURS"), 0.8, numeric=True),
        Column(tr("COL_POINTS"), 0.8, numeric=True),
    ]
    rows = [
        [
            str(route.ordinal),
            route.start.strftime("%d/%m %H:%M") if route.start else "—",
            route.end.strftime("%d/%m %H:%M") if route.end else "—",
            f"{route.distance_km:.1f}",
            f"{route.avg_speed_kph:.0f}",
            f"{route.max_speed_kph:.0f}",
            f"{route.total_hours:.2f}",
            str(route.point_count),
        ]
        for route in routes
    ]
    return draw_table(doc, columns, rows)


def draw_driver_ranking(
    doc: DocumentCanvas, ranking: Sequence[DriverRankingEntry], *, tr: Callable[..., str]
) -> int:
    columns = [
        Column(tr("COL_DRIVER"), 2.0),
        Column(tr("COL_LICENSE"), 1.2),
        Column(tr("COL_AVAILABILITY"), 1.2),
    ]
    rows = [
        [
            entry.name,
            safe_text(entry.license_number),
            tr(f"DRIVER_{entry.availability.upper()}"),
        ]
        for entry in ranking
    ]
    return draw_table(doc, columns, rows)
