"""PDF report composer – full, history, statistics and list variants.

Each ``generate_*`` call owns one :class:`DocumentCanvas` and one theme.
Snapshots are resolved before composition starts; a snapshot that cannot be
captured or decoded is logged and its block is skipped.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Collection, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from io import BytesIO

from reportlab.lib.pagesizes import A4, letter
from reportlab.lib.utils import ImageReader

from ..analysis.segments import aggregate_status_segments, summarize_segments_by_status
from ..analysis.statistics import (
    STOPPED_BUCKET,
    ReportDataset,
    build_report_dataset,
)
from ..config import AppConfig, default_config
from ..domain_models import StatusSegment
from ..report_i18n import translator
from ..report_theme import Theme, get_theme
from .pdf_canvas import DocumentCanvas
from .pdf_charts import bar_chart, line_chart, pie_chart
from .pdf_helpers import format_number
from .pdf_sections import (
    StatCard,
    draw_device_card,
    draw_driver_ranking,
    draw_footer,
    draw_header,
    draw_parameters,
    draw_route_table,
    draw_section_title,
    draw_snapshot,
    draw_stat_cards,
    draw_status_summary,
    draw_status_timeline,
)
from .pdf_tables import Column, draw_table
from .report_data import ListReportOptions, ReportOptions, Snapshot

LOGGER = logging.getLogger(__name__)

STATS_SECTIONS: tuple[str, ...] = (
    "resumen",
    "rutas",
    "velocidad",
    "distribucion",
    "movimiento",
    "analisis",
    "periodo",
    "conductores",
)

FULL_MAP_H = 250.0
HISTORY_MAP_H = 280.0
CHART_SNAPSHOT_H = 400.0

PAGE_SIZES: dict[str, tuple[float, float]] = {"A4": A4, "LETTER": letter}


class ReportGenerationError(RuntimeError):
    """A report could not be composed; chained to the underlying cause."""


@dataclass(slots=True)
class _Context:
    doc: DocumentCanvas
    tr: Callable[..., str]
    config: AppConfig


# ---------------------------------------------------------------------------
# Shared plumbing
# ---------------------------------------------------------------------------


def _resolve_snapshot(snapshot: Snapshot | None, label: str) -> bytes | None:
    """Capture and decode-check a snapshot; ``None`` when unavailable."""
    if snapshot is None:
        return None
    try:
        data = snapshot() if callable(snapshot) else snapshot
        if not data:
            raise ValueError(f"{label} snapshot is empty")
        ImageReader(BytesIO(data)).getSize()
    except Exception:
        LOGGER.warning("Skipping %s snapshot: capture or decode failed.", label, exc_info=True)
        return None
    return bytes(data)


def _open_context(
    theme: Theme, lang: str, config: AppConfig, title_key: str, *, title: str | None = None
) -> _Context:
    tr = translator(lang)
    doc = DocumentCanvas(
        theme,
        page_size=PAGE_SIZES.get(config.report.page_size, A4),
        margin=config.report.margin_pt,
        footer_reserve=config.report.footer_reserve_pt,
        title=title or tr(title_key),
        author=config.report.brand,
    )
    return _Context(doc=doc, tr=tr, config=config)


def _finish(ctx: _Context) -> bytes:
    attribution = ctx.tr("FOOTER_ATTRIBUTION", brand=ctx.config.report.brand)

    def footer(doc: DocumentCanvas, page_num: int, total: int) -> None:
        draw_footer(
            doc,
            page_num,
            total,
            attribution=attribution,
            page_label=ctx.tr("PAGE_OF", page=page_num, total=total),
        )

    return ctx.doc.finish(footer)


def _run(kind: str, compose: Callable[[], bytes]) -> bytes:
    try:
        pdf = compose()
    except Exception as exc:
        LOGGER.error("%s report generation failed.", kind, exc_info=True)
        raise ReportGenerationError(f"{kind} report generation failed") from exc
    LOGGER.info("Generated %s report (%d bytes)", kind, len(pdf))
    return pdf


def _generated_at(value: datetime | None) -> datetime:
    return value if value is not None else datetime.now(UTC)


def _segments_for(options: ReportOptions) -> list[StatusSegment]:
    if options.status_segments is not None:
        return list(options.status_segments)
    return aggregate_status_segments(options.pings)


def _draw_preamble(ctx: _Context, options: ReportOptions, title_key: str) -> None:
    device = options.device
    draw_header(
        ctx.doc,
        brand=ctx.config.report.brand,
        title=ctx.tr(title_key),
        subtitle=device.display_name,
        status=device.status,
    )
    draw_device_card(ctx.doc, device, tr=ctx.tr)
    draw_section_title(ctx.doc, ctx.tr("SECTION_PARAMETERS"), keep_with=50)
    draw_parameters(
        ctx.doc,
        date_range=options.date_range,
        generated_at=_generated_at(options.generated_at),
        tr=ctx.tr,
    )


def _draw_route_stats(ctx: _Context, options: ReportOptions) -> None:
    stats = options.route_stats
    if stats is None:
        return
    draw_section_title(ctx.doc, ctx.tr("SECTION_ROUTE_STATS"), keep_with=60)
    draw_stat_cards(
        ctx.doc,
        [
            StatCard(ctx.tr("STAT_TOTAL_POINTS"), format_number(stats.total_points), "primary"),
            StatCard(ctx.tr("STAT_MAX_SPEED"), f"{stats.max_speed_kph:.0f} km/h", "critical"),
            StatCard(ctx.tr("STAT_AVG_SPEED"), f"{stats.avg_speed_kph:.0f} km/h", "ok"),
            StatCard(ctx.tr("STAT_STOPPED_POINTS"), format_number(stats.stopped_points), "muted"),
        ],
    )


def _draw_map(ctx: _Context, image: bytes | None, height: float) -> None:
    if image is None:
        return
    draw_section_title(ctx.doc, ctx.tr("SECTION_MAP"), keep_with=height)
    draw_snapshot(ctx.doc, image, height=height)


def _draw_timeline(ctx: _Context, segments: Sequence[StatusSegment]) -> None:
    if not segments:
        return
    draw_section_title(ctx.doc, ctx.tr("SECTION_TIMELINE"), keep_with=42)
    draw_status_timeline(ctx.doc, segments, tr=ctx.tr)


# ---------------------------------------------------------------------------
# Full / history
# ---------------------------------------------------------------------------


def generate_full_report(options: ReportOptions, *, config: AppConfig | None = None) -> bytes:
    """Device card, route statistics, map, status timeline and chart snapshot."""
    theme = get_theme(options.theme)
    cfg = config or default_config()
    map_image = _resolve_snapshot(options.map_snapshot, "map")
    chart_image = _resolve_snapshot(options.chart_snapshot, "chart")

    def compose() -> bytes:
        ctx = _open_context(theme, options.lang, cfg, "REPORT_TITLE_FULL")
        _draw_preamble(ctx, options, "REPORT_TITLE_FULL")
        _draw_route_stats(ctx, options)
        _draw_map(ctx, map_image, FULL_MAP_H)
        _draw_timeline(ctx, _segments_for(options))
        if chart_image is not None:
            ctx.doc.advance_page()
            draw_section_title(ctx.doc, ctx.tr("SECTION_CHARTS"), keep_with=CHART_SNAPSHOT_H)
            draw_snapshot(ctx.doc, chart_image, height=CHART_SNAPSHOT_H)
        return _finish(ctx)

    return _run("full", compose)


def generate_history_report(options: ReportOptions, *, config: AppConfig | None = None) -> bytes:
    """Route history: map, status timeline and per-status totals."""
    theme = get_theme(options.theme)
    cfg = config or default_config()
    map_image = _resolve_snapshot(options.map_snapshot, "map")

    def compose() -> bytes:
        ctx = _open_context(theme, options.lang, cfg, "REPORT_TITLE_HISTORY")
        _draw_preamble(ctx, options, "REPORT_TITLE_HISTORY")
        _draw_route_stats(ctx, options)
        _draw_map(ctx, map_image, HISTORY_MAP_H)
        segments = _segments_for(options)
        _draw_timeline(ctx, segments)
        if segments:
            draw_section_title(ctx.doc, ctx.tr("SECTION_STATUS_SUMMARY"), keep_with=42)
            draw_status_summary(ctx.doc, summarize_segments_by_status(segments), tr=ctx.tr)
        return _finish(ctx)

    return _run("history", compose)


# ---------------------------------------------------------------------------
# Statistics
# ---------------------------------------------------------------------------


def _hours(value: float) -> str:
    return f"{value:.1f} h"


def _stats_summary(ctx: _Context, dataset: ReportDataset) -> None:
    summary = dataset.summary
    if summary is None:
        return
    draw_section_title(ctx.doc, ctx.tr("SECTION_SUMMARY"), keep_with=60)
    draw_stat_cards(
        ctx.doc,
        [
            StatCard(ctx.tr("SUMMARY_ROUTES"), str(summary.route_count), "primary"),
            StatCard(ctx.tr("SUMMARY_DISTANCE"), f"{summary.total_distance_km:.1f} km", "primary"),
            StatCard(ctx.tr("STAT_MAX_SPEED"), f"{summary.max_speed_kph:.0f} km/h", "critical"),
            StatCard(ctx.tr("STAT_AVG_SPEED"), f"{summary.avg_speed_kph:.0f} km/h", "ok"),
            StatCard(ctx.tr("SUMMARY_MOVING_TIME"), _hours(summary.moving_hours), "ok"),
            StatCard(ctx.tr("SUMMARY_IDLE_TIME"), _hours(summary.idle_hours), "warn"),
            StatCard(ctx.tr("SUMMARY_TOTAL_TIME"), _hours(summary.total_hours), "muted"),
            StatCard(ctx.tr("STAT_TOTAL_POINTS"), format_number(summary.total_points), "muted"),
        ],
    )


def _stats_routes(ctx: _Context, dataset: ReportDataset) -> None:
    if not dataset.routes:
        return
    draw_section_title(ctx.doc, ctx.tr("SECTION_ROUTES"), keep_with=42)
    draw_route_table(ctx.doc, dataset.routes, tr=ctx.tr)


def _stats_speed(ctx: _Context, dataset: ReportDataset) -> None:
    if not dataset.speed_timeline:
        return
    draw_section_title(ctx.doc, ctx.tr("SECTION_SPEED_TIMELINE"), keep_with=190)
    line_chart(
        ctx.doc,
        [(sample.label, sample.speed_kph) for sample in dataset.speed_timeline],
        y_label="km/h",
    )


def _stats_distribution(ctx: _Context, dataset: ReportDataset) -> None:
    if dataset.analysis.total_points == 0:
        return
    draw_section_title(ctx.doc, ctx.tr("SECTION_SPEED_DISTRIBUTION"), keep_with=170)
    bar_chart(
        ctx.doc,
        [
            (
                ctx.tr("BUCKET_STOPPED") if bucket.key == STOPPED_BUCKET else bucket.key,
                float(bucket.count),
            )
            for bucket in dataset.speed_buckets
        ],
    )


def _stats_movement(ctx: _Context, dataset: ReportDataset) -> None:
    movement = dataset.movement
    if movement.moving + movement.stopped == 0:
        return
    draw_section_title(ctx.doc, ctx.tr("SECTION_MOVEMENT"), keep_with=170)
    pie_chart(
        ctx.doc,
        [
            (ctx.tr("MOVEMENT_MOVING"), float(movement.moving)),
            (ctx.tr("MOVEMENT_STOPPED"), float(movement.stopped)),
        ],
        step_deg=ctx.config.charts.pie_angle_step_deg,
    )


def _stats_analysis(ctx: _Context, dataset: ReportDataset) -> None:
    analysis = dataset.analysis
    draw_section_title(ctx.doc, ctx.tr("SECTION_ANALYSIS"), keep_with=60)
    draw_stat_cards(
        ctx.doc,
        [
            StatCard(ctx.tr("ANALYSIS_MOVING"), f"{analysis.moving_pct:.1f}%", "ok"),
            StatCard(ctx.tr("ANALYSIS_SPEED_EXCESS"), f"{analysis.speed_excess_pct:.1f}%", "warn"),
            StatCard(ctx.tr("ANALYSIS_HIGH_SPEED"), f"{analysis.high_speed_pct:.1f}%", "critical"),
            StatCard(ctx.tr("ANALYSIS_STOPPED"), f"{analysis.stopped_pct:.1f}%", "muted"),
        ],
    )


def _stats_period(ctx: _Context, dataset: ReportDataset) -> None:
    draw_section_title(ctx.doc, ctx.tr("SECTION_PERIOD"), keep_with=60)
    draw_stat_cards(
        ctx.doc,
        [
            StatCard(ctx.tr("PERIOD_START"), dataset.period.start_label, "primary"),
            StatCard(ctx.tr("PERIOD_END"), dataset.period.end_label, "primary"),
        ],
        per_row=2,
    )


def _stats_drivers(ctx: _Context, dataset: ReportDataset) -> None:
    if not dataset.driver_ranking:
        return
    draw_section_title(ctx.doc, ctx.tr("SECTION_DRIVERS"), keep_with=42)
    draw_driver_ranking(ctx.doc, dataset.driver_ranking, tr=ctx.tr)


_STATS_DRAWERS: dict[str, Callable[[_Context, ReportDataset], None]] = {
    "resumen": _stats_summary,
    "rutas": _stats_routes,
    "velocidad": _stats_speed,
    "distribucion": _stats_distribution,
    "movimiento": _stats_movement,
    "analisis": _stats_analysis,
    "periodo": _stats_period,
    "conductores": _stats_drivers,
}


def selected_sections(sections: Collection[str] | None) -> list[str]:
    """Canonical-order subset of *sections*; ``None`` selects all, unknown ids drop out."""
    if sections is None:
        return list(STATS_SECTIONS)
    wanted = {str(s).strip().lower() for s in sections}
    unknown = wanted.difference(STATS_SECTIONS)
    if unknown:
        LOGGER.debug("Ignoring unknown statistics sections: %s", ", ".join(sorted(unknown)))
    return [section for section in STATS_SECTIONS if section in wanted]


def generate_stats_report(
    options: ReportOptions,
    dataset: ReportDataset | None = None,
    sections: Collection[str] | None = None,
    *,
    config: AppConfig | None = None,
) -> bytes:
    """Statistics report with an optional section subset.

    *dataset* overrides the one synthesized from ``options.pings`` and
    ``options.routes``.  Sections are always drawn in canonical order.
    """
    theme = get_theme(options.theme)
    cfg = config or default_config()
    chosen = selected_sections(sections)

    def compose() -> bytes:
        data = dataset
        if data is None:
            data = build_report_dataset(
                options.pings,
                options.routes,
                assigned_driver=options.assigned_driver,
                drivers=options.drivers,
                timeline_target=cfg.charts.timeline_max_samples,
            )
        ctx = _open_context(theme, options.lang, cfg, "REPORT_TITLE_STATS")
        _draw_preamble(ctx, options, "REPORT_TITLE_STATS")
        for section in chosen:
            _STATS_DRAWERS[section](ctx, data)
        return _finish(ctx)

    return _run("stats", compose)


# ---------------------------------------------------------------------------
# List export
# ---------------------------------------------------------------------------


def _list_cell(value: object, tr: Callable[..., str]) -> str:
    if value is None or value == "":
        return "-"
    if isinstance(value, bool):
        return tr("YES") if value else tr("NO")
    if isinstance(value, datetime):
        return value.strftime("%d/%m/%Y %H:%M")
    return str(value)


def generate_list_report(options: ListReportOptions, *, config: AppConfig | None = None) -> bytes:
    """Tabular export of an arbitrary record list."""
    theme = get_theme(options.theme)
    cfg = config or default_config()

    def compose() -> bytes:
        ctx = _open_context(theme, options.lang, cfg, "", title=options.title)
        doc = ctx.doc
        doc.text(doc.margin_x, doc.y + 14, options.title, size=18, bold=True)
        doc.y += 24
        if options.subtitle:
            doc.text(doc.margin_x, doc.y + 10, options.subtitle, color="text_secondary", size=11)
            doc.y += 18
        for label, value in options.filters:
            doc.ensure_space(14)
            doc.text(doc.margin_x, doc.y + 10, f"{label}: {value}", color="muted", size=9)
            doc.y += 14
        doc.ensure_space(30)
        doc.text(
            doc.margin_x,
            doc.y + 12,
            ctx.tr("LIST_TOTAL_RECORDS", count=len(options.rows)),
            color="muted",
            size=9,
        )
        doc.text(
            doc.margin_x + doc.content_width,
            doc.y + 12,
            ctx.tr(
                "LIST_GENERATED",
                when=_generated_at(options.generated_at).strftime("%d/%m/%Y %H:%M"),
            ),
            color="muted",
            size=9,
            align="right",
        )
        doc.y += 24
        columns = [Column(col.header, col.weight, col.numeric) for col in options.columns]
        rows = [
            [_list_cell(row.get(col.key), ctx.tr) for col in options.columns]
            for row in options.rows
        ]
        draw_table(doc, columns, rows)
        return _finish(ctx)

    return _run("list", compose)
