"""PDF report composition package."""

from .pdf_builder import (
    STATS_SECTIONS,
    ReportGenerationError,
    generate_full_report,
    generate_history_report,
    generate_list_report,
    generate_stats_report,
)
from .report_data import (
    DeviceInfo,
    ListColumn,
    ListReportOptions,
    ReportOptions,
    RouteStats,
)

__all__ = [
    "STATS_SECTIONS",
    "DeviceInfo",
    "ListColumn",
    "ListReportOptions",
    "ReportGenerationError",
    "ReportOptions",
    "RouteStats",
    "generate_full_report",
    "generate_history_report",
    "generate_list_report",
    "generate_stats_report",
]
