"""reportnow.analysis – telemetry classification and statistics.

All analysis logic (status classification, segmentation, dataset
synthesis) lives here.  The sibling ``reportnow.report`` package is
renderer-only and consumes the results through this module-level API.
"""

from .segments import StatusTotals, aggregate_status_segments, summarize_segments_by_status
from .statistics import (
    NO_DATA,
    ReportDataset,
    build_report_dataset,
    summarize_route_stats,
)
from .status_classifier import classify_ping_status, classify_pings

__all__ = [
    "NO_DATA",
    "ReportDataset",
    "StatusTotals",
    "aggregate_status_segments",
    "build_report_dataset",
    "classify_ping_status",
    "classify_pings",
    "summarize_route_stats",
    "summarize_segments_by_status",
]
