"""Status segmentation: merge consecutive same-status pings into timed runs.

A segment spans from its first ping to its last ping.  When the status
changes, the open segment is closed at the timestamp of the ping *before*
the change, so the interval between two segments belongs to neither of
them.  Grouping the result by status (``summarize_segments_by_status``)
preserves total duration and point count.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from ..domain_models import GPSPing, PingStatus, StatusSegment
from .status_classifier import classify_pings


@dataclass(slots=True)
class StatusTotals:
    """Durations and point counts of all segments sharing one status."""

    status: PingStatus
    duration_s: float = 0.0
    point_count: int = 0
    segment_count: int = 0


def aggregate_status_segments(pings: Sequence[GPSPing]) -> list[StatusSegment]:
    """Classify every ping and return contiguous status segments in time order."""
    n = len(pings)
    if n == 0:
        return []

    statuses = classify_pings(pings)
    segments: list[StatusSegment] = []
    seg_start = 0
    for i in range(1, n + 1):
        if i < n and statuses[i] == statuses[seg_start]:
            continue
        # Close [seg_start, i-1] at the previous ping's time
        start_time = pings[seg_start].timestamp
        end_time = pings[i - 1].timestamp
        segments.append(
            StatusSegment(
                status=statuses[seg_start],
                start_time=start_time,
                end_time=end_time,
                duration_s=max(0.0, (end_time - start_time).total_seconds()),
                point_count=i - seg_start,
            )
        )
        seg_start = i
    return segments


def summarize_segments_by_status(segments: Sequence[StatusSegment]) -> list[StatusTotals]:
    """Group segment durations and point counts by status, in first-seen order."""
    totals: dict[PingStatus, StatusTotals] = {}
    for seg in segments:
        entry = totals.get(seg.status)
        if entry is None:
            entry = totals[seg.status] = StatusTotals(status=seg.status)
        entry.duration_s += seg.duration_s
        entry.point_count += seg.point_count
        entry.segment_count += 1
    return list(totals.values())
