from __future__ import annotations

from datetime import timedelta

import pytest

from reportnow.analysis.segments import (
    aggregate_status_segments,
    summarize_segments_by_status,
)
from reportnow.domain_models import PingStatus

from builders import make_ping, make_pings, ts


class TestAggregateStatusSegments:
    def test_empty_input(self) -> None:
        assert aggregate_status_segments([]) == []

    def test_start_moving_stop_sequence(self) -> None:
        pings = [
            make_ping(ts(8, 0), 0.0, ignition=True),
            make_ping(ts(8, 5), 45.0),
            make_ping(ts(8, 20), 0.0),
        ]
        segments = aggregate_status_segments(pings)
        assert [seg.status for seg in segments] == [
            PingStatus.ENGINE_ON,
            PingStatus.MOVING,
            PingStatus.ENGINE_OFF,
        ]
        assert [(seg.start_time, seg.end_time) for seg in segments] == [
            (ts(8, 0), ts(8, 0)),
            (ts(8, 5), ts(8, 5)),
            (ts(8, 20), ts(8, 20)),
        ]
        assert all(seg.duration_s == 0 for seg in segments)

    def test_segment_closes_at_previous_ping(self) -> None:
        pings = make_pings([30.0, 40.0, 50.0, 0.0, 0.0, 20.0], step_s=60)
        segments = aggregate_status_segments(pings)
        assert [seg.status for seg in segments] == [
            PingStatus.MOVING,
            PingStatus.STOPPED,
            PingStatus.MOVING,
        ]
        first, second, third = segments
        assert first.end_time == pings[2].timestamp
        assert first.duration_s == pytest.approx(120.0)
        assert second.start_time == pings[3].timestamp
        assert second.end_time == pings[4].timestamp
        assert second.duration_s == pytest.approx(60.0)
        # The gap between pings[2] and pings[3] belongs to no segment
        covered = sum(seg.duration_s for seg in segments)
        span = (pings[-1].timestamp - pings[0].timestamp).total_seconds()
        assert covered < span

    def test_point_counts_sum_to_input_length(self) -> None:
        speeds = [0.0, 0.0, 10.0, 20.0, None, 0.0, 55.0, 80.0, 3.0, 1.0, 0.0]
        pings = make_pings(speeds, ignition=True)
        segments = aggregate_status_segments(pings)
        assert sum(seg.point_count for seg in segments) == len(pings)

    def test_adjacent_segments_have_different_status(self) -> None:
        pings = make_pings([0.0, 5.0, 5.0, 0.0, 0.0, 9.0, 0.0], ignition=True)
        segments = aggregate_status_segments(pings)
        for left, right in zip(segments, segments[1:]):
            assert left.status != right.status

    def test_single_ping_segment(self) -> None:
        segments = aggregate_status_segments([make_ping(ts(9), 60.0)])
        assert len(segments) == 1
        assert segments[0].status == PingStatus.MOVING
        assert segments[0].point_count == 1
        assert segments[0].duration_s == 0

    def test_uses_fix_time_when_present(self) -> None:
        pings = make_pings([40.0, 40.0])
        pings[1].recv_time = pings[1].fix_time + timedelta(minutes=10)
        (segment,) = aggregate_status_segments(pings)
        assert segment.end_time == pings[1].fix_time


class TestSummarizeSegmentsByStatus:
    def test_grouping_preserves_totals(self) -> None:
        speeds = [0.0, 20.0, 30.0, 0.0, 0.0, 40.0, 0.0, 0.0, 50.0, 0.0]
        segments = aggregate_status_segments(make_pings(speeds, ignition=True, step_s=45))
        totals = summarize_segments_by_status(segments)
        assert sum(t.duration_s for t in totals) == pytest.approx(
            sum(s.duration_s for s in segments)
        )
        assert sum(t.point_count for t in totals) == sum(s.point_count for s in segments)
        assert sum(t.segment_count for t in totals) == len(segments)

    def test_first_seen_order(self) -> None:
        speeds = [0.0, 20.0, 0.0, 20.0, 0.0]
        segments = aggregate_status_segments(make_pings(speeds, ignition=True))
        totals = summarize_segments_by_status(segments)
        assert [t.status for t in totals] == [
            PingStatus.ENGINE_ON,
            PingStatus.MOVING,
            PingStatus.STOPPED,
            PingStatus.ENGINE_OFF,
        ]
        moving = totals[1]
        assert moving.segment_count == 2
        assert moving.point_count == 2

    def test_empty(self) -> None:
        assert summarize_segments_by_status([]) == []
