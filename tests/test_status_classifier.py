from __future__ import annotations

import pytest

from reportnow.analysis.status_classifier import (
    MOVING_SPEED_KMH,
    classify_ping_status,
    classify_pings,
)
from reportnow.domain_models import PingStatus

from builders import make_ping, make_pings, ts


class TestRuleOrder:
    def test_status_hint_wins_over_everything(self) -> None:
        pings = [make_ping(ts(8), 90.0, ignition=False, status="engine_on")]
        assert classify_ping_status(pings, 0) == PingStatus.ENGINE_ON

    def test_status_hint_is_case_insensitive(self) -> None:
        pings = [make_ping(ts(8), 0.0, status=" Moving ")]
        assert classify_ping_status(pings, 0) == PingStatus.MOVING

    def test_unknown_hint_is_ignored(self) -> None:
        pings = [make_ping(ts(8), 40.0, status="towing"), make_ping(ts(8, 1), 40.0)]
        assert classify_ping_status(pings, 0) == PingStatus.MOVING

    def test_ignition_off_beats_speed(self) -> None:
        pings = make_pings([50.0, 50.0, 50.0])
        pings[1].ignition = False
        assert classify_ping_status(pings, 1) == PingStatus.ENGINE_OFF

    def test_speed_above_threshold_is_moving(self) -> None:
        pings = make_pings([0.0, MOVING_SPEED_KMH + 0.1, 0.0], ignition=True)
        assert classify_ping_status(pings, 1) == PingStatus.MOVING

    def test_speed_at_threshold_is_not_moving(self) -> None:
        pings = make_pings([0.0, MOVING_SPEED_KMH, 0.0])
        assert classify_ping_status(pings, 1) == PingStatus.STOPPED

    def test_first_ping_with_ignition_on_is_engine_on(self) -> None:
        pings = make_pings([0.0, 0.0], ignition=True)
        assert classify_ping_status(pings, 0) == PingStatus.ENGINE_ON

    def test_first_ping_moving_is_moving_not_engine_on(self) -> None:
        pings = make_pings([30.0, 0.0], ignition=True)
        assert classify_ping_status(pings, 0) == PingStatus.MOVING

    def test_last_ping_at_rest_is_engine_off(self) -> None:
        pings = make_pings([30.0, 0.0])
        assert classify_ping_status(pings, 1) == PingStatus.ENGINE_OFF

    def test_last_ping_with_slow_creep_is_stopped(self) -> None:
        pings = make_pings([30.0, 1.5])
        assert classify_ping_status(pings, 1) == PingStatus.STOPPED

    def test_middle_ping_at_rest_is_stopped(self) -> None:
        pings = make_pings([30.0, 0.0, 30.0], ignition=True)
        assert classify_ping_status(pings, 1) == PingStatus.STOPPED


class TestUnknownValues:
    def test_null_speed_counts_as_zero(self) -> None:
        pings = make_pings([None, None, None])
        assert classify_pings(pings) == [
            PingStatus.STOPPED,
            PingStatus.STOPPED,
            PingStatus.ENGINE_OFF,
        ]

    def test_unknown_ignition_skips_engine_on(self) -> None:
        pings = make_pings([0.0, 0.0], ignition=None)
        assert classify_ping_status(pings, 0) == PingStatus.STOPPED

    def test_single_ping_with_ignition_on_is_engine_on(self) -> None:
        # Rule 4 precedes rule 5 when the only ping is both first and last
        pings = [make_ping(ts(8), 0.0, ignition=True)]
        assert classify_ping_status(pings, 0) == PingStatus.ENGINE_ON


@pytest.mark.parametrize("index", [-1, 3, 99])
def test_out_of_range_index_is_stopped(index: int) -> None:
    pings = make_pings([10.0, 20.0, 30.0])
    assert classify_ping_status(pings, index) == PingStatus.STOPPED


def test_empty_sequence() -> None:
    assert classify_pings([]) == []
    assert classify_ping_status([], 0) == PingStatus.STOPPED


def test_classification_is_total_and_deterministic() -> None:
    ignitions = (None, True, False)
    speeds = (None, 0.0, float("nan"), 1.5, MOVING_SPEED_KMH, 35.0, 120.0)
    pings = [
        make_ping(ts(8, idx // 60, idx % 60), speed, ignition=ignitions[idx % 3])
        for idx, speed in enumerate(s for s in speeds for _ in range(4))
    ]
    first = classify_pings(pings)
    assert classify_pings(pings) == first
    assert len(first) == len(pings)
    assert all(isinstance(status, PingStatus) for status in first)
    assert {PingStatus.MOVING, PingStatus.STOPPED, PingStatus.ENGINE_OFF} <= set(first)
    # The first ping has unknown ignition, so no ping can be ENGINE_ON
    assert PingStatus.ENGINE_ON not in first
