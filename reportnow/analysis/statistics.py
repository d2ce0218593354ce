"""Report dataset synthesis from a ping slice and route summaries.

``build_report_dataset`` is the single entry point used by the statistics
report.  Every percentage in the dataset shares one denominator: the total
ping count floored at 1.  The stopped count is computed once and reused by
the speed buckets, the movement split and the analysis block.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime
from statistics import mean

from ..domain_models import DriverInfo, GPSPing, RouteSummary

LOGGER = logging.getLogger(__name__)

TIMELINE_TARGET_SAMPLES = 100
SPEED_EXCESS_KMH = 60.0
HIGH_SPEED_KMH = 80.0
RANKING_MAX_OTHERS = 4
NO_DATA = "—"

# (key, lower exclusive, upper inclusive); None upper = open-ended
SPEED_BUCKETS: tuple[tuple[str, float, float | None], ...] = (
    ("1-30", 0.0, 30.0),
    ("31-60", 30.0, 60.0),
    ("61-80", 60.0, 80.0),
    ("80+", 80.0, None),
)
STOPPED_BUCKET = "stopped"


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class SummaryTotals:
    route_count: int = 0
    total_distance_km: float = 0.0
    max_speed_kph: float = 0.0
    avg_speed_kph: float = 0.0
    moving_hours: float = 0.0
    idle_hours: float = 0.0
    total_hours: float = 0.0
    total_points: int = 0


@dataclass(slots=True)
class TimelineSample:
    label: str
    speed_kph: float


@dataclass(slots=True)
class SpeedBucket:
    key: str
    count: int


@dataclass(slots=True)
class MovementSplit:
    moving: int = 0
    stopped: int = 0
    moving_pct: float = 0.0
    stopped_pct: float = 0.0


@dataclass(slots=True)
class AnalysisBlock:
    total_points: int = 0
    moving_pct: float = 0.0
    speed_excess_pct: float = 0.0
    high_speed_pct: float = 0.0
    stopped_pct: float = 0.0


@dataclass(slots=True)
class PeriodBounds:
    start: datetime | None = None
    end: datetime | None = None

    @property
    def start_label(self) -> str:
        return _format_datetime(self.start)

    @property
    def end_label(self) -> str:
        return _format_datetime(self.end)


@dataclass(slots=True)
class DriverRankingEntry:
    name: str
    assigned: bool
    availability: str  # "assigned" | "available" | "unavailable"
    license_number: str | None = None


@dataclass(slots=True)
class ReportDataset:
    summary: SummaryTotals | None = None
    routes: list[RouteSummary] = field(default_factory=list)
    speed_timeline: list[TimelineSample] = field(default_factory=list)
    speed_buckets: list[SpeedBucket] = field(default_factory=list)
    movement: MovementSplit = field(default_factory=MovementSplit)
    analysis: AnalysisBlock = field(default_factory=AnalysisBlock)
    period: PeriodBounds = field(default_factory=PeriodBounds)
    driver_ranking: list[DriverRankingEntry] | None = None


@dataclass(slots=True)
class RouteStats:
    """The four headline figures shown on route-statistic cards."""

    total_points: int = 0
    max_speed_kph: float = 0.0
    avg_speed_kph: float = 0.0
    stopped_points: int = 0


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _format_datetime(value: datetime | None) -> str:
    if value is None:
        return NO_DATA
    return value.strftime("%d/%m/%Y %H:%M")


def _pct(count: int, total: int) -> float:
    return round(count * 100.0 / max(1, total), 1)


def _bucket_key(speed: float) -> str:
    if speed <= 0:
        return STOPPED_BUCKET
    for key, low, high in SPEED_BUCKETS:
        if speed > low and (high is None or speed <= high):
            return key
    return SPEED_BUCKETS[-1][0]


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------


def summarize_routes(routes: Sequence[RouteSummary]) -> SummaryTotals:
    """Sum route metrics; the average speed is the plain mean of route averages."""
    if not routes:
        return SummaryTotals()
    return SummaryTotals(
        route_count=len(routes),
        total_distance_km=sum(r.distance_km for r in routes),
        max_speed_kph=max(r.max_speed_kph for r in routes),
        avg_speed_kph=mean(r.avg_speed_kph for r in routes),
        moving_hours=sum(r.moving_hours for r in routes),
        idle_hours=sum(r.idle_hours for r in routes),
        total_hours=sum(r.total_hours for r in routes),
        total_points=sum(r.point_count for r in routes),
    )


def speed_bucket_counts(pings: Sequence[GPSPing]) -> list[SpeedBucket]:
    counts: dict[str, int] = {STOPPED_BUCKET: 0}
    counts.update({key: 0 for key, _low, _high in SPEED_BUCKETS})
    for ping in pings:
        counts[_bucket_key(ping.speed_or_zero)] += 1
    return [SpeedBucket(key=key, count=count) for key, count in counts.items()]


def downsample_timeline(
    pings: Sequence[GPSPing], target: int = TIMELINE_TARGET_SAMPLES
) -> list[TimelineSample]:
    """Uniform stride down-sample: ``stride = max(1, N // target)``."""
    stride = max(1, len(pings) // max(1, target))
    return [
        TimelineSample(label=ping.timestamp.strftime("%H:%M"), speed_kph=ping.speed_or_zero)
        for ping in pings[::stride]
    ]


def build_driver_ranking(
    assigned_driver: DriverInfo | None,
    drivers: Sequence[DriverInfo],
    *,
    limit: int = RANKING_MAX_OTHERS,
) -> list[DriverRankingEntry] | None:
    if assigned_driver is None:
        return None
    ranking = [
        DriverRankingEntry(
            name=assigned_driver.name,
            assigned=True,
            availability="assigned",
            license_number=assigned_driver.license_number,
        )
    ]
    others = [
        d
        for d in drivers
        if d.id != assigned_driver.id and d.client_id == assigned_driver.client_id
    ]
    for driver in others[:limit]:
        ranking.append(
            DriverRankingEntry(
                name=driver.name,
                assigned=False,
                availability="available" if driver.is_available else "unavailable",
                license_number=driver.license_number,
            )
        )
    return ranking


def summarize_route_stats(pings: Sequence[GPSPing]) -> RouteStats:
    """Headline figures for the route-statistic cards, derived from pings."""
    if not pings:
        return RouteStats()
    speeds = [p.speed_or_zero for p in pings]
    return RouteStats(
        total_points=len(pings),
        max_speed_kph=max(speeds),
        avg_speed_kph=mean(speeds),
        stopped_points=sum(1 for s in speeds if s <= 0),
    )


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------


def build_report_dataset(
    pings: Sequence[GPSPing],
    routes: Sequence[RouteSummary] | None = None,
    *,
    assigned_driver: DriverInfo | None = None,
    drivers: Sequence[DriverInfo] = (),
    timeline_target: int = TIMELINE_TARGET_SAMPLES,
) -> ReportDataset:
    """Build the complete statistics dataset for one device/time window.

    *pings* must already be in chronological order; period bounds are taken
    from the first and last element as given.
    """
    total = len(pings)
    buckets = speed_bucket_counts(pings)
    stopped = next(b.count for b in buckets if b.key == STOPPED_BUCKET)
    moving = total - stopped
    excess = sum(1 for p in pings if p.speed_or_zero > SPEED_EXCESS_KMH)
    high = sum(1 for p in pings if p.speed_or_zero > HIGH_SPEED_KMH)

    dataset = ReportDataset(
        summary=summarize_routes(routes) if routes is not None else None,
        routes=sorted(routes or [], key=lambda r: r.ordinal),
        speed_timeline=downsample_timeline(pings, timeline_target),
        speed_buckets=buckets,
        movement=MovementSplit(
            moving=moving,
            stopped=stopped,
            moving_pct=_pct(moving, total),
            stopped_pct=_pct(stopped, total),
        ),
        analysis=AnalysisBlock(
            total_points=total,
            moving_pct=_pct(moving, total),
            speed_excess_pct=_pct(excess, total),
            high_speed_pct=_pct(high, total),
            stopped_pct=_pct(stopped, total),
        ),
        period=(
            PeriodBounds(start=pings[0].timestamp, end=pings[-1].timestamp)
            if pings
            else PeriodBounds()
        ),
        driver_ranking=build_driver_ranking(assigned_driver, drivers),
    )
    LOGGER.debug(
        "Built report dataset: %d pings, %d routes, %d timeline samples",
        total,
        len(dataset.routes),
        len(dataset.speed_timeline),
    )
    return dataset
