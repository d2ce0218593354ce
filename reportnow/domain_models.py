"""Domain model objects for the ReportNow report engine.

Typed dataclasses for the records the report core consumes from its
collaborators (telemetry feed, route-summary service, driver directory)
and the segments it produces.  Request payloads are validated in
``reportnow.api_models`` and converted to these records there.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum

# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


def as_float_or_none(value: object) -> float | None:
    if value in (None, ""):
        return None
    try:
        out = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    if math.isnan(out) or math.isinf(out):
        return None
    return out


def parse_iso8601(value: object) -> datetime | None:
    if isinstance(value, datetime):
        return value if value.tzinfo is not None else value.replace(tzinfo=UTC)
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        dt = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    # Naive timestamps from the feed are UTC
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt


# ---------------------------------------------------------------------------
# Telemetry
# ---------------------------------------------------------------------------


class PingStatus(StrEnum):
    """Operating states a ping can be classified into."""

    ENGINE_ON = "engine_on"
    MOVING = "moving"
    STOPPED = "stopped"
    ENGINE_OFF = "engine_off"


def parse_status(value: object) -> PingStatus | None:
    """Return the recognized status for *value*, or ``None``."""
    if isinstance(value, PingStatus):
        return value
    token = str(value or "").strip().lower()
    try:
        return PingStatus(token)
    except ValueError:
        return None


@dataclass(slots=True)
class GPSPing:
    device_id: str
    recv_time: datetime
    fix_time: datetime | None = None
    lat: float | None = None
    lon: float | None = None
    speed_kph: float | None = None
    course_deg: float | None = None
    satellites: int | None = None
    ignition: bool | None = None
    odometer_m: float | None = None
    status: str | None = None

    @property
    def timestamp(self) -> datetime:
        return self.fix_time or self.recv_time

    @property
    def speed_or_zero(self) -> float:
        """Speed for classification and statistics; unknown or non-finite reads as 0."""
        speed = self.speed_kph
        if speed is None or not math.isfinite(speed):
            return 0.0
        return speed


@dataclass(slots=True)
class StatusSegment:
    """A maximal run of consecutive pings sharing one status."""

    status: PingStatus
    start_time: datetime
    end_time: datetime
    duration_s: float
    point_count: int


# ---------------------------------------------------------------------------
# Route summaries and directory records
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class RouteSummary:
    """Pre-aggregated metrics for one trip, supplied by the route service."""

    ordinal: int
    start: datetime | None
    end: datetime | None
    distance_km: float = 0.0
    avg_speed_kph: float = 0.0
    max_speed_kph: float = 0.0
    moving_hours: float = 0.0
    idle_hours: float = 0.0
    total_hours: float = 0.0
    point_count: int = 0


@dataclass(slots=True)
class DriverInfo:
    id: str
    name: str
    client_id: str | None = None
    status: str = "active"
    license_number: str | None = None

    @property
    def is_available(self) -> bool:
        return self.status.strip().lower() == "active"
