"""Input data model for the PDF report composer.

``ReportOptions`` carries everything one render call needs: device
descriptor, pre-resolved directory values, telemetry, optional segments and
bitmap snapshots, and presentation settings (theme, language).
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

from ..analysis.statistics import RouteStats
from ..domain_models import DriverInfo, GPSPing, RouteSummary, StatusSegment

# Raw PNG/JPEG bytes, or a zero-argument capture callable returning them.
Snapshot = bytes | Callable[[], bytes]


@dataclass(slots=True)
class DeviceInfo:
    brand: str = ""
    model: str = ""
    imei: str = ""
    serial: str = ""
    status: str = "inactive"
    client_name: str = ""
    asset_name: str = ""
    sim_info: str = ""
    last_signal: str = ""

    @property
    def display_name(self) -> str:
        return " ".join(part for part in (self.brand, self.model) if part).strip() or self.imei


@dataclass(slots=True)
class ReportOptions:
    device: DeviceInfo
    date_range: str = ""
    route_stats: RouteStats | None = None
    status_segments: list[StatusSegment] | None = None
    pings: list[GPSPing] = field(default_factory=list)
    routes: list[RouteSummary] | None = None
    assigned_driver: DriverInfo | None = None
    drivers: list[DriverInfo] = field(default_factory=list)
    map_snapshot: Snapshot | None = None
    chart_snapshot: Snapshot | None = None
    theme: str = "light"
    lang: str = "en"
    generated_at: datetime | None = None


@dataclass(slots=True)
class ListColumn:
    header: str
    key: str
    weight: float = 1.0
    numeric: bool = False


@dataclass(slots=True)
class ListReportOptions:
    """Tabular export of an admin list (vehicles, drivers, SIM cards, ...)."""

    title: str
    columns: list[ListColumn]
    rows: list[dict[str, object]]
    subtitle: str | None = None
    filters: list[tuple[str, str]] = field(default_factory=list)
    theme: str = "light"
    lang: str = "en"
    generated_at: datetime | None = None
