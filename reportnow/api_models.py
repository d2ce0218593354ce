"""Pydantic request models for report generation.

The CLI (and any HTTP layer in front of it) validates a JSON payload with
these models and converts it to the composer's ``ReportOptions`` /
``ListReportOptions``.
"""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from .analysis.statistics import summarize_route_stats
from .domain_models import (
    DriverInfo,
    GPSPing,
    PingStatus,
    RouteSummary,
    StatusSegment,
    as_float_or_none,
    parse_iso8601,
)
from .report.report_data import (
    DeviceInfo,
    ListColumn,
    ListReportOptions,
    ReportOptions,
    RouteStats,
)

ThemeName = Literal["light", "dark"]
LangCode = Literal["en", "es"]


def _aware(value: datetime) -> datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


# ---------------------------------------------------------------------------
# Nested records
# ---------------------------------------------------------------------------


class DeviceModel(BaseModel):
    brand: str = ""
    model: str = ""
    imei: str = ""
    serial: str = ""
    status: str = "inactive"
    client_name: str = ""
    asset_name: str = ""
    sim_info: str = ""
    last_signal: str = ""

    def to_domain(self) -> DeviceInfo:
        return DeviceInfo(**self.model_dump())


class RouteStatsModel(BaseModel):
    total_points: int = Field(default=0, ge=0)
    max_speed_kph: float = Field(default=0.0, ge=0)
    avg_speed_kph: float = Field(default=0.0, ge=0)
    stopped_points: int = Field(default=0, ge=0)

    def to_domain(self) -> RouteStats:
        return RouteStats(**self.model_dump())


class PingModel(BaseModel):
    """One telemetry fix; non-finite sensor readings become unknown."""

    model_config = ConfigDict(extra="ignore")

    device_id: str = Field(default="", validation_alias=AliasChoices("device_id", "imei"))
    recv_time: datetime
    fix_time: datetime | None = None
    lat: float | None = Field(default=None, ge=-90, le=90)
    lon: float | None = Field(default=None, ge=-180, le=180)
    speed_kph: float | None = None
    course_deg: float | None = None
    satellites: int | None = None
    ignition: bool | None = None
    odometer_m: float | None = None
    status: str | None = None

    def to_domain(self) -> GPSPing:
        return GPSPing(
            device_id=self.device_id,
            recv_time=_aware(self.recv_time),
            fix_time=parse_iso8601(self.fix_time),
            lat=self.lat,
            lon=self.lon,
            speed_kph=as_float_or_none(self.speed_kph),
            course_deg=as_float_or_none(self.course_deg),
            satellites=self.satellites,
            ignition=self.ignition,
            odometer_m=as_float_or_none(self.odometer_m),
            status=self.status,
        )


class SegmentModel(BaseModel):
    status: PingStatus
    start_time: datetime = Field(validation_alias=AliasChoices("start_time", "startTime"))
    end_time: datetime = Field(validation_alias=AliasChoices("end_time", "endTime"))
    duration_s: float | None = Field(default=None, ge=0)
    point_count: int = Field(default=0, ge=0)

    def to_domain(self) -> StatusSegment:
        start = _aware(self.start_time)
        end = _aware(self.end_time)
        duration = self.duration_s
        if duration is None:
            duration = max(0.0, (end - start).total_seconds())
        return StatusSegment(
            status=self.status,
            start_time=start,
            end_time=end,
            duration_s=duration,
            point_count=self.point_count,
        )


class RouteModel(BaseModel):
    """Route summary; accepts the route-stats endpoint's Spanish keys too."""

    ordinal: int = Field(validation_alias=AliasChoices("ordinal", "ruta"))
    start: datetime | None = Field(default=None, validation_alias=AliasChoices("start", "inicio"))
    end: datetime | None = Field(default=None, validation_alias=AliasChoices("end", "fin"))
    distance_km: float = Field(
        default=0.0, ge=0, validation_alias=AliasChoices("distance_km", "km_recorridos")
    )
    avg_speed_kph: float = Field(
        default=0.0, ge=0, validation_alias=AliasChoices("avg_speed_kph", "velocidad_promedio")
    )
    max_speed_kph: float = Field(
        default=0.0, ge=0, validation_alias=AliasChoices("max_speed_kph", "velocidad_maxima")
    )
    moving_hours: float = Field(
        default=0.0, ge=0, validation_alias=AliasChoices("moving_hours", "tiempo_marcha_horas")
    )
    idle_hours: float = Field(
        default=0.0, ge=0, validation_alias=AliasChoices("idle_hours", "tiempo_ralenti_horas")
    )
    total_hours: float = Field(
        default=0.0, ge=0, validation_alias=AliasChoices("total_hours", "tiempo_total_horas")
    )
    point_count: int = Field(
        default=0, ge=0, validation_alias=AliasChoices("point_count", "puntos")
    )

    def to_domain(self) -> RouteSummary:
        return RouteSummary(
            ordinal=self.ordinal,
            start=parse_iso8601(self.start),
            end=parse_iso8601(self.end),
            distance_km=self.distance_km,
            avg_speed_kph=self.avg_speed_kph,
            max_speed_kph=self.max_speed_kph,
            moving_hours=self.moving_hours,
            idle_hours=self.idle_hours,
            total_hours=self.total_hours,
            point_count=self.point_count,
        )


class DriverModel(BaseModel):
    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    client_id: str | None = None
    status: str = "active"
    license_number: str | None = None

    def to_domain(self) -> DriverInfo:
        return DriverInfo(**self.model_dump())


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


def _resolve_path(path_text: str, base_dir: Path | None) -> Path:
    path = Path(path_text)
    if path.is_absolute() or base_dir is None:
        return path
    return base_dir / path


class ReportRequest(BaseModel):
    """Payload for the full, history and statistics variants.

    Snapshot paths are read lazily at render time, so an unreadable file
    only drops its image block.
    """

    model_config = ConfigDict(extra="ignore")

    device: DeviceModel = Field(default_factory=DeviceModel)
    date_range: str = ""
    route_stats: RouteStatsModel | None = None
    status_segments: list[SegmentModel] | None = None
    pings: list[PingModel] = Field(default_factory=list)
    routes: list[RouteModel] | None = None
    assigned_driver: DriverModel | None = None
    drivers: list[DriverModel] = Field(default_factory=list)
    map_snapshot_path: str | None = None
    chart_snapshot_path: str | None = None
    sections: list[str] | None = None
    theme: ThemeName | None = None
    lang: LangCode | None = None
    generated_at: datetime | None = None

    def _route_stats(self, pings: list[GPSPing]) -> RouteStats | None:
        """Explicit figures win; otherwise derive them from the pings, if any."""
        if self.route_stats is not None:
            return self.route_stats.to_domain()
        return summarize_route_stats(pings) if pings else None

    def to_options(
        self,
        base_dir: Path | None = None,
        *,
        default_theme: str = "light",
        default_lang: str = "en",
    ) -> ReportOptions:
        pings = [ping.to_domain() for ping in self.pings]
        return ReportOptions(
            device=self.device.to_domain(),
            date_range=self.date_range,
            route_stats=self._route_stats(pings),
            status_segments=(
                [seg.to_domain() for seg in self.status_segments]
                if self.status_segments is not None
                else None
            ),
            pings=pings,
            routes=[r.to_domain() for r in self.routes] if self.routes is not None else None,
            assigned_driver=self.assigned_driver.to_domain() if self.assigned_driver else None,
            drivers=[d.to_domain() for d in self.drivers],
            map_snapshot=(
                _resolve_path(self.map_snapshot_path, base_dir).read_bytes
                if self.map_snapshot_path
                else None
            ),
            chart_snapshot=(
                _resolve_path(self.chart_snapshot_path, base_dir).read_bytes
                if self.chart_snapshot_path
                else None
            ),
            theme=self.theme or default_theme,
            lang=self.lang or default_lang,
            generated_at=parse_iso8601(self.generated_at),
        )


class ListColumnModel(BaseModel):
    header: str = Field(min_length=1)
    key: str = Field(min_length=1)
    weight: float = Field(default=1.0, gt=0)
    numeric: bool = False


class ListRequest(BaseModel):
    """Payload for the tabular list export."""

    title: str = Field(min_length=1)
    subtitle: str | None = None
    columns: list[ListColumnModel] = Field(min_length=1)
    rows: list[dict[str, Any]] = Field(default_factory=list)
    filters: dict[str, str] = Field(default_factory=dict)
    theme: ThemeName | None = None
    lang: LangCode | None = None
    generated_at: datetime | None = None

    def to_options(
        self, *, default_theme: str = "light", default_lang: str = "en"
    ) -> ListReportOptions:
        return ListReportOptions(
            title=self.title,
            columns=[ListColumn(**col.model_dump()) for col in self.columns],
            rows=list(self.rows),
            subtitle=self.subtitle,
            filters=list(self.filters.items()),
            theme=self.theme or default_theme,
            lang=self.lang or default_lang,
            generated_at=parse_iso8601(self.generated_at),
        )
