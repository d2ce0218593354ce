from __future__ import annotations

import logging
from copy import deepcopy
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

PROJECT_DIR = Path(__file__).resolve().parents[1]
"""Root of the checkout holding the ``reportnow`` package."""

LOGGER = logging.getLogger(__name__)

VALID_THEMES: frozenset[str] = frozenset({"light", "dark"})
VALID_LANGS: frozenset[str] = frozenset({"en", "es"})
VALID_PAGE_SIZES: frozenset[str] = frozenset({"A4", "LETTER"})
VALID_LOG_LEVELS: frozenset[str] = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

DEFAULT_CONFIG: dict[str, Any] = {
    "report": {
        "theme": "light",
        "lang": "en",
        "page_size": "A4",
        "margin_pt": 40.0,
        "footer_reserve_pt": 50.0,
        "brand": "ReportNow",
    },
    "charts": {
        "pie_angle_step_deg": 5.0,
        "timeline_max_samples": 100,
    },
    "output": {
        "directory": "reports",
    },
    "logging": {
        "level": "INFO",
    },
}


def documented_default_config() -> dict[str, Any]:
    """Return runtime defaults in the shape documented by config.example.yaml."""
    return deepcopy(DEFAULT_CONFIG)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _resolve_config_path(path_text: str, config_path: Path) -> Path:
    path = Path(path_text)
    if path.is_absolute():
        return path
    return config_path.resolve().parent / path


def _choice(section: str, key: str, value: object, valid: frozenset[str]) -> str:
    text = str(value).strip()
    if text not in valid:
        raise ValueError(f"{section}.{key} must be one of {sorted(valid)}, got {value!r}")
    return text


@dataclass(slots=True)
class ReportConfig:
    theme: str
    lang: str
    page_size: str
    margin_pt: float
    footer_reserve_pt: float
    brand: str

    def __post_init__(self) -> None:
        if self.margin_pt < 10:
            LOGGER.warning("report.margin_pt=%s is below minimum 10; clamped", self.margin_pt)
            object.__setattr__(self, "margin_pt", 10.0)
        elif self.margin_pt > 144:
            LOGGER.warning("report.margin_pt=%s exceeds maximum 144; clamped", self.margin_pt)
            object.__setattr__(self, "margin_pt", 144.0)
        if self.footer_reserve_pt < 30:
            LOGGER.warning(
                "report.footer_reserve_pt=%s is below minimum 30; clamped",
                self.footer_reserve_pt,
            )
            object.__setattr__(self, "footer_reserve_pt", 30.0)
        if not self.brand.strip():
            object.__setattr__(self, "brand", str(DEFAULT_CONFIG["report"]["brand"]))


@dataclass(slots=True)
class ChartsConfig:
    pie_angle_step_deg: float
    timeline_max_samples: int

    def __post_init__(self) -> None:
        step = self.pie_angle_step_deg
        if not 1.0 <= step <= 45.0:
            clamped = min(45.0, max(1.0, step))
            LOGGER.warning(
                "charts.pie_angle_step_deg=%s is outside 1-45; clamped to %s", step, clamped
            )
            object.__setattr__(self, "pie_angle_step_deg", clamped)
        if self.timeline_max_samples < 1:
            LOGGER.warning(
                "charts.timeline_max_samples=%s is below minimum 1; clamped to 1",
                self.timeline_max_samples,
            )
            object.__setattr__(self, "timeline_max_samples", 1)


@dataclass(slots=True)
class OutputConfig:
    directory: Path


@dataclass(slots=True)
class LoggingConfig:
    level: str


@dataclass(slots=True)
class AppConfig:
    report: ReportConfig
    charts: ChartsConfig
    output: OutputConfig
    logging: LoggingConfig
    config_path: Path


def _read_config_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"{path} must contain a YAML object at the top level.")
        return data


def _build_app_config(merged: dict[str, Any], path: Path) -> AppConfig:
    report_cfg = merged["report"]
    charts_cfg = merged["charts"]
    return AppConfig(
        report=ReportConfig(
            theme=_choice("report", "theme", report_cfg["theme"], VALID_THEMES),
            lang=_choice("report", "lang", report_cfg["lang"], VALID_LANGS),
            page_size=_choice(
                "report", "page_size", str(report_cfg["page_size"]).upper(), VALID_PAGE_SIZES
            ),
            margin_pt=float(report_cfg["margin_pt"]),
            footer_reserve_pt=float(report_cfg["footer_reserve_pt"]),
            brand=str(report_cfg["brand"]),
        ),  # NOTE: ReportConfig.__post_init__ clamps margins
        charts=ChartsConfig(
            pie_angle_step_deg=float(charts_cfg["pie_angle_step_deg"]),
            timeline_max_samples=int(charts_cfg["timeline_max_samples"]),
        ),
        output=OutputConfig(
            directory=_resolve_config_path(str(merged["output"]["directory"]), path),
        ),
        logging=LoggingConfig(
            level=_choice(
                "logging", "level", str(merged["logging"]["level"]).upper(), VALID_LOG_LEVELS
            ),
        ),
        config_path=path,
    )


def default_config() -> AppConfig:
    """Built-in defaults without reading any file."""
    return _build_app_config(documented_default_config(), (PROJECT_DIR / "config.yaml").resolve())


def load_config(config_path: Path | None = None) -> AppConfig:
    path = config_path or (PROJECT_DIR / "config.yaml")
    path = path.resolve()
    override = _read_config_file(path)
    merged = _deep_merge(DEFAULT_CONFIG, override)
    app_config = _build_app_config(merged, path)
    LOGGER.debug("Loaded config from %s", path)
    return app_config
