# src/tripwise/config/settings.py
"""
Application settings (Pydantic).

Settings are loaded from `src/tripwise/config/defaults.yaml`, then optionally overridden by:
- environment variables (e.g., `TRIPWISE_LOG_LEVEL`, `TRIPWISE_MAX_WORKERS`)
- an external YAML file via `TRIPWISE_CONFIG_PATH`

Design rule:
- Tuning knobs (risk thresholds, keyword tables, alternative pools) live in YAML,
  not hard-coded in the optimizer.
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from tripwise.core.env import load_dotenv_if_present


def _read_package_yaml(filename: str) -> dict[str, Any]:
    """Read a YAML file packaged inside `tripwise.config`."""
    text = resources.files("tripwise.config").joinpath(filename).read_text(encoding="utf-8")
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {filename}; expected a mapping.")
    return data


def _read_yaml_file(path: str | Path) -> dict[str, Any]:
    """Read a YAML file from disk and return its mapping root."""
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {path}; expected a mapping.")
    return data


class AppSettings(BaseModel):
    name: str = "Tripwise"
    timezone: str = "UTC"
    http_timeout_seconds: float = 15
    log_level: str = "INFO"


class CacheSettings(BaseModel):
    enabled: bool = True
    dir: str = ".cache/tripwise"
    default_ttl_seconds: int = 60 * 60 * 24


class RetrySettings(BaseModel):
    max_attempts: int = Field(2, ge=0)
    base_delay_seconds: float = Field(0.5, ge=0)
    max_delay_seconds: float = Field(8.0, ge=0)


class WeatherSettings(BaseModel):
    base_url: str
    timezone: str = "auto"
    daily_fields: list[str] = Field(
        default_factory=lambda: [
            "temperature_2m_min",
            "temperature_2m_max",
            "precipitation_probability_max",
            "wind_speed_10m_max",
        ]
    )
    cache_ttl_seconds: int = 60 * 60
    max_forecast_days: int = Field(16, ge=1)
    retry: RetrySettings = Field(default_factory=RetrySettings)


class IngestionSettings(BaseModel):
    weather: WeatherSettings


class ClassifierSettings(BaseModel):
    """Which activities are weather-sensitive (category table + name keywords)."""

    category_sensitivity: dict[str, bool] = Field(
        default_factory=lambda: {
            "nature": True,
            "beach": True,
            "market": True,
            "heritage-outdoor": True,
        }
    )
    keywords: list[str] = Field(
        default_factory=lambda: [
            "park",
            "garden",
            "beach",
            "trek",
            "viewpoint",
            "waterfall",
            "outdoor market",
        ]
    )


class PrecipitationThresholds(BaseModel):
    high_pct: float = Field(70, ge=0, le=100)
    medium_pct: float = Field(40, ge=0, le=100)


class TemperatureThresholds(BaseModel):
    hot_c: float = 35
    freezing_c: float = 0


class RiskSettings(BaseModel):
    precipitation: PrecipitationThresholds = Field(default_factory=PrecipitationThresholds)
    temperature: TemperatureThresholds = Field(default_factory=TemperatureThresholds)
    wind_kph: float = Field(40, ge=0)
    # Rule name -> human-readable factor shown on activities and in day warnings.
    factors: dict[str, str] = Field(
        default_factory=lambda: {
            "rain_high": "High chance of rain",
            "rain_medium": "Possible rain",
            "heat": "Very hot weather",
            "freezing": "Freezing temperatures",
            "wind": "Strong winds",
        }
    )
    # Rule name -> day-level recommendations emitted when the rule triggers.
    recommendations: dict[str, list[str]] = Field(default_factory=dict)


class ClusteringSettings(BaseModel):
    radius_km: float = Field(5.0, gt=0)


class OptimizerSettings(BaseModel):
    max_alternatives: int = Field(3, ge=0)
    alternatives: dict[str, list[str]] = Field(default_factory=dict)
    default_alternatives: list[str] = Field(default_factory=list)
    heat_shift_enabled: bool = True
    heat_shift_note: str = "Consider the morning due to heat"
    missing_location_note: str = "location unavailable"
    max_workers: int = Field(1, ge=1)


class AlertSettings(BaseModel):
    hot_day_c: float = 35
    cold_day_c: float = 10
    rainy_day_pct: float = Field(50, ge=0, le=100)
    rainy_period_min_days: int = Field(3, ge=1)
    good_weather_temp_min_c: float = 20
    good_weather_temp_max_c: float = 30
    good_weather_max_precip_pct: float = Field(20, ge=0, le=100)
    good_weather_min_days: int = Field(4, ge=1)


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    ingestion: IngestionSettings
    classifier: ClassifierSettings = Field(default_factory=ClassifierSettings)
    risk: RiskSettings = Field(default_factory=RiskSettings)
    clustering: ClusteringSettings = Field(default_factory=ClusteringSettings)
    optimizer: OptimizerSettings = Field(default_factory=OptimizerSettings)
    alerts: AlertSettings = Field(default_factory=AlertSettings)


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay selected environment variables onto raw settings payload.

    Note: We intentionally keep this whitelist small to avoid exposing unsafe overrides.
    """
    load_dotenv_if_present()
    data = dict(data)
    cache_dir = os.getenv("TRIPWISE_CACHE_DIR")
    if cache_dir:
        data.setdefault("cache", {})["dir"] = cache_dir

    log_level = os.getenv("TRIPWISE_LOG_LEVEL")
    if log_level:
        data.setdefault("app", {})["log_level"] = log_level

    max_workers = os.getenv("TRIPWISE_MAX_WORKERS")
    if max_workers:
        data.setdefault("optimizer", {})["max_workers"] = int(max_workers)

    return data


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached)."""
    load_dotenv_if_present()
    config_path = os.getenv("TRIPWISE_CONFIG_PATH")
    raw = _read_yaml_file(config_path) if config_path else _read_package_yaml("defaults.yaml")
    raw = _apply_env_overrides(raw)
    return Settings.model_validate(raw)


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """Load logging configuration (cached)."""
    return _read_package_yaml("logging.yaml")
