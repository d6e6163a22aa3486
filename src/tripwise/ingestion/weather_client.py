"""
Weather ingestion client (Open-Meteo).

This module is the forecast collaborator: it fetches daily signals for a coordinate and
turns them into one `DayForecast` per trip day:
- min/max temperature (°C)
- maximum precipitation probability (%)
- maximum wind speed (km/h)

The optimizer never calls it directly; `optimize_with_weather` and the CLI/API wrappers
resolve forecasts first and pass them in by value.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Any

import httpx

from tripwise.config.settings import Settings
from tripwise.core.cache import FileCache
from tripwise.core.http import get_json_with_retry
from tripwise.domain.models import DayForecast

logger = logging.getLogger(__name__)


def _parse_daily(payload: dict[str, Any]) -> dict[date, DayForecast]:
    """Map the `daily` block of an Open-Meteo response to forecasts keyed by date."""
    daily = payload.get("daily") or {}
    times = daily.get("time") or []
    t_min = daily.get("temperature_2m_min") or []
    t_max = daily.get("temperature_2m_max") or []
    rain = daily.get("precipitation_probability_max") or []
    wind = daily.get("wind_speed_10m_max") or []

    out: dict[date, DayForecast] = {}
    for i, raw_day in enumerate(times):
        values = [col[i] if i < len(col) else None for col in (t_min, t_max, rain)]
        if any(v is None for v in values):
            # Open-Meteo pads the tail of long ranges with nulls; treat those days as missing.
            continue
        wind_kph = wind[i] if i < len(wind) and wind[i] is not None else 0.0
        try:
            forecast = DayForecast(
                date=date.fromisoformat(str(raw_day)),
                temp_min_c=float(values[0]),
                temp_max_c=float(values[1]),
                precipitation_probability_pct=max(0, min(100, int(round(float(values[2]))))),
                wind_speed_kph=float(wind_kph),
            )
        except ValueError as e:
            logger.warning("Skipping malformed forecast for %s: %s", raw_day, str(e))
            continue
        out[forecast.date] = forecast
    return out


class WeatherClient:
    """Fetches and caches Open-Meteo daily data, then maps it onto trip days."""

    def __init__(self, settings: Settings, cache: FileCache):
        self._settings = settings
        self._cache = cache

    def _fetch_open_meteo(self, lat: float, lon: float, start: date, end: date) -> dict[str, Any]:
        """Call Open-Meteo API and return the raw JSON response as a dict."""
        cfg = self._settings.ingestion.weather
        params = {
            "latitude": lat,
            "longitude": lon,
            "daily": ",".join(cfg.daily_fields),
            "timezone": cfg.timezone,
            "wind_speed_unit": "kmh",
            "start_date": start.isoformat(),
            "end_date": end.isoformat(),
        }
        return get_json_with_retry(
            cfg.base_url,
            params=params,
            timeout_seconds=self._settings.app.http_timeout_seconds,
            max_attempts=cfg.retry.max_attempts,
            base_delay_seconds=cfg.retry.base_delay_seconds,
            max_delay_seconds=cfg.retry.max_delay_seconds,
        )

    def get_daily_forecasts(
        self, *, lat: float, lon: float, start_date: date, days: int
    ) -> list[DayForecast | None]:
        """Return `days` entries starting at `start_date`; None where no forecast exists."""
        if days <= 0:
            return []
        cfg = self._settings.ingestion.weather
        fetch_days = min(days, cfg.max_forecast_days)
        end_date = start_date + timedelta(days=fetch_days - 1)
        if fetch_days < days:
            logger.info("Forecast horizon is %d day(s); %d trip day(s) stay unforecast", fetch_days, days - fetch_days)

        cache_key = f"openmeteo-daily:{lat:.4f}:{lon:.4f}:{start_date.isoformat()}:{end_date.isoformat()}"

        def builder() -> dict[str, Any]:
            logger.info("Fetching daily forecast for lat=%.4f lon=%.4f", lat, lon)
            return self._fetch_open_meteo(lat, lon, start_date, end_date)

        payload = self._cache.get_or_set(
            "weather",
            cache_key,
            builder,
            ttl_seconds=int(cfg.cache_ttl_seconds),
            stale_if_error=True,
            stale_predicate=lambda exc: isinstance(exc, httpx.HTTPError),
        )
        if not isinstance(payload, dict):
            raise ValueError("Unexpected Open-Meteo response; expected a JSON object.")

        by_date = _parse_daily(payload)
        return [by_date.get(start_date + timedelta(days=i)) for i in range(days)]
