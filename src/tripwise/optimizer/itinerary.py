from __future__ import annotations

# This module is the public entry point of the optimizer.
# It wires together:
# - domain input (Itinerary + per-day DayForecast list)
# - structural validation (fail loudly on malformed data)
# - the per-day optimizer (risk scoring, clustering, reordering)
# - trip-wide alerts and the aggregated OptimizationReport

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import date
from typing import Any, Mapping, Sequence

import httpx

from tripwise.config.overrides import apply_settings_overrides
from tripwise.config.settings import Settings, get_settings
from tripwise.core.geo import centroid
from tripwise.domain.errors import InvalidInputError
from tripwise.domain.models import (
    Coordinate,
    DayForecast,
    Itinerary,
    OptimizationReport,
    OptimizationResult,
    max_risk,
)
from tripwise.ingestion.weather_client import WeatherClient
from tripwise.optimizer.alerts import build_trip_alerts, build_trip_recommendations
from tripwise.optimizer.day import DayOptimizer
from tripwise.optimizer.validation import validate_itinerary

logger = logging.getLogger(__name__)


class ItineraryOptimizer:
    """Stateless across calls: safe to share between threads and requests."""

    def __init__(self, settings: Settings | None = None):
        self._settings = settings or get_settings()
        self._day_optimizer = DayOptimizer(self._settings)

    @property
    def settings(self) -> Settings:
        return self._settings

    def optimize(
        self, itinerary: Itinerary, forecasts: Sequence[DayForecast | None] | None = None
    ) -> OptimizationResult:
        # ---- Step 1: structural validation (raises InvalidInputError, never retried) ----
        validate_itinerary(itinerary)

        # ---- Step 2: pair forecasts with days by position ----
        days = itinerary.days
        forecasts = list(forecasts or [])
        if len(forecasts) < len(days):
            logger.warning(
                "Forecasts cover %d of %d day(s); remaining days are optimized without weather",
                len(forecasts),
                len(days),
            )
        elif len(forecasts) > len(days):
            logger.info("Ignoring %d forecast(s) beyond the last itinerary day", len(forecasts) - len(days))
        per_day = [forecasts[i] if i < len(forecasts) else None for i in range(len(days))]

        # ---- Step 3: optimize each day (independent work, gathered in day order) ----
        workers = min(self._settings.optimizer.max_workers, len(days))
        if workers > 1:
            with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="tripwise-day") as pool:
                results = list(pool.map(self._day_optimizer.optimize, days, per_day))
        else:
            results = [self._day_optimizer.optimize(day, forecast) for day, forecast in zip(days, per_day)]

        # ---- Step 4: aggregate into the trip report ----
        day_reports = [report for _, report in results]
        overall_risk = max_risk([r.risk_level for r in day_reports], default="low")
        report = OptimizationReport(
            overall_risk=overall_risk,
            day_reports=day_reports,
            alerts=build_trip_alerts(per_day, [d.day_number for d in days], self._settings.alerts),
            recommendations=build_trip_recommendations(overall_risk, day_reports),
        )
        logger.info(
            "Optimized %d day(s): overall_risk=%s affected_days=%d",
            len(days),
            overall_risk,
            sum(1 for r in day_reports if r.affected_activity_ids),
        )
        return OptimizationResult(
            itinerary=itinerary.model_copy(update={"days": [day for day, _ in results]}),
            report=report,
        )


def optimize_itinerary(
    itinerary: Itinerary,
    forecasts: Sequence[DayForecast | None] | None = None,
    *,
    settings: Settings | None = None,
    settings_overrides: Mapping[str, Any] | None = None,
) -> OptimizationResult:
    """Optimize with the default (or injected) settings plus safe per-call overrides."""
    settings = apply_settings_overrides(settings or get_settings(), settings_overrides)
    return ItineraryOptimizer(settings).optimize(itinerary, forecasts)


def trip_location(itinerary: Itinerary) -> Coordinate:
    """Centroid of every located activity (used to look up a trip-wide forecast)."""
    points = [a.location for day in itinerary.days for a in day.activities if a.location is not None]
    if not points:
        raise InvalidInputError("location", "no activity has a location; pass one explicitly")
    return centroid(points)


def optimize_with_weather(
    itinerary: Itinerary,
    *,
    start_date: date,
    weather_client: WeatherClient,
    location: Coordinate | None = None,
    settings: Settings | None = None,
    settings_overrides: Mapping[str, Any] | None = None,
) -> OptimizationResult:
    """Fetch forecasts for the trip window, then optimize.

    Weather lookup failures are logged and the itinerary is optimized without forecasts.
    """
    validate_itinerary(itinerary)
    where = location or trip_location(itinerary)
    meta: dict[str, Any] = {"forecast_location": where.model_dump()}
    try:
        forecasts = weather_client.get_daily_forecasts(
            lat=where.latitude, lon=where.longitude, start_date=start_date, days=len(itinerary.days)
        )
    except (httpx.HTTPError, ValueError) as e:
        logger.warning("Weather lookup failed for %.4f,%.4f: %s", where.latitude, where.longitude, str(e))
        forecasts = []
        meta["weather_error"] = str(e)

    result = optimize_itinerary(itinerary, forecasts, settings=settings, settings_overrides=settings_overrides)
    return result.model_copy(update={"meta": meta})
