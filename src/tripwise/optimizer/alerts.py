"""
Trip-wide weather alerts and advice.

Day reports answer "what should change today?"; this module looks across the whole
forecast window for patterns worth a headline (a hot spell, a rainy week, a run of
great outdoor days) and adds a couple of trip-level recommendations.
"""

from __future__ import annotations

from typing import Sequence

from tripwise.config.settings import AlertSettings
from tripwise.domain.models import DayForecast, DayReport, TripAlert


def build_trip_alerts(
    forecasts: Sequence[DayForecast | None], day_numbers: Sequence[int], settings: AlertSettings
) -> list[TripAlert]:
    """Return alerts for the days that have a forecast (paired by position)."""
    paired = [(n, f) for n, f in zip(day_numbers, forecasts) if f is not None]

    hot = [n for n, f in paired if f.temp_max_c > settings.hot_day_c]
    cold = [n for n, f in paired if f.temp_min_c < settings.cold_day_c]
    rainy = [n for n, f in paired if f.precipitation_probability_pct > settings.rainy_day_pct]
    good = [
        n
        for n, f in paired
        if settings.good_weather_temp_min_c <= f.temp_max_c <= settings.good_weather_temp_max_c
        and f.precipitation_probability_pct < settings.good_weather_max_precip_pct
    ]

    alerts: list[TripAlert] = []
    if hot:
        alerts.append(
            TripAlert(
                kind="heat",
                severity="high",
                title="High Temperature Alert",
                message=(
                    f"{len(hot)} day(s) with temperatures above {settings.hot_day_c:g}°C. "
                    "Plan indoor activities during peak hours."
                ),
                days=hot,
            )
        )
    if cold:
        alerts.append(
            TripAlert(
                kind="cold",
                severity="medium",
                title="Cold Weather Expected",
                message=f"{len(cold)} day(s) with temperatures below {settings.cold_day_c:g}°C. Pack warm clothing.",
                days=cold,
            )
        )
    if len(rainy) >= settings.rainy_period_min_days:
        alerts.append(
            TripAlert(
                kind="rain",
                severity="high",
                title="Rainy Period Expected",
                message=(
                    f"{len(rainy)} day(s) with rain expected. Consider indoor activities and pack rain gear."
                ),
                days=rainy,
            )
        )
    if len(good) >= settings.good_weather_min_days:
        alerts.append(
            TripAlert(
                kind="good_weather",
                severity="low",
                title="Great Weather Expected",
                message=f"{len(good)} day(s) with ideal weather conditions for outdoor activities.",
                days=good,
            )
        )
    return alerts


def build_trip_recommendations(overall_risk: str, day_reports: Sequence[DayReport]) -> list[str]:
    recommendations: list[str] = []
    if overall_risk == "high":
        recommendations.append("Consider travel insurance due to weather risks")
    if any(r.affected_activity_ids for r in day_reports):
        recommendations.append("Pack weather-appropriate clothing and gear")
    return recommendations
