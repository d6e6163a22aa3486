"""
Domain models (Pydantic).

These types represent the stable "contract" between the optimizer and its collaborators:
- itinerary input from the trip generator (`Itinerary`, `ItineraryDay`, `Activity`)
- weather input from the forecast provider (`DayForecast`)
- annotated output plus an explainable report (`OptimizationResult`)

Coordinates are not range-checked here: the optimizer entry validates them so callers get
an `InvalidInputError` that names the exact field path.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator, model_validator

RiskLevel = Literal["none", "low", "medium", "high"]
OverallRisk = Literal["low", "medium", "high"]
TimeOfDay = Literal["morning", "afternoon", "evening", "any"]

RISK_ORDER: dict[str, int] = {"none": 0, "low": 1, "medium": 2, "high": 3}


def max_risk(levels: list[str], *, default: str = "none") -> str:
    """Return the most severe risk level in `levels` (or `default` when empty)."""
    best = default
    for level in levels:
        if RISK_ORDER[level] > RISK_ORDER[best]:
            best = level
    return best


class Coordinate(BaseModel):
    """A geographic point in decimal degrees."""

    latitude: float
    longitude: float


class Activity(BaseModel):
    """One planned stop of a day, plus the annotations the optimizer adds."""

    id: str
    name: str
    category: str = "unspecified"
    location: Coordinate | None = None
    preferred_time_of_day: TimeOfDay = "any"
    duration_minutes: int = Field(default=60, ge=0)

    risk_level: RiskLevel | None = None
    risk_factors: list[str] = Field(default_factory=list)
    alternatives: list[str] = Field(default_factory=list)
    weather_note: str | None = None
    cluster_id: int | None = None
    suggested_time_of_day: TimeOfDay | None = None

    @field_validator("category")
    @classmethod
    def _normalize_category(cls, category: str) -> str:
        return category.strip().lower() or "unspecified"


class DayForecast(BaseModel):
    """Daily weather summary in Celsius, km/h and percent."""

    date: date
    temp_min_c: float
    temp_max_c: float
    precipitation_probability_pct: int = Field(..., ge=0, le=100)
    wind_speed_kph: float = Field(default=0.0, ge=0)

    @model_validator(mode="after")
    def _validate_temperature_order(self) -> "DayForecast":
        if self.temp_min_c > self.temp_max_c:
            raise ValueError("temp_min_c must not exceed temp_max_c")
        return self


class ItineraryDay(BaseModel):
    day_number: int
    theme: str = ""
    activities: list[Activity] = Field(default_factory=list)


class Itinerary(BaseModel):
    days: list[ItineraryDay] = Field(default_factory=list)


class ClusterSummary(BaseModel):
    """One proximity cluster of a day, in discovery order."""

    cluster_id: int
    activity_ids: list[str]
    centroid: Coordinate


class DayReport(BaseModel):
    """Risk summary and route figures for one optimized day."""

    day_number: int
    risk_level: RiskLevel = "none"
    affected_activity_ids: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    risk_factors: list[str] = Field(default_factory=list)
    warning: str | None = None
    forecast_available: bool = True
    original_distance_km: float = 0.0
    optimized_distance_km: float = 0.0
    clusters: list[ClusterSummary] = Field(default_factory=list)
    degraded: list[str] = Field(default_factory=list)


class TripAlert(BaseModel):
    """Trip-wide weather alert (hot spell, rainy period, ...)."""

    kind: Literal["heat", "cold", "rain", "good_weather"]
    severity: OverallRisk
    title: str
    message: str
    days: list[int] = Field(default_factory=list)


class OptimizationReport(BaseModel):
    overall_risk: OverallRisk = "low"
    day_reports: list[DayReport] = Field(default_factory=list)
    alerts: list[TripAlert] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)


class OptimizationResult(BaseModel):
    """Annotated itinerary plus its report."""

    itinerary: Itinerary
    report: OptimizationReport
    meta: dict[str, Any] = Field(default_factory=dict)
