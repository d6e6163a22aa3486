"""
Single-day optimizer.

Pipeline for one `ItineraryDay`:
1) score every located activity against the day's forecast,
2) cluster by proximity and linearize into a visiting order,
3) when anything is high-risk, move safe (none/low) activities first and attach
   indoor alternatives to the high-risk ones,
4) suggest earlier slots for exposed afternoon plans on very hot days,
5) summarize the day in a `DayReport`.

Activities without a location and days without a forecast degrade gracefully: they are
logged and noted in the report, never raised.
"""

from __future__ import annotations

import logging

from tripwise.config.settings import Settings
from tripwise.core.geo import centroid, path_length_km
from tripwise.domain.models import (
    RISK_ORDER,
    Activity,
    ClusterSummary,
    DayForecast,
    DayReport,
    ItineraryDay,
    max_risk,
)
from tripwise.features.classifier import ActivityClassifier
from tripwise.features.risk import RiskAssessment, RiskScorer
from tripwise.optimizer.clustering import cluster, linearize

logger = logging.getLogger(__name__)


def _append_note(activity: Activity, note: str) -> None:
    activity.weather_note = note if not activity.weather_note else f"{activity.weather_note}; {note}"


def _dedupe(items: list[str]) -> list[str]:
    seen: set[str] = set()
    out: list[str] = []
    for item in items:
        if item not in seen:
            seen.add(item)
            out.append(item)
    return out


class DayOptimizer:
    """Reorders and annotates one day; holds only read-only configuration."""

    def __init__(self, settings: Settings):
        self._settings = settings
        self._classifier = ActivityClassifier(settings.classifier)
        self._scorer = RiskScorer(settings.risk, self._classifier)

    def _alternatives_for(self, activity: Activity) -> list[str]:
        cfg = self._settings.optimizer
        pool = cfg.alternatives.get(activity.category) or cfg.default_alternatives
        return list(pool[: cfg.max_alternatives])

    def optimize(self, day: ItineraryDay, forecast: DayForecast | None = None) -> tuple[ItineraryDay, DayReport]:
        cfg = self._settings.optimizer
        degraded: list[str] = []
        if forecast is None:
            degraded.append("forecast unavailable")
            logger.warning("Day %d: no forecast available; skipping risk scoring", day.day_number)

        # ---- Step 1: copy + score (inputs are never mutated) ----
        located: list[Activity] = []
        unlocated: dict[int, Activity] = {}
        assessments: dict[str, RiskAssessment] = {}
        for idx, activity in enumerate(day.activities):
            fresh = {
                "risk_level": "none",
                "risk_factors": [],
                "alternatives": [],
                "weather_note": None,
                "cluster_id": None,
                "suggested_time_of_day": None,
            }
            if activity.location is None:
                fresh["weather_note"] = cfg.missing_location_note
                unlocated[idx] = activity.model_copy(update=fresh, deep=True)
                degraded.append(f"activity '{activity.id}': {cfg.missing_location_note}")
                logger.warning("Day %d: activity %r has no location; keeping it in place", day.day_number, activity.id)
                continue

            assessment = self._scorer.assess(activity, forecast) if forecast is not None else RiskAssessment(level="none")
            assessments[activity.id] = assessment
            fresh["risk_level"] = assessment.level
            fresh["risk_factors"] = list(assessment.factors)
            located.append(activity.model_copy(update=fresh, deep=True))

        # ---- Step 2: proximity clustering -> candidate order ----
        clusters = cluster(located, radius_km=self._settings.clustering.radius_km) if located else []
        summaries: list[ClusterSummary] = []
        for cluster_id, members in enumerate(clusters):
            for member in members:
                member.cluster_id = cluster_id
            summaries.append(
                ClusterSummary(
                    cluster_id=cluster_id,
                    activity_ids=[m.id for m in members],
                    centroid=centroid([m.location for m in members]),
                )
            )
        order = linearize(clusters)

        # ---- Step 3: safe-first partition + alternatives when anything is high-risk ----
        if any(a.risk_level == "high" for a in order):
            safe = [a for a in order if RISK_ORDER[a.risk_level] <= RISK_ORDER["low"]]
            rest = [a for a in order if RISK_ORDER[a.risk_level] > RISK_ORDER["low"]]
            order = safe + rest
            for activity in rest:
                if activity.risk_level != "high":
                    continue
                activity.alternatives = self._alternatives_for(activity)
                _append_note(activity, "Weather risk: " + ", ".join(activity.risk_factors))

        # ---- Step 4: heat shift (a suggestion only; order is unchanged) ----
        if (
            forecast is not None
            and cfg.heat_shift_enabled
            and forecast.temp_max_c > self._settings.risk.temperature.hot_c
        ):
            for activity in order:
                if activity.preferred_time_of_day == "afternoon" and self._classifier.is_outdoor_sensitive(activity):
                    activity.suggested_time_of_day = "morning"
                    _append_note(activity, cfg.heat_shift_note)

        # Activities without a location keep their original index.
        remaining = iter(order)
        activities_out = [
            unlocated[i] if i in unlocated else next(remaining) for i in range(len(day.activities))
        ]

        # ---- Step 5: report ----
        rules: list[str] = []
        factors: list[str] = []
        for activity in activities_out:
            assessment = assessments.get(activity.id)
            if assessment is not None:
                rules.extend(assessment.rules)
                factors.extend(assessment.factors)
        rules = _dedupe(rules)
        factors = _dedupe(factors)
        recommendations = _dedupe(
            [text for rule in rules for text in self._settings.risk.recommendations.get(rule, [])]
        )

        report = DayReport(
            day_number=day.day_number,
            risk_level=max_risk([a.risk_level or "none" for a in activities_out]),
            affected_activity_ids=[
                a.id for a in activities_out if RISK_ORDER[a.risk_level or "none"] >= RISK_ORDER["medium"]
            ],
            recommendations=recommendations,
            risk_factors=factors,
            warning=(
                f"Weather conditions may affect outdoor activities: {', '.join(factors)}" if factors else None
            ),
            forecast_available=forecast is not None,
            original_distance_km=round(
                path_length_km([a.location for a in day.activities if a.location is not None]), 3
            ),
            optimized_distance_km=round(path_length_km([a.location for a in order]), 3),
            clusters=summaries,
            degraded=degraded,
        )
        logger.debug(
            "Day %d optimized: risk=%s clusters=%d affected=%d",
            day.day_number,
            report.risk_level,
            len(summaries),
            len(report.affected_activity_ids),
        )
        return day.model_copy(update={"activities": activities_out}), report
