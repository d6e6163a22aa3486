# src/tripwise/features/risk.py
"""
Weather risk (activity-level).

This module converts a day's forecast into a risk level for one activity.

Why stacked rules instead of a weighted score?
- Each threshold (rain, heat, frost, wind) is an independent, named contract that can be
  tested and tuned on its own.
- The final level is the maximum across triggered rules, so adding a rule can only make
  an activity riskier, never silently cancel another rule.
"""

from __future__ import annotations

from dataclasses import dataclass, field

# `RiskSettings` carries the thresholds and rule texts (no hard-coded tuning).
from tripwise.config.settings import RiskSettings
from tripwise.domain.models import RISK_ORDER, Activity, DayForecast, RiskLevel
from tripwise.features.classifier import ActivityClassifier


@dataclass(frozen=True)
class RiskAssessment:
    """A risk level plus the rules that produced it."""

    level: RiskLevel
    rules: list[str] = field(default_factory=list)
    factors: list[str] = field(default_factory=list)


def _raise_to(current: RiskLevel, candidate: RiskLevel) -> RiskLevel:
    return candidate if RISK_ORDER[candidate] > RISK_ORDER[current] else current


class RiskScorer:
    """Pure function of (activity, forecast) -> risk, configured by `RiskSettings`."""

    def __init__(self, settings: RiskSettings, classifier: ActivityClassifier):
        self._settings = settings
        self._classifier = classifier

    def score(self, activity: Activity, forecast: DayForecast) -> RiskLevel:
        return self.assess(activity, forecast).level

    def assess(self, activity: Activity, forecast: DayForecast) -> RiskAssessment:
        cfg = self._settings

        # --- Rule 1) Indoor activities are unaffected by the weather ---
        if not self._classifier.is_outdoor_sensitive(activity):
            return RiskAssessment(level="none")

        # Sensitive activities start at "low": they are exposed even on a fine day.
        level: RiskLevel = "low"
        rules: list[str] = []

        # --- Rule 2) Precipitation probability ---
        rain: RiskLevel = "none"
        pct = float(forecast.precipitation_probability_pct)
        if pct > cfg.precipitation.high_pct:
            rain = "high"
            rules.append("rain_high")
        elif pct > cfg.precipitation.medium_pct:
            rain = "medium"
            rules.append("rain_medium")
        level = _raise_to(level, rain)

        # --- Rule 3) Temperature extremes (either -> medium, both -> high) ---
        hot = forecast.temp_max_c > cfg.temperature.hot_c
        freezing = forecast.temp_min_c < cfg.temperature.freezing_c
        if hot:
            rules.append("heat")
        if freezing:
            rules.append("freezing")
        if hot and freezing:
            level = _raise_to(level, "high")
        elif hot or freezing:
            level = _raise_to(level, "medium")

        # --- Rule 4) Wind (escalates to high when it comes with rain) ---
        if forecast.wind_speed_kph > cfg.wind_kph:
            rules.append("wind")
            level = _raise_to(level, "high" if RISK_ORDER[rain] >= RISK_ORDER["medium"] else "medium")

        factors = [cfg.factors.get(rule, rule) for rule in rules]
        return RiskAssessment(level=level, rules=rules, factors=factors)
