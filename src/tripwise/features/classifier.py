"""
Activity classification (indoor vs weather-sensitive).

Risk scoring needs to know whether an activity can safely proceed in bad weather
(museums, malls) or not (beaches, parks, open-air markets). The decision is table-driven:
- `classifier.category_sensitivity` maps a category to True/False,
- `classifier.keywords` catches outdoor places whose category is vague
  ("Lalbagh Botanical Garden" filed under `unspecified`).

Both tables come from config, so callers extend them via YAML or per-request overrides.
"""

from __future__ import annotations

import re

from tripwise.config.settings import ClassifierSettings
from tripwise.domain.models import Activity


class ActivityClassifier:
    """Decides which activities are exposed to the weather."""

    def __init__(self, settings: ClassifierSettings):
        self._categories = {k.strip().lower(): bool(v) for k, v in settings.category_sensitivity.items()}
        # Whole-word match (plural allowed): "park" hits "parks" but not "sparkle" or "parking".
        self._patterns = [
            re.compile(r"\b" + re.escape(kw.strip().lower()) + r"(?:s|es)?\b")
            for kw in settings.keywords
            if kw and kw.strip()
        ]

    def is_outdoor_sensitive(self, activity: Activity) -> bool:
        if self._categories.get(activity.category, False):
            return True
        text = f"{activity.name} {activity.category}".lower()
        return any(p.search(text) for p in self._patterns)
