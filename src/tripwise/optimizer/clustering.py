"""
Proximity clustering for one day's activities.

Greedy seed-based clustering: walk activities in input order; each activity not yet
clustered becomes a seed and absorbs every other unclustered activity closer than `radius_km`
of the seed itself (no link propagation). That keeps the work O(n^2) and the cluster shape
a pure function of the input order.
"""

from __future__ import annotations

from typing import Sequence

from tripwise.core.geo import distance_km
from tripwise.domain.errors import InvalidInputError
from tripwise.domain.models import Activity

TIME_OF_DAY_RANK: dict[str, int] = {"morning": 0, "afternoon": 1, "evening": 2, "any": 3}


def cluster(activities: Sequence[Activity], radius_km: float = 5.0) -> list[list[Activity]]:
    """Group located activities into proximity clusters (discovery order)."""
    if radius_km <= 0:
        raise InvalidInputError("radius_km", "must be > 0")
    for i, activity in enumerate(activities):
        if activity.location is None:
            raise InvalidInputError(f"activities[{i}].location", "required for clustering")

    clusters: list[list[Activity]] = []
    assigned = [False] * len(activities)
    for i, seed in enumerate(activities):
        if assigned[i]:
            continue
        assigned[i] = True
        members = [seed]
        for j in range(i + 1, len(activities)):
            if assigned[j]:
                continue
            if distance_km(seed.location, activities[j].location) < radius_km:
                assigned[j] = True
                members.append(activities[j])
        clusters.append(members)
    return clusters


def linearize(clusters: Sequence[Sequence[Activity]]) -> list[Activity]:
    """Flatten clusters into a visiting order.

    Clusters keep their discovery order. Members are already in input order, so the
    stable sort by time-of-day rank breaks ties by original position.
    """
    ordered: list[Activity] = []
    for members in clusters:
        ordered.extend(sorted(members, key=lambda a: TIME_OF_DAY_RANK[a.preferred_time_of_day]))
    return ordered
