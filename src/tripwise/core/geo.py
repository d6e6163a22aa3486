from __future__ import annotations

from math import asin, cos, radians, sin, sqrt
from typing import Sequence

from tripwise.domain.errors import InvalidInputError
from tripwise.domain.models import Coordinate

"""
Geospatial helpers.

We keep a tiny geometry layer here so the clusterer and route summaries can do distance
calculations without pulling in heavier GIS dependencies.
"""

EARTH_RADIUS_KM = 6371.0088


def distance_km(a: Coordinate, b: Coordinate) -> float:
    """Compute great-circle distance in kilometers between two points."""
    lat1 = radians(a.latitude)
    lon1 = radians(a.longitude)
    lat2 = radians(b.latitude)
    lon2 = radians(b.longitude)

    dlat = lat2 - lat1
    dlon = lon2 - lon1

    h = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlon / 2) ** 2
    # Rounding can push h marginally above 1 for antipodal points.
    return 2 * EARTH_RADIUS_KM * asin(sqrt(min(1.0, h)))


def centroid(points: Sequence[Coordinate]) -> Coordinate:
    """Arithmetic mean of latitude/longitude (fine at city scale)."""
    if not points:
        raise InvalidInputError("points", "centroid requires at least one coordinate")
    n = len(points)
    return Coordinate(
        latitude=sum(p.latitude for p in points) / n,
        longitude=sum(p.longitude for p in points) / n,
    )


def path_length_km(points: Sequence[Coordinate]) -> float:
    """Total distance when visiting `points` in the given order."""
    return sum(distance_km(a, b) for a, b in zip(points, points[1:]))
