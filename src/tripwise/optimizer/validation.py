"""Structural checks run before any optimization work."""

from __future__ import annotations

from tripwise.domain.errors import InvalidInputError
from tripwise.domain.models import Coordinate, Itinerary


def validate_coordinate(coord: Coordinate, *, field: str) -> None:
    if not -90.0 <= coord.latitude <= 90.0:
        raise InvalidInputError(f"{field}.latitude", f"{coord.latitude} is outside [-90, 90]")
    if not -180.0 <= coord.longitude <= 180.0:
        raise InvalidInputError(f"{field}.longitude", f"{coord.longitude} is outside [-180, 180]")


def validate_itinerary(itinerary: Itinerary) -> None:
    """Raise `InvalidInputError` on the first structural violation found."""
    seen_days: set[int] = set()
    for d, day in enumerate(itinerary.days):
        if day.day_number < 1:
            raise InvalidInputError(f"days[{d}].day_number", f"must be >= 1, got {day.day_number}")
        if day.day_number in seen_days:
            raise InvalidInputError(f"days[{d}].day_number", f"duplicate day number {day.day_number}")
        seen_days.add(day.day_number)

        seen_ids: set[str] = set()
        for a, activity in enumerate(day.activities):
            if activity.id in seen_ids:
                raise InvalidInputError(f"days[{d}].activities[{a}].id", f"duplicate activity id '{activity.id}'")
            seen_ids.add(activity.id)
            if activity.location is not None:
                validate_coordinate(activity.location, field=f"days[{d}].activities[{a}].location")
