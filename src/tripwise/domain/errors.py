"""
Error taxonomy.

Structural problems in caller-supplied data raise `InvalidInputError` and abort the call.
Degraded input (missing forecast, missing location) is not an error: it is logged and
reflected in the report instead.
"""

from __future__ import annotations


class InvalidInputError(ValueError):
    """Malformed itinerary/forecast data; `field` names the offending path."""

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"{field}: {reason}")
