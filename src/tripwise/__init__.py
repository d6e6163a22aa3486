"""Weather-risk-aware itinerary optimizer."""

__version__ = "0.1.0"
