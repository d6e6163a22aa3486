"""
API routes.

Endpoints:
- POST `/api/optimize`: main optimizer entrypoint (forecasts supplied or looked up).
- GET  `/api/settings`: tuning knobs the optimizer currently runs with.
- GET  `/api/health`: liveness probe.
"""

from __future__ import annotations

import time
import uuid
from datetime import date
from functools import lru_cache
from typing import Any

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from tripwise.config.settings import get_settings
from tripwise.core.cache import FileCache
from tripwise.core.env import resolve_project_path
from tripwise.domain.errors import InvalidInputError
from tripwise.domain.models import Coordinate, DayForecast, Itinerary, OptimizationResult
from tripwise.ingestion.weather_client import WeatherClient
from tripwise.optimizer.itinerary import optimize_itinerary, optimize_with_weather

router = APIRouter()


class OptimizeRequest(BaseModel):
    """Request body for `/api/optimize`.

    Without `forecasts`, setting `start_date` looks the forecast up for the trip window.
    """

    itinerary: Itinerary
    forecasts: list[DayForecast | None] | None = None
    start_date: date | None = None
    location: Coordinate | None = None
    settings_overrides: dict[str, Any] | None = None


class HealthResponse(BaseModel):
    status: str = "ok"
    name: str
    checked_at_unix: int = Field(default_factory=lambda: int(time.time()))


@lru_cache
def _weather_client() -> WeatherClient:
    settings = get_settings()
    cache = FileCache(
        resolve_project_path(settings.cache.dir),
        enabled=settings.cache.enabled,
        default_ttl_seconds=settings.cache.default_ttl_seconds,
    )
    return WeatherClient(settings, cache)


@router.post("/api/optimize", response_model=OptimizationResult)
def post_optimize(request: OptimizeRequest) -> OptimizationResult:
    """Optimize a validated itinerary and return it with its report."""
    t0 = time.monotonic()
    settings = get_settings()
    try:
        if request.forecasts is None and request.start_date is not None:
            result = optimize_with_weather(
                request.itinerary,
                start_date=request.start_date,
                weather_client=_weather_client(),
                location=request.location,
                settings=settings,
                settings_overrides=request.settings_overrides,
            )
        else:
            result = optimize_itinerary(
                request.itinerary,
                request.forecasts or [],
                settings=settings,
                settings_overrides=request.settings_overrides,
            )
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail={"message": e.reason, "field": e.field}) from e
    except ValueError as e:
        # Disallowed or invalid settings overrides.
        raise HTTPException(status_code=400, detail={"message": str(e), "field": "settings_overrides"}) from e

    debug = {"request_id": uuid.uuid4().hex, "api_ms": int((time.monotonic() - t0) * 1000)}
    return result.model_copy(update={"meta": {**result.meta, "debug": debug}})


@router.get("/api/settings")
def get_public_settings() -> dict:
    """Return the optimizer tuning knobs (no endpoints or paths)."""
    settings = get_settings()
    return {
        "classifier": settings.classifier.model_dump(mode="json"),
        "risk": settings.risk.model_dump(mode="json"),
        "clustering": settings.clustering.model_dump(mode="json"),
        "optimizer": settings.optimizer.model_dump(mode="json", exclude={"max_workers"}),
        "alerts": settings.alerts.model_dump(mode="json"),
    }


@router.get("/api/health", response_model=HealthResponse)
def get_health() -> HealthResponse:
    return HealthResponse(name=get_settings().app.name)
