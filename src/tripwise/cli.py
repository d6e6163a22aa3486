"""
Tripwise CLI entrypoint.

This CLI is intended for quick local runs and debugging without the API.
It delegates all optimization logic to `tripwise.optimizer.itinerary`.
"""

from __future__ import annotations

import argparse
import json
from datetime import date
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter

from tripwise.config.settings import get_settings
from tripwise.core.cache import FileCache
from tripwise.core.env import resolve_project_path
from tripwise.core.logging import configure_logging
from tripwise.domain.models import Coordinate, DayForecast, Itinerary
from tripwise.ingestion.weather_client import WeatherClient
from tripwise.optimizer.explain import activity_lines, one_line_summary
from tripwise.optimizer.itinerary import optimize_itinerary, optimize_with_weather

_FORECASTS = TypeAdapter(list[DayForecast | None])


def _read_json(path: str) -> Any:
    return json.loads(Path(path).read_text(encoding="utf-8"))


def build_weather_client() -> WeatherClient:
    settings = get_settings()
    cache = FileCache(
        resolve_project_path(settings.cache.dir),
        enabled=settings.cache.enabled,
        default_ttl_seconds=settings.cache.default_ttl_seconds,
    )
    return WeatherClient(settings, cache)


def _load_itinerary(path: str) -> Itinerary:
    """Accept either `{"days": [...]}` or a combined `{"itinerary": ..., "forecasts": ...}` file."""
    raw = _read_json(path)
    if isinstance(raw, dict) and "itinerary" in raw:
        raw = raw["itinerary"]
    return Itinerary.model_validate(raw)


def _load_forecasts(args: argparse.Namespace) -> list[DayForecast | None]:
    if args.forecasts:
        raw = _read_json(args.forecasts)
    else:
        raw = _read_json(args.itinerary)
        raw = raw.get("forecasts", []) if isinstance(raw, dict) else []
    if isinstance(raw, dict):
        raw = raw.get("forecasts", [])
    return _FORECASTS.validate_python(raw)


def _cmd_optimize(args: argparse.Namespace) -> int:
    """Handle the `optimize` subcommand."""
    itinerary = _load_itinerary(args.itinerary)
    overrides: dict[str, Any] = {}
    if args.radius_km is not None:
        overrides["clustering"] = {"radius_km": float(args.radius_km)}

    if args.fetch_weather:
        if not args.start_date:
            raise SystemExit("--fetch-weather requires --start-date")
        location = None
        if args.lat is not None and args.lon is not None:
            location = Coordinate(latitude=float(args.lat), longitude=float(args.lon))
        result = optimize_with_weather(
            itinerary,
            start_date=date.fromisoformat(args.start_date),
            weather_client=build_weather_client(),
            location=location,
            settings_overrides=overrides or None,
        )
    else:
        result = optimize_itinerary(itinerary, _load_forecasts(args), settings_overrides=overrides or None)

    if args.json:
        print(json.dumps(result.model_dump(mode="json"), ensure_ascii=False, indent=2))
        return 0

    report = result.report
    print(f"Overall risk: {report.overall_risk}")
    for day, day_report in zip(result.itinerary.days, report.day_reports):
        theme = f" - {day.theme}" if day.theme else ""
        print(f"Day {day.day_number}{theme}: {one_line_summary(day_report)}")
        for line in activity_lines(day):
            print(f"  {line}")
        for rec in day_report.recommendations:
            print(f"  * {rec}")
    for alert in report.alerts:
        print(f"[{alert.severity}] {alert.title}: {alert.message}")
    for rec in report.recommendations:
        print(f"- {rec}")
    return 0


def _cmd_forecast(args: argparse.Namespace) -> int:
    """Handle the `forecast` subcommand (prints DayForecast JSON, `null` for gaps)."""
    client = build_weather_client()
    forecasts = client.get_daily_forecasts(
        lat=float(args.lat),
        lon=float(args.lon),
        start_date=date.fromisoformat(args.start_date),
        days=int(args.days),
    )
    print(json.dumps(_FORECASTS.dump_python(forecasts, mode="json"), ensure_ascii=False, indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the Tripwise CLI."""
    parser = argparse.ArgumentParser(prog="tripwise")
    sub = parser.add_subparsers(dest="command", required=True)

    opt = sub.add_parser("optimize", help="Reorder and annotate an itinerary for weather risk and proximity.")
    opt.add_argument("--itinerary", required=True, help="JSON file with the itinerary (optionally with forecasts)")
    opt.add_argument("--forecasts", default=None, help="JSON file with a list of daily forecasts")
    opt.add_argument("--fetch-weather", action="store_true", help="Look up forecasts from Open-Meteo")
    opt.add_argument("--start-date", default=None, help="First trip day (YYYY-MM-DD), used with --fetch-weather")
    opt.add_argument("--lat", type=float, default=None, help="Forecast latitude (default: trip centroid)")
    opt.add_argument("--lon", type=float, default=None, help="Forecast longitude (default: trip centroid)")
    opt.add_argument("--radius-km", type=float, default=None, help="Proximity clustering radius")
    opt.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    opt.set_defaults(func=_cmd_optimize)

    fc = sub.add_parser("forecast", help="Fetch daily forecasts for a location.")
    fc.add_argument("--lat", required=True, type=float)
    fc.add_argument("--lon", required=True, type=float)
    fc.add_argument("--start-date", required=True)
    fc.add_argument("--days", type=int, default=3)
    fc.set_defaults(func=_cmd_forecast)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint callable used by `python -m tripwise.cli`."""
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    func: Any = getattr(args, "func")
    return int(func(args))


if __name__ == "__main__":
    raise SystemExit(main())
