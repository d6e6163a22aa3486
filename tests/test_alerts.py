from datetime import date, timedelta

from tripwise.config.settings import get_settings
from tripwise.domain.models import DayForecast, DayReport
from tripwise.optimizer.alerts import build_trip_alerts, build_trip_recommendations


def _forecast(i: int, *, rain: int, t_min: float, t_max: float) -> DayForecast:
    return DayForecast(
        date=date(2026, 1, 1) + timedelta(days=i),
        temp_min_c=t_min,
        temp_max_c=t_max,
        precipitation_probability_pct=rain,
    )


def test_hot_and_cold_days_are_flagged():
    alerts = build_trip_alerts(
        [
            _forecast(0, rain=10, t_min=25, t_max=38),
            _forecast(1, rain=10, t_min=5, t_max=15),
            _forecast(2, rain=10, t_min=20, t_max=30),
        ],
        [1, 2, 3],
        get_settings().alerts,
    )
    by_kind = {a.kind: a for a in alerts}
    assert by_kind["heat"].days == [1]
    assert by_kind["heat"].severity == "high"
    assert by_kind["cold"].days == [2]
    assert "Pack warm clothing" in by_kind["cold"].message


def test_rainy_period_needs_more_than_two_rainy_days():
    settings = get_settings().alerts
    two = [_forecast(i, rain=80, t_min=15, t_max=22) for i in range(2)]
    three = [_forecast(i, rain=80, t_min=15, t_max=22) for i in range(3)]

    assert [a.kind for a in build_trip_alerts(two, [1, 2], settings)] == []
    assert [a.kind for a in build_trip_alerts(three, [1, 2, 3], settings)] == ["rain"]


def test_great_weather_needs_more_than_three_good_days():
    settings = get_settings().alerts
    good = [_forecast(i, rain=5, t_min=18, t_max=26) for i in range(4)]

    alerts = build_trip_alerts(good, [1, 2, 3, 4], settings)
    assert [a.kind for a in alerts] == ["good_weather"]
    assert alerts[0].severity == "low"
    assert build_trip_alerts(good[:3], [1, 2, 3], settings) == []


def test_days_without_forecast_are_skipped():
    alerts = build_trip_alerts([None, _forecast(1, rain=5, t_min=25, t_max=39)], [1, 2], get_settings().alerts)
    assert [(a.kind, a.days) for a in alerts] == [("heat", [2])]


def test_trip_recommendations():
    calm = [DayReport(day_number=1)]
    affected = [DayReport(day_number=1, risk_level="high", affected_activity_ids=["beach"])]

    assert build_trip_recommendations("low", calm) == []
    assert build_trip_recommendations("high", affected) == [
        "Consider travel insurance due to weather risks",
        "Pack weather-appropriate clothing and gear",
    ]
