from datetime import date

from starlette.testclient import TestClient

from tripwise.api.app import app
from tripwise.domain.models import DayForecast


def _body(**extra):
    body = {
        "itinerary": {
            "days": [
                {
                    "day_number": 1,
                    "theme": "Coast",
                    "activities": [
                        {
                            "id": "beach",
                            "name": "Beach Walk",
                            "category": "beach",
                            "location": {"latitude": 15.5553, "longitude": 73.7517},
                        },
                        {
                            "id": "museum",
                            "name": "City Museum",
                            "category": "museum",
                            "location": {"latitude": 15.56, "longitude": 73.76},
                        },
                    ],
                }
            ]
        },
        "forecasts": [
            {
                "date": "2026-07-10",
                "temp_min_c": 24,
                "temp_max_c": 29,
                "precipitation_probability_pct": 85,
                "wind_speed_kph": 10,
            }
        ],
    }
    body.update(extra)
    return body


class _StubWeatherClient:
    def get_daily_forecasts(self, *, lat: float, lon: float, start_date: date, days: int):
        # Stable forecast so API tests stay offline.
        return [
            DayForecast(
                date=start_date,
                temp_min_c=24,
                temp_max_c=29,
                precipitation_probability_pct=85,
                wind_speed_kph=10,
            )
        ] * days


def test_api_optimize_reorders_and_includes_debug_meta():
    client = TestClient(app)
    resp = client.post("/api/optimize", json=_body())
    assert resp.status_code == 200

    data = resp.json()
    day = data["itinerary"]["days"][0]
    assert [a["id"] for a in day["activities"]] == ["museum", "beach"]
    assert day["activities"][1]["risk_level"] == "high"
    assert data["report"]["overall_risk"] == "high"
    assert data["report"]["day_reports"][0]["affected_activity_ids"] == ["beach"]

    debug = data["meta"]["debug"]
    assert isinstance(debug["request_id"], str) and debug["request_id"]
    assert isinstance(debug["api_ms"], int)


def test_api_optimize_looks_up_weather_when_only_start_date_is_given(monkeypatch):
    import tripwise.api.routes as routes

    monkeypatch.setattr(routes, "_weather_client", lambda: _StubWeatherClient())

    client = TestClient(app)
    resp = client.post("/api/optimize", json=_body(forecasts=None, start_date="2026-07-10"))
    assert resp.status_code == 200

    data = resp.json()
    assert data["report"]["day_reports"][0]["risk_level"] == "high"
    assert "forecast_location" in data["meta"]


def test_api_optimize_reports_offending_field():
    body = _body()
    body["itinerary"]["days"][0]["activities"][0]["location"]["latitude"] = 91

    resp = TestClient(app).post("/api/optimize", json=body)

    assert resp.status_code == 400
    detail = resp.json()["detail"]
    assert detail["field"] == "days[0].activities[0].location.latitude"


def test_api_optimize_rejects_disallowed_overrides():
    resp = TestClient(app).post(
        "/api/optimize",
        json=_body(settings_overrides={"ingestion": {"weather": {"base_url": "http://evil"}}}),
    )

    assert resp.status_code == 400
    assert resp.json()["detail"]["field"] == "settings_overrides"


def test_api_settings_hides_worker_count():
    data = TestClient(app).get("/api/settings").json()
    assert data["clustering"]["radius_km"] == 5.0
    assert "max_workers" not in data["optimizer"]
    assert "ingestion" not in data


def test_api_health():
    data = TestClient(app).get("/api/health").json()
    assert data["status"] == "ok"
    assert data["name"] == "Tripwise"
