from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from conftest import ANCHOR, SteadyWeatherProvider
from weather_traveler.api import app, get_planner
from weather_traveler.config import Settings
from weather_traveler.core.engine import TripPlanner
from weather_traveler.profiles import ProfileStore
from weather_traveler.routers import profiles


@pytest.fixture
def client(tmp_path: Path):
    planner = TripPlanner(SteadyWeatherProvider(), cfg=Settings(), clock=lambda: ANCHOR)
    app.dependency_overrides[get_planner] = lambda: planner
    app.dependency_overrides[profiles.get_store] = lambda: ProfileStore(tmp_path)
    yield TestClient(app)
    app.dependency_overrides.clear()


def _trip_body(southwest_request) -> dict:
    return southwest_request.model_dump(mode="json")


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_plan(client, southwest_request):
    resp = client.post("/plan", json=_trip_body(southwest_request))

    assert resp.status_code == 200
    body = resp.json()
    assert [leg["destination"]["name"] for leg in body["route"]["legs"]] == ["Las Vegas", "Los Angeles"]
    assert body["score"] == pytest.approx(115.0)
    assert body["forecast_granularity"]["interval_hours"] == 0.5
    assert body["daily_fuel"]["days_of_travel"] >= 1


def test_plan_rejects_empty_destinations(client, southwest_request):
    body = _trip_body(southwest_request)
    body["destinations"] = []
    resp = client.post("/plan", json=body)
    assert resp.status_code == 400


def test_plan_rejects_duplicate_destinations(client, southwest_request):
    body = _trip_body(southwest_request)
    body["destinations"] = body["destinations"] * 2
    resp = client.post("/plan", json=body)
    assert resp.status_code == 422


def test_profile_roundtrip(client):
    resp = client.get("/profiles/alex")
    assert resp.status_code == 200
    assert resp.json()["preferences"]["max_driving_hours_per_day"] == 8

    prefs = resp.json()["preferences"] | {"max_driving_hours_per_day": 10}
    resp = client.put("/profiles/alex", json={"display_name": "Alex", "preferences": prefs})
    assert resp.status_code == 200

    resp = client.get("/profiles/alex")
    assert resp.json()["display_name"] == "Alex"
    assert resp.json()["preferences"]["max_driving_hours_per_day"] == 10


def test_profile_update_validates_preferences(client):
    bad = {"weather_weight": 0.9, "cost_weight": 0.3, "time_weight": 0.3}
    resp = client.put("/profiles/alex", json={"preferences": bad})
    assert resp.status_code == 422
    assert any("weights" in e for e in resp.json()["detail"])


def test_profile_update_needs_fields(client):
    assert client.put("/profiles/alex", json={}).status_code == 400


def test_profile_delete(client):
    client.put("/profiles/alex", json={"display_name": "Alex"})
    assert client.delete("/profiles/alex").status_code == 204
    assert client.delete("/profiles/alex").status_code == 404


def test_check_preferences(client):
    resp = client.post("/profiles/alex/preferences/validate", json={"max_driving_hours_per_day": 0})
    assert resp.status_code == 200
    assert resp.json()["valid"] is False


def test_plan_accepts_utc_start_date(client, southwest_request):
    body = _trip_body(southwest_request)
    body["start_date"] = "2026-06-01T08:00:00Z"
    resp = client.post("/plan", json=body)
    assert resp.status_code == 200
