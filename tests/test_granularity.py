from datetime import datetime, timedelta

import pytest

from weather_traveler.core.granularity import (
    confidence_for,
    forecast_reliability,
    granularity_for,
    hours_until,
)


@pytest.mark.parametrize(
    "hours, interval, detail, confidence",
    [
        (-3.0, 0.5, "Hyper-detailed", 0.95),
        (5.0, 0.5, "Hyper-detailed", 0.95),
        (6.0, 0.5, "Hyper-detailed", 0.95),
        (24.0, 1.0, "High-detail", 0.85),
        (24.01, 3.0, "Standard", 0.75),
        (100.0, 6.0, "Broad", 0.65),
        (200.0, 12.0, "Overview", 0.50),
    ],
)
def test_tiers(hours, interval, detail, confidence):
    g = granularity_for(hours)
    assert g.hours_until_travel == hours
    assert g.interval_hours == interval
    assert g.detail_level == detail
    assert confidence_for(hours) == confidence


def test_update_frequency_follows_tier():
    assert granularity_for(3.0).update_frequency_hours == 0.25
    assert granularity_for(500.0).update_frequency_hours == 12.0


def test_hours_until():
    now = datetime(2026, 6, 1, 8, 0)
    assert hours_until(now + timedelta(hours=30), now) == pytest.approx(30.0)
    assert hours_until(now - timedelta(minutes=90), now) == pytest.approx(-1.5)


def test_forecast_reliability_two_days_out():
    now = datetime(2026, 6, 1, 8, 0)
    r = forecast_reliability(now + timedelta(hours=48), now)

    assert r.confidence == 0.75
    assert r.granularity.detail_level == "Standard"
    assert r.next_update == now + timedelta(hours=3)
    assert r.recommended_action == "Daily forecast review recommended"


def test_forecast_reliability_same_day():
    now = datetime(2026, 6, 1, 8, 0)
    r = forecast_reliability(now + timedelta(hours=2), now)
    assert r.recommended_action == "Monitor for real-time changes"
    assert r.next_update == now + timedelta(minutes=15)
