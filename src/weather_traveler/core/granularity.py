"""Forecast resolution tiers keyed on how far away travel is.

Near-term travel gets dense, frequently refreshed forecasts; trips a week or
more out only get an overview. Every tier uses inclusive upper bounds.
"""
from __future__ import annotations

from datetime import datetime, timedelta
from typing import List, Tuple

from weather_traveler.contracts.forecast_contract import ForecastGranularity, ForecastReliability

# (upper bound hours, interval hours, detail level, update frequency hours, confidence)
_TIERS: List[Tuple[float, float, str, float, float]] = [
    (6.0, 0.5, "Hyper-detailed", 0.25, 0.95),
    (24.0, 1.0, "High-detail", 1.0, 0.85),
    (72.0, 3.0, "Standard", 3.0, 0.75),
    (168.0, 6.0, "Broad", 6.0, 0.65),
]
_OVERVIEW = (12.0, "Overview", 12.0, 0.50)


def _tier(hours_until_travel: float) -> Tuple[float, str, float, float]:
    for upper, interval, detail, update, confidence in _TIERS:
        if hours_until_travel <= upper:
            return interval, detail, update, confidence
    return _OVERVIEW


def hours_until(travel_time: datetime, now: datetime) -> float:
    return (travel_time - now).total_seconds() / 3600.0


def granularity_for(hours_until_travel: float) -> ForecastGranularity:
    interval, detail, update, _ = _tier(hours_until_travel)
    return ForecastGranularity(
        hours_until_travel=hours_until_travel,
        interval_hours=interval,
        detail_level=detail,
        update_frequency_hours=update,
    )


def confidence_for(hours_until_travel: float) -> float:
    return _tier(hours_until_travel)[3]


def _recommended_action(hours_until_travel: float) -> str:
    if hours_until_travel <= 6.0:
        return "Monitor for real-time changes"
    if hours_until_travel <= 24.0:
        return "Check for updates every hour"
    if hours_until_travel <= 72.0:
        return "Daily forecast review recommended"
    return "Weekly forecast review sufficient"


def forecast_reliability(travel_time: datetime, now: datetime) -> ForecastReliability:
    """Confidence and refresh advice for a forecast covering *travel_time*."""
    h = hours_until(travel_time, now)
    gran = granularity_for(h)
    return ForecastReliability(
        hours_until_travel=h,
        granularity=gran,
        confidence=confidence_for(h),
        next_update=now + timedelta(hours=gran.update_frequency_hours),
        recommended_action=_recommended_action(h),
    )
