from datetime import datetime, timedelta
from typing import Dict, List, Optional

import pytest

from weather_traveler.core.models import (
    Coordinate,
    NamedLocation,
    TemperatureRange,
    TravelPlanRequest,
    WeatherCondition,
    WeatherSample,
)
from weather_traveler.providers.base import WeatherProvider

ANCHOR = datetime(2026, 6, 1, 6, 0)


class SteadyWeatherProvider(WeatherProvider):
    """Same conditions everywhere, sampled from ANCHOR onwards."""

    def __init__(
        self,
        temperature_c: float = 20.0,
        condition: WeatherCondition = WeatherCondition.SUNNY,
        failing: Optional[Dict[float, str]] = None,
    ):
        self.temperature_c = temperature_c
        self.condition = condition
        self.failing = failing or {}  # latitude -> error message
        self.calls: List[Coordinate] = []

    def _sample(self, c: Coordinate, t: datetime) -> WeatherSample:
        return WeatherSample(
            temperature_c=self.temperature_c,
            condition=self.condition,
            humidity_pct=40.0,
            wind_speed_kmh=10.0,
            timestamp=t,
            location=c,
        )

    def current(self, coordinate):
        return self._sample(coordinate, ANCHOR)

    def forecast(self, coordinate, horizon_hours, interval_hours):
        self.calls.append(coordinate)
        if coordinate.latitude in self.failing:
            raise RuntimeError(self.failing[coordinate.latitude])
        n = int(horizon_hours / interval_hours)
        return [self._sample(coordinate, ANCHOR + timedelta(hours=i * interval_hours)) for i in range(n)]


def make_location(name: str, lat: float, lon: float) -> NamedLocation:
    return NamedLocation(name=name, coordinate=Coordinate(latitude=lat, longitude=lon))


@pytest.fixture
def denver() -> NamedLocation:
    return make_location("Denver", 39.7392, -104.9903)


@pytest.fixture
def las_vegas() -> NamedLocation:
    return make_location("Las Vegas", 36.1699, -115.1398)


@pytest.fixture
def los_angeles() -> NamedLocation:
    return make_location("Los Angeles", 34.0522, -118.2437)


@pytest.fixture
def steady_weather() -> SteadyWeatherProvider:
    return SteadyWeatherProvider()


@pytest.fixture
def southwest_request(denver, las_vegas, los_angeles) -> TravelPlanRequest:
    return TravelPlanRequest(
        start=denver,
        destinations=[los_angeles, las_vegas],
        temperature_range=TemperatureRange(min_celsius=15.0, max_celsius=25.0),
        avoid_rain=True,
        max_driving_hours_per_day=14,
        start_date=ANCHOR + timedelta(hours=2),
    )
