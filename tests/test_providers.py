import json
from datetime import datetime, timedelta
from pathlib import Path

import pytest

from weather_traveler.config import Settings
from weather_traveler.core.geo import distance_km
from weather_traveler.core.models import Coordinate, WeatherCondition
from weather_traveler.providers.base import WeatherProvider
from weather_traveler.providers.cached import CachedWeatherProvider
from weather_traveler.providers.chain import FallbackWeatherProvider
from weather_traveler.providers.combined import build_gas_provider, build_weather_provider
from weather_traveler.providers.file import FileWeatherProvider
from weather_traveler.providers.mock import MockGasPriceProvider, MockWeatherProvider

NOW = datetime(2026, 6, 1, 9, 42)
VEGAS = Coordinate(latitude=36.1699, longitude=-115.1398)


def _clock():
    return NOW


def test_mock_weather_is_deterministic_and_spaced():
    a = MockWeatherProvider(clock=_clock).forecast(VEGAS, 24, 3)
    b = MockWeatherProvider(clock=_clock).forecast(VEGAS, 24, 3)

    assert a == b
    assert len(a) == 8
    assert a[0].timestamp == datetime(2026, 6, 1, 9, 0)
    assert all(y.timestamp - x.timestamp == timedelta(hours=3) for x, y in zip(a, a[1:]))
    assert all(s.location == VEGAS for s in a)
    assert all(-40 < s.temperature_c < 50 for s in a)


def test_mock_weather_empty_for_bad_arguments():
    p = MockWeatherProvider(clock=_clock)
    assert p.forecast(VEGAS, 24, 0) == []
    assert p.forecast(VEGAS, 0, 1) == []
    assert p.current(VEGAS).timestamp == datetime(2026, 6, 1, 9, 0)


def test_mock_gas_stations_near_point():
    stations = MockGasPriceProvider(clock=_clock).stations_near(VEGAS, 25.0, 6)

    assert len(stations) == 6
    assert all(s.price_per_liter > 0 for s in stations)
    assert all(distance_km(VEGAS, s.location) < 30.0 for s in stations)
    assert MockGasPriceProvider(clock=_clock).stations_near(VEGAS, 25.0, 0) == []


class _Exploding(WeatherProvider):
    def current(self, coordinate):
        raise RuntimeError("boom")

    def forecast(self, coordinate, horizon_hours, interval_hours):
        raise RuntimeError("boom")


class _Empty(WeatherProvider):
    def current(self, coordinate):
        return None

    def forecast(self, coordinate, horizon_hours, interval_hours):
        return []


def test_fallback_skips_failing_and_empty_providers(caplog):
    mock = MockWeatherProvider(clock=_clock)
    chain = FallbackWeatherProvider([_Exploding(), _Empty(), mock])

    assert chain.forecast(VEGAS, 12, 1) == mock.forecast(VEGAS, 12, 1)
    assert chain.current(VEGAS) == mock.current(VEGAS)
    assert "boom" in caplog.text


def test_fallback_all_empty():
    chain = FallbackWeatherProvider([_Empty(), _Exploding()])
    assert chain.forecast(VEGAS, 12, 1) == []
    assert chain.current(VEGAS) is None


def _write_forecast_file(path: Path) -> Path:
    start = datetime(2026, 6, 1, 0, 0)
    samples = [
        {
            "timestamp": (start + timedelta(hours=h)).isoformat(),
            "temperature_c": 18.0 + h,
            "condition": "sunny" if h % 2 == 0 else "cloudy",
            "humidity_pct": 30,
            "wind_speed_kmh": 12,
        }
        for h in range(6)
    ]
    path.write_text(
        json.dumps({"locations": [{"latitude": 36.17, "longitude": -115.14, "samples": samples}]}),
        encoding="utf-8",
    )
    return path


def test_file_provider_thins_to_interval(tmp_path: Path):
    p = FileWeatherProvider(_write_forecast_file(tmp_path / "forecast.json"), clock=lambda: datetime(2026, 6, 1, 2, 20))

    series = p.forecast(VEGAS, horizon_hours=5, interval_hours=2)
    assert [s.temperature_c for s in series] == [18.0, 20.0, 22.0]
    assert series[1].condition == WeatherCondition.SUNNY

    assert p.current(VEGAS).temperature_c == 20.0
    assert p.forecast(Coordinate(latitude=0.0, longitude=0.0), 5, 1) == []


def test_file_provider_missing_file_is_empty(tmp_path: Path, caplog):
    p = FileWeatherProvider(tmp_path / "nope.json")
    assert p.forecast(VEGAS, 24, 1) == []
    assert p.current(VEGAS) is None
    assert "unreadable" in caplog.text


def test_build_weather_provider_tokens(tmp_path: Path):
    cfg = Settings(forecast_file=str(_write_forecast_file(tmp_path / "f.json")))

    assert isinstance(build_weather_provider("mock", cfg), MockWeatherProvider)

    chained = build_weather_provider("file+mock", cfg)
    assert isinstance(chained, FallbackWeatherProvider)
    assert [type(p) for p in chained.providers] == [FileWeatherProvider, MockWeatherProvider]

    with pytest.raises(ValueError):
        build_weather_provider("bogus", cfg)
    with pytest.raises(ValueError):
        build_weather_provider("file", Settings(forecast_file=""))


def test_build_providers_wrap_cache():
    from weather_traveler.cache.memory import MemoryCache
    from weather_traveler.providers.cached import CachedGasPriceProvider

    cache = MemoryCache()
    assert isinstance(build_weather_provider("mock", Settings(), cache=cache), CachedWeatherProvider)
    assert isinstance(build_gas_provider(Settings(), cache=cache), CachedGasPriceProvider)
    assert isinstance(build_gas_provider(Settings()), MockGasPriceProvider)
