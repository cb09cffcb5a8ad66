"""TTL caching decorators for weather and gas-price providers.

The cache backend is injected (MemoryCache, RedisCache, or anything with
``get_json`` / ``set_json``); nothing here is process-global.
"""
from __future__ import annotations

import logging
from typing import Any, Optional, Protocol

from weather_traveler.cache import keys
from weather_traveler.core.models import Coordinate, FuelStation, WeatherSample
from weather_traveler.providers.base import GasPriceProvider, WeatherProvider

log = logging.getLogger(__name__)


class CacheBackend(Protocol):
    def get_json(self, key: str) -> Optional[Any]: ...

    def set_json(self, key: str, value: Any, ttl: int) -> None: ...


class CachedWeatherProvider(WeatherProvider):
    def __init__(
        self,
        inner: WeatherProvider,
        cache: CacheBackend,
        ttl_current: int = 1800,
        ttl_forecast: int = 3600,
        decimals: int = 2,
    ):
        self.inner = inner
        self.cache = cache
        self.ttl_current = ttl_current
        self.ttl_forecast = ttl_forecast
        self.decimals = decimals

    def current(self, coordinate: Coordinate) -> Optional[WeatherSample]:
        key = keys.weather_current(coordinate.latitude, coordinate.longitude, self.decimals)
        cached = self.cache.get_json(key)
        if cached is not None:
            log.debug("cache hit %s", key)
            return WeatherSample.model_validate(cached)

        sample = self.inner.current(coordinate)
        if sample is not None:
            self.cache.set_json(key, sample.model_dump(mode="json"), self.ttl_current)
        return sample

    def forecast(self, coordinate: Coordinate, horizon_hours: float, interval_hours: float) -> list[WeatherSample]:
        key = keys.weather_forecast(
            coordinate.latitude, coordinate.longitude, horizon_hours, interval_hours, self.decimals
        )
        cached = self.cache.get_json(key)
        if cached is not None:
            log.debug("cache hit %s", key)
            return [WeatherSample.model_validate(s) for s in cached]

        series = self.inner.forecast(coordinate, horizon_hours, interval_hours)
        # Empty means unavailable; don't pin that for a whole TTL
        if series:
            self.cache.set_json(key, [s.model_dump(mode="json") for s in series], self.ttl_forecast)
        return series


class CachedGasPriceProvider(GasPriceProvider):
    def __init__(self, inner: GasPriceProvider, cache: CacheBackend, ttl: int = 7200, decimals: int = 2):
        self.inner = inner
        self.cache = cache
        self.ttl = ttl
        self.decimals = decimals

    def stations_near(self, coordinate: Coordinate, radius_km: float, limit: int) -> list[FuelStation]:
        key = keys.gas_stations(coordinate.latitude, coordinate.longitude, radius_km, limit, self.decimals)
        cached = self.cache.get_json(key)
        if cached is not None:
            return [FuelStation.model_validate(s) for s in cached]

        stations = self.inner.stations_near(coordinate, radius_km, limit)
        if stations:
            self.cache.set_json(key, [s.model_dump(mode="json") for s in stations], self.ttl)
        return stations
