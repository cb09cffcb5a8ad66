from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional

from weather_traveler.cache.memory import MemoryCache
from weather_traveler.cache.redis_client import RedisCache
from weather_traveler.config import Settings, settings as default_settings
from weather_traveler.providers.base import GasPriceProvider, WeatherProvider
from weather_traveler.providers.cached import CacheBackend, CachedGasPriceProvider, CachedWeatherProvider


def build_cache(cfg: Optional[Settings] = None) -> CacheBackend:
    """Redis when configured and reachable, otherwise an in-process cache."""
    cfg = cfg or default_settings
    redis_cache = RedisCache.from_url(cfg.redis_url)
    if redis_cache is not None:
        return redis_cache
    return MemoryCache()


def build_weather_provider(
    provider_str: Optional[str] = None,
    cfg: Optional[Settings] = None,
    cache: Optional[CacheBackend] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> WeatherProvider:
    """
    Build a provider stack from a string like:
      "mock"
      "file+mock"   (recorded forecasts first, synthetic fallback)

    The stack is wrapped in a CachedWeatherProvider when *cache* is given.
    """
    cfg = cfg or default_settings
    tokens = [t.strip().lower() for t in (provider_str or cfg.weather_provider).split("+") if t.strip()]
    if not tokens:
        tokens = ["mock"]

    # Local imports to avoid circular imports
    from weather_traveler.providers.chain import FallbackWeatherProvider
    from weather_traveler.providers.file import FileWeatherProvider
    from weather_traveler.providers.mock import MockWeatherProvider

    providers: list[WeatherProvider] = []
    for t in tokens:
        if t == "mock":
            providers.append(MockWeatherProvider(clock=clock))
        elif t == "file":
            if not cfg.forecast_file:
                raise ValueError("Provider token 'file' needs WEATHER_TRAVELER_FORECAST_FILE to be set")
            providers.append(
                FileWeatherProvider(cfg.forecast_file, decimals=cfg.cache_coordinate_decimals, clock=clock)
            )
        else:
            raise ValueError(f"Unknown provider token: '{t}' (supported: mock, file)")

    provider: WeatherProvider = providers[0] if len(providers) == 1 else FallbackWeatherProvider(providers)

    if cache is not None:
        provider = CachedWeatherProvider(
            provider,
            cache,
            ttl_current=cfg.ttl_current_weather,
            ttl_forecast=cfg.ttl_forecast,
            decimals=cfg.cache_coordinate_decimals,
        )
    return provider


def build_gas_provider(
    cfg: Optional[Settings] = None,
    cache: Optional[CacheBackend] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> GasPriceProvider:
    from weather_traveler.providers.mock import MockGasPriceProvider

    cfg = cfg or default_settings
    provider: GasPriceProvider = MockGasPriceProvider(clock=clock)
    if cache is not None:
        provider = CachedGasPriceProvider(provider, cache, ttl=cfg.ttl_gas_prices, decimals=cfg.cache_coordinate_decimals)
    return provider
