"""Centralized settings for weather-traveler."""
from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_prefix": "WEATHER_TRAVELER_", "env_file": ".env", "extra": "ignore"}

    log_level: str = "INFO"

    # Provider stack, e.g. "mock" or "file+mock"
    weather_provider: str = "mock"
    forecast_file: str = ""

    # Redis; empty string means in-process memory cache only
    redis_url: str = ""

    # TTL values in seconds for each cached data type
    ttl_current_weather: int = 1800   # 30 min
    ttl_forecast: int = 3600          # 1 h
    ttl_gas_prices: int = 7200        # 2 h
    cache_coordinate_decimals: int = 2

    # Vehicle / driving assumptions
    fuel_consumption_l_per_100km: float = 8.5
    fuel_price_per_liter: float = 1.50
    average_speed_kmh: float = 80.0
    default_departure_hour: int = 8

    # Forecast handling
    forecast_horizon_hours: float = 120.0   # 5 days
    arrival_window_hours: float = 3.0
    max_forecast_workers: int = 8

    # Fuel stops
    fuel_stop_radius_km: float = 25.0
    fuel_stop_max_detour_km: float = 10.0
    fuel_stops_per_destination: int = 3

    # Flat-file traveler profiles
    profile_dir: Path = Path.home() / ".weather_traveler" / "profiles"


settings = Settings()
