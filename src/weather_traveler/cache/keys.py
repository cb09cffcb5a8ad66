"""Cache key naming conventions for the weather-traveler cache layer."""
from __future__ import annotations

_PREFIX = "wt"


def _coord(lat: float, lon: float, decimals: int) -> str:
    return f"{lat:.{decimals}f},{lon:.{decimals}f}"


# ── Weather ──────────────────────────────────────────────────────────────

def weather_current(lat: float, lon: float, decimals: int = 2) -> str:
    return f"{_PREFIX}:weather:current:{_coord(lat, lon, decimals)}"


def weather_forecast(lat: float, lon: float, horizon_hours: float, interval_hours: float, decimals: int = 2) -> str:
    return f"{_PREFIX}:weather:forecast:{_coord(lat, lon, decimals)}:{horizon_hours:g}h@{interval_hours:g}h"


# ── Gas prices ───────────────────────────────────────────────────────────

def gas_stations(lat: float, lon: float, radius_km: float, limit: int, decimals: int = 2) -> str:
    return f"{_PREFIX}:gas:stations:{_coord(lat, lon, decimals)}:{radius_km:g}km:{limit}"
