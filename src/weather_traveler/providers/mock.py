from __future__ import annotations

import math
from datetime import datetime, timedelta
from typing import Callable, Optional

from weather_traveler.core.geo import distance_km
from weather_traveler.core.models import Coordinate, FuelStation, WeatherCondition, WeatherSample
from weather_traveler.providers.base import GasPriceProvider, WeatherProvider

_DAY_CONDITIONS = [
    WeatherCondition.SUNNY,
    WeatherCondition.PARTLY_CLOUDY,
    WeatherCondition.CLOUDY,
    WeatherCondition.SUNNY,
    WeatherCondition.RAINY,
    WeatherCondition.PARTLY_CLOUDY,
    WeatherCondition.FOGGY,
    WeatherCondition.STORMY,
]

_BRANDS = ["Shell", "Exxon", "BP", "Chevron", "Mobil", "Sunoco", "Circle K", "Speedway"]
_AMENITIES = ["Convenience Store", "Restrooms", "Car Wash", "ATM", "Restaurant", "EV Charging"]


def _frac(x: float) -> float:
    return x - math.floor(x)


class MockWeatherProvider(WeatherProvider):
    """
    Deterministic fake weather so planning runs end-to-end without APIs.

    Temperature follows latitude, season and a daily cycle; conditions drift
    over multi-hour blocks and differ between locations. The same coordinate
    and clock always produce the same samples.
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self._clock = clock or datetime.now

    def _anchor(self) -> datetime:
        return self._clock().replace(minute=0, second=0, microsecond=0)

    def _sample(self, c: Coordinate, t: datetime, hours_ahead: float) -> WeatherSample:
        # Base temperature: warmer near the equator, seasonal swing by hemisphere
        base = 25.0 - abs(c.latitude) / 90.0 * 20.0
        season = math.sin((t.timetuple().tm_yday - 80) / 365.0 * math.tau)
        if c.latitude < 0:
            season = -season
        hour = t.hour + t.minute / 60.0
        daily = math.sin((hour - 9.0) / 24.0 * math.tau) * 7.0
        trend = math.sin(hours_ahead / 72.0 * math.pi) * 3.0
        geo = math.sin((c.latitude + c.longitude) * 10.0)

        temp = base + season * 8.0 + daily + trend + geo

        # Conditions persist for 6-hour blocks
        block = int(hours_ahead // 6)
        idx = int(_frac(abs(geo) * 3.7 + block * 0.381) * len(_DAY_CONDITIONS))
        condition = _DAY_CONDITIONS[idx]
        if condition == WeatherCondition.SUNNY and not 6 <= t.hour <= 18:
            condition = WeatherCondition.PARTLY_CLOUDY  # clear night

        wind = 8.0 + 10.0 * max(0.0, math.sin(hours_ahead / 10.0 + geo)) + 2.0 * abs(geo)
        if condition == WeatherCondition.STORMY:
            wind += 20.0

        humidity = 55.0 + {
            WeatherCondition.RAINY: 20.0,
            WeatherCondition.STORMY: 25.0,
            WeatherCondition.FOGGY: 15.0,
            WeatherCondition.SUNNY: -10.0,
        }.get(condition, 0.0)

        return WeatherSample(
            temperature_c=float(round(temp, 2)),
            condition=condition,
            humidity_pct=float(max(10.0, min(95.0, humidity + 5.0 * geo))),
            wind_speed_kmh=float(round(wind, 2)),
            timestamp=t,
            location=c,
        )

    def current(self, coordinate: Coordinate) -> Optional[WeatherSample]:
        return self._sample(coordinate, self._anchor(), 0.0)

    def forecast(self, coordinate: Coordinate, horizon_hours: float, interval_hours: float) -> list[WeatherSample]:
        if interval_hours <= 0 or horizon_hours <= 0:
            return []
        start = self._anchor()
        n = max(1, int(math.floor(horizon_hours / interval_hours + 1e-9)))
        out: list[WeatherSample] = []
        for i in range(n):
            ahead = i * interval_hours
            out.append(self._sample(coordinate, start + timedelta(hours=ahead), ahead))
        return out


class MockGasPriceProvider(GasPriceProvider):
    """Deterministic ring of stations around the query point with regional pricing."""

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self._clock = clock or datetime.now

    def stations_near(self, coordinate: Coordinate, radius_km: float, limit: int) -> list[FuelStation]:
        if limit <= 0 or radius_km <= 0:
            return []

        # East of -100 lon prices run higher; small latitude premium
        base = 1.40 + abs(coordinate.latitude) / 90.0 * 0.15
        if coordinate.longitude > -100.0:
            base += 0.10

        now = self._clock()
        seed = abs(coordinate.latitude * 13.0 + coordinate.longitude * 7.0)
        out: list[FuelStation] = []
        for i in range(limit):
            angle = i / limit * math.tau
            dist = radius_km * (0.1 + 0.85 * _frac(seed + i * 0.618))
            dlat = dist * math.cos(angle) / 111.0
            dlon = dist * math.sin(angle) / (111.0 * max(0.01, math.cos(math.radians(coordinate.latitude))))
            lat = max(-90.0, min(90.0, coordinate.latitude + dlat))
            lon = ((coordinate.longitude + dlon + 180.0) % 360.0) - 180.0
            loc = Coordinate(latitude=lat, longitude=lon)

            brand = _BRANDS[int(_frac(seed * 0.37 + i * 0.29) * len(_BRANDS))]
            price = max(0.50, base + 0.10 * math.sin(seed + i * 2.3))
            amenities = [a for j, a in enumerate(_AMENITIES) if (i + j) % 3 != 0]

            out.append(
                FuelStation(
                    name=f"{brand} #{1000 + int(_frac(seed + i * 0.7071) * 9000)}",
                    brand=brand,
                    location=loc,
                    price_per_liter=float(round(price, 3)),
                    distance_km=float(round(distance_km(coordinate, loc), 3)),
                    last_updated=now - timedelta(hours=1 + i % 12),
                    amenities=amenities,
                )
            )
        return out
