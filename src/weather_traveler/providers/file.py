"""Replay forecasts recorded in a JSON file.

File shape::

    {"locations": [
        {"latitude": 36.17, "longitude": -115.14,
         "samples": [{"timestamp": "2026-06-01T08:00:00", "temperature_c": 22.0,
                      "condition": "sunny", "humidity_pct": 30, "wind_speed_kmh": 12}]}
    ]}
"""
from __future__ import annotations

import json
import logging
from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

from weather_traveler.core.models import Coordinate, WeatherSample
from weather_traveler.providers.base import WeatherProvider

log = logging.getLogger(__name__)


class FileWeatherProvider(WeatherProvider):
    def __init__(
        self,
        path: str | Path,
        decimals: int = 2,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.path = Path(path)
        self.decimals = decimals
        self._clock = clock or datetime.now
        self._series: Optional[Dict[Tuple[float, float], List[WeatherSample]]] = None

    def _key(self, lat: float, lon: float) -> Tuple[float, float]:
        return (round(lat, self.decimals), round(lon, self.decimals))

    def _load(self) -> Dict[Tuple[float, float], List[WeatherSample]]:
        if self._series is not None:
            return self._series

        series: Dict[Tuple[float, float], List[WeatherSample]] = {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            log.warning("Forecast file %s unreadable: %s", self.path, exc)
            self._series = series
            return series

        for loc in data.get("locations", []):
            coord = Coordinate(latitude=loc["latitude"], longitude=loc["longitude"])
            samples = [WeatherSample(location=coord, **s) for s in loc.get("samples", [])]
            samples.sort(key=lambda s: s.timestamp)
            series[self._key(coord.latitude, coord.longitude)] = samples

        log.info("Loaded %d forecast location(s) from %s", len(series), self.path)
        self._series = series
        return series

    def _samples_for(self, coordinate: Coordinate) -> List[WeatherSample]:
        return self._load().get(self._key(coordinate.latitude, coordinate.longitude), [])

    def current(self, coordinate: Coordinate) -> Optional[WeatherSample]:
        samples = self._samples_for(coordinate)
        if not samples:
            return None
        now = self._clock()
        return min(samples, key=lambda s: abs((s.timestamp - now).total_seconds()))

    def forecast(self, coordinate: Coordinate, horizon_hours: float, interval_hours: float) -> list[WeatherSample]:
        samples = self._samples_for(coordinate)
        if not samples or interval_hours <= 0:
            return []

        # Thin to roughly one sample per interval within the horizon
        start = samples[0].timestamp
        end = start + timedelta(hours=horizon_hours)
        step = timedelta(hours=interval_hours)
        out: list[WeatherSample] = []
        next_t = start
        for s in samples:
            if s.timestamp >= end:
                break
            if s.timestamp >= next_t:
                out.append(s)
                next_t = s.timestamp + step
        return out
