from __future__ import annotations

import logging
from typing import List, Optional

from weather_traveler.core.models import Coordinate, WeatherSample
from weather_traveler.providers.base import WeatherProvider

log = logging.getLogger(__name__)


class FallbackWeatherProvider(WeatherProvider):
    """
    Ask providers in order and return the first non-empty answer.

    Intended use:
      FileWeatherProvider(...) -> recorded forecasts where we have them
      MockWeatherProvider()    -> synthetic data everywhere else

    A provider that raises is logged and skipped, so one broken layer never
    hides the ones behind it.
    """

    def __init__(self, providers: List[WeatherProvider]):
        self.providers = providers

    def current(self, coordinate: Coordinate) -> Optional[WeatherSample]:
        for prov in self.providers:
            try:
                sample = prov.current(coordinate)
            except Exception as exc:
                log.warning("%s.current failed: %s", type(prov).__name__, exc)
                continue
            if sample is not None:
                return sample
        return None

    def forecast(self, coordinate: Coordinate, horizon_hours: float, interval_hours: float) -> list[WeatherSample]:
        for prov in self.providers:
            try:
                series = prov.forecast(coordinate, horizon_hours, interval_hours)
            except Exception as exc:
                log.warning("%s.forecast failed: %s", type(prov).__name__, exc)
                continue
            if series:
                return series
        return []
