from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from weather_traveler.core.models import Coordinate, FuelStation, WeatherSample


class WeatherProvider(ABC):
    """Current conditions and forecast sequences for a coordinate.

    Ordinary unavailability is signalled with ``None`` / an empty list, not
    an exception.
    """

    @abstractmethod
    def current(self, coordinate: Coordinate) -> Optional[WeatherSample]:
        raise NotImplementedError

    @abstractmethod
    def forecast(self, coordinate: Coordinate, horizon_hours: float, interval_hours: float) -> list[WeatherSample]:
        raise NotImplementedError


class GasPriceProvider(ABC):
    """Fuel stations (with prices) around a coordinate."""

    @abstractmethod
    def stations_near(self, coordinate: Coordinate, radius_km: float, limit: int) -> list[FuelStation]:
        raise NotImplementedError
