from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, List

if TYPE_CHECKING:
    from weather_traveler.core.models import NamedLocation, WeatherCondition


@dataclass(frozen=True)
class ForecastGranularity:
    hours_until_travel: float
    interval_hours: float
    detail_level: str
    update_frequency_hours: float


@dataclass(frozen=True)
class ForecastReliability:
    hours_until_travel: float
    granularity: ForecastGranularity
    confidence: float
    next_update: datetime
    recommended_action: str


@dataclass(frozen=True)
class WeatherWindow:
    start_time: datetime
    end_time: datetime
    average_temperature: float
    conditions: List["WeatherCondition"] = field(default_factory=list)


@dataclass(frozen=True)
class ForecastSummary:
    average_temperature: float
    min_temperature: float
    max_temperature: float
    sample_count: int
    rainy_count: int
    sunny_count: int
    most_common_condition: "WeatherCondition"


@dataclass(frozen=True)
class FuelBudget:
    total_cost: float
    daily_budget: float
    days_of_travel: int
    consumption_liters: float


@dataclass(frozen=True)
class SequencedLeg:
    origin: "NamedLocation"
    destination: "NamedLocation"
    cost: float
    distance_km: float
