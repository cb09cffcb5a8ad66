from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from weather_traveler.contracts.forecast_contract import ForecastGranularity, FuelBudget


class WeatherCondition(str, Enum):
    SUNNY = "sunny"
    CLOUDY = "cloudy"
    PARTLY_CLOUDY = "partly_cloudy"
    RAINY = "rainy"
    STORMY = "stormy"
    SNOWY = "snowy"
    FOGGY = "foggy"


class OptimizationObjective(str, Enum):
    FASTEST_ROUTE = "fastest_route"
    SHORTEST_DISTANCE = "shortest_distance"
    BEST_WEATHER = "best_weather"
    AVOID_RAIN = "avoid_rain"
    LOWEST_FUEL_COST = "lowest_fuel_cost"


class Coordinate(BaseModel):
    model_config = ConfigDict(frozen=True)

    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)


class TemperatureRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    min_celsius: float
    max_celsius: float

    @model_validator(mode="after")
    def _check_order(self) -> "TemperatureRange":
        if self.min_celsius >= self.max_celsius:
            raise ValueError(
                f"min_celsius ({self.min_celsius}) must be below max_celsius ({self.max_celsius})"
            )
        return self

    @property
    def midpoint(self) -> float:
        return (self.min_celsius + self.max_celsius) / 2.0


class WeatherSample(BaseModel):
    """One observation or forecast point, as produced by a WeatherProvider."""

    model_config = ConfigDict(frozen=True)

    temperature_c: float
    condition: WeatherCondition
    humidity_pct: float = Field(ge=0.0, le=100.0)
    wind_speed_kmh: float = Field(ge=0.0)
    timestamp: datetime
    location: Coordinate


class NamedLocation(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    coordinate: Coordinate
    preferred_arrival: Optional[datetime] = None
    preferred_departure: Optional[datetime] = None
    is_required: bool = True


class Leg(BaseModel):
    model_config = ConfigDict(frozen=True)

    origin: NamedLocation
    destination: NamedLocation
    distance_km: float = Field(ge=0.0)
    driving_time_hours: float = Field(ge=0.0)
    fuel_cost: float = Field(ge=0.0)
    forecast: List[WeatherSample] = Field(default_factory=list)
    recommended_departure: Optional[datetime] = None


class Route(BaseModel):
    model_config = ConfigDict(frozen=True)

    legs: List[Leg] = Field(default_factory=list)
    total_distance_km: float = 0.0
    total_driving_hours: float = 0.0
    total_fuel_cost: float = 0.0
    weather_compliant: bool = False
    overall_weather_rating: float = Field(default=0.0, ge=0.0, le=10.0)

    @classmethod
    def from_legs(cls, legs: List[Leg], *, weather_compliant: bool, overall_weather_rating: float) -> "Route":
        return cls(
            legs=list(legs),
            total_distance_km=sum(leg.distance_km for leg in legs),
            total_driving_hours=sum(leg.driving_time_hours for leg in legs),
            total_fuel_cost=sum(leg.fuel_cost for leg in legs),
            weather_compliant=weather_compliant,
            overall_weather_rating=overall_weather_rating,
        )

    @property
    def stop_names(self) -> List[str]:
        if not self.legs:
            return []
        return [self.legs[0].origin.name] + [leg.destination.name for leg in self.legs]


class TravelPlanRequest(BaseModel):
    start: NamedLocation
    destinations: List[NamedLocation] = Field(default_factory=list)
    temperature_range: TemperatureRange
    avoid_rain: bool = False
    max_driving_hours_per_day: int = Field(gt=0)
    start_date: datetime
    objective: OptimizationObjective = OptimizationObjective.SHORTEST_DISTANCE
    fuel_budget: Optional[float] = Field(default=None, ge=0.0)

    @field_validator("destinations")
    @classmethod
    def _unique_destinations(cls, v: List[NamedLocation]) -> List[NamedLocation]:
        seen = set()
        for loc in v:
            if loc.name in seen:
                raise ValueError(f"Duplicate destination: '{loc.name}'")
            seen.add(loc.name)
        return v


class ScheduleEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    departure: datetime
    leg: Leg

    @property
    def day(self) -> date:
        return self.departure.date()


class FuelStation(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    brand: str
    location: Coordinate
    price_per_liter: float = Field(ge=0.0)
    distance_km: float = Field(default=0.0, ge=0.0)
    last_updated: Optional[datetime] = None
    amenities: List[str] = Field(default_factory=list)

    @property
    def price_per_gallon(self) -> float:
        return self.price_per_liter * 3.78541


class FeasibilityResult(BaseModel):
    score: float
    recommendation_label: str
    warnings: List[str] = Field(default_factory=list)
    route: Route
    alternates: List[Route] = Field(default_factory=list)
    schedule: List[ScheduleEntry] = Field(default_factory=list)
    fuel_stops: List[FuelStation] = Field(default_factory=list)
    daily_fuel: Optional[FuelBudget] = None

    # Which forecast tier the plan was computed against
    forecast_granularity: Optional[ForecastGranularity] = None
    forecast_confidence: Optional[float] = None
