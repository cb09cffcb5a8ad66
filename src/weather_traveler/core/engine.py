from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import datetime, timedelta
from math import ceil
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from weather_traveler.config import Settings, settings as default_settings
from weather_traveler.contracts.forecast_contract import SequencedLeg
from weather_traveler.core.feasibility import score
from weather_traveler.core.fuel import daily_fuel_budget, fuel_cost, recommend_fuel_stops
from weather_traveler.core.geo import driving_time_hours
from weather_traveler.core.granularity import confidence_for, granularity_for, hours_until
from weather_traveler.core.models import (
    FeasibilityResult,
    Leg,
    NamedLocation,
    OptimizationObjective,
    Route,
    TravelPlanRequest,
    WeatherCondition,
    WeatherSample,
)
from weather_traveler.core.schedule import build_schedule, travel_days
from weather_traveler.core.scoring import find_best_window, meets_range, overall_rating
from weather_traveler.core.sequencer import sequence
from weather_traveler.providers.base import GasPriceProvider, WeatherProvider

log = logging.getLogger(__name__)

# Objectives tried when looking for alternates to the requested one
ALTERNATE_OBJECTIVES = [
    OptimizationObjective.FASTEST_ROUTE,
    OptimizationObjective.SHORTEST_DISTANCE,
    OptimizationObjective.BEST_WEATHER,
    OptimizationObjective.LOWEST_FUEL_COST,
]


def _naive_local(dt: Optional[datetime]) -> Optional[datetime]:
    """Aware datetimes become naive local time; naive ones are already local."""
    if dt is None or dt.tzinfo is None:
        return dt
    return dt.astimezone().replace(tzinfo=None)


def _localize(loc: NamedLocation) -> NamedLocation:
    return loc.model_copy(
        update={
            "preferred_arrival": _naive_local(loc.preferred_arrival),
            "preferred_departure": _naive_local(loc.preferred_departure),
        }
    )


class PlanValidationError(ValueError):
    """The request cannot be planned as given."""


class TripPlanner:
    """
    Plans one trip per call; holds no state between calls.

    Forecasts are fetched once per destination (concurrently) and reused for
    the recommended route and every alternate ordering.
    """

    def __init__(
        self,
        weather_provider: WeatherProvider,
        gas_provider: Optional[GasPriceProvider] = None,
        cfg: Optional[Settings] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.weather = weather_provider
        self.gas = gas_provider
        self.cfg = cfg or default_settings
        self._clock = clock or datetime.now

    # ---------- Validation ----------

    def validate(self, request: TravelPlanRequest) -> None:
        if not request.destinations:
            raise PlanValidationError("At least one destination is required")
        if request.max_driving_hours_per_day <= 0:
            raise PlanValidationError("max_driving_hours_per_day must be positive")
        names = {d.name for d in request.destinations}
        if request.start.name in names:
            raise PlanValidationError(f"Start location '{request.start.name}' is also listed as a destination")

    # ---------- Forecast fan-out ----------

    def _fetch_one(self, loc: NamedLocation, horizon_hours: float, interval_hours: float) -> List[WeatherSample]:
        try:
            return list(self.weather.forecast(loc.coordinate, horizon_hours, interval_hours))
        except Exception as exc:
            log.warning("Forecast unavailable for %s: %s", loc.name, exc)
            return []

    def fetch_forecasts(
        self,
        destinations: Sequence[NamedLocation],
        horizon_hours: float,
        interval_hours: float,
    ) -> Dict[str, List[WeatherSample]]:
        """One forecast per destination name; failures come back empty."""
        out: Dict[str, List[WeatherSample]] = {}
        workers = max(1, min(self.cfg.max_forecast_workers, len(destinations)))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            future_to_loc = {
                executor.submit(self._fetch_one, loc, horizon_hours, interval_hours): loc
                for loc in destinations
            }
            for future in as_completed(future_to_loc):
                loc = future_to_loc[future]
                out[loc.name] = future.result()
        log.info(
            "Fetched forecasts for %d destination(s) (%d empty)",
            len(out), sum(1 for v in out.values() if not v),
        )
        return out

    # ---------- Leg / route construction ----------

    def _recommend_departure(
        self,
        request: TravelPlanRequest,
        seq: SequencedLeg,
        forecast: List[WeatherSample],
        drive_hours: float,
        interval_hours: float,
        ready_at: datetime,
    ) -> Tuple[Optional[datetime], datetime]:
        """
        Departure that lands us at the start of the best arrival window.

        *ready_at* is when we can leave the leg's origin at the earliest.
        Returns (recommended departure or None, expected arrival).
        """
        earliest_departure = ready_at
        if seq.origin.preferred_departure is not None:
            earliest_departure = max(earliest_departure, seq.origin.preferred_departure)

        earliest_arrival = earliest_departure + timedelta(hours=drive_hours)
        if seq.destination.preferred_arrival is not None:
            earliest_arrival = max(earliest_arrival, seq.destination.preferred_arrival)

        reachable = [s for s in forecast if s.timestamp >= earliest_arrival]
        window = find_best_window(
            reachable,
            request.temperature_range,
            max(self.cfg.arrival_window_hours, interval_hours),
            interval_hours,
        )
        if window is None:
            return None, earliest_arrival
        return window.start_time - timedelta(hours=drive_hours), window.start_time

    def build_route(
        self,
        request: TravelPlanRequest,
        objective: OptimizationObjective,
        forecasts: Dict[str, List[WeatherSample]],
        interval_hours: float,
    ) -> Tuple[Route, List[str]]:
        """Sequence, build legs and collect weather warnings for one objective."""
        cfg = self.cfg
        ordered = sequence(
            request.start,
            request.destinations,
            objective,
            cfg.fuel_consumption_l_per_100km,
            cfg.fuel_price_per_liter,
        )

        legs: List[Leg] = []
        warnings: List[str] = []
        ready_at = request.start_date
        for seq in ordered:
            hours = driving_time_hours(seq.distance_km, cfg.average_speed_kmh)
            forecast = forecasts.get(seq.destination.name, [])
            departure, ready_at = self._recommend_departure(request, seq, forecast, hours, interval_hours, ready_at)
            legs.append(
                Leg(
                    origin=seq.origin,
                    destination=seq.destination,
                    distance_km=seq.distance_km,
                    driving_time_hours=hours,
                    fuel_cost=fuel_cost(seq.distance_km, cfg.fuel_consumption_l_per_100km, cfg.fuel_price_per_liter),
                    forecast=forecast,
                    recommended_departure=departure,
                )
            )
            warnings.extend(self._weather_warnings(request, seq.destination.name, forecast))

        compliant = bool(legs) and all(
            any(meets_range(s, request.temperature_range) for s in leg.forecast) for leg in legs
        )
        all_samples = [s for leg in legs for s in leg.forecast]
        rating = overall_rating(all_samples, request.temperature_range, request.avoid_rain)

        route = Route.from_legs(legs, weather_compliant=compliant, overall_weather_rating=rating)
        return route, warnings

    @staticmethod
    def _weather_warnings(request: TravelPlanRequest, name: str, forecast: List[WeatherSample]) -> List[str]:
        if not forecast:
            return [f"{name}: No forecast available, weather unverified"]

        out: List[str] = []
        if not any(meets_range(s, request.temperature_range) for s in forecast):
            out.append(f"{name}: Temperatures may be outside preferred range")
        if request.avoid_rain and any(s.condition == WeatherCondition.RAINY for s in forecast):
            out.append(f"{name}: Rain expected during visit period")
        return out

    # ---------- Planning ----------

    def plan(self, request: TravelPlanRequest, include_alternates: bool = True) -> FeasibilityResult:
        self.validate(request)
        cfg = self.cfg

        # forecasts and the schedule work in naive local time
        request = request.model_copy(
            update={
                "start": _localize(request.start),
                "destinations": [_localize(d) for d in request.destinations],
                "start_date": _naive_local(request.start_date),
            }
        )
        now = _naive_local(self._clock())
        hours_ahead = hours_until(request.start_date, now)
        granularity = granularity_for(hours_ahead)
        interval = granularity.interval_hours
        log.info(
            "Planning %d destination(s), travel in %.1f h (%s forecast)",
            len(request.destinations), hours_ahead, granularity.detail_level,
        )

        # whole days, so repeated plans for the same trip share forecast cache keys
        horizon = ceil((max(0.0, hours_ahead) + cfg.forecast_horizon_hours) / 24.0) * 24.0
        forecasts = self.fetch_forecasts(request.destinations, horizon, interval)

        route, weather_warnings = self.build_route(request, request.objective, forecasts, interval)
        schedule = build_schedule(
            route, request.max_driving_hours_per_day, request.start_date, cfg.default_departure_hour
        )

        notices: List[str] = []
        for leg in route.legs:
            if leg.driving_time_hours > request.max_driving_hours_per_day:
                notices.append(
                    f"{leg.origin.name} to {leg.destination.name}: {leg.driving_time_hours:.1f} h of driving "
                    f"exceeds the {request.max_driving_hours_per_day} h daily limit"
                )
        if request.fuel_budget is not None and route.total_fuel_cost > request.fuel_budget:
            notices.append(
                f"Estimated fuel cost ${route.total_fuel_cost:.2f} exceeds budget ${request.fuel_budget:.2f}"
            )

        fuel_stops = []
        if self.gas is not None:
            fuel_stops = recommend_fuel_stops(
                route,
                self.gas,
                max_detour_km=cfg.fuel_stop_max_detour_km,
                per_stop=cfg.fuel_stops_per_destination,
                radius_km=cfg.fuel_stop_radius_km,
                max_workers=cfg.max_forecast_workers,
            )

        alternates: List[Route] = []
        if include_alternates:
            seen = {tuple(route.stop_names)}
            for objective in ALTERNATE_OBJECTIVES:
                if objective == request.objective:
                    continue
                alt, _ = self.build_route(request, objective, forecasts, interval)
                key = tuple(alt.stop_names)
                if key not in seen:
                    seen.add(key)
                    alternates.append(alt)

        days = travel_days(schedule)
        budget = daily_fuel_budget(route, days, cfg.fuel_consumption_l_per_100km) if days > 0 else None

        score_value, label = score(route, weather_warnings, request.fuel_budget)
        log.info("Feasibility %.1f (%s), %d warning(s)", score_value, label, len(weather_warnings) + len(notices))

        return FeasibilityResult(
            score=score_value,
            recommendation_label=label,
            warnings=weather_warnings + notices,
            route=route,
            alternates=alternates,
            schedule=schedule,
            fuel_stops=fuel_stops,
            daily_fuel=budget,
            forecast_granularity=granularity,
            forecast_confidence=confidence_for(hours_ahead),
        )


def plan_trip(
    request: TravelPlanRequest,
    weather_provider: WeatherProvider,
    gas_provider: Optional[GasPriceProvider] = None,
    cfg: Optional[Settings] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> FeasibilityResult:
    return TripPlanner(weather_provider, gas_provider, cfg=cfg, clock=clock).plan(request)
