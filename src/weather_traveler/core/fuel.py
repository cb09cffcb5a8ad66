"""Fuel volume/cost estimates and fuel-stop recommendations."""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from statistics import mean
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence, Tuple

from weather_traveler.contracts.forecast_contract import FuelBudget
from weather_traveler.core.geo import distance_km
from weather_traveler.core.models import Coordinate, FuelStation, Route

if TYPE_CHECKING:
    from weather_traveler.providers.base import GasPriceProvider

log = logging.getLogger(__name__)

DEFAULT_CONSUMPTION_L_PER_100KM = 8.5
DEFAULT_PRICE_PER_LITER = 1.50  # USD


def fuel_liters(distance: float, consumption_l_per_100km: float = DEFAULT_CONSUMPTION_L_PER_100KM) -> float:
    return (distance / 100.0) * consumption_l_per_100km


def fuel_cost(
    distance: float,
    consumption_l_per_100km: float = DEFAULT_CONSUMPTION_L_PER_100KM,
    price_per_liter: float = DEFAULT_PRICE_PER_LITER,
) -> float:
    return fuel_liters(distance, consumption_l_per_100km) * price_per_liter


def rank_stations_by_price(stations: Sequence[FuelStation], limit: int) -> List[FuelStation]:
    # sorted() is stable: equal prices keep their input order
    return sorted(stations, key=lambda s: s.price_per_liter)[:max(0, limit)]


def average_price(stations: Sequence[FuelStation]) -> Optional[float]:
    if not stations:
        return None
    return float(mean(s.price_per_liter for s in stations))


def daily_fuel_budget(
    route: Route,
    days_of_travel: int,
    consumption_l_per_100km: float = DEFAULT_CONSUMPTION_L_PER_100KM,
    price_per_liter: Optional[float] = None,
) -> FuelBudget:
    """
    Split the route's fuel cost across *days_of_travel*.

    Callers validate the day count first; a non-positive value is a
    precondition violation and raises ZeroDivisionError. When
    *price_per_liter* is given the total is re-priced from the liters
    needed instead of using the per-leg costs baked into the route.
    """
    if days_of_travel <= 0:
        raise ZeroDivisionError(f"days_of_travel must be positive, got {days_of_travel}")

    liters = fuel_liters(route.total_distance_km, consumption_l_per_100km)
    total = liters * price_per_liter if price_per_liter is not None else route.total_fuel_cost

    return FuelBudget(
        total_cost=total,
        daily_budget=total / days_of_travel,
        days_of_travel=days_of_travel,
        consumption_liters=liters,
    )


def _location_key(c: Coordinate) -> Tuple[float, float]:
    return (round(c.latitude, 6), round(c.longitude, 6))


def recommend_fuel_stops(
    route: Route,
    gas_provider: "GasPriceProvider",
    max_detour_km: float = 10.0,
    per_stop: int = 3,
    radius_km: float = 25.0,
    limit: int = 10,
    max_workers: int = 4,
) -> List[FuelStation]:
    """
    Cheapest stations near each leg's destination, within *max_detour_km*.

    Lookups for the individual stops run concurrently; a failing lookup is
    logged and contributes nothing. Results keep route order and are
    de-duplicated by station location.
    """
    stops = [leg.destination for leg in route.legs]
    if not stops:
        return []

    def _lookup(coord: Coordinate) -> List[FuelStation]:
        try:
            return gas_provider.stations_near(coord, radius_km, limit)
        except Exception as exc:
            log.warning("Gas price lookup failed near (%.4f, %.4f): %s", coord.latitude, coord.longitude, exc)
            return []

    with ThreadPoolExecutor(max_workers=max(1, max_workers)) as pool:
        results = list(pool.map(_lookup, [s.coordinate for s in stops]))

    seen: Dict[Tuple[float, float], FuelStation] = {}
    for stop, stations in zip(stops, results):
        nearby = [st for st in stations if distance_km(stop.coordinate, st.location) <= max_detour_km]
        for st in rank_stations_by_price(nearby, per_stop):
            seen.setdefault(_location_key(st.location), st)

    return list(seen.values())
