"""Greedy nearest-neighbour ordering of destinations."""
from __future__ import annotations

import logging
from typing import Callable, List, Sequence

from weather_traveler.contracts.forecast_contract import SequencedLeg
from weather_traveler.core.fuel import DEFAULT_CONSUMPTION_L_PER_100KM, DEFAULT_PRICE_PER_LITER, fuel_cost
from weather_traveler.core.geo import distance_km
from weather_traveler.core.models import NamedLocation, OptimizationObjective

log = logging.getLogger(__name__)


def _cost_function(
    objective: OptimizationObjective,
    consumption_l_per_100km: float,
    price_per_liter: float,
) -> Callable[[float], float]:
    match objective:
        case OptimizationObjective.SHORTEST_DISTANCE | OptimizationObjective.FASTEST_ROUTE:
            return lambda d: d
        case OptimizationObjective.BEST_WEATHER | OptimizationObjective.AVOID_RAIN:
            # Weather-aware ranking is not implemented; these order by distance.
            log.debug("Objective %s sequences by distance", objective.value)
            return lambda d: d
        case OptimizationObjective.LOWEST_FUEL_COST:
            return lambda d: fuel_cost(d, consumption_l_per_100km, price_per_liter)
    raise ValueError(f"Unhandled optimization objective: {objective!r}")


def sequence(
    start: NamedLocation,
    destinations: Sequence[NamedLocation],
    objective: OptimizationObjective,
    consumption_l_per_100km: float = DEFAULT_CONSUMPTION_L_PER_100KM,
    price_per_liter: float = DEFAULT_PRICE_PER_LITER,
) -> List[SequencedLeg]:
    """
    Visit order for *destinations* starting at *start*.

    Repeatedly hops to the cheapest unvisited destination under the
    objective's cost function. Ties go to the destination listed first.
    O(n^2); fine for itinerary-sized inputs. No destinations gives an empty
    route.
    """
    cost_of = _cost_function(objective, consumption_l_per_100km, price_per_liter)

    remaining = list(destinations)
    current = start
    legs: List[SequencedLeg] = []

    while remaining:
        best_idx = 0
        best_cost = best_dist = 0.0
        for i, candidate in enumerate(remaining):
            d = distance_km(current.coordinate, candidate.coordinate)
            c = cost_of(d)
            if i == 0 or c < best_cost:
                best_idx, best_cost, best_dist = i, c, d

        nxt = remaining.pop(best_idx)
        legs.append(SequencedLeg(origin=current, destination=nxt, cost=best_cost, distance_km=best_dist))
        current = nxt

    return legs
