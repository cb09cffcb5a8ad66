from datetime import datetime

import pytest

from weather_traveler.core.fuel import (
    average_price,
    daily_fuel_budget,
    fuel_cost,
    fuel_liters,
    rank_stations_by_price,
    recommend_fuel_stops,
)
from weather_traveler.core.models import Coordinate, FuelStation, Leg, NamedLocation, Route
from weather_traveler.providers.base import GasPriceProvider


def _station(name: str, price: float, lat: float = 36.0, lon: float = -115.0) -> FuelStation:
    return FuelStation(name=name, brand="Shell", location=Coordinate(latitude=lat, longitude=lon), price_per_liter=price)


def _route(distance_km: float, fuel: float, stops=((36.0, -115.0),)) -> Route:
    legs = []
    prev = NamedLocation(name="Start", coordinate=Coordinate(latitude=35.0, longitude=-114.0))
    share = len(stops)
    for i, (lat, lon) in enumerate(stops):
        dest = NamedLocation(name=f"Stop {i}", coordinate=Coordinate(latitude=lat, longitude=lon))
        legs.append(
            Leg(
                origin=prev,
                destination=dest,
                distance_km=distance_km / share,
                driving_time_hours=1.0,
                fuel_cost=fuel / share,
            )
        )
        prev = dest
    return Route.from_legs(legs, weather_compliant=True, overall_weather_rating=5.0)


def test_fuel_cost_defaults():
    assert fuel_liters(100.0) == pytest.approx(8.5)
    assert fuel_cost(100.0) == pytest.approx(12.75)
    assert fuel_cost(250.0, consumption_l_per_100km=6.0, price_per_liter=2.0) == pytest.approx(30.0)


def test_rank_by_price_is_stable_and_limited():
    stations = [_station("A", 1.60), _station("B", 1.45), _station("C", 1.60), _station("D", 1.45)]

    ranked = rank_stations_by_price(stations, 3)
    assert [s.name for s in ranked] == ["B", "D", "A"]
    assert rank_stations_by_price(stations, 0) == []
    assert rank_stations_by_price(stations, -1) == []


def test_average_price():
    assert average_price([_station("A", 1.0), _station("B", 2.0)]) == pytest.approx(1.5)
    assert average_price([]) is None


def test_price_per_gallon():
    assert _station("A", 1.0).price_per_gallon == pytest.approx(3.78541)


def test_daily_budget_splits_route_cost():
    budget = daily_fuel_budget(_route(1000.0, 127.5), 3)

    assert budget.total_cost == pytest.approx(127.5)
    assert budget.daily_budget == pytest.approx(42.5)
    assert budget.days_of_travel == 3
    assert budget.consumption_liters == pytest.approx(85.0)


def test_daily_budget_reprices_when_price_given():
    budget = daily_fuel_budget(_route(1000.0, 127.5), 2, price_per_liter=2.0)
    assert budget.total_cost == pytest.approx(170.0)
    assert budget.daily_budget == pytest.approx(85.0)


def test_daily_budget_rejects_zero_days():
    with pytest.raises(ZeroDivisionError):
        daily_fuel_budget(_route(1000.0, 127.5), 0)


class _FakeGas(GasPriceProvider):
    def __init__(self, by_lat, fail_lat=None):
        self.by_lat = by_lat
        self.fail_lat = fail_lat

    def stations_near(self, coordinate, radius_km, limit):
        if coordinate.latitude == self.fail_lat:
            raise ConnectionError("price feed down")
        return self.by_lat.get(coordinate.latitude, [])


def test_recommend_fuel_stops_cheapest_within_detour():
    near = [
        _station("Cheap", 1.30, 36.01, -115.0),
        _station("Mid", 1.40, 36.02, -115.0),
        _station("Pricey", 1.70, 36.03, -115.0),
        _station("Cheaper", 1.35, 36.04, -115.0),
    ]
    far = _station("Far but cheap", 1.00, 36.5, -115.0)  # ~55 km away
    gas = _FakeGas({36.0: near + [far]})

    stops = recommend_fuel_stops(_route(100.0, 12.75), gas, max_detour_km=10.0, per_stop=3)

    assert [s.name for s in stops] == ["Cheap", "Cheaper", "Mid"]


def test_recommend_fuel_stops_dedupes_and_survives_failures(caplog):
    shared = _station("Shared", 1.30, 36.05, -115.0)
    gas = _FakeGas({36.0: [shared], 36.1: [shared]}, fail_lat=37.0)
    route = _route(300.0, 40.0, stops=((36.0, -115.0), (36.1, -115.0), (37.0, -115.0)))

    stops = recommend_fuel_stops(route, gas)

    assert [s.name for s in stops] == ["Shared"]
    assert "price feed down" in caplog.text


def test_recommend_fuel_stops_empty_route():
    empty = Route.from_legs([], weather_compliant=False, overall_weather_rating=0.0)
    assert recommend_fuel_stops(empty, _FakeGas({})) == []
