from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from rich.console import Console
from rich.table import Table

from weather_traveler.config import settings
from weather_traveler.core.engine import PlanValidationError, TripPlanner
from weather_traveler.core.models import FeasibilityResult, TravelPlanRequest
from weather_traveler.export import summary_report, to_csv, to_kml, write_export
from weather_traveler.providers.combined import build_cache, build_gas_provider, build_weather_provider


def _read_trip(path: Path) -> TravelPlanRequest:
    data = json.loads(path.read_text(encoding="utf-8"))
    return TravelPlanRequest(**data)


def _route_table(result: FeasibilityResult) -> Table:
    table = Table(title="Recommended route")
    table.add_column("#", justify="right")
    table.add_column("Departure")
    table.add_column("From")
    table.add_column("To")
    table.add_column("km", justify="right")
    table.add_column("Hours", justify="right")
    table.add_column("Fuel $", justify="right")
    table.add_column("Forecast pts", justify="right")

    for i, entry in enumerate(result.schedule, start=1):
        leg = entry.leg
        table.add_row(
            str(i),
            entry.departure.strftime("%a %Y-%m-%d %H:%M"),
            leg.origin.name,
            leg.destination.name,
            f"{leg.distance_km:.1f}",
            f"{leg.driving_time_hours:.1f}",
            f"{leg.fuel_cost:.2f}",
            str(len(leg.forecast)),
        )
    return table


def _alternates_table(result: FeasibilityResult) -> Table:
    table = Table(title="Alternate orderings")
    table.add_column("Stops")
    table.add_column("km", justify="right")
    table.add_column("Fuel $", justify="right")
    table.add_column("Rating", justify="right")
    for alt in result.alternates:
        table.add_row(
            " > ".join(alt.stop_names),
            f"{alt.total_distance_km:.1f}",
            f"{alt.total_fuel_cost:.2f}",
            f"{alt.overall_weather_rating:.1f}",
        )
    return table


def _fuel_table(result: FeasibilityResult) -> Table:
    table = Table(title="Cheapest fuel near stops")
    table.add_column("Station")
    table.add_column("Brand")
    table.add_column("$/L", justify="right")
    table.add_column("$/gal", justify="right")
    table.add_column("km off", justify="right")
    for st in result.fuel_stops:
        table.add_row(
            st.name,
            st.brand,
            f"{st.price_per_liter:.3f}",
            f"{st.price_per_gallon:.2f}",
            f"{st.distance_km:.1f}",
        )
    return table


def main() -> None:
    ap = argparse.ArgumentParser(description="Plan a weather-aware road trip")
    ap.add_argument("--trip", default="trips/sample_trip.json", help="Path to a trip JSON file")
    ap.add_argument("--provider", default=None, help="Weather provider stack, e.g. mock or file+mock")
    ap.add_argument("--no-fuel", action="store_true", help="Skip fuel-station lookups")
    ap.add_argument("--kml", type=Path, default=None, help="Write the route as KML")
    ap.add_argument("--csv", type=Path, default=None, help="Write the schedule as CSV")
    ap.add_argument("--summary", type=Path, default=None, help="Write a plain-text summary")
    ap.add_argument("--debug", action="store_true")
    args = ap.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.debug else settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    console = Console()
    request = _read_trip(Path(args.trip))

    cache = build_cache(settings)
    weather = build_weather_provider(args.provider, settings, cache=cache)
    gas = None if args.no_fuel else build_gas_provider(settings, cache=cache)

    try:
        result = TripPlanner(weather, gas, cfg=settings).plan(request)
    except PlanValidationError as exc:
        console.print(f"[red]Invalid trip:[/red] {exc}")
        raise SystemExit(2)

    route = result.route
    gran = result.forecast_granularity
    console.print(_route_table(result))
    console.print(
        f"Total {route.total_distance_km:.1f} km, {route.total_driving_hours:.1f} h driving, "
        f"${route.total_fuel_cost:.2f} fuel"
    )
    if result.daily_fuel is not None:
        console.print(
            f"Fuel per day: ${result.daily_fuel.daily_budget:.2f} over {result.daily_fuel.days_of_travel} day(s)"
        )
    if gran is not None:
        console.print(
            f"Forecast: {gran.detail_level} ({gran.interval_hours:g} h steps), "
            f"confidence {result.forecast_confidence:.0%}"
        )

    if result.alternates:
        console.print(_alternates_table(result))
    if result.fuel_stops:
        console.print(_fuel_table(result))

    for w in result.warnings:
        console.print(f"[yellow]! {w}[/yellow]")

    color = "green" if result.score >= 60 else "yellow" if result.score >= 40 else "red"
    console.print(f"[bold {color}]{result.score:.1f}  {result.recommendation_label}[/bold {color}]")

    if args.kml:
        out = write_export(args.kml, to_kml(route, f"Trip from {request.start.name}"))
        console.print(f"Saved: {out.resolve()}")
    if args.csv:
        out = write_export(args.csv, to_csv(result.schedule))
        console.print(f"Saved: {out.resolve()}")
    if args.summary:
        out = write_export(args.summary, summary_report(route, result.schedule, result.warnings))
        console.print(f"Saved: {out.resolve()}")


if __name__ == "__main__":
    main()
