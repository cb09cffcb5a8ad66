"""KML / CSV / plain-text exports of a planned route."""
from __future__ import annotations

import csv
import io
import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import List, Sequence

from weather_traveler.core.models import Coordinate, Route, ScheduleEntry
from weather_traveler.core.scoring import summarize_forecast

log = logging.getLogger(__name__)

KML_NS = "http://www.opengis.net/kml/2.2"
ROUTE_LINE_COLOR = "7f00ffff"  # aabbggrr, semi-transparent yellow
CSV_TIME_FORMAT = "%Y-%m-%d %H:%M"


def _kml_coord(c: Coordinate) -> str:
    # KML wants lon,lat,alt
    return f"{c.longitude:.6f},{c.latitude:.6f},0"


def _placemark(parent: ET.Element, name: str, coord: Coordinate, description: str = "") -> None:
    pm = ET.SubElement(parent, "Placemark")
    ET.SubElement(pm, "name").text = name
    if description:
        ET.SubElement(pm, "description").text = description
    point = ET.SubElement(pm, "Point")
    ET.SubElement(point, "coordinates").text = _kml_coord(coord)


def to_kml(route: Route, title: str) -> str:
    """Google Earth document: one placemark per stop plus the route line."""
    kml = ET.Element("kml", xmlns=KML_NS)
    doc = ET.SubElement(kml, "Document")
    ET.SubElement(doc, "name").text = title

    style = ET.SubElement(doc, "Style", id="routeLine")
    line_style = ET.SubElement(style, "LineStyle")
    ET.SubElement(line_style, "color").text = ROUTE_LINE_COLOR
    ET.SubElement(line_style, "width").text = "4"

    folder = ET.SubElement(doc, "Folder")
    ET.SubElement(folder, "name").text = "Route"

    for i, leg in enumerate(route.legs):
        if i == 0:
            _placemark(folder, f"Start: {leg.origin.name}", leg.origin.coordinate)

        desc = f"Distance: {leg.distance_km:.1f} km"
        summary = summarize_forecast(leg.forecast)
        if summary is not None:
            desc += (
                f"; {summary.min_temperature:.0f}-{summary.max_temperature:.0f} C,"
                f" mostly {summary.most_common_condition.value.replace('_', ' ')}"
            )
        _placemark(folder, leg.destination.name, leg.destination.coordinate, desc)

    if route.legs:
        line_pm = ET.SubElement(folder, "Placemark")
        ET.SubElement(line_pm, "name").text = "Driving route"
        ET.SubElement(line_pm, "styleUrl").text = "#routeLine"
        line = ET.SubElement(line_pm, "LineString")
        ET.SubElement(line, "tessellate").text = "1"
        points = [route.legs[0].origin.coordinate] + [leg.destination.coordinate for leg in route.legs]
        ET.SubElement(line, "coordinates").text = " ".join(_kml_coord(c) for c in points)

    ET.indent(kml)
    body = ET.tostring(kml, encoding="unicode")
    return '<?xml version="1.0" encoding="UTF-8"?>\n' + body + "\n"


CSV_COLUMNS = [
    "departure",
    "from",
    "to",
    "distance_km",
    "driving_hours",
    "fuel_cost",
    "avg_temp_c",
    "conditions",
]


def to_csv(schedule: Sequence[ScheduleEntry]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(CSV_COLUMNS)
    for entry in schedule:
        leg = entry.leg
        summary = summarize_forecast(leg.forecast)
        writer.writerow([
            entry.departure.strftime(CSV_TIME_FORMAT),
            leg.origin.name,
            leg.destination.name,
            f"{leg.distance_km:.1f}",
            f"{leg.driving_time_hours:.2f}",
            f"{leg.fuel_cost:.2f}",
            f"{summary.average_temperature:.1f}" if summary else "",
            summary.most_common_condition.value if summary else "",
        ])
    return buf.getvalue()


def summary_report(route: Route, schedule: Sequence[ScheduleEntry], warnings: Sequence[str]) -> str:
    lines: List[str] = [
        "=== WEATHER TRAVELER ROUTE SUMMARY ===",
        f"Total Distance: {route.total_distance_km:.1f} km",
        f"Total Driving Time: {route.total_driving_hours:.1f} h",
        f"Estimated Fuel Cost: ${route.total_fuel_cost:.2f}",
        f"Weather Rating: {route.overall_weather_rating:.1f}/10"
        + ("" if route.weather_compliant else " (preferences not met)"),
        "",
        "Itinerary:",
    ]
    for i, entry in enumerate(schedule, start=1):
        leg = entry.leg
        lines.append(
            f"{i}. {entry.departure.strftime(CSV_TIME_FORMAT)}  {leg.origin.name} to {leg.destination.name}"
            f" ({leg.distance_km:.1f} km, {leg.driving_time_hours:.1f} h)"
        )
        summary = summarize_forecast(leg.forecast)
        if summary is not None:
            lines.append(
                f"   Forecast: avg {summary.average_temperature:.1f} C"
                f" ({summary.min_temperature:.1f} to {summary.max_temperature:.1f}),"
                f" {summary.rainy_count} rainy / {summary.sunny_count} sunny of {summary.sample_count}"
            )

    if warnings:
        lines += ["", "Warnings:"]
        lines += [f"- {w}" for w in warnings]

    return "\n".join(lines) + "\n"


def write_export(path: Path, text: str) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    log.info("Wrote %s", path)
    return path
