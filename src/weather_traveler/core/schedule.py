from __future__ import annotations

from datetime import datetime, timedelta
from typing import List, Sequence

from weather_traveler.core.models import Route, ScheduleEntry

DEFAULT_DEPARTURE_HOUR = 8


def _day_start(dt: datetime) -> datetime:
    return dt.replace(hour=0, minute=0, second=0, microsecond=0)


def build_schedule(
    route: Route,
    max_daily_hours: float,
    start_date: datetime,
    departure_hour: int = DEFAULT_DEPARTURE_HOUR,
) -> List[ScheduleEntry]:
    """
    Pack the route's legs into driving days.

    A leg that fits under today's remaining hours departs today; otherwise the
    schedule rolls to the next calendar day. A leg longer than the daily cap
    still gets scheduled, alone on its own day, so packing always progresses.
    Each departure is the leg's recommended departure when it has one, or the
    day's default departure hour.
    """
    if max_daily_hours <= 0:
        raise ValueError(f"max_daily_hours must be positive, got {max_daily_hours}")

    current_day = _day_start(start_date)
    daily_hours = 0.0
    out: List[ScheduleEntry] = []

    for leg in route.legs:
        if daily_hours + leg.driving_time_hours <= max_daily_hours:
            daily_hours += leg.driving_time_hours
        else:
            current_day += timedelta(days=1)
            daily_hours = leg.driving_time_hours

        departure = leg.recommended_departure or current_day + timedelta(hours=departure_hour)
        out.append(ScheduleEntry(departure=departure, leg=leg))

    return out


def travel_days(schedule: Sequence[ScheduleEntry]) -> int:
    return len({entry.day for entry in schedule})
