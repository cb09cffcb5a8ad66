from __future__ import annotations

from collections import Counter
from math import floor
from statistics import mean
from typing import List, Optional, Sequence

from weather_traveler.contracts.forecast_contract import ForecastSummary, WeatherWindow
from weather_traveler.core.models import TemperatureRange, WeatherCondition, WeatherSample


def _condition_score(condition: WeatherCondition, avoid_rain: bool) -> float:
    match condition:
        case WeatherCondition.SUNNY:
            return 4.0
        case WeatherCondition.PARTLY_CLOUDY:
            return 3.5
        case WeatherCondition.CLOUDY:
            return 2.5
        case WeatherCondition.FOGGY:
            return 1.5
        case WeatherCondition.RAINY:
            return 0.5 if avoid_rain else 2.0
        case WeatherCondition.STORMY:
            return 0.0
        case WeatherCondition.SNOWY:
            return 1.0
    raise ValueError(f"Unhandled weather condition: {condition!r}")


def _wind_score(wind_speed_kmh: float) -> float:
    if wind_speed_kmh < 20.0:
        return 3.0
    if wind_speed_kmh < 40.0:
        return 2.0
    return 1.0


def meets_range(sample: WeatherSample, temperature_range: TemperatureRange) -> bool:
    return temperature_range.min_celsius <= sample.temperature_c <= temperature_range.max_celsius


def rate_sample(sample: WeatherSample, temperature_range: TemperatureRange, avoid_rain: bool) -> float:
    """
    Travel suitability of a single sample on a 0..10 scale.

      temperature  3.0 inside the preferred range, else 0
      condition    0..4 (rain penalised harder when avoiding rain)
      wind         3 / 2 / 1 at <20, <40, >=40 km/h
    """
    temp = 3.0 if meets_range(sample, temperature_range) else 0.0
    return temp + _condition_score(sample.condition, avoid_rain) + _wind_score(sample.wind_speed_kmh)


def overall_rating(samples: Sequence[WeatherSample], temperature_range: TemperatureRange, avoid_rain: bool) -> float:
    if not samples:
        return 0.0
    return float(mean(rate_sample(s, temperature_range, avoid_rain) for s in samples))


def find_best_window(
    forecast: Sequence[WeatherSample],
    temperature_range: TemperatureRange,
    window_hours: float,
    interval_hours: float,
) -> Optional[WeatherWindow]:
    """
    Slide a fixed-size window over *forecast* and return the one whose mean
    temperature sits closest to the middle of the range.

    Every sample inside a candidate window must be within the range. Returns
    None when the forecast is too short or no window qualifies; the earliest
    window wins ties.
    """
    if interval_hours <= 0:
        raise ValueError(f"interval_hours must be positive, got {interval_hours}")

    # tolerance keeps e.g. 0.3 / 0.1 from flooring to 2
    size = floor(window_hours / interval_hours + 1e-9)
    if size < 1 or len(forecast) < size:
        return None

    center = temperature_range.midpoint
    best: Optional[Sequence[WeatherSample]] = None
    best_gap = 0.0

    for start in range(len(forecast) - size + 1):
        window = forecast[start:start + size]
        if not all(meets_range(s, temperature_range) for s in window):
            continue
        gap = abs(mean(s.temperature_c for s in window) - center)
        if best is None or gap < best_gap:
            best, best_gap = window, gap

    if best is None:
        return None

    return WeatherWindow(
        start_time=best[0].timestamp,
        end_time=best[-1].timestamp,
        average_temperature=float(mean(s.temperature_c for s in best)),
        conditions=[s.condition for s in best],
    )


def summarize_forecast(samples: Sequence[WeatherSample]) -> Optional[ForecastSummary]:
    if not samples:
        return None

    temps: List[float] = [s.temperature_c for s in samples]
    counts = Counter(s.condition for s in samples)
    # Counter.most_common keeps first-seen order on ties
    most_common = counts.most_common(1)[0][0]

    return ForecastSummary(
        average_temperature=float(mean(temps)),
        min_temperature=min(temps),
        max_temperature=max(temps),
        sample_count=len(samples),
        rainy_count=counts.get(WeatherCondition.RAINY, 0),
        sunny_count=counts.get(WeatherCondition.SUNNY, 0),
        most_common_condition=most_common,
    )
