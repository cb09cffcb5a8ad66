from __future__ import annotations

from typing import Optional, Sequence, Tuple

from weather_traveler.core.models import Route

LABEL_EXCELLENT = "Excellent — highly recommended"
LABEL_GOOD = "Good — minor considerations"
LABEL_ACCEPTABLE = "Acceptable — consider alternatives"
LABEL_CHALLENGING = "Significant challenges — adjust preferences"


def recommendation_label(score_value: float) -> str:
    if score_value >= 80:
        return LABEL_EXCELLENT
    if score_value >= 60:
        return LABEL_GOOD
    if score_value >= 40:
        return LABEL_ACCEPTABLE
    return LABEL_CHALLENGING


def score(route: Route, weather_warnings: Sequence[str], fuel_budget: Optional[float] = None) -> Tuple[float, str]:
    """
    Aggregate feasibility of a planned route.

      compliance  30 if weather-compliant else 10
      budget      25 within budget / 10 over budget / 20 with no budget
      rating      overall weather rating x 4.5
      warnings    20 minus 5 per warning, floored at 0

    The raw sum is returned unclamped (a perfect route scores above 100).
    """
    compliance = 30.0 if route.weather_compliant else 10.0

    if fuel_budget is None:
        budget = 20.0
    elif route.total_fuel_cost <= fuel_budget:
        budget = 25.0
    else:
        budget = 10.0

    rating = route.overall_weather_rating * 4.5
    warnings = max(0.0, 20.0 - len(weather_warnings) * 5.0)

    total = compliance + budget + rating + warnings
    return total, recommendation_label(total)
