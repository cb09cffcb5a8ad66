"""Traveler profiles persisted as one flat JSON file per user."""
from __future__ import annotations

import json
import logging
import re
from datetime import datetime, time, timezone
from pathlib import Path
from typing import List, Optional, Sequence

from pydantic import BaseModel, Field, ValidationError

from weather_traveler.core.models import (
    NamedLocation,
    OptimizationObjective,
    TemperatureRange,
    TravelPlanRequest,
)

log = logging.getLogger(__name__)

_SAFE_ID = re.compile(r"^[A-Za-z0-9_.-]+$")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TravelPreferences(BaseModel):
    min_temperature_c: float = 15.0
    max_temperature_c: float = 25.0
    avoid_rain: bool = True
    departure_time: time = time(8, 0)
    max_driving_hours_per_day: int = 8
    fuel_type: str = "regular"
    preferred_brands: List[str] = Field(default_factory=lambda: ["Shell", "Exxon"])

    # Relative priorities; validate_preferences checks they sum to 1.0
    weather_weight: float = 0.4
    cost_weight: float = 0.3
    time_weight: float = 0.3

    def to_request(
        self,
        start: NamedLocation,
        destinations: Sequence[NamedLocation],
        travel_date: datetime,
        objective: OptimizationObjective = OptimizationObjective.SHORTEST_DISTANCE,
        fuel_budget: Optional[float] = None,
    ) -> TravelPlanRequest:
        """Planning request for *travel_date*, departing at the preferred time of day."""
        start_date = datetime.combine(travel_date.date(), self.departure_time, tzinfo=travel_date.tzinfo)
        return TravelPlanRequest(
            start=start,
            destinations=list(destinations),
            temperature_range=TemperatureRange(min_celsius=self.min_temperature_c, max_celsius=self.max_temperature_c),
            avoid_rain=self.avoid_rain,
            max_driving_hours_per_day=self.max_driving_hours_per_day,
            start_date=start_date,
            objective=objective,
            fuel_budget=fuel_budget,
        )


class NotificationSettings(BaseModel):
    weather_alerts: bool = True
    price_alerts: bool = False
    route_updates: bool = True
    daily_weather_digest: bool = False


class TravelerProfile(BaseModel):
    user_id: str
    display_name: str = ""
    email: Optional[str] = None
    created_at: datetime = Field(default_factory=_utcnow)
    last_active_at: datetime = Field(default_factory=_utcnow)
    preferences: TravelPreferences = Field(default_factory=TravelPreferences)
    notifications: NotificationSettings = Field(default_factory=NotificationSettings)


def validate_preferences(prefs: TravelPreferences) -> List[str]:
    """Human-readable problems with *prefs*; empty when they are usable."""
    errors: List[str] = []

    if prefs.min_temperature_c >= prefs.max_temperature_c:
        errors.append("Minimum temperature must be less than maximum temperature")

    total = prefs.weather_weight + prefs.cost_weight + prefs.time_weight
    if abs(total - 1.0) > 0.01:
        errors.append(f"Priority weights must sum to 1.0 (currently {total:.2f})")

    if not 1 <= prefs.max_driving_hours_per_day <= 16:
        errors.append("Maximum driving hours per day must be between 1 and 16")

    return errors


class ProfileStore:
    """
    Load/save profiles under *root* as ``<user_id>.json``.

    A missing or unreadable profile loads as a fresh default one; it is only
    written back on ``save``.
    """

    def __init__(self, root: Path):
        self.root = Path(root)

    def _path(self, user_id: str) -> Path:
        if not _SAFE_ID.match(user_id):
            raise ValueError(f"Invalid user id: {user_id!r}")
        return self.root / f"{user_id}.json"

    def exists(self, user_id: str) -> bool:
        return self._path(user_id).is_file()

    def load(self, user_id: str) -> TravelerProfile:
        path = self._path(user_id)
        if not path.is_file():
            log.info("No profile for %s, using defaults", user_id)
            return TravelerProfile(user_id=user_id, display_name=user_id)

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            profile = TravelerProfile.model_validate(data)
        except (OSError, ValueError, ValidationError) as exc:
            log.warning("Profile %s unreadable (%s), using defaults", path, exc)
            return TravelerProfile(user_id=user_id, display_name=user_id)

        return profile.model_copy(update={"last_active_at": _utcnow()})

    def save(self, profile: TravelerProfile) -> TravelerProfile:
        path = self._path(profile.user_id)
        path.parent.mkdir(parents=True, exist_ok=True)
        updated = profile.model_copy(update={"last_active_at": _utcnow()})
        path.write_text(json.dumps(updated.model_dump(mode="json"), indent=2), encoding="utf-8")
        log.info("Saved profile %s", profile.user_id)
        return updated

    def delete(self, user_id: str) -> bool:
        path = self._path(user_id)
        if not path.is_file():
            return False
        path.unlink()
        return True
