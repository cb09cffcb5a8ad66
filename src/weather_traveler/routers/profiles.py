"""Traveler profile endpoints: GET/PUT/DELETE /profiles/{user_id}."""
from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from weather_traveler.config import settings
from weather_traveler.profiles import (
    NotificationSettings,
    ProfileStore,
    TravelerProfile,
    TravelPreferences,
    validate_preferences,
)

router = APIRouter(prefix="/profiles", tags=["profiles"])


def get_store() -> ProfileStore:
    return ProfileStore(settings.profile_dir)


class ProfileUpdate(BaseModel):
    display_name: Optional[str] = None
    email: Optional[str] = None
    preferences: Optional[TravelPreferences] = None
    notifications: Optional[NotificationSettings] = None


class PreferenceCheck(BaseModel):
    valid: bool
    errors: List[str] = []


def _load(store: ProfileStore, user_id: str) -> TravelerProfile:
    try:
        return store.load(user_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/{user_id}", response_model=TravelerProfile)
def get_profile(user_id: str, store: ProfileStore = Depends(get_store)):
    return _load(store, user_id)


@router.put("/{user_id}", response_model=TravelerProfile)
def update_profile(user_id: str, body: ProfileUpdate, store: ProfileStore = Depends(get_store)):
    updates = body.model_dump(exclude_none=True)
    if not updates:
        raise HTTPException(status_code=400, detail="No fields to update")

    if body.preferences is not None:
        errors = validate_preferences(body.preferences)
        if errors:
            raise HTTPException(status_code=422, detail=errors)

    profile = _load(store, user_id)
    # keep nested models as models, not the dumped dicts
    changes = {k: getattr(body, k) for k in updates}
    return store.save(profile.model_copy(update=changes))


@router.post("/{user_id}/preferences/validate", response_model=PreferenceCheck)
def check_preferences(user_id: str, prefs: TravelPreferences):
    errors = validate_preferences(prefs)
    return PreferenceCheck(valid=not errors, errors=errors)


@router.delete("/{user_id}", status_code=204)
def delete_profile(user_id: str, store: ProfileStore = Depends(get_store)):
    try:
        deleted = store.delete(user_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not deleted:
        raise HTTPException(status_code=404, detail="Profile not found")
    return None
