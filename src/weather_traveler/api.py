"""FastAPI REST host for the trip planner."""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from weather_traveler.cache.redis_client import RedisCache
from weather_traveler.config import settings
from weather_traveler.core.engine import PlanValidationError, TripPlanner
from weather_traveler.core.models import FeasibilityResult, TravelPlanRequest
from weather_traveler.providers.combined import build_cache, build_gas_provider, build_weather_provider
from weather_traveler.routers import profiles

logging.basicConfig(level=settings.log_level.upper())
log = logging.getLogger(__name__)

app = FastAPI(title="Weather Traveler", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(profiles.router)


# ---------------------------------------------------------------------------
# Module-level planner singletons (the cache persists across requests)
# ---------------------------------------------------------------------------
_cache = None
_planner_cache: Dict[str, TripPlanner] = {}


def _get_cache():
    global _cache
    if _cache is None:
        _cache = build_cache(settings)
    return _cache


def get_planner(provider: Optional[str] = None) -> TripPlanner:
    key = provider or settings.weather_provider
    if key not in _planner_cache:
        try:
            weather = build_weather_provider(key, settings, cache=_get_cache())
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        gas = build_gas_provider(settings, cache=_get_cache())
        _planner_cache[key] = TripPlanner(weather, gas, cfg=settings)
    return _planner_cache[key]


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@app.get("/health")
def health() -> Dict[str, Any]:
    cache = _get_cache()
    return {
        "status": "ok",
        "cache": "redis" if isinstance(cache, RedisCache) else "memory",
        "weather_provider": settings.weather_provider,
    }


@app.post("/plan", response_model=FeasibilityResult)
def plan(req: TravelPlanRequest, planner: TripPlanner = Depends(get_planner)):
    try:
        return planner.plan(req)
    except PlanValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        log.exception("Planning failed")
        raise HTTPException(status_code=500, detail=str(e))
