"""
Scenario API Routes.

- GET /check - Whether a slug is cached or can be generated
- GET /related - Related scenarios for a slug
- GET /cache/stats - Scenario cache statistics
- GET /cache/trending - Most accessed cached scenarios
- DELETE /cache/{slug} - Invalidate cached content for a slug
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from scenario_engine.config import settings
from scenario_engine.middleware import scenario_limit
from scenario_engine.scenarios.cache_manager import ScenarioCacheManager
from scenario_engine.scenarios.catalog import PREDEFINED_SCENARIOS
from scenario_engine.scenarios.codec import parse_request_slug
from scenario_engine.scenarios.dependencies import get_cache_manager
from scenario_engine.scenarios.schemas import (
    CacheStatsResponse,
    InvalidationResponse,
    RelatedScenario,
    ScenarioCheckResponse,
    TrendingResponse,
)
from scenario_engine.scenarios.similarity import find_related_scenarios

router = APIRouter()

INVALID_SLUG = "Invalid scenario slug format"


@router.get("/check", response_model=ScenarioCheckResponse)
@scenario_limit
async def check_scenario(
    request: Request,
    slug: str = Query(..., min_length=1),
    locale: str = Query("en", min_length=2, max_length=10),
    manager: ScenarioCacheManager = Depends(get_cache_manager),
):
    """Check whether a scenario is cached, and whether it could be generated."""
    cached = manager.get_scenario(slug, locale)
    if cached is not None:
        return ScenarioCheckResponse(
            slug=slug,
            locale=locale,
            exists=True,
            cached=True,
            can_generate=True,
            params=cached.metadata.params,
        )

    params = parse_request_slug(slug)
    if params is None:
        raise HTTPException(status_code=400, detail=INVALID_SLUG)

    return ScenarioCheckResponse(
        slug=slug,
        locale=locale,
        exists=False,
        cached=False,
        can_generate=True,
        params=params,
    )


@router.get("/related", response_model=List[RelatedScenario])
@scenario_limit
async def related_scenarios(
    request: Request,
    slug: str = Query(..., min_length=1),
    limit: int = Query(settings.RELATED_MAX_RESULTS, ge=1, le=20),
):
    """Rank variations and catalog scenarios related to a slug."""
    params = parse_request_slug(slug)
    if params is None:
        raise HTTPException(status_code=400, detail=INVALID_SLUG)

    return find_related_scenarios(
        params,
        max_results=limit,
        predefined=PREDEFINED_SCENARIOS,
    )


@router.get("/cache/stats", response_model=CacheStatsResponse)
async def cache_stats(manager: ScenarioCacheManager = Depends(get_cache_manager)):
    return CacheStatsResponse.from_dict(manager.get_stats().to_dict())


@router.get("/cache/trending", response_model=TrendingResponse)
async def trending_scenarios(
    limit: int = Query(10, ge=1, le=100),
    manager: ScenarioCacheManager = Depends(get_cache_manager),
):
    return TrendingResponse(keys=manager.get_trending_scenarios(limit))


@router.delete("/cache/{slug}", response_model=InvalidationResponse)
async def invalidate_scenario(
    slug: str,
    locale: Optional[str] = Query(None),
    manager: ScenarioCacheManager = Depends(get_cache_manager),
):
    """Drop cached content for one locale, or all locales when none is given."""
    removed = manager.invalidate_scenario(slug, locale)
    return InvalidationResponse(slug=slug, locale=locale, removed=removed)
