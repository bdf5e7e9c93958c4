"""
Hero catalog routes.

Each route is a thin wrapper around a cache coordinator's load; errors are
rendered by the application's CatalogError handler.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends

from herocache import schemas
from herocache.core.dependencies import get_hero_cache, get_locations_cache, get_transformations_cache
from herocache.services import HeroCache, HeroLocationsCache, HeroTransformationsCache

logger = logging.getLogger("HeroesRouter")

router = APIRouter()


@router.get("", response_model=List[schemas.Hero])
async def list_heroes(name: str = "", cache: HeroCache = Depends(get_hero_cache)):
    """List heroes whose name starts with `name` (all heroes by default), sorted by name."""
    return await cache.load(name)


@router.get("/{hero_id}/locations", response_model=List[schemas.Location])
async def list_locations(hero_id: str, cache: HeroLocationsCache = Depends(get_locations_cache)):
    """
    List the places a hero was seen.

    Returns 404 if the hero itself has not been loaded yet.
    """
    locations = await cache.load(hero_id)
    # Validated from attributes so the parsed coordinate is included
    return [schemas.Location.model_validate(location) for location in locations]


@router.get("/{hero_id}/transformations", response_model=List[schemas.Transformation])
async def list_transformations(
    hero_id: str, cache: HeroTransformationsCache = Depends(get_transformations_cache)
):
    return await cache.load(hero_id)


@router.delete("/cache", response_model=schemas.StatusResponse)
async def clear_cache(cache: HeroCache = Depends(get_hero_cache)):
    """Empty the local store; the next load of anything fetches it again."""
    cleared = await cache.clear_all()
    message = "Cache cleared" if cleared else "Cache partially cleared"
    return {"success": cleared, "message": message}
