"""Shared dependencies for FastAPI endpoints."""

from fastapi import Request

from herocache.services import HeroCache, HeroLocationsCache, HeroTransformationsCache, SessionService


def get_hero_cache(request: Request) -> HeroCache:
    """
    Dependency to get the hero coordinator from app state.

    The instance is created during application startup in the lifespan context.
    """
    return request.app.state.hero_cache


def get_locations_cache(request: Request) -> HeroLocationsCache:
    return request.app.state.locations_cache


def get_transformations_cache(request: Request) -> HeroTransformationsCache:
    return request.app.state.transformations_cache


def get_session_service(request: Request) -> SessionService:
    return request.app.state.session_service
