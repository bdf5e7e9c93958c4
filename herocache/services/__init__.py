"""
Services layer.

This package contains the read-through cache coordinators and the session
service, which coordinate between the local store and the remote source.
"""

from .cache_coordinator import (
    CacheCoordinator,
    HeroCache,
    HeroChildCache,
    HeroLocationsCache,
    HeroTransformationsCache,
)
from .session_service import SessionService

__all__ = [
    "CacheCoordinator",
    "HeroCache",
    "HeroChildCache",
    "HeroLocationsCache",
    "HeroTransformationsCache",
    "SessionService",
]
