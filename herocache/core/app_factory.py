"""
Application factory for creating FastAPI app instances.

The lifespan owns every long-lived component: it opens the store, builds the
remote client and the coordinators, stores them on app.state for dependency
injection, and closes them again on shutdown.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from herocache.domain.exceptions import CatalogError

from .settings import Settings, get_settings

logger = logging.getLogger("AppFactory")


def attach_components(app: FastAPI, store, remote, token_store, settings: Settings) -> None:
    """
    Wire the coordinators and services onto app.state.

    Args:
        app: Application to configure
        store: Opened PersistenceStore
        remote: RemoteSource implementation
        token_store: Credential store
        settings: Settings carrying the behaviour flags
    """
    from herocache.services import HeroCache, HeroLocationsCache, HeroTransformationsCache, SessionService

    app.state.store = store
    app.state.remote = remote
    app.state.token_store = token_store
    app.state.hero_cache = HeroCache(store, remote, refetch_on_empty=settings.refetch_on_empty)
    app.state.locations_cache = HeroLocationsCache(store, remote, refetch_on_empty=settings.refetch_on_empty)
    app.state.transformations_cache = HeroTransformationsCache(
        store, remote, refetch_on_empty=settings.refetch_on_empty
    )
    app.state.session_service = SessionService(remote, token_store, store)


async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
    """Render domain errors as {"detail": description} with the error's status code."""
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.description})


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Settings to use (defaults to get_settings())

    Returns:
        Configured FastAPI application instance
    """
    from herocache.infrastructure.credentials import FileTokenStore
    from herocache.infrastructure.store import PersistenceStore
    from herocache.remote import ApiProvider
    from herocache.routers import auth, heroes

    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Lifespan context manager for application startup and shutdown."""
        logger.info("Application startup...")

        store = PersistenceStore.from_settings(settings)
        await store.open()

        token_store = FileTokenStore(settings.token_file)
        remote = ApiProvider.from_settings(settings, token_store)
        attach_components(app, store, remote, token_store, settings)

        if not settings.refetch_on_empty:
            logger.info("Empty remote results are remembered until the store is cleared")
        if settings.transactional_clear:
            logger.info("Store clears run in a single transaction")

        logger.info("Application startup complete")

        yield

        logger.info("Application shutdown...")
        await remote.aclose()
        await store.close()
        logger.info("Application shutdown complete")

    app = FastAPI(title="HeroCache API", lifespan=lifespan)
    app.add_exception_handler(CatalogError, catalog_error_handler)

    app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
    app.include_router(heroes.router, prefix="/heroes", tags=["Heroes"])

    return app
