"""
Conftest for integration tests.

Builds the application with an in-memory store and a stub remote wired in
directly, and exposes an httpx client bound to it.
"""

import pytest
from httpx import ASGITransport, AsyncClient

from herocache.core.app_factory import attach_components, create_app
from herocache.core.settings import Settings
from herocache.infrastructure.credentials import InMemoryTokenStore

# Apply 'integration' marker to all tests in this directory
pytestmark = pytest.mark.integration


@pytest.fixture
def token_store() -> InMemoryTokenStore:
    return InMemoryTokenStore()


@pytest.fixture
def app(store, stub_remote, token_store):
    """Application with test components on app.state (the lifespan is not run)."""
    settings = Settings(persistency="memory")
    app = create_app(settings)
    attach_components(app, store, stub_remote, token_store, settings)
    return app


@pytest.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
