"""
Pytest configuration and shared fixtures.

This module provides an in-memory store per test, a scriptable remote source
and sample transfer records.
"""

from pathlib import Path
from typing import AsyncGenerator, Dict, List, Optional

import pytest

from herocache.infrastructure.database import create_engine
from herocache.infrastructure.store import PersistenceStore
from herocache.schemas import ApiHero, ApiLocation, ApiTransformation

MEMORY_URL = "sqlite+aiosqlite:///:memory:"


def pytest_collection_modifyitems(items):
    """Auto-apply markers based on test directory."""
    for item in items:
        parts = Path(str(item.fspath)).parts
        if "unit" in parts:
            item.add_marker(pytest.mark.unit)
        elif "integration" in parts:
            item.add_marker(pytest.mark.integration)


class StubRemote:
    """
    RemoteSource double with canned answers and call counters.

    Set `error` to make every fetch raise it. Set `gate` (an asyncio.Event) to
    hold fetches until the test releases them.
    """

    def __init__(
        self,
        heroes: Optional[List[ApiHero]] = None,
        locations: Optional[Dict[str, List[ApiLocation]]] = None,
        transformations: Optional[Dict[str, List[ApiTransformation]]] = None,
    ):
        self.heroes = heroes or []
        self.locations = locations or {}
        self.transformations = transformations or {}
        self.token = "stub-token"
        self.error: Optional[Exception] = None
        self.gate = None
        self.calls: List[tuple] = []

    async def _answer(self, call: tuple, value):
        self.calls.append(call)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return list(value)

    async def fetch_heroes(self, name: str = "") -> List[ApiHero]:
        return await self._answer(("heroes", name), self.heroes)

    async def fetch_locations(self, hero_id: str) -> List[ApiLocation]:
        return await self._answer(("locations", hero_id), self.locations.get(hero_id, []))

    async def fetch_transformations(self, hero_id: str) -> List[ApiTransformation]:
        return await self._answer(("transformations", hero_id), self.transformations.get(hero_id, []))

    async def login(self, username: str, password: str) -> str:
        self.calls.append(("login", username))
        if self.error is not None:
            raise self.error
        return self.token

    def count(self, kind: str) -> int:
        return sum(1 for call in self.calls if call[0] == kind)


class ForbiddenRemote:
    """RemoteSource that fails the test if it is used at all."""

    def _fail(self, *args, **kwargs):
        pytest.fail("remote source must not be called")

    fetch_heroes = _fail
    fetch_locations = _fail
    fetch_transformations = _fail
    login = _fail


@pytest.fixture
async def store() -> AsyncGenerator[PersistenceStore, None]:
    """Fresh in-memory store, opened for the duration of the test."""
    store = PersistenceStore(create_engine(MEMORY_URL))
    await store.open()
    yield store
    await store.close()


@pytest.fixture
def goku() -> ApiHero:
    return ApiHero(
        id="D13A40E5-4418-4223-9CE6-D2F9A28EBE94",
        name="Goku",
        description="Saiyan Warrior",
        photo="https://cdn.example.com/goku.jpg",
        favorite=False,
    )


@pytest.fixture
def vegeta() -> ApiHero:
    return ApiHero(
        id="6E1B907C-EB3A-45BA-AE03-44FA251F64E9",
        name="Vegeta",
        description="Prince of all Saiyans",
        photo="https://cdn.example.com/vegeta.jpg",
        favorite=True,
    )


@pytest.fixture
def goku_location(goku) -> ApiLocation:
    return ApiLocation(
        id="B93A51C8-C92C-44AE-B1D1-9AFE9BA0BCCC",
        date="2022-02-20T00:00:00Z",
        latitude="35.71867899343361",
        longitude="139.8202084625344",
        hero=ApiHero(id=goku.id),
    )


@pytest.fixture
def goku_transformation(goku) -> ApiTransformation:
    return ApiTransformation(
        id="17824501-1106-4815-BC7A-BFDCCEE43CC9",
        name="1. Oozaru",
        description="Giant ape form under the full moon",
        photo="https://cdn.example.com/oozaru.jpg",
        hero=ApiHero(id=goku.id),
    )


@pytest.fixture
def stub_remote(goku, vegeta, goku_location, goku_transformation) -> StubRemote:
    return StubRemote(
        heroes=[goku, vegeta],
        locations={goku.id: [goku_location]},
        transformations={goku.id: [goku_transformation]},
    )
