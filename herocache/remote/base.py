"""Interface the cache coordinators expect from the remote source."""

from typing import List, Protocol

from herocache.schemas import ApiHero, ApiLocation, ApiTransformation


class RemoteSource(Protocol):
    """
    Single-shot remote fetches (no pagination).

    Every method either returns the decoded records or raises a
    RemoteFailure subclass.
    """

    async def fetch_heroes(self, name: str = "") -> List[ApiHero]: ...

    async def fetch_locations(self, hero_id: str) -> List[ApiLocation]: ...

    async def fetch_transformations(self, hero_id: str) -> List[ApiTransformation]: ...

    async def login(self, username: str, password: str) -> str: ...
