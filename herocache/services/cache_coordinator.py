"""
Read-through cache coordinators, one per entity family.

A load first asks the local store. A non-empty answer is returned as is and
the remote source is not contacted. An empty answer triggers one remote fetch;
the fetched records are persisted and the store is queried again, and that
second query is what the caller receives. The caller therefore always gets
what was actually committed (including merge effects), never the raw response.

Remote failures propagate unchanged and nothing is written. Loading the
children of a hero that is not stored at all fails with HeroNotFoundError
before any remote call.

Concurrent loads of the same key are not deduplicated: both may fetch and
persist. Hero inserts merge, so the stored heroes converge.
"""

import logging
from abc import ABC, abstractmethod
from typing import Generic, List, Sequence, TypeVar

from herocache import crud
from herocache.domain import Hero, HeroNotFoundError, Location, Transformation
from herocache.infrastructure.store import PersistenceStore
from herocache.remote import RemoteSource

EntityT = TypeVar("EntityT")


class CacheCoordinator(ABC, Generic[EntityT]):
    """
    Read-through policy shared by every entity family.

    Subclasses describe how to query the store, how to fetch remotely and how
    to persist what was fetched.
    """

    family: str = ""

    def __init__(self, store: PersistenceStore, remote: RemoteSource, refetch_on_empty: bool = True):
        """
        Args:
            store: Local store (shared by all coordinators)
            remote: Remote source of truth
            refetch_on_empty: When False, a key whose remote fetch came back
                empty is not fetched again until the store is cleared
        """
        self.store = store
        self.remote = remote
        self.refetch_on_empty = refetch_on_empty
        self.logger = logging.getLogger(f"{self.family}Cache")

    async def load(self, key: str) -> List[EntityT]:
        """
        Return the entities for `key`, fetching and persisting them on a miss.

        Raises:
            HeroNotFoundError: For child families, if the hero is not stored
            RemoteFailure: If the remote fetch fails
        """
        await self._check_preconditions(key)

        local = await self._query(key)
        if local:
            self.logger.debug(f"Cache hit for {key!r}: {len(local)} records")
            return local

        if not self.refetch_on_empty and self.store.is_synced_empty(self.family, key):
            self.logger.debug(f"{key!r} already synced with no records, skipping remote")
            return []

        self.logger.info(f"Cache miss for {key!r}, fetching from remote")
        records = await self._fetch_remote(key)
        await self._persist(records)

        result = await self._query(key)
        if not records:
            self.store.mark_synced_empty(self.family, key)
        self.logger.debug(f"Persisted {len(records)} remote records for {key!r}, {len(result)} now stored")
        return result

    async def clear_all(self) -> bool:
        """Empty the whole store (all families)."""
        return await self.store.clear_all()

    async def _check_preconditions(self, key: str) -> None:
        return None

    @abstractmethod
    async def _query(self, key: str) -> List[EntityT]: ...

    @abstractmethod
    async def _fetch_remote(self, key: str) -> Sequence: ...

    @abstractmethod
    async def _persist(self, records: Sequence) -> None: ...


class HeroCache(CacheCoordinator[Hero]):
    """Heroes keyed by name prefix ("" loads every hero)."""

    family = "Hero"

    async def load(self, key: str = "") -> List[Hero]:
        return await super().load(key)

    async def _query(self, key: str) -> List[Hero]:
        return await self.store.fetch_heroes(crud.hero_name_starts_with(key))

    async def _fetch_remote(self, key: str):
        return await self.remote.fetch_heroes(key)

    async def _persist(self, records) -> None:
        await self.store.insert_heroes(records)


class HeroChildCache(CacheCoordinator[EntityT]):
    """Children of one hero, keyed by the hero id."""

    async def _check_preconditions(self, key: str) -> None:
        heroes = await self.store.fetch_heroes(crud.hero_id_is(key))
        if not heroes:
            self.logger.info(f"Hero {key} is not stored")
            raise HeroNotFoundError(key)


class HeroLocationsCache(HeroChildCache[Location]):
    family = "HeroLocations"

    async def _query(self, key: str) -> List[Location]:
        return await self.store.fetch_locations(crud.location_owned_by(key))

    async def _fetch_remote(self, key: str):
        return await self.remote.fetch_locations(key)

    async def _persist(self, records) -> None:
        await self.store.insert_locations(records)


class HeroTransformationsCache(HeroChildCache[Transformation]):
    family = "HeroTransformations"

    async def _query(self, key: str) -> List[Transformation]:
        return await self.store.fetch_transformations(crud.transformation_owned_by(key))

    async def _fetch_remote(self, key: str):
        return await self.remote.fetch_transformations(key)

    async def _persist(self, records) -> None:
        await self.store.insert_transformations(records)
