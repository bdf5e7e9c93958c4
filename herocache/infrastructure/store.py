"""
Durable local store for heroes, locations and transformations.

The store is the only component that touches the database. All of its work
runs on a StorageContext, so reads and writes never interleave. Failures are
handled at this boundary:

- Writes (insert_*, save, clear_all) never raise for database errors; they
  log and roll back.
- Reads (fetch_*) turn a PersistenceFault into an empty list. A storage fault
  therefore looks exactly like "nothing cached yet" to every caller.

Results are returned as domain entities built inside the storage context;
ORM rows never leave it.
"""

import asyncio
import concurrent.futures
import logging
from typing import Awaitable, Callable, Iterable, List, Optional, Set, Tuple

from sqlalchemy import ColumnElement
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from herocache import crud
from herocache.core.settings import Settings
from herocache.domain import Hero, Location, PersistenceFault, Transformation
from herocache.infrastructure.database import StorageContext, create_engine, create_session_factory, init_db
from herocache.schemas import ApiHero, ApiLocation, ApiTransformation

logger = logging.getLogger("PersistenceStore")


class PersistenceStore:
    """
    Explicitly constructed store instance, opened and closed by its owner.

    Usage:
        store = PersistenceStore.from_settings(get_settings())
        await store.open()
        await store.insert_heroes(records)
        heroes = await store.fetch_heroes()
        await store.close()
    """

    def __init__(
        self,
        engine: AsyncEngine,
        session_factory: Optional[async_sessionmaker] = None,
        transactional_clear: bool = False,
    ):
        """
        Args:
            engine: Async engine for the database
            session_factory: Factory for the context's session (defaults to create_session_factory(engine))
            transactional_clear: Empty all collections in one transaction instead of one by one
        """
        self._engine = engine
        self._context = StorageContext(session_factory or create_session_factory(engine))
        self._transactional_clear = transactional_clear
        # (family, key) pairs whose remote fetch came back empty; only consulted when refetching is disabled
        self._empty_syncs: Set[Tuple[str, str]] = set()

    @classmethod
    def from_settings(cls, settings: Settings) -> "PersistenceStore":
        engine = create_engine(settings.effective_database_url)
        return cls(engine, transactional_clear=settings.transactional_clear)

    @property
    def context(self) -> StorageContext:
        return self._context

    # Lifecycle

    async def open(self) -> None:
        """Create missing tables and start the storage context."""
        await init_db(self._engine)
        await self._context.start()
        logger.info("Store opened")

    async def close(self) -> None:
        """Drain pending operations, stop the storage context and dispose the engine."""
        await self._context.stop()
        await self._engine.dispose()
        logger.info("Store closed")

    async def __aenter__(self) -> "PersistenceStore":
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
        return False

    def submit(self, coro: Awaitable) -> concurrent.futures.Future:
        """
        Run one of the store's coroutines from another OS thread.

        Example:
            store.submit(store.insert_heroes(records)).result()
        """
        loop = self._context.loop
        if loop is None:
            raise RuntimeError("Store is not open")
        return asyncio.run_coroutine_threadsafe(coro, loop)

    # Heroes

    async def insert_heroes(self, records: Iterable[ApiHero]) -> None:
        """Insert heroes, merging field by field into heroes already stored under the same id."""
        records = list(records)

        async def op(db: AsyncSession):
            try:
                heroes = await crud.add_heroes(db, records)
            except SQLAlchemyError as e:
                logger.error(f"Error inserting heroes: {e}")
                await db.rollback()
                return
            if await self._save(db):
                logger.debug(f"Stored {len(heroes)} heroes")

        await self._context.run(op)

    async def fetch_heroes(
        self, filter: Optional[ColumnElement[bool]] = None, sort_ascending: bool = True
    ) -> List[Hero]:
        """
        Query stored heroes ordered by name.

        Args:
            filter: SQLAlchemy expression over Hero columns (see crud.hero_id_is)
            sort_ascending: Name order

        Returns:
            Matching heroes, or an empty list if the query failed
        """
        return await self._read(lambda db: crud.get_heroes(db, filter, sort_ascending), Hero.from_model)

    # Locations

    async def insert_locations(self, records: Iterable[ApiLocation]) -> None:
        """Append locations, linking each to its stored hero (or none)."""
        await self._insert_children(crud.add_locations, list(records), "locations")

    async def fetch_locations(self, filter: Optional[ColumnElement[bool]] = None) -> List[Location]:
        return await self._read(lambda db: crud.get_locations(db, filter), Location.from_model)

    # Transformations

    async def insert_transformations(self, records: Iterable[ApiTransformation]) -> None:
        """Append transformations, linking each to its stored hero (or none)."""
        await self._insert_children(crud.add_transformations, list(records), "transformations")

    async def fetch_transformations(self, filter: Optional[ColumnElement[bool]] = None) -> List[Transformation]:
        return await self._read(lambda db: crud.get_transformations(db, filter), Transformation.from_model)

    # Maintenance

    async def save(self) -> bool:
        """
        Commit pending changes, if any.

        Returns:
            True if something was committed
        """
        return await self._context.run(self._save)

    async def clear_all(self) -> bool:
        """
        Delete every hero, location and transformation.

        By default each collection is deleted and committed on its own: a
        failure on one collection is logged and does not undo the others, so
        a partial clear is possible. With transactional_clear, all three go
        in one transaction and a failure leaves everything in place.

        Returns:
            True if every collection was emptied
        """

        async def op(db: AsyncSession) -> bool:
            if self._transactional_clear:
                cleared = await self._clear_in_one_transaction(db)
            else:
                cleared = await self._clear_one_by_one(db)
            # Drop every identity-mapped row; bulk deletes bypass them
            db.expunge_all()
            return cleared

        cleared = await self._context.run(op)
        self._empty_syncs.clear()
        if cleared:
            logger.info("Store cleared")
        else:
            logger.warning("Store only partially cleared")
        return cleared

    # Empty-sync bookkeeping

    def mark_synced_empty(self, family: str, key: str) -> None:
        self._empty_syncs.add((family, key))

    def is_synced_empty(self, family: str, key: str) -> bool:
        return (family, key) in self._empty_syncs

    # Internal helpers (run on the storage context)

    async def _read(self, query: Callable[[AsyncSession], Awaitable[list]], convert: Callable) -> list:
        async def op(db: AsyncSession) -> list:
            try:
                rows = await query(db)
            except PersistenceFault:
                await db.rollback()
                raise
            return [convert(row) for row in rows]

        try:
            return await self._context.run(op)
        except PersistenceFault as e:
            logger.error(f"{e.description}: {e.cause}")
            return []

    async def _insert_children(self, add: Callable, records: list, label: str) -> None:
        async def op(db: AsyncSession):
            try:
                children = await add(db, records)
            except SQLAlchemyError as e:
                logger.error(f"Error inserting {label}: {e}")
                await db.rollback()
                return
            if await self._save(db):
                orphans = sum(1 for child in children if child.hero_id is None)
                logger.debug(f"Stored {len(children)} {label} ({orphans} without owner)")

        await self._context.run(op)

    async def _save(self, db: AsyncSession) -> bool:
        if not crud.has_pending_changes(db):
            return False
        try:
            await db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Error saving store: {e}")
            await db.rollback()
            return False
        return True

    async def _clear_one_by_one(self, db: AsyncSession) -> bool:
        cleared = True
        for model in crud.ALL_COLLECTIONS:
            try:
                deleted = await crud.delete_all(db, model)
                await db.commit()
            except (PersistenceFault, SQLAlchemyError) as e:
                logger.error(f"Error clearing {model.__tablename__}: {e}")
                await db.rollback()
                cleared = False
                continue
            logger.debug(f"Deleted {deleted} rows from {model.__tablename__}")
        return cleared

    async def _clear_in_one_transaction(self, db: AsyncSession) -> bool:
        try:
            for model in crud.ALL_COLLECTIONS:
                await crud.delete_all(db, model)
            await db.commit()
        except (PersistenceFault, SQLAlchemyError) as e:
            logger.error(f"Error clearing store, nothing deleted: {e}")
            await db.rollback()
            return False
        return True
