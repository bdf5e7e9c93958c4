"""
CRUD operations for Location entities.

Locations are always appended. Storing the same API records twice yields
duplicate rows; deduplication is left to whoever triggers the sync.
"""

import logging
from typing import Iterable, List, Optional

from sqlalchemy import ColumnElement
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from herocache.domain.exceptions import PersistenceFault
from herocache.infrastructure.database import models
from herocache.schemas import ApiLocation

from .relationships import resolve_owner

logger = logging.getLogger("LocationCRUD")


async def add_locations(db: AsyncSession, records: Iterable[ApiLocation]) -> List[models.Location]:
    """Stage locations for insertion, linking each to its hero when the hero is stored."""
    added = []
    for record in records:
        owner = await resolve_owner(db, record.hero_id)
        location = models.Location(
            id=record.id,
            date=record.date,
            latitude=record.latitude,
            longitude=record.longitude,
            hero_id=owner.id if owner else None,
        )
        db.add(location)
        added.append(location)
    return added


async def get_locations(db: AsyncSession, filter: Optional[ColumnElement[bool]] = None) -> List[models.Location]:
    """
    Query locations in insertion order.

    Raises:
        PersistenceFault: If the query fails
    """
    query = select(models.Location)
    if filter is not None:
        query = query.where(filter)
    query = query.order_by(models.Location.row_id)

    try:
        result = await db.execute(query)
    except SQLAlchemyError as e:
        raise PersistenceFault("Error loading locations", e) from e
    return list(result.scalars().all())


def location_owned_by(hero_id: str) -> ColumnElement[bool]:
    return models.Location.hero_id == hero_id
