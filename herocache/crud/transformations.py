"""CRUD operations for Transformation entities (appended, never merged)."""

import logging
from typing import Iterable, List, Optional

from sqlalchemy import ColumnElement
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from herocache.domain.exceptions import PersistenceFault
from herocache.infrastructure.database import models
from herocache.schemas import ApiTransformation

from .relationships import resolve_owner

logger = logging.getLogger("TransformationCRUD")


async def add_transformations(
    db: AsyncSession, records: Iterable[ApiTransformation]
) -> List[models.Transformation]:
    added = []
    for record in records:
        owner = await resolve_owner(db, record.hero_id)
        transformation = models.Transformation(
            id=record.id,
            name=record.name,
            info=record.description,
            photo=record.photo,
            hero_id=owner.id if owner else None,
        )
        db.add(transformation)
        added.append(transformation)
    return added


async def get_transformations(
    db: AsyncSession, filter: Optional[ColumnElement[bool]] = None
) -> List[models.Transformation]:
    """
    Query transformations in insertion order.

    Raises:
        PersistenceFault: If the query fails
    """
    query = select(models.Transformation)
    if filter is not None:
        query = query.where(filter)
    query = query.order_by(models.Transformation.row_id)

    try:
        result = await db.execute(query)
    except SQLAlchemyError as e:
        raise PersistenceFault("Error loading transformations", e) from e
    return list(result.scalars().all())


def transformation_owned_by(hero_id: str) -> ColumnElement[bool]:
    return models.Transformation.hero_id == hero_id
