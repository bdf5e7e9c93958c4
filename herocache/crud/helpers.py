"""
Helper functions shared across CRUD operations.
"""

import logging

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from herocache.domain.exceptions import PersistenceFault
from herocache.infrastructure.database import models

logger = logging.getLogger("CRUD")

# Deletion order used when emptying the store
ALL_COLLECTIONS = (models.Hero, models.Location, models.Transformation)


def has_pending_changes(db: AsyncSession) -> bool:
    """Check whether the session holds unsaved inserts, updates or deletes."""
    return bool(db.new or db.dirty or db.deleted)


async def delete_all(db: AsyncSession, model) -> int:
    """
    Bulk-delete every row of one collection (not committed).

    Returns:
        Number of rows deleted

    Raises:
        PersistenceFault: If the delete fails
    """
    try:
        result = await db.execute(delete(model))
    except SQLAlchemyError as e:
        raise PersistenceFault(f"Error clearing {model.__tablename__}", e) from e
    return result.rowcount or 0
