"""
Owner resolution for child records (locations, transformations).

A child names its hero by id. The hero is looked up in the store at the
moment the child is inserted; if it is not there the child is stored without
an owner and is never re-linked later.
"""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from herocache.domain.exceptions import PersistenceFault
from herocache.infrastructure.database import models

from .heroes import get_heroes, hero_id_is

logger = logging.getLogger("RelationshipResolver")


async def resolve_owner(db: AsyncSession, hero_id: Optional[str]) -> Optional[models.Hero]:
    """
    Find the stored hero a child record belongs to.

    An unknown hero is a normal outcome, not an error. A failing lookup is
    treated the same way, as the store does for every read.

    Args:
        db: Database session
        hero_id: Owning hero id taken from the child record

    Returns:
        The Hero row, or None
    """
    if not hero_id:
        return None

    try:
        heroes = await get_heroes(db, hero_id_is(hero_id))
    except PersistenceFault as e:
        logger.error(f"{e.description}; storing child of hero {hero_id} without owner")
        return None

    if not heroes:
        logger.debug(f"Hero {hero_id} not stored yet; child will be an orphan")
        return None
    return heroes[0]
