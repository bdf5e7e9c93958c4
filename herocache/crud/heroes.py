"""
CRUD operations for Hero entities.

Heroes are keyed by the API id. Inserting a record whose id is already stored
merges it into the existing row one attribute at a time: every attribute the
incoming record carries overwrites the stored value, attributes it leaves out
keep whatever was stored.
"""

import logging
from typing import Dict, Iterable, List, Optional

from sqlalchemy import ColumnElement, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from herocache.domain.exceptions import PersistenceFault
from herocache.infrastructure.database import models
from herocache.schemas import ApiHero

logger = logging.getLogger("HeroCRUD")


def hero_values(record: ApiHero) -> Dict[str, object]:
    """Map a transfer record onto Hero columns, dropping what the record leaves out."""
    values = {
        "name": record.name,
        "info": record.description,
        "photo": record.photo,
        "favorite": record.favorite,
    }
    return {field: value for field, value in values.items() if value is not None}


def merge_hero(hero: models.Hero, record: ApiHero) -> None:
    """Overwrite each attribute the record carries (field-granularity last write wins)."""
    values = hero_values(record)
    for field in models.HERO_FIELDS:
        if field in values:
            setattr(hero, field, values[field])


async def add_heroes(db: AsyncSession, records: Iterable[ApiHero]) -> List[models.Hero]:
    """
    Stage heroes for insertion, merging into rows that already exist.

    Nothing is committed here; the caller saves the session.

    Args:
        db: Database session
        records: Transfer records from the remote API

    Returns:
        The created or updated Hero rows, one per distinct id
    """
    staged: Dict[str, models.Hero] = {}

    for record in records:
        if not record.id:
            logger.warning(f"Skipping hero without id (name={record.name!r})")
            continue

        hero = staged.get(record.id)
        if hero is None:
            hero = await db.get(models.Hero, record.id)
        if hero is None:
            hero = models.Hero(id=record.id, favorite=False)
            db.add(hero)

        merge_hero(hero, record)
        staged[record.id] = hero

    return list(staged.values())


async def get_heroes(
    db: AsyncSession,
    filter: Optional[ColumnElement[bool]] = None,
    sort_ascending: bool = True,
) -> List[models.Hero]:
    """
    Query heroes, optionally filtered, ordered by name.

    Args:
        db: Database session
        filter: SQLAlchemy boolean expression over Hero columns
        sort_ascending: Name order

    Returns:
        Matching heroes

    Raises:
        PersistenceFault: If the query fails
    """
    query = select(models.Hero)
    if filter is not None:
        query = query.where(filter)
    query = query.order_by(models.Hero.name.asc() if sort_ascending else models.Hero.name.desc())

    try:
        result = await db.execute(query)
    except SQLAlchemyError as e:
        raise PersistenceFault("Error loading heroes", e) from e
    return list(result.scalars().all())


def hero_id_is(hero_id: str) -> ColumnElement[bool]:
    """Exact, case-sensitive id match."""
    return models.Hero.id == hero_id


def hero_name_starts_with(prefix: Optional[str]) -> Optional[ColumnElement[bool]]:
    """
    Case-sensitive name prefix filter; an empty prefix matches every hero.

    Compares a leading substring instead of using LIKE, which SQLite matches
    case-insensitively and which would treat % and _ as wildcards.
    """
    if not prefix:
        return None
    return func.substr(models.Hero.name, 1, len(prefix)) == prefix
