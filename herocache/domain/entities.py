"""
Domain entities handed to callers of the cache.

These are immutable snapshots built from ORM rows inside the storage context,
so no live database object ever leaves it. Missing text columns map to "".
"""

from dataclasses import dataclass
from typing import Optional, Tuple

MAX_LATITUDE = 90.0
MAX_LONGITUDE = 180.0


@dataclass(frozen=True)
class Hero:
    id: str
    name: str
    info: str
    photo: str
    favorite: bool = False

    @classmethod
    def from_model(cls, model) -> "Hero":
        return cls(
            id=model.id or "",
            name=model.name or "",
            info=model.info or "",
            photo=model.photo or "",
            favorite=bool(model.favorite),
        )


@dataclass(frozen=True)
class Location:
    """
    A place where a hero was seen.

    Latitude and longitude are kept as the strings the API sent; they are
    only interpreted through `coordinate`.
    """

    id: str
    date: str
    latitude: str
    longitude: str
    hero_id: Optional[str] = None

    @classmethod
    def from_model(cls, model) -> "Location":
        return cls(
            id=model.id or "",
            date=model.date or "",
            latitude=model.latitude or "",
            longitude=model.longitude or "",
            hero_id=model.hero_id,
        )

    @property
    def coordinate(self) -> Optional[Tuple[float, float]]:
        """
        Parse the stored strings into a (latitude, longitude) pair.

        Returns:
            The pair, or None when either value is not a number or is out of range
        """
        try:
            latitude = float(self.latitude)
            longitude = float(self.longitude)
        except ValueError:
            return None
        # NaN fails both comparisons and is rejected here too
        if not (abs(latitude) <= MAX_LATITUDE and abs(longitude) <= MAX_LONGITUDE):
            return None
        return latitude, longitude


@dataclass(frozen=True)
class Transformation:
    id: str
    name: str
    info: str
    photo: str
    hero_id: Optional[str] = None

    @classmethod
    def from_model(cls, model) -> "Transformation":
        return cls(
            id=model.id or "",
            name=model.name or "",
            info=model.info or "",
            photo=model.photo or "",
            hero_id=model.hero_id,
        )
