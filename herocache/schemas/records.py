"""
Transfer-format records exactly as the remote API sends them.

Every field is optional because the API omits fields freely. Location
coordinates arrive under Spanish keys (latitud/longitud) and the date under
dateShow; aliases map them to our names.
"""

from typing import Optional

from pydantic import BaseModel, Field


class ApiHero(BaseModel):
    id: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    photo: Optional[str] = None
    favorite: Optional[bool] = None

    class Config:
        extra = "ignore"


class ApiChildRecord(BaseModel):
    """Shared shape of records that reference their owning hero."""

    id: Optional[str] = None
    hero: Optional[ApiHero] = None

    @property
    def hero_id(self) -> Optional[str]:
        """Id of the owning hero, if the record names one."""
        return self.hero.id if self.hero else None

    class Config:
        extra = "ignore"
        populate_by_name = True


class ApiLocation(ApiChildRecord):
    date: Optional[str] = Field(default=None, alias="dateShow")
    latitude: Optional[str] = Field(default=None, alias="latitud")
    longitude: Optional[str] = Field(default=None, alias="longitud")


class ApiTransformation(ApiChildRecord):
    name: Optional[str] = None
    description: Optional[str] = None
    photo: Optional[str] = None
