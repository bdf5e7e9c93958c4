"""Response schemas for the heroes API."""

from typing import List, Optional

from pydantic import BaseModel


class Hero(BaseModel):
    id: str
    name: str
    info: str
    photo: str
    favorite: bool = False

    class Config:
        from_attributes = True


class Location(BaseModel):
    id: str
    date: str
    latitude: str
    longitude: str
    hero_id: Optional[str] = None
    # Parsed pair, None when the stored strings are not a valid coordinate
    coordinate: Optional[List[float]] = None

    class Config:
        from_attributes = True


class Transformation(BaseModel):
    id: str
    name: str
    info: str
    photo: str
    hero_id: Optional[str] = None

    class Config:
        from_attributes = True


class LoginRequest(BaseModel):
    username: str = ""
    password: str = ""


class StatusResponse(BaseModel):
    success: bool
    message: str


__all__ = [
    "Hero",
    "Location",
    "Transformation",
    "LoginRequest",
    "StatusResponse",
]
