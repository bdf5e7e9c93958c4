"""
Pydantic schemas.

This package organizes schemas by purpose:
- records.py: transfer-format records received from the remote API
- heroes.py: response models served by our own HTTP API
"""

from herocache.schemas.heroes import Hero, Location, LoginRequest, StatusResponse, Transformation
from herocache.schemas.records import ApiChildRecord, ApiHero, ApiLocation, ApiTransformation

__all__ = [
    # Remote records
    "ApiHero",
    "ApiChildRecord",
    "ApiLocation",
    "ApiTransformation",
    # API responses
    "Hero",
    "Location",
    "Transformation",
    "LoginRequest",
    "StatusResponse",
]
