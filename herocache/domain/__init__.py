"""Domain entities and the error taxonomy."""

from .entities import Hero, Location, Transformation
from .exceptions import (
    ApiStatusError,
    AuthenticationFailedError,
    BadUrlError,
    CatalogError,
    ConfigurationError,
    HeroNotFoundError,
    NoDataReceivedError,
    ParsingError,
    PersistenceFault,
    RemoteFailure,
    RequestBuildError,
    ServerError,
    SessionTokenMissingError,
)

__all__ = [
    # Entities
    "Hero",
    "Location",
    "Transformation",
    # Errors
    "CatalogError",
    "HeroNotFoundError",
    "RemoteFailure",
    "RequestBuildError",
    "ServerError",
    "ApiStatusError",
    "NoDataReceivedError",
    "ParsingError",
    "AuthenticationFailedError",
    "SessionTokenMissingError",
    "BadUrlError",
    "PersistenceFault",
    "ConfigurationError",
]
