"""Remote source of truth for the catalog."""

from .api_provider import ApiProvider, Endpoint
from .base import RemoteSource

__all__ = [
    "ApiProvider",
    "Endpoint",
    "RemoteSource",
]
