"""
Database infrastructure package.

Re-exports commonly used database components for convenient imports.
"""

from .connection import Base, create_engine, create_session_factory, get_database_type, init_db, is_memory_url
from .models import Hero, Location, Transformation
from .storage_context import StorageContext

__all__ = [
    # Connection
    "Base",
    "create_engine",
    "create_session_factory",
    "get_database_type",
    "init_db",
    "is_memory_url",
    # Models
    "Hero",
    "Location",
    "Transformation",
    # Confinement
    "StorageContext",
]
