"""
CRUD operations module.

Session-level database operations organized by collection. Everything here
expects to run on the store's storage context and never commits; the
PersistenceStore decides when to save.
"""

# Hero operations
from .heroes import add_heroes, get_heroes, hero_id_is, hero_name_starts_with, hero_values, merge_hero

# Shared helpers
from .helpers import ALL_COLLECTIONS, delete_all, has_pending_changes

# Location operations
from .locations import add_locations, get_locations, location_owned_by

# Relationship resolution
from .relationships import resolve_owner

# Transformation operations
from .transformations import add_transformations, get_transformations, transformation_owned_by

__all__ = [
    # Hero operations
    "add_heroes",
    "get_heroes",
    "hero_id_is",
    "hero_name_starts_with",
    "hero_values",
    "merge_hero",
    # Location operations
    "add_locations",
    "get_locations",
    "location_owned_by",
    # Transformation operations
    "add_transformations",
    "get_transformations",
    "transformation_owned_by",
    # Relationships
    "resolve_owner",
    # Helpers
    "ALL_COLLECTIONS",
    "delete_all",
    "has_pending_changes",
]
