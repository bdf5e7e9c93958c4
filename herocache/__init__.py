"""
herocache - local-first data layer for the heroes catalog.

Heroes, their locations and their transformations are fetched from the remote
API on a cache miss, persisted to SQLite and served from there afterwards.
"""

__version__ = "0.1.0"
