"""
Centralized application settings using Pydantic BaseSettings.

This module provides type-safe access to environment variables with validation.
All settings are loaded once at application startup.
"""

from pathlib import Path
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings

from herocache.domain.exceptions import ConfigurationError

# ============================================================================
# Application Constants
# ============================================================================

DEFAULT_API_BASE_URL = "https://dragonball.keepcoding.education"

# In-memory SQLite, shared by every session through a single connection
MEMORY_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

PERSISTENCY_DISK = "disk"
PERSISTENCY_MEMORY = "memory"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have sensible defaults and are validated on startup.
    Environment variables use the HEROCACHE_ prefix (e.g. HEROCACHE_DATABASE_URL).
    """

    # Storage
    database_url: str = "sqlite+aiosqlite:///./herocache.db"
    persistency: str = PERSISTENCY_DISK

    # Remote source
    api_base_url: str = DEFAULT_API_BASE_URL
    request_timeout: float = 10.0

    # Credential store
    token_file: Path = Path.home() / ".herocache" / "token"

    # Debug configuration
    debug: bool = False

    # Behaviour flags awaiting product sign-off
    refetch_on_empty: bool = True
    transactional_clear: bool = False

    @field_validator("persistency", mode="before")
    @classmethod
    def validate_persistency(cls, v: Optional[str]) -> str:
        """Accept 'disk' or 'memory' (case-insensitive)."""
        if v is None:
            return PERSISTENCY_DISK
        value = str(v).strip().lower()
        if value not in (PERSISTENCY_DISK, PERSISTENCY_MEMORY):
            raise ConfigurationError(f"persistency must be '{PERSISTENCY_DISK}' or '{PERSISTENCY_MEMORY}', got '{v}'")
        return value

    @field_validator("request_timeout")
    @classmethod
    def validate_request_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ConfigurationError("request_timeout must be positive")
        return v

    @property
    def effective_database_url(self) -> str:
        """
        Get the database URL actually used by the store.

        Returns:
            The in-memory URL when persistency is 'memory', otherwise database_url
        """
        if self.persistency == PERSISTENCY_MEMORY:
            return MEMORY_DATABASE_URL
        return self.database_url

    class Config:
        """Pydantic configuration."""

        env_prefix = "HEROCACHE_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        # Allow extra fields for forward compatibility
        extra = "ignore"


# Singleton instance - load settings once at first access
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get the application settings singleton.

    Returns:
        Settings instance
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """
    Reset the settings singleton (useful for testing).
    """
    global _settings
    _settings = None
