"""
Custom exception classes for the herocache application.

Every error carries a human-readable description suitable for showing to a
user, and the HTTP status code the API layer answers with.

Propagation:
- HeroNotFoundError and RemoteFailure reach the caller of a cache load.
- PersistenceFault is absorbed by the PersistenceStore and never crosses
  into the cache coordinators; a failed read looks like an empty one.
"""


class CatalogError(Exception):
    """Base class for all herocache errors."""

    status_code = 500

    def __init__(self, description: str):
        super().__init__(description)
        self.description = description


class HeroNotFoundError(CatalogError):
    """Raised when a hero is not present in the local store."""

    status_code = 404

    def __init__(self, hero_id: str):
        super().__init__(f"Hero with ID {hero_id} not found")
        self.hero_id = hero_id


# =============================================================================
# Remote failures
# =============================================================================


class RemoteFailure(CatalogError):
    """Transport or API level failure while talking to the remote source."""

    status_code = 502


class RequestBuildError(RemoteFailure):
    def __init__(self):
        super().__init__("Error creating request")


class ServerError(RemoteFailure):
    """The request never produced an HTTP response (connectivity, timeout, ...)."""

    def __init__(self, code: int, cause: Exception | None = None):
        super().__init__(f"Received error from server with code {code}")
        self.code = code
        self.cause = cause


class ApiStatusError(RemoteFailure):
    """The API answered with an unexpected status code."""

    def __init__(self, status_code: int):
        super().__init__(f"Received error from API with status code {status_code}")
        self.api_status_code = status_code


class NoDataReceivedError(RemoteFailure):
    def __init__(self):
        super().__init__("No data received from server")


class ParsingError(RemoteFailure):
    def __init__(self):
        super().__init__("An error occurred while parsing data")


class AuthenticationFailedError(RemoteFailure):
    status_code = 401

    def __init__(self):
        super().__init__("Authentication failed. Please check your credentials")


class SessionTokenMissingError(RemoteFailure):
    """No bearer token is stored; authenticated requests are not attempted."""

    status_code = 401

    def __init__(self):
        super().__init__("Session token is missing")


class BadUrlError(RemoteFailure):
    def __init__(self):
        super().__init__("Invalid URL provided")


# =============================================================================
# Storage
# =============================================================================


class PersistenceFault(CatalogError):
    """A query against the local store failed."""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(f"Storage error: {message}")
        self.cause = cause


class ConfigurationError(ValueError):
    """Raised when there's an error in configuration parsing or validation."""

    def __init__(self, message: str):
        super().__init__(f"Configuration error: {message}")
