"""
Credential storage for the remote API bearer token.

The cache engine only needs three operations: read, replace and delete the
token. A missing token makes every authenticated remote call fail with
SessionTokenMissingError; it is never retried.
"""

import logging
import os
import threading
from pathlib import Path
from typing import Optional, Protocol

logger = logging.getLogger("Credentials")


class TokenStore(Protocol):
    def get_token(self) -> Optional[str]: ...

    def set_token(self, token: str) -> None: ...

    def delete_token(self) -> None: ...


class InMemoryTokenStore:
    """Token kept for the lifetime of the process (tests, short-lived tools)."""

    def __init__(self, token: Optional[str] = None):
        self._token = token
        self._lock = threading.Lock()

    def get_token(self) -> Optional[str]:
        with self._lock:
            return self._token

    def set_token(self, token: str) -> None:
        with self._lock:
            self._token = token

    def delete_token(self) -> None:
        with self._lock:
            self._token = None


class FileTokenStore:
    """
    Token persisted in a file readable only by its owner.

    Writes go to a temporary file first and are moved into place, so a crash
    never leaves a half-written token behind.
    """

    def __init__(self, path: Path):
        self._path = Path(path)
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def get_token(self) -> Optional[str]:
        with self._lock:
            try:
                token = self._path.read_text(encoding="utf-8").strip()
            except FileNotFoundError:
                return None
            except OSError as e:
                logger.error(f"Failed to read token from {self._path}: {e}")
                return None
            return token or None

    def set_token(self, token: str) -> None:
        with self._lock:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
            # Replaces any previous token
            try:
                fd = os.open(tmp_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(token)
                os.replace(tmp_path, self._path)
            except OSError as e:
                logger.error(f"Failed to store token in {self._path}: {e}")
                tmp_path.unlink(missing_ok=True)
                raise
            logger.debug(f"Token stored in {self._path}")

    def delete_token(self) -> None:
        with self._lock:
            try:
                self._path.unlink()
                logger.debug(f"Token removed from {self._path}")
            except FileNotFoundError:
                pass
