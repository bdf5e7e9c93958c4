"""
Session lifecycle: logging in stores the API token, logging out forgets it
and empties the local store.
"""

import logging

from herocache.domain.exceptions import ParsingError
from herocache.infrastructure.credentials import TokenStore
from herocache.infrastructure.store import PersistenceStore
from herocache.remote import RemoteSource

logger = logging.getLogger("SessionService")


class SessionService:
    def __init__(self, remote: RemoteSource, token_store: TokenStore, store: PersistenceStore):
        self._remote = remote
        self._token_store = token_store
        self._store = store

    def is_logged_in(self) -> bool:
        return self._token_store.get_token() is not None

    async def login(self, username: str, password: str) -> None:
        """
        Authenticate against the API and keep the returned token.

        Raises:
            ParsingError: If username or password is empty (no request is made)
            RemoteFailure: If the API rejects the credentials or cannot be reached
        """
        if not username or not password:
            raise ParsingError()

        token = await self._remote.login(username, password)
        self._token_store.set_token(token)
        logger.info(f"Logged in as {username}")

    async def logout(self) -> bool:
        """
        End the session: drop the token and clear every cached collection.

        Returns:
            True if the store was fully cleared
        """
        self._token_store.delete_token()
        cleared = await self._store.clear_all()
        logger.info("Logged out")
        return cleared
