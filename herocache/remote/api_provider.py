"""
HTTP client for the heroes API.

Every endpoint is a POST with a JSON body. Authenticated endpoints carry the
stored bearer token; login uses HTTP Basic credentials and answers with the
raw token text.

Response handling:
- 200 with a body: decoded into transfer records (ParsingError if that fails)
- 200 without a body: NoDataReceivedError
- 401: AuthenticationFailedError
- anything else: ApiStatusError
- no response at all: ServerError
"""

import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from herocache.core.settings import DEFAULT_API_BASE_URL, Settings
from herocache.domain.exceptions import (
    ApiStatusError,
    AuthenticationFailedError,
    BadUrlError,
    NoDataReceivedError,
    ParsingError,
    RequestBuildError,
    ServerError,
    SessionTokenMissingError,
)
from herocache.infrastructure.credentials import TokenStore
from herocache.schemas import ApiHero, ApiLocation, ApiTransformation

logger = logging.getLogger("ApiProvider")

RecordT = TypeVar("RecordT", bound=BaseModel)

# Reported when a transport error carries no errno of its own
UNKNOWN_ERROR_CODE = -1


class Endpoint(str, Enum):
    HEROES = "/api/heros/all"
    LOCATIONS = "/api/heros/locations"
    # Path spelled as the API expects it
    TRANSFORMATIONS = "/api/heros/tranformations"
    LOGIN = "/api/auth/login"


def _error_code(exc: Exception) -> int:
    """Best-effort numeric code for a transport error (its errno, or its cause's)."""
    for candidate in (exc, exc.__cause__, exc.__context__):
        code = getattr(candidate, "errno", None)
        if isinstance(code, int):
            return code
    return UNKNOWN_ERROR_CODE


class ApiProvider:
    """RemoteSource implementation over httpx."""

    def __init__(
        self,
        token_store: TokenStore,
        base_url: str = DEFAULT_API_BASE_URL,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            token_store: Where the bearer token is read from
            base_url: Scheme and host of the API
            timeout: Per-request timeout in seconds
            transport: Custom transport (tests use httpx.MockTransport)
        """
        self._token_store = token_store
        self._client = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)

    @classmethod
    def from_settings(cls, settings: Settings, token_store: TokenStore) -> "ApiProvider":
        return cls(token_store, base_url=settings.api_base_url, timeout=settings.request_timeout)

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "ApiProvider":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
        return False

    # Catalog endpoints

    async def fetch_heroes(self, name: str = "") -> List[ApiHero]:
        """Load heroes whose name matches `name` (empty for all heroes)."""
        request = self._build_request(Endpoint.HEROES, {"name": name})
        response = await self._send(request)
        return self._decode_list(response, ApiHero)

    async def fetch_locations(self, hero_id: str) -> List[ApiLocation]:
        request = self._build_request(Endpoint.LOCATIONS, {"id": hero_id})
        response = await self._send(request)
        return self._decode_list(response, ApiLocation)

    async def fetch_transformations(self, hero_id: str) -> List[ApiTransformation]:
        request = self._build_request(Endpoint.TRANSFORMATIONS, {"id": hero_id})
        response = await self._send(request)
        return self._decode_list(response, ApiTransformation)

    # Authentication

    async def login(self, username: str, password: str) -> str:
        """
        Exchange credentials for a session token.

        Returns:
            The token text as sent by the API
        """
        request = self._build_request(Endpoint.LOGIN, {}, requires_token=False)
        response = await self._send(request, auth=httpx.BasicAuth(username, password))
        self._check_status(response)
        try:
            token = response.content.decode("utf-8")
        except UnicodeDecodeError:
            raise ParsingError()
        return token

    # Request plumbing

    def _build_request(self, endpoint: Endpoint, params: Dict[str, Any], requires_token: bool = True) -> httpx.Request:
        headers = {"Accept": "application/json"}
        if requires_token:
            token = self._token_store.get_token()
            if not token:
                raise SessionTokenMissingError()
            headers["Authorization"] = f"Bearer {token}"

        try:
            return self._client.build_request("POST", endpoint.value, json=params, headers=headers)
        except httpx.InvalidURL as e:
            raise BadUrlError() from e
        except (TypeError, ValueError) as e:
            logger.warning(f"Could not encode request body for {endpoint.value}: {e}")
            raise RequestBuildError() from e

    async def _send(self, request: httpx.Request, auth: Optional[httpx.Auth] = None) -> httpx.Response:
        logger.debug(f"POST {request.url}")
        try:
            if auth is None:
                return await self._client.send(request)
            return await self._client.send(request, auth=auth)
        except httpx.HTTPError as e:
            code = _error_code(e)
            logger.warning(f"Request to {request.url} failed: {e!r}")
            raise ServerError(code, e) from e

    @staticmethod
    def _check_status(response: httpx.Response) -> None:
        if response.status_code == 200:
            if not response.content:
                raise NoDataReceivedError()
            return
        if response.status_code == 401:
            raise AuthenticationFailedError()
        raise ApiStatusError(response.status_code)

    def _decode_list(self, response: httpx.Response, model: Type[RecordT]) -> List[RecordT]:
        self._check_status(response)
        try:
            records = TypeAdapter(List[model]).validate_json(response.content)
        except ValidationError as e:
            logger.warning(f"Could not decode {model.__name__} list: {e.error_count()} errors")
            raise ParsingError() from e
        logger.debug(f"Decoded {len(records)} {model.__name__} records")
        return records
