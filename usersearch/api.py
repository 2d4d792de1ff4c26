"""API client for the user search provider."""

from typing import Optional

import httpx
import structlog
from pydantic import ValidationError

from usersearch.config import Settings, get_settings
from usersearch.errors import DecodeError, EmptyBodyError, TransportError
from usersearch.models import SearchUsersResponse

logger = structlog.get_logger(__name__)


class ApiClient:
    """Async client for ``GET /search/users``."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings or get_settings()
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        self.open()
        return self

    def open(self) -> None:
        """Create the underlying HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                headers={"Accept": "application/vnd.github+json"},
                timeout=self.settings.request_timeout,
                transport=self._transport,
            )

    async def __aexit__(self, *args):
        await self.aclose()

    async def aclose(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError("ApiClient must be used as async context manager")
        return self._client

    async def search_users(self, term: str) -> SearchUsersResponse:
        """
        Search accounts whose username matches ``term``.

        Raises:
            TransportError: The request did not complete.
            EmptyBodyError: The response carried no payload.
            DecodeError: The payload is not a search result document.
        """
        logger.info("Searching users", term=term)
        try:
            response = await self.client.get(self.settings.search_url, params={"q": term})
        except (httpx.HTTPError, httpx.InvalidURL, UnicodeError) as exc:
            # Terms that cannot be put on the wire fail like a dropped connection.
            logger.warning("Search request failed", term=term, error=str(exc))
            raise TransportError(str(exc) or exc.__class__.__name__, term=term) from exc

        if not response.content:
            logger.warning("Empty search response", term=term, status_code=response.status_code)
            raise EmptyBodyError("Response body is empty", term=term)

        # The status code is not checked: error documents simply fail to decode.
        try:
            data = SearchUsersResponse.model_validate_json(response.content)
        except ValidationError as exc:
            logger.error(
                "Failed to decode search response",
                term=term,
                status_code=response.status_code,
                error=str(exc),
            )
            raise DecodeError(
                f"Unexpected response ({response.status_code})",
                term=term,
                status_code=response.status_code,
            ) from exc

        logger.debug(
            "Search response",
            term=term,
            status_code=response.status_code,
            count=len(data.items),
        )
        return data
