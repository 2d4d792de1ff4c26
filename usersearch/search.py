"""Search client and the debounce-to-request pipeline."""

import asyncio
from typing import Optional

import structlog

from usersearch.api import ApiClient
from usersearch.config import Settings, get_settings
from usersearch.debounce import QueryDebouncer
from usersearch.errors import DecodeError, EmptyBodyError, TransportError
from usersearch.models import (
    FailureReason,
    SearchEmpty,
    SearchFailed,
    SearchResult,
    SearchSucceeded,
)
from usersearch.state import SearchStore, SearchTicket

logger = structlog.get_logger(__name__)


class SearchClient:
    """Runs one search per committed term and classifies the outcome."""

    def __init__(self, api: ApiClient):
        self.api = api

    async def search(self, term: str) -> SearchResult:
        """
        Search for ``term``.

        Never raises for provider problems; failures come back as
        ``SearchFailed`` with the matching reason.
        """
        try:
            response = await self.api.search_users(term)
        except TransportError as exc:
            return SearchFailed(FailureReason.TRANSPORT, exc.message)
        except EmptyBodyError as exc:
            return SearchFailed(FailureReason.EMPTY_BODY, exc.message)
        except DecodeError as exc:
            return SearchFailed(FailureReason.DECODE, exc.message)

        if not response.items:
            return SearchEmpty()
        return SearchSucceeded(tuple(response.items), response.total_count)


class SearchPipeline:
    """
    Wires edits through the debouncer into background searches.

    Every committed term gets its own task; earlier tasks are neither
    cancelled nor awaited before a new one starts.
    """

    def __init__(
        self,
        client: SearchClient,
        store: Optional[SearchStore] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.client = client
        self.store = store or SearchStore(
            discard_stale_responses=self.settings.discard_stale_responses,
            surface_decode_errors=self.settings.surface_decode_errors,
        )
        self.debouncer = QueryDebouncer(
            quiet_period=self.settings.debounce_seconds,
            min_length=self.settings.min_query_length,
        )
        self._tasks: set[asyncio.Task] = set()

    def push(self, text: str) -> None:
        """Record an edit of the search field."""
        self.store.set_search_term(text)
        self.debouncer.push(text)

    async def run(self) -> None:
        """Consume committed terms until the debouncer is closed."""
        async for term in self.debouncer:
            self.dispatch(term)

    def dispatch(self, term: str) -> asyncio.Task:
        """Start a search for ``term`` in the background."""
        ticket = self.store.begin(term)
        logger.info("Dispatching search", term=term, seq=ticket.seq)
        task = asyncio.create_task(self._search(ticket))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _search(self, ticket: SearchTicket) -> None:
        try:
            result = await self.client.search(ticket.term)
        except asyncio.CancelledError:
            self.store.release(ticket)
            raise
        except Exception as exc:
            logger.exception("Search failed unexpectedly", term=ticket.term, seq=ticket.seq)
            result = SearchFailed(FailureReason.TRANSPORT, str(exc) or exc.__class__.__name__)
        self.store.complete(ticket, result)

    async def aclose(self, wait: bool = True) -> None:
        """
        Stop accepting edits.

        With ``wait`` the searches still in flight are awaited; otherwise they
        are cancelled, which is what happens when the app shuts down.
        """
        self.debouncer.close()
        if not self._tasks:
            return
        tasks = list(self._tasks)
        if wait:
            await asyncio.gather(*tasks)
            return
        for task in tasks:
            task.cancel()
        await asyncio.wait(tasks)
