"""Observable search state."""

from dataclasses import dataclass, replace
from typing import Callable

import structlog

from usersearch.models import SearchResult, SearchState

logger = structlog.get_logger(__name__)

Listener = Callable[[SearchState], None]


@dataclass(frozen=True)
class SearchTicket:
    """Handle for one dispatched request."""

    seq: int
    term: str


class SearchStore:
    """
    Holder of the current ``SearchState``.

    Every mutation replaces the snapshot and notifies listeners. The store is
    owned by one event loop; request tasks report back through ``complete``
    on that same loop, which serializes all updates.
    """

    def __init__(
        self,
        discard_stale_responses: bool = True,
        surface_decode_errors: bool = False,
    ):
        self.discard_stale_responses = discard_stale_responses
        self.surface_decode_errors = surface_decode_errors
        self._state = SearchState()
        self._listeners: list[Listener] = []
        self._seq = 0
        self._in_flight: set[int] = set()

    @property
    def state(self) -> SearchState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def set_search_term(self, text: str) -> None:
        if text != self._state.current_search_term:
            self._set(replace(self._state, current_search_term=text))

    def begin(self, term: str) -> SearchTicket:
        """Record a committed term and allocate its sequence number."""
        self._seq += 1
        self._in_flight.add(self._seq)
        self._set(replace(self._state, committed_term=term, is_loading=True))
        return SearchTicket(seq=self._seq, term=term)

    def is_latest(self, ticket: SearchTicket) -> bool:
        return ticket.seq == self._seq

    def complete(self, ticket: SearchTicket, result: SearchResult) -> bool:
        """
        Apply the outcome of ``ticket``'s request.

        Returns False when the result was discarded because a newer search
        has been issued since.
        """
        self._in_flight.discard(ticket.seq)

        if self.discard_stale_responses and not self.is_latest(ticket):
            logger.info(
                "Discarding stale search result",
                term=ticket.term,
                seq=ticket.seq,
                latest=self._seq,
            )
            self._set(replace(self._state, is_loading=self._is_loading()))
            return False

        state = self._state.with_result(result, self.surface_decode_errors)
        self._set(replace(state, is_loading=self._is_loading()))
        return True

    def release(self, ticket: SearchTicket) -> None:
        """Forget ``ticket`` without applying a result (its search was cancelled)."""
        if ticket.seq in self._in_flight:
            self._in_flight.discard(ticket.seq)
            self._set(replace(self._state, is_loading=self._is_loading()))

    def _is_loading(self) -> bool:
        if self.discard_stale_responses:
            return self._seq in self._in_flight
        return bool(self._in_flight)

    def _set(self, state: SearchState) -> None:
        self._state = state
        for listener in list(self._listeners):
            listener(state)
