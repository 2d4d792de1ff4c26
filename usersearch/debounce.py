"""Turn a stream of text edits into committed search terms."""

import asyncio
from typing import AsyncIterator, Optional

import structlog

logger = structlog.get_logger(__name__)

_CLOSED = object()
_FLUSH = object()


class QueryDebouncer:
    """
    Debounced, deduplicated, length-filtered view over text edits.

    Each pushed value is the full text after an edit. Values pass through,
    in order:

    1. consecutive dedupe against the previously pushed value,
    2. a debounce: a value is kept only if nothing newer arrives within
       ``quiet_period`` seconds,
    3. a length filter: only values longer than ``min_length`` survive.

    Iterate the debouncer to receive committed terms::

        debouncer = QueryDebouncer(quiet_period=2.0)
        async for term in debouncer:
            ...
    """

    def __init__(self, quiet_period: float = 2.0, min_length: int = 3):
        if quiet_period <= 0:
            raise ValueError("quiet_period must be positive")
        self.quiet_period = quiet_period
        self.min_length = min_length
        self._queue: asyncio.Queue = asyncio.Queue()
        self._last_value: Optional[str] = None
        self._closed = False

    def push(self, value: str) -> None:
        """Feed the current text."""
        if self._closed:
            raise RuntimeError("QueryDebouncer is closed")
        self._queue.put_nowait(value)

    def close(self, flush: bool = False) -> None:
        """
        Stop iteration.

        A value still waiting out its quiet period is dropped, unless ``flush``
        is set: no newer edit can arrive any more, so it is committed at once.
        """
        if not self._closed:
            self._closed = True
            self._queue.put_nowait(_FLUSH if flush else _CLOSED)

    def is_searchable(self, value: str) -> bool:
        return len(value) > self.min_length

    async def __aiter__(self) -> AsyncIterator[str]:
        loop = asyncio.get_running_loop()
        pending: Optional[str] = None
        deadline = 0.0

        while True:
            timeout = None if pending is None else max(deadline - loop.time(), 0)
            try:
                if self._queue.empty():
                    value = await asyncio.wait_for(self._queue.get(), timeout)
                else:
                    value = self._queue.get_nowait()
            except asyncio.TimeoutError:
                term, pending = pending, None
                if self.is_searchable(term):
                    logger.debug("Committed search term", term=term)
                    yield term
                continue

            if value is _CLOSED:
                return
            if value is _FLUSH:
                if pending is not None and self.is_searchable(pending):
                    logger.debug("Committed search term", term=pending)
                    yield pending
                return
            if value == self._last_value:
                continue

            self._last_value = value
            pending = value
            deadline = loop.time() + self.quiet_period
