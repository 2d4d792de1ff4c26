"""Exceptions raised while talking to the search provider."""

from typing import Optional


class UserSearchError(Exception):
    """Base class for search failures."""

    def __init__(self, message: str, *, term: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.term = term


class TransportError(UserSearchError):
    """The request never produced a response (connection error, timeout)."""


class EmptyBodyError(UserSearchError):
    """The provider answered without a payload."""


class DecodeError(UserSearchError):
    """The payload is not the expected ``{"items": [...]}`` document."""

    def __init__(
        self,
        message: str,
        *,
        term: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message, term=term)
        self.status_code = status_code
