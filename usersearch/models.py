"""Data models for search requests, responses and screen state."""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

GENERIC_ERROR_MESSAGE = "Something went wrong"
NOT_FOUND_MESSAGE = "User not found"
DECODE_ERROR_MESSAGE = "Unexpected response from server"


# =============================================================================
# Wire Schemas
# =============================================================================


class Account(BaseModel):
    """A single account returned by the provider."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, strict=True, extra="ignore")

    id: int
    display_name: str = Field(alias="login")
    # Kept as a plain string: the provider may send something that is not a URL.
    avatar_url: Optional[str] = None
    profile_url: Optional[str] = Field(default=None, alias="html_url")

    @field_validator("profile_url", mode="before")
    @classmethod
    def _drop_odd_profile_url(cls, v):
        # Only used to open a browser; anything but a string is treated as absent.
        return v if isinstance(v, str) else None


class SearchUsersResponse(BaseModel):
    """Body of ``GET /search/users``."""

    model_config = ConfigDict(strict=True, extra="ignore")

    items: list[Account]
    total_count: Optional[int] = None


# =============================================================================
# Search Outcomes
# =============================================================================


class FailureReason(str, Enum):
    """Why a search produced no usable answer."""

    TRANSPORT = "transport"
    EMPTY_BODY = "empty_body"
    DECODE = "decode"


@dataclass(frozen=True)
class SearchSucceeded:
    """One or more accounts matched."""

    items: tuple[Account, ...]
    total_count: Optional[int] = None


@dataclass(frozen=True)
class SearchEmpty:
    """The provider answered with zero matches."""


@dataclass(frozen=True)
class SearchFailed:
    reason: FailureReason
    detail: str = ""


SearchResult = Union[SearchSucceeded, SearchEmpty, SearchFailed]


# =============================================================================
# Screen State
# =============================================================================


@dataclass(frozen=True)
class SearchState:
    """
    Snapshot of everything the presentation layer reads.

    ``current_search_term``, ``user_list`` and ``error_message`` are what gets
    rendered; the remaining fields describe the pipeline.
    """

    current_search_term: str = ""
    committed_term: Optional[str] = None
    user_list: tuple[Account, ...] = field(default_factory=tuple)
    error_message: Optional[str] = None
    last_result: Optional[SearchResult] = None
    is_loading: bool = False

    def with_result(
        self, result: SearchResult, surface_decode_errors: bool = False
    ) -> "SearchState":
        """Return the state after ``result`` has been applied."""
        if isinstance(result, SearchSucceeded):
            return replace(
                self, user_list=result.items, error_message=None, last_result=result
            )
        if isinstance(result, SearchEmpty):
            return replace(
                self, user_list=(), error_message=NOT_FOUND_MESSAGE, last_result=result
            )
        if result.reason is FailureReason.DECODE:
            if not surface_decode_errors:
                # Swallowed: the previous list, message and last result stay.
                return self
            return replace(
                self, user_list=(), error_message=DECODE_ERROR_MESSAGE, last_result=result
            )
        return replace(
            self, user_list=(), error_message=GENERIC_ERROR_MESSAGE, last_result=result
        )
