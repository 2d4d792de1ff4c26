"""Test fixtures for usersearch."""

from __future__ import annotations

import logging
from typing import Callable

import httpx
import pytest

from usersearch.api import ApiClient
from usersearch.config import Settings

OCTOCAT = {
    "id": 1,
    "login": "octocat",
    "avatar_url": "https://x/a.png",
    "html_url": "https://github.com/octocat",
    "type": "User",
    "score": 1.0,
}


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings pointing at a fake provider with a short quiet period."""
    return Settings(
        _env_file=None,
        api_base_url="https://api.test",
        debounce_seconds=0.05,
        data_dir=tmp_path,
    )


@pytest.fixture
def octocat_payload() -> dict:
    return {"total_count": 1, "incomplete_results": False, "items": [dict(OCTOCAT)]}


@pytest.fixture
def make_api(settings) -> Callable[..., ApiClient]:
    """Build an ``ApiClient`` whose requests are answered by ``handler``."""

    def factory(handler, client_settings: Settings | None = None) -> ApiClient:
        return ApiClient(client_settings or settings, transport=httpx.MockTransport(handler))

    return factory


@pytest.fixture(autouse=True)
def restore_root_logging():
    """``configure_logging`` replaces root handlers; put the originals back."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
