"""End-to-end tests: edits in, requests out, state updated."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from usersearch.search import SearchClient, SearchPipeline


class RecordingProvider:
    """Fake search endpoint that records every requested term."""

    def __init__(self, payloads: dict[str, dict] | None = None, delays: dict[str, float] | None = None):
        self.terms: list[str] = []
        self.payloads = payloads or {}
        self.delays = delays or {}

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        term = request.url.params["q"]
        self.terms.append(term)
        await asyncio.sleep(self.delays.get(term, 0))
        return httpx.Response(200, json=self.payloads.get(term, {"items": []}))


async def type_and_settle(pipeline: SearchPipeline, values, pause: float = 0.005) -> None:
    runner = asyncio.create_task(pipeline.run())
    for value in values:
        pipeline.push(value)
        await asyncio.sleep(pause)
    await asyncio.sleep(0.3)
    await pipeline.aclose()
    await runner


@pytest.mark.asyncio
async def test_rapid_typing_issues_one_request(make_api, settings, octocat_payload):
    provider = RecordingProvider({"abcd": octocat_payload})

    async with make_api(provider) as api:
        pipeline = SearchPipeline(SearchClient(api), settings=settings)
        await type_and_settle(pipeline, ["a", "ab", "abc", "abcd"])

    assert provider.terms == ["abcd"]
    state = pipeline.store.state
    assert state.current_search_term == "abcd"
    assert state.committed_term == "abcd"
    assert [a.display_name for a in state.user_list] == ["octocat"]
    assert state.error_message is None
    assert state.is_loading is False


@pytest.mark.asyncio
async def test_short_term_issues_no_request(make_api, settings):
    provider = RecordingProvider()

    async with make_api(provider) as api:
        pipeline = SearchPipeline(SearchClient(api), settings=settings)
        await type_and_settle(pipeline, ["abc"])

    assert provider.terms == []
    state = pipeline.store.state
    assert state.current_search_term == "abc"
    assert state.committed_term is None
    assert state.last_result is None
    assert state.error_message is None


@pytest.mark.asyncio
async def test_no_match_shows_not_found(make_api, settings):
    provider = RecordingProvider()

    async with make_api(provider) as api:
        pipeline = SearchPipeline(SearchClient(api), settings=settings)
        await type_and_settle(pipeline, ["zzzzzz"])

    assert provider.terms == ["zzzzzz"]
    assert pipeline.store.state.error_message == "User not found"
    assert pipeline.store.state.user_list == ()


@pytest.mark.asyncio
async def test_late_stale_response_is_ignored(make_api, settings, octocat_payload):
    provider = RecordingProvider({"octocat": octocat_payload}, delays={"octo": 0.1})

    async with make_api(provider) as api:
        pipeline = SearchPipeline(SearchClient(api), settings=settings)
        pipeline.dispatch("octo")
        pipeline.dispatch("octocat")
        await pipeline.aclose()

    assert provider.terms == ["octo", "octocat"]
    assert [a.display_name for a in pipeline.store.state.user_list] == ["octocat"]
    assert pipeline.store.state.error_message is None


@pytest.mark.asyncio
async def test_late_response_wins_without_guard(make_api, settings, octocat_payload):
    unguarded = settings.model_copy(update={"discard_stale_responses": False})
    provider = RecordingProvider({"octocat": octocat_payload}, delays={"octo": 0.1})

    async with make_api(provider, unguarded) as api:
        pipeline = SearchPipeline(SearchClient(api), settings=unguarded)
        pipeline.dispatch("octo")
        pipeline.dispatch("octocat")
        await pipeline.aclose()

    assert pipeline.store.state.user_list == ()
    assert pipeline.store.state.error_message == "User not found"


@pytest.mark.asyncio
async def test_transport_failure_leaves_pipeline_usable(make_api, settings, octocat_payload):
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        if calls == 1:
            raise httpx.ConnectError("offline", request=request)
        return httpx.Response(200, json=octocat_payload)

    async with make_api(handler) as api:
        pipeline = SearchPipeline(SearchClient(api), settings=settings)
        runner = asyncio.create_task(pipeline.run())

        pipeline.push("octo")
        await asyncio.sleep(0.2)
        assert pipeline.store.state.error_message == "Something went wrong"
        assert pipeline.store.state.user_list == ()

        pipeline.push("octocat")
        await asyncio.sleep(0.2)
        await pipeline.aclose()
        await runner

    assert calls == 2
    assert pipeline.store.state.error_message is None
    assert pipeline.store.state.user_list[0].display_name == "octocat"


@pytest.mark.asyncio
async def test_aclose_without_wait_cancels_in_flight(make_api, settings):
    provider = RecordingProvider(delays={"octo": 5})

    async with make_api(provider) as api:
        pipeline = SearchPipeline(SearchClient(api), settings=settings)
        task = pipeline.dispatch("octo")
        await asyncio.sleep(0.01)
        await pipeline.aclose(wait=False)

    assert task.cancelled()
    assert pipeline.store.state.last_result is None
    assert pipeline.store.state.is_loading is False


@pytest.mark.asyncio
async def test_unencodable_term_fails_like_transport_error(make_api, settings, octocat_payload):
    provider = RecordingProvider({"octocat": octocat_payload})

    async with make_api(provider) as api:
        pipeline = SearchPipeline(SearchClient(api), settings=settings)
        runner = asyncio.create_task(pipeline.run())

        pipeline.push("abcd\udcff")
        await asyncio.sleep(0.2)
        state = pipeline.store.state
        assert state.is_loading is False
        assert state.error_message == "Something went wrong"
        assert state.user_list == ()

        pipeline.push("octocat")
        await asyncio.sleep(0.2)
        await pipeline.aclose()
        await runner

    assert provider.terms == ["octocat"]
    assert pipeline.store.state.user_list[0].display_name == "octocat"


class ExplodingClient:
    async def search(self, term: str):
        raise RuntimeError("kaboom")


@pytest.mark.asyncio
async def test_unexpected_client_error_still_settles_state(settings):
    pipeline = SearchPipeline(ExplodingClient(), settings=settings)

    task = pipeline.dispatch("octocat")
    await pipeline.aclose()

    assert task.exception() is None
    state = pipeline.store.state
    assert state.is_loading is False
    assert state.error_message == "Something went wrong"
    assert state.user_list == ()
