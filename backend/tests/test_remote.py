"""Tests for the remote API clients against a mocked HTTP transport."""

import json
from collections.abc import Callable

import httpx
import pytest
from tenacity import wait_none

from cyberpulse.config import Settings
from cyberpulse.core.errors import NetworkError, ParseError
from cyberpulse.remote import (
    CtfTimeClient,
    GitHubSearchClient,
    HibpClient,
    NewsApiClient,
    NvdClient,
    RedditSearchClient,
)

Handler = Callable[[httpx.Request], httpx.Response]


class Recorder:
    """Wraps a handler and keeps every request it saw."""

    def __init__(self, handler: Handler):
        self.handler = handler
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        news_api_key="news-key",
        hibp_api_key="hibp-key",
        nvd_api_key="",
        http_retry_attempts=3,
        user_agent="CyberPulse/0.1",
    )


@pytest.fixture
async def make_client(settings: Settings):
    clients = []

    def make(client_cls, handler: Handler):
        recorder = Recorder(handler)
        client = client_cls.from_settings(
            settings, transport=recorder.transport, retry_wait=wait_none()
        )
        clients.append(client)
        return client, recorder

    yield make
    for client in clients:
        await client.close()


class TestApiClient:
    async def test_params_and_headers(self, make_client) -> None:
        client, recorder = make_client(
            NewsApiClient, lambda request: httpx.Response(200, json={"articles": [{"id": "a"}]})
        )

        articles = await client.list_latest(page=2, limit=5)

        assert articles == [{"id": "a"}]
        request = recorder.requests[0]
        assert request.url.path == "/v2/news/latest"
        assert request.url.params["page"] == "2"
        assert request.url.params["limit"] == "5"
        assert request.headers["X-Api-Key"] == "news-key"
        assert request.headers["User-Agent"] == "CyberPulse/0.1"

    async def test_http_error_is_not_retried(self, make_client) -> None:
        client, recorder = make_client(NewsApiClient, lambda request: httpx.Response(500))

        with pytest.raises(NetworkError) as excinfo:
            await client.list_latest()

        assert excinfo.value.status_code == 500
        assert len(recorder.requests) == 1

    async def test_connection_errors_are_retried(self, make_client) -> None:
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client, recorder = make_client(NewsApiClient, refuse)

        with pytest.raises(NetworkError):
            await client.list_latest()

        assert len(recorder.requests) == 3

    async def test_recovers_after_transient_failure(self, make_client) -> None:
        attempts = []

        def flaky(request: httpx.Request) -> httpx.Response:
            attempts.append(request)
            if len(attempts) == 1:
                raise httpx.ConnectError("reset", request=request)
            return httpx.Response(200, json={"articles": []})

        client, _ = make_client(NewsApiClient, flaky)

        assert await client.list_latest() == []
        assert len(attempts) == 2

    async def test_timeout(self, make_client) -> None:
        def slow(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        client, _ = make_client(NewsApiClient, slow)

        with pytest.raises(NetworkError, match="timed out"):
            await client.list_latest()

    async def test_invalid_json(self, make_client) -> None:
        client, _ = make_client(NewsApiClient, lambda request: httpx.Response(200, text="<html>"))

        with pytest.raises(ParseError):
            await client.list_latest()

    async def test_wrong_shape(self, make_client) -> None:
        client, _ = make_client(
            NewsApiClient, lambda request: httpx.Response(200, json={"articles": "nope"})
        )

        with pytest.raises(ParseError):
            await client.search("ransomware")

    async def test_category_path(self, make_client) -> None:
        client, recorder = make_client(
            NewsApiClient, lambda request: httpx.Response(200, json={"articles": []})
        )

        await client.list_by_category("MALWARE")

        assert recorder.requests[0].url.path == "/v2/news/category/malware"


class TestHibpClient:
    async def test_clean_account_is_empty(self, make_client) -> None:
        client, recorder = make_client(HibpClient, lambda request: httpx.Response(404))

        assert await client.list_by_email("user@example.com") == []
        assert await client.list_pastes_by_email("user@example.com") == []
        assert await client.get_by_name("Nope") is None
        request = recorder.requests[0]
        assert "breachedaccount/" in request.url.path
        assert request.url.params["truncateResponse"] == "false"
        assert request.headers["hibp-api-key"] == "hibp-key"

    async def test_unauthorized_is_an_error(self, make_client) -> None:
        client, _ = make_client(HibpClient, lambda request: httpx.Response(401))

        with pytest.raises(NetworkError) as excinfo:
            await client.list_by_email("user@example.com")

        assert excinfo.value.status_code == 401

    async def test_list_all(self, make_client) -> None:
        client, _ = make_client(
            HibpClient, lambda request: httpx.Response(200, json=[{"Name": "Adobe"}, "junk"])
        )

        assert await client.list_all() == [{"Name": "Adobe"}]


class TestNvdClient:
    async def test_search_drops_unset_params(self, make_client) -> None:
        client, recorder = make_client(
            NvdClient, lambda request: httpx.Response(200, json={"vulnerabilities": []})
        )

        await client.search(severity="HIGH", limit=10)

        params = recorder.requests[0].url.params
        assert recorder.requests[0].url.path == "/rest/json/cves/2.0"
        assert params["cvssV3Severity"] == "HIGH"
        assert params["resultsPerPage"] == "10"
        assert "keywordSearch" not in params
        assert "apiKey" not in recorder.requests[0].headers

    async def test_get_by_id(self, make_client) -> None:
        body = {"vulnerabilities": [{"cve": {"id": "CVE-2021-44228"}}]}
        client, recorder = make_client(NvdClient, lambda request: httpx.Response(200, json=body))

        found = await client.get_by_id("CVE-2021-44228")

        assert found == {"cve": {"id": "CVE-2021-44228"}}
        assert recorder.requests[0].url.params["cveId"] == "CVE-2021-44228"

    async def test_get_by_id_empty(self, make_client) -> None:
        client, _ = make_client(
            NvdClient, lambda request: httpx.Response(200, json={"vulnerabilities": []})
        )

        assert await client.get_by_id("CVE-2099-0001") is None


class TestSearchClients:
    async def test_reddit_children(self, make_client) -> None:
        body = {"data": {"children": [{"data": {"title": "one"}}, {"kind": "t3"}]}}
        client, recorder = make_client(
            RedditSearchClient, lambda request: httpx.Response(200, json=body)
        )

        posts = await client.search("log4j", limit=3)

        assert posts == [{"title": "one"}]
        assert recorder.requests[0].url.path == "/search.json"
        assert recorder.requests[0].url.params["q"] == "log4j"

    async def test_reddit_wrong_shape(self, make_client) -> None:
        client, _ = make_client(RedditSearchClient, lambda request: httpx.Response(200, json=[]))

        with pytest.raises(ParseError):
            await client.search("log4j")

    async def test_github_items(self, make_client) -> None:
        body = {"items": [{"full_name": "octo/tool"}]}
        client, recorder = make_client(
            GitHubSearchClient, lambda request: httpx.Response(200, json=body)
        )

        assert await client.search("topic:cybersecurity nmap") == [{"full_name": "octo/tool"}]
        request = recorder.requests[0]
        assert request.url.params["sort"] == "stars"
        assert request.url.params["per_page"] == "3"
        assert request.headers["Accept"] == "application/vnd.github+json"

    async def test_ctftime_window(self, make_client) -> None:
        client, recorder = make_client(
            CtfTimeClient, lambda request: httpx.Response(200, content=json.dumps([{"id": 1}]))
        )

        events = await client.list_events(limit=5, start=100, finish=200)

        assert events == [{"id": 1}]
        params = recorder.requests[0].url.params
        assert (params["limit"], params["start"], params["finish"]) == ("5", "100", "200")
