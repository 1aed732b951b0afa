"""Tests for the async GitHub client (httpx.MockTransport, no network)."""

from __future__ import annotations

import time
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from pubwon.engines.github.client import (
    GitHubAuthError,
    GitHubClient,
    GitHubError,
    GitHubNetworkError,
    GitHubNotFoundError,
    GitHubValidationError,
    RateLimitError,
)


def _client(handler) -> GitHubClient:
    return GitHubClient("tok", transport=httpx.MockTransport(handler))


class TestParsing:
    def test_parse_next_link(self):
        header = (
            '<https://api.github.com/repos/a/b/commits?page=2>; rel="next", '
            '<https://api.github.com/repos/a/b/commits?page=5>; rel="last"'
        )
        url = "https://api.github.com/repos/a/b/commits?page=2"
        assert GitHubClient._parse_next_link(header) == url

    def test_parse_next_link_empty(self):
        assert GitHubClient._parse_next_link("") is None

    def test_parse_next_link_no_next(self):
        header = '<https://api.github.com/repos/a/b/commits?page=1>; rel="last"'
        assert GitHubClient._parse_next_link(header) is None

    def test_rate_limit_wait_prefers_retry_after(self):
        resp = httpx.Response(429, headers={"Retry-After": "7", "X-RateLimit-Reset": "0"})
        assert GitHubClient._get_rate_limit_wait(resp) == 7

    def test_rate_limit_wait_default(self):
        assert GitHubClient._get_rate_limit_wait(httpx.Response(429)) == 60

    def test_is_rate_limited(self):
        assert GitHubClient._is_rate_limited(
            httpx.Response(403, headers={"X-RateLimit-Remaining": "0"})
        )
        assert GitHubClient._is_rate_limited(httpx.Response(429))
        assert not GitHubClient._is_rate_limited(httpx.Response(403))
        assert not GitHubClient._is_rate_limited(httpx.Response(200))


class TestAuthHeader:
    def test_token_from_env(self, monkeypatch):
        monkeypatch.setenv("GITHUB_TOKEN", "env-token")
        client = GitHubClient()
        assert client.has_token
        assert client._client.headers["Authorization"] == "Bearer env-token"

    def test_no_token(self):
        client = GitHubClient()
        assert not client.has_token
        assert "Authorization" not in client._client.headers


class TestErrorMapping:
    @pytest.mark.parametrize(
        "status,exc_type",
        [
            (401, GitHubAuthError),
            (403, GitHubAuthError),
            (404, GitHubNotFoundError),
            (422, GitHubValidationError),
            (409, GitHubError),
        ],
    )
    @pytest.mark.asyncio
    async def test_status_codes(self, status, exc_type):
        def handler(request):
            return httpx.Response(status, json={"message": "nope"})

        async with _client(handler) as client:
            with pytest.raises(exc_type) as info:
                await client.get("/repos/a/b")
        assert info.value.status_code == status
        assert "nope" in str(info.value)

    @pytest.mark.asyncio
    async def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        async with _client(handler) as client:
            with pytest.raises(GitHubNetworkError):
                await client.get("/repos/a/b")


class TestRetries:
    @pytest.mark.asyncio
    async def test_get_retries_server_error(self):
        calls = []

        def handler(request):
            calls.append(request)
            if len(calls) == 1:
                return httpx.Response(502)
            return httpx.Response(200, json={"ok": True})

        with patch("asyncio.sleep", new_callable=AsyncMock):
            async with _client(handler) as client:
                assert await client.get("/x") == {"ok": True}
        assert len(calls) == 2

    @pytest.mark.asyncio
    async def test_get_retry_exhausted(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(503)

        with patch("asyncio.sleep", new_callable=AsyncMock):
            async with _client(handler) as client:
                with pytest.raises(GitHubNetworkError) as info:
                    await client.get("/x")
        assert len(calls) == 3
        assert info.value.status_code == 503

    @pytest.mark.asyncio
    async def test_post_not_retried_on_server_error(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(500)

        with patch("asyncio.sleep", new_callable=AsyncMock):
            async with _client(handler) as client:
                with pytest.raises(GitHubNetworkError):
                    await client.post("/repos/a/b/issues", {"title": "t"})
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_rate_limited_then_ok(self):
        calls = []
        reset = str(int(time.time()) + 30)

        def handler(request):
            calls.append(request)
            if len(calls) == 1:
                return httpx.Response(
                    403,
                    headers={"X-RateLimit-Remaining": "0", "X-RateLimit-Reset": reset},
                    json={"message": "API rate limit exceeded"},
                )
            return httpx.Response(201, json={"number": 1})

        with patch("asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
            async with _client(handler) as client:
                assert await client.post("/repos/a/b/issues", {"title": "t"}) == {"number": 1}
        assert len(calls) == 2
        waited = mock_sleep.await_args_list[0].args[0]
        assert 1 <= waited <= 300

    @pytest.mark.asyncio
    async def test_rate_limit_exhausted(self):
        def handler(request):
            return httpx.Response(429, headers={"Retry-After": "5"})

        with patch("asyncio.sleep", new_callable=AsyncMock):
            async with _client(handler) as client:
                with pytest.raises(RateLimitError) as info:
                    await client.get("/x")
        assert info.value.retry_after == 5

    @pytest.mark.asyncio
    async def test_check_rate_limit_sleeps_when_exhausted(self):
        client = GitHubClient.__new__(GitHubClient)
        response = MagicMock()
        response.headers = {
            "X-RateLimit-Remaining": "0",
            "X-RateLimit-Reset": str(int(time.time()) + 2),
        }
        with patch("asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
            await client._check_rate_limit(response)
            mock_sleep.assert_called_once()
            assert mock_sleep.call_args[0][0] >= 1

    @pytest.mark.asyncio
    async def test_check_rate_limit_no_sleep(self):
        client = GitHubClient.__new__(GitHubClient)
        response = MagicMock()
        response.headers = {"X-RateLimit-Remaining": "100"}
        with patch("asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
            await client._check_rate_limit(response)
            mock_sleep.assert_not_called()


class TestPagination:
    @pytest.mark.asyncio
    async def test_follows_next_link(self):
        seen: list[httpx.URL] = []

        def handler(request):
            seen.append(request.url)
            if request.url.params.get("page") == "2":
                return httpx.Response(200, json=[{"n": 3}])
            return httpx.Response(
                200,
                json=[{"n": 1}, {"n": 2}],
                headers={
                    "Link": '<https://api.github.com/repos/a/b/commits?page=2>; rel="next"'
                },
            )

        async with _client(handler) as client:
            items = [item async for item in client.get_paginated("/repos/a/b/commits")]

        assert [i["n"] for i in items] == [1, 2, 3]
        assert seen[0].params["per_page"] == "100"
        assert seen[1].params["page"] == "2"

    @pytest.mark.asyncio
    async def test_max_pages(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(
                200,
                json=[{"n": len(calls)}],
                headers={"Link": '<https://api.github.com/loop?page=9>; rel="next"'},
            )

        async with _client(handler) as client:
            items = [item async for item in client.get_paginated("/loop", max_pages=2)]
        assert len(items) == 2
        assert len(calls) == 2
