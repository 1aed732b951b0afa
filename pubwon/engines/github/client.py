"""Async GitHub REST client with pagination, rate-limit handling, and retries."""

from __future__ import annotations

import asyncio
import os
import re
import time
from collections.abc import AsyncGenerator
from typing import Any

import httpx
import structlog

log = structlog.get_logger("pubwon.engine")

_NEXT_LINK_RE = re.compile(r'<([^>]+)>;\s*rel="next"')

_MAX_RETRIES = 3
_RETRY_BASE_DELAY = 1.0  # seconds
_MAX_RATE_LIMIT_WAIT = 300  # seconds


# ── errors ─────────────────────────────────────────────────────────────────


class GitHubError(Exception):
    """Base class for GitHub API failures."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class GitHubAuthError(GitHubError):
    """401, or 403 that is not a rate limit — token missing, revoked or under-scoped."""


class GitHubNotFoundError(GitHubError):
    """404 — repository or resource does not exist (or is invisible to the token)."""


class GitHubValidationError(GitHubError):
    """422 — GitHub rejected the payload."""


class GitHubNetworkError(GitHubError):
    """Transport failure, timeout, or 5xx after retries."""


class RateLimitError(GitHubError):
    """Rate limit still exhausted after the allowed retries."""

    def __init__(self, retry_after: int) -> None:
        self.retry_after = retry_after
        super().__init__(f"rate limit exceeded, retry after {retry_after}s", status_code=403)


# ── client ─────────────────────────────────────────────────────────────────


class GitHubClient:
    """Thin async wrapper around the GitHub REST API.

    *transport* lets tests plug in an ``httpx.MockTransport``.
    """

    def __init__(
        self,
        token: str | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        resolved_token = token or os.environ.get("GITHUB_TOKEN")
        headers: dict[str, str] = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if resolved_token:
            headers["Authorization"] = f"Bearer {resolved_token}"
        self.has_token = bool(resolved_token)
        self._client = httpx.AsyncClient(
            base_url="https://api.github.com",
            headers=headers,
            timeout=30.0,
            transport=transport,
        )

    # ── lifecycle ──────────────────────────────────────────────────────────

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    # ── public ─────────────────────────────────────────────────────────────

    async def get_paginated(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        *,
        max_pages: int = 10,
    ) -> AsyncGenerator[dict[str, Any], None]:
        """Yield JSON items from a paginated endpoint.

        Follows ``Link: <...>; rel="next"`` headers and stops after
        *max_pages* pages.
        """
        url: str | None = path
        params = dict(params or {})
        params.setdefault("per_page", 100)
        page = 0

        while url and page < max_pages:
            response = await self._request("GET", url, params=params if page == 0 else None)
            data = response.json()
            if isinstance(data, list):
                for item in data:
                    yield item
            else:
                yield data
            url = self._parse_next_link(response.headers.get("Link", ""))
            page += 1

    async def get(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        """Single-resource GET, returns parsed JSON."""
        response = await self._request("GET", path, params=params)
        return response.json()

    async def post(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        """POST a JSON body, returns parsed JSON.

        Only rate-limit responses are retried; a 5xx on a create call may
        already have taken effect on GitHub's side.
        """
        response = await self._request("POST", path, json=payload)
        return response.json()

    # ── internal ───────────────────────────────────────────────────────────

    async def _request(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """Send a request, backing off on rate limits (and 5xx/timeouts for GETs)."""
        idempotent = method == "GET"
        last_exc: GitHubError | None = None

        for attempt in range(_MAX_RETRIES):
            try:
                resp = await self._client.request(method, url, params=params, json=json)
            except httpx.TimeoutException as exc:
                log.warning("github.timeout", url=url, attempt=attempt + 1)
                last_exc = GitHubNetworkError(f"timeout calling {url}: {exc}")
                if not idempotent:
                    break
            except httpx.TransportError as exc:
                raise GitHubNetworkError(f"transport error calling {url}: {exc}") from exc
            else:
                if self._is_rate_limited(resp):
                    wait = self._get_rate_limit_wait(resp)
                    log.warning(
                        "github.rate_limit",
                        url=url,
                        wait_seconds=wait,
                        attempt=attempt + 1,
                        max_retries=_MAX_RETRIES,
                    )
                    last_exc = RateLimitError(wait)
                    if attempt < _MAX_RETRIES - 1:
                        await asyncio.sleep(min(wait, _MAX_RATE_LIMIT_WAIT))
                    continue

                if resp.status_code < 500:
                    self._raise_for_status(resp, url)
                    await self._check_rate_limit(resp)
                    return resp

                log.warning(
                    "github.server_error",
                    url=url,
                    status=resp.status_code,
                    attempt=attempt + 1,
                    max_retries=_MAX_RETRIES,
                )
                last_exc = GitHubNetworkError(
                    f"GitHub returned {resp.status_code} for {url}", status_code=resp.status_code
                )
                if not idempotent:
                    break

            if attempt < _MAX_RETRIES - 1:
                await asyncio.sleep(_RETRY_BASE_DELAY * (2**attempt))

        raise last_exc  # type: ignore[misc]

    @staticmethod
    def _raise_for_status(resp: httpx.Response, url: str) -> None:
        """Map 4xx responses onto the GitHubError hierarchy."""
        status = resp.status_code
        if status < 400:
            return
        try:
            message = resp.json().get("message", "")
        except ValueError:
            message = resp.text
        detail = f"{status} from {url}: {message}"
        if status in (401, 403):
            raise GitHubAuthError(detail, status_code=status)
        if status == 404:
            raise GitHubNotFoundError(detail, status_code=status)
        if status == 422:
            raise GitHubValidationError(detail, status_code=status)
        raise GitHubError(detail, status_code=status)

    async def _check_rate_limit(self, response: httpx.Response) -> None:
        """Sleep until the window resets if this response used the last request."""
        remaining = self._parse_header_int(response.headers.get("X-RateLimit-Remaining"))
        if remaining is not None and remaining == 0:
            wait = self._get_rate_limit_wait(response)
            log.warning("github.rate_limit_wait", wait_seconds=wait)
            await asyncio.sleep(min(wait, _MAX_RATE_LIMIT_WAIT))

    @staticmethod
    def _is_rate_limited(response: httpx.Response) -> bool:
        """403/429 caused by the primary or secondary rate limit."""
        if response.status_code not in (403, 429):
            return False
        remaining = response.headers.get("X-RateLimit-Remaining")
        if remaining is not None:
            try:
                if int(remaining) == 0:
                    return True
            except (ValueError, TypeError):
                pass
        return "Retry-After" in response.headers or response.status_code == 429

    @staticmethod
    def _get_rate_limit_wait(response: httpx.Response) -> int:
        """Seconds to wait, from Retry-After or X-RateLimit-Reset."""
        retry_after = response.headers.get("Retry-After")
        if retry_after is not None:
            try:
                return max(int(retry_after), 1)
            except (ValueError, TypeError):
                pass
        reset_ts = response.headers.get("X-RateLimit-Reset")
        if reset_ts is not None:
            try:
                return max(int(reset_ts) - int(time.time()), 1)
            except (ValueError, TypeError):
                pass
        return 60

    @staticmethod
    def _parse_header_int(value: str | None) -> int | None:
        if value is None:
            return None
        try:
            return int(value)
        except (ValueError, TypeError):
            return None

    @staticmethod
    def _parse_next_link(link_header: str) -> str | None:
        match = _NEXT_LINK_RE.search(link_header)
        return match.group(1) if match else None
