"""Repository scanner — builds an ActivitySummary from the GitHub API, no DB access."""

from __future__ import annotations

import asyncio
from datetime import datetime

import structlog

from pubwon.engines.activity_scanner.models import (
    ActivitySummary,
    Commit,
    Issue,
    PullRequest,
    Release,
    parse_datetime,
)
from pubwon.engines.github.client import GitHubClient

log = structlog.get_logger("pubwon.engine")

_MAX_PAGES = 3
# Each commit detail is one API call; cap it per scan.
_MAX_COMMITS_FOR_FILES = 20


async def scan_repository(
    client: GitHubClient,
    owner: str,
    repo: str,
    since: datetime,
) -> tuple[ActivitySummary, list[str]]:
    """Collect activity for ``owner/repo`` since *since*.

    Returns ``(summary, errors)``. A failing sub-collector contributes an
    empty list to the summary and one message to *errors*; the others are
    unaffected.
    """
    names = ["commits", "pull_requests", "issues", "releases"]
    results = await asyncio.gather(
        _collect_commits(client, owner, repo, since=since),
        _collect_merged_prs(client, owner, repo, since=since),
        _collect_closed_issues(client, owner, repo, since=since),
        _collect_releases(client, owner, repo, since=since),
        return_exceptions=True,
    )

    collected: dict[str, list] = {}
    errors: list[str] = []
    for name, result in zip(names, results, strict=True):
        if isinstance(result, BaseException):
            log.error(
                "scanner.sub_failed",
                collector=name,
                repository=f"{owner}/{repo}",
                error=str(result),
            )
            errors.append(f"{name}: {type(result).__name__}: {result}")
            collected[name] = []
        else:
            collected[name] = result

    commits: list[Commit] = collected["commits"]
    files_changed: set[str] = set()
    if commits:
        try:
            files_changed = await _collect_changed_files(
                client, owner, repo, [c.id for c in commits[:_MAX_COMMITS_FOR_FILES]]
            )
        except Exception as exc:
            log.error("scanner.files_failed", repository=f"{owner}/{repo}", error=str(exc))
            errors.append(f"files_changed: {type(exc).__name__}: {exc}")

    summary = ActivitySummary(
        commits=commits,
        pull_requests=collected["pull_requests"],
        issues=collected["issues"],
        releases=collected["releases"],
        contributors={c.author for c in commits},
        files_changed=files_changed,
    )
    return summary, errors


# ── sub-collectors ────────────────────────────────────────────────────────


async def _collect_commits(
    client: GitHubClient, owner: str, repo: str, *, since: datetime
) -> list[Commit]:
    """GET /repos/{owner}/{repo}/commits?since=..."""
    commits: list[Commit] = []
    async for item in client.get_paginated(
        f"/repos/{owner}/{repo}/commits", {"since": since.isoformat()}, max_pages=_MAX_PAGES
    ):
        commit = item.get("commit") or {}
        author_info = commit.get("author") or {}
        login = (item.get("author") or {}).get("login")
        commits.append(
            Commit(
                id=item["sha"],
                message=commit.get("message", ""),
                author=login or author_info.get("name") or "unknown",
                timestamp=parse_datetime(author_info.get("date")),
                url=item.get("html_url"),
            )
        )
    return commits


async def _collect_merged_prs(
    client: GitHubClient, owner: str, repo: str, *, since: datetime
) -> list[PullRequest]:
    """GET /repos/{owner}/{repo}/pulls?state=closed — keep PRs merged since *since*.

    The pulls API has no ``since`` filter and sorts by ``updated``, which is
    independent of ``merged_at``, so non-matching PRs are skipped rather than
    ending the scan.
    """
    params = {"state": "closed", "sort": "updated", "direction": "desc"}
    prs: list[PullRequest] = []
    async for item in client.get_paginated(
        f"/repos/{owner}/{repo}/pulls", params, max_pages=_MAX_PAGES
    ):
        merged_at = parse_datetime(item.get("merged_at"))
        if merged_at is None or merged_at < since:
            continue
        prs.append(
            PullRequest(
                number=item["number"],
                title=item.get("title", ""),
                merged_at=merged_at,
                url=item.get("html_url"),
            )
        )
    return prs


async def _collect_closed_issues(
    client: GitHubClient, owner: str, repo: str, *, since: datetime
) -> list[Issue]:
    """GET /repos/{owner}/{repo}/issues?state=closed — pull requests excluded."""
    params = {"state": "closed", "since": since.isoformat()}
    issues: list[Issue] = []
    async for item in client.get_paginated(
        f"/repos/{owner}/{repo}/issues", params, max_pages=_MAX_PAGES
    ):
        # the issues API also returns PRs
        if "pull_request" in item:
            continue
        closed_at = parse_datetime(item.get("closed_at"))
        if closed_at is None or closed_at < since:
            continue
        issues.append(
            Issue(
                number=item["number"],
                title=item.get("title", ""),
                closed_at=closed_at,
                url=item.get("html_url"),
            )
        )
    return issues


async def _collect_releases(
    client: GitHubClient, owner: str, repo: str, *, since: datetime
) -> list[Release]:
    """GET /repos/{owner}/{repo}/releases — published since *since*, drafts skipped."""
    releases: list[Release] = []
    async for item in client.get_paginated(
        f"/repos/{owner}/{repo}/releases", max_pages=_MAX_PAGES
    ):
        if item.get("draft"):
            continue
        published_at = parse_datetime(item.get("published_at"))
        if published_at is None or published_at < since:
            continue
        tag = item["tag_name"]
        releases.append(
            Release(
                tag=tag,
                name=item.get("name") or tag,
                published_at=published_at,
                url=item.get("html_url"),
            )
        )
    return releases


async def _collect_changed_files(
    client: GitHubClient, owner: str, repo: str, shas: list[str]
) -> set[str]:
    files: set[str] = set()
    for sha in shas:
        detail = await client.get(f"/repos/{owner}/{repo}/commits/{sha}")
        for f in detail.get("files") or []:
            files.add(f["filename"])
    return files
