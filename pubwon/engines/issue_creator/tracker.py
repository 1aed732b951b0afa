"""GitHub-backed issue tracker."""

from __future__ import annotations

from typing import Any

from pubwon.core.github import split_full_name
from pubwon.engines.github.client import GitHubClient
from pubwon.engines.issue_creator.models import IssueDraft, IssueRef


class GitHubIssueTracker:
    """Creates issues through ``POST /repos/{owner}/{repo}/issues``.

    Failures propagate as :class:`~pubwon.engines.github.client.GitHubError`
    subclasses; the bulk creator counts them per item.
    """

    def __init__(self, client: GitHubClient) -> None:
        self._client = client

    async def verify_repository(self, repository: str) -> dict[str, Any]:
        """GET the repository; raises on auth failure or when it is invisible."""
        owner, repo = split_full_name(repository)
        return await self._client.get(f"/repos/{owner}/{repo}")

    async def create_issue(self, repository: str, draft: IssueDraft) -> IssueRef:
        owner, repo = split_full_name(repository)
        payload: dict[str, Any] = {"title": draft.title, "body": draft.body}
        if draft.labels:
            payload["labels"] = draft.labels
        data = await self._client.post(f"/repos/{owner}/{repo}/issues", payload)
        return IssueRef(
            number=data["number"],
            id=str(data["id"]),
            url=data["html_url"],
            title=data.get("title", draft.title),
            labels=[
                label["name"] if isinstance(label, dict) else str(label)
                for label in data.get("labels") or []
            ],
        )
