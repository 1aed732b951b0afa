"""GitHubIssueService — pain point → GitHub issue mapping."""

from __future__ import annotations

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from pubwon.dao.github_issue_dao import GitHubIssueDAO


class GitHubIssueService:
    def __init__(self, github_issue_dao: GitHubIssueDAO) -> None:
        self._dao = github_issue_dao

    async def has_issue(self, session: AsyncSession, pain_point_id: uuid.UUID) -> bool:
        return await self._dao.exists_for_pain_point(session, pain_point_id)

    async def record(
        self,
        session: AsyncSession,
        *,
        repository_id: uuid.UUID,
        pain_point_id: uuid.UUID,
        issue_number: int,
        issue_id: str,
        title: str,
        url: str,
        labels: list[str],
    ) -> bool:
        """Store the mapping; False if the pain point was already mapped."""
        return await self._dao.insert_mapping(
            session,
            repository_id=repository_id,
            pain_point_id=pain_point_id,
            issue_number=issue_number,
            issue_id=issue_id,
            title=title,
            url=url,
            labels=labels,
        )
