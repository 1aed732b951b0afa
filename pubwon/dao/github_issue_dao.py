"""GitHubIssueDAO — github_issues table operations."""

import uuid
from typing import Any

from sqlalchemy import exists, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from pubwon.dao.base import BaseDAO
from pubwon.models.github_issue import GitHubIssue


class GitHubIssueDAO(BaseDAO[GitHubIssue]):
    model = GitHubIssue

    async def exists_for_pain_point(self, session: AsyncSession, pain_point_id: uuid.UUID) -> bool:
        stmt = select(exists().where(GitHubIssue.pain_point_id == pain_point_id))
        result = await session.execute(stmt)
        return result.scalar_one()

    async def insert_mapping(self, session: AsyncSession, **values: Any) -> bool:
        """Insert a mapping row; returns False if the pain point already had one."""
        stmt = (
            insert(GitHubIssue)
            .values(**values)
            .on_conflict_do_nothing(index_elements=["pain_point_id"])
            .returning(GitHubIssue.id)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none() is not None
