"""ActivityService — stored scan windows."""

from __future__ import annotations

import uuid
from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from pubwon.dao.activity_dao import ActivityDAO
from pubwon.engines.activity_scanner.models import ActivitySummary
from pubwon.models.activity import RepositoryActivity


class ActivityService:
    def __init__(self, activity_dao: ActivityDAO) -> None:
        self._activity_dao = activity_dao

    async def record(
        self,
        session: AsyncSession,
        repository_id: uuid.UUID,
        *,
        activity_date: date,
        summary: ActivitySummary,
        is_significant: bool,
    ) -> RepositoryActivity:
        """Persist one scan window with its counts and a JSON snapshot."""
        return await self._activity_dao.create(
            session,
            repository_id=repository_id,
            activity_date=activity_date,
            commits_count=len(summary.commits),
            prs_merged_count=len(summary.pull_requests),
            issues_closed_count=len(summary.issues),
            releases_count=len(summary.releases),
            activity_summary=summary.to_dict(),
            is_significant=is_significant,
        )

    async def list_for_repository(
        self, session: AsyncSession, repository_id: uuid.UUID, limit: int = 30
    ) -> list[RepositoryActivity]:
        return await self._activity_dao.list_by_repository(session, repository_id, limit)

    async def list_pending_digest(
        self, session: AsyncSession, limit: int
    ) -> list[RepositoryActivity]:
        """Significant windows that do not have a blog post yet."""
        return await self._activity_dao.list_significant_without_post(session, limit)
