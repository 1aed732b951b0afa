"""PainPointDAO — pain_points table operations."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from pubwon.dao.base import BaseDAO, Page
from pubwon.models.pain_point import PainPoint
from pubwon.models.repository import Repository


class PainPointDAO(BaseDAO[PainPoint]):
    model = PainPoint

    def _filtered(
        self, user_id: uuid.UUID, repository_id: uuid.UUID | None, status: str | None
    ):
        # unattached pain points are shared; attached ones belong to the repository owner
        owned = select(Repository.id).where(Repository.user_id == user_id)
        query = select(PainPoint).where(
            or_(PainPoint.repository_id.is_(None), PainPoint.repository_id.in_(owned))
        )
        if repository_id is not None:
            query = query.where(PainPoint.repository_id == repository_id)
        if status is not None:
            query = query.where(PainPoint.status == status)
        return query

    async def list_paginated(
        self,
        session: AsyncSession,
        user_id: uuid.UUID,
        cursor: str | None = None,
        page_size: int = 20,
        *,
        repository_id: uuid.UUID | None = None,
        status: str | None = None,
    ) -> Page[PainPoint]:
        query = self._filtered(user_id, repository_id, status)
        return await self.paginate(session, query, cursor, page_size)

    async def count_filtered(
        self,
        session: AsyncSession,
        user_id: uuid.UUID,
        *,
        repository_id: uuid.UUID | None = None,
        status: str | None = None,
    ) -> int:
        return await self.count(session, self._filtered(user_id, repository_id, status))

    async def set_status(
        self, session: AsyncSession, pk: uuid.UUID, status: str
    ) -> PainPoint | None:
        return await self.update(
            session, pk, status=status, reviewed_at=datetime.now(timezone.utc)
        )
