"""ActivityDAO — repository_activity table operations."""

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pubwon.dao.base import BaseDAO
from pubwon.models.activity import RepositoryActivity
from pubwon.models.blog_post import BlogPost


class ActivityDAO(BaseDAO[RepositoryActivity]):
    model = RepositoryActivity

    async def list_by_repository(
        self, session: AsyncSession, repository_id: uuid.UUID, limit: int = 30
    ) -> list[RepositoryActivity]:
        stmt = (
            select(RepositoryActivity)
            .where(RepositoryActivity.repository_id == repository_id)
            .order_by(RepositoryActivity.created_at.desc())
            .limit(limit)
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    async def list_significant_without_post(
        self, session: AsyncSession, limit: int
    ) -> list[RepositoryActivity]:
        """Significant activity windows that have no blog post yet (oldest first)."""
        stmt = (
            select(RepositoryActivity)
            .outerjoin(BlogPost, BlogPost.activity_id == RepositoryActivity.id)
            .where(RepositoryActivity.is_significant.is_(True), BlogPost.id.is_(None))
            .order_by(RepositoryActivity.created_at.asc())
            .limit(limit)
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())
