"""RepositoryDAO — repositories table operations."""

import uuid
from datetime import datetime

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from pubwon.dao.base import BaseDAO
from pubwon.models.repository import Repository


class RepositoryDAO(BaseDAO[Repository]):
    model = Repository

    async def list_by_user(self, session: AsyncSession, user_id: uuid.UUID) -> list[Repository]:
        stmt = (
            select(Repository)
            .where(Repository.user_id == user_id)
            .order_by(Repository.full_name)
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    async def get_owned(
        self, session: AsyncSession, user_id: uuid.UUID, pk: uuid.UUID
    ) -> Repository | None:
        """Return the repository only if *user_id* owns it."""
        self._require_pk(pk)
        stmt = select(Repository).where(Repository.id == pk, Repository.user_id == user_id)
        result = await session.execute(stmt)
        return result.scalars().first()

    async def list_active(self, session: AsyncSession) -> list[Repository]:
        """All repositories the scanner should visit, oldest scan first."""
        stmt = (
            select(Repository)
            .where(Repository.is_active.is_(True))
            .order_by(Repository.last_scanned_at.asc().nullsfirst(), Repository.full_name)
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    async def mark_scanned(
        self,
        session: AsyncSession,
        pk: uuid.UUID,
        *,
        scanned_at: datetime | None,
        scan_error: str | None,
    ) -> None:
        """Record a scan outcome. ``scanned_at=None`` keeps the previous value."""
        self._require_pk(pk)
        table = Repository.__table__
        stmt = (
            update(Repository)
            .where(table.c.id == pk)
            .values(
                last_scanned_at=func.coalesce(scanned_at, table.c.last_scanned_at),
                scan_error=scan_error,
                updated_at=func.now(),
            )
        )
        await session.execute(stmt)
