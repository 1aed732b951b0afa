"""PainPointService — pain point review workflow."""

from __future__ import annotations

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from pubwon.dao.pain_point_dao import PainPointDAO
from pubwon.dao.repository_dao import RepositoryDAO
from pubwon.models.pain_point import PAIN_POINT_SEVERITIES, PAIN_POINT_STATUSES, PainPoint
from pubwon.services import NotFoundError, ValidationError


class PainPointService:
    """Stateless service for listing, recording and reviewing pain points."""

    def __init__(self, pain_point_dao: PainPointDAO, repository_dao: RepositoryDAO) -> None:
        self._pain_point_dao = pain_point_dao
        self._repository_dao = repository_dao

    async def list(
        self,
        session: AsyncSession,
        user_id: uuid.UUID,
        cursor: str | None = None,
        page_size: int = 20,
        *,
        repository_id: uuid.UUID | None = None,
        status: str | None = None,
    ) -> dict:
        if status is not None and status not in PAIN_POINT_STATUSES:
            raise ValidationError(f"invalid status: {status!r}")
        if repository_id is not None:
            await self._require_owned(session, user_id, repository_id)
        page = await self._pain_point_dao.list_paginated(
            session, user_id, cursor, page_size, repository_id=repository_id, status=status
        )
        total = await self._pain_point_dao.count_filtered(
            session, user_id, repository_id=repository_id, status=status
        )
        return {
            "data": page.data,
            "next_cursor": page.next_cursor,
            "has_more": page.has_more,
            "total": total,
        }

    async def create(
        self,
        session: AsyncSession,
        user_id: uuid.UUID,
        *,
        title: str,
        description: str,
        repository_id: uuid.UUID | None = None,
        category: str | None = None,
        severity: str | None = None,
        evidence: list[str] | None = None,
    ) -> PainPoint:
        """Record a pain point, optionally attached to one of the user's repositories."""
        if severity is not None and severity not in PAIN_POINT_SEVERITIES:
            raise ValidationError(f"invalid severity: {severity!r}")
        if repository_id is not None:
            await self._require_owned(session, user_id, repository_id)
        return await self._pain_point_dao.create(
            session,
            repository_id=repository_id,
            title=title,
            description=description,
            category=category,
            severity=severity,
            evidence=evidence or [],
        )

    async def review(
        self, session: AsyncSession, user_id: uuid.UUID, pain_point_id: uuid.UUID, status: str
    ) -> PainPoint:
        """Move a pain point to ``pending``, ``approved`` or ``rejected``.

        Pain points attached to another user's repository are reported as not found.
        """
        if status not in PAIN_POINT_STATUSES:
            raise ValidationError(f"invalid status: {status!r}")
        pain_point = await self._pain_point_dao.get_by_id(session, pain_point_id)
        if pain_point is None:
            raise NotFoundError("pain point not found")
        if pain_point.repository_id is not None:
            repo = await self._repository_dao.get_owned(session, user_id, pain_point.repository_id)
            if repo is None:
                raise NotFoundError("pain point not found")
        updated = await self._pain_point_dao.set_status(session, pain_point_id, status)
        if updated is None:
            raise NotFoundError("pain point not found")
        return updated

    async def _require_owned(
        self, session: AsyncSession, user_id: uuid.UUID, repository_id: uuid.UUID
    ) -> None:
        if await self._repository_dao.get_owned(session, user_id, repository_id) is None:
            raise NotFoundError("repository not found")

    async def get_approved(
        self, session: AsyncSession, pain_point_id: uuid.UUID
    ) -> PainPoint | None:
        """Return the pain point only if it exists and has been approved."""
        pain_point = await self._pain_point_dao.get_by_id(session, pain_point_id)
        if pain_point is None or pain_point.status != "approved":
            return None
        return pain_point
