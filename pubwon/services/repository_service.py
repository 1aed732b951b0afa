"""RepositoryService — connected GitHub repositories."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from pubwon.dao.repository_dao import RepositoryDAO
from pubwon.models.repository import Repository
from pubwon.services import ConflictError, NotFoundError


class RepositoryService:
    """Stateless service for repository registration and scan bookkeeping."""

    def __init__(self, repository_dao: RepositoryDAO) -> None:
        self._repository_dao = repository_dao

    async def list_for_user(self, session: AsyncSession, user_id: uuid.UUID) -> list[Repository]:
        return await self._repository_dao.list_by_user(session, user_id)

    async def get_owned(
        self, session: AsyncSession, user_id: uuid.UUID, repository_id: uuid.UUID
    ) -> Repository:
        """Raises :class:`NotFoundError` unless *user_id* owns the repository."""
        repo = await self._repository_dao.get_owned(session, user_id, repository_id)
        if repo is None:
            raise NotFoundError("repository not found")
        return repo

    async def get_by_id(self, session: AsyncSession, repository_id: uuid.UUID) -> Repository | None:
        return await self._repository_dao.get_by_id(session, repository_id)

    async def register(
        self,
        session: AsyncSession,
        user_id: uuid.UUID,
        *,
        github_info: dict,
        access_token: str | None = None,
    ) -> Repository:
        """Store a repository from a GitHub ``GET /repos/{full_name}`` payload.

        Raises :class:`ConflictError` if the user already connected it.
        """
        try:
            async with session.begin_nested():
                return await self._repository_dao.create(
                    session,
                    user_id=user_id,
                    github_id=str(github_info["id"]),
                    name=github_info["name"],
                    full_name=github_info["full_name"],
                    description=github_info.get("description"),
                    url=github_info["html_url"],
                    default_branch=github_info.get("default_branch") or "main",
                    github_access_token=access_token,
                )
        except IntegrityError as exc:
            raise ConflictError(
                f"repository {github_info['full_name']} is already connected"
            ) from exc

    async def list_active(self, session: AsyncSession) -> list[Repository]:
        return await self._repository_dao.list_active(session)

    async def mark_scanned(
        self,
        session: AsyncSession,
        repository_id: uuid.UUID,
        *,
        scanned_at: datetime | None,
        scan_error: str | None = None,
    ) -> None:
        await self._repository_dao.mark_scanned(
            session, repository_id, scanned_at=scanned_at, scan_error=scan_error
        )
