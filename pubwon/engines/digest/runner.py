"""DigestRunner — significant activity → draft blog posts."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field

import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pubwon.engines.activity_scanner.models import ActivitySummary
from pubwon.engines.digest.template import render_digest
from pubwon.models.activity import RepositoryActivity
from pubwon.services.activity_service import ActivityService
from pubwon.services.blog_service import BlogService
from pubwon.services.repository_service import RepositoryService

log = structlog.get_logger("pubwon.engine")

_BATCH_LIMIT = 20


@dataclass
class DigestResult:
    activity_id: uuid.UUID
    blog_post_id: uuid.UUID | None = None
    error: str | None = None


class DigestRunner:
    """Turns each significant activity window without a post into a draft."""

    def __init__(
        self,
        activity_service: ActivityService,
        repository_service: RepositoryService,
        blog_service: BlogService,
    ) -> None:
        self._activity_service = activity_service
        self._repository_service = repository_service
        self._blog_service = blog_service

    async def run(self, session: AsyncSession, activity: RepositoryActivity) -> DigestResult:
        result = DigestResult(activity_id=activity.id)
        repo = await self._repository_service.get_by_id(session, activity.repository_id)
        if repo is None:
            result.error = f"repository {activity.repository_id} not found"
            return result

        summary = ActivitySummary.from_dict(activity.activity_summary)
        digest = render_digest(repo.full_name, summary, activity.activity_date)
        post = await self._blog_service.create_draft(
            session,
            repository_id=repo.id,
            activity_id=activity.id,
            title=digest.title,
            slug=digest.slug,
            content=digest.content,
            excerpt=digest.excerpt,
        )
        result.blog_post_id = post.id
        log.info("digest.created", activity_id=str(activity.id), slug=post.slug)
        return result

    async def run_batch(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        limit: int = _BATCH_LIMIT,
    ) -> list[DigestResult]:
        """One session per activity so a failed draft does not roll back the others."""
        async with session_factory() as session:
            pending = await self._activity_service.list_pending_digest(session, limit)

        results: list[DigestResult] = []
        for activity in pending:
            try:
                async with session_factory() as session:
                    async with session.begin():
                        results.append(await self.run(session, activity))
            except Exception as exc:
                log.error("digest.failed", activity_id=str(activity.id), error=str(exc))
                results.append(DigestResult(activity_id=activity.id, error=str(exc)))
        return results
