"""IssueCreatorRunner — setup checks + bulk creation backed by the database."""

from __future__ import annotations

import os
import uuid
from collections.abc import Callable, Sequence

import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pubwon.engines.github.client import GitHubAuthError, GitHubClient, GitHubNotFoundError
from pubwon.engines.issue_creator.creator import bulk_create_issues
from pubwon.engines.issue_creator.models import BulkCreateStats, IssueRef, PainPointContent
from pubwon.engines.issue_creator.tracker import GitHubIssueTracker
from pubwon.services import SetupError
from pubwon.services.github_issue_service import GitHubIssueService
from pubwon.services.pain_point_service import PainPointService
from pubwon.services.repository_service import RepositoryService

log = structlog.get_logger("pubwon.engine")


class _DatabaseStore:
    """Lookup, duplicate check and recorder over the database.

    Every call opens its own session: items run concurrently and an
    ``AsyncSession`` must not be shared between tasks.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        repository_id: uuid.UUID,
        pain_point_service: PainPointService,
        github_issue_service: GitHubIssueService,
    ) -> None:
        self._session_factory = session_factory
        self._repository_id = repository_id
        self._pain_point_service = pain_point_service
        self._github_issue_service = github_issue_service

    async def get_pain_point(self, pain_point_id: uuid.UUID) -> PainPointContent | None:
        async with self._session_factory() as session:
            pain_point = await self._pain_point_service.get_approved(session, pain_point_id)
        if pain_point is None:
            return None
        if pain_point.repository_id not in (None, self._repository_id):
            log.info(
                "issue_creator.skipped",
                pain_point_id=str(pain_point_id),
                reason="other_repository",
            )
            return None
        return PainPointContent(
            id=pain_point.id,
            title=pain_point.title,
            description=pain_point.description,
            category=pain_point.category,
            severity=pain_point.severity,
            evidence=list(pain_point.evidence or []),
        )

    async def has_issue(self, pain_point_id: uuid.UUID, content: PainPointContent) -> bool:
        async with self._session_factory() as session:
            return await self._github_issue_service.has_issue(session, pain_point_id)

    async def record_issue(self, pain_point_id: uuid.UUID, ref: IssueRef) -> None:
        async with self._session_factory() as session:
            async with session.begin():
                await self._github_issue_service.record(
                    session,
                    repository_id=self._repository_id,
                    pain_point_id=pain_point_id,
                    issue_number=ref.number,
                    issue_id=ref.id,
                    title=ref.title,
                    url=ref.url,
                    labels=ref.labels,
                )


class IssueCreatorRunner:
    """Resolves the repository and token, then hands off to :func:`bulk_create_issues`."""

    def __init__(
        self,
        repository_service: RepositoryService,
        pain_point_service: PainPointService,
        github_issue_service: GitHubIssueService,
        client_factory: Callable[[str], GitHubClient] = GitHubClient,
    ) -> None:
        self._repository_service = repository_service
        self._pain_point_service = pain_point_service
        self._github_issue_service = github_issue_service
        self._client_factory = client_factory

    async def run(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        user_id: uuid.UUID,
        repository_id: uuid.UUID,
        pain_point_ids: Sequence[uuid.UUID],
        access_token: str | None = None,
    ) -> BulkCreateStats:
        """Create issues for *pain_point_ids* in one of *user_id*'s repositories.

        Raises :class:`~pubwon.services.NotFoundError` for an unknown or
        foreign repository and :class:`~pubwon.services.SetupError` when no
        token is available or GitHub refuses access to the repository.
        Everything after that is counted in the returned stats.
        """
        if not pain_point_ids:
            return BulkCreateStats()

        async with session_factory() as session:
            repo = await self._repository_service.get_owned(session, user_id, repository_id)
            full_name = repo.full_name
            stored_token = repo.github_access_token

        token = access_token or stored_token or os.environ.get("GITHUB_TOKEN")
        if not token:
            raise SetupError("no GitHub access token available for this repository")

        async with self._client_factory(token) as client:
            tracker = GitHubIssueTracker(client)
            try:
                await tracker.verify_repository(full_name)
            except (GitHubAuthError, GitHubNotFoundError) as exc:
                log.warning("issue_creator.setup_failed", repository=full_name, error=str(exc))
                raise SetupError(f"cannot access repository {full_name}: {exc}") from exc
            except ValueError as exc:
                raise SetupError(str(exc)) from exc

            store = _DatabaseStore(
                session_factory, repository_id, self._pain_point_service, self._github_issue_service
            )
            stats = await bulk_create_issues(
                full_name,
                pain_point_ids,
                tracker=tracker,
                lookup=store,
                duplicates=store,
                recorder=store,
            )

        log.info(
            "issue_creator.done",
            repository=full_name,
            created=stats.created,
            skipped=stats.skipped,
            errors=stats.errors,
        )
        return stats
