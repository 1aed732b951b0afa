"""ActivityScanRunner — orchestrates the scanner + Service-layer DB writes."""

from __future__ import annotations

import asyncio
import os
import uuid
from datetime import datetime, timedelta, timezone

import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pubwon.core.github import split_full_name
from pubwon.engines.activity_scanner.models import ScanResult
from pubwon.engines.activity_scanner.scanner import scan_repository
from pubwon.engines.activity_scanner.significance import is_significant_activity
from pubwon.engines.github.client import GitHubClient
from pubwon.services.activity_service import ActivityService
from pubwon.services.repository_service import RepositoryService

log = structlog.get_logger("pubwon.engine")

_MAX_CONCURRENCY = 5


def _lookback() -> timedelta:
    return timedelta(hours=int(os.environ.get("PUBWON_SCAN_LOOKBACK_HOURS", "24")))


class ActivityScanRunner:
    """Orchestration layer: scanner → classifier → Service-layer DB writes."""

    def __init__(
        self, repository_service: RepositoryService, activity_service: ActivityService
    ) -> None:
        self._repository_service = repository_service
        self._activity_service = activity_service

    async def run(
        self,
        session: AsyncSession,
        repository_id: uuid.UUID,
        client: GitHubClient | None = None,
    ) -> ScanResult:
        """Scan one repository and persist a ``repository_activity`` row.

        1. Read repository via RepositoryService
        2. Call ``scan_repository()`` for the window since the last scan
        3. Classify with ``is_significant_activity()``
        4. Store the window via ActivityService
        5. Update ``scan_error``; ``last_scanned_at`` only advances when every
           collector succeeded

        When *client* is omitted one is built from the repository's stored
        token (falling back to ``GITHUB_TOKEN``) and closed afterwards.
        """
        result = ScanResult(repository_id=repository_id)

        repo = await self._repository_service.get_by_id(session, repository_id)
        if repo is None:
            result.errors.append(f"repository {repository_id} not found")
            return result

        try:
            owner, name = split_full_name(repo.full_name)
        except ValueError as exc:
            result.errors.append(str(exc))
            await self._repository_service.mark_scanned(
                session, repository_id, scanned_at=None, scan_error=str(exc)
            )
            return result

        now = datetime.now(timezone.utc)
        since = repo.last_scanned_at or (now - _lookback())

        if client is None:
            async with GitHubClient(repo.github_access_token) as owned:
                summary, errors = await scan_repository(owned, owner, name, since)
        else:
            summary, errors = await scan_repository(client, owner, name, since)

        result.errors.extend(errors)
        result.counts = summary.counts()
        result.significant = is_significant_activity(summary)

        activity = await self._activity_service.record(
            session,
            repository_id,
            activity_date=now.date(),
            summary=summary,
            is_significant=result.significant,
        )
        result.activity_id = activity.id

        # a failed collector keeps the old cursor so its window is fetched again
        await self._repository_service.mark_scanned(
            session,
            repository_id,
            scanned_at=None if errors else now,
            scan_error="; ".join(errors) if errors else None,
        )
        log.info(
            "scanner.done",
            repository=repo.full_name,
            significant=result.significant,
            **result.counts,
        )
        return result

    async def run_all(
        self,
        session_factory: async_sessionmaker[AsyncSession],
    ) -> list[ScanResult]:
        """Scan every active repository with bounded concurrency."""
        async with session_factory() as session:
            async with session.begin():
                repositories = await self._repository_service.list_active(session)

        if not repositories:
            return []

        sem = asyncio.Semaphore(_MAX_CONCURRENCY)

        async def _run_one(repo_id: uuid.UUID) -> ScanResult:
            async with sem:
                try:
                    async with session_factory() as session:
                        async with session.begin():
                            return await self.run(session, repo_id)
                except Exception as exc:
                    log.error("scanner.failed", repository_id=str(repo_id), error=str(exc))
                    try:
                        async with session_factory() as err_session:
                            async with err_session.begin():
                                await self._repository_service.mark_scanned(
                                    err_session, repo_id, scanned_at=None, scan_error=str(exc)
                                )
                    except Exception:
                        log.warning("scanner.status_update_failed", repository_id=str(repo_id))
                    r = ScanResult(repository_id=repo_id)
                    r.errors.append(str(exc))
                    return r

        tasks = [_run_one(repo.id) for repo in repositories]
        return list(await asyncio.gather(*tasks))
