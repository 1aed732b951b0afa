"""Cron router — one pipeline cycle per call, for external schedulers."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pubwon.api.deps import (
    get_digest_runner,
    get_newsletter_runner,
    get_scan_runner,
    get_session_factory,
    require_cron_secret,
)
from pubwon.api.schemas.cron import CronRunResponse
from pubwon.engines.activity_scanner.runner import ActivityScanRunner
from pubwon.engines.digest.runner import DigestRunner
from pubwon.engines.notification.runner import NewsletterRunner

router = APIRouter(dependencies=[Depends(require_cron_secret)])


@router.get("/scan-repositories", response_model=CronRunResponse)
async def scan_repositories(
    runner: ActivityScanRunner = Depends(get_scan_runner),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> CronRunResponse:
    results = await runner.run_all(session_factory)
    return CronRunResponse(
        job="scan-repositories",
        processed=len(results),
        failed=sum(1 for r in results if r.activity_id is None),
    )


@router.get("/generate-digests", response_model=CronRunResponse)
async def generate_digests(
    runner: DigestRunner = Depends(get_digest_runner),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> CronRunResponse:
    results = await runner.run_batch(session_factory)
    return CronRunResponse(
        job="generate-digests",
        processed=sum(1 for r in results if r.blog_post_id is not None),
        failed=sum(1 for r in results if r.error is not None),
    )


@router.get("/send-newsletters", response_model=CronRunResponse)
async def send_newsletters(
    runner: NewsletterRunner = Depends(get_newsletter_runner),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> CronRunResponse:
    results = await runner.run_batch(session_factory)
    return CronRunResponse(
        job="send-newsletters",
        processed=len(results),
        failed=sum(r.failed for r in results),
    )
