"""Bulk issue creation — one independent attempt per pain point."""

from __future__ import annotations

import asyncio
import os
import uuid
from collections.abc import Sequence

import structlog

from pubwon.engines.issue_creator.formatter import pain_point_to_issue
from pubwon.engines.issue_creator.models import (
    BulkCreateStats,
    DuplicateChecker,
    IssueRecorder,
    IssueTracker,
    PainPointLookup,
)

log = structlog.get_logger("pubwon.engine")


_CREATED = "created"
_SKIPPED = "skipped"
_ERROR = "error"


def default_concurrency() -> int:
    return max(1, int(os.environ.get("PUBWON_ISSUE_CONCURRENCY", "3")))


async def bulk_create_issues(
    repository: str,
    pain_point_ids: Sequence[uuid.UUID],
    *,
    tracker: IssueTracker,
    lookup: PainPointLookup,
    duplicates: DuplicateChecker,
    recorder: IssueRecorder | None = None,
    concurrency: int | None = None,
) -> BulkCreateStats:
    """Create one issue in *repository* per pain point.

    Each id ends up in exactly one bucket:

    - **skipped** — repeated within the batch, not found / not approved,
      or already mapped to an issue
    - **created** — the tracker accepted the issue
    - **errors** — any exception while handling the item

    Per-item failures never propagate and never cancel other items.
    """
    if not pain_point_ids:
        return BulkCreateStats()

    sem = asyncio.Semaphore(concurrency or default_concurrency())
    seen: set[uuid.UUID] = set()

    async def _one(pain_point_id: uuid.UUID) -> str:
        async with sem:
            try:
                content = await lookup.get_pain_point(pain_point_id)
                if content is None:
                    log.info(
                        "issue_creator.skipped", pain_point_id=str(pain_point_id), reason="missing"
                    )
                    return _SKIPPED
                if await duplicates.has_issue(pain_point_id, content):
                    log.info(
                        "issue_creator.skipped", pain_point_id=str(pain_point_id), reason="duplicate"
                    )
                    return _SKIPPED
                ref = await tracker.create_issue(repository, pain_point_to_issue(content))
            except Exception as exc:
                log.error(
                    "issue_creator.failed",
                    pain_point_id=str(pain_point_id),
                    repository=repository,
                    error=str(exc),
                    error_type=type(exc).__name__,
                )
                return _ERROR

            log.info(
                "issue_creator.created",
                pain_point_id=str(pain_point_id),
                repository=repository,
                issue_number=ref.number,
            )
            if recorder is not None:
                try:
                    await recorder.record_issue(pain_point_id, ref)
                except Exception as exc:
                    log.warning(
                        "issue_creator.record_failed",
                        pain_point_id=str(pain_point_id),
                        issue_number=ref.number,
                        error=str(exc),
                    )
            return _CREATED

    # repeats are resolved up front so two copies never race to create
    tasks = []
    repeats = 0
    for pain_point_id in pain_point_ids:
        if pain_point_id in seen:
            repeats += 1
            continue
        seen.add(pain_point_id)
        tasks.append(_one(pain_point_id))

    outcomes = await asyncio.gather(*tasks)
    return BulkCreateStats(
        created=sum(1 for o in outcomes if o == _CREATED),
        skipped=repeats + sum(1 for o in outcomes if o == _SKIPPED),
        errors=sum(1 for o in outcomes if o == _ERROR),
    )
