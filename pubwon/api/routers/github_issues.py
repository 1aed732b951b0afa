"""GitHub issues router — bulk creation from approved pain points."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pubwon.api.deps import get_current_user, get_issue_creator_runner, get_session_factory
from pubwon.api.schemas.github_issue import (
    BulkCreateRequest,
    BulkCreateResponse,
    BulkCreateStatsSchema,
)
from pubwon.engines.issue_creator.runner import IssueCreatorRunner
from pubwon.models.user import User

router = APIRouter()


@router.post("/issues", response_model=BulkCreateResponse)
async def bulk_create_issues(
    body: BulkCreateRequest,
    user: User = Depends(get_current_user),
    runner: IssueCreatorRunner = Depends(get_issue_creator_runner),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> BulkCreateResponse:
    """Per-item failures are reported in ``stats``; only setup failures are HTTP errors."""
    stats = await runner.run(
        session_factory,
        user.id,
        body.repository_id,
        body.pain_point_ids,
        access_token=body.access_token,
    )
    return BulkCreateResponse(
        success=True,
        stats=BulkCreateStatsSchema(
            created=stats.created, skipped=stats.skipped, errors=stats.errors
        ),
        message=stats.message,
    )
