"""Repositories router — connect, list, activity history, scan now."""

from __future__ import annotations

import os
import uuid
from collections.abc import Callable

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from pubwon.api.deps import (
    get_activity_service,
    get_current_user,
    get_github_client_factory,
    get_repository_service,
    get_scan_runner,
    get_session,
)
from pubwon.api.schemas.repository import (
    ActivityResponse,
    ConnectRepositoryRequest,
    RepositoryResponse,
    ScanResponse,
)
from pubwon.core.github import split_full_name
from pubwon.engines.activity_scanner.runner import ActivityScanRunner
from pubwon.engines.github.client import GitHubClient, GitHubNotFoundError
from pubwon.models.user import User
from pubwon.services import NotFoundError, ValidationError
from pubwon.services.activity_service import ActivityService
from pubwon.services.repository_service import RepositoryService

router = APIRouter()


@router.get("/", response_model=list[RepositoryResponse])
async def list_repositories(
    session: AsyncSession = Depends(get_session),
    user: User = Depends(get_current_user),
    svc: RepositoryService = Depends(get_repository_service),
) -> list[RepositoryResponse]:
    repos = await svc.list_for_user(session, user.id)
    return [RepositoryResponse.model_validate(r) for r in repos]


@router.post("/", response_model=RepositoryResponse, status_code=201)
async def connect_repository(
    body: ConnectRepositoryRequest,
    session: AsyncSession = Depends(get_session),
    user: User = Depends(get_current_user),
    svc: RepositoryService = Depends(get_repository_service),
    client_factory: Callable[[str | None], GitHubClient] = Depends(get_github_client_factory),
) -> RepositoryResponse:
    try:
        owner, name = split_full_name(body.full_name)
    except ValueError as exc:
        raise ValidationError(str(exc)) from exc

    token = body.access_token or user.github_access_token or os.environ.get("GITHUB_TOKEN")
    async with client_factory(token) as client:
        try:
            info = await client.get(f"/repos/{owner}/{name}")
        except GitHubNotFoundError as exc:
            raise NotFoundError(f"GitHub repository {owner}/{name} not found") from exc

    repo = await svc.register(
        session, user.id, github_info=info, access_token=body.access_token
    )
    return RepositoryResponse.model_validate(repo)


@router.get("/{repository_id}/activity", response_model=list[ActivityResponse])
async def list_activity(
    repository_id: uuid.UUID,
    limit: int = Query(30, ge=1, le=100),
    session: AsyncSession = Depends(get_session),
    user: User = Depends(get_current_user),
    repo_svc: RepositoryService = Depends(get_repository_service),
    activity_svc: ActivityService = Depends(get_activity_service),
) -> list[ActivityResponse]:
    await repo_svc.get_owned(session, user.id, repository_id)
    rows = await activity_svc.list_for_repository(session, repository_id, limit)
    return [ActivityResponse.model_validate(r) for r in rows]


@router.post("/{repository_id}/scan", response_model=ScanResponse)
async def scan_repository(
    repository_id: uuid.UUID,
    session: AsyncSession = Depends(get_session),
    user: User = Depends(get_current_user),
    repo_svc: RepositoryService = Depends(get_repository_service),
    runner: ActivityScanRunner = Depends(get_scan_runner),
) -> ScanResponse:
    await repo_svc.get_owned(session, user.id, repository_id)
    result = await runner.run(session, repository_id)
    return ScanResponse(
        repository_id=result.repository_id,
        significant=result.significant,
        counts=result.counts,
        activity_id=result.activity_id,
        errors=result.errors,
    )
