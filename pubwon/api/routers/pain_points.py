"""Pain points router."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from pubwon.api.deps import get_current_user, get_pain_point_service, get_session
from pubwon.api.schemas.common import PageMeta, PaginatedResponse
from pubwon.api.schemas.pain_point import (
    CreatePainPointRequest,
    PainPointResponse,
    ReviewPainPointRequest,
)
from pubwon.models.user import User
from pubwon.services.pain_point_service import PainPointService

router = APIRouter()


@router.get("/", response_model=PaginatedResponse[PainPointResponse])
async def list_pain_points(
    cursor: str | None = Query(None),
    page_size: int = Query(20, ge=1, le=100),
    repository_id: uuid.UUID | None = Query(None),
    status: str | None = Query(None),
    session: AsyncSession = Depends(get_session),
    user: User = Depends(get_current_user),
    svc: PainPointService = Depends(get_pain_point_service),
) -> PaginatedResponse[PainPointResponse]:
    result = await svc.list(
        session, user.id, cursor, page_size, repository_id=repository_id, status=status
    )
    return PaginatedResponse(
        data=[PainPointResponse.model_validate(p) for p in result["data"]],
        meta=PageMeta(
            next_cursor=result["next_cursor"],
            has_more=result["has_more"],
            total=result["total"],
        ),
    )


@router.post("/", response_model=PainPointResponse, status_code=201)
async def create_pain_point(
    body: CreatePainPointRequest,
    session: AsyncSession = Depends(get_session),
    user: User = Depends(get_current_user),
    svc: PainPointService = Depends(get_pain_point_service),
) -> PainPointResponse:
    pain_point = await svc.create(
        session,
        user.id,
        title=body.title,
        description=body.description,
        repository_id=body.repository_id,
        category=body.category,
        severity=body.severity,
        evidence=body.evidence,
    )
    return PainPointResponse.model_validate(pain_point)


@router.patch("/{pain_point_id}", response_model=PainPointResponse)
async def review_pain_point(
    pain_point_id: uuid.UUID,
    body: ReviewPainPointRequest,
    session: AsyncSession = Depends(get_session),
    user: User = Depends(get_current_user),
    svc: PainPointService = Depends(get_pain_point_service),
) -> PainPointResponse:
    pain_point = await svc.review(session, user.id, pain_point_id, body.status)
    return PainPointResponse.model_validate(pain_point)
