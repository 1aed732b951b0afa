"""Profile router — the signed-in user's own account."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from pubwon.api.deps import get_current_user, get_profile_service, get_session
from pubwon.api.schemas.profile import ProfileResponse, UpdateProfileRequest
from pubwon.models.user import User
from pubwon.services.profile_service import ProfileService

router = APIRouter()


@router.get("", response_model=ProfileResponse)
async def get_profile(current_user: User = Depends(get_current_user)) -> ProfileResponse:
    return ProfileResponse.model_validate(current_user)


@router.patch("", response_model=ProfileResponse)
async def update_profile(
    body: UpdateProfileRequest,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
    svc: ProfileService = Depends(get_profile_service),
) -> ProfileResponse:
    user = await svc.update(
        session, current_user, **{k: getattr(body, k) for k in body.model_fields_set}
    )
    return ProfileResponse.model_validate(user)


@router.delete("", status_code=204)
async def delete_profile(
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
    svc: ProfileService = Depends(get_profile_service),
) -> Response:
    await svc.delete(session, current_user)
    return Response(status_code=204)
