"""Subscriptions router — subscribe, confirm, unsubscribe."""

from __future__ import annotations

import html
import uuid

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse
from sqlalchemy.ext.asyncio import AsyncSession

from pubwon.api.deps import get_session, get_subscription_service
from pubwon.api.schemas.subscription import SubscribeRequest, SubscriberResponse
from pubwon.services.subscription_service import SubscriptionService

router = APIRouter()

_UNSUBSCRIBED_PAGE = """\
<!doctype html>
<html>
<head><meta charset="utf-8"><title>Unsubscribed</title></head>
<body style="font-family: sans-serif; max-width: 480px; margin: 64px auto; color: #212121;">
<h1>You have been unsubscribed</h1>
<p>{email} will no longer receive our newsletter.</p>
</body>
</html>"""


@router.post("/subscribe", response_model=SubscriberResponse, status_code=201)
async def subscribe(
    body: SubscribeRequest,
    session: AsyncSession = Depends(get_session),
    svc: SubscriptionService = Depends(get_subscription_service),
) -> SubscriberResponse:
    subscriber = await svc.subscribe(
        session,
        email=body.email,
        first_name=body.first_name,
        last_name=body.last_name,
        source=body.source,
    )
    return SubscriberResponse.model_validate(subscriber)


@router.post("/subscribe/{subscriber_id}/confirm", response_model=SubscriberResponse)
async def confirm(
    subscriber_id: uuid.UUID,
    session: AsyncSession = Depends(get_session),
    svc: SubscriptionService = Depends(get_subscription_service),
) -> SubscriberResponse:
    subscriber = await svc.confirm(session, subscriber_id)
    return SubscriberResponse.model_validate(subscriber)


@router.get("/unsubscribe/{subscriber_id}", response_class=HTMLResponse)
async def unsubscribe(
    subscriber_id: uuid.UUID,
    session: AsyncSession = Depends(get_session),
    svc: SubscriptionService = Depends(get_subscription_service),
) -> HTMLResponse:
    subscriber = await svc.unsubscribe(session, subscriber_id)
    return HTMLResponse(_UNSUBSCRIBED_PAGE.format(email=html.escape(subscriber.email)))
