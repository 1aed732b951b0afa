"""SubscriptionService — newsletter subscriber lifecycle.

    subscribe   → pending
    confirm     → active
    unsubscribe → unsubscribed
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from pubwon.dao.subscriber_dao import SubscriberDAO
from pubwon.models.subscriber import EmailSubscriber
from pubwon.services import NotFoundError, ValidationError


class SubscriptionService:
    def __init__(self, subscriber_dao: SubscriberDAO) -> None:
        self._subscriber_dao = subscriber_dao

    async def subscribe(
        self,
        session: AsyncSession,
        *,
        email: str,
        first_name: str | None = None,
        last_name: str | None = None,
        source: str = "website",
    ) -> EmailSubscriber:
        """Register *email*.

        Idempotent for pending/active addresses; an unsubscribed address
        goes back to ``pending`` and must confirm again.
        """
        email = email.strip().lower()
        existing = await self._subscriber_dao.get_by_email(session, email)
        if existing is None:
            return await self._subscriber_dao.create(
                session,
                email=email,
                first_name=first_name,
                last_name=last_name,
                status="pending",
                subscription_source=source,
            )
        if existing.status != "unsubscribed":
            return existing
        updated = await self._subscriber_dao.update(
            session,
            existing.id,
            status="pending",
            first_name=first_name or existing.first_name,
            last_name=last_name or existing.last_name,
            unsubscribed_at=None,
            confirmed_at=None,
        )
        if updated is None:
            raise NotFoundError("subscriber not found")
        return updated

    async def confirm(self, session: AsyncSession, subscriber_id: uuid.UUID) -> EmailSubscriber:
        subscriber = await self._get(session, subscriber_id)
        if subscriber.status == "active":
            return subscriber
        if subscriber.status != "pending":
            raise ValidationError("subscription is not awaiting confirmation")
        updated = await self._subscriber_dao.update(
            session, subscriber.id, status="active", confirmed_at=datetime.now(timezone.utc)
        )
        if updated is None:
            raise NotFoundError("subscriber not found")
        return updated

    async def unsubscribe(self, session: AsyncSession, subscriber_id: uuid.UUID) -> EmailSubscriber:
        subscriber = await self._get(session, subscriber_id)
        if subscriber.status == "unsubscribed":
            return subscriber
        updated = await self._subscriber_dao.update(
            session,
            subscriber.id,
            status="unsubscribed",
            unsubscribed_at=datetime.now(timezone.utc),
        )
        if updated is None:
            raise NotFoundError("subscriber not found")
        return updated

    async def list_active(self, session: AsyncSession) -> list[EmailSubscriber]:
        return await self._subscriber_dao.list_active(session)

    async def _get(self, session: AsyncSession, subscriber_id: uuid.UUID) -> EmailSubscriber:
        subscriber = await self._subscriber_dao.get_by_id(session, subscriber_id)
        if subscriber is None:
            raise NotFoundError("subscriber not found")
        return subscriber
