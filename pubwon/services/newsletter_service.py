"""NewsletterService — newsletter rows and delivery counters."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from pubwon.dao.newsletter_dao import NewsletterDAO
from pubwon.models.newsletter import Newsletter


class NewsletterService:
    def __init__(self, newsletter_dao: NewsletterDAO) -> None:
        self._newsletter_dao = newsletter_dao

    async def create(
        self,
        session: AsyncSession,
        *,
        blog_post_id: uuid.UUID,
        subject: str,
        html_content: str,
        text_content: str,
    ) -> Newsletter:
        return await self._newsletter_dao.create(
            session,
            blog_post_id=blog_post_id,
            subject=subject,
            html_content=html_content,
            text_content=text_content,
            status="draft",
        )

    async def mark_sending(
        self, session: AsyncSession, newsletter_id: uuid.UUID, recipient_count: int
    ) -> None:
        await self._newsletter_dao.update(
            session, newsletter_id, status="sending", recipient_count=recipient_count
        )

    async def mark_sent(
        self,
        session: AsyncSession,
        newsletter_id: uuid.UUID,
        *,
        delivered: int,
        failed: int,
    ) -> None:
        await self._newsletter_dao.update(
            session,
            newsletter_id,
            status="sent",
            sent_at=datetime.now(timezone.utc),
            delivered_count=delivered,
            failed_count=failed,
        )
