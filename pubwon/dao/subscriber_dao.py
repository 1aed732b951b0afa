"""SubscriberDAO — email_subscribers table operations."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pubwon.dao.base import BaseDAO
from pubwon.models.subscriber import EmailSubscriber


class SubscriberDAO(BaseDAO[EmailSubscriber]):
    model = EmailSubscriber

    async def get_by_email(self, session: AsyncSession, email: str) -> EmailSubscriber | None:
        return await self.get_by_field(session, email=email)

    async def list_active(self, session: AsyncSession) -> list[EmailSubscriber]:
        stmt = (
            select(EmailSubscriber)
            .where(EmailSubscriber.status == "active")
            .order_by(EmailSubscriber.created_at)
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())
