"""NewsletterRunner — mail each newly published post to active subscribers."""

from __future__ import annotations

import os
import uuid
from dataclasses import dataclass

import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pubwon.engines.notification.mailer import Mailer
from pubwon.engines.notification.template import personalize, render_newsletter
from pubwon.models.blog_post import BlogPost
from pubwon.services.blog_service import BlogService
from pubwon.services.newsletter_service import NewsletterService
from pubwon.services.subscription_service import SubscriptionService

log = structlog.get_logger("pubwon.engine.notification")


@dataclass
class NewsletterResult:
    blog_post_id: uuid.UUID
    newsletter_id: uuid.UUID | None = None
    delivered: int = 0
    failed: int = 0


class NewsletterRunner:
    """Poll published posts without a newsletter and send one for each."""

    def __init__(
        self,
        blog_service: BlogService,
        newsletter_service: NewsletterService,
        subscription_service: SubscriptionService,
        mailer: Mailer,
    ) -> None:
        self._blog_service = blog_service
        self._newsletter_service = newsletter_service
        self._subscription_service = subscription_service
        self._mailer = mailer
        self._app_url = os.getenv("PUBWON_APP_URL", "http://localhost:8000")

    async def send_one(self, session: AsyncSession, post: BlogPost) -> NewsletterResult:
        """Render, store and send the newsletter for *post*.

        Steps:
        1. Render subject + bodies with placeholders.
        2. Store the newsletter row and mark it ``sending``.
        3. Personalize and send per subscriber; a failed recipient is counted,
           not raised.
        4. Mark the newsletter ``sent`` with delivery counters.
        """
        subject, html_body, text_body = render_newsletter(post, self._app_url)
        newsletter = await self._newsletter_service.create(
            session,
            blog_post_id=post.id,
            subject=subject,
            html_content=html_body,
            text_content=text_body,
        )
        subscribers = await self._subscription_service.list_active(session)
        await self._newsletter_service.mark_sending(session, newsletter.id, len(subscribers))

        result = NewsletterResult(blog_post_id=post.id, newsletter_id=newsletter.id)
        for subscriber in subscribers:
            try:
                await self._mailer.send(
                    subscriber.email,
                    personalize(subject, subscriber, self._app_url),
                    personalize(html_body, subscriber, self._app_url, escape=True),
                    personalize(text_body, subscriber, self._app_url),
                )
                result.delivered += 1
            except Exception as exc:
                result.failed += 1
                log.warning(
                    "newsletter.recipient_failed",
                    newsletter_id=str(newsletter.id),
                    subscriber_id=str(subscriber.id),
                    error=str(exc),
                )

        await self._newsletter_service.mark_sent(
            session, newsletter.id, delivered=result.delivered, failed=result.failed
        )
        log.info(
            "newsletter.sent",
            newsletter_id=str(newsletter.id),
            blog_post_id=str(post.id),
            delivered=result.delivered,
            failed=result.failed,
        )
        return result

    async def run_batch(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        limit: int = 5,
    ) -> list[NewsletterResult]:
        """Each post is processed in its own session for isolation."""
        async with session_factory() as session:
            pending = await self._blog_service.list_pending_newsletter(session, limit)
        if not pending:
            return []

        results: list[NewsletterResult] = []
        for post in pending:
            try:
                async with session_factory() as session:
                    results.append(await self.send_one(session, post))
                    await session.commit()
            except Exception:
                log.error("newsletter.batch_failed", blog_post_id=str(post.id), exc_info=True)
        return results
