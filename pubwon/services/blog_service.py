"""BlogService — blog posts generated from significant activity."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from pubwon.dao.blog_post_dao import BlogPostDAO
from pubwon.dao.repository_dao import RepositoryDAO
from pubwon.models.blog_post import BlogPost
from pubwon.services import NotFoundError, ValidationError


def unique_slug(base: str, taken: set[str]) -> str:
    """*base* if free, else the first free ``base-2``, ``base-3``, ..."""
    if base not in taken:
        return base
    n = 2
    while f"{base}-{n}" in taken:
        n += 1
    return f"{base}-{n}"


class BlogService:
    """Stateless service for drafting, publishing and listing posts."""

    def __init__(self, blog_post_dao: BlogPostDAO, repository_dao: RepositoryDAO) -> None:
        self._blog_post_dao = blog_post_dao
        self._repository_dao = repository_dao

    async def list_published(
        self, session: AsyncSession, cursor: str | None = None, page_size: int = 20
    ) -> dict:
        page = await self._blog_post_dao.list_published(session, cursor, page_size)
        return {"data": page.data, "next_cursor": page.next_cursor, "has_more": page.has_more}

    async def latest_published(self, session: AsyncSession, limit: int = 20) -> list[BlogPost]:
        return await self._blog_post_dao.latest_published(session, limit)

    async def get_published_by_slug(self, session: AsyncSession, slug: str) -> BlogPost:
        post = await self._blog_post_dao.get_by_slug(session, slug)
        if post is None or post.status != "published":
            raise NotFoundError("blog post not found")
        return post

    async def create_draft(
        self,
        session: AsyncSession,
        *,
        repository_id: uuid.UUID,
        activity_id: uuid.UUID | None,
        title: str,
        slug: str,
        content: str,
        excerpt: str | None,
    ) -> BlogPost:
        """Insert a draft post, suffixing *slug* until it is unique."""
        taken = await self._blog_post_dao.slugs_with_prefix(session, slug)
        return await self._blog_post_dao.create(
            session,
            repository_id=repository_id,
            activity_id=activity_id,
            title=title,
            slug=unique_slug(slug, taken),
            content=content,
            excerpt=excerpt,
            status="draft",
        )

    async def publish(self, session: AsyncSession, user_id: uuid.UUID, post_id: uuid.UUID) -> BlogPost:
        """Publish a post belonging to one of *user_id*'s repositories.

        Publishing an already published post is a no-op; archived posts
        cannot be published again.
        """
        post = await self._blog_post_dao.get_by_id(session, post_id)
        if post is None:
            raise NotFoundError("blog post not found")
        if await self._repository_dao.get_owned(session, user_id, post.repository_id) is None:
            raise NotFoundError("blog post not found")
        if post.status == "published":
            return post
        if post.status != "draft":
            raise ValidationError(f"cannot publish a post in status {post.status!r}")
        updated = await self._blog_post_dao.update(
            session, post.id, status="published", published_at=datetime.now(timezone.utc)
        )
        if updated is None:
            raise NotFoundError("blog post not found")
        return updated

    async def list_pending_newsletter(self, session: AsyncSession, limit: int) -> list[BlogPost]:
        return await self._blog_post_dao.list_published_without_newsletter(session, limit)
