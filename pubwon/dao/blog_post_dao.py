"""BlogPostDAO — blog_posts table operations."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pubwon.dao.base import BaseDAO, Page
from pubwon.models.blog_post import BlogPost
from pubwon.models.newsletter import Newsletter


class BlogPostDAO(BaseDAO[BlogPost]):
    model = BlogPost

    async def list_published(
        self, session: AsyncSession, cursor: str | None = None, page_size: int = 20
    ) -> Page[BlogPost]:
        query = select(BlogPost).where(BlogPost.status == "published")
        return await self.paginate(session, query, cursor, page_size)

    async def latest_published(self, session: AsyncSession, limit: int = 20) -> list[BlogPost]:
        stmt = (
            select(BlogPost)
            .where(BlogPost.status == "published")
            .order_by(BlogPost.published_at.desc().nullslast())
            .limit(limit)
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_slug(self, session: AsyncSession, slug: str) -> BlogPost | None:
        return await self.get_by_field(session, slug=slug)

    async def slugs_with_prefix(self, session: AsyncSession, prefix: str) -> set[str]:
        """Existing slugs equal to *prefix* or starting with ``prefix-``."""
        stmt = select(BlogPost.slug).where(
            (BlogPost.slug == prefix) | BlogPost.slug.startswith(f"{prefix}-", autoescape=True)
        )
        result = await session.execute(stmt)
        return set(result.scalars().all())

    async def list_published_without_newsletter(
        self, session: AsyncSession, limit: int
    ) -> list[BlogPost]:
        stmt = (
            select(BlogPost)
            .outerjoin(Newsletter, Newsletter.blog_post_id == BlogPost.id)
            .where(BlogPost.status == "published", Newsletter.id.is_(None))
            .order_by(BlogPost.published_at.asc())
            .limit(limit)
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())
