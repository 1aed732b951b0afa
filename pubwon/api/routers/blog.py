"""Blog router — published posts, publishing, and the RSS feed."""

from __future__ import annotations

import os
import uuid
import xml.etree.ElementTree as ET
from email.utils import format_datetime

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from pubwon.api.deps import get_blog_service, get_current_user, get_session
from pubwon.api.schemas.blog import BlogPostDetail, BlogPostListItem
from pubwon.api.schemas.common import PageMeta, PaginatedResponse
from pubwon.models.blog_post import BlogPost
from pubwon.models.user import User
from pubwon.services.blog_service import BlogService

router = APIRouter()
feed_router = APIRouter()

_FEED_SIZE = 20


@router.get("/", response_model=PaginatedResponse[BlogPostListItem])
async def list_posts(
    cursor: str | None = Query(None),
    page_size: int = Query(20, ge=1, le=100),
    session: AsyncSession = Depends(get_session),
    svc: BlogService = Depends(get_blog_service),
) -> PaginatedResponse[BlogPostListItem]:
    result = await svc.list_published(session, cursor, page_size)
    return PaginatedResponse(
        data=[BlogPostListItem.model_validate(p) for p in result["data"]],
        meta=PageMeta(next_cursor=result["next_cursor"], has_more=result["has_more"]),
    )


@router.get("/{slug}", response_model=BlogPostDetail)
async def get_post(
    slug: str,
    session: AsyncSession = Depends(get_session),
    svc: BlogService = Depends(get_blog_service),
) -> BlogPostDetail:
    post = await svc.get_published_by_slug(session, slug)
    return BlogPostDetail.model_validate(post)


@router.post("/{post_id}/publish", response_model=BlogPostDetail)
async def publish_post(
    post_id: uuid.UUID,
    session: AsyncSession = Depends(get_session),
    user: User = Depends(get_current_user),
    svc: BlogService = Depends(get_blog_service),
) -> BlogPostDetail:
    post = await svc.publish(session, user.id, post_id)
    return BlogPostDetail.model_validate(post)


def render_rss(posts: list[BlogPost], app_url: str) -> bytes:
    """RSS 2.0 document for *posts* (newest first)."""
    base = app_url.rstrip("/")
    rss = ET.Element("rss", version="2.0")
    channel = ET.SubElement(rss, "channel")
    ET.SubElement(channel, "title").text = os.getenv("PUBWON_BLOG_TITLE", "Development updates")
    ET.SubElement(channel, "link").text = f"{base}/blog"
    ET.SubElement(channel, "description").text = "Updates from the projects we follow"
    ET.SubElement(channel, "language").text = "en-us"
    if posts and posts[0].published_at is not None:
        ET.SubElement(channel, "lastBuildDate").text = format_datetime(posts[0].published_at)

    for post in posts:
        link = f"{base}/blog/{post.slug}"
        item = ET.SubElement(channel, "item")
        ET.SubElement(item, "title").text = post.title
        ET.SubElement(item, "link").text = link
        ET.SubElement(item, "guid", isPermaLink="true").text = link
        ET.SubElement(item, "description").text = post.excerpt or ""
        if post.published_at is not None:
            ET.SubElement(item, "pubDate").text = format_datetime(post.published_at)

    return ET.tostring(rss, encoding="utf-8", xml_declaration=True)


@feed_router.get("/rss")
async def rss_feed(
    session: AsyncSession = Depends(get_session),
    svc: BlogService = Depends(get_blog_service),
) -> Response:
    posts = await svc.latest_published(session, _FEED_SIZE)
    app_url = os.getenv("PUBWON_APP_URL", "http://localhost:8000")
    return Response(content=render_rss(posts, app_url), media_type="application/rss+xml")
