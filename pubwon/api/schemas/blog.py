"""Blog post schemas."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict


class BlogPostListItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    slug: str
    excerpt: str | None
    status: str
    published_at: datetime | None
    created_at: datetime


class BlogPostDetail(BlogPostListItem):
    repository_id: uuid.UUID
    content: str
