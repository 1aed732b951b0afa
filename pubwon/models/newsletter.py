"""newsletters table."""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Integer, Text, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from pubwon.core.database import Base, TimestampMixin, UUIDPrimaryKeyMixin


class Newsletter(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "newsletters"

    blog_post_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("blog_posts.id", ondelete="SET NULL"),
        unique=True,
    )
    subject: Mapped[str] = mapped_column(Text, nullable=False)
    html_content: Mapped[str] = mapped_column(Text, nullable=False)
    text_content: Mapped[str] = mapped_column(Text, nullable=False)
    # draft → sending → sent
    status: Mapped[str] = mapped_column(Text, nullable=False, server_default=text("'draft'"))
    sent_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    recipient_count: Mapped[int] = mapped_column(Integer, nullable=False, server_default=text("0"))
    delivered_count: Mapped[int] = mapped_column(Integer, nullable=False, server_default=text("0"))
    failed_count: Mapped[int] = mapped_column(Integer, nullable=False, server_default=text("0"))
