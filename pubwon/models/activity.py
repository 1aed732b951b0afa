"""repository_activity table — one scan window per row."""

import uuid
from datetime import date
from typing import Optional

from sqlalchemy import Boolean, Date, ForeignKey, Index, Integer, desc, text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from pubwon.core.database import Base, TimestampMixin, UUIDPrimaryKeyMixin


class RepositoryActivity(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "repository_activity"

    repository_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("repositories.id", ondelete="CASCADE"),
        nullable=False,
    )
    activity_date: Mapped[date] = mapped_column(Date, nullable=False)
    commits_count: Mapped[int] = mapped_column(Integer, nullable=False, server_default=text("0"))
    prs_merged_count: Mapped[int] = mapped_column(Integer, nullable=False, server_default=text("0"))
    issues_closed_count: Mapped[int] = mapped_column(
        Integer, nullable=False, server_default=text("0")
    )
    releases_count: Mapped[int] = mapped_column(Integer, nullable=False, server_default=text("0"))
    activity_summary: Mapped[Optional[dict]] = mapped_column(JSONB)
    is_significant: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("false")
    )

    __table_args__ = (
        Index("idx_activity_repository", "repository_id"),
        Index("idx_activity_cursor", desc("created_at"), desc("id")),
        Index(
            "idx_activity_significant",
            desc("created_at"),
            postgresql_where="is_significant = TRUE",
        ),
    )
