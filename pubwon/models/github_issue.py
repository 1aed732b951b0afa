"""github_issues table — pain point → created issue mapping."""

import uuid
from typing import Optional

from sqlalchemy import ForeignKey, Index, Integer, Text, text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from pubwon.core.database import Base, TimestampMixin, UUIDPrimaryKeyMixin


class GitHubIssue(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "github_issues"

    repository_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("repositories.id", ondelete="CASCADE"),
        nullable=False,
    )
    # unique: at most one issue per pain point (duplicate detection key)
    pain_point_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("pain_points.id", ondelete="SET NULL"),
        unique=True,
    )
    issue_number: Mapped[int] = mapped_column(Integer, nullable=False)
    issue_id: Mapped[str] = mapped_column(Text, nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    url: Mapped[str] = mapped_column(Text, nullable=False)
    state: Mapped[str] = mapped_column(Text, nullable=False, server_default=text("'open'"))
    labels: Mapped[Optional[list]] = mapped_column(JSONB)

    __table_args__ = (Index("idx_github_issues_repository", "repository_id"),)
