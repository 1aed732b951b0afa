"""pain_points table."""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Index, Integer, Text, desc, text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from pubwon.core.database import Base, TimestampMixin, UUIDPrimaryKeyMixin

PAIN_POINT_STATUSES = ("pending", "approved", "rejected")
PAIN_POINT_SEVERITIES = ("low", "medium", "high", "critical")


class PainPoint(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "pain_points"

    repository_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("repositories.id", ondelete="CASCADE"),
    )
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[Optional[str]] = mapped_column(Text)
    severity: Mapped[Optional[str]] = mapped_column(Text)
    frequency: Mapped[int] = mapped_column(Integer, nullable=False, server_default=text("1"))
    evidence: Mapped[Optional[list]] = mapped_column(JSONB)
    status: Mapped[str] = mapped_column(Text, nullable=False, server_default=text("'pending'"))
    reviewed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    __table_args__ = (
        Index("idx_pain_points_repository", "repository_id"),
        Index("idx_pain_points_status", "status"),
        Index("idx_pain_points_cursor", desc("created_at"), desc("id")),
    )
