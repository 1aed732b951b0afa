"""email_subscribers table."""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Index, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from pubwon.core.database import Base, TimestampMixin, UUIDPrimaryKeyMixin


class EmailSubscriber(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "email_subscribers"

    email: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    first_name: Mapped[Optional[str]] = mapped_column(Text)
    last_name: Mapped[Optional[str]] = mapped_column(Text)
    # pending → active → unsubscribed
    status: Mapped[str] = mapped_column(Text, nullable=False, server_default=text("'pending'"))
    subscription_source: Mapped[Optional[str]] = mapped_column(Text)
    confirmed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    unsubscribed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    __table_args__ = (Index("idx_email_subscribers_status", "status"),)
