"""Subscription schemas."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, field_validator


class SubscribeRequest(BaseModel):
    email: str
    first_name: str | None = None
    last_name: str | None = None
    source: str = "website"

    @field_validator("email")
    @classmethod
    def _check_email(cls, v: str) -> str:
        v = v.strip()
        local, _, domain = v.partition("@")
        if not local or "." not in domain or " " in v:
            raise ValueError("invalid email address")
        return v.lower()


class SubscriberResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    email: str
    first_name: str | None
    last_name: str | None
    status: str
    confirmed_at: datetime | None
    created_at: datetime
