"""Profile request/response schemas."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict


class ProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    email: str
    full_name: str | None
    github_username: str | None
    created_at: datetime


class UpdateProfileRequest(BaseModel):
    full_name: str | None = None
    github_username: str | None = None
