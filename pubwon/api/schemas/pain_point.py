"""Pain point request/response schemas."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class CreatePainPointRequest(BaseModel):
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    repository_id: uuid.UUID | None = None
    category: str | None = None
    severity: Literal["low", "medium", "high", "critical"] | None = None
    evidence: list[str] = Field(default_factory=list)


class ReviewPainPointRequest(BaseModel):
    status: Literal["pending", "approved", "rejected"]


class PainPointResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    repository_id: uuid.UUID | None
    title: str
    description: str
    category: str | None
    severity: str | None
    frequency: int
    evidence: list[str] | None
    status: str
    reviewed_at: datetime | None
    created_at: datetime
