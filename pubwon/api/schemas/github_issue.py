"""Bulk issue creation schemas."""

from __future__ import annotations

import uuid

from pydantic import BaseModel, Field


class BulkCreateRequest(BaseModel):
    repository_id: uuid.UUID
    pain_point_ids: list[uuid.UUID] = Field(default_factory=list, max_length=100)
    access_token: str | None = None


class BulkCreateStatsSchema(BaseModel):
    created: int
    skipped: int
    errors: int


class BulkCreateResponse(BaseModel):
    success: bool
    stats: BulkCreateStatsSchema
    message: str
