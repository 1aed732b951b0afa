"""Repository and activity schemas."""

from __future__ import annotations

import uuid
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, field_validator


class ConnectRepositoryRequest(BaseModel):
    full_name: str
    access_token: str | None = None

    @field_validator("full_name", mode="before")
    @classmethod
    def _strip_whitespace(cls, v: str) -> str:
        return v.strip() if isinstance(v, str) else v


class RepositoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    github_id: str
    name: str
    full_name: str
    description: str | None
    url: str
    default_branch: str
    is_active: bool
    last_scanned_at: datetime | None
    scan_error: str | None
    created_at: datetime


class ActivityResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    repository_id: uuid.UUID
    activity_date: date
    commits_count: int
    prs_merged_count: int
    issues_closed_count: int
    releases_count: int
    is_significant: bool
    created_at: datetime


class ScanResponse(BaseModel):
    repository_id: uuid.UUID
    significant: bool
    counts: dict[str, int]
    activity_id: uuid.UUID | None
    errors: list[str]
