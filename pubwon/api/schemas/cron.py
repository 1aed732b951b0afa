"""Cron job result schema."""

from __future__ import annotations

from pydantic import BaseModel


class CronRunResponse(BaseModel):
    job: str
    processed: int
    failed: int = 0
