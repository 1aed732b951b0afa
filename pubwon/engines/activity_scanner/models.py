"""Data models for the activity scanner — pure data, no DB dependencies."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def parse_datetime(value: str | None) -> datetime | None:
    """Parse an ISO-8601 string (GitHub ``Z`` suffix included), None on failure."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (ValueError, AttributeError):
        return None


@dataclass
class Commit:
    id: str  # SHA
    message: str
    author: str
    timestamp: datetime | None = None
    url: str | None = None


@dataclass
class PullRequest:
    number: int
    title: str
    merged_at: datetime | None = None
    url: str | None = None


@dataclass
class Issue:
    number: int
    title: str
    closed_at: datetime | None = None
    url: str | None = None


@dataclass
class Release:
    tag: str
    name: str
    published_at: datetime | None = None
    url: str | None = None


@dataclass
class ActivitySummary:
    """Everything that happened in one repository during one scan window."""

    commits: list[Commit] = field(default_factory=list)
    pull_requests: list[PullRequest] = field(default_factory=list)
    issues: list[Issue] = field(default_factory=list)
    releases: list[Release] = field(default_factory=list)
    contributors: set[str] = field(default_factory=set)
    files_changed: set[str] = field(default_factory=set)

    def counts(self) -> dict[str, int]:
        return {
            "commits": len(self.commits),
            "pull_requests": len(self.pull_requests),
            "issues": len(self.issues),
            "releases": len(self.releases),
            "contributors": len(self.contributors),
            "files_changed": len(self.files_changed),
        }

    def to_dict(self) -> dict[str, Any]:
        """JSON-safe snapshot for the ``activity_summary`` JSONB column."""
        return {
            "commits": [
                {
                    "id": c.id,
                    "message": c.message,
                    "author": c.author,
                    "timestamp": _iso(c.timestamp),
                    "url": c.url,
                }
                for c in self.commits
            ],
            "pull_requests": [
                {"number": p.number, "title": p.title, "merged_at": _iso(p.merged_at), "url": p.url}
                for p in self.pull_requests
            ],
            "issues": [
                {"number": i.number, "title": i.title, "closed_at": _iso(i.closed_at), "url": i.url}
                for i in self.issues
            ],
            "releases": [
                {
                    "tag": r.tag,
                    "name": r.name,
                    "published_at": _iso(r.published_at),
                    "url": r.url,
                }
                for r in self.releases
            ],
            "contributors": sorted(self.contributors),
            "files_changed": sorted(self.files_changed),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> ActivitySummary:
        data = data or {}
        return cls(
            commits=[
                Commit(
                    id=c["id"],
                    message=c.get("message", ""),
                    author=c.get("author", "unknown"),
                    timestamp=parse_datetime(c.get("timestamp")),
                    url=c.get("url"),
                )
                for c in data.get("commits", [])
            ],
            pull_requests=[
                PullRequest(
                    number=p["number"],
                    title=p.get("title", ""),
                    merged_at=parse_datetime(p.get("merged_at")),
                    url=p.get("url"),
                )
                for p in data.get("pull_requests", [])
            ],
            issues=[
                Issue(
                    number=i["number"],
                    title=i.get("title", ""),
                    closed_at=parse_datetime(i.get("closed_at")),
                    url=i.get("url"),
                )
                for i in data.get("issues", [])
            ],
            releases=[
                Release(
                    tag=r["tag"],
                    name=r.get("name") or r["tag"],
                    published_at=parse_datetime(r.get("published_at")),
                    url=r.get("url"),
                )
                for r in data.get("releases", [])
            ],
            contributors=set(data.get("contributors", [])),
            files_changed=set(data.get("files_changed", [])),
        )


@dataclass
class ScanResult:
    """Outcome of scanning one repository."""

    repository_id: uuid.UUID
    significant: bool = False
    counts: dict[str, int] = field(default_factory=dict)
    activity_id: uuid.UUID | None = None
    errors: list[str] = field(default_factory=list)
