"""Data models and collaborator protocols for the bulk issue creator."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Protocol


@dataclass(frozen=True)
class BulkCreateStats:
    """Aggregate outcome of one bulk run.

    Every input id lands in exactly one bucket, so
    ``created + skipped + errors == len(pain_point_ids)``.
    """

    created: int = 0
    skipped: int = 0
    errors: int = 0

    @property
    def total(self) -> int:
        return self.created + self.skipped + self.errors

    @property
    def message(self) -> str:
        return f"Created {self.created} issues, skipped {self.skipped}, errors {self.errors}"


@dataclass
class PainPointContent:
    """The parts of a pain point that end up in an issue."""

    id: uuid.UUID
    title: str
    description: str
    category: str | None = None
    severity: str | None = None
    evidence: list[str] = field(default_factory=list)


@dataclass
class IssueDraft:
    title: str
    body: str
    labels: list[str] = field(default_factory=list)


@dataclass
class IssueRef:
    """A created issue as reported by the tracker."""

    number: int
    id: str
    url: str
    title: str
    labels: list[str] = field(default_factory=list)


class IssueTracker(Protocol):
    async def create_issue(self, repository: str, draft: IssueDraft) -> IssueRef: ...


class PainPointLookup(Protocol):
    async def get_pain_point(self, pain_point_id: uuid.UUID) -> PainPointContent | None: ...


class DuplicateChecker(Protocol):
    async def has_issue(self, pain_point_id: uuid.UUID, content: PainPointContent) -> bool: ...


class IssueRecorder(Protocol):
    async def record_issue(self, pain_point_id: uuid.UUID, ref: IssueRef) -> None: ...
