"""Bulk issue creator — pain points → GitHub issues with per-item failure isolation."""

from pubwon.engines.issue_creator.creator import bulk_create_issues
from pubwon.engines.issue_creator.formatter import pain_point_to_issue
from pubwon.engines.issue_creator.models import (
    BulkCreateStats,
    DuplicateChecker,
    IssueDraft,
    IssueRecorder,
    IssueRef,
    IssueTracker,
    PainPointContent,
    PainPointLookup,
)
from pubwon.engines.issue_creator.tracker import GitHubIssueTracker

__all__ = [
    "BulkCreateStats",
    "DuplicateChecker",
    "GitHubIssueTracker",
    "IssueDraft",
    "IssueRecorder",
    "IssueRef",
    "IssueTracker",
    "PainPointContent",
    "PainPointLookup",
    "bulk_create_issues",
    "pain_point_to_issue",
]
