"""Activity scanner engine — GitHub activity collection and classification, no DB access.

The DB-backed orchestration lives in :mod:`pubwon.engines.activity_scanner.runner`.
"""

from pubwon.engines.activity_scanner.models import (
    ActivitySummary,
    Commit,
    Issue,
    PullRequest,
    Release,
    ScanResult,
)
from pubwon.engines.activity_scanner.scanner import scan_repository
from pubwon.engines.activity_scanner.significance import is_significant_activity

__all__ = [
    "ActivitySummary",
    "Commit",
    "Issue",
    "PullRequest",
    "Release",
    "ScanResult",
    "is_significant_activity",
    "scan_repository",
]
