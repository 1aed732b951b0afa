"""Significance classifier — is a scan window worth a digest?"""

from __future__ import annotations

from pubwon.engines.activity_scanner.models import ActivitySummary

COMMIT_THRESHOLD = 3


def is_significant_activity(summary: ActivitySummary) -> bool:
    """True if ANY independent signal shows shipped progress.

    Signals: at least ``COMMIT_THRESHOLD`` commits, a merged pull request,
    a closed issue, or a release. An empty window is never significant.
    """
    if len(summary.commits) >= COMMIT_THRESHOLD:
        return True
    if any(pr.merged_at is not None for pr in summary.pull_requests):
        return True
    if any(issue.closed_at is not None for issue in summary.issues):
        return True
    return len(summary.releases) >= 1
