"""Deterministic markdown digest of one significant activity window."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date

from pubwon.engines.activity_scanner.models import ActivitySummary

_NON_SLUG_RE = re.compile(r"[^a-z0-9]+")

# Per-section cap so a busy week still reads like a post, not a changelog.
_MAX_ITEMS = 10
_EXCERPT_LEN = 200


@dataclass
class DigestPost:
    title: str
    slug: str
    excerpt: str
    content: str


def slugify(text: str) -> str:
    """``"Hello, World!"`` → ``"hello-world"``."""
    return _NON_SLUG_RE.sub("-", text.lower()).strip("-")


def _plural(n: int, word: str) -> str:
    return f"{n} {word}" if n == 1 else f"{n} {word}s"


def _headline(summary: ActivitySummary) -> str:
    parts = []
    if summary.releases:
        parts.append(_plural(len(summary.releases), "release"))
    if summary.pull_requests:
        parts.append(_plural(len(summary.pull_requests), "merged pull request"))
    if summary.issues:
        parts.append(_plural(len(summary.issues), "closed issue"))
    if summary.commits:
        parts.append(_plural(len(summary.commits), "commit"))
    if not parts:
        return "no recorded activity"
    if len(parts) == 1:
        return parts[0]
    return ", ".join(parts[:-1]) + " and " + parts[-1]


def _first_line(message: str) -> str:
    return message.strip().splitlines()[0] if message.strip() else ""


def render_digest(repository_name: str, summary: ActivitySummary, activity_date: date) -> DigestPost:
    """Build the blog post for *repository_name*'s activity on *activity_date*."""
    day = activity_date.isoformat()
    title = f"{repository_name}: development update for {day}"
    headline = _headline(summary)

    lines = [f"# {title}", "", f"This update covers {headline}."]

    if summary.contributors:
        people = ", ".join(sorted(summary.contributors))
        lines.append(f"Thanks to {_plural(len(summary.contributors), 'contributor')}: {people}.")
    lines.append("")

    if summary.releases:
        lines += ["## Releases", ""]
        for r in summary.releases[:_MAX_ITEMS]:
            label = r.name if r.name == r.tag else f"{r.name} ({r.tag})"
            lines.append(f"- [{label}]({r.url})" if r.url else f"- {label}")
        lines.append("")

    if summary.pull_requests:
        lines += ["## Merged pull requests", ""]
        for pr in summary.pull_requests[:_MAX_ITEMS]:
            text = f"#{pr.number} {pr.title}"
            lines.append(f"- [{text}]({pr.url})" if pr.url else f"- {text}")
        lines.append("")

    if summary.issues:
        lines += ["## Closed issues", ""]
        for issue in summary.issues[:_MAX_ITEMS]:
            text = f"#{issue.number} {issue.title}"
            lines.append(f"- [{text}]({issue.url})" if issue.url else f"- {text}")
        lines.append("")

    if summary.commits:
        lines += ["## Commits", ""]
        for c in summary.commits[:_MAX_ITEMS]:
            lines.append(f"- `{c.id[:7]}` {_first_line(c.message)} ({c.author})")
        if len(summary.commits) > _MAX_ITEMS:
            lines.append(f"- ...and {len(summary.commits) - _MAX_ITEMS} more")
        lines.append("")

    if summary.files_changed:
        lines.append(f"{_plural(len(summary.files_changed), 'file')} changed in total.")

    excerpt = f"{repository_name} shipped {headline} on {day}."
    if len(excerpt) > _EXCERPT_LEN:
        excerpt = excerpt[: _EXCERPT_LEN - 3].rstrip() + "..."

    return DigestPost(
        title=title,
        slug=slugify(f"{repository_name}-{day}"),
        excerpt=excerpt,
        content="\n".join(lines).rstrip() + "\n",
    )
