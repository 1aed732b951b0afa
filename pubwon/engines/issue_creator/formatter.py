"""Pain point → issue draft."""

from __future__ import annotations

import re

from pubwon.engines.issue_creator.models import IssueDraft, PainPointContent

DISCOVERY_LABEL = "customer-discovery"

_NON_SLUG_RE = re.compile(r"[^a-z0-9]+")


def label_slug(value: str) -> str:
    return _NON_SLUG_RE.sub("-", value.lower()).strip("-")


def pain_point_to_issue(content: PainPointContent) -> IssueDraft:
    """Render *content* as a markdown issue with discovery labels."""
    lines = ["## Pain point", "", content.description.strip(), ""]

    details = []
    if content.category:
        details.append(f"- **Category:** {content.category}")
    if content.severity:
        details.append(f"- **Severity:** {content.severity}")
    if details:
        lines += ["## Details", "", *details, ""]

    evidence = [e.strip() for e in content.evidence if e and e.strip()]
    if evidence:
        lines += ["## Evidence", ""]
        lines += [f"- {e}" for e in evidence]
        lines.append("")

    lines += ["---", f"_Created from customer discovery pain point `{content.id}`._"]

    labels = [DISCOVERY_LABEL]
    if content.severity:
        labels.append(f"severity-{label_slug(content.severity)}")
    if content.category:
        slug = label_slug(content.category)
        if slug and slug not in labels:
            labels.append(slug)

    return IssueDraft(title=content.title.strip(), body="\n".join(lines), labels=labels)
