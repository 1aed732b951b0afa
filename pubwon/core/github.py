"""GitHub repository name helpers."""

import re

_NAME_RE = re.compile(r"^[A-Za-z0-9_.-]+$")


def split_full_name(full_name: str) -> tuple[str, str]:
    """Split ``owner/repo`` (or a github.com URL) into ``(owner, repo)``.

    Raises ValueError if the value cannot be parsed.
    """
    result = _extract_owner_repo(full_name)
    if result is None:
        raise ValueError(f"cannot parse GitHub repository name: {full_name!r}")
    return result


def _extract_owner_repo(value: str) -> tuple[str, str] | None:
    """Accepts:

      - owner/repo
      - https://github.com/owner/repo[.git]
      - git@github.com:owner/repo.git
    """
    value = value.strip().rstrip("/")
    if value.endswith(".git"):
        value = value[:-4]

    if value.startswith("git@"):
        _, sep, value = value.partition(":")
        if not sep:
            return None
    elif "://" in value:
        value = value.split("://", 1)[1]
        parts = value.split("/")
        if len(parts) < 3:
            return None
        value = "/".join(parts[1:3])

    parts = value.split("/")
    if len(parts) != 2 or not all(_NAME_RE.match(p) for p in parts):
        return None
    return parts[0], parts[1]
