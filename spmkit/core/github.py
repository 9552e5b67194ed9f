"""Repository URL helpers."""

from __future__ import annotations

import re

_OWNER_REPO_RE = re.compile(r"^[A-Za-z0-9_.-]+/[A-Za-z0-9_.-]+$")


def normalize_repo_url(repo_url: str) -> str:
    """Canonical form used to compare repository URLs.

    Case, surrounding whitespace, a trailing ``/`` and a trailing ``.git``
    are ignored, so ``https://github.com/Vapor/Console.git`` and
    ``https://github.com/vapor/console`` compare equal.
    """
    url = repo_url.strip().rstrip("/")
    if url.lower().endswith(".git"):
        url = url[:-4]
    return url.lower()


def is_owner_repo(name: str) -> bool:
    """True for an ``owner/repo`` identifier such as ``vapor/console``."""
    return bool(_OWNER_REPO_RE.match(name.strip()))

