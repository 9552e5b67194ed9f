"""Data models for the lockfile engine."""

from __future__ import annotations

from dataclasses import dataclass

from spmkit.core.github import normalize_repo_url


@dataclass(frozen=True)
class PinRecord:
    """One pinned package in Package.resolved."""

    repository_url: str
    package_name: str

    @property
    def key(self) -> str:
        return normalize_repo_url(self.repository_url)
