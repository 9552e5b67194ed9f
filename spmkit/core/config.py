"""Runtime settings read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path

DEFAULT_CATALOG_URL = "https://packagecatalog.com"


def _env_str(key: str, default: str) -> str:
    value = os.environ.get(key)
    return value if value else default


def _env_float(key: str, default: float) -> float:
    return float(os.environ.get(key, default))


@dataclass(frozen=True)
class Settings:
    """Configuration for one spmkit invocation.

    Environment variables:
        SPMKIT_CATALOG_URL        — package catalog base URL
        SPMKIT_SWIFT              — swift executable (default: swift)
        SPMKIT_TOOLCHAIN_TIMEOUT  — seconds per swift command (default: 600)
        SPMKIT_HTTP_TIMEOUT       — seconds per catalog request (default: 30)
        SPMKIT_MANIFEST           — manifest file name (default: Package.swift)
        SPMKIT_LOCKFILE           — lockfile name (default: Package.resolved)
    """

    project_dir: Path
    catalog_url: str = DEFAULT_CATALOG_URL
    swift: str = "swift"
    toolchain_timeout: float = 600.0
    http_timeout: float = 30.0
    manifest_name: str = "Package.swift"
    lockfile_name: str = "Package.resolved"

    @classmethod
    def from_env(cls, project_dir: Path | None = None) -> Settings:
        return cls(
            project_dir=project_dir or Path.cwd(),
            catalog_url=_env_str("SPMKIT_CATALOG_URL", DEFAULT_CATALOG_URL).rstrip("/"),
            swift=_env_str("SPMKIT_SWIFT", "swift"),
            toolchain_timeout=_env_float("SPMKIT_TOOLCHAIN_TIMEOUT", 600.0),
            http_timeout=_env_float("SPMKIT_HTTP_TIMEOUT", 30.0),
            manifest_name=_env_str("SPMKIT_MANIFEST", "Package.swift"),
            lockfile_name=_env_str("SPMKIT_LOCKFILE", "Package.resolved"),
        )

    def with_overrides(self, **changes: object) -> Settings:
        """Return a copy with the non-None *changes* applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})

    @property
    def manifest_path(self) -> Path:
        return self.project_dir / self.manifest_name

    @property
    def lockfile_path(self) -> Path:
        return self.project_dir / self.lockfile_name
