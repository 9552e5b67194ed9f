"""Read Package.resolved pins.

Two layouts exist in the wild:

  - version 1: ``{"object": {"pins": [{"package": …, "repositoryURL": …}]}}``
  - version 2/3: ``{"pins": [{"identity": …, "location": …}]}``
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import structlog

from spmkit.core.github import normalize_repo_url
from spmkit.engines.lockfile.models import PinRecord
from spmkit.exceptions import LockfileError, PackageNotResolvedError, ProjectFileError

log = structlog.get_logger("spmkit.lockfile")


def parse_pins(data: Any) -> list[PinRecord]:
    """Extract pins from decoded lockfile JSON.

    Raises LockfileError if the expected fields are missing.
    """
    if not isinstance(data, dict):
        raise LockfileError("Unable to read Package.resolved: top level is not an object")

    if isinstance(data.get("object"), dict):
        raw_pins = data["object"].get("pins")
        url_key, name_key = "repositoryURL", "package"
    else:
        raw_pins = data.get("pins")
        url_key, name_key = "location", "identity"

    if not isinstance(raw_pins, list):
        raise LockfileError("Unable to read Package.resolved: no 'pins' list")

    pins: list[PinRecord] = []
    for entry in raw_pins:
        if not isinstance(entry, dict):
            raise LockfileError("Unable to read Package.resolved: pin is not an object")
        url = entry.get(url_key)
        name = entry.get(name_key)
        if not isinstance(url, str) or not isinstance(name, str):
            raise LockfileError(
                f"Unable to read Package.resolved: pin without '{url_key}'/'{name_key}'"
            )
        pins.append(PinRecord(repository_url=url, package_name=name))
    return pins


def count_new_pins(before: list[PinRecord], after: list[PinRecord]) -> int:
    """Number of pins present in *after* but not in *before*."""
    return len({p.key for p in after} - {p.key for p in before})


class LockfileReader:
    """Reads one project's lockfile; scoped to a single command invocation."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def read_pins(self, *, missing_ok: bool = False) -> list[PinRecord]:
        """Return the current pins.

        With *missing_ok*, a lockfile that does not exist yet counts as no
        pins (a project that has never been resolved).
        """
        try:
            content = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            if missing_ok:
                log.debug("lockfile.missing", path=str(self._path))
                return []
            raise ProjectFileError(
                "Bad path to package data. Make sure you are in the project root."
            ) from None
        except OSError as exc:
            raise ProjectFileError(f"Unable to read {self._path}: {exc}") from exc

        try:
            data = json.loads(content)
        except json.JSONDecodeError as exc:
            raise LockfileError(f"Unable to read Package.resolved: {exc}") from exc
        return parse_pins(data)

    def package_name_for(self, url: str) -> str:
        """The resolved package name pinned for repository *url*."""
        wanted = normalize_repo_url(url)
        for pin in self.read_pins():
            if pin.key == wanted:
                log.debug("lockfile.resolved", url=url, package=pin.package_name)
                return pin.package_name
        raise PackageNotResolvedError(url)
