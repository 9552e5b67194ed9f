"""Whole-file access to the project's manifest."""

from __future__ import annotations

from pathlib import Path

import structlog

from spmkit.exceptions import ProjectFileError

log = structlog.get_logger("spmkit.project")


class ProjectFiles:
    """Reads and writes Package.swift as UTF-8 text."""

    def __init__(self, manifest_path: Path) -> None:
        self._manifest_path = manifest_path

    @property
    def manifest_path(self) -> Path:
        return self._manifest_path

    def read_manifest(self) -> str:
        try:
            return self._manifest_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise ProjectFileError(
                "Bad path to package manifest. Make sure you are in the project root."
            ) from None
        except (OSError, UnicodeDecodeError) as exc:
            raise ProjectFileError(f"Unable to read {self._manifest_path}: {exc}") from exc

    def write_manifest(self, text: str) -> None:
        try:
            self._manifest_path.write_text(text, encoding="utf-8")
        except OSError as exc:
            raise ProjectFileError(f"Unable to write {self._manifest_path}: {exc}") from exc
        log.debug("project.manifest_written", path=str(self._manifest_path), size=len(text))
