"""Blocking wrapper around ``swift package`` / ``swift build``."""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

import structlog

from spmkit.exceptions import ToolchainError

log = structlog.get_logger("spmkit.toolchain")

_STDERR_TAIL_LINES = 20


class SwiftToolchain:
    """Runs swift commands in the project directory.

    Only the exit status is consulted; a non-zero exit raises
    :class:`ToolchainError` so no later step runs on a failed resolution.
    """

    def __init__(
        self,
        project_dir: Path,
        executable: str = "swift",
        timeout: float | None = 600.0,
    ) -> None:
        self._project_dir = project_dir
        self._executable = executable
        self._timeout = timeout

    def clean(self) -> None:
        """Remove ``.build`` to prevent caching conflicts."""
        build_dir = self._project_dir / ".build"
        if build_dir.exists():
            shutil.rmtree(build_dir)
            log.info("toolchain.cleaned", path=str(build_dir))

    def update(self) -> None:
        self._run(["package", "update"])

    def resolve(self) -> None:
        self._run(["package", "resolve"])

    def build(self) -> None:
        self._run(["build"])

    def _run(self, args: list[str]) -> None:
        cmd = [self._executable, *args]
        log.info("toolchain.run", command=" ".join(cmd), cwd=str(self._project_dir))
        try:
            proc = subprocess.run(
                cmd,
                cwd=self._project_dir,
                capture_output=True,
                text=True,
                timeout=self._timeout,
            )
        except FileNotFoundError as exc:
            raise ToolchainError(cmd, None, str(exc)) from exc
        except subprocess.TimeoutExpired as exc:
            raise ToolchainError(cmd, None, f"timed out after {self._timeout}s") from exc

        if proc.returncode != 0:
            log.warning("toolchain.failed", command=" ".join(cmd), returncode=proc.returncode)
            raise ToolchainError(cmd, proc.returncode, _tail(proc.stderr))
        log.debug("toolchain.done", command=" ".join(cmd))


def _tail(output: str | None) -> str:
    lines = (output or "").strip().splitlines()
    return "\n".join(lines[-_STDERR_TAIL_LINES:])
