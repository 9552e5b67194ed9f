"""Custom exceptions for spmkit."""

from __future__ import annotations


class SpmkitError(Exception):
    """Base exception for all spmkit errors."""


class PatternConfigError(SpmkitError):
    """Raised when a manifest pattern fails to compile."""

    def __init__(self, name: str, reason: str):
        self.name = name
        super().__init__(f"manifest pattern {name!r} is invalid: {reason}")


class StructuralError(SpmkitError):
    """Raised when a required structure cannot be found in the manifest."""


class TargetNotFoundError(SpmkitError):
    """Raised when a named target is not declared in the manifest."""

    def __init__(self, target: str, available: list[str] | None = None):
        self.target = target
        self.available = list(available or [])
        message = f"Attempted to add a dependency to a non-existent target {target!r}"
        if self.available:
            message += f" (declared targets: {', '.join(self.available)})"
        super().__init__(message)


class DuplicateDependencyError(SpmkitError):
    """Raised when the package is already declared in the manifest."""

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"package {url!r} is already declared in the manifest")


class ProjectFileError(SpmkitError):
    """Raised when a project file is missing or unreadable."""


class ToolchainError(SpmkitError):
    """Raised when a toolchain subprocess fails."""

    def __init__(self, command: list[str], returncode: int | None, stderr: str = ""):
        self.command = list(command)
        self.returncode = returncode
        self.stderr = stderr
        status = "could not be started" if returncode is None else f"exit {returncode}"
        detail = f": {stderr}" if stderr else ""
        super().__init__(f"`{' '.join(command)}` failed ({status}){detail}")


class LockfileError(SpmkitError):
    """Raised when the lockfile does not have the expected structure."""


class PackageNotResolvedError(LockfileError):
    """Raised when no lockfile pin matches a repository URL."""

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"no resolved package found for {url!r} in the lockfile")


class CatalogError(SpmkitError):
    """Raised when the package catalog cannot resolve a package."""


class TargetWiringError(SpmkitError):
    """Raised when wiring a dependency into one of several targets fails.

    Targets wired before the failure are kept; *manifest* holds the text
    with those insertions applied.
    """

    def __init__(
        self,
        target: str,
        wired: list[str],
        manifest: str,
        cause: SpmkitError,
    ):
        self.target = target
        self.wired = list(wired)
        self.manifest = manifest
        self.cause = cause
        done = ", ".join(self.wired) if self.wired else "none"
        super().__init__(
            f"failed to add the dependency to target {target!r}: {cause} "
            f"(already wired: {done})"
        )
