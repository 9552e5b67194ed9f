"""ManifestMutator — add a package and wire it into the selected targets."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

import structlog

from spmkit.engines.lockfile import LockfileReader, count_new_pins
from spmkit.engines.manifest_editor.dependency_list import add_package_dependency
from spmkit.engines.manifest_editor.locator import locate_targets
from spmkit.engines.manifest_editor.models import DependencyReference
from spmkit.engines.manifest_editor.patterns import DEFAULT_PATTERNS, PatternLibrary
from spmkit.engines.manifest_editor.target_dependency import add_target_dependency
from spmkit.engines.project import ProjectFiles
from spmkit.engines.toolchain import SwiftToolchain
from spmkit.exceptions import (
    StructuralError,
    TargetNotFoundError,
    TargetWiringError,
)
from spmkit.progress import ProgressTracker

log = structlog.get_logger("spmkit.engine")

# Receives the declared target names, returns the ones to wire.
TargetSelector = Callable[[list[str]], list[str]]


@dataclass
class PreparedInstall:
    """Manifest with the package declared, plus the targets to wire later."""

    manifest: str
    targets: list[str]


@dataclass
class InstallResult:
    reference: DependencyReference
    identifier: str
    targets: list[str]
    installed_count: int
    manifest: str


class ManifestMutator:
    """Runs the install pipeline over one project.

    ``prepare`` and ``wire`` are pure text transforms; ``install`` threads
    them through file I/O, the toolchain and the lockfile::

        read -> locate targets -> select -> declare package -> write
             -> clean/update/resolve -> lockfile lookup -> wire targets
             -> write -> build -> count new pins
    """

    def __init__(
        self,
        *,
        project: ProjectFiles,
        lockfile: LockfileReader,
        toolchain: SwiftToolchain,
        select_targets: TargetSelector,
        patterns: PatternLibrary = DEFAULT_PATTERNS,
        progress: ProgressTracker | None = None,
        build: bool = True,
    ) -> None:
        self._project = project
        self._lockfile = lockfile
        self._toolchain = toolchain
        self._select_targets = select_targets
        self._patterns = patterns
        self.progress = progress or ProgressTracker()
        self._build = build

    # ── pure stages ─────────────────────────────────────────────────────

    def prepare(self, text: str, reference: DependencyReference) -> PreparedInstall:
        """Select targets and declare *reference* in the dependency list."""
        targets = locate_targets(text, self._patterns)
        if not targets:
            raise StructuralError("no targets are declared in the manifest")
        names = [t.name for t in targets]

        selected = list(self._select_targets(names))
        for name in selected:
            if name not in names:
                raise TargetNotFoundError(name, names)
        log.info("mutator.targets_selected", declared=names, selected=selected)

        manifest = add_package_dependency(text, reference, self._patterns)
        return PreparedInstall(manifest=manifest, targets=selected)

    def wire(self, text: str, identifier: str, targets: list[str]) -> str:
        """Add *identifier* to each target in order.

        Each insertion stands on its own: when one fails, the ones before
        it are kept and reported through :class:`TargetWiringError`.
        """
        wired: list[str] = []
        for target in targets:
            try:
                text = add_target_dependency(text, target, identifier, self._patterns)
            except (TargetNotFoundError, StructuralError) as exc:
                log.warning("mutator.target_failed", target=target, wired=wired, error=str(exc))
                raise TargetWiringError(target, wired, text, exc) from exc
            wired.append(target)
        return text

    # ── full pipeline ───────────────────────────────────────────────────

    def install(self, reference: DependencyReference) -> InstallResult:
        progress = self.progress

        with progress.phase("read"):
            text = self._project.read_manifest()
            pins_before = self._lockfile.read_pins(missing_ok=True)

        with progress.phase("targets") as phase:
            prepared = self.prepare(text, reference)
            phase.detail = ", ".join(prepared.targets) or "none"
        self._project.write_manifest(prepared.manifest)

        with progress.phase("resolve"):
            self._toolchain.clean()
            self._toolchain.update()
            self._toolchain.resolve()

        with progress.phase("wire") as phase:
            identifier = self._lockfile.package_name_for(reference.url)
            try:
                manifest = self.wire(prepared.manifest, identifier, prepared.targets)
            except TargetWiringError as exc:
                self._project.write_manifest(exc.manifest)
                raise
            self._project.write_manifest(manifest)
            phase.detail = identifier

        if self._build:
            with progress.phase("build"):
                self._toolchain.build()
        else:
            progress.skip_phase("build", "disabled")

        pins_after = self._lockfile.read_pins()
        installed = count_new_pins(pins_before, pins_after)
        log.info(
            "mutator.installed",
            url=reference.url,
            package=identifier,
            targets=prepared.targets,
            installed=installed,
        )
        return InstallResult(
            reference=reference,
            identifier=identifier,
            targets=prepared.targets,
            installed_count=installed,
            manifest=manifest,
        )
