"""CLI entry point: spmkit.

Subcommands:
    spmkit install vapor/console               # look up owner/repo in the catalog
    spmkit install console                     # search the catalog, most starred wins
    spmkit install console --url URL --version 3.0.0 -t App
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import Callable

import click

from spmkit.core.config import Settings
from spmkit.core.logging import setup_logging
from spmkit.engines.catalog import CatalogClient
from spmkit.engines.lockfile import LockfileReader
from spmkit.engines.manifest_editor import DependencyReference, ManifestMutator
from spmkit.engines.project import ProjectFiles
from spmkit.engines.toolchain import SwiftToolchain
from spmkit.exceptions import SpmkitError, TargetWiringError
from spmkit.progress import PhaseProgress, ProgressTracker

_PHASE_LABELS = {
    "read": "Reading package manifest",
    "targets": "Reading Package Targets",
    "resolve": "Installing Dependency",
    "wire": "Adding dependency to targets",
    "build": "Building project",
}

_TARGET_HELP = """\
y: Add the package as a dependency to the target.
n: Do not add the package as a dependency to the target.
q: Do not add the package as a dependency to the current target or any of the following targets.
?: Output this message."""


def inquire_targets(
    targets: list[str],
    ask: Callable[[str], str] | None = None,
) -> list[str]:
    """Ask which targets get the new dependency.

    A single target is accepted without asking.  ``q`` stops asking but
    keeps the targets accepted so far.
    """
    if len(targets) <= 1:
        return list(targets)

    ask = ask or (lambda question: click.prompt(question, default="", show_default=False))
    accepted: list[str] = []
    index = 0
    while index < len(targets):
        target = targets[index]
        response = ask(
            f"Would you like to add the package to the target '{target}'? (y,n,q,?)"
        ).strip().lower()
        if response == "y":
            accepted.append(target)
            index += 1
        elif response == "n":
            index += 1
        elif response == "q":
            break
        else:
            click.echo(_TARGET_HELP)
    return accepted


def _echo_phase(p: PhaseProgress) -> None:
    label = _PHASE_LABELS.get(p.phase, p.phase)
    if p.status == "running":
        click.echo(f"{label}...")
    elif p.status == "failed":
        click.echo(f"[!] {label} failed", err=True)
    elif p.status == "skipped":
        click.echo(f"[-] {label} skipped ({p.detail})")


def _echo_summary(progress: ProgressTracker) -> None:
    summary = progress.get_summary()
    click.echo(f"\nInstall summary (total: {summary['total_duration']}s):")
    for p in summary["phases"]:
        status_icon = {"completed": "+", "failed": "!", "skipped": "-"}.get(p["status"], "?")
        label = _PHASE_LABELS.get(p["phase"], p["phase"])
        duration = f" ({p['duration']}s)" if p["duration"] else ""
        detail = f" - {p['detail']}" if p["detail"] else ""
        click.echo(f"  [{status_icon}] {label}{duration}{detail}")


async def _lookup(settings: Settings, name: str) -> DependencyReference:
    async with CatalogClient(settings.catalog_url, timeout=settings.http_timeout) as client:
        return await client.resolve(name)


def _resolve_reference(
    settings: Settings,
    name: str,
    url: str | None,
    version: str | None,
) -> DependencyReference:
    """Catalog values, overridden by --url/--version; no lookup when both are given."""
    if url and version:
        return DependencyReference(url=url, version=version)
    found = asyncio.run(_lookup(settings, name))
    return DependencyReference(url=url or found.url, version=version or found.version)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
@click.version_option(package_name="spmkit")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """spmkit: manage Swift package dependencies from the command line."""
    setup_logging("DEBUG" if verbose else None)
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


@main.command("install")
@click.argument("name")
@click.option("--url", default=None, help="The URL for the package")
@click.option(
    "--version",
    "version_",
    default=None,
    help="The desired version for the package (defaults to the latest version)",
)
@click.option(
    "-t",
    "--target",
    "targets",
    multiple=True,
    help="Add the package to this target without prompting (repeatable)",
)
@click.option(
    "--project-dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Project root (defaults to the current directory)",
)
@click.option("--swift", default=None, help="swift executable to run")
@click.option("--no-build", is_flag=True, help="Skip the final `swift build`")
@click.pass_context
def install(
    ctx: click.Context,
    name: str,
    url: str | None,
    version_: str | None,
    targets: tuple[str, ...],
    project_dir: Path | None,
    swift: str | None,
    no_build: bool,
) -> None:
    """Installs a package into the current project."""
    settings = Settings.from_env(project_dir).with_overrides(swift=swift)

    progress = ProgressTracker()
    progress.callbacks.append(_echo_phase)

    select = (lambda _declared: list(targets)) if targets else inquire_targets

    try:
        reference = _resolve_reference(settings, name, url, version_)
        mutator = ManifestMutator(
            project=ProjectFiles(settings.manifest_path),
            lockfile=LockfileReader(settings.lockfile_path),
            toolchain=SwiftToolchain(
                settings.project_dir,
                executable=settings.swift,
                timeout=settings.toolchain_timeout,
            ),
            select_targets=select,
            progress=progress,
            build=not no_build,
        )
        result = mutator.install(reference)
    except TargetWiringError as exc:
        click.echo(f"Error: {exc}", err=True)
        if exc.wired:
            click.echo(f"Targets already updated: {', '.join(exc.wired)}", err=True)
        sys.exit(1)
    except SpmkitError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    click.echo(f"📦  {result.installed_count} packages installed")
    if ctx.obj and ctx.obj.get("verbose"):
        _echo_summary(progress)


if __name__ == "__main__":
    main()
