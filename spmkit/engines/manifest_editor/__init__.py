"""Manifest editor engine — surgical edits to Package.swift text."""

from spmkit.engines.manifest_editor.dependency_list import add_package_dependency
from spmkit.engines.manifest_editor.locator import locate_targets
from spmkit.engines.manifest_editor.models import DependencyReference, Span, TargetDescriptor
from spmkit.engines.manifest_editor.mutator import (
    InstallResult,
    ManifestMutator,
    PreparedInstall,
)
from spmkit.engines.manifest_editor.patterns import DEFAULT_PATTERNS, PatternLibrary
from spmkit.engines.manifest_editor.target_dependency import add_target_dependency

__all__ = [
    "DEFAULT_PATTERNS",
    "DependencyReference",
    "InstallResult",
    "ManifestMutator",
    "PatternLibrary",
    "PreparedInstall",
    "Span",
    "TargetDescriptor",
    "add_package_dependency",
    "add_target_dependency",
    "locate_targets",
]
