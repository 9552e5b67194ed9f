"""Add a package declaration to the manifest's top-level dependency list."""

from __future__ import annotations

import structlog

from spmkit.core.github import normalize_repo_url
from spmkit.engines.manifest_editor import layout
from spmkit.engines.manifest_editor.models import DependencyReference
from spmkit.engines.manifest_editor.patterns import (
    DEFAULT_PATTERNS,
    DEPENDENCIES_LABEL,
    PatternLibrary,
)
from spmkit.engines.manifest_editor.scanner import ArgumentList
from spmkit.exceptions import DuplicateDependencyError, StructuralError

log = structlog.get_logger("spmkit.manifest")


def render_declaration(reference: DependencyReference) -> str:
    url = layout.swift_string(reference.url)
    version = layout.swift_string(reference.version)
    return f".package(url: {url}, .exact({version}))"


def declared_urls(text: str, patterns: PatternLibrary = DEFAULT_PATTERNS) -> list[str]:
    """URLs of every declaration in the top-level dependency list."""
    package_args = patterns.package_arguments(text)
    if package_args is None:
        return []
    dependency_list = patterns.dependency_list(text, package_args)
    if dependency_list is None:
        return []
    urls: list[str] = []
    for index in patterns.existing_dependencies(text, dependency_list):
        url = patterns.declaration_url(text, dependency_list.items[index].value)
        if url is not None:
            urls.append(url)
    return urls


def add_package_dependency(
    text: str,
    reference: DependencyReference,
    patterns: PatternLibrary = DEFAULT_PATTERNS,
) -> str:
    """Return *text* with one ``.package(…)`` declaration for *reference* added.

    The declaration goes after the last existing one; into an empty list
    as its first element; or, when the package declares no dependency
    list at all, into a new ``dependencies:`` argument placed after the last
    of the arguments Swift requires before it (``name:`` … ``products:``).

    Raises:
        StructuralError: the manifest has none of those anchors, or its
            ``dependencies:`` argument is not an array literal.
        DuplicateDependencyError: the package URL is already declared.
    """
    package_args = patterns.package_arguments(text)
    if package_args is None:
        raise StructuralError("no `Package(` declaration found in the manifest")

    declaration = render_declaration(reference)
    dependency_list = patterns.dependency_list(text, package_args)

    if dependency_list is None:
        if package_args.find(DEPENDENCIES_LABEL) is not None:
            raise StructuralError("the package `dependencies:` argument is not an array literal")
        anchor = patterns.dependency_list_anchor(package_args)
        if anchor is None:
            raise StructuralError(
                "no dependency list found and no `name:`, `platforms:` or `products:` "
                "field to anchor a new one"
            )
        new_list = _render_list(text, package_args, anchor, declaration)
        new_text = layout.insert_after(text, package_args, anchor, new_list)
        placement = "new_list"
    else:
        existing = patterns.existing_dependencies(text, dependency_list)
        _reject_duplicate(text, dependency_list, existing, reference, patterns)
        if existing:
            new_text = layout.insert_after(text, dependency_list, existing[-1], declaration)
            placement = "after_last"
        elif dependency_list.items:
            new_text = layout.prepend(text, dependency_list, declaration)
            placement = "first"
        else:
            new_text = layout.fill_empty(text, dependency_list, declaration, multiline=True)
            placement = "first"

    log.info(
        "manifest.dependency_inserted",
        url=reference.url,
        version=reference.version,
        placement=placement,
    )
    return new_text


def _reject_duplicate(
    text: str,
    dependency_list: ArgumentList,
    existing: list[int],
    reference: DependencyReference,
    patterns: PatternLibrary,
) -> None:
    wanted = normalize_repo_url(reference.url)
    for index in existing:
        url = patterns.declaration_url(text, dependency_list.items[index].value)
        if url is not None and normalize_repo_url(url) == wanted:
            raise DuplicateDependencyError(reference.url)


def _render_list(text: str, package_args: ArgumentList, anchor: int, declaration: str) -> str:
    if not layout.is_multiline(text, package_args):
        return f"{DEPENDENCIES_LABEL}: [{declaration}]"
    indent = layout.line_indent(text, package_args.items[anchor].span.start)
    inner = indent + layout.indent_unit(indent)
    return f"{DEPENDENCIES_LABEL}: [\n{inner}{declaration}\n{indent}]"
