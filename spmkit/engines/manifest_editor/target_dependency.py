"""Wire a resolved package into a target's dependency array."""

from __future__ import annotations

import structlog

from spmkit.engines.manifest_editor import layout
from spmkit.engines.manifest_editor.locator import locate_targets
from spmkit.engines.manifest_editor.patterns import DEFAULT_PATTERNS, PatternLibrary
from spmkit.exceptions import StructuralError, TargetNotFoundError

log = structlog.get_logger("spmkit.manifest")


def add_target_dependency(
    text: str,
    target: str,
    identifier: str,
    patterns: PatternLibrary = DEFAULT_PATTERNS,
) -> str:
    """Return *text* with ``"<identifier>"`` appended to *target*'s dependencies.

    Other targets are left untouched.  A target that already lists the
    identifier is returned unchanged.

    Raises:
        TargetNotFoundError: no target named *target* is declared.
        StructuralError: the target has no ``dependencies: [...]`` array.
    """
    targets = locate_targets(text, patterns)
    descriptor = next((t for t in targets if t.name == target), None)
    if descriptor is None:
        raise TargetNotFoundError(target, [t.name for t in targets])

    array = patterns.target_dependency_array(text, descriptor.span)
    if array is None:
        raise StructuralError(
            f"pattern not found within target span: target {target!r} "
            "has no `dependencies: [...]` array"
        )

    for item in array.items:
        if patterns.string_value(text, item.value) == identifier:
            log.info("manifest.target_dependency_exists", target=target, dependency=identifier)
            return text

    literal = layout.swift_string(identifier)
    if array.items:
        new_text = layout.insert_after(text, array, len(array.items) - 1, literal)
    else:
        new_text = layout.fill_empty(text, array, literal, multiline=False)

    log.info("manifest.target_dependency_inserted", target=target, dependency=identifier)
    return new_text
