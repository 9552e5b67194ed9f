"""Locate the targets declared in a manifest."""

from __future__ import annotations

import structlog

from spmkit.engines.manifest_editor.models import TargetDescriptor
from spmkit.engines.manifest_editor.patterns import DEFAULT_PATTERNS, PatternLibrary

log = structlog.get_logger("spmkit.manifest")


def locate_targets(
    text: str,
    patterns: PatternLibrary = DEFAULT_PATTERNS,
) -> list[TargetDescriptor]:
    """Return the declared targets in textual order.

    ``.target(name:)`` used as a dependency reference inside another
    target is not a declaration and is skipped.  An empty list is a valid
    answer; callers decide whether that is fatal.
    """
    targets: list[TargetDescriptor] = []
    seen: set[str] = set()
    outer_end = -1

    for m, span in patterns.target_declarations(text):
        if m.start() < outer_end:
            continue

        args = patterns.target_arguments(text, span)
        name_index = args.find("name") if args is not None else None
        if args is None or name_index is None:
            log.debug("manifest.target_without_name", offset=span.start)
            continue
        name = patterns.string_value(text, args.items[name_index].value)
        if name is None:
            log.debug("manifest.target_name_not_literal", offset=span.start)
            continue

        outer_end = span.end
        if name in seen:
            log.warning("manifest.duplicate_target", target=name, offset=span.start)
            continue
        seen.add(name)
        targets.append(TargetDescriptor(name=name, kind=m.group("kind"), span=span))

    return targets
