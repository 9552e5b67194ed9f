"""Structural patterns used to locate regions of a Package.swift manifest.

Regexes find anchors (``Package(``, ``.package(``, ``.target(`` …) in
code text; the scanner then measures the balanced extent of whatever the
anchor opens.  Patterns are compiled once; a pattern that does not compile
is a configuration error, not an input error.
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping

from spmkit.engines.manifest_editor.models import Span
from spmkit.engines.manifest_editor.scanner import (
    ArgumentList,
    finditer_code,
    find_closing,
    split_arguments,
)
from spmkit.exceptions import PatternConfigError

PATTERN_SOURCES: dict[str, str] = {
    # let package = Package(
    "package_call": r"\bPackage\s*\(",
    # .package(url: "…", from: "1.0.0"), one existing dependency declaration
    "package_declaration": r"(?:Package\.Dependency)?\.package\s*\(",
    # .target(name: "App", …) / .testTarget(…) / .executableTarget(…)
    "target_declaration": r"\.(?P<kind>target|testTarget|executableTarget)\s*\(",
    "string_literal": r'"(?P<value>(?:[^"\\\n]|\\.)*)"',
}

# Top-level dependency list label, and the `Package(` arguments that must
# precede it (Swift checks labelled arguments in declaration order).
DEPENDENCIES_LABEL = "dependencies"
LIST_ANCHOR_LABELS = (
    "name",
    "defaultLocalization",
    "platforms",
    "pkgConfig",
    "providers",
    "products",
)

_ESCAPE_RE = re.compile(r"\\(.)")


class PatternLibrary:
    """Owns the compiled manifest patterns and the lookups built on them."""

    def __init__(self, overrides: Mapping[str, str] | None = None) -> None:
        sources = {**PATTERN_SOURCES, **(overrides or {})}
        self._patterns: dict[str, re.Pattern[str]] = {}
        for name, source in sources.items():
            try:
                self._patterns[name] = re.compile(source)
            except re.error as exc:
                raise PatternConfigError(name, str(exc)) from exc
        if "kind" not in self._patterns["target_declaration"].groupindex:
            raise PatternConfigError("target_declaration", "missing the 'kind' group")
        if "value" not in self._patterns["string_literal"].groupindex:
            raise PatternConfigError("string_literal", "missing the 'value' group")

    def __getitem__(self, name: str) -> re.Pattern[str]:
        return self._patterns[name]

    # ── top-level package ───────────────────────────────────────────────

    def package_arguments(self, text: str) -> ArgumentList | None:
        """Argument list of the first ``Package(`` call in the manifest."""
        for m in finditer_code(self["package_call"], text):
            return split_arguments(text, m.end() - 1)
        return None

    def dependency_list(self, text: str, package_args: ArgumentList) -> ArgumentList | None:
        """The ``dependencies: [`` array passed directly to ``Package(``.

        Only top-level arguments are considered, so a target's own
        ``dependencies:`` array can never be mistaken for it.
        """
        index = package_args.find(DEPENDENCIES_LABEL)
        if index is None:
            return None
        value = package_args.items[index].value
        if text[value.start] != "[":
            return None
        return split_arguments(text, value.start)

    def dependency_list_anchor(self, package_args: ArgumentList) -> int | None:
        """Index of the argument a newly created dependency list follows.

        That is the last of the arguments declared before `dependencies:`,
        so `platforms:` or `products:` never end up after the new list.
        """
        anchor = None
        for index, item in enumerate(package_args.items):
            if item.label in LIST_ANCHOR_LABELS:
                anchor = index
        return anchor

    def existing_dependencies(self, text: str, dependency_list: ArgumentList) -> list[int]:
        """Indices of the ``.package(…)`` declarations in *dependency_list*."""
        pattern = self["package_declaration"]
        return [
            index
            for index, item in enumerate(dependency_list.items)
            if pattern.match(text, item.value.start, item.value.end)
        ]

    def declaration_arguments(self, text: str, span: Span) -> ArgumentList | None:
        m = self["package_declaration"].match(text, span.start, span.end)
        if m is None:
            return None
        return split_arguments(text, m.end() - 1)

    def declaration_url(self, text: str, span: Span) -> str | None:
        """The ``url:`` (or ``path:``) string of a ``.package(…)`` declaration."""
        args = self.declaration_arguments(text, span)
        if args is None:
            return None
        for label in ("url", "path"):
            index = args.find(label)
            if index is not None:
                return self.string_value(text, args.items[index].value)
        return None

    # ── targets ─────────────────────────────────────────────────────────

    def target_declarations(self, text: str) -> Iterator[tuple[re.Match[str], Span]]:
        """Yield each target declaration match with its balanced span."""
        for m in finditer_code(self["target_declaration"], text):
            close = find_closing(text, m.end() - 1)
            yield m, Span(m.start(), close + 1)

    def target_arguments(self, text: str, span: Span) -> ArgumentList | None:
        m = self["target_declaration"].match(text, span.start, span.end)
        if m is None:
            return None
        return split_arguments(text, m.end() - 1)

    def target_dependency_array(self, text: str, span: Span) -> ArgumentList | None:
        """The ``dependencies: [`` array among the target's own arguments."""
        args = self.target_arguments(text, span)
        if args is None:
            return None
        index = args.find(DEPENDENCIES_LABEL)
        if index is None:
            return None
        value = args.items[index].value
        if text[value.start] != "[":
            return None
        return split_arguments(text, value.start)

    # ── literals ────────────────────────────────────────────────────────

    def string_value(self, text: str, span: Span) -> str | None:
        """Unescaped contents when *span* is exactly one string literal."""
        m = self["string_literal"].fullmatch(text, span.start, span.end)
        if m is None:
            return None
        return _ESCAPE_RE.sub(r"\1", m.group("value"))


DEFAULT_PATTERNS = PatternLibrary()
