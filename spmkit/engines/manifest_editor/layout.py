"""Text splices that add one element to an argument list or array literal.

Every function returns new text; existing elements are never rewritten,
only separators and new lines are added around them.
"""

from __future__ import annotations

import re

from spmkit.engines.manifest_editor.scanner import ArgumentList

_INDENT_RE = re.compile(r"[ \t]*")


def swift_string(value: str) -> str:
    """Render *value* as a Swift string literal."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def line_start(text: str, pos: int) -> int:
    return text.rfind("\n", 0, pos) + 1


def line_indent(text: str, pos: int) -> str:
    """Leading whitespace of the line containing *pos*."""
    m = _INDENT_RE.match(text, line_start(text, pos))
    return m.group(0) if m else ""


def indent_unit(indent: str) -> str:
    return "\t" if indent.startswith("\t") else "    "


def is_multiline(text: str, args: ArgumentList) -> bool:
    """True when the first element sits on its own line after the opener."""
    if not args.items:
        return "\n" in text[args.open + 1 : args.close]
    return "\n" in text[args.open + 1 : args.items[0].span.start]


def _past_line_comment(text: str, pos: int, limit: int) -> int:
    # A `// …` comment trailing the element stays on the element's line.
    i = pos
    while i < limit and text[i] in " \t":
        i += 1
    if text.startswith("//", i):
        newline = text.find("\n", i, limit)
        return limit if newline == -1 else newline
    return pos


def insert_after(text: str, args: ArgumentList, index: int, element: str) -> str:
    """Insert *element* right after ``args.items[index]``."""
    item = args.items[index]
    if is_multiline(text, args):
        indent = line_indent(text, item.span.start)
        if item.comma is not None:
            pos = _past_line_comment(text, item.comma + 1, args.close)
            return text[:pos] + f"\n{indent}{element}," + text[pos:]
        pos = _past_line_comment(text, item.span.end, args.close)
        return (
            text[: item.span.end]
            + ","
            + text[item.span.end : pos]
            + f"\n{indent}{element}"
            + text[pos:]
        )
    if item.comma is not None:
        pos = item.comma + 1
        return text[:pos] + f" {element}," + text[pos:]
    return text[: item.span.end] + f", {element}" + text[item.span.end :]


def prepend(text: str, args: ArgumentList, element: str) -> str:
    """Insert *element* before the first existing element."""
    first = args.items[0]
    if is_multiline(text, args):
        pos = line_start(text, first.span.start)
        indent = line_indent(text, first.span.start)
        return text[:pos] + f"{indent}{element},\n" + text[pos:]
    return text[: first.span.start] + f"{element}, " + text[first.span.start :]


def fill_empty(text: str, args: ArgumentList, element: str, multiline: bool) -> str:
    """Insert *element* as the only element of an empty list.

    *multiline* forces the element onto its own line; a list whose
    brackets already sit on different lines is always kept multi-line.
    """
    interior = text[args.open + 1 : args.close]
    multiline = multiline or "\n" in interior
    if multiline:
        base = line_indent(text, args.open)
        inner = base + indent_unit(base)
        if interior.strip():
            # keep comments that live inside the empty list
            return text[: args.open + 1] + f"\n{inner}{element}" + text[args.open + 1 :]
        return text[: args.open + 1] + f"\n{inner}{element}\n{base}" + text[args.close :]
    if interior.strip():
        return text[: args.open + 1] + element + text[args.open + 1 :]
    return text[: args.open + 1] + element + text[args.close :]
