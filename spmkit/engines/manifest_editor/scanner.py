"""Delimiter-aware scanner for Package.swift source text.

Only three structures matter to the editor: call argument lists, array
literals and the string literals inside them.  The scanner tracks
``()[]{}`` balance and skips string literals (including multi-line,
raw and interpolated ones) and comments, so regex anchors never have to
reason about nesting themselves.
"""

from __future__ import annotations

import bisect
import re
from collections.abc import Iterator
from dataclasses import dataclass

from spmkit.engines.manifest_editor.models import Span
from spmkit.exceptions import StructuralError

_PAIRS = {"(": ")", "[": "]", "{": "}"}
_CLOSERS = frozenset(_PAIRS.values())

# `label:` at the start of an argument; `::` is never a label separator.
_LABEL_RE = re.compile(r"([A-Za-z_]\w*)\s*:(?!:)")


@dataclass(frozen=True)
class Argument:
    """One comma-separated item of a call argument list or array literal."""

    label: str | None
    span: Span  # whole item, label included, trivia excluded
    value: Span  # item without its label
    comma: int | None  # offset of the separator that follows, if any


@dataclass(frozen=True)
class ArgumentList:
    open: int  # offset of the opening delimiter
    close: int  # offset of the matching closing delimiter
    items: tuple[Argument, ...]

    def find(self, label: str) -> int | None:
        """Index of the first item labelled *label*."""
        for index, item in enumerate(self.items):
            if item.label == label:
                return index
        return None


def skip_literal(text: str, i: int) -> int | None:
    """If a comment or string literal starts at *i*, return the offset past it."""
    if text.startswith("//", i):
        end = text.find("\n", i)
        return len(text) if end == -1 else end
    if text.startswith("/*", i):
        return _skip_block_comment(text, i)
    if _is_string_start(text, i):
        return _skip_string(text, i)
    return None


def _is_string_start(text: str, i: int) -> bool:
    j = i
    while j < len(text) and text[j] == "#":
        j += 1
    return j < len(text) and text[j] == '"'


def _skip_block_comment(text: str, i: int) -> int:
    depth = 0
    j = i
    while j < len(text):
        if text.startswith("/*", j):
            depth += 1
            j += 2
        elif text.startswith("*/", j):
            depth -= 1
            j += 2
            if depth == 0:
                return j
        else:
            j += 1
    raise StructuralError(f"unterminated block comment at offset {i}")


def _skip_string(text: str, i: int) -> int:
    hashes = 0
    while text[i + hashes] == "#":
        hashes += 1
    j = i + hashes
    multiline = text.startswith('"""', j)
    delimiter = ('"""' if multiline else '"') + "#" * hashes
    escape = "\\" + "#" * hashes
    j += 3 if multiline else 1
    while j < len(text):
        if text.startswith(escape, j):
            k = j + len(escape)
            if k < len(text) and text[k] == "(":
                # interpolation may contain nested string literals
                j = find_closing(text, k) + 1
            else:
                j = k + 1
            continue
        if text.startswith(delimiter, j):
            return j + len(delimiter)
        if text[j] == "\n" and not multiline:
            break
        j += 1
    raise StructuralError(f"unterminated string literal at offset {i}")


def find_closing(text: str, open_index: int) -> int:
    """Return the offset of the delimiter matching the one at *open_index*."""
    opener = text[open_index]
    if opener not in _PAIRS:
        raise ValueError(f"no opening delimiter at offset {open_index}: {opener!r}")
    expected = [_PAIRS[opener]]
    i = open_index + 1
    while i < len(text):
        end = skip_literal(text, i)
        if end is not None:
            i = end
            continue
        ch = text[i]
        if ch in _PAIRS:
            expected.append(_PAIRS[ch])
        elif ch in _CLOSERS:
            if ch != expected[-1]:
                raise StructuralError(f"mismatched {ch!r} at offset {i}")
            expected.pop()
            if not expected:
                return i
        i += 1
    raise StructuralError(f"unbalanced {opener!r} at offset {open_index}")


def skip_trivia(text: str, i: int, end: int) -> int:
    """Advance past whitespace and comments, stopping at *end*."""
    while i < end:
        if text[i].isspace():
            i += 1
            continue
        if text.startswith("//", i) or text.startswith("/*", i):
            i = skip_literal(text, i)  # type: ignore[assignment]
            continue
        break
    return min(i, end)


def split_arguments(text: str, open_index: int) -> ArgumentList:
    """Split the call arguments or array elements opened at *open_index*."""
    close = find_closing(text, open_index)
    items: list[Argument] = []
    first: int | None = None
    last_end = open_index + 1
    i = open_index + 1
    while i < close:
        end = skip_literal(text, i)
        if end is not None:
            if _is_string_start(text, i):
                if first is None:
                    first = i
                last_end = end
            i = end
            continue
        ch = text[i]
        if ch in _PAIRS:
            inner = find_closing(text, i)
            if first is None:
                first = i
            last_end = inner + 1
            i = inner + 1
            continue
        if ch == ",":
            if first is None:
                raise StructuralError(f"empty element before ',' at offset {i}")
            items.append(_argument(text, first, last_end, comma=i))
            first = None
        elif not ch.isspace():
            if first is None:
                first = i
            last_end = i + 1
        i += 1
    if first is not None:
        items.append(_argument(text, first, last_end, comma=None))
    return ArgumentList(open=open_index, close=close, items=tuple(items))


def _argument(text: str, first: int, end: int, comma: int | None) -> Argument:
    m = _LABEL_RE.match(text, first, end)
    if m is None:
        return Argument(label=None, span=Span(first, end), value=Span(first, end), comma=comma)
    value_start = skip_trivia(text, m.end(), end)
    return Argument(
        label=m.group(1),
        span=Span(first, end),
        value=Span(value_start, end),
        comma=comma,
    )


class LiteralIndex:
    """Offsets covered by comments and string literals in a text."""

    def __init__(self, text: str) -> None:
        starts: list[int] = []
        ends: list[int] = []
        i = 0
        while i < len(text):
            end = skip_literal(text, i)
            if end is None:
                i += 1
                continue
            starts.append(i)
            ends.append(end)
            i = end
        self._starts = starts
        self._ends = ends

    def __contains__(self, offset: object) -> bool:
        if not isinstance(offset, int):
            return False
        idx = bisect.bisect_right(self._starts, offset) - 1
        return idx >= 0 and offset < self._ends[idx]


def finditer_code(
    pattern: re.Pattern[str],
    text: str,
    start: int = 0,
    end: int | None = None,
) -> Iterator[re.Match[str]]:
    """Like ``pattern.finditer`` but skips matches inside strings or comments."""
    literals = LiteralIndex(text)
    stop = len(text) if end is None else end
    for m in pattern.finditer(text, start, stop):
        if m.start() not in literals:
            yield m
