"""Data models for the manifest editor engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

TargetKind = Literal["target", "testTarget", "executableTarget"]


@dataclass(frozen=True)
class Span:
    """Half-open ``[start, end)`` character range in manifest text."""

    start: int
    end: int

    def __len__(self) -> int:
        return self.end - self.start

    def __contains__(self, offset: object) -> bool:
        return isinstance(offset, int) and self.start <= offset < self.end


@dataclass(frozen=True)
class TargetDescriptor:
    """A target declaration found in the manifest.

    Offsets are only valid for the text they were computed from; locate
    again after every edit.
    """

    name: str
    kind: TargetKind
    span: Span


@dataclass(frozen=True)
class DependencyReference:
    """A package to add, before the toolchain has resolved it."""

    url: str
    version: str
