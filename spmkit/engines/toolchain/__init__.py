"""Toolchain engine — run the Swift package manager."""

from spmkit.engines.toolchain.runner import SwiftToolchain

__all__ = ["SwiftToolchain"]
