"""Lockfile engine — read resolved pins from Package.resolved."""

from spmkit.engines.lockfile.models import PinRecord
from spmkit.engines.lockfile.reader import LockfileReader, count_new_pins, parse_pins

__all__ = ["LockfileReader", "PinRecord", "count_new_pins", "parse_pins"]
