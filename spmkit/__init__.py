"""spmkit: install Swift packages by editing Package.swift in place."""

__version__ = "0.1.0"
