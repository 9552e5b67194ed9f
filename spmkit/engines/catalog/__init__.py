"""Catalog engine — resolve package names to repository URLs and versions."""

from spmkit.engines.catalog.client import CatalogClient

__all__ = ["CatalogClient"]
