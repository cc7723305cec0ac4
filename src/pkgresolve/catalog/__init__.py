"""Catalog files: the host-side source of package metadata for the CLI."""

from pkgresolve.catalog.loader import Catalog, load_catalog, parse_catalog, parse_identity

__all__ = [
    "Catalog",
    "load_catalog",
    "parse_catalog",
    "parse_identity",
]
