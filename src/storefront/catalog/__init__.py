"""Catalog factory.

Provides get_catalog() / set_catalog() to swap the catalog the storefront
reads book records from. Defaults to an empty InMemoryCatalog.
"""

from storefront.catalog.memory import InMemoryCatalog
from storefront.catalog.port import BookRef, Catalog

_current_catalog: Catalog | None = None


def get_catalog() -> Catalog:
    global _current_catalog
    if _current_catalog is None:
        _current_catalog = InMemoryCatalog()
    return _current_catalog


def set_catalog(catalog: Catalog) -> None:
    """Override the active catalog (useful for tests)."""
    global _current_catalog
    _current_catalog = catalog


def reset_catalog() -> None:
    global _current_catalog
    _current_catalog = None


__all__ = ["BookRef", "Catalog", "get_catalog", "set_catalog", "reset_catalog"]
