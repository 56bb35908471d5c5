"""Catalog port (abstract interface).

The catalog is owned elsewhere; the storefront only reads book records from
it, snapshotting prices into cart lines and checking stock after checkout.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class BookRef:
    """A purchasable book, or one of its variations (edition, format)."""

    book_id: str
    title: str
    author: str
    unit_price: float
    variation_id: str | None = None
    stock: int | None = None


class Catalog(ABC):
    """Abstract read-only catalog."""

    @abstractmethod
    def get_book(self, book_id: str, variation_id: str | None = None) -> BookRef:
        """Return the book (or variation). Raises BookNotFound when unknown."""
        ...
