"""In-memory catalog for development and testing."""

from dataclasses import replace

from storefront.catalog.port import BookRef, Catalog
from storefront.errors import BookNotFound


class InMemoryCatalog(Catalog):
    def __init__(self, books: list[BookRef] | None = None) -> None:
        self._books: dict[tuple[str, str | None], BookRef] = {}
        for book in books or []:
            self.add(book)

    def add(self, book: BookRef) -> None:
        self._books[(str(book.book_id), book.variation_id)] = book

    def set_stock(self, book_id: str, stock: int, variation_id: str | None = None) -> None:
        book = self.get_book(book_id, variation_id)
        self.add(replace(book, stock=stock))

    def set_price(self, book_id: str, unit_price: float, variation_id: str | None = None) -> None:
        book = self.get_book(book_id, variation_id)
        self.add(replace(book, unit_price=unit_price))

    def get_book(self, book_id: str, variation_id: str | None = None) -> BookRef:
        book = self._books.get((str(book_id), variation_id or None))
        if book is None:
            raise BookNotFound(book_id, variation_id)
        return book

    def reset(self) -> None:
        self._books.clear()
