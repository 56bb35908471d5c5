"""Shopping Cart aggregate: the shopper's pending selection of books.

Lines are keyed by (book_id, variation_id). Each line carries the price
captured when it was first added and a ``selected`` flag that marks it for
the next checkout. Keeping selection on the line itself means a selected
key can never outlive its line.

The cart is persisted as a plain snapshot (``to_snapshot`` /
``from_snapshot``) after every mutation by the CartEngine.
"""

from datetime import UTC, datetime

from protean.fields import Boolean, DateTime, Float, HasMany, Integer, String

from storefront.cart.events import (
    CartCleared,
    CartItemAdded,
    CartItemRemoved,
    CartQuantityUpdated,
    CartSelectionChanged,
)
from storefront.domain import storefront
from storefront.errors import InvalidQuantity, ItemNotFound


def line_key(book_id, variation_id=None) -> tuple[str, str | None]:
    """Normalized identity of a cart line."""
    return (str(book_id), str(variation_id) if variation_id else None)


def _parse_datetime(value):
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


@storefront.entity(part_of="ShoppingCart")
class CartItem:
    book_id = String(required=True, max_length=100)
    variation_id = String(max_length=100)
    title = String(required=True, max_length=255)
    author = String(max_length=255)
    unit_price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)
    selected = Boolean(default=True)
    added_at = DateTime()

    @property
    def key(self) -> tuple[str, str | None]:
        return line_key(self.book_id, self.variation_id)

    @property
    def subtotal(self) -> float:
        return round(self.unit_price * self.quantity, 2)

    def snapshot(self) -> dict:
        return {
            "id": str(self.id),
            "book_id": self.book_id,
            "variation_id": self.variation_id,
            "title": self.title,
            "author": self.author,
            "unit_price": self.unit_price,
            "quantity": self.quantity,
            "added_at": self.added_at.isoformat() if self.added_at else None,
        }


@storefront.aggregate
class ShoppingCart:
    owner_key = String(required=True, max_length=255)
    items = HasMany(CartItem)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, owner_key):
        now = datetime.now(UTC)
        return cls(owner_key=owner_key, created_at=now, updated_at=now)

    # -------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------
    def find(self, book_id, variation_id=None):
        key = line_key(book_id, variation_id)
        return next((i for i in self.items if i.key == key), None)

    @property
    def selected_items(self):
        return [i for i in self.items if i.selected]

    @property
    def selected_keys(self) -> set[tuple[str, str | None]]:
        return {i.key for i in self.items if i.selected}

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def add_item(self, book, quantity=1, variation_id=None):
        """Add a book to the cart, or add to the quantity of its existing line.

        An existing line keeps the price it was first added at. A new line
        snapshots ``book.unit_price`` and starts out selected.
        """
        if quantity is None or quantity < 1:
            raise InvalidQuantity(quantity)

        variation_id = variation_id or book.variation_id
        existing = self.find(book.book_id, variation_id)
        now = datetime.now(UTC)

        if existing:
            existing.quantity += quantity
            new_quantity = existing.quantity
        else:
            self.add_items(
                CartItem(
                    book_id=str(book.book_id),
                    variation_id=str(variation_id) if variation_id else None,
                    title=book.title,
                    author=book.author,
                    unit_price=book.unit_price,
                    quantity=quantity,
                    selected=True,
                    added_at=now,
                )
            )
            new_quantity = quantity

        self.updated_at = now

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                book_id=str(book.book_id),
                variation_id=str(variation_id) if variation_id else None,
                quantity=quantity,
                new_quantity=new_quantity,
            )
        )

    def update_quantity(self, book_id, variation_id, new_quantity):
        """Set a line's quantity. Zero or less removes the line instead."""
        if new_quantity <= 0:
            self.remove_item(book_id, variation_id)
            return

        item = self.find(book_id, variation_id)
        if item is None:
            raise ItemNotFound(book_id, variation_id)

        previous_quantity = item.quantity
        item.quantity = new_quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartQuantityUpdated(
                cart_id=str(self.id),
                book_id=item.book_id,
                variation_id=item.variation_id,
                previous_quantity=previous_quantity,
                new_quantity=new_quantity,
            )
        )

    def remove_item(self, book_id, variation_id=None) -> bool:
        """Remove a line. Returns False (and changes nothing) when it is not in the cart."""
        item = self.find(book_id, variation_id)
        if item is None:
            return False

        self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemRemoved(
                cart_id=str(self.id),
                book_id=item.book_id,
                variation_id=item.variation_id,
            )
        )
        return True

    def prune(self, keys) -> int:
        """Remove every line whose key is in ``keys``. Returns how many were removed."""
        wanted = {line_key(*key) for key in keys}
        removed = 0
        for item in list(self.items):
            if item.key in wanted:
                self.remove_item(item.book_id, item.variation_id)
                removed += 1
        return removed

    def remove_selected(self) -> int:
        return self.prune(self.selected_keys)

    def empty(self):
        """Remove every line (and with them, the selection)."""
        count = len(self.items)
        for item in list(self.items):
            self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(CartCleared(cart_id=str(self.id), items_removed=count))

    # -------------------------------------------------------------------
    # Selection
    # -------------------------------------------------------------------
    def toggle_selection(self, book_id, variation_id=None):
        item = self.find(book_id, variation_id)
        if item is None:
            return
        item.selected = not item.selected
        self._selection_changed()

    def select_all(self):
        for item in self.items:
            item.selected = True
        self._selection_changed()

    def deselect_all(self):
        for item in self.items:
            item.selected = False
        self._selection_changed()

    def _selection_changed(self):
        self.updated_at = datetime.now(UTC)
        self.raise_(
            CartSelectionChanged(
                cart_id=str(self.id),
                selected_count=len(self.selected_items),
            )
        )

    # -------------------------------------------------------------------
    # Totals
    # -------------------------------------------------------------------
    @property
    def total(self) -> float:
        return round(sum(i.unit_price * i.quantity for i in self.items), 2)

    @property
    def selected_total(self) -> float:
        return round(sum(i.unit_price * i.quantity for i in self.selected_items), 2)

    @property
    def item_count(self) -> int:
        return sum(i.quantity for i in self.items)

    # -------------------------------------------------------------------
    # Snapshot
    # -------------------------------------------------------------------
    def to_snapshot(self) -> dict:
        return {
            "id": str(self.id),
            "owner": self.owner_key,
            "items": [item.snapshot() for item in self.items],
            "selected": [list(item.key) for item in self.items if item.selected],
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    @classmethod
    def from_snapshot(cls, snapshot):
        cart = cls(
            id=snapshot["id"],
            owner_key=snapshot["owner"],
            created_at=_parse_datetime(snapshot.get("created_at")),
            updated_at=_parse_datetime(snapshot.get("updated_at")),
        )
        selected = {line_key(*key) for key in snapshot.get("selected", [])}
        for data in snapshot.get("items", []):
            key = line_key(data["book_id"], data.get("variation_id"))
            cart.add_items(
                CartItem(
                    id=data["id"],
                    book_id=key[0],
                    variation_id=key[1],
                    title=data["title"],
                    author=data.get("author"),
                    unit_price=data["unit_price"],
                    quantity=data["quantity"],
                    selected=key in selected,
                    added_at=_parse_datetime(data.get("added_at")),
                )
            )
        return cart
