"""CartEngine: owns one shopper's cart for the lifetime of a session.

Every mutation runs against a draft copy of the cart. The draft is persisted
under the shopper's key and only replaces the live cart once the store has
accepted the write, so a ``PersistenceFailure`` leaves the cart exactly as
it was. Mutators return the domain events they produced.
"""

import threading

import structlog

from storefront.cart.cart import ShoppingCart, line_key
from storefront.domain import drain_events
from storefront.identity import CurrentUser
from storefront.persistence.port import KeyValueStore, cart_key

logger = structlog.get_logger(__name__)


class CartEngine:
    def __init__(self, store: KeyValueStore, user: CurrentUser | None = None) -> None:
        self._store = store
        self._lock = threading.RLock()
        self.user = user
        self._cart = self._load()

    # -------------------------------------------------------------------
    # Loading and persistence
    # -------------------------------------------------------------------
    @property
    def storage_key(self) -> str:
        return cart_key(self.user.id if self.user else None)

    @property
    def cart(self) -> ShoppingCart:
        return self._cart

    def _load(self) -> ShoppingCart:
        key = self.storage_key
        snapshot = self._store.get(key)
        if snapshot is None:
            return ShoppingCart.create(owner_key=key)
        try:
            return ShoppingCart.from_snapshot(snapshot)
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Unreadable cart snapshot, starting with an empty cart", key=key, error=str(exc))
            return ShoppingCart.create(owner_key=key)

    def switch_user(self, user: CurrentUser | None) -> None:
        """Replace the in-memory cart with the new user's persisted cart."""
        with self._lock:
            self.user = user
            self._cart = self._load()
        logger.info("Cart reloaded for user", key=self.storage_key, items=len(self._cart.items))

    def _commit(self, mutate) -> list:
        with self._lock:
            draft = ShoppingCart.from_snapshot(self._cart.to_snapshot())
            mutate(draft)
            events = drain_events(draft)
            if not events:
                return []

            self._store.set(self.storage_key, draft.to_snapshot())
            self._cart = draft

        for event in events:
            logger.debug("Cart event", event_type=type(event).__name__, key=self.storage_key)
        return events

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def add_item(self, book, quantity=1, variation_id=None) -> list:
        return self._commit(lambda cart: cart.add_item(book, quantity=quantity, variation_id=variation_id))

    def update_quantity(self, book_id, variation_id, new_quantity) -> list:
        return self._commit(lambda cart: cart.update_quantity(book_id, variation_id, new_quantity))

    def remove_item(self, book_id, variation_id=None) -> list:
        return self._commit(lambda cart: cart.remove_item(book_id, variation_id))

    def clear_cart(self) -> list:
        return self._commit(lambda cart: cart.empty())

    def clear_selected_items(self) -> list:
        """Remove every selected line, keeping the unselected ones."""
        return self._commit(lambda cart: cart.remove_selected())

    def remove_purchased(self, keys) -> list:
        """Remove exactly the given (book_id, variation_id) lines. Used after checkout."""
        keys = [line_key(*key) for key in keys]
        return self._commit(lambda cart: cart.prune(keys))

    # -------------------------------------------------------------------
    # Selection
    # -------------------------------------------------------------------
    def toggle_item_selection(self, book_id, variation_id=None) -> list:
        return self._commit(lambda cart: cart.toggle_selection(book_id, variation_id))

    def select_all_items(self) -> list:
        return self._commit(lambda cart: cart.select_all())

    def deselect_all_items(self) -> list:
        return self._commit(lambda cart: cart.deselect_all())

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def items(self) -> list:
        return list(self._cart.items)

    def get_selected_items(self) -> list:
        return list(self._cart.selected_items)

    def is_selected(self, book_id, variation_id=None) -> bool:
        return line_key(book_id, variation_id) in self._cart.selected_keys

    def get_cart_total(self) -> float:
        return self._cart.total

    def get_selected_total(self) -> float:
        return self._cart.selected_total

    def get_selected_items_count(self) -> int:
        return len(self._cart.selected_items)

    def get_item_count(self) -> int:
        return self._cart.item_count
