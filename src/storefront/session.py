"""Per-session composition of the storefront engines.

A StorefrontSession wires one CartEngine and one OrderEngine to the ports
they need. Nothing is global: each session owns its engines, and callers
receive them from the session rather than from module state.
"""

import structlog

from storefront.cart.engine import CartEngine
from storefront.catalog import get_catalog
from storefront.catalog.port import Catalog
from storefront.config import Settings, load_settings
from storefront.identity import CurrentUser, IdentityProvider
from storefront.notifications import get_sink
from storefront.notifications.dispatch import NotificationDispatcher
from storefront.notifications.port import NotificationSink
from storefront.order.engine import OrderEngine
from storefront.persistence import get_store
from storefront.persistence.port import KeyValueStore

logger = structlog.get_logger(__name__)


class StorefrontSession:
    def __init__(
        self,
        store: KeyValueStore | None = None,
        sink: NotificationSink | None = None,
        catalog: Catalog | None = None,
        identity: IdentityProvider | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.store = store if store is not None else get_store()
        self.sink = sink if sink is not None else get_sink()
        self.catalog = catalog if catalog is not None else get_catalog()
        self.settings = settings or load_settings()
        self.user = identity.get() if identity is not None else None

        self.dispatcher = NotificationDispatcher(self.sink)
        self.cart = CartEngine(self.store, user=self.user)
        self.orders = OrderEngine(
            self.store,
            self.cart,
            self.dispatcher,
            catalog=self.catalog,
            user=self.user,
            settings=self.settings,
        )

    def switch_user(self, user: CurrentUser | None) -> None:
        """Log in, log out, or change user: both engines reload from storage."""
        self.user = user
        self.cart.switch_user(user)
        self.orders.switch_user(user)
        logger.info("Session user changed", user_id=user.id if user else None)

    def add_book(self, book_id, quantity=1, variation_id=None) -> list:
        """Look the book up in the catalog and add it to the cart."""
        book = self.catalog.get_book(book_id, variation_id)
        return self.cart.add_item(book, quantity=quantity, variation_id=variation_id)

    def checkout(self, shipping_address, payment_method="cod", notes=None, shipping_cost=0.0, discount_total=0.0):
        """Place an order for the currently selected cart lines."""
        return self.orders.create_order(
            self.cart.get_selected_items(),
            shipping_address,
            payment_method=payment_method,
            notes=notes,
            shipping_cost=shipping_cost,
            discount_total=discount_total,
        )
