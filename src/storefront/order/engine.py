"""OrderEngine: checkout and order lifecycle over the persisted order list.

The full list of orders is stored under the ``orders`` key and is the source
of truth; each engine keeps a cached copy for queries. Writes are serialized
by one lock shared by every engine in the process, so a second caller waits
for the first to finish.

Every mutation follows the same shape: re-read the persisted list, rebuild
the order from its snapshot, apply the change to that copy, persist the new
list, and only then replace the cache and dispatch the events the change
raised. Orders written by other engines are never overwritten, and a failed
write leaves both the cache and the sink untouched.
"""

import math
import threading
from dataclasses import dataclass

import structlog

from storefront.catalog.port import Catalog
from storefront.config import Settings, load_settings
from storefront.errors import BookNotFound, CustomerRequired, EmptySelection, OrderNotFound, PersistenceFailure
from storefront.identity import CurrentUser
from storefront.domain import drain_events
from storefront.notifications.dispatch import NotificationDispatcher
from storefront.order.order import Order, OrderStatus, PaymentStatus
from storefront.persistence.port import ORDERS_KEY, KeyValueStore

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class OrderPage:
    orders: list
    total: int
    page: int
    per_page: int

    @property
    def pages(self) -> int:
        return max(1, math.ceil(self.total / self.per_page))


class OrderEngine:
    _write_lock = threading.RLock()

    def __init__(
        self,
        store: KeyValueStore,
        cart_engine,
        dispatcher: NotificationDispatcher,
        catalog: Catalog | None = None,
        user: CurrentUser | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._store = store
        self._cart = cart_engine
        self._dispatcher = dispatcher
        self._catalog = catalog
        self._settings = settings or load_settings()
        self.user = user
        self._snapshots: list[dict] = self._load()

    # -------------------------------------------------------------------
    # Loading and persistence
    # -------------------------------------------------------------------
    def _load(self) -> list[dict]:
        return list(self._store.get(ORDERS_KEY) or [])

    def reload(self) -> None:
        """Drop the cached order list and read it again from storage."""
        with self._write_lock:
            self._snapshots = self._load()

    def switch_user(self, user: CurrentUser | None) -> None:
        with self._write_lock:
            self.user = user
            self._snapshots = self._load()
        logger.info("Order list reloaded for user", user_id=user.id if user else None)

    def _index_of(self, order_id, snapshots=None) -> int:
        snapshots = self._snapshots if snapshots is None else snapshots
        for index, snapshot in enumerate(snapshots):
            if snapshot["id"] == str(order_id):
                return index
        raise OrderNotFound(order_id)

    def _is_staff(self, user: CurrentUser | None) -> bool:
        return user is not None and user.role.lower() in self._settings.staff_roles

    # -------------------------------------------------------------------
    # Checkout
    # -------------------------------------------------------------------
    def create_order(
        self,
        selected_items,
        shipping_address,
        payment_method="cod",
        notes=None,
        shipping_cost=0.0,
        discount_total=0.0,
    ) -> Order:
        """Turn the selected cart lines into a pending order.

        The order is appended to the persisted list, then exactly the ordered
        lines are pruned from the cart. Both happen or neither does: if the
        cart cannot be saved, the previous order list is written back and the
        failure is re-raised. Notices go out only after both writes succeed.
        """
        selected_items = list(selected_items or [])
        if not selected_items:
            raise EmptySelection()
        if self.user is None:
            raise CustomerRequired()

        order = Order.place(
            customer_id=self.user.id,
            customer_name=self.user.name,
            selected_items=selected_items,
            shipping_address=shipping_address,
            payment_method=payment_method,
            notes=notes,
            shipping_cost=shipping_cost,
            discount_total=discount_total,
            placed_by_staff=self._is_staff(self.user),
            order_number_prefix=self._settings.order_number_prefix,
        )
        purchased = [item.key for item in order.items]

        with self._write_lock:
            previous = self._load()
            updated = [*previous, order.to_snapshot()]

            self._store.set(ORDERS_KEY, updated)
            try:
                self._cart.remove_purchased(purchased)
            except PersistenceFailure:
                logger.error(
                    "Cart prune failed after checkout, rolling back order",
                    order_id=str(order.id),
                )
                self._restore(previous, order)
                raise

            self._snapshots = updated

        self._check_stock(order)
        logger.info(
            "Order placed",
            order_id=str(order.id),
            order_number=order.order_number,
            customer_id=str(order.customer_id),
            grand_total=order.total,
        )
        self._dispatcher.dispatch(drain_events(order))
        return order

    def _restore(self, previous, order: Order) -> None:
        try:
            self._store.set(ORDERS_KEY, previous)
        except PersistenceFailure as exc:
            logger.critical(
                "Order rollback failed, order persisted but cart not pruned",
                order_id=str(order.id),
                order_number=order.order_number,
                error=str(exc),
            )
            self._snapshots = [*previous, order.to_snapshot()]
            return
        self._snapshots = previous

    def _check_stock(self, order: Order) -> None:
        if self._catalog is None:
            return
        for item in order.items:
            try:
                book = self._catalog.get_book(item.book_id, item.variation_id)
            except BookNotFound:
                logger.warning("Ordered book missing from catalog", book_id=item.book_id)
                continue
            if book.stock is None:
                continue
            remaining = max(book.stock - item.quantity, 0)
            if remaining <= self._settings.low_stock_threshold:
                order.note_low_stock(item.book_id, item.variation_id, item.title, remaining)

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------
    def _mutate(self, order_id, change) -> Order:
        with self._write_lock:
            current = self._load()
            index = self._index_of(order_id, current)
            order = Order.from_snapshot(current[index])
            change(order)

            updated = list(current)
            updated[index] = order.to_snapshot()
            self._store.set(ORDERS_KEY, updated)
            self._snapshots = updated

        self._dispatcher.dispatch(drain_events(order))
        return order

    def update_order_status(self, order_id, new_status) -> Order:
        order = self._mutate(order_id, lambda o: o.transition_to(new_status))
        logger.info("Order status updated", order_id=str(order_id), status=order.status)
        return order

    def cancel_order(self, order_id, reason) -> Order:
        order = self._mutate(order_id, lambda o: o.cancel(reason))
        logger.info("Order cancelled", order_id=str(order_id), reason=order.cancellation_reason)
        return order

    def update_payment_status(self, order_id, payment_status) -> Order:
        order = self._mutate(order_id, lambda o: o.update_payment_status(payment_status))
        logger.info("Payment status updated", order_id=str(order_id), payment_status=order.payment_status)
        return order

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def _orders(self, snapshots=None) -> list[Order]:
        return [Order.from_snapshot(s) for s in (self._snapshots if snapshots is None else snapshots)]

    def get_order_by_id(self, order_id) -> Order:
        return Order.from_snapshot(self._snapshots[self._index_of(order_id)])

    def get_user_orders(self, user_id=None) -> list[Order]:
        """Orders placed by ``user_id`` (defaults to the current user), newest first."""
        if user_id is None:
            if self.user is None:
                return []
            user_id = self.user.id
        mine = [s for s in self._snapshots if s["customer_id"] == str(user_id)]
        return list(reversed(self._orders(mine)))

    def get_orders_by_status(self, status) -> list[Order]:
        status = status.value if isinstance(status, OrderStatus) else status
        return self._orders([s for s in self._snapshots if s["status"] == status])

    def get_allowed_statuses(self, order_id) -> list[str]:
        return self.get_order_by_id(order_id).allowed_next_statuses()

    def get_order_stats(self) -> dict:
        """Order counts per status and per payment status, and revenue from completed payments."""
        stats = {f"{status.value}_orders": 0 for status in OrderStatus}
        payments = {f"{status.value}_payments": 0 for status in PaymentStatus}
        revenue = 0.0

        for snapshot in self._snapshots:
            stats[f"{snapshot['status']}_orders"] += 1
            payments[f"{snapshot['payment_status']}_payments"] += 1
            if snapshot["payment_status"] == PaymentStatus.COMPLETED.value:
                revenue += snapshot["total"]

        return {
            "total_orders": len(self._snapshots),
            **stats,
            **payments,
            "total_revenue": round(revenue, 2),
        }

    def list_orders(self, page=1, per_page=15, status=None, payment_status=None, search=None) -> OrderPage:
        """Staff listing: newest first, filtered, paginated.

        ``search`` matches the order number or the customer name, case-insensitively.
        """
        page = max(int(page), 1)
        per_page = max(int(per_page), 1)
        needle = search.strip().lower() if search else None

        matches = []
        for snapshot in reversed(self._snapshots):
            if status and snapshot["status"] != status:
                continue
            if payment_status and snapshot["payment_status"] != payment_status:
                continue
            if needle and not (
                needle in snapshot["order_number"].lower() or needle in (snapshot.get("customer_name") or "").lower()
            ):
                continue
            matches.append(snapshot)

        start = (page - 1) * per_page
        return OrderPage(
            orders=self._orders(matches[start : start + per_page]),
            total=len(matches),
            page=page,
            per_page=per_page,
        )
