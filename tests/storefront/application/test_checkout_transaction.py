"""Checkout and order mutations either complete fully or leave no trace."""

import pytest
from storefront.cart.engine import CartEngine
from storefront.errors import MissingCancellationReason, PersistenceFailure
from storefront.identity import StaticIdentityProvider
from storefront.notifications.port import NotificationType
from storefront.order.engine import OrderEngine
from storefront.session import StorefrontSession


@pytest.fixture()
def two_book_cart(cart_engine, book_a, book_b):
    cart_engine.add_item(book_a, quantity=2)
    cart_engine.add_item(book_b, quantity=1)
    cart_engine.deselect_all_items()
    cart_engine.select_all_items()
    return cart_engine


class TestCheckout:
    def test_checkout_selected_books(self, two_book_cart, order_engine, address, sink):
        order = order_engine.create_order(two_book_cart.get_selected_items(), address)

        assert order.total == pytest.approx(45.97)
        assert two_book_cart.items == []
        assert two_book_cart.get_cart_total() == 0
        assert len(sink.of_type(NotificationType.ORDER_PLACED)) == 1

    def test_order_write_failure_changes_nothing(self, two_book_cart, order_engine, address, store, sink):
        store.configure(should_fail=True, fail_on={"orders"})

        with pytest.raises(PersistenceFailure):
            order_engine.create_order(two_book_cart.get_selected_items(), address)

        assert store.get("orders") is None
        assert order_engine.get_user_orders() == []
        assert two_book_cart.get_item_count() == 3
        assert sink.sent == []

    def test_cart_write_failure_rolls_back_order(self, two_book_cart, order_engine, address, store, sink):
        store.configure(should_fail=True, fail_on={"cart:cust-001"})

        with pytest.raises(PersistenceFailure):
            order_engine.create_order(two_book_cart.get_selected_items(), address)

        assert store.get("orders") == []
        assert order_engine.get_user_orders() == []
        assert two_book_cart.get_item_count() == 3
        assert len(store.get("cart:cust-001")["items"]) == 2
        assert sink.sent == []

    def test_rollback_keeps_earlier_orders(self, two_book_cart, order_engine, address, store, book_c):
        first = order_engine.create_order(two_book_cart.get_selected_items(), address)
        two_book_cart.add_item(book_c)
        store.configure(should_fail=True, fail_on={"cart:cust-001"})

        with pytest.raises(PersistenceFailure):
            order_engine.create_order(two_book_cart.get_selected_items(), address)

        assert [o["id"] for o in store.get("orders")] == [str(first.id)]

    def test_failing_sink_does_not_break_checkout(self, two_book_cart, order_engine, address, store, sink):
        sink.configure(should_fail=True)

        order = order_engine.create_order(two_book_cart.get_selected_items(), address)

        assert order.status == "pending"
        assert len(store.get("orders")) == 1
        assert two_book_cart.items == []


class TestOrderMutations:
    @pytest.fixture()
    def order(self, two_book_cart, order_engine, address, sink):
        placed = order_engine.create_order(two_book_cart.get_selected_items(), address)
        sink.reset()
        return placed

    def test_cancel_without_reason_changes_nothing(self, order, order_engine, store, sink, two_book_cart):
        orders_before = store.get("orders")
        cart_before = store.get("cart:cust-001")

        with pytest.raises(MissingCancellationReason):
            order_engine.cancel_order(order.id, "")

        assert store.get("orders") == orders_before
        assert store.get("cart:cust-001") == cart_before
        assert order_engine.get_order_by_id(order.id).status == "pending"
        assert sink.sent == []

    def test_blank_reason_is_missing(self, order, order_engine):
        with pytest.raises(MissingCancellationReason):
            order_engine.cancel_order(order.id, "   ")

    def test_status_write_failure_leaves_order_unchanged(self, order, order_engine, store, sink):
        store.configure(should_fail=True, fail_on={"orders"})

        with pytest.raises(PersistenceFailure):
            order_engine.update_order_status(order.id, "processing")

        assert order_engine.get_order_by_id(order.id).status == "pending"
        assert store.get("orders")[0]["status"] == "pending"
        assert sink.sent == []

    def test_payment_write_failure_leaves_order_unchanged(self, order, order_engine, store):
        store.configure(should_fail=True, fail_on={"orders"})

        with pytest.raises(PersistenceFailure):
            order_engine.update_payment_status(order.id, "completed")

        assert order_engine.get_order_by_id(order.id).payment_status == "pending"


class _CartThatTakesStorageDown:
    """Cart whose prune fails and leaves every later write failing too."""

    def __init__(self, store):
        self.store = store

    def remove_purchased(self, keys):
        self.store.configure(should_fail=True)
        raise PersistenceFailure("cart:cust-001", "Disk full")


class TestFailedRollback:
    def test_order_stays_visible_when_rollback_fails(
        self, store, dispatcher, catalog, customer, settings, book_a, address, sink
    ):
        cart = CartEngine(store, user=customer)
        cart.add_item(book_a)
        engine = OrderEngine(
            store, _CartThatTakesStorageDown(store), dispatcher, catalog=catalog, user=customer, settings=settings
        )

        with pytest.raises(PersistenceFailure):
            engine.create_order(cart.get_selected_items(), address)

        (persisted,) = store.get("orders")
        assert [str(o.id) for o in engine.get_user_orders()] == [persisted["id"]]
        assert sink.sent == []


class TestSharedOrderList:
    """Sessions built independently over one store see and keep each other's orders."""

    @pytest.fixture()
    def open_session(self, store, sink, catalog, settings):
        def _open(user):
            return StorefrontSession(
                store=store,
                sink=sink,
                catalog=catalog,
                identity=StaticIdentityProvider(user),
                settings=settings,
            )

        return _open

    def test_checkouts_from_two_sessions_are_both_kept(self, open_session, customer, other_customer, address, store):
        alice = open_session(customer)
        bob = open_session(other_customer)

        alice.add_book("1")
        bob.add_book("3")
        first = alice.checkout(address)
        second = bob.checkout(address)

        assert {o["id"] for o in store.get("orders")} == {str(first.id), str(second.id)}

    def test_stale_session_update_keeps_newer_orders(self, open_session, customer, staff_user, address, store):
        alice = open_session(customer)
        alice.add_book("1")
        first = alice.checkout(address)

        clerk = open_session(staff_user)

        alice.add_book("3")
        second = alice.checkout(address)

        clerk.orders.update_order_status(first.id, "processing")

        statuses = {o["id"]: o["status"] for o in store.get("orders")}
        assert statuses == {str(first.id): "processing", str(second.id): "pending"}

    def test_stale_session_sees_order_placed_elsewhere(self, open_session, customer, staff_user, address):
        clerk = open_session(staff_user)

        alice = open_session(customer)
        alice.add_book("1")
        order = alice.checkout(address)

        updated = clerk.orders.cancel_order(order.id, "Customer called")

        assert updated.status == "cancelled"
