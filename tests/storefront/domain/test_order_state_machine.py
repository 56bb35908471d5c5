"""Tests for the Order status state machine.

    pending → processing → shipped → delivered
    pending / processing → cancelled
"""

import pytest
from storefront.cart.cart import ShoppingCart
from storefront.errors import CancellationNotAllowed, InvalidStatusTransition, MissingCancellationReason
from storefront.order.events import OrderCancelled, OrderDelivered, OrderProcessing, OrderShipped
from storefront.order.order import Order, OrderStatus

_PATHS = {
    "pending": [],
    "processing": ["processing"],
    "shipped": ["processing", "shipped"],
    "delivered": ["processing", "shipped", "delivered"],
    "cancelled": ["cancelled"],
}


@pytest.fixture()
def order_in(book_a, address):
    def _build(status):
        cart = ShoppingCart.create(owner_key="cart:cust-001")
        cart.add_item(book_a, quantity=1)
        order = Order.place(
            customer_id="cust-001",
            customer_name="Alice Reader",
            selected_items=cart.selected_items,
            shipping_address=address,
        )
        for step in _PATHS[status]:
            order.transition_to(step)
        order._events.clear()
        return order

    return _build


class TestLegalTransitions:
    def test_full_delivery_walk(self, order_in):
        order = order_in("pending")

        order.transition_to("processing")
        order.transition_to("shipped")
        order.transition_to("delivered")

        assert order.status == OrderStatus.DELIVERED.value
        assert [type(e) for e in order._events] == [OrderProcessing, OrderShipped, OrderDelivered]

    @pytest.mark.parametrize("start", ["pending", "processing"])
    def test_cancel_via_status_update(self, order_in, start):
        order = order_in(start)
        order.transition_to("cancelled")

        assert order.status == "cancelled"
        assert isinstance(order._events[-1], OrderCancelled)

    def test_accepts_enum_members(self, order_in):
        order = order_in("pending")
        order.transition_to(OrderStatus.PROCESSING)
        assert order.status == "processing"

    def test_transition_updates_timestamp(self, order_in):
        order = order_in("pending")
        before = order.updated_at
        order.transition_to("processing")
        assert order.updated_at >= before


class TestIllegalTransitions:
    @pytest.mark.parametrize(
        "start,target",
        [
            ("pending", "shipped"),
            ("pending", "delivered"),
            ("processing", "pending"),
            ("processing", "delivered"),
            ("shipped", "pending"),
            ("shipped", "processing"),
            ("shipped", "cancelled"),
            ("delivered", "shipped"),
            ("delivered", "cancelled"),
            ("cancelled", "pending"),
            ("cancelled", "processing"),
        ],
    )
    def test_rejected_and_unchanged(self, order_in, start, target):
        order = order_in(start)

        with pytest.raises(InvalidStatusTransition):
            order.transition_to(target)

        assert order.status == start
        assert order._events == []

    @pytest.mark.parametrize("status", ["pending", "processing", "shipped", "delivered", "cancelled"])
    def test_same_status_is_rejected(self, order_in, status):
        order = order_in(status)
        with pytest.raises(InvalidStatusTransition):
            order.transition_to(status)

    def test_unknown_status_is_rejected(self, order_in):
        order = order_in("pending")
        with pytest.raises(InvalidStatusTransition) as exc:
            order.transition_to("returned")
        assert exc.value.messages == {"status": ["Cannot transition from pending to returned"]}

    def test_shipped_back_to_pending_message(self, order_in):
        order = order_in("shipped")
        with pytest.raises(InvalidStatusTransition) as exc:
            order.transition_to("pending")
        assert exc.value.messages["status"] == ["Cannot transition from shipped to pending"]


class TestCancellation:
    @pytest.mark.parametrize("start", ["pending", "processing"])
    def test_cancel_records_reason(self, order_in, start):
        order = order_in(start)
        order.cancel("Found it cheaper elsewhere")

        assert order.status == "cancelled"
        assert order.cancellation_reason == "Found it cheaper elsewhere"
        event = order._events[-1]
        assert isinstance(event, OrderCancelled)
        assert event.reason == "Found it cheaper elsewhere"

    @pytest.mark.parametrize("start", ["shipped", "delivered", "cancelled"])
    def test_cancel_not_allowed(self, order_in, start):
        order = order_in(start)

        with pytest.raises(CancellationNotAllowed):
            order.cancel("Too late")
        assert order.status == start

    @pytest.mark.parametrize("reason", ["", "   ", None])
    def test_cancel_requires_reason(self, order_in, reason):
        order = order_in("pending")

        with pytest.raises(MissingCancellationReason):
            order.cancel(reason)

        assert order.status == "pending"
        assert order.cancellation_reason is None
        assert order._events == []


class TestAllowedStatuses:
    @pytest.mark.parametrize(
        "status,allowed",
        [
            ("pending", ["processing", "cancelled"]),
            ("processing", ["shipped", "cancelled"]),
            ("shipped", ["delivered"]),
            ("delivered", []),
            ("cancelled", []),
        ],
    )
    def test_allowed_next_statuses(self, order_in, status, allowed):
        assert order_in(status).allowed_next_statuses() == allowed
