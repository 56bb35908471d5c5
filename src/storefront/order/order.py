"""Order aggregate: a price-frozen checkout and its delivery lifecycle.

State Machine (5 states):
    PENDING → PROCESSING → SHIPPED → DELIVERED
    PENDING / PROCESSING → CANCELLED
DELIVERED and CANCELLED are terminal.

Payment status is tracked alongside but independently of the order status;
any payment status may be recorded in any order status.

Line items are copied out of the cart at checkout and never change again.
Totals are always derived from them:
    total = Σ unit_price × quantity + shipping_cost − discount_total
"""

import secrets
import string
from datetime import UTC, datetime
from enum import Enum

from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, Text, ValueObject

from storefront.domain import storefront
from storefront.errors import (
    CancellationNotAllowed,
    EmptySelection,
    InvalidPaymentStatus,
    InvalidStatusTransition,
    MissingCancellationReason,
)
from storefront.order.events import (
    LowStockDetected,
    OrderCancelled,
    OrderDelivered,
    OrderPlaced,
    OrderProcessing,
    OrderShipped,
    PaymentStatusUpdated,
)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentStatus(Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


# State machine transition map
_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}

# States from which cancellation is allowed
_CANCELLABLE_STATES = {
    OrderStatus.PENDING,
    OrderStatus.PROCESSING,
}

_ORDER_NUMBER_ALPHABET = string.ascii_uppercase + string.digits


def generate_order_number(prefix="ORD-"):
    return prefix + "".join(secrets.choice(_ORDER_NUMBER_ALPHABET) for _ in range(8))


def _parse_datetime(value):
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


def _iso(value):
    return value.isoformat() if value else None


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@storefront.value_object(part_of="Order")
class ShippingAddress:
    """Where the order is delivered, captured at checkout.

    The address stays as recorded even if the customer later edits their
    profile.
    """

    name = String(required=True, max_length=255)
    address = String(required=True, max_length=500)
    city = String(required=True, max_length=100)
    phone = String(required=True, max_length=50)
    email = String(max_length=255)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@storefront.entity(part_of="Order")
class OrderItem:
    """A purchased line, frozen at the price it had in the cart."""

    book_id = String(required=True, max_length=100)
    variation_id = String(max_length=100)
    title = String(required=True, max_length=255)
    author = String(max_length=255)
    unit_price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)

    @property
    def key(self) -> tuple[str, str | None]:
        return (self.book_id, self.variation_id or None)

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
        }


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@storefront.aggregate
class Order:
    order_number = String(required=True, max_length=50)
    customer_id = Identifier(required=True)
    customer_name = String(max_length=255)
    items = HasMany(OrderItem)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    payment_method = String(max_length=50, default="cod")
    shipping_address = ValueObject(ShippingAddress)
    notes = Text()
    shipping_cost = Float(default=0.0, min_value=0.0)
    discount_total = Float(default=0.0, min_value=0.0)
    cancellation_reason = String(max_length=500)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        customer_id,
        customer_name,
        selected_items,
        shipping_address,
        payment_method="cod",
        notes=None,
        shipping_cost=0.0,
        discount_total=0.0,
        placed_by_staff=False,
        order_number_prefix="ORD-",
    ):
        """Create a pending order from the selected cart lines.

        Args:
            selected_items: Cart lines (anything with book_id, variation_id,
                title, author, unit_price and quantity). Copied, never referenced.
            shipping_address: A ShippingAddress or a dict of its fields.
            placed_by_staff: True when a staff member checks out for themselves;
                suppresses the new-order alert to staff.
        """
        selected_items = list(selected_items or [])
        if not selected_items:
            raise EmptySelection()

        if isinstance(shipping_address, dict):
            shipping_address = ShippingAddress(**shipping_address)

        now = datetime.now(UTC)
        order = cls(
            order_number=generate_order_number(order_number_prefix),
            customer_id=str(customer_id),
            customer_name=customer_name,
            status=OrderStatus.PENDING.value,
            payment_status=PaymentStatus.PENDING.value,
            payment_method=payment_method or "cod",
            shipping_address=shipping_address,
            notes=notes,
            shipping_cost=shipping_cost or 0.0,
            discount_total=discount_total or 0.0,
            created_at=now,
            updated_at=now,
        )
        for item in selected_items:
            order.add_items(
                OrderItem(
                    book_id=str(item.book_id),
                    variation_id=item.variation_id or None,
                    title=item.title,
                    author=item.author,
                    unit_price=item.unit_price,
                    quantity=item.quantity,
                )
            )

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                order_number=order.order_number,
                customer_id=str(customer_id),
                customer_name=customer_name,
                item_count=sum(i.quantity for i in order.items),
                grand_total=order.total,
                placed_by_staff=placed_by_staff,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Pricing
    # -------------------------------------------------------------------
    @property
    def subtotal(self) -> float:
        return round(sum(i.unit_price * i.quantity for i in self.items), 2)

    @property
    def total(self) -> float:
        return round(self.subtotal + (self.shipping_cost or 0.0) - (self.discount_total or 0.0), 2)

    # -------------------------------------------------------------------
    # State machine
    # -------------------------------------------------------------------
    def allowed_next_statuses(self) -> list[str]:
        allowed = _VALID_TRANSITIONS[OrderStatus(self.status)]
        return [status.value for status in OrderStatus if status in allowed]

    def _assert_can_transition(self, target):
        """Validate that the current state allows transition to target, returning it as an OrderStatus."""
        current = OrderStatus(self.status)
        try:
            target_status = target if isinstance(target, OrderStatus) else OrderStatus(target)
        except ValueError:
            raise InvalidStatusTransition(current.value, target) from None
        if target_status not in _VALID_TRANSITIONS[current]:
            raise InvalidStatusTransition(current.value, target_status.value)
        return target_status

    def transition_to(self, target):
        """Move the order along one edge of the state machine."""
        target_status = self._assert_can_transition(target)
        if target_status == OrderStatus.CANCELLED:
            self._mark_cancelled(reason=None)
            return

        now = datetime.now(UTC)
        self.status = target_status.value
        self.updated_at = now

        common = {
            "order_id": str(self.id),
            "order_number": self.order_number,
            "customer_id": str(self.customer_id),
        }
        if target_status == OrderStatus.PROCESSING:
            self.raise_(OrderProcessing(**common, started_at=now))
        elif target_status == OrderStatus.SHIPPED:
            self.raise_(OrderShipped(**common, shipped_at=now))
        elif target_status == OrderStatus.DELIVERED:
            self.raise_(OrderDelivered(**common, delivered_at=now))

    def cancel(self, reason):
        """Cancel a pending or processing order, recording why."""
        if reason is None or not str(reason).strip():
            raise MissingCancellationReason()

        current = OrderStatus(self.status)
        if current not in _CANCELLABLE_STATES:
            raise CancellationNotAllowed(current.value)

        self._mark_cancelled(reason=str(reason).strip())

    def _mark_cancelled(self, reason):
        now = datetime.now(UTC)
        self.status = OrderStatus.CANCELLED.value
        if reason:
            self.cancellation_reason = reason
        self.updated_at = now

        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                order_number=self.order_number,
                customer_id=str(self.customer_id),
                reason=reason,
                cancelled_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Payment
    # -------------------------------------------------------------------
    def update_payment_status(self, payment_status):
        try:
            new_status = payment_status if isinstance(payment_status, PaymentStatus) else PaymentStatus(payment_status)
        except ValueError:
            raise InvalidPaymentStatus(payment_status) from None

        previous = self.payment_status
        self.payment_status = new_status.value
        self.updated_at = datetime.now(UTC)

        self.raise_(
            PaymentStatusUpdated(
                order_id=str(self.id),
                previous_status=previous,
                new_status=new_status.value,
            )
        )

    # -------------------------------------------------------------------
    # Stock signals
    # -------------------------------------------------------------------
    def note_low_stock(self, book_id, variation_id, title, remaining):
        self.raise_(
            LowStockDetected(
                order_id=str(self.id),
                book_id=str(book_id),
                variation_id=variation_id,
                title=title,
                remaining=remaining,
            )
        )

    # -------------------------------------------------------------------
    # Snapshot
    # -------------------------------------------------------------------
    def to_snapshot(self) -> dict:
        return {
            "id": str(self.id),
            "order_number": self.order_number,
            "customer_id": str(self.customer_id),
            "customer_name": self.customer_name,
            "items": [item.snapshot() for item in self.items],
            "status": self.status,
            "payment_status": self.payment_status,
            "payment_method": self.payment_method,
            "shipping_address": self.shipping_address.to_dict() if self.shipping_address else None,
            "notes": self.notes,
            "shipping_cost": self.shipping_cost,
            "discount_total": self.discount_total,
            "subtotal": self.subtotal,
            "total": self.total,
            "cancellation_reason": self.cancellation_reason,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }

    @classmethod
    def from_snapshot(cls, snapshot):
        address = snapshot.get("shipping_address")
        order = cls(
            id=snapshot["id"],
            order_number=snapshot["order_number"],
            customer_id=snapshot["customer_id"],
            customer_name=snapshot.get("customer_name"),
            status=snapshot["status"],
            payment_status=snapshot.get("payment_status", PaymentStatus.PENDING.value),
            payment_method=snapshot.get("payment_method", "cod"),
            shipping_address=ShippingAddress(**address) if address else None,
            notes=snapshot.get("notes"),
            shipping_cost=snapshot.get("shipping_cost", 0.0),
            discount_total=snapshot.get("discount_total", 0.0),
            cancellation_reason=snapshot.get("cancellation_reason"),
            created_at=_parse_datetime(snapshot.get("created_at")),
            updated_at=_parse_datetime(snapshot.get("updated_at")),
        )
        for data in snapshot.get("items", []):
            order.add_items(
                OrderItem(
                    id=data["id"],
                    book_id=data["book_id"],
                    variation_id=data.get("variation_id"),
                    title=data["title"],
                    author=data.get("author"),
                    unit_price=data["unit_price"],
                    quantity=data["quantity"],
                )
            )
        return order
