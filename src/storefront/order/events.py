"""Domain events for the Order aggregate.

These are the lifecycle facts the NotificationDispatcher turns into
customer and staff notices.
"""

from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Order")
class OrderPlaced:
    """A selection of cart items was checked out as a new order."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    customer_id = Identifier(required=True)
    customer_name = String()
    item_count = Integer(required=True)
    grand_total = Float(required=True)
    placed_by_staff = Boolean(default=False)
    placed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderProcessing:
    """The store accepted the order and started preparing it."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    customer_id = Identifier(required=True)
    started_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderShipped:
    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    customer_id = Identifier(required=True)
    shipped_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderDelivered:
    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    customer_id = Identifier(required=True)
    delivered_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderCancelled:
    """The order was cancelled before it shipped."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    customer_id = Identifier(required=True)
    reason = String()
    cancelled_at = DateTime(required=True)


@storefront.event(part_of="Order")
class PaymentStatusUpdated:
    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)


@storefront.event(part_of="Order")
class LowStockDetected:
    """A book in this order is running low once the order's quantity is taken out."""

    __version__ = 1

    order_id = Identifier(required=True)
    book_id = String(required=True)
    variation_id = String()
    title = String(required=True)
    remaining = Integer(required=True)
