"""Storefront error taxonomy.

Every error is recoverable: it rejects one operation and leaves cart and
order state as it was. Each class also derives from the matching Protean
exception, so callers that already handle ``ValidationError`` or
``ObjectNotFoundError`` keep working.
"""

from protean.exceptions import ObjectNotFoundError, ValidationError


class StorefrontError(Exception):
    """Base class for all storefront rejections."""

    code = "storefront_error"


# ---------------------------------------------------------------------------
# Cart errors
# ---------------------------------------------------------------------------
class InvalidQuantity(StorefrontError, ValidationError):
    code = "invalid_quantity"

    def __init__(self, quantity):
        self.quantity = quantity
        super().__init__({"quantity": [f"Quantity must be at least 1, got {quantity}"]})


class ItemNotFound(StorefrontError, ObjectNotFoundError):
    code = "item_not_found"

    def __init__(self, book_id, variation_id=None):
        self.book_id = book_id
        self.variation_id = variation_id
        label = f"{book_id}/{variation_id}" if variation_id else f"{book_id}"
        super().__init__(f"Cart item {label} not found")


class EmptySelection(StorefrontError, ValidationError):
    code = "empty_selection"

    def __init__(self):
        super().__init__({"items": ["Select at least one cart item to check out"]})


# ---------------------------------------------------------------------------
# Order errors
# ---------------------------------------------------------------------------
class OrderNotFound(StorefrontError, ObjectNotFoundError):
    code = "order_not_found"

    def __init__(self, order_id):
        self.order_id = order_id
        super().__init__(f"Order {order_id} not found")


class InvalidStatusTransition(StorefrontError, ValidationError):
    code = "invalid_status_transition"

    def __init__(self, current, target):
        self.current = current
        self.target = target
        super().__init__({"status": [f"Cannot transition from {current} to {target}"]})


class CancellationNotAllowed(StorefrontError, ValidationError):
    code = "cancellation_not_allowed"

    def __init__(self, status):
        self.status = status
        super().__init__({"status": [f"Orders in {status} status cannot be cancelled"]})


class MissingCancellationReason(StorefrontError, ValidationError):
    code = "missing_cancellation_reason"

    def __init__(self):
        super().__init__({"reason": ["A cancellation reason is required"]})


class InvalidPaymentStatus(StorefrontError, ValidationError):
    code = "invalid_payment_status"

    def __init__(self, payment_status):
        self.payment_status = payment_status
        super().__init__({"payment_status": [f"Unknown payment status: {payment_status}"]})


class CustomerRequired(StorefrontError, ValidationError):
    code = "customer_required"

    def __init__(self):
        super().__init__({"customer": ["Sign in to place an order"]})


# ---------------------------------------------------------------------------
# Collaborator errors
# ---------------------------------------------------------------------------
class BookNotFound(StorefrontError, ObjectNotFoundError):
    code = "book_not_found"

    def __init__(self, book_id, variation_id=None):
        self.book_id = book_id
        self.variation_id = variation_id
        label = f"{book_id}/{variation_id}" if variation_id else f"{book_id}"
        super().__init__(f"Book {label} not found in catalog")


class PersistenceFailure(StorefrontError):
    code = "persistence_failure"

    def __init__(self, key, reason):
        self.key = key
        self.reason = reason
        super().__init__(f"Could not persist '{key}': {reason}")
