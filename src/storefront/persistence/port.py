"""Key-value store port (abstract interface).

Cart snapshots, the order list and notification history are all persisted
as JSON-compatible values under logical keys. Adapters must raise
``PersistenceFailure`` for any storage error or timeout, and must never
apply a partial write.
"""

from abc import ABC, abstractmethod
from typing import Any

ORDERS_KEY = "orders"
GUEST_CART_KEY = "cart:guest"


def cart_key(user_id: str | None) -> str:
    """Storage key for a user's cart, or the shared guest cart."""
    return f"cart:{user_id}" if user_id else GUEST_CART_KEY


def notifications_key(recipient_id: str) -> str:
    return f"notifications:{recipient_id}"


class KeyValueStore(ABC):
    """Abstract durable key-value store."""

    @abstractmethod
    def get(self, key: str) -> Any | None:
        """Return the stored value for ``key``, or None when absent."""
        ...

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store ``value`` (JSON-serializable) under ``key``, replacing any previous value."""
        ...

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete ``key``. Removing an absent key is not an error."""
        ...
