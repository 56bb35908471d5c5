"""Notification sink port (abstract interface).

The storefront only emits notices; rendering and delivery belong to the
sink. A notice names its type, who it is for (a user id, or the staff
audience), the data a template needs, and an optional deep link.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum

STAFF_AUDIENCE = "staff"


class NotificationType(Enum):
    ORDER_PLACED = "orderPlaced"
    ORDER_CONFIRMED = "orderConfirmed"
    ORDER_SHIPPED = "orderShipped"
    ORDER_DELIVERED = "orderDelivered"
    ORDER_CANCELLED = "orderCancelled"
    NEW_ORDER_FOR_STAFF = "newOrderForStaff"
    LOW_STOCK = "lowStock"
    NEW_BOOK_ADDED = "newBookAdded"
    PROMOTIONAL_OFFER = "promotionalOffer"
    SYSTEM_MAINTENANCE = "systemMaintenance"


@dataclass(frozen=True)
class Notice:
    notification_type: NotificationType
    recipient_id: str
    context: dict = field(default_factory=dict)
    link: str | None = None


class NotificationSink(ABC):
    @abstractmethod
    def emit(self, notice: Notice) -> None:
        """Accept a notice. The return value is never inspected."""
        ...
