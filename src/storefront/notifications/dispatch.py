"""Notification dispatcher: turns order events into notices for the sink.

Engines collect the events their aggregates raised and hand them here once
the change has been persisted. Emission is fire-and-forget: a failing sink
is logged and never surfaces to the caller.
"""

import structlog

from storefront.notifications.port import STAFF_AUDIENCE, Notice, NotificationSink, NotificationType
from storefront.order.events import (
    LowStockDetected,
    OrderCancelled,
    OrderDelivered,
    OrderPlaced,
    OrderProcessing,
    OrderShipped,
)

logger = structlog.get_logger(__name__)

ANNOUNCEMENT_TYPES = frozenset(
    {
        NotificationType.NEW_BOOK_ADDED,
        NotificationType.PROMOTIONAL_OFFER,
        NotificationType.SYSTEM_MAINTENANCE,
    }
)


def _order_context(event) -> dict:
    return {"order_id": str(event.order_id), "order_number": event.order_number}


def _order_link(event) -> str:
    return f"/order-confirmation/{event.order_id}"


class NotificationDispatcher:
    """Maps domain events to notices and forwards them to a NotificationSink."""

    def __init__(self, sink: NotificationSink) -> None:
        self.sink = sink
        self._handlers = {
            OrderPlaced: self._on_order_placed,
            OrderProcessing: self._on_order_processing,
            OrderShipped: self._on_order_shipped,
            OrderDelivered: self._on_order_delivered,
            OrderCancelled: self._on_order_cancelled,
            LowStockDetected: self._on_low_stock,
        }

    def dispatch(self, events) -> list[Notice]:
        """Emit a notice for every event that has one. Returns the notices emitted."""
        notices = []
        for event in events:
            handler = self._handlers.get(type(event))
            if handler is not None:
                notices.extend(handler(event))

        return self._emit(notices)

    def announce(self, notification_type, recipient_ids, context=None, link=None) -> list[Notice]:
        """Send a storewide announcement (new book, offer, maintenance) to each recipient."""
        notification_type = NotificationType(notification_type)
        if notification_type not in ANNOUNCEMENT_TYPES:
            raise ValueError(f"{notification_type.value} is not an announcement")

        notices = [
            Notice(
                notification_type=notification_type,
                recipient_id=str(recipient_id),
                context=dict(context or {}),
                link=link,
            )
            for recipient_id in recipient_ids
        ]
        logger.info("Announcement sent", notification_type=notification_type.value, recipients=len(notices))
        return self._emit(notices)

    def _emit(self, notices: list[Notice]) -> list[Notice]:
        for notice in notices:
            try:
                self.sink.emit(notice)
            except Exception as e:
                logger.error(
                    "Notification emit failed",
                    notification_type=notice.notification_type.value,
                    recipient_id=notice.recipient_id,
                    error=str(e),
                )
        return notices

    # -------------------------------------------------------------------
    # Event → notice mapping
    # -------------------------------------------------------------------
    def _on_order_placed(self, event: OrderPlaced) -> list[Notice]:
        context = {
            **_order_context(event),
            "customer_name": event.customer_name,
            "item_count": event.item_count,
            "grand_total": event.grand_total,
        }
        notices = [
            Notice(
                notification_type=NotificationType.ORDER_PLACED,
                recipient_id=str(event.customer_id),
                context=context,
                link=_order_link(event),
            )
        ]
        # Staff placing their own order don't alert themselves
        if not event.placed_by_staff:
            notices.append(
                Notice(
                    notification_type=NotificationType.NEW_ORDER_FOR_STAFF,
                    recipient_id=STAFF_AUDIENCE,
                    context=context,
                    link="/admin/orders",
                )
            )
        return notices

    def _customer_notice(self, notification_type, event, **extra) -> list[Notice]:
        return [
            Notice(
                notification_type=notification_type,
                recipient_id=str(event.customer_id),
                context={**_order_context(event), **extra},
                link=_order_link(event),
            )
        ]

    def _on_order_processing(self, event: OrderProcessing) -> list[Notice]:
        return self._customer_notice(NotificationType.ORDER_CONFIRMED, event)

    def _on_order_shipped(self, event: OrderShipped) -> list[Notice]:
        return self._customer_notice(NotificationType.ORDER_SHIPPED, event)

    def _on_order_delivered(self, event: OrderDelivered) -> list[Notice]:
        return self._customer_notice(NotificationType.ORDER_DELIVERED, event)

    def _on_order_cancelled(self, event: OrderCancelled) -> list[Notice]:
        return self._customer_notice(NotificationType.ORDER_CANCELLED, event, reason=event.reason)

    def _on_low_stock(self, event: LowStockDetected) -> list[Notice]:
        return [
            Notice(
                notification_type=NotificationType.LOW_STOCK,
                recipient_id=STAFF_AUDIENCE,
                context={
                    "book_id": event.book_id,
                    "variation_id": event.variation_id,
                    "title": event.title,
                    "remaining": event.remaining,
                },
                link="/admin/books",
            )
        ]
