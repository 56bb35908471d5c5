"""Template registry: maps NotificationType values to template classes.

Each template renders a title, message, kind (used for styling) and an
optional call to action from the notice context.
"""

from storefront.notifications.port import NotificationType
from storefront.notifications.templates.announcements import (
    NewBookAddedTemplate,
    PromotionalOfferTemplate,
    SystemMaintenanceTemplate,
)
from storefront.notifications.templates.order_updates import (
    OrderCancelledTemplate,
    OrderConfirmedTemplate,
    OrderDeliveredTemplate,
    OrderPlacedTemplate,
    OrderShippedTemplate,
)
from storefront.notifications.templates.staff_alerts import LowStockTemplate, NewOrderForStaffTemplate

TEMPLATE_REGISTRY: dict[str, type] = {
    NotificationType.ORDER_PLACED.value: OrderPlacedTemplate,
    NotificationType.ORDER_CONFIRMED.value: OrderConfirmedTemplate,
    NotificationType.ORDER_SHIPPED.value: OrderShippedTemplate,
    NotificationType.ORDER_DELIVERED.value: OrderDeliveredTemplate,
    NotificationType.ORDER_CANCELLED.value: OrderCancelledTemplate,
    NotificationType.NEW_ORDER_FOR_STAFF.value: NewOrderForStaffTemplate,
    NotificationType.LOW_STOCK.value: LowStockTemplate,
    NotificationType.NEW_BOOK_ADDED.value: NewBookAddedTemplate,
    NotificationType.PROMOTIONAL_OFFER.value: PromotionalOfferTemplate,
    NotificationType.SYSTEM_MAINTENANCE.value: SystemMaintenanceTemplate,
}


def get_template(notification_type: str):
    """Look up a template class by notification type string."""
    template_cls = TEMPLATE_REGISTRY.get(notification_type)
    if template_cls is None:
        raise ValueError(f"No template registered for notification type: {notification_type}")
    return template_cls
