"""Customer-facing order lifecycle templates."""

from storefront.notifications.port import NotificationType


def _order_link(context: dict) -> str:
    return f"/order-confirmation/{context.get('order_id', '')}"


class OrderPlacedTemplate:
    notification_type = NotificationType.ORDER_PLACED.value
    kind = "order"

    @staticmethod
    def render(context: dict) -> dict:
        order_number = context.get("order_number", "N/A")
        return {
            "title": "Order Placed Successfully",
            "message": f"Your order #{order_number} has been placed and is being processed.",
            "kind": OrderPlacedTemplate.kind,
            "action_url": _order_link(context),
            "action_text": "View Order",
        }


class OrderConfirmedTemplate:
    notification_type = NotificationType.ORDER_CONFIRMED.value
    kind = "success"

    @staticmethod
    def render(context: dict) -> dict:
        order_number = context.get("order_number", "N/A")
        return {
            "title": "Order Confirmed",
            "message": f"Your order #{order_number} has been confirmed and will be processed soon.",
            "kind": OrderConfirmedTemplate.kind,
            "action_url": _order_link(context),
            "action_text": "Track Order",
        }


class OrderShippedTemplate:
    notification_type = NotificationType.ORDER_SHIPPED.value
    kind = "info"

    @staticmethod
    def render(context: dict) -> dict:
        order_number = context.get("order_number", "N/A")
        return {
            "title": "Order Shipped",
            "message": f"Your order #{order_number} has been shipped and is on its way to you.",
            "kind": OrderShippedTemplate.kind,
            "action_url": _order_link(context),
            "action_text": "Track Shipment",
        }


class OrderDeliveredTemplate:
    notification_type = NotificationType.ORDER_DELIVERED.value
    kind = "success"

    @staticmethod
    def render(context: dict) -> dict:
        order_number = context.get("order_number", "N/A")
        return {
            "title": "Order Delivered",
            "message": f"Your order #{order_number} has been delivered successfully.",
            "kind": OrderDeliveredTemplate.kind,
            "action_url": _order_link(context),
            "action_text": "Rate Products",
        }


class OrderCancelledTemplate:
    notification_type = NotificationType.ORDER_CANCELLED.value
    kind = "warning"

    @staticmethod
    def render(context: dict) -> dict:
        order_number = context.get("order_number", "N/A")
        reason = context.get("reason")
        message = f"Your order #{order_number} has been cancelled."
        if reason:
            message += f" Reason: {reason}"
        return {
            "title": "Order Cancelled",
            "message": message,
            "kind": OrderCancelledTemplate.kind,
            "action_url": _order_link(context),
            "action_text": "View Order",
        }
