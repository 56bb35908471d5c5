"""Templates addressed to the staff audience."""

from storefront.notifications.port import NotificationType


class NewOrderForStaffTemplate:
    notification_type = NotificationType.NEW_ORDER_FOR_STAFF.value
    kind = "order"

    @staticmethod
    def render(context: dict) -> dict:
        order_number = context.get("order_number", "N/A")
        customer_name = context.get("customer_name") or "a customer"
        return {
            "title": "New Order Received",
            "message": f"New order #{order_number} from {customer_name} requires your attention.",
            "kind": NewOrderForStaffTemplate.kind,
            "action_url": "/admin/orders",
            "action_text": "View Order",
        }


class LowStockTemplate:
    notification_type = NotificationType.LOW_STOCK.value
    kind = "warning"

    @staticmethod
    def render(context: dict) -> dict:
        title = context.get("title", "A book")
        remaining = context.get("remaining", 0)
        return {
            "title": "Low Stock Alert",
            "message": f'"{title}" is running low on stock ({remaining} remaining).',
            "kind": LowStockTemplate.kind,
            "action_url": "/admin/books",
            "action_text": "Manage Inventory",
        }
