"""Storewide announcement templates (catalog news, offers, maintenance)."""

from storefront.notifications.port import NotificationType


class NewBookAddedTemplate:
    notification_type = NotificationType.NEW_BOOK_ADDED.value
    kind = "info"

    @staticmethod
    def render(context: dict) -> dict:
        title = context.get("title", "A new book")
        return {
            "title": "New Book Added",
            "message": f'"{title}" has been added to our collection.',
            "kind": NewBookAddedTemplate.kind,
            "action_url": "/books",
            "action_text": "Browse Books",
        }


class PromotionalOfferTemplate:
    notification_type = NotificationType.PROMOTIONAL_OFFER.value
    kind = "success"

    @staticmethod
    def render(context: dict) -> dict:
        discount = context.get("discount", 0)
        return {
            "title": "Special Offer!",
            "message": f"Get {discount}% off on all books this weekend. Limited time offer!",
            "kind": PromotionalOfferTemplate.kind,
            "action_url": "/books",
            "action_text": "Shop Now",
        }


class SystemMaintenanceTemplate:
    notification_type = NotificationType.SYSTEM_MAINTENANCE.value
    kind = "system"

    @staticmethod
    def render(context: dict) -> dict:
        window = context.get("window", "tonight from 2:00 AM to 4:00 AM")
        return {
            "title": "System Maintenance",
            "message": f"The system will undergo maintenance {window}.",
            "kind": SystemMaintenanceTemplate.kind,
            "action_url": None,
            "action_text": None,
        }
