"""Notification sink that renders notices into a per-recipient inbox.

Each recipient's inbox lives in the key-value store under
``notifications:<recipientId>``, newest first, trimmed to a fixed length.
"""

from datetime import UTC, datetime
from uuid import uuid4

import structlog

from storefront.notifications.port import Notice, NotificationSink
from storefront.notifications.templates import get_template
from storefront.persistence.port import KeyValueStore, notifications_key

logger = structlog.get_logger(__name__)


class StoredNotificationSink(NotificationSink):
    def __init__(self, store: KeyValueStore, limit: int = 50) -> None:
        self.store = store
        self.limit = limit

    def emit(self, notice: Notice) -> None:
        template = get_template(notice.notification_type.value)
        content = template.render(notice.context)

        entry = {
            "id": uuid4().hex,
            "recipient_id": notice.recipient_id,
            "type": notice.notification_type.value,
            "title": content["title"],
            "message": content["message"],
            "kind": content["kind"],
            "action_url": notice.link or content.get("action_url"),
            "action_text": content.get("action_text"),
            "metadata": notice.context,
            "read": False,
            "created_at": datetime.now(UTC).isoformat(),
        }

        key = notifications_key(notice.recipient_id)
        inbox = self.store.get(key) or []
        self.store.set(key, [entry, *inbox][: self.limit])

        logger.info(
            "Notification stored",
            recipient_id=notice.recipient_id,
            notification_type=notice.notification_type.value,
        )

    # -------------------------------------------------------------------
    # Inbox queries
    # -------------------------------------------------------------------
    def history(self, recipient_id: str) -> list[dict]:
        return self.store.get(notifications_key(recipient_id)) or []

    def unread_count(self, recipient_id: str) -> int:
        return sum(1 for entry in self.history(recipient_id) if not entry["read"])

    def mark_all_read(self, recipient_id: str) -> None:
        inbox = self.history(recipient_id)
        if inbox:
            self.store.set(notifications_key(recipient_id), [{**entry, "read": True} for entry in inbox])

    def by_type(self, recipient_id: str, notification_type: str) -> list[dict]:
        return [entry for entry in self.history(recipient_id) if entry["type"] == notification_type]

    def mark_as_read(self, recipient_id: str, notification_id: str) -> bool:
        """Mark one entry read. Returns False when the inbox has no such entry."""
        inbox = self.history(recipient_id)
        if not any(entry["id"] == notification_id for entry in inbox):
            return False
        self.store.set(
            notifications_key(recipient_id),
            [{**entry, "read": True} if entry["id"] == notification_id else entry for entry in inbox],
        )
        return True

    def delete(self, recipient_id: str, notification_id: str) -> bool:
        inbox = self.history(recipient_id)
        kept = [entry for entry in inbox if entry["id"] != notification_id]
        if len(kept) == len(inbox):
            return False
        self.store.set(notifications_key(recipient_id), kept)
        return True

    def clear(self, recipient_id: str) -> None:
        self.store.remove(notifications_key(recipient_id))
