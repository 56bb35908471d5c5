"""Notification sink factory.

Provides get_sink() / set_sink() to swap the sink notices are emitted to.
Defaults to a StoredNotificationSink over the active key-value store.
"""

from storefront.config import load_settings
from storefront.notifications.port import NotificationSink

_current_sink: NotificationSink | None = None


def get_sink() -> NotificationSink:
    global _current_sink
    if _current_sink is None:
        from storefront.notifications.stored_sink import StoredNotificationSink
        from storefront.persistence import get_store

        _current_sink = StoredNotificationSink(get_store(), limit=load_settings().notification_limit)
    return _current_sink


def set_sink(sink: NotificationSink) -> None:
    """Override the active sink (useful for tests)."""
    global _current_sink
    _current_sink = sink


def reset_sink() -> None:
    global _current_sink
    _current_sink = None
