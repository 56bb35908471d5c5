"""Key-value store factory.

Provides get_store() / set_store() to swap implementations:
- InMemoryKeyValueStore for development and testing
- SqlKeyValueStore when STOREFRONT_STORE=sql
"""

from storefront.config import load_settings
from storefront.persistence.port import KeyValueStore

_current_store: KeyValueStore | None = None


def get_store() -> KeyValueStore:
    """Return the configured key-value store (singleton). Defaults to in-memory."""
    global _current_store
    if _current_store is None:
        settings = load_settings()
        if settings.store_adapter == "memory":
            from storefront.persistence.memory import InMemoryKeyValueStore

            _current_store = InMemoryKeyValueStore()
        elif settings.store_adapter == "sql":
            from storefront.persistence.sql import SqlKeyValueStore

            _current_store = SqlKeyValueStore(settings.database_uri, timeout=settings.db_timeout)
        else:
            raise ValueError(f"Unknown store adapter: {settings.store_adapter}")
    return _current_store


def set_store(store: KeyValueStore) -> None:
    """Override the active store (useful for tests)."""
    global _current_store
    _current_store = store


def reset_store() -> None:
    """Reset to the default store."""
    global _current_store
    _current_store = None
