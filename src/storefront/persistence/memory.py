"""In-process key-value store for development and testing.

Values are held as JSON text, so every ``get`` hands back a fresh copy and
nothing outside the store can alias persisted state. The store can be told
to fail on demand to exercise rollback paths.
"""

import json
from typing import Any

from storefront.errors import PersistenceFailure
from storefront.persistence.port import KeyValueStore


class InMemoryKeyValueStore(KeyValueStore):
    """Configurable in-memory key-value store."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}
        self.should_fail: bool = False
        self.fail_on: set[str] | None = None
        self.failure_reason: str = "Storage unavailable"
        self.calls: list[dict] = []

    def configure(
        self,
        should_fail: bool,
        fail_on: set[str] | None = None,
        failure_reason: str = "Storage unavailable",
    ) -> None:
        """Make writes fail, either for every key or only for the keys in ``fail_on``."""
        self.should_fail = should_fail
        self.fail_on = set(fail_on) if fail_on else None
        self.failure_reason = failure_reason

    def _check(self, key: str) -> None:
        if not self.should_fail:
            return
        if self.fail_on is None or key in self.fail_on:
            raise PersistenceFailure(key, self.failure_reason)

    def get(self, key: str) -> Any | None:
        self.calls.append({"method": "get", "key": key})
        raw = self._data.get(key)
        return None if raw is None else json.loads(raw)

    def set(self, key: str, value: Any) -> None:
        self.calls.append({"method": "set", "key": key})
        self._check(key)
        self._data[key] = json.dumps(value)

    def remove(self, key: str) -> None:
        self.calls.append({"method": "remove", "key": key})
        self._check(key)
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._data)

    def reset(self) -> None:
        """Clear stored data, recorded calls and failure configuration."""
        self._data.clear()
        self.calls.clear()
        self.should_fail = False
        self.fail_on = None
        self.failure_reason = "Storage unavailable"
