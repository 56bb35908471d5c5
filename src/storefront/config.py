"""Runtime settings for the storefront, read from environment variables.

Every value has a development default so the engines can be constructed
without any environment at all (tests, local shells).
"""

import os
from dataclasses import dataclass, field


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc


def _env_set(name: str, default: frozenset[str]) -> frozenset[str]:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    return frozenset(part.strip().lower() for part in raw.split(",") if part.strip())


@dataclass(frozen=True)
class Settings:
    environment: str = "development"
    store_adapter: str = "memory"
    database_uri: str = "sqlite:///bookstore.db"
    db_timeout: float = 5.0
    low_stock_threshold: int = 5
    staff_roles: frozenset[str] = field(default_factory=lambda: frozenset({"admin", "staff"}))
    notification_limit: int = 50
    order_number_prefix: str = "ORD-"


def load_settings() -> Settings:
    """Build a Settings instance from the current environment."""
    defaults = Settings()
    return Settings(
        environment=(os.environ.get("PROTEAN_ENV") or defaults.environment).lower(),
        store_adapter=os.environ.get("STOREFRONT_STORE", defaults.store_adapter).lower(),
        database_uri=os.environ.get("STOREFRONT_DATABASE_URI", defaults.database_uri),
        db_timeout=_env_float("STOREFRONT_DB_TIMEOUT", defaults.db_timeout),
        low_stock_threshold=_env_int("STOREFRONT_LOW_STOCK_THRESHOLD", defaults.low_stock_threshold),
        staff_roles=_env_set("STOREFRONT_STAFF_ROLES", defaults.staff_roles),
        notification_limit=_env_int("STOREFRONT_NOTIFICATION_LIMIT", defaults.notification_limit),
        order_number_prefix=os.environ.get("STOREFRONT_ORDER_PREFIX", defaults.order_number_prefix),
    )
