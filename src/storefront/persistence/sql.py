"""SQL-backed key-value store (SQLAlchemy Core).

A single ``kv_store`` table holds one JSON document per key. Works with any
SQLAlchemy URL; SQLite is the default for local runs.
"""

import json
from datetime import UTC, datetime
from typing import Any

import structlog
from sqlalchemy import Column, DateTime, MetaData, String, Table, Text, create_engine, delete, select
from sqlalchemy.exc import SQLAlchemyError

from storefront.errors import PersistenceFailure
from storefront.persistence.port import KeyValueStore

logger = structlog.get_logger(__name__)

metadata = MetaData()

kv_table = Table(
    "kv_store",
    metadata,
    Column("key", String(255), primary_key=True),
    Column("value", Text, nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
)


class SqlKeyValueStore(KeyValueStore):
    """Key-value store persisted in a relational database."""

    def __init__(self, database_uri: str, timeout: float = 5.0, engine=None) -> None:
        self.database_uri = database_uri
        if engine is None:
            connect_args = {"timeout": timeout} if database_uri.startswith("sqlite") else {}
            engine = create_engine(database_uri, connect_args=connect_args)
        self.engine = engine

    # -------------------------------------------------------------------
    # Schema management
    # -------------------------------------------------------------------
    def setup(self) -> None:
        """Create the key-value table if it does not exist."""
        metadata.create_all(self.engine)

    def drop(self) -> None:
        metadata.drop_all(self.engine)

    # -------------------------------------------------------------------
    # KeyValueStore
    # -------------------------------------------------------------------
    def get(self, key: str) -> Any | None:
        try:
            with self.engine.connect() as conn:
                row = conn.execute(select(kv_table.c.value).where(kv_table.c.key == key)).first()
        except SQLAlchemyError as exc:
            logger.error("Key-value read failed", key=key, error=str(exc))
            raise PersistenceFailure(key, str(exc)) from exc
        return None if row is None else json.loads(row.value)

    def set(self, key: str, value: Any) -> None:
        payload = json.dumps(value)
        now = datetime.now(UTC)
        try:
            with self.engine.begin() as conn:
                conn.execute(delete(kv_table).where(kv_table.c.key == key))
                conn.execute(kv_table.insert().values(key=key, value=payload, updated_at=now))
        except SQLAlchemyError as exc:
            logger.error("Key-value write failed", key=key, error=str(exc))
            raise PersistenceFailure(key, str(exc)) from exc

    def remove(self, key: str) -> None:
        try:
            with self.engine.begin() as conn:
                conn.execute(delete(kv_table).where(kv_table.c.key == key))
        except SQLAlchemyError as exc:
            logger.error("Key-value remove failed", key=key, error=str(exc))
            raise PersistenceFailure(key, str(exc)) from exc
