"""Storefront bounded context: Shopping Cart and Orders.

Handles the shopper's cart (selection, totals, persisted snapshots), the
checkout that turns a selection into a price-frozen order, and the order
delivery lifecycle.
"""

import structlog
from protean.domain import Domain

storefront = Domain(name="storefront")

logger = structlog.get_logger(__name__)


def drain_events(aggregate) -> list:
    """Take the events an aggregate has raised, leaving it with none."""
    events = list(aggregate._events)
    aggregate._events.clear()
    return events
