"""
Sale repository (persistence).

This module provides *only* persistence operations for the sale log and the
undo stack. It does not enforce ledger rules (snapshotting, stack bounds are
applied by the domain and services layers); it only loads and saves.

Persisted shapes:
- `sales`: list of {id, productId, productName, cost, price, quantity, timestamp}
  in append order, timestamp as ISO-8601.
- `undo`: list of sale ids in push order.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Iterable, List, Mapping

from domain.money import to_json_number
from domain.sale import SaleEvent
from domain.time import parse_utc_datetime, require_utc_timestamp
from domain.undo import UndoStack
from repositories.store import SALES_KEY, UNDO_KEY, PersistentStore

logger = logging.getLogger(__name__)


def _to_iso_utc(dt: datetime, *, name: str) -> str:
    """Serialize a UTC datetime to ISO-8601 (timezone-aware, offset 0)."""

    require_utc_timestamp(name, dt)
    return dt.astimezone(timezone.utc).isoformat()


def _row_to_sale(row: Mapping[str, Any]) -> SaleEvent:
    """Convert a persisted row into a SaleEvent."""

    return SaleEvent(
        id=str(row["id"]),
        product_id=str(row["productId"]),
        product_name=str(row["productName"]),
        cost=row["cost"],
        price=row["price"],
        quantity=int(row.get("quantity", 1)),
        timestamp=parse_utc_datetime(row["timestamp"]),
    )


def sale_to_row(sale: SaleEvent) -> dict[str, Any]:
    return {
        "id": sale.id,
        "productId": sale.product_id,
        "productName": sale.product_name,
        "cost": to_json_number(sale.cost),
        "price": to_json_number(sale.price),
        "quantity": sale.quantity,
        "timestamp": _to_iso_utc(sale.timestamp, name="timestamp"),
    }


def rows_to_sales(rows: Iterable[Mapping[str, Any]]) -> List[SaleEvent]:
    """
    Convert rows strictly.

    Raises:
        KeyError, TypeError, ValueError: If any row is malformed.
    """

    return [_row_to_sale(row) for row in rows]


def load_sales(store: PersistentStore) -> List[SaleEvent]:
    """
    Load the sale log in append order.

    A missing document yields an empty log; malformed rows are skipped with a
    warning.
    """

    document = store.get(SALES_KEY)
    if not isinstance(document, list):
        if document is not None:
            logger.warning("Ignoring 'sales' document: expected a list")
        return []

    sales: List[SaleEvent] = []
    for row in document:
        try:
            sales.append(_row_to_sale(row))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(
                "Skipping malformed sale row",
                extra={"error": str(e), "row": str(row)[:100]},
            )
    return sales


def save_sales(store: PersistentStore, sales: Iterable[SaleEvent]) -> None:
    """
    Persist the sale log.

    Raises:
        PersistenceUnavailable: If no storage medium accepted the write.
    """

    store.put(SALES_KEY, [sale_to_row(s) for s in sales])


def load_undo_stack(store: PersistentStore) -> UndoStack:
    """Load the undo stack; anything that is not a list of ids loads as empty."""

    document = store.get(UNDO_KEY)
    if not isinstance(document, list):
        if document is not None:
            logger.warning("Ignoring 'undo' document: expected a list")
        return UndoStack()
    return UndoStack(str(sale_id) for sale_id in document if isinstance(sale_id, (str, int)))


def save_undo_stack(store: PersistentStore, stack: UndoStack) -> None:
    """
    Persist the undo stack (oldest id first).

    Raises:
        PersistenceUnavailable: If no storage medium accepted the write.
    """

    store.put(UNDO_KEY, stack.to_list())


__all__ = [
    "sale_to_row",
    "rows_to_sales",
    "load_sales",
    "save_sales",
    "load_undo_stack",
    "save_undo_stack",
]
