"""
Backup service for exporting and importing store data.

Export shape: {"products": [...], "sales": [...], "exportDate": ISO-8601}.

Import rules:
- The payload is fully parsed and validated before anything changes. Any
  failure raises MalformedImport and leaves state untouched.
- A present `products` key replaces the catalog; a present `sales` key
  replaces the sale log. A missing (or null) key leaves that collection as is.
- The undo stack is always reset to empty on a successful import.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, ValidationError

from domain.errors import MalformedImport
from domain.product import Product
from domain.sale import SaleEvent
from domain.time import require_aware_timestamp
from repositories.product_repository import product_to_row, rows_to_products, save_products
from repositories.sale_repository import rows_to_sales, sale_to_row, save_sales, save_undo_stack
from repositories.store import PersistentStore
from services.state import AppState, persist

logger = logging.getLogger(__name__)


class BackupDocument(BaseModel):
    """Top-level shape of a backup file. Row contents are checked by the repositories."""

    model_config = ConfigDict(extra="ignore")

    products: Optional[List[dict[str, Any]]] = None
    sales: Optional[List[dict[str, Any]]] = None
    exportDate: Optional[str] = None


@dataclass(frozen=True, slots=True)
class ImportResult:
    """
    Outcome of a successful import.

    products_replaced / sales_replaced: whether the payload carried that key
    product_count / sale_count: collection sizes after the import
    """
    products_replaced: bool
    sales_replaced: bool
    product_count: int
    sale_count: int


def backup_filename(now: datetime) -> str:
    """Download name for an export taken at `now`."""

    require_aware_timestamp("now", now)
    return f"store-counter-backup-{now.astimezone(timezone.utc).date().isoformat()}.json"


def export_data(state: AppState, now: datetime) -> dict[str, Any]:
    """Snapshot the catalog and sale log as a JSON-serializable dict."""

    require_aware_timestamp("now", now)
    return {
        "products": [product_to_row(p) for p in state.products],
        "sales": [sale_to_row(s) for s in state.sales],
        "exportDate": now.astimezone(timezone.utc).isoformat(),
    }


def _parse_payload(payload: Union[str, bytes, Mapping[str, Any]]) -> BackupDocument:
    if isinstance(payload, (str, bytes, bytearray)):
        try:
            payload = json.loads(payload)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise MalformedImport(f"Invalid file format: {e}") from e

    if not isinstance(payload, Mapping):
        raise MalformedImport("Invalid file format: expected a JSON object")

    try:
        return BackupDocument.model_validate(dict(payload))
    except ValidationError as e:
        raise MalformedImport(f"Invalid file format: {e.error_count()} validation error(s)") from e


def import_data(
    state: AppState,
    store: PersistentStore,
    payload: Union[str, bytes, Mapping[str, Any]],
) -> ImportResult:
    """
    Replace catalog and/or sales from a backup payload.

    Args:
        state: Application state to update
        store: Store to persist the replaced documents to
        payload: JSON text, bytes, or an already-parsed mapping

    Returns:
        ImportResult describing what was replaced

    Raises:
        MalformedImport: If the payload does not parse or has the wrong shape.
            No state is changed in that case.
    """
    document = _parse_payload(payload)

    products: Optional[List[Product]] = None
    sales: Optional[List[SaleEvent]] = None
    try:
        if document.products is not None:
            products = rows_to_products(document.products)
        if document.sales is not None:
            sales = rows_to_sales(document.sales)
    except (KeyError, TypeError, ValueError) as e:
        raise MalformedImport(f"Invalid file format: {e}") from e

    # Everything validated; mutate.
    if products is not None:
        state.products = products
        persist(state, "products", lambda: save_products(store, state.products))
    if sales is not None:
        state.sales = sales
        persist(state, "sales", lambda: save_sales(store, state.sales))
    state.undo.clear()
    persist(state, "undo", lambda: save_undo_stack(store, state.undo))

    result = ImportResult(
        products_replaced=products is not None,
        sales_replaced=sales is not None,
        product_count=len(state.products),
        sale_count=len(state.sales),
    )
    logger.info(
        "Data imported",
        extra={
            "products_replaced": result.products_replaced,
            "sales_replaced": result.sales_replaced,
            "product_count": result.product_count,
            "sale_count": result.sale_count,
        },
    )
    return result


__all__ = [
    "BackupDocument",
    "ImportResult",
    "backup_filename",
    "export_data",
    "import_data",
]
