"""
Store counter controller.

The single owner of the session's AppState. `StoreCounter.open` builds the
state from the persistent store at startup, and `flush` writes everything
back at shutdown. Presentation layers (the HTTP API, the scripts) call
methods on this object instead of touching module globals.

The API serves requests from a thread pool, so every public operation runs
under one lock: each one completes, persistence included, before the next
starts.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, tzinfo
from typing import Any, Callable, List, Mapping, Optional, Tuple, Union

from domain.period import Period
from domain.product import Product
from domain.sale import SaleEvent
from domain.time import utc_now
from repositories.product_repository import load_products, save_products
from repositories.sale_repository import load_sales, load_undo_stack, save_sales, save_undo_stack
from repositories.store import PersistentStore
from services.backup_service import ImportResult, export_data, import_data
from services.catalog_service import Catalog
from services.ledger_service import Ledger
from services.state import AppState, persist
from services.stats_service import Summary, summarize

logger = logging.getLogger(__name__)


class StoreCounter:
    def __init__(
        self,
        state: AppState,
        store: PersistentStore,
        tz: Optional[tzinfo] = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.state = state
        self.store = store
        self.tz = tz
        self._clock = clock
        self._lock = threading.Lock()
        self.catalog = Catalog(state, store)
        self.ledger = Ledger(state, store, self.catalog, clock=clock)

    @classmethod
    def open(
        cls,
        store: PersistentStore,
        tz: Optional[tzinfo] = None,
        clock: Callable[[], datetime] = utc_now,
        seed_defaults: bool = True,
    ) -> "StoreCounter":
        """
        Load products, sales and the undo stack from `store`.

        Absent documents load as empty collections. An empty catalog is seeded
        with the default products unless `seed_defaults` is False.
        """

        state = AppState(
            products=load_products(store),
            sales=load_sales(store),
            undo=load_undo_stack(store),
        )
        counter = cls(state, store, tz=tz, clock=clock)
        if seed_defaults:
            counter.catalog.seed_defaults()

        logger.info(
            "Store counter opened",
            extra={
                "product_count": len(state.products),
                "sale_count": len(state.sales),
                "undo_depth": len(state.undo),
            },
        )
        return counter

    def now(self) -> datetime:
        return self._clock()

    @property
    def undo_depth(self) -> int:
        with self._lock:
            return self.ledger.undo_depth

    # Sales

    def record_sale(self, product_id: str) -> Tuple[Optional[SaleEvent], int]:
        """Record one sale; returns the sale (None if the product is unknown) and the undo depth."""

        with self._lock:
            return self.ledger.record(product_id), self.ledger.undo_depth

    def undo_last_sale(self) -> Tuple[Optional[SaleEvent], int]:
        with self._lock:
            return self.ledger.undo(), self.ledger.undo_depth

    def clear_sales(self) -> int:
        with self._lock:
            return self.ledger.clear_all()

    # Catalog

    def list_products(self) -> List[Product]:
        with self._lock:
            return self.catalog.list_products()

    def add_product(self, **fields: Any) -> Product:
        with self._lock:
            return self.catalog.add(**fields)

    def update_product(self, product_id: str, **fields: Any) -> Optional[Product]:
        with self._lock:
            return self.catalog.update(product_id, **fields)

    def delete_product(self, product_id: str) -> bool:
        with self._lock:
            return self.catalog.delete(product_id)

    # Reports and backups

    def summary(self, period: Period, now: Optional[datetime] = None) -> Summary:
        with self._lock:
            return summarize(self.state.sales, period, now or self._clock(), self.tz)

    def export(self, now: Optional[datetime] = None) -> dict[str, Any]:
        with self._lock:
            return export_data(self.state, now or self._clock())

    def import_backup(self, payload: Union[str, bytes, Mapping[str, Any]]) -> ImportResult:
        with self._lock:
            return import_data(self.state, self.store, payload)

    def flush(self) -> bool:
        """
        Write all three documents. Returns False if any write was lost.

        A complete flush clears the degraded flag; a partial one keeps it set.
        """

        with self._lock:
            results = [
                persist(self.state, "products", lambda: save_products(self.store, self.state.products)),
                persist(self.state, "sales", lambda: save_sales(self.store, self.state.sales)),
                persist(self.state, "undo", lambda: save_undo_stack(self.store, self.state.undo)),
            ]
            ok = all(results)
            self.state.persistence_degraded = not ok
            return ok


__all__ = ["StoreCounter"]
