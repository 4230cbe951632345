"""
Ledger service for recording and undoing sales.

Owns the sale log and the undo stack inside AppState.

Rules:
- record appends exactly one SaleEvent (snapshotting the product) and pushes
  its id onto the undo stack; the stack keeps the 50 most recent ids.
- The log is append-only for record; existing entries are never changed.
- undo pops the newest id and removes the first sale with that id, if any.
  It removes zero or one log entries per call.
- clear_all empties both the log and the undo stack. It cannot be undone.

Tolerated conditions (logged, never raised):
- ProductNotFound: record with an unknown product id is a no-op.
- EmptyUndo: undo with an empty stack is a no-op.
- OrphanedUndoEntry: a popped id with no matching sale; the stack still shrinks.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional
from uuid import uuid4

from domain.errors import EmptyUndo, OrphanedUndoEntry, ProductNotFound
from domain.sale import SaleEvent
from domain.time import utc_now
from repositories.sale_repository import save_sales, save_undo_stack
from repositories.store import PersistentStore
from services.catalog_service import Catalog
from services.state import AppState, persist

logger = logging.getLogger(__name__)


def _new_sale_id() -> str:
    return uuid4().hex


class Ledger:
    def __init__(
        self,
        state: AppState,
        store: PersistentStore,
        catalog: Catalog,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = _new_sale_id,
    ) -> None:
        self._state = state
        self._store = store
        self._catalog = catalog
        self._clock = clock
        self._new_id = id_factory

    @property
    def undo_depth(self) -> int:
        return len(self._state.undo)

    def _save_sales(self) -> bool:
        return persist(self._state, "sales", lambda: save_sales(self._store, self._state.sales))

    def _save_undo(self) -> bool:
        return persist(self._state, "undo", lambda: save_undo_stack(self._store, self._state.undo))

    def record(self, product_id: str) -> Optional[SaleEvent]:
        """
        Record one sale of `product_id` at the current time.

        Returns the new SaleEvent, or None if the product does not resolve.
        """

        product = self._catalog.get(product_id)
        if product is None:
            logger.info(str(ProductNotFound(product_id)), extra={"product_id": product_id})
            return None

        sale = SaleEvent.snapshot(product, sale_id=self._new_id(), timestamp=self._clock())

        self._state.sales.append(sale)
        self._save_sales()

        evicted = self._state.undo.push(sale.id)
        if evicted is not None:
            logger.debug("Undo history full; oldest sale is no longer undoable", extra={"sale_id": evicted})
        self._save_undo()

        logger.info(
            "Sale recorded",
            extra={"sale_id": sale.id, "product_id": product.id, "price": str(sale.price)},
        )
        return sale

    def undo(self) -> Optional[SaleEvent]:
        """
        Undo the most recent undoable sale.

        Returns the removed SaleEvent, or None if the stack was empty or the
        popped id no longer matches a sale.
        """

        sale_id = self._state.undo.pop()
        if sale_id is None:
            logger.debug(str(EmptyUndo("Nothing to undo")))
            return None
        self._save_undo()

        for index, sale in enumerate(self._state.sales):
            if sale.id == sale_id:
                del self._state.sales[index]
                self._save_sales()
                logger.info("Sale undone", extra={"sale_id": sale.id, "product_id": sale.product_id})
                return sale

        logger.debug(str(OrphanedUndoEntry(sale_id)), extra={"sale_id": sale_id})
        return None

    def clear_all(self) -> int:
        """
        Erase every sale and the undo history.

        Destructive and not undoable; callers must confirm with the operator
        first. Returns the number of sales removed.
        """

        removed = len(self._state.sales)
        self._state.sales = []
        self._state.undo.clear()
        self._save_sales()
        self._save_undo()
        logger.info("All sales cleared", extra={"removed": removed})
        return removed


__all__ = ["Ledger"]
