"""
Application state.

One explicit AppState holds the catalog, the sale log and the undo stack for
the session. The controller (StoreCounter) builds it at startup and hands the
same instance to the catalog, the ledger and the backup functions.

In-memory state is authoritative for the session. Persistence is best
effort: when no storage medium accepts a write the in-memory change still
stands and the state is flagged as degraded.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List

from domain.errors import PersistenceUnavailable
from domain.product import Product
from domain.sale import SaleEvent
from domain.undo import UndoStack

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class AppState:
    products: List[Product] = field(default_factory=list)
    sales: List[SaleEvent] = field(default_factory=list)
    undo: UndoStack = field(default_factory=UndoStack)
    persistence_degraded: bool = False


def persist(state: AppState, document: str, write: Callable[[], None]) -> bool:
    """
    Run a repository write, tolerating total storage failure.

    Returns True if the write reached at least one medium. On
    PersistenceUnavailable the state is marked degraded and False is returned;
    data written this session may be lost on restart. A later successful
    write does not clear the flag, since the lost document may still be stale;
    only a complete `StoreCounter.flush` does.
    """

    try:
        write()
    except PersistenceUnavailable as e:
        state.persistence_degraded = True
        logger.warning(
            f"Could not persist '{document}'; continuing in memory",
            extra={"document": document, "errors": e.errors},
        )
        return False

    return True


__all__ = ["AppState", "persist"]
