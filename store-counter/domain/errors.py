"""
Domain: Error taxonomy.

None of these are fatal. The ledger tolerates the first three locally (the
operation becomes a no-op); PersistenceUnavailable puts the session into a
degraded mode where in-memory state stays authoritative; MalformedImport is
reported to the caller with no state changed.
"""

from __future__ import annotations


class StoreCounterError(Exception):
    """Base class for store counter errors."""


class ProductNotFound(StoreCounterError):
    """A sale was requested for a product id the catalog does not know."""

    def __init__(self, product_id: str) -> None:
        super().__init__(f"Product not found: {product_id}")
        self.product_id = product_id


class EmptyUndo(StoreCounterError):
    """Undo was requested with nothing on the undo stack."""


class OrphanedUndoEntry(StoreCounterError):
    """A popped undo id had no matching sale in the log."""

    def __init__(self, sale_id: str) -> None:
        super().__init__(f"Undo entry has no matching sale: {sale_id}")
        self.sale_id = sale_id


class PersistenceUnavailable(StoreCounterError):
    """Neither the primary nor the secondary storage medium accepted a write."""

    def __init__(self, key: str, errors: list[str]) -> None:
        super().__init__(f"Failed to persist {key!r}: {'; '.join(errors)}")
        self.key = key
        self.errors = errors


class MalformedImport(StoreCounterError):
    """An import payload failed to parse or has the wrong shape."""
