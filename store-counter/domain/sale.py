"""
Domain: Sale events.

Rules:
- A SaleEvent is immutable once created.
- product_name, cost and price are snapshots of the Product at sale time.
  Editing or deleting the Product afterwards never changes a recorded sale.
- quantity is a positive integer (always 1 when recorded from the counter).
- timestamp is a UTC instant.

This module captures sale events only. Recording, undo and aggregation live
in the services layer.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from .money import to_amount
from .product import Product
from .time import require_utc_timestamp


@dataclass(frozen=True, slots=True)
class SaleEvent:
    """
    Immutable record of one sale.

    All timestamps must be passed explicitly.
    """

    id: str
    product_id: str
    product_name: str
    cost: Decimal
    price: Decimal
    quantity: int
    timestamp: datetime

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("id must be a non-empty string")
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int):
            raise ValueError("quantity must be an integer")
        if self.quantity < 1:
            raise ValueError("quantity must be >= 1")
        require_utc_timestamp("timestamp", self.timestamp)
        object.__setattr__(self, "cost", to_amount("cost", self.cost))
        object.__setattr__(self, "price", to_amount("price", self.price))

    @staticmethod
    def snapshot(product: Product, *, sale_id: str, timestamp: datetime, quantity: int = 1) -> "SaleEvent":
        """Create a sale that freezes the product's current name, cost and price."""

        return SaleEvent(
            id=sale_id,
            product_id=product.id,
            product_name=product.name,
            cost=product.cost,
            price=product.price,
            quantity=quantity,
            timestamp=timestamp,
        )

    @property
    def revenue(self) -> Decimal:
        return self.price * self.quantity

    @property
    def total_cost(self) -> Decimal:
        return self.cost * self.quantity
