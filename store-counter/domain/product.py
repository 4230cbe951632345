"""
Domain: Sellable products.

A Product is owned by the catalog. Sales never hold a reference to it; they
copy name, cost and price at the moment of sale, so later edits or deletes
leave sales history untouched.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Optional

from .money import to_amount

DEFAULT_COLOR = "#3498db"


@dataclass(frozen=True, slots=True)
class Product:
    """
    Catalog entry.

    Invariants:
    - id is opaque and never changes once assigned.
    - name is non-empty.
    - cost and price are non-negative. Price is not required to exceed cost.

    color and image are presentation-only.
    """

    id: str
    name: str
    cost: Decimal
    price: Decimal
    color: str = DEFAULT_COLOR
    image: Optional[str] = None  # data URL

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("id must be a non-empty string")
        if not self.name or not self.name.strip():
            raise ValueError("name must be a non-empty string")
        # Frozen dataclass: normalise through object.__setattr__
        object.__setattr__(self, "name", self.name.strip())
        object.__setattr__(self, "cost", to_amount("cost", self.cost))
        object.__setattr__(self, "price", to_amount("price", self.price))

    @property
    def margin(self) -> Decimal:
        """Profit per unit; negative when sold below cost."""

        return self.price - self.cost

    def edited(
        self,
        *,
        name: str,
        cost: Decimal,
        price: Decimal,
        color: str,
        image: Optional[str] = None,
    ) -> "Product":
        """
        Return a new Product with updated fields and the same id.

        A missing image keeps the current one.
        """

        return replace(
            self,
            name=name,
            cost=cost,
            price=price,
            color=color,
            image=image if image is not None else self.image,
        )
