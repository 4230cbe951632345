"""
Catalog service.

Keyed collection of sellable products over AppState.products. Every change
is persisted immediately. The ledger only uses `get` to resolve a product id
at sale time.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Callable, List, Optional
from uuid import uuid4

from domain.product import DEFAULT_COLOR, Product
from repositories.product_repository import save_products
from repositories.store import PersistentStore
from services.state import AppState, persist

logger = logging.getLogger(__name__)

DEFAULT_PRODUCTS: tuple[Product, ...] = (
    Product(id="1", name="Coffee", cost=Decimal("1.50"), price=Decimal("4.00"), color="#8B4513"),
    Product(id="2", name="Tea", cost=Decimal("0.80"), price=Decimal("3.00"), color="#228B22"),
    Product(id="3", name="Sandwich", cost=Decimal("3.00"), price=Decimal("7.50"), color="#DAA520"),
    Product(id="4", name="Cake", cost=Decimal("2.50"), price=Decimal("5.50"), color="#FF69B4"),
    Product(id="5", name="Juice", cost=Decimal("1.00"), price=Decimal("3.50"), color="#FF6347"),
    Product(id="6", name="Cookie", cost=Decimal("0.50"), price=Decimal("2.00"), color="#D2691E"),
)


def _new_id() -> str:
    return uuid4().hex


class Catalog:
    def __init__(
        self,
        state: AppState,
        store: PersistentStore,
        id_factory: Callable[[], str] = _new_id,
    ) -> None:
        self._state = state
        self._store = store
        self._new_id = id_factory

    def _save(self) -> bool:
        return persist(self._state, "products", lambda: save_products(self._store, self._state.products))

    def list_products(self) -> List[Product]:
        return list(self._state.products)

    def get(self, product_id: str) -> Optional[Product]:
        for product in self._state.products:
            if product.id == product_id:
                return product
        return None

    def seed_defaults(self) -> bool:
        """Install the default products if the catalog is empty. Returns True if seeded."""

        if self._state.products:
            return False
        self._state.products = list(DEFAULT_PRODUCTS)
        self._save()
        logger.info("Seeded catalog with default products", extra={"count": len(DEFAULT_PRODUCTS)})
        return True

    def add(
        self,
        name: str,
        cost: Decimal,
        price: Decimal,
        color: str = DEFAULT_COLOR,
        image: Optional[str] = None,
    ) -> Product:
        """
        Add a product under a fresh id.

        Raises:
            ValueError: If name is blank or cost/price is negative.
        """

        product = Product(id=self._new_id(), name=name, cost=cost, price=price, color=color, image=image)
        self._state.products.append(product)
        self._save()
        logger.info("Product added", extra={"product_id": product.id, "product_name": product.name})
        return product

    def update(
        self,
        product_id: str,
        name: str,
        cost: Decimal,
        price: Decimal,
        color: str = DEFAULT_COLOR,
        image: Optional[str] = None,
    ) -> Optional[Product]:
        """
        Edit a product in place (same id, same position).

        A None image keeps the current image. Recorded sales are unaffected.
        Returns None if the product does not exist.

        Raises:
            ValueError: If name is blank or cost/price is negative.
        """

        for index, product in enumerate(self._state.products):
            if product.id == product_id:
                updated = product.edited(name=name, cost=cost, price=price, color=color, image=image)
                self._state.products[index] = updated
                self._save()
                logger.info("Product updated", extra={"product_id": product_id})
                return updated
        return None

    def delete(self, product_id: str) -> bool:
        """Remove a product. Returns False if it did not exist."""

        remaining = [p for p in self._state.products if p.id != product_id]
        if len(remaining) == len(self._state.products):
            return False
        self._state.products = remaining
        self._save()
        logger.info("Product deleted", extra={"product_id": product_id})
        return True


__all__ = ["Catalog", "DEFAULT_PRODUCTS"]
