"""
Product repository (persistence).

Converts between Product entities and the persisted `products` document (a
JSON list of objects with keys id, name, cost, price, color, image). It does
not enforce catalog rules; it only loads and saves.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Mapping

from domain.money import to_json_number
from domain.product import DEFAULT_COLOR, Product
from repositories.store import PRODUCTS_KEY, PersistentStore

logger = logging.getLogger(__name__)


def _row_to_product(row: Mapping[str, Any]) -> Product:
    """Convert a persisted row into a Product."""

    return Product(
        id=str(row["id"]),
        name=str(row["name"]),
        cost=row["cost"],
        price=row["price"],
        color=str(row.get("color") or DEFAULT_COLOR),
        image=row.get("image") or None,
    )


def product_to_row(product: Product) -> dict[str, Any]:
    return {
        "id": product.id,
        "name": product.name,
        "cost": to_json_number(product.cost),
        "price": to_json_number(product.price),
        "color": product.color,
        "image": product.image,
    }


def rows_to_products(rows: Iterable[Mapping[str, Any]]) -> List[Product]:
    """
    Convert rows strictly.

    Raises:
        KeyError, TypeError, ValueError: If any row is malformed.
    """

    return [_row_to_product(row) for row in rows]


def load_products(store: PersistentStore) -> List[Product]:
    """
    Load the catalog.

    A missing document yields an empty list. Individual malformed rows are
    skipped with a warning so one bad row cannot hide the rest of the catalog.
    """

    document = store.get(PRODUCTS_KEY)
    if not isinstance(document, list):
        if document is not None:
            logger.warning("Ignoring 'products' document: expected a list")
        return []

    products: List[Product] = []
    for row in document:
        try:
            products.append(_row_to_product(row))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(
                "Skipping malformed product row",
                extra={"error": str(e), "row": str(row)[:100]},
            )
    return products


def save_products(store: PersistentStore, products: Iterable[Product]) -> None:
    """
    Persist the catalog.

    Raises:
        PersistenceUnavailable: If no storage medium accepted the write.
    """

    store.put(PRODUCTS_KEY, [product_to_row(p) for p in products])


__all__ = [
    "product_to_row",
    "rows_to_products",
    "load_products",
    "save_products",
]
