"""Wishlist set with write-through persistence."""

from __future__ import annotations

from typing import Any, Iterable

from pydantic import ValidationError

from .logger import get_logger
from .models import Product
from .storage import DurableStore

logger = get_logger(__name__)

WISHLIST_STORAGE_KEY = "wishlist"


def _hydrate_products(snapshot: Any) -> list[Product]:
    if snapshot is None:
        return []
    if not isinstance(snapshot, list):
        logger.warning("Ignoring malformed wishlist snapshot of type %s", type(snapshot).__name__)
        return []
    products: list[Product] = []
    seen: set[int] = set()
    for raw in snapshot:
        try:
            product = Product.model_validate(raw)
        except ValidationError:
            logger.warning("Dropping invalid wishlist entry")
            continue
        if product.id not in seen:
            seen.add(product.id)
            products.append(product)
    return products


class Wishlist:
    """Saved products keyed by id, in the order they were added."""

    def __init__(self, store: DurableStore, key: str = WISHLIST_STORAGE_KEY):
        self._store = store
        self._key = key
        self._items: list[Product] = _hydrate_products(store.get(key))

    def _persist(self) -> None:
        self._store.set(self._key, [product.model_dump(mode="json") for product in self._items])

    def toggle_wishlist_item(self, product: Product) -> bool:
        """Add ``product`` if absent, remove it if present.

        Returns ``True`` when the product ends up in the wishlist.
        """

        if self.is_in_wishlist(product.id):
            self._items = [p for p in self._items if p.id != product.id]
            added = False
        else:
            self._items.append(product)
            added = True
        self._persist()
        return added

    def remove_wishlist_item(self, product_id: int) -> None:
        self._items = [p for p in self._items if p.id != product_id]
        self._persist()

    def clear_wishlist(self) -> None:
        self._items = []
        self._persist()

    def refresh(self, products: Iterable[Product]) -> None:
        live = {p.id: p for p in products}
        self._items = [live.get(p.id, p) for p in self._items]
        self._persist()

    def is_in_wishlist(self, product_id: int) -> bool:
        return any(p.id == product_id for p in self._items)

    @property
    def items(self) -> list[Product]:
        return list(self._items)

    @property
    def total_items(self) -> int:
        return len(self._items)
