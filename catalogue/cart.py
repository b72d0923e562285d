"""Cart ledger with write-through persistence."""

from __future__ import annotations

from typing import Any, Iterable

from pydantic import ValidationError

from .logger import get_logger
from .models import CartEntry, Product
from .storage import DurableStore

logger = get_logger(__name__)

CART_STORAGE_KEY = "cart"


def _hydrate_entries(snapshot: Any) -> list[CartEntry]:
    if snapshot is None:
        return []
    if not isinstance(snapshot, list):
        logger.warning("Ignoring malformed cart snapshot of type %s", type(snapshot).__name__)
        return []
    entries: list[CartEntry] = []
    seen: set[int] = set()
    for raw in snapshot:
        try:
            entry = CartEntry.model_validate(raw)
        except ValidationError as exc:
            logger.warning("Dropping invalid cart entry: %s", exc.errors()[0].get("msg"))
            continue
        if entry.product.id in seen:
            continue
        seen.add(entry.product.id)
        entries.append(entry)
    return entries


class CartLedger:
    """Per-product quantities, persisted on every mutation.

    At most one entry exists per product id and no entry is ever kept with a
    quantity below one.
    """

    def __init__(self, store: DurableStore, key: str = CART_STORAGE_KEY):
        self._store = store
        self._key = key
        self._entries: list[CartEntry] = _hydrate_entries(store.get(key))
        logger.debug("Hydrated cart with %d entries", len(self._entries))

    def _persist(self) -> None:
        self._store.set(self._key, [entry.model_dump(mode="json") for entry in self._entries])

    def _find(self, product_id: int) -> CartEntry | None:
        for entry in self._entries:
            if entry.product.id == product_id:
                return entry
        return None

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def add_item(self, product: Product) -> None:
        entry = self._find(product.id)
        if entry is None:
            self._entries.append(CartEntry(product=product, quantity=1))
        else:
            entry.quantity += 1
        self._persist()

    def remove_item(self, product_id: int) -> None:
        self._entries = [e for e in self._entries if e.product.id != product_id]
        self._persist()

    def update_quantity(self, product_id: int, quantity: int) -> None:
        if quantity <= 0:
            self.remove_item(product_id)
            return
        entry = self._find(product_id)
        if entry is not None:
            entry.quantity = int(quantity)
        self._persist()

    def clear_cart(self) -> None:
        self._entries = []
        self._persist()

    def refresh(self, products: Iterable[Product]) -> None:
        """Swap stored product snapshots for their live catalogue records."""

        live = {p.id: p for p in products}
        for entry in self._entries:
            current = live.get(entry.product.id)
            if current is not None:
                entry.product = current
        self._persist()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    @property
    def items(self) -> list[CartEntry]:
        return [entry.model_copy() for entry in self._entries]

    def get_item_quantity(self, product_id: int) -> int:
        entry = self._find(product_id)
        return entry.quantity if entry else 0

    @property
    def total_items(self) -> int:
        return sum(entry.quantity for entry in self._entries)

    @property
    def total_price(self) -> float:
        return sum(entry.product.price * entry.quantity for entry in self._entries)
