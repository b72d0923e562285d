"""Wire the engines together for one shopper session."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import partial
from typing import Any, Callable, Optional, Sequence

from .cart import CartLedger
from .config import CatalogueConfig
from .filters import CatalogueView
from .format import format_price, is_top_rated
from .models import Product
from .source import ProductFeed, fetch_products
from .storage import DurableStore, open_store
from .wishlist import Wishlist


@dataclass(slots=True)
class Storefront:
    """Cart, wishlist, product feed and catalogue view over a shared store.

    The view only ever sees the product collection; cart quantities and
    wishlist membership reach the presentation layer through the lookup
    methods on the ledger and the wishlist.
    """

    config: CatalogueConfig
    store: Optional[DurableStore] = None
    fetcher: Optional[Callable[[], Sequence[Product]]] = None
    cart: CartLedger = field(init=False)
    wishlist: Wishlist = field(init=False)
    feed: ProductFeed = field(init=False)
    view: CatalogueView = field(init=False)

    def __post_init__(self) -> None:
        if self.store is None:
            self.store = open_store(
                self.config.storage_path,
                self.config.namespace,
                secret=self.config.storage_secret,
                backups=self.config.storage_backups,
            )
        if self.fetcher is None:
            self.fetcher = partial(
                fetch_products,
                self.config.products_url,
                timeout=self.config.request_timeout,
            )
        self.cart = CartLedger(self.store)
        self.wishlist = Wishlist(self.store)
        self.feed = ProductFeed(self.fetcher)
        self.view = CatalogueView(page_size=self.config.page_size)

    def _sync(self, loaded: bool) -> bool:
        if loaded:
            self.view.set_products(self.feed.products)
            self.cart.refresh(self.feed.products)
            self.wishlist.refresh(self.feed.products)
        return loaded

    def load(self) -> bool:
        return self._sync(self.feed.load())

    def retry(self) -> bool:
        return self._sync(self.feed.retry())

    def ensure_loaded(self) -> None:
        if not self.feed.loaded and self.feed.error is None:
            self.load()

    def product_card(self, product: Product) -> dict[str, Any]:
        """Everything a product card needs besides the product itself."""

        return {
            "product": product.model_dump(mode="json"),
            "price_label": format_price(product.price, self.config.currency_symbol),
            "quantity": self.cart.get_item_quantity(product.id),
            "in_wishlist": self.wishlist.is_in_wishlist(product.id),
            "top_rated": is_top_rated(product, self.config.top_rated_threshold),
        }
