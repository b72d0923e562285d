"""Catalogue engines: filtered product views, cart ledger and wishlist."""

from .cart import CartLedger  # noqa: F401
from .config import CatalogueConfig, load_catalogue_config
from .filters import ALL_CATEGORIES, CatalogueView, FilterState, SortOption, apply_filters
from .models import CartEntry, Product, ProductRating
from .session import Storefront
from .source import ProductFeed, ProductSourceError, fetch_products
from .storage import DurableStore, StoreError, open_store
from .wishlist import Wishlist

__all__ = [
    "ALL_CATEGORIES",
    "CartEntry",
    "CartLedger",
    "CatalogueConfig",
    "CatalogueView",
    "DurableStore",
    "FilterState",
    "Product",
    "ProductFeed",
    "ProductRating",
    "ProductSourceError",
    "SortOption",
    "StoreError",
    "Storefront",
    "Wishlist",
    "apply_filters",
    "fetch_products",
    "load_catalogue_config",
    "open_store",
]
