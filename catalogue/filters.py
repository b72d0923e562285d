"""Filtering, sorting and pagination over the product collection.

:func:`apply_filters` is a pure function of the product collection and a
:class:`FilterState`. :class:`CatalogueView` owns the state and recomputes
every derived value on read, so replacing the product collection (for example
after a retried fetch) can never leave stale results behind.
"""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable, Sequence

from .logger import get_logger
from .models import Product

logger = get_logger(__name__)

ALL_CATEGORIES = "all"
DEFAULT_PAGE_SIZE = 8


class SortOption(str, Enum):
    DEFAULT = "default"
    PRICE_ASC = "price-asc"
    PRICE_DESC = "price-desc"
    RATING_DESC = "rating-desc"
    NAME_ASC = "name-asc"

    @classmethod
    def coerce(cls, value: "SortOption | str") -> "SortOption":
        try:
            return cls(value)
        except ValueError:
            logger.debug("Unknown sort option %r, using default", value)
            return cls.DEFAULT


SORT_LABELS = {
    SortOption.DEFAULT: "Default",
    SortOption.PRICE_ASC: "Price: Low to High",
    SortOption.PRICE_DESC: "Price: High to Low",
    SortOption.RATING_DESC: "Top Rated",
    SortOption.NAME_ASC: "Name: A–Z",
}


@dataclass(frozen=True)
class FilterState:
    active_category: str = ALL_CATEGORIES
    search_query: str = ""
    sort_option: SortOption = SortOption.DEFAULT
    visible_count: int = DEFAULT_PAGE_SIZE


def collation_key(text: str) -> tuple[str, str]:
    """Accent- and case-insensitive ordering key, ties broken by raw text."""

    decomposed = unicodedata.normalize("NFKD", text)
    folded = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return folded.casefold(), text


def _matches(product: Product, query: str) -> bool:
    return query in product.title.lower() or query in product.description.lower()


def sort_products(products: Iterable[Product], option: SortOption) -> list[Product]:
    # sorted() is stable, also with reverse=True
    if option is SortOption.PRICE_ASC:
        return sorted(products, key=lambda p: p.price)
    if option is SortOption.PRICE_DESC:
        return sorted(products, key=lambda p: p.price, reverse=True)
    if option is SortOption.RATING_DESC:
        return sorted(products, key=lambda p: p.rating.rate, reverse=True)
    if option is SortOption.NAME_ASC:
        return sorted(products, key=lambda p: collation_key(p.title))
    return list(products)


def apply_filters(products: Sequence[Product], state: FilterState) -> list[Product]:
    """Return the category-filtered, searched and sorted products."""

    result: Iterable[Product] = products
    if state.active_category != ALL_CATEGORIES:
        result = [p for p in result if p.category == state.active_category]

    query = state.search_query.strip().lower()
    if query:
        result = [p for p in result if _matches(p, query)]

    return sort_products(result, state.sort_option)


class CatalogueView:
    """Filter criteria plus a pagination cursor over a borrowed collection."""

    def __init__(self, products: Sequence[Product] = (), page_size: int = DEFAULT_PAGE_SIZE):
        if page_size < 1:
            raise ValueError("page_size must be positive")
        self.page_size = page_size
        self.products: Sequence[Product] = tuple(products)
        self.state = FilterState(visible_count=page_size)

    def _update(self, **changes) -> None:
        self.state = replace(self.state, visible_count=self.page_size, **changes)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def set_products(self, products: Sequence[Product]) -> None:
        self.products = tuple(products)

    def set_category(self, category: str) -> None:
        self._update(active_category=category)

    def set_search_query(self, query: str) -> None:
        self._update(search_query=query)

    def set_sort_option(self, option: SortOption | str) -> None:
        self._update(sort_option=SortOption.coerce(option))

    def load_more(self) -> None:
        if not self.has_more:
            return
        self.state = replace(self.state, visible_count=self.state.visible_count + self.page_size)

    def reset_filters(self) -> None:
        self.state = FilterState(visible_count=self.page_size)

    # ------------------------------------------------------------------
    # Derived reads
    # ------------------------------------------------------------------
    @property
    def active_category(self) -> str:
        return self.state.active_category

    @property
    def search_query(self) -> str:
        return self.state.search_query

    @property
    def sort_option(self) -> SortOption:
        return self.state.sort_option

    @property
    def filtered_products(self) -> list[Product]:
        return apply_filters(self.products, self.state)

    @property
    def visible_products(self) -> list[Product]:
        return self.filtered_products[: self.state.visible_count]

    @property
    def has_more(self) -> bool:
        return self.state.visible_count < len(self.filtered_products)

    @property
    def categories(self) -> list[str]:
        return sorted({p.category for p in self.products})

    @property
    def total_count(self) -> int:
        return len(self.filtered_products)

    @property
    def visible_count(self) -> int:
        return len(self.visible_products)
