"""Product source: fetch the catalogue once and expose the outcome."""

from __future__ import annotations

from typing import Callable, List, Optional, Sequence

import requests
from pydantic import TypeAdapter

from .logger import get_logger
from .models import Product

logger = get_logger(__name__)

DEFAULT_PRODUCTS_URL = "https://equalexperts.github.io/frontend-take-home-test-data/products.json"
FALLBACK_ERROR = "An unexpected error occurred"

_PRODUCT_LIST = TypeAdapter(List[Product])


class ProductSourceError(RuntimeError):
    """Raised when the product endpoint answers with a failure status."""


def fetch_products(
    url: str = DEFAULT_PRODUCTS_URL,
    timeout: float = 10,
    session: Optional[requests.Session] = None,
) -> list[Product]:
    http = session or requests
    response = http.get(url, timeout=timeout)
    if not response.ok:
        raise ProductSourceError(
            f"Failed to fetch products: {response.status_code} {response.reason}"
        )
    return _PRODUCT_LIST.validate_python(response.json())


def describe_failure(exc: BaseException) -> str:
    message = str(exc).strip()
    return message or FALLBACK_ERROR


class ProductFeed:
    """Loading state around a product fetcher.

    ``products`` stays empty until a fetch succeeds. A failed fetch leaves the
    previous products in place and records a readable ``error``; ``retry``
    re-runs the same fetcher.
    """

    def __init__(self, fetcher: Callable[[], Sequence[Product]]):
        self._fetcher = fetcher
        self.products: list[Product] = []
        self.loading = False
        self.error: Optional[str] = None
        self.loaded = False

    def load(self) -> bool:
        self.loading = True
        self.error = None
        try:
            self.products = list(self._fetcher())
            self.loaded = True
            logger.info("Loaded %d products", len(self.products))
            return True
        except Exception as exc:
            self.error = describe_failure(exc)
            logger.warning("Product fetch failed: %s", self.error)
            return False
        finally:
            self.loading = False

    def retry(self) -> bool:
        return self.load()

    def get_product(self, product_id: int) -> Optional[Product]:
        for product in self.products:
            if product.id == product_id:
                return product
        return None
