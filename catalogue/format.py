"""Display helpers shared by product cards, cart lines and the wishlist."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from .models import Product

DEFAULT_CURRENCY_SYMBOL = "£"
TOP_RATED_THRESHOLD = 4.5


def format_price(value: float, symbol: str = DEFAULT_CURRENCY_SYMBOL) -> str:
    amount = Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return f"{symbol}{amount:,.2f}"


def truncate_text(text: str, max_length: int) -> str:
    if len(text) <= max_length:
        return text
    return text[:max_length].rstrip() + "…"


def is_top_rated(product: Product, threshold: float = TOP_RATED_THRESHOLD) -> bool:
    return product.rating.rate >= threshold
