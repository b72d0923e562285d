"""JSON API exposing one shopper session to a browser front end.

- The product list, filters and pagination come from the catalogue view; the
  front end only renders what it receives.
- Cart and wishlist changes are written through to the durable store on every
  request, so a restarted API restores the same session.
- The product catalogue is fetched lazily on the first request that needs it;
  a failed fetch is reported in the payload and retried via
  ``POST /api/products/retry``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from flask import Flask, jsonify, request
from flask_cors import CORS
from pydantic import BaseModel, ValidationError

from catalogue import Storefront, load_catalogue_config
from catalogue.filters import SORT_LABELS, SortOption
from catalogue.format import format_price
from catalogue.logger import setup_logging

BASE_DIR = Path(__file__).resolve().parent

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------
CONFIG = load_catalogue_config(BASE_DIR)
setup_logging(CONFIG.log_level)

STOREFRONT = Storefront(CONFIG)

# ---------------------------------------------------------------------------
# Flask app
# ---------------------------------------------------------------------------
app = Flask(__name__)
CORS(app, resources={r"/api/*": {"origins": list(CONFIG.allowed_origins)}})


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------
class FilterUpdateModel(BaseModel):
    category: Optional[str] = None
    search: Optional[str] = None
    sort: Optional[SortOption] = None


class CartAddModel(BaseModel):
    product_id: int


class QuantityModel(BaseModel):
    quantity: int


class WishlistToggleModel(BaseModel):
    product_id: int


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def _price(value: float) -> str:
    return format_price(value, STOREFRONT.config.currency_symbol)


def _catalogue_payload() -> dict:
    view = STOREFRONT.view
    feed = STOREFRONT.feed
    return {
        "loading": feed.loading,
        "error": feed.error,
        "products": [STOREFRONT.product_card(p) for p in view.visible_products],
        "categories": view.categories,
        "filters": {
            "category": view.active_category,
            "search": view.search_query,
            "sort": view.sort_option.value,
        },
        "sort_options": [{"value": opt.value, "label": label} for opt, label in SORT_LABELS.items()],
        "total_count": view.total_count,
        "visible_count": view.visible_count,
        "has_more": view.has_more,
    }


def _cart_payload() -> dict:
    cart = STOREFRONT.cart
    lines = []
    for entry in cart.items:
        line_total = entry.product.price * entry.quantity
        lines.append(
            {
                "product": entry.product.model_dump(mode="json"),
                "quantity": entry.quantity,
                "unit_price_label": _price(entry.product.price),
                "line_total": line_total,
                "line_total_label": _price(line_total),
            }
        )
    return {
        "items": lines,
        "total_items": cart.total_items,
        "total_price": cart.total_price,
        "total_price_label": _price(cart.total_price),
    }


def _wishlist_payload() -> dict:
    wishlist = STOREFRONT.wishlist
    return {
        "items": [
            {"product": p.model_dump(mode="json"), "price_label": _price(p.price)}
            for p in wishlist.items
        ],
        "total_items": wishlist.total_items,
    }


def _require_product(product_id: int):
    STOREFRONT.ensure_loaded()
    return STOREFRONT.feed.get_product(product_id)


# ---------------------------------------------------------------------------
# Catalogue
# ---------------------------------------------------------------------------
@app.route("/api/products", methods=["GET"])
def get_products():
    STOREFRONT.ensure_loaded()
    return jsonify(_catalogue_payload())


@app.route("/api/products/retry", methods=["POST"])
def retry_products():
    STOREFRONT.retry()
    return jsonify(_catalogue_payload())


@app.route("/api/products/<int:product_id>", methods=["GET"])
def get_product(product_id: int):
    product = _require_product(product_id)
    if not product:
        return jsonify({"error": "Not found"}), 404
    return jsonify(STOREFRONT.product_card(product))


@app.route("/api/filters", methods=["POST"])
def update_filters():
    try:
        payload = request.get_json(force=True) or {}
        update = FilterUpdateModel(**payload)
    except ValidationError as err:
        return jsonify({"error": err.errors(include_url=False)}), 400
    view = STOREFRONT.view
    if update.category is not None:
        view.set_category(update.category)
    if update.search is not None:
        view.set_search_query(update.search)
    if update.sort is not None:
        view.set_sort_option(update.sort)
    return jsonify(_catalogue_payload())


@app.route("/api/filters/reset", methods=["POST"])
def reset_filters():
    STOREFRONT.view.reset_filters()
    return jsonify(_catalogue_payload())


@app.route("/api/filters/more", methods=["POST"])
def load_more():
    STOREFRONT.view.load_more()
    return jsonify(_catalogue_payload())


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
@app.route("/api/cart", methods=["GET"])
def get_cart():
    return jsonify(_cart_payload())


@app.route("/api/cart/items", methods=["POST"])
def cart_add():
    try:
        payload = request.get_json(force=True) or {}
        body = CartAddModel(**payload)
    except ValidationError as err:
        return jsonify({"error": err.errors(include_url=False)}), 400
    product = _require_product(body.product_id)
    if not product:
        return jsonify({"error": "Not found"}), 404
    STOREFRONT.cart.add_item(product)
    return jsonify(_cart_payload()), 201


@app.route("/api/cart/items/<int:product_id>", methods=["PATCH"])
def cart_update(product_id: int):
    try:
        payload = request.get_json(force=True) or {}
        body = QuantityModel(**payload)
    except ValidationError as err:
        return jsonify({"error": err.errors(include_url=False)}), 400
    STOREFRONT.cart.update_quantity(product_id, body.quantity)
    return jsonify(_cart_payload())


@app.route("/api/cart/items/<int:product_id>", methods=["DELETE"])
def cart_remove(product_id: int):
    STOREFRONT.cart.remove_item(product_id)
    return jsonify(_cart_payload())


@app.route("/api/cart", methods=["DELETE"])
def cart_clear():
    STOREFRONT.cart.clear_cart()
    return jsonify(_cart_payload())


# ---------------------------------------------------------------------------
# Wishlist
# ---------------------------------------------------------------------------
@app.route("/api/wishlist", methods=["GET"])
def get_wishlist():
    return jsonify(_wishlist_payload())


@app.route("/api/wishlist/toggle", methods=["POST"])
def wishlist_toggle():
    try:
        payload = request.get_json(force=True) or {}
        body = WishlistToggleModel(**payload)
    except ValidationError as err:
        return jsonify({"error": err.errors(include_url=False)}), 400
    product = _require_product(body.product_id)
    if not product:
        return jsonify({"error": "Not found"}), 404
    added = STOREFRONT.wishlist.toggle_wishlist_item(product)
    return jsonify({"in_wishlist": added, **_wishlist_payload()})


@app.route("/api/wishlist/items/<int:product_id>", methods=["DELETE"])
def wishlist_remove(product_id: int):
    STOREFRONT.wishlist.remove_wishlist_item(product_id)
    return jsonify(_wishlist_payload())


@app.route("/api/wishlist", methods=["DELETE"])
def wishlist_clear():
    STOREFRONT.wishlist.clear_wishlist()
    return jsonify(_wishlist_payload())


if __name__ == "__main__":  # pragma: no cover - manual entry point
    app.run(host="127.0.0.1", port=7890)
