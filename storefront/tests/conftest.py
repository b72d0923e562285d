import pytest

from catalogue.config import load_catalogue_config
from catalogue.models import Product
from catalogue.session import Storefront
from catalogue.storage import open_store
from storefront import app as flask_app


PRODUCTS = [
    {
        "id": idx,
        "title": title,
        "price": price,
        "description": f"{title} description",
        "category": category,
        "image": f"https://example.com/{idx}.png",
        "rating": {"rate": rate, "count": 10 * idx},
    }
    for idx, (title, price, category, rate) in enumerate(
        [
            ("Desk Lamp", 39.5, "home", 4.6),
            ("Keyboard", 90.0, "electronics", 4.1),
            ("Travel Backpack", 65.0, "bags", 3.8),
            ("Monitor Arm", 120.0, "electronics", 4.9),
            ("Wool Blanket", 45.25, "home", 4.3),
            ("USB Hub", 19.99, "electronics", 3.5),
            ("Notebook", 4.5, "stationery", 4.0),
            ("Fountain Pen", 35.0, "stationery", 4.7),
            ("Headphones", 150.0, "electronics", 4.4),
            ("Tote Bag", 12.0, "bags", 3.9),
        ],
        start=1,
    )
]


@pytest.fixture
def fetch_state():
    return {"fail": False, "calls": 0}


@pytest.fixture(autouse=True)
def configure_test_env(tmp_path, monkeypatch, fetch_state):
    flask_app.app.config.update(TESTING=True)
    storage_file = tmp_path / "storage.json"
    config = load_catalogue_config(
        tmp_path,
        {"CATALOGUE_STORAGE_PATH": str(storage_file), "CATALOGUE_PAGE_SIZE": "4"},
    )

    def fetcher():
        fetch_state["calls"] += 1
        if fetch_state["fail"]:
            raise ConnectionError("Failed to fetch products: 502 Bad Gateway")
        return [Product.model_validate(raw) for raw in PRODUCTS]

    def build():
        return Storefront(config, store=open_store(storage_file, config.namespace), fetcher=fetcher)

    monkeypatch.setattr(flask_app, "STOREFRONT", build())
    yield build
