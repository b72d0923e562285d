"""Configuration for the catalogue engines and the storefront API.

Values come from an env mapping (``os.environ`` by default) after loading an
optional ``.env`` file from the base directory, so installers and tests can
prime settings without touching engine internals.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Mapping
import os

from dotenv import load_dotenv

from .filters import DEFAULT_PAGE_SIZE
from .format import DEFAULT_CURRENCY_SYMBOL, TOP_RATED_THRESHOLD
from .source import DEFAULT_PRODUCTS_URL
from .storage import DEFAULT_NAMESPACE


@dataclass(frozen=True)
class CatalogueConfig:
    """Strongly typed settings shared by the engines and the API."""

    base_dir: Path
    storage_path: Path
    namespace: str = DEFAULT_NAMESPACE
    storage_secret: str = ""
    storage_backups: int = 2
    page_size: int = DEFAULT_PAGE_SIZE
    top_rated_threshold: float = TOP_RATED_THRESHOLD
    products_url: str = DEFAULT_PRODUCTS_URL
    request_timeout: float = 10.0
    currency_symbol: str = DEFAULT_CURRENCY_SYMBOL
    allowed_origins: tuple[str, ...] = ("http://localhost",)
    log_level: str = "INFO"

    @property
    def encrypted(self) -> bool:
        return bool(self.storage_secret)


def _coerce_origins(raw: str | Iterable[str]) -> tuple[str, ...]:
    if isinstance(raw, str):
        items = [piece.strip() for piece in raw.split(",")]
    else:
        items = [piece.strip() for piece in raw]
    return tuple(filter(None, items)) or (
        "http://localhost",
        "http://127.0.0.1",
    )


def _int(raw: str | None, default: int, minimum: int = 0) -> int:
    try:
        value = int(raw) if raw is not None else default
    except ValueError:
        return default
    return max(minimum, value)


def _float(raw: str | None, default: float) -> float:
    try:
        return float(raw) if raw is not None else default
    except ValueError:
        return default


def load_catalogue_config(base_dir: Path, env: Mapping[str, str] | None = None) -> CatalogueConfig:
    """Load catalogue configuration from the given base directory and env mapping."""

    base_dir = Path(base_dir)
    load_dotenv(base_dir / ".env")
    env_map = dict(env if env is not None else os.environ)

    storage_path = env_map.get("CATALOGUE_STORAGE_PATH", "").strip()

    return CatalogueConfig(
        base_dir=base_dir,
        storage_path=Path(storage_path) if storage_path else base_dir / "data" / "storage.json",
        namespace=env_map.get("CATALOGUE_NAMESPACE", "").strip() or DEFAULT_NAMESPACE,
        storage_secret=env_map.get("CATALOGUE_STORAGE_SECRET", ""),
        storage_backups=_int(env_map.get("CATALOGUE_STORAGE_BACKUPS"), 2),
        page_size=_int(env_map.get("CATALOGUE_PAGE_SIZE"), DEFAULT_PAGE_SIZE, minimum=1),
        top_rated_threshold=_float(env_map.get("CATALOGUE_TOP_RATED_THRESHOLD"), TOP_RATED_THRESHOLD),
        products_url=env_map.get("CATALOGUE_PRODUCTS_URL", DEFAULT_PRODUCTS_URL).strip(),
        request_timeout=_float(env_map.get("CATALOGUE_REQUEST_TIMEOUT"), 10.0),
        currency_symbol=env_map.get("CATALOGUE_CURRENCY_SYMBOL", DEFAULT_CURRENCY_SYMBOL),
        allowed_origins=_coerce_origins(
            env_map.get("ALLOWED_ORIGINS", "http://localhost,http://127.0.0.1")
        ),
        log_level=env_map.get("LOG_LEVEL", "INFO").upper(),
    )
