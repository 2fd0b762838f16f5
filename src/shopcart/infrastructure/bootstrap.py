"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

import os
from pathlib import Path

from shopcart.application.cart_manager import CartManager
from shopcart.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)
from shopcart.infrastructure.persistence.key_value_cart_repository import (
    KeyValueCartRepository,
)
from shopcart.infrastructure.persistence.key_value_store import FileKeyValueStore
from shopcart.infrastructure.scheduling import TimerScheduler

# Resolve data directory relative to the project root.
# When installed in editable mode the project root is the repo root.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"


def data_dir() -> Path:
    """Catalog and cart state live here; ``SHOPCART_DATA_DIR`` overrides it."""
    override = os.getenv("SHOPCART_DATA_DIR")
    return Path(override) if override else _DEFAULT_DATA_DIR


def product_repository() -> JsonProductRepository:
    return JsonProductRepository(data_dir() / "products.json")


def cart_repository() -> KeyValueCartRepository:
    return KeyValueCartRepository(FileKeyValueStore(data_dir() / "state"))


def cart_manager() -> CartManager:
    """Build the session's CartManager and restore the stored cart."""
    manager = CartManager(cart_repo=cart_repository(), scheduler=TimerScheduler())
    manager.restore()
    return manager
