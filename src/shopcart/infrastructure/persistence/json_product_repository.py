"""JSON-file-backed, read-only implementation of ProductRepository."""

from __future__ import annotations

import json
from pathlib import Path

from shopcart.domain.model.product import Product
from shopcart.domain.model.value_objects import Money
from shopcart.domain.repository.product_repository import ProductRepository


class JsonProductRepository(ProductRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path

    # --- ProductRepository interface ------------------------------------------

    def get_by_id(self, product_id: str) -> Product | None:
        for product in self._load():
            if product.id == product_id:
                return product
        return None

    def list_all(self) -> list[Product]:
        return self._load()

    # --- Serialization helpers ------------------------------------------------

    def _load(self) -> list[Product]:
        if not self._file_path.exists():
            return []
        raw = json.loads(self._file_path.read_text(encoding="utf-8"))
        return [
            Product(
                id=item["id"],
                name=item["name"],
                price=Money.of(item["price"]),
                image=item.get("image", ""),
                description=item.get("description", ""),
                category=item.get("category", ""),
            )
            for item in raw
        ]
