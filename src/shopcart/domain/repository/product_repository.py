"""Abstract repository for the product catalog.

Defined in the domain layer so the domain never depends on
infrastructure. The catalog is read-only from the cart's point of view.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from shopcart.domain.model.product import Product


class ProductRepository(ABC):

    @abstractmethod
    def get_by_id(self, product_id: str) -> Product | None:
        """Return a product by its ID, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[Product]:
        """Return every product in catalog order."""

    def list_by_category(self, category: str) -> list[Product]:
        """Return the products in *category* (case-insensitive)."""
        return [
            p for p in self.list_all() if p.category.lower() == category.lower()
        ]

    def categories(self) -> list[str]:
        """Distinct categories in the order they first appear."""
        seen: list[str] = []
        for p in self.list_all():
            if p.category and p.category not in seen:
                seen.append(p.category)
        return seen
